"""Application and data directory resolution for frozen and source modes."""

import os
import sys
from pathlib import Path


def is_frozen() -> bool:
    """Check if running as a PyInstaller frozen executable."""
    return getattr(sys, "frozen", False)


def get_app_dir() -> Path:
    """
    Get the application directory.

    In frozen mode: directory containing the exe
    In source mode: project root (contains src/, pyproject.toml)
    """
    if is_frozen():
        return Path(sys.executable).parent
    # Source: this file is at src/kolviz/config/paths.py
    return Path(__file__).resolve().parents[3]


def resolve_data_dir(portable: bool = False) -> Path:
    """
    Resolve the data directory for the application log and user files.

    Uses %LOCALAPPDATA%/KolViz on Windows and ~/.kolviz elsewhere.

    Args:
        portable: If True, use ./data beside the executable
    """
    if portable or is_frozen():
        return get_app_dir() / "data"
    local_app_data = os.environ.get("LOCALAPPDATA", "")
    if local_app_data:
        return Path(local_app_data) / "KolViz"
    return Path.home() / ".kolviz"


def get_data_dir(portable: bool = False) -> Path:
    """Get the data directory, creating it if needed."""
    data_dir = resolve_data_dir(portable)
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir
