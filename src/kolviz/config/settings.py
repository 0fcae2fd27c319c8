"""Configuration and settings management."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from kolviz.config.paths import resolve_data_dir

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


@dataclass
class Settings:
    """Application and parsing settings."""

    # Session log or pre-parsed log to read
    log_path: Optional[Path] = None

    # Read the log as a pre-parsed turn rundown instead of a raw session log
    preparsed: bool = False

    # Collect "> Note:", "> Header:" and "> Footer:" comments
    include_notes: bool = True

    # Keep parsing past the end of the run (final boss, Community Service, ...)
    old_ascension_counting: bool = False

    # Directory for the application log
    data_dir: Path = field(default_factory=resolve_data_dir)

    # Use portable mode (data beside the app)
    portable: bool = False

    # API server binding for ``serve``
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        """Apply portable mode if enabled."""
        if self.portable:
            self.data_dir = resolve_data_dir(portable=True)

    @classmethod
    def from_args(
        cls,
        log_path: Optional[str] = None,
        preparsed: bool = False,
        include_notes: bool = True,
        old_ascension_counting: bool = False,
        portable: bool = False,
        host: Optional[str] = None,
        port: Optional[int] = None,
    ) -> "Settings":
        """
        Create settings from CLI arguments.

        Args:
            log_path: Log file to parse
            preparsed: Treat the file as a pre-parsed rundown
            include_notes: Collect note, header and footer comments
            old_ascension_counting: Do not stop at the end of the run
            portable: Use portable mode
            host: API host override
            port: API port override
        """
        return cls(
            log_path=Path(log_path) if log_path else None,
            preparsed=preparsed,
            include_notes=include_notes,
            old_ascension_counting=old_ascension_counting,
            portable=portable,
            host=host or DEFAULT_HOST,
            port=port or DEFAULT_PORT,
        )

    def validate(self) -> list[str]:
        """
        Validate settings.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if self.log_path is None:
            errors.append("No log file given")
        elif not self.log_path.exists():
            errors.append(f"Log file not found: {self.log_path}")
        elif not self.log_path.is_file():
            errors.append(f"Log path is not a file: {self.log_path}")

        if not 0 < self.port < 65536:
            errors.append(f"Invalid port: {self.port}")

        return errors
