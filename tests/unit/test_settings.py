"""Tests for settings and data directory resolution."""

from kolviz.config.paths import get_app_dir, get_data_dir, resolve_data_dir
from kolviz.config.settings import Settings


class TestDataDir:
    """Tests for where the application log is kept."""

    def test_local_app_data(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))

        assert resolve_data_dir() == tmp_path / "KolViz"
        assert not (tmp_path / "KolViz").exists()

    def test_home_without_local_app_data(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LOCALAPPDATA", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert resolve_data_dir() == tmp_path / ".kolviz"

    def test_portable(self):
        assert resolve_data_dir(portable=True) == get_app_dir() / "data"

    def test_get_data_dir_creates_directory(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))

        data_dir = get_data_dir()
        assert data_dir == tmp_path / "KolViz"
        assert data_dir.is_dir()

    def test_settings_use_the_same_directory(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))

        assert Settings().data_dir == get_data_dir()
        assert Settings(portable=True).data_dir == resolve_data_dir(portable=True)
