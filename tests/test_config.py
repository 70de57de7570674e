"""test suite for settings."""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from personas.config import COMMAND_TIMEOUT, KEYCHAIN_SERVICE, Settings


class TestSettings:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for var in [
            "PERSONAS_HOME",
            "PERSONAS_PROFILES_DIR",
            "PERSONAS_CONFIG_DIR",
            "PERSONAS_KEYCHAIN_SERVICE",
            "PERSONAS_KEYCHAIN_ACCOUNT",
            "PERSONAS_COMMAND_TIMEOUT",
        ]:
            monkeypatch.delenv(var, raising=False)

    def test_defaults_under_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PERSONAS_HOME", str(tmp_path))
        settings = Settings.from_env()

        assert settings.profiles_dir == tmp_path / ".claude-profiles"
        assert settings.config_dir == tmp_path / ".claude"
        assert settings.keychain_service == KEYCHAIN_SERVICE
        assert settings.command_timeout == COMMAND_TIMEOUT

    def test_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PERSONAS_PROFILES_DIR", str(tmp_path / "profiles"))
        monkeypatch.setenv("PERSONAS_CONFIG_DIR", str(tmp_path / "config"))
        monkeypatch.setenv("PERSONAS_KEYCHAIN_SERVICE", "Other-credentials")
        monkeypatch.setenv("PERSONAS_KEYCHAIN_ACCOUNT", "carol")
        monkeypatch.setenv("PERSONAS_COMMAND_TIMEOUT", "2.5")

        settings = Settings.from_env(home=tmp_path)

        assert settings.profiles_dir == tmp_path / "profiles"
        assert settings.config_dir == tmp_path / "config"
        assert settings.keychain_service == "Other-credentials"
        assert settings.keychain_account == "carol"
        assert settings.command_timeout == 2.5


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
