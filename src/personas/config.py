import getpass
import os
from pathlib import Path
from typing import Optional
from pydantic import BaseModel

PROFILES_DIR_NAME = ".claude-profiles"
CONFIG_DIR_NAME = ".claude"
METADATA_FILE = ".profile-metadata.json"
CREDENTIALS_FILE = ".credentials.json"
DEFAULT_PROFILE_NAME = "default"

VERSION = "1.0.0"

KEYCHAIN_SERVICE = "Claude Code-credentials"
COMMAND_TIMEOUT = 10.0


def get_home() -> Path:
    """home directory, honouring PERSONAS_HOME for sandboxed runs."""
    override = os.environ.get("PERSONAS_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home()


def _default_account() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        # no passwd entry and no LOGNAME/USER in the environment
        return os.environ.get("USER", "")


class Settings(BaseModel):
    """resolved paths and keychain parameters."""
    profiles_dir: Path
    config_dir: Path
    keychain_service: str = KEYCHAIN_SERVICE
    keychain_account: str = ""
    command_timeout: float = COMMAND_TIMEOUT

    @classmethod
    def from_env(cls, home: Optional[Path] = None) -> "Settings":
        """build settings from the environment, falling back to home-relative defaults."""
        home = home or get_home()
        env = os.environ

        profiles_dir = env.get("PERSONAS_PROFILES_DIR")
        config_dir = env.get("PERSONAS_CONFIG_DIR")
        timeout = env.get("PERSONAS_COMMAND_TIMEOUT")

        return cls(
            profiles_dir=Path(profiles_dir).expanduser() if profiles_dir else home / PROFILES_DIR_NAME,
            config_dir=Path(config_dir).expanduser() if config_dir else home / CONFIG_DIR_NAME,
            keychain_service=env.get("PERSONAS_KEYCHAIN_SERVICE", KEYCHAIN_SERVICE),
            keychain_account=env.get("PERSONAS_KEYCHAIN_ACCOUNT") or _default_account(),
            command_timeout=float(timeout) if timeout else COMMAND_TIMEOUT,
        )
