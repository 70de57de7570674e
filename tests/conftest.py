"""shared fixtures for personas tests."""
import sys
from pathlib import Path
from typing import Optional

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from personas.credentials.base import CredentialStore
from personas.profiles import ProfileManager


class InMemoryCredentialStore(CredentialStore):
    """credential store holding its secret in memory."""

    def __init__(
        self,
        secret: Optional[str] = None,
        available: bool = True,
        get_error: Optional[Exception] = None,
    ):
        self.secret = secret
        self._available = available
        self.get_error = get_error

    def available(self) -> bool:
        return self._available

    def get(self) -> Optional[str]:
        if self.get_error is not None:
            raise self.get_error
        return self.secret

    def set(self, secret: str) -> None:
        self.secret = secret

    def delete(self) -> None:
        self.secret = None


@pytest.fixture
def home(tmp_path):
    """a fake home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def profiles_dir(home):
    return home / ".claude-profiles"


@pytest.fixture
def config_dir(home):
    return home / ".claude"


@pytest.fixture
def credentials():
    return InMemoryCredentialStore()


@pytest.fixture
def manager(profiles_dir, config_dir, credentials):
    return ProfileManager(profiles_dir, config_dir, credentials)
