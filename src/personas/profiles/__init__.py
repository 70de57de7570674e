"""profile management for the wrapped tool's configuration directory."""
from .manager import ProfileManager
from .store import ProfileStore, validate_name
from .link import ActiveConfigLink
from .models import (
    AuthInfo,
    LinkState,
    MigrationOutcome,
    ProfileInfo,
    ProfileMetadata,
    ProfileStatus,
)

__all__ = [
    "ProfileManager",
    "ProfileStore",
    "ActiveConfigLink",
    "validate_name",
    "AuthInfo",
    "LinkState",
    "MigrationOutcome",
    "ProfileInfo",
    "ProfileMetadata",
    "ProfileStatus",
]
