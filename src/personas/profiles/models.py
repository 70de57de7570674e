"""data models for profile management."""
import json
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field

UNKNOWN = "unknown"


class ProfileMetadata(BaseModel):
    """contents of a profile's metadata file."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    created_at: str = Field(alias="createdAt")  # ISO format datetime
    last_used_at: str = Field(alias="lastUsedAt")  # ISO format datetime

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)


class AuthInfo(BaseModel):
    """authentication state derived from a credential blob."""
    authenticated: bool = False
    subscription_type: Optional[str] = None
    expires_at: Optional[int] = None

    @classmethod
    def from_blob(cls, blob: Optional[str]) -> "AuthInfo":
        """
        project a credential blob onto an AuthInfo.

        a present but malformed blob still counts as authenticated; only
        the subscription details are lost.
        """
        if not blob:
            return cls(authenticated=False)

        try:
            creds: Any = json.loads(blob)
        except ValueError:
            return cls(authenticated=True)

        if not isinstance(creds, dict):
            return cls(authenticated=True)

        # the wrapped tool nests its OAuth state under claudeAiOauth
        oauth = creds.get("claudeAiOauth")
        source = oauth if isinstance(oauth, dict) else creds

        subscription = source.get("subscriptionType")
        if not isinstance(subscription, str) or not subscription:
            subscription = None

        expires = source.get("expiresAt")
        if isinstance(expires, bool) or not isinstance(expires, int) or not expires:
            expires = None

        return cls(authenticated=True, subscription_type=subscription, expires_at=expires)


class ProfileInfo(BaseModel):
    """a profile as reported by list."""
    name: str
    created_at: str = UNKNOWN
    last_used_at: str = UNKNOWN
    path: str
    active: bool = False
    auth: AuthInfo = Field(default_factory=AuthInfo)


class LinkState(str, Enum):
    """what currently sits at the config directory path."""
    ABSENT = "absent"
    LINKED = "linked"  # symlink into the profiles directory
    FOREIGN_LINK = "foreign_link"  # symlink pointing somewhere else
    UNMANAGED = "unmanaged"  # a real directory or file


class MigrationOutcome(str, Enum):
    NOT_NEEDED = "not_needed"
    MIGRATED = "migrated"
    SKIPPED = "skipped"  # unmanaged config dir, but a default profile already exists


class ProfileStatus(BaseModel):
    """overall state of profile management."""
    active_profile: Optional[str] = None
    profiles_dir: str
    config_dir: str
    is_symlink: bool
    link_state: LinkState
    migration_blocked: bool = False
    total_profiles: int
    auth: AuthInfo
