import json
import logging
import re
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from ..config import CREDENTIALS_FILE, METADATA_FILE
from ..domain.errors import AlreadyExistsError, InvalidNameError, NotFoundError
from ..utils import fs
from ..utils.dates import utc_now_iso
from .models import ProfileInfo, ProfileMetadata, UNKNOWN

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
MAX_NAME_LENGTH = 64


def validate_name(name: str) -> None:
    """
    raises:
        InvalidNameError: if name is empty, too long, or has other characters
    """
    if not name or not NAME_PATTERN.match(name):
        raise InvalidNameError(name, "Use only letters, numbers, hyphens, and underscores.")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidNameError(name, f"Profile names must be {MAX_NAME_LENGTH} characters or fewer.")


class ProfileStore:
    """handles profile directories, their metadata and cached credentials."""

    def __init__(self, profiles_dir: Path):
        self.profiles_dir = profiles_dir

    def init(self) -> None:
        fs.ensure_directory(self.profiles_dir)

    def profile_path(self, name: str) -> Path:
        return self.profiles_dir / name

    def metadata_path(self, name: str) -> Path:
        return self.profile_path(name) / METADATA_FILE

    def credentials_path(self, name: str) -> Path:
        return self.profile_path(name) / CREDENTIALS_FILE

    def exists(self, name: str) -> bool:
        return fs.directory_exists(self.profile_path(name))

    def names(self) -> List[str]:
        return fs.list_subdirectories(self.profiles_dir)

    # metadata

    def read_metadata(self, name: str) -> Optional[ProfileMetadata]:
        """load metadata, or None if it is missing or malformed."""
        data = fs.read_json_file(self.metadata_path(name))
        if not isinstance(data, dict):
            return None
        try:
            return ProfileMetadata.model_validate(data)
        except ValidationError as e:
            logger.debug(f"ignoring malformed metadata for '{name}': {e}")
            return None

    def write_metadata(self, metadata: ProfileMetadata) -> None:
        fs.write_json_file(self.metadata_path(metadata.name), metadata.to_json())

    def write_fresh_metadata(self, name: str) -> ProfileMetadata:
        now = utc_now_iso()
        metadata = ProfileMetadata(name=name, created_at=now, last_used_at=now)
        self.write_metadata(metadata)
        return metadata

    def update_last_used(self, name: str) -> None:
        """update last_used timestamp; profiles without metadata are left alone."""
        metadata = self.read_metadata(name)
        if metadata is None:
            return
        metadata.last_used_at = utc_now_iso()
        self.write_metadata(metadata)

    # profile lifecycle

    def create(self, name: str) -> ProfileMetadata:
        """
        create a profile directory with fresh metadata.

        raises:
            InvalidNameError: if name is invalid
            AlreadyExistsError: if the profile directory exists
        """
        validate_name(name)
        if self.exists(name):
            raise AlreadyExistsError(name)

        fs.ensure_directory(self.profile_path(name))
        metadata = self.write_fresh_metadata(name)
        logger.info(f"created profile '{name}'")
        return metadata

    def adopt(self, source: Path, name: str) -> ProfileMetadata:
        """move an existing directory into the store as profile `name`."""
        target = self.profile_path(name)
        source.rename(target)
        fs.ensure_directory(target)
        metadata = self.write_fresh_metadata(name)
        logger.info(f"moved {source} into profile '{name}'")
        return metadata

    def delete(self, name: str) -> None:
        """
        raises:
            NotFoundError: if the profile does not exist
        """
        validate_name(name)
        if not self.exists(name):
            raise NotFoundError(name)
        fs.remove_directory(self.profile_path(name))
        logger.info(f"deleted profile '{name}'")

    def list(self, active: Optional[str] = None) -> List[ProfileInfo]:
        """list profiles, active first, then by name."""
        profiles = []
        for dir_name in self.names():
            metadata = self.read_metadata(dir_name)
            profiles.append(ProfileInfo(
                name=metadata.name if metadata else dir_name,
                created_at=metadata.created_at if metadata else UNKNOWN,
                last_used_at=metadata.last_used_at if metadata else UNKNOWN,
                path=str(self.profile_path(dir_name)),
                active=dir_name == active,
            ))

        profiles.sort(key=lambda p: (not p.active, p.name))
        return profiles

    # cached credentials

    def read_cached_credential(self, name: str) -> Optional[str]:
        blob = fs.read_json_file(self.credentials_path(name))
        if blob is None:
            return None
        if not isinstance(blob, str):
            return json.dumps(blob)
        return blob or None

    def write_cached_credential(self, name: str, secret: str) -> None:
        fs.write_json_file(self.credentials_path(name), secret)

    def delete_cached_credential(self, name: str) -> None:
        self.credentials_path(name).unlink(missing_ok=True)
