import logging
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional

from ..config import DEFAULT_PROFILE_NAME, Settings
from ..credentials.base import CredentialStore
from ..credentials.keychain import default_credential_store
from ..domain.errors import (
    ActiveProfileProtectedError,
    AlreadyExistsError,
    IOFailureError,
    NotFoundError,
    StoreUnavailableError,
    UnmanagedConfigError,
)
from .link import ActiveConfigLink
from .models import (
    AuthInfo,
    LinkState,
    MigrationOutcome,
    ProfileInfo,
    ProfileMetadata,
    ProfileStatus,
)
from .store import ProfileStore, validate_name

logger = logging.getLogger(__name__)


@contextmanager
def _io_failure(action: str):
    """translate OSErrors raised while `action` runs into IOFailureError."""
    try:
        yield
    except OSError as e:
        raise IOFailureError(f"Failed to {action}: {e}") from e


class ProfileManager:
    """
    manages profiles for the wrapped tool.

    the active profile is whichever directory config_dir links to; the
    tool's secret lives in a single credential store slot and is parked in
    each profile's cached credential file while that profile is inactive.
    """

    def __init__(
        self,
        profiles_dir: Path,
        config_dir: Path,
        credentials: CredentialStore,
    ):
        self.profiles_dir = profiles_dir
        self.config_dir = config_dir
        self.credentials = credentials
        self.store = ProfileStore(profiles_dir)
        self.link = ActiveConfigLink(config_dir, profiles_dir)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProfileManager":
        return cls(
            settings.profiles_dir,
            settings.config_dir,
            default_credential_store(settings),
        )

    def init(self) -> None:
        self.store.init()

    # credential helpers

    def save_credentials(self, name: str) -> None:
        """copy the live secret into `name`'s cached credential file."""
        if not self.credentials.available():
            return

        secret = self.credentials.get()
        if not secret:
            return
        if not self.store.exists(name):
            logger.warning(f"active profile '{name}' has no directory; live credentials not saved")
            return
        self.store.write_cached_credential(name, secret)
        logger.debug(f"saved live credentials into profile '{name}'")

    def restore_credentials(self, name: str) -> None:
        """load `name`'s cached secret into the live store, or clear it."""
        if not self.credentials.available():
            return

        saved = self.store.read_cached_credential(name)
        if saved:
            self.credentials.set(saved)
            logger.debug(f"restored cached credentials for '{name}'")
        else:
            self.credentials.delete()
            logger.debug(f"profile '{name}' has no cached credentials; live store cleared")

    def get_auth_info(self, name: Optional[str] = None) -> AuthInfo:
        """
        auth state of a profile.

        args:
            name: read this profile's cached credentials; None reads the live store
        """
        if not self.credentials.available():
            return AuthInfo(authenticated=False)

        if name:
            blob = self.store.read_cached_credential(name)
        else:
            try:
                blob = self.credentials.get()
            except (StoreUnavailableError, IOFailureError) as e:
                logger.debug(f"could not read live credentials: {e}")
                return AuthInfo(authenticated=False)
        return AuthInfo.from_blob(blob)

    # migration

    def _migration_pending(self) -> bool:
        return self.link.is_unmanaged() and not self.store.exists(DEFAULT_PROFILE_NAME)

    def migrate_if_needed(self) -> MigrationOutcome:
        """
        move a pre-existing real config directory into the `default` profile.

        if `default` already exists the unmanaged directory is left alone and
        SKIPPED is returned; switching stays blocked until the operator
        resolves it.
        """
        if not self.link.is_unmanaged():
            return MigrationOutcome.NOT_NEEDED

        if self.store.exists(DEFAULT_PROFILE_NAME):
            logger.warning(
                f"{self.config_dir} is not managed but a '{DEFAULT_PROFILE_NAME}' profile "
                "already exists; leaving it in place"
            )
            return MigrationOutcome.SKIPPED

        with _io_failure(f"migrate {self.config_dir}"):
            self.store.adopt(self.config_dir, DEFAULT_PROFILE_NAME)
            self.link.swap(self.store.profile_path(DEFAULT_PROFILE_NAME))

        logger.info(f"migrated {self.config_dir} into profile '{DEFAULT_PROFILE_NAME}'")
        return MigrationOutcome.MIGRATED

    # commands

    def create(self, name: str) -> ProfileMetadata:
        """
        create a new, empty profile.

        raises:
            InvalidNameError: if name is invalid
            AlreadyExistsError: if the profile exists
            UnmanagedConfigError: if config_dir is a real directory that could not be migrated
        """
        validate_name(name)
        with _io_failure(f"create profile '{name}'"):
            self.init()

            # `default` may only come into existence through migration
            if name == DEFAULT_PROFILE_NAME and self._migration_pending():
                self.migrate_if_needed()
                return self.store.read_metadata(name) or self.store.write_fresh_metadata(name)

            if self.store.exists(name):
                raise AlreadyExistsError(name)

            self.migrate_if_needed()
            if self.link.is_unmanaged():
                raise UnmanagedConfigError(self.config_dir)
            return self.store.create(name)

    def list(self) -> List[ProfileInfo]:
        """list all profiles, active first."""
        with _io_failure("list profiles"):
            self.init()
            active = self.link.resolve()
            profiles = self.store.list(active)

        for profile in profiles:
            profile.auth = self.get_auth_info(None if profile.active else profile.name)
        return profiles

    def get_active_profile(self) -> Optional[str]:
        return self.link.resolve()

    def switch(self, name: str) -> None:
        """
        make `name` the active profile.

        the outgoing profile's live secret is cached before the link moves,
        and the incoming profile's cached secret (or nothing) is loaded after.

        raises:
            InvalidNameError: if name is invalid
            NotFoundError: if the profile does not exist
            UnmanagedConfigError: if config_dir is a real directory
        """
        validate_name(name)

        with _io_failure(f"switch to profile '{name}'"):
            self.init()

            # `default` may only come into existence through migration
            if not self.store.exists(name) and not (
                name == DEFAULT_PROFILE_NAME and self._migration_pending()
            ):
                raise NotFoundError(name, f"Create it first with: create {name}")

            self.migrate_if_needed()

            if self.link.is_unmanaged():
                raise UnmanagedConfigError(self.config_dir)

            current = self.link.resolve()
            if current:
                self.save_credentials(current)

            self.link.swap(self.store.profile_path(name))
            self.restore_credentials(name)
            self.store.update_last_used(name)

        logger.info(f"switched from '{current}' to '{name}'")

    def delete(self, name: str) -> None:
        """
        raises:
            NotFoundError: if the profile does not exist
            ActiveProfileProtectedError: if the profile is active
        """
        validate_name(name)

        with _io_failure(f"delete profile '{name}'"):
            if not self.store.exists(name):
                raise NotFoundError(name)
            if name == self.link.resolve():
                raise ActiveProfileProtectedError(name)
            self.store.delete(name)

    def status(self) -> ProfileStatus:
        with _io_failure("read profile status"):
            self.init()
            state = self.link.state()
            total = len(self.store.names())
            blocked = self.link.is_unmanaged() and self.store.exists(DEFAULT_PROFILE_NAME)

        return ProfileStatus(
            active_profile=self.link.resolve(),
            profiles_dir=str(self.profiles_dir),
            config_dir=str(self.config_dir),
            is_symlink=state in (LinkState.LINKED, LinkState.FOREIGN_LINK),
            link_state=state,
            migration_blocked=blocked,
            total_profiles=total,
            auth=self.get_auth_info(),
        )

    def login(self, name: str = DEFAULT_PROFILE_NAME) -> None:
        """
        switch into `name` (creating it if needed) with an empty credential
        store, so the next run of the wrapped tool starts a fresh login.
        """
        validate_name(name)

        with _io_failure(f"log in to profile '{name}'"):
            self.init()
            self.migrate_if_needed()
            if not self.store.exists(name):
                self.create(name)

        self.switch(name)

        if self.credentials.available():
            try:
                self.credentials.delete()
            except (StoreUnavailableError, IOFailureError) as e:
                logger.warning(f"switched to '{name}' but the previous session is still stored")
                raise type(e)(
                    f"Switched to profile '{name}', but its credentials could not be cleared "
                    f"and the previous session is still active: {e}"
                ) from e

    def logout(self) -> None:
        """
        clear the live credentials and the active profile's cached copy.

        raises:
            StoreUnavailableError: if there is no credential store
        """
        if not self.credentials.available():
            raise StoreUnavailableError("Logout needs a credential store, which is only available on macOS.")

        self.credentials.delete()

        current = self.link.resolve()
        if current:
            with _io_failure(f"clear cached credentials for '{current}'"):
                self.store.delete_cached_credential(current)
