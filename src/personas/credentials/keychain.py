"""macOS login keychain access through the `security` command line tool."""
import logging
import subprocess
import sys
from typing import List, Optional

from ..config import Settings
from ..domain.errors import IOFailureError, StoreUnavailableError
from .base import CredentialStore, NullCredentialStore

logger = logging.getLogger(__name__)

SECURITY_BIN = "security"

# errSecItemNotFound, as reported by `security` in its exit status
ITEM_NOT_FOUND = 44


class KeychainCredentialStore(CredentialStore):
    """stores the secret as a generic password keyed by service and account."""

    def __init__(self, service: str, account: str, timeout: float = 10.0):
        self.service = service
        self.account = account
        self.timeout = timeout

    def available(self) -> bool:
        return sys.platform == "darwin"

    def _run(self, args: List[str]) -> subprocess.CompletedProcess:
        if not self.available():
            raise StoreUnavailableError("Keychain is only available on macOS.")

        try:
            return subprocess.run(
                [SECURITY_BIN, *args],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise StoreUnavailableError(
                f"Keychain did not respond within {self.timeout:g}s"
            ) from e
        except FileNotFoundError as e:
            raise StoreUnavailableError(f"'{SECURITY_BIN}' command not found") from e
        except OSError as e:
            raise IOFailureError(f"failed to run '{SECURITY_BIN}': {e}") from e

    def _check(self, result: subprocess.CompletedProcess, action: str) -> None:
        if result.returncode != 0:
            detail = (result.stderr or "").strip() or f"exit status {result.returncode}"
            raise IOFailureError(f"Keychain {action} failed: {detail}")

    def get(self) -> Optional[str]:
        result = self._run([
            "find-generic-password",
            "-s", self.service,
            "-a", self.account,
            "-w",
        ])
        if result.returncode == ITEM_NOT_FOUND:
            return None
        self._check(result, "read")

        secret = result.stdout.strip()
        return secret or None

    def set(self, secret: str) -> None:
        # delete first; add-generic-password cannot always update in place
        self.delete()
        result = self._run([
            "add-generic-password",
            "-s", self.service,
            "-a", self.account,
            "-w", secret,
            "-U",
        ])
        self._check(result, "write")
        logger.debug(f"wrote keychain item '{self.service}'")

    def delete(self) -> None:
        result = self._run([
            "delete-generic-password",
            "-s", self.service,
            "-a", self.account,
        ])
        if result.returncode == ITEM_NOT_FOUND:
            return
        self._check(result, "delete")
        logger.debug(f"deleted keychain item '{self.service}'")


def default_credential_store(settings: Settings) -> CredentialStore:
    """keychain on macOS, a null store everywhere else."""
    store = KeychainCredentialStore(
        settings.keychain_service,
        settings.keychain_account,
        timeout=settings.command_timeout,
    )
    if store.available():
        return store
    logger.debug("no supported credential store on this platform")
    return NullCredentialStore()
