"""credential store interface."""
from abc import ABC, abstractmethod
from typing import Optional

from ..domain.errors import StoreUnavailableError


class CredentialStore(ABC):
    """
    a single mutable slot holding the wrapped tool's secret blob.

    get/set/delete raise only on genuine I/O or process failure; a missing
    secret is not an error.
    """

    @abstractmethod
    def available(self) -> bool:
        """whether this store can be used on the current platform (no I/O)."""

    @abstractmethod
    def get(self) -> Optional[str]:
        """return the stored secret, or None if nothing is stored."""

    @abstractmethod
    def set(self, secret: str) -> None:
        """overwrite the stored secret."""

    @abstractmethod
    def delete(self) -> None:
        """remove the stored secret if present."""


class NullCredentialStore(CredentialStore):
    """store used on platforms without a supported secret vault."""

    def available(self) -> bool:
        return False

    def get(self) -> Optional[str]:
        return None

    def set(self, secret: str) -> None:
        raise StoreUnavailableError("No credential store is available on this platform.")

    def delete(self) -> None:
        pass
