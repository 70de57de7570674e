"""the symlink that makes one profile live."""
import logging
import os
from pathlib import Path
from typing import Optional

from ..utils import fs
from .models import LinkState

logger = logging.getLogger(__name__)


def _normalize(path) -> str:
    return os.path.normpath(os.path.abspath(path))


class ActiveConfigLink:
    """
    the config directory path and the profiles directory it may point into.

    a profile is active when config_dir is a symlink whose target's parent is
    profiles_dir. the link is only ever changed by swap(), which renames a new
    link over the old one.
    """

    def __init__(self, config_dir: Path, profiles_dir: Path):
        self.config_dir = config_dir
        self.profiles_dir = profiles_dir

    def target(self) -> Optional[Path]:
        """absolute (lexically resolved) link target, or None if not a symlink."""
        raw = fs.read_symlink_target(self.config_dir)
        if raw is None:
            return None
        return Path(_normalize(os.path.join(self.config_dir.parent, raw)))

    def resolve(self) -> Optional[str]:
        """name of the active profile, or None. never raises."""
        try:
            target = self.target()
            if target is None:
                return None
            if _normalize(target.parent) != _normalize(self.profiles_dir):
                return None
            return target.name or None
        except (OSError, ValueError) as e:
            logger.debug(f"could not resolve {self.config_dir}: {e}")
            return None

    def state(self) -> LinkState:
        if fs.is_symlink(self.config_dir):
            return LinkState.LINKED if self.resolve() else LinkState.FOREIGN_LINK
        if fs.path_exists(self.config_dir):
            return LinkState.UNMANAGED
        return LinkState.ABSENT

    def is_unmanaged(self) -> bool:
        """true when something other than a symlink sits at config_dir."""
        return self.state() == LinkState.UNMANAGED

    def swap(self, profile_dir: Path) -> None:
        """atomically point config_dir at profile_dir."""
        fs.replace_symlink(profile_dir, self.config_dir)
