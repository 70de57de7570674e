"""filesystem primitives used by the profile store and manager."""
import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

DIR_PERMISSIONS = 0o700
FILE_PERMISSIONS = 0o600


def ensure_directory(dir_path: Path) -> None:
    """create a directory (and parents) and restrict it to the owner."""
    dir_path.mkdir(parents=True, exist_ok=True)
    os.chmod(dir_path, DIR_PERMISSIONS)


def temp_link_path(link_path: Path) -> Path:
    return link_path.with_name(f"{link_path.name}.tmp-{os.getpid()}")


def replace_symlink(target: Path, link_path: Path) -> None:
    """
    create or replace a symbolic link atomically.

    the new link is created beside link_path and renamed over it, so
    link_path is always either the old link or the new one.

    raises:
        OSError: if the link cannot be created or link_path is a real directory
    """
    tmp_link = temp_link_path(link_path)

    try:
        remove_path(tmp_link)
        os.symlink(target, tmp_link)
        os.replace(tmp_link, link_path)
    except OSError:
        try:
            remove_path(tmp_link)
        except OSError as cleanup_error:
            logger.warning(f"could not remove temporary link {tmp_link}: {cleanup_error}")
        raise

    logger.debug(f"linked {link_path} -> {target}")


def read_symlink_target(link_path: Path) -> Optional[str]:
    """return the raw target of a symlink, or None if it is not one."""
    try:
        if not link_path.is_symlink():
            return None
        return os.readlink(link_path)
    except OSError:
        return None


def is_symlink(path: Path) -> bool:
    try:
        return path.is_symlink()
    except OSError:
        return False


def path_exists(path: Path) -> bool:
    """true if anything exists at path, including a dangling symlink."""
    return os.path.lexists(path)


def directory_exists(dir_path: Path) -> bool:
    """true if dir_path is a directory (following symlinks)."""
    try:
        return dir_path.is_dir()
    except OSError:
        return False


def write_json_file(file_path: Path, data: Any) -> None:
    """write JSON with owner-only permissions, replacing any existing file atomically."""
    tmp_path = file_path.with_name(f"{file_path.name}.tmp-{os.getpid()}")

    try:
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_PERMISSIONS)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        # O_CREAT mode is ignored for a stale temp file that already existed
        os.chmod(tmp_path, FILE_PERMISSIONS)
        os.replace(tmp_path, file_path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


def read_json_file(file_path: Path) -> Optional[Any]:
    """read and parse a JSON file, returning None if it is missing or unreadable."""
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.debug(f"could not read {file_path}: {e}")
        return None


def remove_path(path: Path) -> None:
    """remove a file, symlink or directory tree; no-op if nothing is there."""
    if path.is_symlink() or path.is_file():
        path.unlink(missing_ok=True)
    elif path.is_dir():
        shutil.rmtree(path)


def remove_directory(dir_path: Path) -> None:
    """remove a directory and all of its contents."""
    if dir_path.exists():
        shutil.rmtree(dir_path)


def list_subdirectories(dir_path: Path) -> List[str]:
    """names of the immediate subdirectories of dir_path."""
    try:
        return [entry.name for entry in os.scandir(dir_path) if entry.is_dir()]
    except FileNotFoundError:
        return []
