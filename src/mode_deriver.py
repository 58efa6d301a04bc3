"""Derive a `stat` style mode for a path from a ``PosixFilesystem``.

Only directory, symlink and regular file types can be told apart (block and
character devices, pipes and sockets are reported as regular files).  The
special bits (setuid/setgid/sticky) are unavailable too, and are always
returned unset.  Use ``os.lstat`` instead where a real `stat` is possible.
"""
import logging
from typing import Final, Optional

from filesystem import LocalFilesystem, PosixFilesystem
from file_type_masks import S_IFDIR, S_IFLNK, S_IFREG
from posix_mode import encode
from posix_permissions import permissions_to_mode


LOGGER: Final = logging.getLogger(__name__)


def get_posix_file_mode(path: str, fs: Optional[PosixFilesystem] = None) -> int:
    """Mode value for ``path``, as would be reported in ``stat.st_mode``.

    Errors raised by ``fs`` (e.g. ``FileNotFoundError``) propagate as-is.
    """
    if fs is None:
        fs = LocalFilesystem()
    base_mode = permissions_to_mode(fs.posix_permissions(path))
    if fs.is_symlink(path):
        mode = S_IFLNK + base_mode
    elif fs.is_dir(path):
        mode = S_IFDIR + base_mode
    else:
        # regular file... or a device, pipe or socket we can't tell apart
        mode = S_IFREG + base_mode
    LOGGER.debug("get_posix_file_mode: %s mode: %#08o", path, mode)
    return mode


def get_posix_mode_string(path: str, fs: Optional[PosixFilesystem] = None) -> str:
    """``ls -l`` style mode string for ``path``, e.g. ``drwxr-xr-x``."""
    return encode(get_posix_file_mode(path, fs))
