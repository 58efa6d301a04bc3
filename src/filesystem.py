"""Filesystem capabilities used to derive a file mode.

Anything with ``posix_permissions``, ``is_symlink`` and ``is_dir`` will do
(see ``PosixFilesystem``).  Two implementations are provided:

    - ``LocalFilesystem``: the real disk, optionally under a root folder.
    - ``MemoryFilesystem``: a small in-memory tree, handy for tests and for
      presenting entries that don't exist on disk.
"""
import errno
import logging
import os
import posixpath
from dataclasses import dataclass
from stat import S_IMODE
from typing import Dict, Final, Optional, Protocol, runtime_checkable

from file_type_masks import S_IFDIR, S_IFLNK, S_IFMT, S_IFREG
from posix_permissions import (
    PermissionSet,
    mode_to_permissions,
    permissions_to_mode,
)


LOGGER: Final = logging.getLogger(__name__)

DEFAULT_FILE_PERMISSIONS: Final = 0o644  # rw-r--r--
DEFAULT_DIR_PERMISSIONS: Final = 0o755   # rwxr-xr-x
SYMLINK_PERMISSIONS: Final = 0o777       # rwxrwxrwx

# Symlink hops followed by ``MemoryFilesystem.is_dir``, same as Linux.
MAX_SYMLINK_HOPS: Final = 40


@runtime_checkable
class PosixFilesystem(Protocol):
    """What ``mode_deriver`` needs to know about a path."""

    def posix_permissions(self, path: str) -> PermissionSet:
        """The nine permission flags of ``path``, not following symlinks."""
        ...

    def is_symlink(self, path: str) -> bool:
        """True if ``path`` itself is a symbolic link."""
        ...

    def is_dir(self, path: str) -> bool:
        """True if ``path`` is (or links to) a directory."""
        ...


class LocalFilesystem:
    """The local disk.  OS errors are passed straight through."""

    def __init__(self, root: Optional[str] = None):
        self.root = root

    # Helpers
    # =======

    def _full_path(self, partial: str) -> str:
        if self.root is None:
            return partial
        return os.path.join(self.root, partial.lstrip("/"))

    # Capability methods
    # ==================

    def posix_permissions(self, path: str) -> PermissionSet:
        full_path = self._full_path(path)
        st = os.lstat(full_path)
        LOGGER.debug("lstat(%s) st_mode: %#08o", full_path, st.st_mode)
        return mode_to_permissions(S_IMODE(st.st_mode))

    def is_symlink(self, path: str) -> bool:
        return os.path.islink(self._full_path(path))

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(self._full_path(path))


@dataclass
class MemoryEntry:
    """A single file, directory or symlink held by ``MemoryFilesystem``.

    Attributes:
        mode: File type and permissions, as in ``st_mode``
        target: Link target, for symlinks only
    """

    mode: int
    target: Optional[str] = None

    def is_file(self) -> bool:
        return (self.mode & S_IFMT) == S_IFREG

    def is_directory(self) -> bool:
        return (self.mode & S_IFMT) == S_IFDIR

    def is_symbolic_link(self) -> bool:
        return (self.mode & S_IFMT) == S_IFLNK


def _enoent(path: str) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), path)


class MemoryFilesystem:
    """In-memory filesystem of directories, regular files and symlinks.

    Paths are POSIX style; relative paths are taken from ``/``.  Only the
    entries' modes and link targets are kept - there is no file content.
    """

    def __init__(self):
        self._entries: Dict[str, MemoryEntry] = {"/": MemoryEntry(S_IFDIR | DEFAULT_DIR_PERMISSIONS)}

    def _normalize_path(self, path: str) -> str:
        normalized = posixpath.normpath("/" + path)
        # normpath keeps a leading "//"
        return "/" + normalized.lstrip("/")

    def _entry(self, path: str) -> MemoryEntry:
        entry = self._entries.get(self._normalize_path(path))
        if entry is None:
            raise _enoent(path)
        return entry

    def _add(self, path: str, entry: MemoryEntry) -> str:
        normalized = self._normalize_path(path)
        if normalized in self._entries:
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), path)
        parent = self._entries.get(posixpath.dirname(normalized))
        if parent is None:
            raise _enoent(path)
        if not parent.is_directory():
            raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), path)
        self._entries[normalized] = entry
        LOGGER.debug("added %s mode: %#08o", normalized, entry.mode)
        return normalized

    def _resolve(self, path: str) -> MemoryEntry:
        """Follow symlinks from ``path`` to a non-link entry."""
        current = self._normalize_path(path)
        for _ in range(MAX_SYMLINK_HOPS):
            entry = self._entry(current)
            if not entry.is_symbolic_link():
                return entry
            assert entry.target is not None
            current = self._normalize_path(
                posixpath.join(posixpath.dirname(current), entry.target)
            )
        raise OSError(errno.ELOOP, os.strerror(errno.ELOOP), path)

    # Building the tree
    # =================

    def mkdir(self, path: str, permissions: int = DEFAULT_DIR_PERMISSIONS) -> str:
        return self._add(path, MemoryEntry(S_IFDIR | permissions & 0o777))

    def create_file(self, path: str, permissions: int = DEFAULT_FILE_PERMISSIONS) -> str:
        return self._add(path, MemoryEntry(S_IFREG | permissions & 0o777))

    def symlink(self, target: str, path: str) -> str:
        """Create ``path`` as a link pointing at ``target`` (like ``ln -s``)."""
        return self._add(path, MemoryEntry(S_IFLNK | SYMLINK_PERMISSIONS, target=target))

    def chmod(self, path: str, permissions: PermissionSet, follow_symlinks: bool = True) -> None:
        entry = self._resolve(path) if follow_symlinks else self._entry(path)
        entry.mode = (entry.mode & S_IFMT) | permissions_to_mode(permissions)

    def remove(self, path: str) -> None:
        normalized = self._normalize_path(path)
        if normalized == "/":
            raise PermissionError(errno.EPERM, os.strerror(errno.EPERM), path)
        entry = self._entry(normalized)
        if entry.is_directory() and any(
            posixpath.dirname(other) == normalized for other in self._entries if other != "/"
        ):
            raise OSError(errno.ENOTEMPTY, os.strerror(errno.ENOTEMPTY), path)
        del self._entries[normalized]

    def lstat_mode(self, path: str) -> int:
        """The stored ``st_mode`` of ``path``, not following symlinks."""
        return self._entry(path).mode

    # Capability methods
    # ==================

    def posix_permissions(self, path: str) -> PermissionSet:
        return mode_to_permissions(self._entry(path).mode)

    def is_symlink(self, path: str) -> bool:
        try:
            return self._entry(path).is_symbolic_link()
        except FileNotFoundError:
            return False

    def is_dir(self, path: str) -> bool:
        try:
            return self._resolve(path).is_directory()
        except OSError:
            return False
