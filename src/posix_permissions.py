"""The nine POSIX permission flags as an enum, and conversions between a set
of flags, the low 9 bits of a mode, and a ``rwxr-x---`` string.
"""
from enum import Enum
from typing import AbstractSet, Final, FrozenSet


class PosixFilePermission(Enum):
    """Permission flags, in the order ``ls -l`` prints them."""

    OWNER_READ = 0
    OWNER_WRITE = 1
    OWNER_EXECUTE = 2
    GROUP_READ = 3
    GROUP_WRITE = 4
    GROUP_EXECUTE = 5
    OTHERS_READ = 6
    OTHERS_WRITE = 7
    OTHERS_EXECUTE = 8

    @property
    def bit(self) -> int:
        return 0o400 >> self.value

    @property
    def letter(self) -> str:
        return "rwx"[self.value % 3]


PermissionSet = FrozenSet[PosixFilePermission]

ALL_PERMISSIONS: Final[PermissionSet] = frozenset(PosixFilePermission)


def permissions_to_mode(perms: AbstractSet[PosixFilePermission]) -> int:
    """Permission bits (0 to 0o777) for ``perms``."""
    mode = 0
    for perm in perms:
        mode |= perm.bit
    return mode


def mode_to_permissions(mode: int) -> PermissionSet:
    """Flags set in the low 9 bits of ``mode``; type and special bits are ignored."""
    return frozenset(perm for perm in PosixFilePermission if mode & perm.bit)


def permissions_from_string(text: str) -> PermissionSet:
    """Parse ``rwxr-x---`` into a set of flags.

    Strict, unlike ``posix_mode.decode``: each position must hold either its
    own letter or ``-``.
    """
    if len(text) != 9:
        raise ValueError(f"Invalid permission string (expected 9 characters): {text!r}")
    perms = set()
    for perm, char in zip(PosixFilePermission, text):
        if char == perm.letter:
            perms.add(perm)
        elif char != "-":
            raise ValueError(f"Invalid permission string: {text!r}")
    return frozenset(perms)


def permissions_to_string(perms: AbstractSet[PosixFilePermission]) -> str:
    return "".join(perm.letter if perm in perms else "-" for perm in PosixFilePermission)
