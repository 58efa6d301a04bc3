"""Convert between the integer mode reported by `stat(2)` in ``st_mode`` and
the familiar 10 character string presented by ``ls -l``.

    >>> encode(0o40755)
    'drwxr-xr-x'
    >>> hex(decode("-r-s-wS-wt"))
    '0x8f53'

Handles all file types, the special bits (setuid, setgid, sticky) and the
owner/group/other permission bits.  Both directions are pure functions.
"""
from typing import Final, List, Tuple

from file_type_masks import (
    FILE_TYPE_CHARS,
    SPECIAL_SHIFT,
    TYPE_CODES,
    TYPE_SHIFT,
)


MODE_STRING_LENGTH: Final = 10

# Execute/special slot of each group, indexed by (special, execute).
_SETID_CHARS: Final = (("-", "x"), ("S", "s"))
_STICKY_CHARS: Final = (("-", "x"), ("T", "t"))


class DecodeError(ValueError):
    """Raised when a mode string cannot be converted to an integer."""

    def __init__(self, message: str, mode_string: str):
        super().__init__(message)
        self.mode_string = mode_string


class InvalidLength(DecodeError):
    """The mode string is not exactly 10 characters long."""

    def __init__(self, mode_string: str):
        super().__init__(
            f"Should have {MODE_STRING_LENGTH} characters, got {len(mode_string)}",
            mode_string,
        )


class MisplacedStickyBit(DecodeError):
    """A ``T`` or ``t`` appears in the owner or group execute position."""

    def __init__(self, mode_string: str, position: int):
        super().__init__(
            f"Sticky bit in invalid position ({position}): {mode_string!r}",
            mode_string,
        )
        self.position = position


def encode(mode: int) -> str:
    """Format ``mode`` as ``ls -l`` does, e.g. ``0o100644`` -> ``-rw-r--r--``.

    Never fails; an unknown file type renders as ``?``.
    """
    special = mode >> SPECIAL_SHIFT & 7
    chars: List[str] = [FILE_TYPE_CHARS[mode >> TYPE_SHIFT & 0xf]]
    chars.append(_encode_group(mode >> 6 & 7, special & 4, _SETID_CHARS))
    chars.append(_encode_group(mode >> 3 & 7, special & 2, _SETID_CHARS))
    chars.append(_encode_group(mode & 7, special & 1, _STICKY_CHARS))
    return "".join(chars)


def _encode_group(bits: int, special: int, table: Tuple[Tuple[str, str], ...]) -> str:
    return (
        ("r" if bits & 4 else "-")
        + ("w" if bits & 2 else "-")
        + table[bool(special)][bits & 1]
    )


def decode(mode_string: str) -> int:
    """Convert an ``ls -l`` style mode string into the integer ``st_mode``.

    Unrecognised characters count as "not set" rather than being rejected,
    so ``decode("**********") == 0``.

    Raises:
        InvalidLength: ``mode_string`` is not 10 characters long.
        MisplacedStickyBit: ``T``/``t`` outside of the "other" group.
    """
    if len(mode_string) != MODE_STRING_LENGTH:
        raise InvalidLength(mode_string)
    mode = TYPE_CODES.get(mode_string[0], 0) << TYPE_SHIFT
    for index in range(3):
        start = 1 + index * 3
        mode += _decode_group(mode_string, start, 2 - index)
    return mode


def _decode_group(mode_string: str, start: int, slot: int) -> int:
    """Bits for the 3 characters at ``start``.

    ``slot`` is the group's distance from the lowest order group: 0 for
    other, 1 for group, 2 for owner.
    """
    shift = slot * 3
    read, write, execute = mode_string[start:start + 3]
    value = 0
    if read == "r":
        value += 4 << shift
    if write == "w":
        value += 2 << shift
    if execute == "x":
        value += 1 << shift
    elif execute in "Ss":
        value += 1 << (SPECIAL_SHIFT + slot)
        if execute == "s":
            value += 1 << shift
    elif execute in "Tt":
        if slot != 0:
            raise MisplacedStickyBit(mode_string, start + 2)
        value += 1 << SPECIAL_SHIFT
        if execute == "t":
            value += 1
    return value


def parse_mode_int(text: str) -> int:
    """Parse a mode given on the command line.

    ``0x``, ``0o`` and ``0b`` prefixes are honoured; bare digits are octal,
    as with ``chmod``.
    """
    text = text.strip()
    base = 0 if text[:2].lower() in ("0x", "0o", "0b") else 8
    value = int(text, base)
    if value < 0:
        raise ValueError(f"Mode must not be negative: {text}")
    return value
