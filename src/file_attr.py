"""Defines helper class ``FileAttr`` to use instead of a regular
``dict`` when dealing with ``stat`` structures.
"""
import os
from datetime import datetime
from typing import Callable, Dict, Final, Generator, List, Optional, Tuple, Union

from filesystem import PosixFilesystem
from mode_deriver import get_posix_file_mode
from posix_mode import encode


STAT_KEYS: Final = (
    "st_mode", "st_ino", "st_nlink", "st_uid", "st_gid", "st_size",
    "st_atime", "st_mtime", "st_ctime",
)


class FileAttr(Dict[str, Union[int, float]]):
    """Adds custom __str__ to format time stamps and mode fields in a `stat` structure."""

    @classmethod
    def from_stat_result(cls, st: os.stat_result) -> "FileAttr":
        """Copies the usual ``st_*`` fields out of an ``os.stat``/``os.lstat`` result."""
        return cls((key, getattr(st, key)) for key in STAT_KEYS)

    @classmethod
    def from_filesystem(cls, path: str, fs: Optional[PosixFilesystem] = None) -> "FileAttr":
        """Only ``st_mode``, derived through ``fs`` rather than `stat`."""
        return cls(st_mode=get_posix_file_mode(path, fs))

    def items_formatted(self) -> Generator[Tuple[str, str], None, None]:
        """Returns key/value pairs, but with the value formatted for human
        (programmer) consumption.
        """
        for key, value in self.items():
            formatter = _FORMATTERS.get(key, str)
            str_value = formatter(value) # type: ignore[arg-type]
            yield (key, str_value)

    def __str__(self) -> str:
        """`str()` function for `FileAttr`s.

        Returns:
            A YAML-like sting using "key: value", one line per key.
            If you want more control over formatting, call
            ``items_formatted()`` and iterate directly.
        """
        lines: List[str] = []
        for key, value in self.items_formatted():
            lines.append(f"{key}: {value}")
        return "\n".join(lines)

    __repr__ = __str__

    def copy(self) -> "FileAttr":
        return FileAttr(self.items())


# Static helpers

_TIME_FMT = Callable[[float], str]
_MODE_FMT = Callable[[int], str]
_FMT_T = Union[_TIME_FMT, _MODE_FMT]

def _format_time(timet: float) -> str:
    return datetime.fromtimestamp(timet).isoformat()

def _format_mode(value: int) -> str:
    return f"{encode(value)} ({oct(value)})"

_FORMATTERS: Final[Dict[str, _FMT_T]] = {
    "st_ctime": _format_time,
    "st_mtime": _format_time,
    "st_atime": _format_time,
    "st_birthtime": _format_time,
    "st_mode": _format_mode,
}
