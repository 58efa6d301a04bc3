"""File mode constants for `stat`, named after the C macros of the same (similar) name."""

from typing import Dict, Final


# Type field, bits 12-15
S_IFIFO  : Final = 0o00010000   # pipe
S_IFCHR  : Final = 0o00020000   # character device
S_IFDIR  : Final = 0o00040000   # directory
S_IFBLK  : Final = 0o00060000   # block device
S_IFREG  : Final = 0o00100000   # regular
S_IFLNK  : Final = 0o00120000   # sym-link
S_IFSOCK : Final = 0o00140000   # socket

S_IFMT   : Final = 0o00170000   # file type mask

# Special bits, bits 9-11
S_ISUID  : Final = 0o00004000   # set user id on execution
S_ISGID  : Final = 0o00002000   # set group id on execution
S_ISVTX  : Final = 0o00001000   # sticky

TYPE_SHIFT    : Final = 12
SPECIAL_SHIFT : Final = 9

# Indexed by the 4-bit type field.
FILE_TYPE_CHARS : Final = "?pc?d?b?-?l?s???"

# Inverse of FILE_TYPE_CHARS, '?' excluded.
TYPE_CODES : Final[Dict[str, int]] = {
    char: code for code, char in enumerate(FILE_TYPE_CHARS) if char != "?"
}
