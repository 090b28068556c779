"""Validation of open modes and permission arguments."""

import errno
import os
from dataclasses import dataclass
from typing import Union

DEFAULT_DIRECTORY_MODE = 0o777
MAX_PERMISSION_BITS = 0o7777


class InvalidMode(ValueError):
    """Raised when an open mode or permission value is malformed."""

    errno = errno.EINVAL


@dataclass(frozen=True)
class OpenMode:
    """A validated open mode and the os.open flags it maps to."""

    name: str
    flags: int
    creating: bool

    @property
    def file_mode(self) -> str:
        """Mode string for ``os.fdopen``; jail files are always binary."""
        if self.name.endswith("+"):
            return f"{self.name[0]}b+"
        return f"{self.name}b"


_OPEN_FLAGS = {
    "r": os.O_RDONLY,
    "r+": os.O_RDWR,
    "w": os.O_WRONLY | os.O_CREAT | os.O_TRUNC,
    "w+": os.O_RDWR | os.O_CREAT | os.O_TRUNC,
    "a": os.O_WRONLY | os.O_CREAT | os.O_APPEND,
    "a+": os.O_RDWR | os.O_CREAT | os.O_APPEND,
}


def parse_open_mode(mode: str) -> OpenMode:
    """Map ``r``, ``w``, ``a``, ``r+``, ``w+``, ``a+`` (``b`` allowed) to flags."""
    if not isinstance(mode, str):
        raise TypeError(f"mode must be str, not {type(mode).__name__}")
    name = mode.replace("b", "", 1) if mode.count("b") == 1 else mode
    flags = _OPEN_FLAGS.get(name)
    if flags is None:
        raise InvalidMode(f"invalid open mode {mode!r}")
    # O_BINARY only exists on Windows.
    flags |= getattr(os, "O_BINARY", 0)
    return OpenMode(name=name, flags=flags, creating=bool(flags & os.O_CREAT))


def parse_permissions(mode: Union[int, str]) -> int:
    """Accept an int or an octal string (``"0700"``, ``"755"``, ``"0o644"``)."""
    if isinstance(mode, bool) or not isinstance(mode, (int, str)):
        raise TypeError(f"permission mode must be int or str, not {type(mode).__name__}")
    if isinstance(mode, str):
        try:
            value = int(mode.strip(), 8)
        except ValueError as error:
            raise InvalidMode(f"invalid permission mode {mode!r}") from error
    else:
        value = mode
    if not 0 <= value <= MAX_PERMISSION_BITS:
        raise InvalidMode(f"permission mode {mode!r} out of range")
    return value
