"""Metadata describing a single entry inside the jail."""

import os
import stat
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Any, Optional


class EntryKind(str, Enum):
    """Filesystem object type reported by stat."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"


def kind_from_mode(mode: int) -> EntryKind:
    """Map an st_mode value to the entry kind."""
    if stat.S_ISREG(mode):
        return EntryKind.FILE
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    return EntryKind.OTHER


def format_permissions(mode: int) -> str:
    """Render permission bits as a four-digit octal string such as ``0755``."""
    return format(stat.S_IMODE(mode), "04o")


def extension_of(virtual_path: str) -> Optional[str]:
    """Return the suffix of the leaf name, or None."""
    suffix = PurePosixPath(virtual_path).suffix
    return suffix or None


@dataclass(frozen=True)
class Entry:
    """A fresh, uncached snapshot of one entry's metadata."""

    kind: EntryKind
    physical_path: Path
    virtual_path: str
    ctime: float
    mtime: float
    perm: str
    size: Optional[int] = None
    ext: Optional[str] = None
    content_type: Optional[str] = None

    @classmethod
    def from_stat_result(
        cls,
        result: os.stat_result,
        physical_path: Path,
        virtual_path: str,
        content_type: Optional[str] = None,
    ) -> "Entry":
        """Build an entry from an lstat result; file-only fields stay None otherwise."""
        kind = kind_from_mode(result.st_mode)
        is_file = kind is EntryKind.FILE
        return cls(
            kind=kind,
            physical_path=physical_path,
            virtual_path=virtual_path,
            ctime=result.st_ctime,
            mtime=result.st_mtime,
            perm=format_permissions(result.st_mode),
            size=result.st_size if is_file else None,
            ext=extension_of(virtual_path) if is_file else None,
            content_type=content_type if is_file else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of the entry."""
        data = asdict(self)
        data["kind"] = self.kind.value
        data["physical_path"] = self.physical_path.as_posix()
        return data
