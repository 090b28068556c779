"""Object facade bundling a jail with its operations."""

import os
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from jailfs.domain import virtual_path
from jailfs.domain.entry import Entry
from jailfs.domain.jail import Jail
from jailfs.domain.outcome import Outcome
from jailfs.domain.virtual_path import PathInput
from jailfs.operations import dir_ops, file_ops, transfer_ops
from jailfs.operations.classification import ContentTypeClassifier
from jailfs.operations.modes import DEFAULT_DIRECTORY_MODE
from jailfs.resolution import confiner
from jailfs.resolution.confiner import Resolved


class JailedFilesystem:
    """Every filesystem operation, confined to one jail.

    Operations return an Outcome: ``Found(value)``, ``ABSENT`` when the target
    does not exist (or lies outside the jail), or ``Failed(error)``.

    Attributes:
        jail: The immutable jail configuration.
        content_type: Optional classifier used by ``stat`` for regular files.
    """

    def __init__(
        self, jail: Jail, content_type: Optional[ContentTypeClassifier] = None
    ) -> None:
        """Bundle an already validated jail with an optional classifier."""
        self.jail = jail
        self.content_type = content_type

    @classmethod
    def from_root(
        cls,
        root: Union[str, "os.PathLike[str]"],
        follow_symlinks: bool = False,
        content_type: Optional[ContentTypeClassifier] = None,
    ) -> "JailedFilesystem":
        """Build the jail for ``root`` and wrap it; raises JailConstructionError."""
        return cls(Jail(root, follow_symlinks), content_type)

    @property
    def root(self) -> Path:
        """Canonical physical root of the jail."""
        return self.jail.root

    @staticmethod
    def normalize(path: PathInput) -> str:
        """Lexically normalize a jail-relative path."""
        return virtual_path.normalize(path)

    @staticmethod
    def dirname(path: PathInput) -> tuple[str, str]:
        """Split a path into its normalized parent and leaf."""
        return virtual_path.dirname(path)

    def resolve(self, path: PathInput) -> Outcome[Resolved]:
        """Resolve a path to its physical location inside the jail."""
        return confiner.resolve(self.jail, path)

    def stat(self, path: PathInput) -> Outcome[Entry]:
        """Return fresh metadata, classified when a classifier is set."""
        return file_ops.stat_entry(self.jail, path, self.content_type)

    def open(self, path: PathInput, mode: str = "r") -> Outcome[BinaryIO]:
        """Open a file in binary mode; the caller closes it."""
        return file_ops.open_file(self.jail, path, mode)

    def read(self, path: PathInput) -> Outcome[bytes]:
        """Return the whole content of a file."""
        return file_ops.read_file(self.jail, path)

    def remove(self, path: PathInput) -> Outcome[Resolved]:
        """Unlink a file or symlink."""
        return file_ops.remove_entry(self.jail, path)

    def rename(self, old_path: PathInput, new_path: PathInput) -> Outcome[Resolved]:
        """Rename an entry within the jail."""
        return transfer_ops.rename_entry(self.jail, old_path, new_path)

    def put(
        self, external_path: Union[str, "os.PathLike[str]"], new_path: PathInput
    ) -> Outcome[Resolved]:
        """Move an external host entry into the jail."""
        return transfer_ops.import_entry(self.jail, external_path, new_path)

    def mkdir(
        self,
        path: PathInput,
        mode: Union[int, str] = DEFAULT_DIRECTORY_MODE,
        parents: bool = True,
    ) -> Outcome[Resolved]:
        """Create a directory, with missing ancestors when parents is set."""
        return dir_ops.make_directory(self.jail, path, mode, parents)

    def rmdir(self, path: PathInput, recursive: bool = False) -> Outcome[Resolved]:
        """Remove a directory, and its content when recursive is set."""
        return dir_ops.remove_directory(self.jail, path, recursive)

    def opendir(self, path: PathInput) -> Outcome[Iterator[os.DirEntry]]:
        """Open a directory iterator; the caller closes it."""
        return dir_ops.open_directory(self.jail, path)

    def readdir(self, path: PathInput) -> Outcome[list[str]]:
        """List the names of direct children."""
        return dir_ops.read_directory(self.jail, path)

    def __repr__(self) -> str:
        return (
            f"JailedFilesystem(root={str(self.jail.root)!r}, "
            f"follow_symlinks={self.jail.follow_symlinks})"
        )
