"""Immutable jail configuration and its one-time validation."""

import errno
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from jailfs.domain.correlation_id import CorrelationLoggerAdapter
from jailfs.domain.errors import JailConstructionError

JAIL_LOGGER = CorrelationLoggerAdapter(logging.getLogger("jailfs.domain.jail"), {})


def _canonical_root(root: Union[str, "os.PathLike[str]"]) -> Path:
    """Resolve the root physically and require an existing directory."""
    if not isinstance(root, (str, os.PathLike)):
        raise TypeError(f"root must be str or PathLike[str], not {type(root).__name__}")
    raw = os.fspath(root)
    if not isinstance(raw, str):
        raise TypeError("root must be str or PathLike[str], not bytes")

    try:
        # Relative roots are anchored at the process working directory.
        canonical = Path(raw).resolve(strict=True)
    except RuntimeError as error:
        # Symlink loops on interpreters before 3.13.
        raise JailConstructionError(
            f"failed to access the jail root {raw!r}: {os.strerror(errno.ELOOP)}"
        ) from error
    except (OSError, ValueError) as error:
        raise JailConstructionError(
            f"failed to access the jail root {raw!r}: {error}"
        ) from error

    try:
        is_directory = canonical.is_dir()
    except OSError as error:
        raise JailConstructionError(
            f"failed to inspect the jail root {raw!r}: {error}"
        ) from error
    if not is_directory:
        raise JailConstructionError(f"jail root {raw!r} is not a directory")
    return canonical


@dataclass(frozen=True)
class Jail:
    """The directory all operations are confined to.

    ``root`` is replaced by its canonical physical form during construction;
    a Jail that exists has a root that existed and was a directory at that
    moment.
    """

    root: Path
    follow_symlinks: bool = False

    def __post_init__(self) -> None:
        """Validate arguments and store the canonical root."""
        if not isinstance(self.follow_symlinks, bool):
            raise TypeError("follow_symlinks must be boolean")
        object.__setattr__(self, "root", _canonical_root(self.root))
        JAIL_LOGGER.info(
            "Jail created",
            extra={
                "event": "jail_created",
                "root": self.root.as_posix(),
                "follow_symlinks": self.follow_symlinks,
            },
        )

    def __str__(self) -> str:
        return str(self.root)
