"""Physical resolution of virtual paths and the containment decision."""

import errno
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from jailfs.domain.correlation_id import CorrelationLoggerAdapter
from jailfs.domain.errors import OperationError
from jailfs.domain.jail import Jail
from jailfs.domain.outcome import ABSENT, Failed, Found, Outcome
from jailfs.domain.virtual_path import PathInput, normalize

CONFINER_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("jailfs.resolution.confiner"), {}
)


@dataclass(frozen=True)
class Resolved:
    """A physical location paired with the virtual path that named it."""

    physical: Path
    virtual: str


def is_contained(root: Path, candidate: Path) -> bool:
    """Return True when ``candidate`` is ``root`` or lies below it.

    Comparison is per path segment: ``/base-evil`` is not inside ``/base``.
    """
    return candidate == root or root in candidate.parents


def physical_candidate(jail: Jail, virtual_path: str) -> Path:
    """Place a normalized virtual path under the jail root, lexically."""
    return jail.root / virtual_path.lstrip("/")


def _resolution_error(rpath: str, error: Exception) -> OperationError:
    """Wrap a resolution error without its message, which names physical paths."""
    if isinstance(error, RuntimeError):
        # Symlink loops on interpreters before 3.13.
        failure = OperationError("resolve", rpath, errno.ELOOP, os.strerror(errno.ELOOP))
        failure.__cause__ = error
        return failure
    return OperationError.from_exception("resolve", rpath, error)


def resolve(jail: Jail, path: PathInput) -> Outcome[Resolved]:
    """Resolve ``path`` to a canonical physical path inside the jail.

    Missing targets and targets that escape the jail (when symlinks are not
    followed) both come back as Absent. Every call consults the filesystem
    afresh.
    """
    rpath = normalize(path)
    candidate = physical_candidate(jail, rpath)
    try:
        apath = candidate.resolve(strict=True)
    except FileNotFoundError:
        if CONFINER_LOGGER.logger.isEnabledFor(logging.DEBUG):
            CONFINER_LOGGER.debug(
                "Path does not exist",
                extra={"event": "resolve_absent", "virtual_path": rpath},
            )
        return ABSENT
    except (OSError, RuntimeError, ValueError) as error:
        failure = _resolution_error(rpath, error)
        CONFINER_LOGGER.warning(
            "Path resolution failed",
            extra={
                "event": "resolve_failed",
                "virtual_path": rpath,
                "errno": failure.errno,
                "error_type": type(error).__name__,
            },
        )
        return Failed(failure)

    if not jail.follow_symlinks and not is_contained(jail.root, apath):
        CONFINER_LOGGER.warning(
            "Resolved path escapes the jail",
            extra={
                "event": "containment_denied",
                "virtual_path": rpath,
                "physical_path": apath.as_posix(),
            },
        )
        return ABSENT

    if CONFINER_LOGGER.logger.isEnabledFor(logging.DEBUG):
        CONFINER_LOGGER.debug(
            "Path resolved",
            extra={
                "event": "resolve_found",
                "virtual_path": rpath,
                "physical_path": apath.as_posix(),
            },
        )
    return Found(Resolved(apath, rpath))
