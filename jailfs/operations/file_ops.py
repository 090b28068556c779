"""File operations confined to a jail: stat, open, read and remove."""

import logging
import os
import stat
from typing import BinaryIO, Optional

from jailfs.domain.correlation_id import CorrelationLoggerAdapter
from jailfs.domain.entry import Entry
from jailfs.domain.jail import Jail
from jailfs.domain.outcome import ABSENT, Absent, Failed, Found, Outcome
from jailfs.domain.virtual_path import PathInput, normalize
from jailfs.operations.classification import ContentTypeClassifier
from jailfs.operations.modes import InvalidMode, parse_open_mode
from jailfs.operations.reporting import failure_from_error, relabel_failure
from jailfs.resolution.confiner import Resolved, resolve
from jailfs.resolution.creation import resolve_for_create, resolve_for_mutation

FILE_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("jailfs.operations.file"), {}
)

# Permission bits for newly created files; the umask still applies.
NEW_FILE_PERMISSIONS = 0o666

NOFOLLOW = getattr(os, "O_NOFOLLOW", 0)


def stat_entry(
    jail: Jail,
    path: PathInput,
    content_type: Optional[ContentTypeClassifier] = None,
) -> Outcome[Entry]:
    """Return fresh metadata for ``path``."""
    rpath = normalize(path)
    outcome = resolve(jail, rpath)
    if isinstance(outcome, Failed):
        return relabel_failure(outcome, "stat", rpath)
    if isinstance(outcome, Absent):
        return outcome

    resolved = outcome.value
    try:
        result = os.lstat(resolved.physical)
    except FileNotFoundError:
        return ABSENT
    except OSError as error:
        return failure_from_error(FILE_LOGGER, "stat", rpath, error)

    classified = None
    if content_type is not None and stat.S_ISREG(result.st_mode):
        classified = content_type(resolved.physical)
    return Found(
        Entry.from_stat_result(result, resolved.physical, rpath, classified)
    )


def _creation_target(jail: Jail, rpath: str) -> Outcome[Resolved]:
    """Resolve the path a creating open will make."""
    outcome = resolve_for_create(jail, rpath, "open")
    if isinstance(outcome, Found) and FILE_LOGGER.logger.isEnabledFor(logging.DEBUG):
        FILE_LOGGER.debug(
            "Creating new file",
            extra={"event": "file_create_started", "virtual_path": rpath},
        )
    return outcome


def open_file(jail: Jail, path: PathInput, mode: str = "r") -> Outcome[BinaryIO]:
    """Open ``path`` in binary mode; the caller must close the returned file.

    Reading modes return Absent for missing files. Creating modes fall back to
    the parent directory when the file does not exist yet.
    """
    rpath = normalize(path)
    try:
        open_mode = parse_open_mode(mode)
    except InvalidMode as error:
        return failure_from_error(FILE_LOGGER, "open", rpath, error)

    flags = open_mode.flags
    if not jail.follow_symlinks:
        flags |= NOFOLLOW

    outcome = resolve(jail, rpath)
    if isinstance(outcome, Failed):
        return relabel_failure(outcome, "open", rpath)
    if isinstance(outcome, Absent):
        if not open_mode.creating:
            return outcome
        outcome = _creation_target(jail, rpath)
        if isinstance(outcome, Failed):
            return outcome
        # A symlink planted at the leaf must not be followed on creation.
        flags |= NOFOLLOW

    physical = outcome.value.physical
    try:
        fd = os.open(physical, flags, NEW_FILE_PERMISSIONS)
    except FileNotFoundError as error:
        if not open_mode.creating:
            return ABSENT
        return failure_from_error(FILE_LOGGER, "open", rpath, error)
    except OSError as error:
        return failure_from_error(FILE_LOGGER, "open", rpath, error)

    try:
        handle = os.fdopen(fd, open_mode.file_mode)
    except OSError as error:
        os.close(fd)
        return failure_from_error(FILE_LOGGER, "open", rpath, error)

    if FILE_LOGGER.logger.isEnabledFor(logging.DEBUG):
        FILE_LOGGER.debug(
            "File opened",
            extra={
                "event": "file_opened",
                "virtual_path": rpath,
                "mode": open_mode.name,
            },
        )
    return Found(handle)


def read_file(jail: Jail, path: PathInput) -> Outcome[bytes]:
    """Return the whole content of ``path``."""
    rpath = normalize(path)
    outcome = open_file(jail, rpath, "r")
    if isinstance(outcome, Failed):
        return relabel_failure(outcome, "read", rpath)
    if isinstance(outcome, Absent):
        return outcome

    try:
        with outcome.value as handle:
            content = handle.read()
    except OSError as error:
        return failure_from_error(FILE_LOGGER, "read", rpath, error)

    if FILE_LOGGER.logger.isEnabledFor(logging.DEBUG):
        FILE_LOGGER.debug(
            "File read complete",
            extra={
                "event": "file_read_complete",
                "virtual_path": rpath,
                "bytes": len(content),
            },
        )
    return Found(content)


def remove_entry(jail: Jail, path: PathInput) -> Outcome[Resolved]:
    """Unlink a non-directory entry; a symlink is removed, not its target."""
    rpath = normalize(path)
    outcome = resolve_for_mutation(jail, rpath, "remove")
    if isinstance(outcome, Failed):
        return outcome

    target = outcome.value
    try:
        os.remove(target.physical)
    except OSError as error:
        return failure_from_error(FILE_LOGGER, "remove", rpath, error)

    FILE_LOGGER.info(
        "Entry removed",
        extra={"event": "entry_removed", "virtual_path": rpath},
    )
    return Found(target)
