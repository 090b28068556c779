"""Directory operations confined to a jail: mkdir, rmdir, opendir, readdir."""

import logging
import os
import shutil
from typing import Iterator, Union

from jailfs.domain.correlation_id import CorrelationLoggerAdapter
from jailfs.domain.jail import Jail
from jailfs.domain.outcome import ABSENT, Absent, Failed, Found, Outcome
from jailfs.domain.virtual_path import PathInput, normalize, split_segments
from jailfs.operations.modes import DEFAULT_DIRECTORY_MODE, InvalidMode, parse_permissions
from jailfs.operations.reporting import failure_from_error, relabel_failure
from jailfs.resolution.confiner import Resolved, resolve
from jailfs.resolution.creation import resolve_for_create, resolve_for_mutation

DIRECTORY_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("jailfs.operations.directory"), {}
)

PSEUDO_ENTRIES = frozenset({".", ".."})


def _ancestors(rpath: str) -> list[str]:
    """Return the proper ancestors of a virtual path, shallowest first."""
    segments = split_segments(rpath)
    return ["/" + "/".join(segments[:depth]) for depth in range(1, len(segments))]


def _create_directory(
    jail: Jail, rpath: str, permissions: int, exist_ok: bool
) -> Outcome[Resolved]:
    """Create one directory level under its resolved parent."""
    outcome = resolve_for_create(jail, rpath, "mkdir")
    if isinstance(outcome, Failed):
        return outcome

    target = outcome.value
    try:
        os.mkdir(target.physical, permissions)
    except FileExistsError as error:
        if exist_ok:
            # Only an in-jail directory counts as already present.
            existing = resolve(jail, rpath)
            if isinstance(existing, Found) and existing.value.physical.is_dir():
                return existing
        return failure_from_error(DIRECTORY_LOGGER, "mkdir", rpath, error)
    except OSError as error:
        return failure_from_error(DIRECTORY_LOGGER, "mkdir", rpath, error)

    DIRECTORY_LOGGER.info(
        "Directory created",
        extra={
            "event": "directory_created",
            "virtual_path": rpath,
            "mode": format(permissions, "04o"),
        },
    )
    return Found(target)


def make_directory(
    jail: Jail,
    path: PathInput,
    mode: Union[int, str] = DEFAULT_DIRECTORY_MODE,
    parents: bool = True,
) -> Outcome[Resolved]:
    """Create a directory, and with ``parents`` any missing ancestors.

    Ancestors are created one level at a time, each re-resolved inside the
    jail first. With ``parents`` an existing directory is not an error.
    """
    rpath = normalize(path)
    try:
        permissions = parse_permissions(mode)
    except InvalidMode as error:
        return failure_from_error(DIRECTORY_LOGGER, "mkdir", rpath, error)

    if parents:
        for ancestor in _ancestors(rpath):
            outcome = resolve(jail, ancestor)
            if isinstance(outcome, Failed):
                return relabel_failure(outcome, "mkdir", rpath)
            if isinstance(outcome, Absent):
                created = _create_directory(jail, ancestor, permissions, exist_ok=True)
                if isinstance(created, Failed):
                    return relabel_failure(created, "mkdir", rpath)
    return _create_directory(jail, rpath, permissions, exist_ok=parents)


def remove_directory(
    jail: Jail, path: PathInput, recursive: bool = False
) -> Outcome[Resolved]:
    """Remove a directory; only ``recursive`` removes one that has content."""
    rpath = normalize(path)
    outcome = resolve_for_mutation(jail, rpath, "rmdir")
    if isinstance(outcome, Failed):
        return outcome

    target = outcome.value
    try:
        if recursive:
            # rmtree refuses to start from a symlink.
            shutil.rmtree(target.physical)
        else:
            os.rmdir(target.physical)
    except OSError as error:
        return failure_from_error(DIRECTORY_LOGGER, "rmdir", rpath, error)

    DIRECTORY_LOGGER.info(
        "Directory removed",
        extra={
            "event": "directory_removed",
            "virtual_path": rpath,
            "recursive": recursive,
        },
    )
    return Found(target)


def open_directory(jail: Jail, path: PathInput) -> Outcome[Iterator[os.DirEntry]]:
    """Open a directory for enumeration; the caller must close the iterator."""
    rpath = normalize(path)
    outcome = resolve(jail, rpath)
    if isinstance(outcome, Failed):
        return relabel_failure(outcome, "opendir", rpath)
    if isinstance(outcome, Absent):
        return outcome

    try:
        iterator = os.scandir(outcome.value.physical)
    except FileNotFoundError:
        return ABSENT
    except OSError as error:
        return failure_from_error(DIRECTORY_LOGGER, "opendir", rpath, error)
    return Found(iterator)


def read_directory(jail: Jail, path: PathInput) -> Outcome[list[str]]:
    """List the names of the direct children of ``path`` in OS order."""
    rpath = normalize(path)
    outcome = open_directory(jail, rpath)
    if isinstance(outcome, Failed):
        return relabel_failure(outcome, "readdir", rpath)
    if isinstance(outcome, Absent):
        return outcome

    try:
        with outcome.value as entries:
            names = [
                entry.name for entry in entries if entry.name not in PSEUDO_ENTRIES
            ]
    except OSError as error:
        return failure_from_error(DIRECTORY_LOGGER, "readdir", rpath, error)

    if DIRECTORY_LOGGER.logger.isEnabledFor(logging.DEBUG):
        DIRECTORY_LOGGER.debug(
            "Directory listed",
            extra={
                "event": "directory_listed",
                "virtual_path": rpath,
                "entries": len(names),
            },
        )
    return Found(names)
