"""Moving entries within the jail and importing external ones into it."""

import logging
import os
from typing import Union

from jailfs.domain.correlation_id import CorrelationLoggerAdapter
from jailfs.domain.jail import Jail
from jailfs.domain.outcome import Failed, Found, Outcome
from jailfs.domain.virtual_path import PathInput, normalize
from jailfs.operations.reporting import failure_from_error
from jailfs.resolution.confiner import Resolved
from jailfs.resolution.creation import resolve_for_mutation

TRANSFER_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("jailfs.operations.transfer"), {}
)


def rename_entry(jail: Jail, old_path: PathInput, new_path: PathInput) -> Outcome[Resolved]:
    """Rename ``old_path`` to ``new_path``, both inside the jail."""
    old_rpath = normalize(old_path)
    new_rpath = normalize(new_path)

    source = resolve_for_mutation(jail, old_rpath, "rename")
    if isinstance(source, Failed):
        return source
    destination = resolve_for_mutation(jail, new_rpath, "rename")
    if isinstance(destination, Failed):
        return destination

    try:
        os.rename(source.value.physical, destination.value.physical)
    except OSError as error:
        return failure_from_error(TRANSFER_LOGGER, "rename", old_rpath, error)

    TRANSFER_LOGGER.info(
        "Entry renamed",
        extra={
            "event": "entry_renamed",
            "virtual_path": old_rpath,
            "destination": new_rpath,
        },
    )
    return Found(destination.value)


def import_entry(
    jail: Jail, external_path: Union[str, "os.PathLike[str]"], new_path: PathInput
) -> Outcome[Resolved]:
    """Move an external file or directory into the jail at ``new_path``.

    ``external_path`` is a trusted host path. The move is a single rename, so
    it is atomic and fails across filesystems instead of copying.
    """
    new_rpath = normalize(new_path)
    destination = resolve_for_mutation(jail, new_rpath, "put")
    if isinstance(destination, Failed):
        return destination

    try:
        os.rename(external_path, destination.value.physical)
    except OSError as error:
        return failure_from_error(TRANSFER_LOGGER, "put", new_rpath, error)

    TRANSFER_LOGGER.info(
        "External entry imported",
        extra={"event": "entry_imported", "virtual_path": new_rpath},
    )
    return Found(destination.value)
