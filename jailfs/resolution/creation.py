"""Resolution of paths that are about to be created.

Only the parent directory is resolved physically; the leaf name is appended
as-is. The leaf comes from the normalizer, so it never holds a separator and
is never ``.`` or ``..``, and the joined path cannot leave the verified parent.
"""

import errno
import logging
import os

from jailfs.domain.correlation_id import CorrelationLoggerAdapter
from jailfs.domain.errors import OperationError
from jailfs.domain.jail import Jail
from jailfs.domain.outcome import Absent, Failed, Found, Outcome
from jailfs.domain.virtual_path import PathInput, dirname, normalize
from jailfs.resolution.confiner import Resolved, resolve

CREATION_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("jailfs.resolution.creation"), {}
)


def resolve_for_create(
    jail: Jail, path: PathInput, operation: str = "create"
) -> Outcome[Resolved]:
    """Resolve the parent of ``path`` and append its leaf name.

    Never returns Absent: a missing (or escaping) parent is a failure here.
    """
    rpath = normalize(path)
    parent, leaf = dirname(rpath)

    outcome = resolve(jail, parent)
    if isinstance(outcome, Failed):
        return Failed(outcome.error.relabel(operation, rpath))
    if isinstance(outcome, Absent):
        CREATION_LOGGER.info(
            "Parent directory does not exist",
            extra={
                "event": "create_parent_absent",
                "operation": operation,
                "virtual_path": rpath,
            },
        )
        return Failed(
            OperationError(
                operation,
                rpath,
                errno.ENOENT,
                f"{os.strerror(errno.ENOENT)} (parent directory does not exist)",
            )
        )

    parent_physical = outcome.value.physical
    if leaf and not parent_physical.is_dir():
        CREATION_LOGGER.info(
            "Parent is not a directory",
            extra={
                "event": "create_parent_not_directory",
                "operation": operation,
                "virtual_path": rpath,
            },
        )
        return Failed(
            OperationError(
                operation,
                rpath,
                errno.ENOTDIR,
                f"{os.strerror(errno.ENOTDIR)} (parent is not a directory)",
            )
        )

    physical = parent_physical / leaf if leaf else parent_physical
    return Found(Resolved(physical, rpath))


def resolve_for_mutation(jail: Jail, path: PathInput, operation: str) -> Outcome[Resolved]:
    """Resolve the entry a mutating operation will act on, without following it.

    The parent is verified physically; the final component is left as-is so
    that a symlink leaf is renamed or unlinked rather than its target. The
    jail root itself is never a valid target.
    """
    rpath = normalize(path)
    if rpath == "/":
        CREATION_LOGGER.warning(
            "Refusing to mutate the jail root",
            extra={"event": "root_mutation_denied", "operation": operation},
        )
        return Failed(
            OperationError(
                operation, rpath, errno.EPERM, "the jail root cannot be modified"
            )
        )
    return resolve_for_create(jail, rpath, operation)
