"""Translation of OS errors into logged Failed outcomes."""

import logging

from jailfs.domain.errors import OperationError
from jailfs.domain.outcome import Failed


def failure_from_error(
    logger: logging.LoggerAdapter,
    operation: str,
    virtual_path: str,
    error: BaseException,
) -> Failed:
    """Wrap ``error`` for ``operation`` and log it once."""
    failure = OperationError.from_exception(operation, virtual_path, error)
    logger.warning(
        "Operation failed",
        extra={
            "event": "operation_failed",
            "operation": operation,
            "virtual_path": virtual_path,
            "errno": failure.errno,
            "error_type": type(error).__name__,
        },
    )
    return Failed(failure)


def relabel_failure(failed: Failed, operation: str, virtual_path: str) -> Failed:
    """Attribute a failure from resolution to the operation that asked for it."""
    if failed.error.operation == operation:
        return failed
    return Failed(failed.error.relabel(operation, virtual_path))
