"""Shared fixtures for unit tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Ensure jailfs logs propagate to root so caplog can catch them."""
    logger = logging.getLogger("jailfs")
    old_propagate = logger.propagate
    logger.propagate = True
    yield
    logger.propagate = old_propagate


@pytest.fixture(name="restore_jailfs_logger")
def restore_jailfs_logger_fixture():
    """Undo handler and level changes made by configure_logging."""
    logger = logging.getLogger("jailfs")
    old_handlers = list(logger.handlers)
    old_level = logger.level
    yield logger
    for handler in list(logger.handlers):
        if handler not in old_handlers:
            handler.close()
    logger.handlers[:] = old_handlers
    logger.setLevel(old_level)
