"""Unit tests for creation-path and mutation-path resolution."""

import errno
import logging
import os
import sys

import pytest

from jailfs.domain.outcome import Failed, Found
from jailfs.resolution.creation import resolve_for_create, resolve_for_mutation

skip_symlinks_on_windows = pytest.mark.skipif(
    sys.platform == "win32", reason="Symlinks require admin privileges on Windows"
)


def test_create_path_appends_leaf_to_parent(jail):
    """A new leaf is placed under its resolved parent."""
    outcome = resolve_for_create(jail, "/subdir/new.txt")

    assert isinstance(outcome, Found)
    assert outcome.value.physical == jail.root / "subdir" / "new.txt"
    assert outcome.value.virtual == "/subdir/new.txt"


def test_create_path_for_existing_leaf(jail):
    """The leaf need not be missing; only the parent is resolved."""
    outcome = resolve_for_create(jail, "/hello.txt")

    assert isinstance(outcome, Found)
    assert outcome.value.physical == jail.root / "hello.txt"


def test_create_path_missing_parent_fails(jail, caplog):
    """A missing parent is a failure, never Absent."""
    with caplog.at_level(logging.INFO, logger="jailfs"):
        outcome = resolve_for_create(jail, "/nowhere/new.txt", "open")

    assert isinstance(outcome, Failed)
    assert outcome.error.errno == errno.ENOENT
    assert outcome.error.operation == "open"
    assert outcome.error.virtual_path == "/nowhere/new.txt"
    assert any(
        getattr(r, "event", None) == "create_parent_absent" for r in caplog.records
    )


def test_create_path_parent_is_file_fails(jail):
    """A regular file cannot act as a parent directory."""
    outcome = resolve_for_create(jail, "/hello.txt/new.txt", "mkdir")

    assert isinstance(outcome, Failed)
    assert outcome.error.errno == errno.ENOTDIR
    assert outcome.error.operation == "mkdir"
    assert outcome.error.virtual_path == "/hello.txt/new.txt"


def test_open_for_create_below_file_fails(fs):
    """Creating a file below a regular file fails with ENOTDIR."""
    outcome = fs.open("/hello.txt/new.txt", "w")

    assert isinstance(outcome, Failed)
    assert outcome.error.errno == errno.ENOTDIR
    assert (fs.root / "hello.txt").read_text() == "hello"


@skip_symlinks_on_windows
def test_create_path_through_escaping_parent_fails(jail):
    """A parent that escapes the jail is treated as missing."""
    outcome = resolve_for_create(jail, "/out_of_basedir/new.txt")

    assert isinstance(outcome, Failed)
    assert outcome.error.errno == errno.ENOENT


@skip_symlinks_on_windows
def test_create_path_does_not_follow_leaf(jail):
    """A symlink leaf is returned as the link itself, not its target."""
    outcome = resolve_for_create(jail, "/subdir/example.txt")

    assert isinstance(outcome, Found)
    assert outcome.value.physical == jail.root / "subdir" / "example.txt"
    assert os.path.islink(outcome.value.physical)


def test_mutation_of_root_is_refused(jail, caplog):
    """The jail root cannot be removed or renamed."""
    with caplog.at_level(logging.WARNING, logger="jailfs"):
        outcome = resolve_for_mutation(jail, "/subdir/..", "rmdir")

    assert isinstance(outcome, Failed)
    assert outcome.error.errno == errno.EPERM
    assert outcome.error.virtual_path == "/"
    assert any(
        getattr(r, "event", None) == "root_mutation_denied" for r in caplog.records
    )


def test_mutation_path_delegates_to_creation(jail):
    """Other paths resolve like creation paths."""
    outcome = resolve_for_mutation(jail, "/subdir/world.txt", "remove")

    assert isinstance(outcome, Found)
    assert outcome.value.physical == jail.root / "subdir" / "world.txt"
