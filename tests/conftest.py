"""Shared pytest fixtures for integration and unit tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from jailfs.domain.jail import Jail
from jailfs.facade import JailedFilesystem

if TYPE_CHECKING:
    from _pytest.tmpdir import TempPathFactory


@pytest.fixture(name="outside_dir")
def _outside_dir(tmp_path_factory: "TempPathFactory") -> Path:
    """A directory next to the jail holding content that must stay unreachable."""

    directory = tmp_path_factory.mktemp("outside")
    (directory / "example.txt").write_text("outside")
    (directory / "nested").mkdir()
    (directory / "nested" / "secret.txt").write_text("secret")
    return directory.resolve()


@pytest.fixture(name="jail_root")
def _jail_root(tmp_path: Path, outside_dir: Path) -> Path:
    """Build the standard jail tree.

    jail/
      empty.txt
      hello.txt            "hello"
      subdir/world.txt     "world"
      subdir/example.txt   -> outside/example.txt
      out_of_basedir       -> outside/nested
    """

    root = tmp_path / "jail"
    root.mkdir()
    (root / "empty.txt").write_text("")
    (root / "hello.txt").write_text("hello")
    (root / "subdir").mkdir()
    (root / "subdir" / "world.txt").write_text("world")
    if sys.platform != "win32":
        os.symlink(outside_dir / "example.txt", root / "subdir" / "example.txt")
        os.symlink(outside_dir / "nested", root / "out_of_basedir")
    return root


@pytest.fixture(name="jail")
def _jail(jail_root: Path) -> Jail:
    """A jail over the standard tree that does not follow outward symlinks."""

    return Jail(jail_root)


@pytest.fixture(name="following_jail")
def _following_jail(jail_root: Path) -> Jail:
    """A jail over the standard tree that follows symlinks anywhere."""

    return Jail(jail_root, follow_symlinks=True)


@pytest.fixture(name="fs")
def _fs(jail: Jail) -> JailedFilesystem:
    """Facade over the confining jail."""

    return JailedFilesystem(jail)
