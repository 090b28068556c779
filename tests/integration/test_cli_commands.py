"""Integration tests running the jailfs command line end to end."""

import json
import sys

import pytest

from tests.utils.cli import run_cli

pytestmark = pytest.mark.integration

skip_symlinks_on_windows = pytest.mark.skipif(
    sys.platform == "win32", reason="Symlinks require admin privileges on Windows"
)


def test_cat_existing_file(jail_root) -> None:
    """cat prints the file and exits 0."""
    result = run_cli(jail_root, "cat", "/hello.txt")

    assert result.returncode == 0
    assert result.stdout == b"hello"


def test_traversal_is_clamped(jail_root) -> None:
    """Parent references cannot climb above the jail root."""
    result = run_cli(jail_root, "cat", "/../../../../hello.txt")

    assert result.returncode == 0
    assert result.stdout == b"hello"


def test_missing_file_exits_one(jail_root) -> None:
    """Absent targets exit 1 with a virtual-path message."""
    result = run_cli(jail_root, "cat", "/missing.txt")

    assert result.returncode == 1
    assert b"not found: /missing.txt" in result.stderr


@skip_symlinks_on_windows
def test_outward_symlink_hidden_and_logged(jail_root) -> None:
    """Escaping links look missing and the denial is logged with a redacted root."""
    result = run_cli(jail_root, "cat", "/subdir/example.txt")

    assert result.returncode == 1
    assert result.stdout == b""
    events = [
        json.loads(line)
        for line in result.stderr.decode().splitlines()
        if line.startswith("{")
    ]
    denied = [event for event in events if event.get("event") == "containment_denied"]
    assert len(denied) == 1
    assert denied[0]["virtual_path"] == "/subdir/example.txt"
    assert denied[0]["component"] == "resolution.confiner"
    assert denied[0]["correlation_id"] != "-"


@skip_symlinks_on_windows
def test_outward_symlink_followed_when_enabled(jail_root) -> None:
    """The follow flag lets links resolve outside the root."""
    result = run_cli(jail_root, "--follow-symlinks", "cat", "/subdir/example.txt")

    assert result.returncode == 0
    assert result.stdout == b"outside"


def test_follow_symlinks_from_environment(jail_root) -> None:
    """JAILFS_FOLLOW_SYMLINKS configures the jail when no flag is given."""
    result = run_cli(
        jail_root,
        "stat",
        "/hello.txt",
        env={"JAILFS_FOLLOW_SYMLINKS": "true", "JAILFS_LOG_LEVEL": "INFO"},
    )

    assert result.returncode == 0
    assert b'"follow_symlinks": true' in result.stderr


def test_write_then_stat(jail_root) -> None:
    """Data written from stdin is visible to stat."""
    written = run_cli(jail_root, "write", "/notes/today.txt", stdin=b"x")
    assert written.returncode == 2
    assert b"parent directory does not exist" in written.stderr

    assert run_cli(jail_root, "mkdir", "/notes").returncode == 0
    assert run_cli(jail_root, "write", "/notes/today.txt", stdin=b"abc").returncode == 0
    assert run_cli(
        jail_root, "write", "/notes/today.txt", "--append", stdin=b"def"
    ).returncode == 0

    result = run_cli(jail_root, "stat", "/notes/today.txt")
    data = json.loads(result.stdout)
    assert data["size"] == 6
    assert data["ext"] == ".txt"


def test_ls_root(jail_root) -> None:
    """ls lists the root by default."""
    result = run_cli(jail_root, "ls")

    assert result.returncode == 0
    names = result.stdout.decode().splitlines()
    assert {"empty.txt", "hello.txt", "subdir"} <= set(names)


def test_remove_root_refused(jail_root) -> None:
    """The jail root can never be removed."""
    result = run_cli(jail_root, "rmdir", "/", "--recursive")

    assert result.returncode == 2
    assert jail_root.is_dir()


def test_put_and_mv(jail_root, tmp_path) -> None:
    """put imports an external file and mv renames it inside the jail."""
    external = tmp_path / "upload.txt"
    external.write_text("uploaded")

    assert run_cli(jail_root, "put", str(external), "/upload.txt").returncode == 0
    assert run_cli(jail_root, "mv", "/upload.txt", "/subdir/upload.txt").returncode == 0
    assert (jail_root / "subdir" / "upload.txt").read_text() == "uploaded"
    assert not external.exists()


def test_invalid_root_exits_three(tmp_path) -> None:
    """A missing root is rejected before any command runs."""
    result = run_cli(tmp_path / "missing", "ls")

    assert result.returncode == 3
