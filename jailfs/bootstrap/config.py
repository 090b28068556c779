"""Command-line and environment configuration for the jailfs tool."""

import argparse
import os
from dataclasses import dataclass
from typing import Optional


def _env_str(name: str, default: str) -> str:
    """Read a non-empty environment variable or fall back to default."""
    value = os.getenv(name)
    return value if value else default


def _env_bool(name: str, default: bool) -> bool:
    """Interpret an environment variable as a boolean flag."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_FORMATS = ["json", "text"]

EXIT_FOUND = 0
EXIT_ABSENT = 1
EXIT_FAILED = 2
EXIT_INVALID_JAIL = 3


@dataclass(frozen=True)
class JailSettings:
    """Jail construction input derived from CLI arguments and environment."""

    root: str
    follow_symlinks: bool = False


def settings_from_args(args: argparse.Namespace) -> JailSettings:
    """Extract the jail settings from parsed arguments."""
    return JailSettings(root=args.root, follow_symlinks=args.follow_symlinks)


def _add_subcommands(parser: argparse.ArgumentParser) -> None:
    """Register one subparser per jail operation."""
    commands = parser.add_subparsers(dest="command", required=True)

    stat_parser = commands.add_parser("stat", help="Print entry metadata as JSON")
    stat_parser.add_argument("path")

    cat_parser = commands.add_parser("cat", help="Write file content to stdout")
    cat_parser.add_argument("path")

    ls_parser = commands.add_parser("ls", help="List directory entries")
    ls_parser.add_argument("path", nargs="?", default="/")

    write_parser = commands.add_parser("write", help="Write stdin into a file")
    write_parser.add_argument("path")
    write_parser.add_argument(
        "--append", action="store_true", help="Append instead of truncating"
    )

    mkdir_parser = commands.add_parser("mkdir", help="Create a directory")
    mkdir_parser.add_argument("path")
    mkdir_parser.add_argument("--mode", default="0777", help="Octal permission bits")
    mkdir_parser.add_argument(
        "--parents",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Create missing parent directories",
    )

    rmdir_parser = commands.add_parser("rmdir", help="Remove a directory")
    rmdir_parser.add_argument("path")
    rmdir_parser.add_argument(
        "--recursive", action="store_true", help="Remove non-empty directories"
    )

    rm_parser = commands.add_parser("rm", help="Remove a file or symlink")
    rm_parser.add_argument("path")

    mv_parser = commands.add_parser("mv", help="Rename an entry inside the jail")
    mv_parser.add_argument("old_path")
    mv_parser.add_argument("new_path")

    put_parser = commands.add_parser("put", help="Move an external entry into the jail")
    put_parser.add_argument("external_path")
    put_parser.add_argument("path")


def parse_cli_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Return parsed CLI arguments for one jailfs invocation."""
    parser = argparse.ArgumentParser(
        prog="jailfs", description="Filesystem operations confined to a root directory"
    )
    parser.add_argument(
        "--root",
        default=_env_str("JAILFS_ROOT", "."),
        help="Jail root directory",
    )
    parser.add_argument(
        "--follow-symlinks",
        action=argparse.BooleanOptionalAction,
        default=_env_bool("JAILFS_FOLLOW_SYMLINKS", False),
        help="Allow symlinks inside the jail to resolve outside of it",
    )
    parser.add_argument(
        "--log-level",
        default=_env_str("JAILFS_LOG_LEVEL", "WARNING").upper(),
        choices=LOG_LEVELS,
        type=str.upper,
    )
    parser.add_argument(
        "--log-destination",
        default=_env_str("JAILFS_LOG_DESTINATION", "stderr"),
        help="stdout, stderr or a file path",
    )
    parser.add_argument(
        "--log-format",
        default=_env_str("JAILFS_LOG_FORMAT", "json").lower(),
        choices=LOG_FORMATS,
        type=str.lower,
    )
    _add_subcommands(parser)
    return parser.parse_args(argv)
