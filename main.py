"""Command-line access to a directory through the jailfs confinement engine."""

import argparse
import json
import logging
import os
import shutil
import sys
from typing import Callable, Optional

from jailfs.bootstrap.config import (
    EXIT_ABSENT,
    EXIT_FAILED,
    EXIT_FOUND,
    EXIT_INVALID_JAIL,
    parse_cli_args,
    settings_from_args,
)
from jailfs.bootstrap.logging_setup import configure_logging
from jailfs.domain.correlation_id import CorrelationLoggerAdapter, correlation_scope
from jailfs.domain.errors import JailConstructionError, OperationError
from jailfs.domain.outcome import Absent, Failed, Found, Outcome
from jailfs.domain.virtual_path import normalize
from jailfs.facade import JailedFilesystem
from jailfs.operations.classification import guess_content_type

CLI_LOGGER = CorrelationLoggerAdapter(logging.getLogger("jailfs.cli"), {})


def _write_stdin(fs: JailedFilesystem, args: argparse.Namespace) -> Outcome:
    """Copy standard input into the target file."""
    outcome = fs.open(args.path, "a" if args.append else "w")
    if not isinstance(outcome, Found):
        return outcome
    try:
        with outcome.value as handle:
            shutil.copyfileobj(sys.stdin.buffer, handle)
    except OSError as error:
        return Failed(OperationError.from_exception("write", normalize(args.path), error))
    return outcome


COMMANDS: dict[str, Callable[[JailedFilesystem, argparse.Namespace], Outcome]] = {
    "stat": lambda fs, args: fs.stat(args.path),
    "cat": lambda fs, args: fs.read(args.path),
    "ls": lambda fs, args: fs.readdir(args.path),
    "write": _write_stdin,
    "mkdir": lambda fs, args: fs.mkdir(args.path, args.mode, args.parents),
    "rmdir": lambda fs, args: fs.rmdir(args.path, args.recursive),
    "rm": lambda fs, args: fs.remove(args.path),
    "mv": lambda fs, args: fs.rename(args.old_path, args.new_path),
    "put": lambda fs, args: fs.put(args.external_path, args.path),
}


def _render(command: str, value) -> None:
    """Print the payload of a successful command."""
    if command == "stat":
        print(json.dumps(value.to_dict(), sort_keys=True))
    elif command == "cat":
        sys.stdout.flush()
        sys.stdout.buffer.write(value)
        sys.stdout.buffer.flush()
    elif command == "ls":
        for name in sorted(value):
            print(name)


def _target_of(args: argparse.Namespace) -> str:
    """Return the virtual path a command acted on."""
    return getattr(args, "path", None) or getattr(args, "old_path", "/")


def run_command(fs: JailedFilesystem, args: argparse.Namespace) -> int:
    """Execute one parsed command and map its outcome to an exit code."""
    outcome = COMMANDS[args.command](fs, args)
    if isinstance(outcome, Absent):
        print(f"not found: {normalize(_target_of(args))}", file=sys.stderr)
        return EXIT_ABSENT
    if isinstance(outcome, Failed):
        print(str(outcome.error), file=sys.stderr)
        return EXIT_FAILED
    _render(args.command, outcome.value)
    return EXIT_FOUND


def main(argv: Optional[list[str]] = None) -> int:
    """Parse arguments, build the jail and run the requested command."""
    args = parse_cli_args(sys.argv[1:] if argv is None else argv)
    settings = settings_from_args(args)
    configure_logging(
        args.log_level,
        args.log_destination,
        use_json=args.log_format == "json",
        redact_root=os.path.realpath(settings.root),
    )

    with correlation_scope():
        try:
            fs = JailedFilesystem.from_root(
                settings.root,
                settings.follow_symlinks,
                content_type=guess_content_type,
            )
        except JailConstructionError as error:
            CLI_LOGGER.critical(
                "Invalid jail root",
                extra={"event": "jail_invalid", "root": settings.root},
            )
            print(str(error), file=sys.stderr)
            return EXIT_INVALID_JAIL

        exit_code = run_command(fs, args)
        CLI_LOGGER.info(
            "Command finished",
            extra={
                "event": "command_finished",
                "operation": args.command,
                "exit_code": exit_code,
            },
        )
        return exit_code


if __name__ == "__main__":
    sys.exit(main())
