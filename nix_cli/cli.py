"""CLI interface.

Entry point: nix-cli install <package>
"""

import argparse
import sys
from dataclasses import dataclass

from .errors import UsageError

USAGE = "Usage: nix-cli <command> [args]"
INSTALL_USAGE = "Usage: nix-cli install <package>"

COMMANDS = ("install",)


@dataclass
class InstallCommand:
    package: str
    command: str = "install"


class _Parser(argparse.ArgumentParser):
    """ArgumentParser that raises UsageError instead of exiting with code 2."""

    def error(self, message):
        raise UsageError(USAGE)


def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(prog="nix-cli", description="Install Nix packages with an agent", add_help=False)
    parser.add_argument("command", nargs="?")
    parser.add_argument("package", nargs="?")
    return parser


def parse_args(argv: list[str]) -> InstallCommand:
    """Parse argv (without the program name). Raises UsageError."""
    args = _build_parser().parse_args(argv)
    if not args.command:
        raise UsageError(USAGE)
    if args.command not in COMMANDS:
        raise UsageError(f"Unsupported command: {args.command}")
    if not args.package:
        raise UsageError(INSTALL_USAGE)
    return InstallCommand(package=args.package)


# --- Subcommands ---


def cmd_install(command: InstallCommand) -> None:
    """Run an install against a fresh agent server."""
    import asyncio

    from .install import run_install

    asyncio.run(run_install(command.package))


def main(argv: list[str] | None = None):
    from .logging_config import setup_process_logging

    try:
        command = parse_args(sys.argv[1:] if argv is None else argv)
    except UsageError as e:
        print(e.message)
        sys.exit(1)

    setup_process_logging("nix-cli")
    cmd_install(command)


if __name__ == "__main__":
    main()
