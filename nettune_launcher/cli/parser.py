"""
nettune-launcher CLI argument parser.

This module implements the command-line interface using argparse.

Everything after the `run` command is passed to `nettune client` verbatim,
and `run` is implied when no command is given, so the launcher can stand in
for the binary in MCP client configurations:

    nettune-launcher --api-key KEY --server http://host:9876
    nettune-launcher --binary-version v0.3.1 run -- --api-key KEY
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from nettune_launcher import __version__
from nettune_launcher.core.exceptions import LauncherError

logger = logging.getLogger(__name__)

COMMANDS = ("run", "ensure", "cleanup")
DEFAULT_COMMAND = "run"

_GLOBAL_FLAGS = {"-h", "--help", "--version", "-v", "--verbose", "-q", "--quiet"}
_GLOBAL_VALUE_OPTIONS = {"--config", "--cache-dir", "--repo", "--binary-version"}


class CLI:
    """nettune-launcher command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="nettune-launcher",
            description="Download, verify and run the nettune client",
            epilog='Arguments after "run" are passed to "nettune client" unchanged',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"nettune-launcher {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to YAML configuration file (default: $NETTUNE_CONFIG)",
        )
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="PATH",
            help="Binary cache directory (default: ~/.cache/nettune)",
        )
        parser.add_argument(
            "--repo",
            metavar="OWNER/NAME",
            help="GitHub repository publishing nettune releases",
        )
        parser.add_argument(
            "--binary-version",
            metavar="TAG",
            help='nettune release to use (default: "latest")',
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )
        subparsers.required = True

        self._add_run_command(subparsers)
        self._add_ensure_command(subparsers)
        self._add_cleanup_command(subparsers)

        return parser

    def _add_run_command(self, subparsers):
        """Add 'run' subcommand."""
        subparsers.add_parser(
            "run",
            help="Run nettune in client mode (default)",
            description=(
                "Ensure the nettune binary is installed, then run "
                '"nettune client ARGS..." with stdio passed through'
            ),
            add_help=False,
        )

    def _add_ensure_command(self, subparsers):
        """Add 'ensure' subcommand."""
        subparsers.add_parser(
            "ensure",
            help="Install the nettune binary and print its path",
            description="Download and verify the nettune binary if needed",
        )

    def _add_cleanup_command(self, subparsers):
        """Add 'cleanup' subcommand."""
        parser = subparsers.add_parser(
            "cleanup",
            help="Remove leftovers of interrupted downloads",
            description="Remove orphaned .tmp files from the binary cache",
        )
        parser.add_argument(
            "--max-age-hours",
            type=float,
            default=1.0,
            metavar="HOURS",
            help="Only remove files older than this (default: 1)",
        )

    def split_args(self, args: List[str]) -> Tuple[List[str], List[str]]:
        """
        Separate launcher arguments from arguments for `nettune client`.

        Returns:
            (launcher_args, client_args)
        """
        index = 0
        while index < len(args):
            arg = args[index]
            if arg in _GLOBAL_FLAGS:
                index += 1
            elif arg in _GLOBAL_VALUE_OPTIONS:
                index += 2
            elif "=" in arg and arg.split("=", 1)[0] in _GLOBAL_VALUE_OPTIONS:
                index += 1
            else:
                break

        index = min(index, len(args))
        launcher_args = args[:index]
        rest = args[index:]

        if rest and rest[0] in COMMANDS and rest[0] != DEFAULT_COMMAND:
            return launcher_args + rest, []

        if rest and rest[0] == DEFAULT_COMMAND:
            rest = rest[1:]
        if rest and rest[0] == "--":
            rest = rest[1:]
        return launcher_args + [DEFAULT_COMMAND], rest

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace; `client_args` holds the arguments
            for `nettune client`
        """
        if args is None:
            args = sys.argv[1:]
        launcher_args, client_args = self.split_args(list(args))
        parsed = self.parser.parse_args(launcher_args)
        parsed.client_args = client_args
        return parsed

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (the child's status for `run`)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except LauncherError as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                logger.debug("Traceback:", exc_info=True)
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        All diagnostics go to stderr: stdout belongs to the child.
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "[nettune-launcher] %(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "[nettune-launcher] %(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "run": "nettune_launcher.cli.commands.run",
            "ensure": "nettune_launcher.cli.commands.ensure",
            "cleanup": "nettune_launcher.cli.commands.cleanup",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
