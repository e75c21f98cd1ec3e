"""
fel4kit CLI argument parser.

This module implements the command-line interface for fel4kit using argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from fel4kit.config.loader import DEFAULT_MANIFEST_NAME
from fel4kit.core.exceptions import Fel4KitError
from fel4kit.core.identifiers import BuildProfile, SupportedPlatform, SupportedTarget

# Get version from package
try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("fel4kit")
except PackageNotFoundError:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """fel4kit command-line interface."""

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
            prog="fel4kit",
            description="fel4kit - Layered build configuration for fel4/seL4",
            epilog='Use "fel4kit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"fel4kit {__version__}"
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
            "--manifest",
            type=Path,
            metavar="PATH",
            default=Path(DEFAULT_MANIFEST_NAME),
            help=f"Path to manifest file (default: ./{DEFAULT_MANIFEST_NAME})",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_list_command(subparsers)
        self._add_resolve_command(subparsers)
        self._add_check_command(subparsers)
        self._add_cmake_args_command(subparsers)

        return parser

    def _add_selection_arguments(self, parser):
        """Add --target/--platform/--profile options."""
        parser.add_argument(
            "--target",
            choices=SupportedTarget.all_names(),
            metavar="TARGET",
            help=f"Target ({'|'.join(SupportedTarget.all_names())})",
        )
        parser.add_argument(
            "--platform",
            choices=SupportedPlatform.all_names(),
            metavar="PLATFORM",
            help=f"Platform ({'|'.join(SupportedPlatform.all_names())})",
        )
        parser.add_argument(
            "--profile",
            choices=BuildProfile.all_names(),
            metavar="PROFILE",
            help=f"Build profile ({'|'.join(BuildProfile.all_names())})",
        )

    def _add_list_command(self, subparsers):
        """Add 'list' subcommand."""
        parser = subparsers.add_parser(
            "list",
            help="List supported identifiers",
            description="List supported targets, platforms and build profiles",
        )
        parser.add_argument(
            "kind",
            nargs="?",
            choices=["targets", "platforms", "profiles"],
            help="Identifier kind to list (default: all)",
        )

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Resolve the manifest for one target/platform/profile",
            description="Merge manifest layers and print the resolved configuration",
        )
        self._add_selection_arguments(parser)
        parser.add_argument(
            "--format",
            choices=["json", "yaml"],
            default="json",
            help="Output format (default: json)",
        )

    def _add_check_command(self, subparsers):
        """Add 'check' subcommand."""
        subparsers.add_parser(
            "check",
            help="Validate the manifest",
            description="Resolve every combination and report manifest problems",
        )

    def _add_cmake_args_command(self, subparsers):
        """Add 'cmake-args' subcommand."""
        parser = subparsers.add_parser(
            "cmake-args",
            help="Print CMake -D arguments",
            description="Print CMake cache arguments for the resolved configuration",
        )
        self._add_selection_arguments(parser)

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Check if command specified
        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Fel4KitError as e:
            logger.error(f"Error: {e}")
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
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
        from fel4kit.cli.commands import check, cmake_args, list_identifiers, resolve

        command_map = {
            "list": list_identifiers.run,
            "resolve": resolve.run,
            "check": check.run,
            "cmake-args": cmake_args.run,
        }

        handler = command_map.get(args.command)
        if not handler:
            logger.error(f"Unknown command: {args.command}")
            return 1

        return handler(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
