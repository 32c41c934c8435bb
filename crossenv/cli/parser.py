"""
crossenv CLI argument parser.

This module implements the command-line interface for crossenv using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from crossenv.cli.utils import print_error
from crossenv.core.exceptions import CrossEnvError

# Get version from package
try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("crossenv")
except PackageNotFoundError:
    __version__ = "0.3.0"

logger = logging.getLogger(__name__)


class CLI:
    """crossenv command-line interface."""

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
            prog="crossenv",
            description="crossenv - cross-compilation environments for every target",
            epilog='Use "crossenv COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"crossenv {__version__}"
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
            help="Path to configuration file (default: ./crossenv.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=None,
            help="Project root directory (default: current directory)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_list_targets_command(subparsers)
        self._add_info_command(subparsers)
        self._add_env_command(subparsers)
        self._add_detect_command(subparsers)
        self._add_plan_command(subparsers)
        self._add_build_command(subparsers)
        self._add_build_all_command(subparsers)
        self._add_exec_command(subparsers)
        self._add_check_static_command(subparsers)
        self._add_doctor_command(subparsers)

        return parser

    def _add_list_targets_command(self, subparsers):
        """Add 'list-targets' subcommand."""
        parser = subparsers.add_parser(
            "list-targets",
            help="List supported targets",
            description="List all supported targets grouped by OS family",
        )
        parser.add_argument(
            "--format",
            choices=["text", "json"],
            default="text",
            help="Output format (default: text)",
        )

    def _add_info_command(self, subparsers):
        """Add 'info' subcommand."""
        parser = subparsers.add_parser(
            "info",
            help="Show a target's toolchain profile",
            description="Show compilers, tools and static linking support of a target",
        )
        parser.add_argument("target", metavar="TARGET", help="Target identifier")

    def _add_env_command(self, subparsers):
        """Add 'env' subcommand."""
        parser = subparsers.add_parser(
            "env",
            help="Print the build environment for a target",
            description="Resolve and print the build environment for a target",
            epilog='Example: eval "$(crossenv env linux-arm64)"',
        )
        parser.add_argument(
            "target",
            metavar="TARGET",
            nargs="?",
            help="Target identifier (default: TARGET or crossenv.yaml)",
        )
        parser.add_argument(
            "--no-ccache", action="store_true", help="Do not wrap compilers with ccache"
        )
        parser.add_argument(
            "--sccache", action="store_true", help="Wrap compilers with sccache"
        )
        parser.add_argument("--mold", action="store_true", help="Link with mold")
        parser.add_argument(
            "--no-static", action="store_true", help="Do not request static linking"
        )
        parser.add_argument(
            "--set",
            action="append",
            metavar="KEY=VALUE",
            help="Override a variable (repeatable)",
        )
        parser.add_argument(
            "--format",
            choices=["shell", "json", "dotenv"],
            default="shell",
            help="Output format (default: shell)",
        )

    def _add_detect_command(self, subparsers):
        """Add 'detect' subcommand."""
        parser = subparsers.add_parser(
            "detect",
            help="Detect the project's build system",
            description="Classify a project directory from its marker files",
        )
        parser.add_argument(
            "path", nargs="?", type=Path, help="Project directory (default: .)"
        )

    def _add_plan_command(self, subparsers):
        """Add 'plan' subcommand."""
        parser = subparsers.add_parser(
            "plan",
            help="Show the build commands for a project",
            description="Print the build plan without running it",
        )
        self._add_build_arguments(parser)

    def _add_build_command(self, subparsers):
        """Add 'build' subcommand."""
        parser = subparsers.add_parser(
            "build",
            help="Build a project for a target",
            description="Resolve the target environment, plan and run the build",
        )
        self._add_build_arguments(parser)
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show commands without running them",
        )

    def _add_build_all_command(self, subparsers):
        """Add 'build-all' subcommand."""
        parser = subparsers.add_parser(
            "build-all",
            help="Build a project for several targets",
            description="Build for several targets in sequence and print a summary",
        )
        parser.add_argument(
            "path", nargs="?", type=Path, help="Project directory (default: .)"
        )
        parser.add_argument(
            "--targets",
            nargs="+",
            metavar="TARGET",
            help="Targets to build (default: crossenv.yaml targets or the core set)",
        )
        parser.add_argument(
            "--command",
            "-c",
            dest="build_command",
            metavar="CMD",
            help="Command to run for each target instead of the detected build",
        )
        parser.add_argument(
            "--jobs", "-j", type=int, metavar="N", help="Parallel build jobs"
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show commands without running them",
        )

    def _add_exec_command(self, subparsers):
        """Add 'exec' subcommand."""
        parser = subparsers.add_parser(
            "exec",
            help="Run a command in a target's build environment",
            description="Resolve the target environment and run COMMAND in it",
            epilog="Example: crossenv exec linux-arm64 -- make -j8",
        )
        parser.add_argument("target", metavar="TARGET", help="Target identifier")
        parser.add_argument(
            "cmd",
            nargs=argparse.REMAINDER,
            metavar="COMMAND",
            help="Command and arguments (after --)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show the command without running it (give it before TARGET)",
        )

    def _add_check_static_command(self, subparsers):
        """Add 'check-static' subcommand."""
        parser = subparsers.add_parser(
            "check-static",
            help="Check binaries for dynamic dependencies",
            description="Report whether binaries are statically linked, and their size",
        )
        parser.add_argument(
            "binaries", nargs="+", type=Path, metavar="BINARY", help="Files to check"
        )

    def _add_doctor_command(self, subparsers):
        """Add 'doctor' subcommand."""
        parser = subparsers.add_parser(
            "doctor",
            help="Check that toolchains are installed",
            description="Check that the tools a target needs are on PATH",
        )
        parser.add_argument(
            "--target",
            metavar="TARGET",
            help="Target to check (default: every registered target)",
        )

    @staticmethod
    def _add_build_arguments(parser):
        parser.add_argument(
            "path", nargs="?", type=Path, help="Project directory (default: .)"
        )
        parser.add_argument(
            "--target",
            metavar="TARGET",
            help="Target identifier (default: TARGET or crossenv.yaml, else host)",
        )
        parser.add_argument(
            "--jobs", "-j", type=int, metavar="N", help="Parallel build jobs"
        )

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

        # Dispatch to command handler
        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except CrossEnvError as e:
            logger.debug(f"{type(e).__name__}: {e}")
            print_error(str(e))
            return 1
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
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
        command_map = {
            "list-targets": "crossenv.cli.commands.list_targets",
            "info": "crossenv.cli.commands.info",
            "env": "crossenv.cli.commands.env",
            "detect": "crossenv.cli.commands.detect",
            "plan": "crossenv.cli.commands.plan",
            "build": "crossenv.cli.commands.build",
            "build-all": "crossenv.cli.commands.build_all",
            "exec": "crossenv.cli.commands.exec",
            "check-static": "crossenv.cli.commands.check_static",
            "doctor": "crossenv.cli.commands.doctor",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            logger.error(f"Failed to load command module: {e}")
            return 1

        # Call run() function in module
        if not hasattr(module, "run"):
            logger.error(f"Command module {module_name} has no run() function")
            return 1

        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
