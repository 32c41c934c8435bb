"""
Build-all command implementation.

Builds a project for several targets in sequence and prints a summary.
A failing target does not stop the remaining ones. With --command, the given
command (e.g. "make clean all") runs once per target instead of the detected
build.
"""

import logging
import shlex

from crossenv.build import build_all
from crossenv.cli.commands.build import execute_build
from crossenv.cli.utils import (
    load_effective_config,
    print_box,
    print_error,
    project_root_for,
)
from crossenv.project import scan_markers

logger = logging.getLogger(__name__)

# Core targets built when neither --targets nor crossenv.yaml names any
DEFAULT_TARGETS = (
    "linux-amd64",
    "linux-arm64",
    "linux-armv7",
    "linux-riscv64",
    "windows-amd64",
    "windows-arm64",
    "darwin-amd64",
    "darwin-arm64",
    "freebsd-amd64",
)


def run(args) -> int:
    """
    Run the build-all command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if every target built, 1 otherwise)
    """
    project_root = project_root_for(args)
    try:
        config = load_effective_config(args)
        command = shlex.split(args.build_command) if args.build_command else None
        markers = None if command else scan_markers(project_root)
    except (FileNotFoundError, NotADirectoryError, ValueError) as e:
        print_error(str(e))
        return 1

    targets = list(args.targets or config.targets or DEFAULT_TARGETS)
    logger.info(f"Building for {len(targets)} targets")
    if command:
        logger.info(f"Build command: {shlex.join(command)}")

    summary = build_all(
        targets,
        lambda target: execute_build(
            project_root, markers, target, config, args.dry_run, command
        ),
    )

    print()
    print_box("Build Summary")
    print()
    print(f"Succeeded ({len(summary.succeeded)}):")
    for target in summary.succeeded:
        print(f"  - {target}")
    print()

    if summary.failed:
        print(f"Failed ({len(summary.failed)}):")
        for target, reason in summary.failed.items():
            print(f"  - {target}: {reason}")
        print()
        return 1

    print("All builds succeeded!")
    return 0
