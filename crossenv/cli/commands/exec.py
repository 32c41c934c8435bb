"""
Exec command implementation.

Runs an arbitrary command in a target's resolved build environment, from the
project root:

    crossenv exec linux-arm64 -- ./configure --enable-static
"""

import logging

from crossenv.cli.commands.build import execute_build
from crossenv.cli.utils import load_effective_config, print_error, project_root_for

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the exec command.

    Args:
        args: Parsed command-line arguments

    Returns:
        The command's exit code
    """
    command = list(args.cmd)
    if command and command[0] == "--":
        command = command[1:]
    if not command:
        print_error("No command given", "Usage: crossenv exec TARGET -- COMMAND...")
        return 1

    project_root = project_root_for(args)
    try:
        config = load_effective_config(args)
    except ValueError as e:
        print_error(str(e))
        return 1

    result = execute_build(
        project_root, None, args.target, config, args.dry_run, command
    )
    if not result.success:
        logger.debug(f"{command[0]} exited with {result.returncode}")
    return result.returncode
