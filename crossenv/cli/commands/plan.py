"""
Plan command implementation.

Prints the commands a build would run, without running them.
"""

import logging

from crossenv.cli.utils import load_effective_config, print_error, project_root_for
from crossenv.project import Dispatcher, scan_markers

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the plan command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    project_root = project_root_for(args)
    try:
        config = load_effective_config(args)
        markers = scan_markers(project_root)
    except (FileNotFoundError, NotADirectoryError, ValueError) as e:
        print_error(str(e))
        return 1

    target = args.target or config.target
    plan = Dispatcher(config.registry()).plan_for_markers(
        markers, target, config.plan_options()
    )

    print(f"# {plan.classification} build for {target or 'host'} in {project_root}")
    for step in plan.steps:
        prefix = "" if step.check else "# may fail: "
        print(f"{prefix}{step.command_line()}")
    return 0
