"""
Env command implementation.

Prints the resolved build environment for a target, by default as shell
``export`` lines suitable for ``eval``. Warnings go to stderr so that stdout
stays machine-readable.
"""

import json
import logging
import os

from crossenv.cli.utils import load_effective_config, print_error, print_warning
from crossenv.environment import EnvironmentResolver

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the env command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    try:
        config = load_effective_config(args)
    except ValueError as e:
        print_error(str(e))
        return 1

    target = args.target or config.target
    if not target:
        print_error(
            "No target given",
            "Pass TARGET, set the TARGET variable or add 'target:' to crossenv.yaml",
        )
        return 1

    resolver = EnvironmentResolver(config.registry())
    environment = resolver.resolve(
        target,
        overrides=config.env,
        options=config.resolve_options(),
        ambient=os.environ,
    )

    for message in environment.warnings:
        print_warning(message)

    if args.format == "json":
        print(json.dumps(environment.as_dict(), indent=2))
    elif args.format == "dotenv":
        print(environment.to_dotenv())
    else:
        print(environment.to_shell())

    logger.debug(f"Printed {len(environment)} variables for {target}")
    return 0
