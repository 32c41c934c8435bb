"""
List-targets command implementation.

Prints every registered target grouped by OS family, in registry order.
"""

import json
import logging

from crossenv.cli.utils import load_effective_config

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the list-targets command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    registry = load_effective_config(args).registry()
    aliases = registry.aliases()

    if args.format == "json":
        entries = [
            {
                "target": profile.target_id,
                "family": profile.family.value,
                "description": profile.description,
                "static": profile.static_link_support.value,
                "alias_of": aliases.get(profile.target_id),
            }
            for profile in registry
        ]
        print(json.dumps(entries, indent=2))
        return 0

    width = max(len(target) for target in registry.list_targets())
    for family, profiles in registry.by_family().items():
        print(f"{family.value}:")
        for profile in profiles:
            line = f"  {profile.target_id:<{width}}  {profile.description}"
            if profile.target_id in aliases:
                line += f" (alias of {aliases[profile.target_id]})"
            print(line)
        print()

    logger.debug(f"Listed {len(registry)} targets")
    return 0
