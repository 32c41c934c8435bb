"""
Check-static command implementation.

Reports whether binaries are statically linked, followed by a size report.
"""

import logging

from crossenv.build import check_static, size_report
from crossenv.cli.utils import print_error, print_warning

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the check-static command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 if no binary has dynamic dependencies, 1 otherwise)
    """
    failed = False
    checked = []

    for binary in args.binaries:
        try:
            result = check_static(binary)
        except FileNotFoundError as e:
            print_error(str(e))
            failed = True
            continue

        checked.append(binary)
        print(f"{binary}: {result.summary()}")
        if result.interpreter:
            print(f"  interpreter: {result.interpreter}")
        for library in result.needed:
            print(f"  needs: {library}")
        if result.file_description:
            logger.debug(f"{binary}: {result.file_description}")

        if result.is_static is None:
            print_warning(f"Could not determine linkage of {binary}")
        elif not result.is_static:
            failed = True

    if checked:
        print()
        print("Binary sizes:")
        for entry in size_report(checked):
            print(f"  {entry.human_size:>6}  {entry.path}")

    return 1 if failed else 0
