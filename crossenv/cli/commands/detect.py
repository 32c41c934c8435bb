"""
Detect command implementation.

Prints the classification of a project directory.
"""

import logging

from crossenv.cli.utils import print_error, project_root_for
from crossenv.project import ProjectClassification, detect, explain, scan_markers

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the detect command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 when a build system was recognised, 1 otherwise)
    """
    project_root = project_root_for(args)
    try:
        markers = scan_markers(project_root)
    except (FileNotFoundError, NotADirectoryError) as e:
        print_error(str(e))
        return 1

    classification = detect(markers)
    logger.debug(f"Markers in {project_root}: {sorted(markers.names)}")
    logger.debug(f"Matched rule: {explain(markers)}")

    print(classification)
    return 0 if classification is not ProjectClassification.UNCLASSIFIED else 1
