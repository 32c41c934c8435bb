"""
Build command implementation.

Resolves the target environment, plans the build from the project's marker
files and runs it.
"""

import logging
import os
import shlex
from pathlib import Path
from typing import Mapping, Optional, Sequence

from crossenv.build import CommandExecutor, ExecutionResult
from crossenv.cli.utils import (
    load_effective_config,
    print_error,
    print_warning,
    project_root_for,
)
from crossenv.config import CrossEnvConfig
from crossenv.environment import EnvironmentResolver
from crossenv.project import Dispatcher, ProjectMarkers, scan_markers

logger = logging.getLogger(__name__)


def build_environment(
    target: Optional[str], config: CrossEnvConfig
) -> Mapping[str, str]:
    """
    Environment a build runs with.

    Cross builds get the resolved target environment (warnings are printed to
    stderr); host builds only get the configured overrides.

    Raises:
        UnknownTargetError: If the target is not registered
    """
    if target is None:
        return dict(config.env)

    environment = EnvironmentResolver(config.registry()).resolve(
        target,
        overrides=config.env,
        options=config.resolve_options(),
        ambient=os.environ,
    )
    for message in environment.warnings:
        print_warning(message)
    return environment


def execute_build(
    project_root: Path,
    markers: Optional[ProjectMarkers],
    target: Optional[str],
    config: CrossEnvConfig,
    dry_run: bool = False,
    command: Optional[Sequence[str]] = None,
) -> ExecutionResult:
    """
    Resolve, plan and run a build for one target.

    Args:
        project_root: Project directory (working directory of every step)
        markers: Scanned project markers (unused when command is given)
        target: Target identifier, or None for a host build
        config: Effective configuration
        dry_run: Show commands without running them
        command: Run this argv instead of the detected build

    Returns:
        ExecutionResult

    Raises:
        CrossEnvError: If the target is unknown or the project cannot be built for it
    """
    dispatcher = Dispatcher(config.registry())

    if command:
        plan = dispatcher.plan_command(command, target)
        logger.info(f"Running {shlex.join(command)} for {target or 'host'}")
    else:
        plan = dispatcher.plan_for_markers(markers, target, config.plan_options())
        logger.info(f"{plan.classification} build for {target or 'host'}")

    environment = build_environment(target, config)
    return CommandExecutor(dry_run=dry_run).run(plan, environment, cwd=project_root)


def run(args) -> int:
    """
    Run the build command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, the failing step's exit code otherwise)
    """
    project_root = project_root_for(args)
    try:
        config = load_effective_config(args)
        markers = scan_markers(project_root)
    except (FileNotFoundError, NotADirectoryError, ValueError) as e:
        print_error(str(e))
        return 1

    target = args.target or config.target
    result = execute_build(project_root, markers, target, config, args.dry_run)

    if not result.success:
        print_error(
            f"Build failed for {target or 'host'}",
            result.failed_step.command_line() if result.failed_step else None,
        )
        return result.returncode

    logger.info(f"Build succeeded for {target or 'host'}")
    return 0
