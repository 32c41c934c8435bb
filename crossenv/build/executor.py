"""
Command executor: runs a BuildPlan with a resolved environment.

Each step runs with the process environment, overlaid with the resolved
target environment, overlaid with the step's own variables. Execution stops
at the first failing step unless the step is marked ``check=False`` (the
equivalent of ``|| true`` in a shell script).
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from crossenv.core.exceptions import CrossEnvError, ExecutionError
from crossenv.project.dispatcher import BuildPlan, BuildStep

logger = logging.getLogger(__name__)


@dataclass
class StepResult:
    """Outcome of one build step."""

    step: BuildStep
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class ExecutionResult:
    """Outcome of a whole plan."""

    plan: BuildPlan
    steps: List[StepResult] = field(default_factory=list)
    failed_step: Optional[BuildStep] = None

    @property
    def success(self) -> bool:
        return self.failed_step is None

    @property
    def returncode(self) -> int:
        if self.failed_step is None:
            return 0
        for result in self.steps:
            if result.step is self.failed_step:
                return result.returncode or 1
        return 1


class CommandExecutor:
    """Run build plans as subprocesses."""

    def __init__(
        self, dry_run: bool = False, base_env: Optional[Mapping[str, str]] = None
    ):
        """
        Initialize executor.

        Args:
            dry_run: Log commands without running them
            base_env: Environment the steps inherit (default: os.environ)
        """
        self.dry_run = dry_run
        self.base_env = dict(os.environ if base_env is None else base_env)

    def step_environment(
        self, step: BuildStep, environment: Optional[Mapping[str, str]] = None
    ) -> Dict[str, str]:
        env = dict(self.base_env)
        env.update(environment or {})
        env.update(step.env)
        return env

    def run(
        self,
        plan: BuildPlan,
        environment: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> ExecutionResult:
        """
        Execute all steps of a plan in order.

        Args:
            plan: Build plan
            environment: Resolved target environment
            cwd: Working directory (the project root)

        Returns:
            ExecutionResult; failed_step is set when a checked step failed

        Raises:
            ExecutionError: If a checked step's command cannot be started
        """
        result = ExecutionResult(plan=plan)

        for step in plan.steps:
            logger.info(f"$ {step.command_line()}")

            if self.dry_run:
                result.steps.append(StepResult(step, 0))
                continue

            returncode = self._run_step(step, environment, cwd)
            result.steps.append(StepResult(step, returncode))

            if returncode != 0:
                if step.check:
                    logger.error(
                        f"Step '{step.description or step.argv[0]}' failed "
                        f"with exit code {returncode}"
                    )
                    result.failed_step = step
                    break
                logger.warning(
                    f"Ignoring failure of '{step.description or step.argv[0]}' "
                    f"(exit code {returncode})"
                )

        return result

    def _run_step(
        self,
        step: BuildStep,
        environment: Optional[Mapping[str, str]],
        cwd: Optional[Path],
    ) -> int:
        try:
            completed = subprocess.run(
                list(step.argv),
                cwd=str(cwd) if cwd else None,
                env=self.step_environment(step, environment),
            )
        except FileNotFoundError:
            if step.check:
                raise ExecutionError(f"Command not found: {step.argv[0]}") from None
            logger.warning(f"Command not found, skipping: {step.argv[0]}")
            return 127
        except OSError as e:
            raise ExecutionError(f"Failed to run {step.argv[0]}: {e}") from e
        return completed.returncode


@dataclass
class BuildAllSummary:
    """Per-target outcome of a multi-target build."""

    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.failed


def build_all(
    targets: Sequence[str],
    build_one: Callable[[str], ExecutionResult],
) -> BuildAllSummary:
    """
    Build for several targets in sequence, continuing past failures.

    Args:
        targets: Target ids, in build order
        build_one: Resolves, plans and runs the build for one target

    Returns:
        BuildAllSummary with succeeded targets and failure reasons
    """
    summary = BuildAllSummary()

    for target in targets:
        logger.info("=" * 46)
        logger.info(f"Building for: {target}")
        logger.info("=" * 46)
        try:
            result = build_one(target)
        except CrossEnvError as e:
            logger.error(f"FAILED: {target}: {e}")
            summary.failed[target] = str(e)
            continue

        if result.success:
            logger.info(f"SUCCESS: {target}")
            summary.succeeded.append(target)
        else:
            reason = f"exit code {result.returncode}"
            if result.failed_step is not None:
                reason = f"{result.failed_step.command_line()}: {reason}"
            logger.error(f"FAILED: {target}")
            summary.failed[target] = reason

    return summary
