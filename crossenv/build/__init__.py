"""Build execution and binary diagnostics."""

from crossenv.build.diagnostics import (
    SizeEntry,
    StaticCheckResult,
    check_static,
    format_size,
    size_report,
)
from crossenv.build.executor import (
    BuildAllSummary,
    CommandExecutor,
    ExecutionResult,
    StepResult,
    build_all,
)

__all__ = [
    "BuildAllSummary",
    "CommandExecutor",
    "ExecutionResult",
    "StepResult",
    "build_all",
    "SizeEntry",
    "StaticCheckResult",
    "check_static",
    "format_size",
    "size_report",
]
