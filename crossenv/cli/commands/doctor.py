"""
Doctor command for diagnosing toolchain installation issues.

Reports the host platform, then checks that the executables a target profile
names (compilers, archiver, ranlib, strip) are on PATH, together with the
optional compiler cache and mold linker when the configuration enables them.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from typing import List, Optional, Sequence

from crossenv.cli.utils import load_effective_config
from crossenv.config import CrossEnvConfig
from crossenv.core.platform import PlatformInfo, detect_platform
from crossenv.targets import ToolchainProfile

logger = logging.getLogger(__name__)


@dataclass
class CheckResult:
    """Result of a health check."""

    name: str
    passed: bool
    message: str
    fix_command: Optional[str] = None
    critical: bool = True


class ToolchainChecker:
    """Check that toolchain executables can be found."""

    def __init__(self, path: Optional[str] = None):
        """
        Initialize checker.

        Args:
            path: PATH to search (default: the PATH environment variable)
        """
        self.path = os.environ.get("PATH", "") if path is None else path

    def find_tool(self, tool: str, search_paths: Sequence[str] = ()) -> Optional[str]:
        """Locate an executable, searching the profile's extra directories first."""
        path = os.pathsep.join(list(search_paths) + [self.path])
        return shutil.which(tool, path=path)

    def check_target(self, profile: ToolchainProfile, critical: bool = True) -> CheckResult:
        """
        Check every tool a target profile requires.

        Returns:
            CheckResult listing the missing tools, if any
        """
        missing = [
            tool
            for tool in profile.required_tools()
            if not self.find_tool(tool, profile.search_paths)
        ]
        if not missing:
            return CheckResult(
                name=profile.target_id,
                passed=True,
                message=f"{len(profile.required_tools())} tools found",
                critical=critical,
            )

        fix = None
        if profile.search_paths:
            fix = f"Install the toolchain into {profile.search_paths[0]}"
        return CheckResult(
            name=profile.target_id,
            passed=False,
            message=f"missing: {', '.join(missing)}",
            fix_command=fix,
            critical=critical,
        )

    def check_host(self, info: Optional[PlatformInfo] = None) -> CheckResult:
        """
        Report the host platform.

        The toolchain image is built for x86_64 and aarch64 Linux hosts; other
        hosts only warn.
        """
        info = info or detect_platform()
        if info.os == "linux" and info.arch in ("amd64", "arm64"):
            return CheckResult(
                name="host", passed=True, message=str(info), critical=False
            )
        return CheckResult(
            name="host",
            passed=False,
            message=f"{info} is not a Linux x86_64/aarch64 host",
            critical=False,
        )

    def check_optional_tool(self, tool: str, purpose: str) -> CheckResult:
        """Check a tool that only degrades the build when absent."""
        location = self.find_tool(tool)
        if location:
            return CheckResult(
                name=tool, passed=True, message=location, critical=False
            )
        return CheckResult(
            name=tool,
            passed=False,
            message=f"not found ({purpose} will be unavailable)",
            critical=False,
        )


def run_checks(
    config: CrossEnvConfig,
    target: Optional[str] = None,
    checker: Optional[ToolchainChecker] = None,
) -> List[CheckResult]:
    """
    Run all checks for one target, or for every registered target.

    With an explicit target, missing tools are failures; when surveying every
    target they are reported as warnings.

    Raises:
        UnknownTargetError: If target is not registered
    """
    checker = checker or ToolchainChecker()
    registry = config.registry()
    results = [checker.check_host()]

    if target:
        results.append(checker.check_target(registry.lookup(target)))
    else:
        results.extend(
            checker.check_target(profile, critical=False) for profile in registry
        )

    if config.cache.tool != "none":
        results.append(checker.check_optional_tool(config.cache.tool, "build caching"))
    if config.mold:
        results.append(checker.check_optional_tool("mold", "mold linking"))
    return results


def run(args) -> int:
    """
    Run doctor command.

    Args:
        args: Parsed arguments from argparse

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    quiet = args.quiet
    config = load_effective_config(args)
    target = args.target or config.target

    if not quiet:
        print(f"Checking toolchains for {target or 'all targets'}...\n")

    passed = 0
    failed = 0
    warnings = 0

    for result in run_checks(config, target):
        if result.passed:
            passed += 1
            if not quiet:
                print(f"[OK]      {result.name}: {result.message}")
            logger.debug(f"Check passed: {result.name}")
            continue

        if result.critical:
            failed += 1
            print(f"[MISSING] {result.name}: {result.message}")
            logger.debug(f"Check failed: {result.name}: {result.message}")
        else:
            warnings += 1
            if not quiet:
                print(f"[WARN]    {result.name}: {result.message}")

        if result.fix_command and not quiet:
            print(f"          Fix: {result.fix_command}")

    if not quiet:
        print(f"\nSummary: {passed} passed, {failed} failed, {warnings} warnings")

    return 1 if failed else 0
