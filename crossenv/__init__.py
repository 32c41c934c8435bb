"""
crossenv - build environment resolution for a cross-compilation toolchain image.

Maps target identifiers (``linux-arm64``, ``windows-amd64``, ``wasi``, ``cosmo``...)
to complete compiler environments, and project directories to build plans.

Usage:
    from crossenv import EnvironmentResolver, Dispatcher, get_registry, scan_markers

    env = EnvironmentResolver().resolve("linux-arm64")
    markers = scan_markers(Path("."))
    plan = Dispatcher().plan_for_markers(markers, "linux-arm64")
"""

from crossenv.core.exceptions import (
    CrossEnvError,
    UnknownTargetError,
    UnsupportedClassificationError,
    UnmappedEcosystemTargetError,
)
from crossenv.targets import (
    StaticLinkSupport,
    TargetFamily,
    TargetRegistry,
    ToolchainProfile,
    get_registry,
)
from crossenv.environment import (
    EnvironmentResolver,
    ResolvedEnvironment,
    ResolveOptions,
)
from crossenv.project import (
    BuildPlan,
    BuildStep,
    Dispatcher,
    ProjectClassification,
    ProjectMarkers,
    detect,
    scan_markers,
)

__version__ = "0.3.0"

__all__ = [
    "CrossEnvError",
    "UnknownTargetError",
    "UnsupportedClassificationError",
    "UnmappedEcosystemTargetError",
    "StaticLinkSupport",
    "TargetFamily",
    "TargetRegistry",
    "ToolchainProfile",
    "get_registry",
    "EnvironmentResolver",
    "ResolvedEnvironment",
    "ResolveOptions",
    "BuildPlan",
    "BuildStep",
    "Dispatcher",
    "ProjectClassification",
    "ProjectMarkers",
    "detect",
    "scan_markers",
    "__version__",
]
