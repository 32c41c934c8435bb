"""
Target registry for crossenv.

This package provides the compiled-in table of cross-compilation targets and
the ToolchainProfile describing each one.
"""

from crossenv.targets.profiles import (
    STATIC_LINK_FLAG,
    StaticLinkSupport,
    TargetFamily,
    ToolchainProfile,
)
from crossenv.targets.registry import TargetRegistry, get_registry

__all__ = [
    "STATIC_LINK_FLAG",
    "StaticLinkSupport",
    "TargetFamily",
    "ToolchainProfile",
    "TargetRegistry",
    "get_registry",
]
