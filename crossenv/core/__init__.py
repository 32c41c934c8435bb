"""
Core functionality for crossenv.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    CrossEnvError,
    TargetError,
    UnknownTargetError,
    DispatchError,
    UnsupportedClassificationError,
    UnmappedEcosystemTargetError,
    ConfigError,
    ExecutionError,
)
from .platform import PlatformInfo, detect_platform, clear_platform_cache

__all__ = [
    "CrossEnvError",
    "TargetError",
    "UnknownTargetError",
    "DispatchError",
    "UnsupportedClassificationError",
    "UnmappedEcosystemTargetError",
    "ConfigError",
    "ExecutionError",
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
]
