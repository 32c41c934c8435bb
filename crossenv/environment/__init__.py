"""
Build environment resolution for crossenv.

Modules:
    resolver: Resolve a target id into an immutable environment mapping
    caching: Compiler launcher selection (sccache, ccache)
"""

from .caching import CompilerLauncher, select_launcher
from .resolver import (
    MOLD_FLAG,
    EnvironmentResolver,
    ResolvedEnvironment,
    ResolveOptions,
)

__all__ = [
    "CompilerLauncher",
    "select_launcher",
    "MOLD_FLAG",
    "EnvironmentResolver",
    "ResolvedEnvironment",
    "ResolveOptions",
]
