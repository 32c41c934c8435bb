"""
Compiler launcher (build cache) selection for ccache and sccache.

The launcher is applied by prefixing the compiler command, the same way the
toolchain image's entrypoint does (``CC="ccache gcc"``), plus the cache-tool
environment variables.

Usage:
    from crossenv.environment.caching import select_launcher

    launcher = select_launcher(use_ccache=True, use_sccache=False)
    launcher.wrap(("aarch64-linux-gcc",))   # ('ccache', 'aarch64-linux-gcc')
    launcher.environment()                  # {'CCACHE_DIR': '/workspace/.ccache'}
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

CACHE_TOOLS = ("sccache", "ccache")

DEFAULT_CCACHE_DIR = "/workspace/.ccache"
DEFAULT_SCCACHE_DIR = "/workspace/.sccache"


@dataclass(frozen=True)
class CompilerLauncher:
    """
    A compiler cache tool used as a compiler launcher.

    Attributes:
        tool: Cache tool name ('sccache' or 'ccache')
        cache_dir: Directory for cached compilation results
        max_size: Maximum cache size (e.g. '10G'), None for the tool default
    """

    tool: str
    cache_dir: str
    max_size: Optional[str] = None

    def __post_init__(self):
        if self.tool not in CACHE_TOOLS:
            raise ValueError(
                f"Invalid cache tool: {self.tool}. Must be 'sccache' or 'ccache'."
            )

    def wrap(self, command: Sequence[str]) -> Tuple[str, ...]:
        """
        Prefix a compiler argv with the cache tool.

        Commands that are already wrapped are returned unchanged.
        """
        command = tuple(command)
        if command and command[0] in CACHE_TOOLS:
            return command
        return (self.tool,) + command

    def environment(self) -> Dict[str, str]:
        """
        Tool-specific environment variables.

        Returns:
            sccache: SCCACHE_DIR, SCCACHE_CACHE_SIZE, RUSTC_WRAPPER
            ccache: CCACHE_DIR, CCACHE_MAXSIZE
        """
        env_vars = {}

        if self.tool == "sccache":
            env_vars["SCCACHE_DIR"] = self.cache_dir
            if self.max_size:
                env_vars["SCCACHE_CACHE_SIZE"] = self.max_size
            env_vars["RUSTC_WRAPPER"] = "sccache"
        else:
            env_vars["CCACHE_DIR"] = self.cache_dir
            if self.max_size:
                env_vars["CCACHE_MAXSIZE"] = self.max_size

        logger.debug(f"Configured {self.tool} environment: {env_vars}")
        return env_vars


def select_launcher(
    use_ccache: bool = True,
    use_sccache: bool = False,
    ccache_dir: str = DEFAULT_CCACHE_DIR,
    sccache_dir: str = DEFAULT_SCCACHE_DIR,
    max_size: Optional[str] = None,
) -> Optional[CompilerLauncher]:
    """
    Pick the compiler launcher. sccache wins when both are requested.

    Returns:
        CompilerLauncher, or None when caching is disabled
    """
    if use_sccache:
        return CompilerLauncher("sccache", sccache_dir, max_size)
    if use_ccache:
        return CompilerLauncher("ccache", ccache_dir, max_size)
    return None
