"""
Shared utilities for CLI commands.

Provides configuration loading, flag handling and output helpers used across
the command modules.
"""

import dataclasses
import logging
import os
import sys
from pathlib import Path
from typing import Dict, Iterable, Optional

from crossenv.config import CrossEnvConfig, load_config

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Management
# ============================================================================


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """
    Resolve project root directory.

    Args:
        path: Optional path (defaults to current directory)

    Returns:
        Resolved absolute path
    """
    if path is None:
        path = Path.cwd()
    return Path(path).resolve()


def project_root_for(args) -> Path:
    """Project directory from a positional PATH argument or --project-root."""
    path = getattr(args, "path", None) or getattr(args, "project_root", None)
    return resolve_project_root(path)


def load_effective_config(args) -> CrossEnvConfig:
    """
    Load configuration with all layers applied.

    Precedence, highest first: command-line flags, environment variables,
    crossenv.yaml, defaults.

    Args:
        args: Parsed arguments (config, project_root and command flags)

    Returns:
        Effective CrossEnvConfig

    Raises:
        ConfigError: If crossenv.yaml or an environment variable is invalid
    """
    config = load_config(
        project_root_for(args), getattr(args, "config", None), os.environ
    )
    return apply_cli_flags(config, args)


def apply_cli_flags(config: CrossEnvConfig, args) -> CrossEnvConfig:
    """Apply command-line flags on top of a configuration (returns a copy)."""
    cache = dataclasses.replace(config.cache)
    config = dataclasses.replace(config, cache=cache, env=dict(config.env))

    if getattr(args, "no_ccache", False) and cache.tool == "ccache":
        cache.tool = "none"
    if getattr(args, "sccache", False):
        cache.tool = "sccache"
    if getattr(args, "mold", False):
        config.mold = True
    if getattr(args, "no_static", False):
        config.static = False
    if getattr(args, "jobs", None):
        config.build = dataclasses.replace(config.build, jobs=args.jobs)

    config.env.update(parse_env_pairs(getattr(args, "set", None) or []))
    return config


def parse_env_pairs(pairs: Iterable[str]) -> Dict[str, str]:
    """
    Parse KEY=VALUE strings.

    Raises:
        ValueError: If an entry has no '=' or an empty key

    Example:
        >>> parse_env_pairs(["CFLAGS=-O3 -g"])
        {'CFLAGS': '-O3 -g'}
    """
    result = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid override '{pair}' (expected KEY=VALUE)")
        result[key] = value
    return result


# ============================================================================
# User Interface / Output Formatting
# ============================================================================


def print_box(text: str, width: int = 46, char: str = "="):
    """Print text in a box for emphasis."""
    print(char * width)
    print(text)
    print(char * width)


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)


def print_warning(message: str):
    """Print warning message to stderr."""
    print(f"WARNING: {message}", file=sys.stderr)
