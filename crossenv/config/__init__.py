"""Configuration module for crossenv.

Parses crossenv.yaml and layers the toolchain image's environment variables
on top of it.
"""

from crossenv.config.parser import (
    CONFIG_FILENAME,
    AndroidConfig,
    BuildConfig,
    CacheConfig,
    CrossEnvConfig,
    apply_environment,
    load_config,
    parse_bool,
    parse_config,
    parse_config_data,
)

__all__ = [
    "CONFIG_FILENAME",
    "AndroidConfig",
    "BuildConfig",
    "CacheConfig",
    "CrossEnvConfig",
    "apply_environment",
    "load_config",
    "parse_bool",
    "parse_config",
    "parse_config_data",
]
