"""YAML configuration parser for crossenv.

Loads crossenv.yaml from the project root and layers the toolchain image's
environment variables (TARGET, USE_CCACHE, ...) on top of it. Command-line
flags are applied last by the CLI.
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from crossenv.core.exceptions import ConfigError
from crossenv.core.platform import detect_platform
from crossenv.environment import ResolveOptions
from crossenv.environment.caching import (
    CACHE_TOOLS,
    DEFAULT_CCACHE_DIR,
    DEFAULT_SCCACHE_DIR,
)
from crossenv.project.dispatcher import PlanOptions
from crossenv.targets import TargetRegistry, get_registry

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "crossenv.yaml"

KNOWN_KEYS = ("target", "static", "mold", "cache", "build", "android", "env", "targets")

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


@dataclass
class CacheConfig:
    """Compiler cache configuration."""

    tool: str = "ccache"  # 'ccache', 'sccache', 'none'
    dir: Optional[str] = None
    max_size: Optional[str] = None


@dataclass
class BuildConfig:
    """Build plan configuration."""

    jobs: Optional[int] = None
    dir: Optional[str] = None
    output: str = "app"


@dataclass
class AndroidConfig:
    """Android NDK configuration."""

    ndk_root: Optional[str] = None
    api_level: Optional[int] = None


@dataclass
class CrossEnvConfig:
    """Complete crossenv configuration."""

    target: Optional[str] = None
    static: bool = True
    mold: bool = False
    cache: CacheConfig = field(default_factory=CacheConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    android: AndroidConfig = field(default_factory=AndroidConfig)
    env: Dict[str, str] = field(default_factory=dict)
    targets: List[str] = field(default_factory=list)

    def cache_dir(self, tool: str) -> str:
        if self.cache.dir and self.cache.tool == tool:
            return self.cache.dir
        return DEFAULT_SCCACHE_DIR if tool == "sccache" else DEFAULT_CCACHE_DIR

    def resolve_options(self) -> ResolveOptions:
        """Options for EnvironmentResolver.resolve."""
        return ResolveOptions(
            use_ccache=self.cache.tool == "ccache",
            use_sccache=self.cache.tool == "sccache",
            use_mold=self.mold,
            enable_static=self.static,
            ccache_dir=self.cache_dir("ccache"),
            sccache_dir=self.cache_dir("sccache"),
            cache_max_size=self.cache.max_size,
            parallel_jobs=self.build.jobs,
            path_separator=detect_platform().path_separator,
        )

    def plan_options(self) -> PlanOptions:
        """Options for Dispatcher.plan_for."""
        return PlanOptions(
            build_dir=self.build.dir,
            jobs=self.build.jobs,
            output_name=self.build.output,
            static=self.static,
        )

    def registry(self) -> TargetRegistry:
        """Target registry for the configured Android NDK."""
        try:
            return get_registry(
                ndk_root=self.android.ndk_root,
                ndk_host_tag=detect_platform().ndk_host_tag(),
                android_api_level=self.android.api_level,
            )
        except ValueError as e:
            raise ConfigError(str(e)) from e


# ============================================================================
# Value parsing
# ============================================================================


def parse_bool(value: Any, name: str) -> bool:
    """
    Parse a boolean setting.

    Accepts real booleans and the strings 1/0, true/false, yes/no, on/off.

    Raises:
        ConfigError: If the value is not a recognised boolean
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


def _parse_positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a positive integer, got {value!r}") from None
    if number < 1:
        raise ConfigError(f"{name} must be a positive integer, got {value!r}")
    return number


def _expect_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{name} must be a string, got {type(value).__name__}")
    return value


def _expect_mapping(value: Any, name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be a mapping, got {type(value).__name__}")
    return value


# ============================================================================
# crossenv.yaml
# ============================================================================


def parse_config(config_path: Path) -> CrossEnvConfig:
    """
    Parse a crossenv.yaml configuration file.

    Args:
        config_path: Path to crossenv.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If the file is missing, not valid YAML, or has wrong types
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    logger.debug(f"Loading configuration from {config_path}")
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}") from e

    if data is None:
        logger.debug(f"{config_path} is empty, using defaults")
        return CrossEnvConfig()

    return parse_config_data(data)


def parse_config_data(data: Any) -> CrossEnvConfig:
    """Validate an already-loaded configuration document."""
    data = _expect_mapping(data, "configuration")

    for key in data:
        if key not in KNOWN_KEYS:
            logger.warning(f"Ignoring unknown configuration key: {key}")

    config = CrossEnvConfig()

    if data.get("target") is not None:
        config.target = _expect_str(data["target"], "target")
    if "static" in data:
        config.static = parse_bool(data["static"], "static")
    if "mold" in data:
        config.mold = parse_bool(data["mold"], "mold")

    config.cache = _parse_cache(_expect_mapping(data.get("cache"), "cache"))
    config.build = _parse_build(_expect_mapping(data.get("build"), "build"))
    config.android = _parse_android(_expect_mapping(data.get("android"), "android"))

    env = _expect_mapping(data.get("env"), "env")
    for key, value in env.items():
        if isinstance(value, (dict, list)) or value is None:
            raise ConfigError(f"env.{key} must be a scalar value")
        config.env[str(key)] = str(value)

    targets = data.get("targets") or []
    if not isinstance(targets, list):
        raise ConfigError("targets must be a list of target identifiers")
    config.targets = [_expect_str(t, "targets[]") for t in targets]

    return config


def _parse_cache(data: Mapping[str, Any]) -> CacheConfig:
    cache = CacheConfig()
    if data.get("tool") is not None:
        tool = _expect_str(data["tool"], "cache.tool")
        if tool not in CACHE_TOOLS + ("none",):
            raise ConfigError(
                f"Invalid cache.tool: {tool} (expected one of "
                f"{list(CACHE_TOOLS) + ['none']})"
            )
        cache.tool = tool
    if data.get("dir") is not None:
        cache.dir = _expect_str(data["dir"], "cache.dir")
    if data.get("max_size") is not None:
        cache.max_size = str(data["max_size"])
    return cache


def _parse_build(data: Mapping[str, Any]) -> BuildConfig:
    build = BuildConfig()
    if data.get("jobs") is not None:
        build.jobs = _parse_positive_int(data["jobs"], "build.jobs")
    if data.get("dir") is not None:
        build.dir = _expect_str(data["dir"], "build.dir")
    if data.get("output") is not None:
        build.output = _expect_str(data["output"], "build.output")
    return build


def _parse_android(data: Mapping[str, Any]) -> AndroidConfig:
    android = AndroidConfig()
    if data.get("ndk_root") is not None:
        android.ndk_root = _expect_str(data["ndk_root"], "android.ndk_root")
    if data.get("api_level") is not None:
        level = _parse_positive_int(data["api_level"], "android.api_level")
        if level < 21:
            raise ConfigError(f"android.api_level {level} is too old (minimum 21)")
        android.api_level = level
    return android


# ============================================================================
# Environment variables
# ============================================================================


def apply_environment(
    config: CrossEnvConfig, environ: Mapping[str, str]
) -> CrossEnvConfig:
    """
    Layer the toolchain image's environment variables over a configuration.

    Args:
        config: Configuration loaded from crossenv.yaml (or defaults)
        environ: Environment to read (usually os.environ)

    Returns:
        A new CrossEnvConfig; the input is not modified

    Raises:
        ConfigError: If a variable has an invalid value
    """
    cache = dataclasses.replace(config.cache)
    build = dataclasses.replace(config.build)
    android = dataclasses.replace(config.android)
    updated = dataclasses.replace(
        config,
        cache=cache,
        build=build,
        android=android,
        env=dict(config.env),
        targets=list(config.targets),
    )

    if environ.get("TARGET"):
        updated.target = environ["TARGET"]
    if "ENABLE_STATIC" in environ:
        updated.static = parse_bool(environ["ENABLE_STATIC"], "ENABLE_STATIC")
    if "USE_MOLD" in environ:
        updated.mold = parse_bool(environ["USE_MOLD"], "USE_MOLD")

    if "USE_CCACHE" in environ:
        if parse_bool(environ["USE_CCACHE"], "USE_CCACHE"):
            if cache.tool == "none":
                cache.tool = "ccache"
        elif cache.tool == "ccache":
            cache.tool = "none"
    if "USE_SCCACHE" in environ:
        if parse_bool(environ["USE_SCCACHE"], "USE_SCCACHE"):
            cache.tool = "sccache"
        elif cache.tool == "sccache":
            cache.tool = "none"

    cache_dir_var = {"ccache": "CCACHE_DIR", "sccache": "SCCACHE_DIR"}.get(cache.tool)
    if cache_dir_var and environ.get(cache_dir_var):
        cache.dir = environ[cache_dir_var]

    if environ.get("PARALLEL_JOBS"):
        build.jobs = _parse_positive_int(environ["PARALLEL_JOBS"], "PARALLEL_JOBS")
    if environ.get("ANDROID_NDK_HOME"):
        android.ndk_root = environ["ANDROID_NDK_HOME"]

    return updated


def load_config(
    project_root: Path,
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> CrossEnvConfig:
    """
    Load the effective configuration: defaults < crossenv.yaml < environment.

    Args:
        project_root: Project directory searched for crossenv.yaml
        config_file: Explicit configuration file (must exist)
        environ: Environment variables to layer on top (None skips the layer)

    Returns:
        CrossEnvConfig

    Raises:
        ConfigError: If the configuration is invalid
    """
    if config_file is not None:
        config = parse_config(Path(config_file))
    else:
        default_config = Path(project_root) / CONFIG_FILENAME
        if default_config.exists():
            config = parse_config(default_config)
        else:
            logger.debug(f"No {CONFIG_FILENAME} in {project_root}, using defaults")
            config = CrossEnvConfig()

    if environ is not None:
        config = apply_environment(config, environ)
    return config
