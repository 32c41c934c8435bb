"""
Environment resolver: target id + options + overrides -> build environment.

Replaces the toolchain image's ``setup_target``/``init_environment`` shell
functions. Instead of exporting into the process environment, resolution
returns an immutable ResolvedEnvironment that the caller hands to the command
executor.

Usage:
    from crossenv.environment import EnvironmentResolver, ResolveOptions

    resolver = EnvironmentResolver()
    env = resolver.resolve(
        "linux-arm64",
        overrides={"CFLAGS": "-O3"},
        options=ResolveOptions(use_sccache=True, use_mold=True),
        ambient=os.environ,
    )
    print(env["CC"])        # 'sccache aarch64-linux-gcc'
    print(env["LDFLAGS"])   # '-static -fuse-ld=mold'
"""

import logging
import os
import shlex
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from crossenv.environment.caching import (
    DEFAULT_CCACHE_DIR,
    DEFAULT_SCCACHE_DIR,
    select_launcher,
)
from crossenv.targets import STATIC_LINK_FLAG, TargetRegistry, get_registry

logger = logging.getLogger(__name__)

MOLD_FLAG = "-fuse-ld=mold"


@dataclass(frozen=True)
class ResolveOptions:
    """
    Tunables for environment resolution.

    Attributes:
        use_ccache: Wrap compilers with ccache (ignored when use_sccache is set)
        use_sccache: Wrap compilers with sccache
        use_mold: Link with mold
        enable_static: Request fully static binaries where the target allows it
        ccache_dir: CCACHE_DIR value
        sccache_dir: SCCACHE_DIR value
        cache_max_size: Cache size limit passed to the cache tool
        parallel_jobs: Emit MAKEFLAGS=-jN when set
        path_separator: Separator for PKG_CONFIG_PATH and PATH
    """

    use_ccache: bool = True
    use_sccache: bool = False
    use_mold: bool = False
    enable_static: bool = True
    ccache_dir: str = DEFAULT_CCACHE_DIR
    sccache_dir: str = DEFAULT_SCCACHE_DIR
    cache_max_size: Optional[str] = None
    parallel_jobs: Optional[int] = None
    path_separator: str = os.pathsep


class ResolvedEnvironment(Mapping[str, str]):
    """
    Immutable mapping of environment variable names to values for one target.

    Also carries the warnings recorded during resolution (aliased target,
    static linking unavailable, ...).
    """

    def __init__(
        self,
        target_id: str,
        variables: Mapping[str, str],
        warnings: Sequence[str] = (),
    ):
        self._target_id = target_id
        self._variables = MappingProxyType(dict(variables))
        self._warnings = tuple(warnings)

    @property
    def target_id(self) -> str:
        return self._target_id

    @property
    def warnings(self) -> Tuple[str, ...]:
        return self._warnings

    def __getitem__(self, key: str) -> str:
        return self._variables[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __repr__(self) -> str:
        return f"ResolvedEnvironment({self._target_id!r}, {dict(self._variables)!r})"

    def as_dict(self) -> Dict[str, str]:
        return dict(self._variables)

    def flags(self, key: str) -> List[str]:
        """Split a flags variable (LDFLAGS, CFLAGS) into its tokens."""
        return shlex.split(self._variables.get(key, ""))

    def to_shell(self) -> str:
        """Render as POSIX shell ``export`` statements."""
        return "\n".join(
            f"export {key}={shlex.quote(value)}"
            for key, value in self._variables.items()
        )

    def to_dotenv(self) -> str:
        """Render as KEY=VALUE lines (docker --env-file format)."""
        return "\n".join(f"{key}={value}" for key, value in self._variables.items())


class EnvironmentResolver:
    """Resolve target identifiers into complete build environments."""

    def __init__(self, registry: Optional[TargetRegistry] = None):
        """
        Initialize resolver.

        Args:
            registry: Target registry (default: the shared registry)
        """
        self.registry = registry or get_registry()

    def resolve(
        self,
        target_id: str,
        overrides: Optional[Mapping[str, str]] = None,
        options: Optional[ResolveOptions] = None,
        ambient: Optional[Mapping[str, str]] = None,
    ) -> ResolvedEnvironment:
        """
        Resolve the build environment for a target.

        Args:
            target_id: Canonical target identifier
            overrides: Explicit user values; each replaces the computed value
            options: Cache, mold and static-link preferences
            ambient: Caller's current environment. CC, CXX, CFLAGS and
                LDFLAGS replace the profile defaults when set; PKG_CONFIG_PATH
                and PATH are extended

        Returns:
            ResolvedEnvironment for the target

        Raises:
            UnknownTargetError: If the target is not registered
        """
        options = options or ResolveOptions()
        overrides = overrides or {}
        ambient = ambient or {}
        sep = options.path_separator

        profile = self.registry.lookup(target_id)
        warnings: List[str] = []

        if profile.is_alias:
            warnings.append(
                f"{target_id} has no dedicated toolchain; "
                f"using {profile.alias_of} tools"
            )

        # Already-set compiler variables take the place of the profile defaults
        compiler_c = _ambient_words(ambient, "CC") or profile.compiler_c
        compiler_cxx = _ambient_words(ambient, "CXX") or profile.compiler_cxx
        cflags = _ambient_words(ambient, "CFLAGS") or list(
            profile.default_compile_flags
        )
        ldflags = _ambient_words(ambient, "LDFLAGS") or list(
            profile.default_linker_flags
        )

        env: Dict[str, str] = {
            "TARGET": target_id,
            "CROSS_COMPILE": "1",
        }

        # Static linking is best effort: unsupported targets only warn
        static = False
        if options.enable_static:
            if profile.supports_static:
                static = True
                _append_flag(ldflags, STATIC_LINK_FLAG)
                _append_flag(cflags, STATIC_LINK_FLAG)
            else:
                warnings.append(
                    f"Static linking is {profile.static_link_support.value} "
                    f"for {target_id}; building without {STATIC_LINK_FLAG}"
                )
        env["ENABLE_STATIC"] = "1" if static else "0"

        launcher = select_launcher(
            use_ccache=options.use_ccache,
            use_sccache=options.use_sccache,
            ccache_dir=options.ccache_dir,
            sccache_dir=options.sccache_dir,
            max_size=options.cache_max_size,
        )
        if launcher:
            compiler_c = launcher.wrap(compiler_c)
            compiler_cxx = launcher.wrap(compiler_cxx)

        if options.use_mold:
            _append_flag(ldflags, MOLD_FLAG)

        env["CC"] = shlex.join(compiler_c)
        env["CXX"] = shlex.join(compiler_cxx)
        env["AR"] = profile.archiver
        env["RANLIB"] = profile.ranlib
        if profile.strip_tool:
            env["STRIP"] = profile.strip_tool
        env["CFLAGS"] = " ".join(cflags)
        env["LDFLAGS"] = " ".join(ldflags)

        pkg_config_path = _join_paths(
            _split_paths(ambient.get("PKG_CONFIG_PATH", ""), sep),
            profile.sysroot_pkg_config_path,
            sep,
        )
        if pkg_config_path:
            env["PKG_CONFIG_PATH"] = pkg_config_path

        if profile.search_paths:
            env["PATH"] = _join_paths(
                profile.search_paths,
                _split_paths(ambient.get("PATH", ""), sep),
                sep,
            )

        if launcher:
            env.update(launcher.environment())

        if options.parallel_jobs:
            env["MAKEFLAGS"] = f"-j{options.parallel_jobs}"

        for key, value in overrides.items():
            if key in env and env[key] != value:
                logger.debug(f"Override {key}: {env[key]!r} -> {value!r}")
            env[key] = str(value)

        for message in warnings:
            logger.debug(message)

        logger.debug(f"Resolved environment for {target_id}: {env}")
        return ResolvedEnvironment(target_id, env, warnings)


def _ambient_words(ambient: Mapping[str, str], key: str) -> List[str]:
    return shlex.split(ambient.get(key, ""))


def _append_flag(flags: List[str], flag: str):
    if flag not in flags:
        flags.append(flag)


def _split_paths(value: str, sep: str) -> List[str]:
    return [entry for entry in value.split(sep) if entry]


def _join_paths(first: Sequence[str], second: Sequence[str], sep: str) -> str:
    """Concatenate two search path lists, keeping the first occurrence of each entry."""
    return sep.join(dict.fromkeys(list(first) + list(second)))
