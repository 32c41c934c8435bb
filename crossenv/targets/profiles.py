"""
Toolchain profile data model.

A ToolchainProfile is the complete, immutable description of how to compile
for one target identifier: which compiler binaries (or argv prefixes) to use,
where the target's pkg-config files live, which flags it needs by default and
how far static linking is supported.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Tuple

STATIC_LINK_FLAG = "-static"


class StaticLinkSupport(Enum):
    """How far a target can produce fully self-contained binaries."""

    FULL = "full"  # -static works (musl, MinGW, BSD libc)
    PARTIAL = "partial"  # libc must stay dynamic (macOS, Android)
    NONE = "none"  # static linking is meaningless or unavailable (illumos, wasm)


class TargetFamily(Enum):
    """OS family used to group targets. Declaration order is listing order."""

    LINUX = "Linux"
    WINDOWS = "Windows"
    MACOS = "macOS"
    BSD = "BSD"
    ILLUMOS = "illumos"
    ANDROID = "Android"
    WEBASSEMBLY = "WebAssembly"
    UNIVERSAL = "Universal"


@dataclass(frozen=True)
class ToolchainProfile:
    """
    Compiler and linker parameters for one target identifier.

    Attributes:
        target_id: Canonical target identifier (e.g. 'linux-arm64')
        family: OS family used for grouping
        description: One-line human readable description
        compiler_c: C compiler argv prefix (e.g. ('aarch64-linux-gcc',))
        compiler_cxx: C++ compiler argv prefix
        archiver: ar command
        ranlib: ranlib command
        strip_tool: strip command, None where stripping is not applicable
        sysroot_pkg_config_path: pkg-config directories inside the target sysroot
        static_link_support: Static linking support level
        default_compile_flags: CFLAGS used when the caller gives none
        default_linker_flags: LDFLAGS used when the caller gives none
        triple: GNU host triple, passed to ./configure --host
        cmake_system_name: CMAKE_SYSTEM_NAME (None for the native target)
        cmake_system_processor: CMAKE_SYSTEM_PROCESSOR
        cmake_extra: Additional CMake cache variables as (name, value) pairs
        search_paths: Directories that must be prepended to PATH
        alias_of: Target whose tools this target deliberately reuses
    """

    target_id: str
    family: TargetFamily
    description: str
    compiler_c: Tuple[str, ...]
    compiler_cxx: Tuple[str, ...]
    archiver: str
    ranlib: str
    strip_tool: Optional[str] = None
    sysroot_pkg_config_path: Tuple[str, ...] = ()
    static_link_support: StaticLinkSupport = StaticLinkSupport.FULL
    default_compile_flags: Tuple[str, ...] = ("-O2",)
    default_linker_flags: Tuple[str, ...] = ()
    triple: Optional[str] = None
    cmake_system_name: Optional[str] = None
    cmake_system_processor: Optional[str] = None
    cmake_extra: Tuple[Tuple[str, str], ...] = field(default=())
    search_paths: Tuple[str, ...] = ()
    alias_of: Optional[str] = None

    def __post_init__(self):
        if not self.compiler_c or not self.compiler_cxx:
            raise ValueError(f"Profile {self.target_id} has no compiler")
        if (
            self.static_link_support is not StaticLinkSupport.FULL
            and STATIC_LINK_FLAG in self.default_linker_flags
        ):
            raise ValueError(
                f"Profile {self.target_id} cannot link statically "
                f"but lists {STATIC_LINK_FLAG} in its default linker flags"
            )

    @property
    def is_alias(self) -> bool:
        return self.alias_of is not None

    @property
    def supports_static(self) -> bool:
        return self.static_link_support is StaticLinkSupport.FULL

    def executable_suffix(self) -> str:
        """File suffix of binaries produced for this target."""
        if self.family is TargetFamily.WINDOWS:
            return ".exe"
        if self.family is TargetFamily.WEBASSEMBLY:
            return ".wasm"
        if self.family is TargetFamily.UNIVERSAL:
            return ".com"
        return ""

    def required_tools(self) -> Tuple[str, ...]:
        """Executables the provisioning layer must supply for this profile."""
        tools = [self.compiler_c[0], self.compiler_cxx[0]]
        for tool in (self.archiver, self.ranlib, self.strip_tool):
            if tool:
                tools.append(tool.split()[0])
        # Preserve order, drop duplicates (BSD profiles share llvm-ar/ranlib)
        return tuple(dict.fromkeys(tools))

    def cmake_variables(self, static: bool = True) -> Dict[str, str]:
        """
        Generate CMake cache variables for this target.

        Args:
            static: Add -static to CMAKE_EXE_LINKER_FLAGS when the target
                supports full static linking

        Returns:
            Dictionary of CMake variable names to values

        Example:
            >>> profile = get_registry().lookup("linux-arm64")
            >>> profile.cmake_variables()["CMAKE_SYSTEM_PROCESSOR"]
            'aarch64'
        """
        variables = {}

        if self.cmake_system_name:
            variables["CMAKE_SYSTEM_NAME"] = self.cmake_system_name
        if self.cmake_system_processor:
            variables["CMAKE_SYSTEM_PROCESSOR"] = self.cmake_system_processor

        variables["CMAKE_C_COMPILER"] = self.compiler_c[0]
        variables["CMAKE_CXX_COMPILER"] = self.compiler_cxx[0]

        for key, value in self.cmake_extra:
            variables[key] = value

        if static and self.supports_static:
            variables["CMAKE_EXE_LINKER_FLAGS"] = STATIC_LINK_FLAG

        return variables

    def as_alias(self, target_id: str, description: str) -> "ToolchainProfile":
        """Return a copy of this profile registered under another target id."""
        return replace(
            self,
            target_id=target_id,
            description=description,
            alias_of=self.target_id,
        )
