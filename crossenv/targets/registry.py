"""
Target registry: the compiled-in table of toolchain profiles.

Every target the toolchain image can build for is declared once here, in
listing order (Linux, Windows, macOS, BSD, illumos, Android, WebAssembly,
Universal). The registry is pure: it performs no I/O and never looks at the
process environment.

Usage:
    from crossenv.targets import get_registry

    registry = get_registry()
    profile = registry.lookup("linux-arm64")
    print(profile.compiler_c)        # ('aarch64-linux-gcc',)
    print(registry.list_targets())   # ['linux-amd64', 'linux-arm64', ...]
"""

import functools
import logging
from typing import Dict, Iterator, List, Optional

from crossenv.core.exceptions import UnknownTargetError
from crossenv.targets.profiles import StaticLinkSupport, TargetFamily, ToolchainProfile

logger = logging.getLogger(__name__)

DEFAULT_NDK_ROOT = "/opt/android-ndk"
DEFAULT_NDK_HOST_TAG = "linux-x86_64"
DEFAULT_ANDROID_API_LEVEL = 24

OSXCROSS_SDK = "/opt/osxcross/target/SDK/MacOSX14.0.sdk"
DARWIN_VERSION = "darwin23"
WASI_SYSROOT = "/opt/wasi-sdk/share/wasi-sysroot"

_FIND_ROOT_MODES = (
    ("CMAKE_FIND_ROOT_PATH_MODE_PROGRAM", "NEVER"),
    ("CMAKE_FIND_ROOT_PATH_MODE_LIBRARY", "ONLY"),
    ("CMAKE_FIND_ROOT_PATH_MODE_INCLUDE", "ONLY"),
)


def _musl_linux(target_id, arch, prefix, sysroot_triple, triple, processor, desc):
    """Buildroot musl cross toolchains installed under /opt/<arch>-linux-musl."""
    sysroot = f"/opt/{arch}-linux-musl/{sysroot_triple}/sysroot"
    return ToolchainProfile(
        target_id=target_id,
        family=TargetFamily.LINUX,
        description=desc,
        compiler_c=(f"{prefix}-gcc",),
        compiler_cxx=(f"{prefix}-g++",),
        archiver=f"{prefix}-ar",
        ranlib=f"{prefix}-ranlib",
        strip_tool=f"{prefix}-strip",
        sysroot_pkg_config_path=(f"{sysroot}/usr/lib/pkgconfig",),
        triple=triple,
        cmake_system_name="Linux",
        cmake_system_processor=processor,
        cmake_extra=(("CMAKE_FIND_ROOT_PATH", sysroot),) + _FIND_ROOT_MODES,
    )


def _mingw(target_id, triple, processor, desc):
    """LLVM MinGW toolchains."""
    return ToolchainProfile(
        target_id=target_id,
        family=TargetFamily.WINDOWS,
        description=desc,
        compiler_c=(f"{triple}-clang",),
        compiler_cxx=(f"{triple}-clang++",),
        archiver=f"{triple}-ar",
        ranlib=f"{triple}-ranlib",
        strip_tool=f"{triple}-strip",
        sysroot_pkg_config_path=(f"/opt/llvm-mingw/{triple}/lib/pkgconfig",),
        triple=triple,
        cmake_system_name="Windows",
        cmake_system_processor=processor,
        cmake_extra=(
            ("CMAKE_RC_COMPILER", f"{triple}-windres"),
            ("CMAKE_FIND_ROOT_PATH", f"/opt/llvm-mingw/{triple}"),
        ),
    )


def _osxcross(target_id, arch, desc):
    """OSXCross clang wrappers. libSystem is always dynamic on macOS."""
    triple = f"{arch}-apple-{DARWIN_VERSION}"
    return ToolchainProfile(
        target_id=target_id,
        family=TargetFamily.MACOS,
        description=desc,
        compiler_c=(f"{triple}-clang",),
        compiler_cxx=(f"{triple}-clang++",),
        archiver=f"{triple}-ar",
        ranlib=f"{triple}-ranlib",
        strip_tool=f"{triple}-strip",
        sysroot_pkg_config_path=(f"{OSXCROSS_SDK}/usr/lib/pkgconfig",),
        static_link_support=StaticLinkSupport.PARTIAL,
        triple=triple,
        cmake_system_name="Darwin",
        cmake_system_processor=arch,
        cmake_extra=(("CMAKE_OSX_SYSROOT", OSXCROSS_SDK),),
    )


def _bsd(target_id, os_name, arch, cmake_name, triple, desc):
    """Clang cross wrappers for the BSDs, sharing llvm binutils."""
    sysroot = f"/opt/bsd-cross/{os_name}"
    return ToolchainProfile(
        target_id=target_id,
        family=TargetFamily.BSD,
        description=desc,
        compiler_c=(f"{arch}-{os_name}-clang",),
        compiler_cxx=(f"{arch}-{os_name}-clang++",),
        archiver="llvm-ar",
        ranlib="llvm-ranlib",
        strip_tool="llvm-strip",
        sysroot_pkg_config_path=(f"{sysroot}/usr/lib/pkgconfig",),
        triple=triple,
        cmake_system_name=cmake_name,
        cmake_system_processor=arch,
        cmake_extra=(("CMAKE_SYSROOT", sysroot),),
    )


def _android(target_id, clang_prefix, lib_triple, abi, processor, ndk, desc):
    """Android NDK clang wrappers (API level baked into the compiler name)."""
    prebuilt = f"{ndk.root}/toolchains/llvm/prebuilt/{ndk.host_tag}"
    return ToolchainProfile(
        target_id=target_id,
        family=TargetFamily.ANDROID,
        description=desc,
        compiler_c=(f"{clang_prefix}{ndk.api_level}-clang",),
        compiler_cxx=(f"{clang_prefix}{ndk.api_level}-clang++",),
        archiver="llvm-ar",
        ranlib="llvm-ranlib",
        strip_tool="llvm-strip",
        sysroot_pkg_config_path=(f"{prebuilt}/sysroot/usr/lib/{lib_triple}/pkgconfig",),
        static_link_support=StaticLinkSupport.PARTIAL,
        triple=clang_prefix,
        cmake_system_name="Android",
        cmake_system_processor=processor,
        cmake_extra=(
            ("CMAKE_SYSTEM_VERSION", str(ndk.api_level)),
            ("CMAKE_ANDROID_ARCH_ABI", abi),
            ("CMAKE_ANDROID_NDK", ndk.root),
        ),
        search_paths=(f"{prebuilt}/bin",),
    )


class _NdkSettings:
    def __init__(self, root: str, host_tag: str, api_level: int):
        self.root = root.rstrip("/")
        self.host_tag = host_tag
        self.api_level = api_level


def _build_profiles(ndk: _NdkSettings) -> List[ToolchainProfile]:
    windows_amd64 = _mingw(
        "windows-amd64", "x86_64-w64-mingw32", "AMD64", "x86_64 Windows (LLVM MinGW)"
    )

    return [
        # Linux (musl)
        ToolchainProfile(
            target_id="linux-amd64",
            family=TargetFamily.LINUX,
            description="Native x86_64 with musl libc",
            compiler_c=("gcc",),
            compiler_cxx=("g++",),
            archiver="ar",
            ranlib="ranlib",
            strip_tool="strip",
            sysroot_pkg_config_path=(
                "/usr/lib/pkgconfig",
                "/usr/lib/x86_64-linux-musl/pkgconfig",
            ),
            triple="x86_64-linux-musl",
        ),
        _musl_linux(
            "linux-arm64",
            "aarch64",
            "aarch64-linux",
            "aarch64-buildroot-linux-musl",
            "aarch64-linux-musl",
            "aarch64",
            "ARM64/AArch64 with musl libc",
        ),
        _musl_linux(
            "linux-armv7",
            "armv7",
            "armv7-linux",
            "arm-buildroot-linux-musleabihf",
            "arm-linux-musleabihf",
            "arm",
            "ARMv7 hard-float with musl libc",
        ),
        _musl_linux(
            "linux-riscv64",
            "riscv64",
            "riscv64-linux",
            "riscv64-buildroot-linux-musl",
            "riscv64-linux-musl",
            "riscv64",
            "RISC-V 64-bit with musl libc",
        ),
        # Windows (LLVM MinGW)
        windows_amd64,
        # No usable ARM64 MinGW runtime in the image: reuse the AMD64 tools
        windows_amd64.as_alias(
            "windows-arm64", "ARM64 Windows (uses windows-amd64 tools)"
        ),
        # macOS (OSXCross)
        _osxcross("darwin-amd64", "x86_64", "x86_64 macOS (Darwin 23)"),
        _osxcross("darwin-arm64", "aarch64", "ARM64 Apple Silicon (Darwin 23)"),
        # BSD family
        _bsd(
            "freebsd-amd64",
            "freebsd",
            "x86_64",
            "FreeBSD",
            "x86_64-unknown-freebsd14",
            "x86_64 FreeBSD 14",
        ),
        _bsd(
            "freebsd-arm64",
            "freebsd",
            "aarch64",
            "FreeBSD",
            "aarch64-unknown-freebsd14",
            "ARM64 FreeBSD 14",
        ),
        _bsd(
            "openbsd-amd64",
            "openbsd",
            "x86_64",
            "OpenBSD",
            "x86_64-unknown-openbsd",
            "x86_64 OpenBSD",
        ),
        _bsd(
            "openbsd-arm64",
            "openbsd",
            "aarch64",
            "OpenBSD",
            "aarch64-unknown-openbsd",
            "ARM64 OpenBSD",
        ),
        _bsd(
            "netbsd-amd64",
            "netbsd",
            "x86_64",
            "NetBSD",
            "x86_64-unknown-netbsd",
            "x86_64 NetBSD",
        ),
        _bsd(
            "netbsd-arm64",
            "netbsd",
            "aarch64",
            "NetBSD",
            "aarch64-unknown-netbsd",
            "ARM64 NetBSD",
        ),
        # illumos: no static libc exists
        ToolchainProfile(
            target_id="illumos-amd64",
            family=TargetFamily.ILLUMOS,
            description="x86_64 illumos/Solaris (clang + lld)",
            compiler_c=("x86_64-illumos-clang",),
            compiler_cxx=("x86_64-illumos-clang++",),
            archiver="llvm-ar",
            ranlib="llvm-ranlib",
            strip_tool="llvm-strip",
            sysroot_pkg_config_path=("/opt/illumos-cross/lib/pkgconfig",),
            static_link_support=StaticLinkSupport.NONE,
            triple="x86_64-unknown-solaris2.11",
            cmake_system_name="SunOS",
            cmake_system_processor="x86_64",
        ),
        # Android NDK
        _android(
            "android-arm64",
            "aarch64-linux-android",
            "aarch64-linux-android",
            "arm64-v8a",
            "aarch64",
            ndk,
            "ARM64-v8a (aarch64)",
        ),
        _android(
            "android-armv7",
            "armv7a-linux-androideabi",
            "arm-linux-androideabi",
            "armeabi-v7a",
            "armv7-a",
            ndk,
            "ARMv7-a (32-bit ARM)",
        ),
        _android(
            "android-x86_64",
            "x86_64-linux-android",
            "x86_64-linux-android",
            "x86_64",
            "x86_64",
            ndk,
            "x86_64 (Intel/AMD 64-bit)",
        ),
        _android(
            "android-x86",
            "i686-linux-android",
            "i686-linux-android",
            "x86",
            "i686",
            ndk,
            "x86 (Intel/AMD 32-bit)",
        ),
        # WebAssembly
        ToolchainProfile(
            target_id="wasm32",
            family=TargetFamily.WEBASSEMBLY,
            description="32-bit WebAssembly (Emscripten)",
            compiler_c=("emcc",),
            compiler_cxx=("em++",),
            archiver="emar",
            ranlib="emranlib",
            static_link_support=StaticLinkSupport.NONE,
            triple="wasm32-unknown-emscripten",
            cmake_system_name="Emscripten",
        ),
        ToolchainProfile(
            target_id="wasm64",
            family=TargetFamily.WEBASSEMBLY,
            description="64-bit WebAssembly (Emscripten, experimental)",
            compiler_c=("emcc",),
            compiler_cxx=("em++",),
            archiver="emar",
            ranlib="emranlib",
            static_link_support=StaticLinkSupport.NONE,
            default_compile_flags=("-O2", "-sMEMORY64=1"),
            default_linker_flags=("-sMEMORY64=1",),
            triple="wasm64-unknown-emscripten",
            cmake_system_name="Emscripten",
        ),
        ToolchainProfile(
            target_id="wasi",
            family=TargetFamily.WEBASSEMBLY,
            description="WebAssembly System Interface (wasi-sdk)",
            compiler_c=(
                "/opt/wasi-sdk/bin/clang",
                "--target=wasm32-wasi",
                f"--sysroot={WASI_SYSROOT}",
            ),
            compiler_cxx=(
                "/opt/wasi-sdk/bin/clang++",
                "--target=wasm32-wasi",
                f"--sysroot={WASI_SYSROOT}",
            ),
            archiver="llvm-ar",
            ranlib="llvm-ranlib",
            strip_tool="llvm-strip",
            sysroot_pkg_config_path=(f"{WASI_SYSROOT}/lib/wasm32-wasi/pkgconfig",),
            static_link_support=StaticLinkSupport.NONE,
            triple="wasm32-wasi",
            cmake_system_name="WASI",
            cmake_system_processor="wasm32",
            cmake_extra=(
                ("CMAKE_SYSROOT", WASI_SYSROOT),
                ("CMAKE_C_COMPILER_TARGET", "wasm32-wasi"),
                ("CMAKE_CXX_COMPILER_TARGET", "wasm32-wasi"),
            ),
        ),
        # Universal (Actually Portable Executable); stripping breaks APE binaries
        ToolchainProfile(
            target_id="cosmo",
            family=TargetFamily.UNIVERSAL,
            description="Cosmopolitan universal binary (Linux/macOS/Windows/BSD)",
            compiler_c=("cosmocc",),
            compiler_cxx=("cosmoc++",),
            archiver="cosmoar",
            ranlib="cosmoar s",
            triple="x86_64-unknown-cosmo",
        ),
    ]


class TargetRegistry:
    """
    Immutable table mapping target identifiers to toolchain profiles.

    Iteration and list_targets() follow table order, which is grouped by OS
    family and stable across calls.
    """

    def __init__(
        self,
        ndk_root: str = DEFAULT_NDK_ROOT,
        ndk_host_tag: str = DEFAULT_NDK_HOST_TAG,
        android_api_level: int = DEFAULT_ANDROID_API_LEVEL,
    ):
        """
        Build the registry.

        Args:
            ndk_root: Android NDK installation directory
            ndk_host_tag: NDK prebuilt host directory (e.g. 'linux-x86_64')
            android_api_level: Minimum Android API level baked into compiler names
        """
        if android_api_level < 21:
            raise ValueError(
                f"Android API level {android_api_level} is too old (minimum 21)"
            )

        ndk = _NdkSettings(ndk_root, ndk_host_tag, android_api_level)
        self._profiles: Dict[str, ToolchainProfile] = {}
        for profile in _build_profiles(ndk):
            if profile.target_id in self._profiles:
                raise ValueError(f"Duplicate target in registry: {profile.target_id}")
            self._profiles[profile.target_id] = profile

        logger.debug(f"Target registry initialized with {len(self._profiles)} targets")

    def lookup(self, target_id: str) -> ToolchainProfile:
        """
        Look up the profile for a target identifier.

        Args:
            target_id: Canonical target identifier (e.g. 'linux-arm64')

        Returns:
            The registered ToolchainProfile

        Raises:
            UnknownTargetError: If the target is not registered
        """
        try:
            return self._profiles[target_id]
        except (KeyError, TypeError):
            raise UnknownTargetError(target_id, self.list_targets()) from None

    def list_targets(self) -> List[str]:
        """All target identifiers, grouped by OS family, in table order."""
        return list(self._profiles)

    def by_family(self) -> Dict[TargetFamily, List[ToolchainProfile]]:
        """Profiles grouped by family, families in declaration order."""
        grouped: Dict[TargetFamily, List[ToolchainProfile]] = {
            family: [] for family in TargetFamily
        }
        for profile in self._profiles.values():
            grouped[profile.family].append(profile)
        return {family: items for family, items in grouped.items() if items}

    def aliases(self) -> Dict[str, str]:
        """Map of aliased target id to the target whose tools it reuses."""
        return {
            profile.target_id: profile.alias_of
            for profile in self._profiles.values()
            if profile.alias_of
        }

    def __contains__(self, target_id: object) -> bool:
        return target_id in self._profiles

    def __iter__(self) -> Iterator[ToolchainProfile]:
        return iter(self._profiles.values())

    def __len__(self) -> int:
        return len(self._profiles)


@functools.lru_cache(maxsize=None)
def get_registry(
    ndk_root: Optional[str] = None,
    ndk_host_tag: Optional[str] = None,
    android_api_level: Optional[int] = None,
) -> TargetRegistry:
    """
    Return a shared registry, built once per distinct set of arguments.

    Args left as None use the defaults (/opt/android-ndk, linux-x86_64, API 24).
    """
    return TargetRegistry(
        ndk_root=ndk_root or DEFAULT_NDK_ROOT,
        ndk_host_tag=ndk_host_tag or DEFAULT_NDK_HOST_TAG,
        android_api_level=android_api_level or DEFAULT_ANDROID_API_LEVEL,
    )
