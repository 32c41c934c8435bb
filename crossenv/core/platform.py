"""
Host platform detection for crossenv.

The resolver itself never inspects the host; these helpers feed host-dependent
defaults (the Android NDK prebuilt directory, the path separator) into it and
give the ``doctor`` command something to report.

Usage:
    from crossenv.core.platform import detect_platform

    info = detect_platform()
    print(info.platform_string())   # e.g. 'linux-amd64'
    print(info.ndk_host_tag())      # e.g. 'linux-x86_64'
"""

import functools
import os
import platform
from dataclasses import dataclass

import distro


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Operating system ('linux', 'darwin', 'windows', 'freebsd', ...)
        arch: CPU architecture in target-id spelling ('amd64', 'arm64', ...)
        distribution: Linux distribution id ('alpine', 'ubuntu', ...) or empty
        libc: C library ('glibc', 'musl') on Linux, empty elsewhere
    """

    os: str
    arch: str
    distribution: str = ""
    libc: str = ""

    def platform_string(self) -> str:
        """Host platform spelled like a target identifier (e.g. 'linux-amd64')."""
        return f"{self.os}-{self.arch}"

    def ndk_host_tag(self) -> str:
        """
        Android NDK prebuilt directory name for this host.

        The NDK only ships x86_64 prebuilts for Linux, so aarch64 hosts use
        the x86_64 directory under emulation.
        """
        if self.os == "darwin":
            return "darwin-x86_64"
        if self.os == "windows":
            return "windows-x86_64"
        return "linux-x86_64"

    @property
    def path_separator(self) -> str:
        return ";" if self.os == "windows" else ":"

    def __str__(self) -> str:
        parts = [self.platform_string()]
        if self.distribution:
            parts.append(f"({self.distribution})")
        if self.libc:
            parts.append(f"[{self.libc}]")
        return " ".join(parts)


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect the host platform.

    Cached: detection runs once per process.

    Returns:
        PlatformInfo for the running host
    """
    os_name = _detect_os()
    return PlatformInfo(
        os=os_name,
        arch=_detect_architecture(),
        distribution=distro.id() if os_name == "linux" else "",
        libc=_detect_libc() if os_name == "linux" else "",
    )


def clear_platform_cache() -> None:
    """Clear the cached platform detection (used by tests)."""
    detect_platform.cache_clear()


def _detect_os() -> str:
    system = platform.system().lower()
    if system == "windows" or system.startswith(("cygwin", "msys", "mingw")):
        return "windows"
    if system == "sunos":
        return "illumos"
    return system


def _detect_architecture() -> str:
    """
    Detect CPU architecture, normalised to target-id spelling.

    Returns:
        'amd64', 'arm64', 'armv7', 'x86', 'riscv64' or the raw machine name
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "amd64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "armv7"
    elif machine.startswith("riscv64"):
        return "riscv64"
    return machine


def _detect_libc() -> str:
    libc, _version = platform.libc_ver()
    if libc == "glibc":
        return "glibc"
    # Alpine (the toolchain image base) reports nothing from libc_ver
    if os.path.exists("/lib/ld-musl-x86_64.so.1") or os.path.exists(
        "/lib/ld-musl-aarch64.so.1"
    ):
        return "musl"
    return libc or "unknown"
