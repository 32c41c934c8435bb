"""
Unit tests for host platform detection.
"""

from unittest.mock import patch

import pytest

from crossenv.core.platform import (
    PlatformInfo,
    _detect_architecture,
    _detect_os,
    clear_platform_cache,
    detect_platform,
)


class TestPlatformInfo:
    """Tests for PlatformInfo."""

    def test_platform_string(self):
        """os-arch spelling."""
        assert PlatformInfo("linux", "amd64").platform_string() == "linux-amd64"

    @pytest.mark.parametrize(
        "os_name,tag",
        [
            ("linux", "linux-x86_64"),
            ("darwin", "darwin-x86_64"),
            ("windows", "windows-x86_64"),
        ],
    )
    def test_ndk_host_tag(self, os_name, tag):
        """NDK prebuilt directory per host OS."""
        assert PlatformInfo(os_name, "amd64").ndk_host_tag() == tag

    def test_path_separator(self):
        """Windows uses ';'."""
        assert PlatformInfo("windows", "amd64").path_separator == ";"
        assert PlatformInfo("linux", "arm64").path_separator == ":"

    def test_str(self):
        """String form includes distribution and libc."""
        info = PlatformInfo("linux", "amd64", "alpine", "musl")
        assert str(info) == "linux-amd64 (alpine) [musl]"


class TestDetection:
    """Tests for OS and architecture detection."""

    @pytest.mark.parametrize(
        "machine,arch",
        [
            ("x86_64", "amd64"),
            ("AMD64", "amd64"),
            ("aarch64", "arm64"),
            ("armv7l", "armv7"),
            ("i686", "x86"),
            ("riscv64", "riscv64"),
        ],
    )
    def test_architecture(self, machine, arch):
        """Machine names are normalised to target-id spelling."""
        with patch("crossenv.core.platform.platform.machine", return_value=machine):
            assert _detect_architecture() == arch

    @pytest.mark.parametrize(
        "system,os_name",
        [("Linux", "linux"), ("Darwin", "darwin"), ("Windows", "windows"),
         ("MINGW64_NT-10.0", "windows"), ("SunOS", "illumos")],
    )
    def test_os(self, system, os_name):
        """System names are normalised."""
        with patch("crossenv.core.platform.platform.system", return_value=system):
            assert _detect_os() == os_name

    def test_detect_platform_cached(self):
        """Detection runs once until the cache is cleared."""
        clear_platform_cache()
        first = detect_platform()

        assert detect_platform() is first
        clear_platform_cache()
