"""
Tests for the Rust, Go and Zig target tables.
"""

import pytest

from crossenv.core.exceptions import UnmappedEcosystemTargetError
from crossenv.project import GO_TARGETS, RUST_TARGETS, ZIG_TARGETS
from crossenv.project.ecosystems import cargo_linker_variable, rust_target


class TestGoTargets:
    """Go GOOS/GOARCH translation."""

    def test_linux_arm64(self):
        """linux-arm64 -> linux/arm64."""
        platform = GO_TARGETS.translate("linux-arm64")
        assert platform.environment() == {"GOOS": "linux", "GOARCH": "arm64"}

    def test_wasm(self):
        """Browser and WASI wasm use different GOOS values."""
        assert GO_TARGETS.translate("wasm32").goos == "js"
        assert GO_TARGETS.translate("wasi").goos == "wasip1"

    def test_illumos_unmapped(self):
        """illumos has no Go mapping and fails explicitly."""
        with pytest.raises(UnmappedEcosystemTargetError) as exc_info:
            GO_TARGETS.translate("illumos-amd64")

        assert exc_info.value.ecosystem == "Go"
        assert exc_info.value.target == "illumos-amd64"
        assert "linux-amd64" in exc_info.value.supported_targets


class TestRustTargets:
    """Rust triple translation."""

    def test_musl_triples(self):
        """Linux targets build against musl."""
        assert RUST_TARGETS.translate("linux-amd64") == "x86_64-unknown-linux-musl"
        assert (
            RUST_TARGETS.translate("linux-armv7") == "armv7-unknown-linux-musleabihf"
        )

    def test_windows_arm64_native(self):
        """Rust has its own windows-arm64 triple."""
        assert RUST_TARGETS.translate("windows-arm64") == "aarch64-pc-windows-gnullvm"

    def test_rust_target_with_linker(self):
        """Cross targets carry a linker."""
        assert rust_target("linux-arm64") == (
            "aarch64-unknown-linux-musl",
            "aarch64-linux-gcc",
        )

    def test_rust_target_without_linker(self):
        """wasm targets use rust-lld."""
        assert rust_target("wasm32") == ("wasm32-unknown-unknown", None)

    def test_unmapped(self):
        """Android is not in the Rust table."""
        with pytest.raises(UnmappedEcosystemTargetError):
            rust_target("android-arm64")

    def test_linker_variable(self):
        """CARGO_TARGET_<TRIPLE>_LINKER naming."""
        assert (
            cargo_linker_variable("aarch64-unknown-linux-musl")
            == "CARGO_TARGET_AARCH64_UNKNOWN_LINUX_MUSL_LINKER"
        )


class TestZigTargets:
    """Zig target translation."""

    def test_translate(self):
        """Zig uses its own triples."""
        assert ZIG_TARGETS.translate("darwin-arm64") == "aarch64-macos"
        assert "openbsd-amd64" not in ZIG_TARGETS.supported_targets()
