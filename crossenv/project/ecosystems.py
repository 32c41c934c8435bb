"""
Per-ecosystem target translation tables.

Language toolchains with their own cross-compilation support (Rust, Go, Zig)
name targets their own way. These tables translate crossenv target ids into
those names. A target that a table does not list is refused explicitly
instead of silently building for the host.
"""

from dataclasses import dataclass
from typing import Dict, Generic, List, Mapping, Optional, Tuple, TypeVar

from crossenv.core.exceptions import UnmappedEcosystemTargetError

T = TypeVar("T")


@dataclass(frozen=True)
class GoPlatform:
    """GOOS/GOARCH pair."""

    goos: str
    goarch: str

    def environment(self) -> Dict[str, str]:
        return {"GOOS": self.goos, "GOARCH": self.goarch}


class EcosystemTable(Generic[T]):
    """Lookup table from crossenv target id to an ecosystem-native target."""

    def __init__(self, ecosystem: str, entries: Mapping[str, T]):
        self.ecosystem = ecosystem
        self._entries = dict(entries)

    def translate(self, target_id: str) -> T:
        """
        Translate a target id.

        Raises:
            UnmappedEcosystemTargetError: If the ecosystem cannot build for the target
        """
        try:
            return self._entries[target_id]
        except KeyError:
            raise UnmappedEcosystemTargetError(
                self.ecosystem, target_id, self.supported_targets()
            ) from None

    def supported_targets(self) -> List[str]:
        return list(self._entries)


RUST_TARGETS: EcosystemTable[str] = EcosystemTable(
    "Rust",
    {
        "linux-amd64": "x86_64-unknown-linux-musl",
        "linux-arm64": "aarch64-unknown-linux-musl",
        "linux-armv7": "armv7-unknown-linux-musleabihf",
        "linux-riscv64": "riscv64gc-unknown-linux-gnu",
        "windows-amd64": "x86_64-pc-windows-gnu",
        "windows-arm64": "aarch64-pc-windows-gnullvm",
        "darwin-amd64": "x86_64-apple-darwin",
        "darwin-arm64": "aarch64-apple-darwin",
        "wasm32": "wasm32-unknown-unknown",
        "wasi": "wasm32-wasi",
    },
)

# Linker passed through CARGO_TARGET_<TRIPLE>_LINKER; wasm targets use rust-lld
RUST_LINKERS: Mapping[str, str] = {
    "linux-amd64": "gcc",
    "linux-arm64": "aarch64-linux-gcc",
    "linux-armv7": "armv7-linux-gcc",
    "linux-riscv64": "riscv64-linux-gcc",
    "windows-amd64": "x86_64-w64-mingw32-gcc",
    "windows-arm64": "aarch64-w64-mingw32-clang",
    "darwin-amd64": "x86_64-apple-darwin23-clang",
    "darwin-arm64": "aarch64-apple-darwin23-clang",
}

GO_TARGETS: EcosystemTable[GoPlatform] = EcosystemTable(
    "Go",
    {
        "linux-amd64": GoPlatform("linux", "amd64"),
        "linux-arm64": GoPlatform("linux", "arm64"),
        "linux-armv7": GoPlatform("linux", "arm"),
        "linux-riscv64": GoPlatform("linux", "riscv64"),
        "windows-amd64": GoPlatform("windows", "amd64"),
        "windows-arm64": GoPlatform("windows", "arm64"),
        "darwin-amd64": GoPlatform("darwin", "amd64"),
        "darwin-arm64": GoPlatform("darwin", "arm64"),
        "freebsd-amd64": GoPlatform("freebsd", "amd64"),
        "freebsd-arm64": GoPlatform("freebsd", "arm64"),
        "openbsd-amd64": GoPlatform("openbsd", "amd64"),
        "openbsd-arm64": GoPlatform("openbsd", "arm64"),
        "netbsd-amd64": GoPlatform("netbsd", "amd64"),
        "netbsd-arm64": GoPlatform("netbsd", "arm64"),
        "wasm32": GoPlatform("js", "wasm"),
        "wasi": GoPlatform("wasip1", "wasm"),
    },
)

# GOARM for 32-bit ARM targets
GO_ARM_VERSIONS: Mapping[str, str] = {"linux-armv7": "7"}

ZIG_TARGETS: EcosystemTable[str] = EcosystemTable(
    "Zig",
    {
        "linux-amd64": "x86_64-linux-musl",
        "linux-arm64": "aarch64-linux-musl",
        "linux-armv7": "arm-linux-musleabihf",
        "linux-riscv64": "riscv64-linux-musl",
        "windows-amd64": "x86_64-windows-gnu",
        "windows-arm64": "aarch64-windows-gnu",
        "darwin-amd64": "x86_64-macos",
        "darwin-arm64": "aarch64-macos",
        "freebsd-amd64": "x86_64-freebsd",
        "freebsd-arm64": "aarch64-freebsd",
        "wasi": "wasm32-wasi",
    },
)


def cargo_linker_variable(rust_triple: str) -> str:
    """CARGO_TARGET_<TRIPLE>_LINKER variable name for a Rust triple."""
    return f"CARGO_TARGET_{rust_triple.upper().replace('-', '_')}_LINKER"


def rust_target(target_id: str) -> Tuple[str, Optional[str]]:
    """Rust triple and cross linker (None when cargo's default is used)."""
    return RUST_TARGETS.translate(target_id), RUST_LINKERS.get(target_id)
