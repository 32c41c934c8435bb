"""
Project type detection from marker files.

Detection is an ordered list of named rules, each a pure predicate over the
marker set; the first rule that matches decides. Markers can co-occur (a Rust
crate with a Makefile wrapper, a Gradle build next to a CMakeLists.txt for
native code), so the order is the tie-break policy and must not change.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Mapping, Optional, Tuple, Union

from crossenv.project.markers import ProjectMarkers


class ProjectClassification(Enum):
    """Closed set of project kinds."""

    GRADLE_ANDROID = "GradleAndroid"
    GRADLE_KOTLIN = "GradleKotlin"
    MAVEN_JAVA = "MavenJava"
    WASM_PACK_RUST = "WasmPackRust"
    RUST_CARGO = "RustCargo"
    GO_MODULES = "GoModules"
    DART_PUB = "DartPub"
    ZIG_BUILD = "ZigBuild"
    CMAKE = "CMake"
    MESON = "Meson"
    AUTOTOOLS_CONFIGURE = "AutotoolsConfigure"
    AUTOTOOLS_AUTORECONF = "AutotoolsAutoreconf"
    PLAIN_MAKEFILE = "PlainMakefile"
    UNCLASSIFIED = "Unclassified"

    def __str__(self) -> str:
        return self.value


GRADLE_BUILD_FILES = ("build.gradle", "build.gradle.kts")
GRADLE_SETTINGS_FILES = ("settings.gradle", "settings.gradle.kts")
# Directory markers carry a trailing slash; a bare name is accepted too
ANDROID_APP_DIRS = ("app/", "app")
GRADLE_CONTENT_FILES = GRADLE_BUILD_FILES + (
    "app/build.gradle",
    "app/build.gradle.kts",
)

_ANDROID_PLUGIN = re.compile(
    r"com\.android\.(application|library)|^\s*android\s*\{", re.MULTILINE
)
# Dependency line or table header, not a comment
_WASM_BINDGEN = re.compile(r"^[^#\n]*\bwasm-bindgen\b", re.MULTILINE)


def _is_gradle(markers: ProjectMarkers) -> bool:
    return markers.has_any(*GRADLE_BUILD_FILES)


def _is_android(markers: ProjectMarkers) -> bool:
    if not (_is_gradle(markers) and markers.has_any(*GRADLE_SETTINGS_FILES)):
        return False
    if markers.has_any(*ANDROID_APP_DIRS):
        return True
    return any(
        _ANDROID_PLUGIN.search(markers.contents.get(name, ""))
        for name in GRADLE_CONTENT_FILES
    )


def _is_wasm_crate(markers: ProjectMarkers) -> bool:
    return "Cargo.toml" in markers and bool(
        _WASM_BINDGEN.search(markers.contents.get("Cargo.toml", ""))
    )


def _has(name: str) -> Callable[[ProjectMarkers], bool]:
    def predicate(markers: ProjectMarkers) -> bool:
        return name in markers

    return predicate


@dataclass(frozen=True)
class DetectionRule:
    """A named predicate over the marker set and the classification it yields."""

    name: str
    classification: ProjectClassification
    matches: Callable[[ProjectMarkers], bool]


DETECTION_RULES: Tuple[DetectionRule, ...] = (
    DetectionRule("gradle-android", ProjectClassification.GRADLE_ANDROID, _is_android),
    DetectionRule("gradle", ProjectClassification.GRADLE_KOTLIN, _is_gradle),
    DetectionRule("maven", ProjectClassification.MAVEN_JAVA, _has("pom.xml")),
    DetectionRule(
        "cargo-wasm-pack", ProjectClassification.WASM_PACK_RUST, _is_wasm_crate
    ),
    DetectionRule("cargo", ProjectClassification.RUST_CARGO, _has("Cargo.toml")),
    DetectionRule("go-modules", ProjectClassification.GO_MODULES, _has("go.mod")),
    DetectionRule("dart-pub", ProjectClassification.DART_PUB, _has("pubspec.yaml")),
    DetectionRule("zig-build", ProjectClassification.ZIG_BUILD, _has("build.zig")),
    DetectionRule("cmake", ProjectClassification.CMAKE, _has("CMakeLists.txt")),
    DetectionRule("meson", ProjectClassification.MESON, _has("meson.build")),
    DetectionRule(
        "configure", ProjectClassification.AUTOTOOLS_CONFIGURE, _has("configure")
    ),
    DetectionRule(
        "autoreconf",
        ProjectClassification.AUTOTOOLS_AUTORECONF,
        _has("configure.ac"),
    ),
    DetectionRule("makefile", ProjectClassification.PLAIN_MAKEFILE, _has("Makefile")),
)

MarkerInput = Union[ProjectMarkers, Iterable[str]]


def _as_markers(
    markers: MarkerInput, contents: Optional[Mapping[str, str]]
) -> ProjectMarkers:
    if isinstance(markers, ProjectMarkers):
        if contents is None:
            return markers
        return ProjectMarkers(markers.names, {**markers.contents, **contents})
    return ProjectMarkers.from_names(markers, contents)


def match_rule(
    markers: MarkerInput, contents: Optional[Mapping[str, str]] = None
) -> Optional[DetectionRule]:
    """Return the first rule that matches, or None."""
    marker_set = _as_markers(markers, contents)
    for rule in DETECTION_RULES:
        if rule.matches(marker_set):
            return rule
    return None


def detect(
    markers: MarkerInput, contents: Optional[Mapping[str, str]] = None
) -> ProjectClassification:
    """
    Classify a project from its marker files.

    Args:
        markers: ProjectMarkers, or an iterable of marker names
            (directories as "app/"; a bare "app" is also accepted)
        contents: Text of content markers (Cargo.toml, build.gradle...)

    Returns:
        The classification of the first matching rule, or UNCLASSIFIED

    Example:
        >>> detect({"Cargo.toml", "Makefile"})
        <ProjectClassification.RUST_CARGO: 'RustCargo'>
    """
    rule = match_rule(markers, contents)
    return rule.classification if rule else ProjectClassification.UNCLASSIFIED


def explain(markers: MarkerInput, contents: Optional[Mapping[str, str]] = None) -> str:
    """Name of the rule that decided the classification ('none' if nothing matched)."""
    rule = match_rule(markers, contents)
    return rule.name if rule else "none"
