"""
Tests for project type detection.
"""

import pytest

from crossenv.project import (
    DETECTION_RULES,
    ProjectClassification,
    ProjectMarkers,
    detect,
    explain,
)


class TestPriority:
    """First matching rule wins."""

    def test_cargo_beats_makefile(self):
        """A Rust crate with a Makefile wrapper is still a Rust project."""
        assert detect({"Cargo.toml", "Makefile"}) is ProjectClassification.RUST_CARGO

    def test_gradle_beats_cmake(self):
        """Gradle projects with native CMake code are Gradle projects."""
        markers = {"build.gradle.kts", "CMakeLists.txt"}
        assert detect(markers) is ProjectClassification.GRADLE_KOTLIN

    def test_configure_beats_configure_ac(self):
        """A generated configure script is used before autoreconf."""
        markers = {"configure", "configure.ac", "Makefile"}
        assert detect(markers) is ProjectClassification.AUTOTOOLS_CONFIGURE

    def test_cmake_beats_makefile(self):
        """CMake wins over a checked-in Makefile."""
        assert detect({"CMakeLists.txt", "Makefile"}) is ProjectClassification.CMAKE

    def test_go_beats_makefile(self):
        """go.mod wins over Makefile."""
        assert detect({"go.mod", "Makefile"}) is ProjectClassification.GO_MODULES

    def test_rule_order_is_fixed(self):
        """Rule names in priority order."""
        assert [rule.name for rule in DETECTION_RULES] == [
            "gradle-android",
            "gradle",
            "maven",
            "cargo-wasm-pack",
            "cargo",
            "go-modules",
            "dart-pub",
            "zig-build",
            "cmake",
            "meson",
            "configure",
            "autoreconf",
            "makefile",
        ]


class TestSingleMarkers:
    """One marker, one classification."""

    @pytest.mark.parametrize(
        "marker,expected",
        [
            ("pom.xml", ProjectClassification.MAVEN_JAVA),
            ("pubspec.yaml", ProjectClassification.DART_PUB),
            ("build.zig", ProjectClassification.ZIG_BUILD),
            ("meson.build", ProjectClassification.MESON),
            ("configure.ac", ProjectClassification.AUTOTOOLS_AUTORECONF),
            ("Makefile", ProjectClassification.PLAIN_MAKEFILE),
        ],
    )
    def test_marker(self, marker, expected):
        """Each marker maps to its classification."""
        assert detect({marker}) is expected

    def test_no_markers(self):
        """An empty marker set is Unclassified, not an error."""
        assert detect(set()) is ProjectClassification.UNCLASSIFIED
        assert explain(set()) == "none"

    def test_unrelated_files(self):
        """Files that are not markers do not classify."""
        assert detect({"README.md", "src/"}) is ProjectClassification.UNCLASSIFIED


class TestContentRules:
    """Rules that look at file contents."""

    def test_wasm_bindgen_dependency(self):
        """Cargo.toml depending on wasm-bindgen is a wasm-pack project."""
        contents = {"Cargo.toml": '[dependencies]\nwasm-bindgen = "0.2"\n'}
        result = detect({"Cargo.toml"}, contents)

        assert result is ProjectClassification.WASM_PACK_RUST
        assert explain({"Cargo.toml"}, contents) == "cargo-wasm-pack"

    def test_wasm_bindgen_in_comment_ignored(self):
        """A commented-out dependency does not count."""
        contents = {"Cargo.toml": '[dependencies]\n# wasm-bindgen = "0.2"\n'}
        assert detect({"Cargo.toml"}, contents) is ProjectClassification.RUST_CARGO

    def test_android_app_directory(self):
        """Gradle with settings and an app/ module is an Android project."""
        markers = {"build.gradle", "settings.gradle", "app/"}
        assert detect(markers) is ProjectClassification.GRADLE_ANDROID

    def test_android_app_directory_without_slash(self):
        """A bare "app" entry counts as the app module directory."""
        markers = {"build.gradle", "settings.gradle", "app"}
        assert detect(markers) is ProjectClassification.GRADLE_ANDROID

    def test_android_plugin_in_build_file(self):
        """The Android Gradle plugin in the build file identifies Android."""
        contents = {"build.gradle.kts": 'plugins { id("com.android.application") }'}
        markers = {"build.gradle.kts", "settings.gradle.kts"}

        assert detect(markers, contents) is ProjectClassification.GRADLE_ANDROID

    def test_android_needs_settings_file(self):
        """Without settings.gradle the project is plain Gradle."""
        contents = {"build.gradle": "android {\n}\n"}
        assert detect({"build.gradle"}, contents) is ProjectClassification.GRADLE_KOTLIN


class TestDeterminism:
    """detect is a pure function."""

    def test_repeated_calls(self):
        """Identical input gives identical output."""
        markers = ProjectMarkers.from_names({"Cargo.toml", "go.mod", "Makefile"})
        results = {detect(markers) for _ in range(20)}

        assert results == {ProjectClassification.RUST_CARGO}

    def test_iterable_and_markers_agree(self):
        """Plain name sets and ProjectMarkers classify the same."""
        names = {"meson.build", "Makefile"}
        assert detect(names) is detect(ProjectMarkers.from_names(names))

    def test_str_is_value(self):
        """Classifications print as their names."""
        assert str(ProjectClassification.RUST_CARGO) == "RustCargo"
