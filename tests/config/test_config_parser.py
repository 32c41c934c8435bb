"""
Tests for crossenv.yaml parsing and environment layering.
"""

import textwrap

import pytest

from crossenv.config import (
    CrossEnvConfig,
    apply_environment,
    load_config,
    parse_bool,
    parse_config,
    parse_config_data,
)
from crossenv.core.exceptions import ConfigError


def write_config(tmp_path, text):
    path = tmp_path / "crossenv.yaml"
    path.write_text(textwrap.dedent(text))
    return path


class TestParseConfig:
    """Tests for parse_config."""

    def test_full_document(self, tmp_path):
        """Every documented key is parsed."""
        path = write_config(
            tmp_path,
            """
            target: linux-arm64
            static: false
            mold: true
            cache:
              tool: sccache
              dir: /cache/sccache
              max_size: 10G
            build:
              jobs: 8
              dir: out
              output: tool
            android:
              ndk_root: /ndk
              api_level: 28
            env:
              CFLAGS: -O3
              VERBOSE: 1
            targets: [linux-amd64, linux-arm64]
            """,
        )

        config = parse_config(path)

        assert config.target == "linux-arm64"
        assert config.static is False
        assert config.mold is True
        assert config.cache.tool == "sccache"
        assert config.cache.dir == "/cache/sccache"
        assert config.cache.max_size == "10G"
        assert config.build.jobs == 8
        assert config.build.dir == "out"
        assert config.build.output == "tool"
        assert config.android.ndk_root == "/ndk"
        assert config.android.api_level == 28
        assert config.env == {"CFLAGS": "-O3", "VERBOSE": "1"}
        assert config.targets == ["linux-amd64", "linux-arm64"]

    def test_empty_file_uses_defaults(self, tmp_path):
        """An empty file is the default configuration."""
        assert parse_config(write_config(tmp_path, "")) == CrossEnvConfig()

    def test_missing_file(self, tmp_path):
        """A missing file is a ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            parse_config(tmp_path / "crossenv.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Syntax errors are ConfigErrors."""
        path = write_config(tmp_path, "target: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            parse_config(path)

    def test_unknown_key_warns(self, caplog):
        """Unknown keys are logged, not rejected."""
        with caplog.at_level("WARNING"):
            config = parse_config_data({"target": "wasi", "toolchains": []})

        assert config.target == "wasi"
        assert "Ignoring unknown configuration key: toolchains" in caplog.text

    @pytest.mark.parametrize(
        "data,message",
        [
            ({"target": 5}, "target must be a string"),
            ({"static": "maybe"}, "static must be a boolean"),
            ({"cache": "ccache"}, "cache must be a mapping"),
            ({"cache": {"tool": "distcc"}}, "Invalid cache.tool"),
            ({"build": {"jobs": 0}}, "build.jobs must be a positive integer"),
            ({"build": {"jobs": "many"}}, "build.jobs must be a positive integer"),
            ({"android": {"api_level": 19}}, "too old"),
            ({"env": {"CFLAGS": ["-O2"]}}, "env.CFLAGS must be a scalar"),
            ({"targets": "linux-amd64"}, "targets must be a list"),
            (["target"], "configuration must be a mapping"),
        ],
    )
    def test_wrong_types(self, data, message):
        """Wrong types raise ConfigError."""
        with pytest.raises(ConfigError, match=message):
            parse_config_data(data)


class TestParseBool:
    """Tests for parse_bool."""

    @pytest.mark.parametrize("value", ["1", "true", "TRUE", "yes", "on", True, 1])
    def test_true(self, value):
        """Truthy spellings."""
        assert parse_bool(value, "X") is True

    @pytest.mark.parametrize("value", ["0", "false", "No", "off", "", False, 0])
    def test_false(self, value):
        """Falsy spellings."""
        assert parse_bool(value, "X") is False

    def test_invalid(self):
        """Anything else is an error."""
        with pytest.raises(ConfigError, match="USE_MOLD must be a boolean"):
            parse_bool("sometimes", "USE_MOLD")


class TestApplyEnvironment:
    """Environment variables over the file configuration."""

    def test_env_overrides_file(self):
        """TARGET and ENABLE_STATIC beat crossenv.yaml."""
        config = parse_config_data({"target": "linux-amd64", "static": True})

        updated = apply_environment(
            config, {"TARGET": "linux-arm64", "ENABLE_STATIC": "0", "USE_MOLD": "yes"}
        )

        assert updated.target == "linux-arm64"
        assert updated.static is False
        assert updated.mold is True
        assert config.target == "linux-amd64"

    def test_use_ccache_off(self):
        """USE_CCACHE=0 disables the default cache."""
        updated = apply_environment(CrossEnvConfig(), {"USE_CCACHE": "0"})
        assert updated.cache.tool == "none"

    def test_use_sccache_wins(self):
        """USE_SCCACHE=1 selects sccache even with USE_CCACHE=1."""
        updated = apply_environment(
            CrossEnvConfig(),
            {"USE_CCACHE": "1", "USE_SCCACHE": "1", "SCCACHE_DIR": "/s"},
        )

        assert updated.cache.tool == "sccache"
        assert updated.cache.dir == "/s"

    def test_ccache_dir(self):
        """CCACHE_DIR applies to ccache."""
        updated = apply_environment(CrossEnvConfig(), {"CCACHE_DIR": "/c"})
        assert updated.cache_dir("ccache") == "/c"

    def test_jobs_and_ndk(self):
        """PARALLEL_JOBS and ANDROID_NDK_HOME."""
        updated = apply_environment(
            CrossEnvConfig(), {"PARALLEL_JOBS": "12", "ANDROID_NDK_HOME": "/ndk"}
        )

        assert updated.build.jobs == 12
        assert updated.android.ndk_root == "/ndk"

    def test_invalid_jobs(self):
        """Non-numeric PARALLEL_JOBS is an error."""
        with pytest.raises(ConfigError, match="PARALLEL_JOBS"):
            apply_environment(CrossEnvConfig(), {"PARALLEL_JOBS": "lots"})

    def test_input_not_modified(self):
        """Nested sections are copied."""
        config = CrossEnvConfig()
        apply_environment(config, {"USE_SCCACHE": "1", "PARALLEL_JOBS": "3"})

        assert config.cache.tool == "ccache"
        assert config.build.jobs is None


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, tmp_path):
        """No crossenv.yaml: defaults."""
        assert load_config(tmp_path) == CrossEnvConfig()

    def test_finds_project_file(self, tmp_path):
        """crossenv.yaml in the project root is used."""
        write_config(tmp_path, "target: wasi\n")
        assert load_config(tmp_path).target == "wasi"

    def test_explicit_file_must_exist(self, tmp_path):
        """--config pointing nowhere is an error."""
        with pytest.raises(ConfigError):
            load_config(tmp_path, tmp_path / "other.yaml")

    def test_precedence(self, tmp_path):
        """Environment beats file, file beats defaults."""
        write_config(tmp_path, "target: wasi\nmold: true\n")

        config = load_config(tmp_path, environ={"TARGET": "cosmo"})

        assert config.target == "cosmo"
        assert config.mold is True
        assert config.static is True


class TestDerivedOptions:
    """ResolveOptions, PlanOptions and registry from a configuration."""

    def test_resolve_options(self):
        """Cache tool and directories flow into ResolveOptions."""
        config = parse_config_data(
            {"cache": {"tool": "sccache", "dir": "/s"}, "build": {"jobs": 4}}
        )
        options = config.resolve_options()

        assert options.use_sccache is True
        assert options.use_ccache is False
        assert options.sccache_dir == "/s"
        assert options.parallel_jobs == 4

    def test_no_cache(self):
        """tool: none disables both caches."""
        options = parse_config_data({"cache": {"tool": "none"}}).resolve_options()

        assert not options.use_ccache
        assert not options.use_sccache

    def test_plan_options(self):
        """Build section flows into PlanOptions."""
        config = parse_config_data(
            {"static": False, "build": {"dir": "out", "output": "tool", "jobs": 2}}
        )
        options = config.plan_options()

        assert options.build_dir == "out"
        assert options.output_name == "tool"
        assert options.jobs == 2
        assert options.static is False

    def test_registry_uses_android_settings(self):
        """api_level reaches the Android compiler names."""
        config = parse_config_data({"android": {"api_level": 30}})
        profile = config.registry().lookup("android-arm64")

        assert profile.compiler_c == ("aarch64-linux-android30-clang",)
