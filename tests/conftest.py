"""
Pytest configuration and shared fixtures for crossenv tests.
"""

from pathlib import Path

import pytest

from crossenv.core.platform import clear_platform_cache
from crossenv.targets import TargetRegistry


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="run integration tests that need real cross toolchains",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --integration flag is provided."""
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (requires --integration)",
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def registry() -> TargetRegistry:
    """Registry with the default NDK settings."""
    return TargetRegistry()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove the toolchain image's configuration variables from os.environ."""
    for name in (
        "TARGET",
        "USE_CCACHE",
        "USE_SCCACHE",
        "USE_MOLD",
        "ENABLE_STATIC",
        "CCACHE_DIR",
        "SCCACHE_DIR",
        "PARALLEL_JOBS",
        "ANDROID_NDK_HOME",
        "CC",
        "CXX",
        "CFLAGS",
        "LDFLAGS",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_platform_cache()
    yield monkeypatch
    clear_platform_cache()


@pytest.fixture
def make_project(tmp_path):
    """Create a project directory containing the given files."""

    def _make(files) -> Path:
        project = tmp_path / "project"
        project.mkdir(exist_ok=True)
        for name, content in files.items():
            path = project / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return project

    return _make
