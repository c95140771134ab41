"""Pytest configuration and shared fixtures for smith_testing tests."""

import sys
from pathlib import Path

import pytest

# Add src to path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

import smith_testing.settings  # noqa: E402
from fixtures import load_fixture  # noqa: E402

pytest_plugins = ["pytester", "smith_testing.plugin"]


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def resource_dir(project_root: Path) -> Path:
    """Get the directory holding project fixture files."""
    return project_root / "spec" / "resource"


@pytest.fixture
def wpa_roam_sample() -> str:
    """Sample wpa-roam.conf contents."""
    return load_fixture("wpa-roam-sample.conf")


@pytest.fixture
def unset_project_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear the process-wide project root for the duration of a test."""
    monkeypatch.setattr(smith_testing.settings, "_project_root", None)


@pytest.fixture
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear the global settings instance, restoring it afterwards."""
    monkeypatch.setattr(smith_testing.settings, "_global_settings", None)


# Markers for test categories
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
