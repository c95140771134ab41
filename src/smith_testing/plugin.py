"""pytest plugin wiring the fixture helpers into a test session.

At configure time the plugin loads the settings and fixes the project root.
The root comes from the first of these that is set: the ``smith_project_root``
ini option, ``paths.project_root`` in the settings, the ``SMITH_ROOT``
environment variable, or the pytest rootdir.

Fixtures:
    fixture_context: Per-test FixtureContext for the suite declared on the
        test's class or module.
    path_resolver: Session-wide PathResolver.
    config_file: ``path_resolver.resolve``, for ``config_file("name")``.
"""

import logging
import os
from pathlib import Path
from typing import Callable, Generator, Optional, Tuple

import pytest

from smith_testing.bindings import FixtureContext
from smith_testing.errors import ConfigurationError
from smith_testing.file_helper import suite_for
from smith_testing.paths import PathResolver
from smith_testing.settings import (
    Settings,
    configure_logging,
    configure_project_root,
    install_settings,
)

logger = logging.getLogger(__name__)

TMP_DIR_MARKER = "tmp_dir"

# Root, settings and log level in place before this session configured
_previous_state = pytest.StashKey[Tuple[Optional[str], Optional[Settings], int]]()


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addini(
        "smith_project_root",
        help="Project root fixture paths are resolved against (default: rootdir)",
    )
    parser.addini(
        "smith_settings",
        help="YAML settings file for smith_testing (default: search config/)",
    )


def _resolve_against(rootpath: Path, value: str) -> str:
    path = Path(value)
    if not path.is_absolute():
        path = rootpath / path
    return str(path)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        f"{TMP_DIR_MARKER}: provision a temporary directory for fixture bindings",
    )

    settings_path = config.getini("smith_settings")
    settings = Settings(
        _resolve_against(config.rootpath, settings_path) if settings_path else None
    )

    root = (
        config.getini("smith_project_root")
        or settings.project_root
        or os.environ.get("SMITH_ROOT")
        or str(config.rootpath)
    )
    root = _resolve_against(config.rootpath, root)

    package_logger = logging.getLogger("smith_testing")
    previous_level = package_logger.level
    previous_settings = install_settings(settings)
    previous_root = configure_project_root(root)
    configure_logging(settings)
    config.stash[_previous_state] = (previous_root, previous_settings, previous_level)

    logger.debug("Fixture project root: %s", root)


def pytest_unconfigure(config: pytest.Config) -> None:
    state = config.stash.get(_previous_state, None)
    if state is None:
        return
    previous_root, previous_settings, previous_level = state
    configure_project_root(previous_root)
    install_settings(previous_settings)
    logging.getLogger("smith_testing").setLevel(previous_level)


@pytest.fixture
def fixture_context(request: pytest.FixtureRequest) -> Generator[FixtureContext, None, None]:
    """Fresh bindings for the current test.

    The temporary directory is only provisioned for tests carrying the
    ``tmp_dir`` marker.
    """
    suite = suite_for(request.cls)
    if suite is None:
        suite = suite_for(request.module)
    if suite is None:
        raise ConfigurationError(
            f"{request.node.nodeid} requested fixture_context but no suite is "
            "declared; use smith_testing.include() or @file_helper()"
        )

    tmp_dir = None
    if request.node.get_closest_marker(TMP_DIR_MARKER) is not None:
        tmp_dir = request.getfixturevalue("tmp_path")

    context = suite.new_context(tmp_dir)
    yield context
    context.reset()


@pytest.fixture(scope="session")
def path_resolver() -> PathResolver:
    return PathResolver.from_settings()


@pytest.fixture(scope="session")
def config_file(path_resolver: PathResolver) -> Callable[[str], str]:
    """Resolve fixture file names under the project's resource directory."""
    return path_resolver.resolve
