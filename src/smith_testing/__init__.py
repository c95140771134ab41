"""Fixture file helpers for pytest suites.

Resolve fixture files under the project's ``spec/resource`` directory and
declare lazy per-test values such as ``wpa_roam_file``::

    from smith_testing import config_file, file_helper, wpa_roam_file_setup

    path = config_file("wpa-roam.conf")

The pytest integration lives in ``smith_testing.plugin``.
"""

__version__ = "0.1.0"

from smith_testing.bindings import FixtureContext, LazyBinding, Suite
from smith_testing.errors import (
    ConfigurationError,
    DuplicateBindingError,
    MissingFixtureContextError,
    SmithTestingError,
)
from smith_testing.file_helper import (
    WPA_ROAM_FILE_NAME,
    file_helper,
    include,
    read_wpa_roam_file,
    suite_for,
    wpa_roam_file_setup,
)
from smith_testing.paths import PathResolver, config_file
from smith_testing.settings import (
    Settings,
    configure_project_root,
    current_project_root,
    load_settings,
    reload_settings,
)

__all__ = [
    "__version__",
    "ConfigurationError",
    "DuplicateBindingError",
    "FixtureContext",
    "LazyBinding",
    "MissingFixtureContextError",
    "PathResolver",
    "Settings",
    "SmithTestingError",
    "Suite",
    "WPA_ROAM_FILE_NAME",
    "config_file",
    "configure_project_root",
    "current_project_root",
    "file_helper",
    "include",
    "load_settings",
    "read_wpa_roam_file",
    "reload_settings",
    "suite_for",
    "wpa_roam_file_setup",
]
