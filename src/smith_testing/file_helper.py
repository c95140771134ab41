"""File helpers for test suites.

Test classes and modules opt in with ``include`` (or the ``file_helper``
decorator), passing setup functions that register bindings on the host's
suite::

    @file_helper(wpa_roam_file_setup)
    @pytest.mark.tmp_dir
    class TestRoaming:
        def test_reads_config(self, fixture_context):
            assert "network=" in fixture_context.wpa_roam_file

The pytest plugin looks the suite up on the test's class or module and hands
each test a fresh FixtureContext.
"""

import errno
import logging
import os
from types import ModuleType
from typing import Any, Callable, Optional, TypeVar, Union

from smith_testing.bindings import FixtureContext, Suite

logger = logging.getLogger(__name__)

SUITE_ATTRIBUTE = "__fixture_suite__"

WPA_ROAM_FILE_NAME = "wpa-roam.conf"

SuiteSetup = Callable[[Suite], Any]
Host = TypeVar("Host", type, ModuleType)


def _host_name(host: Any) -> str:
    if isinstance(host, ModuleType):
        return host.__name__
    return f"{host.__module__}.{host.__qualname__}"


def suite_for(host: Any) -> Optional[Suite]:
    """Return the suite declared on a test class or module, if any.

    Classes inherit the suite of their closest declaring base class.
    """
    if host is None:
        return None
    return getattr(host, SUITE_ATTRIBUTE, None)


def include(host: Host, *setups: SuiteSetup) -> Host:
    """Attach a suite to ``host`` and run each setup against it.

    Calling ``include`` again on the same host extends its suite. A class
    whose base already declares a suite starts from a copy of the base's
    bindings, so the base suite is never modified.

    Args:
        host: Test class or module opting in.
        *setups: Functions receiving the Suite, such as ``wpa_roam_file_setup``.

    Returns:
        The host, so ``include`` can be used as a decorator.

    Raises:
        DuplicateBindingError: If a setup registers a name already present.
    """
    suite = vars(host).get(SUITE_ATTRIBUTE)
    if suite is None:
        suite = Suite(_host_name(host))
        inherited = suite_for(host)
        if inherited is not None:
            for binding in inherited:
                suite.let(binding.name, binding.factory, binding.description)
        setattr(host, SUITE_ATTRIBUTE, suite)
        logger.debug("Included file helper in %s", suite.name)

    for setup in setups:
        setup(suite)
    return host


def file_helper(*setups: SuiteSetup) -> Callable[[Host], Host]:
    """Decorator form of ``include``."""

    def decorator(host: Host) -> Host:
        return include(host, *setups)

    return decorator


def read_wpa_roam_file(tmp_dir: Union[str, os.PathLike]) -> str:
    """Read the roaming configuration written to ``tmp_dir``.

    Raises:
        OSError: If the file is missing, unreadable or not valid UTF-8;
            ``filename`` holds the attempted path.
    """
    path = os.path.join(tmp_dir, WPA_ROAM_FILE_NAME)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise OSError(errno.EIO, f"Cannot decode {WPA_ROAM_FILE_NAME} as UTF-8: {e}", path) from e


def wpa_roam_file_setup(suite: Suite) -> None:
    """Register ``wpa_roam_file``, the text of ``wpa-roam.conf`` in the temp dir.

    Tests reading the binding must be marked with ``@pytest.mark.tmp_dir``;
    otherwise the read fails with MissingFixtureContextError before any
    file is opened.
    """

    def _wpa_roam_file(context: FixtureContext) -> str:
        return read_wpa_roam_file(context.tmp_dir)

    suite.let(
        "wpa_roam_file",
        _wpa_roam_file,
        description=f"contents of {WPA_ROAM_FILE_NAME} in the test's temporary directory",
    )
