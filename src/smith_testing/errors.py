"""Error types raised by the fixture helpers.

Every error derives from SmithTestingError so callers can catch the whole
family at once, and from a builtin so existing ``except`` clauses keep working.
File access failures are not wrapped: they surface as the OSError raised by
the read itself, with ``filename`` set to the attempted path.
"""


class SmithTestingError(Exception):
    """Base class for fixture helper errors."""


class ConfigurationError(SmithTestingError, RuntimeError):
    """Raised when required configuration is unavailable.

    Typical causes: no project root has been configured, or a test asked
    for a fixture context without declaring a suite.
    """


class MissingFixtureContextError(SmithTestingError, LookupError):
    """Raised when a binding needs a temporary directory the test never requested."""


class DuplicateBindingError(SmithTestingError, ValueError):
    """Raised when a suite registers the same binding name twice."""

    def __init__(self, name: str, suite: str):
        super().__init__(f"Binding '{name}' is already registered in suite '{suite}'")
        self.name = name
        self.suite = suite
