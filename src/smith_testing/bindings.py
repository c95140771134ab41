"""Lazy, memoized per-test values.

A Suite collects named bindings declared once for a group of tests. Each
test gets its own FixtureContext, which evaluates a binding the first time it
is read and returns the cached value afterwards. The cache lives only as long
as the context; the pytest plugin resets it when the test finishes.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from smith_testing.errors import DuplicateBindingError, MissingFixtureContextError

logger = logging.getLogger(__name__)

BindingFactory = Callable[["FixtureContext"], Any]


@dataclass(frozen=True)
class LazyBinding:
    """A named value computed on demand from a fixture context.

    Attributes:
        name: Name the value is read under.
        factory: Callable receiving the FixtureContext and returning the value.
        description: Optional human readable summary.
    """
    name: str
    factory: BindingFactory
    description: Optional[str] = None

    def evaluate(self, context: "FixtureContext") -> Any:
        """Compute the value for ``context`` without caching."""
        return self.factory(context)


class Suite:
    """Bindings declared for one group of tests.

    Attributes:
        name: Suite name, normally the qualified name of the host class
            or module.
    """

    def __init__(self, name: str):
        self.name = name
        self._bindings: Dict[str, LazyBinding] = {}

    def let(
        self,
        name: str,
        factory: BindingFactory,
        description: Optional[str] = None,
    ) -> LazyBinding:
        """Register a lazy binding.

        Args:
            name: Name the value will be read under. Must be an identifier
                so it can be read as a context attribute, and must not
                shadow a FixtureContext member such as ``reset``.
            factory: Called with the FixtureContext on first access.
            description: Optional summary shown in reprs and logs.

        Returns:
            The registered binding.

        Raises:
            DuplicateBindingError: If ``name`` is already registered.
            ValueError: If ``name`` is not a valid public identifier or is
                reserved by FixtureContext.
        """
        if not name.isidentifier() or name.startswith("_"):
            raise ValueError(f"Invalid binding name: {name!r}")
        if name in RESERVED_NAMES:
            raise ValueError(f"Invalid binding name: {name!r} is a FixtureContext attribute")
        if name in self._bindings:
            raise DuplicateBindingError(name, self.name)

        binding = LazyBinding(name=name, factory=factory, description=description)
        self._bindings[name] = binding
        logger.debug("Registered binding %s on suite %s", name, self.name)
        return binding

    def binding(self, name: str) -> LazyBinding:
        """Get a registered binding.

        Raises:
            KeyError: If no binding with that name exists.
        """
        if name not in self._bindings:
            raise KeyError(f"Binding not registered in suite '{self.name}': {name}")
        return self._bindings[name]

    @property
    def names(self) -> List[str]:
        return list(self._bindings)

    def new_context(
        self, tmp_dir: Optional[Union[str, os.PathLike]] = None
    ) -> "FixtureContext":
        """Create a fresh context for one test."""
        return FixtureContext(self, tmp_dir)

    def __contains__(self, name: object) -> bool:
        return name in self._bindings

    def __iter__(self) -> Iterator[LazyBinding]:
        return iter(self._bindings.values())

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        return f"Suite(name={self.name!r}, bindings={self.names})"


class FixtureContext:
    """Per-test view of a suite's bindings.

    Bindings can be read with ``context.get("name")`` or as attributes,
    ``context.name``. Each one is evaluated at most once until ``reset()``.

    Attributes:
        suite: Suite the bindings come from.
    """

    def __init__(
        self, suite: Suite, tmp_dir: Optional[Union[str, os.PathLike]] = None
    ):
        self.suite = suite
        self._tmp_dir: Optional[Path] = Path(tmp_dir) if tmp_dir is not None else None
        self._values: Dict[str, Any] = {}

    @property
    def tmp_dir(self) -> Path:
        """Temporary directory provisioned for this test.

        Raises:
            MissingFixtureContextError: If the test did not request one.
        """
        if self._tmp_dir is None:
            raise MissingFixtureContextError(
                f"No temporary directory provisioned for suite '{self.suite.name}'; "
                "mark the test with @pytest.mark.tmp_dir"
            )
        return self._tmp_dir

    @property
    def has_tmp_dir(self) -> bool:
        return self._tmp_dir is not None

    def get(self, name: str) -> Any:
        """Return the value of a binding, evaluating it on first access.

        Raises:
            KeyError: If the binding is not registered.
        """
        if name in self._values:
            return self._values[name]

        binding = self.suite.binding(name)
        logger.debug("Evaluating binding %s", name)
        value = binding.evaluate(self)
        self._values[name] = value
        return value

    def is_evaluated(self, name: str) -> bool:
        return name in self._values

    def reset(self) -> None:
        """Drop every cached value."""
        self._values.clear()

    def __getattr__(self, name: str) -> Any:
        # Only reached for names not found through normal lookup
        suite = self.__dict__.get("suite")
        if name.startswith("_") or suite is None or name not in suite:
            raise AttributeError(
                f"{type(self).__name__!r} has no binding or attribute {name!r}"
            )
        return self.get(name)

    def __repr__(self) -> str:
        return (
            f"FixtureContext(suite={self.suite.name!r}, "
            f"evaluated={sorted(self._values)})"
        )


# Names attribute access would resolve before reaching a binding
RESERVED_NAMES = frozenset(dir(FixtureContext)) | {"suite"}
