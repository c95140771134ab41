"""Tests for smith_testing.bindings module."""

from unittest.mock import Mock

import pytest

from smith_testing.bindings import FixtureContext, LazyBinding, Suite
from smith_testing.errors import DuplicateBindingError, MissingFixtureContextError


class TestSuite:
    """Test Suite registration."""

    @pytest.fixture
    def suite(self):
        return Suite("tests.TestExample")

    def test_let_registers_binding(self, suite):
        """Test a binding is registered under its name."""
        factory = Mock(return_value=1)
        binding = suite.let("answer", factory, description="the answer")
        assert isinstance(binding, LazyBinding)
        assert binding.name == "answer"
        assert binding.description == "the answer"
        assert "answer" in suite
        assert suite.names == ["answer"]
        assert len(suite) == 1
        assert suite.binding("answer") is binding

    def test_let_does_not_evaluate(self, suite):
        """Test registering a binding does not call its factory."""
        factory = Mock()
        suite.let("answer", factory)
        factory.assert_not_called()

    def test_duplicate_registration_fails(self, suite):
        """Test registering a name twice raises DuplicateBindingError."""
        suite.let("answer", Mock())
        with pytest.raises(DuplicateBindingError) as exc_info:
            suite.let("answer", Mock())
        assert exc_info.value.name == "answer"
        assert exc_info.value.suite == "tests.TestExample"
        assert "already registered" in str(exc_info.value)

    def test_duplicate_is_value_error(self, suite):
        """Test DuplicateBindingError can be caught as ValueError."""
        suite.let("answer", Mock())
        with pytest.raises(ValueError):
            suite.let("answer", Mock())

    @pytest.mark.parametrize(
        "name",
        [
            "", "not valid", "_private", "1st",
            "reset", "get", "tmp_dir", "suite", "has_tmp_dir", "is_evaluated",
        ],
    )
    def test_invalid_names(self, suite, name):
        """Test names that cannot be read as attributes are rejected."""
        with pytest.raises(ValueError, match="Invalid binding name"):
            suite.let(name, Mock())

    def test_reserved_name_not_registered(self, suite):
        """Test a rejected name leaves context members intact."""
        with pytest.raises(ValueError, match="FixtureContext attribute"):
            suite.let("reset", lambda context: "value")
        assert "reset" not in suite
        assert callable(suite.new_context().reset)

    def test_unknown_binding(self, suite):
        """Test looking up an unregistered binding raises KeyError."""
        with pytest.raises(KeyError):
            suite.binding("missing")

    def test_iteration_preserves_order(self, suite):
        """Test bindings iterate in registration order."""
        suite.let("first", Mock())
        suite.let("second", Mock())
        assert [b.name for b in suite] == ["first", "second"]

    def test_new_context(self, suite, tmp_path):
        """Test contexts are created per call."""
        first = suite.new_context(tmp_path)
        second = suite.new_context()
        assert first is not second
        assert first.suite is suite
        assert first.has_tmp_dir
        assert not second.has_tmp_dir


class TestFixtureContext:
    """Test lazy evaluation and memoization."""

    @pytest.fixture
    def factory(self):
        return Mock(side_effect=lambda context: ["computed"])

    @pytest.fixture
    def suite(self, factory):
        suite = Suite("tests.TestExample")
        suite.let("value", factory)
        return suite

    def test_lazy_until_first_access(self, suite, factory):
        """Test the factory is not called until the binding is read."""
        context = suite.new_context()
        factory.assert_not_called()
        assert not context.is_evaluated("value")

    def test_first_access_evaluates(self, suite, factory):
        """Test the first read calls the factory with the context."""
        context = suite.new_context()
        assert context.get("value") == ["computed"]
        factory.assert_called_once_with(context)
        assert context.is_evaluated("value")

    def test_memoized(self, suite, factory):
        """Test later reads return the same object without re-evaluating."""
        context = suite.new_context()
        first = context.get("value")
        second = context.value
        assert first is second
        assert factory.call_count == 1

    def test_contexts_are_independent(self, suite, factory):
        """Test each context evaluates its own value."""
        a = suite.new_context()
        b = suite.new_context()
        assert a.value is not b.value
        assert factory.call_count == 2

    def test_reset_drops_values(self, suite, factory):
        """Test reset forces re-evaluation on the next read."""
        context = suite.new_context()
        first = context.value
        context.reset()
        assert not context.is_evaluated("value")
        assert context.value is not first
        assert factory.call_count == 2

    def test_failed_evaluation_not_cached(self):
        """Test a factory error propagates and is retried on the next read."""
        factory = Mock(side_effect=[OSError("boom"), "ok"])
        suite = Suite("tests.TestFlaky")
        suite.let("value", factory)
        context = suite.new_context()

        with pytest.raises(OSError, match="boom"):
            context.get("value")
        assert not context.is_evaluated("value")
        assert context.get("value") == "ok"

    def test_unknown_attribute(self, suite):
        """Test unknown names raise AttributeError."""
        context = suite.new_context()
        with pytest.raises(AttributeError, match="missing"):
            context.missing

    def test_unknown_get(self, suite):
        """Test get() on an unknown name raises KeyError."""
        with pytest.raises(KeyError):
            suite.new_context().get("missing")

    def test_tmp_dir(self, suite, tmp_path):
        """Test the provisioned temporary directory is exposed as a Path."""
        context = suite.new_context(str(tmp_path))
        assert context.tmp_dir == tmp_path

    def test_tmp_dir_missing(self, suite):
        """Test reading an unprovisioned tmp_dir raises MissingFixtureContextError."""
        context = suite.new_context()
        with pytest.raises(MissingFixtureContextError, match="tmp_dir"):
            context.tmp_dir

    def test_missing_context_is_lookup_error(self, suite):
        """Test MissingFixtureContextError can be caught as LookupError."""
        with pytest.raises(LookupError):
            suite.new_context().tmp_dir

    def test_repr(self, suite):
        """Test string representation lists evaluated bindings."""
        context = suite.new_context()
        context.get("value")
        assert repr(context) == "FixtureContext(suite='tests.TestExample', evaluated=['value'])"


class TestLazyBinding:
    """Test LazyBinding dataclass."""

    def test_evaluate_does_not_cache(self):
        """Test evaluate calls the factory every time."""
        factory = Mock(return_value=3)
        binding = LazyBinding(name="three", factory=factory)
        context = Suite("s").new_context()
        assert binding.evaluate(context) == 3
        assert binding.evaluate(context) == 3
        assert factory.call_count == 2

    def test_frozen(self):
        """Test bindings are immutable."""
        binding = LazyBinding(name="x", factory=Mock())
        with pytest.raises(AttributeError):
            binding.name = "y"
