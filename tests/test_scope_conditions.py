"""Tests for condition evaluation and computed defaults."""

from __future__ import annotations

import pytest

from hasscope.core.scope.conditions import call_with_context, is_applicable
from tests.helpers import FakeRequest


class User:
    def __init__(self, admin: bool) -> None:
        self.admin = admin

    def is_admin(self) -> bool:
        return self.admin


class TestIsApplicable:
    """Tests for if/unless condition evaluation."""

    def test_absent_condition_always_applies(self):
        """Test absent condition always applies."""
        assert is_applicable(None, object(), True) is True
        assert is_applicable(None, object(), False) is True

    def test_callable_truthiness(self):
        """Test callable truthiness."""
        context = FakeRequest(items=[1])

        assert is_applicable(lambda ctx: ctx.items, context, True) is True
        assert is_applicable(lambda ctx: ctx.items, context, False) is False
        assert is_applicable(lambda ctx: [], context, False) is True

    def test_zero_argument_callable(self):
        """Test zero argument callable."""
        assert is_applicable(lambda: True, object(), True) is True

    def test_method_name(self):
        """Test a condition naming a context method."""
        class Controller:
            def signed_in(self) -> bool:
                return False

        assert is_applicable("signed_in", Controller(), True) is False
        assert is_applicable("signed_in", Controller(), False) is True

    def test_attribute_name(self):
        """Test a condition naming a plain attribute."""
        assert is_applicable("beta", FakeRequest(beta=True), True) is True

    def test_missing_method_propagates(self):
        """Test missing method propagates."""
        with pytest.raises(AttributeError):
            is_applicable("missing", FakeRequest(), True)

    def test_dotted_path_is_deprecated(self):
        """Test dotted path is deprecated."""
        context = FakeRequest(current_user=User(admin=True))

        with pytest.warns(DeprecationWarning, match="current_user.is_admin"):
            assert is_applicable("current_user.is_admin", context, True) is True


class TestCallWithContext:
    """Tests for calling computed values with or without the context."""

    def test_passes_context_when_accepted(self):
        """Test passes context when accepted."""
        context = object()

        assert call_with_context(lambda ctx: ctx, context) is context

    def test_omits_context_for_zero_arguments(self):
        """Test omits context for zero arguments."""
        assert call_with_context(lambda: "x", object()) == "x"

    def test_var_positional_receives_context(self):
        """Test var positional receives context."""
        assert call_with_context(lambda *args: args, "ctx") == ("ctx",)

    def test_builtin_gets_context(self):
        """Test builtin gets context."""
        assert call_with_context(str, 5) == "5"
