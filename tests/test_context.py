"""Tests for render data helpers."""

from decimal import Decimal

import pytest

from stencil import Context, ctx, is_empty, to_context, underlying_value
from stencil.context import template_vars


class TestContext:
    """The chainable Context builder."""

    def test_add_chains(self):
        data = ctx().add("Title", "Hi").add("Count", 2)
        assert data.data == {"Title": "Hi", "Count": 2}

    def test_empty_key_ignored(self):
        assert ctx().add("", "x").data == {}

    def test_contains_and_len(self):
        data = ctx().add("a", 1)
        assert "a" in data
        assert len(data) == 1

    def test_to_context(self):
        existing = ctx()
        assert to_context(existing) is existing
        mapping = {"a": 1}
        assert to_context(mapping).data is mapping
        assert to_context(None).data == {}
        assert to_context(42).data == {}

    def test_underlying_value(self):
        data = ctx().add("a", 1)
        assert underlying_value(data) == {"a": 1}
        assert underlying_value([1]) == [1]
        assert underlying_value(None) is None


class TestTemplateVars:
    """How render data becomes template variables."""

    def test_context(self):
        assert template_vars(Context({"a": 1})) == {"a": 1}

    def test_mapping_copied(self):
        mapping = {"a": 1}
        result = template_vars(mapping)
        assert result == mapping
        assert result is not mapping

    def test_none(self):
        assert template_vars(None) == {}

    def test_other_object(self):
        obj = object()
        assert template_vars(obj) == {"data": obj}


class TestIsEmpty:
    """Zero-value predicate."""

    @pytest.mark.parametrize(
        "value",
        [None, "", b"", [], (), {}, set(), frozenset(), 0, 0.0, Decimal(0), Context()],
    )
    def test_empty(self, value):
        assert is_empty(value) is True

    @pytest.mark.parametrize(
        "value",
        ["a", b"a", [0], (None,), {"a": None}, {0}, 1, -1.5, Decimal("0.1"), False, True, object()],
    )
    def test_not_empty(self, value):
        assert is_empty(value) is False

    def test_non_empty_context(self):
        assert is_empty(ctx().add("a", 1)) is False
