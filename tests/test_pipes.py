"""Tests for the optional template pipes."""

import uuid

import pytest
from markupsafe import Markup

from stencil import Engine, MemoryFS, PipeError, STANDARD_PIPES, ctx, standard_pipes
from stencil.pipes import (
    alter,
    br,
    deep_alter,
    iif,
    is_set,
    make_dict,
    number_fmt,
    regexp_fmt,
    to_json,
    uuid_pipe,
)


class TestPipeFunctions:
    """Each pipe on its own."""

    def test_uuid(self):
        value = uuid_pipe()
        assert uuid.UUID(value).version == 4
        assert uuid_pipe() != value

    def test_iif(self):
        assert iif(True, "yes", "no") == "yes"
        assert iif(0, "yes", "no") == "no"

    def test_number_fmt(self):
        assert number_fmt("{} USD", 1234567) == "1,234,567 USD"
        assert number_fmt("{} of {}", 1500, 12000.5) == "1,500 of 12,000.5"
        assert number_fmt("{}", "text") == "text"

    def test_number_fmt_bad_layout(self):
        with pytest.raises(PipeError, match="numberFmt"):
            number_fmt("{} and {}", 1)

    def test_regexp_fmt(self):
        assert regexp_fmt("09121234567", r"(\d{4})(\d{3})(\d{4})", "$1 $2 $3") == "0912 123 4567"
        assert regexp_fmt("2024-05-01", r"(?P<y>\d+)-(?P<m>\d+)-(?P<d>\d+)", "${d}/${m}/${y}") == "01/05/2024"
        assert regexp_fmt("no digits", r"\d+", "#") == "no digits"

    def test_regexp_fmt_bad_pattern(self):
        with pytest.raises(PipeError, match="invalid pattern"):
            regexp_fmt("x", "(", "y")

    def test_regexp_fmt_bad_group(self):
        with pytest.raises(PipeError, match="invalid replacement"):
            regexp_fmt("abc", "(a)", "$2")

    def test_to_json(self):
        assert to_json({"a": [1, 2], "b": None}) == '{"a": [1, 2], "b": null}'
        assert to_json(ctx().add("name", "x")) == '{"name": "x"}'

    def test_to_json_unserializable(self):
        with pytest.raises(PipeError, match="toJson"):
            to_json({"a": object()})

    def test_dict(self):
        assert make_dict("name", "Ada", "age", 36) == {"name": "Ada", "age": 36}
        assert make_dict() == {}

    def test_dict_odd_arguments(self):
        with pytest.raises(PipeError, match="invalid number of arguments"):
            make_dict("name")

    def test_dict_key_type(self):
        with pytest.raises(PipeError, match="keys must be strings"):
            make_dict(1, "one")

    def test_is_set(self):
        assert is_set({"title": None}, "title") is True
        assert is_set({}, "title") is False
        assert is_set(ctx().add("title", "x"), "title") is True
        assert is_set(None, "title") is False

    def test_alter(self):
        assert alter(None, "alt") == "alt"
        assert alter(0, "alt") == 0
        assert alter("", "alt") == ""

    @pytest.mark.parametrize("value", [None, "", 0, 0.0, [], {}, ()])
    def test_deep_alter_empty(self, value):
        assert deep_alter(value, "alt") == "alt"

    @pytest.mark.parametrize("value", ["x", 3, [0], {"a": 1}, False])
    def test_deep_alter_kept(self, value):
        assert deep_alter(value, "alt") == value

    def test_br(self):
        result = br("a<b>\nc")
        assert isinstance(result, Markup)
        assert result == "a&lt;b&gt;<br/>c"


class TestStandardPipes:
    """Selecting pipes by name."""

    def test_all(self):
        assert standard_pipes() == dict(STANDARD_PIPES)
        assert set(STANDARD_PIPES) == {
            "uuid", "iif", "numberFmt", "regexpFmt", "toJson",
            "dict", "isSet", "alter", "deepAlter", "br",
        }

    def test_subset(self):
        assert standard_pipes("iif", "br") == {"iif": iif, "br": br}

    def test_unknown(self):
        with pytest.raises(KeyError):
            standard_pipes("iif", "nope")


class TestPipesInTemplates:
    """Pipes registered on an engine are callable from templates."""

    @pytest.fixture
    def render(self):
        def _render(source: str, data=None) -> str:
            engine = Engine(MemoryFS({"page.tpl": source}), pipes=standard_pipes())
            engine.load()
            return engine.compile("page", "", data).decode()

        return _render

    def test_iif(self, render):
        assert render('{{ iif(admin, "Admin", "Member") }}', {"admin": False}) == "Member"

    def test_dict_and_is_set(self, render):
        source = '{% set d = dict("title", "Hi") %}{{ isSet(d, "title") }}/{{ isSet(d, "x") }}'
        assert render(source) == "True/False"

    def test_deep_alter(self, render):
        assert render('{{ deepAlter(subtitle, "Untitled") }}', {"subtitle": ""}) == "Untitled"

    def test_br_not_escaped_twice(self, render):
        assert render("{{ br(comment) }}", {"comment": "a\n<b>"}) == "a<br/>&lt;b&gt;"

    def test_number_fmt(self, render):
        assert render('{{ numberFmt("{} items", count) }}', {"count": 12345}) == "12,345 items"

    def test_unregistered_pipe_is_undefined(self):
        engine = Engine(MemoryFS({"page.tpl": "{{ iif(true, 1, 2) }}"}))
        engine.load()
        with pytest.raises(Exception, match="iif"):
            engine.compile("page")

    def test_pipe_error_surfaces(self, render):
        with pytest.raises(PipeError):
            render('{{ dict("odd") }}')
