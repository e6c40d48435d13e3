"""Tests for waypath.routing.compiler: template parsing and regex compilation."""

import pytest

from waypath.errors import BadSubpattern, ConfigurationError
from waypath.routing.compiler import (
    compile_pattern,
    desugar_template,
    parse_template,
    remove_param_from_path,
)


class TestParseTemplate:
    def test_static(self) -> None:
        segments = parse_template("/foo/bar")
        assert len(segments) == 1
        assert segments[0].value == "/foo/bar"
        assert segments[0].is_literal

    def test_param(self) -> None:
        segments = parse_template("/users/{id}")
        assert [s.value for s in segments] == ["/users/", "{id}"]
        assert segments[1].is_param is True
        assert segments[1].param_name == "id"
        assert segments[1].subpattern is None

    def test_colon_prefixed_param(self) -> None:
        segments = parse_template("/{:controller}")
        assert segments[1].param_name == "controller"
        assert segments[1].subpattern is None

    def test_inline_subpattern(self) -> None:
        segments = parse_template("/{:action:(browse|read)}")
        assert segments[1].param_name == "action"
        assert segments[1].subpattern == "(browse|read)"

    def test_inline_subpattern_with_braces(self) -> None:
        segments = parse_template(r"/archive/{year:(\d{4})}/x")
        assert segments[1].param_name == "year"
        assert segments[1].subpattern == r"(\d{4})"
        assert segments[2].value == "/x"

    def test_optional_group(self) -> None:
        segments = parse_template("/archive{/year,month,day}")
        assert segments[1].optional_names == ("year", "month", "day")
        assert segments[1].is_param is False
        assert segments[1].is_literal is False

    def test_malformed_brace_is_literal(self) -> None:
        segments = parse_template("/a{b/c")
        assert len(segments) == 1
        assert segments[0].value == "/a{b/c"

    def test_adjacent_params(self) -> None:
        segments = parse_template("/{id}{format}")
        assert [s.param_name for s in segments if s.is_param] == ["id", "format"]


class TestDesugarTemplate:
    def test_plain_template_unchanged(self) -> None:
        assert desugar_template("/blog/{id}/edit") == ("/blog/{id}/edit", {})

    def test_colon_forms_reduce_to_plain(self) -> None:
        template, tokens = desugar_template("/{:controller}/{:action:(browse|read)}/{:id:(\\d+)}")
        assert template == "/{controller}/{action}/{id}"
        assert tokens == {"action": "(browse|read)", "id": "(\\d+)"}

    def test_optional_group_kept(self) -> None:
        template, tokens = desugar_template("/archive{/year,month}")
        assert template == "/archive{/year,month}"
        assert tokens == {}


class TestRemoveParamFromPath:
    def test_root(self) -> None:
        assert remove_param_from_path("/") == "/"

    def test_inner_param(self) -> None:
        assert remove_param_from_path("/account/foo/{bar}/baz") == "/account/foo//baz"

    def test_optional_group(self) -> None:
        assert remove_param_from_path("/account/foo{/bar}") == "/account/foo"

    def test_leading_param(self) -> None:
        assert remove_param_from_path("/{foo}/bar/baz") == "//bar/baz"

    def test_inline_param(self) -> None:
        assert remove_param_from_path(r"/year/{y:(\d{4})}") == "/year/"


class TestCompilePattern:
    def test_literal_is_escaped(self) -> None:
        pattern = compile_pattern("/feed.xml")
        assert pattern.regex.match("/feed.xml")
        assert pattern.regex.match("/feedXxml") is None

    def test_anchored(self) -> None:
        pattern = compile_pattern("/foo")
        assert pattern.regex.match("/foo/bar") is None
        assert pattern.regex.match("/x/foo") is None
        assert pattern.regex.match("/foo\n") is None

    def test_default_subpattern_excludes_slash(self) -> None:
        pattern = compile_pattern("/users/{name}")
        found = pattern.regex.match("/users/alice")
        assert found is not None
        assert found.group("name") == "alice"
        assert pattern.regex.match("/users/alice/posts") is None

    def test_token_subpattern(self) -> None:
        pattern = compile_pattern("/blog/{id}", {"id": r"(\d+)"})
        assert pattern.regex.match("/blog/42")
        assert pattern.regex.match("/blog/abc") is None

    def test_inline_overrides_token(self) -> None:
        pattern = compile_pattern(r"/blog/{id:(\d+)}", {"id": "([a-z]+)"})
        assert pattern.regex.match("/blog/42")
        assert pattern.regex.match("/blog/abc") is None

    def test_custom_default_subpattern(self) -> None:
        pattern = compile_pattern("/files/{path}", default_subpattern="(.+)")
        found = pattern.regex.match("/files/a/b/c")
        assert found is not None
        assert found.group("path") == "a/b/c"

    def test_names_in_order(self) -> None:
        pattern = compile_pattern("/{a}/{b}{/c,d}", wildcard="rest")
        assert pattern.names == ("a", "b", "c", "d", "rest")

    def test_template_is_desugared(self) -> None:
        pattern = compile_pattern("/{:id:(\\d+)}")
        assert pattern.template == "/{id}"

    def test_optional_group_is_sequential(self) -> None:
        pattern = compile_pattern("/archive{/year,month,day}")
        assert pattern.regex.match("/archive")
        assert pattern.regex.match("/archive/2024")
        assert pattern.regex.match("/archive/2024/05")
        assert pattern.regex.match("/archive/2024/05/17")
        assert pattern.regex.match("/archive/2024/05/17/extra") is None

        found = pattern.regex.match("/archive/2024")
        assert found is not None
        assert found.group("year") == "2024"
        assert found.group("month") is None

    def test_optional_group_uses_tokens(self) -> None:
        pattern = compile_pattern("/archive{/year}", {"year": r"(\d{4})"})
        assert pattern.regex.match("/archive/2024")
        assert pattern.regex.match("/archive/24") is None

    def test_wildcard_trims_trailing_slash(self) -> None:
        pattern = compile_pattern("/files/", wildcard="parts")
        assert pattern.regex.match("/files")
        found = pattern.regex.match("/files/a/b")
        assert found is not None
        assert found.group("parts") == "a/b"

    def test_wildcard_on_root(self) -> None:
        pattern = compile_pattern("/", wildcard="parts")
        assert pattern.regex.match("")
        assert pattern.regex.match("/anything/at/all")


class TestCompileErrors:
    def test_bad_subpattern(self) -> None:
        with pytest.raises(BadSubpattern) as exc_info:
            compile_pattern("/{controller}", {"controller": "[a-zA-Z][a-zA-Z0-9_-]+"})
        assert exc_info.value.name == "controller"
        assert "controller" in str(exc_info.value)

    def test_non_capturing_group_is_bad(self) -> None:
        with pytest.raises(BadSubpattern):
            compile_pattern("/{id}", {"id": r"(?:\d+)"})

    def test_bad_inline_subpattern(self) -> None:
        with pytest.raises(BadSubpattern):
            compile_pattern(r"/{:id:\d+}")

    def test_bad_optional_subpattern(self) -> None:
        with pytest.raises(BadSubpattern):
            compile_pattern("/x{/page}", {"page": r"\d+"})

    def test_two_optional_groups(self) -> None:
        with pytest.raises(ConfigurationError, match="more than one optional"):
            compile_pattern("/a{/b}/c{/d}")

    def test_duplicate_name(self) -> None:
        with pytest.raises(ConfigurationError, match="Cannot compile"):
            compile_pattern("/{id}/{id}")

    def test_invalid_wildcard_name(self) -> None:
        with pytest.raises(ConfigurationError):
            compile_pattern("/files", wildcard="not-valid")

    def test_bad_subpattern_is_configuration_error(self) -> None:
        assert issubclass(BadSubpattern, ConfigurationError)
