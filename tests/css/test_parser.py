"""Tests for --deprecated declaration parsing."""

from deprecheck.css.parser import CssParseResult, extract_message, parse_css
from deprecheck.types import DeprecatedClass


def _names(result: CssParseResult) -> list[str]:
    return [c.class_name for c in result.classes]


class TestParseCss:
    """parse_css extracts deprecated classes from rule blocks."""

    def test_given_simple_rule_then_extracts_class(self) -> None:
        # Given
        css = """
        .old-button {
          --deprecated: "Use .btn-primary instead";
          color: red;
        }
        """

        # When
        result = parse_css(css, "/path/to/file.css")

        # Then
        assert result.classes == (
            DeprecatedClass(
                class_name="old-button",
                message="Use .btn-primary instead",
                source_file="/path/to/file.css",
                line=2,
            ),
        )
        assert result.errors == ()

    def test_given_multiple_rules_then_extracts_in_source_order(self) -> None:
        css = """
        .old-button {
          --deprecated: "Use .btn-primary instead";
          color: red;
        }

        .legacy-card {
          --deprecated: "Use .card-modern instead";
          padding: 10px;
        }
        """
        result = parse_css(css, "/path/to/file.css")
        assert _names(result) == ["old-button", "legacy-card"]
        assert [c.line for c in result.classes] == [2, 7]

    def test_given_grouped_selectors_then_each_class_shares_message(self) -> None:
        css = """
        .old-btn, .legacy-btn {
          --deprecated: "Use .btn instead";
          display: inline-block;
        }
        """
        result = parse_css(css, "/path/to/file.css")
        assert _names(result) == ["old-btn", "legacy-btn"]
        assert {c.message for c in result.classes} == {"Use .btn instead"}

    def test_given_single_quotes_then_message_extracted(self) -> None:
        css = ".old-class {\n  --deprecated: 'Use .new-class instead';\n}"
        result = parse_css(css, "/test.css")
        assert len(result.classes) == 1
        assert result.classes[0].message == "Use .new-class instead"

    def test_given_rule_without_marker_then_ignored(self) -> None:
        css = """
        .normal-class { color: blue; }
        .deprecated-class {
          --deprecated: "This is deprecated";
          color: red;
        }
        """
        assert _names(parse_css(css, "/test.css")) == ["deprecated-class"]

    def test_given_hyphenated_name_then_kept_whole(self) -> None:
        css = '.tw-badges-yellow-300 {\n  --deprecated: "Use tw-badge-warning instead";\n}'
        assert _names(parse_css(css, "/test.css")) == ["tw-badges-yellow-300"]

    def test_given_empty_css_then_empty_result(self) -> None:
        result = parse_css("", "/empty.css")
        assert result.classes == ()
        assert result.errors == ()

    def test_given_no_deprecations_then_empty_result(self) -> None:
        css = ".normal { color: red; }\n.another { padding: 10px; }"
        assert parse_css(css, "/test.css").classes == ()

    def test_given_id_selector_then_not_reported(self) -> None:
        css = '#old-id {\n  --deprecated: "This is an ID, not a class";\n  color: red;\n}'
        assert parse_css(css, "/test.css").classes == ()

    def test_given_mixed_id_and_class_then_only_class_reported(self) -> None:
        css = '#container, .old-class {\n  --deprecated: "Both are deprecated";\n}'
        assert _names(parse_css(css, "/test.css")) == ["old-class"]

    def test_given_empty_message_then_not_reported(self) -> None:
        assert parse_css('.a { --deprecated: ""; }', "/t.css").classes == ()

    def test_given_unterminated_block_then_no_error(self) -> None:
        result = parse_css('.a { --deprecated: "x";', "/t.css")
        assert result.classes == ()
        assert result.errors == ()


class TestNestedSelectors:
    """SCSS parent-selector shorthand."""

    def test_given_bare_parent_selector_then_modifier_reported(self) -> None:
        css = """
        &.old-variant {
          --deprecated: "Use .button-primary instead";
        }
        """
        result = parse_css(css, "/test.scss")
        assert "old-variant" in _names(result)

    def test_given_nested_in_parent_block_then_both_reported(self) -> None:
        # The property sits inside .button's body, so the rule-block pass
        # reports the parent too.
        css = """
        .button {
          &.old-variant {
            --deprecated: "Use .button-primary instead";
          }
        }
        """
        result = parse_css(css, "/test.scss")
        assert _names(result) == ["button", "old-variant"]
        assert result.classes[1].line == 3


class TestExtractMessage:
    def test_returns_first_quoted_value(self) -> None:
        assert extract_message('--deprecated: "a"; --deprecated: "b";') == "a"

    def test_returns_none_without_marker(self) -> None:
        assert extract_message("color: red;") is None

    def test_tolerates_whitespace_around_colon(self) -> None:
        assert extract_message('--deprecated   :   "spaced"') == "spaced"
