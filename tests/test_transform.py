"""
Tests for identifier normalization and convention rewriting.
"""

import pytest

from namecheck.engine.transform import (
    apply_convention, contains_special_characters, normalize, to_interface_prefix_upper_camel_case,
    to_lower_camel_case, to_underscore_lower_camel_case, to_upper_camel_case, with_convention,
)
from namecheck.engine.types import IdentifierToken, NamingConvention


ALL_CONVENTIONS = list(NamingConvention)

SAMPLE_IDENTIFIERS = [
    "count", "Count", "_count", "my_value", "MyValue", "myValue", "m_count",
    "Iservice", "iLogger", "ILogger", "i", "I", "x1", "_1st", "value_", "a__b",
    "__init__", "HTTPServer", "get_HTTP_response", "naïve", "Größe", "ßeta", "ﬁle", "İtem",
]


def make_token(text, value_text=None, leading="", trailing=""):
    return IdentifierToken(
        text=text,
        value_text=text if value_text is None else value_text,
        start_byte=10,
        end_byte=10 + len(text.encode('utf-8')),
        leading_trivia=leading,
        trailing_trivia=trailing,
    )


class TestNormalize:
    """Underscore handling during normalization."""

    def test_snake_case_becomes_camel_boundaries(self):
        assert normalize("my_value") == "myValue"
        assert normalize("get_http_response") == "getHttpResponse"

    def test_leading_underscore_capitalizes_next_letter(self):
        assert normalize("_count") == "Count"

    def test_trailing_underscore_dropped(self):
        assert normalize("value_") == "value"

    def test_doubled_underscore_collapses(self):
        assert normalize("a__b") == "aB"
        assert normalize("__") == ""

    def test_digit_after_underscore_kept(self):
        assert normalize("_1x") == "1x"

    def test_letters_and_digits_copied(self):
        assert normalize("Value42") == "Value42"

    def test_special_character_detection(self):
        assert not contains_special_characters("my_value")
        assert not contains_special_characters("naïve")
        assert contains_special_characters("a$b")
        assert contains_special_characters("my-value")


class TestConventions:
    """String-level convention rewriting."""

    def test_lower_camel_case(self):
        assert to_lower_camel_case("MyValue") == "myValue"
        assert to_lower_camel_case("my_value") == "myValue"
        assert to_lower_camel_case("X") == "x"

    def test_upper_camel_case(self):
        assert to_upper_camel_case("myValue") == "MyValue"
        assert to_upper_camel_case("get_value") == "GetValue"

    def test_upper_camel_case_empty_normalization_keeps_original(self):
        assert to_upper_camel_case("_") == "_"
        assert to_upper_camel_case("__") == "__"

    def test_underscore_lower_camel_case(self):
        assert to_underscore_lower_camel_case("_count") == "_count"
        assert to_underscore_lower_camel_case("Count") == "_count"
        assert to_underscore_lower_camel_case("count") == "_count"
        assert to_underscore_lower_camel_case("m_count") == "_mCount"

    def test_underscore_lower_camel_case_digit_first_gets_no_prefix(self):
        assert to_underscore_lower_camel_case("_1st") == "1st"

    def test_interface_lowercase_i_prefix(self):
        assert to_interface_prefix_upper_camel_case("iLogger") == "ILogger"

    def test_interface_missing_prefix(self):
        assert to_interface_prefix_upper_camel_case("Logger") == "ILogger"
        assert to_interface_prefix_upper_camel_case("logger") == "ILogger"
        assert to_interface_prefix_upper_camel_case("ilogger") == "IIlogger"

    def test_interface_capital_i_lowercase_rest(self):
        assert to_interface_prefix_upper_camel_case("Iservice") == "IService"

    def test_interface_already_prefixed(self):
        assert to_interface_prefix_upper_camel_case("IService") == "IService"
        assert to_interface_prefix_upper_camel_case("I") == "I"
        assert to_interface_prefix_upper_camel_case("I2") == "I2"

    def test_special_characters_are_left_alone(self):
        for convention in ALL_CONVENTIONS:
            assert apply_convention("a$b", convention) == "a$b"

    def test_case_change_keeps_single_characters(self):
        # "ß", "ﬁ" and "İ" have no one-character counterpart in the other case
        assert to_upper_camel_case("ßeta") == "ßeta"
        assert to_upper_camel_case("ﬁle") == "ﬁle"
        assert to_lower_camel_case("İtem") == "İtem"
        assert to_underscore_lower_camel_case("İtem") == "_İtem"
        assert to_interface_prefix_upper_camel_case("ßeta") == "Ißeta"
        assert normalize("get_ßeta") == "getßeta"

    def test_case_change_still_applies_to_the_rest(self):
        assert to_upper_camel_case("émile") == "Émile"
        assert to_lower_camel_case("Ärger") == "ärger"

    def test_unknown_convention_raises(self):
        with pytest.raises(ValueError):
            apply_convention("value", "snake")
        with pytest.raises(ValueError):
            apply_convention("value", None)


class TestWithConvention:
    """Token-level rewriting and bypass rules."""

    @pytest.mark.parametrize("convention", ALL_CONVENTIONS)
    def test_verbatim_identifier_unchanged(self, convention):
        token = make_token("@class", value_text="class")
        assert with_convention(token, convention) is token

    @pytest.mark.parametrize("convention", ALL_CONVENTIONS)
    def test_escaped_identifier_unchanged(self, convention):
        token = make_token("cl\\u0061ss", value_text="class")
        assert with_convention(token, convention) is token

    def test_rewrite_keeps_span_and_trivia(self):
        token = make_token("myValue", leading="  ", trailing=" ")
        result = with_convention(token, NamingConvention.UPPER_CAMEL_CASE)

        assert result.text == "MyValue"
        assert result.value_text == "MyValue"
        assert result.span == token.span
        assert result.leading_trivia == "  "
        assert result.trailing_trivia == " "
        assert token.text == "myValue"

    def test_conforming_token_text_unchanged(self):
        token = make_token("_count")
        result = with_convention(token, NamingConvention.UNDERSCORE_LOWER_CAMEL_CASE)
        assert result.text == "_count"


class TestProperties:
    """Idempotence and fixed-point behavior across conventions."""

    @pytest.mark.parametrize("convention", ALL_CONVENTIONS)
    @pytest.mark.parametrize("identifier", SAMPLE_IDENTIFIERS)
    def test_idempotent(self, identifier, convention):
        once = apply_convention(identifier, convention)
        assert apply_convention(once, convention) == once

    @pytest.mark.parametrize("convention", ALL_CONVENTIONS)
    @pytest.mark.parametrize("identifier", SAMPLE_IDENTIFIERS)
    def test_token_rewrite_is_fixed_point(self, identifier, convention):
        once = with_convention(make_token(identifier), convention)
        twice = with_convention(once, convention)
        assert twice.text == once.text
