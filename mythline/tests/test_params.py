"""
Tests for parameter blocks.

Tests:
- Splitting, trimming and ordering
- Bare flags and values containing '='
- One level of nested braces
- Error offsets
- Serialization
"""

import pytest

from ..line.errors import (
    EmptyParameterKey,
    InvalidParameterKey,
    NestingTooDeep,
    TrailingGarbage,
    UnbalancedBraces,
)
from ..line.params import parse_param_block, serialize_params, sorted_params, split_top_level


class TestParseParamBlock:
    """Tests for parse_param_block."""

    def test_pairs_in_order(self):
        """Pairs are returned in order of appearance."""
        params = parse_param_block("{b=2;a=1;c=3}")
        assert params == {"b": "2", "a": "1", "c": "3"}
        assert list(params) == ["b", "a", "c"]

    def test_absent_block(self):
        """None and empty string mean no parameters."""
        assert parse_param_block(None) == {}
        assert parse_param_block("") == {}

    def test_empty_block(self):
        """'{}' is an empty map."""
        assert parse_param_block("{}") == {}

    def test_split_on_first_equals(self):
        """Values may contain '='."""
        params = parse_param_block("{m=<caster.var.x>=5;a=b=c}")
        assert params == {"m": "<caster.var.x>=5", "a": "b=c"}

    def test_bare_flag(self):
        """A pair without '=' is a key with an empty value."""
        params = parse_param_block("{silent;a=1}")
        assert params == {"silent": "", "a": "1"}

    def test_whitespace_trimmed(self):
        """Keys and values are trimmed."""
        params = parse_param_block("{ a = 1 ;  b=two words  }")
        assert params == {"a": "1", "b": "two words"}

    def test_range_values_stay_strings(self):
        """Range expressions are kept verbatim."""
        params = parse_param_block("{amount=-1to2;chance=0.5}")
        assert params == {"amount": "-1to2", "chance": "0.5"}

    def test_empty_pieces_skipped(self):
        """A trailing ';' or ';;' adds nothing."""
        assert parse_param_block("{a=1;;b=2;}") == {"a": "1", "b": "2"}

    def test_repeated_key_last_value_first_position(self):
        """A repeated key keeps its first position and takes the last value."""
        params = parse_param_block("{a=1;b=2;a=3}")
        assert params == {"a": "3", "b": "2"}
        assert list(params) == ["a", "b"]

    def test_one_level_of_nesting(self):
        """An inner block is kept verbatim and its ';' does not split."""
        params = parse_param_block("{s=aura{d=20;i=1};c=3}")
        assert params == {"s": "aura{d=20;i=1}", "c": "3"}

    def test_unclosed_block(self):
        """An unclosed block reports the offset of its '{'."""
        with pytest.raises(UnbalancedBraces) as exc_info:
            parse_param_block("{a=1")
        assert exc_info.value.offset == 0

    def test_extra_closing_brace(self):
        """A stray '}' after the block is unbalanced."""
        with pytest.raises(UnbalancedBraces):
            parse_param_block("{a=1}}")

    def test_missing_opening_brace(self):
        """A block must start with '{'."""
        with pytest.raises(UnbalancedBraces):
            parse_param_block("a=1}")

    def test_text_after_block(self):
        """Text after the closing brace is rejected."""
        with pytest.raises(TrailingGarbage) as exc_info:
            parse_param_block("{a=1} extra")
        assert exc_info.value.segment == " extra"

    def test_nesting_too_deep(self):
        """A third level of braces is an error at that brace."""
        with pytest.raises(NestingTooDeep) as exc_info:
            parse_param_block("{a={b={c=1}}}")
        assert exc_info.value.offset == 6

    def test_empty_key(self):
        """An empty key is an error reported at the block offset."""
        with pytest.raises(EmptyParameterKey) as exc_info:
            parse_param_block("{a=1; =5}")
        assert exc_info.value.offset == 0
        assert exc_info.value.segment == "=5"

    @pytest.mark.parametrize("block", ["{a b=1}", "{a{b}=1}", "{x{y}}"])
    def test_invalid_key(self, block):
        """Keys holding whitespace or braces are rejected."""
        with pytest.raises(InvalidParameterKey) as exc_info:
            parse_param_block(block)
        assert exc_info.value.offset == 0


class TestSplitTopLevel:
    """Tests for split_top_level."""

    def test_ignores_delimiters_in_braces(self):
        """Only top-level delimiters split."""
        assert split_top_level("a=1;b={x;y};c") == ["a=1", "b={x;y}", "c"]

    def test_single_piece(self):
        """No delimiter gives one piece."""
        assert split_top_level("a=1") == ["a=1"]


class TestSerializeParams:
    """Tests for serialize_params."""

    def test_empty_map(self):
        """An empty map produces no braces at all."""
        assert serialize_params({}) == ""

    def test_insertion_order(self):
        """Pairs are written in insertion order without spaces."""
        assert serialize_params({"b": "2", "a": "1"}) == "{b=2;a=1}"

    def test_values_not_escaped(self):
        """'=' in values is written as-is."""
        assert serialize_params({"m": "<caster.var.x>=5"}) == "{m=<caster.var.x>=5}"

    def test_bare_flag(self):
        """An empty value is written as 'key='."""
        assert serialize_params({"silent": ""}) == "{silent=}"

    def test_serialized_block_parses_back(self):
        """A serialized map parses to the same map."""
        params = {"amount": "-1to2", "s": "aura{d=20;i=1}", "flag": ""}
        assert parse_param_block(serialize_params(params)) == params


class TestSortedParams:
    """Tests for sorted_params."""

    def test_case_insensitive_order(self):
        """Keys are sorted ignoring case."""
        assert list(sorted_params({"b": "1", "A": "2", "c": "3"})) == ["A", "b", "c"]
