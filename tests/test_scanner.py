"""Host expression scanner tests."""

import pytest

from pycomprehension._errors import ComprehensionSyntaxError
from pycomprehension._scanner import (
    join_tokens,
    match_bracketed,
    max_placeholder,
    tokenize,
)


def _types(text):
    return [tok.type for tok in tokenize(text)]


class TestTokenize:
    def test_basic_classes(self):
        assert _types('f(x, 1.5) + "s"') == [
            "NAME", "LPAR", "NAME", "COMMA", "NUMBER", "RPAR", "OP", "STRING",
        ]

    def test_string_hides_keywords(self):
        toks = tokenize('" x for x " for x')
        assert [t.value for t in toks] == ['" x for x "', "for", "x"]

    def test_comment_dropped(self):
        toks = tokenize("x # for y\n for x")
        assert [t.value for t in toks] == ["x", "for", "x"]

    @pytest.mark.parametrize("literal", [
        "'single'",
        '"double"',
        "r'\\d+'",
        "b'bytes'",
        "rb'raw bytes'",
        "f'{x}'",
        '"""triple\nquoted"""',
        "'''triple ' single'''",
        "'escaped \\' quote'",
    ])
    def test_string_literal_forms(self, literal):
        toks = tokenize(literal)
        assert len(toks) == 1
        assert toks[0].type == "STRING"
        assert toks[0].value == literal

    def test_multi_char_operators(self):
        toks = tokenize("a ** b == c // d != e <= f")
        ops = [t.value for t in toks if t.type == "OP"]
        assert ops == ["**", "==", "//", "!=", "<="]

    def test_assignment_operator_kept_separate(self):
        toks = tokenize("x=-1")
        assert [t.value for t in toks] == ["x", "=", "-", "1"]

    def test_line_continuation_is_whitespace(self):
        assert [t.value for t in tokenize("a + \\\n b")] == ["a", "+", "b"]

    def test_empty(self):
        assert tokenize("") == []

    def test_unterminated_string(self):
        with pytest.raises(ComprehensionSyntaxError, match="invalid token") as exc:
            tokenize('x + "abc for x')
        assert exc.value.remainder == '"abc for x'

    def test_unknown_character(self):
        with pytest.raises(ComprehensionSyntaxError):
            tokenize("x ? y")


class TestMatchBracketed:
    def test_nested(self):
        text = "f(a, (b), [c]) + 1"
        toks = tokenize(text)
        close = match_bracketed(text, toks, 1)
        assert toks[close].value == ")"
        assert close == 11

    def test_string_with_paren(self):
        text = 'f(")") + 1'
        toks = tokenize(text)
        assert match_bracketed(text, toks, 1) == 3

    def test_unclosed(self):
        text = "f(a, (b)"
        with pytest.raises(ComprehensionSyntaxError, match="unbalanced") as exc:
            match_bracketed(text, tokenize(text), 1)
        assert exc.value.remainder == "(a, (b)"

    def test_mismatched(self):
        text = "(a]"
        with pytest.raises(ComprehensionSyntaxError, match="unbalanced"):
            match_bracketed(text, tokenize(text), 0)


class TestJoinTokens:
    def test_collapses_whitespace(self):
        assert join_tokens(tokenize("a  +   b")) == "a + b"

    def test_drops_comments(self):
        assert join_tokens(tokenize("a + b # note\n * 2")) == "a + b * 2"

    def test_keeps_adjacent_tokens(self):
        assert join_tokens(tokenize("x**2")) == "x**2"
        assert join_tokens(tokenize("f (x)")) == "f (x)"

    def test_multi_line_string_becomes_single_line(self):
        assert join_tokens(tokenize("'''a\nb'''")) == "'a\\nb'"

    def test_multi_line_fstring_newline_escaped(self):
        assert join_tokens(tokenize('f"""{x}\n"""')) == 'f"""{x}\\n"""'


class TestMaxPlaceholder:
    def test_none(self):
        assert max_placeholder(tokenize("x + y")) == 0

    def test_highest(self):
        assert max_placeholder(tokenize("_1 + _3 + _2")) == 3

    def test_multi_digit(self):
        assert max_placeholder(tokenize("_10 + _9")) == 10

    def test_strings_and_comments_ignored(self):
        assert max_placeholder(tokenize('"_5" and _1 # _6\n')) == 1

    def test_non_placeholder_names(self):
        assert max_placeholder(tokenize("_x + __1 + _1a")) == 0

    def test_fstring_replacement_fields(self):
        assert max_placeholder(tokenize('f"{_2 + 1}" + _1')) == 2

    def test_fstring_nested_field(self):
        assert max_placeholder(tokenize("rf'{x:{_3}}'")) == 3

    def test_fstring_literal_text_ignored(self):
        assert max_placeholder(tokenize('f"_2 {x}"')) == 0

    def test_malformed_fstring(self):
        with pytest.raises(ComprehensionSyntaxError, match="invalid token") as exc:
            max_placeholder(tokenize('f"{}"'))
        assert exc.value.remainder == 'f"{}"'
