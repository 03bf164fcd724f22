"""Tests for the Swift tokenizer."""

import pytest

from swiftstyle_cli.errors import ParseFailure
from swiftstyle_cli.models import Token, TokenKind
from swiftstyle_cli.parser import Parser, SwiftTokenizer
from swiftstyle_cli.source_model import SourceModel


def _kinds(tokens):
    return [(t.kind, t.text) for t in tokens]


def test_tokens_tile_source(tokenizer: SwiftTokenizer, clean_swift_code: str):
    """Concatenated token texts reproduce the input exactly."""
    tokens = tokenizer.tokenize(clean_swift_code)

    assert "".join(t.text for t in tokens) == clean_swift_code
    for left, right in zip(tokens, tokens[1:]):
        assert left.end == right.start


def test_simple_declaration(tokenizer: SwiftTokenizer):
    tokens = tokenizer.tokenize("let x = 5")

    assert _kinds(tokens) == [
        (TokenKind.KEYWORD, "let"),
        (TokenKind.WHITESPACE, " "),
        (TokenKind.IDENTIFIER, "x"),
        (TokenKind.WHITESPACE, " "),
        (TokenKind.OPERATOR, "="),
        (TokenKind.WHITESPACE, " "),
        (TokenKind.NUMBER, "5"),
    ]


def test_positions_are_one_based(tokenizer: SwiftTokenizer):
    tokens = tokenizer.tokenize("let a = 1\r\nvar b = 2\n")

    newline = tokens[7]
    assert newline.kind is TokenKind.NEWLINE
    assert newline.text == "\r\n"

    var = tokens[8]
    assert var.text == "var"
    assert (var.line, var.column) == (2, 1)
    assert tokens[10].text == "b"
    assert (tokens[10].line, tokens[10].column) == (2, 5)


class TestComments:
    """Comment handling."""

    def test_nested_block_comment_is_one_token(self, tokenizer: SwiftTokenizer):
        tokens = tokenizer.tokenize("/* outer /* inner */ still outer */ let")

        assert tokens[0].kind is TokenKind.COMMENT
        assert tokens[0].text == "/* outer /* inner */ still outer */"
        assert tokens[-1].text == "let"

    def test_line_comment_trailing_whitespace_is_separate(self, tokenizer: SwiftTokenizer):
        tokens = tokenizer.tokenize("x // note   \ny")

        assert _kinds(tokens)[2:5] == [
            (TokenKind.COMMENT, "// note"),
            (TokenKind.WHITESPACE, "   "),
            (TokenKind.NEWLINE, "\n"),
        ]

    def test_unterminated_block_comment(self, tokenizer: SwiftTokenizer):
        with pytest.raises(ParseFailure) as exc_info:
            tokenizer.tokenize("let a = 1\n/* never closed")

        assert exc_info.value.line == 2
        assert exc_info.value.column == 1


class TestStrings:
    """String literal handling."""

    def test_interpolation_with_nested_quotes(self, tokenizer: SwiftTokenizer):
        source = 'let s = "a \\("b") c"'
        tokens = tokenizer.tokenize(source)

        strings = [t for t in tokens if t.kind is TokenKind.STRING]
        assert len(strings) == 1
        assert strings[0].text == '"a \\("b") c"'

    def test_multiline_string(self, tokenizer: SwiftTokenizer):
        source = 'let s = """\nsay "hi"\n"""\nlet t = 1'
        tokens = tokenizer.tokenize(source)

        strings = [t for t in tokens if t.kind is TokenKind.STRING]
        assert len(strings) == 1
        assert strings[0].text == '"""\nsay "hi"\n"""'
        last_let = [t for t in tokens if t.text == "let"][-1]
        assert last_let.line == 4

    def test_raw_string(self, tokenizer: SwiftTokenizer):
        tokens = tokenizer.tokenize('let r = #"raw \\(x) "quoted""#')

        assert tokens[-1].kind is TokenKind.STRING
        assert tokens[-1].text == '#"raw \\(x) "quoted""#'

    def test_brackets_inside_strings_are_ignored(self, tokenizer: SwiftTokenizer):
        tokens = tokenizer.tokenize('let s = "({["')

        assert tokens[-1].kind is TokenKind.STRING

    def test_unterminated_string_reports_position(self, tokenizer: SwiftTokenizer):
        with pytest.raises(ParseFailure) as exc_info:
            tokenizer.tokenize('let s = "abc\nlet y = 1')

        assert exc_info.value.line == 1
        assert exc_info.value.column == 9
        assert exc_info.value.offset == 8


class TestOperatorsAndPunctuation:
    """Operators, ranges, attributes and directives."""

    def test_range_operators(self, tokenizer: SwiftTokenizer):
        tokens = tokenizer.tokenize("a...b..<c")

        assert _kinds(tokens) == [
            (TokenKind.IDENTIFIER, "a"),
            (TokenKind.OPERATOR, "..."),
            (TokenKind.IDENTIFIER, "b"),
            (TokenKind.OPERATOR, "..<"),
            (TokenKind.IDENTIFIER, "c"),
        ]

    def test_member_access_dot_is_punctuation(self, tokenizer: SwiftTokenizer):
        tokens = tokenizer.tokenize("a.b")

        assert tokens[1].kind is TokenKind.PUNCTUATION

    def test_operator_stops_before_comment(self, tokenizer: SwiftTokenizer):
        tokens = tokenizer.tokenize("a =// c")

        assert tokens[2].text == "="
        assert tokens[3].kind is TokenKind.COMMENT

    def test_attributes_and_directives(self, tokenizer: SwiftTokenizer):
        tokens = tokenizer.tokenize("@objc #if DEBUG")

        assert tokens[0].kind is TokenKind.ATTRIBUTE
        assert tokens[0].text == "@objc"
        assert tokens[2].kind is TokenKind.DIRECTIVE
        assert tokens[2].text == "#if"

    def test_backticked_and_shorthand_identifiers(self, tokenizer: SwiftTokenizer):
        tokens = tokenizer.tokenize("`default` $0")

        assert tokens[0].kind is TokenKind.IDENTIFIER
        assert tokens[2].kind is TokenKind.IDENTIFIER
        assert tokens[2].text == "$0"

    def test_contextual_keywords_are_identifiers(self, tokenizer: SwiftTokenizer):
        tokens = tokenizer.tokenize("open final")

        assert tokens[0].kind is TokenKind.IDENTIFIER
        assert tokens[2].kind is TokenKind.IDENTIFIER


class TestBrackets:
    """Bracket balancing."""

    def test_unclosed_brace(self, tokenizer: SwiftTokenizer):
        with pytest.raises(ParseFailure, match="Unclosed"):
            tokenizer.tokenize("func f() {\n")

    def test_mismatched_closer(self, tokenizer: SwiftTokenizer):
        with pytest.raises(ParseFailure, match="Mismatched"):
            tokenizer.tokenize("foo(]")

    def test_unmatched_closer(self, tokenizer: SwiftTokenizer):
        with pytest.raises(ParseFailure) as exc_info:
            tokenizer.tokenize("let a = 1\n}")

        assert exc_info.value.line == 2


def test_unexpected_character(tokenizer: SwiftTokenizer):
    with pytest.raises(ParseFailure, match="Unexpected character"):
        tokenizer.tokenize("let x = 5 €")


def test_parser_interface_is_tokenize_only():
    """Any Parser that tiles the text can back a source model."""
    class WholeText(Parser):
        def tokenize(self, text):
            return [Token(TokenKind.IDENTIFIER, text, 0, len(text), 1, 1)]

    model = SourceModel.build("t.swift", "abc", WholeText())

    assert [t.text for t in model.tokens] == ["abc"]
