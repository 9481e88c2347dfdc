"""Tests for the annotation scanner."""

from __future__ import annotations

import pytest

from typenote.errors import LexError
from typenote.scanner import Scanner, tokenize
from typenote.tokens import SyntaxKind


def lex(source: str) -> list[tuple[SyntaxKind, str]]:
    """Helper: scan source and return (kind, value) pairs, excluding EOF."""
    return [(t.kind, t.value) for t in tokenize(source) if t.kind != SyntaxKind.EOF]


def kinds(source: str) -> list[SyntaxKind]:
    """Helper: scan source and return just the token kinds, excluding EOF."""
    return [t.kind for t in tokenize(source) if t.kind != SyntaxKind.EOF]


class TestScannerBasic:
    def test_empty_source(self):
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].kind == SyntaxKind.EOF

    def test_eof_repeats(self):
        scanner = Scanner("a")
        assert scanner.scan() == SyntaxKind.IDENTIFIER
        assert scanner.scan() == SyntaxKind.EOF
        assert scanner.scan() == SyntaxKind.EOF

    def test_whitespace_only(self):
        assert kinds(" \t\n ") == []

    def test_identifier(self):
        assert lex("hello") == [(SyntaxKind.IDENTIFIER, "hello")]

    def test_identifier_with_dollar_and_digits(self):
        assert lex("$el_2") == [(SyntaxKind.IDENTIFIER, "$el_2")]

    def test_keywords(self):
        assert kinds("any union") == [SyntaxKind.ANY_KEYWORD, SyntaxKind.UNION_KEYWORD]

    def test_keyword_prefix_is_identifier(self):
        assert lex("anything unions") == [
            (SyntaxKind.IDENTIFIER, "anything"),
            (SyntaxKind.IDENTIFIER, "unions"),
        ]

    def test_dotted_name(self):
        assert kinds("dom.Node") == [
            SyntaxKind.IDENTIFIER, SyntaxKind.DOT, SyntaxKind.IDENTIFIER,
        ]

    def test_token_before_scan(self):
        with pytest.raises(RuntimeError):
            Scanner("a").token


class TestScannerPunctuation:
    def test_single_characters(self):
        assert kinds("? . , : ( ) [ ] { } < > *") == [
            SyntaxKind.QUESTION,
            SyntaxKind.DOT,
            SyntaxKind.COMMA,
            SyntaxKind.COLON,
            SyntaxKind.OPEN_PAREN,
            SyntaxKind.CLOSE_PAREN,
            SyntaxKind.OPEN_BRACKET,
            SyntaxKind.CLOSE_BRACKET,
            SyntaxKind.OPEN_BRACE,
            SyntaxKind.CLOSE_BRACE,
            SyntaxKind.LESS_THAN,
            SyntaxKind.GREATER_THAN,
            SyntaxKind.ASTERISK,
        ]

    def test_arrow(self):
        assert kinds("() → a") == [
            SyntaxKind.OPEN_PAREN,
            SyntaxKind.CLOSE_PAREN,
            SyntaxKind.RIGHT_ARROW,
            SyntaxKind.IDENTIFIER,
        ]

    def test_rest_marker_before_dot(self):
        assert lex("...args") == [
            (SyntaxKind.DOT_DOT_DOT, "..."),
            (SyntaxKind.IDENTIFIER, "args"),
        ]

    def test_two_dots_are_two_tokens(self):
        assert kinds("..") == [SyntaxKind.DOT, SyntaxKind.DOT]

    def test_no_spaces_needed(self):
        assert kinds("union<a,b>") == [
            SyntaxKind.UNION_KEYWORD,
            SyntaxKind.LESS_THAN,
            SyntaxKind.IDENTIFIER,
            SyntaxKind.COMMA,
            SyntaxKind.IDENTIFIER,
            SyntaxKind.GREATER_THAN,
        ]


class TestScannerLiterals:
    def test_empty_string(self):
        assert lex('""') == [(SyntaxKind.STRING_LITERAL, "")]

    def test_single_character_string(self):
        assert lex('"a"') == [(SyntaxKind.STRING_LITERAL, "a")]

    def test_single_quoted_string(self):
        assert lex("'left'") == [(SyntaxKind.STRING_LITERAL, "left")]

    def test_escaped_quote(self):
        assert lex(r'"say \"hi\""') == [(SyntaxKind.STRING_LITERAL, 'say "hi"')]

    def test_escaped_single_quote(self):
        assert lex(r"'it\'s'") == [(SyntaxKind.STRING_LITERAL, "it's")]

    def test_control_escapes(self):
        assert lex(r'"a\nb\t"') == [(SyntaxKind.STRING_LITERAL, "a\nb\t")]

    def test_other_quote_needs_no_escape(self):
        assert lex("\"it's\"") == [(SyntaxKind.STRING_LITERAL, "it's")]

    def test_integer(self):
        assert lex("42") == [(SyntaxKind.NUMBER_LITERAL, "42")]

    def test_negative_decimal(self):
        assert lex("-1.5") == [(SyntaxKind.NUMBER_LITERAL, "-1.5")]

    def test_trailing_dot_not_part_of_number(self):
        assert lex("3.") == [
            (SyntaxKind.NUMBER_LITERAL, "3"),
            (SyntaxKind.DOT, "."),
        ]

    def test_get_token_value(self):
        scanner = Scanner('"x"')
        scanner.scan()
        assert scanner.get_token_value() == "x"
        assert scanner.token_value == "x"


class TestScannerErrors:
    def test_unexpected_character(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("a % b")
        err = exc_info.value
        assert "'%'" in str(err)
        assert err.diagnostics[0].code == "E100"
        assert err.span.start_col == 3

    def test_bare_minus(self):
        with pytest.raises(LexError):
            tokenize("-")

    def test_unterminated_string(self):
        with pytest.raises(LexError, match="unterminated string"):
            tokenize('"abc')

    def test_unterminated_after_escape(self):
        with pytest.raises(LexError, match="unterminated string"):
            tokenize('"abc\\')


class TestScannerSpans:
    def test_identifier_span(self):
        scanner = Scanner("  foo", "x.ts")
        scanner.scan()
        span = scanner.token.span
        assert (span.file, span.start_line, span.start_col, span.end_col) == ("x.ts", 1, 3, 5)

    def test_multiline_position(self):
        tokens = tokenize("a\n  b")
        assert tokens[1].span.start_line == 2
        assert tokens[1].span.start_col == 3


class TestLookAhead:
    def test_returns_predicate_result(self):
        scanner = Scanner("a: b")
        scanner.scan()
        assert scanner.look_ahead(lambda: scanner.scan() == SyntaxKind.COLON)
        assert not scanner.look_ahead(lambda: scanner.scan() == SyntaxKind.DOT)

    def test_restores_after_success(self):
        scanner = Scanner("a: b")
        scanner.scan()
        scanner.look_ahead(lambda: scanner.scan() == SyntaxKind.COLON)
        assert scanner.token.kind == SyntaxKind.IDENTIFIER
        assert scanner.token_value == "a"
        assert scanner.scan() == SyntaxKind.COLON

    def test_restores_after_several_tokens(self):
        scanner = Scanner("a.b.c)")
        scanner.scan()

        def skip_name() -> SyntaxKind:
            while scanner.scan() in (SyntaxKind.DOT, SyntaxKind.IDENTIFIER):
                pass
            return scanner.token.kind

        assert scanner.look_ahead(skip_name) == SyntaxKind.CLOSE_PAREN
        assert scanner.token_value == "a"
        assert [scanner.scan() for _ in range(5)] == [
            SyntaxKind.DOT,
            SyntaxKind.IDENTIFIER,
            SyntaxKind.DOT,
            SyntaxKind.IDENTIFIER,
            SyntaxKind.CLOSE_PAREN,
        ]

    def test_restores_when_predicate_raises(self):
        scanner = Scanner("a %")
        scanner.scan()
        with pytest.raises(LexError):
            scanner.look_ahead(scanner.scan)
        assert scanner.token_value == "a"
        assert scanner.pos == 1

    def test_nested_look_ahead(self):
        scanner = Scanner("a b c")
        scanner.scan()

        def outer() -> str:
            scanner.scan()
            inner = scanner.look_ahead(lambda: (scanner.scan(), scanner.token_value)[1])
            return scanner.token_value + inner

        assert scanner.look_ahead(outer) == "bc"
        assert scanner.token_value == "a"
