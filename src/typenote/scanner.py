"""On-demand scanner for type annotations.

Unlike a batch lexer, the scanner produces one token per :meth:`Scanner.scan`
call so the parser can peek ahead speculatively with
:meth:`Scanner.look_ahead` and roll back to where it started.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, TypeVar

from typenote.errors import LexError
from typenote.source import Span
from typenote.tokens import KEYWORDS, PUNCTUATION, SyntaxKind, Token

T = TypeVar("T")

_ESCAPES = {"n": "\n", "r": "\r", "t": "\t"}


@dataclass(frozen=True)
class ScannerState:
    """Everything needed to put a scanner back where it was."""

    pos: int
    line: int
    col: int
    token: Token | None


class Scanner:
    """Tokenizes a single annotation string."""

    def __init__(self, source: str, filename: str = "<annotation>") -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.col = 1
        self._token: Token | None = None

    # ── Public API ───────────────────────────────────────────────

    @property
    def token(self) -> Token:
        """The most recently scanned token."""
        if self._token is None:
            raise RuntimeError("scan() has not been called yet")
        return self._token

    @property
    def token_value(self) -> str:
        """Decoded text of the most recent identifier, string or number."""
        return self.token.value

    def get_token_value(self) -> str:
        return self.token_value

    def scan(self) -> SyntaxKind:
        """Advance to the next token and return its kind."""
        self._skip_whitespace()
        if self.pos >= len(self.source):
            return self._emit(SyntaxKind.EOF, "", self.line, self.col)

        ch = self.source[self.pos]
        if ch in ('"', "'"):
            return self._scan_string()
        if _is_digit(ch) or (ch == '-' and _is_digit(self._peek(1))):
            return self._scan_number()
        if ch.isalpha() or ch in ('_', '$'):
            return self._scan_identifier()
        return self._scan_punctuation()

    def look_ahead(self, predicate: Callable[[], T]) -> T:
        """Run ``predicate`` and restore the scanner state afterwards.

        The predicate may call :meth:`scan` as often as it likes; the
        scanner is put back even if the predicate raises.
        """
        saved = self._save()
        try:
            return predicate()
        finally:
            self._restore(saved)

    # ── Helpers ──────────────────────────────────────────────────

    def _save(self) -> ScannerState:
        return ScannerState(self.pos, self.line, self.col, self._token)

    def _restore(self, state: ScannerState) -> None:
        self.pos = state.pos
        self.line = state.line
        self.col = state.col
        self._token = state.token

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _emit(self, kind: SyntaxKind, value: str, start_line: int, start_col: int) -> SyntaxKind:
        end_col = self.col - 1 if self.col > 1 else 1
        if self.line == start_line:
            end_col = max(end_col, start_col)
        span = Span(self.filename, start_line, start_col, self.line, end_col)
        self._token = Token(kind, value, span)
        return kind

    def _error(self, message: str, line: int, col: int) -> LexError:
        return LexError(message, Span(self.filename, line, col, line, col))

    def _skip_whitespace(self) -> None:
        while self.pos < len(self.source) and self.source[self.pos].isspace():
            self._advance()

    # ── Literals ─────────────────────────────────────────────────

    def _scan_string(self) -> SyntaxKind:
        start_line = self.line
        start_col = self.col
        quote = self._advance()
        text = []
        while self.pos < len(self.source) and self.source[self.pos] != quote:
            if self.source[self.pos] == '\\':
                self._advance()  # skip backslash
                if self.pos >= len(self.source):
                    break
                ch = self._advance()
                text.append(_ESCAPES.get(ch, ch))
            else:
                text.append(self._advance())

        if self.pos >= len(self.source):
            raise self._error("unterminated string literal", start_line, start_col)

        self._advance()  # skip closing quote
        return self._emit(SyntaxKind.STRING_LITERAL, ''.join(text), start_line, start_col)

    def _scan_number(self) -> SyntaxKind:
        start_line = self.line
        start_col = self.col
        text = []
        if self.source[self.pos] == '-':
            text.append(self._advance())
        while self.pos < len(self.source) and _is_digit(self.source[self.pos]):
            text.append(self._advance())

        # Fraction only when a digit follows the dot
        if self._peek() == '.' and _is_digit(self._peek(1)):
            text.append(self._advance())
            while self.pos < len(self.source) and _is_digit(self.source[self.pos]):
                text.append(self._advance())

        return self._emit(SyntaxKind.NUMBER_LITERAL, ''.join(text), start_line, start_col)

    # ── Identifiers and Keywords ─────────────────────────────────

    def _scan_identifier(self) -> SyntaxKind:
        start_line = self.line
        start_col = self.col
        text = []
        while self.pos < len(self.source) and _is_ident_char(self.source[self.pos]):
            text.append(self._advance())
        word = ''.join(text)
        kind = KEYWORDS.get(word, SyntaxKind.IDENTIFIER)
        return self._emit(kind, word, start_line, start_col)

    # ── Punctuation ──────────────────────────────────────────────

    def _scan_punctuation(self) -> SyntaxKind:
        start_line = self.line
        start_col = self.col
        ch = self.source[self.pos]

        if self.source.startswith('...', self.pos):
            self._advance()
            self._advance()
            self._advance()
            return self._emit(SyntaxKind.DOT_DOT_DOT, '...', start_line, start_col)

        kind = PUNCTUATION.get(ch)
        if kind is None:
            raise self._error(
                f"unexpected character {ch!r} at column {start_col}",
                start_line, start_col,
            )
        self._advance()
        return self._emit(kind, ch, start_line, start_col)


def _is_digit(ch: str) -> bool:
    return ch.isascii() and ch.isdigit()


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch in ('_', '$')


def tokenize(source: str, filename: str = "<annotation>") -> list[Token]:
    """Scan the whole annotation and return its tokens, ending with EOF."""
    scanner = Scanner(source, filename)
    tokens: list[Token] = []
    while True:
        kind = scanner.scan()
        tokens.append(scanner.token)
        if kind is SyntaxKind.EOF:
            return tokens

