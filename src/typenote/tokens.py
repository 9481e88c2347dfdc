"""Token kinds and token representation for the annotation scanner."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typenote.source import Span


class SyntaxKind(Enum):
    # Literals
    IDENTIFIER = auto()
    STRING_LITERAL = auto()
    NUMBER_LITERAL = auto()

    # Keywords
    ANY_KEYWORD = auto()
    UNION_KEYWORD = auto()

    # Punctuation
    QUESTION = auto()
    DOT = auto()
    DOT_DOT_DOT = auto()
    COMMA = auto()
    COLON = auto()
    OPEN_PAREN = auto()
    CLOSE_PAREN = auto()
    OPEN_BRACKET = auto()
    CLOSE_BRACKET = auto()
    OPEN_BRACE = auto()
    CLOSE_BRACE = auto()
    LESS_THAN = auto()
    GREATER_THAN = auto()
    RIGHT_ARROW = auto()
    ASTERISK = auto()

    # Special
    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: SyntaxKind
    value: str
    span: Span


KEYWORDS: dict[str, SyntaxKind] = {
    "any": SyntaxKind.ANY_KEYWORD,
    "union": SyntaxKind.UNION_KEYWORD,
}

PUNCTUATION: dict[str, SyntaxKind] = {
    "?": SyntaxKind.QUESTION,
    ".": SyntaxKind.DOT,
    ",": SyntaxKind.COMMA,
    ":": SyntaxKind.COLON,
    "(": SyntaxKind.OPEN_PAREN,
    ")": SyntaxKind.CLOSE_PAREN,
    "[": SyntaxKind.OPEN_BRACKET,
    "]": SyntaxKind.CLOSE_BRACKET,
    "{": SyntaxKind.OPEN_BRACE,
    "}": SyntaxKind.CLOSE_BRACE,
    "<": SyntaxKind.LESS_THAN,
    ">": SyntaxKind.GREATER_THAN,
    "→": SyntaxKind.RIGHT_ARROW,
    "*": SyntaxKind.ASTERISK,
}
