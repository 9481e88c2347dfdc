"""Recursive-descent parser for type annotations.

Pulls tokens from a :class:`~typenote.scanner.Scanner` on demand and builds
a tree of :mod:`typenote.type_nodes`. The first error aborts the parse.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Callable, TypeVar

from typenote.errors import ParseError
from typenote.scanner import Scanner
from typenote.source import Span
from typenote.tokens import SyntaxKind, Token
from typenote.type_nodes import (
    AnyType,
    ArrayType,
    EntityType,
    FunctionParameter,
    FunctionType,
    NullableType,
    NumberLiteralType,
    ObjectMember,
    ObjectType,
    StringLiteralType,
    TypeNode,
    UnionType,
)

T = TypeVar("T")


class ParsingContext(Enum):
    PARAMETERS = auto()
    TYPE_ARGUMENTS = auto()
    OBJECT_MEMBERS = auto()


def _describe(tok: Token) -> str:
    if tok.kind is SyntaxKind.EOF:
        return "EOF"
    return f"{tok.kind.name} ({tok.value!r})"


class Parser:
    """Parses one annotation string into a type tree."""

    def __init__(self, source: str, filename: str = "<annotation>") -> None:
        self.filename = filename
        self.scanner = Scanner(source, filename)
        self.scanner.scan()
        self._previous: Token | None = None

    # ── Token access ─────────────────────────────────────────────

    def _current(self) -> Token:
        return self.scanner.token

    def _at(self, kind: SyntaxKind) -> bool:
        return self._current().kind is kind

    def _advance(self) -> Token:
        tok = self._current()
        self._previous = tok
        self.scanner.scan()
        return tok

    def _expect(self, kind: SyntaxKind) -> Token:
        if self._at(kind):
            return self._advance()
        tok = self._current()
        raise ParseError(f"expected {kind.name}, got {_describe(tok)}", tok.span)

    def _skip_optional(self, kind: SyntaxKind) -> bool:
        if self._at(kind):
            self._advance()
            return True
        return False

    def _span_from(self, start: Span) -> Span:
        """Span from ``start`` to the end of the last consumed token."""
        end = self._previous.span if self._previous is not None else start
        return Span(
            self.filename,
            start.start_line, start.start_col,
            end.end_line, end.end_col,
        )

    # ── Entry point ──────────────────────────────────────────────

    def parse(self) -> TypeNode:
        """Parse the whole annotation; trailing tokens are an error."""
        try:
            node = self._parse_type()
        except RecursionError:
            raise ParseError("annotation nested too deeply", self._current().span) from None
        self._expect(SyntaxKind.EOF)
        return node

    # ── Types ────────────────────────────────────────────────────

    def _parse_type(self) -> TypeNode:
        tok = self._current()
        match tok.kind:
            case SyntaxKind.ASTERISK | SyntaxKind.ANY_KEYWORD:
                return self._parse_any()
            case SyntaxKind.OPEN_BRACKET:
                return self._parse_array()
            case SyntaxKind.OPEN_PAREN:
                return self._parse_function()
            case SyntaxKind.QUESTION:
                return self._parse_nullable()
            case SyntaxKind.IDENTIFIER:
                return self._parse_entity()
            case SyntaxKind.UNION_KEYWORD:
                return self._parse_union()
            case SyntaxKind.OPEN_BRACE:
                return self._parse_object()
            case SyntaxKind.STRING_LITERAL:
                return self._parse_string_literal()
            case SyntaxKind.NUMBER_LITERAL:
                return self._parse_number_literal()
            case _:
                raise ParseError(f"unexpected token {_describe(tok)}", tok.span)

    def _parse_any(self) -> AnyType:
        tok = self._advance()
        return AnyType(span=tok.span)

    def _parse_string_literal(self) -> StringLiteralType:
        tok = self._advance()
        return StringLiteralType(tok.value, span=tok.span)

    def _parse_number_literal(self) -> NumberLiteralType:
        tok = self._advance()
        return NumberLiteralType(tok.value, span=tok.span)

    def _parse_nullable(self) -> NullableType:
        start = self._advance().span  # '?'
        inner = self._parse_type()
        return NullableType(inner, span=self._span_from(start))

    def _parse_identifier(self) -> str:
        return self._expect(SyntaxKind.IDENTIFIER).value

    def _parse_entity(self) -> EntityType:
        """Parse ``a`` or a dotted name like ``dom.Node`` into one entity."""
        start = self._current().span
        name = self._parse_identifier()
        while self._skip_optional(SyntaxKind.DOT):
            name += "." + self._parse_identifier()
        return EntityType(name, span=self._span_from(start))

    def _parse_union(self) -> UnionType:
        start = self._advance().span  # 'union'
        types = self._parse_bracketed_list(
            ParsingContext.TYPE_ARGUMENTS, self._parse_type,
            SyntaxKind.LESS_THAN, SyntaxKind.GREATER_THAN,
        )
        return UnionType(tuple(types), span=self._span_from(start))

    def _parse_array(self) -> ArrayType:
        start = self._expect(SyntaxKind.OPEN_BRACKET).span
        element = self._parse_type()
        self._expect(SyntaxKind.CLOSE_BRACKET)
        return ArrayType(element, span=self._span_from(start))

    def _parse_object(self) -> ObjectType:
        start = self._current().span
        members = self._parse_bracketed_list(
            ParsingContext.OBJECT_MEMBERS, self._parse_object_member,
            SyntaxKind.OPEN_BRACE, SyntaxKind.CLOSE_BRACE,
        )
        return ObjectType(tuple(members), span=self._span_from(start))

    def _parse_object_member(self) -> ObjectMember:
        start = self._current().span
        name = self._parse_identifier()
        self._expect(SyntaxKind.COLON)
        member_type = self._parse_type()
        return ObjectMember(name, member_type, span=self._span_from(start))

    # ── Call signatures ──────────────────────────────────────────

    def _parse_function(self) -> FunctionType:
        start = self._current().span
        parameters = self._parse_bracketed_list(
            ParsingContext.PARAMETERS, self._parse_function_parameter,
            SyntaxKind.OPEN_PAREN, SyntaxKind.CLOSE_PAREN,
        )
        return_type = None
        if self._skip_optional(SyntaxKind.RIGHT_ARROW):
            return_type = self._parse_type()
        return FunctionType(tuple(parameters), return_type, span=self._span_from(start))

    def _parse_function_parameter(self) -> FunctionParameter:
        """Parse ``...name: T``, ``name: T`` or a bare ``T``."""
        start = self._current().span
        name = None
        rest = False
        if self._at(SyntaxKind.DOT_DOT_DOT):
            self._advance()
            rest = True
            name = self._parse_identifier()
            self._expect(SyntaxKind.COLON)
        elif self.scanner.look_ahead(self._is_named_parameter_start):
            name = self._parse_identifier()
            self._expect(SyntaxKind.COLON)
        param_type = self._parse_type()
        return FunctionParameter(param_type, name, rest, span=self._span_from(start))

    def _is_named_parameter_start(self) -> bool:
        # Runs inside look_ahead: the scan() below is rolled back.
        return (self._at(SyntaxKind.IDENTIFIER)
                and self.scanner.scan() is SyntaxKind.COLON)

    # ── Lists ────────────────────────────────────────────────────

    def _parse_bracketed_list(
        self,
        context: ParsingContext,
        parse_element: Callable[[], T],
        open_kind: SyntaxKind,
        close_kind: SyntaxKind,
    ) -> list[T]:
        self._expect(open_kind)
        result = self._parse_delimited_list(context, parse_element)
        self._expect(close_kind)
        return result

    def _parse_delimited_list(
        self, context: ParsingContext, parse_element: Callable[[], T],
    ) -> list[T]:
        """Parse elements until the context's terminator.

        Commas between elements are consumed when present but not required.
        """
        result: list[T] = []
        while not self._is_list_terminator(context) and not self._at(SyntaxKind.EOF):
            result.append(parse_element())
            self._skip_optional(SyntaxKind.COMMA)
        return result

    def _is_list_terminator(self, context: ParsingContext) -> bool:
        match context:
            case ParsingContext.TYPE_ARGUMENTS:
                return self._at(SyntaxKind.GREATER_THAN)
            case ParsingContext.PARAMETERS:
                return self._at(SyntaxKind.CLOSE_PAREN)
            case ParsingContext.OBJECT_MEMBERS:
                return self._at(SyntaxKind.CLOSE_BRACE)
        return False


def parse(text: str, filename: str = "<annotation>") -> TypeNode:
    """Parse one annotation string into its root type node.

    Raises :class:`~typenote.errors.LexError` or
    :class:`~typenote.errors.ParseError` on the first problem found.
    """
    return Parser(text, filename).parse()
