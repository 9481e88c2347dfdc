"""Pygments lexer for the type annotation notation."""

from pygments.lexer import RegexLexer, words
from pygments.token import (
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Text,
)


class AnnotationLexer(RegexLexer):
    """Pygments lexer for typenote annotations such as ``(a, ?b) → c``."""

    name = "Typenote"
    aliases = ["typenote"]
    filenames = ["*.typenote"]
    mimetypes = ["text/x-typenote"]

    tokens = {
        "root": [
            # Whitespace
            (r"\s+", Text),
            # Strings with escape support
            (r'"', String.Double, "dstring"),
            (r"'", String.Single, "sstring"),
            # Numbers
            (r"-?[0-9]+\.[0-9]+", Number.Float),
            (r"-?[0-9]+", Number.Integer),
            # Keywords
            (words(("union",), prefix=r"\b", suffix=r"\b"), Keyword),
            (words(("any",), prefix=r"\b", suffix=r"\b"), Keyword.Type),
            # Wildcard, nullable marker and return arrow
            (r"\*", Keyword.Type),
            (r"\?", Operator),
            (r"→", Operator),
            # Rest marker (before the dot)
            (r"\.\.\.", Operator),
            # Parameter and member names (word followed by colon)
            (r"[A-Za-z_$][\w$]*(?=\s*:)", Name.Attribute),
            # Entity names, dotted segments included
            (r"[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*", Name.Class),
            # Punctuation
            (r"[.,:()\[\]{}<>]", Punctuation),
        ],
        "dstring": [
            (r"\\.", String.Escape),
            (r'[^"\\]+', String.Double),
            (r'"', String.Double, "#pop"),
        ],
        "sstring": [
            (r"\\.", String.Escape),
            (r"[^'\\]+", String.Single),
            (r"'", String.Single, "#pop"),
        ],
    }
