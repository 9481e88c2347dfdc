"""Parser and TypeScript renderer for doc-comment type annotations."""

from typenote.errors import CompileError, LexError, ParseError
from typenote.parser import parse

__version__ = "0.1.0"

__all__ = ["CompileError", "LexError", "ParseError", "parse", "__version__"]
