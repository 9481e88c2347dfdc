"""Diagnostics for annotation parsing, rendered Rust-style with colors."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from typenote.source import SourceText, Span


class Severity(Enum):
    ERROR = "error"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",  # bold red
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"

LEX_ERROR = "E100"
PARSE_ERROR = "E200"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific annotation location."""

    span: Span
    message: str
    style: str = "primary"  # "primary" or "secondary"


@dataclass
class Diagnostic:
    """A single diagnostic message with optional labels."""

    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with colors.

    Annotations usually live in memory rather than on disk, so their text
    can be registered up front with :meth:`add_source`. Unregistered file
    names are read from disk on first use.
    """

    def __init__(self, *, color: bool = True) -> None:
        self.color = color
        self._sources: dict[str, SourceText] = {}

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def add_source(self, filename: str, text: str) -> None:
        self._sources[filename] = SourceText(text, filename)

    def _get_source_line(self, filename: str, line_num: int) -> str | None:
        """Load and cache source text, return the 1-indexed line."""
        source = self._sources.get(filename)
        if source is None:
            path = Path(filename)
            try:
                if path.is_file():
                    source = SourceText.from_path(path)
                else:
                    source = SourceText("", filename)
            except OSError:
                source = SourceText("", filename)
            self._sources[filename] = source
        return source.line_at(line_num)

    def render(self, diag: Diagnostic) -> str:
        lines: list[str] = []
        sev = diag.severity
        color = _COLORS[sev]

        # Header: error[E200]: message
        lines.append(
            f"{self._c(color)}{sev.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        )

        for label in diag.labels:
            span = label.span
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            gutter = f"{span.start_line:>4}"
            lines.append(f"  {self._c(_BLUE)}   |{self._c(_RESET)}")

            source_line = self._get_source_line(span.file, span.start_line)
            if source_line is not None:
                lines.append(
                    f"  {self._c(_BLUE)}{gutter} |{self._c(_RESET)} {source_line}"
                )
                if span.start_line == span.end_line:
                    caret_len = max(1, span.end_col - span.start_col + 1)
                    padding = " " * (span.start_col - 1)
                    lines.append(
                        f"  {self._c(_BLUE)}   |{self._c(_RESET)} "
                        f"{padding}{self._c(color)}{'^' * caret_len}{self._c(_RESET)}"
                    )

            if label.message:
                lines.append(
                    f"  {self._c(_BLUE)}   |{self._c(_RESET)}   "
                    f"{self._c(color)}{label.message}{self._c(_RESET)}"
                )

        return "\n".join(lines)


class CompileError(Exception):
    """Error carrying one or more diagnostics."""

    def __init__(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics = diagnostics
        messages = [d.message for d in diagnostics]
        super().__init__("; ".join(messages))

    @property
    def span(self) -> Span | None:
        """Location of the first labelled diagnostic, if any."""
        for diag in self.diagnostics:
            if diag.labels:
                return diag.labels[0].span
        return None


def _single(code: str, message: str, span: Span) -> list[Diagnostic]:
    return [
        Diagnostic(
            severity=Severity.ERROR,
            code=code,
            message=message,
            labels=[DiagnosticLabel(span=span, message="")],
        )
    ]


class LexError(CompileError):
    """The scanner met a character sequence matching no token rule."""

    def __init__(self, message: str, span: Span) -> None:
        super().__init__(_single(LEX_ERROR, message, span))


class ParseError(CompileError):
    """The parser met a token that is not valid at the current position."""

    def __init__(self, message: str, span: Span) -> None:
        super().__init__(_single(PARSE_ERROR, message, span))
