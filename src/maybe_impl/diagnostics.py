"""Turn expansion errors into compiler-visible diagnostics.

A diagnostic is emitted in place of the expanded declaration. Its source
form is a single `raise SyntaxError(...)` statement, so the host compiling
and running the output reports exactly one error, located at the span that
caused it.
"""

from __future__ import annotations

from dataclasses import dataclass

from maybe_impl.core import ExpansionError, Span


@dataclass(frozen=True)
class Diagnostic:
    """A located error message."""

    message: str
    span: Span
    origin: str
    text: str | None = None
    """The source line the span starts on, when known."""

    @classmethod
    def from_error(cls, error: ExpansionError, source: str | None = None) -> "Diagnostic":
        """Build a diagnostic from an error raised against `source`."""
        text = None
        if source is not None:
            lines = source.splitlines()
            if 0 < error.span.line <= len(lines):
                text = lines[error.span.line - 1]
        return cls(error.message, error.span, error.origin, text)

    def to_compile_error(self) -> str:
        """Source fragment that raises this diagnostic when executed.

        SyntaxError offsets are 1-based, so columns are shifted by one.
        """
        details = (
            self.origin,
            self.span.line,
            self.span.column + 1,
            self.text,
            self.span.end_line,
            self.span.end_column + 1,
        )
        return f"raise SyntaxError({self.message!r}, {details!r})\n"

    def __str__(self) -> str:
        return f"{self.origin}:{self.span.line}:{self.span.column}: error: {self.message}"
