"""Core types for the capability expansion pipeline.

This module defines the values passed between the pipeline stages:
- Span: A location inside one of the two inputs
- CapabilityReference: A qualified name of a capability to require
- InterfaceDeclaration / OtherDeclaration: The closed set of declaration shapes
- ExpansionError and subclasses: Recoverable failures that become diagnostics
- ExpansionAborted: The unrecoverable empty-list abort
"""

from __future__ import annotations

import ast
from dataclasses import dataclass, field

METADATA_ORIGIN = "<metadata>"
ITEM_ORIGIN = "<item>"

SHAPE_ERROR_MESSAGE = "attribute can only be applied to an interface declaration"
EMPTY_LIST_MESSAGE = "At least one capability must be specified."


@dataclass(frozen=True)
class Span:
    """A region of source text.

    Lines are 1-based and columns are 0-based, the convention shared by
    `ast` nodes and `tokenize` tokens.
    """

    line: int = 1
    column: int = 0
    end_line: int = 1
    end_column: int = 0

    @classmethod
    def of(cls, node: ast.AST) -> "Span":
        """Span of a parsed ast node."""
        end_line = getattr(node, "end_lineno", None) or node.lineno
        end_column = getattr(node, "end_col_offset", None)
        if end_column is None:
            end_column = node.col_offset
        return cls(node.lineno, node.col_offset, end_line, end_column)

    @classmethod
    def covering(cls, text: str) -> "Span":
        """Span of a whole input, used when no finer location exists."""
        lines = text.splitlines() or [""]
        return cls(1, 0, len(lines), len(lines[-1]))

    def join(self, other: "Span") -> "Span":
        """Smallest span containing both spans."""
        start = min((self.line, self.column), (other.line, other.column))
        end = max((self.end_line, self.end_column), (other.end_line, other.end_column))
        return Span(start[0], start[1], end[0], end[1])

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class CapabilityReference:
    """A capability to require, as a qualified name.

    `arguments` holds the source of a trailing subscript such as `[int]`.
    It is carried through to the output and never interpreted.
    """

    segments: tuple[str, ...]
    arguments: str | None = None
    span: Span = field(default_factory=Span, compare=False)

    @property
    def qualified_name(self) -> str:
        return ".".join(self.segments)

    def to_expr(self) -> ast.expr:
        """Build a fresh ast expression for this reference."""
        expr: ast.expr = ast.Name(id=self.segments[0], ctx=ast.Load())
        for segment in self.segments[1:]:
            expr = ast.Attribute(value=expr, attr=segment, ctx=ast.Load())
        if self.arguments is not None:
            # Arguments are only valid source inside brackets
            slice_ = ast.parse(f"_[{self.arguments}]", mode="eval").body.slice
            expr = ast.Subscript(value=expr, slice=slice_, ctx=ast.Load())
        return expr

    def __str__(self) -> str:
        if self.arguments is None:
            return self.qualified_name
        return f"{self.qualified_name}[{self.arguments}]"


CapabilityList = tuple[CapabilityReference, ...]


@dataclass(frozen=True)
class InterfaceDeclaration:
    """A class statement accepted as an interface.

    `bases` is the existing required-capability list. Everything else is
    passed through to the output unchanged.
    """

    name: str
    bases: tuple[ast.expr, ...] = ()
    keywords: tuple[ast.keyword, ...] = ()
    decorators: tuple[ast.expr, ...] = ()
    type_params: tuple[ast.AST, ...] = ()
    body: tuple[ast.stmt, ...] = ()
    span: Span = field(default_factory=Span, compare=False)

    @property
    def required_capabilities(self) -> list[str]:
        """Base list rendered as source strings, in order."""
        return [ast.unparse(base) for base in self.bases]


@dataclass(frozen=True)
class OtherDeclaration:
    """Any fragment that is not an interface declaration."""

    kind: str
    span: Span = field(default_factory=Span)


Declaration = InterfaceDeclaration | OtherDeclaration


class ExpansionError(Exception):
    """A recoverable failure, reported as a single diagnostic."""

    def __init__(self, message: str, span: Span, origin: str):
        super().__init__(message)
        self.message = message
        self.span = span
        self.origin = origin

    def __str__(self) -> str:
        return f"{self.origin}:{self.span}: {self.message}"


class CapabilityParseError(ExpansionError):
    """The capability-list argument is malformed."""

    def __init__(self, message: str, span: Span):
        super().__init__(message, span, METADATA_ORIGIN)


class EmptyCapabilityList(CapabilityParseError):
    """The capability-list argument has no entries."""

    def __init__(self, span: Span):
        super().__init__(EMPTY_LIST_MESSAGE, span)


class DeclarationShapeError(ExpansionError):
    """The annotated item is not an interface declaration."""

    def __init__(self, span: Span, kind: str = "statement"):
        super().__init__(SHAPE_ERROR_MESSAGE, span, ITEM_ORIGIN)
        self.kind = kind


class ExpansionAborted(SystemExit):
    """Terminates the host process instead of producing a diagnostic.

    Only raised in legacy mode for an empty capability list. Deriving from
    SystemExit keeps it out of `except Exception` handlers.
    """
