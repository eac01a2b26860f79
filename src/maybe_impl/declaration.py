"""Classify the annotated item and extract interface declarations."""

from __future__ import annotations

import ast
import logging
import textwrap

from maybe_impl.core import (
    Declaration,
    DeclarationShapeError,
    InterfaceDeclaration,
    OtherDeclaration,
    Span,
)

logger = logging.getLogger(__name__)

# Class decorators that turn a class into a record type
DATA_DECORATORS = {"dataclass", "s", "attrs", "define", "frozen", "mutable"}

# Bases that make a class a record or enumeration
DATA_BASES = {
    "NamedTuple",
    "TypedDict",
    "Enum",
    "IntEnum",
    "StrEnum",
    "Flag",
    "IntFlag",
    "BaseModel",
}


def _terminal_name(expr: ast.expr) -> str | None:
    """Last segment of a dotted name, looking through calls and subscripts."""
    if isinstance(expr, (ast.Call, ast.Subscript)):
        expr = expr.func if isinstance(expr, ast.Call) else expr.value
    if isinstance(expr, ast.Attribute):
        return expr.attr
    if isinstance(expr, ast.Name):
        return expr.id
    return None


def is_data_structure(node: ast.ClassDef) -> bool:
    if any(_terminal_name(dec) in DATA_DECORATORS for dec in node.decorator_list):
        return True
    return any(_terminal_name(base) in DATA_BASES for base in node.bases)


def _statement_span(node: ast.stmt) -> Span:
    span = Span.of(node)
    for decorator in getattr(node, "decorator_list", []):
        span = span.join(Span.of(decorator))
    return span


def _kind(node: ast.stmt) -> str:
    if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
        return "function"
    if isinstance(node, ast.ClassDef):
        return "data structure"
    if isinstance(node, (ast.Assign, ast.AnnAssign)):
        return "assignment"
    type_alias = getattr(ast, "TypeAlias", None)
    if type_alias is not None and isinstance(node, type_alias):
        return "type alias"
    return "statement"


def classify(item: str) -> Declaration:
    """Parse `item` into an interface declaration or the rejected variant.

    Common leading indentation is removed first, so nested classes taken
    from `inspect.getsource` are accepted. Columns in spans are relative to
    the dedented text.
    """
    try:
        module = ast.parse(textwrap.dedent(item))
    except SyntaxError:
        return OtherDeclaration("invalid", Span.covering(item))

    if not module.body:
        return OtherDeclaration("empty", Span.covering(item))
    if len(module.body) > 1:
        span = _statement_span(module.body[0]).join(_statement_span(module.body[-1]))
        return OtherDeclaration("multiple statements", span)

    node = module.body[0]
    span = _statement_span(node)
    if not isinstance(node, ast.ClassDef) or is_data_structure(node):
        return OtherDeclaration(_kind(node), span)

    return InterfaceDeclaration(
        name=node.name,
        bases=tuple(node.bases),
        keywords=tuple(node.keywords),
        decorators=tuple(node.decorator_list),
        type_params=tuple(getattr(node, "type_params", ())),
        body=tuple(node.body),
        span=span,
    )


def parse_declaration(item: str) -> InterfaceDeclaration:
    """Parse `item`, accepting only an interface declaration.

    Raises:
        DeclarationShapeError: If the item has any other shape.
    """
    declaration = classify(item)
    if isinstance(declaration, OtherDeclaration):
        logger.debug("rejected item kind=%s span=%s", declaration.kind, declaration.span)
        raise DeclarationShapeError(declaration.span, declaration.kind)
    return declaration
