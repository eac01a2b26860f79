"""Merge capabilities into an interface declaration and emit the result.

The pipeline is linear:

    parse capabilities -> parse declaration -> merge -> emit

A failure in either parse step short-circuits to a diagnostic. Every call is
a pure function of its two inputs.
"""

from __future__ import annotations

import ast
import logging
import os
from dataclasses import dataclass, replace

from maybe_impl.annotation import parse_capabilities
from maybe_impl.core import (
    CapabilityList,
    EmptyCapabilityList,
    ExpansionAborted,
    ExpansionError,
    InterfaceDeclaration,
)
from maybe_impl.declaration import parse_declaration
from maybe_impl.diagnostics import Diagnostic

logger = logging.getLogger(__name__)

ABORT_ON_EMPTY_ENV = "MAYBE_IMPL_ABORT_ON_EMPTY"
LEGACY_ABORT_MESSAGE = "At least one type must be specified."


def _preview(text: str, limit: int = 80) -> str:
    """Single-line, truncated preview of source text for log messages."""
    flattened = text.replace("\n", "\\n")
    if len(flattened) <= limit:
        return flattened
    return f"{flattened[:limit]}..."


@dataclass(frozen=True)
class Expansion:
    """Result of one invocation."""

    output: str
    declaration: InterfaceDeclaration | None = None
    diagnostic: Diagnostic | None = None

    @property
    def success(self) -> bool:
        return self.diagnostic is None

    def __str__(self) -> str:
        return self.output


def merge(declaration: InterfaceDeclaration, capabilities: CapabilityList) -> InterfaceDeclaration:
    """Append `capabilities` to the declaration's bases, in order.

    Duplicates are kept and nothing is reordered.
    """
    added = tuple(capability.to_expr() for capability in capabilities)
    return replace(declaration, bases=declaration.bases + added)


def emit(declaration: InterfaceDeclaration) -> str:
    """Serialize a declaration back to source."""
    fields = {
        "name": declaration.name,
        "bases": list(declaration.bases),
        "keywords": list(declaration.keywords),
        "body": list(declaration.body),
        "decorator_list": list(declaration.decorators),
    }
    if "type_params" in ast.ClassDef._fields:
        fields["type_params"] = list(declaration.type_params)
    return ast.unparse(ast.ClassDef(**fields)) + "\n"


def _abort_on_empty(abort_on_empty: bool | None) -> bool:
    if abort_on_empty is not None:
        return abort_on_empty
    return os.getenv(ABORT_ON_EMPTY_ENV, "").strip().lower() in ("1", "true", "yes", "on")


def expand(metadata: str, item: str, *, abort_on_empty: bool | None = None) -> Expansion:
    """Run the full pipeline and return a structured result.

    Args:
        metadata: The capability-list argument, e.g. "Hashable, Sized".
        item: Source of the annotated declaration.
        abort_on_empty: Raise ExpansionAborted for an empty capability list
            instead of reporting a diagnostic. Defaults to the
            MAYBE_IMPL_ABORT_ON_EMPTY environment variable.

    Raises:
        ExpansionAborted: Only for an empty list in abort mode.
    """
    logger.debug("expand metadata=%s item=%s", _preview(metadata), _preview(item))
    source = metadata
    try:
        try:
            capabilities = parse_capabilities(metadata)
        except EmptyCapabilityList:
            if _abort_on_empty(abort_on_empty):
                logger.error("aborting expansion: empty capability list")
                raise ExpansionAborted(LEGACY_ABORT_MESSAGE) from None
            raise
        source = item
        declaration = parse_declaration(item)
    except ExpansionError as exc:
        diagnostic = Diagnostic.from_error(exc, source)
        logger.info("expansion failed origin=%s error=%s", exc.origin, exc)
        return Expansion(diagnostic.to_compile_error(), diagnostic=diagnostic)

    merged = merge(declaration, capabilities)
    logger.debug(
        "expanded name=%s added=%s bases=%s",
        merged.name,
        len(capabilities),
        ",".join(merged.required_capabilities),
    )
    return Expansion(emit(merged), declaration=merged)


def traits(metadata: str, item: str, *, abort_on_empty: bool | None = None) -> str:
    """Add the capabilities in `metadata` to the interface declared in `item`.

    Returns the rewritten declaration, or a fragment raising a single
    SyntaxError when either input is rejected.

    Example:
        traits("Hashable, Sized", "class Foo(Protocol): ...")
        # class Foo(Protocol, Hashable, Sized):
        #     ...
    """
    return expand(metadata, item, abort_on_empty=abort_on_empty).output
