"""maybe_impl: conditionally add required capabilities to an interface.

Given a capability list such as `Hashable, Sized` and the source of a class
declaration, `traits()` returns the class with those capabilities appended to
its base list. Rejected inputs produce a fragment that raises one located
SyntaxError instead.

Example:
    from maybe_impl import traits

    source = traits("Hashable", "class Key(Protocol):\\n    def name(self) -> str: ...")
    # class Key(Protocol, Hashable):
    #
    #     def name(self) -> str:
    #         ...
"""

from maybe_impl.annotation import parse_capabilities
from maybe_impl.core import (
    CapabilityParseError,
    CapabilityReference,
    DeclarationShapeError,
    EmptyCapabilityList,
    ExpansionAborted,
    ExpansionError,
    InterfaceDeclaration,
    OtherDeclaration,
    Span,
)
from maybe_impl.declaration import classify, parse_declaration
from maybe_impl.diagnostics import Diagnostic
from maybe_impl.expand import Expansion, emit, expand, merge, traits

__version__ = "0.1.0"

__all__ = [
    # Entry points
    "traits",
    "expand",
    "Expansion",
    # Pipeline stages
    "parse_capabilities",
    "classify",
    "parse_declaration",
    "merge",
    "emit",
    "Diagnostic",
    # Types
    "Span",
    "CapabilityReference",
    "InterfaceDeclaration",
    "OtherDeclaration",
    # Errors
    "ExpansionError",
    "CapabilityParseError",
    "EmptyCapabilityList",
    "DeclarationShapeError",
    "ExpansionAborted",
]
