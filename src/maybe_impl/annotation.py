"""Parse the capability-list argument.

The argument is a comma separated list of qualified names, for example
`Hashable, collections.abc.Sized`. Each entry may carry one subscript
(`Container[int]`), which is kept but not interpreted.
"""

from __future__ import annotations

import ast
import io
import logging
import tokenize

from maybe_impl.core import (
    CapabilityList,
    CapabilityParseError,
    CapabilityReference,
    EmptyCapabilityList,
    Span,
)

logger = logging.getLogger(__name__)

_IGNORED = {
    tokenize.NEWLINE,
    tokenize.NL,
    tokenize.INDENT,
    tokenize.DEDENT,
    tokenize.ENDMARKER,
    tokenize.COMMENT,
}
_OPENERS = "([{"
_CLOSERS = ")]}"


def _tokens(metadata: str) -> list[tokenize.TokenInfo]:
    try:
        tokens = list(tokenize.generate_tokens(io.StringIO(metadata).readline))
    except (tokenize.TokenError, SyntaxError) as exc:
        raise CapabilityParseError(
            f"invalid capability list: {exc}", Span.covering(metadata)
        ) from exc
    return [tok for tok in tokens if tok.type not in _IGNORED]


def _span(first: tokenize.TokenInfo, last: tokenize.TokenInfo) -> Span:
    return Span(first.start[0], first.start[1], last.end[0], last.end[1])


def _source(lines: list[str], span: Span) -> str:
    """Text of `span`, taken from the original input lines."""
    if span.line == span.end_line:
        return lines[span.line - 1][span.column:span.end_column]
    parts = [lines[span.line - 1][span.column:]]
    parts.extend(lines[span.line:span.end_line - 1])
    parts.append(lines[span.end_line - 1][:span.end_column])
    return "".join(parts)


def _split(tokens: list[tokenize.TokenInfo]) -> list[tuple[list[tokenize.TokenInfo], tokenize.TokenInfo | None]]:
    """Split on top-level commas into (entry tokens, following separator)."""
    entries = []
    current: list[tokenize.TokenInfo] = []
    depth = 0
    for tok in tokens:
        if tok.type == tokenize.OP and tok.string in _OPENERS:
            depth += 1
        elif tok.type == tokenize.OP and tok.string in _CLOSERS:
            depth -= 1
        elif tok.type == tokenize.OP and tok.string == "," and depth == 0:
            entries.append((current, tok))
            current = []
            continue
        current.append(tok)
    entries.append((current, None))
    return entries


def _reference(expr: ast.expr, span: Span, text: str, source: str) -> CapabilityReference:
    arguments = None
    if isinstance(expr, ast.Subscript):
        arguments = ast.get_source_segment(source, expr.slice)
        expr = expr.value

    segments: list[str] = []
    while isinstance(expr, ast.Attribute):
        segments.append(expr.attr)
        expr = expr.value
    if not isinstance(expr, ast.Name):
        raise CapabilityParseError(
            f"expected a qualified capability name, found `{text.strip()}`", span
        )
    segments.append(expr.id)
    return CapabilityReference(tuple(reversed(segments)), arguments, span)


def parse_capability(lines: list[str], tokens: list[tokenize.TokenInfo]) -> CapabilityReference:
    """Parse the tokens of a single list entry."""
    span = _span(tokens[0], tokens[-1])
    text = _source(lines, span)
    source = f"({text})"
    try:
        expr = ast.parse(source, mode="eval").body
        reference = _reference(expr, span, text, source)
        # Arguments must rebuild into a subscript on their own
        reference.to_expr()
    except SyntaxError as exc:
        raise CapabilityParseError(
            f"expected a qualified capability name, found `{text.strip()}`", span
        ) from exc
    return reference


def parse_capabilities(metadata: str) -> CapabilityList:
    """Parse the capability-list argument into capability references.

    Raises:
        EmptyCapabilityList: If the argument has no entries at all.
        CapabilityParseError: If an entry is not a qualified name, or a
            separator is missing, doubled, leading or trailing.
    """
    tokens = _tokens(metadata)
    if not tokens:
        raise EmptyCapabilityList(Span.covering(metadata))

    lines = io.StringIO(metadata).readlines()
    capabilities = []
    previous_separator = None
    for entry, separator in _split(tokens):
        if not entry:
            if separator is None:
                raise CapabilityParseError(
                    "unexpected trailing separator", _span(previous_separator, previous_separator)
                )
            raise CapabilityParseError(
                "expected a capability name before `,`", _span(separator, separator)
            )
        capabilities.append(parse_capability(lines, entry))
        previous_separator = separator

    logger.debug(
        "parsed capabilities count=%s names=%s",
        len(capabilities),
        ",".join(str(cap) for cap in capabilities),
    )
    return tuple(capabilities)
