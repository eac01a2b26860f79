"""Tests for diagnostics."""

import ast

import pytest

from maybe_impl.core import CapabilityParseError, DeclarationShapeError, Span
from maybe_impl.diagnostics import Diagnostic


class TestDiagnostic:
    """Tests for Diagnostic."""

    def test_from_error_captures_source_line(self):
        error = DeclarationShapeError(Span(2, 0, 2, 5))
        diagnostic = Diagnostic.from_error(error, "import os\nx = 1\n")

        assert diagnostic.message == error.message
        assert diagnostic.origin == "<item>"
        assert diagnostic.text == "x = 1"

    def test_from_error_without_source(self):
        diagnostic = Diagnostic.from_error(CapabilityParseError("bad", Span()))

        assert diagnostic.text is None

    def test_str(self):
        diagnostic = Diagnostic("bad capability", Span(1, 6, 1, 8), "<metadata>")

        assert str(diagnostic) == "<metadata>:1:6: error: bad capability"

    def test_compile_error_is_a_single_statement(self):
        output = Diagnostic("oops", Span(), "<item>").to_compile_error()
        module = ast.parse(output)

        assert len(module.body) == 1
        assert isinstance(module.body[0], ast.Raise)

    def test_compile_error_raises_located_syntax_error(self):
        diagnostic = Diagnostic("oops", Span(3, 4, 3, 9), "<item>", "    x = 1")

        with pytest.raises(SyntaxError) as exc:
            exec(diagnostic.to_compile_error(), {})

        assert exc.value.msg == "oops"
        assert exc.value.filename == "<item>"
        assert exc.value.lineno == 3
        assert exc.value.offset == 5
        assert exc.value.end_lineno == 3
        assert exc.value.end_offset == 10
        assert exc.value.text == "    x = 1"

    def test_message_is_escaped(self):
        diagnostic = Diagnostic("found `'a'`\n", Span(), "<metadata>")

        with pytest.raises(SyntaxError) as exc:
            exec(diagnostic.to_compile_error(), {})

        assert exc.value.msg == "found `'a'`\n"
