"""Tests for item classification and interface extraction."""

import sys

import pytest

from maybe_impl.core import (
    DeclarationShapeError,
    ITEM_ORIGIN,
    InterfaceDeclaration,
    OtherDeclaration,
    SHAPE_ERROR_MESSAGE,
    Span,
)
from maybe_impl.declaration import classify, parse_declaration


class TestClassify:
    """Tests for the declaration variant."""

    def test_plain_class_is_interface(self):
        decl = classify("class Foo: ...")

        assert isinstance(decl, InterfaceDeclaration)
        assert decl.name == "Foo"
        assert decl.required_capabilities == []

    def test_existing_bases_are_required_capabilities(self):
        decl = classify("class Foo(Protocol, collections.abc.Sized): ...")

        assert decl.required_capabilities == ["Protocol", "collections.abc.Sized"]

    def test_keywords_and_decorators_are_kept_apart_from_bases(self):
        source = "@runtime_checkable\nclass Foo(Protocol, metaclass=Meta):\n    def bar(self): ..."
        decl = classify(source)

        assert decl.required_capabilities == ["Protocol"]
        assert [kw.arg for kw in decl.keywords] == ["metaclass"]
        assert len(decl.decorators) == 1
        assert len(decl.body) == 1

    def test_span_includes_decorators(self):
        decl = classify("@runtime_checkable\nclass Foo(Protocol): ...")

        assert decl.span.line == 1
        assert decl.span.end_line == 2

    @pytest.mark.parametrize(
        "source",
        [
            "@dataclass\nclass Point:\n    x: int",
            "@dataclasses.dataclass(frozen=True)\nclass Point:\n    x: int",
            "@attrs.define\nclass Point:\n    x: int",
            "class Point(NamedTuple):\n    x: int",
            "class Options(typing.TypedDict):\n    x: int",
            "class Color(Enum):\n    RED = 1",
        ],
    )
    def test_data_structures_are_rejected(self, source):
        decl = classify(source)

        assert isinstance(decl, OtherDeclaration)
        assert decl.kind == "data structure"

    @pytest.mark.parametrize(
        "source,kind",
        [
            ("def foo(self): pass", "function"),
            ("async def foo(self): pass", "function"),
            ("Alias = int", "assignment"),
            ("import os", "statement"),
            ("", "empty"),
            ("class Foo(", "invalid"),
            ("class A: ...\nclass B: ...", "multiple statements"),
        ],
    )
    def test_other_shapes(self, source, kind):
        decl = classify(source)

        assert isinstance(decl, OtherDeclaration)
        assert decl.kind == kind

    @pytest.mark.skipif(sys.version_info < (3, 12), reason="type statement needs 3.12")
    def test_type_alias(self):
        decl = classify("type Alias = int")

        assert decl.kind == "type alias"

    @pytest.mark.skipif(sys.version_info < (3, 12), reason="type parameters need 3.12")
    def test_type_parameters_are_kept(self):
        decl = classify("class Box[T](Protocol): ...")

        assert isinstance(decl, InterfaceDeclaration)
        assert len(decl.type_params) == 1


class TestParseDeclaration:
    """Tests for the shape check."""

    def test_returns_interface(self):
        decl = parse_declaration("class Foo:\n    def bar(self): ...")

        assert decl.name == "Foo"

    def test_shape_error(self):
        with pytest.raises(DeclarationShapeError) as exc:
            parse_declaration("x = 1")

        assert exc.value.message == SHAPE_ERROR_MESSAGE
        assert exc.value.origin == ITEM_ORIGIN
        assert exc.value.span == Span(1, 0, 1, 5)
        assert exc.value.kind == "assignment"

    def test_unparsable_item_spans_whole_input(self):
        with pytest.raises(DeclarationShapeError) as exc:
            parse_declaration("def broken(\n    x,")

        assert exc.value.span == Span(1, 0, 2, 6)
        assert exc.value.kind == "invalid"

    def test_members_are_not_validated(self):
        decl = parse_declaration("class Foo:\n    x = undefined_name\n    import os")

        assert len(decl.body) == 2
