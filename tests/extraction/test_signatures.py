"""Tests for canonical signatures, sort keys, keep rules and class name helpers."""

from __future__ import annotations

import pytest

from annodb.extraction.items import Item
from annodb.extraction.signatures import (
    compact_parameter_list,
    format_parameter_list,
    internal_class_name,
    package_of,
)
from annodb.extraction.types import ClassKind

# =============================================================================
# Signatures
# =============================================================================


class TestSignature:
    """Tests for Item.signature."""

    def test_class_and_package(self):
        assert Item.klass("foo.bar.Baz").signature == "foo.bar.Baz"
        assert Item.package("foo.bar").signature == "foo.bar"

    def test_field(self):
        assert Item.field_item("foo.Bar", "MODE", "int").signature == "foo.Bar MODE"

    def test_method_with_generic_parameter(self):
        item = Item.method("foo.Bar", "compute", "java.util.Map<String,Integer>,int", "int")
        assert item.signature == "foo.Bar int compute(java.util.Map&lt;String,Integer&gt;, int)"

    def test_generic_return_type_is_escaped(self):
        item = Item.method("foo.Bar", "names", "", "java.util.List<java.lang.String>")
        assert item.signature == "foo.Bar java.util.List&lt;java.lang.String&gt; names()"

    def test_constructor_has_no_return_type(self):
        item = Item.method("foo.Bar", "Bar", "int", "void", is_constructor=True)
        assert item.signature == "foo.Bar Bar(int)"
        assert item.return_type is None

    def test_parameter_appends_index(self):
        item = Item.parameter("foo.Bar", "compute", "int,int", "int", 1)
        assert item.signature == "foo.Bar int compute(int, int) 1"

    def test_nested_commas_get_no_space(self):
        assert format_parameter_list("Map<K,V>,int") == "Map&lt;K,V&gt;, int"

    def test_spaced_generic_types_are_compacted(self):
        types = ["java.util.Map<java.lang.String, java.lang.Integer>", "int"]
        expected = "java.util.Map<java.lang.String,java.lang.Integer>,int"
        assert compact_parameter_list(types) == expected


class TestIdentity:
    """Items are equal when they describe the same declaration."""

    def test_annotations_do_not_affect_equality(self):
        a = Item.field_item("foo.Bar", "MODE", "int")
        b = Item.field_item("foo.Bar", "MODE")
        assert a == b
        assert hash(a) == hash(b)

    def test_method_and_parameter_differ(self):
        method = Item.method("foo.Bar", "compute", "int", "int")
        parameter = Item.parameter("foo.Bar", "compute", "int", "int", 0)
        assert method != parameter


# =============================================================================
# Ordering
# =============================================================================


class TestSortSignature:
    """Tests for the ordering key used in documents and keep files."""

    def test_entities_compare_as_dots(self):
        status = Item.klass("android.os.AsyncTask.Status")
        generic = Item.method("android.os.AsyncTask<Params>", "execute", "", "void")
        ordered = sorted([generic, status], key=lambda i: i.sort_signature)
        assert ordered == [status, generic]

    def test_class_sorts_before_its_members(self):
        items = [
            Item.field_item("foo.Bar", "MODE", "int"),
            Item.method("foo.Bar", "Bar", "int", None, is_constructor=True),
            Item.klass("foo.Bar"),
        ]
        ordered = [i.signature for i in sorted(items, key=lambda i: i.sort_signature)]
        assert ordered == ["foo.Bar", "foo.Bar Bar(int)", "foo.Bar MODE"]


# =============================================================================
# Keep rules
# =============================================================================


class TestKeepRule:
    """Tests for Item.keep_rule."""

    def test_class(self):
        assert Item.klass("foo.Bar").keep_rule == "-keep class foo.Bar\n"

    def test_interface_keyword(self):
        item = Item.klass("foo.Listener", ClassKind.INTERFACE)
        assert item.keep_rule == "-keep interface foo.Listener\n"

    def test_field(self):
        item = Item.field_item("foo.Bar", "MODE", "int")
        assert item.keep_rule == "-keep class foo.Bar {\n    int MODE\n}\n"

    def test_field_without_type_has_no_rule(self):
        assert Item.field_item("foo.Bar", "MODE").keep_rule == ""

    def test_method_uses_compact_parameters(self):
        item = Item.method("foo.Bar", "compute", "int,int", "int")
        assert item.keep_rule == "-keep class foo.Bar {\n    int compute(int,int)\n}\n"

    def test_constructor(self):
        item = Item.method("foo.Bar", "Bar", "int", None, is_constructor=True)
        assert item.keep_rule == "-keep class foo.Bar {\n    <init>(int)\n}\n"

    def test_parameter_and_package_have_no_rule(self):
        assert Item.parameter("foo.Bar", "compute", "int", "int", 0).keep_rule == ""
        assert Item.package("foo").keep_rule == ""


# =============================================================================
# Names
# =============================================================================


class TestClassNames:
    """Tests for package_of and internal_class_name."""

    @pytest.mark.parametrize(
        ("fqn", "package"),
        [
            ("foo.bar.Baz", "foo.bar"),
            ("foo.bar.Foo.Bar", "foo.bar"),
            ("Baz", ""),
            ("android.os.AsyncTask.Status", "android.os"),
        ],
    )
    def test_package_of(self, fqn, package):
        assert package_of(fqn) == package

    def test_internal_name_of_nested_class(self):
        assert internal_class_name("foo.bar.Outer.Inner") == "foo/bar/Outer$Inner"
