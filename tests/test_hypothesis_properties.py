"""Hypothesis property-based tests for signatures, escaping and merging.

Properties tested:
- Escaping: unescape_xml(escape_xml(x)) == x for text without control whitespace
- Signatures: a rendered method signature decomposes back into its parts
- Merge: merging a document twice yields the same database as merging it once
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from annodb.export.archive import ArchiveWriter
from annodb.extraction.items import AnnotationData, Item
from annodb.extraction.session import ExtractionSession
from annodb.merge.merger import MergePass
from annodb.merge.signature_parser import parse_signature
from annodb.utils.helpers import escape_xml, unescape_xml

# =============================================================================
# Strategy Definitions
# =============================================================================

attribute_text = st.text(
    alphabet=st.characters(min_codepoint=32, max_codepoint=126),
    max_size=40,
)

identifiers = st.from_regex(r"[a-z][a-zA-Z0-9_]{0,10}", fullmatch=True)
class_names = st.from_regex(r"[a-z]{1,6}\.[A-Z][a-zA-Z0-9]{0,8}", fullmatch=True)
field_names = st.from_regex(r"[A-Z][A-Z0-9_]{0,10}", fullmatch=True)
parameter_types = st.sampled_from(
    [
        "int",
        "long",
        "java.lang.String",
        "java.util.List<java.lang.String>",
        "java.util.Map<K,V>",
        "int[]",
    ]
)


# =============================================================================
# Properties
# =============================================================================


class TestEscapingProperties:
    """Attribute escaping is reversible."""

    @given(attribute_text)
    def test_round_trip(self, text):
        assert unescape_xml(escape_xml(text)) == text


class TestSignatureProperties:
    """Rendered signatures parse back to the same declaration."""

    @given(
        owner=class_names,
        name=identifiers,
        return_type=parameter_types,
        parameters=st.lists(parameter_types, max_size=4),
        arg=st.none() | st.integers(min_value=0, max_value=3),
    )
    def test_method_signature_round_trip(self, owner, name, return_type, parameters, arg):
        compact = ",".join(parameters)
        if arg is None:
            item = Item.method(owner, name, compact, return_type)
        else:
            item = Item.parameter(owner, name, compact, return_type, arg)

        parsed = parse_signature(unescape_xml(item.signature))

        assert parsed is not None
        assert parsed.containing_class == owner
        assert parsed.method_name == name
        assert parsed.return_type == return_type
        assert parsed.parameters == compact
        assert parsed.arg_index == arg



class TestMergeProperties:
    """Merging is idempotent."""

    @settings(max_examples=30)
    @given(
        owner=class_names,
        fields=st.lists(field_names, min_size=1, max_size=5, unique=True),
    )
    def test_merging_twice_changes_nothing(self, owner, fields):
        source = ExtractionSession()
        for name in fields:
            item = Item.field_item(owner, name)
            item.annotations.append(
                AnnotationData(
                    "androidx.annotation.IntDef", values=[("value", f"{{{owner}.{name}}}")]
                )
            )
            source.index.add_item(item)
        documents = ArchiveWriter(source).render_documents()

        once = ExtractionSession()
        twice = ExtractionSession()
        for xml in documents.values():
            MergePass(once).merge_xml(xml)
            MergePass(twice).merge_xml(xml)
            MergePass(twice).merge_xml(xml)

        assert ArchiveWriter(twice).render_documents() == ArchiveWriter(once).render_documents()
        assert ArchiveWriter(once).render_documents() == documents
