"""Recovers declaration identity from serialized item signatures.

Imported annotation documents identify items only by their signature text.
The grammar is:

    <class> <field>
    <class> [<return type> ]<method>(<parameters>)[ <argument index>]

The method form is tried before the field form, so a constructor whose
parameter list has no spaces (``foo.Bar Bar(int)``) decomposes as a
constructor rather than as a field named ``Bar(int)``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from annodb.constants import CALENDAR_CLASS, CALENDAR_SET_METHOD, MERGE_DENY_LIST
from annodb.extraction.signatures import normalize_parameter_types

SIGNATURE_PATTERN = re.compile(
    r"(?P<owner>\S+) "
    r"(?:(?:(?P<return_type>.*)\s+)?(?P<method>\S+)\((?P<parameters>.*)\)(?: (?P<arg>\d+))?"
    r"|(?P<field>\S+))"
)


@dataclass(frozen=True)
class ParsedSignature:
    """Components of a decomposed item signature.

    ``parameters`` is normalized to the compact internal form.
    """

    containing_class: str
    field_name: str | None = None
    method_name: str | None = None
    return_type: str | None = None
    parameters: str = ""
    arg_index: int | None = None

    @property
    def is_field(self) -> bool:
        return self.field_name is not None

    @property
    def is_constructor(self) -> bool:
        return self.method_name is not None and self.return_type is None

    @property
    def is_parameter(self) -> bool:
        return self.arg_index is not None


def fix_parameter_string(parameters: str) -> str:
    """Normalize an imported parameter list to the compact form used by extraction."""
    return normalize_parameter_types(parameters)


def is_denied(signature: str) -> bool:
    """Historical signatures that are known to be wrong and never merged."""
    return signature in MERGE_DENY_LIST


def is_calendar_set_parameter(parsed: ParsedSignature) -> bool:
    """Parameters after the first of Calendar.set(int, int, int...) are bogus."""
    return (
        parsed.containing_class == CALENDAR_CLASS
        and parsed.method_name == CALENDAR_SET_METHOD
        and parsed.arg_index is not None
        and parsed.arg_index > 0
    )


def looks_like_class_name(signature: str) -> bool:
    """Bare class signatures are expected in imports and skipped silently."""
    return " " not in signature and "." in signature


def parse_signature(signature: str) -> ParsedSignature | None:
    """Decompose an unescaped signature, or None if it does not match the grammar."""
    match = SIGNATURE_PATTERN.fullmatch(signature)
    if match is None:
        return None

    owner = match.group("owner")
    method = match.group("method")
    if method is None:
        return ParsedSignature(owner, field_name=match.group("field"))

    arg = match.group("arg")
    return ParsedSignature(
        owner,
        method_name=method,
        return_type=match.group("return_type"),
        parameters=fix_parameter_string(match.group("parameters")),
        arg_index=int(arg) if arg is not None else None,
    )
