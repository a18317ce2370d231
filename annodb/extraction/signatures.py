"""Canonical signatures for annotated declarations.

The signature is the text key that identifies a declaration in an external
annotation database. Matching during merge is purely textual, so the format
must be reproduced exactly:

    Package / class   foo.bar.Baz
    Field             foo.bar.Baz MODE
    Method            foo.bar.Baz int compute(java.util.Map&lt;K,V&gt;, int)
    Constructor       foo.bar.Baz Baz(int)
    Parameter         foo.bar.Baz int compute(int, int) 1

Parameter lists are held internally in compact form (``int,int``) and only
expanded to one space after each top-level comma when rendered.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from annodb.extraction.types import ItemKind
from annodb.utils.helpers import escape_xml

if TYPE_CHECKING:
    from annodb.extraction.items import Item


def normalize_parameter_types(parameters: str) -> str:
    """Strip the spacing a parameter list may carry down to the compact form.

    Doubled spaces collapse, spaces after commas are removed, and wildcard
    bounds keep the spaces they need (``Map<String,? extends Number>``).
    """
    return (
        parameters.replace("  ", " ")
        .replace(", ", ",")
        .replace("?super", "? super ")
        .replace("?extends", "? extends ")
    )


def compact_parameter_list(types: list[str]) -> str:
    """Join parameter types into the compact internal form."""
    return normalize_parameter_types(",".join(types))


def format_parameter_list(parameter_list: str) -> str:
    """Render a compact parameter list as it appears in a signature.

    One space follows each top-level comma; commas inside generic brackets
    are left alone and the brackets are written as entities.
    """
    out: list[str] = []
    balance = 0
    for c in parameter_list:
        if c == "<":
            balance += 1
            out.append("&lt;")
        elif c == ">":
            balance -= 1
            out.append("&gt;")
        elif c == ",":
            out.append(",")
            if balance == 0:
                out.append(" ")
        else:
            out.append(c)
    return "".join(out)


def signature(item: Item) -> str:
    """Canonical, entity-escaped signature of an item."""
    owner = escape_xml(item.containing_class)
    match item.kind:
        case ItemKind.PACKAGE | ItemKind.CLASS:
            return owner
        case ItemKind.FIELD:
            return f"{owner} {item.name}"
        case ItemKind.METHOD | ItemKind.PARAMETER:
            if item.is_constructor:
                head = f"{owner} {escape_xml(item.name or '')}"
            else:
                head = f"{owner} {escape_xml(item.return_type or '')} {escape_xml(item.name or '')}"
            result = f"{head}({format_parameter_list(item.parameter_list)})"
            if item.kind is ItemKind.PARAMETER:
                result += f" {item.arg_index}"
            return result
    raise ValueError(f"Unknown item kind: {item.kind}")


def sort_signature(item: Item) -> str:
    """Signature used for ordering.

    Entities are compared as if '&' were '.', so a generic owner such as
    ``AsyncTask&lt;Params&gt;`` sorts after ``AsyncTask.Status``, the same
    order the unescaped names would give.
    """
    return signature(item).replace("&", ".")


def keep_rule(item: Item) -> str:
    """ProGuard class specification preserving the item, or "" if none applies."""
    keep_type = item.class_kind.keep_type
    match item.kind:
        case ItemKind.CLASS:
            return f"-keep {keep_type} {item.containing_class}\n"
        case ItemKind.FIELD:
            if item.field_type is None:
                # Imported items carry no type
                return ""
            return (
                f"-keep {keep_type} {item.containing_class} {{\n"
                f"    {item.field_type} {item.name}\n"
                "}\n"
            )
        case ItemKind.METHOD:
            member = "<init>" if item.is_constructor else f"{item.return_type} {item.name}"
            return (
                f"-keep {keep_type} {item.containing_class} {{\n"
                f"    {member}({item.parameter_list})\n"
                "}\n"
            )
        case _:
            return ""


def package_of(fqn: str) -> str:
    """Package portion of a qualified class name.

    The package ends before the first segment starting with an upper case
    letter, so nested classes are handled: ``foo.bar.Foo.Bar`` -> ``foo.bar``.
    """
    last = 0
    index = 0
    while True:
        index = fqn.find(".", index)
        if index == -1:
            break
        last = index
        if index < len(fqn) - 1 and fqn[index + 1].isupper():
            break
        index += 1
    return fqn[:last]


def internal_class_name(fqn: str) -> str:
    """JVM internal name: ``foo.bar.Outer.Inner`` -> ``foo/bar/Outer$Inner``."""
    package = package_of(fqn)
    if not package:
        return fqn.replace(".", "$")
    nested = fqn[len(package) + 1 :].replace(".", "$")
    return f"{package.replace('.', '/')}/{nested}"
