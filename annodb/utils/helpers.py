"""Small, dependency-free helper functions used across the codebase."""

from __future__ import annotations

from datetime import datetime, timezone

# Order matters for unescaping: '&amp;' must be handled last.
_XML_ENTITIES: tuple[tuple[str, str], ...] = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&apos;", "'"),
    ("&amp;", "&"),
)


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def escape_xml(unescaped: str) -> str:
    """Escape a string for use inside a double-quoted XML attribute.

    Whitespace control characters are written as character references so
    that attribute-value normalization does not turn them into spaces.
    """
    out: list[str] = []
    for c in unescaped:
        if c == "&":
            out.append("&amp;")
        elif c == "<":
            out.append("&lt;")
        elif c == ">":
            out.append("&gt;")
        elif c == '"':
            out.append("&quot;")
        elif c == "'":
            out.append("&apos;")
        elif c == "\t":
            out.append("&#x9;")
        elif c == "\n":
            out.append("&#xA;")
        elif c == "\r":
            out.append("&#xD;")
        else:
            out.append(c)
    return "".join(out)


def unescape_xml(escaped: str) -> str:
    """Reverse the five predefined XML entities."""
    if "&" not in escaped:
        return escaped
    for entity, char in _XML_ENTITIES:
        escaped = escaped.replace(entity, char)
    return escaped
