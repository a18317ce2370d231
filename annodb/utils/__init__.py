"""
annodb utility modules.

- Logging (loguru, STDERR sink)
- XML escaping and small helpers
"""

from .helpers import escape_xml, unescape_xml, utcnow
from .logger import configure_logging, is_debug_enabled, logger

__all__ = [
    "configure_logging",
    "escape_xml",
    "is_debug_enabled",
    "logger",
    "unescape_xml",
    "utcnow",
]
