"""
Run configuration for an annotation extraction session.

Flags are plain dataclass fields. Two toggles may also come from the
environment so that build systems can flip them without code changes:

- ANNODB_ENFORCE_TYPEDEF_RETENTION=true: a typedef annotation type without
  SOURCE retention aborts extraction instead of producing a warning
- ANNODB_STRICT_VALIDATION=true: an emitted document that fails to re-parse
  aborts the export instead of being logged
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace

from annodb.constants import DEFAULT_CANONICAL_PREFIX, SUPPORT_PREFIXES
from annodb.types.errors import ConfigurationError, ErrorContext

ENV_ENFORCE_TYPEDEF_RETENTION = "ANNODB_ENFORCE_TYPEDEF_RETENTION"
ENV_STRICT_VALIDATION = "ANNODB_STRICT_VALIDATION"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() == "true"


@dataclass(frozen=True)
class ExtractorConfig:
    """Behaviour switches for extraction, merge and export."""

    sort_annotations: bool = False
    include_class_retention: bool = False
    display_info: bool = False
    list_ignored: bool | None = None
    require_hide: bool = False
    require_source_retention: bool = True
    enforce_typedef_retention: bool = False
    strict_validation: bool = False
    canonical_prefix: str = DEFAULT_CANONICAL_PREFIX

    def __post_init__(self) -> None:
        if self.canonical_prefix not in SUPPORT_PREFIXES:
            raise ConfigurationError(
                f"Unsupported canonical annotation prefix: {self.canonical_prefix!r}",
                user_message=f"canonical_prefix must be one of {', '.join(SUPPORT_PREFIXES)}",
                context=ErrorContext(operation="ExtractorConfig", component="config"),
            )

    @classmethod
    def from_env(cls, **overrides: object) -> ExtractorConfig:
        """Build a config from environment toggles, then apply overrides."""
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(sorted(unknown))}",
                context=ErrorContext(operation="from_env", component="config"),
            )
        base = cls(
            enforce_typedef_retention=_env_flag(ENV_ENFORCE_TYPEDEF_RETENTION),
            strict_validation=_env_flag(ENV_STRICT_VALIDATION),
        )
        return replace(base, **overrides)

    def lists_ignored(self, has_api_surface: bool) -> bool:
        """Whether skipped entries should be reported individually."""
        if self.list_ignored is None:
            return has_api_surface
        return self.list_ignored
