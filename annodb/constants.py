"""Annotation name tables shared by extraction, merge and export.

Centralizes the well-known annotation namespaces, the typedef/range markers
that make an annotation a "magic constant", and the fixed retention table.
"""

# ============================================================================
# Namespaces
# ============================================================================

JAVA_LANG_PREFIX = "java.lang."

OLD_SUPPORT_PREFIX = "android.support.annotation."
NEW_SUPPORT_PREFIX = "androidx.annotation."
SUPPORT_PREFIXES: tuple[str, ...] = (OLD_SUPPORT_PREFIX, NEW_SUPPORT_PREFIX)

PLATFORM_PREFIX = "android.annotation."
RESOURCE_TYPE_SUFFIX = "Res"

DEFAULT_CANONICAL_PREFIX = NEW_SUPPORT_PREFIX

# ============================================================================
# Well-known names
# ============================================================================

IDEA_NULLABLE = "org.jetbrains.annotations.Nullable"
IDEA_NOTNULL = "org.jetbrains.annotations.NotNull"
IDEA_CONTRACT = "org.jetbrains.annotations.Contract"
IDEA_NON_NLS = "org.jetbrains.annotations.NonNls"
IDEA_MAGIC = "org.intellij.lang.annotations.MagicConstant"

ANDROID_NULLABLE = PLATFORM_PREFIX + "Nullable"
ANDROID_NOTNULL = PLATFORM_PREFIX + "NonNull"
ANDROID_INT_DEF = PLATFORM_PREFIX + "IntDef"
ANDROID_LONG_DEF = PLATFORM_PREFIX + "LongDef"
ANDROID_STRING_DEF = PLATFORM_PREFIX + "StringDef"
ANDROID_INT_RANGE = PLATFORM_PREFIX + "IntRange"
ANDROID_REQUIRES_PERMISSION = PLATFORM_PREFIX + "RequiresPermission"

RETENTION_ANNOTATIONS: frozenset[str] = frozenset(
    {"java.lang.annotation.Retention", "kotlin.annotation.Retention"}
)
SOURCE_RETENTION_FIELD = "SOURCE"

FIND_VIEW_METHOD = "findViewById"

ATTR_VALUE = "value"
ATTR_FLAG = "flag"

# Simple names that exist in both support namespaces
NULLABLE = "Nullable"
NONNULL = "NonNull"
INT_DEF = "IntDef"
LONG_DEF = "LongDef"
STRING_DEF = "StringDef"
INT_RANGE = "IntRange"
KEEP = "Keep"
REQUIRES_PERMISSION = "RequiresPermission"
SYSTEM_SERVICE = "SystemService"

TYPEDEF_SIMPLE_NAMES: frozenset[str] = frozenset({INT_DEF, LONG_DEF, STRING_DEF})


def support_names(simple_name: str) -> frozenset[str]:
    """Both support-namespace spellings of a simple annotation name."""
    return frozenset(prefix + simple_name for prefix in SUPPORT_PREFIXES)


KEEP_ANNOTATIONS = support_names(KEEP)

NULLABLE_ANNOTATIONS: frozenset[str] = support_names(NULLABLE) | {
    ANDROID_NULLABLE,
    IDEA_NULLABLE,
}
NONNULL_ANNOTATIONS: frozenset[str] = support_names(NONNULL) | {
    ANDROID_NOTNULL,
    IDEA_NOTNULL,
}

TYPEDEF_ANNOTATIONS: frozenset[str] = (
    support_names(INT_DEF)
    | support_names(LONG_DEF)
    | support_names(STRING_DEF)
    | {ANDROID_INT_DEF, ANDROID_LONG_DEF, ANDROID_STRING_DEF}
)

# Annotation types that restrict a value to a set of constants or a range
MAGIC_CONSTANT_ANNOTATIONS: frozenset[str] = (
    TYPEDEF_ANNOTATIONS | support_names(INT_RANGE) | {ANDROID_INT_RANGE}
)

# Markers that, when found on an annotation type, make it a magic constant too
NESTED_MARKER_ANNOTATIONS: frozenset[str] = (
    MAGIC_CONSTANT_ANNOTATIONS
    | support_names(REQUIRES_PERMISSION)
    | {ANDROID_REQUIRES_PERMISSION}
)

# Field references inside these annotations are written symbolically
SYMBOLIC_REFERENCE_ANNOTATIONS: frozenset[str] = TYPEDEF_ANNOTATIONS | support_names(
    SYSTEM_SERVICE
)

# Framework annotations that only matter for documentation or lint itself
FRAMEWORK_EXCLUDED_SUFFIXES: tuple[str, ...] = (
    ".Widget",
    ".TargetApi",
    ".SystemApi",
    ".TestApi",
    ".SuppressAutoDoc",
    ".SuppressLint",
    ".SdkConstant",
)

# Attributes of typedef annotations used only for documentation generation
TYPEDEF_DOC_ATTRIBUTES: frozenset[str] = frozenset({"prefix", "suffix"})

# ============================================================================
# Retention
# ============================================================================

# Known retention of common annotations (True means SOURCE retention)
KNOWN_SOURCE_RETENTION: dict[str, bool] = {
    **{name: True for name in support_names(INT_DEF)},
    **{name: True for name in support_names(STRING_DEF)},
    **{name: True for name in support_names(LONG_DEF)},
    **{name: False for name in support_names(NULLABLE)},
    **{name: False for name in support_names(NONNULL)},
    ANDROID_NULLABLE: False,
    ANDROID_NOTNULL: False,
}

# ============================================================================
# Merge quirks
# ============================================================================

# Historical signatures present in platform annotation files that are wrong
MERGE_DENY_LIST: frozenset[str] = frozenset(
    {
        "java.util.Calendar int get(int)",
        "java.util.Calendar void set(int, int, int) 1",
        "java.util.Calendar void set(int, int, int, int, int) 1",
        "java.util.Calendar void set(int, int, int, int, int, int) 1",
    }
)
CALENDAR_CLASS = "java.util.Calendar"
CALENDAR_SET_METHOD = "set"

# Only these ZipEntry constants are valid for flagsFromClass/valuesFromClass
ZIP_ENTRY_CLASS = "java.util.zip.ZipEntry"
ZIP_ENTRY_METHODS: tuple[str, ...] = ("STORED", "DEFLATED")

# Archive entry and file names
ANNOTATIONS_ENTRY_NAME = "annotations.xml"
SUPPORTED_MERGE_SUFFIXES: tuple[str, ...] = (".jar", ".zip")
XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>'
