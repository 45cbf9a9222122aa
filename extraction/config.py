"""
Configuration constants for annotated-source extraction.

Defines the sentinels, markers and annotation spellings recognised while
segmenting source text and classifying documented declarations.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Set

# Section sentinels (a section runs from a start sentinel to the next start
# sentinel or to an explicit end sentinel)
SECTION_START_SENTINEL: str = "// @type"
SECTION_END_SENTINEL: str = "// @endType"

# A type name starting with this marker emits as an interface
INTERFACE_MARKER: str = "interface "

# Names starting with this prefix are private (or backing fields)
PRIVATE_PREFIX: str = "_"

# Declaration markers
REQUIRED_MARKER: str = "/*required*/"
CONSTRUCTOR_MARKER: str = "<constructor"
FROZEN_OBJECT_CALL: str = "Object.freeze"

# Doc-field markers
PARAM_MARKER: str = "@param"
RETURN_MARKER: str = "@return"
ARGUMENTS_OBJECT_OPEN: str = "{"
ARGUMENTS_OBJECT_CLOSE: str = "}"

# Trailing nullability modifiers used inside <...> annotations
NULLABLE_SUFFIX: str = ", nullable"
NULL_RESETTABLE_SUFFIX: str = ", nullResettable"

# Data types with special meaning during extraction
ANY_TYPE: str = "any"
ENUM_TYPE: str = "enum"

# Source file extensions picked up by directory discovery
SOURCE_EXTENSIONS: Set[str] = {
    ".js",
    ".mjs",
}

# Directories never descended into during discovery
SKIPPED_DIRECTORIES: Set[str] = {
    "node_modules",
    "build",
    "dist",
    "out",
    "zip",
    "__pycache__",
}


@dataclass(frozen=True)
class ExtractionSettings:
    """Conventions applied to one extraction run.

    Attributes:
        section_start: Sentinel opening a type section.
        section_end: Sentinel closing a type section (matched case-insensitively).
        private_prefix: Prefix marking private names and backing fields.
    """

    section_start: str = SECTION_START_SENTINEL
    section_end: str = SECTION_END_SENTINEL
    private_prefix: str = PRIVATE_PREFIX

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ExtractionSettings":
        """Build settings from the ``extraction`` section of a config file.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        values: Dict[str, Any] = {}
        for key in ("section_start", "section_end", "private_prefix"):
            raw = payload.get(key)
            if raw is not None:
                values[key] = str(raw)
        return cls(**values)


DEFAULT_SETTINGS = ExtractionSettings()
