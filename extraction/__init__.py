"""
Layer 1: Extraction Engine

Convention-based reader for annotated source text. Splits the text into
type sections, classifies each documented declaration and collects the
symbol table consumed by the emission layer.
"""

from extraction.config import ExtractionSettings, DEFAULT_SETTINGS
from extraction.models import (
    Constant,
    EntryKind,
    Function,
    Member,
    Method,
    Nullability,
    OutlineItem,
    Param,
    Property,
    ReturnValue,
    Symbol,
    TypeEntry,
)
from extraction.scope import index_of_closing_scope
from extraction.sections import TypeSection, split_sections
from extraction.doc_fields import DocBlock, UnbalancedAnnotationError, parse_doc_block
from extraction.visibility import AccessResolution, PropertyAccess, resolve_backing_field
from extraction.classifier import Classification, DeclarationShape, Placement, classify_declaration
from extraction.extractor import (
    ExtractionContext,
    ExtractionResult,
    ExtractionStats,
    discover_source_files,
    extract_file,
    extract_sources,
    extract_symbol_table,
    read_sources,
)

__all__ = [
    # Settings
    "ExtractionSettings",
    "DEFAULT_SETTINGS",
    # Data models
    "Constant",
    "EntryKind",
    "Function",
    "Member",
    "Method",
    "Nullability",
    "OutlineItem",
    "Param",
    "Property",
    "ReturnValue",
    "Symbol",
    "TypeEntry",
    # Low-level scanning
    "index_of_closing_scope",
    "TypeSection",
    "split_sections",
    "DocBlock",
    "UnbalancedAnnotationError",
    "parse_doc_block",
    "AccessResolution",
    "PropertyAccess",
    "resolve_backing_field",
    # Classification
    "Classification",
    "DeclarationShape",
    "Placement",
    "classify_declaration",
    # High-level orchestration
    "ExtractionContext",
    "ExtractionResult",
    "ExtractionStats",
    "discover_source_files",
    "extract_file",
    "extract_sources",
    "extract_symbol_table",
    "read_sources",
]
