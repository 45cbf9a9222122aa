"""
High-level orchestrator for declaration extraction.

This module drives segmentation, documentation-block scanning and
classification over a complete source text, and provides the file-level
entry points used by the command line pipeline.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from core.structured_logging import section_scope
from extraction.classifier import Classification, Placement, classify_declaration
from extraction.config import (
    DEFAULT_SETTINGS,
    SKIPPED_DIRECTORIES,
    SOURCE_EXTENSIONS,
    ExtractionSettings,
)
from extraction.doc_fields import apply_doc_block, parse_doc_block
from extraction.models import (
    Constant,
    GlobalEntry,
    Method,
    OutlineItem,
    TypeEntry,
)
from extraction.sections import TypeSection, split_sections

logger = logging.getLogger(__name__)

# "/**" on its own line, the description, "*/" on its own line, then exactly
# one declaration line.
DOC_BLOCK_PATTERN = re.compile(r"/\*\*[ \t]*\n([\s\S]*?)\*/[ \t]*\n([^\n]*)(?:\n|$)")


class ExtractionStats:
    """Statistics for an extraction operation."""

    def __init__(self):
        self.sections_processed = 0
        self.doc_blocks = 0
        self.declarations_classified = 0
        self.opaque_declarations = 0
        self.orphaned_declarations = 0

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "sections_processed": self.sections_processed,
            "doc_blocks": self.doc_blocks,
            "declarations_classified": self.declarations_classified,
            "opaque_declarations": self.opaque_declarations,
            "orphaned_declarations": self.orphaned_declarations,
        }

    def __str__(self) -> str:
        """String representation of stats."""
        return (
            f"ExtractionStats(sections={self.sections_processed}, "
            f"doc_blocks={self.doc_blocks}, classified={self.declarations_classified}, "
            f"opaque={self.opaque_declarations}, orphaned={self.orphaned_declarations})"
        )


@dataclass
class ExtractionContext:
    """Mutable state of one extraction run.

    Every invocation owns its context, so concurrent runs never share the
    globals map or the link serial.
    """

    settings: ExtractionSettings = DEFAULT_SETTINGS
    globals: Dict[str, GlobalEntry] = field(default_factory=dict)
    outline: Dict[str, List[OutlineItem]] = field(default_factory=dict)
    stats: ExtractionStats = field(default_factory=ExtractionStats)
    link_serial: int = 0

    def next_link_id(self, section_name: str, member_name: str) -> str:
        """Return a run-unique link identifier for an outline item."""
        link_id = f"{section_name}-{member_name}-{self.link_serial}"
        self.link_serial += 1
        return link_id


@dataclass
class ExtractionResult:
    """Symbol table and outline produced by one extraction run."""

    globals: Dict[str, GlobalEntry]
    outline: Dict[str, List[OutlineItem]]
    stats: ExtractionStats

    def outline_to_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {
            section: [item.to_dict() for item in items]
            for section, items in self.outline.items()
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a dictionary suitable for JSON serialization."""
        return {
            "globals": {name: entry.to_dict() for name, entry in self.globals.items()},
            "outline": self.outline_to_dict(),
            "stats": self.stats.to_dict(),
        }


def _place_member(
    classification: Classification,
    entry: Optional[TypeEntry],
    ctx: ExtractionContext,
) -> None:
    """File a classified member into the globals map or its owning entry."""
    member = classification.member
    placement = classification.placement

    if placement is Placement.OUTLINE_ONLY:
        ctx.stats.opaque_declarations += 1
        return

    ctx.stats.declarations_classified += 1

    if placement is Placement.GLOBAL:
        ctx.globals[member.name] = member
        return

    if entry is None:
        logger.warning(
            "%s '%s' has no owning type section; listing it in the outline only",
            classification.shape.value,
            member.name,
        )
        ctx.stats.orphaned_declarations += 1
        return

    if placement is Placement.COMPONENT:
        entry.add_component(member)
    elif placement is Placement.CONSTRUCTOR and isinstance(member, Method):
        entry.set_constructor(member)
    elif placement is Placement.ENUM_FIELD and isinstance(member, Constant):
        entry.add_field(member)
    else:
        raise TypeError(f"Cannot place {type(member).__name__} as {placement.value}")


def extract_section(section: TypeSection, ctx: ExtractionContext) -> Optional[TypeEntry]:
    """Classify every documented declaration of one section.

    Args:
        section: The section to process.
        ctx: Run state receiving the entries and outline items.

    Returns:
        The section's entry, or None for anonymous sections.
    """
    with section_scope(section.type_name):
        entry: Optional[TypeEntry] = None
        if not section.is_anonymous:
            entry = TypeEntry(name=section.type_name)
            ctx.globals[section.type_name] = entry

        outline = ctx.outline.setdefault(section.type_name, [])
        body = section.body_text

        for documentation in DOC_BLOCK_PATTERN.finditer(body):
            ctx.stats.doc_blocks += 1
            description, line = documentation.group(1), documentation.group(2)

            classification = classify_declaration(
                line,
                following_text=body[documentation.end():],
                private_prefix=ctx.settings.private_prefix,
            )
            apply_doc_block(classification.member, parse_doc_block(description))
            _place_member(classification, entry, ctx)

            outline.append(
                OutlineItem(
                    name=classification.member.name,
                    category=classification.category,
                    link_id=ctx.next_link_id(section.type_name, classification.member.name),
                )
            )

        ctx.stats.sections_processed += 1
        logger.debug("Collected %d outline items", len(outline))
        return entry


def extract_symbol_table(
    source_text: str,
    settings: ExtractionSettings = DEFAULT_SETTINGS,
) -> ExtractionResult:
    """Extract the symbol table from a complete source text.

    Args:
        source_text: Concatenated annotated source.
        settings: Sentinel and prefix conventions.

    Returns:
        ExtractionResult with globals in encounter order.

    Example:
        >>> result = extract_symbol_table(open("BMPoint.js").read())
        >>> list(result.globals)
        ['BMPoint implements BMAnimating', 'BMPointMake']
    """
    ctx = ExtractionContext(settings=settings)

    for section in split_sections(source_text, settings):
        extract_section(section, ctx)

    logger.info("Extraction complete: %s", ctx.stats)
    return ExtractionResult(globals=ctx.globals, outline=ctx.outline, stats=ctx.stats)


def discover_source_files(directory: str) -> List[str]:
    """Recursively discover annotated source files in a directory.

    Args:
        directory: Root directory to search.

    Returns:
        Sorted list of absolute paths.
    """
    source_files = []
    directory = os.path.abspath(directory)

    logger.info("Discovering source files in %s", directory)

    for root, dirs, files in os.walk(directory):
        dirs[:] = [d for d in dirs if not d.startswith('.') and d not in SKIPPED_DIRECTORIES]

        for file in files:
            ext = os.path.splitext(file)[1]
            if ext in SOURCE_EXTENSIONS:
                source_files.append(os.path.join(root, file))

    logger.info("Found %d source files", len(source_files))
    return sorted(source_files)


def read_sources(paths: Iterable[str]) -> str:
    """Read and concatenate source files in the given order.

    Raises:
        FileNotFoundError: If a file does not exist.
        ValueError: If a file is not an annotated source file.
    """
    contents = []
    for path in paths:
        path = os.path.abspath(path)
        if not os.path.isfile(path):
            logger.error("File not found: %s", path)
            raise FileNotFoundError(f"File not found: {path}")

        ext = os.path.splitext(path)[1]
        if ext not in SOURCE_EXTENSIONS:
            raise ValueError(
                f"File {path} is not an annotated source file. "
                f"Expected one of: {SOURCE_EXTENSIONS}"
            )

        with open(path, "r", encoding="utf-8") as f:
            contents.append(f.read())
        logger.debug("Read %s", path)

    return "\n".join(contents)


def extract_file(
    file_path: str,
    settings: ExtractionSettings = DEFAULT_SETTINGS,
) -> ExtractionResult:
    """Extract the symbol table of a single source file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not an annotated source file.
    """
    try:
        source_text = read_sources([file_path])
    except Exception as e:
        logger.error("Error reading %s: %s", file_path, e)
        raise

    logger.info("Extracting declarations from %s", file_path)
    return extract_symbol_table(source_text, settings)


def extract_sources(
    sources: Iterable[str],
    settings: ExtractionSettings = DEFAULT_SETTINGS,
) -> ExtractionResult:
    """Extract the symbol table of files and directories, concatenated in order.

    Directories expand to their discovered source files (sorted).
    """
    paths: List[str] = []
    for source in sources:
        if os.path.isdir(source):
            paths.extend(discover_source_files(source))
        else:
            paths.append(source)

    if not paths:
        logger.warning("No source files found in %s", list(sources))

    return extract_symbol_table(read_sources(paths), settings)
