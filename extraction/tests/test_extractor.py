"""
Integration tests for extractor.py

Tests the high-level orchestration functions over realistic annotated
source text.
"""

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from extraction.extractor import (
    DOC_BLOCK_PATTERN,
    ExtractionContext,
    ExtractionStats,
    discover_source_files,
    extract_file,
    extract_sources,
    extract_symbol_table,
    read_sources,
)
from extraction.models import EntryKind, Function, Method, Property, TypeEntry

POINT_SOURCE = """\
/**
 * Constructs and returns a point.
 * @param x <Number>    The x coordinate.
 * @param y <Number>    The y coordinate.
 * @return <BMPoint>    A point.
 */
function BMPointMake(x, y) {
    return new BMPoint(x, y);
}

// @type BMPoint implements BMAnimating

/**
 * A point.
 */
function BMPoint(x, y) { // <constructor>
    this.x = x;
    this.y = y;
}

BMPoint.prototype = {

    /**
     * The horizontal coordinate.
     */
    x: 0, // <Number>

    /**
     * The cached length.
     */
    _length: undefined, // <Number, nullable>

    get length() {
        return this._length;
    },

    /**
     * Moves this point.
     * @param x <Number>    The x offset.
     * @return <BMPoint>    This point.
     */
    translate: function (x) {
        return this;
    },

    /**
     * Not a declaration.
     */
    someCall();
};

// @endType
"""

ENUM_SOURCE = """\
// @type BMDirection

/**
 * The layout directions.
 */
var BMDirection = Object.freeze({

    /**
     * Lays out horizontally.
     */
    Horizontal: {}, // <enum>

    /**
     * Lays out vertically.
     */
    Vertical: {}, // <enum>
});
"""


class TestExtractionStats(unittest.TestCase):
    """Test ExtractionStats class."""

    def test_creation(self):
        stats = ExtractionStats()
        self.assertEqual(stats.sections_processed, 0)
        self.assertEqual(stats.doc_blocks, 0)
        self.assertEqual(stats.opaque_declarations, 0)

    def test_to_dict_and_str(self):
        stats = ExtractionStats()
        stats.sections_processed = 3
        self.assertEqual(stats.to_dict()["sections_processed"], 3)
        self.assertIn("sections=3", str(stats))


class TestDocBlockPattern(unittest.TestCase):
    def test_single_line_comment_is_not_a_block(self):
        self.assertIsNone(DOC_BLOCK_PATTERN.search("/** inline */\nvar x = 1;\n"))

    def test_block_captures_declaration_line(self):
        match = DOC_BLOCK_PATTERN.search("/**\n * Doc.\n */\nvar x = 1;\nvar y = 2;\n")
        self.assertEqual(match.group(2), "var x = 1;")


class TestExtractSymbolTable(unittest.TestCase):
    """Test extraction over whole sources."""

    def setUp(self):
        self.result = extract_symbol_table(POINT_SOURCE)

    def test_globals_in_encounter_order(self):
        self.assertEqual(list(self.result.globals), ["BMPointMake", "BMPoint implements BMAnimating"])

    def test_global_function(self):
        function = self.result.globals["BMPointMake"]
        self.assertIsInstance(function, Function)
        self.assertEqual([p.name for p in function.arguments], ["x", "y"])
        self.assertEqual(function.returns.data_type, "BMPoint")

    def test_class_entry(self):
        entry = self.result.globals["BMPoint implements BMAnimating"]
        self.assertIsInstance(entry, TypeEntry)
        self.assertIs(entry.kind, EntryKind.CLASS)
        self.assertEqual(entry.declared_name, "BMPoint")
        self.assertEqual(entry.constructor.name, "BMPoint")
        self.assertIn("A point.", entry.constructor.doc)
        self.assertEqual([c.name for c in entry.components], ["x", "length", "translate"])

    def test_components(self):
        x, length, translate = self.result.globals["BMPoint implements BMAnimating"].components
        self.assertIsInstance(x, Property)
        self.assertEqual(x.data_type, "Number")
        self.assertTrue(x.write)
        self.assertFalse(length.write)
        self.assertTrue(length.nullable)
        self.assertIsInstance(translate, Method)
        self.assertEqual(translate.arguments[0].description, "The x offset.")

    def test_outline_and_link_ids(self):
        outline = self.result.outline
        self.assertEqual([item.name for item in outline[""]], ["BMPointMake"])
        items = outline["BMPoint implements BMAnimating"]
        self.assertEqual(len(items), 5)
        self.assertEqual(items[-1].name, "someCall();")
        link_ids = [item.link_id for group in outline.values() for item in group]
        self.assertEqual(link_ids[0], "-BMPointMake-0")
        self.assertEqual(len(set(link_ids)), len(link_ids))

    def test_stats(self):
        stats = self.result.stats
        self.assertEqual(stats.sections_processed, 2)
        self.assertEqual(stats.doc_blocks, 6)
        self.assertEqual(stats.declarations_classified, 5)
        self.assertEqual(stats.opaque_declarations, 1)

    def test_to_dict(self):
        payload = self.result.to_dict()
        self.assertEqual(payload["globals"]["BMPointMake"]["kind"], "function")
        self.assertEqual(payload["globals"]["BMPoint implements BMAnimating"]["kind"], "class")
        self.assertIn("link_id", payload["outline"][""][0])

    def test_invocations_do_not_share_state(self):
        again = extract_symbol_table(POINT_SOURCE)
        self.assertEqual(
            again.outline[""][0].link_id,
            self.result.outline[""][0].link_id,
        )
        self.assertIsNot(again.globals["BMPointMake"], self.result.globals["BMPointMake"])


class TestSectionKinds(unittest.TestCase):
    """Test enum inference and unusual sections."""

    def test_frozen_enum_section(self):
        entry = extract_symbol_table(ENUM_SOURCE).globals["BMDirection"]
        self.assertIs(entry.kind, EntryKind.ENUM)
        self.assertEqual([f.name for f in entry.fields], ["BMDirection"])
        self.assertIn("layout directions", entry.fields[0].doc)
        self.assertEqual([c.name for c in entry.components], ["Horizontal", "Vertical"])

    def test_mixed_section_keeps_first_kind(self):
        source = ENUM_SOURCE + (
            "\n/**\n * Unexpected.\n */\nBMDirection.prototype.flip = function () {\n"
        )
        with self.assertLogs("extraction.models", level="WARNING"):
            entry = extract_symbol_table(source).globals["BMDirection"]
        self.assertIs(entry.kind, EntryKind.ENUM)
        self.assertEqual(entry.components[-1].name, "flip")

    def test_unannotated_enum_values(self):
        source = ENUM_SOURCE.replace(" // <enum>", "")
        with patch("extraction.models.logger") as log:
            entry = extract_symbol_table(source).globals["BMDirection"]
        log.warning.assert_not_called()
        self.assertIs(entry.kind, EntryKind.ENUM)
        self.assertEqual([c.data_type for c in entry.components], ["enum", "enum"])

    def test_mixed_section_warns_once(self):
        source = ENUM_SOURCE + (
            "\n/**\n * Unexpected.\n */\nBMDirection.prototype.flip = function () {\n"
            "\n/**\n * Also unexpected.\n */\nBMDirection.prototype.flop = function () {\n"
        )
        with self.assertLogs("extraction.models", level="WARNING") as logs:
            extract_symbol_table(source)
        self.assertEqual(len(logs.output), 1)

    def test_commented_constructor_section(self):
        source = (
            "// @type _BMColorStorage\n\n\t/**\n\t * Used internally.\n\t */\n"
            "// function _BMColorStorage() {} // <constructor>\n\n// @endtype\n"
        )
        entry = extract_symbol_table(source).globals["_BMColorStorage"]
        self.assertIs(entry.kind, EntryKind.CLASS)
        self.assertEqual(entry.constructor.name, "_BMColorStorage")
        self.assertIn("Used internally.", entry.constructor.doc)

    def test_component_in_anonymous_section_is_outline_only(self):
        source = "/**\n * Stray.\n */\n    stray: 0, // <Number>\n"
        with self.assertLogs("extraction.extractor", level="WARNING"):
            result = extract_symbol_table(source)
        self.assertEqual(result.globals, {})
        self.assertEqual(result.outline[""][0].name, "stray")
        self.assertEqual(result.stats.orphaned_declarations, 1)

    def test_untyped_section_is_registered(self):
        result = extract_symbol_table("// @type Helpers\nvar x = 1;\n")
        self.assertIs(result.globals["Helpers"].kind, EntryKind.UNTYPED)

    def test_global_name_last_writer_wins(self):
        source = (
            "/**\n * First.\n */\nvar BMValue = 1; // <Number>\n"
            "/**\n * Second.\n */\nvar BMValue = 'a'; // <String>\n"
        )
        result = extract_symbol_table(source)
        self.assertEqual(list(result.globals), ["BMValue"])
        self.assertEqual(result.globals["BMValue"].data_type, "String")

    def test_context_link_serial(self):
        ctx = ExtractionContext()
        self.assertEqual(ctx.next_link_id("A", "x"), "A-x-0")
        self.assertEqual(ctx.next_link_id("A", "y"), "A-y-1")


class TestFileWrappers(unittest.TestCase):
    """Test the file-level entry points."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)

    def _write(self, relative: str, content: str) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def test_discover_skips_dependencies_and_hidden(self):
        self._write("b.js", "")
        self._write("a/c.mjs", "")
        self._write("node_modules/lib.js", "")
        self._write(".cache/d.js", "")
        self._write("notes.txt", "")
        found = [os.path.relpath(p, self.root) for p in discover_source_files(str(self.root))]
        self.assertEqual(found, [os.path.join("a", "c.mjs"), "b.js"])

    def test_read_sources_keeps_order(self):
        first = self._write("first.js", "// @type A\n")
        second = self._write("second.js", "body")
        self.assertEqual(read_sources([str(second), str(first)]), "body\n// @type A\n")

    def test_extract_file(self):
        path = self._write("BMPoint.js", POINT_SOURCE)
        result = extract_file(str(path))
        self.assertIn("BMPointMake", result.globals)

    def test_extract_file_missing(self):
        with self.assertRaises(FileNotFoundError):
            extract_file(str(self.root / "missing.js"))

    def test_extract_file_wrong_extension(self):
        path = self._write("BMPoint.ts", POINT_SOURCE)
        with self.assertRaises(ValueError):
            extract_file(str(path))

    def test_extract_sources_directory(self):
        self._write("1_point.js", POINT_SOURCE)
        self._write("2_direction.js", ENUM_SOURCE)
        result = extract_sources([str(self.root)])
        self.assertEqual(
            list(result.globals),
            ["BMPointMake", "BMPoint implements BMAnimating", "BMDirection"],
        )


if __name__ == "__main__":
    unittest.main()
