"""Unit tests for sections.py"""

import unittest

from extraction.config import ExtractionSettings
from extraction.sections import TypeSection, split_sections


class TestSplitSections(unittest.TestCase):
    """Test segmentation into type sections."""

    def test_consecutive_sections(self):
        source = "// @type BMPoint\nbody\n// @type BMSize\nbody2"
        sections = split_sections(source)
        self.assertEqual(
            sections,
            [TypeSection("BMPoint", "body"), TypeSection("BMSize", "body2")],
        )

    def test_preamble_is_anonymous(self):
        source = "var YES = true;\n// @type BMPoint\nbody"
        sections = split_sections(source)
        self.assertEqual(len(sections), 2)
        self.assertTrue(sections[0].is_anonymous)
        self.assertIn("var YES", sections[0].body_text)
        self.assertEqual(sections[1].type_name, "BMPoint")

    def test_end_sentinel_starts_anonymous_remainder(self):
        source = "// @type A\nbody a\n// @endType\nglobal stuff\n"
        sections = split_sections(source)
        self.assertEqual([s.type_name for s in sections], ["A", ""])
        self.assertNotIn("global", sections[0].body_text)
        self.assertEqual(sections[1].body_text.strip(), "global stuff")

    def test_end_sentinel_is_case_insensitive(self):
        source = "// @type A\nbody a\n// @endtype\nafter\n"
        sections = split_sections(source)
        self.assertEqual(len(sections), 2)
        self.assertTrue(sections[1].is_anonymous)

    def test_typedef_is_not_a_sentinel(self):
        source = "// @type A\n// @typedef {Object} Options\nbody\n"
        sections = split_sections(source)
        self.assertEqual(len(sections), 1)
        self.assertIn("@typedef", sections[0].body_text)

    def test_interface_and_heritage_kept_in_name(self):
        source = "// @type interface BMAnimating extends BMCopying\nbody\n"
        self.assertEqual(split_sections(source)[0].type_name, "interface BMAnimating extends BMCopying")

    def test_empty_sections_dropped(self):
        source = "// @type Empty\n\n// @type Full\nx\n"
        sections = split_sections(source)
        self.assertEqual([s.type_name for s in sections], ["Full"])

    def test_custom_sentinels(self):
        settings = ExtractionSettings(section_start="// @class", section_end="// @end")
        source = "// @class Widget\nbody\n// @END\nrest\n"
        sections = split_sections(source, settings)
        self.assertEqual([s.type_name for s in sections], ["Widget", ""])

    def test_no_sentinels(self):
        self.assertEqual(split_sections(""), [])
        sections = split_sections("function f() {}\n")
        self.assertEqual(len(sections), 1)
        self.assertTrue(sections[0].is_anonymous)


if __name__ == "__main__":
    unittest.main()
