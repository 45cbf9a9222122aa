"""Unit tests for visibility.py"""

import unittest

from extraction.visibility import (
    PropertyAccess,
    next_nonblank_line,
    resolve_backing_field,
    resolve_getter,
)

GETTER = (
    "\n"
    "    get frame() {\n"
    "        if (this._frame) { return this._frame.copy(); }\n"
    "        return undefined;\n"
    "    },\n"
)

SETTER = (
    "    set frame(frame) {\n"
    "        this._frame = frame;\n"
    "    },\n"
)


class TestResolveBackingField(unittest.TestCase):
    """Test the two-step accessor lookahead for prefixed fields."""

    def test_getter_and_setter_is_read_write(self):
        resolution = resolve_backing_field("_frame", GETTER + "\n\n" + SETTER)
        self.assertEqual(resolution.name, "frame")
        self.assertIs(resolution.access, PropertyAccess.READ_WRITE)
        self.assertTrue(resolution.read)
        self.assertTrue(resolution.write)
        self.assertFalse(resolution.is_private)
        self.assertEqual(resolution.qualifier, "")

    def test_getter_only_is_read_only(self):
        resolution = resolve_backing_field("_frame", GETTER + "\n    somethingElse: 1,\n")
        self.assertEqual(resolution.name, "frame")
        self.assertTrue(resolution.read)
        self.assertFalse(resolution.write)
        self.assertEqual(resolution.qualifier, "readonly ")

    def test_setter_only_is_write_only(self):
        resolution = resolve_backing_field("_frame", "\n" + SETTER)
        self.assertIs(resolution.access, PropertyAccess.WRITE_ONLY)
        self.assertFalse(resolution.read)
        self.assertTrue(resolution.write)

    def test_no_accessors_stays_private(self):
        resolution = resolve_backing_field("_frame", "\n    _bounds: undefined,\n")
        self.assertEqual(resolution.name, "_frame")
        self.assertTrue(resolution.is_private)
        self.assertEqual(resolution.qualifier, "private ")

    def test_accessor_for_another_name_stays_private(self):
        resolution = resolve_backing_field("_frame", "\n    get frameSize() {\n    },\n")
        self.assertTrue(resolution.is_private)

    def test_end_of_text_stays_private(self):
        self.assertTrue(resolve_backing_field("_frame", "\n\n").is_private)

    def test_unprefixed_name_is_public(self):
        resolution = resolve_backing_field("frame", GETTER)
        self.assertEqual(resolution.name, "frame")
        self.assertIs(resolution.access, PropertyAccess.READ_WRITE)

    def test_custom_prefix(self):
        resolution = resolve_backing_field("m_frame", GETTER, private_prefix="m_")
        self.assertEqual(resolution.name, "frame")
        self.assertIs(resolution.access, PropertyAccess.READ_ONLY)


class TestResolveGetter(unittest.TestCase):
    """Test getter-first properties."""

    def test_getter_followed_by_setter(self):
        resolution = resolve_getter(
            "r",
            "    get r() { // <Number>",
            "        return this._r;\n    },\n\n    set r(r) {\n        this._r = r;\n    },\n",
        )
        self.assertIs(resolution.access, PropertyAccess.READ_WRITE)

    def test_getter_alone_is_read_only(self):
        resolution = resolve_getter("r", "    get r() {", "        return 1;\n    },\n")
        self.assertIs(resolution.access, PropertyAccess.READ_ONLY)

    def test_unclosed_getter_is_read_only(self):
        resolution = resolve_getter("r", "    get r() {", "        return 1;\n")
        self.assertIs(resolution.access, PropertyAccess.READ_ONLY)


class TestNextNonblankLine(unittest.TestCase):
    def test_skips_blank_lines(self):
        text = "\n   \n\t\n  value\nnext"
        line, start, end = next_nonblank_line(text, 0)
        self.assertEqual(line, "value")
        self.assertEqual(text[start:end], "  value")

    def test_returns_none_at_end(self):
        self.assertIsNone(next_nonblank_line("\n  \n", 0))


if __name__ == "__main__":
    unittest.main()
