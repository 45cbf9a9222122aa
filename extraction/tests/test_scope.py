"""Unit tests for scope.py"""

import unittest

from extraction.scope import index_of_closing_scope


class TestIndexOfClosingScope(unittest.TestCase):
    """Test balanced-brace scanning."""

    def test_nested_scopes_from_zero(self):
        self.assertEqual(index_of_closing_scope("a { b { c } d } e"), 14)

    def test_already_open_scope(self):
        text = "x { y } }"
        self.assertEqual(index_of_closing_scope(text, open_scopes=1), 8)

    def test_depth_one_nesting_returns_matching_brace(self):
        for body in ("{}", "{ a }", "a {b} c", "{x}{y}"):
            text = body + "}tail"
            with self.subTest(body=body):
                self.assertEqual(index_of_closing_scope(text, 0, 1), len(body))

    def test_from_index_skips_earlier_text(self):
        text = "} ignored { body }"
        self.assertEqual(index_of_closing_scope(text, from_index=2), len(text) - 1)

    def test_unclosed_scope_returns_minus_one(self):
        self.assertEqual(index_of_closing_scope("get x() { return 1;"), -1)

    def test_text_without_braces_returns_minus_one(self):
        self.assertEqual(index_of_closing_scope("no braces here"), -1)


if __name__ == "__main__":
    unittest.main()
