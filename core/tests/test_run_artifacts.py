"""Tests for run artifact writers."""

import json
import tempfile
import unittest
from pathlib import Path

from core.run_artifacts import write_outline, write_run_report


class TestRunArtifacts(unittest.TestCase):
    def test_write_run_report(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = write_run_report(
                report={"status": "success", "declarations": 3},
                run_id="run-123",
                output_dir=tmpdir,
            )
            self.assertTrue(Path(path).is_file())
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
            self.assertEqual(payload["run_id"], "run-123")
            self.assertEqual(payload["status"], "success")
            self.assertEqual(payload["declarations"], 3)
            self.assertIn("timestamp_utc", payload)

    def test_write_outline_creates_parent_and_keeps_order(self) -> None:
        outline = {
            "BMPoint": [{"name": "x", "category": "property", "link_id": "BMPoint-x-0"}],
            "": [{"name": "BMPointMake", "category": "function", "link_id": "-BMPointMake-1"}],
        }
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir) / "nested" / "outline.json"
            path = write_outline(outline, str(target))
            self.assertTrue(target.is_file())
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
            self.assertEqual(list(payload), ["BMPoint", ""])
            self.assertEqual(payload["BMPoint"][0]["link_id"], "BMPoint-x-0")


if __name__ == "__main__":
    unittest.main()
