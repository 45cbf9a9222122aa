"""Contract tests for the command line pipeline."""

from __future__ import annotations

import json
import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from run_pipeline import load_settings, main, parse_args

SOURCE = """\
// @type BMSize

/**
 * A size.
 */
function BMSize(width, height) { // <constructor>
}

BMSize.prototype = {
    /**
     * The width.
     */
    width: 0, // <Number>
};
"""


class TestPipelineContracts(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)
        self.source = self.root / "src" / "BMSize.js"
        self.source.parent.mkdir()
        self.source.write_text(SOURCE, encoding="utf-8")
        env = patch.dict(os.environ, {}, clear=True)
        env.start()
        self.addCleanup(env.stop)

    def _argv(self, *extra: str) -> list:
        return [
            "--source", str(self.source.parent),
            "--output", str(self.root / "out" / "core.d.ts"),
            "--report-dir", str(self.root / "reports"),
            *extra,
        ]

    def test_main_writes_declarations_outline_and_report(self) -> None:
        outline = self.root / "out" / "outline.json"
        main(self._argv("--outline-file", str(outline)))

        text = (self.root / "out" / "core.d.ts").read_text(encoding="utf-8")
        self.assertIn("declare class BMSize {", text)
        self.assertIn("\twidth: number;", text)

        payload = json.loads(outline.read_text(encoding="utf-8"))
        self.assertEqual([item["name"] for item in payload["BMSize"]], ["BMSize", "width"])

        reports = list((self.root / "reports").glob("*.json"))
        self.assertEqual(len(reports), 1)
        report = json.loads(reports[0].read_text(encoding="utf-8"))
        self.assertEqual(report["status"], "success")
        self.assertEqual(report["stats"]["doc_blocks"], 2)

    def test_modules_flag_exports(self) -> None:
        main(self._argv("--modules"))
        text = (self.root / "out" / "core.d.ts").read_text(encoding="utf-8")
        self.assertIn("export class BMSize {", text)

    def test_missing_source_exits_with_failed_report(self) -> None:
        argv = [
            "--source", str(self.root / "missing"),
            "--output", str(self.root / "out" / "core.d.ts"),
            "--report-dir", str(self.root / "reports"),
        ]
        with self.assertRaises(SystemExit) as ctx:
            main(argv)
        self.assertEqual(ctx.exception.code, 1)
        report = json.loads(next((self.root / "reports").glob("*.json")).read_text(encoding="utf-8"))
        self.assertEqual(report["status"], "failed")
        self.assertIn("missing", report["error"])

    def test_config_file_and_env_resolution(self) -> None:
        config = self.root / "dtsgen.yml"
        config.write_text(
            "emission:\n  emit_as_module: true\n  indent: 2\nextraction:\n  private_prefix: m_\n",
            encoding="utf-8",
        )
        options = load_settings(parse_args(self._argv("--config", str(config))))
        self.assertTrue(options["emit_as_module"])
        self.assertEqual(options["indent"], "  ")
        self.assertEqual(options["settings"].private_prefix, "m_")

        os.environ["DTSGEN_CONFIG"] = str(config)
        os.environ["DTSGEN_EMIT_AS_MODULE"] = "false"
        options = load_settings(parse_args(self._argv()))
        self.assertEqual(options["config_path"], str(config))
        self.assertFalse(options["emit_as_module"])

    def test_strict_config_failure_exits(self) -> None:
        with self.assertRaises(SystemExit):
            main(self._argv("--config", str(self.root / "absent.yml"), "--strict-config"))


if __name__ == "__main__":
    unittest.main()
