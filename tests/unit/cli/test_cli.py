"""CLI subcommand behavior tests.

Drives ``studylenses.cli.main`` against the nested-config snapshot fixture.
"""

from __future__ import annotations

import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from studylenses import cli

FIXTURE = Path(__file__).resolve().parents[2] / "fixtures" / "nested_configs.json"


class CliTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        patcher = mock.patch("studylenses.config.CONFIG_PATH", Path(self._tmp.name) / "config.json")
        patcher.start()
        self.addCleanup(patcher.stop)

    def _run(self, *argv: str) -> tuple[str, str]:
        out = io.StringIO()
        err = io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            cli.main(list(argv))
        return out.getvalue(), err.getvalue()

    def test_tree_hides_config_files(self) -> None:
        out, _err = self._run("--source", str(FIXTURE), "tree")

        self.assertTrue(out.startswith("▾ nested-config-test/\n"))
        self.assertIn("Button.jsx", out)
        self.assertNotIn("lenses.json", out)
        self.assertNotIn(".gitignore", out)

    def test_files_lists_visible_paths(self) -> None:
        out, _err = self._run("--source", str(FIXTURE), "files")
        self.assertEqual(out.splitlines()[0], "/backend/api/server.js")
        self.assertEqual(len(out.splitlines()), 4)

    def test_config_prints_effective_json(self) -> None:
        out, _err = self._run("--source", str(FIXTURE), "config", "/frontend/components/Button.jsx")
        payload = json.loads(out)
        self.assertEqual(payload["lenses"]["embed"], {"template": "base", "features": {"copy": True, "interactive": True}})

    def test_config_layers_report_each_directory(self) -> None:
        out, _err = self._run("--source", str(FIXTURE), "config", "/docs/README.md", "--layers")
        layers = json.loads(out)
        self.assertEqual([(layer["path"], layer["status"]) for layer in layers], [("/", "ok"), ("/docs", "invalid")])

    def test_config_for_missing_path_exits(self) -> None:
        with self.assertRaises(SystemExit):
            self._run("--source", str(FIXTURE), "config", "/nope.js")

    def test_show_prints_content_and_reports_fallback(self) -> None:
        out, err = self._run("--source", str(FIXTURE), "show", "/docs/README.md", "--no-color")
        self.assertEqual(out, "# Docs\n")
        self.assertEqual(err, "")

        out, err = self._run("--source", str(FIXTURE), "show", "/docs/MISSING.md")
        self.assertIn("was not found", err)
        self.assertTrue(out)

    def test_use_saves_default_source(self) -> None:
        self._run("use", str(FIXTURE))
        out, _err = self._run("files")
        self.assertIn("/docs/README.md", out.splitlines())

    def test_missing_or_broken_source_exits(self) -> None:
        with self.assertRaises(SystemExit):
            self._run("tree")
        with self.assertRaises(SystemExit) as ctx:
            self._run("--source", str(Path(self._tmp.name) / "missing.json"), "tree")
        self.assertIn("Failed to load", str(ctx.exception.code))


if __name__ == "__main__":
    unittest.main()
