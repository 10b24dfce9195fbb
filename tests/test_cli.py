import json
import unittest
from pathlib import Path

from click.testing import CliRunner

from brandscale.cli import main


class TestCli(unittest.TestCase):
    def setUp(self):
        self.runner = CliRunner()

    def test_analyze(self):
        result = self.runner.invoke(main, ["analyze", "#FF6A00", "#1ABCFE"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Brand analysis", result.output)
        self.assertIn("Profile (light)", result.output)

    def test_analyze_invalid_color(self):
        result = self.runner.invoke(main, ["analyze", "FF6A00"])
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("Did you mean #FF6A00?", result.output)

    def test_generate_writes_json(self):
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(
                main, ["generate", "#FF6A00", "--mode", "both", "--no-render", "--out-json", "p.json"]
            )
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("Wrote p.json", result.output)
            payload = json.loads(Path("p.json").read_text())
            self.assertEqual(set(payload), {"light", "dark"})
            self.assertEqual(payload["light"]["scales"]["orange"]["steps"]["9"]["hex"], "#ff6a00")

    def test_generate_renders(self):
        result = self.runner.invoke(main, ["generate", "--colors", "#FF6A00", "--mode", "light"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Palette (light)", result.output)

    def test_generate_from_config(self):
        with self.runner.isolated_filesystem():
            Path("colors.config.json").write_text(
                json.dumps({"brandColors": ["#FF6A00"], "outputDir": "dist", "modes": ["dark"]})
            )
            result = self.runner.invoke(main, ["generate", "--no-render"])
            self.assertEqual(result.exit_code, 0, result.output)
            payload = json.loads(Path("dist/palette.json").read_text())
            self.assertEqual(list(payload), ["dark"])

    def test_generate_without_colors(self):
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(main, ["generate", "--no-render"])
            self.assertNotEqual(result.exit_code, 0)
            self.assertIn("No brand colors", result.output)

    def test_too_many_colors(self):
        colors = ["#111111", "#222222", "#333333", "#444444", "#555555", "#666666", "#777777", "#888888"]
        result = self.runner.invoke(main, ["generate", "--no-render", *colors])
        self.assertNotEqual(result.exit_code, 0)
        self.assertIn("at most 7", result.output)

    def test_validate(self):
        result = self.runner.invoke(main, ["validate", "#FF6A00", "--hue", "orange", "--no-render"])
        self.assertIn("checks passed", result.output)
        self.assertIn(result.exit_code, (0, 1))
