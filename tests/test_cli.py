"""
Tests for the image-presets command line interface.
"""

import io
import json
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

# Add project root directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import image_presets_cli  # noqa: E402
from preset_core.exceptions import PresetConfigError  # noqa: E402


PRESETS_YAML = """\
presets:
  hero:
    description: Large banner
    parameters:
      width: 1200
      quality: 80
  broken:
    parameters:
      width: abc
"""


def run_cli(*argv):
    stdout, stderr = io.StringIO(), io.StringIO()
    with redirect_stdout(stdout), redirect_stderr(stderr):
        code = image_presets_cli.main(["--locale", "en", *argv])
    return code, stdout.getvalue(), stderr.getvalue()


class TestArgumentParsing(unittest.TestCase):
    def test_parse_key_values(self):
        self.assertEqual(
            image_presets_cli.parse_key_values(["a=1", "b=x=y", "c="]),
            {"a": "1", "b": "x=y", "c": ""},
        )

    def test_parse_key_values_rejects_bare_words(self):
        for item in ("width", "=5"):
            with self.subTest(item=item):
                with self.assertRaises(PresetConfigError):
                    image_presets_cli.parse_key_values([item])

    def test_command_is_required(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                image_presets_cli.build_arg_parser().parse_args([])


class TestDurationCommands(unittest.TestCase):
    def test_parse(self):
        code, out, _ = run_cli("parse", "2 weeks")
        self.assertEqual(code, 0)
        self.assertIn("Seconds: 1209600", out)
        self.assertIn("Readable:", out)

    def test_parse_invalid(self):
        code, out, err = run_cli("parse", "gibberish")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("Error:", err)

    def test_parse_out_of_context(self):
        code, _, err = run_cli("parse", "2 hours", "--context", "timeout")
        self.assertEqual(code, 1)
        self.assertIn("Error:", err)

    def test_format(self):
        code, out, _ = run_cli("format", "5400")
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "90 minutes")

    def test_examples(self):
        code, out, _ = run_cli("examples", "cache")
        self.assertEqual(code, 0)
        lines = out.splitlines()
        self.assertEqual(lines[0], "Examples for the cache context:")
        self.assertGreater(len(lines), 1)


class TestPackagesCommand(unittest.TestCase):
    def test_lists_builtin_packages(self):
        code, out, _ = run_cli("packages")
        self.assertEqual(code, 0)
        self.assertIn("control", out)
        self.assertIn("transformational", out)

    def test_disabled_package_is_marked(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            settings = Path(tmp_dir, "settings.yaml")
            settings.write_text("packages:\n  text:\n    enabled: false\n", encoding="utf-8")
            code, out, _ = run_cli("packages", "--settings", str(settings))
        self.assertEqual(code, 0)
        text_rows = [line for line in out.splitlines() if " text " in line]
        self.assertEqual(len(text_rows), 1)
        self.assertIn("(disabled)", text_rows[0])


class TestResolveCommand(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.presets = Path(self._tmp.name, "presets.yaml")
        self.presets.write_text(PRESETS_YAML, encoding="utf-8")

    def tearDown(self):
        self._tmp.cleanup()

    def test_preset_applied(self):
        code, out, err = run_cli(
            "resolve", "--presets", str(self.presets), "preset=hero", "quality=90"
        )
        self.assertEqual(code, 0)
        resolved = json.loads(out)
        self.assertEqual(resolved["width"], 1200)
        self.assertEqual(resolved["quality"], "90")
        self.assertTrue(resolved["_preset_applied"])
        self.assertIn("Preset 'hero' applied.", err)

    def test_invalid_preset_falls_back(self):
        code, out, err = run_cli(
            "resolve", "--presets", str(self.presets), "preset=broken", "height=20"
        )
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), {"preset": "broken", "height": "20"})
        self.assertIn("was not applied", err)

    def test_debug_prints_summary(self):
        code, _, err = run_cli(
            "resolve", "--presets", str(self.presets), "--debug", "preset=hero"
        )
        self.assertEqual(code, 0)
        self.assertIn('"success": true', err)

    def test_bad_parameter_syntax(self):
        code, _, err = run_cli("resolve", "--presets", str(self.presets), "width")
        self.assertEqual(code, 1)
        self.assertIn("Error:", err)

    def test_missing_presets_file(self):
        code, _, err = run_cli("resolve", "--presets", str(Path(self._tmp.name, "nope.yaml")))
        self.assertEqual(code, 1)
        self.assertIn("Error:", err)


if __name__ == "__main__":
    unittest.main()
