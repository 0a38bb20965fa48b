"""
Tests for the command-line interface.
"""

import argparse
import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest import mock

from PIL import Image

from tft_simulator import cli
from tft_simulator.parsing.extractor import SceneExtractor
from tft_simulator.samples import BASIC_SAMPLE


class TestCLI(unittest.TestCase):
    """Tests for tft-sim commands."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        patcher = mock.patch("tft_simulator.cli.setup_logger")
        self.setup_logger = patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        self.temp_dir.cleanup()

    def path(self, name):
        return os.path.join(self.temp_dir.name, name)

    def run_cli(self, *argv):
        output = io.StringIO()
        with redirect_stdout(output):
            code = cli.main(list(argv))
        return code, output.getvalue()

    def test_parse_sample(self):
        code, output = self.run_cli("parse", "sample:basic")
        self.assertEqual(code, 0)

        data = json.loads(output)
        self.assertEqual([s["id"] for s in data["screens"]], ["drawHome", "drawConfig"])
        self.assertEqual(data["displayConfig"]["rotation"], 1)

    def test_parse_file_to_output(self):
        with open(self.path("sketch.ino"), "w") as f:
            f.write(BASIC_SAMPLE)

        code, output = self.run_cli(
            "parse", self.path("sketch.ino"), "--width", "320", "--height", "240",
            "--output", self.path("parsed.json")
        )
        self.assertEqual(code, 0)
        self.assertEqual(output, "")

        with open(self.path("parsed.json")) as f:
            data = json.load(f)
        self.assertEqual(data["screens"][0]["elements"][0]["width"], 320)

    def test_render_png_with_touch(self):
        code, _ = self.run_cli(
            "render", "sample:interactive", "-o", self.path("frame.png"), "--touch", "100,120"
        )
        self.assertEqual(code, 0)
        with Image.open(self.path("frame.png")) as image:
            self.assertEqual(image.size, (380, 420))
            # Settings screen background
            self.assertEqual(image.convert("RGB").getpixel((370, 200)), (123, 125, 123))

    def test_render_svg_with_screen(self):
        code, _ = self.run_cli(
            "render", "sample:basic", "-o", self.path("frame.svg"),
            "--screen", "drawConfig", "--debug", "--format", "svg"
        )
        self.assertEqual(code, 0)
        with open(self.path("frame.svg")) as f:
            self.assertIn("Configuration", f.read())

    def test_verbose_sets_debug(self):
        self.run_cli("--verbose", "parse", "sample:basic")
        self.setup_logger.assert_called_with("DEBUG", log_file=None, log_json=False)

    def test_log_options_reach_logger_setup(self):
        log_path = self.path("logs/tft.log")
        self.run_cli("--log-file", log_path, "--log-json", "parse", "sample:basic")
        self.setup_logger.assert_called_with(mock.ANY, log_file=log_path, log_json=True)

    def test_log_options_from_config(self):
        log_path = self.path("config.log")
        with open(self.path("config.json"), "w") as f:
            json.dump({"log_file": log_path, "log_json": True, "log_level": "WARNING"}, f)

        self.run_cli("--config", self.path("config.json"), "parse", "sample:basic")
        self.setup_logger.assert_called_with("WARNING", log_file=log_path, log_json=True)

    def test_config_file(self):
        with open(self.path("config.json"), "w") as f:
            json.dump({"display_width": 200}, f)

        code, output = self.run_cli("--config", self.path("config.json"), "parse", "sample:basic")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(output)["displayConfig"]["width"], 200)

    def test_missing_config(self):
        code, _ = self.run_cli("--config", self.path("missing.json"), "parse", "sample:basic")
        self.assertEqual(code, 1)

    def test_missing_sketch(self):
        code, _ = self.run_cli("parse", self.path("missing.ino"))
        self.assertEqual(code, 1)

    def test_unknown_sample(self):
        code, _ = self.run_cli("parse", "sample:nope")
        self.assertEqual(code, 1)

    def test_unknown_screen(self):
        code, _ = self.run_cli("render", "sample:basic", "-o", self.path("x.png"), "--screen", "drawNope")
        self.assertEqual(code, 1)
        self.assertFalse(os.path.exists(self.path("x.png")))

    def test_parse_errors_exit_code(self):
        with mock.patch.object(SceneExtractor, "extract_functions", side_effect=RuntimeError("boom")):
            code, output = self.run_cli("parse", "sample:basic")
            self.assertEqual(code, 2)
            self.assertIn("Parse error: boom", output)

            code, _ = self.run_cli("render", "sample:basic", "-o", self.path("y.png"))
            self.assertEqual(code, 2)
        self.assertFalse(os.path.exists(self.path("y.png")))

    def test_parse_point(self):
        self.assertEqual(cli.parse_point("10,20"), (10.0, 20.0))
        with self.assertRaises(argparse.ArgumentTypeError):
            cli.parse_point("10")


if __name__ == "__main__":
    unittest.main()
