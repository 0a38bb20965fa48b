"""
Tests for configuration loading and logging helpers.
"""

import json
import logging
import os
import tempfile
import unittest

from tft_simulator.config import (
    DEFAULT_CONFIG, ConfigError, get_default_config, load_config, merge_configs, save_config
)
from tft_simulator.utils.logger import JsonFormatter, LogCapture, log_exception, setup_logger


class TestConfig(unittest.TestCase):
    """Tests for the configuration layer."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.temp_dir.cleanup()

    def path(self, name):
        return os.path.join(self.temp_dir.name, name)

    def test_defaults(self):
        config = load_config()
        self.assertEqual(config["display_width"], 380)
        self.assertEqual(config["display_height"], 420)
        self.assertEqual(config["draw_function_prefix"], "draw")
        self.assertEqual(config["touch_action_window"], 4)

    def test_default_copy_is_private(self):
        config = get_default_config()
        config["display_width"] = 1
        self.assertEqual(DEFAULT_CONFIG["display_width"], 380)

    def test_load_merges_over_defaults(self):
        with open(self.path("config.json"), "w") as f:
            json.dump({"display_width": 320, "debug_mode": True}, f)

        config = load_config(self.path("config.json"))
        self.assertEqual(config["display_width"], 320)
        self.assertTrue(config["debug_mode"])
        self.assertEqual(config["display_height"], 420)

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            load_config(self.path("missing.json"))

    def test_invalid_json(self):
        with open(self.path("bad.json"), "w") as f:
            f.write("{not json")
        with self.assertRaises(ConfigError):
            load_config(self.path("bad.json"))

    def test_non_object(self):
        with open(self.path("list.json"), "w") as f:
            json.dump([1, 2], f)
        with self.assertRaises(ConfigError):
            load_config(self.path("list.json"))

    def test_save_round_trip(self):
        config = get_default_config()
        config["rotation"] = 3
        save_config(config, self.path(os.path.join("nested", "out.json")))

        loaded = load_config(self.path(os.path.join("nested", "out.json")))
        self.assertEqual(loaded["rotation"], 3)

    def test_merge_nested(self):
        target = {"a": {"b": 1, "c": 2}, "d": 3}
        merge_configs(target, {"a": {"b": 5}, "e": 6})
        self.assertEqual(target, {"a": {"b": 5, "c": 2}, "d": 3, "e": 6})


class TestLogging(unittest.TestCase):
    """Tests for logging helpers."""

    def test_log_exception_context(self):
        logger = logging.getLogger("tft_simulator.tests.logging")
        with LogCapture("tft_simulator.tests.logging") as capture:
            log_exception(logger, ValueError("bad value"), context={"element": "rect_1"})

        self.assertTrue(capture.contains("ValueError: bad value"))
        self.assertTrue(capture.contains("element=rect_1"))

    def test_log_capture_restores_level(self):
        logger = logging.getLogger("tft_simulator.tests.level")
        logger.setLevel(logging.WARNING)
        with LogCapture("tft_simulator.tests.level") as capture:
            logger.debug("hidden detail")
        self.assertTrue(capture.contains("hidden detail"))
        self.assertEqual(logger.level, logging.WARNING)

    def test_json_formatter(self):
        record = logging.LogRecord("tft", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        data = json.loads(JsonFormatter().format(record))
        self.assertEqual(data["message"], "hello world")
        self.assertEqual(data["level"], "INFO")

    def test_json_formatter_includes_extra(self):
        logger = logging.getLogger("tft_simulator.tests.extra")
        record = logger.makeRecord("tft", logging.WARNING, __file__, 3, "touch", (), None, extra={"zone": "zone_1"})
        data = json.loads(JsonFormatter().format(record))
        self.assertEqual(data["zone"], "zone_1")
        self.assertNotIn("msg", data)

    def test_setup_logger_writes_json_file(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        temp_dir = tempfile.TemporaryDirectory()
        log_path = os.path.join(temp_dir.name, "logs", "tft.log")
        try:
            setup_logger("INFO", log_file=log_path, log_json=True)
            self.assertEqual(root.level, logging.INFO)
            self.assertEqual(len(root.handlers), 2)

            logging.getLogger("tft_simulator.tests.file").info("frame rendered")
            logging.getLogger("tft_simulator.tests.file").debug("filtered out")
            for handler in root.handlers:
                handler.flush()

            with open(log_path, encoding="utf-8") as f:
                records = [json.loads(line) for line in f if line.strip()]
            self.assertEqual([r["message"] for r in records], ["frame rendered"])
            self.assertEqual(records[0]["name"], "tft_simulator.tests.file")
        finally:
            for handler in root.handlers[:]:
                root.removeHandler(handler)
                handler.close()
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)
            temp_dir.cleanup()


if __name__ == "__main__":
    unittest.main()
