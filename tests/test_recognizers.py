"""
Tests for the single-line recognizers.
"""

import unittest

from tft_simulator.parsing import recognizers as rec
from tft_simulator.parsing.recognizers import NO_MATCH, Match


class TestHelpers(unittest.TestCase):
    """Tests for argument splitting and literal parsing."""

    def test_call_arguments_respects_nesting(self):
        args = rec.call_arguments('tft.drawString("a, b", foo(1, 2), 3);', "drawString")
        self.assertEqual(args, ['"a, b"', "foo(1, 2)", "3"])

    def test_call_arguments_absent_and_empty(self):
        self.assertIsNone(rec.call_arguments("tft.init();", "fillRect"))
        self.assertEqual(rec.call_arguments("tft.init();", "init"), [])

    def test_call_arguments_unclosed(self):
        self.assertIsNone(rec.call_arguments("tft.fillRect(1, 2,", "fillRect"))

    def test_split_statements(self):
        statements = rec.split_statements('tft.fillScreen(TFT_BLACK); tft.drawString("a;b", 1, 2); ')
        self.assertEqual(statements, ["tft.fillScreen(TFT_BLACK)", 'tft.drawString("a;b", 1, 2)'])
        self.assertEqual(rec.split_statements("if (x) {"), ["if (x) {"])

    def test_parse_int(self):
        self.assertEqual(rec.parse_int(" 42 "), 42)
        self.assertEqual(rec.parse_int("-3"), -3)
        self.assertIsNone(rec.parse_int("x + 1"))
        self.assertIsNone(rec.parse_int("1.5"))
        self.assertIsNone(rec.parse_int(None))

    def test_no_match_is_falsy_singleton(self):
        self.assertFalse(NO_MATCH)
        self.assertIs(rec.NoMatch(), NO_MATCH)
        self.assertTrue(Match("x", {"a": 1}))


class TestDeclarationRecognizers(unittest.TestCase):
    """Tests for include, enum, variable and function recognizers."""

    def test_include(self):
        self.assertEqual(rec.recognize_include("#include <TFT_eSPI.h>")["target"], "TFT_eSPI.h")
        self.assertEqual(rec.recognize_include('#include "config.h"')["target"], "config.h")
        self.assertIs(rec.recognize_include("// nothing"), NO_MATCH)

    def test_enum(self):
        match = rec.recognize_enum("enum State { HOME, CONFIG, DONE };")
        self.assertEqual(match["name"], "State")
        self.assertEqual(match["members"], [("HOME", "HOME"), ("CONFIG", "CONFIG"), ("DONE", "DONE")])

    def test_enum_class_with_initializers(self):
        match = rec.recognize_enum("enum class Mode : uint8_t { IDLE = 0, RUN = 2 };")
        self.assertEqual(match["name"], "Mode")
        self.assertEqual(match["members"], [("IDLE", "0"), ("RUN", "2")])

    def test_state_assignment(self):
        match = rec.recognize_state_assignment("State curState = HOME;")
        self.assertEqual((match["type"], match["name"], match["value"]), ("State", "curState", "HOME"))
        self.assertIs(rec.recognize_state_assignment("int count = 0;"), NO_MATCH)

    def test_variable(self):
        match = rec.recognize_variable("  static unsigned long lastTouch;")
        self.assertEqual(match["type"], "unsigned long")
        self.assertEqual(match["name"], "lastTouch")
        self.assertIs(rec.recognize_variable("TFT_eSPI tft = TFT_eSPI();"), NO_MATCH)

    def test_function(self):
        match = rec.recognize_function("void drawHome() {")
        self.assertEqual(match["name"], "drawHome")
        self.assertEqual(match["return_type"], "void")
        self.assertEqual(match["parameters"], [])

        match = rec.recognize_function("int clamp(int v, int lo, int hi)")
        self.assertEqual(match["parameters"], ["int v", "int lo", "int hi"])

    def test_rotation(self):
        self.assertEqual(rec.recognize_rotation("  tft.setRotation(3);")["rotation"], 3)


class TestDrawingRecognizers(unittest.TestCase):
    """Tests for drawing call recognizers."""

    def test_fill_screen(self):
        self.assertEqual(rec.recognize_fill_screen("tft.fillScreen(TFT_BLACK);")["color"], "TFT_BLACK")

    def test_fill_rect(self):
        match = rec.recognize_fill_rect("tft.fillRect(10, 10, 50, 20, TFT_RED);")
        self.assertEqual(match.fields, {"x": 10, "y": 10, "width": 50, "height": 20, "color": "TFT_RED"})

    def test_fill_rect_with_expressions_is_unrecognized(self):
        self.assertIs(rec.recognize_fill_rect("tft.fillRect(x, y, w, h, TFT_RED);"), NO_MATCH)
        self.assertIs(rec.recognize_fill_rect("tft.fillRect(1.5, 2, 3, 4, TFT_RED);"), NO_MATCH)

    def test_fill_rect_does_not_match_round_rect(self):
        self.assertIs(rec.recognize_fill_rect("tft.fillRoundRect(1, 2, 3, 4, 5, TFT_RED);"), NO_MATCH)

    def test_round_rect_with_stroke(self):
        match = rec.recognize_fill_round_rect(
            "tft.fillSmoothRoundRect(65, 200, 250, 55, 15, TFT_GREEN, TFT_BLACK);"
        )
        self.assertEqual(match["radius"], 15)
        self.assertEqual(match["color"], "TFT_GREEN")
        self.assertEqual(match["stroke_color"], "TFT_BLACK")

    def test_round_rect_without_stroke(self):
        match = rec.recognize_fill_round_rect("tft.fillRoundRect(50, 100, 280, 50, 10, TFT_BLUE);")
        self.assertIsNone(match["stroke_color"])

    def test_draw_string(self):
        match = rec.recognize_draw_string('tft.drawString("START", 190, 225);')
        self.assertEqual((match["text"], match["x"], match["y"]), ("START", 190, 225))
        self.assertIs(rec.recognize_draw_string("tft.drawString(label, 190, 225);"), NO_MATCH)

    def test_circle(self):
        match = rec.recognize_circle("tft.fillCircle(60, 120, 20, TFT_YELLOW);")
        self.assertEqual((match["cx"], match["cy"], match["radius"]), (60, 120, 20))
        self.assertTrue(match["filled"])
        self.assertFalse(rec.recognize_circle("tft.drawCircle(60, 120, 20, TFT_YELLOW);")["filled"])

    def test_line(self):
        match = rec.recognize_draw_line("tft.drawLine(20, 60, 360, 60, TFT_WHITE);")
        self.assertEqual((match["x1"], match["y1"], match["x2"], match["y2"]), (20, 60, 360, 60))

    def test_bitmap(self):
        match = rec.recognize_bitmap("tft.drawBitmap(5, 6, logo, 32, 16, TFT_WHITE);")
        self.assertEqual((match["x"], match["y"], match["width"], match["height"]), (5, 6, 32, 16))
        self.assertEqual(match["color"], "TFT_WHITE")

        match = rec.recognize_bitmap("tft.pushImage(0, 0, 64, 64, image);")
        self.assertEqual(match["width"], 64)
        self.assertIsNone(match["color"])


class TestTouchRecognizers(unittest.TestCase):
    """Tests for touch predicates and assignments."""

    def test_predicate(self):
        match = rec.recognize_touch_predicate("if (x >= 65 && x <= 315 && y >= 200 && y <= 255) {")
        self.assertEqual(match.fields, {"x1": 65, "x2": 315, "y1": 200, "y2": 255})

    def test_predicate_with_and_keyword(self):
        match = rec.recognize_touch_predicate("if (x >= 1 and x <= 2 and y >= 3 and y <= 4)")
        self.assertEqual(match["y2"], 4)

    def test_predicate_wrong_order(self):
        self.assertIs(rec.recognize_touch_predicate("if (y >= 1 && y <= 2 && x >= 3 && x <= 4)"), NO_MATCH)

    def test_assignment_skips_comparisons(self):
        self.assertIs(rec.recognize_assignment("if (curState == HOME)"), NO_MATCH)
        match = rec.recognize_assignment("curState = CONFIG;")
        self.assertEqual((match["target"], match["value"]), ("curState", "CONFIG"))


if __name__ == "__main__":
    unittest.main()
