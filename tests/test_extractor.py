"""
Tests for the SceneExtractor.
"""

import unittest

from tft_simulator.config import get_default_config
from tft_simulator.interaction.resolver import hit_test
from tft_simulator.models.display import Severity, StateType
from tft_simulator.models.elements import (
    CircleElement, LineElement, RectangleElement, RoundedRectangleElement,
    ShapeKind, TextAlign, TextElement
)
from tft_simulator.models.touch import TouchZone
from tft_simulator.parsing.extractor import SceneExtractor, parse_source
from tft_simulator.samples import ADVANCED_SAMPLE, BASIC_SAMPLE, INTERACTIVE_SAMPLE

HOME_SKETCH = """#include <TFT_eSPI.h>
void drawHome() {
  tft.fillScreen(TFT_BLACK); tft.fillRect(10,10,50,20,TFT_RED); if (x>=10 && x<=60 && y>=10 && y<=30) { state = START; }
}
"""

HOME_SKETCH_MULTILINE = """#include <TFT_eSPI.h>
void drawHome() {
  tft.fillScreen(TFT_BLACK);
  tft.fillRect(10, 10, 50, 20, TFT_RED);
  if (x >= 10 && x <= 60 && y >= 10 && y <= 30) {
    state = START;
  }
}
"""


class TestEndToEnd(unittest.TestCase):
    """Tests for the drawHome scenario."""

    def check_home_screen(self, source):
        parsed = parse_source(source, 380, 420)

        self.assertFalse(parsed.has_errors)
        self.assertEqual(len(parsed.screens), 1)

        screen = parsed.screens[0]
        self.assertEqual(screen.id, "drawHome")
        self.assertEqual(screen.name, "drawHome")
        self.assertEqual(screen.background_color, "#000000")
        return screen

    def test_multiline_scenario(self):
        """Statements on separate lines."""
        screen = self.check_home_screen(HOME_SKETCH_MULTILINE)

        self.assertEqual(len(screen.elements), 2)
        background, rect = screen.elements

        self.assertTrue(background.id.startswith("bg_"))
        self.assertEqual((background.x, background.y), (0, 0))
        self.assertEqual((background.width, background.height), (380, 420))
        self.assertEqual(background.background_color, "#000000")
        self.assertEqual(background.z_index, 0)

        self.assertTrue(rect.id.startswith("rect_"))
        self.assertEqual((rect.x, rect.y, rect.width, rect.height), (10, 10, 50, 20))
        self.assertEqual(rect.background_color, "#ff0000")
        self.assertEqual(rect.z_index, 1)

        self.assertEqual(len(screen.touch_zones), 1)
        zone = screen.touch_zones[0]
        self.assertEqual((zone.x, zone.y, zone.width, zone.height), (10, 10, 50, 20))
        self.assertEqual(zone.action, "START")

        result = hit_test(30, 20, screen.touch_zones)
        self.assertTrue(result.hit)
        self.assertIs(result.zone, zone)

    def test_single_line_scenario(self):
        """Every statement on a shared line is extracted."""
        screen = self.check_home_screen(HOME_SKETCH)

        self.assertEqual([e.id for e in screen.elements], ["bg_0", "rect_1"])
        self.assertEqual(screen.elements[1].background_color, "#ff0000")

        self.assertEqual(len(screen.touch_zones), 1)
        self.assertEqual(screen.touch_zones[0].action, "START")
        self.assertTrue(hit_test(30, 20, screen.touch_zones).hit)


class TestScreens(unittest.TestCase):
    """Tests for screen extraction."""

    def test_fallback_main_screen(self):
        parsed = parse_source("#include <TFT_eSPI.h>\nvoid setup() {\n  tft.fillScreen(TFT_BLUE);\n}\n")

        self.assertEqual(len(parsed.screens), 1)
        screen = parsed.screens[0]
        self.assertEqual(screen.id, "main")
        self.assertEqual(screen.name, "Main Screen")
        self.assertEqual(screen.background_color, "#0000ff")

    def test_empty_source_still_has_main(self):
        parsed = parse_source("")
        self.assertEqual([s.id for s in parsed.screens], ["main"])
        self.assertEqual(parsed.screens[0].elements, ())

    def test_basic_sample(self):
        parsed = parse_source(BASIC_SAMPLE, 380, 420)

        self.assertEqual([s.id for s in parsed.screens], ["drawHome", "drawConfig"])
        self.assertEqual(parsed.includes, ["TFT_eSPI.h"])
        self.assertEqual(parsed.display_config.rotation, 1)
        self.assertEqual(parsed.errors, [])

        home = parsed.get_screen("drawHome")
        kinds = [e.kind for e in home.elements]
        self.assertEqual(kinds, [ShapeKind.RECTANGLE, ShapeKind.TEXT, ShapeKind.ROUNDED_RECTANGLE, ShapeKind.TEXT])

        button = home.elements[2]
        self.assertIsInstance(button, RoundedRectangleElement)
        self.assertEqual(button.radius, 15)
        self.assertEqual(button.background_color, "#00ff00")
        self.assertEqual(button.color, "#000000")

        config = parsed.get_screen("drawConfig")
        self.assertEqual(config.background_color, "#7b7d7b")

        # Touch checks live in handleTouch, not in a drawing function
        self.assertEqual(home.touch_zones, ())

    def test_element_ids_are_unique_across_screens(self):
        parsed = parse_source(ADVANCED_SAMPLE)
        ids = [e.id for s in parsed.screens for e in s.elements]
        self.assertEqual(len(ids), len(set(ids)))

    def test_missing_screens_get_no_body(self):
        """Functions called but never defined produce no screen."""
        parsed = parse_source(ADVANCED_SAMPLE)
        self.assertEqual([s.id for s in parsed.screens], ["drawMenu"])

    def test_text_elements(self):
        parsed = parse_source(ADVANCED_SAMPLE)
        texts = [e for e in parsed.screens[0].elements if isinstance(e, TextElement)]

        self.assertEqual([t.text for t in texts], ["MAIN MENU", "SETTINGS", "DISPLAY TEST", "INFO"])
        for text in texts:
            self.assertEqual(text.color, "#ffffff")
            self.assertEqual(text.font_size, 16)
            self.assertEqual(text.text_align, TextAlign.CENTER)
            self.assertEqual(text.z_index, 2)

    def test_interactive_sample_zones(self):
        parsed = parse_source(INTERACTIVE_SAMPLE)
        menu = parsed.get_screen("drawMenu")
        settings = parsed.get_screen("drawSettings")

        self.assertEqual([z.action for z in menu.touch_zones], ["SETTINGS", "DISPLAY_TEST"])
        self.assertEqual([z.action for z in settings.touch_zones], ["MENU"])

        circle = next(e for e in settings.elements if isinstance(e, CircleElement))
        self.assertEqual((circle.x, circle.y, circle.radius), (40, 100, 20))

        line = next(e for e in settings.elements if isinstance(e, LineElement))
        self.assertEqual((line.x, line.y, line.x2, line.y2), (20, 60, 360, 60))

    def test_outline_rect_has_no_fill(self):
        parsed = parse_source(INTERACTIVE_SAMPLE)
        screen = parsed.get_screen("drawDisplayTest")
        outline = [e for e in screen.elements if isinstance(e, RectangleElement) and e.background_color is None]
        self.assertEqual(len(outline), 1)
        self.assertEqual(outline[0].color, "#000000")

    def test_touch_action_defaults(self):
        source = "void drawPad() {\n  if (x >= 0 && x <= 10 && y >= 0 && y <= 10) {\n  }\n}\n"
        screen = parse_source(source).screens[0]
        self.assertEqual(screen.touch_zones[0].action, "touch")
        self.assertEqual(screen.touch_zones[0].id, "touch_1")

    def test_deterministic(self):
        first = parse_source(INTERACTIVE_SAMPLE, 320, 240)
        second = parse_source(INTERACTIVE_SAMPLE, 320, 240)
        self.assertEqual(first.to_dict(), second.to_dict())

    def test_dimensions_used_for_fill_screen(self):
        parsed = parse_source(BASIC_SAMPLE, 320, 240)
        background = parsed.screens[0].elements[0]
        self.assertEqual((background.width, background.height), (320, 240))

    def test_unclosed_body_warns(self):
        parsed = parse_source("#include <TFT_eSPI.h>\nvoid drawBroken() {\n  tft.fillScreen(TFT_RED);\n")
        self.assertEqual(len(parsed.screens), 1)
        self.assertEqual(parsed.screens[0].background_color, "#ff0000")
        self.assertEqual(len(parsed.warnings), 1)
        self.assertIn("never closed", parsed.warnings[0].message)
        self.assertTrue(parsed.is_renderable)


class TestDeclarations(unittest.TestCase):
    """Tests for states, variables and functions."""

    def setUp(self):
        self.parsed = SceneExtractor().extract(BASIC_SAMPLE)

    def test_states(self):
        enum_states = [s.name for s in self.parsed.states if s.type is StateType.ENUM]
        self.assertEqual(enum_states, ["HOME", "CONFIG", "FIRING", "DONE"])

        variables = [s for s in self.parsed.states if s.type is StateType.VARIABLE]
        self.assertEqual([(s.name, s.value) for s in variables], [("curState", "HOME")])

    def test_functions(self):
        names = [f.name for f in self.parsed.functions]
        self.assertEqual(names, ["setup", "loop", "drawHome", "drawConfig", "handleTouch"])
        self.assertTrue(all(f.return_type == "void" for f in self.parsed.functions))

    def test_variables(self):
        variable = next(v for v in self.parsed.variables if v.name == "x")
        self.assertEqual(variable.type, "uint16_t")
        self.assertEqual(variable.scope, "global")


class TestValidation(unittest.TestCase):
    """Tests for advisory warnings and failure handling."""

    def test_missing_include_warning(self):
        parsed = parse_source("void drawA() {\n  tft.fillScreen(TFT_RED);\n}\n")
        self.assertFalse(parsed.has_errors)
        self.assertEqual(len(parsed.warnings), 1)
        self.assertIn("TFT_eSPI.h", parsed.warnings[0].message)
        self.assertEqual(parsed.warnings[0].severity, Severity.WARNING)

    def test_internal_failure_becomes_error(self):
        extractor = SceneExtractor()

        def fail(lines):
            raise RuntimeError("boom")

        extractor.extract_functions = fail
        parsed = extractor.extract(BASIC_SAMPLE)

        self.assertTrue(parsed.has_errors)
        self.assertFalse(parsed.is_renderable)
        self.assertEqual(parsed.errors[-1].message, "Parse error: boom")
        self.assertEqual((parsed.errors[-1].line, parsed.errors[-1].column), (0, 0))

    def test_custom_prefix(self):
        config = get_default_config()
        config["draw_function_prefix"] = "show"
        parsed = SceneExtractor(config=config).extract(
            "void showA() {\n  tft.fillScreen(TFT_RED);\n}\nvoid drawB() {\n}\n"
        )
        self.assertEqual([s.id for s in parsed.screens], ["showA"])

    def test_forward_declaration_shares_screen(self):
        parsed = parse_source(
            "#include <TFT_eSPI.h>\n"
            "void drawHome();\n"
            "\n"
            "void drawHome() {\n"
            "  tft.fillScreen(TFT_BLACK);\n"
            "  tft.fillRect(10, 10, 50, 20, TFT_RED);\n"
            "}\n"
        )
        self.assertEqual([s.id for s in parsed.screens], ["drawHome"])
        self.assertEqual([e.id for e in parsed.get_screen("drawHome").elements], ["bg_0", "rect_1"])

    def test_to_dict_uses_camel_case(self):
        data = parse_source(HOME_SKETCH_MULTILINE).to_dict()
        screen = data["screens"][0]
        self.assertIn("backgroundColor", screen)
        self.assertIn("touchZones", screen)
        self.assertEqual(screen["elements"][0]["type"], "rectangle")

        rect = screen["elements"][1]
        self.assertEqual(rect["zIndex"], 1)
        self.assertEqual(rect["backgroundColor"], "#ff0000")
        self.assertNotIn("z_index", rect)

    def test_text_and_zone_dicts_use_camel_case(self):
        text = TextElement(id="text_0", x=1, y=2, text="Hi", text_align=TextAlign.LEFT)
        data = text.to_dict()
        self.assertEqual(data["fontSize"], 16)
        self.assertEqual(data["textAlign"], "left")
        self.assertEqual(data["type"], "text")
        self.assertNotIn("font", data)

        zone = TouchZone(
            id="zone_0", x=0, y=0, width=10, height=10, action="MENU",
            target_state="MENU", debug_color="#00ff00"
        )
        zone_data = zone.to_dict()
        self.assertEqual(zone_data["targetState"], "MENU")
        self.assertEqual(zone_data["debugColor"], "#00ff00")
        self.assertNotIn("target_state", zone_data)


if __name__ == "__main__":
    unittest.main()
