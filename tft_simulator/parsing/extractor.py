"""
Scene Extractor Module
======================
This module contains the SceneExtractor class, which reads TFT_eSPI sketch
source and reconstructs the screens, drawable elements and touch zones it
describes.

Extraction is line oriented: every phase walks the same list of lines and
applies the recognizers from ``tft_simulator.parsing.recognizers``. Function
bodies are delimited by counting braces, not by parsing C++.
"""

import itertools
import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from tft_simulator.config import get_default_config
from tft_simulator.models.color import resolve_color_expression
from tft_simulator.models.display import (
    DEFAULT_BACKGROUND, DisplayConfig, FunctionSignature, ParsedDisplay,
    ParseError, Screen, Severity, StateDefinition, StateType, Variable
)
from tft_simulator.models.elements import (
    Z_BACKGROUND, BitmapElement, CircleElement, LineElement, RectangleElement,
    RoundedRectangleElement, TextAlign, TextElement, UIElement
)
from tft_simulator.models.touch import TouchZone
from tft_simulator.parsing import recognizers as rec

logger = logging.getLogger(__name__)

FALLBACK_SCREEN_ID = "main"
FALLBACK_SCREEN_NAME = "Main Screen"
DEFAULT_TOUCH_ACTION = "touch"
TOUCH_CALL = "getTouch"


class SceneExtractor:
    """
    Extracts a ``ParsedDisplay`` from sketch source text.

    An extractor is configured once with the display geometry; each call to
    ``extract`` is independent and returns a freshly built result.
    """

    def __init__(
        self,
        width: Optional[int] = None,
        height: Optional[int] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize the extractor.

        Args:
            width: Display width used for full-screen fills
            height: Display height used for full-screen fills
            config: Configuration dictionary; defaults are used when omitted
        """
        self.config = config if config is not None else get_default_config()
        self.width = width if width is not None else self.config["display_width"]
        self.height = height if height is not None else self.config["display_height"]
        self.draw_prefix = self.config["draw_function_prefix"]
        self.api_prefix = self.config["api_prefix"]
        self.required_include = self.config["required_include"]
        self.text_color = self.config["default_text_color"]
        self.font_size = self.config["default_font_size"]
        self.action_window = self.config["touch_action_window"]

    def extract(self, source: str) -> ParsedDisplay:
        """
        Parse sketch source into screens, states and declarations.

        Never raises: an unexpected failure is reported as a single
        error-severity ``ParseError`` on the returned result.

        Args:
            source: Sketch source text

        Returns:
            ParsedDisplay for this source
        """
        result = ParsedDisplay()

        try:
            lines = source.split("\n")

            result.includes = self.extract_includes(lines)
            result.states = self.extract_states(lines)
            result.variables = self.extract_variables(lines)
            result.functions = self.extract_functions(lines)
            result.screens = self.extract_screens(lines, result.functions, result.errors)
            result.display_config = self.extract_display_config(lines)

            self.validate(result)

            logger.debug(
                f"Extracted {len(result.screens)} screens, {len(result.functions)} functions, "
                f"{len(result.states)} states from {len(lines)} lines"
            )

        except Exception as e:
            logger.exception("Sketch extraction failed")
            result.errors.append(ParseError(
                message=f"Parse error: {e}",
                line=0,
                column=0,
                severity=Severity.ERROR
            ))

        return result

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def extract_includes(self, lines: Sequence[str]) -> List[str]:
        """Collect include targets in encounter order."""
        includes = []
        for line in lines:
            match = rec.recognize_include(line)
            if match:
                includes.append(match["target"])
        return includes

    def extract_states(self, lines: Sequence[str]) -> List[StateDefinition]:
        """Collect enum members and ``State`` variable assignments."""
        states = []

        for line in lines:
            enum_match = rec.recognize_enum(line)
            if enum_match:
                for name, value in enum_match["members"]:
                    states.append(StateDefinition(name=name, value=value, type=StateType.ENUM))

            var_match = rec.recognize_state_assignment(line)
            if var_match:
                states.append(StateDefinition(
                    name=var_match["name"],
                    value=var_match["value"],
                    type=StateType.VARIABLE
                ))

        return states

    def extract_variables(self, lines: Sequence[str]) -> List[Variable]:
        """Collect primitive-typed declarations with their 1-based line."""
        variables = []
        for index, line in enumerate(lines):
            match = rec.recognize_variable(line)
            if match:
                variables.append(Variable(name=match["name"], type=match["type"], line=index + 1))
        return variables

    def extract_functions(self, lines: Sequence[str]) -> List[FunctionSignature]:
        """Collect function headers."""
        functions = []
        for index, line in enumerate(lines):
            match = rec.recognize_function(line)
            if match:
                functions.append(FunctionSignature(
                    name=match["name"],
                    return_type=match["return_type"],
                    parameters=match["parameters"],
                    line=index + 1
                ))
        return functions

    def extract_display_config(self, lines: Sequence[str]) -> DisplayConfig:
        """Display geometry, with rotation taken from the first ``setRotation`` call."""
        rotation = self.config["rotation"]
        for line in lines:
            match = rec.recognize_rotation(line)
            if match:
                rotation = match["rotation"]
                break
        return DisplayConfig(rotation=rotation, width=self.width, height=self.height)

    # ------------------------------------------------------------------
    # Screens
    # ------------------------------------------------------------------

    def extract_screens(
        self,
        lines: Sequence[str],
        functions: Sequence[FunctionSignature],
        errors: Optional[List[ParseError]] = None
    ) -> List[Screen]:
        """
        Build one screen per distinct drawing function name.

        A forward declaration and its definition share one screen, whose
        body is found by searching onward from the first occurrence.

        When the sketch has no drawing function, a single ``main`` screen is
        built from the whole document.

        Args:
            lines: Source lines
            functions: Functions found by ``extract_functions``
            errors: Optional list that receives unclosed-body warnings

        Returns:
            Screens in function order
        """
        element_ids = itertools.count()
        screens = []

        unique: Dict[str, FunctionSignature] = {}
        for func in functions:
            if func.name.startswith(self.draw_prefix):
                unique.setdefault(func.name, func)
        draw_functions = list(unique.values())

        for func in draw_functions:
            body, closed = self.find_function_body(lines, func.name, func.line - 1)
            if body and not closed and errors is not None:
                errors.append(ParseError(
                    message=f"Body of {func.name} is never closed; read to end of file",
                    line=func.line,
                    column=0,
                    severity=Severity.WARNING
                ))
            elements, touch_zones = self.extract_body(lines, body, element_ids)
            screens.append(self._build_screen(func.name, func.name, elements, touch_zones))

        if not screens:
            elements, touch_zones = self.extract_body(lines, range(len(lines)), element_ids)
            screens.append(self._build_screen(
                FALLBACK_SCREEN_ID, FALLBACK_SCREEN_NAME, elements, touch_zones
            ))

        return screens

    def find_function_body(
        self,
        lines: Sequence[str],
        function_name: str,
        search_from: int = 0
    ) -> Tuple[range, bool]:
        """
        Locate the lines inside a function body by brace counting.

        The body starts after the first line containing both ``name(`` and
        an opening brace, with depth 1, and ends on the line where the depth
        returns to 0. That closing line is not part of the body.

        Args:
            lines: Source lines
            function_name: Function to locate
            search_from: Index of the first line that may open the body

        Returns:
            (range of body line indexes, whether the body was closed)
        """
        call_name = f"{function_name}("
        start = None
        depth = 0

        for index in range(max(0, search_from), len(lines)):
            line = lines[index]
            if start is None:
                stripped = line.strip()
                if call_name in stripped and "{" in stripped:
                    start = index + 1
                    depth = 1
                continue

            depth += line.count("{") - line.count("}")
            if depth <= 0:
                return range(start, index), True

        if start is None:
            return range(0), True
        return range(start, len(lines)), False

    def extract_body(
        self,
        lines: Sequence[str],
        body: range,
        element_ids: Iterator[int]
    ) -> Tuple[List[UIElement], List[TouchZone]]:
        """
        Extract elements and touch zones from a range of lines.

        Args:
            lines: Source lines
            body: Indexes of the lines to scan
            element_ids: Shared counter for element ids

        Returns:
            (elements, touch zones) in source order
        """
        elements: List[UIElement] = []
        touch_zones: List[TouchZone] = []

        for index in body:
            line = lines[index].strip()

            for statement in rec.split_statements(line):
                if self.api_prefix in statement:
                    element = self.parse_command(statement, next(element_ids), index + 1)
                    if element is not None:
                        elements.append(element)

            if TOUCH_CALL in line or (">=" in line and "<=" in line):
                zone = self.parse_touch_zone(line, lines, index)
                if zone is not None:
                    touch_zones.append(zone)

        return elements, touch_zones

    def _build_screen(
        self,
        screen_id: str,
        name: str,
        elements: List[UIElement],
        touch_zones: List[TouchZone]
    ) -> Screen:
        background = next(
            (e.background_color for e in elements if e.is_background and e.background_color),
            DEFAULT_BACKGROUND
        )
        return Screen(
            id=screen_id,
            name=name,
            elements=tuple(elements),
            touch_zones=tuple(touch_zones),
            background_color=background,
        )

    # ------------------------------------------------------------------
    # Elements and touch zones
    # ------------------------------------------------------------------

    def parse_command(self, line: str, sequential_id: int, line_number: int) -> Optional[UIElement]:
        """
        Turn one drawing call into an element.

        Calls are tried in a fixed priority order; the first recognizer that
        fires wins.

        Args:
            line: Source line containing a TFT call
            sequential_id: Number appended to the element id
            line_number: 1-based source line, for diagnostics

        Returns:
            The element, or None when the call is not a supported primitive
        """
        match = rec.recognize_fill_screen(line)
        if match:
            color = resolve_color_expression(match["color"])
            return RectangleElement(
                id=f"bg_{sequential_id}",
                x=0,
                y=0,
                width=self.width,
                height=self.height,
                color=color,
                background_color=color,
                z_index=Z_BACKGROUND
            )

        match = rec.recognize_fill_rect(line)
        if match:
            color = resolve_color_expression(match["color"])
            return RectangleElement(
                id=f"rect_{sequential_id}",
                x=match["x"],
                y=match["y"],
                width=match["width"],
                height=match["height"],
                color=color,
                background_color=color
            )

        match = rec.recognize_fill_round_rect(line)
        if match:
            fill = resolve_color_expression(match["color"])
            stroke = match["stroke_color"]
            return RoundedRectangleElement(
                id=f"roundrect_{sequential_id}",
                x=match["x"],
                y=match["y"],
                width=match["width"],
                height=match["height"],
                radius=match["radius"],
                color=resolve_color_expression(stroke) if stroke else fill,
                background_color=fill
            )

        match = rec.recognize_draw_string(line)
        if match:
            return TextElement(
                id=f"text_{sequential_id}",
                x=match["x"],
                y=match["y"],
                text=match["text"],
                color=self.text_color,
                font_size=self.font_size,
                text_align=TextAlign.CENTER
            )

        match = rec.recognize_draw_rect(line)
        if match:
            return RectangleElement(
                id=f"rect_{sequential_id}",
                x=match["x"],
                y=match["y"],
                width=match["width"],
                height=match["height"],
                color=resolve_color_expression(match["color"])
            )

        match = rec.recognize_draw_round_rect(line)
        if match:
            return RoundedRectangleElement(
                id=f"roundrect_{sequential_id}",
                x=match["x"],
                y=match["y"],
                width=match["width"],
                height=match["height"],
                radius=match["radius"],
                color=resolve_color_expression(match["color"])
            )

        match = rec.recognize_circle(line)
        if match:
            color = resolve_color_expression(match["color"])
            radius = match["radius"]
            return CircleElement(
                id=f"circle_{sequential_id}",
                x=match["cx"] - radius,
                y=match["cy"] - radius,
                width=radius * 2,
                height=radius * 2,
                radius=radius,
                color=color,
                background_color=color if match["filled"] else None
            )

        match = rec.recognize_draw_line(line)
        if match:
            return LineElement(
                id=f"line_{sequential_id}",
                x=match["x1"],
                y=match["y1"],
                x2=match["x2"],
                y2=match["y2"],
                color=resolve_color_expression(match["color"]),
                stroke_width=1
            )

        match = rec.recognize_bitmap(line)
        if match:
            color = match["color"]
            return BitmapElement(
                id=f"bitmap_{sequential_id}",
                x=match["x"],
                y=match["y"],
                width=match["width"],
                height=match["height"],
                color=resolve_color_expression(color) if color else None
            )

        logger.debug(f"Line {line_number}: no drawable primitive in {line!r}")
        return None

    def parse_touch_zone(self, line: str, lines: Sequence[str], index: int) -> Optional[TouchZone]:
        """
        Build a touch zone from a coordinate predicate.

        The zone action is the right-hand side of the first
        ``identifier = identifier`` assignment after the predicate, looking
        first at the rest of the predicate line and then at up to
        ``touch_action_window`` following lines.

        Args:
            line: Line that may hold the predicate
            lines: All source lines
            index: 0-based index of ``line``

        Returns:
            The zone, or None when the line holds no predicate
        """
        predicate = rec.recognize_touch_predicate(line)
        if not predicate:
            return None

        action = self._find_action(line[predicate.end:], lines, index)

        return TouchZone(
            id=f"touch_{index}",
            x=predicate["x1"],
            y=predicate["y1"],
            width=predicate["x2"] - predicate["x1"],
            height=predicate["y2"] - predicate["y1"],
            action=action
        )

    def _find_action(self, remainder: str, lines: Sequence[str], index: int) -> str:
        match = rec.recognize_assignment(remainder)
        if match:
            return match["value"]

        for next_index in range(index + 1, min(index + 1 + self.action_window, len(lines))):
            match = rec.recognize_assignment(lines[next_index].strip())
            if match:
                return match["value"]

        return DEFAULT_TOUCH_ACTION

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, display: ParsedDisplay) -> None:
        """Append advisory warnings to ``display.errors``."""
        if not display.screens:
            display.errors.append(ParseError(
                message="No screens found. Make sure your code includes drawing functions.",
                severity=Severity.WARNING
            ))

        if self.required_include not in display.includes:
            display.errors.append(ParseError(
                message=f"{self.required_include} not found in includes. Make sure to include the library.",
                severity=Severity.WARNING
            ))


def parse_source(
    source: str,
    width: Optional[int] = None,
    height: Optional[int] = None,
    config: Optional[Dict[str, Any]] = None
) -> ParsedDisplay:
    """
    Parse sketch source with a one-off extractor.

    Args:
        source: Sketch source text
        width: Display width (configured default when omitted)
        height: Display height (configured default when omitted)
        config: Optional configuration dictionary

    Returns:
        ParsedDisplay for this source
    """
    return SceneExtractor(width=width, height=height, config=config).extract(source)
