"""
Line Recognizers Module
=======================
Single-line pattern recognizers used by the scene extractor.

Each recognizer inspects one line of sketch source and returns either a
``Match`` carrying the captured fields by name, or ``NO_MATCH``. Keeping
every pattern behind its own function lets each be tested without running
a full extraction pass.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

PRIMITIVE_TYPES = (
    "unsigned long", "unsigned int", "uint8_t", "uint16_t", "uint32_t",
    "int8_t", "int16_t", "int32_t", "int", "long", "bool", "boolean",
    "float", "double", "byte", "char*", "char", "String",
)
RETURN_TYPES = ("void",) + PRIMITIVE_TYPES

_QUALIFIERS = r"(?:(?:const|static|volatile)\s+)*"


def _type_alternation(types: Sequence[str]) -> str:
    return "|".join(re.escape(t).replace(r"\ ", r"\s+") for t in types)


_INCLUDE = re.compile(r'#include\s*[<"](.*?)[>"]')
_ENUM = re.compile(r"enum\s+(?:class\s+)?(\w+)\s*(?::\s*\w+\s*)?\{([^}]+)\}")
_STATE_ASSIGNMENT = re.compile(r"(\w+)\s+(\w+)\s*=\s*(\w+)")
_VARIABLE = re.compile(rf"^\s*{_QUALIFIERS}({_type_alternation(PRIMITIVE_TYPES)})\s+(\w+)")
_FUNCTION = re.compile(rf"^\s*{_QUALIFIERS}({_type_alternation(RETURN_TYPES)})\s+(\w+)\s*\(([^)]*)\)")
_ROTATION = re.compile(r"\bsetRotation\s*\(\s*(\d+)\s*\)")
_TOUCH_PREDICATE = re.compile(
    r"x\s*>=\s*(\d+)\s*(?:&&|\band\b)\s*"
    r"x\s*<=\s*(\d+)\s*(?:&&|\band\b)\s*"
    r"y\s*>=\s*(\d+)\s*(?:&&|\band\b)\s*"
    r"y\s*<=\s*(\d+)"
)
_ASSIGNMENT = re.compile(r"\b(\w+)\s*=(?!=)\s*(\w+)")
_INT_LITERAL = re.compile(r"^[-+]?\d+$")
_STRING_LITERAL = re.compile(r'^"((?:[^"\\]|\\.)*)"$')


class NoMatch:
    """Result of a recognizer that did not fire. Always falsy."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_MATCH"


NO_MATCH = NoMatch()


@dataclass(frozen=True)
class Match:
    """Result of a recognizer that fired."""
    pattern: str
    fields: Dict[str, object] = field(default_factory=dict)
    end: int = 0

    def __getitem__(self, key: str):
        return self.fields[key]

    def get(self, key: str, default=None):
        return self.fields.get(key, default)


RecognizerResult = Union[Match, NoMatch]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def parse_int(text: Optional[str]) -> Optional[int]:
    """Return the value of a plain integer literal, else None."""
    if text is None:
        return None
    text = text.strip()
    if not _INT_LITERAL.match(text):
        return None
    return int(text)


def parse_string_literal(text: str) -> Optional[str]:
    """Return the contents of a double-quoted literal, else None."""
    match = _STRING_LITERAL.match(text.strip())
    return match.group(1) if match else None


def call_arguments(line: str, function_name: str) -> Optional[List[str]]:
    """
    Split the arguments of the first ``function_name(...)`` call on a line.

    Commas nested inside parentheses or string literals do not split.

    Args:
        line: Source line
        function_name: Name of the called function

    Returns:
        Stripped argument strings, or None if the call is absent or unclosed
    """
    match = re.search(rf"\b{re.escape(function_name)}\s*\(", line)
    if not match:
        return None

    args: List[str] = []
    current: List[str] = []
    depth = 0
    in_string = False
    escaped = False

    for char in line[match.end():]:
        if in_string:
            current.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "(":
            depth += 1
        elif char == ")":
            if depth == 0:
                args.append("".join(current).strip())
                if args == [""]:
                    return []
                return args
            depth -= 1
        elif char == "," and depth == 0:
            args.append("".join(current).strip())
            current = []
            continue
        current.append(char)

    return None


def split_statements(line: str) -> List[str]:
    """
    Split a line on semicolons outside string literals.

    Empty statements are dropped; a line without semicolons is returned as
    a single statement.
    """
    statements: List[str] = []
    current: List[str] = []
    in_string = False
    escaped = False

    for char in line:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == ";":
            statements.append("".join(current).strip())
            current = []
            continue
        current.append(char)

    statements.append("".join(current).strip())
    return [statement for statement in statements if statement]


def _int_fields(args: Sequence[str], names: Sequence[str]) -> Optional[Dict[str, object]]:
    values = {}
    for name, arg in zip(names, args):
        value = parse_int(arg)
        if value is None:
            return None
        values[name] = value
    return values


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

def recognize_include(line: str) -> RecognizerResult:
    """``#include <Name.h>`` or ``#include "Name.h"``."""
    match = _INCLUDE.search(line)
    if not match:
        return NO_MATCH
    return Match("include", {"target": match.group(1)}, match.end())


def recognize_enum(line: str) -> RecognizerResult:
    """
    Single-line enum block.

    ``members`` holds ``(name, value)`` pairs; members without an explicit
    initializer use their own name as value.
    """
    match = _ENUM.search(line)
    if not match:
        return NO_MATCH

    members = []
    for raw in match.group(2).split(","):
        raw = raw.strip()
        if not raw:
            continue
        name, _, initializer = raw.partition("=")
        name = name.strip()
        members.append((name, initializer.strip() or name))

    return Match("enum", {"name": match.group(1), "members": members}, match.end())


def recognize_state_assignment(line: str) -> RecognizerResult:
    """``Type name = value`` on a line mentioning ``State``."""
    if "State" not in line:
        return NO_MATCH
    match = _STATE_ASSIGNMENT.search(line)
    if not match:
        return NO_MATCH
    return Match(
        "state_assignment",
        {"type": match.group(1), "name": match.group(2), "value": match.group(3)},
        match.end(),
    )


def recognize_variable(line: str) -> RecognizerResult:
    """Primitive-typed declaration at the start of a statement."""
    match = _VARIABLE.match(line)
    if not match:
        return NO_MATCH
    var_type = re.sub(r"\s+", " ", match.group(1))
    return Match("variable", {"type": var_type, "name": match.group(2)}, match.end())


def recognize_function(line: str) -> RecognizerResult:
    """Function header: return type, name and parameter list."""
    match = _FUNCTION.match(line)
    if not match:
        return NO_MATCH
    raw_params = match.group(3).strip()
    parameters = [p.strip() for p in raw_params.split(",")] if raw_params else []
    return Match(
        "function",
        {
            "return_type": re.sub(r"\s+", " ", match.group(1)),
            "name": match.group(2),
            "parameters": parameters,
        },
        match.end(),
    )


def recognize_rotation(line: str) -> RecognizerResult:
    """``setRotation(N)``."""
    match = _ROTATION.search(line)
    if not match:
        return NO_MATCH
    return Match("rotation", {"rotation": int(match.group(1))}, match.end())


# ---------------------------------------------------------------------------
# Drawing calls
# ---------------------------------------------------------------------------

def recognize_fill_screen(line: str) -> RecognizerResult:
    """``fillScreen(color)``."""
    args = call_arguments(line, "fillScreen")
    if not args or len(args) != 1:
        return NO_MATCH
    return Match("fill_screen", {"color": args[0]})


def _recognize_rect(line: str, function_name: str, pattern: str) -> RecognizerResult:
    args = call_arguments(line, function_name)
    if args is None or len(args) != 5:
        return NO_MATCH
    fields = _int_fields(args, ("x", "y", "width", "height"))
    if fields is None:
        return NO_MATCH
    fields["color"] = args[4]
    return Match(pattern, fields)


def recognize_fill_rect(line: str) -> RecognizerResult:
    """``fillRect(x, y, w, h, color)``."""
    return _recognize_rect(line, "fillRect", "fill_rect")


def recognize_draw_rect(line: str) -> RecognizerResult:
    """``drawRect(x, y, w, h, color)``."""
    return _recognize_rect(line, "drawRect", "draw_rect")


def _recognize_round_rect(line: str, function_names: Sequence[str], pattern: str) -> RecognizerResult:
    for function_name in function_names:
        args = call_arguments(line, function_name)
        if args is None:
            continue
        if len(args) not in (6, 7):
            return NO_MATCH
        fields = _int_fields(args, ("x", "y", "width", "height", "radius"))
        if fields is None:
            return NO_MATCH
        fields["color"] = args[5]
        fields["stroke_color"] = args[6] if len(args) == 7 else None
        return Match(pattern, fields)
    return NO_MATCH


def recognize_fill_round_rect(line: str) -> RecognizerResult:
    """``fillSmoothRoundRect``/``fillRoundRect(x, y, w, h, r, color[, stroke])``."""
    return _recognize_round_rect(line, ("fillSmoothRoundRect", "fillRoundRect"), "fill_round_rect")


def recognize_draw_round_rect(line: str) -> RecognizerResult:
    """``drawRoundRect``/``drawSmoothRoundRect(x, y, w, h, r, color[, bg])``."""
    return _recognize_round_rect(line, ("drawSmoothRoundRect", "drawRoundRect"), "draw_round_rect")


def recognize_draw_string(line: str) -> RecognizerResult:
    """``drawString("text", x, y[, font])`` with a literal string."""
    args = call_arguments(line, "drawString")
    if args is None or len(args) not in (3, 4):
        return NO_MATCH
    text = parse_string_literal(args[0])
    if not text:
        return NO_MATCH
    fields = _int_fields(args[1:3], ("x", "y"))
    if fields is None:
        return NO_MATCH
    fields["text"] = text
    return Match("draw_string", fields)


def recognize_circle(line: str) -> RecognizerResult:
    """
    ``fillCircle``/``fillSmoothCircle``/``drawCircle(cx, cy, r, color)``.

    ``filled`` tells solid circles from outlines.
    """
    for function_name, filled in (
        ("fillSmoothCircle", True),
        ("fillCircle", True),
        ("drawCircle", False),
    ):
        args = call_arguments(line, function_name)
        if args is None:
            continue
        if len(args) not in (4, 5):
            return NO_MATCH
        fields = _int_fields(args, ("cx", "cy", "radius"))
        if fields is None:
            return NO_MATCH
        fields["color"] = args[3]
        fields["filled"] = filled
        return Match("circle", fields)
    return NO_MATCH


def recognize_draw_line(line: str) -> RecognizerResult:
    """``drawLine(x1, y1, x2, y2, color)``."""
    args = call_arguments(line, "drawLine")
    if args is None or len(args) != 5:
        return NO_MATCH
    fields = _int_fields(args, ("x1", "y1", "x2", "y2"))
    if fields is None:
        return NO_MATCH
    fields["color"] = args[4]
    return Match("draw_line", fields)


def recognize_bitmap(line: str) -> RecognizerResult:
    """
    ``drawBitmap(x, y, data, w, h, color)`` or ``pushImage(x, y, w, h, data)``.

    Only the placement is captured; the pixel data argument is ignored.
    """
    args = call_arguments(line, "drawBitmap")
    if args is not None:
        if len(args) < 5:
            return NO_MATCH
        fields = _int_fields([args[0], args[1], args[3], args[4]], ("x", "y", "width", "height"))
        if fields is None:
            return NO_MATCH
        fields["color"] = args[5] if len(args) > 5 else None
        return Match("bitmap", fields)

    args = call_arguments(line, "pushImage")
    if args is not None:
        if len(args) < 5:
            return NO_MATCH
        fields = _int_fields(args[:4], ("x", "y", "width", "height"))
        if fields is None:
            return NO_MATCH
        fields["color"] = None
        return Match("bitmap", fields)

    return NO_MATCH


# ---------------------------------------------------------------------------
# Touch handling
# ---------------------------------------------------------------------------

def recognize_touch_predicate(line: str) -> RecognizerResult:
    """``x >= A && x <= B && y >= C && y <= D``."""
    match = _TOUCH_PREDICATE.search(line)
    if not match:
        return NO_MATCH
    x1, x2, y1, y2 = (int(group) for group in match.groups())
    return Match("touch_predicate", {"x1": x1, "x2": x2, "y1": y1, "y2": y2}, match.end())


def recognize_assignment(line: str) -> RecognizerResult:
    """``identifier = identifier``; comparisons are not assignments."""
    match = _ASSIGNMENT.search(line)
    if not match:
        return NO_MATCH
    return Match("assignment", {"target": match.group(1), "value": match.group(2)}, match.end())
