"""
Display Model Module
====================
Root structures produced by one parse pass over a sketch: screens, states,
variables, functions, includes and diagnostics.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from tft_simulator.models.elements import UIElement
from tft_simulator.models.touch import TouchZone

DEFAULT_BACKGROUND = "#000000"


class Severity(Enum):
    """Severity of a parse diagnostic."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class StateType(Enum):
    """Origin of a state declaration."""
    ENUM = "enum"
    VARIABLE = "variable"
    CONSTANT = "constant"


@dataclass(frozen=True)
class StateTransition:
    """Screen-to-screen transition. Carried on screens, not yet populated."""
    source: str
    target: str
    trigger: str
    condition: Optional[str] = None
    action: Optional[str] = None


@dataclass(frozen=True)
class Screen:
    """One simulated display frame, drawn by a single sketch function."""
    id: str
    name: str
    elements: Tuple[UIElement, ...] = ()
    touch_zones: Tuple[TouchZone, ...] = ()
    background_color: str = DEFAULT_BACKGROUND
    transitions: Tuple[StateTransition, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "backgroundColor": self.background_color,
            "elements": [element.to_dict() for element in self.elements],
            "touchZones": [zone.to_dict() for zone in self.touch_zones],
            "transitions": [vars(transition) for transition in self.transitions],
        }


@dataclass
class StateDefinition:
    """Named state value found in the sketch."""
    name: str
    value: str
    type: StateType
    # Screen associations are not inferred yet
    screens: List[str] = field(default_factory=list)


@dataclass
class Variable:
    """Variable declaration; initializers are not captured."""
    name: str
    type: str
    line: int
    value: Any = None
    scope: str = "global"


@dataclass
class FunctionSignature:
    """Function definition header."""
    name: str
    return_type: str
    parameters: List[str]
    line: int


@dataclass
class ParseError:
    """
    Diagnostic emitted while parsing.

    ``line`` is 1-based; 0 refers to the whole document.
    """
    message: str
    line: int = 0
    column: int = 0
    severity: Severity = Severity.ERROR


@dataclass
class DisplayConfig:
    """Display geometry the sketch was parsed against."""
    rotation: int
    width: int
    height: int


@dataclass
class ParsedDisplay:
    """Result of one parse pass. Rebuilt from scratch on every parse."""
    screens: List[Screen] = field(default_factory=list)
    states: List[StateDefinition] = field(default_factory=list)
    variables: List[Variable] = field(default_factory=list)
    functions: List[FunctionSignature] = field(default_factory=list)
    includes: List[str] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)
    display_config: Optional[DisplayConfig] = None

    @property
    def has_errors(self) -> bool:
        """True when any diagnostic has error severity."""
        return any(error.severity is Severity.ERROR for error in self.errors)

    @property
    def is_renderable(self) -> bool:
        return not self.has_errors and bool(self.screens)

    @property
    def warnings(self) -> List[ParseError]:
        return [error for error in self.errors if error.severity is Severity.WARNING]

    def get_screen(self, screen_id: str) -> Optional[Screen]:
        """Look up a screen by exact id."""
        for screen in self.screens:
            if screen.id == screen_id:
                return screen
        return None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the parse result to JSON-compatible data.

        Returns:
            Dictionary with camelCase keys for screens and elements
        """
        return {
            "screens": [screen.to_dict() for screen in self.screens],
            "states": [
                {"name": s.name, "value": s.value, "type": s.type.value, "screens": list(s.screens)}
                for s in self.states
            ],
            "variables": [
                {"name": v.name, "type": v.type, "value": v.value, "scope": v.scope, "line": v.line}
                for v in self.variables
            ],
            "functions": [
                {
                    "name": f.name,
                    "returnType": f.return_type,
                    "parameters": list(f.parameters),
                    "line": f.line,
                }
                for f in self.functions
            ],
            "includes": list(self.includes),
            "errors": [
                {"message": e.message, "line": e.line, "column": e.column, "severity": e.severity.value}
                for e in self.errors
            ],
            "displayConfig": vars(self.display_config).copy() if self.display_config else None,
        }
