"""
Interaction Resolver Module
===========================
Hit testing for touch zones and the screen switching a hit triggers.
"""

import logging
import uuid
from typing import Dict, List, Optional, Sequence, Tuple

from tft_simulator.models.display import Screen
from tft_simulator.models.touch import TouchResult, TouchZone
from tft_simulator.state import DisplayState

logger = logging.getLogger(__name__)

DEFAULT_ZONE_DEBUG_COLOR = "#ff0000"
DEFAULT_DRAW_PREFIX = "draw"

# Actions with a fixed destination screen
KEYWORD_SCREENS: Dict[str, str] = {
    "home": "home",
    "config": "config",
    "configuration": "config",
    "back": "home",
    "menu": "menu",
    "settings": "settings",
}


def is_point_in_zone(x: float, y: float, zone: TouchZone) -> bool:
    """Whether (x, y) lies inside ``zone``, edges included."""
    return zone.contains(x, y)


def find_zone_at(x: float, y: float, zones: Sequence[TouchZone]) -> Optional[TouchZone]:
    """First zone in list order containing the point."""
    for zone in zones:
        if is_point_in_zone(x, y, zone):
            return zone
    return None


def hit_test(x: float, y: float, zones: Sequence[TouchZone]) -> TouchResult:
    """
    Resolve a pointer position against a list of zones.

    Args:
        x: Pointer x coordinate
        y: Pointer y coordinate
        zones: Candidate zones, earlier zones win on overlap

    Returns:
        TouchResult carrying the hit zone, if any
    """
    zone = find_zone_at(x, y, zones)
    return TouchResult(hit=zone is not None, coordinates=(x, y), zone=zone)


def zones_in_area(x: float, y: float, width: float, height: float, zones: Sequence[TouchZone]) -> List[TouchZone]:
    """Zones intersecting the given rectangle; touching edges count."""
    return [
        zone for zone in zones
        if not (zone.x > x + width or zone.x2 < x or zone.y > y + height or zone.y2 < y)
    ]


def zones_overlap(first: TouchZone, second: TouchZone) -> bool:
    return not (
        first.x > second.x2 or first.x2 < second.x
        or first.y > second.y2 or first.y2 < second.y
    )


def zone_center(zone: TouchZone) -> Tuple[float, float]:
    return zone.x + zone.width / 2, zone.y + zone.height / 2


def create_touch_zone(x: int, y: int, width: int, height: int, action: str) -> TouchZone:
    """Build a visible zone with a unique id and the default debug colour."""
    return TouchZone(
        id=f"touch_{uuid.uuid4().hex}",
        x=x,
        y=y,
        width=width,
        height=height,
        action=action,
        visible=True,
        debug_color=DEFAULT_ZONE_DEBUG_COLOR,
    )


def target_for_action(zone: TouchZone) -> str:
    """
    Screen name a zone asks for.

    An explicit target state wins, then the keyword table, then the action
    itself.
    """
    if zone.target_state:
        return zone.target_state
    return KEYWORD_SCREENS.get(zone.action.lower(), zone.action)


def draw_function_name(target: str, prefix: str = DEFAULT_DRAW_PREFIX) -> str:
    """``DISPLAY_TEST`` -> ``drawDisplayTest``."""
    words = [word for word in target.split("_") if word]
    return prefix + "".join(word[:1].upper() + word[1:].lower() for word in words)


def find_screen_by_name(target: str, screens: Sequence[Screen]) -> Optional[Screen]:
    """Case-insensitive match against screen id or name."""
    wanted = target.lower()
    for screen in screens:
        if screen.id.lower() == wanted or screen.name.lower() == wanted:
            return screen
    return None


def find_screen_by_draw_function(
    target: str,
    screens: Sequence[Screen],
    prefix: str = DEFAULT_DRAW_PREFIX
) -> Optional[Screen]:
    """Match the drawing function a state name conventionally maps to."""
    wanted = draw_function_name(target, prefix).lower()
    for screen in screens:
        if screen.id.lower() == wanted or screen.name.lower() == wanted:
            return screen
    return None


def find_screen(target: str, screens: Sequence[Screen], prefix: str = DEFAULT_DRAW_PREFIX) -> Optional[Screen]:
    return find_screen_by_name(target, screens) or find_screen_by_draw_function(target, screens, prefix)


class InteractionResolver:
    """
    Applies touches to a display state.

    A hit on a zone resolves the zone's action to a screen and swaps that
    screen into the state in one step. When no screen matches, only the
    current screen name changes.
    """

    def __init__(self, state: DisplayState, screens: Sequence[Screen], draw_prefix: str = DEFAULT_DRAW_PREFIX):
        """
        Initialize the resolver.

        Args:
            state: Display state to update
            screens: Screens available for switching
            draw_prefix: Prefix of the functions that draw a screen
        """
        self.state = state
        self.screens = list(screens)
        self.draw_prefix = draw_prefix

    def hit_test(self, x: float, y: float, zones: Optional[Sequence[TouchZone]] = None) -> TouchResult:
        """
        Hit test a pointer event and execute the zone action on a hit.

        Args:
            x: Pointer x coordinate
            y: Pointer y coordinate
            zones: Zones to test; the active slice's zones when omitted

        Returns:
            TouchResult for the event
        """
        if zones is None:
            zones = self.state.slice.touch_zones

        result = hit_test(x, y, zones)
        if result.hit:
            self.execute_action(result.zone)
        else:
            logger.debug(f"No touch zone at ({x}, {y})")
        return result

    def execute_action(self, zone: TouchZone) -> Optional[Screen]:
        """
        Switch to the screen a zone's action names.

        Returns:
            The screen switched to, or None when only the name changed
        """
        target = target_for_action(zone)
        logger.info(f"Touch action: {zone.action} -> {target}")

        screen = find_screen(target, self.screens, self.draw_prefix)
        if screen is None:
            logger.warning(f"No screen matches '{target}'")
            self.state.replace_slice(current_screen=target)
            return None

        background = next(
            (e.background_color for e in screen.elements if e.is_background and e.background_color),
            self.state.slice.background_color
        )
        self.state.replace_slice(
            elements=screen.elements,
            touch_zones=screen.touch_zones,
            background_color=background,
            current_screen=screen.id,
        )
        return screen
