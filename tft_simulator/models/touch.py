"""
Touch Model Module
==================
Touch-sensitive regions and the result of resolving a pointer against them.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Tuple

from tft_simulator.models.elements import camel_case


@dataclass(frozen=True)
class TouchZone:
    """Rectangular region that triggers ``action`` when touched."""
    id: str
    x: int
    y: int
    width: int
    height: int
    action: str = "touch"
    target_state: Optional[str] = None
    visible: bool = True
    debug_color: Optional[str] = None

    @property
    def x2(self) -> int:
        return self.x + self.width

    @property
    def y2(self) -> int:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        """Closed-interval containment test."""
        return self.x <= x <= self.x2 and self.y <= y <= self.y2

    def to_dict(self) -> Dict[str, Any]:
        return {camel_case(key): value for key, value in asdict(self).items() if value is not None}


@dataclass(frozen=True)
class TouchResult:
    """Outcome of a hit test."""
    hit: bool
    coordinates: Tuple[float, float]
    zone: Optional[TouchZone] = field(default=None)
