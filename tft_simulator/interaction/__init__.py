"""
TFT Simulator - Interaction Package
===================================
This package contains touch hit testing and screen switching.
"""

from tft_simulator.interaction.resolver import (
    InteractionResolver, create_touch_zone, find_screen, find_zone_at,
    hit_test, is_point_in_zone, zone_center, zones_in_area, zones_overlap
)

__all__ = [
    'InteractionResolver', 'create_touch_zone', 'find_screen', 'find_zone_at',
    'hit_test', 'is_point_in_zone', 'zone_center', 'zones_in_area', 'zones_overlap'
]
