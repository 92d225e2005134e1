"""
Collision detection and automatic re-routing
"""

from .detector import WireCollisionDetector
from .rerouter import FAILED_IMPROVEMENT, REROUTE_PRESETS, WireRerouter

__all__ = ['WireCollisionDetector', 'WireRerouter', 'REROUTE_PRESETS', 'FAILED_IMPROVEMENT']
