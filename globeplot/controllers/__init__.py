"""
Controllers for the interactive map.

- ViewSyncController: camera/popup state machine around the focused event
- GeocodeRefreshGate: per-user cooldown around the bulk coordinate refresh
- EventNavigator: previous/next stepping through mappable events
"""

from .view_sync import ViewSyncController
from .refresh_gate import GeocodeRefreshGate, RefreshCountdown, cooldown_status, format_remaining
from .navigation import EventNavigator
from .state import FocusState, RenderingSurface, FlightHandle, IDLE, FLYING, POPUP_OPEN

__all__ = [
    "ViewSyncController",
    "GeocodeRefreshGate",
    "RefreshCountdown",
    "cooldown_status",
    "format_remaining",
    "EventNavigator",
    "FocusState",
    "RenderingSurface",
    "FlightHandle",
    "IDLE",
    "FLYING",
    "POPUP_OPEN",
]
