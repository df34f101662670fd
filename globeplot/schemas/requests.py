"""
Pydantic schemas for API request and response bodies
"""
from typing import Any, Dict, List
from pydantic import BaseModel, Field

from .events import Event
from .map import CompiledMap


class CompileMapRequest(BaseModel):
    """Request body for compiling map features"""
    events: List[Event] = Field(..., description="Itinerary events in display order")


class RefreshRequest(BaseModel):
    """Request body for a forced coordinate refresh"""
    events: List[Event] = Field(..., description="Events whose locations should be re-geocoded")


class RefreshResponse(BaseModel):
    """Refreshed events plus the recompiled map"""
    events: List[Dict[str, Any]]
    map: CompiledMap
