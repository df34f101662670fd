"""Configuration management using Pydantic Settings."""

import os
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Geocoding (Mapbox Search Box)
    mapbox_access_token: Optional[str] = None
    mapbox_search_url: str = "https://api.mapbox.com/search/searchbox/v1/forward"

    # Supabase (refresh timestamp store)
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    # App Configuration
    environment: str = "development"
    log_level: str = "INFO"

    # Map compilation
    cluster_offset_radius: float = 0.0001  # degrees, ~11 m at the equator
    coordinate_precision: int = 6

    # Camera / popup synchronization
    focus_zoom: float = 14.0
    cluster_focus_zoom: float = 18.0
    focus_distance_tolerance_m: float = 100.0
    focus_zoom_tolerance: float = 0.5
    max_fit_zoom: float = 13.0

    # Refresh gating
    refresh_cooldown_seconds: int = 120
    geocode_batch_limit: int = 100

    # Performance Settings
    request_timeout: int = 30

    class Config:
        """Pydantic configuration."""
        env_file = os.path.join(os.path.dirname(__file__), "..", ".env")
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
