"""
Pydantic schemas for the geocoding service boundary
"""
from typing import Optional
from pydantic import BaseModel, Field


class GeocodeRequest(BaseModel):
    """Address-like fields for a single forward geocode"""
    query: Optional[str] = Field(default=None, description="Free-form search text")
    name: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = Field(default=None, description="Country name or ISO alpha-2 code")

    def search_text(self) -> str:
        return self.query or ", ".join(p for p in (self.name, self.city, self.country) if p)


class BatchGeocodeItem(GeocodeRequest):
    """One entry of a batch geocode request"""
    id: Optional[str] = None


class GeocodeResult(BaseModel):
    """Coordinate and place data returned by the provider"""
    lat: float
    lng: float
    place_name: Optional[str] = Field(default=None, alias="placeName")
    place_type: Optional[str] = Field(default=None, alias="placeType")
    city: Optional[str] = None
    country: Optional[str] = None
    formatted_address: Optional[str] = Field(default=None, alias="formattedAddress")

    class Config:
        populate_by_name = True


class BatchGeocodeResult(BaseModel):
    """Per-id outcome of a batch geocode; failures carry ``error``"""
    id: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None
    place_name: Optional[str] = Field(default=None, alias="placeName")
    city: Optional[str] = None
    country: Optional[str] = None
    formatted_address: Optional[str] = Field(default=None, alias="formattedAddress")
    error: Optional[str] = None

    class Config:
        populate_by_name = True
