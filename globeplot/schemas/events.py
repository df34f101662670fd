"""
Pydantic schemas for itinerary events.

Events are a tagged union over ``category``. Each variant keeps its own
location sub-structure: travel has departure/arrival endpoints,
accommodation has check-in/check-out endpoints, experiences and meals
use the shared ``location``. Wire keys follow the frontend's camelCase
(``checkIn``, ``placeName``...), Python attributes are snake_case.
"""
from typing import Annotated, Any, List, Literal, Optional, Union
from pydantic import BaseModel, Field, TypeAdapter


# ============================================================================
# LOCATION MODELS
# ============================================================================

class GeoPoint(BaseModel):
    """Resolved geocoordinate. Either component may be missing in stored data."""
    lat: Optional[float] = None
    lng: Optional[float] = None


class Location(BaseModel):
    """A named place, optionally geocoded."""
    name: str = ""
    city: Optional[str] = None
    country: Optional[str] = None
    geolocation: Optional[GeoPoint] = None


class Endpoint(BaseModel):
    """One end of a travel leg or a stay (departure/arrival, check-in/check-out)."""
    date: Optional[str] = None
    location: Optional[Location] = None


# ============================================================================
# EVENT VARIANTS
# ============================================================================

class BaseEvent(BaseModel):
    """Fields shared by every event category"""
    id: str = Field(..., min_length=1, description="Stable unique event id")
    title: str = ""
    start: Optional[str] = Field(default=None, description="ISO-8601 start, may be missing")
    end: Optional[str] = None
    location: Optional[Location] = None
    notes: Optional[str] = None

    class Config:
        populate_by_name = True


class TravelEvent(BaseEvent):
    """Flight, train, car, boat or bus leg"""
    category: Literal["travel"] = "travel"
    type: Literal["flight", "train", "car", "boat", "bus", "other"] = "other"
    departure: Optional[Endpoint] = None
    arrival: Optional[Endpoint] = None
    airline: Optional[str] = None
    flight_number: Optional[str] = Field(default=None, alias="flightNumber")
    train_number: Optional[str] = Field(default=None, alias="trainNumber")
    seat: Optional[str] = None
    booking_reference: Optional[str] = Field(default=None, alias="bookingReference")
    car: Optional[str] = None
    travel_class: Optional[str] = Field(default=None, alias="class")


class AccommodationEvent(BaseEvent):
    """Hotel, hostel or rental stay"""
    category: Literal["accommodation"] = "accommodation"
    type: Literal["hotel", "hostel", "airbnb", "other"] = "other"
    place_name: Optional[str] = Field(default=None, alias="placeName")
    check_in: Optional[Endpoint] = Field(default=None, alias="checkIn")
    check_out: Optional[Endpoint] = Field(default=None, alias="checkOut")
    room_number: Optional[str] = Field(default=None, alias="roomNumber")
    booking_reference: Optional[str] = Field(default=None, alias="bookingReference")


class ExperienceEvent(BaseEvent):
    """Activity, tour, museum visit or concert"""
    category: Literal["experience"] = "experience"
    type: Literal["activity", "tour", "museum", "concert", "other"] = "other"
    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    booking_reference: Optional[str] = Field(default=None, alias="bookingReference")


class MealEvent(BaseEvent):
    """Restaurant reservation or other meal"""
    category: Literal["meal"] = "meal"
    type: Literal["restaurant", "other"] = "other"
    date: Optional[str] = None
    reservation_reference: Optional[str] = Field(default=None, alias="reservationReference")


Event = Annotated[
    Union[TravelEvent, AccommodationEvent, ExperienceEvent, MealEvent],
    Field(discriminator="category"),
]

EVENT_CATEGORIES = ("travel", "accommodation", "experience", "meal")

_event_list_adapter = TypeAdapter(List[Event])


def parse_events(raw: List[Any]) -> List[Event]:
    """Validate a list of raw event dicts into typed events.

    Raises:
        pydantic.ValidationError: If any item is not a valid event
    """
    return _event_list_adapter.validate_python(raw)


def dump_events(events: List[Event]) -> List[dict]:
    """Serialize events back to their camelCase wire form."""
    return [event.model_dump(by_alias=True, exclude_none=True) for event in events]
