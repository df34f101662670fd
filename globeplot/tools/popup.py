"""
Popup content for a focused event.

Only the text is built here; markup and styling belong to the frontend.
"""

from typing import Any, Dict

from globeplot.schemas.events import Event
from globeplot.tools.route_builder import parse_start


def _format_start(value) -> str:
    parsed = parse_start(value)
    if parsed is None:
        return ""
    hour = parsed.strftime("%I").lstrip("0") or "12"
    return f"{parsed.strftime('%b')} {parsed.day}, {parsed.year}, {hour}:{parsed.strftime('%M %p')}"


def _format_time(value) -> str:
    parsed = parse_start(value)
    if parsed is None:
        return ""
    hour = parsed.strftime("%I").lstrip("0") or "12"
    return f"{hour}:{parsed.strftime('%M %p')}"


def location_display(event: Event) -> str:
    """
    Human readable location line for an event.

    Travel shows "departure → arrival", accommodation its place name,
    everything else its location name, city or country.
    """
    if event.category == "travel":
        def _end(endpoint) -> str:
            loc = endpoint.location if endpoint else None
            return (loc.name or loc.city or "N/A") if loc else "N/A"
        return f"{_end(event.departure)} → {_end(event.arrival)}"

    if event.category == "accommodation":
        loc = event.check_in.location if event.check_in else None
        return event.place_name or (loc.name if loc else "") or (loc.city if loc else "") or "N/A"

    loc = event.location
    if loc is None:
        return ""
    if loc.name:
        return loc.name
    if loc.city:
        return f"{loc.city}, {loc.country}" if loc.country else loc.city
    return loc.country or ""


def build_popup_content(event: Event) -> Dict[str, Any]:
    """
    Build the popup payload for an event.

    Returns:
        Dict with eventId, title, location, category, type, start and end labels
    """
    start_label = _format_start(event.start)
    end_label = ""
    if event.start and event.end and event.end != event.start:
        end_label = _format_time(event.end)

    return {
        "eventId": event.id,
        "title": event.title,
        "location": location_display(event),
        "category": event.category,
        "type": event.type,
        "start": start_label,
        "end": end_label,
    }
