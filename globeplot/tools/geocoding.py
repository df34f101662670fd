"""Forward geocoding and coordinate enrichment for itinerary events."""

import logging
import math
from typing import List, Optional, Protocol

import requests

from globeplot.schemas.events import Event, GeoPoint, Location
from globeplot.schemas.geocode import BatchGeocodeItem, BatchGeocodeResult, GeocodeResult
from globeplot.utils.config import settings
from globeplot.utils.exceptions import (
    ConfigurationError,
    GeocodingError,
    RateLimitError,
    TransientError,
    ValidationError,
    ConnectionError as GPConnectionError,
    TimeoutError as GPTimeoutError,
)
from globeplot.utils.retry import retry_with_exponential_backoff

logger = logging.getLogger(__name__)

# Names the provider does not resolve on its own
COUNTRY_CODE_SPECIAL_CASES = {
    "vatican city": "VA",
    "vatican": "VA",
    "holy see": "VA",
    "vatican city state": "VA",
    "vatican city state (holy see)": "VA",
    "palestine": "PS",
    "east timor": "TL",
    "timor-leste": "TL",
}


class Geocoder(Protocol):
    """Address-in, coordinate-out service."""

    def geocode(
        self,
        name: Optional[str] = None,
        city: Optional[str] = None,
        country: Optional[str] = None,
    ) -> Optional[GeocodeResult]:
        ...


def country_code(country: Optional[str]) -> Optional[str]:
    """
    Normalize a country to an ISO 3166-1 alpha-2 code when possible.

    Args:
        country: Country name or code

    Returns:
        Two-letter code, or None if it cannot be determined
    """
    if not country:
        return None
    if len(country) == 2 and country == country.upper():
        return country
    return COUNTRY_CODE_SPECIAL_CASES.get(country.strip().lower())


class MapboxGeocoder:
    """Client for the Mapbox Search Box forward endpoint."""

    def __init__(
        self,
        access_token: Optional[str] = None,
        search_url: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            access_token: Mapbox token (defaults to settings)
            search_url: Forward endpoint URL (defaults to settings)
            timeout: Request timeout in seconds (defaults to settings)
            session: Optional requests session for connection reuse
        """
        self.access_token = access_token or settings.mapbox_access_token
        self.search_url = search_url or settings.mapbox_search_url
        self.timeout = timeout or settings.request_timeout
        self.session = session or requests.Session()

    @retry_with_exponential_backoff(max_attempts=3, base_delay=0.5)
    def _forward(self, query: str, country: Optional[str]) -> dict:
        params = {"q": query, "limit": 1, "access_token": self.access_token}
        if country:
            params["country"] = country

        try:
            response = self.session.get(self.search_url, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise GPTimeoutError(f"Geocoding timed out for '{query}'") from e
        except requests.exceptions.ConnectionError as e:
            raise GPConnectionError(f"Could not reach geocoding provider: {e}") from e

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                "Geocoding provider rate limit hit",
                retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        if response.status_code >= 500:
            raise TransientError(
                f"Geocoding provider error {response.status_code}",
                context={"query": query},
            )
        if response.status_code != 200:
            detail = ""
            try:
                detail = response.json().get("message", "")
            except ValueError:
                pass
            raise GeocodingError(
                f"Geocoding request rejected ({response.status_code}) {detail}".strip(),
                context={"query": query, "status": response.status_code},
            )
        return response.json()

    def geocode(
        self,
        name: Optional[str] = None,
        city: Optional[str] = None,
        country: Optional[str] = None,
        query: Optional[str] = None,
    ) -> Optional[GeocodeResult]:
        """
        Geocode a place from its address-like fields.

        Args:
            name: Place name
            city: City name
            country: Country name or ISO code
            query: Free-form text, overrides the joined fields

        Returns:
            GeocodeResult, or None when nothing matches

        Raises:
            ConfigurationError: If no access token is configured
            GeocodingError: If the provider fails after retries
        """
        search_text = query or ", ".join(p for p in (name, city, country) if p)
        if not search_text:
            return None
        if not self.access_token:
            raise ConfigurationError("Mapbox access token is not configured")

        try:
            data = self._forward(search_text, country_code(country))
        except TransientError as e:
            raise GeocodingError(f"Geocoding failed for '{search_text}': {e.message}", context=e.context) from e

        features = data.get("features") or []
        if not features:
            logger.info(f"No geocoding match for '{search_text}'")
            return None

        props = features[0].get("properties", {}) or {}
        coords = props.get("coordinates", {}) or {}
        context = props.get("context", {}) or {}
        lat, lng = coords.get("latitude"), coords.get("longitude")
        if lat is None or lng is None:
            logger.warning(f"Geocoding match for '{search_text}' has no coordinates")
            return None

        return GeocodeResult(
            lat=lat,
            lng=lng,
            place_name=props.get("name"),
            place_type=props.get("feature_type"),
            city=(context.get("place") or {}).get("name") or city,
            country=(context.get("country") or {}).get("name") or country,
            formatted_address=props.get("full_address"),
        )

    def geocode_batch(self, items: List[BatchGeocodeItem]) -> List[BatchGeocodeResult]:
        """
        Geocode many locations sequentially, one result per item.

        Individual failures are reported in ``error`` instead of raising.

        Raises:
            ValidationError: If the batch exceeds the configured limit
        """
        if len(items) > settings.geocode_batch_limit:
            raise ValidationError(
                f"Batch size exceeds maximum limit of {settings.geocode_batch_limit} locations."
            )

        results: List[BatchGeocodeResult] = []
        for item in items:
            if not item.id or not item.search_text():
                results.append(BatchGeocodeResult(id=item.id, error="Insufficient location data or missing ID"))
                continue
            try:
                result = self.geocode(name=item.name, city=item.city, country=item.country, query=item.query)
            except GeocodingError as e:
                logger.warning(f"Geocoding location {item.id} failed: {e.message}")
                results.append(BatchGeocodeResult(id=item.id, error="Geocoding failed"))
                continue
            if result is None:
                results.append(BatchGeocodeResult(id=item.id, error="No location found"))
                continue
            results.append(
                BatchGeocodeResult(
                    id=item.id,
                    lat=result.lat,
                    lng=result.lng,
                    place_name=result.place_name,
                    city=result.city,
                    country=result.country,
                    formatted_address=result.formatted_address,
                )
            )
        return results


def _has_valid_geolocation(location: Location) -> bool:
    geo = location.geolocation
    if geo is None:
        return False
    return all(
        isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)
        for v in (geo.lat, geo.lng)
    )


def _location_slots(event: Event) -> List[Location]:
    """Every location of an event that can carry a geolocation."""
    if event.category == "travel":
        endpoints = [event.departure, event.arrival]
    elif event.category == "accommodation":
        endpoints = [event.check_in, event.check_out]
    else:
        return [event.location] if event.location else []
    return [e.location for e in endpoints if e is not None and e.location is not None]


def enrich_events_with_geolocations(
    events: List[Event],
    geocoder: Geocoder,
    force: bool = False,
    raise_on_error: bool = False,
) -> List[Event]:
    """
    Return copies of ``events`` with geolocations filled in.

    Every location slot is considered (travel departure and arrival,
    accommodation check-in and check-out, otherwise the event location).
    A slot that fails to geocode keeps its previous value.

    Args:
        events: Source events; never mutated
        geocoder: Geocoding service
        force: Re-geocode slots that already have coordinates
        raise_on_error: Raise once the pass is done if the provider failed
            for any slot, instead of only logging it

    Returns:
        New list of events in the same order

    Raises:
        ConfigurationError: If the geocoder is not usable at all
        GeocodingError: If ``raise_on_error`` is set and any slot hit a
            provider error (no match does not count)
    """
    enriched: List[Event] = []
    attempted = succeeded = failed = errors = 0

    for original in events:
        event = original.model_copy(deep=True)
        for location in _location_slots(event):
            if not force and _has_valid_geolocation(location):
                continue
            if not (location.name or location.city or location.country):
                continue

            attempted += 1
            try:
                result = geocoder.geocode(
                    name=location.name or None,
                    city=location.city,
                    country=location.country,
                )
            except (GeocodingError, TransientError) as e:
                failed += 1
                errors += 1
                logger.warning(f"Geocoding failed for event {event.id}: {e}")
                continue

            if result is None:
                failed += 1
                continue

            succeeded += 1
            location.geolocation = GeoPoint(lat=result.lat, lng=result.lng)
            if result.city and not location.city:
                location.city = result.city
            if result.country and not location.country:
                location.country = result.country
        enriched.append(event)

    logger.info(
        f"Geocoded {succeeded}/{attempted} locations across {len(events)} events"
        f"{' (forced)' if force else ''}, {failed} failed"
    )
    if raise_on_error and errors:
        raise GeocodingError(
            f"Geocoding provider failed for {errors} of {attempted} locations",
            context={"failed": errors, "attempted": attempted},
        )
    return enriched
