"""
API routes for forward geocoding (single and batch)
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException

from globeplot.schemas import BatchGeocodeItem, BatchGeocodeResult, GeocodeRequest, GeocodeResult
from globeplot.tools.geocoding import MapboxGeocoder
from globeplot.utils.config import settings
from globeplot.utils.exceptions import ConfigurationError, GeocodingError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/geocode", tags=["geocode"])


def get_geocoder() -> MapboxGeocoder:
    return MapboxGeocoder()


@router.post("", response_model=GeocodeResult, response_model_by_alias=True)
def geocode_location(request: GeocodeRequest, geocoder: MapboxGeocoder = Depends(get_geocoder)):
    """
    Geocode a single location from a query or name/city/country
    """
    if not request.search_text():
        raise HTTPException(
            status_code=400,
            detail="Insufficient location data. Please provide either a query string or location components.",
        )

    try:
        result = geocoder.geocode(
            name=request.name,
            city=request.city,
            country=request.country,
            query=request.query,
        )
    except ConfigurationError as e:
        raise HTTPException(status_code=503, detail=e.message)
    except GeocodingError as e:
        logger.warning(f"Geocoding failed: {e.message}")
        raise HTTPException(status_code=502, detail="An error occurred while geocoding the location.")

    if result is None:
        raise HTTPException(status_code=404, detail="No location found for the provided parameters.")
    return result


@router.post("/batch", response_model=List[BatchGeocodeResult], response_model_by_alias=True)
def geocode_batch(items: List[BatchGeocodeItem], geocoder: MapboxGeocoder = Depends(get_geocoder)):
    """
    Geocode up to ``geocode_batch_limit`` locations; failures are reported per item
    """
    if not items:
        raise HTTPException(
            status_code=400,
            detail="Invalid request body. Expected an array of location objects.",
        )
    if len(items) > settings.geocode_batch_limit:
        raise HTTPException(
            status_code=400,
            detail=f"Batch size exceeds maximum limit of {settings.geocode_batch_limit} locations.",
        )

    try:
        return geocoder.geocode_batch(items)
    except ConfigurationError as e:
        raise HTTPException(status_code=503, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
