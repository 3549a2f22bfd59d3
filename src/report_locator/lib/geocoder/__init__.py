"""Geocoder library — reverse geocoding and street/city normalization.

Public API:
    - normalize_street / normalize_city: Canonicalize free-text names
    - extract_street_name / extract_city: Pick fields from a raw address
    - build_location_address: Raw result -> normalized LocationAddress
    - BaseReverseGeocoder: Abstract provider interface
    - NominatimReverseGeocoder: OpenStreetMap Nominatim provider
    - RawAddress / ReverseGeocodeResponse: Validated provider payload models
    - ReverseGeocodingResult: Result dataclass
    - GeocodingProviderError: Provider failure
    - get_reverse_geocoder: Build the provider from settings
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from report_locator.lib.geocoder.address import (
    UNKNOWN_CITY,
    build_location_address,
    extract_city,
    extract_street_name,
    normalize_city,
    normalize_street,
)
from report_locator.lib.geocoder.base import (
    BaseReverseGeocoder,
    GeocodingProviderError,
    RawAddress,
    ReverseGeocodeResponse,
    ReverseGeocodingResult,
)
from report_locator.lib.geocoder.nominatim import NominatimReverseGeocoder

if TYPE_CHECKING:
    from report_locator.core.config import Settings


def get_reverse_geocoder(settings: Settings) -> BaseReverseGeocoder:
    """Build the reverse geocoder configured in settings.

    Args:
        settings: Application settings.

    Returns:
        A configured NominatimReverseGeocoder.
    """
    return NominatimReverseGeocoder(
        base_url=settings.nominatim_reverse_url,
        timeout=settings.geocoder_timeout,
        user_agent=settings.geocoder_user_agent,
        accept_language=settings.geocoder_accept_language,
        zoom=settings.geocoder_zoom,
        email=settings.geocoder_email,
    )


__all__ = [
    "UNKNOWN_CITY",
    "BaseReverseGeocoder",
    "GeocodingProviderError",
    "NominatimReverseGeocoder",
    "RawAddress",
    "ReverseGeocodeResponse",
    "ReverseGeocodingResult",
    "build_location_address",
    "extract_city",
    "extract_street_name",
    "get_reverse_geocoder",
    "normalize_city",
    "normalize_street",
]
