"""OpenStreetMap Nominatim reverse geocoder provider.

Uses the Nominatim reverse API (https://nominatim.org/release-docs/develop/api/Reverse/)
for coordinate-to-address resolution. Free but rate-limited to 1 req/sec and
requires an identifying User-Agent.
"""

import httpx
from loguru import logger
from pydantic import ValidationError

from report_locator.lib.geocoder.base import (
    BaseReverseGeocoder,
    GeocodingProviderError,
    ReverseGeocodeResponse,
    ReverseGeocodingResult,
)
from report_locator.lib.location.types import LocationCoordinates

NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "CommunityWasteReportingApp/1.0"
DEFAULT_LANGUAGE = "en"
STREET_ZOOM = 18

SERVICE_UNAVAILABLE = "Geocoding service unavailable"
NO_ADDRESS_FOUND = "No address found for this location"


class NominatimReverseGeocoder(BaseReverseGeocoder):
    """OpenStreetMap Nominatim reverse geocoder provider."""

    def __init__(
        self,
        *,
        base_url: str = NOMINATIM_REVERSE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        accept_language: str = DEFAULT_LANGUAGE,
        zoom: int = STREET_ZOOM,
        email: str = "",
    ) -> None:
        if not user_agent:
            msg = "Nominatim requires a non-empty User-Agent"
            raise ValueError(msg)
        self._base_url = base_url
        self._timeout = timeout
        self._user_agent = user_agent
        self._accept_language = accept_language
        self._zoom = zoom
        self._email = email

    @property
    def provider_name(self) -> str:
        return "nominatim"

    def _build_params(self, coordinates: LocationCoordinates) -> dict[str, str | int | float]:
        params: dict[str, str | int | float] = {
            "format": "json",
            "lat": coordinates.latitude,
            "lon": coordinates.longitude,
            "zoom": self._zoom,
            "addressdetails": 1,
        }
        if self._email:
            params["email"] = self._email
        return params

    async def reverse_geocode(self, coordinates: LocationCoordinates) -> ReverseGeocodingResult:
        """Reverse geocode a position using the Nominatim API.

        Args:
            coordinates: Position to resolve.

        Returns:
            ReverseGeocodingResult with the raw address and display name.

        Raises:
            GeocodingProviderError: On transport or service errors, or when
                the response carries no address.
        """
        headers = {
            "Accept-Language": self._accept_language,
            "User-Agent": self._user_agent,
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(self._base_url, params=self._build_params(coordinates), headers=headers)
                response.raise_for_status()

            data = response.json()
            return self._parse_response(data)

        except httpx.TimeoutException as e:
            logger.warning("Nominatim reverse geocoder timeout")
            raise GeocodingProviderError("nominatim", SERVICE_UNAVAILABLE) from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"Nominatim reverse geocoder HTTP error {e.response.status_code}")
            raise GeocodingProviderError(
                "nominatim",
                SERVICE_UNAVAILABLE,
                status_code=e.response.status_code,
            ) from e
        except httpx.TransportError as e:
            logger.warning("Nominatim reverse geocoder connection error")
            raise GeocodingProviderError("nominatim", SERVICE_UNAVAILABLE) from e
        except GeocodingProviderError:
            raise
        except ValueError as e:
            logger.warning(f"Nominatim reverse geocoder returned a non-JSON body: {e}")
            raise GeocodingProviderError("nominatim", f"Failed to parse response: {e}") from e

    def _parse_response(self, data: object) -> ReverseGeocodingResult:
        """Validate a Nominatim reverse response into a ReverseGeocodingResult.

        Args:
            data: Decoded JSON body.

        Returns:
            ReverseGeocodingResult with the address object as returned.

        Raises:
            GeocodingProviderError: If the body is malformed or has no address.
        """
        if not isinstance(data, dict):
            msg = f"Failed to parse response: expected object, got {type(data).__name__}"
            raise GeocodingProviderError("nominatim", msg)

        try:
            parsed = ReverseGeocodeResponse.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Failed to parse Nominatim reverse response: {e.error_count()} error(s)")
            raise GeocodingProviderError("nominatim", f"Failed to parse response: {e.errors()[0]['msg']}") from e

        if parsed.address is None:
            raise GeocodingProviderError("nominatim", NO_ADDRESS_FOUND)

        return ReverseGeocodingResult(address=parsed.address, display_name=parsed.display_name)
