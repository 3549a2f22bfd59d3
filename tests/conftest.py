"""Shared test fixtures for settings, fake geocoders, and workflows."""

import pytest

from report_locator.core.config import Settings
from report_locator.lib.geocoder.base import (
    BaseReverseGeocoder,
    GeocodingProviderError,
    RawAddress,
    ReverseGeocodingResult,
)
from report_locator.lib.location import (
    CoordinateAcquirer,
    LocationCoordinates,
    PositionOptions,
    StaticLocationProvider,
)
from report_locator.services.location_workflow import LocationWorkflow

BENGALURU = (12.9716, 77.5946)


class FakeReverseGeocoder(BaseReverseGeocoder):
    """In-memory reverse geocoder returning a canned address or raising a canned error."""

    def __init__(
        self,
        address: dict[str, str] | None = None,
        display_name: str | None = None,
        error: Exception | None = None,
    ) -> None:
        self._address = address
        self._display_name = display_name
        self._error = error
        self.calls: list[LocationCoordinates] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    async def reverse_geocode(self, coordinates: LocationCoordinates) -> ReverseGeocodingResult:
        self.calls.append(coordinates)
        if self._error is not None:
            raise self._error
        if self._address is None:
            raise GeocodingProviderError("fake", "No address found for this location")
        return ReverseGeocodingResult(
            address=RawAddress.model_validate(self._address),
            display_name=self._display_name,
        )


@pytest.fixture
def settings() -> Settings:
    """Test application settings (no .env file)."""
    return Settings(_env_file=None)


@pytest.fixture
def bengaluru_provider() -> StaticLocationProvider:
    """Provider reporting a fix in central Bengaluru."""
    return StaticLocationProvider(*BENGALURU, accuracy=15.0)


@pytest.fixture
def make_geocoder():
    """Factory building a FakeReverseGeocoder."""
    return FakeReverseGeocoder


@pytest.fixture
def mg_road_geocoder() -> FakeReverseGeocoder:
    """Geocoder resolving every position to MG Road, Bengaluru."""
    return FakeReverseGeocoder(
        address={"road": "MG Road", "city": "Bengaluru", "state": "Karnataka", "postcode": "560001"},
        display_name="MG Road, Shivaji Nagar, Bengaluru, Karnataka, 560001, India",
    )


@pytest.fixture
def make_workflow():
    """Factory building a workflow from a provider and a geocoder."""

    def _make(provider, geocoder: BaseReverseGeocoder, timeout_ms: int = 10_000) -> LocationWorkflow:
        acquirer = CoordinateAcquirer(provider, PositionOptions(timeout_ms=timeout_ms))
        return LocationWorkflow(acquirer, geocoder)

    return _make
