"""Abstract reverse geocoder interface and provider payload models."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from report_locator.lib.location.types import LocationCoordinates


class RawAddress(BaseModel):
    """Address subcomponents of a reverse geocoding response.

    Only the fields the normalizer reads are modelled; anything else the
    provider sends is dropped at the boundary.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    house_number: str | None = None
    road: str | None = None
    street: str | None = None
    pedestrian: str | None = None
    footway: str | None = None
    path: str | None = None
    highway: str | None = None
    building: str | None = None
    neighbourhood: str | None = None
    suburb: str | None = None
    district: str | None = None
    city: str | None = None
    town: str | None = None
    village: str | None = None
    municipality: str | None = None
    county: str | None = None
    state: str | None = None
    postcode: str | None = None
    country: str | None = None
    country_code: str | None = None


class ReverseGeocodeResponse(BaseModel):
    """Top-level reverse geocoding JSON body."""

    model_config = ConfigDict(extra="ignore")

    address: RawAddress | None = None
    display_name: str | None = None


@dataclass(frozen=True)
class ReverseGeocodingResult:
    """Raw address record plus the provider's display string."""

    address: RawAddress
    display_name: str | None = None


class GeocodingProviderError(Exception):
    """Raised when a reverse geocoding provider cannot produce an address.

    Covers transport failures (timeout, HTTP error, connection error) as well
    as responses that carry no usable address.

    Args:
        provider_name: Name of the failing provider.
        message: Human-readable error description.
        status_code: Optional HTTP status code from the provider.
    """

    def __init__(self, provider_name: str, message: str, status_code: int | None = None) -> None:
        self.provider_name = provider_name
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider_name}: {message}")


class BaseReverseGeocoder(ABC):
    """Abstract reverse geocoder interface. All providers must implement this."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique name identifying this geocoder provider."""

    @abstractmethod
    async def reverse_geocode(self, coordinates: LocationCoordinates) -> ReverseGeocodingResult:
        """Resolve coordinates into a raw address record.

        Args:
            coordinates: Position to resolve.

        Returns:
            ReverseGeocodingResult with a non-empty address.

        Raises:
            GeocodingProviderError: On transport errors or when no address is found.
        """
