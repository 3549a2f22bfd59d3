"""Core location types shared by acquisition, geocoding, and the workflow."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Literal


class LocationState(StrEnum):
    """State of a location resolution attempt. Exactly one is current at any time."""

    IDLE = "idle"
    REQUESTING_PERMISSION = "requesting-permission"
    DETECTING = "detecting"
    GEOCODING = "geocoding"
    SUCCESS = "success"
    PERMISSION_DENIED = "permission-denied"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"
    GEOCODING_FAILED = "geocoding-failed"
    ERROR = "error"


FAILURE_STATES: frozenset[LocationState] = frozenset(
    {
        LocationState.PERMISSION_DENIED,
        LocationState.TIMEOUT,
        LocationState.UNSUPPORTED,
        LocationState.GEOCODING_FAILED,
        LocationState.ERROR,
    }
)

# States during which an attempt is in flight
BUSY_STATES: frozenset[LocationState] = frozenset(
    {
        LocationState.REQUESTING_PERMISSION,
        LocationState.DETECTING,
        LocationState.GEOCODING,
    }
)

LocationSource = Literal["auto", "manual"]


@dataclass(frozen=True)
class LocationCoordinates:
    """A WGS84 position. ``accuracy`` is in meters and absent for manual entries."""

    latitude: float
    longitude: float
    accuracy: float | None = None

    def __post_init__(self) -> None:
        if not (-90 <= self.latitude <= 90):
            msg = f"latitude must be between -90 and 90, got {self.latitude}"
            raise ValueError(msg)
        if not (-180 <= self.longitude <= 180):
            msg = f"longitude must be between -180 and 180, got {self.longitude}"
            raise ValueError(msg)
        if self.accuracy is not None and self.accuracy < 0:
            msg = f"accuracy must be non-negative, got {self.accuracy}"
            raise ValueError(msg)


@dataclass(frozen=True)
class LocationAddress:
    """Normalized street/city identity of a location."""

    street_name: str
    city: str
    state: str | None = None
    postal_code: str | None = None
    full_address: str | None = None


@dataclass(frozen=True)
class LocationResult:
    """Outcome of a successful resolution, handed to the caller."""

    coordinates: LocationCoordinates | None
    address: LocationAddress
    source: LocationSource

    def to_dict(self) -> dict[str, str | float | None]:
        """Flatten into the field set accepted by report persistence.

        Returns:
            Dictionary of column name to value.
        """
        coords = self.coordinates
        return {
            "latitude": coords.latitude if coords else None,
            "longitude": coords.longitude if coords else None,
            "accuracy": coords.accuracy if coords else None,
            "street_name": self.address.street_name,
            "city": self.address.city,
            "state": self.address.state,
            "postal_code": self.address.postal_code,
            "full_address": self.address.full_address,
            "source": self.source,
        }
