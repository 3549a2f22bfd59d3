"""Location library — coordinate acquisition, manual entry validation, and geometry.

Public API:
    - LocationCoordinates / LocationAddress / LocationResult: Core value types
    - LocationState: Resolution state enum
    - CoordinateAcquirer: Single-fix acquisition with timeout/permission semantics
    - AcquisitionOutcome: Coordinates or failure state from an acquisition
    - LocationProvider: Platform provider protocol
    - StaticLocationProvider / UnavailableLocationProvider: Simple providers
    - PositionError / PositionErrorCode / PositionOptions / Position: Provider types
    - validate_manual_location: Manual street/city validation
    - distance_km / is_within_radius / bounding_box / format_coordinates: Geometry helpers
"""

from report_locator.lib.location.acquirer import AcquisitionOutcome, CoordinateAcquirer
from report_locator.lib.location.geo import bounding_box, distance_km, format_coordinates, is_within_radius
from report_locator.lib.location.providers import (
    LocationProvider,
    Position,
    PositionError,
    PositionErrorCode,
    PositionOptions,
    StaticLocationProvider,
    UnavailableLocationProvider,
)
from report_locator.lib.location.types import (
    BUSY_STATES,
    FAILURE_STATES,
    LocationAddress,
    LocationCoordinates,
    LocationResult,
    LocationSource,
    LocationState,
)
from report_locator.lib.location.validator import ManualValidation, validate_manual_location

__all__ = [
    "BUSY_STATES",
    "FAILURE_STATES",
    "AcquisitionOutcome",
    "CoordinateAcquirer",
    "LocationAddress",
    "LocationCoordinates",
    "LocationProvider",
    "LocationResult",
    "LocationSource",
    "LocationState",
    "ManualValidation",
    "Position",
    "PositionError",
    "PositionErrorCode",
    "PositionOptions",
    "StaticLocationProvider",
    "UnavailableLocationProvider",
    "bounding_box",
    "distance_km",
    "format_coordinates",
    "is_within_radius",
    "validate_manual_location",
]
