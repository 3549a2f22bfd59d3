"""Platform location provider interface and simple implementations.

A provider answers a single-fix position query. Failures are reported by
raising :class:`PositionError` with one of the standard error codes.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol


class PositionErrorCode(IntEnum):
    """Standard position error taxonomy reported by location providers."""

    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


class PositionError(Exception):
    """Raised by a provider when a position fix cannot be produced.

    Args:
        code: Error code (usually a :class:`PositionErrorCode`).
        message: Human-readable error description.
    """

    def __init__(self, code: int, message: str = "") -> None:
        self.code = code
        self.message = message
        super().__init__(message or f"position error {code}")


@dataclass(frozen=True)
class PositionOptions:
    """Options for a single position query."""

    enable_high_accuracy: bool = True
    timeout_ms: int = 10_000
    maximum_age_ms: int = 0


@dataclass(frozen=True)
class Position:
    """Raw position fix as reported by a provider."""

    latitude: float
    longitude: float
    accuracy: float | None = None


class LocationProvider(Protocol):
    """Anything that can produce a single position fix."""

    async def get_current_position(self, options: PositionOptions) -> Position:
        """Return the current position or raise :class:`PositionError`."""
        ...


class StaticLocationProvider:
    """Provider that always reports the same fix."""

    def __init__(self, latitude: float, longitude: float, accuracy: float | None = None) -> None:
        self._position = Position(latitude=latitude, longitude=longitude, accuracy=accuracy)

    async def get_current_position(self, options: PositionOptions) -> Position:  # noqa: ARG002
        return self._position


class UnavailableLocationProvider:
    """Provider that always fails with the given error code."""

    def __init__(self, code: int = PositionErrorCode.POSITION_UNAVAILABLE, message: str = "") -> None:
        self._code = code
        self._message = message

    async def get_current_position(self, options: PositionOptions) -> Position:  # noqa: ARG002
        raise PositionError(self._code, self._message)
