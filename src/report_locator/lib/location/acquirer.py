"""Coordinate acquisition from a platform location provider.

Wraps a :class:`LocationProvider` with timeout and permission semantics and
converts every provider failure into a :class:`LocationState` value.
"""

import asyncio
from dataclasses import dataclass

from loguru import logger

from report_locator.lib.location.providers import (
    LocationProvider,
    PositionError,
    PositionErrorCode,
    PositionOptions,
)
from report_locator.lib.location.types import LocationCoordinates, LocationState

DEFAULT_TIMEOUT_MS = 10_000

_ERROR_CODE_STATES: dict[int, LocationState] = {
    PositionErrorCode.PERMISSION_DENIED: LocationState.PERMISSION_DENIED,
    PositionErrorCode.TIMEOUT: LocationState.TIMEOUT,
    PositionErrorCode.POSITION_UNAVAILABLE: LocationState.ERROR,
}


@dataclass(frozen=True)
class AcquisitionOutcome:
    """Either a coordinate fix or the failure state that prevented one."""

    coordinates: LocationCoordinates | None = None
    error: LocationState | None = None

    @property
    def ok(self) -> bool:
        return self.coordinates is not None and self.error is None


class CoordinateAcquirer:
    """Obtain a fresh, high-accuracy position fix.

    Args:
        provider: Platform location provider, or ``None`` when the platform
            has no location capability.
        options: Query options. Defaults to high accuracy, a 10 second
            timeout and no cached fixes.
    """

    def __init__(self, provider: LocationProvider | None, options: PositionOptions | None = None) -> None:
        self._provider = provider
        self._options = options or PositionOptions(timeout_ms=DEFAULT_TIMEOUT_MS)

    @property
    def is_supported(self) -> bool:
        """Whether a location provider is available at all."""
        return self._provider is not None

    @property
    def options(self) -> PositionOptions:
        return self._options

    async def acquire(self) -> AcquisitionOutcome:
        """Query the provider once.

        Returns:
            AcquisitionOutcome holding coordinates on success, or one of
            ``unsupported``, ``permission-denied``, ``timeout`` or ``error``.
        """
        if self._provider is None:
            logger.info("Location acquisition unsupported: no provider available")
            return AcquisitionOutcome(error=LocationState.UNSUPPORTED)

        try:
            position = await asyncio.wait_for(
                self._provider.get_current_position(self._options),
                timeout=self._options.timeout_ms / 1000,
            )
        except PositionError as e:
            state = _ERROR_CODE_STATES.get(e.code, LocationState.ERROR)
            logger.warning(f"Location provider error code={e.code}: {e.message or 'no message'}")
            return AcquisitionOutcome(error=state)
        except TimeoutError:
            logger.warning(f"Location acquisition timed out after {self._options.timeout_ms} ms")
            return AcquisitionOutcome(error=LocationState.TIMEOUT)
        except Exception:
            logger.exception("Location provider unexpected error")
            return AcquisitionOutcome(error=LocationState.ERROR)

        try:
            coordinates = LocationCoordinates(
                latitude=position.latitude,
                longitude=position.longitude,
                accuracy=position.accuracy,
            )
        except (ValueError, TypeError) as e:
            logger.warning(f"Location provider returned an invalid fix: {e}")
            return AcquisitionOutcome(error=LocationState.ERROR)

        logger.debug(f"Acquired position {coordinates.latitude}, {coordinates.longitude} (±{coordinates.accuracy} m)")
        return AcquisitionOutcome(coordinates=coordinates)
