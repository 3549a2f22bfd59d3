"""Location workflow — orchestrates acquisition, reverse geocoding, and manual fallback.

A :class:`LocationWorkflow` is a small state machine owned by a single report
draft. Every failure is converted into a :class:`LocationState` plus a
user-facing message; renderers observe state changes through
:meth:`LocationWorkflow.subscribe`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from report_locator.lib.geocoder import (
    BaseReverseGeocoder,
    GeocodingProviderError,
    build_location_address,
    get_reverse_geocoder,
    normalize_city,
    normalize_street,
)
from report_locator.lib.location import (
    BUSY_STATES,
    FAILURE_STATES,
    AcquisitionOutcome,
    CoordinateAcquirer,
    LocationAddress,
    LocationCoordinates,
    LocationProvider,
    LocationResult,
    LocationState,
    ManualValidation,
    PositionOptions,
    validate_manual_location,
)
from report_locator.lib.location.validator import CITY_ERROR, STREET_ERROR

if TYPE_CHECKING:
    from report_locator.core.config import Settings

StateListener = Callable[[LocationState, LocationState], None]

STREET_NOT_FOUND = "Unable to identify street name from location. Please enter manually."
GEOCODING_FALLBACK_ERROR = "Failed to get address from location"

_USER_MESSAGES: dict[LocationState, str] = {
    LocationState.PERMISSION_DENIED: (
        "Location permission denied. Please enable location access in your device settings "
        "or enter the location manually."
    ),
    LocationState.TIMEOUT: "Location detection timed out. Please try again or enter the location manually.",
    LocationState.UNSUPPORTED: (
        "Your device does not support location detection. Please enter the location manually."
    ),
    LocationState.GEOCODING_FAILED: (
        "Unable to identify street name from your location. Please enter it manually."
    ),
}
_DEFAULT_USER_MESSAGE = "Unable to detect location. Please enter the location manually."

# Allowed transitions. Any settled state may restart (-> idle) or accept a
# manual entry (-> success).
_TRANSITIONS: dict[LocationState, frozenset[LocationState]] = {
    LocationState.IDLE: frozenset({LocationState.DETECTING, LocationState.SUCCESS}),
    LocationState.DETECTING: frozenset(
        {
            LocationState.GEOCODING,
            LocationState.PERMISSION_DENIED,
            LocationState.TIMEOUT,
            LocationState.UNSUPPORTED,
            LocationState.ERROR,
        }
    ),
    LocationState.GEOCODING: frozenset({LocationState.SUCCESS, LocationState.GEOCODING_FAILED}),
    LocationState.SUCCESS: frozenset({LocationState.IDLE, LocationState.SUCCESS}),
    **{state: frozenset({LocationState.IDLE, LocationState.SUCCESS}) for state in FAILURE_STATES},
}


class WorkflowBusyError(RuntimeError):
    """Raised when a workflow is used while an attempt is in flight."""


class InvalidTransitionError(RuntimeError):
    """Raised when the workflow attempts a transition its state table forbids."""

    def __init__(self, current: LocationState, target: LocationState) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Invalid location state transition: {current} -> {target}")


def user_message(state: LocationState) -> str:
    """Actionable message for a failure state, pointing at manual entry."""
    return _USER_MESSAGES.get(state, _DEFAULT_USER_MESSAGE)


@dataclass(frozen=True)
class DetectionOutcome:
    """Result of one workflow operation: a LocationResult or an error message."""

    state: LocationState
    result: LocationResult | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None

    @property
    def manual_entry_suggested(self) -> bool:
        return self.state in FAILURE_STATES


def _log_outcome(outcome: DetectionOutcome) -> DetectionOutcome:
    """Emit one structured JSON record per settled detection or manual entry."""
    result = outcome.result
    logger.bind(
        json_output=True,
        event="location_outcome",
        state=str(outcome.state),
        source=result.source if result else None,
        street_name=result.address.street_name if result else None,
        city=result.address.city if result else None,
        error=outcome.error,
    ).info("Location outcome")
    return outcome


class LocationWorkflow:
    """State machine resolving a device location into a normalized street/city.

    Args:
        acquirer: Coordinate acquirer wrapping the platform provider.
        geocoder: Reverse geocoding provider.
    """

    def __init__(self, acquirer: CoordinateAcquirer, geocoder: BaseReverseGeocoder) -> None:
        self._acquirer = acquirer
        self._geocoder = geocoder
        self._state = LocationState.IDLE
        self._listeners: list[StateListener] = []
        self._coordinates: LocationCoordinates | None = None
        self._result: LocationResult | None = None
        self._error_message: str | None = None
        self._manual_mode = False
        self._validation_error: str | None = None

    @property
    def state(self) -> LocationState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state in BUSY_STATES

    @property
    def coordinates(self) -> LocationCoordinates | None:
        """Last position fix of the current attempt, used to pre-seed manual entry."""
        return self._coordinates

    @property
    def result(self) -> LocationResult | None:
        return self._result

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def manual_mode(self) -> bool:
        return self._manual_mode

    @property
    def validation_error(self) -> str | None:
        return self._validation_error

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with ``(previous, current)`` on every transition.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, target: LocationState) -> None:
        if target not in _TRANSITIONS.get(self._state, frozenset()):
            raise InvalidTransitionError(self._state, target)

        previous, self._state = self._state, target
        logger.debug(f"Location state {previous} -> {target}")
        for listener in list(self._listeners):
            try:
                listener(previous, target)
            except Exception:
                logger.exception("Location state listener failed")

    def _ensure_idle_for(self, operation: str) -> None:
        if self.is_busy:
            msg = f"Cannot {operation} while location detection is in progress ({self._state})"
            raise WorkflowBusyError(msg)

    def _start_attempt(self) -> None:
        if self._state != LocationState.IDLE:
            self._transition(LocationState.IDLE)
        self._coordinates = None
        self._result = None
        self._error_message = None
        self._manual_mode = False
        self._validation_error = None

    def _fail(self, state: LocationState, message: str) -> DetectionOutcome:
        self._error_message = message
        self._transition(state)
        logger.info(f"Location detection ended in {state}: {message}")
        return _log_outcome(DetectionOutcome(state=state, error=message))

    async def detect(self) -> DetectionOutcome:
        """Run one automatic detection attempt.

        Visits ``idle -> detecting -> geocoding -> success | geocoding-failed``,
        or stops at ``permission-denied``, ``timeout``, ``unsupported`` or
        ``error`` when no position can be acquired. Failures are returned,
        never raised.

        Returns:
            DetectionOutcome for this attempt.

        Raises:
            WorkflowBusyError: If an attempt is already in flight.
        """
        self._ensure_idle_for("start detection")
        self._start_attempt()
        self._transition(LocationState.DETECTING)

        try:
            acquisition = await self._acquirer.acquire()
        except Exception:
            logger.exception("Coordinate acquisition raised unexpectedly")
            acquisition = AcquisitionOutcome(error=LocationState.ERROR)

        if acquisition.coordinates is None or acquisition.error is not None:
            state = acquisition.error or LocationState.ERROR
            return self._fail(state, user_message(state))

        self._coordinates = acquisition.coordinates
        self._transition(LocationState.GEOCODING)

        try:
            raw = await self._geocoder.reverse_geocode(acquisition.coordinates)
            address = build_location_address(raw)
        except GeocodingProviderError as e:
            logger.warning(f"Reverse geocoding failed via {e.provider_name}: {e.message}")
            return self._fail(LocationState.GEOCODING_FAILED, e.message)
        except Exception:
            logger.exception("Reverse geocoding raised unexpectedly")
            return self._fail(LocationState.GEOCODING_FAILED, GEOCODING_FALLBACK_ERROR)

        if address is None:
            return self._fail(LocationState.GEOCODING_FAILED, STREET_NOT_FOUND)

        result = LocationResult(coordinates=acquisition.coordinates, address=address, source="auto")
        self._result = result
        self._transition(LocationState.SUCCESS)
        logger.info(f"Location resolved to {address.street_name}, {address.city}")
        return _log_outcome(DetectionOutcome(state=LocationState.SUCCESS, result=result))

    def enter_manual_mode(self) -> None:
        """Switch to manual entry. Allowed whenever no attempt is in flight.

        Raises:
            WorkflowBusyError: If an attempt is in flight.
        """
        self._ensure_idle_for("enter manual mode")
        self._manual_mode = True
        self._validation_error = None

    def submit_manual(
        self,
        street: str,
        city: str,
        coordinates: LocationCoordinates | None = None,
    ) -> DetectionOutcome:
        """Accept a manually entered street and city.

        Invalid input leaves the workflow in manual mode with
        :attr:`validation_error` set; it may be resubmitted any number of
        times. Valid input is normalized and moves the workflow to
        ``success`` with ``source = "manual"``.

        Args:
            street: Street name as typed.
            city: City name as typed.
            coordinates: Position for the entry. Defaults to the fix obtained
                by the last detection attempt, if any.

        Returns:
            DetectionOutcome with the manual LocationResult or the validation error.

        Raises:
            WorkflowBusyError: If an attempt is in flight.
        """
        self.enter_manual_mode()

        validation = validate_manual_location(street, city)
        street_name = normalize_street(street)
        city_name = normalize_city(city)
        # Punctuation-only input passes the length check but normalizes to nothing
        if validation.valid and not street_name:
            validation = ManualValidation(valid=False, error=STREET_ERROR)
        elif validation.valid and not city_name:
            validation = ManualValidation(valid=False, error=CITY_ERROR)

        if not validation.valid:
            self._validation_error = validation.error
            return DetectionOutcome(state=self._state, error=validation.error)

        address = LocationAddress(street_name=street_name, city=city_name)
        result = LocationResult(
            coordinates=coordinates or self._coordinates,
            address=address,
            source="manual",
        )
        self._result = result
        self._error_message = None
        self._manual_mode = False
        self._transition(LocationState.SUCCESS)
        logger.info(f"Manual location accepted: {address.street_name}, {address.city}")
        return _log_outcome(DetectionOutcome(state=LocationState.SUCCESS, result=result))


def create_acquirer(settings: Settings, provider: LocationProvider | None) -> CoordinateAcquirer:
    """Build a coordinate acquirer with options taken from settings."""
    options = PositionOptions(
        enable_high_accuracy=settings.location_high_accuracy,
        timeout_ms=settings.location_timeout_ms,
        maximum_age_ms=settings.location_maximum_age_ms,
    )
    return CoordinateAcquirer(provider, options)


def create_workflow(settings: Settings, provider: LocationProvider | None) -> LocationWorkflow:
    """Build a fresh workflow for one report draft.

    Args:
        settings: Application settings.
        provider: Platform location provider, or None when unavailable.

    Returns:
        A new LocationWorkflow in the ``idle`` state.
    """
    return LocationWorkflow(create_acquirer(settings, provider), get_reverse_geocoder(settings))
