"""Unit tests for coordinate acquisition."""

import asyncio

import pytest

from report_locator.lib.location import (
    CoordinateAcquirer,
    LocationState,
    Position,
    PositionErrorCode,
    PositionOptions,
    StaticLocationProvider,
    UnavailableLocationProvider,
)


class RecordingProvider:
    """Provider that records the options it was queried with."""

    def __init__(self, position: Position) -> None:
        self.position = position
        self.options: list[PositionOptions] = []

    async def get_current_position(self, options: PositionOptions) -> Position:
        self.options.append(options)
        return self.position


class HangingProvider:
    """Provider that never answers."""

    async def get_current_position(self, options: PositionOptions) -> Position:  # noqa: ARG002
        await asyncio.sleep(3600)
        raise AssertionError("unreachable")


class BrokenProvider:
    """Provider that fails with a non-position error."""

    async def get_current_position(self, options: PositionOptions) -> Position:  # noqa: ARG002
        raise RuntimeError("GPS driver crashed")


class TestCoordinateAcquirer:
    """Tests for CoordinateAcquirer success and error mapping."""

    async def test_success(self) -> None:
        acquirer = CoordinateAcquirer(StaticLocationProvider(12.9716, 77.5946, accuracy=12.5))
        outcome = await acquirer.acquire()
        assert outcome.ok
        assert outcome.error is None
        assert outcome.coordinates is not None
        assert outcome.coordinates.latitude == 12.9716
        assert outcome.coordinates.longitude == 77.5946
        assert outcome.coordinates.accuracy == 12.5

    async def test_no_provider_is_unsupported(self) -> None:
        acquirer = CoordinateAcquirer(None)
        assert acquirer.is_supported is False
        outcome = await acquirer.acquire()
        assert not outcome.ok
        assert outcome.error == LocationState.UNSUPPORTED

    async def test_default_options(self) -> None:
        provider = RecordingProvider(Position(latitude=1.0, longitude=2.0))
        await CoordinateAcquirer(provider).acquire()
        assert provider.options == [PositionOptions(enable_high_accuracy=True, timeout_ms=10_000, maximum_age_ms=0)]

    @pytest.mark.parametrize(
        ("code", "state"),
        [
            (PositionErrorCode.PERMISSION_DENIED, LocationState.PERMISSION_DENIED),
            (PositionErrorCode.TIMEOUT, LocationState.TIMEOUT),
            (PositionErrorCode.POSITION_UNAVAILABLE, LocationState.ERROR),
            (99, LocationState.ERROR),
        ],
    )
    async def test_position_error_mapping(self, code: int, state: LocationState) -> None:
        acquirer = CoordinateAcquirer(UnavailableLocationProvider(code, "denied"))
        outcome = await acquirer.acquire()
        assert outcome.coordinates is None
        assert outcome.error == state

    async def test_provider_that_never_answers_times_out(self) -> None:
        acquirer = CoordinateAcquirer(HangingProvider(), PositionOptions(timeout_ms=20))
        outcome = await acquirer.acquire()
        assert outcome.error == LocationState.TIMEOUT

    async def test_unexpected_exception_is_error(self) -> None:
        outcome = await CoordinateAcquirer(BrokenProvider()).acquire()
        assert outcome.error == LocationState.ERROR

    async def test_out_of_range_fix_is_error(self) -> None:
        outcome = await CoordinateAcquirer(StaticLocationProvider(123.0, 0.0)).acquire()
        assert outcome.error == LocationState.ERROR

    async def test_calls_are_independent(self) -> None:
        provider = RecordingProvider(Position(latitude=1.0, longitude=2.0))
        acquirer = CoordinateAcquirer(provider)
        first = await acquirer.acquire()
        second = await acquirer.acquire()
        assert first == second
        assert len(provider.options) == 2
