"""Location CLI commands: detection, manual entry, normalization, and distance."""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING

import typer

from report_locator.lib.location import LocationCoordinates, format_coordinates

if TYPE_CHECKING:
    from report_locator.services.location_workflow import DetectionOutcome


def _echo_outcome(outcome: DetectionOutcome, as_json: bool) -> None:
    """Print a DetectionOutcome and exit non-zero on failure."""
    result = outcome.result

    if as_json:
        payload = {
            "state": str(outcome.state),
            "error": outcome.error,
            "result": result.to_dict() if result else None,
        }
        typer.echo(json.dumps(payload, indent=2))
    elif result is not None:
        typer.echo(f"Street:      {result.address.street_name}")
        typer.echo(f"City:        {result.address.city}")
        if result.address.state:
            typer.echo(f"State:       {result.address.state}")
        if result.address.postal_code:
            typer.echo(f"Postal code: {result.address.postal_code}")
        if result.coordinates:
            typer.echo(f"Coordinates: {format_coordinates(result.coordinates)}")
        typer.echo(f"Source:      {result.source}")
    else:
        typer.echo(f"Location {outcome.state}: {outcome.error}", err=True)
        if outcome.manual_entry_suggested:
            typer.echo("Use `report-locator manual STREET CITY` to enter the location manually.", err=True)

    if not outcome.ok:
        raise typer.Exit(code=1)


def locate(
    lat: float = typer.Option(..., "--lat", help="Latitude (-90 to 90)"),  # noqa: B008
    lon: float = typer.Option(..., "--lon", help="Longitude (-180 to 180)"),  # noqa: B008
    accuracy: float | None = typer.Option(None, "--accuracy", help="Fix accuracy in meters"),  # noqa: B008
    as_json: bool = typer.Option(False, "--json", help="Print the outcome as JSON"),  # noqa: FBT001
) -> None:
    """Resolve a position fix into a normalized street and city."""
    asyncio.run(_locate(lat, lon, accuracy, as_json))


async def _locate(lat: float, lon: float, accuracy: float | None, as_json: bool) -> None:
    """Async implementation of locate."""
    from report_locator.core.config import get_settings
    from report_locator.lib.location import StaticLocationProvider
    from report_locator.services.location_workflow import create_workflow

    workflow = create_workflow(get_settings(), StaticLocationProvider(lat, lon, accuracy))
    outcome = await workflow.detect()
    _echo_outcome(outcome, as_json)


def manual(
    street: str = typer.Argument(..., help="Street name"),  # noqa: B008
    city: str = typer.Argument(..., help="City name"),  # noqa: B008
    lat: float | None = typer.Option(None, "--lat", help="Latitude of the entry, if known"),  # noqa: B008
    lon: float | None = typer.Option(None, "--lon", help="Longitude of the entry, if known"),  # noqa: B008
    as_json: bool = typer.Option(False, "--json", help="Print the outcome as JSON"),  # noqa: FBT001
) -> None:
    """Validate and normalize a manually entered location."""
    from report_locator.core.config import get_settings
    from report_locator.services.location_workflow import create_workflow

    if (lat is None) != (lon is None):
        typer.echo("Both --lat and --lon must be given together.", err=True)
        raise typer.Exit(code=2)

    coordinates = None
    if lat is not None and lon is not None:
        try:
            coordinates = LocationCoordinates(latitude=lat, longitude=lon)
        except ValueError as e:
            typer.echo(str(e), err=True)
            raise typer.Exit(code=2) from e

    workflow = create_workflow(get_settings(), provider=None)
    _echo_outcome(workflow.submit_manual(street, city, coordinates), as_json)


def normalize(
    text: str = typer.Argument(..., help="Street or city name to normalize"),  # noqa: B008
    city: bool = typer.Option(False, "--city", help="Normalize as a city name"),  # noqa: FBT001
) -> None:
    """Print the normalized form of a street or city name."""
    from report_locator.lib.geocoder import normalize_city, normalize_street

    typer.echo(normalize_city(text) if city else normalize_street(text))


def validate(
    street: str = typer.Argument(..., help="Street name"),  # noqa: B008
    city: str = typer.Argument(..., help="City name"),  # noqa: B008
) -> None:
    """Check a manual street/city entry."""
    from report_locator.lib.location import validate_manual_location

    validation = validate_manual_location(street, city)
    if not validation.valid:
        typer.echo(f"Invalid: {validation.error}", err=True)
        raise typer.Exit(code=1)
    typer.echo("Valid")


def distance(
    lat1: float = typer.Argument(..., help="First latitude"),  # noqa: B008
    lon1: float = typer.Argument(..., help="First longitude"),  # noqa: B008
    lat2: float = typer.Argument(..., help="Second latitude"),  # noqa: B008
    lon2: float = typer.Argument(..., help="Second longitude"),  # noqa: B008
) -> None:
    """Print the great-circle distance between two points in kilometers."""
    from report_locator.lib.location import distance_km

    try:
        a = LocationCoordinates(latitude=lat1, longitude=lon1)
        b = LocationCoordinates(latitude=lat2, longitude=lon2)
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2) from e

    typer.echo(f"{distance_km(a, b):.3f} km")
