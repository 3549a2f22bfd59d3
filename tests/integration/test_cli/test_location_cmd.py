"""Integration tests for the location CLI commands.

HTTP calls to the reverse geocoder are mocked; these tests verify the CLI
wiring of the workflow, normalizer, validator, and distance helpers.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from loguru import logger
from typer.testing import CliRunner

from report_locator.cli.app import app

runner = CliRunner()

# Keep log lines out of JSON output
QUIET = {"LOG_LEVEL": "ERROR"}


@pytest.fixture(autouse=True)
def _detach_log_sinks():
    """Drop sinks bound to the runner's streams once each invocation ends."""
    yield
    logger.remove()


def _geocoder_response(payload: dict) -> MagicMock:
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = payload
    response.raise_for_status = MagicMock()
    return response


MG_ROAD = {
    "display_name": "MG Road, Shivaji Nagar, Bengaluru, Karnataka, 560001, India",
    "address": {"road": "MG Road", "city": "Bengaluru", "state": "Karnataka", "postcode": "560001"},
}


class TestLocateCommand:
    """Tests for `report-locator locate`."""

    def test_success(self) -> None:
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock, return_value=_geocoder_response(MG_ROAD)):
            result = runner.invoke(app, ["locate", "--lat", "12.9716", "--lon", "77.5946"])

        assert result.exit_code == 0, result.output
        assert "Street:      MG Road" in result.output
        assert "City:        Bengaluru" in result.output
        assert "Postal code: 560001" in result.output
        assert "Coordinates: 12.971600, 77.594600" in result.output
        assert "Source:      auto" in result.output

    def test_json_output(self) -> None:
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock, return_value=_geocoder_response(MG_ROAD)):
            result = runner.invoke(
                app,
                ["locate", "--lat", "12.9716", "--lon", "77.5946", "--accuracy", "8", "--json"],
                env=QUIET,
            )

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["state"] == "success"
        assert payload["error"] is None
        assert payload["result"]["street_name"] == "MG Road"
        assert payload["result"]["accuracy"] == 8.0
        assert payload["result"]["source"] == "auto"

    def test_geocoding_failure_suggests_manual(self) -> None:
        no_address = _geocoder_response({"error": "Unable to geocode"})
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock, return_value=no_address):
            result = runner.invoke(app, ["locate", "--lat", "12.9716", "--lon", "77.5946"])

        assert result.exit_code == 1
        assert "geocoding-failed" in result.output
        assert "No address found for this location" in result.output
        assert "report-locator manual" in result.output

    def test_address_without_street(self) -> None:
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock, return_value=_geocoder_response({"address": {}})):
            result = runner.invoke(app, ["locate", "--lat", "12.9716", "--lon", "77.5946"])

        assert result.exit_code == 1
        assert "Unable to identify street name" in result.output

    def test_service_unavailable(self) -> None:
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock, side_effect=httpx.ConnectError("refused")):
            result = runner.invoke(app, ["locate", "--lat", "12.9716", "--lon", "77.5946"])

        assert result.exit_code == 1
        assert "Geocoding service unavailable" in result.output

    def test_out_of_range_fix(self) -> None:
        with patch("httpx.AsyncClient.get", new_callable=AsyncMock) as mock_get:
            result = runner.invoke(app, ["locate", "--lat", "95", "--lon", "77.5946"])

        assert result.exit_code == 1
        assert "Location error" in result.output
        mock_get.assert_not_called()


class TestManualCommand:
    """Tests for `report-locator manual`."""

    def test_valid_entry(self) -> None:
        result = runner.invoke(app, ["manual", "m.g. rd", "bengaluru"])
        assert result.exit_code == 0, result.output
        assert "Street:      MG Road" in result.output
        assert "City:        Bengaluru" in result.output
        assert "Source:      manual" in result.output
        assert "Coordinates" not in result.output

    def test_with_coordinates_json(self) -> None:
        result = runner.invoke(
            app,
            ["manual", "Oak Ave", "SF", "--lat", "37.7749", "--lon", "122.4194", "--json"],
            env=QUIET,
        )
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["result"]["street_name"] == "Oak Avenue"
        assert payload["result"]["city"] == "SF"
        assert payload["result"]["latitude"] == 37.7749
        assert payload["result"]["accuracy"] is None

    def test_invalid_entry(self) -> None:
        result = runner.invoke(app, ["manual", "ab", "City"])
        assert result.exit_code == 1
        assert "Please enter a valid street name (minimum 3 characters)" in result.output

    def test_lat_without_lon(self) -> None:
        result = runner.invoke(app, ["manual", "Oak Avenue", "SF", "--lat", "37.7"])
        assert result.exit_code == 2
        assert "--lat and --lon" in result.output


class TestNormalizeCommand:
    """Tests for `report-locator normalize`."""

    def test_street(self) -> None:
        result = runner.invoke(app, ["normalize", "123 main st."])
        assert result.exit_code == 0
        assert result.output.strip() == "Main Street"

    def test_city(self) -> None:
        result = runner.invoke(app, ["normalize", "  new   delhi ", "--city"])
        assert result.exit_code == 0
        assert result.output.strip() == "New Delhi"


class TestValidateCommand:
    """Tests for `report-locator validate`."""

    def test_valid(self) -> None:
        result = runner.invoke(app, ["validate", "Oak Avenue", "SF"])
        assert result.exit_code == 0
        assert "Valid" in result.output

    def test_invalid_city(self) -> None:
        result = runner.invoke(app, ["validate", "Oak Avenue", "S"])
        assert result.exit_code == 1
        assert "Please enter a valid city name" in result.output


class TestDistanceCommand:
    """Tests for `report-locator distance`."""

    def test_distance(self) -> None:
        result = runner.invoke(app, ["distance", "12.9716", "77.5946", "19.0760", "72.8777"])
        assert result.exit_code == 0
        assert result.output.strip().endswith(" km")
        assert 835 < float(result.output.split()[0]) < 855

    def test_negative_coordinates(self) -> None:
        result = runner.invoke(app, ["distance", "-33.86", "151.2", "-33.87", "151.21"])
        assert result.exit_code == 0, result.output
        assert 1.3 < float(result.output.split()[0]) < 1.6

    def test_western_hemisphere(self) -> None:
        result = runner.invoke(app, ["distance", "40.7128", "-74.0060", "34.0522", "-118.2437"])
        assert result.exit_code == 0, result.output
        assert 3900 < float(result.output.split()[0]) < 3990

    def test_invalid_latitude(self) -> None:
        result = runner.invoke(app, ["distance", "91", "0", "0", "0"])
        assert result.exit_code == 2
        assert "latitude" in result.output
