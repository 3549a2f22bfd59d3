"""Validation of manually entered street/city strings."""

from dataclasses import dataclass

MIN_STREET_LENGTH = 3
MIN_CITY_LENGTH = 2

STREET_ERROR = "Please enter a valid street name (minimum 3 characters)"
CITY_ERROR = "Please enter a valid city name"


@dataclass(frozen=True)
class ManualValidation:
    """Result of validating a manual location entry."""

    valid: bool
    error: str | None = None


def validate_manual_location(street: str, city: str) -> ManualValidation:
    """Validate a manually entered street and city.

    The street is checked before the city and only the first violation is
    reported. No normalization is applied.

    Args:
        street: Street name as typed by the user.
        city: City name as typed by the user.

    Returns:
        ManualValidation with ``valid`` and the first error message, if any.
    """
    if len((street or "").strip()) < MIN_STREET_LENGTH:
        return ManualValidation(valid=False, error=STREET_ERROR)
    if len((city or "").strip()) < MIN_CITY_LENGTH:
        return ManualValidation(valid=False, error=CITY_ERROR)
    return ManualValidation(valid=True)
