"""Street/city normalization and field extraction from reverse geocoding results.

Normalizes free-text street and city names into a consistent casing and
abbreviation convention so the same street reported twice is stored under
the same name. All functions are pure and idempotent.
"""

import re
from collections.abc import Mapping

from report_locator.lib.geocoder.base import RawAddress, ReverseGeocodingResult
from report_locator.lib.location.types import LocationAddress

UNKNOWN_CITY = "Unknown City"

# Road type abbreviations expanded to their full form
ABBREVIATION_MAP: dict[str, str] = {
    "RD": "Road",
    "ST": "Street",
    "AVE": "Avenue",
    "BLVD": "Boulevard",
    "DR": "Drive",
    "LN": "Lane",
    "CT": "Court",
    "PL": "Place",
}

# Raw fields tried, in order, for the street name
STREET_FIELDS: tuple[str, ...] = ("road", "street", "pedestrian", "footway", "path", "highway")

# Area fields joined when no street-like field is present
AREA_FIELDS: tuple[str, ...] = ("neighbourhood", "suburb", "district")

# Raw fields tried, in order, for the city
CITY_FIELDS: tuple[str, ...] = ("city", "town", "village", "municipality", "county")

_MAX_INITIALS_LENGTH = 3

_COMMA_RUN = re.compile(r",+")
_WHITESPACE_RUN = re.compile(r"\s+")
_TRAILING_COMMAS = re.compile(r"[,\s]+$")

# Leading house numbers ("123", "12A", "4/2", "12-14"), unless they name the
# road width as in "80 Feet Road"
_HOUSE_NUMBER_PREFIX = re.compile(
    r"^(?:\d+[A-Z]?(?:[/-]\d+[A-Z]?)?,?\s+(?!(?:feet|ft)\b))+",
    re.IGNORECASE,
)


def _token_pattern(body: str) -> re.Pattern[str]:
    # Whole space-delimited token, optional trailing period, may be followed by a comma
    return re.compile(rf"(?<!\S){body}\.?(?=[\s,]|$)", re.IGNORECASE)


_ABBREVIATION_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (_token_pattern(re.escape(abbrev)), full) for abbrev, full in ABBREVIATION_MAP.items()
]
_MG_PATTERN = _token_pattern(r"M\.?G")


def _is_initials(token: str) -> bool:
    """Short, already-uppercase tokens such as ``MG``, ``HSR`` or ``HAL``."""
    return len(token) <= _MAX_INITIALS_LENGTH and token == token.upper()


def _title_case(token: str) -> str:
    return token[:1].upper() + token[1:].lower()


def _is_shouted(text: str) -> bool:
    """All-caps input such as ``OAK AVE`` or ``MG ROAD``.

    Input made only of short uppercase tokens with no road abbreviation
    (``HSR``, ``ABC D``) is read as initials, so normalized output is never
    re-cased on a second pass.
    """
    if any(ch.islower() for ch in text):
        return False
    tokens = text.split(" ")
    if any(not _is_initials(token) and token != _title_case(token) for token in tokens):
        return True
    return any(pattern.search(text) for pattern, _ in _ABBREVIATION_PATTERNS)


def normalize_street(raw: str | None) -> str:
    """Normalize a street name for consistent storage.

    Steps, in order:
    - trim and collapse repeated commas and whitespace
    - drop leading house numbers
    - Title Case every token except initials (short all-uppercase tokens);
      all-caps input is title-cased throughout
    - strip trailing commas
    - expand road type abbreviations (``Rd`` -> ``Road``) and canonicalize
      ``M.G.`` variants to ``MG``

    Args:
        raw: Street name as returned by a provider or typed by a user.

    Returns:
        Normalized street name, or an empty string for blank input.
    """
    if not raw or not raw.strip():
        return ""

    result = _COMMA_RUN.sub(",", raw.strip())
    result = _WHITESPACE_RUN.sub(" ", result)
    result = _HOUSE_NUMBER_PREFIX.sub("", result)

    keep_initials = not _is_shouted(result)
    result = " ".join(
        token if keep_initials and _is_initials(token) else _title_case(token) for token in result.split(" ")
    )
    result = _TRAILING_COMMAS.sub("", result)

    for pattern, replacement in _ABBREVIATION_PATTERNS:
        result = pattern.sub(replacement, result)
    return _MG_PATTERN.sub("MG", result)


def normalize_city(raw: str | None) -> str:
    """Normalize a city name with the same rules as street names."""
    return normalize_street(raw)


def _as_raw_address(address: RawAddress | Mapping[str, str | None]) -> RawAddress:
    if isinstance(address, RawAddress):
        return address
    return RawAddress.model_validate(dict(address))


def _first_present(address: RawAddress, fields: tuple[str, ...]) -> str | None:
    for name in fields:
        value = getattr(address, name)
        if value and value.strip():
            return value
    return None


def _join_present(*values: str | None) -> str:
    return " ".join(v.strip() for v in values if v and v.strip())


def extract_street_name(address: RawAddress | Mapping[str, str | None]) -> str:
    """Pick and normalize the street name from a raw address.

    Tries street-like fields first, then the joined area fields
    (neighbourhood, suburb, district), then building plus suburb.

    Args:
        address: Raw provider address (model or plain mapping).

    Returns:
        Normalized street name, or an empty string when nothing usable exists.
    """
    addr = _as_raw_address(address)

    street = _first_present(addr, STREET_FIELDS)
    if street:
        return normalize_street(street)

    area = _join_present(*(getattr(addr, name) for name in AREA_FIELDS))
    if area:
        return normalize_street(area)

    return normalize_street(_join_present(addr.building, addr.suburb or addr.neighbourhood))


def extract_city(address: RawAddress | Mapping[str, str | None]) -> str:
    """Pick and normalize the city from a raw address, defaulting to ``Unknown City``."""
    addr = _as_raw_address(address)
    city = _first_present(addr, CITY_FIELDS)
    return normalize_city(city) if city else UNKNOWN_CITY


def build_location_address(result: ReverseGeocodingResult) -> LocationAddress | None:
    """Build a normalized LocationAddress from a reverse geocoding result.

    Args:
        result: Raw address and display name from a provider.

    Returns:
        LocationAddress, or None if no street name could be identified.
    """
    street_name = extract_street_name(result.address)
    if not street_name:
        return None

    return LocationAddress(
        street_name=street_name,
        city=extract_city(result.address),
        state=result.address.state,
        postal_code=result.address.postcode,
        full_address=result.display_name,
    )
