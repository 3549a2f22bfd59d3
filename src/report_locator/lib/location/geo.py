"""Great-circle distance, radius bounding boxes, and coordinate display formatting."""

import math

from report_locator.lib.location.types import LocationCoordinates

EARTH_RADIUS_KM = 6371.0

# Rough length of one degree of latitude
KM_PER_DEGREE = 111.0


def distance_km(a: LocationCoordinates, b: LocationCoordinates) -> float:
    """Haversine great-circle distance between two points in kilometers."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = math.radians(b.latitude - a.latitude)
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def is_within_radius(a: LocationCoordinates, b: LocationCoordinates, radius_km: float) -> bool:
    """Whether two points lie within ``radius_km`` of each other."""
    return distance_km(a, b) <= radius_km


def bounding_box(center: LocationCoordinates, radius_km: float) -> tuple[float, float, float, float]:
    """Approximate box around a point, for coarse "nearby" queries.

    Longitude span is scaled by the cosine of the latitude. Results are
    clamped to valid WGS84 ranges.

    Args:
        center: Box center.
        radius_km: Half-width of the box in kilometers.

    Returns:
        ``(min_lat, min_lon, max_lat, max_lon)``.

    Raises:
        ValueError: If ``radius_km`` is negative.
    """
    if radius_km < 0:
        msg = f"radius_km must be non-negative, got {radius_km}"
        raise ValueError(msg)

    lat_delta = radius_km / KM_PER_DEGREE
    cos_lat = math.cos(math.radians(center.latitude))
    lon_delta = 180.0 if cos_lat < 1e-12 else radius_km / (KM_PER_DEGREE * cos_lat)

    return (
        max(center.latitude - lat_delta, -90.0),
        max(center.longitude - lon_delta, -180.0),
        min(center.latitude + lat_delta, 90.0),
        min(center.longitude + lon_delta, 180.0),
    )


def format_coordinates(coords: LocationCoordinates) -> str:
    """Format coordinates for display as ``"lat, lon"`` with six decimals."""
    return f"{coords.latitude:.6f}, {coords.longitude:.6f}"
