"""Geographic utility functions."""

import math

from .models import Coordinate

METERS_PER_DEGREE = 111000  # rough length of one degree of latitude


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate distance between two points in meters using Haversine formula"""
    R = 6371000  # Earth's radius in meters

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = (math.sin(delta_phi / 2) ** 2 +
         math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2)
    a = min(1.0, max(0.0, a))  # rounding can push antipodal points past 1
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return R * c


def distance_between(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance between two coordinates in meters"""
    return haversine_distance(a.lat, a.lon, b.lat, b.lon)


def bearing_between(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate bearing from point 1 to point 2 in degrees (0-360, 0=North)"""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_lambda = math.radians(lon2 - lon1)

    x = math.sin(delta_lambda) * math.cos(phi2)
    y = (math.cos(phi1) * math.sin(phi2) -
         math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda))

    bearing = math.degrees(math.atan2(x, y))
    return (bearing + 360) % 360


def bearing_to_compass(bearing: float) -> str:
    """Convert bearing to compass direction"""
    directions = ["north", "northeast", "east", "southeast",
                  "south", "southwest", "west", "northwest"]
    index = round(bearing / 45) % 8
    return directions[index]


def offset_coordinate(origin: Coordinate, distance: float, angle: float) -> Coordinate:
    """Move a coordinate by distance meters along angle (radians, 0=North).

    Flat-earth approximation, only good at city scale.
    """
    delta_lat = distance * math.cos(angle) / METERS_PER_DEGREE
    delta_lon = distance * math.sin(angle) / (METERS_PER_DEGREE * math.cos(math.radians(origin.lat)))
    return Coordinate(origin.lat + delta_lat, origin.lon + delta_lon)


def interpolate(start: Coordinate, end: Coordinate, fraction: float) -> Coordinate:
    """Linear lat/lon interpolation between two coordinates"""
    return Coordinate(
        start.lat + (end.lat - start.lat) * fraction,
        start.lon + (end.lon - start.lon) * fraction,
    )


def path_length(points: list[Coordinate]) -> float:
    """Sum of consecutive-pair distances along a path in meters"""
    return sum(distance_between(points[i], points[i + 1]) for i in range(len(points) - 1))
