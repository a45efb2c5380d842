"""Directions and POI search backends over HTTP.

Both adapters turn every transport or payload problem into ProviderUnavailable;
callers decide how to fall back.
"""

import requests

from .config import CONFIG
from .errors import ProviderUnavailable
from .models import Coordinate, POIResult, ProviderRoute, ProviderStep, TransportType


class OSRMDirections:
    """Directions provider backed by an OSRM server"""

    PROFILES = {
        TransportType.WALKING: "foot",
        TransportType.DRIVING: "driving",
    }

    def __init__(self, base_url: str = None, timeout: float = None):
        self.base_url = (base_url or CONFIG["osrm_url"]).rstrip("/")
        self.timeout = timeout or CONFIG["provider_timeout"]

    def request_route(self, start: Coordinate, end: Coordinate,
                      transport_type: TransportType,
                      alternatives: bool = True) -> list[ProviderRoute]:
        """Fetch route candidates between two points, best first"""
        profile = self.PROFILES.get(transport_type)
        if profile is None:
            raise ProviderUnavailable(f"OSRM has no profile for {transport_type.name}")

        url = (f"{self.base_url}/route/v1/{profile}/"
               f"{start.lon},{start.lat};{end.lon},{end.lat}")
        params = {
            "alternatives": "true" if alternatives else "false",
            "steps": "true",
            "overview": "full",
            "geometries": "geojson",
        }
        try:
            response = requests.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderUnavailable(f"Directions request failed: {e}") from e

        if data.get("code") != "Ok":
            raise ProviderUnavailable(f"Directions error: {data.get('code')} {data.get('message', '')}".strip())

        try:
            return [self._parse_route(route) for route in data.get("routes", [])]
        except (KeyError, TypeError, IndexError) as e:
            raise ProviderUnavailable(f"Malformed directions response: {e}") from e

    @classmethod
    def _parse_route(cls, route: dict) -> ProviderRoute:
        steps = []
        for leg in route.get("legs", []):
            for step in leg.get("steps", []):
                steps.append(ProviderStep(
                    instruction_text=cls._step_text(step),
                    road_name=step.get("name") or "",
                    distance_meters=float(step["distance"]),
                    polyline_points=_geojson_points(step.get("geometry")),
                ))
        return ProviderRoute(
            distance_meters=float(route["distance"]),
            travel_time_seconds=float(route["duration"]),
            steps=tuple(steps),
            polyline=_geojson_points(route.get("geometry")),
        )

    @staticmethod
    def _step_text(step: dict) -> str:
        """Maneuver text such as 'turn left', without the road name"""
        maneuver = step.get("maneuver", {})
        kind = maneuver.get("type", "")
        modifier = maneuver.get("modifier")
        if kind in ("depart", "arrive") or not modifier:
            return kind
        return f"{kind} {modifier}"


def _geojson_points(geometry) -> tuple[Coordinate, ...]:
    if not geometry:
        return ()
    return tuple(Coordinate(lat=float(lat), lon=float(lon)) for lon, lat in geometry["coordinates"])


class OverpassPOISearch:
    """POI search provider backed by the Overpass API"""

    MAX_RESULTS = 5

    def __init__(self, url: str = None, timeout: float = None):
        self.url = url or CONFIG["overpass_url"]
        self.timeout = timeout or CONFIG["provider_timeout"]

    def search_nearby(self, keyword: str, center: Coordinate, radius_meters: float) -> list[POIResult]:
        """Named nodes matching keyword within radius of center, as returned by Overpass"""
        pattern = keyword.replace("\\", "").replace('"', "")
        query = f"""
        [out:json][timeout:{int(self.timeout)}];
        node["name"~"{pattern}",i](around:{radius_meters:.0f},{center.lat},{center.lon});
        out body {self.MAX_RESULTS};
        """
        try:
            response = requests.post(self.url, data={"data": query}, timeout=self.timeout + 5)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise ProviderUnavailable(f"POI search failed: {e}") from e

        results = []
        for element in data.get("elements", []):
            tags = element.get("tags") or {}
            name = tags.get("name")
            if not name:
                continue
            results.append(POIResult(
                name=name,
                phone_number=tags.get("phone") or tags.get("contact:phone"),
            ))
        return results
