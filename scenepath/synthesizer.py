"""Themed route synthesis: refine provider routes, or simulate them when no provider answers."""

import math
import queue
import threading
from typing import Callable, Optional

from .config import CONFIG
from .geo import haversine_distance, interpolate
from .logger import Logger
from .models import (
    Coordinate,
    NavigationInstruction,
    ProviderRoute,
    RouteInfo,
    RouteType,
    SpecialRouteType,
    TransportType,
)
from . import policy

START_TEXT, START_ICON = "开始导航", "location.fill"
ARRIVE_TEXT, ARRIVE_ICON = "到达目的地", "flag.fill"
LEFT_TEXT, LEFT_ICON = "向左转", "arrow.turn.up.left"
RIGHT_TEXT, RIGHT_ICON = "向右转", "arrow.turn.up.right"
STRAIGHT_TEXT, STRAIGHT_ICON = "继续直行", "arrow.up"
FORWARD_TEXT = "继续前进"

# Scripted fallback used for simulated routes, one entry per interpolated point
SIMULATED_SCRIPT = (
    (START_TEXT, START_ICON, "0m"),
    (STRAIGHT_TEXT, STRAIGHT_ICON, "200m"),
    (RIGHT_TEXT, RIGHT_ICON, "150m"),
    (STRAIGHT_TEXT, STRAIGHT_ICON, "300m"),
    (LEFT_TEXT, LEFT_ICON, "100m"),
    (STRAIGHT_TEXT, STRAIGHT_ICON, "250m"),
    (RIGHT_TEXT, RIGHT_ICON, "80m"),
    (ARRIVE_TEXT, ARRIVE_ICON, "50m"),
)

LEFT_MARKERS = ("左转", "左", "left")
RIGHT_MARKERS = ("右转", "右", "right")
STRAIGHT_MARKERS = ("直行", "继续", "straight", "continue")


def format_distance(meters: float) -> str:
    return f"{meters / 1000:.1f}公里"


def format_duration(minutes: float) -> str:
    return f"{minutes:.0f}分钟"


def price_text(transport_type: TransportType, distance_km: float, slot: int) -> str:
    """Driving is priced per km by candidate slot, transit is flat, walking is free"""
    if transport_type == TransportType.DRIVING:
        rates = CONFIG["driving_price_rates"]
        rate = rates[min(slot, len(rates) - 1)]
        return f"¥{math.floor(distance_km * rate)}"
    if transport_type == TransportType.PUBLIC_TRANSPORT:
        return CONFIG["public_transport_price"]
    return ""


def route_type_for_slot(index: int, theme: SpecialRouteType) -> RouteType:
    if theme == SpecialRouteType.NONE:
        if index == 0:
            return RouteType.FASTEST
        if index == 1:
            return RouteType.ALTERNATIVE
        return RouteType.SCENIC
    return RouteType.RECOMMENDED if index == 0 else RouteType.ALTERNATIVE


def classify_step(raw_text: str) -> tuple[str, str]:
    """Map a raw provider instruction to (text, icon) by substring match"""
    lowered = raw_text.lower()
    if any(marker in lowered for marker in LEFT_MARKERS):
        return LEFT_TEXT, LEFT_ICON
    if any(marker in lowered for marker in RIGHT_MARKERS):
        return RIGHT_TEXT, RIGHT_ICON
    if any(marker in lowered for marker in STRAIGHT_MARKERS):
        return STRAIGHT_TEXT, STRAIGHT_ICON
    return (raw_text or FORWARD_TEXT), STRAIGHT_ICON


def build_instructions(route: ProviderRoute, fallback: Coordinate) -> list[NavigationInstruction]:
    """One instruction per provider step; first is the start marker, last the arrival"""
    instructions = []
    last_index = len(route.steps) - 1
    for index, step in enumerate(route.steps):
        if index == 0:
            text, icon = START_TEXT, START_ICON
        elif index == last_index:
            text, icon = ARRIVE_TEXT, ARRIVE_ICON
        else:
            # classify the maneuver alone; road names like 左安门 would read as turns
            text, icon = classify_step(step.instruction_text)
            if step.road_name:
                text = f"{text}，进入{step.road_name}"

        if step.polyline_points:
            coordinate = step.polyline_points[0]
        elif route.polyline:
            coordinate = route.polyline[0]
        else:
            coordinate = fallback

        instructions.append(NavigationInstruction(
            instruction_text=text,
            distance_text=f"{step.distance_meters:.0f}m",
            icon_key=icon,
            coordinate=coordinate,
        ))
    return instructions


def simulated_instructions(start: Coordinate, end: Coordinate) -> list[NavigationInstruction]:
    """Canned instruction script spread evenly along the straight line start -> end"""
    count = CONFIG["simulated_instruction_count"]
    instructions = []
    for i in range(count):
        progress = i / (count - 1)
        if i < len(SIMULATED_SCRIPT):
            text, icon, distance = SIMULATED_SCRIPT[i]
        else:
            text, icon, distance = FORWARD_TEXT, STRAIGHT_ICON, "100m"
        instructions.append(NavigationInstruction(
            instruction_text=text,
            distance_text=distance,
            icon_key=icon,
            coordinate=interpolate(start, end, progress),
        ))
    return instructions


class RouteSynthesizer:
    """Produces themed RouteInfo candidates.

    directions is any object with
    request_route(start, end, transport_type, alternatives=True) -> list[ProviderRoute].
    Without one every request is simulated.
    """

    def __init__(self, directions=None, logger: Optional[Logger] = None):
        self.directions = directions
        self.logger = logger or Logger()

    def request_routes(self, start: Coordinate, end: Coordinate,
                       transport_type: TransportType,
                       theme: SpecialRouteType = SpecialRouteType.NONE) -> list[RouteInfo]:
        """Route candidates for one transport type. Never raises, never returns an empty list."""
        if self.directions is None:
            return self.simulate_routes(start, end, transport_type, theme)

        try:
            provider_routes = self.directions.request_route(start, end, transport_type, alternatives=True)
            routes = [
                self._refine(index, route, start, transport_type, theme)
                for index, route in enumerate(provider_routes or [])
            ]
        except Exception as e:
            # Any provider failure degrades to simulation
            self.logger.warning("Directions provider failed, simulating", {
                "transport": transport_type.name,
                "error": str(e),
            })
            return self.simulate_routes(start, end, transport_type, theme)

        if not routes:
            self.logger.warning("Directions provider returned no routes, simulating", {
                "transport": transport_type.name,
            })
            return self.simulate_routes(start, end, transport_type, theme)

        self.logger.log("Routes refined", {
            "transport": transport_type.name,
            "theme": theme.name,
            "count": len(routes),
        })
        return routes

    def _refine(self, index: int, route: ProviderRoute, start: Coordinate,
                transport_type: TransportType, theme: SpecialRouteType) -> RouteInfo:
        route_type = route_type_for_slot(index, theme)
        narrative = policy.route_narrative(theme, route.distance_meters, transport_type, index == 0)
        if theme == SpecialRouteType.NONE:
            description = policy.route_type_description(route_type)
        else:
            description = narrative.description

        return RouteInfo(
            route_type=route_type,
            transport_type=transport_type,
            distance_text=format_distance(route.distance_meters),
            duration_text=format_duration(route.travel_time_seconds / 60),
            price_text=price_text(transport_type, route.distance_meters / 1000, index),
            route=route,
            description=description,
            instructions=tuple(build_instructions(route, start)),
            special_route_type=theme,
            highlights=narrative.highlights,
            difficulty=narrative.difficulty,
        )

    def simulate_routes(self, start: Coordinate, end: Coordinate,
                        transport_type: TransportType,
                        theme: SpecialRouteType = SpecialRouteType.NONE) -> list[RouteInfo]:
        """Straight-line candidates with scripted instructions.

        Three candidates (fastest/shortest/cheapest) for the plain route, two
        (recommended/alternative) inflated by the detour budget for themes.
        """
        distance = haversine_distance(start.lat, start.lon, end.lat, end.lon)
        distance_km = distance / 1000
        base_minutes = max(distance_km * CONFIG["minutes_per_km"][transport_type.key],
                           CONFIG["min_simulated_minutes"])
        instructions = tuple(simulated_instructions(start, end))

        if theme == SpecialRouteType.NONE:
            candidates = [
                (RouteType.FASTEST, 1.0),
                (RouteType.SHORTEST, 0.9),
                (RouteType.CHEAPEST, 1.1),
            ]
        else:
            detour = policy.detour_budget(theme) / 100
            candidates = [
                (RouteType.RECOMMENDED, 1.0 + detour),
                (RouteType.ALTERNATIVE, 1.1 + detour),
            ]

        routes = []
        for slot, (route_type, multiplier) in enumerate(candidates):
            route_distance = distance * multiplier
            narrative = policy.route_narrative(theme, route_distance, transport_type, slot == 0)
            if theme == SpecialRouteType.NONE:
                description = policy.route_type_description(route_type)
            else:
                description = narrative.description
            routes.append(RouteInfo(
                route_type=route_type,
                transport_type=transport_type,
                distance_text=format_distance(route_distance),
                duration_text=format_duration(base_minutes * multiplier),
                price_text=price_text(transport_type, route_distance / 1000, slot),
                route=None,
                description=description,
                instructions=instructions,
                special_route_type=theme,
                highlights=narrative.highlights,
                difficulty=narrative.difficulty,
            ))

        self.logger.log("Simulated routes", {
            "transport": transport_type.name,
            "theme": theme.name,
            "straight_line_m": round(distance, 1),
            "count": len(routes),
        })
        return routes

    def request_all_transport_routes(
        self, start: Coordinate, end: Coordinate,
        theme: SpecialRouteType = SpecialRouteType.NONE,
        on_complete: Optional[Callable[[dict], None]] = None,
    ) -> dict[TransportType, list[RouteInfo]]:
        """Search every transport type concurrently and wait for all of them.

        on_complete fires once, after the last transport type has reported.
        """
        results: queue.Queue = queue.Queue()

        def worker(transport_type: TransportType):
            transport_routes: list[RouteInfo] = []
            try:
                transport_routes = self.request_routes(start, end, transport_type, theme)
            except Exception as e:
                self.logger.warning("Route search failed", {
                    "transport": transport_type.name,
                    "error": str(e),
                })
            finally:
                # the loop below waits for one result per transport type
                results.put((transport_type, transport_routes))

        threads = [
            threading.Thread(target=worker, args=(transport_type,), daemon=True)
            for transport_type in TransportType
        ]
        for thread in threads:
            thread.start()

        routes: dict[TransportType, list[RouteInfo]] = {}
        for _ in threads:
            transport_type, transport_routes = results.get()
            routes[transport_type] = transport_routes
        for thread in threads:
            thread.join()

        if on_complete:
            on_complete(routes)
        return routes
