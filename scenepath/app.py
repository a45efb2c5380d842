"""Main ScenePath application: route search, navigation sessions and simulated walks."""

import random
import time
from typing import Optional

from .collectibles import CollectibleGenerator
from .config import CONFIG
from .errors import AlreadyCollected, StoreWriteFailed
from .logger import Logger
from .manager import CollectionManager
from .models import CollectibleItem, CollectiblePoint, Coordinate, RouteInfo, SpecialRouteType, TransportType
from .player import RouteSimulationPlayer
from .providers import OSRMDirections, OverpassPOISearch
from .store import CollectionDB
from .synthesizer import RouteSynthesizer


class ScenePath:
    """Main application"""

    def __init__(self, db_path: Optional[str] = None, log_path: Optional[str] = None,
                 offline: bool = False, collection_radius: Optional[float] = None,
                 seed: Optional[int] = None):
        self.logger = Logger(log_path)
        directions = None if offline else OSRMDirections()
        poi_search = None if offline else OverpassPOISearch()

        self.synthesizer = RouteSynthesizer(directions, logger=self.logger.child("routes"))
        self.store = CollectionDB(db_path or CONFIG["db_path"])
        self.generator = CollectibleGenerator(
            poi_search, rng=random.Random(seed), logger=self.logger.child("collectibles")
        )
        self.manager = CollectionManager(
            self.store, self.generator,
            collection_radius=collection_radius,
            logger=self.logger.child("collection"),
        )
        self.player = RouteSimulationPlayer(logger=self.logger.child("player"))
        self.player.add_observer(self._on_position)

        self.route: Optional[RouteInfo] = None

    def search(self, start: Coordinate, end: Coordinate,
               theme: SpecialRouteType = SpecialRouteType.NONE) -> dict[TransportType, list[RouteInfo]]:
        """Route candidates for every transport type"""
        self.logger.log("Searching routes", {
            "start": start.to_dict(),
            "end": end.to_dict(),
            "theme": theme.name,
        })
        return self.synthesizer.request_all_transport_routes(start, end, theme)

    def begin_navigation(self, route: RouteInfo) -> list[CollectiblePoint]:
        """Start a session on route: spawn collectibles and load the player"""
        self.route = route
        collectibles = self.manager.start_session(route.special_route_type, list(route.instructions))
        self.player.load(route)
        return collectibles

    def end_navigation(self):
        self.player.stop()
        self.manager.end_session()
        self.route = None

    def _on_position(self, coordinate: Coordinate, index: int):
        self.manager.update_location(coordinate)

    def collect_nearby(self) -> list[CollectibleItem]:
        """Collect every point in range of the current location"""
        location = self.manager.current_location
        if location is None:
            return []
        collected = []
        for point in self.manager.in_range(location):
            try:
                collected.append(self.manager.collect(point))
            except AlreadyCollected:
                continue
            except StoreWriteFailed as e:
                self.logger.warning("Could not save collectible", {"name": point.name, "error": str(e)})
        return collected

    def simulate_walk(self, speed: float = 0.0, auto_collect: bool = True) -> list[CollectibleItem]:
        """Step the player to the end of the route on this thread.

        speed is steps per second; 0 runs without pausing.
        """
        collected = []
        if auto_collect:
            collected.extend(self.collect_nearby())
        while self.player.step_forward():
            self.manager.apply_refinements()
            if auto_collect:
                collected.extend(self.collect_nearby())
            if speed > 0:
                time.sleep(1.0 / speed)
        self.logger.log("Simulated walk finished", {
            "collected": len(collected),
            "remaining_m": round(self.player.remaining_distance(), 1),
        })
        return collected

    def close(self):
        self.player.stop()
        self.generator.close()
        self.store.close()
        self.logger.close()
