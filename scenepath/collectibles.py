"""Procedural placement of collectible points along a themed route."""

import math
import queue
import random
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Optional

from .config import CONFIG
from .geo import offset_coordinate
from .logger import Logger
from .models import (
    CollectibleCategory,
    CollectiblePoint,
    Coordinate,
    NavigationInstruction,
    SpecialRouteType,
)
from . import policy


@dataclass(frozen=True)
class Refinement:
    """A real-world name found for a generated point, waiting to be applied"""
    session_id: int
    point_id: str
    name: str
    description: str


class CollectibleGenerator:
    """Places collectible points near route instructions.

    poi_search is any object with
    search_nearby(keyword, center, radius_meters) -> list[POIResult].
    When given, each generated point gets a background lookup whose result is
    posted to self.refinements; the generator never patches points itself.
    Lookups share a pool of CONFIG["poi_max_workers"] threads so the POI
    service sees a bounded number of concurrent requests.
    """

    def __init__(self, poi_search=None, rng: Optional[random.Random] = None,
                 logger: Optional[Logger] = None):
        self.poi_search = poi_search
        self.rng = rng or random.Random()
        self.logger = logger or Logger()
        self.refinements: queue.Queue = queue.Queue()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending: list[Future] = []

    def generate(self, theme: SpecialRouteType,
                 instructions: list[NavigationInstruction],
                 session_id: int = 0) -> list[CollectiblePoint]:
        """Collectible points for a route. Empty for the plain route or a route without instructions."""
        if theme == SpecialRouteType.NONE:
            self.logger.log("Plain route, no collectibles")
            return []

        categories = policy.collectible_categories(theme)
        if not categories:
            self.logger.log("Theme has no collectible categories", {"theme": theme.name})
            return []
        if not instructions:
            self.logger.log("Route has no instructions, no collectibles", {"theme": theme.name})
            return []

        points = []
        for index, instruction in enumerate(instructions):
            if index % 2 == 1 or index % 3 == 2:
                category = self.rng.choice(categories)
                points.append(self._place(instruction.coordinate, category))

        extra_count = max(CONFIG["min_extra_collectibles"], len(instructions) // 3)
        for _ in range(extra_count):
            instruction = self.rng.choice(instructions)
            category = self.rng.choice(categories)
            points.append(self._place(instruction.coordinate, category))

        self.logger.log("Generated collectibles", {
            "theme": theme.name,
            "instructions": len(instructions),
            "points": len(points),
            "extra": extra_count,
        })

        if self.poi_search is not None:
            for point in points:
                self._start_refinement(session_id, point)

        return points

    def _place(self, origin: Coordinate, category: CollectibleCategory) -> CollectiblePoint:
        """One point at a random bearing, 50-200m from origin, with a fallback name"""
        distance = self.rng.uniform(CONFIG["collectible_min_offset"], CONFIG["collectible_max_offset"])
        angle = self.rng.uniform(0, 2 * math.pi)
        return CollectiblePoint(
            name=self.rng.choice(policy.category_fallback_names(category)),
            category=category,
            coordinate=offset_coordinate(origin, distance, angle),
        )

    def _start_refinement(self, session_id: int, point: CollectiblePoint):
        keyword = self.rng.choice(policy.category_keywords(point.category))
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=CONFIG["poi_max_workers"], thread_name_prefix="poi-lookup"
            )
        self._pending = [future for future in self._pending if not future.done()]
        self._pending.append(self._executor.submit(self._refine, session_id, point, keyword))

    def _refine(self, session_id: int, point: CollectiblePoint, keyword: str):
        """Look up a real POI near the point. Runs off the main context."""
        try:
            results = self.poi_search.search_nearby(keyword, point.coordinate, CONFIG["poi_search_radius"])
        except Exception as e:
            # Best effort: the fallback name stays
            self.logger.warning("POI search failed", {"point": point.name, "keyword": keyword, "error": str(e)})
            return

        if not results:
            return

        poi = results[0]
        description = point.category.default_description
        if poi.phone_number:
            description += f" (电话: {poi.phone_number})"
        self.refinements.put(Refinement(
            session_id=session_id,
            point_id=point.id,
            name=poi.name or point.name,
            description=description,
        ))

    @property
    def pending_lookups(self) -> int:
        return sum(1 for future in self._pending if not future.done())

    def wait_for_refinements(self, timeout: Optional[float] = None):
        """Block until every lookup started so far has finished, or timeout seconds pass"""
        wait(self._pending, timeout)
        self._pending = [future for future in self._pending if not future.done()]

    def cancel_pending(self):
        """Drop lookups that have not started yet. Running ones finish and are ignored."""
        for future in self._pending:
            future.cancel()
        self._pending = [future for future in self._pending if not future.done()]

    def close(self):
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None
        self._pending = []
