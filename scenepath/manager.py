"""Collection manager: live collectibles for a navigation session and the persisted collection."""

import queue
from collections import Counter
from dataclasses import replace
from typing import Optional

from .collectibles import CollectibleGenerator
from .config import CONFIG
from .errors import AlreadyCollected, StoreReadFailed, StoreWriteFailed
from .geo import distance_between
from .logger import Logger
from .models import (
    CollectibleItem,
    CollectiblePoint,
    CollectionStats,
    Coordinate,
    NavigationInstruction,
    SpecialRouteType,
)


class CollectionManager:
    """Owns available collectibles and collected items for a session.

    All mutation happens on the caller's thread. Background POI lookups only
    queue results; apply_refinements() folds them in.
    """

    def __init__(self, store, generator: Optional[CollectibleGenerator] = None,
                 collection_radius: Optional[float] = None,
                 logger: Optional[Logger] = None):
        self.store = store
        self.logger = logger or Logger()
        self.generator = generator or CollectibleGenerator(logger=self.logger)
        self.collection_radius = collection_radius if collection_radius is not None else CONFIG["collection_radius"]
        self.duplicate_radius = CONFIG["duplicate_radius"]

        self.available_collectibles: list[CollectiblePoint] = []
        self.collected_items: list[CollectibleItem] = []
        self.current_location: Optional[Coordinate] = None
        self.theme = SpecialRouteType.NONE
        self.session_id = 0

        self.load_persisted()

    def load_persisted(self):
        """Load collected items newest first. A failing store yields an empty collection."""
        try:
            items = self.store.fetch_all()
        except StoreReadFailed as e:
            self.logger.warning("Failed to load collected items", {"error": str(e)})
            self.collected_items = []
            return
        self.collected_items = sorted(items, key=lambda item: item.collected_at, reverse=True)
        self.logger.log("Loaded collected items", {"count": len(self.collected_items)})

    # Session lifecycle

    def start_session(self, theme: SpecialRouteType,
                      instructions: list[NavigationInstruction]) -> list[CollectiblePoint]:
        """Generate collectibles for a route that is starting navigation"""
        self.session_id += 1
        self.theme = theme
        if theme == SpecialRouteType.NONE:
            self.available_collectibles = []
            return []

        self.available_collectibles = self.generator.generate(theme, instructions, self.session_id)
        self.refresh()
        return self.available_collectibles

    def end_session(self):
        """Drop session collectibles. Late POI results for this session are ignored."""
        self.session_id += 1
        self.generator.cancel_pending()
        self.theme = SpecialRouteType.NONE
        self.available_collectibles = []
        self.current_location = None

    def clear_all_collectibles(self):
        self.available_collectibles = []
        self.logger.log("Cleared all collectibles")

    # Location and proximity

    def set_location(self, coordinate: Coordinate):
        self.current_location = coordinate

    def update_location(self, coordinate: Coordinate) -> list[CollectiblePoint]:
        """Record the position and report collectibles now in range"""
        self.set_location(coordinate)
        nearby = self.in_range(coordinate)
        if nearby:
            self.logger.log("Collectibles in range", {
                "location": coordinate.to_dict(),
                "points": [
                    {"name": point.name, "distance_m": round(distance_between(coordinate, point.coordinate))}
                    for point in nearby
                ],
            })
        return nearby

    def in_range(self, coordinate: Coordinate) -> list[CollectiblePoint]:
        """Uncollected points within the collection radius of coordinate"""
        return [
            point for point in self.available_collectibles
            if not point.is_collected
            and distance_between(coordinate, point.coordinate) <= self.collection_radius
        ]

    def nearest_collectible(self, coordinate: Coordinate) -> Optional[tuple[CollectiblePoint, float]]:
        """Closest uncollected point and its distance, or None"""
        candidates = [
            (point, distance_between(coordinate, point.coordinate))
            for point in self.available_collectibles
            if not point.is_collected
        ]
        if not candidates:
            return None
        return min(candidates, key=lambda pair: pair[1])

    # Collection

    def _matching_item(self, point: CollectiblePoint) -> Optional[CollectibleItem]:
        """A collected item of the same category within the duplicate radius"""
        for item in self.collected_items:
            if (item.category == point.category
                    and distance_between(item.coordinate, point.coordinate) < self.duplicate_radius):
                return item
        return None

    def collect(self, point: CollectiblePoint,
                theme: Optional[SpecialRouteType] = None) -> CollectibleItem:
        """Persist a collectible.

        Raises AlreadyCollected when the same place was collected before (no
        store write) and StoreWriteFailed when the commit fails (no state change).
        """
        theme = theme or self.theme
        existing = self._matching_item(point)
        if existing is not None:
            self.logger.log("Already collected", {"point": point.name, "existing": existing.name})
            raise AlreadyCollected(f"{point.name} was already collected as {existing.name}", existing)

        item = CollectibleItem.create(point, theme)
        try:
            self.store.insert(item)
            self.store.commit()
        except StoreWriteFailed as e:
            self.logger.warning("Collect failed", {"point": point.name, "error": str(e)})
            raise

        self.collected_items.insert(0, item)
        self.refresh()
        self.logger.log("Collected", {
            "name": item.name,
            "category": item.category.name,
            "total": len(self.collected_items),
        })
        return item

    def refresh(self):
        """Recompute is_collected for every available point from collected items"""
        self.available_collectibles = [
            replace(point, is_collected=self._matching_item(point) is not None)
            for point in self.available_collectibles
        ]

    def refresh_collection_status(self):
        self.load_persisted()
        self.refresh()

    def apply_refinements(self) -> int:
        """Apply queued POI names to current points. Returns how many were applied."""
        applied = 0
        while True:
            try:
                refinement = self.generator.refinements.get_nowait()
            except queue.Empty:
                break
            if refinement.session_id != self.session_id:
                continue
            for index, point in enumerate(self.available_collectibles):
                if point.id == refinement.point_id:
                    self.available_collectibles[index] = replace(
                        point, name=refinement.name, description=refinement.description
                    )
                    applied += 1
                    break
        if applied:
            self.logger.log("Applied POI names", {"count": applied})
        return applied

    # Statistics

    def stats(self) -> CollectionStats:
        by_category = Counter(item.category for item in self.collected_items)
        return CollectionStats(total=len(self.collected_items), by_category=dict(by_category))
