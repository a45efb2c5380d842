"""Tests for collectible placement."""
import random
import threading
import time
from unittest.mock import MagicMock

import pytest

from scenepath import policy
from scenepath.collectibles import CollectibleGenerator
from scenepath.config import CONFIG
from scenepath.errors import ProviderUnavailable
from scenepath.geo import distance_between
from scenepath.models import CollectibleCategory, POIResult, SpecialRouteType

from conftest import make_instructions


def expected_count(n):
    along_route = sum(1 for i in range(n) if i % 2 == 1 or i % 3 == 2)
    return along_route + max(2, n // 3)


class TestGenerate:
    def test_plain_route_spawns_nothing(self, rng, logger):
        generator = CollectibleGenerator(rng=rng, logger=logger)
        for n in range(0, 12):
            assert generator.generate(SpecialRouteType.NONE, make_instructions(n)) == []

    def test_no_instructions(self, rng, logger):
        generator = CollectibleGenerator(rng=rng, logger=logger)
        assert generator.generate(SpecialRouteType.FOOD, []) == []

    @pytest.mark.parametrize("theme", [SpecialRouteType.SHOPPING, SpecialRouteType.NIGHTLIFE])
    def test_unmapped_theme_spawns_nothing(self, theme, rng, logger):
        generator = CollectibleGenerator(rng=rng, logger=logger)
        assert generator.generate(theme, make_instructions(8)) == []

    @pytest.mark.parametrize("theme", [
        SpecialRouteType.FOOD, SpecialRouteType.SCENIC, SpecialRouteType.ATTRACTIONS,
    ])
    def test_count_and_categories(self, theme, logger):
        generator = CollectibleGenerator(rng=random.Random(7), logger=logger)
        allowed = set(policy.collectible_categories(theme))
        for n in range(1, 20):
            points = generator.generate(theme, make_instructions(n))
            assert len(points) == expected_count(n)
            assert len(points) >= max(2, n // 3)
            assert {p.category for p in points} <= allowed
            assert all(not p.is_collected for p in points)

    def test_food_route_with_eight_instructions(self, rng, logger):
        points = CollectibleGenerator(rng=rng, logger=logger).generate(
            SpecialRouteType.FOOD, make_instructions(8)
        )
        # indices 1, 2, 3, 5, 7 plus two extras
        assert len(points) == 7
        assert {p.category for p in points} <= {CollectibleCategory.FOOD, CollectibleCategory.CULTURE}
        for point in points:
            assert point.name in policy.category_fallback_names(point.category)
            assert point.description == point.category.default_description

    def test_offset_from_instruction(self, rng, logger):
        instructions = make_instructions(1)
        origin = instructions[0].coordinate
        generator = CollectibleGenerator(rng=rng, logger=logger)
        for _ in range(20):
            for point in generator.generate(SpecialRouteType.SCENIC, instructions):
                assert 49 <= distance_between(origin, point.coordinate) <= 203

    def test_seeded_generation_is_repeatable(self, logger):
        instructions = make_instructions(6)
        a = CollectibleGenerator(rng=random.Random(3), logger=logger).generate(SpecialRouteType.FOOD, instructions)
        b = CollectibleGenerator(rng=random.Random(3), logger=logger).generate(SpecialRouteType.FOOD, instructions)
        assert [(p.name, p.coordinate) for p in a] == [(p.name, p.coordinate) for p in b]


class TestRefinement:
    def test_found_poi_is_queued(self, rng, logger):
        poi_search = MagicMock()
        poi_search.search_nearby.return_value = [POIResult("Old Beijing Noodles", "010-1234")]
        generator = CollectibleGenerator(poi_search, rng=rng, logger=logger)

        points = generator.generate(SpecialRouteType.FOOD, make_instructions(4), session_id=5)
        generator.wait_for_refinements(timeout=5)

        refinements = []
        while not generator.refinements.empty():
            refinements.append(generator.refinements.get_nowait())
        assert len(refinements) == len(points)
        assert {r.point_id for r in refinements} == {p.id for p in points}
        for refinement in refinements:
            assert refinement.session_id == 5
            assert refinement.name == "Old Beijing Noodles"
            assert refinement.description.endswith("(电话: 010-1234)")

        for call in poi_search.search_nearby.call_args_list:
            keyword, _, radius = call.args
            assert radius == 200
            assert any(keyword in policy.category_keywords(c) for c in CollectibleCategory)

    def test_no_phone_uses_default_description(self, rng, logger):
        poi_search = MagicMock()
        poi_search.search_nearby.return_value = [POIResult("Lakeside Park")]
        generator = CollectibleGenerator(poi_search, rng=rng, logger=logger)

        points = generator.generate(SpecialRouteType.SCENIC, make_instructions(2))
        generator.wait_for_refinements(timeout=5)

        by_id = {p.id: p for p in points}
        refinement = generator.refinements.get_nowait()
        assert refinement.description == by_id[refinement.point_id].category.default_description

    def test_failures_and_empty_results_queue_nothing(self, rng, logger):
        poi_search = MagicMock()
        poi_search.search_nearby.side_effect = [ProviderUnavailable("down"), []] * 10
        generator = CollectibleGenerator(poi_search, rng=rng, logger=logger)

        generator.generate(SpecialRouteType.FOOD, make_instructions(3))
        generator.wait_for_refinements(timeout=5)

        assert generator.refinements.empty()


class SlowPOISearch:
    """Records how many lookups run at the same time"""

    def __init__(self, delay=0.02):
        self.delay = delay
        self.active = 0
        self.peak = 0
        self.calls = 0
        self._lock = threading.Lock()

    def search_nearby(self, keyword, center, radius_meters):
        with self._lock:
            self.active += 1
            self.calls += 1
            self.peak = max(self.peak, self.active)
        time.sleep(self.delay)
        with self._lock:
            self.active -= 1
        return [POIResult("Corner Cafe")]


class TestLookupPool:
    def test_concurrency_is_bounded(self, rng, logger):
        poi_search = SlowPOISearch()
        generator = CollectibleGenerator(poi_search, rng=rng, logger=logger)
        threads_before = threading.active_count()

        total = 0
        for session_id in range(3):
            total += len(generator.generate(SpecialRouteType.FOOD, make_instructions(60), session_id))
            assert threading.active_count() - threads_before <= CONFIG["poi_max_workers"]

        generator.wait_for_refinements(timeout=30)
        assert poi_search.calls == total
        assert 1 <= poi_search.peak <= CONFIG["poi_max_workers"]
        assert generator.pending_lookups == 0
        assert generator.refinements.qsize() == total
        generator.close()

    def test_cancel_pending_skips_queued_lookups(self, rng, logger):
        poi_search = SlowPOISearch(delay=0.05)
        generator = CollectibleGenerator(poi_search, rng=rng, logger=logger)

        points = generator.generate(SpecialRouteType.SCENIC, make_instructions(60))
        generator.cancel_pending()
        generator.wait_for_refinements(timeout=10)

        assert poi_search.calls < len(points)
        assert generator.pending_lookups == 0
        generator.close()
