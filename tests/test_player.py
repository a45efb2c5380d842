"""Tests for the route simulation player."""
import pytest

from scenepath.geo import distance_between, path_length
from scenepath.models import Coordinate, TransportType
from scenepath.player import RouteSimulationPlayer, resample_path
from scenepath.synthesizer import RouteSynthesizer

from conftest import BEIJING_END, BEIJING_START

# ~111 m north, then ~85 m east, then ~37 m north
POLYLINE = [
    Coordinate(39.9000, 116.4000),
    Coordinate(39.9010, 116.4000),
    Coordinate(39.9010, 116.4010),
    Coordinate(39.90133, 116.4010),
]


def loaded_player(logger, points=POLYLINE, spacing=20):
    player = RouteSimulationPlayer(step_spacing=spacing, logger=logger)
    player.load_coordinates(points)
    return player


class TestResample:
    @pytest.mark.parametrize("spacing", [5, 13, 20, 47])
    def test_spacing_bound_and_endpoints(self, spacing):
        path = resample_path(POLYLINE, spacing)
        assert path[0] == POLYLINE[0]
        assert path[-1] == POLYLINE[-1]
        for a, b in zip(path, path[1:]):
            assert distance_between(a, b) <= spacing + 1e-3

    def test_keeps_vertices(self):
        path = resample_path(POLYLINE, 20)
        for vertex in POLYLINE:
            assert vertex in path

    def test_total_length_preserved(self):
        assert path_length(resample_path(POLYLINE, 10)) == pytest.approx(path_length(POLYLINE), rel=1e-6)

    def test_degenerate_inputs(self):
        assert resample_path([], 20) == []
        assert resample_path(POLYLINE[:1], 20) == POLYLINE[:1]
        assert resample_path([POLYLINE[0], POLYLINE[0]], 20) == [POLYLINE[0]]


class TestStepping:
    def test_empty_player(self, logger):
        player = RouteSimulationPlayer(logger=logger)
        assert player.current_location is None
        assert player.is_finished
        assert not player.step_forward()
        assert not player.step_backward()
        assert player.completion_fraction() == 0.0

    def test_forward_to_end(self, logger):
        player = loaded_player(logger)
        steps = 0
        while player.step_forward():
            steps += 1
        assert steps == len(player.path) - 1
        assert player.is_finished
        assert player.current_location == POLYLINE[-1]
        assert player.completion_fraction() == 1.0
        assert player.remaining_distance() == 0
        assert not player.step_forward()

    def test_backward_stops_at_start(self, logger):
        player = loaded_player(logger)
        assert not player.step_backward()
        player.step_forward()
        assert player.step_backward()
        assert player.current_index == 0

    def test_heading_follows_path(self, logger):
        player = loaded_player(logger)
        assert player.current_heading == pytest.approx(0, abs=0.01)
        while player.current_location != POLYLINE[1]:
            player.step_forward()
        assert player.current_heading == pytest.approx(90, abs=0.1)

    def test_observers(self, logger):
        player = RouteSimulationPlayer(step_spacing=20, logger=logger)
        seen = []
        callback = lambda coordinate, index: seen.append(index)
        player.add_observer(callback)
        player.load_coordinates(POLYLINE)
        player.step_forward()
        player.step_forward()
        player.step_backward()
        assert seen == [0, 1, 2, 1]

        player.remove_observer(callback)
        player.step_forward()
        assert seen == [0, 1, 2, 1]

    def test_progress(self, logger):
        player = loaded_player(logger)
        total = player.remaining_distance()
        assert total == pytest.approx(path_length(POLYLINE))
        player.step_forward()
        assert 0 < player.completion_fraction() < 1
        assert player.remaining_distance() < total
        assert player.estimated_remaining_time() == pytest.approx(player.remaining_distance() / 5.0)
        assert player.estimated_remaining_time(average_speed=10) == pytest.approx(player.remaining_distance() / 10)

    def test_reset(self, logger):
        player = loaded_player(logger)
        player.step_forward()
        player.reset()
        assert player.current_index == 0
        assert player.current_location == POLYLINE[0]

    def test_load_simulated_route(self, logger):
        [route, *_] = RouteSynthesizer(logger=logger).request_routes(
            BEIJING_START, BEIJING_END, TransportType.WALKING
        )
        player = RouteSimulationPlayer(logger=logger)
        player.load(route)
        assert player.current_location == BEIJING_START
        assert len(player.path) > len(route.instructions)


class TestPlayback:
    def test_plays_to_end(self, logger):
        player = loaded_player(logger)
        player.play(speed=200)
        player.wait(timeout=10)
        assert player.is_finished
        assert not player.is_playing

    def test_stop_cancels(self, logger):
        player = loaded_player(logger)
        player.play(speed=0.5)
        assert player.is_playing
        player.stop()
        assert not player.is_playing
        assert player.current_index == 0

    def test_play_when_finished_is_noop(self, logger):
        player = loaded_player(logger)
        while player.step_forward():
            pass
        player.play(speed=10)
        assert not player.is_playing

    def test_stop_from_observer(self, logger):
        player = loaded_player(logger)
        player.add_observer(lambda coordinate, index: index == 2 and player.stop())
        player.play(speed=200)
        player.wait(timeout=10)
        assert player.current_index == 2
        assert not player.is_playing

    @pytest.mark.parametrize("speed", [0, -2.0])
    def test_non_positive_speed_rejected(self, speed, logger):
        player = loaded_player(logger)
        with pytest.raises(ValueError):
            player.play(speed=speed)
        assert not player.is_playing
        assert player.current_index == 0
