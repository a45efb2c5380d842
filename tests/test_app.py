"""End-to-end tests for the application and CLI, fully offline."""
import sys

from scenepath.__main__ import main
from scenepath.app import ScenePath
from scenepath.logger import Logger
from scenepath.models import RouteType, SpecialRouteType, TransportType

from conftest import BEIJING_END, BEIJING_START


class TestScenePath:
    def test_offline_walk_collects(self, tmp_path):
        app = ScenePath(db_path=str(tmp_path / "c.db"), offline=True, collection_radius=10000, seed=4)
        try:
            routes = app.search(BEIJING_START, BEIJING_END, SpecialRouteType.FOOD)
            route = routes[TransportType.WALKING][0]
            assert route.route_type == RouteType.RECOMMENDED

            collectibles = app.begin_navigation(route)
            assert len(collectibles) == 7
            assert app.player.current_location == BEIJING_START

            collected = app.simulate_walk()
            assert collected
            assert app.player.is_finished
            assert app.manager.stats().total == len(collected)
            # whatever was not collected is a duplicate of something that was
            assert all(p.is_collected for p in app.manager.available_collectibles)

            app.end_navigation()
            assert app.manager.available_collectibles == []
        finally:
            app.close()

    def test_plain_route_has_nothing_to_collect(self, tmp_path):
        app = ScenePath(db_path=str(tmp_path / "c.db"), offline=True, seed=1)
        try:
            route = app.search(BEIJING_START, BEIJING_END)[TransportType.DRIVING][0]
            assert app.begin_navigation(route) == []
            assert app.simulate_walk() == []
        finally:
            app.close()

    def test_collect_nearby_without_location(self, tmp_path):
        app = ScenePath(db_path=str(tmp_path / "c.db"), offline=True)
        try:
            assert app.collect_nearby() == []
        finally:
            app.close()


class TestLogger:
    def test_writes_file_and_calls_back(self, tmp_path):
        seen = []
        log_path = tmp_path / "run.log"
        logger = Logger(str(log_path), callback=lambda message, data: seen.append((message, data)))
        logger.log("Collected", {"name": "茶楼"})
        logger.close()

        text = log_path.read_text(encoding="utf-8")
        assert "ScenePath Log" in text
        assert '"name": "茶楼"' in text
        assert seen == [("Collected", {"name": "茶楼"})]


class TestCLI:
    def test_offline_simulation(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", [
            "scenepath", "39.9042", "116.4074", "39.9142", "116.4174",
            "--theme", "scenic", "--offline", "--simulate", "--seed", "2",
            "--radius", "10000",
            "--db", str(tmp_path / "c.db"),
            "--log", str(tmp_path / "run.log"),
            "--html", str(tmp_path / "map.html"),
        ])
        main()

        out = capsys.readouterr().out
        assert "推荐路线" in out
        assert "Collected" in out
        assert (tmp_path / "map.html").exists()

    def test_stats_only(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", [
            "scenepath", "--stats", "--offline",
            "--db", str(tmp_path / "c.db"),
            "--log", str(tmp_path / "run.log"),
        ])
        main()
        assert "Collected items: 0" in capsys.readouterr().out


class TestLoggerChildren:
    def test_child_shares_file_and_tags_component(self, tmp_path):
        log_path = tmp_path / "run.log"
        logger = Logger(str(log_path))
        child = logger.child("player")
        child.warning("Playback stalled", {"index": 3})
        child.close()
        logger.log("still open")
        logger.close()

        lines = log_path.read_text(encoding="utf-8").splitlines()
        assert any("WARNING" in line and "player: Playback stalled" in line for line in lines)
        assert any(line.endswith("INFO    still open") for line in lines)
