"""Route simulation player: step or play along a resampled route."""

import math
import threading
from typing import Callable, Optional

from .config import CONFIG
from .geo import bearing_between, distance_between, interpolate, path_length
from .logger import Logger
from .models import Coordinate, RouteInfo

PositionCallback = Callable[[Coordinate, int], None]


def resample_path(points: list[Coordinate], spacing: float) -> list[Coordinate]:
    """Subdivide a polyline so consecutive points are at most spacing meters apart.

    Original vertices are kept, so the first and last points are unchanged.
    Zero-length segments are dropped.
    """
    if len(points) < 2:
        return list(points)

    result = [points[0]]
    for start, end in zip(points, points[1:]):
        segment = distance_between(start, end)
        if segment == 0:
            continue
        steps = max(1, math.ceil(segment / spacing))
        for step in range(1, steps):
            result.append(interpolate(start, end, step / steps))
        result.append(end)
    return result


class RouteSimulationPlayer:
    """Moves a simulated position along a route, one resampled point at a time.

    Observers receive (coordinate, index) after every move. During play() they
    are called from the playback thread.
    """

    def __init__(self, step_spacing: Optional[float] = None, logger: Optional[Logger] = None):
        self.step_spacing = step_spacing or CONFIG["step_spacing"]
        self.logger = logger or Logger()
        self.path: list[Coordinate] = []
        self.current_index = 0
        self.current_heading = 0.0
        self.speed = CONFIG["playback_speed"]
        self._observers: list[PositionCallback] = []
        self._play_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    def add_observer(self, callback: PositionCallback):
        self._observers.append(callback)

    def remove_observer(self, callback: PositionCallback):
        if callback in self._observers:
            self._observers.remove(callback)

    def load(self, route: RouteInfo):
        """Load a route's polyline (or its instruction points when simulated)"""
        self.load_coordinates(route.polyline)

    def load_coordinates(self, points: list[Coordinate]):
        self.stop()
        self.path = resample_path(points, self.step_spacing)
        self.logger.log("Route loaded", {
            "vertices": len(points),
            "resampled_points": len(self.path),
            "spacing_m": self.step_spacing,
        })
        self.reset()

    def reset(self):
        """Back to the first point"""
        self.stop()
        self.current_index = 0
        self.current_heading = 0.0
        if self.path:
            self._update_heading()
            self._notify()

    @property
    def current_location(self) -> Optional[Coordinate]:
        if not self.path:
            return None
        return self.path[self.current_index]

    @property
    def is_finished(self) -> bool:
        return not self.path or self.current_index >= len(self.path) - 1

    @property
    def is_playing(self) -> bool:
        return self._play_thread is not None and self._play_thread.is_alive() and not self._stop_event.is_set()

    def _update_heading(self):
        """Heading toward the next point; kept as-is on the last point"""
        if self.current_index < len(self.path) - 1:
            here = self.path[self.current_index]
            ahead = self.path[self.current_index + 1]
            self.current_heading = bearing_between(here.lat, here.lon, ahead.lat, ahead.lon)

    def _notify(self):
        location = self.current_location
        if location is None:
            return
        for callback in list(self._observers):
            callback(location, self.current_index)

    def step_forward(self) -> bool:
        """Advance one point. Returns False at the end of the path."""
        if self.is_finished:
            return False
        self.current_index += 1
        self._update_heading()
        self._notify()
        return True

    def step_backward(self) -> bool:
        """Go back one point. Returns False at the start of the path."""
        if not self.path or self.current_index <= 0:
            return False
        self.current_index -= 1
        self._update_heading()
        self._notify()
        return True

    def play(self, speed: float = 1.0):
        """Step forward every 1/speed seconds until the end. Restarts at the new speed if playing."""
        if speed <= 0:
            raise ValueError(f"Playback speed must be positive, got {speed}")
        if self.is_finished:
            return
        self.stop()
        self.speed = speed
        self._stop_event = threading.Event()
        self._play_thread = threading.Thread(
            target=self._run, args=(1.0 / speed, self._stop_event), daemon=True
        )
        self._play_thread.start()
        self.logger.log("Playback started", {"speed": speed, "index": self.current_index})

    def _run(self, interval: float, stop_event: threading.Event):
        while not stop_event.wait(interval):
            if not self.step_forward() or self.is_finished:
                break
        stop_event.set()

    def stop(self):
        """Cancel playback. No-op when not playing."""
        thread = self._play_thread
        if thread is None:
            return
        self._stop_event.set()
        if thread is not threading.current_thread():
            thread.join()
        self._play_thread = None

    def wait(self, timeout: Optional[float] = None):
        """Block until playback ends on its own or is stopped"""
        thread = self._play_thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def completion_fraction(self) -> float:
        if len(self.path) < 2:
            return 0.0
        return self.current_index / (len(self.path) - 1)

    def remaining_distance(self) -> float:
        """Meters left along the resampled path"""
        return path_length(self.path[self.current_index:])

    def estimated_remaining_time(self, average_speed: Optional[float] = None) -> float:
        """Seconds left at average_speed meters per second"""
        return self.remaining_distance() / (average_speed or CONFIG["average_speed"])
