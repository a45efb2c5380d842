"""Logging module for ScenePath."""

import json
import threading
from datetime import datetime
from typing import Optional, Callable


class Logger:
    """Timestamped console log, optionally mirrored to a file and a callback.

    POI lookups and playback log from worker threads, so writes are serialized.
    child() returns a logger tagged with a component name that shares the
    parent's file, callback and lock.
    """

    def __init__(self, log_path: Optional[str] = None, callback: Optional[Callable] = None,
                 component: Optional[str] = None):
        self.log_path = log_path
        self.callback = callback
        self.component = component
        self.file = None
        self._lock = threading.Lock()
        self._owns_file = bool(log_path)
        if log_path:
            self.file = open(log_path, "a", encoding="utf-8")
            self._write_header()

    def _write_header(self):
        self.file.write(f"\n{'='*60}\n")
        self.file.write(f"ScenePath Log - {datetime.now().isoformat()}\n")
        self.file.write(f"{'='*60}\n\n")
        self.file.flush()

    def child(self, component: str) -> "Logger":
        child = Logger(callback=self.callback, component=component)
        child.log_path = self.log_path
        child.file = self.file
        child._lock = self._lock
        return child

    def log(self, message: str, data: Optional[dict] = None, level: str = "INFO"):
        """Log a message with optional structured data"""
        line = f"[{datetime.now().isoformat()}] {level:<7}"
        if self.component:
            line += f" {self.component}:"
        line += f" {message}"
        if data:
            line += f" | {json.dumps(data, ensure_ascii=False, default=str)}"
        with self._lock:
            print(line)
            if self.file and not self.file.closed:
                self.file.write(line + "\n")
                self.file.flush()
        if self.callback:
            self.callback(message, data)

    def warning(self, message: str, data: Optional[dict] = None):
        self.log(message, data, level="WARNING")

    def close(self):
        """Close the log file. Children never close the shared file."""
        if self.file and self._owns_file:
            self.file.close()
        self.file = None
