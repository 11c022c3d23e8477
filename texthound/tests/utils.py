"""Shared fakes for TextHound tests."""

import os
import threading
from pathlib import Path
from typing import Any

from texthound.services.snapshot_reader import FileSnapshotReader


def set_mtime(path: Path, timestamp: float) -> None:
    """Pin a file's modification time so tests never depend on clock resolution."""
    os.utime(path, (timestamp, timestamp))


class CountingReader(FileSnapshotReader):
    """Real reader that counts calls and can block mid-read."""

    def __init__(self) -> None:
        super().__init__()
        self.calls = 0
        self.block = False
        self.entered = threading.Event()
        self.release = threading.Event()

    def read(self, path: str | Path, max_chars: int):  # type: ignore[override]
        self.calls += 1
        if self.block:
            self.entered.set()
            self.release.wait(timeout=5.0)
        return super().read(path, max_chars)


class FakeEmitter:
    def __init__(self) -> None:
        self.alive = True

    def is_alive(self) -> bool:
        return self.alive


class FakeObserver:
    """Stand-in for a watchdog observer; events are injected by the test."""

    def __init__(self) -> None:
        self.handler: Any = None
        self.watched_path: str | None = None
        self.stopped = False
        self._alive = False
        self._emitter = FakeEmitter()

    def schedule(self, handler: Any, path: str, recursive: bool = False) -> None:
        self.handler = handler
        self.watched_path = path

    def start(self) -> None:
        self._alive = True

    def is_alive(self) -> bool:
        return self._alive

    @property
    def emitters(self) -> set[FakeEmitter]:
        return {self._emitter}

    def stop(self) -> None:
        self._alive = False
        self.stopped = True

    def join(self, timeout: float | None = None) -> None:
        return None

    def die(self) -> None:
        """Simulate the observer thread crashing."""
        self._alive = False

    def lose_emitter(self) -> None:
        """Simulate a watch error ending the emitter while the observer runs."""
        self._emitter.alive = False


class FlakyObserverFactory:
    """Raises for the first ``failures`` calls, then hands out FakeObservers."""

    def __init__(self, failures: int = 0) -> None:
        self.failures = failures
        self.calls = 0
        self.created: list[FakeObserver] = []

    def __call__(self) -> FakeObserver:
        self.calls += 1
        if self.calls <= self.failures:
            raise OSError("inotify watch limit reached")
        observer = FakeObserver()
        self.created.append(observer)
        return observer
