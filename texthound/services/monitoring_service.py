"""File monitoring service for a single text file.

Two independent signals drive reads of the monitored file:
- a fixed-interval timer task (always on)
- watchdog change notifications for the file, debounced (best-effort)

Architecture:
- Every trigger funnels through one asyncio.Lock used with try-acquire
  semantics: a trigger that finds a cycle in flight is dropped, not queued
- The blocking read runs in the default executor while the gate is held
- The watchdog thread only hands events to the event loop; all monitor
  state is mutated on the loop thread, inside the gate
- A dead or failed watchdog observer is disposed and re-subscribed after a
  fixed backoff; polling keeps running meanwhile
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable

from loguru import logger
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from texthound.core.config.monitor_config import MonitorConfig
from texthound.core.types.file_snapshot import FileSnapshot
from texthound.services.change_detector import ChangeDetector
from texthound.services.snapshot_reader import FileSnapshotReader
from texthound.services.update_publisher import UpdatePublisher

DEFAULT_DEBOUNCE_SECONDS = 0.5
DEFAULT_RESUBSCRIBE_BACKOFF_SECONDS = 2.0
DEFAULT_HEALTH_CHECK_SECONDS = 1.0
DEFAULT_MAX_CONTENT_LENGTH = 10_000

MISSING_PATH_MESSAGE = (
    "No text file path configured. Please set text_file_path in configuration."
)

_RELEVANT_EVENT_TYPES = {"created", "modified", "moved", "deleted", "closed"}


def normalize_file_path(path: Path | str) -> Path:
    """Canonical path used to match watchdog events against the target."""
    return Path(path).expanduser().resolve()


class MonitorLifecycle(str, Enum):
    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"


@dataclass
class MonitorStats:
    """Counters exposed by the monitor for observability."""

    cycles: int = 0
    emitted: int = 0
    suppressed: int = 0
    dropped_triggers: int = 0
    notifications: int = 0
    resubscribe_attempts: int = 0


@dataclass
class MonitorState:
    """Mutable state owned by one FileMonitorService instance."""

    lifecycle: MonitorLifecycle = MonitorLifecycle.STOPPED
    detector: ChangeDetector = field(default_factory=ChangeDetector)
    watch_handle: Any | None = None
    path: str = ""


class FileChangeHandler(FileSystemEventHandler):
    """Forwards events for one file from the watchdog thread to the loop."""

    def __init__(
        self,
        target: Path,
        loop: asyncio.AbstractEventLoop,
        on_change: Callable[[str], None],
    ):
        self._target = target
        self._loop = loop
        self._on_change = on_change

    def _matches(self, raw_path: Any) -> bool:
        if not raw_path:
            return False
        if isinstance(raw_path, bytes):
            raw_path = raw_path.decode(errors="replace")
        try:
            return normalize_file_path(raw_path) == self._target
        except (OSError, RuntimeError):
            return False

    def on_any_event(self, event: Any) -> None:
        """Filter to the monitored file and hand off to the event loop."""
        if event.is_directory or event.event_type not in _RELEVANT_EVENT_TYPES:
            return

        paths = [event.src_path, getattr(event, "dest_path", None)]
        if not any(self._matches(p) for p in paths):
            return

        if self._loop.is_closed():
            return
        try:
            self._loop.call_soon_threadsafe(self._on_change, event.event_type)
        except RuntimeError as e:
            # Loop shut down between the check and the call
            logger.debug(f"Dropping {event.event_type} event for {self._target}: {e}")


class FileMonitorService:
    """Dual-signal monitor publishing snapshots of a single text file."""

    def __init__(
        self,
        publisher: UpdatePublisher,
        reader: FileSnapshotReader | None = None,
        max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH,
        debounce_delay: float = DEFAULT_DEBOUNCE_SECONDS,
        resubscribe_backoff: float = DEFAULT_RESUBSCRIBE_BACKOFF_SECONDS,
        health_check_interval: float = DEFAULT_HEALTH_CHECK_SECONDS,
        observer_factory: Callable[[], Any] = Observer,
    ):
        self.publisher = publisher
        self._reader = reader or FileSnapshotReader()
        self._max_content_length = max_content_length
        self._debounce_delay = debounce_delay
        self._resubscribe_backoff = resubscribe_backoff
        self._health_check_interval = health_check_interval
        self._observer_factory = observer_factory

        self._state = MonitorState()
        self._stats = MonitorStats()
        self._cycle_lock = asyncio.Lock()
        self._stopped = asyncio.Event()
        self._stopped.set()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._interval = 5.0
        self._target: Path | None = None
        self._last_notification = 0.0

        self._timer_task: asyncio.Task | None = None
        self._debounce_task: asyncio.Task | None = None
        self._health_task: asyncio.Task | None = None
        self._resubscribe_task: asyncio.Task | None = None

    @classmethod
    def from_config(
        cls, config: MonitorConfig, publisher: UpdatePublisher, **kwargs: Any
    ) -> "FileMonitorService":
        return cls(
            publisher,
            max_content_length=config.max_content_length,
            **kwargs,
        )

    @property
    def lifecycle(self) -> MonitorLifecycle:
        return self._state.lifecycle

    @property
    def is_running(self) -> bool:
        return self._state.lifecycle is MonitorLifecycle.RUNNING

    @property
    def is_watching(self) -> bool:
        """True while an OS notification subscription is active."""
        return self._state.watch_handle is not None

    @property
    def stats(self) -> MonitorStats:
        return self._stats

    @property
    def latest(self) -> FileSnapshot | None:
        return self.publisher.latest

    async def start(
        self,
        path: str | Path | None,
        interval_seconds: float,
        enable_notifications: bool = True,
    ) -> None:
        """Start monitoring ``path``.

        Performs an immediate read, arms the periodic timer and, when enabled
        and the file exists, subscribes to OS change notifications.
        """
        if self._state.lifecycle is not MonitorLifecycle.STOPPED:
            logger.debug(f"Monitoring already started ({self._state.lifecycle.value})")
            return

        if path is None or not str(path).strip():
            logger.warning("No text file path configured; monitoring not started")
            self.publisher.publish(FileSnapshot.error("", MISSING_PATH_MESSAGE))
            return

        self._state.lifecycle = MonitorLifecycle.STARTING
        self._stopped.clear()
        self._loop = asyncio.get_running_loop()
        self._state.path = str(Path(path).expanduser())
        self._state.detector.reset()
        self._target = normalize_file_path(self._state.path)
        self._interval = max(float(interval_seconds), 0.01)
        self._state.lifecycle = MonitorLifecycle.RUNNING

        # Cold start
        await self.trigger("start")
        if not self.is_running:
            return

        self._timer_task = asyncio.create_task(self._timer_loop())

        if enable_notifications and Path(self._state.path).exists():
            if not await self._try_subscribe():
                logger.info(
                    f"File change notifications unavailable for {self._state.path}; "
                    "continuing with polling only"
                )
                if not self.is_running:
                    return
                self._schedule_resubscribe()
            if not self.is_running:
                return
            self._health_task = asyncio.create_task(self._monitor_health())

        logger.info(
            f"Monitoring started for: {self._state.path} "
            f"(interval: {self._interval:g}s, "
            f"notifications: {self.is_watching})"
        )

    async def stop(self) -> None:
        """Stop monitoring; safe to call repeatedly or during a cycle."""
        if self._state.lifecycle is MonitorLifecycle.STOPPED:
            return
        if self._state.lifecycle is MonitorLifecycle.STOPPING:
            await self._stopped.wait()
            return

        logger.debug(f"Stopping monitoring for {self._state.path}")
        self._state.lifecycle = MonitorLifecycle.STOPPING

        # Let an in-flight cycle finish; no new cycle can start from here on
        async with self._cycle_lock:
            pass

        tasks = [
            self._timer_task,
            self._debounce_task,
            self._health_task,
            self._resubscribe_task,
        ]
        current = asyncio.current_task()
        pending = [t for t in tasks if t is not None and t is not current and not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._timer_task = None
        self._debounce_task = None
        self._health_task = None
        self._resubscribe_task = None

        await self._dispose_watch()

        self._state.lifecycle = MonitorLifecycle.STOPPED
        self._stopped.set()
        logger.info(
            f"Monitoring stopped after {self._stats.cycles} cycles, "
            f"{self._stats.emitted} updates"
        )

    async def trigger(self, source: str = "manual") -> bool:
        """Run one read-and-maybe-emit cycle unless one is already in flight.

        Returns:
            True when a snapshot was published
        """
        if self._state.lifecycle is not MonitorLifecycle.RUNNING:
            return False
        if self._cycle_lock.locked():
            self._stats.dropped_triggers += 1
            logger.debug(f"Dropped {source} trigger; read already in flight")
            return False

        async with self._cycle_lock:
            return await self._run_cycle(source)

    async def _run_cycle(self, source: str) -> bool:
        if self._state.lifecycle is not MonitorLifecycle.RUNNING:
            return False

        self._stats.cycles += 1
        loop = asyncio.get_running_loop()
        try:
            snapshot = await loop.run_in_executor(
                None, self._reader.read, self._state.path, self._max_content_length
            )
        except Exception as e:
            logger.warning(f"Read of {self._state.path} failed: {e}")
            snapshot = FileSnapshot.error(self._state.path, f"Error: {e}")

        if not self._state.detector.accept(snapshot):
            self._stats.suppressed += 1
            logger.debug(f"No change in {self._state.path} ({source})")
            return False

        self._stats.emitted += 1
        logger.debug(
            f"Publishing {snapshot.status.value} snapshot of {self._state.path} ({source})"
        )
        self.publisher.publish(snapshot)
        return True

    async def _timer_loop(self) -> None:
        """Periodic trigger; runs until cancelled by stop()."""
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.trigger("timer")
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(f"Periodic read error: {e}")

    def _on_fs_event(self, event_type: str) -> None:
        """Record a notification and (re)arm the debounce window."""
        if self._state.lifecycle is not MonitorLifecycle.RUNNING:
            return
        self._stats.notifications += 1
        self._last_notification = time.monotonic()
        logger.debug(f"Notification {event_type}: {self._state.path}")
        if self._debounce_task is None or self._debounce_task.done():
            self._debounce_task = asyncio.create_task(self._debounced_trigger())

    async def _debounced_trigger(self) -> None:
        """Wait for a quiet window after the last notification, then read."""
        while True:
            remaining = self._last_notification + self._debounce_delay - time.monotonic()
            if remaining <= 0:
                break
            await asyncio.sleep(remaining)
        await self.trigger("notification")

    def _start_fs_monitor(self, target: Path, loop: asyncio.AbstractEventLoop) -> Any:
        """Create and start a watchdog observer for the target's directory."""
        handler = FileChangeHandler(target, loop, self._on_fs_event)
        observer = self._observer_factory()
        try:
            observer.schedule(handler, str(target.parent), recursive=False)
            observer.start()
        except Exception:
            _stop_observer(observer)
            raise

        max_wait = 1.0
        start = time.monotonic()
        while not observer.is_alive() and (time.monotonic() - start) < max_wait:
            time.sleep(0.01)

        if not observer.is_alive():
            _stop_observer(observer)
            raise RuntimeError("Observer failed to start within timeout")
        return observer

    async def _try_subscribe(self) -> bool:
        if self._target is None or self._loop is None:
            return False
        setup = self._loop.run_in_executor(
            None, self._start_fs_monitor, self._target, self._loop
        )
        try:
            # Shield so a stop() during setup cannot orphan a started observer
            observer = await asyncio.shield(setup)
        except asyncio.CancelledError:
            setup.add_done_callback(_discard_late_observer)
            raise
        except Exception as e:
            logger.debug(f"Could not set up file watcher for {self._target}: {e}")
            return False

        if not self.is_running:
            await self._loop.run_in_executor(None, _stop_observer, observer)
            return False

        self._state.watch_handle = observer
        logger.debug(f"File system watcher set up for {self._target}")
        return True

    def _schedule_resubscribe(self) -> None:
        if self._resubscribe_task is not None and not self._resubscribe_task.done():
            return
        self._resubscribe_task = asyncio.create_task(self._resubscribe_loop())

    async def _resubscribe_loop(self) -> None:
        """Retry the subscription after a fixed backoff until it succeeds."""
        while self.is_running and not self.is_watching:
            await asyncio.sleep(self._resubscribe_backoff)
            if not self.is_running:
                return
            self._stats.resubscribe_attempts += 1
            if await self._try_subscribe():
                logger.debug(f"File system watcher restored for {self._state.path}")
                return
            logger.debug(
                f"Watcher resubscribe failed; retrying in {self._resubscribe_backoff:g}s"
            )

    async def _handle_subscription_failure(self, reason: str) -> None:
        logger.debug(f"File system watcher error for {self._state.path}: {reason}")
        await self._dispose_watch()
        if self.is_running:
            self._schedule_resubscribe()

    async def _monitor_health(self) -> None:
        """Detect a dead observer thread and recover the subscription."""
        while True:
            try:
                await asyncio.sleep(self._health_check_interval)
                observer = self._state.watch_handle
                if observer is None:
                    continue
                reason = _observer_failure(observer)
                if reason:
                    await self._handle_subscription_failure(reason)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(f"Watcher health check error: {e}")

    async def _dispose_watch(self) -> None:
        observer = self._state.watch_handle
        self._state.watch_handle = None
        if observer is None:
            return
        loop = asyncio.get_running_loop()
        try:
            await asyncio.wait_for(
                loop.run_in_executor(None, _stop_observer, observer), timeout=2.0
            )
        except asyncio.TimeoutError:
            logger.warning("Observer thread did not exit within timeout")


def _discard_late_observer(setup: "asyncio.Future[Any]") -> None:
    if setup.cancelled() or setup.exception() is not None:
        return
    try:
        setup.result().stop()
    except Exception as e:
        logger.debug(f"Error stopping late observer: {e}")


def _stop_observer(observer: Any) -> None:
    try:
        observer.stop()
        if observer.is_alive():
            observer.join(timeout=1.0)
    except Exception as e:
        logger.debug(f"Error stopping observer: {e}")


def _observer_failure(observer: Any) -> str:
    """Describe why a watchdog observer stopped delivering events, or ''."""
    if not observer.is_alive():
        return "observer thread stopped"
    # Watch errors (e.g. the watched directory being removed) end the
    # per-directory emitter thread while the observer thread keeps running
    emitters = getattr(observer, "emitters", ())
    if any(not emitter.is_alive() for emitter in emitters):
        return "emitter thread stopped"
    return ""
