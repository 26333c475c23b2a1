"""File-change notifier backed by watchdog."""

import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEvent
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

_WATCHED_EVENTS = ("modified", "created", "moved")


class _ConfigFileHandler(FileSystemEventHandler):
    """Forwards events that touch the watched file.

    Both the configured path and its resolved symlink target count, so
    replacing a symlinked file (as Kubernetes does for ConfigMaps) is seen.
    """

    def __init__(self, watcher: "FileWatcher"):
        super().__init__()
        self._watcher = watcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in _WATCHED_EVENTS:
            return

        paths = [event.src_path]
        dest_path = getattr(event, "dest_path", "")
        if dest_path:
            paths.append(dest_path)

        targets = self._watcher.target_paths()
        if any(os.fsdecode(p) in targets for p in paths):
            logger.debug(f"Config file event {event.event_type}: {paths}")
            self._watcher.notify()


class FileWatcher:
    """Watches one file and reports changes to a registered callback.

    Events arriving within ``debounce_seconds`` of each other are coalesced
    into one callback, delivered after the burst settles on a timer thread.

    Args:
        path: File to watch
        debounce_seconds: Quiet period before the callback runs (0 disables)
    """

    def __init__(self, path: Path, debounce_seconds: float = 0.1):
        self.path = Path(os.path.abspath(path))
        self.debounce_seconds = debounce_seconds
        self._callback: Callable[[], Any] | None = None
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._stopped = threading.Event()

    def on_change(self, callback: Callable[[], Any]) -> None:
        """Register the function called once per detected change."""
        self._callback = callback

    def target_paths(self) -> set[str]:
        """The configured path and its current symlink target."""
        return {str(self.path), os.path.realpath(self.path)}

    def notify(self) -> None:
        """Schedule the callback, restarting the debounce window."""
        if self.debounce_seconds <= 0:
            self._fire()
            return

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce_seconds, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def watch(self) -> None:
        """Start observing and block until ``stop`` is called."""
        observer = Observer()
        handler = _ConfigFileHandler(self)
        directories = {str(self.path.parent), os.path.dirname(os.path.realpath(self.path))}
        for directory in directories:
            observer.schedule(handler, directory, recursive=False)

        observer.start()
        logger.debug(f"Watching {self.path}")
        try:
            self._stopped.wait()
        finally:
            observer.stop()
            observer.join()

    def stop(self) -> None:
        """Stop watching and drop any pending callback."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        self._stopped.set()

    def _fire(self) -> None:
        with self._lock:
            self._timer = None
        if self._stopped.is_set() or self._callback is None:
            return
        self._callback()
