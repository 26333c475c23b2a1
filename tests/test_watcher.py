"""Tests for FileWatcher."""

import threading
import time
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from liveconfig import FileWatcher
from liveconfig.watcher import _ConfigFileHandler
from watchdog.events import DirModifiedEvent
from watchdog.events import FileCreatedEvent
from watchdog.events import FileDeletedEvent
from watchdog.events import FileModifiedEvent
from watchdog.events import FileMovedEvent


class TestFileWatcher:
    """Test FileWatcher class."""

    @pytest.fixture
    def config_path(self):
        """Create a config file in a temporary directory."""
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yml"
            path.write_text("host: localhost\n")
            yield path

    @pytest.fixture
    def calls(self):
        return []

    @pytest.fixture
    def handler(self, config_path, calls):
        """Create an event handler around an undebounced watcher."""
        watcher = FileWatcher(config_path, debounce_seconds=0)
        watcher.on_change(lambda: calls.append(1))
        return _ConfigFileHandler(watcher)

    def test_modified_event(self, handler, config_path, calls):
        handler.on_any_event(FileModifiedEvent(str(config_path)))
        assert calls == [1]

    def test_created_event(self, handler, config_path, calls):
        handler.on_any_event(FileCreatedEvent(str(config_path)))
        assert calls == [1]

    def test_moved_into_place(self, handler, config_path, calls):
        """Test atomic replace by rename is detected."""
        tmp = config_path.parent / "config.yml.tmp"
        handler.on_any_event(FileMovedEvent(str(tmp), str(config_path)))
        assert calls == [1]

    def test_other_file_ignored(self, handler, config_path, calls):
        handler.on_any_event(FileModifiedEvent(str(config_path.parent / "other.yml")))
        assert calls == []

    def test_directory_event_ignored(self, handler, config_path, calls):
        handler.on_any_event(DirModifiedEvent(str(config_path.parent)))
        assert calls == []

    def test_delete_ignored(self, handler, config_path, calls):
        handler.on_any_event(FileDeletedEvent(str(config_path)))
        assert calls == []

    def test_symlink_target_event(self, config_path, calls):
        """Test changes to the resolved target of a symlinked config are seen."""
        link = config_path.parent / "link.yml"
        link.symlink_to(config_path)
        watcher = FileWatcher(link, debounce_seconds=0)
        watcher.on_change(lambda: calls.append(1))

        _ConfigFileHandler(watcher).on_any_event(FileModifiedEvent(str(config_path.resolve())))
        assert calls == [1]

    def test_debounce_coalesces_burst(self, config_path):
        fired = threading.Event()
        calls = []

        def callback():
            calls.append(1)
            fired.set()

        watcher = FileWatcher(config_path, debounce_seconds=0.05)
        watcher.on_change(callback)
        for _ in range(5):
            watcher.notify()

        assert fired.wait(timeout=2)
        time.sleep(0.2)
        assert calls == [1]

    def test_stop_drops_pending_callback(self, config_path):
        calls = []
        watcher = FileWatcher(config_path, debounce_seconds=0.05)
        watcher.on_change(lambda: calls.append(1))

        watcher.notify()
        watcher.stop()
        time.sleep(0.2)
        assert calls == []

    def test_watch_blocks_until_stop(self, config_path):
        watcher = FileWatcher(config_path)
        thread = threading.Thread(target=watcher.watch, daemon=True)
        thread.start()

        thread.join(timeout=0.2)
        assert thread.is_alive()

        watcher.stop()
        thread.join(timeout=5)
        assert not thread.is_alive()
