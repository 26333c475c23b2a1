"""Configuration loader with atomic snapshots and live reload."""

import logging
import threading
from typing import Generic
from typing import Protocol
from typing import TypeVar

from .exceptions import ConfigError
from .exceptions import ConfigFileError
from .exceptions import SectionNotFoundError
from .models import ChangeCallback
from .models import LoaderSettings
from .options import Option
from .snapshot import SnapshotStore
from .source import SourceReader
from .watcher import FileWatcher

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

LOGGER_NAME = "liveconfig.loader"


class Dynamic(Protocol[T_co]):
    """Handle returned once a loader watches its source."""

    def load(self) -> T_co: ...

    def set_on_change_callback(self, callback: ChangeCallback | None) -> None: ...


class Loader(Generic[T]):
    """Loads configuration of type ``T`` and keeps it current.

    The parsed configuration lives in a ``SnapshotStore``: ``load()`` never
    blocks, and each successful ``parse()`` replaces the whole value. After
    ``start_watch()`` the source file is watched and re-parsed on change.

    Construction parses once unless ``disable_auto_parse()`` is given. If
    that parse fails, the ``with_default()`` value is stored; without a
    default the error is raised.

    Args:
        target: Dataclass, pydantic model or other type to build
        *options: Functional options, applied in order

    Raises:
        ConfigError: If the initial parse fails and no default was set

    Example:
        ```python
        loader = Loader(AppConfig, with_config_file("config.yml"))
        loader.start_watch()
        port = loader.load().port
        ```
    """

    def __init__(self, target: type[T], *options: Option):
        settings = LoaderSettings()
        for option in options:
            option(settings)

        self.target = target
        self.reader = settings.reader or SourceReader.from_settings(settings)
        self.sub_section = settings.sub_section
        self.example_text = settings.example_text
        self.on_change = settings.on_change
        self.debounce_seconds = settings.debounce_seconds
        self.logger = settings.logger or logging.getLogger(LOGGER_NAME)

        self._snapshot: SnapshotStore[T] = SnapshotStore()
        self._watch_guard = threading.Lock()
        self._watcher: FileWatcher | None = None

        if settings.auto_parse:
            try:
                self.parse()
            except ConfigError as e:
                if not settings.default_set:
                    raise
                self.logger.debug(f"Using default config: {e}")
                self._snapshot.store(settings.default)

    @property
    def watching(self) -> bool:
        """Whether ``start_watch`` has been called."""
        return self._watch_guard.locked()

    def parse(self) -> None:
        """Parse the source and replace the current snapshot.

        On failure the current snapshot is kept.

        Raises:
            ConfigFileError: If the source cannot be read or decoded
            SectionNotFoundError: If the configured subsection is missing
            ConfigValidationError: If the data does not fit ``T``
        """
        try:
            config = self.reader.unmarshal(self.target, self.sub_section)
        except ConfigError as e:
            if not self.example_text:
                raise
            raise _with_example(e, self.example_text) from e

        self._snapshot.store(config)

    def load(self) -> T:
        """Return the latest parsed configuration."""
        return self._snapshot.load()

    def set_on_change_callback(self, callback: ChangeCallback | None) -> None:
        """Replace the callback run after each reload."""
        self.on_change = callback

    def start_watch(self) -> "Loader[T]":
        """Watch the source file and re-parse it on every change.

        Only the first successful call has an effect; later calls return
        immediately. If the config file cannot be located yet, an error is
        logged and a later call may try again. Sources that are not files
        cannot be watched and only log a warning.

        Returns:
            This loader, usable as a ``Dynamic`` handle
        """
        if not self._watch_guard.acquire(blocking=False):
            return self

        if not self.reader.is_file_source:
            self.logger.warning(f"Config source {self.reader!r} is not a file; dynamic reload is disabled")
            return self

        try:
            path = self.reader.resolve_file()
        except ConfigFileError as e:
            self.logger.error(f"Cannot watch config: {e}")
            self._watch_guard.release()
            return self

        watcher = FileWatcher(path, debounce_seconds=self.debounce_seconds)
        watcher.on_change(self._reload)
        self._watcher = watcher

        thread = threading.Thread(target=watcher.watch, name=f"liveconfig-watch-{path.name}", daemon=True)
        thread.start()
        self.logger.info(f"Watching config file {path}")
        return self

    def start_dynamic_reload(self) -> "Loader[T]":
        """Alias of ``start_watch``."""
        return self.start_watch()

    def _reload(self) -> None:
        error: ConfigError | None = None
        try:
            self.parse()
        except ConfigError as e:
            error = e
            self.logger.error(f"Failed to reload config: {e}")
        else:
            self.logger.info("Config reloaded successfully")

        callback = self.on_change
        if callback is None:
            return
        try:
            callback(error)
        except Exception:
            self.logger.exception("Error in config change callback")


def new_dynamic(target: type[T], *options: Option) -> tuple[Dynamic[T], T]:
    """Build a loader, start watching and return it with its first value."""
    loader = Loader(target, *options).start_watch()
    return loader, loader.load()


def _with_example(error: ConfigError, example: str) -> ConfigError:
    message = f"{error}\nExample Config:\n{example}\n"
    if isinstance(error, SectionNotFoundError):
        return SectionNotFoundError(error.section, message)
    return type(error)(message)
