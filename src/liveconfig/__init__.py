"""liveconfig: Typed configuration loading with live reload.

Binds a dataclass or pydantic model to a YAML, JSON, TOML or dotenv source,
overlays environment variables, optionally narrows to a subsection, and
keeps the parsed value current while the source file changes.

Readers call ``load()`` from any thread without locking; a background
watcher re-parses on change and swaps in the new value as a whole.

Public API:
    Loader: Loads, holds and reloads one configuration type
    new_dynamic: Build a Loader, start watching, return it and its value
    SourceReader: Reads and decodes configuration sources
    FileWatcher: Watches a single file for changes
    SnapshotStore: Atomic holder of the current value
    ConfigFormat: Enum of supported source formats
    with_* / disable_*: Functional options for Loader
    ConfigError, ConfigFileError, SectionNotFoundError,
    ConfigValidationError, SnapshotNotLoadedError: Exception types

Example:
    ```python
    from dataclasses import dataclass
    from liveconfig import Loader, with_config_file, with_sub_section

    @dataclass(frozen=True)
    class DatabaseConfig:
        host: str = "localhost"
        port: int = 5432

    loader = Loader(
        DatabaseConfig,
        with_config_file("config.yml"),
        with_sub_section("databaseConfig"),
    )
    loader.start_watch()

    # Always the latest successfully parsed value
    print(loader.load().host)
    ```
"""

from .exceptions import ConfigError
from .exceptions import ConfigFileError
from .exceptions import ConfigValidationError
from .exceptions import SectionNotFoundError
from .exceptions import SnapshotNotLoadedError
from .loader import Dynamic
from .loader import Loader
from .loader import new_dynamic
from .models import ConfigFormat
from .models import LoaderSettings
from .options import Option
from .options import disable_auto_parse
from .options import disable_automatic_env
from .options import with_config_file
from .options import with_config_paths
from .options import with_config_stream
from .options import with_debounce
from .options import with_default
from .options import with_env_prefix
from .options import with_example_text
from .options import with_key_delimiter
from .options import with_logger
from .options import with_on_change_callback
from .options import with_only_env
from .options import with_reader
from .options import with_sub_section
from .snapshot import SnapshotStore
from .source import SourceReader
from .watcher import FileWatcher

__version__ = "0.1.0"

__all__ = [
    "Loader",
    "Dynamic",
    "new_dynamic",
    "SourceReader",
    "FileWatcher",
    "SnapshotStore",
    "ConfigFormat",
    "LoaderSettings",
    "Option",
    "disable_auto_parse",
    "disable_automatic_env",
    "with_config_file",
    "with_config_paths",
    "with_config_stream",
    "with_debounce",
    "with_default",
    "with_env_prefix",
    "with_example_text",
    "with_key_delimiter",
    "with_logger",
    "with_on_change_callback",
    "with_only_env",
    "with_reader",
    "with_sub_section",
    "ConfigError",
    "ConfigFileError",
    "ConfigValidationError",
    "SectionNotFoundError",
    "SnapshotNotLoadedError",
]
