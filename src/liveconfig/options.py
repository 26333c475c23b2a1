"""Functional options for building a Loader.

Each option returns a function that updates ``LoaderSettings``. Options are
applied in the order given, so a later option overrides an earlier one.

Example:
    ```python
    loader = Loader(
        DatabaseConfig,
        with_config_file("config.yml"),
        with_sub_section("databaseConfig"),
        with_default(DatabaseConfig(host="localhost")),
    )
    ```
"""

import logging
from collections.abc import Callable
from collections.abc import Iterable
from pathlib import Path
from typing import IO
from typing import Any

from .exceptions import ConfigFileError
from .models import ChangeCallback
from .models import ConfigFormat
from .models import LoaderSettings
from .source import SourceReader

Option = Callable[[LoaderSettings], None]


def with_config_file(path: str | Path, config_format: str | ConfigFormat | None = None) -> Option:
    """Load configuration from a file.

    The format is inferred from the extension unless given. Without any
    source option the loader reads ``config.yml``.
    """

    def apply(settings: LoaderSettings) -> None:
        settings.config_file = Path(path)
        settings.config_format = ConfigFormat.parse(config_format) if config_format is not None else None

    return apply


def with_config_paths(paths: Iterable[str | Path], name: str | None = None) -> Option:
    """Search directories for ``<name>.<ext>`` (``config`` by default)."""
    directories = [Path(p) for p in paths]

    def apply(settings: LoaderSettings) -> None:
        settings.config_paths.extend(directories)
        if name is not None:
            settings.config_name = name

    return apply


def with_config_stream(stream: IO[Any], config_format: str | ConfigFormat) -> Option:
    """Load configuration from a stream.

    The stream is read once when the option is created; every parse decodes
    the same buffered content.
    """
    resolved = ConfigFormat.parse(config_format)
    try:
        data = stream.read()
    except OSError as e:
        raise ConfigFileError(f"Failed to read config from stream: {e}") from e
    content = data.encode("utf-8") if isinstance(data, str) else bytes(data)

    def apply(settings: LoaderSettings) -> None:
        settings.content = content
        settings.config_format = resolved

    return apply


def with_only_env() -> Option:
    """Load configuration from environment variables only."""

    def apply(settings: LoaderSettings) -> None:
        settings.only_env = True
        settings.config_file = None

    return apply


def with_reader(reader: SourceReader) -> Option:
    """Use a pre-built reader; other source and environment options are ignored."""

    def apply(settings: LoaderSettings) -> None:
        settings.reader = reader

    return apply


def disable_automatic_env() -> Option:
    """Do not overlay environment variables onto the configuration."""

    def apply(settings: LoaderSettings) -> None:
        settings.automatic_env = False

    return apply


def with_env_prefix(prefix: str) -> Option:
    """Require environment variables to start with ``<PREFIX><delimiter>``."""

    def apply(settings: LoaderSettings) -> None:
        settings.env_prefix = prefix

    return apply


def with_key_delimiter(delimiter: str) -> Option:
    """Separator between key segments in environment variable names."""
    if not delimiter:
        raise ValueError("Key delimiter must not be empty")

    def apply(settings: LoaderSettings) -> None:
        settings.key_delimiter = delimiter

    return apply


def with_sub_section(section: str) -> Option:
    """Parse only the given subsection (dotted path for nested sections)."""

    def apply(settings: LoaderSettings) -> None:
        settings.sub_section = section

    return apply


def with_on_change_callback(callback: ChangeCallback) -> Option:
    """Call ``callback`` after each reload with the error, or None on success."""

    def apply(settings: LoaderSettings) -> None:
        settings.on_change = callback

    return apply


def with_example_text(example: str) -> Option:
    """Sample configuration shown in parse errors."""

    def apply(settings: LoaderSettings) -> None:
        settings.example_text = example

    return apply


def with_default(config: Any) -> Option:
    """Fallback used when the initial parse fails, instead of raising."""

    def apply(settings: LoaderSettings) -> None:
        settings.default = config
        settings.default_set = True

    return apply


def disable_auto_parse() -> Option:
    """Skip parsing during construction.

    ``Loader.parse()`` must then be called before ``Loader.load()``.
    """

    def apply(settings: LoaderSettings) -> None:
        settings.auto_parse = False

    return apply


def with_logger(logger: logging.Logger) -> Option:
    """Log through ``logger`` instead of the ``liveconfig.loader`` logger."""

    def apply(settings: LoaderSettings) -> None:
        settings.logger = logger

    return apply


def with_debounce(seconds: float) -> Option:
    """Quiet period after a file change before reloading."""

    def apply(settings: LoaderSettings) -> None:
        settings.debounce_seconds = seconds

    return apply
