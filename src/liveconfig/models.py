"""Data models for liveconfig."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING
from typing import Any

from .exceptions import ConfigError
from .exceptions import ConfigFileError

if TYPE_CHECKING:
    from .source import SourceReader

DEFAULT_CONFIG_FILE = "config.yml"
DEFAULT_CONFIG_NAME = "config"
DEFAULT_KEY_DELIMITER = "_"


class ConfigFormat(Enum):
    """Supported configuration source formats."""

    YAML = "yaml"
    JSON = "json"
    TOML = "toml"
    DOTENV = "dotenv"

    @classmethod
    def parse(cls, value: "str | ConfigFormat") -> "ConfigFormat":
        """Resolve a format name such as ``"yml"`` or ``"env"``.

        Raises:
            ConfigFileError: If the name is not a supported format
        """
        if isinstance(value, ConfigFormat):
            return value
        name = value.lower().lstrip(".")
        try:
            return _FORMAT_ALIASES[name]
        except KeyError:
            raise ConfigFileError(f"Unsupported config format: {value!r}") from None

    @classmethod
    def from_path(cls, path: Path) -> "ConfigFormat":
        """Infer the format from a file extension."""
        if path.name == ".env":
            return cls.DOTENV
        if not path.suffix:
            raise ConfigFileError(f"Cannot infer config format of {path}: file has no extension")
        return cls.parse(path.suffix)

    @classmethod
    def extensions(cls) -> list[str]:
        """File extensions searched for when locating a config by name."""
        return list(_FORMAT_ALIASES)


_FORMAT_ALIASES = {
    "yml": ConfigFormat.YAML,
    "yaml": ConfigFormat.YAML,
    "json": ConfigFormat.JSON,
    "toml": ConfigFormat.TOML,
    "env": ConfigFormat.DOTENV,
    "dotenv": ConfigFormat.DOTENV,
}

ChangeCallback = Callable[[ConfigError | None], None]


@dataclass
class LoaderSettings:
    """Mutable settings collected from loader options.

    Options are applied in order, so later options override earlier ones.

    Attributes:
        config_file: Explicit configuration file
        config_format: Format override for the file or stream source
        config_paths: Directories searched for ``config_name.<ext>``
        config_name: Base name used when searching ``config_paths``
        content: Buffered stream content
        only_env: Read nothing but environment variables
        reader: Pre-built reader, replaces every source setting above
        automatic_env: Overlay environment variables onto the target fields
        env_prefix: Prefix segment for environment variable names
        key_delimiter: Separator between key segments in variable names
        sub_section: Dotted path of the subsection to parse
        on_change: Callback invoked after every reload attempt
        example_text: Sample config appended to parse errors
        default: Value stored when the initial parse fails
        default_set: Whether ``default`` was supplied
        auto_parse: Parse during construction
        logger: Logger used by the loader
        debounce_seconds: Quiet period before a file change triggers a reload
    """

    config_file: Path | None = None
    config_format: ConfigFormat | None = None
    config_paths: list[Path] = field(default_factory=list)
    config_name: str = DEFAULT_CONFIG_NAME
    content: bytes | None = None
    only_env: bool = False
    reader: "SourceReader | None" = None
    automatic_env: bool = True
    env_prefix: str = ""
    key_delimiter: str = DEFAULT_KEY_DELIMITER
    sub_section: str = ""
    on_change: ChangeCallback | None = None
    example_text: str = ""
    default: Any = None
    default_set: bool = False
    auto_parse: bool = True
    logger: logging.Logger | None = None
    debounce_seconds: float = 0.1

    @property
    def has_source(self) -> bool:
        """Whether any option selected a source."""
        return (
            self.config_file is not None
            or bool(self.config_paths)
            or self.content is not None
            or self.only_env
            or self.reader is not None
        )
