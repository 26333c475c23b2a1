"""Structured-source reader.

Locates and decodes a configuration source (file, buffered stream or the
process environment) into a plain tree, extracts subsections and overlays
environment variables onto the target's fields.
"""

import io
import json
import logging
import os
import tomllib
from collections.abc import Iterable
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from dotenv import dotenv_values

from . import decode
from .exceptions import ConfigFileError
from .exceptions import SectionNotFoundError
from .models import DEFAULT_CONFIG_FILE
from .models import DEFAULT_CONFIG_NAME
from .models import DEFAULT_KEY_DELIMITER
from .models import ConfigFormat
from .models import LoaderSettings
from .utils import find_key
from .utils import split_section

logger = logging.getLogger(__name__)

STREAM_ORIGIN = "<stream>"


class SourceReader:
    """Reads one configuration source and unmarshals it into target types.

    Exactly one kind of source is used, in this order of precedence:
    environment only, buffered stream content, explicit file, file searched
    by name in ``config_paths``. Files are re-read on every call so the
    reader always reflects what is on disk.

    Args:
        config_file: Explicit configuration file
        config_format: Format of the stream, or override for the file
        config_paths: Directories searched for ``<config_name>.<ext>``
        config_name: Base name used when searching
        content: Stream content, decoded on every read
        only_env: Ignore files and streams, read environment variables only
        automatic_env: Overlay environment variables onto target fields
        env_prefix: Leading segment of every environment variable name
        key_delimiter: Separator between key segments in variable names
    """

    def __init__(
        self,
        *,
        config_file: str | Path | None = None,
        config_format: str | ConfigFormat | None = None,
        config_paths: Iterable[str | Path] = (),
        config_name: str = DEFAULT_CONFIG_NAME,
        content: bytes | None = None,
        only_env: bool = False,
        automatic_env: bool = True,
        env_prefix: str = "",
        key_delimiter: str = DEFAULT_KEY_DELIMITER,
    ):
        self.config_file = Path(config_file) if config_file is not None else None
        self.config_format = ConfigFormat.parse(config_format) if config_format is not None else None
        self.config_paths = [Path(p) for p in config_paths]
        self.config_name = config_name
        self.content = content
        self.only_env = only_env
        self.automatic_env = automatic_env
        self.env_prefix = env_prefix
        self.key_delimiter = key_delimiter

        if content is not None and self.config_format is None:
            raise ConfigFileError("A config format is required when reading from a stream")

    @classmethod
    def from_settings(cls, settings: LoaderSettings) -> "SourceReader":
        """Build a reader from collected loader options.

        Falls back to ``config.yml`` when no option selected a source.
        """
        config_file = settings.config_file
        if not settings.has_source:
            config_file = Path(DEFAULT_CONFIG_FILE)

        return cls(
            config_file=config_file,
            config_format=settings.config_format,
            config_paths=settings.config_paths,
            config_name=settings.config_name,
            content=settings.content,
            only_env=settings.only_env,
            automatic_env=settings.automatic_env,
            env_prefix=settings.env_prefix,
            key_delimiter=settings.key_delimiter,
        )

    @property
    def is_file_source(self) -> bool:
        """Whether the source is a file that can be watched."""
        return not self.only_env and self.content is None

    def resolve_file(self) -> Path:
        """Find the configuration file.

        Returns:
            The explicit file, or the first ``<config_name>.<ext>`` found in
            the search paths

        Raises:
            ConfigFileError: If the source is not a file or no file was found
        """
        if not self.is_file_source:
            raise ConfigFileError("Config source is not a file")

        if self.config_file is not None:
            return self.config_file

        for directory in self.config_paths:
            for extension in ConfigFormat.extensions():
                candidate = directory / f"{self.config_name}.{extension}"
                if candidate.is_file():
                    logger.debug(f"Found config file {candidate}")
                    return candidate

        searched = ", ".join(str(p) for p in self.config_paths) or "<no paths>"
        raise ConfigFileError(f"Config file '{self.config_name}' not found in: {searched}")

    def read(self) -> dict[str, Any]:
        """Decode the source into a tree.

        Returns:
            Top-level mapping of the source (empty for environment only)

        Raises:
            ConfigFileError: If the source cannot be read or decoded
        """
        if self.only_env:
            return {}

        if self.content is not None:
            if self.config_format is None:
                raise ConfigFileError("A config format is required when reading from a stream")
            try:
                text = self.content.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ConfigFileError(f"Config from {STREAM_ORIGIN} is not valid UTF-8: {e}") from e
            return _decode(text, self.config_format, STREAM_ORIGIN)

        path = self.resolve_file()
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ConfigFileError(f"Config file not found: {path}") from e
        except UnicodeDecodeError as e:
            raise ConfigFileError(f"Config file {path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise ConfigFileError(f"Failed to read config file {path}: {e}") from e

        config_format = self.config_format or ConfigFormat.from_path(path)
        return _decode(text, config_format, str(path))

    def sub(self, tree: Mapping[str, Any], section: str) -> dict[str, Any]:
        """Extract a subsection of a decoded tree.

        Args:
            tree: Decoded configuration tree
            section: Dotted path of the subsection, matched case-insensitively

        Raises:
            SectionNotFoundError: If the path does not lead to a mapping. In
                environment-only mode the missing section reads as empty.
        """
        current: Any = tree
        for segment in split_section(section):
            value = find_key(current, segment)
            if not isinstance(value, Mapping):
                if self.only_env:
                    return {}
                raise SectionNotFoundError(section)
            current = value
        return dict(current)

    def env_overlay(self, target: Any, section: str = "") -> dict[str, Any]:
        """Collect environment overrides for the fields of ``target``."""
        if not self.automatic_env:
            return {}
        prefix = [self.env_prefix] if self.env_prefix else []
        prefix.extend(split_section(section))
        return decode.env_overlay(target, prefix, self.key_delimiter, os.environ)

    def unmarshal(self, target: Any, section: str = "") -> Any:
        """Read the source and build a ``target`` instance from it.

        Args:
            target: Type to build
            section: Optional dotted subsection to build it from

        Raises:
            ConfigFileError: If the source cannot be read or decoded
            SectionNotFoundError: If the subsection does not exist
            ConfigValidationError: If the data does not fit the target
        """
        tree = self.read()
        if section:
            tree = self.sub(tree, section)
        return decode.unmarshal(tree, target, self.env_overlay(target, section))

    def __repr__(self) -> str:
        if self.only_env:
            source = "env"
        elif self.content is not None:
            source = STREAM_ORIGIN
        else:
            source = str(self.config_file or self.config_paths)
        return f"SourceReader(source={source!r})"


def _decode(text: str, config_format: ConfigFormat, origin: str) -> dict[str, Any]:
    try:
        if config_format is ConfigFormat.YAML:
            data = yaml.safe_load(text)
        elif config_format is ConfigFormat.JSON:
            data = json.loads(text) if text.strip() else None
        elif config_format is ConfigFormat.TOML:
            data = tomllib.loads(text)
        else:
            data = dict(dotenv_values(stream=io.StringIO(text)))
    except (yaml.YAMLError, ValueError) as e:
        raise ConfigFileError(f"Failed to decode {config_format.value} config from {origin}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(
            f"Top-level {config_format.value} document in {origin} must be a mapping, got: {type(data).__name__}"
        )
    return data
