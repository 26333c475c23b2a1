"""Exceptions for liveconfig."""


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigFileError(ConfigError):
    """Error locating, reading or decoding a configuration source."""

    pass


class SectionNotFoundError(ConfigError):
    """Requested subsection does not exist in the configuration source."""

    def __init__(self, section: str, message: str | None = None):
        self.section = section
        super().__init__(message or f'section not found in config: "{section}"')


class ConfigValidationError(ConfigError):
    """Error mapping configuration data onto the target type."""

    pass


class SnapshotNotLoadedError(ConfigError):
    """Snapshot read before any configuration was stored."""

    pass
