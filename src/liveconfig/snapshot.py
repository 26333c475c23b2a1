"""Atomic snapshot holder for the current configuration value."""

from typing import Generic
from typing import TypeVar

from .exceptions import SnapshotNotLoadedError

T = TypeVar("T")

_UNSET = object()


class SnapshotStore(Generic[T]):
    """Holds the current configuration behind a single reference.

    Values are built completely before ``store`` is called and published
    with one attribute assignment, which the interpreter performs
    atomically. Readers therefore see either the previous or the new value,
    never a partially built one, and never take a lock.
    """

    def __init__(self) -> None:
        self._value: object = _UNSET

    @property
    def loaded(self) -> bool:
        """Whether a value has been stored."""
        return self._value is not _UNSET

    def store(self, value: T) -> None:
        """Publish ``value`` as the current snapshot."""
        self._value = value

    def load(self) -> T:
        """Return the current snapshot.

        Raises:
            SnapshotNotLoadedError: If nothing was stored yet
        """
        value = self._value
        if value is _UNSET:
            raise SnapshotNotLoadedError("Configuration was not parsed yet; call parse() before load()")
        return value  # type: ignore[return-value]
