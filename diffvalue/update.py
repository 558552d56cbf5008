"""
diffvalue Update Envelope
=========================

This module provides the immutable notification payload delivered to every
subscriber of a DiffValueSubject.

Each DiffValueUpdate pairs a full value snapshot with an update type:

- Replay: the synthetic first message a new subscriber receives, carrying the
  value as of subscription time.
- Changed: a committed mutation, carrying the diff that produced the value.

Example:
    ```python
    def on_update(update):
        if update.is_replay:
            render_all(update.value)
        else:
            apply_incrementally(update.diff)
    ```
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

V = TypeVar("V")
D = TypeVar("D")


@dataclass(frozen=True, slots=True)
class Replay:
    """Replay of the current value for a new subscriber."""

    def __repr__(self) -> str:
        return "Replay()"


@dataclass(frozen=True, slots=True)
class Changed(Generic[D]):
    """A committed change described by ``diff``."""

    diff: D

    def __repr__(self) -> str:
        return f"Changed({self.diff!r})"


UpdateType = Union[Replay, Changed[Any]]


@dataclass(frozen=True, slots=True)
class DiffValueUpdate(Generic[V, D]):
    """
    Immutable envelope pairing a value with the kind of update that produced it.

    ``value`` always reflects the state after the change described by
    ``update_type`` (if any).
    """

    value: V
    update_type: UpdateType

    @property
    def is_replay(self) -> bool:
        return isinstance(self.update_type, Replay)

    @property
    def is_change(self) -> bool:
        return isinstance(self.update_type, Changed)

    @property
    def diff(self) -> Optional[D]:
        """The diff of a change, None for a replay."""
        if isinstance(self.update_type, Changed):
            return self.update_type.diff
        return None

    def __repr__(self) -> str:
        return f"DiffValueUpdate({self.value!r}, {self.update_type!r})"


__all__ = ["Replay", "Changed", "UpdateType", "DiffValueUpdate"]
