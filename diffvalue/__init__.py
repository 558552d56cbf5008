"""
diffvalue - Observable Values With Structural Diffs

A thread-safe observable container that tells subscribers not only what the
value is now but exactly which change produced it, so consumers can apply
incremental updates instead of re-rendering everything.
"""

# Envelope delivered to subscribers
from .update import Changed, DiffValueUpdate, Replay, UpdateType

# Core container
from .subject import DiffValueSubject, Draft, ReentrantMutationError, Subscription

# List specialisation and its diff taxonomy
from .sequence import (
    ArrayDiff,
    DiffArraySubject,
    IndexOutOfBoundsError,
    Insert,
    Move,
    Remove,
    Replace,
)

__all__ = [
    # Envelope
    "DiffValueUpdate",
    "UpdateType",
    "Replay",
    "Changed",
    # Container
    "DiffValueSubject",
    "Draft",
    "Subscription",
    # Sequences
    "DiffArraySubject",
    "ArrayDiff",
    "Insert",
    "Remove",
    "Move",
    "Replace",
    # Exceptions
    "ReentrantMutationError",
    "IndexOutOfBoundsError",
]
