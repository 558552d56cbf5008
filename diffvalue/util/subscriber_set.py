"""
Copy-on-Write Subscriber Set
============================

This module provides CoWSubscriberSet, the ordered subscriber collection used
by DiffValueSubject for fan-out.

Writers replace the backing tuple instead of editing it, so a snapshot taken
for one notification never changes underneath the fan-out loop. Subscribers
may be added or cancelled while another thread (or their own callback) is
iterating an older snapshot.
"""

import threading
from typing import Generic, Tuple, TypeVar

S = TypeVar("S")


class CoWSubscriberSet(Generic[S]):
    """
    Copy-on-Write ordered set of subscribers.

    Reads are lock-free: ``snapshot()`` returns the current immutable tuple.
    Mutations copy the tuple under a private lock.
    """

    __slots__ = ("_subscribers", "_write_lock")

    def __init__(self) -> None:
        self._subscribers: Tuple[S, ...] = ()
        self._write_lock = threading.Lock()

    def add(self, subscriber: S) -> None:
        """Append subscriber, copying the backing tuple."""
        with self._write_lock:
            self._subscribers = self._subscribers + (subscriber,)

    def discard(self, subscriber: S) -> bool:
        """Remove subscriber if present. Returns True if it was removed."""
        with self._write_lock:
            current = self._subscribers
            if subscriber not in current:
                return False
            self._subscribers = tuple(s for s in current if s is not subscriber)
            return True

    def snapshot(self) -> Tuple[S, ...]:
        return self._subscribers

    def __len__(self) -> int:
        return len(self._subscribers)
