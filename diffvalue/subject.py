"""
diffvalue DiffValueSubject - Observable Value With Structural Diffs
===================================================================

This module provides DiffValueSubject, a thread-safe container that notifies
subscribers of both the new value and the diff that produced it.

Locking and delivery protocol:

- One RLock per subject serialises every mutation. Commits are totally ordered
  by lock acquisition.
- The change envelope is built and queued for each subscriber while the lock
  is held, then the lock is RELEASED before any callback runs. Subscribers can
  therefore call ``update``, ``current_value`` or ``subscribe`` on the same
  subject from inside their callback without deadlocking. The lock must never
  be held across fan-out.
- Each Subscription drains its own FIFO breadth-first. A caller that finds the
  subscription already draining (re-entrantly, or on another thread) only
  enqueues; the active drainer delivers. Every subscriber sees one Replay
  followed by Changed envelopes in commit order.

Example:
    ```python
    counter = DiffValueSubject(0)

    def increment(draft):
        draft.value += 1
        return 1

    sub = counter.subscribe(print)   # DiffValueUpdate(0, Replay())
    counter.update(increment)        # DiffValueUpdate(1, Changed(1))
    sub.cancel()
    ```
"""

import copy
import logging
import threading
from collections import deque
from typing import Any, Callable, Deque, Generic, Optional, TypeVar

from .update import Changed, DiffValueUpdate, Replay
from .util.subscriber_set import CoWSubscriberSet

V = TypeVar("V")
D = TypeVar("D")


# ============================================================================
# EXCEPTIONS
# ============================================================================


class ReentrantMutationError(RuntimeError):
    """Raised when a subject is mutated from inside one of its own mutators."""

    pass


# ============================================================================
# DRAFT
# ============================================================================


class Draft(Generic[V]):
    """
    Working copy handed to a mutator.

    Edit ``value`` in place or rebind it. It is committed only if the mutator
    returns normally.
    """

    __slots__ = ("value",)

    def __init__(self, value: V) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Draft({self.value!r})"


# ============================================================================
# SUBSCRIPTION
# ============================================================================


class Subscription(Generic[V, D]):
    """
    Cancellation handle and delivery queue for one subscriber.

    Cancelling is idempotent and safe from any thread, including from inside
    the subscriber's own callback. Usable as a context manager.
    """

    def __init__(
        self,
        subject: "DiffValueSubject[V, D]",
        callback: Callable[[DiffValueUpdate[V, D]], Any],
    ) -> None:
        self._subject = subject
        self._callback = callback
        self._pending: Deque[DiffValueUpdate[V, D]] = deque()
        self._lock = threading.Lock()
        self._draining = False
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        with self._lock:
            if not self._active:
                return
            self._active = False
            self._pending.clear()
        self._subject._remove_subscription(self)
        logging.debug(f"Subscription to '{self._subject.name}' cancelled")

    def _enqueue(self, update: DiffValueUpdate[V, D]) -> None:
        with self._lock:
            if self._active:
                self._pending.append(update)

    def _drain(self) -> None:
        # Only one drainer per subscription; others just leave their envelope
        # in the queue.
        with self._lock:
            if self._draining:
                return
            self._draining = True
        self._run_claimed()

    def _run_claimed(self) -> None:
        """Deliver queued envelopes; the caller must hold the draining claim."""
        try:
            while True:
                with self._lock:
                    if not self._active or not self._pending:
                        self._draining = False
                        return
                    update = self._pending.popleft()
                self._deliver(update)
        except BaseException:
            with self._lock:
                self._draining = False
            raise

    def _deliver(self, update: DiffValueUpdate[V, D]) -> None:
        try:
            self._callback(update)
        except Exception as e:
            logging.error(
                f"Error in subscriber of '{self._subject.name}' for {update!r}: {e}"
            )

    def __enter__(self) -> "Subscription[V, D]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cancel()

    def __repr__(self) -> str:
        state = "active" if self._active else "cancelled"
        return f"Subscription({self._subject.name!r}, {state})"


# ============================================================================
# SUBJECT
# ============================================================================


class DiffValueSubject(Generic[V, D]):
    """
    Thread-safe observable value that publishes a diff with every change.

    Args:
        initial_value: The starting value.
        name: Label used in logs and ``repr``.
        copier: Produces the working copy handed to each mutator. Defaults to
            ``copy.copy``; pass ``copy.deepcopy`` for nested mutable values.

    Values returned by ``current_value`` and carried by envelopes are the
    committed objects themselves. Treat them as read-only; later mutations
    always work on a fresh copy, so an envelope's value never changes after
    it was published.
    """

    def __init__(
        self,
        initial_value: V,
        *,
        name: Optional[str] = None,
        copier: Callable[[V], V] = copy.copy,
    ) -> None:
        self._name = name or "<unnamed>"
        self._value = initial_value
        self._copier = copier
        self._lock = threading.RLock()
        self._local = threading.local()
        self._subscribers: CoWSubscriberSet[Subscription[V, D]] = CoWSubscriberSet()

    @property
    def name(self) -> str:
        return self._name

    @property
    def current_value(self) -> V:
        with self._lock:
            return self._value

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def update(self, mutator: Callable[[Draft[V]], D]) -> D:
        """
        Apply ``mutator`` to a working copy, commit it and notify subscribers.

        The mutator receives a Draft and returns the diff describing what it
        changed. If it raises, nothing is committed, no notification fires and
        the exception propagates.

        Delivery is synchronous unless another thread is already delivering to
        a subscriber; that thread then delivers this change after its current
        one, so ``update`` may return before the subscriber has seen it.

        Returns:
            The diff returned by the mutator.

        Raises:
            ReentrantMutationError: If called from inside a mutator of this
                subject.
        """
        if getattr(self._local, "mutating", False):
            raise ReentrantMutationError(
                f"Cannot update '{self._name}' from inside one of its own mutators"
            )

        with self._lock:
            draft = Draft(self._copier(self._value))
            self._local.mutating = True
            try:
                diff = mutator(draft)
            except Exception as e:
                logging.debug(f"Mutation of '{self._name}' failed, nothing committed: {e}")
                raise
            finally:
                self._local.mutating = False

            self._value = draft.value
            change = DiffValueUpdate(draft.value, Changed(diff))
            subscribers = self._subscribers.snapshot()
            for subscription in subscribers:
                subscription._enqueue(change)

        # Lock released: callbacks may re-enter this subject.
        for subscription in subscribers:
            subscription._drain()

        return diff

    def subscribe(
        self, callback: Callable[[DiffValueUpdate[V, D]], Any]
    ) -> Subscription[V, D]:
        """
        Register ``callback`` and replay the current value to it.

        The calling thread owns delivery to the new subscription from the
        start, so the Replay and any change committed meanwhile are delivered,
        in that order, before ``subscribe`` returns.
        """
        subscription = Subscription(self, callback)
        # Claimed before registration: concurrent writers only enqueue.
        subscription._draining = True
        with self._lock:
            subscription._enqueue(DiffValueUpdate(self._value, Replay()))
            self._subscribers.add(subscription)

        logging.debug(f"New subscription to '{self._name}'")
        subscription._run_claimed()
        return subscription

    def _remove_subscription(self, subscription: Subscription[V, D]) -> None:
        self._subscribers.discard(subscription)

    # ========================================================================
    # COMPATIBILITY ALIASES
    # ========================================================================

    def mutate(self, mutator: Callable[[Draft[V]], D]) -> D:
        """Alias for update."""
        return self.update(mutator)

    def sink(
        self, callback: Callable[[DiffValueUpdate[V, D]], Any]
    ) -> Subscription[V, D]:
        """Alias for subscribe."""
        return self.subscribe(callback)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, {self.current_value!r})"


__all__ = ["DiffValueSubject", "Draft", "Subscription", "ReentrantMutationError"]
