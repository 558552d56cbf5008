"""
Shared pytest fixtures and configuration for diffvalue tests.
"""

import pytest

from diffvalue import DiffArraySubject, DiffValueSubject


class Recorder:
    """Callable subscriber that records every envelope it receives."""

    def __init__(self):
        self.updates = []

    def __call__(self, update):
        self.updates.append(update)

    @property
    def values(self):
        return [u.value for u in self.updates]

    @property
    def diffs(self):
        return [u.diff for u in self.updates if u.is_change]


@pytest.fixture
def recorder():
    """Provide a fresh recording subscriber."""
    return Recorder()


@pytest.fixture
def counter():
    """An int subject starting at 0."""
    return DiffValueSubject(0, name="counter")


@pytest.fixture
def letters():
    """A list subject starting at ["A", "B"]."""
    return DiffArraySubject(["A", "B"], name="letters")


@pytest.fixture
def increment_by():
    """Factory for mutators that add ``amount`` and report it as the diff."""

    def factory(amount):
        def mutator(draft):
            draft.value += amount
            return amount

        return mutator

    return factory
