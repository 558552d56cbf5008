"""Integration tests for subscribers that call back into the subject."""

import pytest

from diffvalue import Changed, DiffArraySubject, DiffValueSubject, DiffValueUpdate, Replay


@pytest.mark.integration
def test_current_value_from_callback_is_not_stale_and_does_not_deadlock():
    """Reading current_value inside a callback returns the just-published value"""
    subject = DiffValueSubject(0)
    observed = []

    def callback(update):
        if update.is_change:
            observed.append(subject.current_value)

    subject.subscribe(callback)

    def set_42(draft):
        draft.value = 42
        return "test"

    subject.update(set_42)

    assert observed == [42]
    assert subject.current_value == 42


@pytest.mark.integration
def test_recursive_update_from_callback_is_a_separate_later_envelope():
    """Bounded recursion from a callback yields ordered, separate changes"""
    # Arrange
    subject = DiffValueSubject(0)
    received = []
    recursive_calls = 0

    def add_100(draft):
        draft.value += 100
        return f"recursive-{recursive_calls}"

    def callback(update):
        nonlocal recursive_calls
        received.append(update)
        if update.is_change and recursive_calls < 2:
            recursive_calls += 1
            subject.update(add_100)

    subject.subscribe(callback)

    def set_42(draft):
        draft.value = 42
        return "initial"

    # Act
    subject.update(set_42)

    # Assert
    assert received == [
        DiffValueUpdate(0, Replay()),
        DiffValueUpdate(42, Changed("initial")),
        DiffValueUpdate(142, Changed("recursive-1")),
        DiffValueUpdate(242, Changed("recursive-2")),
    ]
    assert subject.current_value == 242


@pytest.mark.integration
def test_nested_update_reaches_other_subscribers_after_outer_change():
    """A second subscriber sees the outer change before the nested one"""
    subject = DiffArraySubject(["A"])
    second = []
    triggered = False

    def first(update):
        nonlocal triggered
        if update.is_change and not triggered:
            triggered = True
            subject.insert("C", 0)

    subject.subscribe(first)
    subject.subscribe(second.append)

    subject.insert("B", 1)

    assert [u.value for u in second] == [["A"], ["A", "B"], ["C", "A", "B"]]


@pytest.mark.integration
def test_subscribe_from_callback_gets_replay_of_latest_value():
    """A subscription created inside a callback replays the current value"""
    subject = DiffValueSubject(0)
    late = []

    def callback(update):
        if update.is_change and not late:
            subject.subscribe(late.append)

    subject.subscribe(callback)

    def set_5(draft):
        draft.value = 5
        return 5

    subject.update(set_5)
    subject.update(set_5)

    assert late == [
        DiffValueUpdate(5, Replay()),
        DiffValueUpdate(5, Changed(5)),
    ]
