"""
diffvalue Sequence Diffs - List Mutations With Index-Level Diffs
================================================================

This module provides the ArrayDiff taxonomy and DiffArraySubject, a
DiffValueSubject specialised for lists whose helpers emit one diff per edit.

ArrayDiff is a closed union of four frozen variants:

- Insert(index, element): ``index`` is valid in the resulting list
- Remove(index, element): ``index`` is valid in the prior list
- Move(from_index, to_index, element): remove at ``from_index``, then insert
  at ``to_index`` in the intermediate (one shorter) list
- Replace(index, old_element, new_element)

Indices are plain non-negative positions. Negative indices and the clamping
done by ``list.insert`` are rejected with IndexOutOfBoundsError.

Example:
    ```python
    letters = DiffArraySubject(["A", "B"])
    letters.insert("C", 1)      # ["A", "C", "B"]  Insert(1, 'C')
    letters.move(0, 2)          # ["C", "B", "A"]  Move(0, 2, 'A')
    letters.replace_at(1, "X")  # ["C", "X", "A"]  Replace(1, 'B', 'X')
    ```
"""

from dataclasses import dataclass
from typing import Generic, List, MutableSequence, TypeVar, Union

from .subject import DiffValueSubject, Draft

T = TypeVar("T")


# ============================================================================
# EXCEPTIONS
# ============================================================================


class IndexOutOfBoundsError(IndexError):
    """Raised when a sequence index is outside the range valid for an operation."""

    pass


def _check_index(index: int, upper: int, operation: str) -> None:
    """Require 0 <= index < upper."""
    if not 0 <= index < upper:
        raise IndexOutOfBoundsError(
            f"{operation}: index {index} out of range [0, {upper})"
        )


# ============================================================================
# DIFF VARIANTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Insert(Generic[T]):
    """``element`` was inserted at ``index``."""

    index: int
    element: T

    def inverse(self) -> "Remove[T]":
        return Remove(self.index, self.element)

    def apply_to(self, sequence: MutableSequence[T]) -> None:
        _check_index(self.index, len(sequence) + 1, "insert")
        sequence.insert(self.index, self.element)


@dataclass(frozen=True, slots=True)
class Remove(Generic[T]):
    """``element`` was removed from ``index``."""

    index: int
    element: T

    def inverse(self) -> Insert[T]:
        return Insert(self.index, self.element)

    def apply_to(self, sequence: MutableSequence[T]) -> None:
        _check_index(self.index, len(sequence), "remove")
        del sequence[self.index]


@dataclass(frozen=True, slots=True)
class Move(Generic[T]):
    """``element`` was removed from ``from_index`` and reinserted at ``to_index``."""

    from_index: int
    to_index: int
    element: T

    def inverse(self) -> "Move[T]":
        return Move(self.to_index, self.from_index, self.element)

    def apply_to(self, sequence: MutableSequence[T]) -> None:
        _check_index(self.from_index, len(sequence), "move")
        # to_index is an insertion point in the list after removal
        _check_index(self.to_index, len(sequence), "move")
        element = sequence.pop(self.from_index)
        sequence.insert(self.to_index, element)


@dataclass(frozen=True, slots=True)
class Replace(Generic[T]):
    """The element at ``index`` went from ``old_element`` to ``new_element``."""

    index: int
    old_element: T
    new_element: T

    def inverse(self) -> "Replace[T]":
        return Replace(self.index, self.new_element, self.old_element)

    def apply_to(self, sequence: MutableSequence[T]) -> None:
        _check_index(self.index, len(sequence), "replace")
        sequence[self.index] = self.new_element


ArrayDiff = Union[Insert[T], Remove[T], Move[T], Replace[T]]


# ============================================================================
# SUBJECT
# ============================================================================


class DiffArraySubject(DiffValueSubject[List[T], ArrayDiff[T]]):
    """
    DiffValueSubject holding a list, with index-level mutation helpers.

    Each helper performs one edit and returns the matching ArrayDiff under a
    single held lock, so no subscriber ever sees a list that disagrees with
    the diff accompanying it. An invalid index raises IndexOutOfBoundsError
    before anything is committed.
    """

    def insert(self, element: T, index: int) -> Insert[T]:
        def mutator(draft: Draft[List[T]]) -> Insert[T]:
            diff = Insert(index, element)
            diff.apply_to(draft.value)
            return diff

        return self.update(mutator)

    def remove_at(self, index: int) -> Remove[T]:
        def mutator(draft: Draft[List[T]]) -> Remove[T]:
            items = draft.value
            _check_index(index, len(items), "remove_at")
            return Remove(index, items.pop(index))

        return self.update(mutator)

    def move(self, source_index: int, destination_index: int) -> Move[T]:
        def mutator(draft: Draft[List[T]]) -> Move[T]:
            items = draft.value
            _check_index(source_index, len(items), "move")
            _check_index(destination_index, len(items), "move")
            element = items.pop(source_index)
            items.insert(destination_index, element)
            return Move(source_index, destination_index, element)

        return self.update(mutator)

    def replace_at(self, index: int, new_element: T) -> Replace[T]:
        def mutator(draft: Draft[List[T]]) -> Replace[T]:
            items = draft.value
            _check_index(index, len(items), "replace_at")
            old_element = items[index]
            items[index] = new_element
            return Replace(index, old_element, new_element)

        return self.update(mutator)

    # Alternative spellings
    remove = remove_at
    update_element = replace_at


__all__ = [
    "Insert",
    "Remove",
    "Move",
    "Replace",
    "ArrayDiff",
    "DiffArraySubject",
    "IndexOutOfBoundsError",
]
