"""
Distinctness operators: suppress repeated elements.
"""

import operator
from typing import Any, Callable, Iterable, Iterator, Optional, Set, TypeVar

from iterpipe.memory import StateGuard
from iterpipe.streams.operators import Slot, StreamOperator, pulling, _require_callable

T = TypeVar('T')
K = TypeVar('K')


def _identity(value):
    return value


class DistinctOperator(StreamOperator):
    """Remove duplicate elements."""

    def __init__(self, key_selector: Optional[Callable[[T], K]] = None):
        if key_selector is not None:
            _require_callable("key_selector", key_selector)
        self.key_selector = key_selector or _identity

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        guard = StateGuard("distinct")
        seen: Set[Any] = set()

        with pulling(iterable) as iterator:
            for item in iterator:
                key = self.key_selector(item)
                if key not in seen:
                    seen.add(key)
                    guard.grow()
                    yield item


class DistinctUntilChangedOperator(StreamOperator):
    """Remove elements equal to the element just before them."""

    def __init__(self,
                 comparator: Optional[Callable[[K, K], bool]] = None,
                 key_selector: Optional[Callable[[T], K]] = None):
        if comparator is not None:
            _require_callable("comparator", comparator)
        if key_selector is not None:
            _require_callable("key_selector", key_selector)
        self.comparator = comparator or operator.eq
        self.key_selector = key_selector or _identity

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        last_key: Slot = Slot()

        with pulling(iterable) as iterator:
            for item in iterator:
                key = self.key_selector(item)
                if last_key.is_set and self.comparator(last_key.value, key):
                    continue
                last_key.set(key)
                yield item


def distinct(key_selector: Optional[Callable[[T], K]] = None) -> DistinctOperator:
    """
    Emit only the first element for each key.

    Keys are compared with set membership, so they must be hashable. Every
    key seen is kept for the lifetime of the iteration.
    """
    return DistinctOperator(key_selector)


def distinct_until_changed(comparator: Optional[Callable[[K, K], bool]] = None,
                           key_selector: Optional[Callable[[T], K]] = None) -> DistinctUntilChangedOperator:
    """
    Emit an element when its key differs from the key of the last emitted one.

    Args:
        comparator: ``comparator(previous_key, key)`` returning True when the
            keys are considered equal (defaults to ``==``)
        key_selector: Derives the compared key from an element (defaults to
            the element itself)
    """
    return DistinctUntilChangedOperator(comparator, key_selector)
