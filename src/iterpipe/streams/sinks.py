"""
Sinks: terminal consumers that drive a stream and return a concrete value.

Each factory returns a function taking an iterable, so sinks compose with
``pipe`` like operators do.
"""

from typing import Any, Callable, Iterable, List, TypeVar

from iterpipe.errors import EmptySequenceError
from iterpipe.streams.accumulation import ReduceFn, reduce
from iterpipe.streams.operators import NOTHING, Slot, pulling, _require_callable

T = TypeVar('T')


def for_each(effect: Callable[[T, int], Any]) -> Callable[[Iterable[T]], None]:
    """Call ``effect(value, index)`` for every upstream value."""
    _require_callable("effect", effect)

    def consume(iterable: Iterable[T]) -> None:
        with pulling(iterable) as iterator:
            for index, item in enumerate(iterator):
                effect(item, index)

    return consume


def unwrap() -> Callable[[Iterable[T]], List[T]]:
    """
    Collect every upstream value into a list.

    Raises:
        EmptySequenceError: If the upstream was empty
    """
    def consume(iterable: Iterable[T]) -> List[T]:
        with pulling(iterable) as iterator:
            items = list(iterator)
        if not items:
            raise EmptySequenceError("No values to unwrap.")
        return items

    return consume


def unwrap_first() -> Callable[[Iterable[T]], T]:
    """
    Return the first upstream value, pulling nothing more.

    Raises:
        EmptySequenceError: If the upstream was empty
    """
    def consume(iterable: Iterable[T]) -> T:
        with pulling(iterable) as iterator:
            for item in iterator:
                return item
        raise EmptySequenceError("Tried to unwrap first element from empty iterator.")

    return consume


def unwrap_last() -> Callable[[Iterable[T]], T]:
    """
    Return the last upstream value.

    Raises:
        EmptySequenceError: If the upstream was empty
    """
    def consume(iterable: Iterable[T]) -> T:
        last: Slot = Slot()
        with pulling(iterable) as iterator:
            for item in iterator:
                last.set(item)
        if not last.is_set:
            raise EmptySequenceError("Tried to unwrap last element from empty iterator.")
        return last.value

    return consume


def unwrap_reduce(fn: ReduceFn, initial: Any = NOTHING) -> Callable[[Iterable[T]], Any]:
    """
    Fold the upstream like ``reduce`` and return the folded value.

    Raises:
        EmptySequenceError: If the upstream was empty and no initial value
            was given
    """
    operator = reduce(fn, initial)

    def consume(iterable: Iterable[T]) -> Any:
        for value in operator(iterable):
            return value
        raise EmptySequenceError("No values to unwrap.")

    return consume
