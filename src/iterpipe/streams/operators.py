"""
Stream operators for transformation.

Every operator is a ``StreamOperator``: calling it with an iterable returns a
lazy, single-pass iterator. Operator objects hold only their configuration;
per-pull state lives inside ``apply`` so the same operator can be applied to
any number of upstreams independently.

Element callbacks receive ``(value, index)`` where ``index`` is the 0-based
position of the value in the upstream.
"""

import functools
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, TypeVar

from iterpipe.errors import IndexNotReachedError
from iterpipe.memory import StateGuard

T = TypeVar('T')
U = TypeVar('U')


class _Nothing:
    """Marker for an argument that was not supplied."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NOTHING"


NOTHING: Any = _Nothing()


class Slot(Generic[T]):
    """
    Holds at most one value and knows whether it holds one.

    Unlike ``None`` or a marker value, an empty slot cannot be confused with
    any stored value.
    """

    __slots__ = ("_value", "_is_set")

    def __init__(self):
        self._value: Optional[T] = None
        self._is_set = False

    @classmethod
    def of(cls, value: T) -> 'Slot[T]':
        slot = cls()
        slot.set(value)
        return slot

    @property
    def is_set(self) -> bool:
        return self._is_set

    @property
    def value(self) -> T:
        if not self._is_set:
            raise LookupError("Slot is empty")
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        self._is_set = True

    def __repr__(self) -> str:
        if self._is_set:
            return f"Slot({self._value!r})"
        return "Slot()"


@contextmanager
def pulling(iterable: Iterable[T]) -> Iterator[Iterator[T]]:
    """Open an iterator over ``iterable`` and close it when the block exits."""
    iterator = iter(iterable)
    try:
        yield iterator
    finally:
        close = getattr(iterator, "close", None)
        if close is not None:
            close()


def _require_callable(name: str, fn: Any) -> None:
    if not callable(fn):
        raise TypeError(f"{name} must be callable, got {type(fn).__name__}")


def _require_count(name: str, count: Any) -> None:
    if not isinstance(count, int) or isinstance(count, bool):
        raise TypeError(f"{name} must be an int, got {type(count).__name__}")
    if count < 0:
        raise ValueError(f"{name} must be non-negative, got {count}")


class StreamOperator(ABC):
    """Base class for stream operators."""

    @abstractmethod
    def apply(self, iterable: Iterable[T]) -> Iterator[Any]:
        """Apply operator to an iterable."""
        pass

    def __call__(self, iterable: Iterable[T]) -> Iterator[Any]:
        return self.apply(iterable)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class MapOperator(StreamOperator):
    """Map each element to a new value."""

    def __init__(self, func: Callable[[T, int], U]):
        _require_callable("func", func)
        self.func = func

    def apply(self, iterable: Iterable[T]) -> Iterator[U]:
        with pulling(iterable) as iterator:
            for index, item in enumerate(iterator):
                yield self.func(item, index)


class FlatMapOperator(StreamOperator):
    """Map each element to an iterable and emit its elements."""

    def __init__(self, func: Callable[[T, int], Iterable[U]]):
        _require_callable("func", func)
        self.func = func

    def apply(self, iterable: Iterable[T]) -> Iterator[U]:
        with pulling(iterable) as iterator:
            for index, item in enumerate(iterator):
                yield from self.func(item, index)


class TapOperator(StreamOperator):
    """Call a side effect on each element and pass it through."""

    def __init__(self, effect: Callable[[T, int], Any]):
        _require_callable("effect", effect)
        self.effect = effect

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        with pulling(iterable) as iterator:
            for index, item in enumerate(iterator):
                self.effect(item, index)
                yield item


class FilterOperator(StreamOperator):
    """Filter elements by predicate."""

    def __init__(self, predicate: Callable[[T, int], bool]):
        _require_callable("predicate", predicate)
        self.predicate = predicate

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        with pulling(iterable) as iterator:
            for index, item in enumerate(iterator):
                if self.predicate(item, index):
                    yield item


class FindOperator(StreamOperator):
    """Emit the first element matching a predicate."""

    def __init__(self, predicate: Callable[[T, int], bool]):
        _require_callable("predicate", predicate)
        self.predicate = predicate

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        with pulling(iterable) as iterator:
            for index, item in enumerate(iterator):
                if self.predicate(item, index):
                    yield item
                    return


class EveryOperator(StreamOperator):
    """Emit whether all elements satisfy a predicate."""

    def __init__(self, predicate: Callable[[T, int], bool]):
        _require_callable("predicate", predicate)
        self.predicate = predicate

    def apply(self, iterable: Iterable[T]) -> Iterator[bool]:
        with pulling(iterable) as iterator:
            for index, item in enumerate(iterator):
                if not self.predicate(item, index):
                    yield False
                    return
        yield True


class TakeOperator(StreamOperator):
    """Take first n elements."""

    def __init__(self, count: int):
        _require_count("count", count)
        self.count = count

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        if self.count == 0:
            return
        with pulling(iterable) as iterator:
            for index, item in enumerate(iterator, start=1):
                yield item
                if index >= self.count:
                    return


class TakeWhileOperator(StreamOperator):
    """Take elements while predicate is true."""

    def __init__(self, predicate: Callable[[T, int], bool]):
        _require_callable("predicate", predicate)
        self.predicate = predicate

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        with pulling(iterable) as iterator:
            for index, item in enumerate(iterator):
                if not self.predicate(item, index):
                    return
                yield item


class SkipOperator(StreamOperator):
    """Skip first n elements."""

    def __init__(self, count: int):
        _require_count("count", count)
        self.count = count

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        with pulling(iterable) as iterator:
            for index, item in enumerate(iterator):
                if index >= self.count:
                    yield item


class SkipWhileOperator(StreamOperator):
    """Drop elements while predicate is true."""

    def __init__(self, predicate: Callable[[T, int], bool]):
        _require_callable("predicate", predicate)
        self.predicate = predicate

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        dropping = True
        with pulling(iterable) as iterator:
            for index, item in enumerate(iterator):
                if dropping and self.predicate(item, index):
                    continue
                dropping = False
                yield item


class StartWithOperator(StreamOperator):
    """Emit the given values before the upstream."""

    def __init__(self, values: Iterable[T]):
        self.values = tuple(values)

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        yield from self.values
        with pulling(iterable) as iterator:
            yield from iterator


class EndWithOperator(StreamOperator):
    """Emit the given values after the upstream."""

    def __init__(self, values: Iterable[T]):
        self.values = tuple(values)

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        with pulling(iterable) as iterator:
            yield from iterator
        yield from self.values


class ElementAtOperator(StreamOperator):
    """Emit the element at a given index."""

    def __init__(self, index: int):
        _require_count("index", index)
        self.index = index

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        with pulling(iterable) as iterator:
            for index, item in enumerate(iterator):
                if index == self.index:
                    yield item
                    return
        raise IndexNotReachedError(self.index)


class CountOperator(StreamOperator):
    """Emit the number of upstream elements."""

    def apply(self, iterable: Iterable[T]) -> Iterator[int]:
        total = 0
        with pulling(iterable) as iterator:
            for _ in iterator:
                total += 1
        yield total


class DefaultIfEmptyOperator(StreamOperator):
    """Pass the upstream through, or emit a default if it was empty."""

    def __init__(self, default: T):
        self.default = default

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        empty = True
        with pulling(iterable) as iterator:
            for item in iterator:
                empty = False
                yield item
        if empty:
            yield self.default


class SortOperator(StreamOperator):
    """Gather all elements and emit them in sorted order."""

    def __init__(self,
                 key: Optional[Callable[[T], Any]] = None,
                 reverse: bool = False,
                 cmp: Optional[Callable[[T, T], int]] = None):
        if key is not None and cmp is not None:
            raise ValueError("Pass either key or cmp, not both")
        if cmp is not None:
            _require_callable("cmp", cmp)
            key = functools.cmp_to_key(cmp)
        self.key = key
        self.reverse = reverse

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        guard = StateGuard("sort")
        with pulling(iterable) as iterator:
            items: List[T] = []
            for item in iterator:
                items.append(item)
                guard.grow()
        items.sort(key=self.key, reverse=self.reverse)
        yield from items


# Factory functions

def map(func: Callable[[T, int], U]) -> MapOperator:
    """Emit ``func(value, index)`` for each upstream value."""
    return MapOperator(func)


def flat_map(func: Callable[[T, int], Iterable[U]]) -> FlatMapOperator:
    """Emit every element of ``func(value, index)`` for each upstream value."""
    return FlatMapOperator(func)


def tap(effect: Callable[[T, int], Any]) -> TapOperator:
    """Call ``effect(value, index)`` on each value and re-emit it; the return value is ignored."""
    return TapOperator(effect)


def filter(predicate: Callable[[T, int], bool]) -> FilterOperator:
    """Emit only values for which ``predicate(value, index)`` holds."""
    return FilterOperator(predicate)


def find(predicate: Callable[[T, int], bool]) -> FindOperator:
    return FindOperator(predicate)


def every(predicate: Callable[[T, int], bool]) -> EveryOperator:
    return EveryOperator(predicate)


def take(count: int = 1) -> TakeOperator:
    """Emit up to ``count`` values; never pulls more than ``count`` from upstream."""
    return TakeOperator(count)


def take_while(predicate: Callable[[T, int], bool]) -> TakeWhileOperator:
    """Emit values until ``predicate`` first fails; the failing value is dropped."""
    return TakeWhileOperator(predicate)


def skip(count: int = 1) -> SkipOperator:
    return SkipOperator(count)


def skip_while(predicate: Callable[[T, int], bool]) -> SkipWhileOperator:
    """Drop values while ``predicate`` holds, then emit the rest unchecked."""
    return SkipWhileOperator(predicate)


def start_with(*values: T) -> StartWithOperator:
    return StartWithOperator(values)


def end_with(*values: T) -> EndWithOperator:
    return EndWithOperator(values)


def element_at(index: int) -> ElementAtOperator:
    """
    Emit the value at ``index``.

    Raises:
        IndexNotReachedError: If the upstream finishes before ``index``
    """
    return ElementAtOperator(index)


def count() -> CountOperator:
    return CountOperator()


def default_if_empty(default: T) -> DefaultIfEmptyOperator:
    return DefaultIfEmptyOperator(default)


def sort(key: Optional[Callable[[T], Any]] = None,
         reverse: bool = False,
         cmp: Optional[Callable[[T, T], int]] = None) -> SortOperator:
    """Gather the upstream and emit it sorted by ``key`` or by a ``cmp`` function."""
    return SortOperator(key=key, reverse=reverse, cmp=cmp)
