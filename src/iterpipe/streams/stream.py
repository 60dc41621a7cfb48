"""
Fluent wrapper chaining operators over a source.
"""

from typing import (
    Any, Callable, Iterable, Iterator, List, Optional, TypeVar, Union
)

from iterpipe.streams import sources, sinks
from iterpipe.streams.operators import (
    NOTHING, StreamOperator,
    MapOperator, FlatMapOperator, TapOperator, FilterOperator, FindOperator,
    EveryOperator, TakeOperator, TakeWhileOperator, SkipOperator,
    SkipWhileOperator, StartWithOperator, EndWithOperator, ElementAtOperator,
    CountOperator, DefaultIfEmptyOperator, SortOperator,
)
from iterpipe.streams.windowing import (
    BufferClose, BufferOpen, BufferOperator, BufferToggleOperator
)
from iterpipe.streams.accumulation import ReduceFn, ReduceOperator, RepeatOperator
from iterpipe.streams.distinctness import DistinctOperator, DistinctUntilChangedOperator

T = TypeVar('T')
U = TypeVar('U')

Operator = Callable[[Iterable[Any]], Iterable[Any]]


class Stream(Iterable[T]):
    """
    A lazy stream over a source with a chain of operators.

    Nothing is pulled from the source until the stream is iterated or a
    terminal method is called. Chaining returns a new ``Stream``; the
    original is left untouched.

    A stream over a callable or a re-iterable collection can be iterated
    several times, each time pulling the source afresh. A stream over a
    one-shot iterator can only be consumed once.
    """

    def __init__(self, source: Union[Iterable[T], Callable[[], Iterator[T]]]):
        """
        Initialize stream.

        Args:
            source: Data source (iterable, or callable returning an iterator)
        """
        if callable(source) and not hasattr(source, '__iter__'):
            self._source = source
        elif hasattr(source, '__iter__'):
            self._source = lambda: iter(source)
        else:
            raise TypeError("Source must be iterable or callable")

        self._operators: List[Operator] = []

    def __iter__(self) -> Iterator[T]:
        """Create iterator with all operators applied."""
        iterator = self._source()

        for op in self._operators:
            iterator = op(iterator)

        return iter(iterator)

    def __repr__(self) -> str:
        return f"Stream(operators={self._operators!r})"

    def pipe(self, *operators: Operator) -> 'Stream[Any]':
        """Append operators to a copy of this stream."""
        new_stream = Stream(self._source)
        new_stream._operators = self._operators.copy()
        new_stream._operators.extend(operators)
        return new_stream

    # Element operators

    def map(self, func: Callable[[T, int], U]) -> 'Stream[U]':
        return self.pipe(MapOperator(func))

    def flat_map(self, func: Callable[[T, int], Iterable[U]]) -> 'Stream[U]':
        return self.pipe(FlatMapOperator(func))

    def tap(self, effect: Callable[[T, int], Any]) -> 'Stream[T]':
        return self.pipe(TapOperator(effect))

    def filter(self, predicate: Callable[[T, int], bool]) -> 'Stream[T]':
        return self.pipe(FilterOperator(predicate))

    def find(self, predicate: Callable[[T, int], bool]) -> 'Stream[T]':
        return self.pipe(FindOperator(predicate))

    def every(self, predicate: Callable[[T, int], bool]) -> 'Stream[bool]':
        return self.pipe(EveryOperator(predicate))

    def take(self, count: int = 1) -> 'Stream[T]':
        return self.pipe(TakeOperator(count))

    def take_while(self, predicate: Callable[[T, int], bool]) -> 'Stream[T]':
        return self.pipe(TakeWhileOperator(predicate))

    def skip(self, count: int = 1) -> 'Stream[T]':
        return self.pipe(SkipOperator(count))

    def skip_while(self, predicate: Callable[[T, int], bool]) -> 'Stream[T]':
        return self.pipe(SkipWhileOperator(predicate))

    def start_with(self, *values: T) -> 'Stream[T]':
        return self.pipe(StartWithOperator(values))

    def end_with(self, *values: T) -> 'Stream[T]':
        return self.pipe(EndWithOperator(values))

    def element_at(self, index: int) -> 'Stream[T]':
        return self.pipe(ElementAtOperator(index))

    def count(self) -> 'Stream[int]':
        return self.pipe(CountOperator())

    def default_if_empty(self, default: T) -> 'Stream[T]':
        return self.pipe(DefaultIfEmptyOperator(default))

    def sort(self,
             key: Optional[Callable[[T], Any]] = None,
             reverse: bool = False,
             cmp: Optional[Callable[[T, T], int]] = None) -> 'Stream[T]':
        return self.pipe(SortOperator(key=key, reverse=reverse, cmp=cmp))

    # Stateful operators

    def buffer(self, close: Optional[BufferClose] = None) -> 'Stream[List[T]]':
        return self.pipe(BufferOperator(close))

    def buffer_toggle(self, open: BufferOpen) -> 'Stream[List[T]]':
        return self.pipe(BufferToggleOperator(open))

    def reduce(self, fn: ReduceFn, initial: Any = NOTHING) -> 'Stream[Any]':
        return self.pipe(ReduceOperator(fn, initial))

    def repeat(self, count: Optional[int] = None) -> 'Stream[T]':
        return self.pipe(RepeatOperator(count))

    def distinct(self, key_selector: Optional[Callable[[T], Any]] = None) -> 'Stream[T]':
        return self.pipe(DistinctOperator(key_selector))

    def distinct_until_changed(self,
                               comparator: Optional[Callable[[Any, Any], bool]] = None,
                               key_selector: Optional[Callable[[T], Any]] = None) -> 'Stream[T]':
        return self.pipe(DistinctUntilChangedOperator(comparator, key_selector))

    # Terminal operators

    def to_list(self) -> List[T]:
        """Collect all elements into a list (empty for an empty stream)."""
        return list(self)

    def unwrap(self) -> List[T]:
        """Collect all elements; raises ``EmptySequenceError`` when empty."""
        return sinks.unwrap()(self)

    def unwrap_first(self) -> T:
        return sinks.unwrap_first()(self)

    def unwrap_last(self) -> T:
        return sinks.unwrap_last()(self)

    def unwrap_reduce(self, fn: ReduceFn, initial: Any = NOTHING) -> Any:
        return sinks.unwrap_reduce(fn, initial)(self)

    def for_each(self, effect: Callable[[T, int], Any]) -> None:
        sinks.for_each(effect)(self)

    # Factory methods

    @classmethod
    def from_iterable(cls, iterable: Iterable[T]) -> 'Stream[T]':
        """Create stream from iterable."""
        return cls(iterable)

    @classmethod
    def range(cls, start: int, count: Optional[int] = None) -> 'Stream[int]':
        """Create stream of ``count`` integers from ``start`` (endless without ``count``)."""
        return cls(lambda: sources.range(start, count))

    @classmethod
    def of(cls, *values: T) -> 'Stream[T]':
        return cls(values)

    @classmethod
    def generate(cls,
                 initial_state: Any,
                 iterate: Callable[[Any, int], Any],
                 condition: Optional[Callable[[Any, int], bool]] = None,
                 result_selector: Optional[Callable[[Any, int], T]] = None) -> 'Stream[T]':
        """Create stream from a state machine, see ``sources.generate``."""
        return cls(lambda: sources.generate(initial_state, iterate, condition, result_selector))
