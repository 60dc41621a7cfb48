"""
Accumulation operators: fold a stream to a single value, or replay it.
"""

import itertools
import logging
from typing import Any, Callable, Iterable, Iterator, List, Optional, TypeVar

from iterpipe.memory import StateGuard
from iterpipe.streams.operators import NOTHING, Slot, StreamOperator, pulling, _require_callable

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')

ReduceFn = Callable[[U, T], U]


class ReduceOperator(StreamOperator):
    """Fold all elements into one value."""

    def __init__(self, fn: ReduceFn, initial: Any = NOTHING):
        _require_callable("fn", fn)
        self.fn = fn
        self.initial = initial

    @property
    def has_initial(self) -> bool:
        return self.initial is not NOTHING

    def apply(self, iterable: Iterable[T]) -> Iterator[Any]:
        accumulator: Slot = Slot.of(self.initial) if self.has_initial else Slot()

        with pulling(iterable) as iterator:
            for item in iterator:
                if accumulator.is_set:
                    accumulator.set(self.fn(accumulator.value, item))
                else:
                    accumulator.set(item)

        if accumulator.is_set:
            yield accumulator.value

    def __repr__(self) -> str:
        if self.has_initial:
            return f"ReduceOperator(fn={self.fn!r}, initial={self.initial!r})"
        return f"ReduceOperator(fn={self.fn!r})"


class RepeatOperator(StreamOperator):
    """Emit the upstream, then replay it."""

    def __init__(self, count: Optional[int] = None):
        if count is not None and (not isinstance(count, int) or isinstance(count, bool)):
            raise TypeError(f"count must be an int or None, got {type(count).__name__}")
        self.count = count

    @property
    def infinite(self) -> bool:
        return self.count is None or self.count < 0

    def apply(self, iterable: Iterable[T]) -> Iterator[T]:
        if self.count == 0:
            return

        if self.count == 1:
            with pulling(iterable) as iterator:
                yield from iterator
            return

        guard = StateGuard("repeat")
        recorded: List[T] = []
        with pulling(iterable) as iterator:
            for item in iterator:
                recorded.append(item)
                guard.grow()
                yield item

        if not recorded:
            return

        if self.infinite:
            logger.debug("Replaying %d elements indefinitely", len(recorded))
            passes = itertools.repeat(None)
        else:
            logger.debug("Replaying %d elements %d more times", len(recorded), self.count - 1)
            passes = itertools.repeat(None, self.count - 1)

        for _ in passes:
            yield from recorded

    def __repr__(self) -> str:
        return f"RepeatOperator(count={self.count!r})"


def reduce(fn: ReduceFn, initial: Any = NOTHING) -> ReduceOperator:
    """
    Fold the upstream with ``fn(accumulator, value)`` and emit the result.

    Without ``initial`` the first upstream value seeds the accumulator and
    ``fn`` is first called with the first two values. Passing ``initial``
    (``None`` included) seeds the accumulator with it.

    Emits exactly one value, unless the upstream is empty and no initial
    value was given, in which case it emits nothing.

    Example:
        >>> list(reduce(lambda acc, v: acc + v)([2, 3, 4]))
        [9]
        >>> list(reduce(lambda acc, v: acc + v, 7)([]))
        [7]
    """
    return ReduceOperator(fn, initial)


def repeat(count: Optional[int] = None) -> RepeatOperator:
    """
    Emit the upstream ``count`` times.

    The first pass pulls the upstream live while recording it; later passes
    replay the recording, so upstream side effects happen once. ``count=0``
    emits nothing without pulling. ``None`` or a negative count repeats
    forever and must be bounded downstream, for example with ``take``.
    """
    return RepeatOperator(count)
