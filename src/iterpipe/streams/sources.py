"""
Source generators: produce lazy iterators to feed a pipeline.
"""

import builtins
import itertools
from typing import Callable, Iterable, Iterator, Optional, Tuple, TypeVar

from iterpipe.streams.operators import _require_callable, _require_count

T = TypeVar('T')
S = TypeVar('S')


def range(start: int, count: Optional[int] = None) -> Iterator[int]:
    """
    Emit ``count`` consecutive integers starting at ``start``.

    Without ``count`` the integers never end.

    Example:
        >>> list(range(1, 5))
        [1, 2, 3, 4, 5]
    """
    if count is None:
        return itertools.count(start)
    _require_count("count", count)
    return iter(builtins.range(start, start + count))


def generate(initial_state: S,
             iterate: Callable[[S, int], S],
             condition: Optional[Callable[[S, int], bool]] = None,
             result_selector: Optional[Callable[[S, int], T]] = None) -> Iterator:
    """
    Emit states produced by repeatedly applying ``iterate``.

    While ``condition(state, index)`` holds (always, when omitted) the state
    is emitted, or ``result_selector(state, index)`` when given, and the next
    state becomes ``iterate(state, index)``.
    """
    _require_callable("iterate", iterate)
    return _generate(initial_state, iterate, condition, result_selector)


def _generate(state, iterate, condition, result_selector):
    index = 0
    while condition is None or condition(state, index):
        if result_selector is None:
            yield state
        else:
            yield result_selector(state, index)
        state = iterate(state, index)
        index += 1


def just(value: T) -> Iterator[T]:
    """Emit ``value`` once; iterables are not unrolled."""
    yield value


def of(*values: T) -> Iterator[T]:
    """Emit each argument in order; iterables are not unrolled."""
    return iter(values)


def empty() -> Iterator:
    return iter(())


def zip(*iterables: Iterable) -> Iterator[Tuple]:
    """Emit tuples of corresponding elements, stopping at the shortest input."""
    return builtins.zip(*iterables)


def concat(*iterables: Iterable[T]) -> Iterator[T]:
    """Emit every element of each iterable in turn."""
    return itertools.chain.from_iterable(iterables)
