"""
Left-to-right composition of operators.
"""

import functools
from typing import Any, Callable


def pipe(value: Any, *fns: Callable[[Any], Any]) -> Any:
    """
    Pass ``value`` through each function in turn.

    ``pipe(a, f, g, h)`` is ``h(g(f(a)))`` and ``pipe(a)`` is ``a``. The
    initial value is handed over as is, never iterated.

    Example:
        >>> from iterpipe.streams import map, unwrap
        >>> pipe([1, 2, 3], map(lambda v, i: v * 2), unwrap())
        [2, 4, 6]
    """
    return functools.reduce(lambda acc, fn: fn(acc), fns, value)
