"""
Windowing operators: partition a stream into lists of buffered elements.

``buffer`` keeps a single active window; ``buffer_toggle`` keeps any number
of overlapping windows, each with its own close predicate.
"""

from collections import deque
from typing import Callable, Deque, Iterable, Iterator, List, Optional, TypeVar, Union

from iterpipe.memory import StateGuard
from iterpipe.streams.operators import StreamOperator, pulling, _require_callable

T = TypeVar('T')

BufferClose = Callable[[T, int, List[T]], bool]
BufferOpen = Callable[[T, int], Union[bool, BufferClose]]


def _never_close(value, index, buffer) -> bool:
    return False


class BufferOperator(StreamOperator):
    """Group elements into lists closed by a predicate."""

    def __init__(self, close: Optional[BufferClose] = None):
        if close is not None:
            _require_callable("close", close)
        self.close = close

    def apply(self, iterable: Iterable[T]) -> Iterator[List[T]]:
        close = self.close or _never_close
        guard = StateGuard("buffer")
        window: List[T] = []

        with pulling(iterable) as iterator:
            for index, item in enumerate(iterator):
                window.append(item)
                guard.grow()
                if close(item, index, window):
                    guard.shrink(len(window))
                    closed, window = window, []
                    yield closed

        # Without a close predicate an empty upstream still yields one empty list
        if window or self.close is None:
            yield window

    def __repr__(self) -> str:
        return f"BufferOperator(close={self.close!r})"


class _Window:
    __slots__ = ("items", "close", "closed")

    def __init__(self, close: BufferClose):
        self.items: List = []
        self.close = close
        self.closed = False


class BufferToggleOperator(StreamOperator):
    """
    Open overlapping windows on demand and close each independently.

    For every upstream element ``open(value, index)`` is evaluated first:

    - a falsy result opens nothing,
    - a callable result opens a window closed by that callable,
    - any other truthy result (normally ``True``) opens a window that stays
      open until the upstream finishes.

    The element is then appended to every open window, oldest first, and
    each window whose close predicate returns true is emitted immediately.
    Windows still open when the upstream finishes are emitted in the order
    they were opened.
    """

    def __init__(self, open: BufferOpen):
        _require_callable("open", open)
        self.open = open

    def apply(self, iterable: Iterable[T]) -> Iterator[List[T]]:
        guard = StateGuard("buffer_toggle")
        windows: Deque[_Window] = deque()

        with pulling(iterable) as iterator:
            for index, item in enumerate(iterator):
                opened = self.open(item, index)
                if callable(opened):
                    windows.append(_Window(opened))
                elif opened:
                    windows.append(_Window(_never_close))

                for window in windows:
                    if window.closed:
                        continue
                    window.items.append(item)
                    guard.grow()
                    if window.close(item, index, window.items):
                        window.closed = True
                        guard.shrink(len(window.items))
                        closed, window.items = window.items, []
                        yield closed

                # Closed windows behind an open one stay until they reach the front
                while windows and windows[0].closed:
                    windows.popleft()

        for window in windows:
            if not window.closed:
                yield window.items

    def __repr__(self) -> str:
        return f"BufferToggleOperator(open={self.open!r})"


def buffer(close: Optional[BufferClose] = None) -> BufferOperator:
    """
    Gather upstream values into lists.

    Each value is appended to the active list before
    ``close(value, index, buffer)`` is evaluated; when it returns true the
    list is emitted and a new one started. The list passed to ``close`` is
    the live buffer and must not be modified.

    Without ``close`` the whole upstream is emitted as one list, and an empty
    upstream produces a single empty list. With ``close`` an empty upstream
    produces nothing.

    Example:
        >>> list(buffer(lambda v, i, buf: v % 2 == 0)([2, 3, 4, 5]))
        [[2], [3, 4], [5]]
    """
    return BufferOperator(close)


def buffer_toggle(open: BufferOpen) -> BufferToggleOperator:
    """
    Gather upstream values into overlapping lists opened by ``open``.

    Example:
        >>> list(buffer_toggle(lambda v, i: True)([2, 3, 4, 5]))
        [[2, 3, 4, 5], [3, 4, 5], [4, 5], [5]]
    """
    return BufferToggleOperator(open)
