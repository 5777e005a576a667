from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

# Keys currently under construction in this thread or task. Each top-level
# resolve starts from the empty tuple and leaves it empty when it returns.
_resolution_stack: ContextVar[tuple[str, ...]] = ContextVar("resolution_stack", default=())


def current_stack() -> tuple[str, ...]:
    """Return the keys being constructed by the current resolve call chain."""
    return _resolution_stack.get()


@contextmanager
def push_key(key: str) -> Iterator[tuple[str, ...]]:
    """Push ``key`` for the duration of the block and pop it afterwards.

    Yields:
        The stack including ``key``.

    """
    stack = (*_resolution_stack.get(), key)
    token = _resolution_stack.set(stack)
    try:
        yield stack
    finally:
        _resolution_stack.reset(token)


def find_cycle(stack: tuple[str, ...], key: str) -> list[str] | None:
    """Return the cycle closed by requesting ``key`` again, if any."""
    if key not in stack:
        return None
    return [*stack[stack.index(key) :], key]
