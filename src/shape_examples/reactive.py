"""Observable cells and lazily recomputed computations.

A small pull-based reactive runtime:

- ``Cell`` holds a mutable value.  Reading it inside a running ``Computed``
  registers the cell as a dependency of that computation.
- ``Computed`` wraps a zero-argument function.  The result is memoized until
  any dependency read during the last run changes; the next ``get()`` then
  re-runs the function from scratch and records a fresh dependency set.
- Staleness propagates transitively: a ``Computed`` that reads another
  ``Computed`` is invalidated when anything upstream changes.

Execution is single-threaded and synchronous.  There are no locks; the
module-level tracking stack assumes one evaluation in flight at a time.

Example::

    selection = Cell(0)
    label = Computed(lambda: ["cat", "dog"][selection.get()])

    label.get()        # "cat" (computed)
    label.get()        # "cat" (memoized)
    selection.set(1)
    label.get()        # "dog" (recomputed)
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

from shape_examples.errors import CycleError

__all__ = ["Cell", "Computed", "untracked"]

T = TypeVar("T")

# Innermost entry is the computation currently collecting dependencies.
# ``None`` entries mark an ``untracked()`` block.
_tracking: list[Computed[Any] | None] = []


def _report_read(source: Cell[Any] | Computed[Any]) -> None:
    if not _tracking:
        return
    current = _tracking[-1]
    if current is None or current is source:
        return
    current._dependencies.add(source)
    source._observers.add(current)


@contextmanager
def untracked() -> Iterator[None]:
    """Suspend dependency registration for reads inside the block."""
    _tracking.append(None)
    try:
        yield
    finally:
        _tracking.pop()


class Cell(Generic[T]):
    """A mutable value whose reads are tracked and whose writes notify observers.

    Args:
        value: Initial value.
        name:  Optional label used in ``repr()``.
    """

    def __init__(self, value: T, name: str = "") -> None:
        self._value = value
        self.name = name
        self._observers: set[Computed[Any]] = set()

    def __repr__(self) -> str:
        return f"Cell({self.name or '?'}={self._value!r})"

    @property
    def observers(self) -> frozenset[Computed[Any]]:
        """Computations that read this cell on their last run."""
        return frozenset(self._observers)

    def get(self) -> T:
        """Return the value, registering a dependency when tracked."""
        _report_read(self)
        return self._value

    def peek(self) -> T:
        """Return the value without registering a dependency."""
        return self._value

    def set(self, value: T) -> None:
        """Store ``value``; observers go stale only when the value changed."""
        if value == self._value:
            return
        self._value = value
        for observer in list(self._observers):
            observer._mark_stale()


class Computed(Generic[T]):
    """A memoized derivation over cells and other computations.

    The wrapped function runs lazily on ``get()`` and only when stale.  An
    exception raised by the function is memoized like a value: it is re-raised
    on every ``get()`` until a dependency changes or ``invalidate()`` is called.
    Dependencies read before the exception are kept, so a later change still
    triggers a retry.

    Attributes:
        runs: Number of times the wrapped function has been evaluated.
    """

    def __init__(self, fn: Callable[[], T], name: str = "") -> None:
        self._fn = fn
        self.name = name
        self._stale = True
        self._running = False
        self._value: T | None = None
        self._error: Exception | None = None
        self._dependencies: set[Cell[Any] | Computed[Any]] = set()
        self._observers: set[Computed[Any]] = set()
        self.runs = 0

    def __repr__(self) -> str:
        state = "stale" if self._stale else "fresh"
        return f"Computed({self.name or '?'}, {state}, runs={self.runs})"

    @property
    def stale(self) -> bool:
        return self._stale

    @property
    def dependencies(self) -> frozenset[Cell[Any] | Computed[Any]]:
        """Cells and computations read during the last evaluation."""
        return frozenset(self._dependencies)

    @property
    def observers(self) -> frozenset[Computed[Any]]:
        return frozenset(self._observers)

    def get(self) -> T:
        """Return the memoized result, recomputing first when stale.

        Raises:
            CycleError: If the computation reads itself while evaluating.
            Exception:  Whatever the wrapped function raised on its last run.
        """
        if self._running:
            raise CycleError(f"{self!r} depends on itself")
        _report_read(self)
        if self._stale:
            self._evaluate()
        if self._error is not None:
            raise self._error
        return self._value  # type: ignore[return-value]

    def invalidate(self) -> None:
        """Force re-evaluation on the next ``get()``."""
        self._mark_stale()

    def _evaluate(self) -> None:
        for dependency in self._dependencies:
            dependency._observers.discard(self)
        self._dependencies = set()

        self._running = True
        _tracking.append(self)
        try:
            self._value = self._fn()
            self._error = None
        except Exception as exc:
            self._value = None
            self._error = exc
        finally:
            _tracking.pop()
            self._running = False
            self._stale = False
            self.runs += 1

    def _mark_stale(self) -> None:
        if self._stale:
            return
        self._stale = True
        for observer in list(self._observers):
            observer._mark_stale()
