"""Thread-safe compute-once cell.

Coordinates concurrent first readers so only one thread performs the work,
while the others block on the same lock and reuse the stored result.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

T = TypeVar("T")


class Once(Generic[T]):
    """Hold a value that is computed at most once.

    - If already computed, ``get`` returns without taking the lock.
    - Otherwise the first caller runs *work* under the lock; callers that
      arrive meanwhile wait and then return the stored value.
    - If *work* raises, nothing is stored and the error propagates to that
      caller; the next caller tries again.
    """

    __slots__ = ("_done", "_lock", "_value", "_work")

    def __init__(self, work: Callable[[], T]) -> None:
        self._work = work
        self._lock = threading.Lock()
        self._done = False
        self._value: T | None = None

    @property
    def done(self) -> bool:
        return self._done

    def get(self) -> T:
        if self._done:
            return self._value  # type: ignore[return-value]
        with self._lock:
            if not self._done:
                self._value = self._work()
                self._done = True
        return self._value  # type: ignore[return-value]
