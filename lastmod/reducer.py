from threading import Lock
from typing import Optional


class MaxTimestamp:
    """
    A maximum timestamp which can be merged into from any number of
    threads. Starts at 0, with a separate count of merges so that a
    genuine timestamp of 0 can be told apart from nothing having been
    merged at all.
    """
    __slots__ = ("_lock", "_value", "_count")

    def __init__(self):
        self._lock = Lock()
        self._value = 0
        self._count = 0

    def merge(self, candidate:int) -> None:
        # compare and store under a single acquisition
        with self._lock:
            if candidate > self._value:
                self._value = candidate
            self._count += 1

    @property
    def value(self) -> int:
        return self._value

    @property
    def count(self) -> int:
        return self._count

    def finalize(self) -> Optional[int]:
        with self._lock:
            if not self._count:
                return None
            return self._value
