"""
Single-slot reference cell with compare-and-swap.
"""
import threading
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


class AtomicReference(Generic[T]):
    """
    Holds one shared value.

    Reads never take the lock; a plain attribute read is atomic in CPython.
    Writers serialize on a short lock so that compare_and_swap installs at
    most one value for a given expected value.
    """

    def __init__(self, value: Optional[T] = None):
        self._value = value
        self._lock = threading.Lock()

    def get(self) -> Optional[T]:
        return self._value

    def set(self, value: Optional[T]) -> None:
        with self._lock:
            self._value = value

    def compare_and_swap(self, expected: Optional[T], new: Optional[T]) -> bool:
        """
        Replace the value with new if it is still expected (compared by identity).

        Returns:
            True if the swap happened, False if another writer got there first
        """
        with self._lock:
            if self._value is not expected:
                return False
            self._value = new
            return True
