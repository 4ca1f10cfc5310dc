"""Thread-safe lazy initialization.

Provides a holder that builds its value on first access and returns the same
instance afterwards, even when several threads race on the first call.
"""

import time
from collections.abc import Callable
from threading import Lock
from typing import Generic, TypeVar

from .logs import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class LockedLazy(Generic[T]):
    """Build a value once, on demand, under a lock.

    The transition from uninitialized to initialized is one-way: there is no
    reset. Reads after initialization do not take the lock.
    """

    def __init__(self, factory: Callable[[], T]):
        """Initialize the holder.

        Args:
            factory: Zero-argument callable producing the value.
        """
        self._lock = Lock()
        self._factory = factory
        self._value: T | None = None

    @property
    def initialized(self) -> bool:
        """Whether the value has been built."""
        return self._value is not None

    def peek(self) -> T | None:
        """Return the value if already built, without building it."""
        return self._value

    def get(self) -> T:
        """Return the value, building it on the first call.

        If the factory raises, nothing is stored and the next call tries
        again.
        """
        value = self._value
        if value is not None:
            return value

        with self._lock:
            if self._value is None:
                start = time.time()
                self._value = self._factory()
                logger.debug(
                    "Initialized lazy value",
                    duration_seconds=round(time.time() - start, 3),
                )
            return self._value
