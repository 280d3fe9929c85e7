"""Counter store interface.

The evaluator depends on this abstraction (not the concrete implementation)
so the shared store can be swapped without touching the limiting logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractCounterStore(ABC):
    """Interface for stores exposing an atomic increment-with-window."""

    @abstractmethod
    def increment(self, key: str, window_seconds: int) -> int:
        """Atomically increment the counter for a key.

        When the key is absent it is created with value 1 and an expiry of
        ``window_seconds``; otherwise it is incremented and its expiry is left
        untouched. The read-modify-write must be atomic with respect to every
        other caller sharing the store.

        Args:
            key: Fully resolved rate limit key.
            window_seconds: Window length applied when the counter is created.

        Returns:
            The counter value after the increment.

        Raises:
            StoreUnavailable: If the store could not be reached in time.
        """
        raise NotImplementedError

    def ping(self) -> bool:
        """Report whether the store is reachable. Local stores always are."""
        return True
