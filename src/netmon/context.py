"""Cancellation token passed through collection passes."""

from __future__ import annotations

import threading
import time

from netmon.errors import CollectionCancelled, CollectionTimeout


class CancelToken:
    """Caller-owned cancellation signal with an optional deadline.

    A collector checks the token between units of work. ``cancel()`` may be
    called from any thread.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set() or self.expired

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when there is none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CollectionCancelled("collection cancelled")
        if self.expired:
            raise CollectionTimeout("collection deadline exceeded")
