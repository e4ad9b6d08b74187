"""
Cancellation Module - Cooperative cancellation for in-flight searches.
======================================================================

A search typed into a search box is superseded by the next keystroke.
The engine holds no shared mutable state, so cancelling only has to stop
work: every phase boundary calls ``raise_if_cancelled``.
"""

import threading
import time
from typing import Callable, Optional

from labcompass.shared.errors import SearchCancelled

Clock = Callable[[], float]


class CancellationToken:
    """
    Flag checked by the engine between phases.

    Args:
        timeout: Optional deadline in seconds from creation
        clock: Monotonic clock, injectable for tests

    Example:
        >>> token = CancellationToken()
        >>> token.cancel("superseded")
        >>> token.is_cancelled
        True
    """

    def __init__(self, timeout: Optional[float] = None, clock: Clock = time.monotonic):
        self._event = threading.Event()
        self._reason = ""
        self._clock = clock
        self._deadline = clock() + timeout if timeout is not None else None

    @property
    def is_cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and self._clock() >= self._deadline:
            self.cancel("timed out")
            return True
        return False

    @property
    def reason(self) -> str:
        return self._reason

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    def raise_if_cancelled(self, phase: str = "") -> None:
        """Raise SearchCancelled if the token was cancelled or timed out."""
        if self.is_cancelled:
            where = f" during {phase}" if phase else ""
            raise SearchCancelled(f"{self._reason}{where}")


class QueryScheduler:
    """
    Hands out one token per query and cancels the previous one.

    Example:
        >>> scheduler = QueryScheduler()
        >>> first = scheduler.next_token()
        >>> second = scheduler.next_token()
        >>> first.is_cancelled
        True
    """

    def __init__(self, timeout: Optional[float] = None, clock: Clock = time.monotonic):
        self._timeout = timeout
        self._clock = clock
        self._current: Optional[CancellationToken] = None
        self._lock = threading.Lock()

    def next_token(self) -> CancellationToken:
        """Supersede the in-flight query, if any, and start a new one."""
        token = CancellationToken(timeout=self._timeout, clock=self._clock)
        with self._lock:
            if self._current is not None:
                self._current.cancel("superseded")
            self._current = token
        return token

    def cancel_all(self) -> None:
        with self._lock:
            if self._current is not None:
                self._current.cancel()
            self._current = None
