"""
Deadline module providing the shared time budget and cancellation signal for a pagination run
"""

import threading
import time
from typing import Callable, Optional

from .errors import DeadlineExceededError, OperationCancelledError


class Deadline:
    """Wall-clock budget shared by every fetch and retry sleep of one run"""

    def __init__(self, timeout: float, cancel_event: Optional[threading.Event] = None,
                 clock: Callable[[], float] = time.monotonic):
        if timeout < 0:
            raise ValueError(f"Deadline timeout must not be negative: {timeout}")
        self.timeout = timeout
        self.cancel_event = cancel_event if cancel_event is not None else threading.Event()
        self._clock = clock
        self._expires_at = clock() + timeout

    def remaining(self) -> float:
        """Seconds left before the deadline, never negative"""
        return max(0.0, self._expires_at - self._clock())

    def expired(self) -> bool:
        return self._clock() >= self._expires_at

    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def check(self) -> None:
        """
        Raise if the run must stop

        Raises:
            OperationCancelledError: If the cancel event has been set
            DeadlineExceededError: If the time budget is spent
        """
        if self.cancelled():
            raise OperationCancelledError("Pagination run was cancelled")
        if self.expired():
            raise DeadlineExceededError(
                f"Pagination run exceeded its deadline of {self.timeout} seconds"
            )

    def sleep(self, seconds: float) -> None:
        """
        Pause for the given duration unless cancelled or out of time

        The wait is cut short by the cancel event, and never extends past
        the deadline.

        Args:
            seconds: Requested pause in seconds

        Raises:
            OperationCancelledError: If cancelled before or during the pause
            DeadlineExceededError: If the deadline falls inside the pause
        """
        self.check()
        remaining = self.remaining()
        if seconds >= remaining:
            self.cancel_event.wait(remaining)
            self.check()
            # Budget ran out while sleeping
            raise DeadlineExceededError(
                f"Pagination run exceeded its deadline of {self.timeout} seconds"
            )
        self.cancel_event.wait(seconds)
        self.check()

    def request_timeout(self, default: float) -> float:
        """
        Timeout for one transport call, bounded by the remaining budget

        Args:
            default: Per-request timeout configured on the HTTP client

        Returns:
            The smaller of the default and the remaining budget
        """
        self.check()
        return min(default, self.remaining())
