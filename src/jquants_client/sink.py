"""
Sink module implementing the single-producer, single-consumer channel used by streaming pagination
"""

import threading
from collections import deque
from typing import Deque, Generic, Iterator, Optional, TypeVar

from .deadline import Deadline
from .errors import SinkClosedError

T = TypeVar('T')

# Interval at which a blocked producer re-checks its deadline and cancel event
POLL_INTERVAL = 0.05


class Sink(Generic[T]):
    """
    Closable channel between one producer and one consumer

    The producer puts items and closes the sink exactly once. The consumer
    drains it, typically by iterating, and treats closure as the only
    "no more data" signal. Consumers must never close the sink.
    """

    def __init__(self, maxsize: int = 0):
        self.maxsize = maxsize
        self._items: Deque[T] = deque()
        self._condition = threading.Condition()
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._condition:
            return self._closed

    def __len__(self) -> int:
        with self._condition:
            return len(self._items)

    def _full(self) -> bool:
        return 0 < self.maxsize <= len(self._items)

    def put(self, item: T, deadline: Optional[Deadline] = None) -> None:
        """
        Hand an item to the consumer, blocking while the sink is full

        Args:
            item: Item to deliver
            deadline: Run deadline observed while blocked

        Raises:
            SinkClosedError: If the sink has already been closed
            DeadlineExceededError: If the deadline passes while blocked
            OperationCancelledError: If the run is cancelled while blocked
        """
        with self._condition:
            while True:
                if self._closed:
                    raise SinkClosedError("Cannot put to a closed sink")
                if not self._full():
                    break
                if deadline is None:
                    self._condition.wait()
                else:
                    deadline.check()
                    self._condition.wait(min(POLL_INTERVAL, max(deadline.remaining(), 0.001)))
            self._items.append(item)
            self._condition.notify_all()

    def close(self) -> None:
        """
        Mark the end of the stream

        Raises:
            SinkClosedError: If the sink is closed a second time
        """
        with self._condition:
            if self._closed:
                raise SinkClosedError("Sink is already closed")
            self._closed = True
            self._condition.notify_all()

    def get(self, timeout: Optional[float] = None) -> T:
        """
        Take the next item, waiting for the producer if necessary

        Args:
            timeout: Maximum seconds to wait, or None to wait indefinitely

        Returns:
            The next item in delivery order

        Raises:
            SinkClosedError: If the sink is closed and fully drained
            TimeoutError: If no item arrived within the timeout
        """
        with self._condition:
            if not self._condition.wait_for(lambda: self._items or self._closed, timeout):
                raise TimeoutError("No item arrived before the timeout")
            if self._items:
                item = self._items.popleft()
                self._condition.notify_all()
                return item
            raise SinkClosedError("Sink is closed and drained")

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except SinkClosedError:
                return
