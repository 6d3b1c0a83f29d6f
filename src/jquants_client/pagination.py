"""
Pagination module driving paginated endpoints in bulk or streaming mode

A run fetches pages one after another, echoing each page's pagination key
into the next request until a page arrives without one. Server-side
internal errors are retried on the same key after a pause; every other
error aborts the run. A single deadline covers the whole run.
"""

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Callable, Generic, List, Optional, Protocol, TypeVar

from .config_loader import DEFAULT_LOOP_TIMEOUT, DEFAULT_RETRY_INTERVAL
from .deadline import Deadline
from .errors import is_transient
from .sink import Sink

T = TypeVar('T')
T_co = TypeVar('T_co', covariant=True)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Page(Generic[T]):
    """One fetch's worth of items plus the key for the next page, if any"""
    items: List[T] = field(default_factory=list)
    pagination_key: Optional[str] = None


class PageFetcher(Protocol[T_co]):
    """Performs one round trip for the given pagination key"""

    def __call__(self, pagination_key: Optional[str], deadline: Deadline) -> 'Page[T_co]':
        ...


class Paginator(Generic[T]):
    """Collects every page of a paginated endpoint into one list"""

    def __init__(self, retry_interval: float = DEFAULT_RETRY_INTERVAL,
                 loop_timeout: float = DEFAULT_LOOP_TIMEOUT,
                 is_transient: Callable[[BaseException], bool] = is_transient,
                 cancel_event: Optional[threading.Event] = None):
        """
        Initialise the paginator

        Args:
            retry_interval: Seconds to wait before retrying a transient failure
            loop_timeout: Overall budget in seconds for one complete run
            is_transient: Classifier deciding which errors are retried
            cancel_event: Event the caller sets to stop the run early
        """
        self.retry_interval = retry_interval
        self.loop_timeout = loop_timeout
        self.is_transient = is_transient
        self.cancel_event = cancel_event

    def fetch_all(self, fetch_page: PageFetcher[T]) -> List[T]:
        """
        Fetch every page and return the concatenated items

        Args:
            fetch_page: Callable performing one page request

        Returns:
            All items in page order, then in-page order

        Raises:
            DeadlineExceededError: If the run outlives its time budget
            OperationCancelledError: If the cancel event is set
            Exception: Any terminal error raised by fetch_page; items
                collected so far are discarded
        """
        data: List[T] = []
        self._drive(fetch_page, lambda page, deadline: data.extend(page.items))
        return data

    def _drive(self, fetch_page: PageFetcher[T],
               emit: Callable[[Page[T], Deadline], None]) -> int:
        """Run the fetch/retry loop, handing each page to emit. Returns the page count"""
        deadline = Deadline(self.loop_timeout, self.cancel_event)
        pagination_key: Optional[str] = None
        pages = 0
        retries = 0

        while True:
            deadline.check()
            try:
                page = fetch_page(pagination_key, deadline)
            except Exception as e:
                if not self.is_transient(e):
                    raise
                retries += 1
                logger.warning(f"Retrying HTTP request (attempt {retries + 1}): {e}")
                deadline.sleep(self.retry_interval)
                continue

            emit(page, deadline)
            pages += 1
            logger.debug(f"Fetched page {pages} with {len(page.items)} items")

            pagination_key = page.pagination_key
            if pagination_key is None:
                break

        logger.info(f"Pagination finished after {pages} pages and {retries} retries")
        return pages


class StreamingPaginator(Paginator[T]):
    """Pushes items to a sink as each page arrives instead of buffering them"""

    def stream(self, fetch_page: PageFetcher[T], sink: Sink[T]) -> None:
        """
        Fetch every page, putting items on the sink as soon as their page arrives

        The sink is closed exactly once when the run ends, whether it
        completed or failed. Failures are raised to the caller of this
        method, never delivered through the sink. Items already delivered
        are not retracted.

        Args:
            fetch_page: Callable performing one page request
            sink: Channel drained by the consumer

        Raises:
            DeadlineExceededError: If the run outlives its time budget
            OperationCancelledError: If the cancel event is set
            Exception: Any terminal error raised by fetch_page
        """
        def emit(page: Page[T], deadline: Deadline) -> None:
            for item in page.items:
                sink.put(item, deadline)

        try:
            self._drive(fetch_page, emit)
        finally:
            # A sink closed elsewhere must not mask the run's own error
            if not sink.closed:
                sink.close()
            else:
                logger.warning("Sink was already closed when the stream ended")

    def start(self, fetch_page: PageFetcher[T], sink: Sink[T]) -> 'Future[None]':
        """
        Run stream() on its own producer thread

        Args:
            fetch_page: Callable performing one page request
            sink: Channel drained by the consumer

        Returns:
            Future resolving to None on success or carrying the terminal error
        """
        future: 'Future[None]' = Future()
        future.set_running_or_notify_cancel()

        def produce() -> None:
            try:
                self.stream(fetch_page, sink)
            except Exception as e:
                future.set_exception(e)
            else:
                future.set_result(None)

        thread = threading.Thread(target=produce, name="jquants-stream-producer", daemon=True)
        thread.start()
        return future
