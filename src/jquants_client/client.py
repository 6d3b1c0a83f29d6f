"""
JQuantsClient module exposing the J-Quants endpoints as typed, paginated calls
"""

import logging
import threading
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple, TypeVar

from .config_loader import ClientConfig, ConfigLoader
from .deadline import Deadline
from .endpoints import (
    INDEX_OPTION_PRICE_PATH,
    INDEX_PRICE_PATH,
    ISSUE_INFORMATION_PATH,
    MARGIN_TRADING_OUTSTANDING_PATH,
    PAGINATION_KEY_PARAM,
    SHORT_SELLING_VALUE_PATH,
    STOCK_PRICE_PATH,
    TOPIX_PRICE_PATH,
    TRADING_CALENDAR_PATH,
    IndexOptionPriceRequest,
    IndexPriceRequest,
    IssueInformationRequest,
    MarginTradingOutstandingRequest,
    ShortSellingValueRequest,
    StockPriceRequest,
    TopixPriceRequest,
    TradingCalendarRequest,
)
from .errors import DecodeError
from .http_client import HTTPClient
from .logging_config import configure_logging
from .models import (
    IndexOptionPrice,
    IndexPrice,
    IssueInformation,
    MarginTradingOutstanding,
    ShortSellingValue,
    StockPrice,
    TopixPrice,
    TradingCalendar,
)
from .pagination import Page, PageFetcher, Paginator, StreamingPaginator
from .sink import Sink

T = TypeVar('T')

logger = logging.getLogger(__name__)


class EndpointRequest(Protocol):
    def values(self, pagination_key: Optional[str] = None) -> Dict[str, str]:
        ...


class JQuantsClient:
    """
    Client for the J-Quants API v2

    Paginated endpoints are walked to the end by a Paginator, retrying
    internal server errors within the configured loop timeout. The
    *_with_sink methods deliver records to a Sink as each page arrives;
    the stream_* methods do the same on a background producer thread.

    Producer threads and bulk calls share one HTTPClient. Request pacing
    is synchronised across them, so the plan's request rate holds for the
    whole client. They also share its requests.Session; give each thread
    its own client if connection-level isolation is needed.

    A [logging] level or log file in the configuration is applied to the
    package logger when the client is built.

    Example:
        >>> with JQuantsClient.from_env() as client:
        ...     prices = client.stock_price(StockPriceRequest(code="13010"))
    """

    def __init__(self, config: ClientConfig, http_client: Optional[HTTPClient] = None):
        self.config = config
        if config.log_level is not None or config.log_file_name is not None:
            configure_logging(config.log_level or "INFO", config.log_file_name)
        self.http_client = http_client or HTTPClient(
            api_key=config.resolve_api_key(),
            base_url=config.base_url,
            timeout=config.timeout,
            requests_per_second=config.requests_per_second,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> 'JQuantsClient':
        """Build a client whose API key comes from J_QUANTS_API_KEY"""
        return cls(ClientConfig(**kwargs))

    @classmethod
    def from_toml(cls, config_path: Path) -> 'JQuantsClient':
        return cls(ConfigLoader.load_toml_config(config_path))

    def __enter__(self) -> 'JQuantsClient':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def close(self) -> None:
        self.http_client.close_connection()

    def _paginator(self, cancel_event: Optional[threading.Event] = None) -> Paginator:
        return Paginator(
            retry_interval=self.config.retry_interval,
            loop_timeout=self.config.loop_timeout,
            cancel_event=cancel_event,
        )

    def _streaming_paginator(self, cancel_event: Optional[threading.Event] = None) -> StreamingPaginator:
        return StreamingPaginator(
            retry_interval=self.config.retry_interval,
            loop_timeout=self.config.loop_timeout,
            cancel_event=cancel_event,
        )

    def _page_fetcher(self, path: str, request: EndpointRequest,
                      decode: Callable[[Dict[str, Any]], T],
                      paginated: bool = True) -> PageFetcher[T]:
        """
        Build the fetch callback for one endpoint

        Args:
            path: Endpoint path
            request: Request object rendering the query parameters
            decode: Record decoder, usually a model's from_json
            paginated: False for endpoints that always answer in one page

        Returns:
            Callable performing one page request for a pagination key
        """
        def fetch_page(pagination_key: Optional[str], deadline: Deadline) -> Page[T]:
            params = request.values(pagination_key)
            body = self.http_client.get_json(path, params, deadline)

            data = body.get('data')
            if not isinstance(data, list):
                raise DecodeError(f"Response from {path} has no 'data' list")
            items = [decode(raw) for raw in data]

            next_key = body.get(PAGINATION_KEY_PARAM) if paginated else None
            if next_key is not None and not isinstance(next_key, str):
                raise DecodeError(f"Unexpected pagination key from {path}: {next_key!r}")
            return Page(items=items, pagination_key=next_key)

        return fetch_page

    # Equities

    def issue_information(self, request: Optional[IssueInformationRequest] = None,
                          cancel_event: Optional[threading.Event] = None) -> List[IssueInformation]:
        fetch_page = self._page_fetcher(ISSUE_INFORMATION_PATH, request or IssueInformationRequest(),
                                        IssueInformation.from_json, paginated=False)
        return self._paginator(cancel_event).fetch_all(fetch_page)

    def stock_price(self, request: StockPriceRequest,
                    cancel_event: Optional[threading.Event] = None) -> List[StockPrice]:
        """
        Daily stock prices for a code (optionally within a range) or for every issue on a date

        Raises:
            RequestParameterError: If neither code nor date is given
            DeadlineExceededError: If fetching all pages takes longer than loop_timeout
        """
        fetch_page = self._page_fetcher(STOCK_PRICE_PATH, request, StockPrice.from_json)
        return self._paginator(cancel_event).fetch_all(fetch_page)

    def stock_price_with_sink(self, request: StockPriceRequest, sink: Sink[StockPrice],
                              cancel_event: Optional[threading.Event] = None) -> None:
        """Put daily stock prices on the sink as pages arrive, closing it when done"""
        fetch_page = self._page_fetcher(STOCK_PRICE_PATH, request, StockPrice.from_json)
        self._streaming_paginator(cancel_event).stream(fetch_page, sink)

    def stream_stock_price(self, request: StockPriceRequest, maxsize: int = 0,
                           cancel_event: Optional[threading.Event] = None
                           ) -> Tuple[Sink[StockPrice], 'Future[None]']:
        """
        Start streaming daily stock prices on a producer thread

        Args:
            request: Stock price filters
            maxsize: Sink capacity, 0 for unbounded
            cancel_event: Event that stops the producer when set

        Returns:
            The sink to drain and a future carrying the producer's outcome
        """
        sink: Sink[StockPrice] = Sink(maxsize)
        fetch_page = self._page_fetcher(STOCK_PRICE_PATH, request, StockPrice.from_json)
        future = self._streaming_paginator(cancel_event).start(fetch_page, sink)
        return sink, future

    # Markets

    def margin_trading_outstanding(self, request: MarginTradingOutstandingRequest,
                                   cancel_event: Optional[threading.Event] = None
                                   ) -> List[MarginTradingOutstanding]:
        fetch_page = self._page_fetcher(MARGIN_TRADING_OUTSTANDING_PATH, request,
                                        MarginTradingOutstanding.from_json)
        return self._paginator(cancel_event).fetch_all(fetch_page)

    def short_selling_value(self, request: ShortSellingValueRequest,
                            cancel_event: Optional[threading.Event] = None) -> List[ShortSellingValue]:
        fetch_page = self._page_fetcher(SHORT_SELLING_VALUE_PATH, request, ShortSellingValue.from_json)
        return self._paginator(cancel_event).fetch_all(fetch_page)

    def trading_calendar(self, request: Optional[TradingCalendarRequest] = None,
                         cancel_event: Optional[threading.Event] = None) -> List[TradingCalendar]:
        fetch_page = self._page_fetcher(TRADING_CALENDAR_PATH, request or TradingCalendarRequest(),
                                        TradingCalendar.from_json, paginated=False)
        return self._paginator(cancel_event).fetch_all(fetch_page)

    # Indices

    def index_price(self, request: IndexPriceRequest,
                    cancel_event: Optional[threading.Event] = None) -> List[IndexPrice]:
        fetch_page = self._page_fetcher(INDEX_PRICE_PATH, request, IndexPrice.from_json)
        return self._paginator(cancel_event).fetch_all(fetch_page)

    def topix_prices(self, request: Optional[TopixPriceRequest] = None,
                     cancel_event: Optional[threading.Event] = None) -> List[TopixPrice]:
        fetch_page = self._page_fetcher(TOPIX_PRICE_PATH, request or TopixPriceRequest(),
                                        TopixPrice.from_json)
        return self._paginator(cancel_event).fetch_all(fetch_page)

    # Derivatives

    def index_option_price(self, request: IndexOptionPriceRequest,
                           cancel_event: Optional[threading.Event] = None) -> List[IndexOptionPrice]:
        fetch_page = self._page_fetcher(INDEX_OPTION_PRICE_PATH, request, IndexOptionPrice.from_json)
        return self._paginator(cancel_event).fetch_all(fetch_page)

    def index_option_price_with_sink(self, request: IndexOptionPriceRequest,
                                     sink: Sink[IndexOptionPrice],
                                     cancel_event: Optional[threading.Event] = None) -> None:
        fetch_page = self._page_fetcher(INDEX_OPTION_PRICE_PATH, request, IndexOptionPrice.from_json)
        self._streaming_paginator(cancel_event).stream(fetch_page, sink)

    def stream_index_option_price(self, request: IndexOptionPriceRequest, maxsize: int = 0,
                                  cancel_event: Optional[threading.Event] = None
                                  ) -> Tuple[Sink[IndexOptionPrice], 'Future[None]']:
        sink: Sink[IndexOptionPrice] = Sink(maxsize)
        fetch_page = self._page_fetcher(INDEX_OPTION_PRICE_PATH, request, IndexOptionPrice.from_json)
        future = self._streaming_paginator(cancel_event).start(fetch_page, sink)
        return sink, future
