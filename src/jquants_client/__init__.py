"""
J-Quants API client package
Provides typed endpoint calls with transparent pagination, retry on server errors and streaming delivery
"""

from .config_loader import ClientConfig, ConfigLoader, ConfigurationError, EnvironmentError, Plan
from .client import JQuantsClient
from .deadline import Deadline
from .endpoints import (
    IndexOptionPriceRequest,
    IndexPriceRequest,
    IssueInformationRequest,
    MarginTradingOutstandingRequest,
    ShortSellingValueRequest,
    StockPriceRequest,
    TopixPriceRequest,
    TradingCalendarRequest,
)
from .errors import (
    BadRequest,
    DeadlineExceededError,
    DecodeError,
    Forbidden,
    HTTPError,
    InternalServerError,
    JQuantsError,
    OperationCancelledError,
    PayloadTooLarge,
    RequestParameterError,
    SinkClosedError,
    TransportError,
    Unauthorized,
    is_transient,
)
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

__all__ = [
    'JQuantsClient',
    'ClientConfig',
    'ConfigLoader',
    'ConfigurationError',
    'EnvironmentError',
    'Plan',
    'HTTPClient',
    'configure_logging',
    'Deadline',
    'Page',
    'PageFetcher',
    'Paginator',
    'StreamingPaginator',
    'Sink',
    'JQuantsError',
    'HTTPError',
    'BadRequest',
    'Unauthorized',
    'Forbidden',
    'PayloadTooLarge',
    'InternalServerError',
    'TransportError',
    'DecodeError',
    'RequestParameterError',
    'DeadlineExceededError',
    'OperationCancelledError',
    'SinkClosedError',
    'is_transient',
    'IssueInformationRequest',
    'StockPriceRequest',
    'MarginTradingOutstandingRequest',
    'ShortSellingValueRequest',
    'TradingCalendarRequest',
    'IndexPriceRequest',
    'TopixPriceRequest',
    'IndexOptionPriceRequest',
    'IssueInformation',
    'StockPrice',
    'MarginTradingOutstanding',
    'ShortSellingValue',
    'TradingCalendar',
    'IndexPrice',
    'TopixPrice',
    'IndexOptionPrice',
]
