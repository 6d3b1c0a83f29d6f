"""
HTTPClient module for authenticated, rate limited GET requests against the J-Quants API
"""

import logging
import threading
import time
from decimal import Decimal
from typing import Any, Dict, Optional

import requests

from .config_loader import BASE_URL, DEFAULT_REQUESTS_PER_SECOND, DEFAULT_TIMEOUT
from .deadline import Deadline
from .errors import (
    STATUS_ERRORS,
    DeadlineExceededError,
    DecodeError,
    HTTPError,
    TransportError,
)

logger = logging.getLogger(__name__)


class HTTPClient:
    """HTTP client with API key authentication and request pacing"""

    def __init__(self, api_key: str, base_url: str = BASE_URL,
                 timeout: float = DEFAULT_TIMEOUT,
                 requests_per_second: float = DEFAULT_REQUESTS_PER_SECOND,
                 session: Optional[requests.Session] = None):
        if not api_key:
            raise ValueError("J-Quants API key is not configured")
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.requests_per_second = requests_per_second
        self.headers: Dict[str, str] = {
            'x-api-key': api_key,
            'Accept-Encoding': 'gzip',
        }
        self.session = session
        self.last_request_time: Optional[float] = None
        # Guards last_request_time across producer threads
        self._rate_limit_lock = threading.Lock()

    def get_json(self, path: str, params: Dict[str, str],
                 deadline: Optional[Deadline] = None) -> Dict[str, Any]:
        """
        Send one GET request and decode the JSON body

        Numbers in the body are decoded as Decimal so prices keep their
        exact wire representation. Gzip-encoded bodies are decompressed
        by requests.

        Args:
            path: Endpoint path such as "/equities/bars/daily"
            params: Query parameters
            deadline: Run deadline bounding the request timeout

        Returns:
            Decoded JSON object

        Raises:
            HTTPError: For non-200 responses, as the matching subclass
            TransportError: If the request failed without a response
            DeadlineExceededError: If the run deadline expired before or during the request
            OperationCancelledError: If the run was cancelled while waiting to send
            DecodeError: If the body is not a JSON object
        """
        self.apply_rate_limit(deadline)

        # Computed after the rate-limit wait so the wait counts against the deadline
        timeout = deadline.request_timeout(self.timeout) if deadline else self.timeout

        if self.session is None:
            self.session = requests.Session()

        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params, headers=self.headers, timeout=timeout)
        except requests.exceptions.RequestException as e:
            if deadline is not None and deadline.expired():
                raise DeadlineExceededError(f"Deadline expired during GET {path}: {e}") from e
            raise TransportError(f"Failed to send GET request to {path}: {e}") from e
        finally:
            with self._rate_limit_lock:
                self.last_request_time = max(self.last_request_time or 0.0, time.time())

        if response.status_code != 200:
            raise self._error_for_response(response)

        try:
            body = response.json(parse_float=Decimal)
        except ValueError as e:
            raise DecodeError(f"Failed to decode HTTP response from {path}: {e}") from e
        if not isinstance(body, dict):
            raise DecodeError(f"Expected a JSON object from {path}, got {type(body).__name__}")
        return body

    @staticmethod
    def _error_for_response(response: requests.Response) -> HTTPError:
        """
        Map an error response to its exception, using the body's message as detail

        Args:
            response: Response with a non-200 status

        Returns:
            HTTPError subclass for known statuses, plain HTTPError otherwise
        """
        try:
            detail = response.json().get('message')
        except (ValueError, AttributeError) as e:
            detail = f"failed to decode error response: {e}"

        error_class = STATUS_ERRORS.get(response.status_code)
        if error_class is None:
            return HTTPError(response.status_code, response.reason or "unexpected status", detail)
        return error_class(detail)

    def apply_rate_limit(self, deadline: Optional[Deadline] = None) -> None:
        """
        Sleep long enough to respect the configured requests per second

        Each caller reserves the next free send slot under a lock, so
        threads sharing this client are paced together. With a deadline
        the wait is cut short by cancellation and never outlasts the run.

        Args:
            deadline: Run deadline the wait must honour

        Raises:
            DeadlineExceededError: If the send slot falls after the deadline
            OperationCancelledError: If the run is cancelled while waiting
        """
        with self._rate_limit_lock:
            now = time.time()
            if self.last_request_time is None:
                self.last_request_time = now
                return
            min_delay = 1.0 / self.requests_per_second
            delay = max(0.0, self.last_request_time + min_delay - now)
            self.last_request_time = now + delay

        if delay > 0:
            logger.debug(f"Rate limiting: sleeping {delay:.3f}s")
            if deadline is not None:
                deadline.sleep(delay)
            else:
                time.sleep(delay)

    def close_connection(self) -> None:
        """
        Close HTTP session and release resources
        """
        if self.session:
            self.session.close()
            self.session = None
