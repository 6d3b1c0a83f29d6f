"""
Error types for the J-Quants client and the transient/terminal classifier
"""

from typing import Optional


class JQuantsError(Exception):
    """Base class for every error raised by this package"""
    pass


class HTTPError(JQuantsError):
    """Raised for a non-200 HTTP response"""

    def __init__(self, status_code: int, message: str, detail: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.detail = detail
        super().__init__(f"{status_code} {message}: {detail}")


class BadRequest(HTTPError):
    """HTTP 400"""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(400, "bad request", detail)


class Unauthorized(HTTPError):
    """HTTP 401, usually an invalid or missing API key"""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(401, "unauthorized", detail)


class Forbidden(HTTPError):
    """HTTP 403, the API key's plan does not cover the resource"""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(403, "forbidden", detail)


class PayloadTooLarge(HTTPError):
    """HTTP 413, the request parameters select too much data"""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(413, "payload too large", detail)


class InternalServerError(HTTPError):
    """HTTP 500. The paginators retry requests that fail with this error"""

    def __init__(self, detail: Optional[str] = None):
        super().__init__(500, "internal server error", detail)


STATUS_ERRORS = {
    400: BadRequest,
    401: Unauthorized,
    403: Forbidden,
    413: PayloadTooLarge,
    500: InternalServerError,
}


class TransportError(JQuantsError):
    """Raised when the request never produced an HTTP response"""
    pass


class DecodeError(JQuantsError):
    """Raised when a response body or record cannot be decoded"""
    pass


class RequestParameterError(JQuantsError):
    """Raised when request parameters are rejected before sending"""
    pass


class DeadlineExceededError(JQuantsError):
    """Raised when a pagination run uses up its overall time budget"""
    pass


class OperationCancelledError(JQuantsError):
    """Raised when the caller cancels a pagination run"""
    pass


class SinkClosedError(JQuantsError):
    """Raised when a closed sink is written to, closed again, or drained"""
    pass


def is_transient(error: BaseException) -> bool:
    """
    Classify an error as retryable

    Only server-side internal failures are retried. Every other error,
    transport and decoding failures included, is terminal.

    Args:
        error: Exception raised by a page fetch

    Returns:
        True if the same request should be sent again after a pause
    """
    return isinstance(error, InternalServerError)
