"""
Endpoint paths and request parameter objects

Each request object validates its combination of filters and renders the
query string parameters, adding the pagination key when one is given.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .errors import RequestParameterError

ISSUE_INFORMATION_PATH = "/equities/master"
STOCK_PRICE_PATH = "/equities/bars/daily"
MARGIN_TRADING_OUTSTANDING_PATH = "/markets/margin-interest"
SHORT_SELLING_VALUE_PATH = "/markets/short-ratio"
TRADING_CALENDAR_PATH = "/markets/calendar"
INDEX_PRICE_PATH = "/indices/bars/daily"
TOPIX_PRICE_PATH = "/indices/bars/daily/topix"
INDEX_OPTION_PRICE_PATH = "/derivatives/bars/daily/options/225"

PAGINATION_KEY_PARAM = "pagination_key"


def _with_pagination_key(params: Dict[str, str], pagination_key: Optional[str]) -> Dict[str, str]:
    if pagination_key is not None:
        params[PAGINATION_KEY_PARAM] = pagination_key
    return params


def _code_or_date(code: Optional[str], date: Optional[str],
                  from_: Optional[str], to: Optional[str]) -> Dict[str, str]:
    """A date selects every issue on that day; otherwise a code and optional range are required"""
    params: Dict[str, str] = {}
    if date is not None:
        params['date'] = date
        return params
    if code is None:
        raise RequestParameterError("code or date is required")
    params['code'] = code
    if from_ is not None:
        params['from'] = from_
    if to is not None:
        params['to'] = to
    return params


@dataclass(frozen=True)
class IssueInformationRequest:
    code: Optional[str] = None
    date: Optional[str] = None

    def values(self, pagination_key: Optional[str] = None) -> Dict[str, str]:
        params: Dict[str, str] = {}
        if self.code is not None:
            params['code'] = self.code
        if self.date is not None:
            params['date'] = self.date
        return _with_pagination_key(params, pagination_key)


@dataclass(frozen=True)
class StockPriceRequest:
    code: Optional[str] = None
    date: Optional[str] = None
    from_: Optional[str] = None
    to: Optional[str] = None

    def values(self, pagination_key: Optional[str] = None) -> Dict[str, str]:
        params = _code_or_date(self.code, self.date, self.from_, self.to)
        return _with_pagination_key(params, pagination_key)


@dataclass(frozen=True)
class MarginTradingOutstandingRequest:
    code: Optional[str] = None
    date: Optional[str] = None
    from_: Optional[str] = None
    to: Optional[str] = None

    def values(self, pagination_key: Optional[str] = None) -> Dict[str, str]:
        params = _code_or_date(self.code, self.date, self.from_, self.to)
        return _with_pagination_key(params, pagination_key)


@dataclass(frozen=True)
class ShortSellingValueRequest:
    """Either a 33-sector code (with a date or a range) or a date alone"""
    sector33_code: Optional[str] = None
    date: Optional[str] = None
    from_: Optional[str] = None
    to: Optional[str] = None

    def values(self, pagination_key: Optional[str] = None) -> Dict[str, str]:
        params: Dict[str, str] = {}
        if self.sector33_code is not None:
            params['s33'] = self.sector33_code
            if self.date is not None:
                params['date'] = self.date
            else:
                if self.from_ is not None:
                    params['from'] = self.from_
                if self.to is not None:
                    params['to'] = self.to
        else:
            if self.date is None:
                raise RequestParameterError("sector33code or date is required")
            params['date'] = self.date
        return _with_pagination_key(params, pagination_key)


@dataclass(frozen=True)
class TradingCalendarRequest:
    holiday_division: Optional[int] = None
    from_: Optional[str] = None
    to: Optional[str] = None

    def values(self, pagination_key: Optional[str] = None) -> Dict[str, str]:
        params: Dict[str, str] = {}
        if self.holiday_division is not None:
            params['hol_div'] = str(self.holiday_division)
        if self.from_ is not None:
            params['from'] = self.from_
        if self.to is not None:
            params['to'] = self.to
        return _with_pagination_key(params, pagination_key)


@dataclass(frozen=True)
class IndexPriceRequest:
    code: Optional[str] = None
    date: Optional[str] = None
    from_: Optional[str] = None
    to: Optional[str] = None

    def values(self, pagination_key: Optional[str] = None) -> Dict[str, str]:
        params = _code_or_date(self.code, self.date, self.from_, self.to)
        return _with_pagination_key(params, pagination_key)


@dataclass(frozen=True)
class TopixPriceRequest:
    from_: Optional[str] = None
    to: Optional[str] = None

    def values(self, pagination_key: Optional[str] = None) -> Dict[str, str]:
        params: Dict[str, str] = {}
        if self.from_ is not None:
            params['from'] = self.from_
        if self.to is not None:
            params['to'] = self.to
        return _with_pagination_key(params, pagination_key)


@dataclass(frozen=True)
class IndexOptionPriceRequest:
    date: str = ""

    def values(self, pagination_key: Optional[str] = None) -> Dict[str, str]:
        if not self.date:
            raise RequestParameterError("date is required")
        return _with_pagination_key({'date': self.date}, pagination_key)
