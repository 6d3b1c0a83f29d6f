"""
Typed records returned by the J-Quants endpoints

Each record maps the API's abbreviated keys to descriptive attribute
names through from_json().
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

from .errors import DecodeError
from .wire import (
    decimal_or_none,
    price_or_none,
    require,
    to_code_int,
    to_decimal,
    to_int,
    to_limit_flag,
    to_optional_code_int,
    to_optional_decimal,
    to_optional_int,
    to_optional_str,
)


@dataclass(frozen=True)
class IssueInformation:
    """Listed issue master data (/equities/master)"""
    date: str
    code: str
    company_name: str
    company_name_english: str
    sector17_code: int
    sector17_name: str
    sector33_code: str
    sector33_name: str
    scale_category: str
    market_code: str
    market_name: str
    margin_code: Optional[int] = None
    margin_name: Optional[str] = None

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> 'IssueInformation':
        return cls(
            date=require(raw, 'Date'),
            code=require(raw, 'Code'),
            company_name=require(raw, 'CoName'),
            company_name_english=require(raw, 'CoNameEn'),
            sector17_code=to_code_int(require(raw, 'S17')),
            sector17_name=require(raw, 'S17Nm'),
            sector33_code=require(raw, 'S33'),
            sector33_name=require(raw, 'S33Nm'),
            scale_category=require(raw, 'ScaleCat'),
            market_code=require(raw, 'Mkt'),
            market_name=require(raw, 'MktNm'),
            margin_code=to_optional_code_int(raw.get('Mrgn')),
            margin_name=raw.get('MrgnNm'),
        )


@dataclass(frozen=True)
class StockPrice:
    """Daily stock bar (/equities/bars/daily). Prices are None when no trade occurred"""
    date: str
    code: str
    open: Optional[Decimal]
    high: Optional[Decimal]
    low: Optional[Decimal]
    close: Optional[Decimal]
    upper_limit: bool
    lower_limit: bool
    volume: Optional[int]
    turnover_value: Optional[int]
    adjustment_factor: Decimal
    adjusted_open: Optional[Decimal]
    adjusted_high: Optional[Decimal]
    adjusted_low: Optional[Decimal]
    adjusted_close: Optional[Decimal]
    adjusted_volume: Optional[int]

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> 'StockPrice':
        return cls(
            date=require(raw, 'Date'),
            code=require(raw, 'Code'),
            open=to_optional_decimal(raw.get('O')),
            high=to_optional_decimal(raw.get('H')),
            low=to_optional_decimal(raw.get('L')),
            close=to_optional_decimal(raw.get('C')),
            upper_limit=to_limit_flag(require(raw, 'UL')),
            lower_limit=to_limit_flag(require(raw, 'LL')),
            volume=to_optional_int(raw.get('Vo')),
            turnover_value=to_optional_int(raw.get('Va')),
            adjustment_factor=to_decimal(require(raw, 'AdjFactor')),
            adjusted_open=to_optional_decimal(raw.get('AdjO')),
            adjusted_high=to_optional_decimal(raw.get('AdjH')),
            adjusted_low=to_optional_decimal(raw.get('AdjL')),
            adjusted_close=to_optional_decimal(raw.get('AdjC')),
            adjusted_volume=to_optional_int(raw.get('AdjVo')),
        )


@dataclass(frozen=True)
class MarginTradingOutstanding:
    """Weekly margin trading balances (/markets/margin-interest)"""
    date: str
    code: str
    total_short_balance: int
    total_long_balance: int
    short_negotiable_balance: int
    long_negotiable_balance: int
    short_standardized_balance: int
    long_standardized_balance: int
    issue_type: int

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> 'MarginTradingOutstanding':
        return cls(
            date=require(raw, 'Date'),
            code=require(raw, 'Code'),
            total_short_balance=to_int(require(raw, 'ShrtVol')),
            total_long_balance=to_int(require(raw, 'LongVol')),
            short_negotiable_balance=to_int(require(raw, 'ShrtNegVol')),
            long_negotiable_balance=to_int(require(raw, 'LongNegVol')),
            short_standardized_balance=to_int(require(raw, 'ShrtStdVol')),
            long_standardized_balance=to_int(require(raw, 'LongStdVol')),
            issue_type=to_code_int(require(raw, 'IssType')),
        )


@dataclass(frozen=True)
class ShortSellingValue:
    """Short selling turnover by sector (/markets/short-ratio)"""
    date: str
    sector33_code: str
    long_selling_value: int
    short_selling_with_restrictions: int
    short_selling_without_restrictions: int

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> 'ShortSellingValue':
        return cls(
            date=require(raw, 'Date'),
            sector33_code=require(raw, 'S33'),
            long_selling_value=to_int(require(raw, 'SellExShortVa')),
            short_selling_with_restrictions=to_int(require(raw, 'ShrtWithResVa')),
            short_selling_without_restrictions=to_int(require(raw, 'ShrtNoResVa')),
        )


@dataclass(frozen=True)
class TradingCalendar:
    date: str
    day_type: int

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> 'TradingCalendar':
        return cls(date=require(raw, 'Date'), day_type=to_code_int(require(raw, 'HolDiv')))


@dataclass(frozen=True)
class IndexPrice:
    date: str
    code: str
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> 'IndexPrice':
        return cls(
            date=require(raw, 'Date'),
            code=require(raw, 'Code'),
            open=to_decimal(require(raw, 'O')),
            high=to_decimal(require(raw, 'H')),
            low=to_decimal(require(raw, 'L')),
            close=to_decimal(require(raw, 'C')),
        )


@dataclass(frozen=True)
class TopixPrice:
    date: str
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> 'TopixPrice':
        return cls(
            date=require(raw, 'Date'),
            open=to_decimal(require(raw, 'O')),
            high=to_decimal(require(raw, 'H')),
            low=to_decimal(require(raw, 'L')),
            close=to_decimal(require(raw, 'C')),
        )


@dataclass(frozen=True)
class IndexOptionPrice:
    """
    Nikkei 225 option daily bar (/derivatives/bars/daily/options/225)

    Session prices arrive as numbers when traded and as an empty string
    otherwise; both decode to an int or None.
    """
    date: str
    code: str
    whole_day_open: Optional[int]
    whole_day_high: Optional[int]
    whole_day_low: Optional[int]
    whole_day_close: Optional[int]
    night_session_open: Optional[int]
    night_session_high: Optional[int]
    night_session_low: Optional[int]
    night_session_close: Optional[int]
    day_session_open: Optional[int]
    day_session_high: Optional[int]
    day_session_low: Optional[int]
    day_session_close: Optional[int]
    volume: int
    open_interest: int
    turnover_value: int
    contract_month: str
    strike_price: int
    volume_only_auction: Optional[int]
    emergency_margin_trigger_division: str
    put_call_division: int
    last_trading_day: Optional[str]
    special_quotation_day: Optional[str]
    settlement_price: Optional[int]
    theoretical_price: Optional[Decimal]
    base_volatility: Optional[Decimal]
    underlying_price: Optional[Decimal]
    implied_volatility: Optional[Decimal]
    interest_rate: Optional[Decimal]

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> 'IndexOptionPrice':
        date = to_optional_str(require(raw, 'Date'))
        if date is None:
            raise DecodeError("Index option price has an empty Date")
        return cls(
            date=date,
            code=require(raw, 'Code'),
            whole_day_open=price_or_none(require(raw, 'O')),
            whole_day_high=price_or_none(require(raw, 'H')),
            whole_day_low=price_or_none(require(raw, 'L')),
            whole_day_close=price_or_none(require(raw, 'C')),
            night_session_open=price_or_none(require(raw, 'EO')),
            night_session_high=price_or_none(require(raw, 'EH')),
            night_session_low=price_or_none(require(raw, 'EL')),
            night_session_close=price_or_none(require(raw, 'EC')),
            day_session_open=price_or_none(require(raw, 'AO')),
            day_session_high=price_or_none(require(raw, 'AH')),
            day_session_low=price_or_none(require(raw, 'AL')),
            day_session_close=price_or_none(require(raw, 'AC')),
            volume=to_int(require(raw, 'Vo')),
            open_interest=to_int(require(raw, 'OI')),
            turnover_value=to_int(require(raw, 'Va')),
            contract_month=require(raw, 'CM'),
            strike_price=to_int(require(raw, 'Strike')),
            volume_only_auction=price_or_none(require(raw, 'VoOA')),
            emergency_margin_trigger_division=require(raw, 'EmMrgnTrgDiv'),
            put_call_division=to_code_int(require(raw, 'PCDiv')),
            last_trading_day=to_optional_str(raw.get('LTD')),
            special_quotation_day=to_optional_str(raw.get('SQD')),
            settlement_price=price_or_none(require(raw, 'Settle')),
            theoretical_price=decimal_or_none(require(raw, 'Theo')),
            base_volatility=decimal_or_none(require(raw, 'BaseVol')),
            underlying_price=decimal_or_none(require(raw, 'UnderPx')),
            implied_volatility=decimal_or_none(require(raw, 'IV')),
            interest_rate=decimal_or_none(require(raw, 'IR')),
        )
