"""
Test suite for record decoding and wire value normalisation
Following AAA pattern and descriptive naming
"""

from decimal import Decimal

import pytest

from jquants_client.errors import DecodeError
from jquants_client.models import (
    IndexOptionPrice,
    IndexPrice,
    IssueInformation,
    MarginTradingOutstanding,
    ShortSellingValue,
    StockPrice,
    TopixPrice,
    TradingCalendar,
)
from jquants_client.wire import (
    decimal_or_none,
    price_or_none,
    to_code_int,
    to_decimal,
    to_int,
    to_limit_flag,
    to_optional_decimal,
)


def index_option_record(**overrides):
    record = {
        'Date': '2023-03-22', 'Code': '130060018',
        'O': Decimal('0.0'), 'H': Decimal('0.0'), 'L': Decimal('0.0'), 'C': Decimal('0.0'),
        'EO': '', 'EH': '', 'EL': '', 'EC': '',
        'AO': Decimal('0.0'), 'AH': Decimal('0.0'), 'AL': Decimal('0.0'), 'AC': Decimal('0.0'),
        'Vo': Decimal('0.0'), 'OI': Decimal('330.0'), 'Va': Decimal('0.0'),
        'CM': '2025-06', 'Strike': Decimal('20000.0'), 'VoOA': Decimal('0.0'),
        'EmMrgnTrgDiv': '002', 'PCDiv': '1',
        'LTD': '2025-06-12', 'SQD': '2025-06-13',
        'Settle': Decimal('980.0'), 'Theo': Decimal('974.641'),
        'BaseVol': Decimal('17.93025'), 'UnderPx': Decimal('27466.61'),
        'IV': Decimal('23.1816'), 'IR': Decimal('0.2336'),
    }
    record.update(overrides)
    return record


class TestWireNormalisers:
    """Test suite for raw JSON value conversion"""

    def test_to_int_truncates_fractional_numbers(self):
        assert to_int(Decimal('2047.9')) == 2047

    def test_to_int_parses_numeric_strings(self):
        assert to_int("21000") == 21000

    def test_to_int_rejects_text(self):
        with pytest.raises(DecodeError):
            to_int("n/a")

    def test_to_code_int_parses_zero_padded_codes(self):
        assert to_code_int("05") == 5

    @pytest.mark.parametrize('raw', ["--5", "²", "1²", " 5", "", "5a"])
    def test_to_code_int_rejects_malformed_codes_with_decode_error(self, raw):
        with pytest.raises(DecodeError):
            to_code_int(raw)

    def test_to_code_int_accepts_negative_codes(self):
        assert to_code_int("-1") == -1

    @pytest.mark.parametrize('raw', ["NaN", "Infinity", "-Infinity", "sNaN",
                                     float('nan'), float('inf'), Decimal('Infinity')])
    def test_to_int_rejects_non_finite_values_with_decode_error(self, raw):
        with pytest.raises(DecodeError):
            to_int(raw)

    @pytest.mark.parametrize('raw', ["NaN", "Infinity", float('inf')])
    def test_to_decimal_rejects_non_finite_values_with_decode_error(self, raw):
        with pytest.raises(DecodeError):
            to_decimal(raw)

    def test_price_or_none_rejects_non_finite_number_with_decode_error(self):
        with pytest.raises(DecodeError):
            price_or_none(float('nan'))

    def test_stock_price_with_non_finite_volume_raises_decode_error(self):
        # Arrange
        raw = {
            'Date': '2023-03-24', 'Code': '13010',
            'O': None, 'H': None, 'L': None, 'C': None,
            'UL': '0', 'LL': '0', 'Vo': 'Infinity', 'Va': None,
            'AdjFactor': Decimal('1.0'),
            'AdjO': None, 'AdjH': None, 'AdjL': None, 'AdjC': None, 'AdjVo': None,
        }

        # Act & Assert
        with pytest.raises(DecodeError):
            StockPrice.from_json(raw)

    def test_to_code_int_rejects_non_string(self):
        with pytest.raises(DecodeError):
            to_code_int(5)

    @pytest.mark.parametrize('raw, expected', [("0", False), ("1", True)])
    def test_to_limit_flag_maps_flag_strings(self, raw, expected):
        assert to_limit_flag(raw) is expected

    def test_to_limit_flag_rejects_unknown_value(self):
        with pytest.raises(DecodeError):
            to_limit_flag("2")

    @pytest.mark.parametrize('raw', [None, ""])
    def test_to_optional_decimal_treats_null_and_empty_string_as_absent(self, raw):
        assert to_optional_decimal(raw) is None

    def test_price_or_none_treats_any_string_as_absent(self):
        assert price_or_none("") is None
        assert price_or_none(Decimal('1585.0')) == 1585

    def test_price_or_none_rejects_other_types(self):
        with pytest.raises(DecodeError):
            price_or_none([1])

    def test_decimal_or_none_keeps_exact_value(self):
        assert decimal_or_none(Decimal('974.641')) == Decimal('974.641')
        assert decimal_or_none("") is None


class TestStockPrice:
    """Test suite for daily stock bar decoding"""

    def test_from_json_with_traded_day_decodes_all_fields(self):
        # Arrange
        raw = {
            'Date': '2023-03-24', 'Code': '86970',
            'O': Decimal('2047.0'), 'H': Decimal('2069.0'), 'L': Decimal('2035.0'), 'C': Decimal('2045.0'),
            'UL': '0', 'LL': '1',
            'Vo': Decimal('2202500.0'), 'Va': Decimal('4507051850.0'),
            'AdjFactor': Decimal('1.0'),
            'AdjO': Decimal('2047.0'), 'AdjH': Decimal('2069.0'),
            'AdjL': Decimal('2035.0'), 'AdjC': Decimal('2045.0'),
            'AdjVo': Decimal('2202500.0'),
        }

        # Act
        result = StockPrice.from_json(raw)

        # Assert
        assert result.date == '2023-03-24'
        assert result.code == '86970'
        assert result.open == Decimal('2047.0')
        assert result.upper_limit is False
        assert result.lower_limit is True
        assert result.volume == 2202500
        assert result.turnover_value == 4507051850
        assert result.adjusted_volume == 2202500

    def test_from_json_with_untraded_day_leaves_prices_empty(self):
        # Arrange
        raw = {
            'Date': '2023-03-24', 'Code': '13010',
            'O': None, 'H': None, 'L': None, 'C': None,
            'UL': '0', 'LL': '0', 'Vo': None, 'Va': None,
            'AdjFactor': Decimal('1.0'),
            'AdjO': None, 'AdjH': None, 'AdjL': None, 'AdjC': None, 'AdjVo': None,
        }

        # Act
        result = StockPrice.from_json(raw)

        # Assert
        assert result.open is None
        assert result.close is None
        assert result.volume is None

    def test_from_json_with_missing_required_field_raises_decode_error(self):
        with pytest.raises(DecodeError) as exc_info:
            StockPrice.from_json({'Date': '2023-03-24'})

        assert "Code" in str(exc_info.value)


class TestIndexOptionPrice:
    """Test suite for Nikkei 225 option decoding"""

    def test_from_json_maps_session_prices_and_sentinels(self):
        # Arrange & Act
        result = IndexOptionPrice.from_json(index_option_record())

        # Assert
        assert result.date == '2023-03-22'
        assert result.whole_day_open == 0
        assert result.night_session_open is None
        assert result.day_session_close == 0
        assert result.open_interest == 330
        assert result.strike_price == 20000
        assert result.put_call_division == 1
        assert result.settlement_price == 980
        assert result.theoretical_price == Decimal('974.641')
        assert result.underlying_price == Decimal('27466.61')

    def test_from_json_with_empty_last_trading_day_gives_none(self):
        result = IndexOptionPrice.from_json(index_option_record(LTD='', SQD=''))

        assert result.last_trading_day is None
        assert result.special_quotation_day is None

    def test_from_json_with_empty_date_raises_decode_error(self):
        with pytest.raises(DecodeError):
            IndexOptionPrice.from_json(index_option_record(Date=''))

    def test_from_json_with_unexpected_price_type_raises_decode_error(self):
        with pytest.raises(DecodeError):
            IndexOptionPrice.from_json(index_option_record(EO=True))


class TestOtherRecords:
    """Test suite for the remaining endpoint records"""

    def test_issue_information_from_json(self):
        # Arrange
        raw = {
            'Date': '2022-11-11', 'Code': '86970',
            'CoName': '日本取引所グループ', 'CoNameEn': 'Japan Exchange Group,Inc.',
            'S17': '16', 'S17Nm': '金融（除く銀行）', 'S33': '7200', 'S33Nm': 'その他金融業',
            'ScaleCat': 'TOPIX Large70', 'Mkt': '0111', 'MktNm': 'プライム',
            'Mrgn': '1', 'MrgnNm': '信用',
        }

        # Act
        result = IssueInformation.from_json(raw)

        # Assert
        assert result.company_name_english == 'Japan Exchange Group,Inc.'
        assert result.sector17_code == 16
        assert result.sector33_code == '7200'
        assert result.margin_code == 1

    def test_issue_information_without_margin_fields(self):
        raw = {
            'Date': '2022-11-11', 'Code': '86970', 'CoName': 'x', 'CoNameEn': 'x',
            'S17': '16', 'S17Nm': 'x', 'S33': '7200', 'S33Nm': 'x',
            'ScaleCat': 'x', 'Mkt': '0111', 'MktNm': 'x',
        }

        result = IssueInformation.from_json(raw)

        assert result.margin_code is None
        assert result.margin_name is None

    def test_margin_trading_outstanding_from_json(self):
        # Arrange
        raw = {
            'Date': '2023-02-17', 'Code': '13010',
            'ShrtVol': Decimal('4100.0'), 'LongVol': Decimal('27600.0'),
            'ShrtNegVol': Decimal('1300.0'), 'LongNegVol': Decimal('7600.0'),
            'ShrtStdVol': Decimal('2800.0'), 'LongStdVol': Decimal('20000.0'),
            'IssType': '2',
        }

        # Act
        result = MarginTradingOutstanding.from_json(raw)

        # Assert
        assert result.total_short_balance == 4100
        assert result.long_standardized_balance == 20000
        assert result.issue_type == 2

    def test_short_selling_value_from_json(self):
        raw = {
            'Date': '2022-10-25', 'S33': '0050',
            'SellExShortVa': Decimal('1401352040.0'),
            'ShrtWithResVa': Decimal('1074780700.0'),
            'ShrtNoResVa': Decimal('146346900.0'),
        }

        result = ShortSellingValue.from_json(raw)

        assert result.sector33_code == '0050'
        assert result.long_selling_value == 1401352040
        assert result.short_selling_without_restrictions == 146346900

    def test_trading_calendar_from_json(self):
        result = TradingCalendar.from_json({'Date': '2015-04-01', 'HolDiv': '1'})

        assert result == TradingCalendar(date='2015-04-01', day_type=1)

    def test_index_and_topix_prices_from_json(self):
        # Arrange
        bar = {'Date': '2023-12-01', 'O': Decimal('2361.42'), 'H': Decimal('2370.5'),
               'L': Decimal('2355.0'), 'C': Decimal('2366.0')}

        # Act
        index_price = IndexPrice.from_json({**bar, 'Code': '0000'})
        topix_price = TopixPrice.from_json(bar)

        # Assert
        assert index_price.code == '0000'
        assert index_price.open == Decimal('2361.42')
        assert topix_price.close == Decimal('2366.0')
