from decimal import Decimal

import pytest

from obrador.models import format_decimal, format_eur, parse_decimal


class TestFormatEur:
    def test_two_decimals(self):
        assert format_eur(Decimal("450")) == "450.00 €"

    def test_round_half_up(self):
        assert format_eur(Decimal("0.125")) == "0.13 €"
        assert format_eur(Decimal("655.195")) == "655.20 €"

    def test_negative(self):
        assert format_eur(Decimal("-25")) == "-25.00 €"


class TestFormatDecimal:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (Decimal("1.20"), "1.2"),
            (Decimal("10.00"), "10"),
            (Decimal("100"), "100"),
            (Decimal("0.5"), "0.5"),
        ],
    )
    def test_strips_trailing_zeros(self, value, expected):
        assert format_decimal(value) == expected


class TestParseDecimal:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("12", Decimal("12")),
            ("12.5", Decimal("12.5")),
            ("12,5", Decimal("12.5")),
            ("1.250,75", Decimal("1250.75")),
            ("45.50 €", Decimal("45.50")),
            ("-20", Decimal("-20")),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_decimal(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "NaN", "inf", None])
    def test_invalid(self, text):
        assert parse_decimal(text) is None
