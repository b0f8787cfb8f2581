"""
Unit tests for unit conversion.
"""

from decimal import Decimal

import pytest

from blindbid.utils.units import parse_units, format_units


class TestParseUnits:
    
    def test_whole(self):
        assert parse_units("5") == 5 * 10**18
    
    def test_fraction(self):
        assert parse_units("0.25") == 25 * 10**16
    
    def test_int_and_decimal(self):
        assert parse_units(3) == 3 * 10**18
        assert parse_units(Decimal("1.5")) == 15 * 10**17
    
    def test_custom_decimals(self):
        assert parse_units("1.5", decimals=6) == 1_500_000
        assert parse_units("7", decimals=0) == 7
    
    def test_large_amount_keeps_precision(self):
        assert parse_units("123456789012345.123456789012345678") == 123456789012345123456789012345678
    
    @pytest.mark.parametrize("value", ["-1", "abc", "1.0000000000000000001", "NaN", True])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_units(value)


class TestFormatUnits:
    
    def test_whole(self):
        assert format_units(5 * 10**18) == "5"
    
    def test_fraction(self):
        assert format_units(25 * 10**16) == "0.25"
        assert format_units(1) == "0.000000000000000001"
    
    def test_zero(self):
        assert format_units(0) == "0"
    
    def test_negative(self):
        with pytest.raises(ValueError):
            format_units(-1)
