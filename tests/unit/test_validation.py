"""
Unit tests for input validation.
"""

import pytest

from blindbid.utils.validation import (
    validate_address,
    validate_commitment,
    validate_amount,
    validate_duration,
    validate_array,
    validate_flag,
    validate_hex_string,
    validate_reveal_data,
    require,
    MAX_AMOUNT,
)


class TestValidators:
    
    def test_address(self):
        assert validate_address(b"\x01" * 20) == (True, "")
        valid, err = validate_address(b"\x01" * 19)
        assert not valid
        assert "20 bytes" in err
        assert not validate_address("0x" + "01" * 20)[0]
    
    def test_commitment(self):
        assert validate_commitment(bytearray(32))[0]
        assert not validate_commitment(b"\x00" * 31)[0]
    
    def test_amount(self):
        assert validate_amount(0)[0]
        assert validate_amount(MAX_AMOUNT)[0]
        assert not validate_amount(-1)[0]
        assert not validate_amount(MAX_AMOUNT + 1)[0]
        assert not validate_amount(True)[0]
        assert not validate_amount(1.0)[0]
    
    def test_duration(self):
        assert validate_duration(0)[0]
        assert not validate_duration(-5)[0]
    
    def test_array(self):
        assert validate_array([1, 2], "values")[0]
        assert validate_array((1,), "values")[0]
        assert not validate_array({1, 2}, "values")[0]
        assert validate_array([0] * 1000, "values")[0]
        valid, err = validate_array([0] * 3, "values", max_length=2)
        assert not valid
        assert "max length 2" in err
    
    def test_flag(self):
        assert validate_flag(False)[0]
        assert not validate_flag(0)[0]
    
    def test_hex_string(self):
        assert validate_hex_string("0x" + "ab" * 20, "addr", 20)[0]
        assert not validate_hex_string("0xabc", "addr")[0]
        assert not validate_hex_string("0xzz", "addr")[0]
        assert not validate_hex_string("0xabcd", "addr", 20)[0]
    
    def test_reveal_data(self):
        assert validate_reveal_data([5, 7], [False, True])[0]
        valid, err = validate_reveal_data([5, -1], [False, False])
        assert not valid
        assert "values[1]" in err
        valid, err = validate_reveal_data([5], ["no"])
        assert not valid
        assert "fakes[0]" in err

    def test_reveal_data_count_limits_checked_entries(self):
        assert validate_reveal_data([5, -1], [False, "no"], count=1)[0]
        assert validate_reveal_data([-1] * 300, ["no"] * 300, count=0)[0]
        valid, err = validate_reveal_data([5, -1], [False, False], count=2)
        assert not valid
        assert "values[1]" in err
        # The sequences themselves are still type-checked
        assert not validate_reveal_data(iter([5]), [False], count=0)[0]

    def test_require(self):
        require((True, ""))
        with pytest.raises(ValueError, match="boom"):
            require((False, "boom"))
