"""
Input Validation - checks applied to every caller-supplied value.

Each validator returns (is_valid, error_message) and never raises, so
callers decide whether to reject or report.
"""

from typing import Any, Optional, Tuple

from blindbid.crypto import ADDRESS_SIZE, COMMITMENT_SIZE, UINT256_MAX

# =============================================================================
# Constants
# =============================================================================

MIN_AMOUNT = 0
MAX_AMOUNT = UINT256_MAX

# Durations in seconds (~136 years upper bound)
MAX_DURATION = 2**32 - 1


# =============================================================================
# Validation Functions
# =============================================================================


def validate_bytes(
    data: Any,
    name: str,
    expected_length: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate bytes input.
    
    Args:
        data: Data to validate
        name: Field name for error messages
        expected_length: Exact expected length
        
    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (bytes, bytearray)):
        return False, f"{name} must be bytes, got {type(data).__name__}"
    
    if expected_length is not None and len(data) != expected_length:
        return False, f"{name} must be {expected_length} bytes, got {len(data)}"
    
    return True, ""


def validate_address(address: Any, name: str = "address") -> Tuple[bool, str]:
    """Validate a 20-byte address."""
    return validate_bytes(address, name, expected_length=ADDRESS_SIZE)


def validate_commitment(commitment: Any) -> Tuple[bool, str]:
    """Validate a 32-byte blinded bid."""
    return validate_bytes(commitment, "blinded_bid", expected_length=COMMITMENT_SIZE)


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.
    
    Booleans are rejected even though they subclass int.
    
    Returns:
        (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"
    
    if value < min_val:
        return False, f"{name} must be >= {min_val}, got {value}"
    
    if value > max_val:
        return False, f"{name} must be <= {max_val}, got {value}"
    
    return True, ""


def validate_amount(amount: Any, name: str = "amount") -> Tuple[bool, str]:
    """Validate a uint256 amount."""
    return validate_integer(amount, name, MIN_AMOUNT, MAX_AMOUNT)


def validate_duration(duration: Any, name: str = "duration") -> Tuple[bool, str]:
    """Validate a phase duration in seconds."""
    return validate_integer(duration, name, 0, MAX_DURATION)


def validate_array(
    data: Any,
    name: str,
    max_length: Optional[int] = None,
) -> Tuple[bool, str]:
    """
    Validate array/list input.
    
    Returns:
        (is_valid, error_message)
    """
    if not isinstance(data, (list, tuple)):
        return False, f"{name} must be list/tuple, got {type(data).__name__}"
    
    if max_length is not None and len(data) > max_length:
        return False, f"{name} exceeds max length {max_length}, got {len(data)}"
    
    return True, ""


def validate_flag(value: Any, name: str = "fake") -> Tuple[bool, str]:
    """Validate a boolean flag."""
    if not isinstance(value, bool):
        return False, f"{name} must be bool, got {type(value).__name__}"
    return True, ""


def validate_hex_string(value: Any, name: str, expected_bytes: Optional[int] = None) -> Tuple[bool, str]:
    """
    Validate a hex string (with or without 0x prefix).
    
    Args:
        value: Value to validate
        name: Field name
        expected_bytes: Expected byte length when decoded
        
    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str):
        return False, f"{name} must be str, got {type(value).__name__}"
    
    hex_str = value[2:] if value.startswith("0x") else value
    
    if len(hex_str) % 2 != 0:
        return False, f"{name} has odd length, invalid hex"
    
    try:
        bytes.fromhex(hex_str)
    except ValueError:
        return False, f"{name} contains invalid hex characters"
    
    if expected_bytes is not None:
        actual_bytes = len(hex_str) // 2
        if actual_bytes != expected_bytes:
            return False, f"{name} must be {expected_bytes} bytes, got {actual_bytes}"
    
    return True, ""


# =============================================================================
# Composite Validators
# =============================================================================


def validate_reveal_data(values: Any, fakes: Any, count: Optional[int] = None) -> Tuple[bool, str]:
    """
    Validate the parallel (values, fakes) sequences of a reveal.

    Args:
        values: Revealed bid values
        fakes: Revealed fake flags
        count: Only the first `count` entries are checked (default: all).
            Entries past it are ignored by reveal and may hold anything.

    Returns:
        (is_valid, error_message)
    """
    valid, err = validate_array(values, "values")
    if not valid:
        return False, err

    valid, err = validate_array(fakes, "fakes")
    if not valid:
        return False, err

    for i, value in enumerate(values[:count]):
        valid, err = validate_amount(value, f"values[{i}]")
        if not valid:
            return False, err

    for i, fake in enumerate(fakes[:count]):
        valid, err = validate_flag(fake, f"fakes[{i}]")
        if not valid:
            return False, err

    return True, ""


def require(result: Tuple[bool, str]) -> None:
    """Raise ValueError if a validator rejected its input."""
    valid, err = result
    if not valid:
        raise ValueError(err)


# =============================================================================
# Module Exports
# =============================================================================

__all__ = [
    "validate_bytes",
    "validate_address",
    "validate_commitment",
    "validate_integer",
    "validate_amount",
    "validate_duration",
    "validate_array",
    "validate_flag",
    "validate_hex_string",
    "validate_reveal_data",
    "require",
    "MAX_AMOUNT",
    "MAX_DURATION",
]
