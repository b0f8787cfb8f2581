"""
Unit conversion between human-readable amounts and integer base units.

"5" ether with 18 decimals is 5 * 10**18 base units.
"""

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

DEFAULT_DECIMALS = 18


def parse_units(value: Union[str, int, Decimal], decimals: int = DEFAULT_DECIMALS) -> int:
    """
    Convert a decimal amount to base units.
    
    Args:
        value: Amount such as "5", "0.25" or 3
        decimals: Number of decimals of the unit
        
    Returns:
        Integer amount in base units
        
    Raises:
        ValueError: negative value, malformed number, or more fractional
            digits than the unit supports
    """
    if isinstance(value, bool):
        raise ValueError("Amount must be a number, got bool")
    if isinstance(value, float):
        # Floats can't represent most decimal fractions exactly
        value = str(value)
    
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError):
        raise ValueError(f"Invalid amount: {value!r}")
    
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    if amount < 0:
        raise ValueError(f"Amount must be non-negative, got {value}")
    
    with localcontext() as ctx:
        ctx.prec = 100
        scaled = amount.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount {value} has more than {decimals} decimals")
    
    return int(scaled)


def format_units(amount: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """Convert base units back to a decimal string ("5", "0.25")."""
    if amount < 0:
        raise ValueError(f"Amount must be non-negative, got {amount}")
    
    whole, frac = divmod(amount, 10**decimals)
    if frac == 0:
        return str(whole)
    
    frac_str = str(frac).rjust(decimals, "0").rstrip("0")
    return f"{whole}.{frac_str}"
