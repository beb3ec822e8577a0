"""
Numeric formatting helpers that preserve the precision of catalog inputs.

Values written to the .stc file keep the number of significant figures (or
decimal digits) of the least precise catalog value they were derived from.
"""

import math
import re
from typing import Optional

_NUMBER_PATTERN = re.compile(r'^[+-]?(\d*)(?:\.(\d*))?(?:[eE][+-]?\d+)?$')


def count_sig_figs(text: Optional[str]) -> int:
    """
    Count the significant figures of a number as written.

    Leading zeros never count. Trailing zeros count only when the number
    has a decimal point ("10" has one, "10." and "10.0" have two and three).

    Args:
        text: Number as it appears in the catalog

    Returns:
        Number of significant figures, 0 for empty or unparseable text

    Examples:
        >>> count_sig_figs("0.0120")
        3
        >>> count_sig_figs("1500")
        2
    """
    if not text:
        return 0
    match = _NUMBER_PATTERN.match(text.strip())
    if not match:
        return 0

    integer_part = match.group(1) or ''
    fraction_part = match.group(2)

    if fraction_part is None:
        digits = integer_part.lstrip('0').rstrip('0')
        return len(digits)

    digits = (integer_part + fraction_part).lstrip('0')
    return len(digits)


def count_decimal_digits(text: Optional[str]) -> int:
    """Number of digits after the decimal point, 0 when there is none."""
    if not text:
        return 0
    match = re.search(r'\d+\.(\d+)', text)
    return len(match.group(1)) if match else 0


def format_sig_figs(value: float, sig_figs: int) -> str:
    """
    Format a value with a given number of significant figures.

    Never uses exponent notation and never leaves a trailing decimal point.

    Args:
        value: Number to format
        sig_figs: Significant figures to keep (values below 1 are treated as 1)

    Returns:
        Formatted string
    """
    sig_figs = max(int(sig_figs), 1)
    if value == 0 or not math.isfinite(value):
        return f"{value:.{sig_figs - 1}f}" if math.isfinite(value) else str(value)

    exponent = math.floor(math.log10(abs(value)))
    decimals = sig_figs - 1 - exponent
    rounded = round(value, decimals)

    # Rounding may carry into the next power of ten (9.99 -> 10.0)
    if rounded != 0:
        new_exponent = math.floor(math.log10(abs(rounded)))
        if new_exponent != exponent:
            decimals = sig_figs - 1 - new_exponent
            rounded = round(value, decimals)

    if decimals > 0:
        return f"{rounded:.{decimals}f}"
    return str(int(rounded))


def format_decimals(value: float, decimals: int) -> str:
    """Fixed-point formatting with a non-negative number of decimals."""
    return f"{value:.{max(int(decimals), 0)}f}"


def format_plain(value: float) -> str:
    """Shortest general representation ("13" for 13.0, "0.85" for 0.85)."""
    return f"{value:g}"


def format_magnitude(value: float, max_decimals: int = 2) -> str:
    """
    Format a magnitude, rounding to max_decimals only when it has more.

    Args:
        value: Magnitude
        max_decimals: Maximum decimal places to keep

    Returns:
        Formatted magnitude
    """
    if round(value, max_decimals) != value:
        return f"{value:.{max_decimals}f}"
    return format_plain(value)
