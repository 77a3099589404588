"""
Turn untrusted form/JSON values into the numbers we store.

Bad numbers never raise: anything we cannot read as a finite number
becomes None, which is stored as "not reported" and kept distinct from 0.
"""

import math
from typing import Any, Optional


def to_number(value: Any) -> Optional[float]:
    """
    None, "" and whitespace-only strings -> None.
    Booleans -> 1.0 / 0.0, numbers and numeric strings -> float.
    Anything unparsable, NaN or +/-inf -> None.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
    if not isinstance(value, (str, int, float)):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def to_count(value: Any) -> Optional[int]:
    """Like to_number, but for head counts: non-integral values are dropped."""
    number = to_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def to_privacy_flag(value: Any) -> Optional[bool]:
    # Form selects post "Yes"/"No"; JSON clients may send a real boolean
    if isinstance(value, bool):
        return value
    if value == "Yes":
        return True
    if value == "No":
        return False
    return None


def to_fiscal_year(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
