"""Best-effort numeric coercion for comparisons.

Cells come back from the backing store as display strings, so every
comparison runs both operands through ``coerce`` first. ``"10"`` and ``10``
compare equal and ``"10" > "9"`` holds numerically.
"""

import math
import re
from typing import Any

# Plain decimal or scientific notation. Rejects "nan", "inf", hex and "1_000",
# all of which float() would otherwise accept.
NUMERIC_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def coerce(value: Any) -> Any:
    """Return the numeric form of ``value`` if it has one, else ``value`` unchanged.

    Examples:
        >>> coerce("10") == coerce(10)
        True
        >>> coerce("10") > coerce("9")
        True
        >>> coerce("abc")
        'abc'
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _normalize(value)
    if isinstance(value, str):
        text = value.strip()
        if INTEGER_PATTERN.match(text):
            try:
                return int(text)
            except ValueError:
                # Past the interpreter's int digit limit
                pass
        if NUMERIC_PATTERN.match(text):
            number = float(text)
            if math.isfinite(number):
                return _normalize(number)
    return value


def _normalize(number: float) -> int | float:
    # Integral floats become exact ints so both sides of a comparison agree
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return number


def is_number(value: Any) -> bool:
    """True for ints and floats, excluding booleans."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def sort_key(value: Any) -> tuple[int, Any]:
    """Total ordering key over coerced values.

    Blank cells (missing or empty) sort first, then numbers, then strings,
    then anything else by its string form, so mixed columns never raise.
    """
    coerced = coerce(value)
    if coerced is None or coerced == "":
        return (0, 0)
    if isinstance(coerced, bool):
        return (1, int(coerced))
    if is_number(coerced):
        return (1, coerced)
    if isinstance(coerced, str):
        return (2, coerced)
    return (3, str(coerced))


def compare_values(left: Any, right: Any) -> int:
    """Three-way comparison of two values under ``sort_key`` ordering."""
    left_key, right_key = sort_key(left), sort_key(right)
    return (left_key > right_key) - (left_key < right_key)
