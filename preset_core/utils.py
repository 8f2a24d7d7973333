#!/usr/bin/env python
#
# Image Presets - Utility functions
# © 2025 Shinichi Morita (shin3tky)
#

"""
Shared helpers: rounding, numeric checks, number words and colour syntax.
"""

import math
import re
from typing import Any, Optional, Union

Numeric = Union[int, float]

# ==========================================
# Rounding and number formatting
# ==========================================


def round_half_up(value: Numeric, decimals: int = 0) -> Numeric:
    """Round half away from zero.

    Python's ``round`` uses banker's rounding; values such as ``2.5`` must
    round to ``3`` here.

    Args:
        value: Number to round.
        decimals: Number of decimal places to keep.

    Returns:
        An int when ``decimals`` is 0, otherwise a float.
    """
    factor = 10**decimals
    scaled = abs(value) * factor
    rounded = math.floor(scaled + 0.5)
    if value < 0:
        rounded = -rounded
    if decimals == 0:
        return int(rounded)
    return rounded / factor


def divide_rounded(numerator: int, denominator: int, decimals: int = 0) -> str:
    """Divide two non-negative integers and round half up, exactly.

    Integer arithmetic keeps arbitrarily large durations from overflowing
    float conversion. Whole results are rendered without a decimal part.

    Example:
        >>> divide_rounded(5400, 3600, 1)
        '1.5'
        >>> divide_rounded(7200, 3600, 1)
        '2'
    """
    if denominator <= 0:
        raise ZeroDivisionError("denominator must be positive")
    if numerator < 0:
        raise ValueError("numerator must be non-negative")
    factor = 10**decimals
    scaled = (2 * numerator * factor + denominator) // (2 * denominator)
    whole, fraction = divmod(scaled, factor)
    if fraction == 0:
        return str(whole)
    return f"{whole}.{str(fraction).rjust(decimals, '0').rstrip('0')}"


def format_decimal(value: Numeric) -> str:
    """Render a number without a trailing ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, float):
        return ("%.6f" % value).rstrip("0").rstrip(".")
    return str(value)


# ==========================================
# Loose value checks
# ==========================================
_NUMERIC_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")
_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$")


def is_numeric(value: Any) -> bool:
    """Return True for numbers and strings that look like a number.

    Booleans, NaN and infinities are not numeric.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, int):
        return True
    if isinstance(value, str):
        return bool(_NUMERIC_RE.match(value))
    return False


def to_number(value: Any) -> Optional[Numeric]:
    """Convert a numeric value or string to int/float, or None.

    Strings that overflow to infinity, or integers too long to convert,
    give None.
    """
    if not is_numeric(value):
        return None
    if isinstance(value, (int, float)):
        return value
    if _INTEGER_RE.match(value):
        try:
            return int(value)
        except ValueError:
            return None
    number = float(value)
    return number if math.isfinite(number) else None


def to_int(value: Any) -> Optional[int]:
    """Truncate a numeric value to int (``"7.9"`` -> 7), or None."""
    number = to_number(value)
    if number is None:
        return None
    return int(number)


def is_blank(value: Any) -> bool:
    """Return True for values treated as "not provided".

    ``None``, ``False``, zero, ``""``, ``"0"`` and empty containers are blank.
    """
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, str):
        return value == "" or value == "0"
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


# ==========================================
# Number words
# ==========================================
_SMALL_NUMBERS = {
    "zero": 0,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
}
_TENS = {
    "twenty": 20,
    "thirty": 30,
    "forty": 40,
    "fifty": 50,
    "sixty": 60,
    "seventy": 70,
    "eighty": 80,
    "ninety": 90,
}
_SCALES = {
    "thousand": 1000,
    "million": 1000000,
    "billion": 1000000000,
}
NUMBER_WORDS = frozenset(_SMALL_NUMBERS) | frozenset(_TENS) | {"hundred"} | frozenset(
    _SCALES
)

_WORD_ALTERNATION = "|".join(sorted(NUMBER_WORDS, key=len, reverse=True))
_NUMBER_PHRASE_RE = re.compile(
    r"\b(?:{0})(?:(?:\s+and\s+|\s+|-)(?:{0}))*\b".format(_WORD_ALTERNATION)
)


def words_to_number(phrase: str) -> int:
    """Convert an English cardinal phrase to an integer.

    Example:
        >>> words_to_number("one hundred and twenty five")
        125
        >>> words_to_number("two thousand")
        2000
    """
    total = 0
    current = 0
    for token in re.split(r"[\s-]+", phrase.strip().lower()):
        if not token or token == "and":
            continue
        if token in _SMALL_NUMBERS:
            current += _SMALL_NUMBERS[token]
        elif token in _TENS:
            current += _TENS[token]
        elif token == "hundred":
            current = max(current, 1) * 100
        elif token in _SCALES:
            total += max(current, 1) * _SCALES[token]
            current = 0
        else:
            raise ValueError(f"Not a number word: {token!r}")
    return total + current


def replace_number_words(text: str) -> str:
    """Replace every run of English number words with its digits.

    Example:
        >>> replace_number_words("twenty five minutes")
        '25 minutes'
    """
    return _NUMBER_PHRASE_RE.sub(lambda m: str(words_to_number(m.group(0))), text)


# ==========================================
# Colour syntax
# ==========================================
_HEX_COLOR_RE = re.compile(r"^#?(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_SHORT_HEX_COLOR_RE = re.compile(r"^#?(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_RGB_COLOR_RE = re.compile(
    r"^rgba?\(\s*\d{1,3}\s*,\s*\d{1,3}\s*,\s*\d{1,3}\s*(?:,\s*[0-9.]+\s*)?\)$",
    re.IGNORECASE,
)
NAMED_COLORS = frozenset(
    {
        "white",
        "black",
        "red",
        "green",
        "blue",
        "yellow",
        "orange",
        "purple",
        "pink",
        "brown",
        "gray",
        "grey",
    }
)


def is_hex_color(value: str, *, allow_alpha: bool = True) -> bool:
    """Hex colour with optional ``#``: 3 or 6 digits, plus 4/8 with alpha."""
    pattern = _HEX_COLOR_RE if allow_alpha else _SHORT_HEX_COLOR_RE
    return bool(pattern.match(value.strip()))


def is_rgb_color(value: str) -> bool:
    return bool(_RGB_COLOR_RE.match(value.strip()))


def is_valid_color(value: str) -> bool:
    """Accept ``transparent``, ``#rgb``/``#rrggbb``, rgb()/rgba() and basic names."""
    color = value.strip()
    if color.lower() == "transparent" or color.lower() in NAMED_COLORS:
        return True
    if color.startswith("#") and is_hex_color(color, allow_alpha=False):
        return True
    return is_rgb_color(color)


__all__ = [
    "round_half_up",
    "divide_rounded",
    "format_decimal",
    "is_numeric",
    "to_number",
    "to_int",
    "is_blank",
    "NUMBER_WORDS",
    "words_to_number",
    "replace_number_words",
    "NAMED_COLORS",
    "is_hex_color",
    "is_rgb_color",
    "is_valid_color",
]
