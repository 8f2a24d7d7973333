#!/usr/bin/env python
#
# Image Presets - Duration Parser
# © 2025 Shinichi Morita (shin3tky)
#

"""
Bidirectional conversion between human duration expressions and seconds.

Parsing accepts special keywords ("forever", "disabled", "daily"), bare
seconds, ISO-8601 durations ("PT1H30M"), compound interval strings
("1 hour 30 minutes", "2w 3d"), number words ("twenty five minutes") and
idioms ("a week", "half an hour", "an hour and a half").

Natural-language parsing is an ordered chain of strategies. Each strategy
returns an :class:`_Attempt`; the first success wins and the last failure
decides the error message. Nothing in this module raises for bad input
except :meth:`DurationParser.parse_or_raise`.

Example:
    >>> parser = DurationParser()
    >>> parser.parse_to_seconds("1 hour 30 minutes").value
    5400
    >>> parser.format_duration(5400)
    '90 minutes'
    >>> parser.format_duration(1209600, abbreviated=True)
    '14d'
"""

from __future__ import annotations

import logging
import math
import re
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

from .exceptions import DurationError
from .i18n import get_message
from .schema import (
    CONTEXT_AUDIT,
    CONTEXT_CACHE,
    CONTEXT_GENERAL,
    CONTEXT_TIMEOUT,
    DEFAULT_LOCALE,
    DURATION_DISABLED,
    DURATION_FOREVER,
    MAX_TIMEOUT_SECONDS,
    MIN_AUDIT_SECONDS,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    SECONDS_PER_MONTH,
    SECONDS_PER_YEAR,
    SPECIAL_DURATIONS,
    UNIT_SECONDS,
    ContextValidation,
    DurationInput,
    ParseResult,
)
from .utils import (
    divide_rounded,
    format_decimal,
    is_numeric,
    replace_number_words,
    round_half_up,
    to_int,
)

logger = logging.getLogger(__name__)

# ==========================================
# Grammar
# ==========================================
_UNIT_ALIASES: Dict[str, str] = {
    "s": "second",
    "sec": "second",
    "secs": "second",
    "m": "minute",
    "min": "minute",
    "mins": "minute",
    "h": "hour",
    "hr": "hour",
    "hrs": "hour",
    "d": "day",
    "w": "week",
    "wk": "week",
    "wks": "week",
    "mo": "month",
    "mos": "month",
    "y": "year",
    "yr": "year",
    "yrs": "year",
}
for _unit in UNIT_SECONDS:
    _UNIT_ALIASES[_unit] = _unit
    _UNIT_ALIASES[_unit + "s"] = _unit

_NUMBER = r"(?:\d+(?:\.\d+)?|\.\d+)"
_ISO_DURATION_RE = re.compile(
    rf"^p(?:(?P<year>{_NUMBER})y)?(?:(?P<month>{_NUMBER})m)?"
    rf"(?:(?P<week>{_NUMBER})w)?(?:(?P<day>{_NUMBER})d)?"
    rf"(?:t(?:(?P<hour>{_NUMBER})h)?(?:(?P<minute>{_NUMBER})m)?"
    rf"(?:(?P<second>{_NUMBER})s)?)?$"
)
_INTERVAL_TERM_RE = re.compile(rf"({_NUMBER})\s*([a-z]+)")
_INTERVAL_SEPARATOR_RE = re.compile(r"[\s,]*(?:and\b[\s,]*)?")
_NUMBER_WORD_PAIR_RE = re.compile(rf"({_NUMBER})\s*([a-z]+)")

_HALF = r"\s+and\s+a\s+half"
_IDIOM_RULES: List[Tuple["re.Pattern[str]", Callable[["re.Match[str]"], str]]] = [
    (
        re.compile(rf"\b({_NUMBER}){_HALF}\s+([a-z]+)"),
        lambda m: f"{format_decimal(float(m.group(1)) + 0.5)} {m.group(2)}",
    ),
    (
        re.compile(rf"\b(?:an?|one)\s+([a-z]+){_HALF}\b"),
        lambda m: f"1.5 {m.group(1)}",
    ),
    (
        re.compile(rf"\b({_NUMBER})\s+([a-z]+){_HALF}\b"),
        lambda m: f"{format_decimal(float(m.group(1)) + 0.5)} {m.group(2)}",
    ),
    (re.compile(_HALF + r"\b"), lambda m: ".5"),
    (re.compile(r"\bhalf\s+an?\s+"), lambda m: "0.5 "),
    (re.compile(r"\ba\s+couple\s+(?:of\s+)?"), lambda m: "2 "),
    (re.compile(r"\b(?:every|each)\s+(?=\d)"), lambda m: ""),
    (re.compile(r"\b(?:an?|one|every|each)\s+"), lambda m: "1 "),
]

# ==========================================
# Canned examples
# ==========================================
_COMMON_EXAMPLES = (
    "30 seconds",
    "a minute",
    "2 hours",
    "a day",
    "a week",
    "1 hour 30 minutes",
    "forever",
    "disabled",
)
_CONTEXT_EXAMPLES: Dict[str, Tuple[str, ...]] = {
    CONTEXT_CACHE: (
        "a day",
        "a week",
        "2 weeks",
        "a month",
        "1 week 3 days",
        "forever",
        "disabled",
    ),
    CONTEXT_AUDIT: ("daily", "a couple days", "a week", "2 weeks"),
    CONTEXT_TIMEOUT: ("30 seconds", "a minute", "a couple minutes", "5 minutes"),
}

_VERBOSE_UNITS = (
    ("year", SECONDS_PER_YEAR),
    ("month", SECONDS_PER_MONTH),
    ("day", SECONDS_PER_DAY),
    ("hour", SECONDS_PER_HOUR),
)


class _Attempt(NamedTuple):
    """Outcome of one parse strategy."""

    seconds: Optional[int] = None
    error_key: Optional[str] = None
    unit: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.seconds is not None


_NO_MATCH = _Attempt(error_key="duration.error.unparseable")


def _resolve_unit(token: str) -> Optional[str]:
    return _UNIT_ALIASES.get(token)


def _total_attempt(total: float) -> _Attempt:
    # Amounts with hundreds of digits overflow to infinity
    if not math.isfinite(total):
        return _NO_MATCH
    return _Attempt(seconds=round_half_up(total))


def _parse_iso8601(text: str) -> _Attempt:
    match = _ISO_DURATION_RE.match(text)
    if not match or not any(match.groupdict().values()):
        return _NO_MATCH
    total = 0.0
    for unit, amount in match.groupdict().items():
        if amount is not None:
            total += float(amount) * UNIT_SECONDS[unit]
    return _total_attempt(total)


def parse_interval(text: str) -> _Attempt:
    """Parse an ISO-8601 duration or a sequence of ``<number><unit>`` terms.

    The whole string must be consumed; terms may be separated by whitespace,
    commas or "and".
    """
    text = text.strip()
    if text.startswith("p"):
        return _parse_iso8601(text)

    total = 0.0
    matched = False
    position = 0
    while position < len(text):
        position = _INTERVAL_SEPARATOR_RE.match(text, position).end()
        if position >= len(text):
            break
        term = _INTERVAL_TERM_RE.match(text, position)
        if term is None:
            return _NO_MATCH
        unit = _resolve_unit(term.group(2))
        if unit is None:
            return _Attempt(error_key="duration.error.unknown_unit", unit=term.group(2))
        total += float(term.group(1)) * UNIT_SECONDS[unit]
        matched = True
        position = term.end()

    if not matched:
        return _NO_MATCH
    return _total_attempt(total)


def normalize_idioms(text: str) -> str:
    """Rewrite idioms such as "a", "half an" and "and a half" into numbers."""
    normalized = text
    for pattern, replacement in _IDIOM_RULES:
        normalized = pattern.sub(replacement, normalized)
    return re.sub(r"\s+", " ", normalized).strip()


def extract_unit_terms(text: str) -> _Attempt:
    """Sum every ``<number> <unit>`` occurrence found anywhere in ``text``.

    Each term is rounded to whole seconds before summing. A number followed
    by a word that is not a time unit fails the whole extraction.
    """
    terms = _NUMBER_WORD_PAIR_RE.findall(text)
    if not terms:
        return _NO_MATCH
    total = 0
    for amount, word in terms:
        unit = _resolve_unit(word)
        if unit is None:
            return _Attempt(error_key="duration.error.unknown_unit", unit=word)
        term = _total_attempt(float(amount) * UNIT_SECONDS[unit])
        if not term.ok:
            return term
        total += term.seconds
    return _Attempt(seconds=total)


class DurationParser:
    """Parse, format and validate durations expressed in seconds.

    Durations use two sentinels: ``-1`` means forever and ``0`` means
    disabled. Any other accepted value is a positive number of seconds.
    Months are 30 days and years are 365 days throughout.

    Args:
        locale: Locale used for formatted strings and error messages.
    """

    def __init__(self, locale: str = DEFAULT_LOCALE) -> None:
        self.locale = locale
        self._strategies: List[Tuple[str, Callable[[str], _Attempt]]] = [
            ("interval", parse_interval),
            ("idioms", lambda text: parse_interval(normalize_idioms(text))),
            ("unit_terms", lambda text: extract_unit_terms(normalize_idioms(text))),
        ]

    def _message(self, key: str, **params) -> str:
        return get_message(key, locale=self.locale, **params)

    # ========================================
    # Parsing
    # ========================================
    def parse_to_seconds(self, value) -> ParseResult:
        """Parse a duration expression into seconds.

        Never raises: failures are reported through ``ParseResult.error``
        with ``value`` set to 0.

        Args:
            value: Duration expression (str) or a number of seconds.

        Returns:
            ParseResult with the seconds value or an error message.
        """
        original = "" if value is None else str(value)
        text = original.strip().lower()

        if not text:
            return ParseResult(0, self._message("duration.error.empty"), original)

        if text in SPECIAL_DURATIONS:
            return ParseResult(SPECIAL_DURATIONS[text], None, original)

        if is_numeric(text):
            seconds = to_int(text)
            if seconds is None:
                message = self._message(
                    "duration.error.unparseable", input=original.strip(), unit=""
                )
                return ParseResult(0, message, original)
            if seconds < DURATION_FOREVER:
                return ParseResult(0, self._message("duration.error.negative"), original)
            return ParseResult(seconds, None, original)

        return self._parse_natural_language(text, original)

    def _parse_natural_language(self, text: str, original: str) -> ParseResult:
        candidate = replace_number_words(text)
        failure = _NO_MATCH
        for name, strategy in self._strategies:
            attempt = strategy(candidate)
            if attempt.ok:
                logger.debug(
                    "DurationParser: parsed %r as %d seconds via %s",
                    original,
                    attempt.seconds,
                    name,
                )
                return ParseResult(attempt.seconds, None, original)
            failure = attempt

        logger.debug(
            "DurationParser: could not parse %r (%s)", original, failure.error_key
        )
        message = self._message(
            failure.error_key or "duration.error.unparseable",
            input=original.strip(),
            unit=failure.unit or "",
        )
        return ParseResult(0, message, original)

    def parse_or_raise(self, value, context: Optional[str] = None) -> int:
        """Parse a duration and raise :class:`DurationError` on failure.

        Args:
            value: Duration expression or seconds.
            context: Optional usage context to validate against.

        Returns:
            Duration in seconds.

        Raises:
            DurationError: If the value cannot be parsed or is not allowed
                in ``context``.
        """
        result = self.parse_to_seconds(value)
        if result.error:
            raise DurationError(result.error, input_value=result.parsed_from)
        if context:
            check = self.validate_for_context(result.value, context)
            if not check.valid:
                raise DurationError(
                    check.error or "Invalid duration",
                    input_value=result.parsed_from,
                    duration_context=context,
                )
        return result.value

    # ========================================
    # Formatting
    # ========================================
    def format_duration(self, seconds: int, abbreviated: bool = False) -> str:
        """Format seconds as a human-readable string.

        Args:
            seconds: Duration in seconds.
            abbreviated: Use compact suffixes ("90m", "2.5h", "14d").

        Returns:
            Formatted duration; never empty.
        """
        form = "short" if abbreviated else "long"
        if seconds == DURATION_FOREVER:
            return self._message(f"duration.special.forever.{form}")
        if seconds == DURATION_DISABLED:
            return self._message(f"duration.special.disabled.{form}")
        if seconds < DURATION_FOREVER:
            return self._message(f"duration.special.invalid.{form}")

        try:
            if seconds < 2 * SECONDS_PER_MINUTE:
                if abbreviated:
                    return f"{seconds}s"
                return self._message("duration.unit.second", count=seconds)
            if abbreviated:
                return self._format_abbreviated(seconds)
            return self._format_verbose(seconds)
        except Exception as exc:
            logger.warning(
                "DurationParser.format_duration: falling back to basic formatting "
                "for %d seconds (%s: %s)",
                seconds,
                type(exc).__name__,
                exc,
            )
            return format_basic(seconds, abbreviated)

    def _format_abbreviated(self, seconds: int) -> str:
        if seconds >= SECONDS_PER_YEAR:
            return divide_rounded(seconds, SECONDS_PER_YEAR, 1) + "y"
        if seconds >= SECONDS_PER_MONTH:
            return divide_rounded(seconds, SECONDS_PER_MONTH, 1) + "mo"
        if seconds >= SECONDS_PER_DAY:
            return divide_rounded(seconds, SECONDS_PER_DAY) + "d"
        if seconds >= SECONDS_PER_HOUR:
            return divide_rounded(seconds, SECONDS_PER_HOUR, 1) + "h"
        return divide_rounded(seconds, SECONDS_PER_MINUTE) + "m"

    def _format_verbose(self, seconds: int) -> str:
        if seconds < 2 * SECONDS_PER_HOUR:
            minutes = int(divide_rounded(seconds, SECONDS_PER_MINUTE))
            return self._message("duration.unit.minute", count=minutes)

        parts: List[str] = []
        remainder = seconds
        for unit, unit_seconds in _VERBOSE_UNITS:
            amount, remainder = divmod(remainder, unit_seconds)
            if amount and len(parts) < 2:
                parts.append(self._message(f"duration.unit.{unit}", count=amount))

        if len(parts) == 2:
            text = self._message("duration.pair", first=parts[0], second=parts[1])
        else:
            text = parts[0]
        if seconds >= SECONDS_PER_YEAR:
            return self._message("duration.about", value=text)
        return text

    # ========================================
    # Context rules
    # ========================================
    def get_examples(self, context: str = CONTEXT_GENERAL) -> List[str]:
        """Return example expressions suited to a usage context."""
        return list(_CONTEXT_EXAMPLES.get(context, _COMMON_EXAMPLES))

    def validate_for_context(self, seconds: int, context: str) -> ContextValidation:
        """Check a parsed duration against the bounds of a usage context.

        =========  =============================
        context    valid when
        =========  =============================
        cache      seconds >= -1
        timeout    0 < seconds <= 3600
        audit      seconds >= 3600
        other      seconds >= -1
        =========  =============================
        """
        if context == CONTEXT_CACHE:
            if seconds < DURATION_FOREVER:
                return ContextValidation(False, self._message("duration.context.cache.invalid"))
        elif context == CONTEXT_TIMEOUT:
            if seconds <= 0:
                return ContextValidation(
                    False, self._message("duration.context.timeout.not_positive")
                )
            if seconds > MAX_TIMEOUT_SECONDS:
                return ContextValidation(
                    False, self._message("duration.context.timeout.too_long")
                )
        elif context == CONTEXT_AUDIT:
            if seconds <= 0:
                return ContextValidation(
                    False, self._message("duration.context.audit.not_positive")
                )
            if seconds < MIN_AUDIT_SECONDS:
                return ContextValidation(
                    False, self._message("duration.context.audit.too_short")
                )
        elif seconds < DURATION_FOREVER:
            return ContextValidation(False, self._message("duration.context.general.invalid"))
        return ContextValidation(True)

    def validate_input(self, value, context: str = CONTEXT_GENERAL) -> DurationInput:
        """Parse and context-check user input, returning a display string too."""
        result = self.parse_to_seconds(value)
        if result.error:
            return DurationInput(0, result.error, None)
        check = self.validate_for_context(result.value, context)
        if not check.valid:
            return DurationInput(0, check.error, None)
        return DurationInput(result.value, None, self.format_duration(result.value))


def format_basic(seconds: int, abbreviated: bool = False) -> str:
    """Threshold-bucketed formatting used when rich formatting fails.

    Buckets: < 2 hours in minutes, < 2 days in hours, < 60 days in days,
    < 1 year as "about Xmo", otherwise "about Xy".
    """
    if seconds == DURATION_FOREVER:
        return "forever" if abbreviated else "forever (never expires)"
    if seconds == DURATION_DISABLED:
        return "disabled" if abbreviated else "disabled (no caching)"
    if seconds < 0:
        return "invalid" if abbreviated else "invalid duration"

    def unit_text(amount: str, short: str, singular: str) -> str:
        if abbreviated:
            return amount + short
        return f"{amount} {singular}" if amount == "1" else f"{amount} {singular}s"

    if seconds < 2 * SECONDS_PER_HOUR:
        return unit_text(divide_rounded(seconds, SECONDS_PER_MINUTE), "m", "minute")
    if seconds < 2 * SECONDS_PER_DAY:
        return unit_text(divide_rounded(seconds, SECONDS_PER_HOUR, 1), "h", "hour")
    if seconds < 2 * SECONDS_PER_MONTH:
        return unit_text(divide_rounded(seconds, SECONDS_PER_DAY), "d", "day")
    if seconds < SECONDS_PER_YEAR:
        months = unit_text(divide_rounded(seconds, SECONDS_PER_MONTH, 1), "mo", "month")
        return f"about {months}"
    years = unit_text(divide_rounded(seconds, SECONDS_PER_YEAR, 1), "y", "year")
    return f"about {years}"


_default_parser = DurationParser()


def parse_to_seconds(value) -> ParseResult:
    """Parse with the shared default-locale parser."""
    return _default_parser.parse_to_seconds(value)


def format_duration(seconds: int, abbreviated: bool = False) -> str:
    return _default_parser.format_duration(seconds, abbreviated)


def validate_for_context(seconds: int, context: str) -> ContextValidation:
    return _default_parser.validate_for_context(seconds, context)


__all__ = [
    "DurationParser",
    "parse_interval",
    "normalize_idioms",
    "extract_unit_terms",
    "format_basic",
    "parse_to_seconds",
    "format_duration",
    "validate_for_context",
]
