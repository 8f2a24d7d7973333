"""
Tests for duration parsing, formatting and context checks in preset_core.duration.
"""

import os
import sys
import unittest

# Add project root directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from preset_core.duration import (  # noqa: E402
    DurationParser,
    extract_unit_terms,
    format_basic,
    normalize_idioms,
    parse_interval,
)
from preset_core.exceptions import DurationError  # noqa: E402


class TestParseSpecialValues(unittest.TestCase):
    def setUp(self):
        self.parser = DurationParser()

    def test_forever_keywords(self):
        for text in ("forever", "never expire", "Permanent", "  PERPETUAL  "):
            with self.subTest(text=text):
                self.assertEqual(self.parser.parse_to_seconds(text).value, -1)

    def test_disabled_keywords(self):
        for text in ("never", "disabled", "no cache", "no caching", "off"):
            with self.subTest(text=text):
                result = self.parser.parse_to_seconds(text)
                self.assertIsNone(result.error)
                self.assertEqual(result.value, 0)

    def test_named_intervals(self):
        self.assertEqual(self.parser.parse_to_seconds("daily").value, 86400)
        self.assertEqual(self.parser.parse_to_seconds("weekly").value, 604800)
        self.assertEqual(self.parser.parse_to_seconds("monthly").value, 2592000)

    def test_empty_input(self):
        for text in ("", "   ", None):
            with self.subTest(text=text):
                result = self.parser.parse_to_seconds(text)
                self.assertEqual(result.error, "Duration cannot be empty")
                self.assertEqual(result.value, 0)


class TestParseNumbers(unittest.TestCase):
    def setUp(self):
        self.parser = DurationParser()

    def test_plain_seconds(self):
        self.assertEqual(self.parser.parse_to_seconds("3600").value, 3600)
        self.assertEqual(self.parser.parse_to_seconds(" 42 ").value, 42)
        self.assertEqual(self.parser.parse_to_seconds(900).value, 900)

    def test_minus_one_is_forever(self):
        self.assertEqual(self.parser.parse_to_seconds("-1").value, -1)

    def test_other_negative_numbers_rejected(self):
        result = self.parser.parse_to_seconds("-5")
        self.assertEqual(result.value, 0)
        self.assertIn("-1 (permanent)", result.error)

    def test_parsed_from_keeps_original(self):
        result = self.parser.parse_to_seconds("  2 Weeks ")
        self.assertEqual(result.parsed_from, "  2 Weeks ")
        self.assertEqual(result.value, 1209600)


class TestParseNaturalLanguage(unittest.TestCase):
    def setUp(self):
        self.parser = DurationParser()

    def assertSeconds(self, text, expected):
        result = self.parser.parse_to_seconds(text)
        self.assertIsNone(result.error, msg=f"{text!r}: {result.error}")
        self.assertEqual(result.value, expected, msg=text)

    def test_interval_strings(self):
        self.assertSeconds("2 weeks", 1209600)
        self.assertSeconds("1 hour 30 minutes", 5400)
        self.assertSeconds("2w 3d", 1468800)
        self.assertSeconds("1 hour, 15 minutes and 30 seconds", 4530)
        self.assertSeconds("90 mins", 5400)

    def test_iso8601(self):
        self.assertSeconds("PT1H30M", 5400)
        self.assertSeconds("P1D", 86400)
        self.assertSeconds("P1W", 604800)
        self.assertSeconds("P1Y", 31536000)

    def test_fractional_amounts_round_half_up(self):
        self.assertSeconds("1.5 hours", 5400)
        self.assertSeconds("0.5 seconds", 1)
        self.assertSeconds("2.5 s", 3)

    def test_idioms(self):
        self.assertSeconds("a week", 604800)
        self.assertSeconds("an hour", 3600)
        self.assertSeconds("half an hour", 1800)
        self.assertSeconds("an hour and a half", 5400)
        self.assertSeconds("a couple days", 172800)
        self.assertSeconds("every 2 hours", 7200)

    def test_number_words(self):
        self.assertSeconds("twenty five minutes", 1500)
        self.assertSeconds("one hour and a half", 5400)
        self.assertSeconds("two weeks", 1209600)

    def test_unit_terms_inside_sentence(self):
        self.assertSeconds("about 3 days or so", 259200)

    def test_unknown_unit_error(self):
        result = self.parser.parse_to_seconds("5 parsecs")
        self.assertEqual(result.value, 0)
        self.assertIn("Unknown time unit 'parsecs'", result.error)

    def test_unparseable_error_lists_examples(self):
        result = self.parser.parse_to_seconds("banana")
        self.assertEqual(result.value, 0)
        self.assertIn("Could not parse 'banana'", result.error)
        self.assertIn("PT1H30M", result.error)

    def test_overflowing_amounts_are_errors(self):
        huge = "9" * 400
        for text in (
            "1" + "0" * 400 + " hours",
            "P" + huge + "D",
            "a " + huge + " weeks",
            "about " + huge + " days or so",
            "1e400",
        ):
            with self.subTest(text=text[:12]):
                result = self.parser.parse_to_seconds(text)
                self.assertEqual(result.value, 0)
                self.assertIn("Could not parse", result.error)

    def test_long_integer_seconds_are_accepted(self):
        result = self.parser.parse_to_seconds("9" * 40)
        self.assertIsNone(result.error)
        self.assertEqual(result.value, int("9" * 40))


class TestParserHelpers(unittest.TestCase):
    def test_normalize_idioms(self):
        self.assertEqual(normalize_idioms("half an hour"), "0.5 hour")
        self.assertEqual(normalize_idioms("a week"), "1 week")
        self.assertEqual(normalize_idioms("2 and a half hours"), "2.5 hours")

    def test_parse_interval_requires_whole_string(self):
        self.assertFalse(parse_interval("3 days or so").ok)
        self.assertEqual(parse_interval("3 days").seconds, 259200)

    def test_extract_unit_terms_fails_on_non_unit_word(self):
        attempt = extract_unit_terms("3 apples")
        self.assertFalse(attempt.ok)
        self.assertEqual(attempt.unit, "apples")

    def test_helpers_reject_infinite_totals(self):
        huge = "9" * 400
        self.assertFalse(parse_interval(huge + " hours").ok)
        self.assertFalse(parse_interval("p" + huge + "d").ok)
        self.assertFalse(extract_unit_terms("roughly " + huge + " weeks").ok)


class TestFormatDuration(unittest.TestCase):
    def setUp(self):
        self.parser = DurationParser()

    def test_sentinels(self):
        self.assertEqual(self.parser.format_duration(-1), "forever (never expires)")
        self.assertEqual(self.parser.format_duration(-1, True), "forever")
        self.assertEqual(self.parser.format_duration(0), "disabled (no caching)")
        self.assertEqual(self.parser.format_duration(0, True), "disabled")
        self.assertEqual(self.parser.format_duration(-7), "invalid duration")
        self.assertEqual(self.parser.format_duration(-7, True), "invalid")

    def test_seconds_below_two_minutes(self):
        self.assertEqual(self.parser.format_duration(1), "1 second")
        self.assertEqual(self.parser.format_duration(45), "45 seconds")
        self.assertEqual(self.parser.format_duration(119), "119 seconds")
        self.assertEqual(self.parser.format_duration(45, True), "45s")

    def test_minutes_below_two_hours(self):
        self.assertEqual(self.parser.format_duration(120), "2 minutes")
        self.assertEqual(self.parser.format_duration(5400), "90 minutes")
        self.assertEqual(self.parser.format_duration(120, True), "2m")
        self.assertEqual(self.parser.format_duration(5400, True), "1.5h")

    def test_verbose_decomposition(self):
        self.assertEqual(self.parser.format_duration(7200), "2 hours")
        self.assertEqual(self.parser.format_duration(90000), "1 day 1 hour")
        self.assertEqual(self.parser.format_duration(1209600), "14 days")
        self.assertEqual(self.parser.format_duration(2592000), "1 month")

    def test_year_or_more_is_approximate(self):
        self.assertEqual(self.parser.format_duration(31536000), "about 1 year")
        self.assertTrue(self.parser.format_duration(40000000).startswith("about "))

    def test_abbreviated_dominant_unit(self):
        self.assertEqual(self.parser.format_duration(1209600, True), "14d")
        self.assertEqual(self.parser.format_duration(2592000, True), "1mo")
        self.assertEqual(self.parser.format_duration(31536000, True), "1y")
        self.assertEqual(self.parser.format_duration(47304000, True), "1.5y")

    def test_large_values_do_not_overflow(self):
        self.assertTrue(self.parser.format_duration(10**30, True).endswith("y"))

    def test_never_empty(self):
        for seconds in (-100, -1, 0, 1, 59, 3599, 86399, 10**12):
            with self.subTest(seconds=seconds):
                self.assertTrue(self.parser.format_duration(seconds))
                self.assertTrue(self.parser.format_duration(seconds, True))

    def test_numeric_format_reparses(self):
        text = self.parser.format_duration(45, True)[:-1]
        self.assertEqual(self.parser.parse_to_seconds(text).value, 45)


class TestFormatBasic(unittest.TestCase):
    def test_bucket_boundaries(self):
        self.assertEqual(format_basic(7199), "120 minutes")
        self.assertEqual(format_basic(7200), "2 hours")
        self.assertEqual(format_basic(5400, True), "90m")
        self.assertEqual(format_basic(129600), "36 hours")
        self.assertEqual(format_basic(172800), "2 days")
        self.assertEqual(format_basic(5184000), "about 2 months")
        self.assertEqual(format_basic(31536000, True), "about 1y")

    def test_sentinels(self):
        self.assertEqual(format_basic(-1), "forever (never expires)")
        self.assertEqual(format_basic(0, True), "disabled")
        self.assertEqual(format_basic(-3), "invalid duration")


class TestContextValidation(unittest.TestCase):
    def setUp(self):
        self.parser = DurationParser()

    def test_cache(self):
        self.assertTrue(self.parser.validate_for_context(-1, "cache").valid)
        self.assertTrue(self.parser.validate_for_context(0, "cache").valid)
        self.assertFalse(self.parser.validate_for_context(-2, "cache").valid)

    def test_timeout(self):
        self.assertTrue(self.parser.validate_for_context(3600, "timeout").valid)
        check = self.parser.validate_for_context(3601, "timeout")
        self.assertFalse(check.valid)
        self.assertEqual(check.error, "Timeout should not exceed 1 hour (3600 seconds)")
        check = self.parser.validate_for_context(0, "timeout")
        self.assertEqual(check.error, "Timeout must be greater than 0 seconds")

    def test_audit(self):
        self.assertTrue(self.parser.validate_for_context(3600, "audit").valid)
        check = self.parser.validate_for_context(1800, "audit")
        self.assertIn("at least 1 hour", check.error)
        check = self.parser.validate_for_context(-1, "audit")
        self.assertEqual(check.error, "Audit interval must be greater than 0 seconds")

    def test_general_and_unknown_contexts(self):
        self.assertTrue(self.parser.validate_for_context(-1, "general").valid)
        self.assertFalse(self.parser.validate_for_context(-2, "general").valid)
        self.assertTrue(self.parser.validate_for_context(5, "something_else").valid)

    def test_validate_input(self):
        accepted = self.parser.validate_input("30 minutes", "timeout")
        self.assertEqual(accepted.value, 1800)
        self.assertIsNone(accepted.error)
        self.assertEqual(accepted.human_readable, "30 minutes")

        rejected = self.parser.validate_input("2 hours", "timeout")
        self.assertEqual(rejected.value, 0)
        self.assertIsNone(rejected.human_readable)
        self.assertIn("1 hour", rejected.error)

    def test_examples(self):
        self.assertIn("forever", self.parser.get_examples("cache"))
        self.assertIn("daily", self.parser.get_examples("audit"))
        self.assertEqual(
            self.parser.get_examples("general"), self.parser.get_examples("unknown")
        )


class TestParseOrRaise(unittest.TestCase):
    def test_returns_seconds(self):
        self.assertEqual(DurationParser().parse_or_raise("2 hours"), 7200)

    def test_raises_on_parse_error(self):
        with self.assertRaises(DurationError) as ctx:
            DurationParser().parse_or_raise("banana")
        self.assertEqual(ctx.exception.input_value, "banana")

    def test_raises_on_context_error(self):
        with self.assertRaises(DurationError) as ctx:
            DurationParser().parse_or_raise("2 hours", "timeout")
        self.assertEqual(ctx.exception.duration_context, "timeout")


if __name__ == "__main__":
    unittest.main()
