"""
Unit tests for the time-interval comparator.

Intervals are half-open [start, end):
- touching endpoints do NOT overlap
- zero-length intervals never overlap anything
- malformed times raise InvalidTimeFormat
"""

import unittest

from esched.times import InvalidTimeFormat, intervals_overlap, time_to_minutes


class TestTimeToMinutes(unittest.TestCase):
    def test_valid_values(self) -> None:
        self.assertEqual(time_to_minutes("00:00"), 0)
        self.assertEqual(time_to_minutes("09:05"), 545)
        self.assertEqual(time_to_minutes(" 23:59 "), 23 * 60 + 59)
        self.assertEqual(time_to_minutes("7:30"), 450)

    def test_invalid_values(self) -> None:
        for bad in ["24:00", "12:60", "1200", "12:5", "ab:cd", "", "12:00:00", "-1:00", "12 :00"]:
            with self.subTest(value=bad):
                with self.assertRaises(InvalidTimeFormat):
                    time_to_minutes(bad)

    def test_non_string_rejected(self) -> None:
        with self.assertRaises(InvalidTimeFormat):
            time_to_minutes(900)  # type: ignore[arg-type]

    def test_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            time_to_minutes("25:00")


class TestIntervalsOverlap(unittest.TestCase):
    def test_back_to_back_no_overlap(self) -> None:
        self.assertFalse(intervals_overlap("09:00", "10:00", "10:00", "11:00"))
        self.assertFalse(intervals_overlap("10:00", "11:00", "09:00", "10:00"))

    def test_partial_overlap(self) -> None:
        self.assertTrue(intervals_overlap("09:00", "10:30", "10:00", "11:00"))

    def test_one_minute_overlap(self) -> None:
        self.assertTrue(intervals_overlap("09:00", "10:01", "10:00", "11:00"))

    def test_containment_and_duplicate(self) -> None:
        self.assertTrue(intervals_overlap("08:00", "12:00", "09:00", "10:00"))
        self.assertTrue(intervals_overlap("09:00", "10:00", "08:00", "12:00"))
        self.assertTrue(intervals_overlap("09:00", "10:00", "09:00", "10:00"))

    def test_disjoint(self) -> None:
        self.assertFalse(intervals_overlap("08:00", "09:00", "13:00", "14:00"))

    def test_zero_length_never_overlaps(self) -> None:
        self.assertFalse(intervals_overlap("10:00", "10:00", "09:00", "11:00"))
        self.assertFalse(intervals_overlap("09:00", "11:00", "10:00", "10:00"))

    def test_malformed_raises(self) -> None:
        with self.assertRaises(InvalidTimeFormat):
            intervals_overlap("9am", "10:00", "09:00", "10:00")


if __name__ == "__main__":
    unittest.main()
