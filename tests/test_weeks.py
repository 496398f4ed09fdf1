"""
Unit tests for week keys.

Week keys are Monday 00:00 in the zone of whoever saved the record, so records
saved in another zone must still land in their own week, on the right weekday.
"""

import os
import unittest
from datetime import date, datetime, timedelta, timezone
from unittest import mock

from esched.model import ClassAssignment, DayOfWeek
from esched.weeks import (
    TZ_ENV,
    WEEK_MS,
    current_week_key,
    date_for,
    in_week,
    normalize_week_key,
    normalized,
    parse_week,
    resolve_tz,
    shift_week,
    week_key_for,
    week_of,
    week_start,
)

UTC = timezone.utc
MANILA = timezone(timedelta(hours=8))
NEW_YORK = timezone(timedelta(hours=-5))


def _at(aid: str, key: int) -> ClassAssignment:
    return ClassAssignment(
        id=aid, instructor_id="P1", day_of_week=DayOfWeek.MONDAY, start_time="09:00", end_time="10:00", week_key=key
    )


def _monday_ms(tz: timezone) -> int:
    return int(datetime(2026, 2, 16, tzinfo=tz).timestamp()) * 1000


class TestWeekKeys(unittest.TestCase):
    def test_week_key_is_monday_midnight(self) -> None:
        # 1970-01-05 was the first Monday after the epoch
        self.assertEqual(week_key_for(date(1970, 1, 5), UTC), 4 * 24 * 60 * 60 * 1000)
        self.assertEqual(week_key_for(date(1970, 1, 11), UTC), 4 * 24 * 60 * 60 * 1000)
        self.assertEqual(week_key_for(date(1970, 1, 5), MANILA), 4 * 24 * 60 * 60 * 1000 - 8 * 3600 * 1000)

    def test_local_zone_matches_naive_midnight(self) -> None:
        expected = int(datetime(2026, 2, 16).astimezone().timestamp()) * 1000
        self.assertEqual(week_key_for(date(2026, 2, 18)), expected)

    def test_same_week_same_key(self) -> None:
        monday = week_key_for(date(2026, 2, 16), UTC)
        self.assertEqual(week_key_for(date(2026, 2, 18), UTC), monday)
        self.assertEqual(week_key_for(date(2026, 2, 22), UTC), monday)
        self.assertEqual(week_key_for(date(2026, 2, 23), UTC), monday + WEEK_MS)
        self.assertEqual(week_start(monday, UTC), date(2026, 2, 16))

    def test_shift_and_date_for(self) -> None:
        key = week_key_for(date(2026, 2, 16), MANILA)
        self.assertEqual(week_start(shift_week(key, -1, MANILA), MANILA), date(2026, 2, 9))
        self.assertEqual(date_for(key, DayOfWeek.FRIDAY, MANILA), date(2026, 2, 20))

    def test_parse_week(self) -> None:
        today = date(2026, 2, 18)
        self.assertEqual(parse_week("current", today, UTC), current_week_key(today, UTC))
        self.assertEqual(parse_week("next", today, UTC), week_key_for(date(2026, 2, 23), UTC))
        self.assertEqual(parse_week("prev", today, UTC), week_key_for(date(2026, 2, 9), UTC))
        self.assertEqual(parse_week("2026-03-04", tz=MANILA), week_key_for(date(2026, 3, 2), MANILA))
        with self.assertRaises(ValueError):
            parse_week("someday")


class TestForeignZoneKeys(unittest.TestCase):
    def test_week_of_key_saved_east_of_us(self) -> None:
        # Monday 00:00 +08:00 is Sunday 16:00 UTC
        self.assertEqual(week_of(_monday_ms(MANILA), UTC), date(2026, 2, 16))
        self.assertEqual(date_for(_monday_ms(MANILA), DayOfWeek.MONDAY, UTC), date(2026, 2, 16))

    def test_week_of_key_saved_west_of_us(self) -> None:
        # Monday 00:00 -05:00 is Monday 13:00 in Manila
        self.assertEqual(week_of(_monday_ms(NEW_YORK), MANILA), date(2026, 2, 16))

    def test_extreme_offsets(self) -> None:
        east = timezone(timedelta(hours=14))
        west = timezone(timedelta(hours=-12))
        self.assertEqual(week_of(_monday_ms(east), west), date(2026, 2, 16))
        self.assertEqual(week_of(_monday_ms(west), east), date(2026, 2, 16))

    def test_normalize(self) -> None:
        self.assertEqual(normalize_week_key(_monday_ms(MANILA), UTC), week_key_for(date(2026, 2, 16), UTC))
        stored = [_at("a", _monday_ms(MANILA)), _at("b", _monday_ms(UTC))]
        self.assertEqual({a.week_key for a in normalized(stored, UTC)}, {_monday_ms(UTC)})
        # already normalized records are passed through untouched
        self.assertIs(normalized(stored, UTC)[1], stored[1])

    def test_in_week(self) -> None:
        key = week_key_for(date(2026, 2, 16), UTC)
        items = [
            _at("1", key),
            _at("2", _monday_ms(MANILA)),
            _at("3", key + WEEK_MS),
            _at("4", week_key_for(date(2026, 2, 9), UTC)),
        ]
        self.assertEqual([x.id for x in in_week(items, key, UTC)], ["1", "2"])


class TestResolveTz(unittest.TestCase):
    def test_offsets_and_utc(self) -> None:
        self.assertIs(resolve_tz("UTC"), UTC)
        self.assertEqual(resolve_tz("+08:00"), MANILA)
        self.assertEqual(resolve_tz("UTC-5"), NEW_YORK)
        self.assertEqual(resolve_tz("+0530"), timezone(timedelta(hours=5, minutes=30)))

    def test_local_default(self) -> None:
        with mock.patch.dict(os.environ, {TZ_ENV: ""}):
            self.assertIsNone(resolve_tz())
        self.assertIsNone(resolve_tz("local"))

    def test_environment_default(self) -> None:
        with mock.patch.dict(os.environ, {TZ_ENV: "+08:00"}):
            self.assertEqual(resolve_tz(), MANILA)

    def test_unknown_zone(self) -> None:
        with self.assertRaises(ValueError):
            resolve_tz("Mars/Olympus_Mons")


if __name__ == "__main__":
    unittest.main()
