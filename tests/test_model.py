"""
Unit tests for the data model.

Stored documents use the web app's camelCase shape and its delivery mode
spelling ("face-to-face" / "online"); both must map onto the enums.
"""

import unittest

from esched.model import ClassAssignment, ConflictReport, DayOfWeek, DeliveryMode, Directory


RECORD = {
    "id": "abc123",
    "professorId": "P1",
    "roomId": "R101",
    "dayOfWeek": "monday",
    "startTime": "09:00",
    "endTime": "10:30",
    "classType": "face-to-face",
    "weekStartDate": 1771200000000,
    "section": "BSIT-4A",
    "subjectId": "S1",
    "semester": "First Sem",
    "academicYear": "2025-2026",
}


class TestEnums(unittest.TestCase):
    def test_day_parse(self) -> None:
        self.assertIs(DayOfWeek.parse("Monday"), DayOfWeek.MONDAY)
        self.assertIs(DayOfWeek.parse(" sun "), DayOfWeek.SUNDAY)
        self.assertIs(DayOfWeek.parse(DayOfWeek.FRIDAY), DayOfWeek.FRIDAY)
        with self.assertRaises(ValueError):
            DayOfWeek.parse("funday")

    def test_day_index(self) -> None:
        self.assertEqual(DayOfWeek.MONDAY.offset, 0)
        self.assertEqual(DayOfWeek.SUNDAY.offset, 6)

    def test_mode_aliases(self) -> None:
        self.assertIs(DeliveryMode.parse("face-to-face"), DeliveryMode.IN_PERSON)
        self.assertIs(DeliveryMode.parse("In-Person"), DeliveryMode.IN_PERSON)
        self.assertIs(DeliveryMode.parse("online"), DeliveryMode.REMOTE)
        self.assertIs(DeliveryMode.parse("remote"), DeliveryMode.REMOTE)
        with self.assertRaises(ValueError):
            DeliveryMode.parse("hybrid")


class TestClassAssignment(unittest.TestCase):
    def test_from_record(self) -> None:
        a = ClassAssignment.from_record(RECORD)
        self.assertEqual(a.id, "abc123")
        self.assertEqual(a.instructor_id, "P1")
        self.assertEqual(a.room_id, "R101")
        self.assertIs(a.day_of_week, DayOfWeek.MONDAY)
        self.assertIs(a.delivery_mode, DeliveryMode.IN_PERSON)
        self.assertEqual(a.week_key, 1771200000000)
        self.assertEqual(a.section, "BSIT-4A")
        self.assertEqual(a.academic_year, "2025-2026")

    def test_record_roundtrip(self) -> None:
        a = ClassAssignment.from_record(RECORD)
        self.assertEqual(a.to_record(), RECORD)

    def test_missing_class_type_defaults_to_in_person(self) -> None:
        rec = dict(RECORD)
        del rec["classType"]
        self.assertIs(ClassAssignment.from_record(rec).delivery_mode, DeliveryMode.IN_PERSON)

    def test_blank_optionals_become_none(self) -> None:
        rec = dict(RECORD, roomId="", section="  ", classType="online")
        a = ClassAssignment.from_record(rec)
        self.assertIsNone(a.room_id)
        self.assertIsNone(a.section_label)
        self.assertIsNone(a.section)
        self.assertNotIn("roomId", a.to_record())

    def test_missing_required_field(self) -> None:
        rec = dict(RECORD)
        del rec["professorId"]
        with self.assertRaises(KeyError):
            ClassAssignment.from_record(rec)

    def test_immutable(self) -> None:
        a = ClassAssignment.from_record(RECORD)
        with self.assertRaises(AttributeError):
            a.start_time = "11:00"  # type: ignore[misc]
        b = a.with_changes(start_time="11:00", end_time="12:00")
        self.assertEqual(a.start_time, "09:00")
        self.assertEqual(b.start_time, "11:00")


class TestReportAndDirectory(unittest.TestCase):
    def test_report(self) -> None:
        self.assertFalse(ConflictReport().has_conflict)
        report = ConflictReport(reasons=("a", "b"))
        self.assertTrue(report.has_conflict)
        self.assertEqual(report.summary(), "a; b")

    def test_directory_fallbacks(self) -> None:
        d = Directory(instructors={"P1": "Maria Santos"})
        self.assertEqual(d.instructor_name("P1"), "Maria Santos")
        self.assertEqual(d.instructor_name("P2"), "P2")
        self.assertEqual(d.room_code(None), "-")
        self.assertEqual(d.subject_code(None), "?")


if __name__ == "__main__":
    unittest.main()
