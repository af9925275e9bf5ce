from __future__ import annotations

from datetime import date

import pytest

from conftest import OWNER, make_student
from src.class_attendance.class_attendance.core.exceptions import ValidationError
from src.class_attendance.class_attendance.reports.service import MonthlyReportService, attendance_percentage


@pytest.fixture
def reports(students_repo, attendance_repo):
    return MonthlyReportService(attendance_repo, students_repo)


@pytest.mark.parametrize(
    "present,days,expected",
    [(2, 3, 67), (1, 3, 33), (0, 5, 0), (3, 3, 100), (1, 8, 13), (0, 0, 0)],
)
def test_attendance_percentage(present, days, expected):
    assert attendance_percentage(present, days) == expected


def test_working_days_are_distinct_recorded_dates(reports, students_repo, attendance_repo, fixed_now):
    students_repo.put(make_student("A", name="Anu"))
    students_repo.put(make_student("B", name="Bala"))
    for day, a, b in [(3, "present", "absent"), (4, "present", "present"), (5, "absent", "absent")]:
        attendance_repo.add(OWNER, "A", date(2025, 3, day), a)
        attendance_repo.add(OWNER, "B", date(2025, 3, day), b)

    report = reports.build(OWNER, month=3, year=2025, now=fixed_now)

    by_key = {r.register_number: r for r in report.rows}
    assert report.total_working_days == 3
    assert (by_key["A"].present_count, by_key["A"].absent_count, by_key["A"].attendance_percentage) == (2, 1, 67)
    assert (by_key["B"].present_count, by_key["B"].absent_count, by_key["B"].attendance_percentage) == (1, 2, 33)


def test_rows_outside_month_are_ignored(reports, students_repo, attendance_repo, fixed_now):
    students_repo.put(make_student("A"))
    attendance_repo.add(OWNER, "A", date(2025, 2, 28), "present")
    attendance_repo.add(OWNER, "A", date(2025, 4, 1), "present")

    report = reports.build(OWNER, month=3, year=2025, now=fixed_now)

    assert report.total_working_days == 0
    assert report.rows[0].attendance_percentage == 0


def test_student_without_rows_gets_zero(reports, students_repo, attendance_repo, fixed_now):
    students_repo.put(make_student("A"))
    students_repo.put(make_student("B"))
    attendance_repo.add(OWNER, "A", date(2025, 3, 3), "present")

    report = reports.build(OWNER, month=3, year=2025, now=fixed_now)

    b = next(r for r in report.rows if r.register_number == "B")
    assert (b.total_working_days, b.present_count, b.absent_count, b.attendance_percentage) == (1, 0, 0, 0)


def test_rows_sorted_by_class_then_name(reports, students_repo, fixed_now):
    students_repo.put(make_student("1", name="Zoe", class_name="B"))
    students_repo.put(make_student("2", name="Yash", class_name="A"))
    students_repo.put(make_student("3", name="Arun", class_name="B"))

    report = reports.build(OWNER, month=3, year=2025, now=fixed_now)

    assert [(r.class_name, r.name) for r in report.rows] == [("A", "Yash"), ("B", "Arun"), ("B", "Zoe")]


def test_missing_department_shows_placeholder(reports, students_repo, fixed_now):
    students_repo.put(make_student("A", department=None))

    report = reports.build(OWNER, month=3, year=2025, now=fixed_now)

    assert report.rows[0].department == "N/A"


def test_title_and_filename(reports, students_repo, fixed_now):
    students_repo.put(make_student("A"))

    report = reports.build(OWNER, month=3, year=2025, now=fixed_now)

    assert report.title == "Monthly Attendance Report - March 2025"
    assert report.filename("pdf") == "attendance_report_March_2025.pdf"
    assert report.start == date(2025, 3, 1)
    assert report.end == date(2025, 3, 31)


def test_empty_roster_is_refused(reports, fixed_now):
    with pytest.raises(ValidationError, match="No students found"):
        reports.build(OWNER, month=3, year=2025, now=fixed_now)


def test_invalid_month_is_refused(reports, students_repo, fixed_now):
    students_repo.put(make_student("A"))

    with pytest.raises(ValidationError):
        reports.build(OWNER, month=13, year=2025, now=fixed_now)
