from __future__ import annotations

from datetime import date

import pytest

from conftest import make_student
from src.class_attendance.class_attendance.attendance.filters import RosterFilters
from src.class_attendance.class_attendance.attendance.workflow import DailySheet
from src.class_attendance.class_attendance.core.enums import AttendanceStatus, DayStatus, SheetState
from src.class_attendance.class_attendance.core.exceptions import ValidationError

DAY = date(2025, 3, 10)


@pytest.fixture
def sheet():
    s = DailySheet(
        DAY,
        [
            make_student("A1", class_name="A", minute=1),
            make_student("A2", class_name="A", minute=2),
            make_student("B1", class_name="B", minute=3),
        ],
    )
    s.seed({"A1": AttendanceStatus.PRESENT})
    return s


def test_new_sheet_is_loading_until_seeded():
    s = DailySheet(DAY, [make_student("A1")])

    assert s.state == SheetState.LOADING
    with pytest.raises(ValidationError):
        s.set_status("A1", "present")


def test_seeded_sheet_is_clean(sheet):
    assert sheet.state == SheetState.READY
    assert not sheet.is_dirty
    assert sheet.status_of("A1") == DayStatus.PRESENT
    assert sheet.status_of("A2") == DayStatus.NOT_MARKED


def test_toggle_only_touches_working_copy(sheet):
    sheet.set_status("A2", "absent")

    assert sheet.is_dirty
    assert sheet.working["A2"] == AttendanceStatus.ABSENT
    assert "A2" not in sheet.committed


def test_toggling_back_to_committed_value_is_clean(sheet):
    sheet.set_status("A1", "absent")
    sheet.set_status("A1", "present")

    assert not sheet.is_dirty


def test_unknown_student_is_rejected(sheet):
    with pytest.raises(ValidationError):
        sheet.set_status("ZZ", "present")


def test_mark_all_applies_to_visible_subset_only(sheet):
    touched = sheet.mark_all("absent", RosterFilters(class_name="A"))

    assert touched == 2
    assert sheet.working == {"A1": AttendanceStatus.ABSENT, "A2": AttendanceStatus.ABSENT}
    assert sheet.status_of("B1") == DayStatus.NOT_MARKED


def test_mark_all_without_filters_covers_whole_roster(sheet):
    sheet.mark_all(AttendanceStatus.PRESENT)

    assert sheet.counts().present == 3
    assert sheet.counts().marked == 3


def test_status_filter_uses_working_copy(sheet):
    sheet.set_status("B1", "present")

    visible = sheet.visible_students(RosterFilters(class_name="B", status="present"))

    assert [s.register_number for s in visible] == ["B1"]


def test_save_lifecycle(sheet):
    sheet.set_status("A2", "absent")

    entries = sheet.begin_save()
    assert sheet.state == SheetState.SAVING
    sheet.finish_save(entries)

    assert sheet.state == SheetState.READY
    assert not sheet.is_dirty


def test_save_refused_when_clean(sheet):
    with pytest.raises(ValidationError):
        sheet.begin_save()


def test_restore_draft_drops_students_no_longer_on_roster(sheet):
    sheet.restore_draft({"A2": "present", "GONE": "absent"})

    assert sheet.working == {"A1": AttendanceStatus.PRESENT, "A2": AttendanceStatus.PRESENT}


def test_counts(sheet):
    sheet.set_status("A2", "absent")

    counts = sheet.counts()

    assert (counts.present, counts.absent, counts.marked, counts.total) == (1, 1, 2, 3)
