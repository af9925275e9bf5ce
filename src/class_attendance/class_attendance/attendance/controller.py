from __future__ import annotations

from datetime import date

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..auth.controller import current_user_id, login_required
from ..common.datetime_utils import now_local, parse_iso_date
from ..core.enums import AttendanceStatus
from ..core.exceptions import ConfirmationRequiredError, DomainError, ValidationError
from ..logging_config import get_logger
from .filters import RosterFilters, filter_options

log = get_logger("http")

DRAFT_KEY = "marking_draft"


def _selected_date(value) -> date:
    if not value:
        return now_local().date()
    return parse_iso_date(value)


def _load_draft(day: date):
    """Unsaved edits for ``day``; a draft for any other date is discarded."""
    draft = session.get(DRAFT_KEY)
    if not draft:
        return None
    if draft.get("date") != day.isoformat():
        session.pop(DRAFT_KEY, None)
        return None
    return draft.get("working") or {}


def _store_draft(sheet) -> None:
    if sheet.is_dirty:
        session[DRAFT_KEY] = {
            "date": sheet.day.isoformat(),
            "working": {k: v.value for k, v in sheet.working.items()},
        }
    else:
        session.pop(DRAFT_KEY, None)


def register(app: Flask, container) -> None:
    attendance = container.attendance_service
    viewer = container.viewer_service

    def _daily_redirect(day: date, filters: RosterFilters):
        return redirect(url_for("daily_attendance", date=day.isoformat(), **filters.as_query()))

    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        today = now_local().date()
        try:
            stats = attendance.day_stats(current_user_id(), today)
            students_count = container.roster_service.count_students(current_user_id())
        except DomainError as e:
            flash(str(e), "danger")
            stats, students_count = None, 0
        return render_template(
            "dashboard.html",
            name=session.get("name"),
            today=today,
            stats=stats,
            students_count=students_count,
            active_page="dashboard",
        )

    @app.route("/attendance/daily", endpoint="daily_attendance")
    @login_required
    def daily_attendance():
        filters = RosterFilters.from_mapping(request.args)
        try:
            day = _selected_date(request.args.get("date"))
            sheet = attendance.open_day(current_user_id(), day, draft=_load_draft(day))
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("dashboard"))

        return render_template(
            "attendance/daily.html",
            sheet=sheet,
            day=day,
            grouped=sheet.grouped(filters),
            counts=sheet.counts(),
            filters=filters,
            options=filter_options(sheet.students),
            active_page="daily_attendance",
        )

    @app.route("/attendance/daily/mark", methods=["POST"], endpoint="daily_mark")
    @login_required
    def daily_mark():
        filters = RosterFilters.from_mapping(request.form)
        try:
            day = _selected_date(request.form.get("date"))
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("daily_attendance"))

        try:
            sheet = attendance.open_day(current_user_id(), day, draft=_load_draft(day))
            sheet.set_status(request.form.get("register_number", ""), _parse_status(request.form.get("mark")))
            _store_draft(sheet)
        except DomainError as e:
            flash(str(e), "danger")
        return _daily_redirect(day, filters)

    @app.route("/attendance/daily/mark-all", methods=["POST"], endpoint="daily_mark_all")
    @login_required
    def daily_mark_all():
        filters = RosterFilters.from_mapping(request.form)
        try:
            day = _selected_date(request.form.get("date"))
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("daily_attendance"))

        try:
            sheet = attendance.open_day(current_user_id(), day, draft=_load_draft(day))
            sheet.mark_all(_parse_status(request.form.get("mark")), filters)
            _store_draft(sheet)
        except DomainError as e:
            flash(str(e), "danger")
        return _daily_redirect(day, filters)

    @app.route("/attendance/daily/save", methods=["POST"], endpoint="daily_save")
    @login_required
    def daily_save():
        filters = RosterFilters.from_mapping(request.form)
        try:
            day = _selected_date(request.form.get("date"))
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("daily_attendance"))

        try:
            sheet = attendance.open_day(current_user_id(), day, draft=_load_draft(day))
            attendance.save_day(current_user_id(), sheet)
            session.pop(DRAFT_KEY, None)
            flash("Attendance saved successfully!", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            log.exception("save attendance failed")
            flash("Failed to save attendance. Please try again.", "danger")
        return _daily_redirect(day, filters)

    @app.route("/attendance/records", endpoint="attendance_records")
    @login_required
    def attendance_records():
        filters = RosterFilters.from_mapping(request.args)
        try:
            day = _selected_date(request.args.get("date"))
            view = viewer.view_day(current_user_id(), day, filters)
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("dashboard"))

        return render_template(
            "attendance/records.html",
            view=view,
            day=day,
            filters=filters,
            active_page="attendance_records",
        )

    @app.route("/attendance/records/<register_number>/clear", methods=["GET", "POST"], endpoint="attendance_clear")
    @login_required
    def attendance_clear(register_number: str):
        try:
            day = _selected_date(request.values.get("date"))
        except ValidationError as e:
            flash(str(e), "danger")
            return redirect(url_for("attendance_records"))
        back = url_for("attendance_records", date=day.isoformat())

        if request.method == "POST":
            try:
                attendance.clear_mark(
                    current_user_id(),
                    register_number,
                    day,
                    confirmed=request.form.get("confirm") == "yes",
                )
                flash("Attendance record removed.", "success")
                return redirect(back)
            except ConfirmationRequiredError as e:
                flash(str(e), "warning")
            except DomainError as e:
                flash(str(e), "danger")
                return redirect(back)
            except Exception:
                log.exception("clear attendance mark failed")
                flash("Failed to remove the attendance record. Please try again.", "danger")
                return redirect(back)

        return render_template(
            "attendance/confirm_clear.html",
            register_number=register_number,
            day=day,
            back=back,
            active_page="attendance_records",
        )


def _parse_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError("Status must be present or absent")
