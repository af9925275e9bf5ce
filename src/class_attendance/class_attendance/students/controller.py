from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..auth.controller import current_user_id, login_required
from ..core.enums import StudyYear
from ..core.exceptions import ConfirmationRequiredError, DomainError, NotFoundError
from ..logging_config import get_logger
from .model import StudentFields

log = get_logger("http")


def _fields_from_form(form, *, register_number: str = "") -> StudentFields:
    return StudentFields(
        name=form.get("name", ""),
        class_name=form.get("class_name", ""),
        roll_number=form.get("roll_number", ""),
        register_number=register_number or form.get("register_number", ""),
        department=form.get("department", ""),
        shift=form.get("shift", "1"),
        year=form.get("year", StudyYear.YEAR1.value),
    )


def _safe_next(default: str) -> str:
    target = request.values.get("next") or ""
    return target if target.startswith("/") and not target.startswith("//") else default


def register(app: Flask, container) -> None:
    roster = container.roster_service

    @app.route("/students", methods=["GET", "POST"], endpoint="students")
    @login_required
    def students():
        form_values = {}
        if request.method == "POST":
            fields = _fields_from_form(request.form)
            try:
                roster.add_student(current_user_id(), fields)
                flash("Student added.", "success")
                return redirect(url_for("students"))
            except DomainError as e:
                flash(str(e), "danger")
                form_values = request.form.to_dict()
            except Exception:
                log.exception("add student failed")
                flash("Failed to add student. Please try again.", "danger")
                form_values = request.form.to_dict()

        try:
            grouped = roster.grouped_roster(current_user_id())
        except DomainError as e:
            flash(str(e), "danger")
            grouped = {}

        return render_template(
            "students/list.html",
            grouped=grouped,
            years=[y.value for y in StudyYear],
            form_values=form_values,
            active_page="students",
        )

    @app.route("/students/<register_number>/edit", methods=["GET", "POST"], endpoint="student_edit")
    @login_required
    def student_edit(register_number: str):
        if request.method == "POST":
            try:
                roster.update_student(
                    current_user_id(),
                    register_number,
                    _fields_from_form(request.form, register_number=register_number),
                )
                flash("Student updated.", "success")
                return redirect(url_for("students"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                log.exception("update student failed")
                flash("Failed to update student. Please try again.", "danger")

        try:
            student = roster.get_student(current_user_id(), register_number)
        except NotFoundError as e:
            flash(str(e), "warning")
            return redirect(url_for("students"))

        return render_template(
            "students/edit.html",
            student=student,
            years=[y.value for y in StudyYear],
            active_page="students",
        )

    @app.route("/students/<register_number>/delete", methods=["GET", "POST"], endpoint="student_delete")
    @login_required
    def student_delete(register_number: str):
        next_url = _safe_next(url_for("students"))

        if request.method == "POST":
            try:
                roster.delete_student(
                    current_user_id(),
                    register_number,
                    confirmed=request.form.get("confirm") == "yes",
                )
                flash("Student and their attendance records deleted.", "success")
                return redirect(next_url)
            except ConfirmationRequiredError as e:
                flash(str(e), "warning")
            except DomainError as e:
                flash(str(e), "danger")
                return redirect(next_url)
            except Exception:
                log.exception("delete student failed")
                flash("Failed to delete student. Please try again.", "danger")
                return redirect(next_url)

        try:
            student = roster.get_student(current_user_id(), register_number)
        except NotFoundError as e:
            flash(str(e), "warning")
            return redirect(next_url)

        return render_template(
            "students/confirm_delete.html",
            student=student,
            next_url=next_url,
            active_page="students",
        )
