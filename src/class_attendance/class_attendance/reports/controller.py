from __future__ import annotations

from io import BytesIO

from flask import Flask, flash, redirect, render_template, request, send_file, url_for

from ..auth.controller import current_user_id, login_required
from ..common.datetime_utils import now_local
from ..core.constants import MONTH_NAMES
from ..core.exceptions import DomainError, ValidationError
from ..logging_config import get_logger
from .renderer import render_pdf, render_xlsx

log = get_logger("report")

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _month_year(args) -> tuple[int, int]:
    today = now_local().date()
    try:
        month = int(args.get("month") or today.month)
        year = int(args.get("year") or today.year)
    except ValueError:
        raise ValidationError("Month and year must be numbers")
    return month, year


def register(app: Flask, container) -> None:
    reports = container.report_service

    @app.route("/reports/monthly", endpoint="monthly_report")
    @login_required
    def monthly_report():
        today = now_local().date()
        return render_template(
            "reports/monthly.html",
            months=list(enumerate(MONTH_NAMES, start=1)),
            month=today.month,
            year=today.year,
            active_page="monthly_report",
        )

    def _download(fmt: str):
        try:
            month, year = _month_year(request.args)
            report = reports.build(current_user_id(), month=month, year=year)
            if fmt == "pdf":
                payload, mimetype = render_pdf(report), "application/pdf"
            else:
                payload, mimetype = render_xlsx(report), XLSX_MIMETYPE
        except DomainError as e:
            flash(str(e), "warning")
            return redirect(url_for("monthly_report"))
        except Exception:
            log.exception("report generation failed")
            flash("Failed to generate report. Please try again.", "danger")
            return redirect(url_for("monthly_report"))

        return send_file(
            BytesIO(payload),
            mimetype=mimetype,
            as_attachment=True,
            download_name=report.filename(fmt),
        )

    @app.route("/reports/monthly.pdf", endpoint="monthly_report_pdf")
    @login_required
    def monthly_report_pdf():
        return _download("pdf")

    @app.route("/reports/monthly.xlsx", endpoint="monthly_report_xlsx")
    @login_required
    def monthly_report_xlsx():
        return _download("xlsx")
