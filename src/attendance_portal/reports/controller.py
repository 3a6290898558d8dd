from __future__ import annotations

import logging

from flask import Flask, flash, render_template, request, url_for

from ..common.datetime_utils import today_local
from ..common.web import login_required
from ..core.constants import YEARS_OF_STUDY
from ..core.enums import ReportType
from ..core.exceptions import ApiError, FormValidationError
from ..container import Container
from .forms import ReportForm

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _defaults() -> dict:
        today = today_local().isoformat()
        active = container.year_service.active_year()
        return {
            "reportType": ReportType.DAY_WISE.value,
            "academicYearId": str(active.year_id) if active else "",
            "fromDate": today,
            "toDate": today,
        }

    def _render(*, values, errors=None, report=None, download_url=None, status=200):
        try:
            courses = container.course_service.list_courses()
            years = container.year_service.list_years()
        except ApiError as e:
            flash(str(e), "danger")
            courses, years = [], []
        return render_template(
            "reports.html",
            values=values,
            errors=errors or {},
            report=report,
            download_url=download_url,
            courses=courses,
            years=years,
            years_of_study=YEARS_OF_STUDY,
            report_types=list(ReportType),
            active_page="reports",
        ), status

    @app.route("/reports", methods=["GET", "POST"], endpoint="reports")
    @login_required
    def reports():
        if request.method == "GET":
            try:
                values = _defaults()
            except ApiError as e:
                flash(str(e), "danger")
                values = {}
            return _render(values=values)

        form = ReportForm.from_form(request.form)
        try:
            report = container.report_service.generate(form)
        except FormValidationError as e:
            return _render(values=request.form, errors=e.errors.as_dict(), status=400)
        except ApiError as e:
            flash(f"Failed to generate report: {e}", "danger")
            return _render(values=request.form)
        except Exception:
            logger.exception("report generation failed")
            flash("System error while generating the report", "danger")
            return _render(values=request.form, status=500)

        flash("Report generated successfully", "success")
        return _render(values=request.form, report=report, download_url=url_for("download_report", **form.to_query()))

    @app.route("/reports/download", endpoint="download_report")
    @login_required
    def download_report():
        form = ReportForm.from_form(request.args)
        try:
            report = container.report_service.generate(form)
        except FormValidationError as e:
            return _render(values=request.args, errors=e.errors.as_dict(), status=400)
        except ApiError as e:
            flash(f"Failed to generate report: {e}", "danger")
            return _render(values=request.args, status=502)

        filename = f"attendance-report-{today_local().isoformat()}.csv"
        return app.response_class(
            container.report_service.to_csv(report),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
