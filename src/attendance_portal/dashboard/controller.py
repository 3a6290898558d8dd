from __future__ import annotations

from flask import Flask, flash, render_template

from ..attendance.model import AttendanceStats
from ..common.web import login_required
from ..core.exceptions import ApiError
from ..container import Container
from .service import DashboardData


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        try:
            data = container.dashboard_service.build()
        except ApiError as e:
            flash(str(e), "danger")
            data = DashboardData(active_year=None, years=[], stats=AttendanceStats())
        return render_template("dashboard.html", data=data, active_page="dashboard")
