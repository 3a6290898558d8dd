from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import admin_required, login_required
from ..core.exceptions import ApiError, FormValidationError, ValidationError
from ..container import Container
from .forms import AcademicYearForm


def register(app: Flask, container: Container) -> None:
    @app.route("/years", endpoint="years")
    @login_required
    def years():
        try:
            items = container.year_service.list_years()
        except ApiError as e:
            flash(str(e), "danger")
            items = []
        return render_template("years.html", years=items, active_page="years")

    @app.route("/years/add", methods=["GET", "POST"], endpoint="add_year")
    @admin_required
    def add_year():
        form = AcademicYearForm.from_form(request.form)
        errors = {}
        if request.method == "POST":
            try:
                container.year_service.create_year(form)
                flash("Academic year created successfully", "success")
                return redirect(url_for("years"))
            except FormValidationError as e:
                errors = e.errors.as_dict()
            except (ValidationError, ApiError) as e:
                flash(str(e), "danger")

        return render_template("year_form.html", form=form, errors=errors, editing=False, active_page="years")

    @app.route("/years/<int:year_id>/edit", methods=["GET", "POST"], endpoint="edit_year")
    @admin_required
    def edit_year(year_id: int):
        try:
            year = container.year_service.get_year(year_id)
        except ApiError as e:
            flash(str(e), "danger")
            return redirect(url_for("years"))
        if not year:
            flash("Academic year not found", "warning")
            return redirect(url_for("years"))

        errors = {}
        if request.method == "POST":
            form = AcademicYearForm.from_form(request.form)
            try:
                container.year_service.update_year(year_id, form)
                flash("Academic year updated successfully", "success")
                return redirect(url_for("years"))
            except FormValidationError as e:
                errors = e.errors.as_dict()
            except (ValidationError, ApiError) as e:
                flash(str(e), "danger")
        else:
            form = AcademicYearForm(
                name=year.name,
                start_date=year.start_date.isoformat() if year.start_date else "",
                end_date=year.end_date.isoformat() if year.end_date else "",
                description=year.description,
                is_active=year.is_active,
            )

        return render_template("year_form.html", form=form, errors=errors, editing=True, active_page="years")

    @app.route("/years/<int:year_id>/delete", methods=["POST"], endpoint="delete_year")
    @admin_required
    def delete_year(year_id: int):
        try:
            container.year_service.delete_year(year_id)
            flash("Academic year deleted successfully", "success")
        except (ValidationError, ApiError) as e:
            flash(str(e), "danger")
        return redirect(url_for("years"))
