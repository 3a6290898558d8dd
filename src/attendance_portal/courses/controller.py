from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import admin_required
from ..core.exceptions import ApiError, FormValidationError, ValidationError
from ..container import Container
from .forms import CourseForm


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/courses/add", methods=["GET", "POST"], endpoint="add_course")
    @admin_required
    def add_course():
        form = CourseForm.from_form(request.form)
        errors = {}
        if request.method == "POST":
            try:
                container.course_service.create_course(form)
                flash("Course created successfully", "success")
                return redirect(url_for("admin", tab="courses"))
            except FormValidationError as e:
                errors = e.errors.as_dict()
            except (ValidationError, ApiError) as e:
                flash(str(e), "danger")

        return render_template("admin/course_form.html", form=form, errors=errors, editing=False, active_page="admin")

    @app.route("/admin/courses/<int:course_id>/edit", methods=["GET", "POST"], endpoint="edit_course")
    @admin_required
    def edit_course(course_id: int):
        try:
            course = container.course_service.get_course(course_id)
        except ApiError as e:
            flash(str(e), "danger")
            return redirect(url_for("admin", tab="courses"))
        if not course:
            flash("Course not found", "warning")
            return redirect(url_for("admin", tab="courses"))

        errors = {}
        if request.method == "POST":
            form = CourseForm.from_form(request.form)
            try:
                container.course_service.update_course(course_id, form)
                flash("Course updated successfully", "success")
                return redirect(url_for("admin", tab="courses"))
            except FormValidationError as e:
                errors = e.errors.as_dict()
            except (ValidationError, ApiError) as e:
                flash(str(e), "danger")
        else:
            form = CourseForm(name=course.name, code=course.code, description=course.description)

        return render_template("admin/course_form.html", form=form, errors=errors, editing=True, active_page="admin")

    @app.route("/admin/courses/<int:course_id>/delete", methods=["POST"], endpoint="delete_course")
    @admin_required
    def delete_course(course_id: int):
        try:
            container.course_service.delete_course(course_id)
            flash("Course deleted successfully", "success")
        except (ValidationError, ApiError) as e:
            flash(str(e), "danger")
        return redirect(url_for("admin", tab="courses"))
