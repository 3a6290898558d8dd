from __future__ import annotations

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import login_required
from ..core.constants import YEARS_OF_STUDY
from ..core.exceptions import ApiError, FormValidationError, ValidationError
from ..container import Container
from .forms import StudentForm
from .service import filter_students


def register(app: Flask, container: Container) -> None:
    def _choices() -> dict:
        try:
            courses = container.course_service.list_courses()
            years = container.year_service.list_years()
        except ApiError as e:
            flash(str(e), "danger")
            courses, years = [], []
        return {"courses": courses, "years": years, "years_of_study": YEARS_OF_STUDY}

    @app.route("/students", endpoint="students")
    @login_required
    def students():
        search = request.args.get("q", "")
        group = request.args.get("group", "all")
        try:
            items = filter_students(container.student_service.list_students(), search=search, group=group)
            courses = container.course_service.list_courses()
        except ApiError as e:
            flash(str(e), "danger")
            items, courses = [], []
        return render_template(
            "students.html",
            students=items,
            courses=courses,
            search=search,
            group=group,
            active_page="students",
        )

    @app.route("/students/add", methods=["GET", "POST"], endpoint="add_student")
    @login_required
    def add_student():
        form = StudentForm.from_form(request.form)
        errors = {}
        if request.method == "POST":
            try:
                container.student_service.create_student(form)
                flash("Student created successfully", "success")
                return redirect(url_for("students"))
            except FormValidationError as e:
                errors = e.errors.as_dict()
            except (ValidationError, ApiError) as e:
                flash(str(e), "danger")

        return render_template(
            "student_form.html", form=form, errors=errors, editing=False, active_page="students", **_choices()
        )

    @app.route("/students/<int:student_id>/edit", methods=["GET", "POST"], endpoint="edit_student")
    @login_required
    def edit_student(student_id: int):
        try:
            student = container.student_service.get_student(student_id)
        except ApiError as e:
            flash(str(e), "danger")
            return redirect(url_for("students"))
        if not student:
            flash("Student not found", "warning")
            return redirect(url_for("students"))

        errors = {}
        if request.method == "POST":
            form = StudentForm.from_form(request.form)
            try:
                container.student_service.update_student(student_id, form)
                flash("Student updated successfully", "success")
                return redirect(url_for("students"))
            except FormValidationError as e:
                errors = e.errors.as_dict()
            except (ValidationError, ApiError) as e:
                flash(str(e), "danger")
        else:
            form = StudentForm(
                name=student.name,
                roll_number=student.roll_number,
                course_id=student.course_id,
                year_of_study=student.year_of_study,
                academic_year_id=student.academic_year_id,
                contact=student.contact,
                is_active=student.is_active,
            )

        return render_template(
            "student_form.html", form=form, errors=errors, editing=True, active_page="students", **_choices()
        )

    @app.route("/students/<int:student_id>/delete", methods=["POST"], endpoint="delete_student")
    @login_required
    def delete_student(student_id: int):
        try:
            container.student_service.delete_student(student_id)
            flash("Student deleted successfully", "success")
        except (ValidationError, ApiError) as e:
            flash(str(e), "danger")
        return redirect(url_for("students"))
