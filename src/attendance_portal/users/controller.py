from __future__ import annotations

import logging
import uuid

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.web import admin_required, flash_errors
from ..core.enums import Role
from ..core.exceptions import (
    ApiError,
    AuthenticationError,
    AuthorizationError,
    FormValidationError,
    ValidationError,
)
from ..container import Container
from .forms import LoginForm, UserForm

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    app.jinja_env.globals["csrf_token"] = lambda: ""

    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if "user_id" in session:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            remember = request.form.get("remember_me")
            try:
                s_user = container.auth_service.authenticate(LoginForm.from_form(request.form))

                session.permanent = bool(remember)
                session["user_id"] = s_user.user_id
                session["username"] = s_user.username
                session["name"] = s_user.full_name
                session["role"] = s_user.role.value
                # keys this browser session's attendance workspace
                session["workspace_owner"] = uuid.uuid4().hex

                flash("Login successful", "success")
                return redirect(url_for("dashboard"))
            except FormValidationError as e:
                flash_errors(e.errors)
            except AuthenticationError as e:
                flash(str(e), "danger")
            except ApiError as e:
                logger.warning("login failed, backend error: %s", e)
                flash("The attendance service is unavailable, please try again", "danger")

        return render_template("login.html")

    @app.route("/logout", endpoint="logout")
    def logout():
        owner = session.get("workspace_owner")
        if owner:
            container.attendance_service.close_workspace(owner)
        session.clear()
        flash("You have been logged out", "info")
        return redirect(url_for("login"))

    @app.route("/admin", endpoint="admin")
    @admin_required
    def admin():
        tab = request.args.get("tab", "courses")
        try:
            courses = container.course_service.list_courses()
            years = container.year_service.list_years()
            users = container.user_service.list_users()
        except ApiError as e:
            flash(str(e), "danger")
            courses, years, users = [], [], []
        return render_template(
            "admin/admin.html",
            tab=tab,
            courses=courses,
            years=years,
            users=users,
            active_page="admin",
        )

    @app.route("/admin/users/add", methods=["GET", "POST"], endpoint="add_user")
    @admin_required
    def add_user():
        form = UserForm.from_form(request.form)
        errors = {}
        if request.method == "POST":
            try:
                container.user_service.create_user(form)
                flash("User created successfully", "success")
                return redirect(url_for("admin", tab="users"))
            except FormValidationError as e:
                errors = e.errors.as_dict()
            except (ValidationError, ApiError) as e:
                flash(str(e), "danger")

        return render_template(
            "admin/user_form.html", form=form, errors=errors, roles=list(Role), editing=False, active_page="admin"
        )

    @app.route("/admin/users/<int:user_id>/edit", methods=["GET", "POST"], endpoint="edit_user")
    @admin_required
    def edit_user(user_id: int):
        try:
            user = container.user_service.get_user(user_id)
        except ApiError as e:
            flash(str(e), "danger")
            return redirect(url_for("admin", tab="users"))
        if not user:
            flash("User not found", "warning")
            return redirect(url_for("admin", tab="users"))

        errors = {}
        if request.method == "POST":
            form = UserForm.from_form(request.form, editing=True)
            try:
                container.user_service.update_user(user_id, form)
                flash("User updated successfully", "success")
                return redirect(url_for("admin", tab="users"))
            except FormValidationError as e:
                errors = e.errors.as_dict()
            except (ValidationError, ApiError) as e:
                flash(str(e), "danger")
        else:
            form = UserForm(
                username=user.username,
                password="",
                full_name=user.full_name,
                role=user.role.value,
                email=user.email,
                editing=True,
            )

        return render_template(
            "admin/user_form.html", form=form, errors=errors, roles=list(Role), editing=True, active_page="admin"
        )

    @app.route("/admin/users/<int:user_id>/delete", methods=["POST"], endpoint="delete_user")
    @admin_required
    def delete_user(user_id: int):
        try:
            container.user_service.delete_user(
                current_user_id=int(session["user_id"]),
                current_role=Role(session.get("role")),
                user_id=user_id,
            )
            flash("User deleted successfully", "success")
        except (ValidationError, AuthorizationError, ApiError) as e:
            flash(str(e), "danger")

        return redirect(url_for("admin", tab="users"))
