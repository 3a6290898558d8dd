from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from ..common.validators import FormErrors, check_email, check_min_length, check_required
from ..core.constants import MIN_PASSWORD_LENGTH, MIN_USERNAME_LENGTH
from ..core.enums import Role


@dataclass(frozen=True)
class LoginForm:
    username: str
    password: str

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "LoginForm":
        return cls(username=(form.get("username") or "").strip(), password=form.get("password") or "")

    def validate(self) -> FormErrors:
        errors = FormErrors()
        check_required(errors, "username", self.username, "Username is required")
        check_required(errors, "password", self.password, "Password is required")
        return errors


@dataclass(frozen=True)
class UserForm:
    """Admin form for creating or editing a user.

    On edit an empty password means "keep the current one".
    """

    username: str
    password: str
    full_name: str
    role: str
    email: Optional[str] = None
    editing: bool = False

    @classmethod
    def from_form(cls, form: Mapping[str, str], *, editing: bool = False) -> "UserForm":
        return cls(
            username=(form.get("username") or "").strip(),
            password=form.get("password") or "",
            full_name=(form.get("fullName") or "").strip(),
            role=(form.get("role") or Role.FACULTY.value).strip(),
            email=(form.get("email") or "").strip() or None,
            editing=editing,
        )

    def validate(self) -> FormErrors:
        errors = FormErrors()
        check_min_length(
            errors, "username", self.username, MIN_USERNAME_LENGTH,
            f"Username must be at least {MIN_USERNAME_LENGTH} characters",
        )
        if not (self.editing and not self.password):
            check_min_length(
                errors, "password", self.password, MIN_PASSWORD_LENGTH,
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            )
        check_required(errors, "fullName", self.full_name, "Full name is required")
        if self.role not in {r.value for r in Role}:
            errors.add("role", "Role must be admin, faculty or hod")
        check_email(errors, "email", self.email)
        return errors

    def to_payload(self) -> dict:
        payload = {
            "username": self.username,
            "fullName": self.full_name,
            "role": self.role,
            "email": self.email or "",
        }
        if self.password:
            payload["password"] = self.password
        return payload
