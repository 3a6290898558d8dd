from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, FormValidationError, ValidationError
from .forms import LoginForm, UserForm
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    username: str
    full_name: str
    role: Role


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, form: LoginForm) -> SessionUser:
        errors = form.validate()
        if errors:
            raise FormValidationError(errors)

        user = self._users.login(form.username, form.password)
        if not user:
            logger.info("login rejected username=%s", form.username)
            raise AuthenticationError("Invalid username or password")

        return SessionUser(
            user_id=user.user_id,
            username=user.username,
            full_name=user.full_name,
            role=user.role,
        )


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def get_user(self, user_id: int) -> Optional[User]:
        return self._users.get_by_id(user_id)

    def create_user(self, form: UserForm) -> User:
        errors = form.validate()
        if errors:
            raise FormValidationError(errors)

        if any(u.username == form.username for u in self._users.list_all()):
            raise ValidationError("Username already exists")

        user = self._users.create(form.to_payload())
        self._users.invalidate()
        logger.info("user created id=%s role=%s", user.user_id, user.role.value)
        return user

    def update_user(self, user_id: int, form: UserForm) -> User:
        errors = form.validate()
        if errors:
            raise FormValidationError(errors)

        if not self._users.get_by_id(user_id):
            raise ValidationError("User not found")

        user = self._users.update(user_id, form.to_payload())
        self._users.invalidate()
        return user

    def delete_user(self, *, current_user_id: int, current_role: Role, user_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to delete users")
        if int(current_user_id) == int(user_id):
            raise ValidationError("You cannot delete your own account")
        if not self._users.get_by_id(user_id):
            raise ValidationError("User not found")

        self._users.delete(user_id)
        self._users.invalidate()
        logger.info("user deleted id=%s by=%s", user_id, current_user_id)
