from __future__ import annotations

from typing import Any, Optional, Sequence

from ..api.client import ApiClient
from ..core.enums import Role
from ..core.exceptions import ApiError
from .model import User
from .repository import UserRepository

USERS_PATH = "/api/users"
LOGIN_PATH = "/api/auth/login"


def to_user(row: dict[str, Any]) -> User:
    return User(
        user_id=int(row["id"]),
        username=row["username"],
        full_name=row.get("fullName") or row["username"],
        role=Role(row.get("role") or Role.FACULTY.value),
        email=row.get("email") or None,
    )


class ApiUserRepository(UserRepository):
    def __init__(self, client: ApiClient):
        self._client = client

    def login(self, username: str, password: str) -> Optional[User]:
        try:
            body = self._client.post(LOGIN_PATH, {"username": username, "password": password})
        except ApiError as e:
            if e.status_code in (400, 401, 403):
                return None
            raise
        # some backends wrap the user: {"user": {...}}
        row = body.get("user", body) if isinstance(body, dict) else None
        return to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        rows = self._client.get(USERS_PATH) or []
        return [to_user(r) for r in rows]

    def get_by_id(self, user_id: int) -> Optional[User]:
        for user in self.list_all():
            if user.user_id == int(user_id):
                return user
        return None

    def create(self, payload: dict) -> User:
        return to_user(self._client.post(USERS_PATH, payload))

    def update(self, user_id: int, payload: dict) -> User:
        return to_user(self._client.put(f"{USERS_PATH}/{int(user_id)}", payload))

    def delete(self, user_id: int) -> None:
        self._client.delete(f"{USERS_PATH}/{int(user_id)}")

    def invalidate(self) -> None:
        self._client.invalidate(USERS_PATH)
