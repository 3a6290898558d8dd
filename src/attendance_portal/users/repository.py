from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Repository interface for users.

    Note: services depend on this interface, not on the REST client.
    """

    def login(self, username: str, password: str) -> Optional[User]:
        """Return the user for valid credentials, None when the backend rejects them."""

        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def create(self, payload: dict) -> User:
        raise NotImplementedError

    def update(self, user_id: int, payload: dict) -> User:
        raise NotImplementedError

    def delete(self, user_id: int) -> None:
        raise NotImplementedError

    def invalidate(self) -> None:
        raise NotImplementedError
