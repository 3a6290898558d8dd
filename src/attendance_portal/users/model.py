from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Portal user as returned by the backend (no credentials are kept here)."""

    user_id: int
    username: str
    full_name: str
    role: Role
    email: Optional[str] = None
