from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Iterator, Optional

from .datetime_utils import parse_iso_date

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass
class FormErrors:
    """Ordered (field, message) pairs produced by a form's ``validate``."""

    items: list[tuple[str, str]] = field(default_factory=list)

    def add(self, field_name: str, message: str) -> None:
        self.items.append((field_name, message))

    def has(self, field_name: str) -> bool:
        return any(f == field_name for f, _ in self.items)

    def for_field(self, field_name: str) -> list[str]:
        return [m for f, m in self.items if f == field_name]

    def first_message(self) -> Optional[str]:
        return self.items[0][1] if self.items else None

    def as_dict(self) -> dict[str, str]:
        # first message per field, which is what the templates show
        out: dict[str, str] = {}
        for f, m in self.items:
            out.setdefault(f, m)
        return out

    def __bool__(self) -> bool:
        return bool(self.items)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def check_required(errors: FormErrors, field_name: str, value: Optional[str], message: str) -> bool:
    if value is None or not str(value).strip():
        errors.add(field_name, message)
        return False
    return True


def check_min_length(errors: FormErrors, field_name: str, value: Optional[str], min_len: int, message: str) -> bool:
    if value is None or len(value) < min_len:
        errors.add(field_name, message)
        return False
    return True


def check_pattern(errors: FormErrors, field_name: str, value: str, pattern: str, message: str) -> bool:
    if not re.match(pattern, value or ""):
        errors.add(field_name, message)
        return False
    return True


def check_email(errors: FormErrors, field_name: str, value: Optional[str]) -> bool:
    if value and not _EMAIL_RE.match(value):
        errors.add(field_name, "Valid email is required")
        return False
    return True


def check_date(errors: FormErrors, field_name: str, value: Optional[str], message: str) -> Optional[date]:
    """Parse a required YYYY-MM-DD field, recording ``message`` when missing or malformed."""
    if not value:
        errors.add(field_name, message)
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        errors.add(field_name, "Invalid date")
        return None


def optional_int(value) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
