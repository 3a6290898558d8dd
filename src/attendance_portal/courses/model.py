from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Course:
    course_id: int
    name: str
    code: str
    description: Optional[str] = None
