from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class AcademicYear:
    year_id: int
    name: str
    start_date: date
    end_date: date
    description: Optional[str] = None
    is_active: bool = False
    total_students: int = 0
    total_classes: int = 0
