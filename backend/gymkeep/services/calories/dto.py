from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class CalorieCalculationCreateIn:
    """Inputs and results of a calculation done by the client; stored as given."""

    user_id: int
    age: int
    height_cm: Decimal
    weight_kg: Decimal
    gender: str
    activity_level: str
    goal: str
    tdee: Decimal
    adjusted_calories: Decimal


@dataclass(frozen=True, slots=True)
class CalorieCalculationOut:
    id: int
    user_id: int
    age: int
    height_cm: Decimal
    weight_kg: Decimal
    gender: str
    activity_level: str
    goal: str
    tdee: Decimal
    adjusted_calories: Decimal
    calculated_at: datetime
