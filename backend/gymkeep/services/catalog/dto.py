from __future__ import annotations

from dataclasses import dataclass

# ------------------------------ Input DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class ExerciseListIn:
    """Optional catalog filters; ``name_contains`` is case-insensitive."""

    difficulty_level_id: int | None = None
    region_id: int | None = None
    name_contains: str | None = None


@dataclass(frozen=True, slots=True)
class ExerciseCreateIn:
    name: str
    difficulty_level_id: int
    region_id: int
    description: str | None = None
    video_url: str | None = None
    image_url: str | None = None


@dataclass(frozen=True, slots=True)
class ExerciseUpdateIn:
    """Partial update; ``None`` leaves a field unchanged."""

    exercise_id: int
    name: str | None = None
    description: str | None = None
    video_url: str | None = None
    image_url: str | None = None
    difficulty_level_id: int | None = None
    region_id: int | None = None


# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class LookupOut:
    """Difficulty level or body region."""

    id: int
    name: str


@dataclass(frozen=True, slots=True)
class ExerciseOut:
    id: int
    name: str
    description: str | None
    video_url: str | None
    image_url: str | None
    difficulty_level_id: int
    difficulty_level: str | None
    region_id: int
    region: str | None
