"""Idempotent database seed helpers for local development environments."""

from __future__ import annotations

import logging
from typing import Any, TypeVar, cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from gymkeep.models.account import UserSetting
from gymkeep.models.catalog import DifficultyLevel, Exercise, ExerciseRegion
from gymkeep.models.plan import PlanExercise, WorkoutPlan
from gymkeep.models.user import User

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

DIFFICULTY_LEVELS: list[str] = ["Beginner", "Intermediate", "Advanced"]

REGIONS: list[str] = ["Chest", "Back", "Legs", "Shoulders", "Arms", "Core", "Full Body"]

USER_FIXTURES: list[dict[str, str]] = [
    {"email": "alex.martinez@example.com", "username": "alexm"},
    {"email": "jamie.lee@example.com", "username": "jamielee"},
    {"email": "sara.kim@example.com", "username": "sarak"},
]

EXERCISE_FIXTURES: list[dict[str, Any]] = [
    {
        "name": "Back Squat",
        "level": "Intermediate",
        "region": "Legs",
        "description": "Bar across the traps, squat below parallel with a neutral spine.",
    },
    {
        "name": "Bench Press",
        "level": "Intermediate",
        "region": "Chest",
        "description": "Press the bar from the chest with scapular retraction.",
    },
    {
        "name": "Overhead Press",
        "level": "Intermediate",
        "region": "Shoulders",
        "description": "Press overhead keeping ribs down and glutes tight.",
    },
    {
        "name": "Pendlay Row",
        "level": "Intermediate",
        "region": "Back",
        "description": "Pull from the floor to the lower chest with a strict torso angle.",
    },
    {
        "name": "Lat Pulldown",
        "level": "Beginner",
        "region": "Back",
        "description": "Pull the bar to the chest with the torso tall.",
    },
    {
        "name": "Romanian Deadlift",
        "level": "Intermediate",
        "region": "Legs",
        "description": "Hinge at the hips with a slight knee bend.",
    },
    {
        "name": "Walking Lunge",
        "level": "Beginner",
        "region": "Legs",
        "description": "Step forward under control and drive through the front heel.",
    },
    {
        "name": "Barbell Curl",
        "level": "Beginner",
        "region": "Arms",
        "description": "Curl with elbows pinned to the sides.",
    },
    {
        "name": "Dead Bug",
        "level": "Beginner",
        "region": "Core",
        "description": "Keep the lower back on the floor while alternating limbs.",
    },
    {
        "name": "Clean and Jerk",
        "level": "Advanced",
        "region": "Full Body",
        "description": "Pull to the rack position, then drive the bar overhead.",
    },
]

PLAN_FIXTURES: list[dict[str, Any]] = [
    {
        "owner_email": "alex.martinez@example.com",
        "name": "Upper Body Strength",
        "description": "Heavy pressing and pulling, three working sets each.",
        "exercises": [
            {"exercise": "Bench Press", "sets": 3, "reps": 6, "rest_seconds": 150},
            {"exercise": "Pendlay Row", "sets": 3, "reps": 8, "rest_seconds": 120},
            {"exercise": "Overhead Press", "sets": 3, "reps": 8, "rest_seconds": 120},
            {"exercise": "Barbell Curl", "sets": 2, "reps": 12, "rest_seconds": 60},
        ],
    },
    {
        "owner_email": "alex.martinez@example.com",
        "name": "Leg Day",
        "description": None,
        "exercises": [
            {"exercise": "Back Squat", "sets": 4, "reps": 5, "rest_seconds": 180},
            {"exercise": "Romanian Deadlift", "sets": 3, "reps": 8, "rest_seconds": 120},
            {"exercise": "Walking Lunge", "sets": 2, "reps": 12, "rest_seconds": 90},
        ],
    },
    {
        "owner_email": "jamie.lee@example.com",
        "name": "Beginner Full Body",
        "description": "Two sets of everything, focus on form.",
        "exercises": [
            {"exercise": "Lat Pulldown", "sets": 2, "reps": 10, "rest_seconds": 90},
            {"exercise": "Walking Lunge", "sets": 2, "reps": 10, "rest_seconds": 90},
            {"exercise": "Dead Bug", "sets": 2, "reps": 12, "rest_seconds": 60},
        ],
    },
]

SETTINGS_FIXTURES: list[dict[str, Any]] = [
    {"owner_email": "alex.martinez@example.com", "daily_goal": 45, "is_dark_mode": True},
]


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def _get_or_create(
    session: Session,
    model: type[T],
    *,
    defaults: dict[str, Any] | None = None,
    **filters: Any,
) -> tuple[T, bool]:
    """Fetch ``model`` by ``filters`` or create it using ``defaults``."""
    instance = session.execute(select(model).filter_by(**filters)).scalar_one_or_none()
    if instance is not None:
        return instance, False
    params = dict(defaults or {})
    params.update(filters)
    instance = cast(T, model(**params))
    session.add(instance)
    return instance, True


def seed_catalog(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Populate difficulty levels, regions and catalog exercises."""
    if verbose:
        LOGGER.info("Seeding exercise catalog...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    with session.begin():
        levels: dict[str, DifficultyLevel] = {}
        for name in DIFFICULTY_LEVELS:
            levels[name], created = _get_or_create(session, DifficultyLevel, name=name)
            _touch(summary, "difficulty_levels", created)

        regions: dict[str, ExerciseRegion] = {}
        for name in REGIONS:
            regions[name], created = _get_or_create(session, ExerciseRegion, name=name)
            _touch(summary, "exercise_regions", created)
        session.flush()

        for fixture in EXERCISE_FIXTURES:
            defaults = {
                "description": fixture.get("description"),
                "difficulty_level_id": levels[fixture["level"]].id,
                "region_id": regions[fixture["region"]].id,
            }
            exercise, created = _get_or_create(
                session, Exercise, name=fixture["name"], defaults=defaults
            )
            if not created:
                for attr, value in defaults.items():
                    setattr(exercise, attr, value)
            _touch(summary, "exercises", created)

    return summary


def seed_users_and_plans(
    database: SQLAlchemy, *, verbose: bool = False
) -> dict[str, dict[str, int]]:
    """Create demo users, their plans with prescriptions, and settings."""
    if verbose:
        LOGGER.info("Seeding users and plans...")
    session = _session(database)
    summary: dict[str, dict[str, int]] = {}

    with session.begin():
        users: dict[str, User] = {}
        for fixture in USER_FIXTURES:
            email = fixture["email"].strip().lower()
            user, created = _get_or_create(
                session, User, email=email, defaults={"username": fixture["username"]}
            )
            session.flush()
            users[email] = user
            _touch(summary, "users", created)

        exercises = {
            row.name: row for row in session.execute(select(Exercise)).scalars().all()
        }

        for fixture in PLAN_FIXTURES:
            owner = users[fixture["owner_email"]]
            plan, created = _get_or_create(
                session,
                WorkoutPlan,
                user_id=owner.id,
                name=fixture["name"],
                defaults={"description": fixture.get("description")},
            )
            session.flush()
            _touch(summary, "workout_plans", created)

            for order, item in enumerate(fixture["exercises"], start=1):
                exercise = exercises.get(item["exercise"])
                if exercise is None:
                    LOGGER.warning(
                        "Seed exercise missing; run the catalog seeder first",
                        extra={"exercise": item["exercise"]},
                    )
                    continue
                _, pe_created = _get_or_create(
                    session,
                    PlanExercise,
                    plan_id=plan.id,
                    exercise_id=exercise.id,
                    defaults={
                        "sets": item["sets"],
                        "reps": item["reps"],
                        "rest_seconds": item.get("rest_seconds"),
                        "order_in_plan": order,
                    },
                )
                _touch(summary, "plan_exercises", pe_created)

        for fixture in SETTINGS_FIXTURES:
            owner = users[fixture["owner_email"]]
            values = {k: v for k, v in fixture.items() if k != "owner_email"}
            _, created = _get_or_create(
                session, UserSetting, user_id=owner.id, defaults=values
            )
            _touch(summary, "user_settings", created)

    return summary


def run_all(database: SQLAlchemy, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """Run all seeders in the correct foreign-key order."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    combined: dict[str, dict[str, int]] = {}
    for func in (seed_catalog, seed_users_and_plans):
        result = func(database, verbose=verbose)
        for table, counters in result.items():
            entry = combined.setdefault(table, {"created": 0, "existing": 0})
            entry["created"] += counters.get("created", 0)
            entry["existing"] += counters.get("existing", 0)
    return combined


__all__ = [
    "seed_catalog",
    "seed_users_and_plans",
    "run_all",
]
