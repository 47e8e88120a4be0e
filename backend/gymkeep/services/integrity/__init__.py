"""Integrity coordinator: rule table plus planner/executor for deletes."""

from __future__ import annotations

from .coordinator import (
    DeletionPlan,
    DeletionResult,
    DeletionStep,
    IntegrityCoordinator,
    StepKind,
)
from .rules import DELETE_RULES, DeleteAction, DeleteRule, rules_for

__all__ = [
    "DELETE_RULES",
    "DeleteAction",
    "DeleteRule",
    "DeletionPlan",
    "DeletionResult",
    "DeletionStep",
    "IntegrityCoordinator",
    "StepKind",
    "rules_for",
]
