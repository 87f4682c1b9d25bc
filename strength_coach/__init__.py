"""Workout generation and progression engine."""

from strength_coach.core import logger as _logger  # noqa: F401  configures loguru sinks
from strength_coach.domains.workout.generator import generate_minimal_dose_workout, generate_workout
from strength_coach.domains.workout.progression import (
    calculate_e1rm,
    detect_plateau,
    generate_plateau_intervention,
    suggest_next_weight,
)
from strength_coach.domains.workout.session_scorer import score_session

__all__ = [
    "calculate_e1rm",
    "detect_plateau",
    "generate_minimal_dose_workout",
    "generate_plateau_intervention",
    "generate_workout",
    "score_session",
    "suggest_next_weight",
]
