"""Root conftest for all tests.

Shared fixtures: packaged catalog and tuning tables, user profiles and a
GeneratorContext factory.
"""

import random
from collections.abc import Callable
from datetime import datetime, timezone

import pytest

from strength_coach.domains.workout.catalog import ExerciseCatalog, load_catalog
from strength_coach.domains.workout.enums import (
    Difficulty,
    Equipment,
    ExerciseCategory,
    MovementPattern,
    MuscleGroup,
)
from strength_coach.domains.workout.models import Exercise, GeneratorContext, PatternStrength, RepRange
from strength_coach.domains.workout.schemas import UserProfile
from strength_coach.domains.workout.tuning import TuningConfig, load_tuning

FIXED_NOW = datetime(2026, 3, 2, 7, 30, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def catalog() -> ExerciseCatalog:
    """Packaged exercise catalog."""
    return load_catalog()


@pytest.fixture(scope="session")
def tuning() -> TuningConfig:
    """Packaged tuning tables."""
    return load_tuning()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so selection is reproducible."""
    return random.Random(42)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def beginner_profile() -> UserProfile:
    """Beginner training three days a week."""
    return UserProfile(
        user_id="user-beginner",
        experience=Difficulty.BEGINNER,
        training_days_per_week=3,
        session_duration_minutes=30,
        equipment=[Equipment.BODYWEIGHT],
    )


@pytest.fixture
def intermediate_profile() -> UserProfile:
    """Intermediate lifter with a full gym, four days a week."""
    return UserProfile(
        user_id="user-intermediate",
        experience=Difficulty.INTERMEDIATE,
        training_days_per_week=4,
        session_duration_minutes=60,
        equipment=[Equipment.FULL_GYM],
    )


@pytest.fixture
def make_context(beginner_profile: UserProfile) -> Callable[..., GeneratorContext]:
    """Factory for GeneratorContext snapshots (beginner profile by default)."""

    def _make(
        profile: UserProfile | None = None,
        muscle_volume: dict[MuscleGroup, float] | None = None,
        pattern_strength: dict[str, PatternStrength] | None = None,
        recent_exercises: tuple[str, ...] = (),
        readiness_score: int | None = 3,
    ) -> GeneratorContext:
        return GeneratorContext(
            profile=profile or beginner_profile,
            muscle_volume=muscle_volume or {},
            pattern_strength=pattern_strength or {},
            recent_exercises=recent_exercises,
            readiness_score=readiness_score,
        )

    return _make


@pytest.fixture
def make_exercise() -> Callable[..., Exercise]:
    """Factory for ad-hoc exercises outside the packaged catalog."""

    def _make(
        exercise_id: str,
        primary: tuple[MuscleGroup, ...] = (MuscleGroup.CHEST,),
        secondary: tuple[MuscleGroup, ...] = (),
        pattern: MovementPattern = MovementPattern.HORIZONTAL_PUSH,
        equipment: tuple[Equipment, ...] = (Equipment.BODYWEIGHT,),
        difficulty: Difficulty = Difficulty.BEGINNER,
        category: ExerciseCategory = ExerciseCategory.COMPOUND,
        sets: int = 3,
        reps: str = "8-12",
        rpe: float = 7,
        variations: tuple[str, ...] = (),
    ) -> Exercise:
        return Exercise(
            id=exercise_id,
            name=exercise_id.replace("-", " ").title(),
            primary_muscles=primary,
            secondary_muscles=secondary,
            movement_pattern=pattern,
            equipment=equipment,
            difficulty=difficulty,
            category=category,
            default_sets=sets,
            default_reps=RepRange.parse(reps),
            default_rpe=rpe,
            variations=variations,
        )

    return _make
