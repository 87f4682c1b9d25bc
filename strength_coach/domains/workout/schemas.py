"""Boundary input contracts for workout generation.

These models are what the profile/history store hands to the engine.
They are always structured: nested objects arrive as objects, never as
JSON-encoded strings.
"""

from pydantic import BaseModel, ConfigDict, Field

from strength_coach.domains.workout.enums import (
    Difficulty,
    Equipment,
    EquipmentContext,
    IntensityTier,
    MuscleGroup,
    TrainingGoal,
)


class UserConstraints(BaseModel):
    """User-declared training constraints."""

    model_config = ConfigDict(frozen=True)

    excluded_exercises: list[str] = Field(
        default_factory=list,
        description="Exercise ids never to prescribe",
    )
    excluded_movements: list[str] = Field(
        default_factory=list,
        description="Movement pattern values never to prescribe (e.g., 'hinge')",
    )
    injuries: list[str] = Field(default_factory=list)
    preferences: list[str] = Field(default_factory=list)


class EstimatedMaxes(BaseModel):
    """Self-reported one-rep maxes."""

    model_config = ConfigDict(frozen=True)

    bench: float | None = Field(default=None, gt=0)
    squat: float | None = Field(default=None, gt=0)
    deadlift: float | None = Field(default=None, gt=0)
    overhead_press: float | None = Field(default=None, gt=0)


class UserProfile(BaseModel):
    """Onboarded user profile. Never mutated by the engine."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    goal: TrainingGoal = TrainingGoal.GENERAL_FITNESS
    experience: Difficulty = Difficulty.BEGINNER
    training_days_per_week: int = Field(
        default=3,
        ge=2,
        le=6,
        description="Desired training days per week (2-6)",
    )
    session_duration_minutes: int = Field(
        default=45,
        description="Preferred session length; 20, 30, 45 or 60 are budgeted",
    )
    equipment: list[Equipment] = Field(default_factory=list)
    constraints: UserConstraints = Field(default_factory=UserConstraints)
    bodyweight: float | None = Field(default=None, gt=0)
    estimated_maxes: EstimatedMaxes | None = None


class GeneratorOptions(BaseModel):
    """Per-request generation options."""

    model_config = ConfigDict(frozen=True)

    duration: int = Field(description="Session length in minutes; unsupported values use the default budget")
    equipment_context: EquipmentContext
    intensity: IntensityTier | None = Field(
        default=None,
        description="Requested tier before readiness adjustment (None = moderate)",
    )
    target_muscles: list[MuscleGroup] = Field(
        default_factory=list,
        description="Explicit focus muscles; empty means derive from undertrained muscles",
    )
    exclude_exercises: list[str] = Field(default_factory=list)
    is_minimal_dose: bool = False


class ReadinessCheck(BaseModel):
    """Daily readiness self-report. Higher soreness and stress mean worse recovery."""

    model_config = ConfigDict(frozen=True)

    sleep_quality: int = Field(ge=1, le=5)
    energy_level: int = Field(ge=1, le=5)
    soreness: int = Field(ge=1, le=5)
    stress_level: int = Field(ge=1, le=5)
    notes: str | None = None
