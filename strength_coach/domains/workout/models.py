"""Core immutable data models for workout generation.

This module defines the canonical data structures that represent:
- Catalog exercises and their default prescription
- Per-exercise strength history (PatternStrength)
- Generation context and output (WorkoutTemplate, WorkoutExercise)
- Logged session input and its score

All models are frozen (immutable). Updates produce new instances.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime

from strength_coach.domains.workout.enums import (
    Difficulty,
    Equipment,
    EquipmentContext,
    ExerciseCategory,
    IntensityTier,
    InterventionType,
    MovementPattern,
    MuscleGroup,
    StrengthTrend,
    WorkoutSlot,
)
from strength_coach.domains.workout.schemas import UserProfile

_REP_RANGE_PATTERN = re.compile(r"^\s*(\d+)\s*(?:-\s*(\d+)\s*)?$")


# -----------------------------
# Catalog
# -----------------------------
@dataclass(frozen=True)
class RepRange:
    """Inclusive target rep range, rendered as "min-max".

    Attributes:
        minimum: Lowest acceptable rep count
        maximum: Top of the range; reaching it triggers a load increase
    """

    minimum: int
    maximum: int

    def __post_init__(self) -> None:
        if self.minimum < 0 or self.maximum < self.minimum:
            raise ValueError(f"Invalid rep range {self.minimum}-{self.maximum}")

    @classmethod
    def parse(cls, text: str) -> "RepRange":
        """Parse "8-12" or a single "10" (min == max).

        Raises:
            ValueError: If the text is not a rep range
        """
        match = _REP_RANGE_PATTERN.match(str(text))
        if match is None:
            raise ValueError(f"Invalid rep range: {text!r}")
        minimum = int(match.group(1))
        maximum = int(match.group(2)) if match.group(2) else minimum
        return cls(minimum=minimum, maximum=maximum)

    def __str__(self) -> str:
        return f"{self.minimum}-{self.maximum}"


@dataclass(frozen=True)
class Exercise:
    """Immutable catalog exercise.

    Attributes:
        id: Stable slug (e.g., "goblet-squat")
        name: Display name
        primary_muscles: Muscles credited a full set per working set
        secondary_muscles: Muscles credited half a set; disjoint from primary
        movement_pattern: Fundamental movement pattern
        equipment: Any-of equipment alternatives
        difficulty: Difficulty tier
        category: Session role (compound, isolation, warmup, core, ...)
        default_sets: Default working set count at moderate intensity
        default_reps: Default rep range
        default_rpe: Default RPE at moderate intensity
        cues: Coaching cues
        variations: Ids or names of variation exercises
        instructions: Free-text instructions
    """

    id: str
    name: str
    primary_muscles: tuple[MuscleGroup, ...]
    secondary_muscles: tuple[MuscleGroup, ...]
    movement_pattern: MovementPattern
    equipment: tuple[Equipment, ...]
    difficulty: Difficulty
    category: ExerciseCategory
    default_sets: int
    default_reps: RepRange
    default_rpe: float
    cues: tuple[str, ...] = ()
    variations: tuple[str, ...] = ()
    instructions: str = ""

    def __post_init__(self) -> None:
        overlap = set(self.primary_muscles) & set(self.secondary_muscles)
        if overlap:
            raise ValueError(
                f"Exercise '{self.id}' lists {sorted(overlap)} as both primary and secondary"
            )


# -----------------------------
# Strength history
# -----------------------------
@dataclass(frozen=True)
class PatternStrength:
    """Rolling strength state for one exercise.

    Attributes:
        exercise_id: Catalog exercise id
        last_weight: Working weight of the last logged set
        last_reps: Reps of the last logged set
        last_rpe: RPE of the last logged set, if reported
        estimated_one_rep_max: e1RM of the last logged set
        exposures: Number of logged exposures
        trend: Trend classification of recent e1RM estimates
    """

    exercise_id: str
    last_weight: float
    last_reps: int
    last_rpe: float | None
    estimated_one_rep_max: float
    exposures: int
    trend: StrengthTrend = StrengthTrend.IMPROVING


@dataclass(frozen=True)
class ProgressionSuggestion:
    """Next-session load recommendation."""

    weight: float
    reps: str
    rationale: str


@dataclass(frozen=True)
class PlateauAssessment:
    """Plateau detection outcome. reason is set only when is_plateau."""

    is_plateau: bool
    reason: str | None = None


@dataclass(frozen=True)
class PlateauIntervention:
    """Plateau-breaking prescription.

    Attributes:
        type: Intervention in the rotation
        description: Human-readable instruction
        exercises: Suggested variation exercises (variation swaps only)
    """

    type: InterventionType
    description: str
    exercises: tuple[str, ...] = ()


# -----------------------------
# Generation context
# -----------------------------
@dataclass(frozen=True)
class GeneratorContext:
    """Snapshot of user state handed to the generator by the storage layer.

    Attributes:
        profile: Validated user profile
        muscle_volume: Effective sets per muscle this rolling week
        pattern_strength: PatternStrength keyed by exercise id
        recent_exercises: Exercise ids performed recently (novelty input)
        readiness_score: 1-5 readiness, None to use the configured default
    """

    profile: UserProfile
    muscle_volume: dict[MuscleGroup, float] = field(default_factory=dict)
    pattern_strength: dict[str, PatternStrength] = field(default_factory=dict)
    recent_exercises: tuple[str, ...] = ()
    readiness_score: int | None = None


@dataclass(frozen=True)
class SelectedExercises:
    """Exercises chosen per slot, in slot order."""

    warmups: tuple[Exercise, ...] = ()
    mains: tuple[Exercise, ...] = ()
    accessories: tuple[Exercise, ...] = ()
    core: tuple[Exercise, ...] = ()


# -----------------------------
# Generation output
# -----------------------------
@dataclass(frozen=True)
class WorkoutExercise:
    """Prescribed exercise inside a template.

    Attributes:
        id: Unique id for this prescription
        exercise: Catalog exercise
        order: Zero-based position in the session
        slot: Slot the exercise was selected for
        sets: Prescribed working sets (1 for warmups)
        target_reps: Target rep range ("min-max")
        target_rpe: Target RPE
        target_weight: Carried-forward working weight, if history exists
        rest_seconds: Rest between sets
        is_warmup: True for warmup slot exercises
        notes: Free-text notes
    """

    id: str
    exercise: Exercise
    order: int
    slot: WorkoutSlot
    sets: int
    target_reps: str
    target_rpe: int
    target_weight: float | None
    rest_seconds: int
    is_warmup: bool
    notes: str = ""

    @property
    def exercise_id(self) -> str:
        return self.exercise.id


@dataclass(frozen=True)
class WorkoutTemplate:
    """Immutable generated workout.

    Attributes:
        id: Template id
        user_id: Owner
        name: Display name derived from focus muscles
        description: One-line summary
        exercises: Ordered prescriptions
        estimated_duration: Session length in minutes the budget was sized for
        target_muscles: Unique primary muscles across exercises, in order
        movement_patterns: Unique movement patterns across exercises, in order
        equipment_context: Equipment context used for filtering
        intensity: Final intensity tier after readiness adjustment
        rationale: Ordered explanation lines
        generated_at: Generation timestamp (UTC)
        is_locked: Prevents auto-regeneration once the user commits
        is_minimal_dose: Generated as a minimum-effective-dose session
        shortfalls: Slot -> positions left unfilled by the filtered catalog
    """

    id: str
    user_id: str
    name: str
    description: str
    exercises: tuple[WorkoutExercise, ...]
    estimated_duration: int
    target_muscles: tuple[MuscleGroup, ...]
    movement_patterns: tuple[MovementPattern, ...]
    equipment_context: EquipmentContext
    intensity: IntensityTier
    rationale: tuple[str, ...]
    generated_at: datetime
    is_locked: bool = False
    is_minimal_dose: bool = False
    shortfalls: dict[WorkoutSlot, int] = field(default_factory=dict)

    def exercises_in_slot(self, slot: WorkoutSlot) -> tuple[WorkoutExercise, ...]:
        return tuple(we for we in self.exercises if we.slot == slot)


# -----------------------------
# Session logging
# -----------------------------
@dataclass(frozen=True)
class LoggedSet:
    """One performed set."""

    weight: float
    reps: int
    rpe: float | None = None
    is_warmup: bool = False


@dataclass(frozen=True)
class LoggedExercise:
    """Performed exercise with its logged sets."""

    exercise: Exercise
    sets: tuple[LoggedSet, ...]


@dataclass(frozen=True)
class SessionScore:
    """Session totals fed back into the volume ledger.

    Attributes:
        total_volume: Sum of weight x reps over working sets
        total_sets: All logged sets, warmups included
        muscle_volume_delta: Effective sets credited per muscle
    """

    total_volume: float
    total_sets: int
    muscle_volume_delta: dict[MuscleGroup, float]
