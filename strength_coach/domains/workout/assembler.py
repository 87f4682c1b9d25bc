"""Workout assembly: selected exercises → sequenced, timed template.

Prescriptions derive entirely from catalog defaults scaled by the intensity
tier. Target weights are carried forward from history unchanged; load
increases only come from the progression engine after a logged session.
"""

import math
import uuid
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timezone

from strength_coach.domains.workout.enums import (
    EquipmentContext,
    ExerciseCategory,
    IntensityTier,
    MovementPattern,
    MuscleGroup,
    WorkoutSlot,
)
from strength_coach.domains.workout.models import (
    Exercise,
    PatternStrength,
    SelectedExercises,
    WorkoutExercise,
    WorkoutTemplate,
)
from strength_coach.domains.workout.tuning import TuningConfig, load_tuning

WARMUP_SETS = 1
WARMUP_RPE = 4
WARMUP_REST_SECONDS = 30
COMPOUND_BASE_REST_SECONDS = 120
DEFAULT_BASE_REST_SECONDS = 60
MAX_RPE = 10

MUSCLE_DISPLAY_NAMES: dict[MuscleGroup, str] = {
    MuscleGroup.CHEST: "Chest",
    MuscleGroup.FRONT_DELTS: "Front Delts",
    MuscleGroup.SIDE_DELTS: "Side Delts",
    MuscleGroup.REAR_DELTS: "Rear Delts",
    MuscleGroup.TRICEPS: "Triceps",
    MuscleGroup.BICEPS: "Biceps",
    MuscleGroup.FOREARMS: "Forearms",
    MuscleGroup.UPPER_BACK: "Upper Back",
    MuscleGroup.LATS: "Lats",
    MuscleGroup.LOWER_BACK: "Lower Back",
    MuscleGroup.TRAPS: "Traps",
    MuscleGroup.ABS: "Core",
    MuscleGroup.OBLIQUES: "Obliques",
    MuscleGroup.QUADS: "Quads",
    MuscleGroup.HAMSTRINGS: "Hamstrings",
    MuscleGroup.GLUTES: "Glutes",
    MuscleGroup.CALVES: "Calves",
    MuscleGroup.HIP_FLEXORS: "Hip Flexors",
    MuscleGroup.ADDUCTORS: "Adductors",
}


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 → 3, not 2)."""
    return math.floor(value + 0.5)


def rest_seconds(exercise: Exercise, intensity: IntensityTier, tuning: TuningConfig) -> int:
    """Rest between working sets: 120s compounds, 60s otherwise, scaled by tier."""
    base = COMPOUND_BASE_REST_SECONDS if exercise.category == ExerciseCategory.COMPOUND else DEFAULT_BASE_REST_SECONDS
    return round_half_up(base * tuning.rest_multipliers[intensity])


def create_workout_exercise(
    exercise: Exercise,
    order: int,
    slot: WorkoutSlot,
    intensity: IntensityTier,
    pattern_strength: Mapping[str, PatternStrength],
    tuning: TuningConfig,
) -> WorkoutExercise:
    """Prescribe one exercise at the given position and intensity."""
    is_warmup = slot == WorkoutSlot.WARMUP
    multiplier = tuning.intensity_multipliers[intensity]

    if is_warmup:
        sets = WARMUP_SETS
        rpe = WARMUP_RPE
        rest = WARMUP_REST_SECONDS
    else:
        sets = round_half_up(exercise.default_sets * multiplier)
        rpe = min(MAX_RPE, round_half_up(exercise.default_rpe * multiplier))
        rest = rest_seconds(exercise, intensity, tuning)

    history = pattern_strength.get(exercise.id)
    target_weight = history.last_weight if history is not None else None

    return WorkoutExercise(
        id=uuid.uuid4().hex,
        exercise=exercise,
        order=order,
        slot=slot,
        sets=sets,
        target_reps=str(exercise.default_reps),
        target_rpe=rpe,
        target_weight=target_weight,
        rest_seconds=rest,
        is_warmup=is_warmup,
    )


def generate_workout_name(focus_muscles: Sequence[MuscleGroup]) -> str:
    """Name a workout after its first three focus muscles."""
    if not focus_muscles:
        return "Full Body Workout"

    names = [MUSCLE_DISPLAY_NAMES[MuscleGroup(m)] for m in focus_muscles[:3]]
    if len(names) == 1:
        return f"{names[0]} Focus"
    if len(names) == 2:
        return f"{names[0]} & {names[1]}"
    return f"{names[0]}, {names[1]} & {names[2]}"


def generate_rationale(
    focus_muscles: Sequence[MuscleGroup],
    undertrained_muscles: Sequence[MuscleGroup],
    readiness: int,
    intensity: IntensityTier,
) -> list[str]:
    """Explain the session in order: focus, undertrained callout, readiness, intensity."""
    rationale: list[str] = []

    if focus_muscles:
        names = ", ".join(MUSCLE_DISPLAY_NAMES[MuscleGroup(m)] for m in focus_muscles[:3])
        rationale.append(f"Targeting {names} based on your training balance.")

    if undertrained_muscles:
        names = ", ".join(MUSCLE_DISPLAY_NAMES[MuscleGroup(m)] for m in undertrained_muscles[:2])
        rationale.append(f"Prioritizing undertrained muscles: {names}.")

    if readiness <= 2:
        rationale.append("Reduced intensity due to lower readiness score.")
    elif readiness >= 4:
        rationale.append("You're well-recovered - optimizing for progress.")

    rationale.append(f"{intensity.value.capitalize()} intensity to match your current state.")
    return rationale


def _unique(items: Iterable[str]) -> tuple:
    return tuple(dict.fromkeys(items))


def assemble(
    selected: SelectedExercises,
    focus_muscles: Sequence[MuscleGroup],
    undertrained_muscles: Sequence[MuscleGroup],
    intensity: IntensityTier,
    readiness: int,
    duration: int,
    equipment_context: EquipmentContext,
    *,
    user_id: str,
    pattern_strength: Mapping[str, PatternStrength] | None = None,
    tuning: TuningConfig | None = None,
    now: datetime | None = None,
    is_minimal_dose: bool = False,
    shortfalls: Mapping[WorkoutSlot, int] | None = None,
) -> WorkoutTemplate:
    """Turn selected exercises into an ordered, prescribed WorkoutTemplate.

    Order is warmups, mains, accessories, core with contiguous indices.

    Args:
        selected: Exercises per slot
        focus_muscles: Session focus (drives name and rationale)
        undertrained_muscles: Ranked undertrained muscles (rationale only)
        intensity: Final intensity tier
        readiness: Readiness score used for the rationale
        duration: Session length the budget was sized for
        equipment_context: Equipment context used for filtering
        user_id: Template owner
        pattern_strength: Strength history keyed by exercise id
        tuning: Tuning tables
        now: Generation timestamp (defaults to current UTC time)
        is_minimal_dose: Marks a minimum-effective-dose session
        shortfalls: Slot -> unfilled positions

    Returns:
        Unlocked WorkoutTemplate
    """
    tuning = tuning or load_tuning()
    pattern_strength = pattern_strength or {}
    intensity = IntensityTier(intensity)

    ordered: list[tuple[Exercise, WorkoutSlot]] = [
        *((e, WorkoutSlot.WARMUP) for e in selected.warmups),
        *((e, WorkoutSlot.MAIN) for e in selected.mains),
        *((e, WorkoutSlot.ACCESSORY) for e in selected.accessories),
        *((e, WorkoutSlot.CORE) for e in selected.core),
    ]
    exercises = tuple(
        create_workout_exercise(exercise, order, slot, intensity, pattern_strength, tuning)
        for order, (exercise, slot) in enumerate(ordered)
    )

    target_muscles: tuple[MuscleGroup, ...] = _unique(m for we in exercises for m in we.exercise.primary_muscles)
    movement_patterns: tuple[MovementPattern, ...] = _unique(we.exercise.movement_pattern for we in exercises)

    return WorkoutTemplate(
        id=uuid.uuid4().hex,
        user_id=user_id,
        name=generate_workout_name(focus_muscles),
        description=f"{intensity.value.capitalize()} intensity {duration}-minute workout",
        exercises=exercises,
        estimated_duration=duration,
        target_muscles=target_muscles,
        movement_patterns=movement_patterns,
        equipment_context=EquipmentContext(equipment_context),
        intensity=intensity,
        rationale=tuple(generate_rationale(focus_muscles, undertrained_muscles, readiness, intensity)),
        generated_at=now or datetime.now(timezone.utc),
        is_locked=False,
        is_minimal_dose=is_minimal_dose,
        shortfalls=dict(shortfalls or {}),
    )
