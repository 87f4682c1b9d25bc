"""End-to-end tests for workout generation.

Tests verify that generation:
- Produces the expected session for a fresh beginner on bodyweight only
- Adjusts intensity for readiness
- Falls back to the default budget for unsupported durations (or raises in strict mode)
- Honours exclusions and never repeats an exercise
- Records shortfalls instead of failing when the catalog runs dry
"""

import random
from datetime import datetime

import pytest

from strength_coach.domains.workout.catalog import ExerciseCatalog
from strength_coach.domains.workout.enums import (
    Difficulty,
    Equipment,
    EquipmentContext,
    IntensityTier,
    MovementPattern,
    MuscleGroup,
    WorkoutSlot,
)
from strength_coach.domains.workout.errors import InvalidOptionsError
from strength_coach.domains.workout.generator import (
    generate_minimal_dose_workout,
    generate_workout,
    resolve_slot_budget,
)
from strength_coach.domains.workout.models import PatternStrength
from strength_coach.domains.workout.schemas import GeneratorOptions, UserConstraints, UserProfile
from strength_coach.domains.workout.tuning import TuningConfig


@pytest.fixture
def generate(catalog: ExerciseCatalog, tuning: TuningConfig, now: datetime):
    """generate_workout bound to the packaged tables, a fixed clock and a seeded rng."""

    def _generate(options: GeneratorOptions, context, seed: int = 42, **kwargs):
        return generate_workout(
            options,
            context,
            catalog=catalog,
            tuning=tuning,
            rng=random.Random(seed),
            now=now,
            **kwargs,
        )

    return _generate


def _options(**overrides) -> GeneratorOptions:
    values = {"duration": 30, "equipment_context": EquipmentContext.MINIMAL}
    values.update(overrides)
    return GeneratorOptions(**values)


def test_fresh_beginner_minimal_thirty_minutes(generate, make_context, tuning: TuningConfig):
    template = generate(_options(), make_context(readiness_score=3))

    warmups = template.exercises_in_slot(WorkoutSlot.WARMUP)
    mains = template.exercises_in_slot(WorkoutSlot.MAIN)
    accessories = template.exercises_in_slot(WorkoutSlot.ACCESSORY)
    core = template.exercises_in_slot(WorkoutSlot.CORE)

    assert len(warmups) == 4
    assert all(we.exercise_id in tuning.general_warmups for we in warmups[:2])
    assert [we.exercise_id for we in mains] == ["inverted-row", "push-up"]
    assert [we.exercise_id for we in accessories] == ["incline-push-up", "bodyweight-squat"]
    assert len(core) == 1

    assert template.name == "Chest, Upper Back & Lats"
    assert template.intensity == IntensityTier.MODERATE
    assert template.estimated_duration == 30
    assert template.rationale[0] == "Targeting Chest, Upper Back, Lats based on your training balance."
    assert template.rationale[1] == "Prioritizing undertrained muscles: Chest, Upper Back."
    assert template.rationale[-1] == "Moderate intensity to match your current state."
    assert template.shortfalls == {}
    assert not template.is_minimal_dose


def test_every_exercise_fits_equipment_and_experience(generate, make_context, tuning: TuningConfig):
    template = generate(_options(), make_context())
    available = set(tuning.equipment_map[EquipmentContext.MINIMAL])

    for workout_exercise in template.exercises:
        assert set(workout_exercise.exercise.equipment) & available
        assert workout_exercise.exercise.difficulty == Difficulty.BEGINNER


def test_orders_are_contiguous_and_exercises_unique(generate, make_context, intermediate_profile: UserProfile):
    template = generate(
        _options(duration=60, equipment_context=EquipmentContext.GYM),
        make_context(profile=intermediate_profile),
    )

    assert [we.order for we in template.exercises] == list(range(len(template.exercises)))
    ids = [we.exercise_id for we in template.exercises]
    assert len(ids) == len(set(ids))
    assert len(ids) == 16


def test_same_seed_same_selection(generate, make_context):
    first = generate(_options(), make_context(), seed=5)
    second = generate(_options(), make_context(), seed=5)

    assert [we.exercise_id for we in first.exercises] == [we.exercise_id for we in second.exercises]


@pytest.mark.parametrize(
    ("requested", "readiness", "expected"),
    [
        (None, 4, IntensityTier.HARD),
        (None, 3, IntensityTier.MODERATE),
        (IntensityTier.HARD, 3, IntensityTier.MODERATE),
        (IntensityTier.HARD, 1, IntensityTier.LIGHT),
        (IntensityTier.LIGHT, 5, IntensityTier.LIGHT),
    ],
)
def test_intensity_follows_readiness(generate, make_context, requested, readiness: int, expected: IntensityTier):
    template = generate(_options(intensity=requested), make_context(readiness_score=readiness))
    assert template.intensity == expected


def test_low_readiness_rationale(generate, make_context):
    template = generate(_options(), make_context(readiness_score=2))

    assert template.intensity == IntensityTier.LIGHT
    assert "Reduced intensity due to lower readiness score." in template.rationale
    assert template.rationale[-1] == "Light intensity to match your current state."


def test_missing_readiness_uses_configured_default(generate, make_context):
    # default readiness 4 escalates a moderate request
    template = generate(_options(), make_context(readiness_score=None))
    assert template.intensity == IntensityTier.HARD


def test_explicit_target_muscles_override_ledger(generate, make_context):
    template = generate(_options(target_muscles=[MuscleGroup.QUADS]), make_context())

    assert template.name == "Quads Focus"
    mains = template.exercises_in_slot(WorkoutSlot.MAIN)
    assert MuscleGroup.QUADS in mains[0].exercise.primary_muscles


def test_exclusions_are_honoured(generate, make_context, beginner_profile: UserProfile):
    profile = beginner_profile.model_copy(
        update={"constraints": UserConstraints(excluded_exercises=["inverted-row"], excluded_movements=["lunge"])}
    )
    template = generate(_options(exclude_exercises=["push-up"]), make_context(profile=profile))

    ids = {we.exercise_id for we in template.exercises}
    assert not ids & {"push-up", "inverted-row"}
    assert all(we.exercise.movement_pattern != MovementPattern.LUNGE for we in template.exercises)


def test_unsupported_duration_falls_back(generate, make_context, tuning: TuningConfig):
    template = generate(_options(duration=25), make_context(), strict_duration=False)

    budget = tuning.slot_budgets[45]
    assert template.estimated_duration == 45
    assert len(template.exercises) == budget.total
    assert template.description.endswith("45-minute workout")


def test_unsupported_duration_strict_raises(generate, make_context):
    with pytest.raises(InvalidOptionsError, match="25"):
        generate(_options(duration=25), make_context(), strict_duration=True)


def test_resolve_slot_budget_supported(tuning: TuningConfig):
    duration, budget = resolve_slot_budget(60, tuning)
    assert duration == 60
    assert (budget.warmup, budget.main, budget.accessory, budget.core) == (6, 4, 4, 2)


def test_insufficient_catalog_records_shortfalls(make_exercise, make_context, tuning: TuningConfig, now: datetime):
    tiny = ExerciseCatalog([make_exercise("lonely-press")])

    template = generate_workout(
        _options(duration=20),
        make_context(),
        catalog=tiny,
        tuning=tuning,
        rng=random.Random(1),
        now=now,
    )

    assert [we.exercise_id for we in template.exercises] == ["lonely-press"]
    assert template.shortfalls == {
        WorkoutSlot.WARMUP: 3,
        WorkoutSlot.MAIN: 1,
        WorkoutSlot.ACCESSORY: 1,
        WorkoutSlot.CORE: 1,
    }


def test_empty_filtered_catalog_still_returns_template(generate, make_context, beginner_profile: UserProfile):
    profile = beginner_profile.model_copy(
        update={"constraints": UserConstraints(excluded_movements=[p.value for p in MovementPattern])}
    )
    template = generate(_options(), make_context(profile=profile))

    assert template.exercises == ()
    assert sum(template.shortfalls.values()) == 9


def test_template_carries_forward_history(generate, make_context):
    history = {
        "inverted-row": PatternStrength(
            exercise_id="inverted-row",
            last_weight=10.0,
            last_reps=10,
            last_rpe=7.0,
            estimated_one_rep_max=13.3,
            exposures=2,
        )
    }
    template = generate(_options(), make_context(pattern_strength=history))

    row = next(we for we in template.exercises if we.exercise_id == "inverted-row")
    assert row.target_weight == 10.0


def test_minimal_dose_workout(catalog: ExerciseCatalog, tuning: TuningConfig, make_context, now: datetime):
    template = generate_minimal_dose_workout(
        make_context(readiness_score=3),
        catalog=catalog,
        tuning=tuning,
        rng=random.Random(3),
        now=now,
    )

    assert template.is_minimal_dose
    assert template.estimated_duration == 20
    assert template.equipment_context == EquipmentContext.MINIMAL
    assert template.intensity == IntensityTier.MODERATE
    assert len(template.exercises) == tuning.slot_budgets[20].total
    assert all(Equipment.BODYWEIGHT in we.exercise.equipment for we in template.exercises)
