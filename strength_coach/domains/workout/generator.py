"""Workout generation entry point.

Pipeline:
1. Resolve the slot budget for the requested duration
2. Filter the catalog (equipment, difficulty, exclusions)
3. Rank undertrained muscles and pick the session focus
4. Adjust intensity for readiness
5. Select exercises per slot
6. Assemble the template and rationale

The generator never touches storage: the caller hands it a GeneratorContext
snapshot and persists the returned template.
"""

import random
from datetime import datetime

from loguru import logger

from strength_coach.config.settings import settings
from strength_coach.domains.workout.assembler import assemble
from strength_coach.domains.workout.catalog import ExerciseCatalog, load_catalog
from strength_coach.domains.workout.enums import EquipmentContext, IntensityTier, WorkoutSlot
from strength_coach.domains.workout.errors import InvalidOptionsError
from strength_coach.domains.workout.models import GeneratorContext, SelectedExercises, WorkoutTemplate
from strength_coach.domains.workout.observability import GenerationStage, generation_scope, log_event, track_stage
from strength_coach.domains.workout.readiness import MAX_READINESS, MIN_READINESS, adjust_intensity
from strength_coach.domains.workout.schemas import GeneratorOptions
from strength_coach.domains.workout.selector import filter_candidates, select_exercises
from strength_coach.domains.workout.tuning import SlotBudget, TuningConfig, load_tuning
from strength_coach.domains.workout.volume_ledger import rank_undertrained_muscles

FOCUS_MUSCLE_LIMIT = 3
MINIMAL_DOSE_DURATION = 20


def resolve_slot_budget(
    duration: int,
    tuning: TuningConfig,
    strict: bool = False,
) -> tuple[int, SlotBudget]:
    """Slot budget for a duration, falling back to the default duration.

    Args:
        duration: Requested session length in minutes
        tuning: Tuning tables
        strict: Raise instead of falling back

    Returns:
        (duration the budget belongs to, budget)

    Raises:
        InvalidOptionsError: If strict and the duration has no budget
    """
    budget = tuning.budget_for(duration)
    if budget is not None:
        return duration, budget

    supported = sorted(tuning.slot_budgets)
    if strict:
        raise InvalidOptionsError(f"Unsupported session duration {duration}; supported: {supported}")

    logger.warning(
        "UNSUPPORTED_DURATION: using default slot budget",
        requested=duration,
        default=tuning.default_duration,
        supported=supported,
    )
    return tuning.default_duration, tuning.slot_budgets[tuning.default_duration]


def _resolve_readiness(readiness_score: int | None) -> int:
    if readiness_score is None:
        return settings.default_readiness_score
    if not MIN_READINESS <= readiness_score <= MAX_READINESS:
        clamped = max(MIN_READINESS, min(MAX_READINESS, readiness_score))
        logger.warning("Readiness score out of range, clamping", readiness=readiness_score, clamped=clamped)
        return clamped
    return readiness_score


def _shortfalls(selected: SelectedExercises, budget: SlotBudget) -> dict[WorkoutSlot, int]:
    filled = {
        WorkoutSlot.WARMUP: (len(selected.warmups), budget.warmup),
        WorkoutSlot.MAIN: (len(selected.mains), budget.main),
        WorkoutSlot.ACCESSORY: (len(selected.accessories), budget.accessory),
        WorkoutSlot.CORE: (len(selected.core), budget.core),
    }
    return {slot: wanted - got for slot, (got, wanted) in filled.items() if got < wanted}


def generate_workout(
    options: GeneratorOptions,
    context: GeneratorContext,
    *,
    catalog: ExerciseCatalog | None = None,
    tuning: TuningConfig | None = None,
    rng: random.Random | None = None,
    now: datetime | None = None,
    strict_duration: bool | None = None,
) -> WorkoutTemplate:
    """Generate a personalized workout template.

    Args:
        options: Request options (duration, equipment context, intensity, ...)
        context: Profile and history snapshot
        catalog: Exercise catalog (defaults to the packaged catalog)
        tuning: Tuning tables (defaults to the packaged tables)
        rng: Random source for warmup/core shuffles (seed it for reproducibility)
        now: Generation timestamp override
        strict_duration: Override settings.strict_duration_validation

    Returns:
        New, unlocked WorkoutTemplate. Slots the filtered catalog cannot fill
        are left short and listed in template.shortfalls.

    Raises:
        InvalidOptionsError: If strict duration validation rejects the duration
    """
    catalog = catalog if catalog is not None else load_catalog()
    tuning = tuning if tuning is not None else load_tuning()
    rng = rng or random.Random()
    strict = settings.strict_duration_validation if strict_duration is None else strict_duration

    profile = context.profile

    with generation_scope(profile.user_id):
        duration, budget = resolve_slot_budget(options.duration, tuning, strict=strict)
        readiness = _resolve_readiness(context.readiness_score)

        with track_stage(GenerationStage.FILTER) as meta:
            equipment = tuning.equipment_map.get(EquipmentContext(options.equipment_context), ())
            candidates = filter_candidates(
                catalog,
                equipment,
                profile.experience,
                excluded_ids={*options.exclude_exercises, *profile.constraints.excluded_exercises},
                excluded_patterns=profile.constraints.excluded_movements,
            )
            meta["candidates"] = len(candidates)

        with track_stage(GenerationStage.RANK) as meta:
            undertrained = rank_undertrained_muscles(context.muscle_volume, profile.training_days_per_week, tuning)
            focus_muscles = list(options.target_muscles) or undertrained[:FOCUS_MUSCLE_LIMIT]
            meta["focus"] = [m.value for m in focus_muscles]

        intensity = adjust_intensity(options.intensity or IntensityTier.MODERATE, readiness)

        with track_stage(GenerationStage.SELECT) as meta:
            selected = select_exercises(
                candidates,
                focus_muscles,
                budget,
                recent_exercises=set(context.recent_exercises),
                experience=profile.experience,
                general_warmup_ids=set(tuning.general_warmups),
                rng=rng,
                pattern_bonus=tuning.main_pattern_variety_bonus,
            )
            shortfalls = _shortfalls(selected, budget)
            if shortfalls:
                logger.warning(
                    "INSUFFICIENT_CATALOG: slots left under-filled",
                    equipment_context=str(options.equipment_context),
                    experience=str(profile.experience),
                    shortfalls={slot.value: missing for slot, missing in shortfalls.items()},
                )
            meta["shortfalls"] = sum(shortfalls.values())

        with track_stage(GenerationStage.ASSEMBLE) as meta:
            template = assemble(
                selected,
                focus_muscles,
                undertrained,
                intensity,
                readiness,
                duration,
                options.equipment_context,
                user_id=profile.user_id,
                pattern_strength=context.pattern_strength,
                tuning=tuning,
                now=now,
                is_minimal_dose=options.is_minimal_dose,
                shortfalls=shortfalls,
            )
            meta["template_id"] = template.id

        log_event(
            "workout_generated",
            template_id=template.id,
            duration=duration,
            intensity=intensity.value,
            requested_intensity=str(options.intensity) if options.intensity else None,
            readiness=readiness,
            exercises=len(template.exercises),
        )
    return template


def generate_minimal_dose_workout(
    context: GeneratorContext,
    **kwargs,
) -> WorkoutTemplate:
    """Generate a 20-minute, bodyweight-only, moderate session for low-motivation days.

    Keyword arguments are passed through to generate_workout.
    """
    options = GeneratorOptions(
        duration=MINIMAL_DOSE_DURATION,
        equipment_context=EquipmentContext.MINIMAL,
        intensity=IntensityTier.MODERATE,
        is_minimal_dose=True,
    )
    return generate_workout(options, context, **kwargs)
