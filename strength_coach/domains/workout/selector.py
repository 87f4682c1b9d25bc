"""Exercise selection for a single session.

Candidates are filtered deterministically BEFORE scoring:
1. equipment - any-of against the equipment context
2. difficulty - cumulative by experience tier
3. exclusions - request exclusions plus profile constraints

Slots are then filled in order:
- warmups: up to two general warmups plus focus-specific ones (shuffled)
- mains: compounds ranked by relevance score
- accessories: isolations and beginner compounds ranked at 0.8x
- core: core exercises (shuffled)

Shuffles go through the injected random.Random so tests can seed them.
A slot the filtered catalog cannot fill is left short.
"""

import random
from collections.abc import Collection, Iterable, Sequence

from loguru import logger

from strength_coach.domains.workout.catalog import ExerciseCatalog, allowed_difficulties
from strength_coach.domains.workout.enums import (
    Difficulty,
    Equipment,
    ExerciseCategory,
    MovementPattern,
    MuscleGroup,
)
from strength_coach.domains.workout.models import Exercise, SelectedExercises
from strength_coach.domains.workout.tuning import SlotBudget

PRIMARY_MATCH_POINTS = 10
SECONDARY_MATCH_POINTS = 3
COMPOUND_POINTS = 5
NOVELTY_POINTS = 3
DIFFICULTY_MATCH_POINTS = 2
ACCESSORY_WEIGHT = 0.8
MAX_GENERAL_WARMUPS = 2


def score_exercise(
    exercise: Exercise,
    focus_muscles: Collection[MuscleGroup],
    recent_exercises: Collection[str],
    experience: Difficulty | None = None,
) -> int:
    """Relevance of an exercise to this session.

    score = 10 per primary muscle in focus
          +  3 per secondary muscle in focus
          +  5 if compound
          +  3 if not performed recently
          +  2 if difficulty equals the user's experience

    Args:
        exercise: Candidate exercise
        focus_muscles: Muscles this session prioritizes
        recent_exercises: Recently performed exercise ids
        experience: User's experience tier; None skips the difficulty bonus

    Returns:
        Integer relevance score
    """
    focus = set(focus_muscles)
    score = PRIMARY_MATCH_POINTS * sum(1 for m in exercise.primary_muscles if m in focus)
    score += SECONDARY_MATCH_POINTS * sum(1 for m in exercise.secondary_muscles if m in focus)
    if exercise.category == ExerciseCategory.COMPOUND:
        score += COMPOUND_POINTS
    if exercise.id not in recent_exercises:
        score += NOVELTY_POINTS
    if experience is not None and exercise.difficulty == experience:
        score += DIFFICULTY_MATCH_POINTS
    return score


def filter_candidates(
    exercises: Iterable[Exercise],
    available_equipment: Collection[Equipment],
    experience: Difficulty,
    excluded_ids: Collection[str] = (),
    excluded_patterns: Collection[str] = (),
) -> list[Exercise]:
    """Apply the equipment, difficulty and exclusion filters (order preserved)."""
    allowed = allowed_difficulties(experience)
    excluded_pattern_set = {str(p) for p in excluded_patterns}
    return [
        e
        for e in exercises
        if any(item in available_equipment for item in e.equipment)
        and e.difficulty in allowed
        and e.id not in excluded_ids
        and e.movement_pattern.value not in excluded_pattern_set
    ]


def _shuffled(items: Sequence[Exercise], rng: random.Random) -> list[Exercise]:
    shuffled = list(items)
    rng.shuffle(shuffled)
    return shuffled


def _targets_focus(exercise: Exercise, focus: set[MuscleGroup]) -> bool:
    return any(m in focus for m in exercise.primary_muscles) or any(m in focus for m in exercise.secondary_muscles)


def select_warmups(
    candidates: Sequence[Exercise],
    focus_muscles: Collection[MuscleGroup],
    count: int,
    general_warmup_ids: Collection[str],
    rng: random.Random,
) -> list[Exercise]:
    """Pick up to two general warmups, then fill with focus-specific ones."""
    if count <= 0:
        return []

    focus = set(focus_muscles)
    warmups = [e for e in candidates if e.category == ExerciseCategory.WARMUP]
    general = [e for e in warmups if e.id in general_warmup_ids]
    specific = [e for e in warmups if e.id not in general_warmup_ids and _targets_focus(e, focus)]

    selected = _shuffled(general, rng)[: min(MAX_GENERAL_WARMUPS, count)]
    remaining = count - len(selected)
    selected.extend(_shuffled(specific, rng)[:remaining])
    return selected[:count]


def _greedy_rank(
    scored: list[tuple[Exercise, float]],
    count: int,
    pattern_bonus: float,
) -> list[Exercise]:
    """Take the best `count` candidates; ties keep input order.

    A candidate whose movement pattern is not yet chosen gets pattern_bonus
    added for that pick. With a zero bonus this is a plain stable top-N.
    """
    remaining = list(scored)
    used_patterns: set[MovementPattern] = set()
    selected: list[Exercise] = []

    while remaining and len(selected) < count:
        best_index = 0
        best_score = float("-inf")
        for index, (exercise, score) in enumerate(remaining):
            adjusted = score + (pattern_bonus if exercise.movement_pattern not in used_patterns else 0.0)
            if adjusted > best_score:
                best_index = index
                best_score = adjusted
        exercise, _ = remaining.pop(best_index)
        selected.append(exercise)
        used_patterns.add(exercise.movement_pattern)

    return selected


def select_mains(
    candidates: Sequence[Exercise],
    focus_muscles: Collection[MuscleGroup],
    count: int,
    recent_exercises: Collection[str],
    experience: Difficulty,
    pattern_bonus: float = 0.0,
) -> list[Exercise]:
    """Rank compounds by relevance and take the top `count`."""
    compounds = [e for e in candidates if e.category == ExerciseCategory.COMPOUND]
    scored = [(e, float(score_exercise(e, focus_muscles, recent_exercises, experience))) for e in compounds]
    return _greedy_rank(scored, count, pattern_bonus)


def select_accessories(
    candidates: Sequence[Exercise],
    focus_muscles: Collection[MuscleGroup],
    count: int,
    recent_exercises: Collection[str],
    already_selected: Collection[str] = (),
) -> list[Exercise]:
    """Rank isolations and beginner compounds at 0.8x and take the top `count`.

    Exercises already chosen for another slot are skipped. No experience
    bonus applies to accessories.
    """
    accessories = [
        e
        for e in candidates
        if e.id not in already_selected
        and (
            e.category == ExerciseCategory.ISOLATION
            or (e.category == ExerciseCategory.COMPOUND and e.difficulty == Difficulty.BEGINNER)
        )
    ]
    scored = [(e, score_exercise(e, focus_muscles, recent_exercises) * ACCESSORY_WEIGHT) for e in accessories]
    return _greedy_rank(scored, count, 0.0)


def select_core(candidates: Sequence[Exercise], count: int, rng: random.Random) -> list[Exercise]:
    """Uniformly random core exercises, no scoring."""
    if count <= 0:
        return []
    core = [e for e in candidates if e.category == ExerciseCategory.CORE]
    return _shuffled(core, rng)[:count]


def select_exercises(
    candidates: Sequence[Exercise],
    focus_muscles: Sequence[MuscleGroup],
    budget: SlotBudget,
    *,
    recent_exercises: Collection[str],
    experience: Difficulty,
    general_warmup_ids: Collection[str],
    rng: random.Random,
    pattern_bonus: float = 0.0,
) -> SelectedExercises:
    """Fill every slot of the budget from pre-filtered candidates.

    Args:
        candidates: Exercises that passed filter_candidates
        focus_muscles: Muscles this session prioritizes
        budget: Slot budget for the session duration
        recent_exercises: Recently performed exercise ids
        experience: User's experience tier
        general_warmup_ids: Ids of generic warmups
        rng: Random source for warmup and core shuffles
        pattern_bonus: Movement-pattern variety bonus for mains

    Returns:
        SelectedExercises per slot (slots may be shorter than the budget)
    """
    warmups = select_warmups(candidates, focus_muscles, budget.warmup, general_warmup_ids, rng)
    mains = select_mains(candidates, focus_muscles, budget.main, recent_exercises, experience, pattern_bonus)
    accessories = select_accessories(
        candidates,
        focus_muscles,
        budget.accessory,
        recent_exercises,
        already_selected={e.id for e in mains},
    )
    core = select_core(candidates, budget.core, rng)

    logger.debug(
        "Exercises selected",
        warmups=[e.id for e in warmups],
        mains=[e.id for e in mains],
        accessories=[e.id for e in accessories],
        core=[e.id for e in core],
    )

    return SelectedExercises(
        warmups=tuple(warmups),
        mains=tuple(mains),
        accessories=tuple(accessories),
        core=tuple(core),
    )


def find_substitute(
    exercise: Exercise,
    catalog: ExerciseCatalog,
    available_equipment: Collection[Equipment],
    exclude_ids: Collection[str] = (),
) -> Exercise | None:
    """Find a replacement for an exercise the user cannot or will not do.

    Preference order:
    1. Same movement pattern and at least one shared primary muscle,
       scored 2 (same difficulty) + 2 (same category) + shared primary count
    2. Any exercise sharing a primary muscle (first in catalog order)

    Args:
        exercise: Exercise to replace
        catalog: Exercise catalog
        available_equipment: Equipment the user has right now
        exclude_ids: Ids that must not be suggested

    Returns:
        Best substitute, or None if nothing shares a primary muscle
    """
    primary = set(exercise.primary_muscles)

    def usable(candidate: Exercise) -> bool:
        return (
            candidate.id != exercise.id
            and candidate.id not in exclude_ids
            and any(m in primary for m in candidate.primary_muscles)
            and any(item in available_equipment for item in candidate.equipment)
        )

    same_muscle = [c for c in catalog if usable(c)]
    same_pattern = [c for c in same_muscle if c.movement_pattern == exercise.movement_pattern]

    if not same_pattern:
        return same_muscle[0] if same_muscle else None

    def similarity(candidate: Exercise) -> int:
        return (
            (2 if candidate.difficulty == exercise.difficulty else 0)
            + (2 if candidate.category == exercise.category else 0)
            + sum(1 for m in candidate.primary_muscles if m in primary)
        )

    return max(same_pattern, key=similarity)
