"""Score a logged session into volume totals and a muscle-volume delta."""

from collections.abc import Iterable

from loguru import logger

from strength_coach.domains.workout.enums import MuscleGroup
from strength_coach.domains.workout.models import LoggedExercise, SessionScore

PRIMARY_SET_CREDIT = 1.0
SECONDARY_SET_CREDIT = 0.5


def score_session(logged_exercises: Iterable[LoggedExercise]) -> SessionScore:
    """Total a logged session.

    - total_volume: weight x reps over working (non-warmup) sets
    - total_sets: every logged set, warmups included
    - muscle_volume_delta: each working set credits 1.0 to primary and 0.5
      to secondary muscles; only credited muscles appear

    Args:
        logged_exercises: Performed exercises with their sets

    Returns:
        SessionScore ready for volume_ledger.apply_volume_delta
    """
    total_volume = 0.0
    total_sets = 0
    delta: dict[MuscleGroup, float] = {}

    for logged in logged_exercises:
        working_sets = [s for s in logged.sets if not s.is_warmup]
        total_sets += len(logged.sets)
        total_volume += sum(s.weight * s.reps for s in working_sets)

        if not working_sets:
            continue
        for muscle in logged.exercise.primary_muscles:
            delta[muscle] = delta.get(muscle, 0.0) + PRIMARY_SET_CREDIT * len(working_sets)
        for muscle in logged.exercise.secondary_muscles:
            delta[muscle] = delta.get(muscle, 0.0) + SECONDARY_SET_CREDIT * len(working_sets)

    logger.debug(
        "Session scored",
        total_volume=total_volume,
        total_sets=total_sets,
        muscles=len(delta),
    )
    return SessionScore(total_volume=total_volume, total_sets=total_sets, muscle_volume_delta=delta)
