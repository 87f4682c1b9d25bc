"""Weekly muscle volume ledger.

Effective sets per muscle over the rolling week, compared against the
weekly targets from the tuning tables. The ledger itself is persisted by
the storage layer; this module only ranks it and merges session deltas.
"""

from collections.abc import Mapping

from strength_coach.domains.workout.enums import MuscleGroup
from strength_coach.domains.workout.tuning import TuningConfig, load_tuning


def create_empty_muscle_volume() -> dict[MuscleGroup, float]:
    """Ledger with every muscle at zero effective sets."""
    return {muscle: 0.0 for muscle in MuscleGroup}


def weekly_target(
    muscle: MuscleGroup,
    training_days_per_week: int,
    tuning: TuningConfig | None = None,
) -> float:
    """Minimum weekly effective sets for a muscle at the given frequency.

    The target table assumes the reference split (4 days); fewer days scale
    the minimum down linearly, more days scale it up.
    """
    tuning = tuning or load_tuning()
    target = tuning.muscle_targets[muscle]
    return target.min * training_days_per_week / tuning.reference_training_days


def rank_undertrained_muscles(
    volume: Mapping[MuscleGroup, float],
    training_days_per_week: int,
    tuning: TuningConfig | None = None,
) -> list[MuscleGroup]:
    """Rank muscles below their adjusted weekly minimum, biggest deficit first.

    Muscles absent from the ledger count as zero sets. Muscles at or above
    the adjusted minimum are excluded. Equal deficits keep the target table
    order.

    Args:
        volume: Effective sets per muscle this week
        training_days_per_week: User's weekly training frequency
        tuning: Tuning tables (defaults to the loaded tables)

    Returns:
        Undertrained muscles ordered by descending deficit
    """
    tuning = tuning or load_tuning()

    deficits: list[tuple[MuscleGroup, float]] = []
    for muscle in tuning.muscle_targets:
        adjusted_min = weekly_target(muscle, training_days_per_week, tuning)
        recorded = float(volume.get(muscle, 0.0))
        if recorded < adjusted_min:
            deficits.append((muscle, adjusted_min - recorded))

    deficits.sort(key=lambda item: item[1], reverse=True)
    return [muscle for muscle, _ in deficits]


def apply_volume_delta(
    volume: Mapping[MuscleGroup, float],
    delta: Mapping[MuscleGroup, float],
) -> dict[MuscleGroup, float]:
    """Merge a session's effective sets into the weekly ledger.

    Within a week the ledger only grows; resetting at the week boundary is
    the storage layer's job.

    Returns:
        New ledger mapping (inputs are not modified)

    Raises:
        ValueError: If any delta is negative
    """
    negative = {muscle: sets for muscle, sets in delta.items() if sets < 0}
    if negative:
        raise ValueError(f"Volume deltas must be non-negative: {negative}")

    merged = dict(volume)
    for muscle, sets in delta.items():
        merged[muscle] = merged.get(muscle, 0.0) + sets
    return merged
