"""Progressive overload and plateau handling.

Rules:
- Load goes up only after the top of the rep range is hit at RPE <= 8
- Missing the bottom of the range or grinding at RPE >= 9.5 holds the load
- A plateau is 4 exposures whose e1RM spread is under 2% of the mean
- Plateau interventions rotate by exposure count
"""

import statistics
from collections.abc import Sequence

from loguru import logger

from strength_coach.domains.workout.enums import InterventionType, StrengthTrend
from strength_coach.domains.workout.models import (
    Exercise,
    PatternStrength,
    PlateauAssessment,
    PlateauIntervention,
    ProgressionSuggestion,
    RepRange,
)

EPLEY_DIVISOR = 30
PROGRESSION_MAX_RPE = 8.0
GRIND_RPE = 9.5
HEAVY_LOAD_THRESHOLD = 100.0
HEAVY_INCREMENT = 5.0
LIGHT_INCREMENT = 2.5

PLATEAU_WINDOW = 4
PLATEAU_SPREAD_RATIO = 0.02

SET_AUTOREGULATION_MAX_RPE = 7.0
SET_INCREMENT = 5.0

_INTERVENTION_ROTATION = (
    InterventionType.BACKOFF,
    InterventionType.REP_CHANGE,
    InterventionType.VARIATION_SWAP,
    InterventionType.DELOAD,
)


def calculate_e1rm(weight: float, reps: int) -> float:
    """Estimated one-rep max (Epley: weight * (1 + reps / 30)).

    A single rep is already a max, so it returns the weight unchanged.
    Zero or negative reps carry no information and return 0.0.
    """
    if reps <= 0:
        return 0.0
    if reps == 1:
        return float(weight)
    return weight * (1 + reps / EPLEY_DIVISOR)


def suggest_next_weight(
    pattern_strength: PatternStrength,
    last_reps: int,
    last_rpe: float | None,
    target_reps: str,
) -> ProgressionSuggestion:
    """Recommend the load for the next exposure of an exercise.

    Args:
        pattern_strength: Current strength state (last_weight is the base)
        last_reps: Reps achieved on the last working set
        last_rpe: RPE of that set; None never triggers an increase
        target_reps: Target range, "min-max" or a single number

    Returns:
        ProgressionSuggestion with weight, unchanged target reps and rationale

    Raises:
        ValueError: If target_reps is not a rep range
    """
    rep_range = RepRange.parse(target_reps)
    current_weight = pattern_strength.last_weight or 0.0

    if last_rpe is not None and last_reps >= rep_range.maximum and last_rpe <= PROGRESSION_MAX_RPE:
        increase = HEAVY_INCREMENT if current_weight > HEAVY_LOAD_THRESHOLD else LIGHT_INCREMENT
        return ProgressionSuggestion(
            weight=current_weight + increase,
            reps=target_reps,
            rationale=(
                f"You hit {last_reps} reps at RPE {last_rpe:g}. "
                f"Time to increase weight by {increase:g}lbs."
            ),
        )

    if last_reps < rep_range.minimum or (last_rpe is not None and last_rpe >= GRIND_RPE):
        return ProgressionSuggestion(
            weight=current_weight,
            reps=target_reps,
            rationale="Maintaining weight to build strength at this load before progressing.",
        )

    return ProgressionSuggestion(
        weight=current_weight,
        reps=target_reps,
        rationale="Good progress! Continue building reps at current weight.",
    )


def detect_plateau(recent_e1rms: Sequence[float]) -> PlateauAssessment:
    """Flag a plateau when the last 4 e1RMs barely move.

    Uses the population standard deviation of the last 4 estimates relative
    to their mean. Fewer than 4 samples, or a non-positive mean, is never a
    plateau.
    """
    if len(recent_e1rms) < PLATEAU_WINDOW:
        return PlateauAssessment(is_plateau=False)

    window = list(recent_e1rms)[-PLATEAU_WINDOW:]
    mean = statistics.fmean(window)
    if mean <= 0:
        return PlateauAssessment(is_plateau=False)

    if statistics.pstdev(window) / mean < PLATEAU_SPREAD_RATIO:
        return PlateauAssessment(
            is_plateau=True,
            reason=f"e1RM has been flat at ~{round(mean)}lbs for {len(window)} sessions.",
        )
    return PlateauAssessment(is_plateau=False)


def generate_plateau_intervention(
    exercise: Exercise,
    pattern_strength: PatternStrength,
) -> PlateauIntervention:
    """Pick the next plateau-breaker in the rotation (exposures mod 4)."""
    intervention = _INTERVENTION_ROTATION[pattern_strength.exposures % len(_INTERVENTION_ROTATION)]

    if intervention == InterventionType.BACKOFF:
        return PlateauIntervention(
            type=intervention,
            description="Take a backoff set: reduce weight by 10-15% and do 2 extra reps.",
        )
    if intervention == InterventionType.REP_CHANGE:
        return PlateauIntervention(
            type=intervention,
            description="Switch rep scheme: if doing 5x5, try 3x8. Different stimulus same muscle.",
        )
    if intervention == InterventionType.VARIATION_SWAP:
        variations = tuple(exercise.variations[:2])
        return PlateauIntervention(
            type=intervention,
            description=f"Try a variation: {' or '.join(variations)}.",
            exercises=variations,
        )
    return PlateauIntervention(
        type=intervention,
        description="Mini-deload: reduce volume by 40% this week, then return to normal.",
    )


def classify_trend(e1rms: Sequence[float]) -> StrengthTrend:
    """Trend of recent e1RM estimates.

    - plateau if detect_plateau says so
    - otherwise compare the newest estimate with the oldest in the window
    - fewer than 2 samples counts as improving
    """
    if len(e1rms) < 2:
        return StrengthTrend.IMPROVING
    if detect_plateau(e1rms).is_plateau:
        return StrengthTrend.PLATEAU

    window = list(e1rms)[-PLATEAU_WINDOW:]
    if window[-1] > window[0]:
        return StrengthTrend.IMPROVING
    if window[-1] < window[0]:
        return StrengthTrend.DECLINING
    return StrengthTrend.PLATEAU


def update_pattern_strength(
    previous: PatternStrength | None,
    exercise_id: str,
    weight: float,
    reps: int,
    rpe: float | None,
    e1rm_history: Sequence[float] = (),
) -> PatternStrength:
    """Fold a newly logged working set into the strength state.

    Args:
        previous: Existing state, None on the first log of this exercise
        exercise_id: Catalog exercise id
        weight: Working weight of the set
        reps: Reps performed
        rpe: Reported RPE
        e1rm_history: Earlier e1RM estimates, oldest first (excluding this set)

    Returns:
        New PatternStrength with exposures incremented and trend recomputed
    """
    e1rm = calculate_e1rm(weight, reps)
    trend = classify_trend([*e1rm_history, e1rm])
    exposures = (previous.exposures if previous is not None else 0) + 1

    if previous is not None and trend != previous.trend:
        logger.info(
            "Strength trend changed",
            exercise_id=exercise_id,
            previous=previous.trend.value,
            current=trend.value,
            e1rm=round(e1rm, 1),
        )

    return PatternStrength(
        exercise_id=exercise_id,
        last_weight=weight,
        last_reps=reps,
        last_rpe=rpe,
        estimated_one_rep_max=e1rm,
        exposures=exposures,
        trend=trend,
    )


def suggest_next_set_weight(
    current_weight: float,
    reps: int,
    rpe: float | None,
    target_reps: str,
    is_warmup: bool = False,
) -> float:
    """In-session autoregulation between sets.

    An easy set (top of the range at RPE <= 7) bumps the next set by 5.
    Warmups and sets without an RPE never change the load.
    """
    if is_warmup or rpe is None:
        return current_weight
    if reps >= RepRange.parse(target_reps).maximum and rpe <= SET_AUTOREGULATION_MAX_RPE:
        return current_weight + SET_INCREMENT
    return current_weight
