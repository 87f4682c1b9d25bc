"""Readiness-based intensity adjustment.

A small deterministic decision table: poor recovery forces a light session,
good recovery escalates a moderate request, marginal recovery de-escalates a
hard request. Everything else passes through.
"""

import math

from strength_coach.domains.workout.enums import IntensityTier
from strength_coach.domains.workout.schemas import ReadinessCheck

MIN_READINESS = 1
MAX_READINESS = 5


def adjust_intensity(requested: IntensityTier, readiness: int) -> IntensityTier:
    """Resolve the session intensity for a readiness score.

    Rules (in order):
    - readiness <= 2 → light, whatever was requested
    - readiness >= 4 and moderate requested → hard
    - readiness <= 3 and hard requested → moderate
    - otherwise → requested

    Args:
        requested: Tier the user asked for
        readiness: 1-5 readiness score

    Returns:
        Adjusted intensity tier
    """
    requested = IntensityTier(requested)
    if readiness <= 2:
        return IntensityTier.LIGHT
    if readiness >= 4 and requested == IntensityTier.MODERATE:
        return IntensityTier.HARD
    if readiness <= 3 and requested == IntensityTier.HARD:
        return IntensityTier.MODERATE
    return requested


def compute_readiness_score(check: ReadinessCheck) -> int:
    """Composite 1-5 readiness from a daily self-report.

    Soreness and stress are inverted (5 = very sore → 1) before averaging the
    four signals; the mean is rounded half-up.
    """
    signals = (
        check.sleep_quality,
        check.energy_level,
        MAX_READINESS + 1 - check.soreness,
        MAX_READINESS + 1 - check.stress_level,
    )
    mean = sum(signals) / len(signals)
    score = math.floor(mean + 0.5)
    return max(MIN_READINESS, min(MAX_READINESS, score))
