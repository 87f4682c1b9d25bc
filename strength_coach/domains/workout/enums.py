"""Canonical enums for workout generation.

All enums are string-based to ensure JSON serialization compatibility
and alignment with the YAML catalog and tuning keys.
"""

from enum import StrEnum


# -----------------------------
# Anatomy
# -----------------------------
class MuscleGroup(StrEnum):
    """Muscle groups tracked by the volume ledger."""

    CHEST = "chest"
    FRONT_DELTS = "front_delts"
    SIDE_DELTS = "side_delts"
    REAR_DELTS = "rear_delts"
    TRICEPS = "triceps"
    BICEPS = "biceps"
    FOREARMS = "forearms"
    UPPER_BACK = "upper_back"
    LATS = "lats"
    LOWER_BACK = "lower_back"
    TRAPS = "traps"
    ABS = "abs"
    OBLIQUES = "obliques"
    QUADS = "quads"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"
    HIP_FLEXORS = "hip_flexors"
    ADDUCTORS = "adductors"


class MovementPattern(StrEnum):
    """Fundamental movement pattern of an exercise."""

    HORIZONTAL_PUSH = "horizontal_push"
    HORIZONTAL_PULL = "horizontal_pull"
    VERTICAL_PUSH = "vertical_push"
    VERTICAL_PULL = "vertical_pull"
    SQUAT = "squat"
    HINGE = "hinge"
    LUNGE = "lunge"
    CARRY = "carry"
    CORE = "core"
    ISOLATION = "isolation"


# -----------------------------
# Equipment
# -----------------------------
class Equipment(StrEnum):
    """Equipment categories a user can own."""

    FULL_GYM = "full_gym"
    BARBELL = "barbell"
    DUMBBELLS = "dumbbells"
    KETTLEBELLS = "kettlebells"
    MACHINES = "machines"
    CABLES = "cables"
    BANDS = "bands"
    BODYWEIGHT = "bodyweight"


class EquipmentContext(StrEnum):
    """Where the session happens; maps to an equipment list in the tuning tables."""

    GYM = "gym"
    HOME = "home"
    TRAVEL = "travel"
    MINIMAL = "minimal"


# -----------------------------
# Exercise classification
# -----------------------------
class Difficulty(StrEnum):
    """Exercise difficulty and user experience tier."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ExerciseCategory(StrEnum):
    """Role an exercise plays in a session."""

    COMPOUND = "compound"
    ISOLATION = "isolation"
    WARMUP = "warmup"
    CORE = "core"
    CARDIO = "cardio"
    MOBILITY = "mobility"


class WorkoutSlot(StrEnum):
    """Selection slot a prescribed exercise was chosen for."""

    WARMUP = "warmup"
    MAIN = "main"
    ACCESSORY = "accessory"
    CORE = "core"


# -----------------------------
# User intent
# -----------------------------
class TrainingGoal(StrEnum):
    """User's primary training goal."""

    STRENGTH = "strength"
    HYPERTROPHY = "hypertrophy"
    GENERAL_FITNESS = "general_fitness"


class IntensityTier(StrEnum):
    """Session intensity tier."""

    LIGHT = "light"
    MODERATE = "moderate"
    HARD = "hard"


# -----------------------------
# Progression
# -----------------------------
class StrengthTrend(StrEnum):
    """Trend of an exercise's estimated one-rep max."""

    IMPROVING = "improving"
    PLATEAU = "plateau"
    DECLINING = "declining"


class InterventionType(StrEnum):
    """Plateau-breaking interventions, in rotation order."""

    BACKOFF = "backoff"
    REP_CHANGE = "rep_change"
    VARIATION_SWAP = "variation_swap"
    DELOAD = "deload"
