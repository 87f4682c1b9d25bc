"""Domain-specific errors for workout generation.

Only caller and configuration mistakes raise. A catalog that cannot fill a
slot is not an error: the slot is left short and recorded on the template.
"""


class WorkoutEngineError(Exception):
    """Base exception for all workout engine errors."""

    pass


class InvalidOptionsError(WorkoutEngineError):
    """Raised when generator options are unusable (e.g., unsupported duration in strict mode)."""

    pass


class CatalogError(WorkoutEngineError):
    """Raised when the exercise catalog is missing, malformed, or lacks a requested id."""

    pass


class TuningConfigError(WorkoutEngineError):
    """Raised when the tuning tables cannot be loaded or fail validation."""

    pass
