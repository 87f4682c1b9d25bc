"""Exercise catalog.

Static reference data: each exercise's muscle targets, movement pattern,
equipment alternatives, difficulty and default prescription. Loaded once
from YAML and read-only afterwards.

If the document is invalid → raises CatalogError.
"""

from collections.abc import Iterable
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from strength_coach.config.settings import settings
from strength_coach.domains.workout.enums import (
    Difficulty,
    Equipment,
    ExerciseCategory,
    MovementPattern,
    MuscleGroup,
)
from strength_coach.domains.workout.errors import CatalogError
from strength_coach.domains.workout.models import Exercise, RepRange

# Experience tier -> difficulties it may be prescribed (cumulative)
_ALLOWED_DIFFICULTIES: dict[Difficulty, frozenset[Difficulty]] = {
    Difficulty.BEGINNER: frozenset({Difficulty.BEGINNER}),
    Difficulty.INTERMEDIATE: frozenset({Difficulty.BEGINNER, Difficulty.INTERMEDIATE}),
    Difficulty.ADVANCED: frozenset({Difficulty.BEGINNER, Difficulty.INTERMEDIATE, Difficulty.ADVANCED}),
}

_REQUIRED_FIELDS = (
    "id",
    "name",
    "primary",
    "pattern",
    "equipment",
    "difficulty",
    "category",
    "sets",
    "reps",
    "rpe",
)


def allowed_difficulties(experience: Difficulty) -> frozenset[Difficulty]:
    """Difficulties an experience tier admits."""
    return _ALLOWED_DIFFICULTIES[Difficulty(experience)]


def _parse_exercise(entry: dict[str, Any]) -> Exercise:
    """Parse one catalog entry.

    Raises:
        CatalogError: If required fields are missing or values are invalid
    """
    if not isinstance(entry, dict):
        raise CatalogError(f"Catalog entry must be a mapping, got {type(entry).__name__}")

    for field_name in _REQUIRED_FIELDS:
        if field_name not in entry:
            raise CatalogError(f"Missing required field '{field_name}' in catalog entry {entry.get('id', '?')}")

    exercise_id = str(entry["id"])
    try:
        return Exercise(
            id=exercise_id,
            name=str(entry["name"]),
            primary_muscles=tuple(MuscleGroup(m) for m in entry["primary"]),
            secondary_muscles=tuple(MuscleGroup(m) for m in entry.get("secondary") or []),
            movement_pattern=MovementPattern(entry["pattern"]),
            equipment=tuple(Equipment(e) for e in entry["equipment"]),
            difficulty=Difficulty(entry["difficulty"]),
            category=ExerciseCategory(entry["category"]),
            default_sets=int(entry["sets"]),
            default_reps=RepRange.parse(str(entry["reps"])),
            default_rpe=float(entry["rpe"]),
            cues=tuple(str(c) for c in entry.get("cues") or []),
            variations=tuple(str(v) for v in entry.get("variations") or []),
            instructions=str(entry.get("instructions") or ""),
        )
    except (TypeError, ValueError) as e:
        raise CatalogError(f"Invalid catalog entry '{exercise_id}': {e}") from e


class ExerciseCatalog:
    """Read-only exercise catalog preserving document order.

    Iteration order is the tie-break order for every ranking built on the
    catalog, so it is kept stable.
    """

    def __init__(self, exercises: Iterable[Exercise]):
        self._exercises: tuple[Exercise, ...] = tuple(exercises)
        self._by_id: dict[str, Exercise] = {}
        for exercise in self._exercises:
            if exercise.id in self._by_id:
                raise CatalogError(f"Duplicate exercise id '{exercise.id}'")
            self._by_id[exercise.id] = exercise

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "ExerciseCatalog":
        """Build a catalog from a parsed YAML document with an 'exercises' list."""
        if not isinstance(data, dict) or not isinstance(data.get("exercises"), list):
            raise CatalogError("Catalog document must contain an 'exercises' list")
        return cls(_parse_exercise(entry) for entry in data["exercises"])

    def __len__(self) -> int:
        return len(self._exercises)

    def __iter__(self):
        return iter(self._exercises)

    def __contains__(self, exercise_id: object) -> bool:
        return exercise_id in self._by_id

    def get(self, exercise_id: str) -> Exercise | None:
        return self._by_id.get(exercise_id)

    def require(self, exercise_id: str) -> Exercise:
        """Look up an exercise that must exist.

        Raises:
            CatalogError: If the id is unknown
        """
        exercise = self._by_id.get(exercise_id)
        if exercise is None:
            raise CatalogError(f"Unknown exercise id '{exercise_id}'")
        return exercise

    def by_equipment(self, available: Iterable[Equipment]) -> list[Exercise]:
        """Exercises with at least one equipment alternative in the available set."""
        available_set = set(available)
        return [e for e in self._exercises if any(item in available_set for item in e.equipment)]

    def by_difficulty(self, experience: Difficulty) -> list[Exercise]:
        """Exercises an experience tier may be prescribed."""
        allowed = allowed_difficulties(experience)
        return [e for e in self._exercises if e.difficulty in allowed]

    def by_category(self, category: ExerciseCategory) -> list[Exercise]:
        return [e for e in self._exercises if e.category == category]


@lru_cache(maxsize=8)
def load_catalog(path: Path | None = None) -> ExerciseCatalog:
    """Load the exercise catalog from YAML (cached per path).

    Args:
        path: YAML file; defaults to settings.catalog_path

    Returns:
        ExerciseCatalog in document order

    Raises:
        CatalogError: If the file is missing or invalid
    """
    catalog_path = Path(path) if path is not None else settings.catalog_path
    if not catalog_path.exists():
        raise CatalogError(f"Exercise catalog missing: {catalog_path}")

    try:
        with catalog_path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid catalog YAML in {catalog_path}: {e}") from e

    catalog = ExerciseCatalog.from_mapping(data)
    logger.debug("Exercise catalog loaded", path=str(catalog_path), exercises=len(catalog))
    return catalog
