"""Tests for the exercise catalog.

Tests verify that the catalog:
- Loads the packaged YAML in document order
- Keeps primary and secondary muscles disjoint
- Filters by equipment (any-of) and cumulative difficulty
- Rejects malformed documents with CatalogError
"""

from pathlib import Path

import pytest

from strength_coach.domains.workout.catalog import ExerciseCatalog, allowed_difficulties, load_catalog
from strength_coach.domains.workout.enums import Difficulty, Equipment, ExerciseCategory, MuscleGroup
from strength_coach.domains.workout.errors import CatalogError
from strength_coach.domains.workout.models import RepRange


def _entry(**overrides) -> dict:
    entry = {
        "id": "test-press",
        "name": "Test Press",
        "primary": ["chest"],
        "secondary": ["triceps"],
        "pattern": "horizontal_push",
        "equipment": ["dumbbells"],
        "difficulty": "beginner",
        "category": "compound",
        "sets": 3,
        "reps": "8-12",
        "rpe": 7,
    }
    entry.update(overrides)
    return entry


def test_packaged_catalog_loads(catalog: ExerciseCatalog):
    assert len(catalog) > 50
    assert "push-up" in catalog
    push_up = catalog.require("push-up")
    assert push_up.primary_muscles == (MuscleGroup.CHEST,)
    assert push_up.default_reps == RepRange(8, 15)
    assert push_up.variations[:2] == ("incline-push-up", "diamond-push-up")


def test_packaged_catalog_muscles_disjoint(catalog: ExerciseCatalog):
    for exercise in catalog:
        assert not set(exercise.primary_muscles) & set(exercise.secondary_muscles), exercise.id


def test_packaged_catalog_ids_unique(catalog: ExerciseCatalog):
    ids = [e.id for e in catalog]
    assert len(ids) == len(set(ids))


def test_general_warmups_exist_in_catalog(catalog: ExerciseCatalog, tuning):
    for warmup_id in tuning.general_warmups:
        assert catalog.require(warmup_id).category == ExerciseCategory.WARMUP


def test_load_catalog_is_cached():
    assert load_catalog() is load_catalog()


def test_by_equipment_is_any_of(catalog: ExerciseCatalog):
    bodyweight_only = catalog.by_equipment([Equipment.BODYWEIGHT])
    ids = {e.id for e in bodyweight_only}

    assert "reverse-lunge" in ids  # bodyweight OR dumbbells OR kettlebells
    assert "goblet-squat" not in ids
    assert all(Equipment.BODYWEIGHT in e.equipment for e in bodyweight_only)


@pytest.mark.parametrize(
    ("experience", "expected"),
    [
        (Difficulty.BEGINNER, {Difficulty.BEGINNER}),
        (Difficulty.INTERMEDIATE, {Difficulty.BEGINNER, Difficulty.INTERMEDIATE}),
        (Difficulty.ADVANCED, {Difficulty.BEGINNER, Difficulty.INTERMEDIATE, Difficulty.ADVANCED}),
    ],
)
def test_allowed_difficulties_cumulative(experience: Difficulty, expected: set[Difficulty]):
    assert allowed_difficulties(experience) == expected


def test_by_difficulty_beginner_excludes_harder(catalog: ExerciseCatalog):
    beginner = catalog.by_difficulty(Difficulty.BEGINNER)
    assert beginner
    assert all(e.difficulty == Difficulty.BEGINNER for e in beginner)
    assert "pull-up" not in {e.id for e in beginner}


def test_by_category(catalog: ExerciseCatalog):
    core = catalog.by_category(ExerciseCategory.CORE)
    assert {"plank", "dead-bug"} <= {e.id for e in core}


def test_get_unknown_returns_none_and_require_raises(catalog: ExerciseCatalog):
    assert catalog.get("does-not-exist") is None
    with pytest.raises(CatalogError, match="does-not-exist"):
        catalog.require("does-not-exist")


def test_from_mapping_preserves_order():
    built = ExerciseCatalog.from_mapping(
        {"exercises": [_entry(id="b"), _entry(id="a"), _entry(id="c")]},
    )
    assert [e.id for e in built] == ["b", "a", "c"]


def test_packaged_catalog_iterates_in_document_order(catalog: ExerciseCatalog):
    ids = [e.id for e in catalog]

    assert ids[:3] == ["arm-circles", "leg-swings", "hip-circles"]
    assert len(ids) == len(catalog)


def test_from_mapping_single_rep_value():
    built = ExerciseCatalog.from_mapping({"exercises": [_entry(reps=10)]})
    assert built.require("test-press").default_reps == RepRange(10, 10)


def test_duplicate_ids_rejected():
    with pytest.raises(CatalogError, match="Duplicate"):
        ExerciseCatalog.from_mapping({"exercises": [_entry(), _entry()]})


def test_overlapping_muscles_rejected():
    with pytest.raises(CatalogError, match="both primary and secondary"):
        ExerciseCatalog.from_mapping({"exercises": [_entry(secondary=["chest"])]})


def test_missing_field_rejected():
    entry = _entry()
    del entry["pattern"]
    with pytest.raises(CatalogError, match="pattern"):
        ExerciseCatalog.from_mapping({"exercises": [entry]})


def test_unknown_muscle_rejected():
    with pytest.raises(CatalogError):
        ExerciseCatalog.from_mapping({"exercises": [_entry(primary=["pecs"])]})


def test_document_without_exercises_rejected():
    with pytest.raises(CatalogError):
        ExerciseCatalog.from_mapping({"items": []})


def test_load_catalog_missing_file(tmp_path: Path):
    with pytest.raises(CatalogError, match="missing"):
        load_catalog(tmp_path / "nope.yaml")


def test_load_catalog_invalid_yaml(tmp_path: Path):
    path = tmp_path / "broken.yaml"
    path.write_text("exercises: [\n  - id: a\n")
    with pytest.raises(CatalogError):
        load_catalog(path)


def test_load_catalog_from_custom_file(tmp_path: Path):
    path = tmp_path / "tiny.yaml"
    path.write_text(
        "exercises:\n"
        "  - id: wall-sit\n"
        "    name: Wall Sit\n"
        "    primary: [quads]\n"
        "    pattern: squat\n"
        "    equipment: [bodyweight]\n"
        "    difficulty: beginner\n"
        "    category: isolation\n"
        "    sets: 3\n"
        "    reps: 30-45\n"
        "    rpe: 6\n"
    )
    tiny = load_catalog(path)
    assert len(tiny) == 1
    assert tiny.require("wall-sit").secondary_muscles == ()
