"""Serializers for the storage boundary.

Templates, strength state and the volume ledger cross the boundary as
structured JSON-compatible dicts. Nested objects must arrive as objects:
a JSON-encoded string in place of a sub-object fails validation.
"""

from typing import Any

from pydantic import StrictFloat, TypeAdapter

from strength_coach.domains.workout.enums import MuscleGroup
from strength_coach.domains.workout.models import PatternStrength, WorkoutTemplate

_template_adapter = TypeAdapter(WorkoutTemplate)
_pattern_strength_adapter = TypeAdapter(dict[str, PatternStrength])
_muscle_volume_adapter = TypeAdapter(dict[MuscleGroup, StrictFloat])


def serialize_template(template: WorkoutTemplate) -> dict[str, Any]:
    """Serialize a WorkoutTemplate to a JSON-serializable dict.

    Args:
        template: Template to serialize

    Returns:
        JSON-serializable dictionary (enums as values, datetime as ISO string)
    """
    return _template_adapter.dump_python(template, mode="json")


def deserialize_template(data: dict[str, Any]) -> WorkoutTemplate:
    """Rebuild a WorkoutTemplate from its serialized dict.

    Raises:
        pydantic.ValidationError: If the payload is malformed
    """
    return _template_adapter.validate_python(data)


def serialize_pattern_strength(pattern_strength: dict[str, PatternStrength]) -> dict[str, Any]:
    return _pattern_strength_adapter.dump_python(pattern_strength, mode="json")


def pattern_strength_from_payload(data: dict[str, Any]) -> dict[str, PatternStrength]:
    return _pattern_strength_adapter.validate_python(data)


def muscle_volume_from_payload(data: dict[str, Any]) -> dict[MuscleGroup, float]:
    """Validate a stored muscle-volume ledger.

    Keys must be muscle group values and values real numbers; numeric
    strings are rejected.

    Raises:
        pydantic.ValidationError: If the payload is malformed
    """
    return _muscle_volume_adapter.validate_python(data)
