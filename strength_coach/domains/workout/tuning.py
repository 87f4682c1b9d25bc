"""Tuning tables for workout generation.

Muscle targets, equipment maps and slot budgets are configuration data,
loaded from YAML and injected into each component. Tests substitute
alternate tables by building a TuningConfig from a plain mapping.

If the YAML is invalid → raises TuningConfigError.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

from strength_coach.config.settings import settings
from strength_coach.domains.workout.enums import Equipment, EquipmentContext, IntensityTier, MuscleGroup
from strength_coach.domains.workout.errors import TuningConfigError


@dataclass(frozen=True)
class MuscleTarget:
    """Weekly effective-set target range at the reference training frequency."""

    min: float
    max: float


@dataclass(frozen=True)
class SlotBudget:
    """Number of exercises per slot for one session duration."""

    warmup: int
    main: int
    accessory: int
    core: int

    @property
    def total(self) -> int:
        return self.warmup + self.main + self.accessory + self.core


@dataclass(frozen=True)
class TuningConfig:
    """Immutable tuning tables.

    Attributes:
        muscle_targets: Weekly target per muscle, in ranking tie-break order
        equipment_map: Equipment available in each equipment context
        slot_budgets: Duration in minutes -> slot budget
        default_duration: Duration whose budget is used for unsupported durations
        general_warmups: Ids of generic warmups mixed into every session
        intensity_multipliers: Tier -> sets/RPE multiplier
        rest_multipliers: Tier -> rest multiplier
        reference_training_days: Weekly frequency the muscle targets assume
        main_pattern_variety_bonus: Score bonus for a main whose pattern is not yet chosen
    """

    muscle_targets: dict[MuscleGroup, MuscleTarget]
    equipment_map: dict[EquipmentContext, tuple[Equipment, ...]]
    slot_budgets: dict[int, SlotBudget]
    default_duration: int
    general_warmups: tuple[str, ...]
    intensity_multipliers: dict[IntensityTier, float]
    rest_multipliers: dict[IntensityTier, float]
    reference_training_days: int = 4
    main_pattern_variety_bonus: float = 0.0

    def budget_for(self, duration: int) -> SlotBudget | None:
        """Return the slot budget for a supported duration, else None."""
        return self.slot_budgets.get(duration)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "TuningConfig":
        """Build tuning tables from a parsed YAML mapping.

        Raises:
            TuningConfigError: If a table is missing or holds unknown keys
        """
        if not isinstance(data, dict):
            raise TuningConfigError("Tuning document must be a mapping")

        for key in ("muscle_targets", "equipment_map", "slot_budgets", "intensity_multipliers", "rest_multipliers"):
            if not isinstance(data.get(key), dict):
                raise TuningConfigError(f"Missing or invalid tuning table '{key}'")

        try:
            muscle_targets = {
                MuscleGroup(muscle): MuscleTarget(min=float(target["min"]), max=float(target["max"]))
                for muscle, target in data["muscle_targets"].items()
            }
            equipment_map = {
                EquipmentContext(context): tuple(Equipment(item) for item in items)
                for context, items in data["equipment_map"].items()
            }
            slot_budgets = {
                int(duration): SlotBudget(
                    warmup=int(budget["warmup"]),
                    main=int(budget["main"]),
                    accessory=int(budget["accessory"]),
                    core=int(budget["core"]),
                )
                for duration, budget in data["slot_budgets"].items()
            }
            intensity_multipliers = {
                IntensityTier(tier): float(value) for tier, value in data["intensity_multipliers"].items()
            }
            rest_multipliers = {IntensityTier(tier): float(value) for tier, value in data["rest_multipliers"].items()}
            default_duration = int(data.get("default_duration", 45))
            reference_training_days = int(data.get("reference_training_days", 4))
            variety_bonus = float(data.get("main_pattern_variety_bonus", 0.0))
        except (KeyError, TypeError, ValueError) as e:
            raise TuningConfigError(f"Invalid tuning value: {e}") from e

        missing_tiers = set(IntensityTier) - set(intensity_multipliers) | set(IntensityTier) - set(rest_multipliers)
        if missing_tiers:
            raise TuningConfigError(f"Multipliers missing for tiers: {sorted(missing_tiers)}")

        if default_duration not in slot_budgets:
            raise TuningConfigError(f"Default duration {default_duration} has no slot budget")

        if reference_training_days <= 0:
            raise TuningConfigError("reference_training_days must be positive")

        return cls(
            muscle_targets=muscle_targets,
            equipment_map=equipment_map,
            slot_budgets=slot_budgets,
            default_duration=default_duration,
            general_warmups=tuple(str(item) for item in data.get("general_warmups", [])),
            intensity_multipliers=intensity_multipliers,
            rest_multipliers=rest_multipliers,
            reference_training_days=reference_training_days,
            main_pattern_variety_bonus=variety_bonus,
        )


@lru_cache(maxsize=8)
def load_tuning(path: Path | None = None) -> TuningConfig:
    """Load tuning tables from YAML (cached per path).

    Args:
        path: YAML file; defaults to settings.tuning_path

    Returns:
        Parsed TuningConfig

    Raises:
        TuningConfigError: If the file is missing or invalid
    """
    tuning_path = Path(path) if path is not None else settings.tuning_path
    if not tuning_path.exists():
        raise TuningConfigError(f"Tuning file missing: {tuning_path}")

    try:
        with tuning_path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise TuningConfigError(f"Invalid tuning YAML in {tuning_path}: {e}") from e

    tuning = TuningConfig.from_mapping(data)
    logger.debug(
        "Tuning tables loaded",
        path=str(tuning_path),
        durations=sorted(tuning.slot_budgets),
        muscles=len(tuning.muscle_targets),
    )
    return tuning
