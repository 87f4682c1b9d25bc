"""Observability for the workout generation pipeline.

Every generation run is one `generation_id`; each stage logs start and
success/fail with its own duration, so a slow or failing stage can be read
straight off the log stream.
"""

import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from enum import StrEnum

from loguru import logger

LogValue = str | int | float | bool | list | dict | None

_ALLOWED_STATUSES = frozenset({"start", "success", "fail"})


class GenerationStage(StrEnum):
    """Generation pipeline stages, in execution order."""

    FILTER = "candidate_filter"
    RANK = "undertrained_rank"
    SELECT = "exercise_select"
    ASSEMBLE = "template_assemble"


def log_event(event: str, **fields: LogValue) -> None:
    """Log a structured engine event at INFO with fields as loguru extras."""
    logger.info(event, **fields)


def log_stage_event(
    stage: GenerationStage,
    status: str,
    template_id: str | None = None,
    meta: dict[str, LogValue] | None = None,
) -> None:
    """Log a stage transition at DEBUG.

    Args:
        stage: Generation stage
        status: "start", "success" or "fail"
        template_id: Template id for correlation, once known
        meta: Extra fields merged into the record

    Raises:
        ValueError: If status is not one of the allowed values
    """
    if status not in _ALLOWED_STATUSES:
        raise ValueError(f"Status must be one of {sorted(_ALLOWED_STATUSES)}, got: {status}")

    fields: dict[str, LogValue] = {"stage": stage.value, "status": status}
    if template_id:
        fields["template_id"] = template_id
    if meta:
        fields.update(meta)

    logger.debug("generation_stage", **fields)


@contextmanager
def timing(metric_name: str) -> Iterator[None]:
    """Log the wall time of the enclosed block as `generation_timing`, even on error."""
    start_time = time.monotonic()
    try:
        yield
    finally:
        logger.debug(
            "generation_timing",
            metric=metric_name,
            duration_seconds=time.monotonic() - start_time,
        )


@contextmanager
def track_stage(stage: GenerationStage) -> Iterator[dict[str, LogValue]]:
    """Wrap one pipeline stage in start/success/fail events and timing.

    Yields a dict the stage body fills with result fields (counts, ids);
    they are attached to the success event. A raised exception logs a
    fail event with the error type and propagates.
    """
    meta: dict[str, LogValue] = {}
    log_stage_event(stage, "start")
    with timing(f"generator.{stage.value}"):
        try:
            yield meta
        except Exception as e:
            log_stage_event(stage, "fail", meta={"error": type(e).__name__})
            raise
    template_id = meta.pop("template_id", None)
    log_stage_event(stage, "success", template_id=str(template_id) if template_id else None, meta=meta)


@contextmanager
def generation_scope(user_id: str) -> Iterator[str]:
    """Bind a fresh generation_id (and the user) to every log record in the block."""
    generation_id = uuid.uuid4().hex
    with logger.contextualize(generation_id=generation_id, user_id=user_id):
        yield generation_id
