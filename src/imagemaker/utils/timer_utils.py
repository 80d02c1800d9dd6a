from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator

from structlog.contextvars import bound_contextvars

from imagemaker.loggers import logger

__all__ = ["StageTiming", "timed_stage"]


@dataclass
class StageTiming:
    """Outcome of one timed stage.

    ``seconds`` is None while the stage is still running.
    """

    stage: str
    seconds: float | None = None
    failed: bool = False


@contextmanager
def timed_stage(stage: str, **context: Any) -> Iterator[StageTiming]:
    """
    Time one stage of making an image and log it on the way out.

    ``stage`` and every keyword in ``context`` are bound to the structlog
    context variables for the duration of the block, so each record logged
    inside the stage carries them. The closing ``"Stage finished."`` record
    adds ``seconds`` and ``failed``. Exceptions are re-raised untouched.

    Example
    -------
        with timed_stage("Filling", pixel_type="uint8") as timing:
            fill_buffer(buffer, pixel)
        timing.seconds
        # log: Stage finished.  stage=Filling pixel_type=uint8 seconds=0.0012
    """
    timing = StageTiming(stage)
    with bound_contextvars(stage=stage, **context):
        start = time.perf_counter()
        try:
            yield timing
        except BaseException:
            timing.failed = True
            raise
        finally:
            timing.seconds = time.perf_counter() - start
            logger.info(
                "Stage finished.",
                seconds=round(timing.seconds, 4),
                failed=timing.failed,
            )
