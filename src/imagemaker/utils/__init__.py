from .timer_utils import StageTiming, timed_stage

__all__ = [
    "StageTiming",
    "timed_stage",
]
