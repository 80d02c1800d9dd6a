"""structlog processors used by the imagemaker log formatters."""

import contextlib
import datetime
from pathlib import Path
from typing import Iterable, Optional

import numpy as np
import pytz
from structlog.types import EventDict, WrappedLogger


class _EventProcessor:
    """Base for processors that rewrite the event dict in place."""

    def __call__(
        self, logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        if not isinstance(event_dict, dict):
            msg = "event_dict must be a dictionary"
            raise TypeError(msg)
        return self.process(event_dict)

    def process(self, event_dict: EventDict) -> EventDict:
        raise NotImplementedError


class PathPrettifier(_EventProcessor):
    """Show paths below ``base_dir`` relative to it.

    Parameters
    ----------
    base_dir : Path, optional
        Directory paths are made relative to. Defaults to the working
        directory at construction time.
    """

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self.base_dir = base_dir or Path.cwd()

    def process(self, event_dict: EventDict) -> EventDict:
        for key, value in event_dict.items():
            if isinstance(value, Path):
                with contextlib.suppress(ValueError):
                    event_dict[key] = str(value.relative_to(self.base_dir))
        return event_dict


class CallPrettifier(_EventProcessor):
    """Fold the callsite keys into a single ``call`` entry.

    With ``concise=True`` the entry reads ``module.func:lineno``, otherwise
    it stays a dict, which suits the JSON log file.
    """

    KEYS = ("module", "func_name", "lineno")

    def __init__(self, concise: bool = True) -> None:
        self.concise = concise

    def process(self, event_dict: EventDict) -> EventDict:
        call = {key: event_dict.pop(key, "") for key in self.KEYS}
        event_dict["call"] = (
            "{module}.{func_name}:{lineno}".format(**call) if self.concise else call
        )
        return event_dict


class ZonedTimeStamper(_EventProcessor):
    """Add a ``timestamp`` in a pytz time zone (UTC unless told otherwise)."""

    def __init__(self, fmt: str = "%Y-%m-%dT%H:%M:%S%z", tz: str = "UTC") -> None:
        self.fmt = fmt
        self.tz = pytz.timezone(tz)

    def process(self, event_dict: EventDict) -> EventDict:
        event_dict["timestamp"] = datetime.datetime.now(self.tz).strftime(self.fmt)
        return event_dict


class NumpyValueConverter(_EventProcessor):
    """Turn numpy scalars and arrays into plain Python values.

    Fill pixels and buffer shapes are often logged straight from numpy,
    which the JSON renderer cannot serialize.
    """

    def process(self, event_dict: EventDict) -> EventDict:
        for key, value in event_dict.items():
            if isinstance(value, (np.ndarray, np.generic)):
                event_dict[key] = value.tolist()
        return event_dict


class ShapeFormatter(_EventProcessor):
    """Render integer sequences under ``keys`` as ``64x64x32``."""

    def __init__(self, keys: Iterable[str] = ("size", "shape")) -> None:
        self.keys = tuple(keys)

    def process(self, event_dict: EventDict) -> EventDict:
        for key in self.keys:
            value = event_dict.get(key)
            if isinstance(value, (list, tuple)) and value and all(
                isinstance(v, (int, np.integer)) for v in value
            ):
                event_dict[key] = "x".join(str(v) for v in value)
        return event_dict
