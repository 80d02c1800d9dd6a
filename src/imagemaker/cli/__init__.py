from typing import Callable, Dict

import click
from click.decorators import FC

from imagemaker.loggers import LOGGER_NAME, set_level

# -v, -vv on top of the IMAGEMAKER_LOG_LEVEL level
VERBOSITY_LEVELS: Dict[int, str] = {1: "INFO", 2: "DEBUG"}
_QUIET_KEY = "imagemaker.quiet"


def _apply_quiet(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if value:
        ctx.meta[_QUIET_KEY] = True
        set_level("ERROR", LOGGER_NAME)


def _apply_verbosity(ctx: click.Context, param: click.Parameter, value: int) -> None:
    if not value or ctx.meta.get(_QUIET_KEY):
        return
    set_level(VERBOSITY_LEVELS.get(value, "DEBUG"), LOGGER_NAME)


def verbosity_options() -> Callable[[FC], FC]:
    """
    Add ``-v/--verbose`` and ``-q/--quiet`` to a command.

    Without either flag the level comes from ``IMAGEMAKER_LOG_LEVEL``.
    ``-v`` logs INFO, ``-vv`` and more log DEBUG. ``-q`` keeps only errors
    and wins over any ``-v``. Neither value reaches the command function.
    """

    def decorator(func: FC) -> FC:
        func = click.option(
            "--verbose",
            "-v",
            count=True,
            expose_value=False,
            callback=_apply_verbosity,
            help="Log more: -v for INFO, -vv for DEBUG. Overrides IMAGEMAKER_LOG_LEVEL.",
        )(func)
        func = click.option(
            "--quiet",
            "-q",
            is_flag=True,
            is_eager=True,
            expose_value=False,
            callback=_apply_quiet,
            help="Only log errors. Wins over --verbose.",
        )(func)
        return func

    return decorator
