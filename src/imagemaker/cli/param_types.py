from __future__ import annotations

import re
from typing import Any, Callable, List, Optional

import click

_SEPARATOR = re.compile(r"[,\s]+")


def _number(token: str) -> int | float:
    try:
        return int(token)
    except ValueError:
        return float(token)


class NumberList(click.ParamType):
    """A comma (or whitespace) separated list of numbers.

    ``"1,2,3"`` and ``"1 2 3"`` both give ``[1, 2, 3]``.
    """

    def __init__(self, cast: Callable[[str], Any], name: str) -> None:
        self.cast = cast
        self.name = name

    def convert(
        self,
        value: Any,
        param: Optional[click.Parameter],
        ctx: Optional[click.Context],
    ) -> List[Any]:
        if isinstance(value, (list, tuple)):
            return list(value)
        tokens = [t for t in _SEPARATOR.split(str(value).strip()) if t]
        if not tokens:
            self.fail("expected at least one value", param, ctx)
        try:
            return [self.cast(t) for t in tokens]
        except ValueError:
            self.fail(f"{value!r} is not a list of {self.name} values", param, ctx)


INT_LIST = NumberList(int, "integer")
FLOAT_LIST = NumberList(float, "float")
NUMBER_LIST = NumberList(_number, "number")
