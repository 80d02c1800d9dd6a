from pathlib import Path
from typing import Any, Callable

import pytest

from imagemaker.config import ImageSpec


@pytest.fixture
def make_spec(tmp_path: Path) -> Callable[..., ImageSpec]:
    """Factory for specs that write into the test's temporary directory.

    ``filename`` is joined onto ``tmp_path``, every other keyword goes to
    ImageSpec unchanged.
    """

    def _make(filename: str = "image.mha", **kwargs: Any) -> ImageSpec:
        return ImageSpec(output_volume=tmp_path / filename, **kwargs)

    return _make
