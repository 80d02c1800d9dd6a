from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence, Tuple

import numpy as np
import SimpleITK as sitk

from imagemaker.coretypes.direction import Direction
from imagemaker.coretypes.pixel_types import PixelType
from imagemaker.exceptions import InvalidImageSpecError

__all__ = ["RasterImage"]


@dataclass
class RasterImage:
    """An in-memory raster buffer together with its physical geometry.

    The buffer is stored in numpy axis order, slowest axis first, i.e.
    ``(z, y, x)`` for a 3-D scalar image and ``(z, y, x, c)`` for a 3-D
    vector image. All geometry (``size``, ``spacing``, ``origin``,
    ``direction``) is expressed in ITK order, fastest axis first.

    Attributes
    ----------
    array : np.ndarray
        The raster buffer. Its dtype must match ``pixel_type``.
    pixel_type : PixelType
        Scalar kind and component count of each pixel.
    spacing : Tuple[float, ...]
        Physical distance between pixel centers along each axis.
    origin : Tuple[float, ...]
        Physical position of the first pixel.
    direction : Direction
        Orientation of the image axes in physical space.
    """

    array: np.ndarray
    pixel_type: PixelType
    spacing: Tuple[float, ...]
    origin: Tuple[float, ...]
    direction: Direction = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        self.spacing = tuple(float(s) for s in self.spacing)
        self.origin = tuple(float(o) for o in self.origin)
        dim = len(self.spacing)
        if self.direction is None:
            self.direction = Direction.identity(dim)
        elif not isinstance(self.direction, Direction):
            self.direction = Direction(tuple(self.direction))

        if len(self.origin) != dim or self.direction.dimension != dim:
            msg = (
                f"Geometry does not agree on a dimension: spacing has {dim} "
                f"values, origin has {len(self.origin)}, direction is "
                f"{self.direction.dimension}x{self.direction.dimension}."
            )
            raise InvalidImageSpecError(msg)

        expected_ndim = dim + (1 if self.pixel_type.is_vector else 0)
        if self.array.ndim != expected_ndim:
            msg = (
                f"A {dim}-D image of {self.pixel_type} pixels needs a "
                f"{expected_ndim}-D buffer, got {self.array.ndim}-D."
            )
            raise InvalidImageSpecError(msg)
        if (
            self.pixel_type.is_vector
            and self.array.shape[-1] != self.pixel_type.components
        ):
            msg = (
                f"Buffer holds {self.array.shape[-1]} components per pixel, "
                f"expected {self.pixel_type.components}."
            )
            raise InvalidImageSpecError(msg)
        if self.array.dtype != self.pixel_type.dtype:
            msg = (
                f"Buffer dtype {self.array.dtype} does not match pixel type "
                f"{self.pixel_type}."
            )
            raise InvalidImageSpecError(msg)

    @property
    def dimension(self) -> int:
        return len(self.spacing)

    @property
    def size(self) -> Tuple[int, ...]:
        """Number of pixels along each axis, fastest axis first."""
        return tuple(int(s) for s in reversed(self.array.shape[: self.dimension]))

    @property
    def number_of_components(self) -> int:
        return self.pixel_type.components

    @property
    def number_of_pixels(self) -> int:
        return math.prod(self.size)

    def pixel(self, index: Sequence[int]) -> Tuple:
        """Return the components of the pixel at an ITK-ordered index.

        Examples
        --------
        >>> image.pixel((0, 0, 0))
        (1.0, 2.0, 3.0)
        """
        if len(index) != self.dimension:
            msg = f"Index {tuple(index)} does not match a {self.dimension}-D image."
            raise IndexError(msg)
        value = self.array[tuple(reversed(tuple(index)))]
        return tuple(np.atleast_1d(value).tolist())

    def to_sitk(self) -> sitk.Image:
        """Copy the buffer into a SimpleITK image carrying the geometry.

        Raises
        ------
        ValueError
            For 1-D images, which SimpleITK cannot represent.
        """
        if self.dimension == 1:
            msg = "SimpleITK does not support 1-D images."
            raise ValueError(msg)
        image = sitk.GetImageFromArray(
            self.array, isVector=self.pixel_type.is_vector
        )
        image.SetSpacing(self.spacing)
        image.SetOrigin(self.origin)
        image.SetDirection(self.direction.matrix)
        return image

    def __repr__(self) -> str:
        return (
            f"RasterImage(size={self.size}, pixel_type={self.pixel_type}, "
            f"spacing={self.spacing}, origin={self.origin}, "
            f"direction={self.direction!r})"
        )
