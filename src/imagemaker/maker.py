"""
Make a blank image volume from an ImageSpec.

The work is three strictly sequential steps:

1. Constructing: resolve the pixel type and allocate the raster buffer.
2. Filling: build one representative pixel and broadcast it to every
   spatial position.
3. Writing: hand the image to an ImageFileWriter.

Every error is raised to the caller. The command line turns them into a
non-zero exit status.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Sequence, Tuple

import numpy as np

from imagemaker.config import ImageSpec
from imagemaker.coretypes import PixelType, RasterImage
from imagemaker.exceptions import FillValueError, ImageAllocationError
from imagemaker.io.writers import ImageFileWriter
from imagemaker.loggers import logger
from imagemaker.utils import timed_stage

__all__ = [
    "allocate_buffer",
    "representative_pixel",
    "fill_buffer",
    "make_image",
    "write_image",
    "make_image_file",
]


def allocate_buffer(size: Sequence[int], pixel_type: PixelType) -> np.ndarray:
    """Allocate an uninitialized raster buffer.

    Parameters
    ----------
    size : Sequence[int]
        Pixels per axis, fastest axis first.
    pixel_type : PixelType
        Decides the dtype and whether a trailing component axis is added.

    Raises
    ------
    ImageAllocationError
        If numpy cannot allocate the buffer, either because memory runs
        out or because the byte count overflows.
    """
    shape: Tuple[int, ...] = tuple(int(s) for s in reversed(size))
    if pixel_type.is_vector:
        shape += (pixel_type.components,)
    try:
        return np.empty(shape, dtype=pixel_type.dtype)
    except (MemoryError, ValueError) as e:
        nbytes = math.prod(shape) * pixel_type.dtype.itemsize
        msg = (
            f"Cannot allocate a buffer of {nbytes} bytes for a "
            f"{'x'.join(str(s) for s in size)} image of {pixel_type} pixels: {e}"
        )
        raise ImageAllocationError(msg) from e


def representative_pixel(
    fill_values: Sequence[int | float], pixel_type: PixelType
) -> np.ndarray:
    """Build the pixel every position of the image receives.

    Component ``c`` is ``fill_values[c % len(fill_values)]``. Integer kinds
    truncate fractional values toward zero.

    Raises
    ------
    FillValueError
        If there are no fill values, or a value is NaN, infinite or out of
        range for an integer kind.
    """
    if len(fill_values) == 0:
        msg = "At least one fill value is required."
        raise FillValueError(msg)

    values = [
        fill_values[c % len(fill_values)] for c in range(pixel_type.components)
    ]
    if pixel_type.scalar_type.is_integer:
        info = np.iinfo(pixel_type.dtype)
        converted = []
        for value in values:
            if not math.isfinite(value):
                msg = f"Fill value {value} cannot be stored as {pixel_type.scalar_type.value}."
                raise FillValueError(msg)
            truncated = math.trunc(value)
            if not info.min <= truncated <= info.max:
                msg = (
                    f"Fill value {value} is outside the range of "
                    f"{pixel_type.scalar_type.value} [{info.min}, {info.max}]."
                )
                raise FillValueError(msg)
            converted.append(truncated)
        values = converted
    return np.array(values, dtype=pixel_type.dtype)


def fill_buffer(buffer: np.ndarray, pixel: np.ndarray) -> None:
    """Write ``pixel`` to every spatial position of ``buffer`` in place."""
    if pixel.size == 1:
        buffer.fill(pixel[0])
    else:
        buffer[...] = pixel


def make_image(spec: ImageSpec) -> RasterImage:
    """Construct and fill the image described by ``spec``.

    Raises
    ------
    UnknownComponentTypeError
        If the spec's scalar type is not supported. Nothing is allocated.
    FillValueError
        If a fill value does not fit the scalar type.
    ImageAllocationError
        If the buffer cannot be allocated.
    """
    pixel_type = spec.pixel_type
    pixel = representative_pixel(spec.fill_value, pixel_type)

    with timed_stage("Constructing", pixel_type=str(pixel_type)):
        logger.info("Constructing image.", dimension=spec.dimension, size=spec.size)
        buffer = allocate_buffer(spec.size, pixel_type)
        image = RasterImage(
            array=buffer,
            pixel_type=pixel_type,
            spacing=tuple(spec.spacing),
            origin=tuple(spec.origin),
            direction=spec.direction_matrix,
        )

    with timed_stage("Filling", pixel_type=str(pixel_type)):
        logger.debug("Filling image.", pixel=pixel)
        fill_buffer(image.array, pixel)
    return image


def write_image(
    image: RasterImage,
    path: str | Path,
    writer: ImageFileWriter | None = None,
) -> Path:
    """Write ``image`` with ``writer`` (a default ImageFileWriter if None)."""
    writer = writer or ImageFileWriter()
    with timed_stage("Writing", pixel_type=str(image.pixel_type)):
        logger.info("Writing image.", out_path=Path(path), size=image.size)
        return writer.save(image, path)


def make_image_file(
    spec: ImageSpec, writer: ImageFileWriter | None = None
) -> Path:
    """Make the image described by ``spec`` and write it to its output path.

    Parameters
    ----------
    spec : ImageSpec
        The validated parameters.
    writer : ImageFileWriter, optional
        Writer to use. Defaults to an ImageFileWriter that overwrites.

    Returns
    -------
    Path
        Path of the written file.

    Examples
    --------
    >>> spec = ImageSpec(output_volume="blank.mha", dimension=2, size=[4, 4])
    >>> make_image_file(spec)
    PosixPath('blank.mha')
    """
    image = make_image(spec)
    return write_image(image, spec.output_volume, writer)
