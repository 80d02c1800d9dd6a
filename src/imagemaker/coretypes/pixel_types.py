"""
Scalar kinds and pixel types supported by the image maker.

A pixel type is the pair (scalar kind, number of components). Images with
a single component use the scalar SimpleITK pixel id, images with more
than one component use the matching vector pixel id. The name lookup
accepts both the ITK component-type spelling (``uchar``, ``short``,
``ulong``, ``double`` ...) and the numpy spelling (``uint8``, ``int16``,
``uint64``, ``float64`` ...).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict

import numpy as np
import SimpleITK as sitk

from imagemaker.exceptions import UnknownComponentTypeError

__all__ = [
    "ScalarType",
    "PixelType",
    "SCALAR_TYPE_ALIASES",
    "parse_scalar_type",
    "select_pixel_type",
]


class ScalarType(str, Enum):
    """The ten numeric kinds a pixel component can be stored as."""

    UINT8 = "uint8"
    INT8 = "int8"
    UINT16 = "uint16"
    INT16 = "int16"
    UINT32 = "uint32"
    INT32 = "int32"
    UINT64 = "uint64"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"

    @property
    def dtype(self) -> np.dtype:
        return np.dtype(self.value)

    @property
    def is_integer(self) -> bool:
        return bool(np.issubdtype(self.dtype, np.integer))

    @property
    def itk_name(self) -> str:
        """Name of the kind as ITK spells it in image headers."""
        return _ITK_NAMES[self]

    @property
    def sitk_scalar_id(self) -> int:
        return _SITK_SCALAR_IDS[self]

    @property
    def sitk_vector_id(self) -> int:
        return _SITK_VECTOR_IDS[self]


_ITK_NAMES: Dict[ScalarType, str] = {
    ScalarType.UINT8: "uchar",
    ScalarType.INT8: "char",
    ScalarType.UINT16: "ushort",
    ScalarType.INT16: "short",
    ScalarType.UINT32: "uint",
    ScalarType.INT32: "int",
    ScalarType.UINT64: "ulong",
    ScalarType.INT64: "long",
    ScalarType.FLOAT32: "float",
    ScalarType.FLOAT64: "double",
}

_SITK_SCALAR_IDS: Dict[ScalarType, int] = {
    ScalarType.UINT8: sitk.sitkUInt8,
    ScalarType.INT8: sitk.sitkInt8,
    ScalarType.UINT16: sitk.sitkUInt16,
    ScalarType.INT16: sitk.sitkInt16,
    ScalarType.UINT32: sitk.sitkUInt32,
    ScalarType.INT32: sitk.sitkInt32,
    ScalarType.UINT64: sitk.sitkUInt64,
    ScalarType.INT64: sitk.sitkInt64,
    ScalarType.FLOAT32: sitk.sitkFloat32,
    ScalarType.FLOAT64: sitk.sitkFloat64,
}

_SITK_VECTOR_IDS: Dict[ScalarType, int] = {
    ScalarType.UINT8: sitk.sitkVectorUInt8,
    ScalarType.INT8: sitk.sitkVectorInt8,
    ScalarType.UINT16: sitk.sitkVectorUInt16,
    ScalarType.INT16: sitk.sitkVectorInt16,
    ScalarType.UINT32: sitk.sitkVectorUInt32,
    ScalarType.INT32: sitk.sitkVectorInt32,
    ScalarType.UINT64: sitk.sitkVectorUInt64,
    ScalarType.INT64: sitk.sitkVectorInt64,
    ScalarType.FLOAT32: sitk.sitkVectorFloat32,
    ScalarType.FLOAT64: sitk.sitkVectorFloat64,
}

# ITK's 'long' kinds are 64 bit on the platforms we write images for
SCALAR_TYPE_ALIASES: Dict[str, ScalarType] = {
    **{kind.value: kind for kind in ScalarType},
    **{name: kind for kind, name in _ITK_NAMES.items()},
    "unsigned_char": ScalarType.UINT8,
    "unsigned_short": ScalarType.UINT16,
    "unsigned_int": ScalarType.UINT32,
    "unsigned_long": ScalarType.UINT64,
    "ulonglong": ScalarType.UINT64,
    "longlong": ScalarType.INT64,
}


@dataclass(frozen=True)
class PixelType:
    """A scalar kind together with the number of components per pixel.

    Attributes
    ----------
    scalar_type : ScalarType
        Storage kind of one component.
    components : int
        Number of components in each pixel. More than one makes it a
        vector pixel.
    """

    scalar_type: ScalarType
    components: int = 1

    def __post_init__(self) -> None:
        if self.components < 1:
            msg = f"A pixel needs at least one component, got {self.components}."
            raise ValueError(msg)

    @property
    def is_vector(self) -> bool:
        return self.components > 1

    @property
    def dtype(self) -> np.dtype:
        return self.scalar_type.dtype

    @property
    def sitk_id(self) -> int:
        if self.is_vector:
            return self.scalar_type.sitk_vector_id
        return self.scalar_type.sitk_scalar_id

    @property
    def bytes_per_pixel(self) -> int:
        return self.dtype.itemsize * self.components

    def __str__(self) -> str:
        if self.is_vector:
            return f"vector<{self.scalar_type.value}, {self.components}>"
        return self.scalar_type.value


def parse_scalar_type(name: str | ScalarType) -> ScalarType:
    """Look up the scalar kind for an ITK or numpy style name.

    Parameters
    ----------
    name : str | ScalarType
        Case-insensitive kind name, e.g. ``"uchar"``, ``"Float32"``.

    Returns
    -------
    ScalarType

    Raises
    ------
    UnknownComponentTypeError
        If the name is not one of the supported kinds.
    """
    if isinstance(name, ScalarType):
        return name
    try:
        return SCALAR_TYPE_ALIASES[str(name).strip().lower()]
    except KeyError as e:
        raise UnknownComponentTypeError(str(name)) from e


def select_pixel_type(name: str | ScalarType, components: int = 1) -> PixelType:
    """Resolve a scalar kind name and component count to a pixel type.

    Examples
    --------
    >>> str(select_pixel_type("uchar"))
    'uint8'
    >>> select_pixel_type("float", 3).is_vector
    True
    """
    return PixelType(parse_scalar_type(name), components)
