import numpy as np
import pytest
import SimpleITK as sitk

from imagemaker.coretypes.pixel_types import (
    PixelType,
    ScalarType,
    parse_scalar_type,
    select_pixel_type,
)
from imagemaker.exceptions import UnknownComponentTypeError

ITK_NAMES = {
    "uchar": (sitk.sitkUInt8, sitk.sitkVectorUInt8, np.uint8),
    "char": (sitk.sitkInt8, sitk.sitkVectorInt8, np.int8),
    "ushort": (sitk.sitkUInt16, sitk.sitkVectorUInt16, np.uint16),
    "short": (sitk.sitkInt16, sitk.sitkVectorInt16, np.int16),
    "uint": (sitk.sitkUInt32, sitk.sitkVectorUInt32, np.uint32),
    "int": (sitk.sitkInt32, sitk.sitkVectorInt32, np.int32),
    "ulong": (sitk.sitkUInt64, sitk.sitkVectorUInt64, np.uint64),
    "long": (sitk.sitkInt64, sitk.sitkVectorInt64, np.int64),
    "float": (sitk.sitkFloat32, sitk.sitkVectorFloat32, np.float32),
    "double": (sitk.sitkFloat64, sitk.sitkVectorFloat64, np.float64),
}


@pytest.mark.parametrize("name", ITK_NAMES.keys())
@pytest.mark.parametrize("components", [1, 2, 3, 4])
def test_select_pixel_type_itk_names(name: str, components: int) -> None:
    scalar_id, vector_id, dtype = ITK_NAMES[name]
    pixel_type = select_pixel_type(name, components)

    assert pixel_type.dtype == np.dtype(dtype)
    assert pixel_type.components == components
    if components > 1:
        assert pixel_type.is_vector
        assert pixel_type.sitk_id == vector_id
    else:
        assert not pixel_type.is_vector
        assert pixel_type.sitk_id == scalar_id


@pytest.mark.parametrize("kind", list(ScalarType))
def test_numpy_names_match_itk_names(kind: ScalarType) -> None:
    assert parse_scalar_type(kind.value) is kind
    assert parse_scalar_type(kind.itk_name) is kind


def test_every_kind_has_distinct_sitk_ids() -> None:
    scalar_ids = {kind.sitk_scalar_id for kind in ScalarType}
    vector_ids = {kind.sitk_vector_id for kind in ScalarType}
    assert len(scalar_ids) == len(ScalarType) == 10
    assert len(vector_ids) == 10
    assert scalar_ids.isdisjoint(vector_ids)


@pytest.mark.parametrize("name", ["UCHAR", " Float ", "Int16", "unsigned_char", "longlong"])
def test_parse_is_case_and_whitespace_insensitive(name: str) -> None:
    assert isinstance(parse_scalar_type(name), ScalarType)


@pytest.mark.parametrize("name", ["banana", "", "complex64", "bool", "ldouble"])
def test_unknown_component_type(name: str) -> None:
    with pytest.raises(UnknownComponentTypeError) as exc_info:
        select_pixel_type(name, 1)
    assert "unknown component type" in str(exc_info.value)
    assert exc_info.value.scalar_type == name


def test_pixel_type_needs_a_component() -> None:
    with pytest.raises(ValueError, match="at least one component"):
        PixelType(ScalarType.UINT8, 0)


def test_pixel_type_str_and_size() -> None:
    assert str(PixelType(ScalarType.UINT8)) == "uint8"
    vector = PixelType(ScalarType.FLOAT32, 3)
    assert str(vector) == "vector<float32, 3>"
    assert vector.bytes_per_pixel == 12


def test_is_integer() -> None:
    assert ScalarType.INT64.is_integer
    assert ScalarType.UINT8.is_integer
    assert not ScalarType.FLOAT32.is_integer
