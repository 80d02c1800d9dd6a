from unittest.mock import MagicMock

import numpy as np
import pytest

from imagemaker.coretypes import PixelType, ScalarType
from imagemaker.exceptions import (
    FillValueError,
    ImageAllocationError,
    UnknownComponentTypeError,
)
from imagemaker.io.writers import ImageFileWriter
from imagemaker.maker import (
    allocate_buffer,
    fill_buffer,
    make_image,
    make_image_file,
    representative_pixel,
)


class TestRepresentativePixel:
    def test_values_cycle_over_components(self) -> None:
        pixel = representative_pixel([10, 20], PixelType(ScalarType.INT32, 4))
        assert pixel.tolist() == [10, 20, 10, 20]

    def test_extra_values_are_ignored(self) -> None:
        pixel = representative_pixel([1, 2, 3], PixelType(ScalarType.UINT8, 2))
        assert pixel.tolist() == [1, 2]

    def test_single_component(self) -> None:
        pixel = representative_pixel([255], PixelType(ScalarType.UINT8))
        assert pixel.dtype == np.uint8
        assert pixel.tolist() == [255]

    def test_integer_kinds_truncate_toward_zero(self) -> None:
        pixel = representative_pixel([2.9, -2.9], PixelType(ScalarType.INT16, 2))
        assert pixel.tolist() == [2, -2]

    def test_float_kinds_keep_fractions(self) -> None:
        pixel = representative_pixel([0.25], PixelType(ScalarType.FLOAT32))
        assert pixel.tolist() == [0.25]

    def test_large_64_bit_values_are_exact(self) -> None:
        big = 2**63 + 5
        pixel = representative_pixel([big], PixelType(ScalarType.UINT64))
        assert int(pixel[0]) == big

    @pytest.mark.parametrize(
        "value, kind",
        [
            (256, ScalarType.UINT8),
            (-1, ScalarType.UINT8),
            (-129, ScalarType.INT8),
            (2**64, ScalarType.UINT64),
            (float("nan"), ScalarType.INT32),
            (float("inf"), ScalarType.UINT16),
        ],
    )
    def test_unrepresentable_values(self, value: float, kind: ScalarType) -> None:
        with pytest.raises(FillValueError):
            representative_pixel([value], PixelType(kind))

    def test_empty_fill_values(self) -> None:
        with pytest.raises(FillValueError):
            representative_pixel([], PixelType(ScalarType.UINT8))


def test_allocate_buffer_shape() -> None:
    buffer = allocate_buffer([4, 3, 2], PixelType(ScalarType.FLOAT64, 5))
    assert buffer.shape == (2, 3, 4, 5)
    assert buffer.dtype == np.float64

    scalar = allocate_buffer([7], PixelType(ScalarType.INT8))
    assert scalar.shape == (7,)


def test_allocate_buffer_overflow() -> None:
    huge = [2**31, 2**31, 2**31]
    with pytest.raises(ImageAllocationError, match="Cannot allocate"):
        allocate_buffer(huge, PixelType(ScalarType.UINT8))


def test_allocation_error_is_a_memory_error() -> None:
    assert issubclass(ImageAllocationError, MemoryError)


def test_fill_buffer_vector() -> None:
    buffer = np.empty((2, 2, 3), dtype=np.uint16)
    fill_buffer(buffer, np.array([1, 2, 3], dtype=np.uint16))
    assert (buffer == np.array([1, 2, 3])).all()


def test_make_image_4x4_uint8(make_spec) -> None:
    spec = make_spec(
        dimension=2,
        size=[4, 4],
        spacing=[1, 1],
        origin=[0, 0],
        fill_value=[255],
        scalar_type="uint8",
    )
    image = make_image(spec)

    assert image.size == (4, 4)
    assert image.number_of_components == 1
    assert image.array.dtype == np.uint8
    assert image.array.size == 16
    assert (image.array == 255).all()


def test_make_image_vector_float32(make_spec) -> None:
    spec = make_spec(
        dimension=3,
        size=[2, 2, 2],
        number_of_components=3,
        fill_value=[1, 2, 3],
        scalar_type="float32",
    )
    image = make_image(spec)

    assert image.array.shape == (2, 2, 2, 3)
    for index in [(0, 0, 0), (1, 0, 1), (1, 1, 1)]:
        assert image.pixel(index) == (1.0, 2.0, 3.0)


@pytest.mark.parametrize("dim", [1, 2, 3])
@pytest.mark.parametrize("kind", list(ScalarType))
def test_every_element_is_filled(make_spec, dim: int, kind: ScalarType) -> None:
    size = [5, 4, 3][:dim]
    spec = make_spec(
        dimension=dim,
        size=size,
        number_of_components=4,
        fill_value=[10, 20],
        scalar_type=kind.value,
    )
    image = make_image(spec)

    assert image.array.size == spec.number_of_elements
    first = tuple(0 for _ in size)
    middle = tuple(s // 2 for s in size)
    last = tuple(s - 1 for s in size)
    for index in (first, middle, last):
        assert image.pixel(index) == (10, 20, 10, 20)
    assert (image.array == np.array([10, 20, 10, 20], dtype=kind.dtype)).all()


def test_geometry_is_copied(make_spec) -> None:
    spec = make_spec(
        dimension=3,
        size=[3, 3, 3],
        spacing=[0.5, 0.75, 2.5],
        origin=[-12.0, 4.0, 100.0],
        direction=[0, 1, 0, -1, 0, 0, 0, 0, 1],
    )
    image = make_image(spec)
    assert image.spacing == (0.5, 0.75, 2.5)
    assert image.origin == (-12.0, 4.0, 100.0)
    assert image.direction.matrix == (0.0, 1.0, 0.0, -1.0, 0.0, 0.0, 0.0, 0.0, 1.0)


def test_unknown_type_never_reaches_the_writer(make_spec) -> None:
    spec = make_spec(scalar_type="banana", size=[2, 2, 2])
    writer = MagicMock(spec=ImageFileWriter)

    with pytest.raises(UnknownComponentTypeError):
        make_image_file(spec, writer=writer)

    writer.save.assert_not_called()
    assert not spec.output_volume.exists()


def test_allocation_failure_never_reaches_the_writer(make_spec) -> None:
    spec = make_spec(size=[2**31, 2**31, 2**31])
    writer = MagicMock(spec=ImageFileWriter)

    with pytest.raises(ImageAllocationError):
        make_image_file(spec, writer=writer)

    writer.save.assert_not_called()


def test_make_image_file_hands_image_to_writer(make_spec) -> None:
    spec = make_spec(dimension=2, size=[3, 3], fill_value=[7])
    writer = MagicMock(spec=ImageFileWriter)
    writer.save.return_value = spec.output_volume

    result = make_image_file(spec, writer=writer)

    assert result == spec.output_volume
    writer.save.assert_called_once()
    image, path = writer.save.call_args[0]
    assert path == spec.output_volume
    assert (image.array == 7).all()
