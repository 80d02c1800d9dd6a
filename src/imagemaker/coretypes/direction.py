"""
This module defines the Direction class, which stores a square orientation
matrix of 1, 2 or 3 dimensions as a flattened tuple of floats (row-major
order). Values are kept verbatim; the matrix is not checked for
orthonormality.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

import numpy as np

FlattenedMatrix = Tuple[float, ...]


@dataclass(frozen=True, eq=True)
class Direction:
    """Represent a directional matrix for image orientation.

    Attributes
    ----------
    matrix : FlattenedMatrix
        Flattened row-major representation of a DxD matrix, D in 1..3.
    """

    matrix: FlattenedMatrix

    def __post_init__(self) -> None:
        length = len(self.matrix)
        dim = math.isqrt(length)
        if dim * dim != length or dim not in (1, 2, 3):
            msg = (
                "Direction must be a 1x1, 2x2 or 3x3 matrix."
                f" Got {length} values."
            )
            raise ValueError(msg)
        object.__setattr__(
            self, "matrix", tuple(float(v) for v in self.matrix)
        )

    @classmethod
    def identity(cls, dimension: int) -> Direction:
        """Identity orientation for an image of the given dimension."""
        return cls(matrix=tuple(np.eye(dimension).flatten().tolist()))

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[float]]) -> Direction:
        """
        Create a Direction instance from a nested square matrix.

        Raises
        ------
        ValueError
            If the input isn't square.
        """
        size = len(matrix)
        for row in matrix:
            if len(row) != size:
                msg = f"Matrix must be square. Got a row of {len(row)} in a {size}-row matrix."
                raise ValueError(msg)
        return cls(matrix=tuple(value for row in matrix for value in row))

    @property
    def dimension(self) -> int:
        return math.isqrt(len(self.matrix))

    def to_matrix(self) -> list[list[float]]:
        """Convert the flattened row-major array back to a nested matrix."""
        dim = self.dimension
        return [list(self.matrix[i * dim : (i + 1) * dim]) for i in range(dim)]

    def to_numpy(self) -> np.ndarray:
        return np.array(self.to_matrix(), dtype=np.float64)

    def embed_3d(self) -> np.ndarray:
        """Pad the matrix into the top-left corner of a 3x3 identity."""
        out = np.eye(3)
        dim = self.dimension
        out[:dim, :dim] = self.to_numpy()
        return out

    def __iter__(self) -> Iterator:
        return iter(self.matrix)

    def __len__(self) -> int:
        return len(self.matrix)

    def __repr__(self) -> str:
        rows = ", ".join(
            "(" + ", ".join(f"{v:.3g}" for v in row) + ")"
            for row in self.to_matrix()
        )
        return f"Direction({rows})"
