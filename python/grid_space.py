"""
Minimal 3D placement math for mapping grid cells into world space.

Grids lie in their local XY plane; an orientation is a 3x3 rotation matrix
stored row-major.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

__all__ = ["Vec3", "Orientation", "ORIGIN", "IDENTITY"]


@dataclass(frozen=True)
class Vec3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scaled(self, factor: float) -> Vec3:
        return Vec3(self.x * factor, self.y * factor, self.z * factor)

    def is_close(self, other: Vec3, tolerance: float = 1e-9) -> bool:
        return (
            math.isclose(self.x, other.x, abs_tol=tolerance)
            and math.isclose(self.y, other.y, abs_tol=tolerance)
            and math.isclose(self.z, other.z, abs_tol=tolerance)
        )


Matrix3 = tuple[tuple[float, float, float], tuple[float, float, float], tuple[float, float, float]]

# Exact sine/cosine for quarter turns
_QUARTER_TURNS = {0: (0.0, 1.0), 90: (1.0, 0.0), 180: (0.0, -1.0), 270: (-1.0, 0.0)}


@dataclass(frozen=True)
class Orientation:
    """A rotation of a grid's local frame relative to world space."""

    matrix: Matrix3 = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))

    @classmethod
    def about_z(cls, degrees: float) -> Orientation:
        """Counter-clockwise rotation about the grid normal; negative turns clockwise."""
        normalized = degrees % 360
        if normalized in _QUARTER_TURNS:
            s, c = _QUARTER_TURNS[normalized]
        else:
            radians = math.radians(normalized)
            s, c = math.sin(radians), math.cos(radians)
        return cls(((c, -s, 0.0), (s, c, 0.0), (0.0, 0.0, 1.0)))

    def apply(self, v: Vec3) -> Vec3:
        (a, b, c), (d, e, f), (g, h, i) = self.matrix
        return Vec3(
            a * v.x + b * v.y + c * v.z,
            d * v.x + e * v.y + f * v.z,
            g * v.x + h * v.y + i * v.z,
        )

    def __matmul__(self, other: Orientation) -> Orientation:
        """Compose: (self @ other).apply(v) == self.apply(other.apply(v))."""
        cols = tuple(zip(*other.matrix))
        return Orientation(
            tuple(  # type: ignore[arg-type]
                tuple(sum(r * c for r, c in zip(row, col)) for col in cols)
                for row in self.matrix
            )
        )


ORIGIN = Vec3()
IDENTITY = Orientation()
