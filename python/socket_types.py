"""
Shared type definitions for socket grids and the parts that fill them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag, IntEnum


class Role(Enum):
    """Which side of a connection a grid descriptor describes."""

    HEAD = "Head"  # Receiving socket region
    TAIL = "Tail"  # Footprint of a placeable part


class Edge(Flag):
    """Open sides of a socket region, or sides a part must sit flush against."""

    NONE = 0
    L = 1
    R = 2
    T = 4
    B = 8

    LR = L | R
    TB = T | B
    LRTB = L | R | T | B


class Alignment(Enum):
    """Full-enclosure mode of a surrounding spec."""

    NONE = ""
    HORIZONTAL = "FH"
    VERTICAL = "FV"


class Rotation(IntEnum):
    """Clockwise rotation of a part, in degrees."""

    DEG_0 = 0
    DEG_90 = 90
    DEG_180 = 180
    DEG_270 = 270

    @property
    def steps(self) -> int:
        return self.value // 90


# =============================================================================
# Descriptor Records
# =============================================================================


@dataclass(frozen=True)
class SurroundingSpec:
    """
    Level and exposure of a grid.

    A spec either lists directional edges or declares a full alignment,
    never both.
    """

    level: int = 0  # 0 = no requirement (SN)
    edges: Edge = Edge.NONE
    alignment: Alignment = Alignment.NONE

    def __post_init__(self) -> None:
        if self.level < 0:
            raise ValueError(f"Surrounding level must be non-negative, got {self.level}")
        if self.alignment is not Alignment.NONE and self.edges != Edge.NONE:
            raise ValueError(
                f"Surrounding spec cannot combine edges {self.edges} "
                f"with full alignment {self.alignment.value}"
            )

    @property
    def is_full(self) -> bool:
        return self.alignment is not Alignment.NONE

    @property
    def has_edges(self) -> bool:
        return self.edges != Edge.NONE


@dataclass(frozen=True)
class GridDescriptor:
    """An authored grid: a socket region (Head) or a part footprint (Tail)."""

    role: Role
    size_x: int
    size_y: int
    surrounding: SurroundingSpec
    name: str
    tier: int = 1

    def __post_init__(self) -> None:
        if self.size_x <= 0 or self.size_y <= 0:
            raise ValueError(
                f"Grid '{self.name}' must have positive size, got {self.size_x}x{self.size_y}"
            )
        if self.tier <= 0:
            raise ValueError(f"Grid '{self.name}' must have a positive tier, got {self.tier}")
        if not self.name:
            raise ValueError("Grid descriptor requires a name")

    @property
    def is_head(self) -> bool:
        return self.role is Role.HEAD

    @property
    def total_cells(self) -> int:
        return self.size_x * self.size_y

    @property
    def shape_key(self) -> tuple[int, int, Edge, Alignment]:
        """Everything rotation can change; equal keys mean equivalent orientations."""
        return (self.size_x, self.size_y, self.surrounding.edges, self.surrounding.alignment)


@dataclass(frozen=True)
class Cell:
    """Snapshot of one cell of an occupancy grid."""

    occupied: bool = False
    occupant_id: int | None = None
