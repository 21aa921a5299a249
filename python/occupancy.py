"""
Occupancy grids: per-socket cell tables tracking which part fills each cell.

A placement is committed only when the rotated footprint lies inside the
grid, every covered cell is free, the tiers match and the surrounding rule
accepts the rotated part. Refusals return False and leave the grid as it
was. Misuse (placing into a disposed grid, removing a part whose child
grids are still alive) raises.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Iterator

from grid_rotation import get_valid_rotations, rotate_descriptor
from grid_space import IDENTITY, ORIGIN, Orientation, Vec3
from socket_types import Alignment, Cell, Edge, GridDescriptor, Role, Rotation
from surrounding import can_accept
from tier_config import DEFAULT_TIERS, TierTable

logger = logging.getLogger(__name__)

__all__ = [
    "OccupancyGrid",
    "PlacedPart",
    "GridTeardownError",
    "DisposedGridError",
    "next_occupant_id",
]

_occupant_ids = itertools.count(1)


def next_occupant_id() -> int:
    """Process-wide occupant id; never repeats."""
    return next(_occupant_ids)


class GridTeardownError(RuntimeError):
    """Raised when grids are torn down out of child-before-parent order."""


class DisposedGridError(RuntimeError):
    """Raised when a disposed grid is used."""


@dataclass
class PlacedPart:
    """A committed placement in one grid."""

    occupant_id: int
    descriptor: GridDescriptor  # Rotated footprint actually placed
    source: GridDescriptor  # Footprint as authored
    rotation: Rotation
    origin_x: int
    origin_y: int
    children: list[OccupancyGrid] = field(default_factory=list)

    def footprint(self) -> Iterator[tuple[int, int]]:
        for y in range(self.origin_y, self.origin_y + self.descriptor.size_y):
            for x in range(self.origin_x, self.origin_x + self.descriptor.size_x):
                yield (x, y)

    def covers(self, x: int, y: int) -> bool:
        return (
            self.origin_x <= x < self.origin_x + self.descriptor.size_x
            and self.origin_y <= y < self.origin_y + self.descriptor.size_y
        )

    @property
    def center(self) -> tuple[float, float]:
        """Centre of the footprint, in cell units."""
        return (
            self.origin_x + self.descriptor.size_x / 2,
            self.origin_y + self.descriptor.size_y / 2,
        )


class OccupancyGrid:
    """
    Cell table for one socket instance.

    Cells are addressed (x, y) with x growing to the right and y growing
    upward from the grid's origin corner.
    """

    def __init__(
        self,
        descriptor: GridDescriptor,
        origin: Vec3 = ORIGIN,
        orientation: Orientation = IDENTITY,
        tiers: TierTable = DEFAULT_TIERS,
        grid_id: str | None = None,
        anchor_edges: bool = False,
    ) -> None:
        if descriptor.role is not Role.HEAD:
            raise ValueError(f"Occupancy grid needs a Head descriptor, got Tail '{descriptor.name}'")

        self.descriptor = descriptor
        self.origin = origin
        self.orientation = orientation
        self.tiers = tiers
        self.grid_id = grid_id if grid_id is not None else descriptor.name
        self.anchor_edges = anchor_edges

        self._occupants: list[list[int | None]] = [
            [None] * descriptor.size_x for _ in range(descriptor.size_y)
        ]
        self._parts: dict[int, PlacedPart] = {}
        self._disposed = False

    def __repr__(self) -> str:
        return (
            f"OccupancyGrid({self.grid_id!r}, {self.size_x}x{self.size_y}, "
            f"tier={self.tier}, parts={len(self._parts)}{', disposed' if self._disposed else ''})"
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def size_x(self) -> int:
        return self.descriptor.size_x

    @property
    def size_y(self) -> int:
        return self.descriptor.size_y

    @property
    def tier(self) -> int:
        return self.descriptor.tier

    @property
    def cell_size(self) -> float:
        return self.tiers.cell_size(self.tier)

    @property
    def world_size(self) -> tuple[float, float]:
        return self.tiers.world_size(self.tier, self.size_x, self.size_y)

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def placed_parts(self) -> list[PlacedPart]:
        self._check_live()
        return list(self._parts.values())

    def _check_live(self) -> None:
        if self._disposed:
            raise DisposedGridError(f"Grid '{self.grid_id}' has been disposed")

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size_x and 0 <= y < self.size_y

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def cell(self, x: int, y: int) -> Cell:
        self._check_live()
        if not self._in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) outside {self.size_x}x{self.size_y} grid '{self.grid_id}'")
        occupant = self._occupants[y][x]
        return Cell(occupied=occupant is not None, occupant_id=occupant)

    def is_cell_occupied(self, x: int, y: int) -> bool:
        """Out-of-bounds cells count as occupied."""
        self._check_live()
        if not self._in_bounds(x, y):
            return True
        return self._occupants[y][x] is not None

    def part_at(self, x: int, y: int) -> PlacedPart | None:
        self._check_live()
        if not self._in_bounds(x, y):
            return None
        occupant = self._occupants[y][x]
        return None if occupant is None else self._parts[occupant]

    def part(self, occupant_id: int) -> PlacedPart:
        self._check_live()
        return self._parts[occupant_id]

    def __contains__(self, occupant_id: object) -> bool:
        return occupant_id in self._parts

    def occupied_cells(self) -> dict[tuple[int, int], int]:
        """Map of every occupied (x, y) to its occupant id."""
        self._check_live()
        return {
            (x, y): occupant
            for y, row in enumerate(self._occupants)
            for x, occupant in enumerate(row)
            if occupant is not None
        }

    # -------------------------------------------------------------------------
    # Placement checks
    # -------------------------------------------------------------------------

    def _edges_anchored(self, rotated: GridDescriptor, x: int, y: int) -> bool:
        """Edge-needing parts must touch the matching grid borders."""
        surrounding = rotated.surrounding
        end_x = x + rotated.size_x
        end_y = y + rotated.size_y

        if surrounding.alignment is Alignment.HORIZONTAL:
            return x == 0 and end_x == self.size_x
        if surrounding.alignment is Alignment.VERTICAL:
            return y == 0 and end_y == self.size_y

        edges = surrounding.edges
        if Edge.L in edges and x != 0:
            return False
        if Edge.R in edges and end_x != self.size_x:
            return False
        if Edge.B in edges and y != 0:
            return False
        if Edge.T in edges and end_y != self.size_y:
            return False
        return True

    def _can_place_rotated(self, rotated: GridDescriptor, x: int, y: int) -> bool:
        if rotated.tier != self.tier:
            return False
        if x < 0 or y < 0 or x + rotated.size_x > self.size_x or y + rotated.size_y > self.size_y:
            return False
        if not can_accept(self.descriptor.surrounding, rotated.surrounding):
            return False
        if self.anchor_edges and not self._edges_anchored(rotated, x, y):
            return False
        for row in self._occupants[y : y + rotated.size_y]:
            if any(occupant is not None for occupant in row[x : x + rotated.size_x]):
                return False
        return True

    def can_place(self, tail: GridDescriptor, rotation: Rotation, x: int, y: int) -> bool:
        """
        Check whether a part fits at origin cell (x, y) under a rotation.

        Read-only; safe to call every frame while a part is being dragged.
        """
        self._check_live()
        return self._can_place_rotated(rotate_descriptor(tail, rotation), x, y)

    def valid_placements(self, tail: GridDescriptor, rotation: Rotation) -> list[tuple[int, int]]:
        """Every origin cell where the part can currently be placed."""
        self._check_live()
        if tail.tier != self.tier:
            return []
        rotated = rotate_descriptor(tail, rotation)
        return [
            (x, y)
            for y in range(self.size_y - rotated.size_y + 1)
            for x in range(self.size_x - rotated.size_x + 1)
            if self._can_place_rotated(rotated, x, y)
        ]

    def valid_rotations(self, tail: GridDescriptor) -> set[Rotation]:
        self._check_live()
        if tail.tier != self.tier:
            return set()
        return get_valid_rotations(tail, self.descriptor)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def place(self, tail: GridDescriptor, rotation: Rotation, x: int, y: int, occupant_id: int) -> bool:
        """
        Place a part, all or nothing.

        Returns:
            True if committed, False if refused (grid unchanged)

        Raises:
            ValueError: If occupant_id is already placed in this grid
        """
        self._check_live()
        if occupant_id in self._parts:
            raise ValueError(f"Occupant {occupant_id} is already placed in grid '{self.grid_id}'")

        rotated = rotate_descriptor(tail, rotation)
        if not self._can_place_rotated(rotated, x, y):
            logger.debug(
                "Refused %s at (%d, %d) rot %d in grid %r",
                tail.name, x, y, rotation.value, self.grid_id,
            )
            return False

        part = PlacedPart(occupant_id, rotated, tail, rotation, x, y)
        for cx, cy in part.footprint():
            self._occupants[cy][cx] = occupant_id
        self._parts[occupant_id] = part
        logger.debug(
            "Placed %s as occupant %d at (%d, %d) rot %d in grid %r",
            tail.name, occupant_id, x, y, rotation.value, self.grid_id,
        )
        return True

    def remove(self, occupant_id: int) -> None:
        """
        Free every cell owned by an occupant. Unknown ids are ignored.

        Raises:
            GridTeardownError: If the part still exposes live child grids
        """
        self._check_live()
        part = self._parts.get(occupant_id)
        if part is None:
            return

        live_children = [child.grid_id for child in part.children if not child.is_disposed]
        if live_children:
            raise GridTeardownError(
                f"Cannot remove occupant {occupant_id} from grid '{self.grid_id}': "
                f"child grids still alive: {', '.join(live_children)}"
            )

        for cx, cy in part.footprint():
            self._occupants[cy][cx] = None
        del self._parts[occupant_id]
        logger.debug("Removed occupant %d from grid %r", occupant_id, self.grid_id)

    def remove_all(self) -> list[PlacedPart]:
        """Remove every part; returns the removed records."""
        removed = self.placed_parts
        for part in removed:
            self.remove(part.occupant_id)
        return removed

    def dispose(self) -> None:
        """
        Retire the grid. It must be empty; any later use raises.

        Raises:
            GridTeardownError: If parts are still placed
        """
        if self._disposed:
            return
        if self._parts:
            raise GridTeardownError(
                f"Cannot dispose grid '{self.grid_id}' while {len(self._parts)} part(s) remain placed"
            )
        self._disposed = True
        logger.info("Disposed grid %r", self.grid_id)

    # -------------------------------------------------------------------------
    # Coordinates
    # -------------------------------------------------------------------------

    def cell_to_local(self, cell_x: float, cell_y: float) -> Vec3:
        return Vec3(*self.tiers.cell_to_local(self.tier, cell_x, cell_y))

    def cell_to_world(self, cell_x: float, cell_y: float) -> Vec3:
        """World position of a cell corner: origin + orientation * cell * cell_size."""
        self._check_live()
        return self.origin + self.orientation.apply(self.cell_to_local(cell_x, cell_y))
