"""
Registry of every live occupancy grid, including grids exposed by placed parts.

A part may itself host sockets (head mounts). Placing such a part creates a
child grid per mount; removing it tears down every descendant grid first,
depth-first, before the part's own cells are freed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Mapping

from grid_space import IDENTITY, ORIGIN, Orientation, Vec3
from occupancy import GridTeardownError, OccupancyGrid, PlacedPart, next_occupant_id
from socket_types import GridDescriptor, Role, Rotation
from tier_config import DEFAULT_TIERS, TierTable

logger = logging.getLogger(__name__)

__all__ = [
    "HeadMount",
    "PartDefinition",
    "PlacementOption",
    "GridHierarchy",
    "UnknownGridError",
]


class UnknownGridError(KeyError):
    """Raised when looking up a grid that is not (or no longer) registered."""


@dataclass(frozen=True)
class HeadMount:
    """A socket a part exposes once placed."""

    descriptor: GridDescriptor
    offset: Vec3 = ORIGIN  # From the part's footprint centre, in the part's unrotated frame
    orientation: Orientation = IDENTITY

    def __post_init__(self) -> None:
        if self.descriptor.role is not Role.HEAD:
            raise ValueError(f"Head mount needs a Head descriptor, got '{self.descriptor.name}'")


@dataclass(frozen=True)
class PartDefinition:
    """A placeable part: its footprint plus any sockets it hosts."""

    tail: GridDescriptor
    mounts: tuple[HeadMount, ...] = ()

    def __post_init__(self) -> None:
        if self.tail.role is not Role.TAIL:
            raise ValueError(f"Part footprint needs a Tail descriptor, got '{self.tail.name}'")

    @property
    def name(self) -> str:
        return self.tail.name

    @classmethod
    def from_descriptors(
        cls,
        descriptors: Iterable[GridDescriptor],
        offsets: Mapping[str, Vec3] | None = None,
    ) -> PartDefinition:
        """
        Assemble a part from the descriptors authored on one asset.

        Args:
            descriptors: Exactly one Tail plus any number of Heads
            offsets: Optional attachment offset per head name

        Raises:
            ValueError: If there is not exactly one Tail descriptor
        """
        offsets = offsets or {}
        tails = [d for d in descriptors if d.role is Role.TAIL]
        heads = [d for d in descriptors if d.role is Role.HEAD]
        if len(tails) != 1:
            raise ValueError(f"A part needs exactly one Tail descriptor, found {len(tails)}")
        mounts = tuple(HeadMount(head, offsets.get(head.name, ORIGIN)) for head in heads)
        return cls(tails[0], mounts)


@dataclass(frozen=True)
class PlacementOption:
    grid_id: str
    rotation: Rotation
    x: int
    y: int


class GridHierarchy:
    """Live pool of placeable grids, with parent/child links between them."""

    def __init__(self, tiers: TierTable = DEFAULT_TIERS, anchor_edges: bool = False) -> None:
        self.tiers = tiers
        self.anchor_edges = anchor_edges
        self._grids: dict[str, OccupancyGrid] = {}
        self._parents: dict[str, tuple[str, int]] = {}  # child grid id -> (host grid id, occupant id)
        self._locations: dict[int, str] = {}  # occupant id -> grid id
        self._definitions: dict[int, PartDefinition] = {}

    def __len__(self) -> int:
        return len(self._grids)

    def __contains__(self, grid_id: object) -> bool:
        return grid_id in self._grids

    def __iter__(self) -> Iterator[OccupancyGrid]:
        return iter(list(self._grids.values()))

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def grid(self, grid_id: str) -> OccupancyGrid:
        try:
            return self._grids[grid_id]
        except KeyError:
            raise UnknownGridError(f"No live grid '{grid_id}'") from None

    def root_grids(self) -> list[OccupancyGrid]:
        return [grid for grid_id, grid in self._grids.items() if grid_id not in self._parents]

    def parent_of(self, grid_id: str) -> tuple[str, int] | None:
        """(host grid id, host occupant id) for a child grid; None for roots."""
        self.grid(grid_id)
        return self._parents.get(grid_id)

    def depth(self, grid_id: str) -> int:
        depth = 0
        parent = self.parent_of(grid_id)
        while parent is not None:
            depth += 1
            parent = self._parents.get(parent[0])
        return depth

    def locate(self, occupant_id: int) -> tuple[OccupancyGrid, PlacedPart]:
        """Grid and placement record of a placed occupant."""
        grid_id = self._locations.get(occupant_id)
        if grid_id is None:
            raise KeyError(f"Occupant {occupant_id} is not placed")
        grid = self._grids[grid_id]
        return grid, grid.part(occupant_id)

    def definition(self, occupant_id: int) -> PartDefinition:
        return self._definitions[occupant_id]

    def children_of(self, occupant_id: int) -> list[OccupancyGrid]:
        _, part = self.locate(occupant_id)
        return list(part.children)

    # -------------------------------------------------------------------------
    # Grid lifecycle
    # -------------------------------------------------------------------------

    def add_grid(
        self,
        descriptor: GridDescriptor,
        origin: Vec3 = ORIGIN,
        orientation: Orientation = IDENTITY,
        grid_id: str | None = None,
    ) -> OccupancyGrid:
        """Register a root socket (e.g. one exposed by a structural part)."""
        grid = OccupancyGrid(
            descriptor,
            origin,
            orientation,
            tiers=self.tiers,
            grid_id=grid_id,
            anchor_edges=self.anchor_edges,
        )
        if grid.grid_id in self._grids:
            raise ValueError(f"Grid id '{grid.grid_id}' is already registered")
        self._grids[grid.grid_id] = grid
        logger.info("Registered grid %r (%dx%d, tier %d)", grid.grid_id, grid.size_x, grid.size_y, grid.tier)
        return grid

    def _teardown(self, grid: OccupancyGrid) -> None:
        for part in grid.placed_parts:
            self._remove_part(grid, part)
        grid.dispose()
        del self._grids[grid.grid_id]
        self._parents.pop(grid.grid_id, None)

    def discard_grid(self, grid_id: str) -> None:
        """
        Remove every part from a root grid, recursively, then dispose it.

        Raises:
            UnknownGridError: If the grid is not registered
            GridTeardownError: If the grid belongs to a placed part; remove
                the part instead
        """
        grid = self.grid(grid_id)
        if grid_id in self._parents:
            host_grid_id, occupant_id = self._parents[grid_id]
            raise GridTeardownError(
                f"Grid '{grid_id}' is hosted by occupant {occupant_id} in '{host_grid_id}'; "
                f"remove that part instead"
            )
        self._teardown(grid)

    def clear(self) -> None:
        for grid in self.root_grids():
            self._teardown(grid)

    # -------------------------------------------------------------------------
    # Placement
    # -------------------------------------------------------------------------

    def place(
        self,
        grid_id: str,
        part: PartDefinition,
        rotation: Rotation,
        x: int,
        y: int,
    ) -> PlacedPart | None:
        """
        Place a part and expose its head mounts as new grids.

        Child grids are registered as '<grid_id>/<occupant_id>/<index>/<name>',
        so mounts sharing a descriptor name still get distinct grids.

        Returns:
            The placement record, or None if the grid refused the part

        Raises:
            ValueError: If a child grid id is already registered
        """
        grid = self.grid(grid_id)
        occupant_id = next_occupant_id()
        child_ids = [
            f"{grid_id}/{occupant_id}/{index}/{mount.descriptor.name}"
            for index, mount in enumerate(part.mounts)
        ]
        taken = [child_id for child_id in child_ids if child_id in self._grids]
        if taken:
            raise ValueError(f"Child grid id(s) already registered: {', '.join(taken)}")

        if not grid.place(part.tail, rotation, x, y, occupant_id):
            return None

        placed = grid.part(occupant_id)
        self._locations[occupant_id] = grid_id
        self._definitions[occupant_id] = part

        if part.mounts:
            center_x, center_y = placed.center
            part_origin = grid.cell_to_world(center_x, center_y)
            part_orientation = grid.orientation @ Orientation.about_z(-rotation.value)
            for child_id, mount in zip(child_ids, part.mounts):
                child = OccupancyGrid(
                    mount.descriptor,
                    part_origin + part_orientation.apply(mount.offset),
                    part_orientation @ mount.orientation,
                    tiers=self.tiers,
                    grid_id=child_id,
                    anchor_edges=self.anchor_edges,
                )
                placed.children.append(child)
                self._grids[child.grid_id] = child
                self._parents[child.grid_id] = (grid_id, occupant_id)
                logger.info("Exposed child grid %r", child.grid_id)
        return placed

    def _remove_part(self, grid: OccupancyGrid, part: PlacedPart) -> None:
        for child in list(part.children):
            self._teardown(child)
        grid.remove(part.occupant_id)
        del self._locations[part.occupant_id]
        del self._definitions[part.occupant_id]

    def remove(self, occupant_id: int) -> None:
        """
        Remove a placed part, tearing down its child grids first.

        Unknown occupants are ignored.
        """
        grid_id = self._locations.get(occupant_id)
        if grid_id is None:
            return
        grid = self._grids[grid_id]
        self._remove_part(grid, grid.part(occupant_id))

    def candidate_placements(self, part: PartDefinition) -> list[PlacementOption]:
        """Every (grid, rotation, origin) where the part could be placed right now."""
        options: list[PlacementOption] = []
        for grid in self._grids.values():
            for rotation in sorted(grid.valid_rotations(part.tail)):
                for x, y in grid.valid_placements(part.tail, rotation):
                    options.append(PlacementOption(grid.grid_id, rotation, x, y))
        return options
