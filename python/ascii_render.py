"""
ASCII rendering for occupancy grids.

Each cell is one character: '.' for a free cell, a letter per occupant
otherwise. Rows are printed top row first (y grows upward), so the output
matches how the socket looks in the assembly view.
"""

from __future__ import annotations

import logging
from string import ascii_uppercase
from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from descriptor_parser import format_descriptor
from grid_hierarchy import GridHierarchy
from occupancy import OccupancyGrid

logger = logging.getLogger(__name__)

__all__ = ["occupant_labels", "render_grid", "render_hierarchy"]

FREE_CHAR = "."

_PALETTE: list[Callable[[str], str]] = [
    chalk.red,
    chalk.green,
    chalk.yellow,
    chalk.blue,
    chalk.magenta,
    chalk.cyan,
    chalk.redBright,
    chalk.greenBright,
    chalk.yellowBright,
    chalk.blueBright,
]


def occupant_labels(grid: OccupancyGrid) -> dict[int, str]:
    """Letter per occupant, in placement-id order (wraps after Z)."""
    occupants = sorted(part.occupant_id for part in grid.placed_parts)
    return {occupant: ascii_uppercase[i % len(ascii_uppercase)] for i, occupant in enumerate(occupants)}


def render_grid(
    grid: OccupancyGrid,
    color: bool = True,
    highlight: set[tuple[int, int]] | None = None,
) -> str:
    """
    Render one grid to a block of text.

    Args:
        grid: The grid to render
        color: Colour occupants with ANSI codes
        highlight: Cells to mark with '+' when free (e.g. a dragged footprint)

    Returns:
        One line per row, top row first
    """
    labels = occupant_labels(grid)
    colors = {
        occupant: _PALETTE[i % len(_PALETTE)] for i, occupant in enumerate(sorted(labels))
    }
    highlight = highlight or set()
    occupied = grid.occupied_cells()

    lines: list[str] = []
    for y in reversed(range(grid.size_y)):
        chars: list[str] = []
        for x in range(grid.size_x):
            occupant = occupied.get((x, y))
            if occupant is None:
                char = "+" if (x, y) in highlight else FREE_CHAR
                if color and (x, y) in highlight:
                    char = chalk.bold(char)
            else:
                char = labels[occupant]
                if color:
                    char = colors[occupant](char)
                    if (x, y) in highlight:
                        char = chalk.bgRed(char)
            chars.append(char)
        lines.append("".join(chars))
    return "\n".join(lines)


def render_hierarchy(hierarchy: GridHierarchy, color: bool = True) -> str:
    """Render every live grid, child grids indented under their host."""
    blocks: list[str] = []

    def walk(grid: OccupancyGrid, depth: int) -> None:
        indent = "  " * depth
        blocks.append(f"{indent}{grid.grid_id} [{format_descriptor(grid.descriptor)}]")
        for line in render_grid(grid, color=color).split("\n"):
            blocks.append(f"{indent}  {line}")
        for part in sorted(grid.placed_parts, key=lambda p: p.occupant_id):
            for child in part.children:
                walk(child, depth + 1)

    for root in hierarchy.root_grids():
        walk(root, 0)

    logger.debug("render_hierarchy: %d grid(s)", len(hierarchy))
    return "\n".join(blocks)
