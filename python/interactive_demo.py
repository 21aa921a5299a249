"""
Interactive placement demo.
Drag a part across a socket with the keyboard, rotate it, and commit it.
"""

import logging
import sys

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_hierarchy, render_grid
from descriptor_parser import format_descriptor, parse
from grid_hierarchy import GridHierarchy, PartDefinition
from grid_rotation import rotate_clockwise, rotate_descriptor
from grid_space import Vec3
from socket_types import Rotation


class InteractiveDemo:
    """Interactive placement session over a grid hierarchy."""

    def __init__(self, hierarchy: GridHierarchy, parts: list[PartDefinition]) -> None:
        self.hierarchy = hierarchy
        self.parts = parts
        self.part_index = 0
        self.grid_index = 0
        self.rotation = Rotation.DEG_0
        self.cursor = (0, 0)
        self.console = Console()
        self.status_message = "Ready"

    @property
    def part(self) -> PartDefinition:
        return self.parts[self.part_index]

    @property
    def grid(self):
        grids = list(self.hierarchy)
        self.grid_index %= len(grids)
        return grids[self.grid_index]

    def footprint(self) -> set[tuple[int, int]]:
        rotated = rotate_descriptor(self.part.tail, self.rotation)
        x0, y0 = self.cursor
        return {(x0 + dx, y0 + dy) for dx in range(rotated.size_x) for dy in range(rotated.size_y)}

    def generate_display(self) -> Panel:
        """Generate the current display with grid and status."""
        grid = self.grid
        x, y = self.cursor
        fits = grid.can_place(self.part.tail, self.rotation, x, y)

        status = Text()
        status.append("Grid: ", style="bold")
        status.append(f"{grid.grid_id} [{format_descriptor(grid.descriptor)}]\n")
        status.append("Part: ", style="bold")
        status.append(f"{format_descriptor(self.part.tail)}  rot {self.rotation.value}°\n")
        status.append("Cursor: ", style="bold")
        status.append(f"({x}, {y})  ")
        status.append("fits" if fits else "blocked", style="bold green" if fits else "bold red")
        valid = sorted(r.value for r in grid.valid_rotations(self.part.tail))
        status.append(f"\nValid rotations: {valid}\n\n")

        status.append(Text.from_ansi(render_grid(grid, highlight=self.footprint())))
        status.append("\n\n")
        status.append(Text.from_ansi(render_hierarchy(self.hierarchy)))
        status.append("\n\n")
        status.append("Keys:\n", style="bold cyan")
        status.append("  W/A/S/D - Move cursor\n")
        status.append("  R - Rotate clockwise\n")
        status.append("  P - Next part    G - Next grid\n")
        status.append("  Enter - Place    X - Remove part under cursor\n")
        status.append("  Q - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="Socket Grid Placement Demo", border_style="green", width=80)

    def move(self, dx: int, dy: int) -> None:
        x, y = self.cursor
        grid = self.grid
        self.cursor = (min(max(x + dx, 0), grid.size_x - 1), min(max(y + dy, 0), grid.size_y - 1))

    def attempt_place(self) -> None:
        x, y = self.cursor
        placed = self.hierarchy.place(self.grid.grid_id, self.part, self.rotation, x, y)
        if placed is None:
            self.status_message = f"✗ {self.part.name} does not fit at ({x}, {y})"
        else:
            self.status_message = f"✓ Placed {self.part.name} as occupant {placed.occupant_id}"
            if placed.children:
                self.status_message += f", exposed {len(placed.children)} grid(s)"

    def attempt_remove(self) -> None:
        part = self.grid.part_at(*self.cursor)
        if part is None:
            self.status_message = "Nothing to remove here"
            return
        self.hierarchy.remove(part.occupant_id)
        self.status_message = f"✓ Removed occupant {part.occupant_id}"

    def run(self) -> None:
        """Run the interactive demo."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())

                    key = readchar.readkey()

                    if key.lower() == 'q':
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key.lower() == 'w':
                        self.move(0, 1)
                    elif key.lower() == 's':
                        self.move(0, -1)
                    elif key.lower() == 'a':
                        self.move(-1, 0)
                    elif key.lower() == 'd':
                        self.move(1, 0)
                    elif key.lower() == 'r':
                        self.rotation = rotate_clockwise(self.rotation)
                    elif key.lower() == 'p':
                        self.part_index = (self.part_index + 1) % len(self.parts)
                    elif key.lower() == 'g':
                        self.grid_index += 1
                        self.cursor = (0, 0)
                    elif key in (readchar.key.ENTER, '\r', '\n'):
                        self.attempt_place()
                    elif key.lower() == 'x':
                        self.attempt_remove()
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


LAYOUTS = dict(
    torso=dict(
        sockets=["Head_4x4_S2_LR_torso"],
        parts=[
            ["Tail_1x2_S1_R_wing"],
            ["Tail_2x2_SN_plate"],
            ["Tail_2x2_S1_mount", "Head_2x2_SN_turret_ring"],
        ],
    ),
    tube=dict(
        sockets=["Head_3x2_S1FH_tube"],
        parts=[["Tail_3x1_S1FH_band"], ["Tail_1x3_S1FV_strap"], ["Tail_1x1_S1_L_clip"]],
    ),
)


def build(layout: dict) -> tuple[GridHierarchy, list[PartDefinition]]:
    hierarchy = GridHierarchy()
    for socket in layout["sockets"]:
        hierarchy.add_grid(parse(socket))
    parts = [
        PartDefinition.from_descriptors(
            [parse(name) for name in names],
            offsets={"turret_ring": Vec3(0.0, 0.0, 0.05)},
        )
        for names in layout["parts"]
    ]
    return hierarchy, parts


def main(layout: dict) -> None:
    """Run interactive demo with a sample socket setup."""
    hierarchy, parts = build(layout)
    demo = InteractiveDemo(hierarchy, parts)
    demo.run()


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == 'sublime':
        # Running from IDE - just render the initial state
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s: %(message)s')

        print('Running from IDE - rendering initial state')
        print()

        hierarchy, parts = build(LAYOUTS['torso'])
        hierarchy.place("torso", parts[2], Rotation.DEG_0, 1, 1)
        print(render_hierarchy(hierarchy))
    else:
        main(LAYOUTS[sys.argv[1] if len(sys.argv) > 1 else 'torso'])
