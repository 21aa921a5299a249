"""
Demonstration scripts for socket grids.
"""

import logging
import sys

from ascii_render import render_grid, render_hierarchy
from descriptor_parser import format_descriptor, parse, try_parse
from grid_hierarchy import GridHierarchy, HeadMount, PartDefinition
from grid_rotation import ROTATIONS, get_valid_rotations, rotate_descriptor
from grid_space import Vec3
from socket_types import Rotation
from surrounding import can_accept


def parse_demo() -> None:
    """Demonstrate parsing authoring strings into descriptors."""
    print("=" * 60)
    print("Descriptor parsing")
    print("=" * 60)
    for text in [
        "Head_2x4_S2_LR_torso",
        "Tail_1x2_S1_R_wing",
        "Tail_T3_2x2_SN_plate",
        "Head_3x1_S1FH_tube",
        "Head_3x1_S1FH_LR_tube",  # edges and full alignment conflict
        "Body_2x2_S1_hull",  # unknown role
    ]:
        descriptor = try_parse(text)
        if descriptor is None:
            print(f"  {text:<26} -> rejected")
        else:
            print(f"  {text:<26} -> {descriptor}")
    print()


def rotation_demo() -> None:
    """Show how a wing part rotates against the torso socket."""
    head = parse("Head_2x4_S2_LR_torso")
    tail = parse("Tail_1x2_S1_R_wing")

    print("=" * 60)
    print(f"Rotating {format_descriptor(tail)} against {format_descriptor(head)}")
    print("=" * 60)
    for rotation in ROTATIONS:
        rotated = rotate_descriptor(tail, rotation)
        accepted = can_accept(head.surrounding, rotated.surrounding)
        print(f"  {rotation.value:>3}°  {format_descriptor(rotated):<24} {'accepted' if accepted else 'refused'}")
    valid = sorted(r.value for r in get_valid_rotations(tail, head))
    print(f"  distinct valid rotations: {valid}")
    print()


def hierarchy_demo() -> None:
    """Place a hosting part, fill its child sockets, then remove it."""
    hierarchy = GridHierarchy()
    hierarchy.add_grid(parse("Head_4x4_S2_LR_torso"))

    shoulder = PartDefinition(
        parse("Tail_2x2_S1_shoulder"),
        (
            HeadMount(parse("Head_2x1_SN_left_rail"), Vec3(-0.1, 0.0, 0.0)),
            HeadMount(parse("Head_2x1_SN_right_rail"), Vec3(0.1, 0.0, 0.0)),
        ),
    )
    stud = PartDefinition(parse("Tail_1x1_SN_stud"))
    wing = PartDefinition(parse("Tail_1x2_S1_R_wing"))

    host = hierarchy.place("torso", shoulder, Rotation.DEG_0, 0, 0)
    assert host is not None
    hierarchy.place("torso", wing, Rotation.DEG_180, 3, 2)
    for child in host.children:
        hierarchy.place(child.grid_id, stud, Rotation.DEG_0, 0, 0)

    print("=" * 60)
    print("Hierarchy with a hosting part")
    print("=" * 60)
    print(render_hierarchy(hierarchy))
    print()

    hierarchy.remove(host.occupant_id)
    print("After removing the hosting part:")
    print(render_hierarchy(hierarchy))
    print()
    print(render_grid(hierarchy.grid("torso"), color=False))


if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] == "debug":
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    parse_demo()
    rotation_demo()
    hierarchy_demo()
