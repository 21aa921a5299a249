"""
Rotation of grid descriptors in 90° clockwise steps.

A single clockwise step maps edges L -> T -> R -> B -> L, swaps the size
axes and swaps horizontal and vertical full alignment. Each of these is a
permutation, so rotations compose: rotating by 90° twice equals rotating
by 180°, and four 90° steps are the identity.
"""

from __future__ import annotations

from dataclasses import replace

from socket_types import Alignment, Edge, GridDescriptor, Rotation
from surrounding import can_accept

__all__ = [
    "ROTATIONS",
    "rotate_clockwise",
    "rotate_counter_clockwise",
    "combine",
    "rotate_edges",
    "rotate_alignment",
    "rotate_size",
    "rotate_descriptor",
    "get_valid_rotations",
]

ROTATIONS: tuple[Rotation, ...] = (
    Rotation.DEG_0,
    Rotation.DEG_90,
    Rotation.DEG_180,
    Rotation.DEG_270,
)

# Single 90° clockwise step
_EDGE_STEP: tuple[tuple[Edge, Edge], ...] = (
    (Edge.L, Edge.T),
    (Edge.T, Edge.R),
    (Edge.R, Edge.B),
    (Edge.B, Edge.L),
)

_ALIGNMENT_SWAP = {
    Alignment.NONE: Alignment.NONE,
    Alignment.HORIZONTAL: Alignment.VERTICAL,
    Alignment.VERTICAL: Alignment.HORIZONTAL,
}


def rotate_clockwise(rotation: Rotation) -> Rotation:
    return ROTATIONS[(rotation.steps + 1) % 4]


def rotate_counter_clockwise(rotation: Rotation) -> Rotation:
    return ROTATIONS[(rotation.steps - 1) % 4]


def combine(first: Rotation, second: Rotation) -> Rotation:
    """Rotation equivalent to applying first, then second."""
    return ROTATIONS[(first.steps + second.steps) % 4]


def _rotate_edges_90(edges: Edge) -> Edge:
    result = Edge.NONE
    for source, target in _EDGE_STEP:
        if source in edges:
            result |= target
    return result


def rotate_edges(edges: Edge, rotation: Rotation) -> Edge:
    """Apply the clockwise edge permutation once per 90° step."""
    for _ in range(rotation.steps):
        edges = _rotate_edges_90(edges)
    return edges


def rotate_alignment(alignment: Alignment, rotation: Rotation) -> Alignment:
    """Horizontal and vertical swap under odd quarter turns."""
    if rotation.steps % 2 == 1:
        return _ALIGNMENT_SWAP[alignment]
    return alignment


def rotate_size(size_x: int, size_y: int, rotation: Rotation) -> tuple[int, int]:
    if rotation.steps % 2 == 1:
        return (size_y, size_x)
    return (size_x, size_y)


def rotate_descriptor(descriptor: GridDescriptor, rotation: Rotation) -> GridDescriptor:
    """
    Return a new descriptor rotated clockwise by the given amount.

    Role, tier, level and name are preserved; the original is untouched.
    """
    size_x, size_y = rotate_size(descriptor.size_x, descriptor.size_y, rotation)
    surrounding = replace(
        descriptor.surrounding,
        edges=rotate_edges(descriptor.surrounding.edges, rotation),
        alignment=rotate_alignment(descriptor.surrounding.alignment, rotation),
    )
    return replace(descriptor, size_x=size_x, size_y=size_y, surrounding=surrounding)


def get_valid_rotations(tail: GridDescriptor, head: GridDescriptor) -> set[Rotation]:
    """
    Find the distinct rotations under which a head accepts a tail.

    Only the surrounding rule is checked here; geometric fit is decided at
    placement time. Rotations yielding the same size, edges and alignment
    are equivalent, and only the smallest of each such group is kept.

    Args:
        tail: The part's footprint descriptor
        head: The socket's descriptor

    Returns:
        One representative rotation per distinct accepted orientation
    """
    representatives: dict[tuple, Rotation] = {}
    for rotation in ROTATIONS:
        rotated = rotate_descriptor(tail, rotation)
        if not can_accept(head.surrounding, rotated.surrounding):
            continue
        representatives.setdefault(rotated.shape_key, rotation)
    return set(representatives.values())
