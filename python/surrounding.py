"""
Compatibility rules between a receiving socket (head) and a part (tail).

A head accepts a tail when its level is at least the tail's level and its
exposure covers what the tail needs:

- a Full tail (FH/FV) only fits a Full head with the identical alignment
- a tail with no edges fits any head
- a tail with edges fits a head whose open edges include them all
- a Full-Horizontal head offers L and R, a Full-Vertical head offers T and B
"""

from __future__ import annotations

from socket_types import Alignment, Edge, SurroundingSpec

__all__ = [
    "can_accept",
    "can_accept_level",
    "can_accept_edges",
    "edges_offered",
    "parse_edges",
    "edges_to_string",
]

# Canonical order of edge letters in descriptor text
EDGE_LETTERS: tuple[tuple[str, Edge], ...] = (
    ("L", Edge.L),
    ("R", Edge.R),
    ("T", Edge.T),
    ("B", Edge.B),
)

_ALIGNMENT_EDGES = {
    Alignment.HORIZONTAL: Edge.LR,
    Alignment.VERTICAL: Edge.TB,
}


def can_accept_level(head: SurroundingSpec, tail: SurroundingSpec) -> bool:
    """A head must be at least as leveled as the tail it receives."""
    return head.level >= tail.level


def edges_offered(head: SurroundingSpec) -> Edge:
    """Edges a head exposes, with full alignment expanded to its axis."""
    if head.is_full:
        return _ALIGNMENT_EDGES[head.alignment]
    return head.edges


def can_accept_edges(head: SurroundingSpec, tail: SurroundingSpec) -> bool:
    """Exposure part of the rule, ignoring levels."""
    if tail.is_full:
        return head.alignment is tail.alignment
    if not tail.has_edges:
        return True
    return (tail.edges & edges_offered(head)) == tail.edges


def can_accept(head: SurroundingSpec, tail: SurroundingSpec) -> bool:
    """Check whether a tail with this surrounding may sit in this head."""
    return can_accept_level(head, tail) and can_accept_edges(head, tail)


def parse_edges(text: str) -> Edge:
    """
    Parse edge letters written in canonical L, R, T, B order.

    Raises:
        ValueError: If the string is empty, has unknown letters, repeats a
            letter or is out of canonical order
    """
    if not text:
        raise ValueError("Edge string must not be empty")

    edges = Edge.NONE
    position = 0
    for letter, edge in EDGE_LETTERS:
        if position < len(text) and text[position] == letter:
            edges |= edge
            position += 1

    if position != len(text):
        raise ValueError(
            f"Invalid edge string '{text}'\n"
            f"  Edges must be a subset of L, R, T, B written in that order (e.g. 'LR', 'LT', 'LRTB')"
        )
    return edges


def edges_to_string(edges: Edge) -> str:
    """Canonical letters for a set of edges; empty string for none."""
    return "".join(letter for letter, edge in EDGE_LETTERS if edge in edges)
