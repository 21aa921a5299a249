"""Tests for the surrounding compatibility rules."""

import itertools

import pytest

from descriptor_parser import parse
from socket_types import Alignment, Edge, SurroundingSpec
from surrounding import can_accept, can_accept_edges, edges_to_string, parse_edges

ALL_EDGE_SETS = [
    Edge(sum(edge.value for edge in combo))
    for n in range(5)
    for combo in itertools.combinations([Edge.L, Edge.R, Edge.T, Edge.B], n)
]

ALL_SPECS = [SurroundingSpec(level, edges) for level in range(3) for edges in ALL_EDGE_SETS] + [
    SurroundingSpec(level, alignment=alignment)
    for level in range(3)
    for alignment in (Alignment.HORIZONTAL, Alignment.VERTICAL)
]


def spec(level: int = 0, edges: Edge = Edge.NONE, alignment: Alignment = Alignment.NONE) -> SurroundingSpec:
    return SurroundingSpec(level, edges, alignment)


class TestSurroundingSpec:
    """Tests for SurroundingSpec invariants."""

    def test_edges_and_alignment_are_exclusive(self) -> None:
        """Edges and full alignment cannot be combined."""
        with pytest.raises(ValueError, match="cannot combine"):
            SurroundingSpec(1, Edge.L, Alignment.HORIZONTAL)

    def test_negative_level_rejected(self) -> None:
        """Levels start at 0."""
        with pytest.raises(ValueError, match="non-negative"):
            SurroundingSpec(-1)


class TestLevel:
    """Tests for the level part of the rule."""

    def test_lower_head_level_refuses(self) -> None:
        """A head below the tail's level refuses it."""
        assert not can_accept(spec(1), spec(2))

    def test_equal_and_higher_levels_accept(self) -> None:
        """Equal or higher head levels accept."""
        assert can_accept(spec(2), spec(2))
        assert can_accept(spec(3), spec(2))

    def test_no_requirement_fits_anything(self) -> None:
        """A level 0 tail without edges fits any head."""
        assert can_accept(spec(0), spec(0))
        assert can_accept(spec(0, alignment=Alignment.VERTICAL), spec(0))

    @pytest.mark.parametrize("head", ALL_SPECS)
    def test_raising_head_level_keeps_acceptance(self, head: SurroundingSpec) -> None:
        """Acceptance is monotonic in the head level."""
        for tail in ALL_SPECS:
            if can_accept(head, tail):
                raised = SurroundingSpec(head.level + 1, head.edges, head.alignment)
                assert can_accept(raised, tail)


class TestEdges:
    """Tests for the edge subset rule."""

    def test_subset_accepts(self) -> None:
        """Tail edges that the head offers are accepted."""
        assert can_accept(spec(2, Edge.LR), spec(1, Edge.L))
        assert can_accept(spec(2, Edge.LR), spec(1, Edge.LR))

    def test_missing_edge_refuses(self) -> None:
        """Any tail edge the head lacks refuses."""
        assert not can_accept(spec(2, Edge.LR), spec(1, Edge.T))
        assert not can_accept(spec(2, Edge.L), spec(1, Edge.LR))

    def test_edgeless_tail_fits_edged_head(self) -> None:
        """A tail without edges fits a head with edges."""
        assert can_accept(spec(1, Edge.LRTB), spec(1))

    def test_full_horizontal_head_offers_left_right(self) -> None:
        """An FH head accepts L and R edges only."""
        head = spec(2, alignment=Alignment.HORIZONTAL)
        assert can_accept(head, spec(1, Edge.L))
        assert can_accept(head, spec(1, Edge.LR))
        assert not can_accept(head, spec(1, Edge.T))
        assert not can_accept(head, spec(1, Edge.L | Edge.T))

    def test_full_vertical_head_offers_top_bottom(self) -> None:
        """An FV head accepts T and B edges only."""
        head = spec(2, alignment=Alignment.VERTICAL)
        assert can_accept(head, spec(1, Edge.TB))
        assert not can_accept(head, spec(1, Edge.R))


class TestFullAlignment:
    """Tests for full-enclosure tails."""

    def test_full_tail_rejected_by_edged_head_at_any_level(self) -> None:
        """No level lets an edged head take a full tail."""
        tail = spec(1, alignment=Alignment.HORIZONTAL)
        for level in range(5):
            assert not can_accept(spec(level, Edge.TB), tail)
            assert not can_accept(spec(level, Edge.LRTB), tail)

    def test_full_tail_needs_identical_alignment(self) -> None:
        """A full tail only fits a head with the same alignment."""
        tail = spec(1, alignment=Alignment.HORIZONTAL)
        assert can_accept(spec(1, alignment=Alignment.HORIZONTAL), tail)
        assert not can_accept(spec(1, alignment=Alignment.VERTICAL), tail)
        assert not can_accept(spec(1), tail)

    def test_full_tail_still_needs_level(self) -> None:
        """Matching alignment does not bypass the level check."""
        tail = spec(2, alignment=Alignment.VERTICAL)
        assert not can_accept(spec(1, alignment=Alignment.VERTICAL), tail)

    def test_edges_rule_ignores_levels(self) -> None:
        """can_accept_edges checks exposure only."""
        assert can_accept_edges(spec(0, Edge.L), spec(5, Edge.L))

    def test_parsed_descriptors(self) -> None:
        """The rule works on parsed descriptors."""
        head = parse("Head_3x2_S1FH_tube")
        assert can_accept(head.surrounding, parse("Tail_3x1_S1FH_band").surrounding)
        assert not can_accept(head.surrounding, parse("Tail_1x2_S1FV_strap").surrounding)
        assert not can_accept(parse("Head_3x2_S4_TB_slot").surrounding, parse("Tail_3x1_S1FH_band").surrounding)


class TestEdgeText:
    """Tests for edge letter conversion."""

    @pytest.mark.parametrize("edges", ALL_EDGE_SETS[1:])
    def test_letters_round_trip(self, edges: Edge) -> None:
        """Every non-empty edge set survives letters and back."""
        assert parse_edges(edges_to_string(edges)) == edges

    def test_canonical_order(self) -> None:
        """Letters are written in L, R, T, B order."""
        assert edges_to_string(Edge.B | Edge.L) == "LB"
        assert edges_to_string(Edge.NONE) == ""

    @pytest.mark.parametrize("text", ["", "X", "BL", "LRR", "lr"])
    def test_invalid_letters(self, text: str) -> None:
        """Empty, unknown, repeated or out-of-order letters are rejected."""
        with pytest.raises(ValueError):
            parse_edges(text)
