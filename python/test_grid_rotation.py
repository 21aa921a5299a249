"""
Tests for rotating descriptors and picking distinct valid rotations.

Composition properties are checked over every descriptor in SAMPLES, and
get_valid_rotations is checked once per symmetry class.
"""

import pytest

from descriptor_parser import format_descriptor, parse
from grid_rotation import (
    ROTATIONS,
    combine,
    get_valid_rotations,
    rotate_alignment,
    rotate_clockwise,
    rotate_counter_clockwise,
    rotate_descriptor,
    rotate_edges,
    rotate_size,
)
from socket_types import Alignment, Edge, GridDescriptor, Rotation

R0, R90, R180, R270 = ROTATIONS

SAMPLES = [
    parse(text)
    for text in [
        "Tail_1x2_S1_R_wing",
        "Tail_2x2_SN_plate",
        "Tail_3x1_S2_LT_brace",
        "Tail_2x3_S1_LRT_cowl",
        "Tail_3x1_S1FH_band",
        "Tail_1x4_S1FV_strap",
        "Head_2x4_S2_LR_torso",
        "Head_T4_5x2_S3_LRTB_chassis",
    ]
]

OPEN_HEAD = parse("Head_4x4_S9_LRTB_open")


class TestRotationSteps:
    """Tests for stepping between rotation values."""

    def test_clockwise_cycle(self) -> None:
        """Clockwise steps wrap from 270 back to 0."""
        assert rotate_clockwise(R0) is R90
        assert rotate_clockwise(R270) is R0

    def test_counter_clockwise_cycle(self) -> None:
        """Counter-clockwise steps wrap from 0 to 270."""
        assert rotate_counter_clockwise(R0) is R270
        assert rotate_counter_clockwise(R90) is R0

    def test_combine(self) -> None:
        """Combined rotations add modulo a full turn."""
        assert combine(R90, R90) is R180
        assert combine(R270, R180) is R90


class TestPrimitives:
    """Tests for the edge, alignment and size transforms."""

    @pytest.mark.parametrize(
        "rotation, expected",
        [(R0, Edge.L), (R90, Edge.T), (R180, Edge.R), (R270, Edge.B)],
    )
    def test_single_edge_walks_clockwise(self, rotation: Rotation, expected: Edge) -> None:
        """A single edge walks L, T, R, B as the rotation grows."""
        assert rotate_edges(Edge.L, rotation) == expected

    def test_edge_set_rotates_bitwise(self) -> None:
        """Each set bit is permuted independently."""
        assert rotate_edges(Edge.L | Edge.T, R90) == Edge.T | Edge.R
        assert rotate_edges(Edge.LR, R90) == Edge.TB
        assert rotate_edges(Edge.LRTB, R270) == Edge.LRTB
        assert rotate_edges(Edge.NONE, R90) == Edge.NONE

    def test_alignment_swaps_on_quarter_turns(self) -> None:
        """FH and FV swap under odd quarter turns only."""
        assert rotate_alignment(Alignment.HORIZONTAL, R90) is Alignment.VERTICAL
        assert rotate_alignment(Alignment.VERTICAL, R270) is Alignment.HORIZONTAL
        assert rotate_alignment(Alignment.HORIZONTAL, R180) is Alignment.HORIZONTAL
        assert rotate_alignment(Alignment.NONE, R90) is Alignment.NONE

    def test_size_swaps_on_quarter_turns(self) -> None:
        """Size axes swap under odd quarter turns only."""
        assert rotate_size(1, 3, R90) == (3, 1)
        assert rotate_size(1, 3, R180) == (1, 3)
        assert rotate_size(1, 3, R270) == (3, 1)


class TestRotateDescriptor:
    """Composition properties of descriptor rotation."""

    @pytest.mark.parametrize("d", SAMPLES, ids=format_descriptor)
    def test_zero_is_identity(self, d: GridDescriptor) -> None:
        """Rotating by 0 gives an equal descriptor."""
        assert rotate_descriptor(d, R0) == d

    @pytest.mark.parametrize("d", SAMPLES, ids=format_descriptor)
    def test_two_quarter_turns_equal_half_turn(self, d: GridDescriptor) -> None:
        """Two quarter turns equal one half turn."""
        assert rotate_descriptor(rotate_descriptor(d, R90), R90) == rotate_descriptor(d, R180)

    @pytest.mark.parametrize("d", SAMPLES, ids=format_descriptor)
    def test_four_quarter_turns_are_identity(self, d: GridDescriptor) -> None:
        """Four quarter turns return the original."""
        rotated = d
        for _ in range(4):
            rotated = rotate_descriptor(rotated, R90)
        assert rotated == d

    @pytest.mark.parametrize("d", SAMPLES, ids=format_descriptor)
    @pytest.mark.parametrize("first", ROTATIONS)
    @pytest.mark.parametrize("second", ROTATIONS)
    def test_rotations_compose(self, d: GridDescriptor, first: Rotation, second: Rotation) -> None:
        """Rotating twice equals rotating once by the sum."""
        assert rotate_descriptor(rotate_descriptor(d, first), second) == rotate_descriptor(
            d, combine(first, second)
        )

    def test_preserves_identity_fields(self) -> None:
        """Role, tier, level and name survive rotation."""
        d = parse("Tail_T2_1x3_S2_LT_fin")
        rotated = rotate_descriptor(d, R90)

        assert rotated is not d
        assert (rotated.role, rotated.tier, rotated.name) == (d.role, d.tier, d.name)
        assert rotated.surrounding.level == 2
        assert (rotated.size_x, rotated.size_y) == (3, 1)
        assert rotated.surrounding.edges == Edge.T | Edge.R

    def test_original_untouched(self) -> None:
        """Rotation never mutates its input."""
        d = parse("Tail_1x2_S1_R_wing")
        rotate_descriptor(d, R90)
        assert d == parse("Tail_1x2_S1_R_wing")


class TestValidRotations:
    """One case per symmetry class of a tail."""

    def test_wing_against_torso(self) -> None:
        """Only half turns keep the wing's edge on an open side."""
        head = parse("Head_2x4_S2_LR_torso")
        tail = parse("Tail_1x2_S1_R_wing")

        assert rotate_descriptor(tail, R180).surrounding.edges == Edge.L
        assert rotate_descriptor(tail, R90).surrounding.edges == Edge.B
        assert rotate_descriptor(tail, R270).surrounding.edges == Edge.T
        assert get_valid_rotations(tail, head) == {R0, R180}

    @pytest.mark.parametrize(
        "tail_text, expected",
        [
            # Fully symmetric: one representative
            ("Tail_2x2_SN_plate", {R0}),
            ("Tail_2x2_S1_LRTB_cap", {R0}),
            # Symmetric under half turns only
            ("Tail_1x2_SN_bar", {R0, R90}),
            ("Tail_2x2_S1_LR_bridge", {R0, R90}),
            ("Tail_1x3_S1_TB_post", {R0, R90}),
            # Asymmetric: all four
            ("Tail_2x2_S1_L_clip", set(ROTATIONS)),
            ("Tail_2x2_S1_LT_corner", set(ROTATIONS)),
            ("Tail_2x2_S1_LRT_hood", set(ROTATIONS)),
            ("Tail_1x2_S1_R_wing", set(ROTATIONS)),
        ],
    )
    def test_symmetry_classes_against_open_head(self, tail_text: str, expected: set[Rotation]) -> None:
        """Count distinct rotations per symmetry class."""
        assert get_valid_rotations(parse(tail_text), OPEN_HEAD) == expected

    def test_full_tail_against_matching_full_head(self) -> None:
        """A full tail keeps the rotation matching the head alignment."""
        tail = parse("Tail_3x1_S1FH_band")
        assert get_valid_rotations(tail, parse("Head_3x2_S1FH_tube")) == {R0}
        assert get_valid_rotations(tail, parse("Head_2x3_S1FV_tube")) == {R90}

    def test_square_full_tail(self) -> None:
        """A square full tail still needs its alignment turned to match."""
        tail = parse("Tail_2x2_S1FV_sleeve")
        assert get_valid_rotations(tail, parse("Head_2x2_S1FV_tube")) == {R0}
        assert get_valid_rotations(tail, parse("Head_2x2_S1FH_tube")) == {R90}

    def test_full_tail_never_fits_edged_head(self) -> None:
        """An edged head never takes a full tail in any rotation."""
        assert get_valid_rotations(parse("Tail_3x1_S1FH_band"), OPEN_HEAD) == set()

    def test_level_too_high(self) -> None:
        """No rotation helps when the level is too high."""
        assert get_valid_rotations(parse("Tail_1x1_S3_stud"), parse("Head_2x2_S2_socket")) == set()

    def test_edge_filter_against_partial_head(self) -> None:
        """Left-only head keeps just the rotation that maps the edge onto L."""
        head = parse("Head_3x3_S2_L_rail")
        assert get_valid_rotations(parse("Tail_1x1_S1_T_tab"), head) == {R270}

    def test_geometric_fit_not_considered(self) -> None:
        """A part larger than the socket still gets its surrounding-valid rotations."""
        assert get_valid_rotations(parse("Tail_9x1_SN_beam"), parse("Head_2x2_S1_socket")) == {R0, R90}
