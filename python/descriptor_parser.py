"""
Descriptor parsing for authored grid names.

Format (tokens separated by '_', case-sensitive):

    <Role>[_T<tier>]_<X>x<Y>_S<level|N>[FH|FV][_<Edges>]_<name>

- Role: 'Head' (socket region) or 'Tail' (part footprint)
- T<tier>: optional tier 1-6, defaults to 1
- <X>x<Y>: size in cells
- S<level>: integer level, or 'SN' for level 0 (no requirement)
- FH / FV: full horizontal / vertical alignment, attached to the level token
- Edges: non-empty subset of L, R, T, B in that order; excludes FH/FV
- name: everything that remains (may contain '_')

Examples:
    Head_2x4_S2_LR_torso     -> Head, tier 1, 2x4, level 2, edges L|R
    Tail_T3_1x2_S1_R_wing    -> Tail, tier 3, 1x2, level 1, edge R
    Head_3x1_S1FH_tube       -> Head, 3x1, level 1, full horizontal
    Tail_2x2_SN_plate        -> Tail, 2x2, no requirement
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from socket_types import Alignment, Edge, GridDescriptor, Role, SurroundingSpec
from surrounding import edges_to_string, parse_edges

__all__ = [
    "DescriptorError",
    "MAX_TIER",
    "parse",
    "try_parse",
    "format_descriptor",
    "is_valid_descriptor",
    "try_get_role",
    "parse_descriptors",
]

logger = logging.getLogger(__name__)

MAX_TIER = 6

_TIER_RE = re.compile(r"T([0-9]+)")
_SIZE_RE = re.compile(r"([0-9]+)x([0-9]+)")
_SURROUNDING_RE = re.compile(r"S(N|[0-9]+)(FH|FV)?")
_EDGES_RE = re.compile(r"[LRTB]+")

_ROLES = {role.value: role for role in Role}
_ALIGNMENTS = {alignment.value: alignment for alignment in Alignment if alignment is not Alignment.NONE}


class DescriptorError(ValueError):
    """Raised when an authoring string does not follow the descriptor format."""


def _fail(text: str, problem: str) -> DescriptorError:
    return DescriptorError(
        f"Invalid grid descriptor: '{text}'\n"
        f"  {problem}\n"
        f"  Expected: <Head|Tail>[_T<tier>]_<X>x<Y>_S<level|N>[FH|FV][_<LRTB>]_<name>\n"
        f"  Examples: 'Head_2x4_S2_LR_torso', 'Tail_T2_1x2_S1_R_wing', 'Head_3x1_S1FH_tube'"
    )


def parse(text: str) -> GridDescriptor:
    """
    Parse an authoring string into a GridDescriptor.

    Args:
        text: Descriptor string, e.g. 'Head_2x4_S2_LR_torso'

    Returns:
        The parsed descriptor

    Raises:
        DescriptorError: If any token is malformed or the name is missing
    """
    if not text:
        raise _fail(text, "Descriptor is empty")

    tokens = text.split("_")
    role = _ROLES.get(tokens[0])
    if role is None:
        raise _fail(text, f"Unknown role '{tokens[0]}' (expected 'Head' or 'Tail')")

    position = 1
    tier = 1
    if position < len(tokens) and (tier_match := _TIER_RE.fullmatch(tokens[position])):
        tier = int(tier_match.group(1))
        if not 1 <= tier <= MAX_TIER:
            raise _fail(text, f"Tier {tier} is out of range 1-{MAX_TIER}")
        position += 1

    if position >= len(tokens) or not (size_match := _SIZE_RE.fullmatch(tokens[position])):
        found = tokens[position] if position < len(tokens) else ""
        raise _fail(text, f"Expected size token '<X>x<Y>', found '{found}'")
    size_x, size_y = int(size_match.group(1)), int(size_match.group(2))
    if size_x <= 0 or size_y <= 0:
        raise _fail(text, f"Size {size_x}x{size_y} must be positive in both axes")
    position += 1

    if position >= len(tokens) or not (surrounding_match := _SURROUNDING_RE.fullmatch(tokens[position])):
        found = tokens[position] if position < len(tokens) else ""
        raise _fail(text, f"Expected surrounding token 'S<level|N>[FH|FV]', found '{found}'")
    level_str, alignment_str = surrounding_match.groups()
    level = 0 if level_str == "N" else int(level_str)
    alignment = _ALIGNMENTS[alignment_str] if alignment_str else Alignment.NONE
    position += 1

    # An edge token is only an edge token when a name still follows it
    edges = Edge.NONE
    if position + 1 < len(tokens) and _EDGES_RE.fullmatch(tokens[position]):
        if alignment is not Alignment.NONE:
            raise _fail(
                text,
                f"Edges '{tokens[position]}' conflict with full alignment '{alignment.value}'",
            )
        try:
            edges = parse_edges(tokens[position])
        except ValueError as e:
            raise _fail(text, str(e).splitlines()[0]) from e
        position += 1

    name = "_".join(tokens[position:])
    if not name:
        raise _fail(text, "Missing name after the surrounding token")

    return GridDescriptor(
        role=role,
        tier=tier,
        size_x=size_x,
        size_y=size_y,
        surrounding=SurroundingSpec(level=level, edges=edges, alignment=alignment),
        name=name,
    )


def try_parse(text: str) -> GridDescriptor | None:
    """Parse an authoring string, returning None instead of raising."""
    try:
        return parse(text)
    except DescriptorError as e:
        logger.debug("try_parse rejected %r: %s", text, str(e).splitlines()[1].strip())
        return None


def is_valid_descriptor(text: str) -> bool:
    return try_parse(text) is not None


def try_get_role(text: str) -> Role | None:
    """Role from the leading token alone, without validating the rest."""
    for role in Role:
        if text.startswith(role.value + "_"):
            return role
    return None


def format_descriptor(descriptor: GridDescriptor) -> str:
    """
    Serialize a descriptor back to its canonical authoring string.

    The tier segment is written only when the tier is not 1, so
    'Head_2x4_S2_LR_torso' round-trips unchanged.

    Raises:
        DescriptorError: If the descriptor has no edges and its name starts
            with an edge-letter segment, which would read back as edges
    """
    surrounding = descriptor.surrounding
    first, _, rest = descriptor.name.partition("_")
    if not surrounding.has_edges and rest and _EDGES_RE.fullmatch(first):
        raise DescriptorError(
            f"Cannot format descriptor named '{descriptor.name}'\n"
            f"  Leading segment '{first}' would be read back as edge letters"
        )
    parts = [descriptor.role.value]
    if descriptor.tier != 1:
        parts.append(f"T{descriptor.tier}")
    parts.append(f"{descriptor.size_x}x{descriptor.size_y}")

    level = "N" if surrounding.level == 0 else str(surrounding.level)
    parts.append(f"S{level}{surrounding.alignment.value}")

    if surrounding.has_edges:
        parts.append(edges_to_string(surrounding.edges))
    parts.append(descriptor.name)
    return "_".join(parts)


def parse_descriptors(texts: Iterable[str]) -> dict[str, GridDescriptor]:
    """
    Parse every descriptor among a set of authoring strings.

    Strings that are not descriptors (e.g. plain mesh names) are skipped
    with a warning. Later descriptors with a duplicate name replace
    earlier ones.

    Returns:
        Dict mapping descriptor name to descriptor
    """
    descriptors: dict[str, GridDescriptor] = {}
    for text in texts:
        descriptor = try_parse(text)
        if descriptor is None:
            logger.warning("Skipping %r: not a grid descriptor", text)
            continue
        if descriptor.name in descriptors:
            logger.warning("Descriptor name %r defined twice; keeping %r", descriptor.name, text)
        descriptors[descriptor.name] = descriptor
    return descriptors
