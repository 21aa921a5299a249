"""
Tier to cell-size configuration.

The tier of a grid fixes the physical size of its cells; a part can only be
placed in a grid of the same tier.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

logger = logging.getLogger(__name__)

__all__ = ["TierSetting", "TierTable", "DEFAULT_TIERS"]


@dataclass(frozen=True)
class TierSetting:
    """Cell size for one tier."""

    tier: int
    cell_size: float
    description: str = ""

    def __post_init__(self) -> None:
        if self.tier <= 0:
            raise ValueError(f"Tier must be positive, got {self.tier}")
        if self.cell_size <= 0:
            raise ValueError(f"Cell size for tier {self.tier} must be positive, got {self.cell_size}")


@dataclass(frozen=True)
class TierTable:
    """
    Lookup from tier to cell size.

    Unknown tiers fall back to tier 1 (with a warning) so a misconfigured
    asset still renders at some scale.
    """

    settings: tuple[TierSetting, ...]
    fallback_tier: int = 1
    _sizes: dict[int, float] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        sizes = {setting.tier: setting.cell_size for setting in self.settings}
        if len(sizes) != len(self.settings):
            raise ValueError("Tier table defines the same tier more than once")
        if self.fallback_tier not in sizes:
            raise ValueError(f"Fallback tier {self.fallback_tier} is not configured")
        object.__setattr__(self, "_sizes", sizes)

    @classmethod
    def from_mapping(cls, cell_sizes: Mapping[int, float]) -> TierTable:
        """Build a table from a plain {tier: cell_size} mapping."""
        return cls(tuple(TierSetting(tier, size) for tier, size in sorted(cell_sizes.items())))

    def has_tier(self, tier: int) -> bool:
        return tier in self._sizes

    def configured_tiers(self) -> list[int]:
        return sorted(self._sizes)

    def cell_size(self, tier: int) -> float:
        size = self._sizes.get(tier)
        if size is None:
            logger.warning("Tier %d not configured; using tier %d", tier, self.fallback_tier)
            return self._sizes[self.fallback_tier]
        return size

    def world_size(self, tier: int, cells_x: int, cells_y: int) -> tuple[float, float]:
        size = self.cell_size(tier)
        return (cells_x * size, cells_y * size)

    def cell_to_local(self, tier: int, cell_x: float, cell_y: float) -> tuple[float, float, float]:
        size = self.cell_size(tier)
        return (cell_x * size, cell_y * size, 0.0)


DEFAULT_TIERS = TierTable(
    (
        TierSetting(1, 0.1, "Small robots (player)"),
        TierSetting(2, 0.25, "Raptors"),
        TierSetting(3, 0.5, "Trikes"),
        TierSetting(4, 1.0, "T-Rex"),
        TierSetting(5, 1.5, "Very large robots"),
        TierSetting(6, 2.0, "Colossal robots"),
    )
)
