"""
Buff module for the battle engine.

Defines the timed modifiers a character owns, and the helpers that fold a
list of active buffs into per-kind totals.
"""

from collections.abc import Iterable
from typing import Any

from battle_engine.core.constants import BuffKind
from pydantic import BaseModel, Field


class Buff(BaseModel):
    """
    A timed modifier instance owned by exactly one character.

    Percent buffs add their magnitude (in percent) to the matching derived
    stat, shield buffs add their magnitude to the shield cap. A buff lasts
    exactly `turns` end-of-turn ticks after being applied.
    """

    kind: BuffKind = Field(
        description="The stat or resource this buff contributes to.",
    )
    magnitude: float = Field(
        description="Percentage for percent buffs, shield points for shield buffs.",
    )
    turns: int = Field(
        description="Remaining end-of-turn ticks before the buff expires.",
    )

    def model_post_init(self, _: Any) -> None:
        if self.turns < 1:
            raise ValueError(f"Buff turns must be at least 1, got {self.turns}")

    @property
    def display_name(self) -> str:
        return self.kind.label

    def tick(self) -> bool:
        """
        Consumes one end-of-turn tick.

        Returns:
            bool:
                True if the buff has expired and must be removed.

        """
        self.turns -= 1
        return self.turns <= 0

    def __str__(self) -> str:
        if self.kind.is_percent:
            return f"{self.kind.label} +{self.magnitude:g}% ({self.turns})"
        return f"{self.kind.label} {self.magnitude:g} ({self.turns})"


def sum_buffs(buffs: Iterable[Buff]) -> dict[BuffKind, float]:
    """
    Sums the magnitudes of the given buffs per kind.

    Buffs of the same kind stack additively: +10% and +20% attack add up to
    +30%, they are never compounded.

    Args:
        buffs (Iterable[Buff]):
            The active buffs.

    Returns:
        dict[BuffKind, float]:
            The total magnitude for every buff kind, 0 for absent kinds.

    """
    totals: dict[BuffKind, float] = {kind: 0.0 for kind in BuffKind}
    for buff in buffs:
        totals[buff.kind] += buff.magnitude
    return totals
