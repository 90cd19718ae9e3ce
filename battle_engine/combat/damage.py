"""
Damage module for the battle engine.

Holds the result records produced when damage, healing and buffs are
resolved, and the pure damage formulas shared by attacks and damage skills.
"""

import math

from battle_engine.core.constants import BuffKind
from pydantic import BaseModel, Field


class RollResult(BaseModel):
    """Outcome of a crit roll applied to a base damage amount."""

    final_amount: int = Field(
        ge=0,
        description="Damage after the crit multiplier, floored.",
    )
    was_critical: bool = Field(
        default=False,
        description="Whether the roll was a critical hit.",
    )


class DamageResult(BaseModel):
    """
    Outcome of one hit landing on a character.

    `total_attempted` is the whole incoming hit, shield portion included, so
    a hit fully soaked by a shield still reports its full size. Hit points
    bottom out at 0, so an overkill removes less than `past_shield`.
    """

    total_attempted: int = Field(
        ge=0,
        description="The whole incoming hit, absorbed portion included.",
    )
    absorbed_by_shield: int = Field(
        default=0,
        ge=0,
        description="Portion of the hit consumed by the shield.",
    )
    was_critical: bool = Field(
        default=False,
        description="Whether the hit was a critical hit.",
    )

    @property
    def past_shield(self) -> int:
        """The portion of the hit aimed at hit points."""
        return self.total_attempted - self.absorbed_by_shield

    def describe(self, attacker: str, verb: str, target: str) -> str:
        """
        Builds the battle log line for this hit.

        Args:
            attacker (str):
                Name of the character dealing the damage.
            verb (str):
                What the attacker does, e.g. "attacks" or "uses Fireball on".
            target (str):
                Name of the character receiving the damage.

        Returns:
            str:
                The log line, with shield and critical notes when relevant.

        """
        message = f"{attacker} {verb} {target} for {self.total_attempted} damage!"
        if self.absorbed_by_shield > 0:
            message += f" ({self.absorbed_by_shield} absorbed by shield!)"
        if self.was_critical:
            message += " (Critical!)"
        return message


class HealResult(BaseModel):
    """Outcome of a heal skill."""

    restored: int = Field(
        ge=0,
        description="Hit points actually restored, after the max hp cap.",
    )


class BuffResult(BaseModel):
    """Outcome of a buff skill."""

    kind: BuffKind = Field(
        description="The kind of buff granted.",
    )
    magnitude: float = Field(
        description="The nominal magnitude granted.",
    )


def base_damage(
    offense: float,
    defense: int,
    minimum: int = 1,
) -> int:
    """
    Computes the pre-crit damage of a hit.

    Args:
        offense (float):
            The attacking value, e.g. `attack * attack_multiplier` or
            `power * multiplier`.
        defense (int):
            The target's current defense.
        minimum (int):
            Lower bound of the result.

    Returns:
        int:
            `floor(offense - defense)`, never below `minimum`.

    """
    return max(minimum, math.floor(offense - defense))


def apply_crit(amount: int, was_critical: bool, crit_damage: float) -> int:
    """
    Applies the crit damage multiplier to an amount when the roll succeeded.

    Args:
        amount (int):
            The pre-crit damage.
        was_critical (bool):
            Whether the crit roll succeeded.
        crit_damage (float):
            The attacker's current crit damage multiplier.

    Returns:
        int:
            The final damage, floored and never negative.

    """
    damage = amount * crit_damage if was_critical else amount
    return max(0, math.floor(damage))
