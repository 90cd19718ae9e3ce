"""
Rule parameters for the battle engine.

Groups the tunable numbers the combat resolution depends on, so that a
battle can be played with different numbers without touching the engine.
"""

from pydantic import BaseModel, Field


class BattleRules(BaseModel):
    """
    Tunable numbers used while resolving a battle.

    The defaults reproduce the canonical rule set.
    """

    attack_mp_regen: int = Field(
        default=5,
        ge=0,
        description="Mana restored to the player after a normal attack.",
    )
    minimum_damage: int = Field(
        default=1,
        ge=0,
        description="Lower bound of the pre-crit damage of attacks and damage skills.",
    )
    experience_per_enemy: int = Field(
        default=10,
        ge=0,
        description="Experience granted per enemy in the original roster on victory.",
    )
    coins_per_enemy: int = Field(
        default=5,
        ge=0,
        description="Coins granted per enemy in the original roster on victory.",
    )
    default_crit_damage: float = Field(
        default=1.5,
        ge=0.0,
        description="Crit damage multiplier used when a character does not define one.",
    )


DEFAULT_RULES = BattleRules()
