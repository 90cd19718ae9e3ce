"""
Character stats module for the battle engine.

Handles the base stats, the resources (hit points, mana, shield) and the
derived stats of a Character. Derived stats are re-derived from the base
values plus the active buff totals, never adjusted in place.
"""

import math
from typing import Any

from battle_engine.core.constants import BuffKind


class CharacterStats:
    """
    Handles all stat calculations and resources for a Character.

    Attributes:
        owner (Any):
            The Character instance that owns this CharacterStats.
        max_hp (int):
            The maximum hit points.
        hp (int):
            The current hit points, in `[0, max_hp]`.
        max_mp (int):
            The maximum mana.
        mp (int):
            The current mana, in `[0, max_mp]`.
        shield (int):
            The current shield, a persistent resource in `[0, max_shield]`.
        max_shield (int):
            The shield cap, derived from active shield buffs.

    """

    def __init__(
        self,
        owner: Any,
        max_hp: int,
        max_mp: int,
        attack: int,
        defense: int,
        attack_multiplier: float,
        crit_rate: float,
        crit_damage: float,
    ) -> None:
        """
        Initializes the CharacterStats with a reference to its owner.

        Args:
            owner (Any):
                The Character instance that owns this CharacterStats.
            max_hp (int):
                Maximum hit points, must be positive.
            max_mp (int):
                Maximum mana, must not be negative.
            attack (int):
                Base attack.
            defense (int):
                Base defense.
            attack_multiplier (float):
                Multiplier applied to attack on normal attacks.
            crit_rate (float):
                Base crit rate, a probability in `[0, 1]`.
            crit_damage (float):
                Base crit damage multiplier.

        Raises:
            ValueError:
                If any of the values is out of range.

        """
        if max_hp <= 0:
            raise ValueError(f"max_hp must be positive, got {max_hp}")
        if max_mp < 0:
            raise ValueError(f"max_mp must not be negative, got {max_mp}")
        if attack < 0 or defense < 0:
            raise ValueError(
                f"attack and defense must not be negative, got {attack}/{defense}"
            )
        if attack_multiplier < 0:
            raise ValueError(
                f"attack_multiplier must not be negative, got {attack_multiplier}"
            )
        if not 0.0 <= crit_rate <= 1.0:
            raise ValueError(f"crit_rate must be in [0, 1], got {crit_rate}")
        if crit_damage < 0:
            raise ValueError(f"crit_damage must not be negative, got {crit_damage}")

        self.owner: Any = owner

        self.max_hp: int = max_hp
        self.hp: int = max_hp
        self.max_mp: int = max_mp
        self.mp: int = max_mp

        self._base_attack: int = attack
        self._base_defense: int = defense
        self._base_crit_rate: float = crit_rate
        self._base_crit_damage: float = crit_damage
        self._attack_multiplier: float = attack_multiplier

        self.attack: int = attack
        self.defense: int = defense
        self.crit_rate: float = crit_rate
        self.crit_damage: float = crit_damage

        self.shield: int = 0
        self.max_shield: int = 0

    @property
    def attack_multiplier(self) -> float:
        return self._attack_multiplier

    # ============================================================================
    # DERIVED STATS
    # ============================================================================

    def recompute(self, totals: dict[BuffKind, float]) -> None:
        """
        Re-derives attack, defense, crit rate, crit damage and the shield cap
        from the base values and the summed buff magnitudes, then clamps the
        current shield into the new cap.

        Args:
            totals (dict[BuffKind, float]):
                Summed buff magnitudes per kind, percentages for percent
                kinds and points for shields.

        """
        atk_bonus = totals.get(BuffKind.ATTACK_PERCENT, 0.0)
        def_bonus = totals.get(BuffKind.DEFENSE_PERCENT, 0.0)
        crit_rate_bonus = totals.get(BuffKind.CRIT_RATE_PERCENT, 0.0)
        crit_dmg_bonus = totals.get(BuffKind.CRIT_DAMAGE_PERCENT, 0.0)
        shield_bonus = totals.get(BuffKind.SHIELD, 0.0)

        self.attack = max(0, math.floor(self._base_attack * (1 + atk_bonus / 100)))
        self.defense = max(0, math.floor(self._base_defense * (1 + def_bonus / 100)))
        self.crit_rate = min(1.0, max(0.0, self._base_crit_rate + crit_rate_bonus / 100))
        self.crit_damage = max(0.0, self._base_crit_damage * (1 + crit_dmg_bonus / 100))

        # The cap follows the buffs, the current shield only shrinks to fit it.
        self.max_shield = max(0, math.floor(shield_bonus))
        self.shield = max(0, min(self.shield, self.max_shield))

    # ============================================================================
    # RESOURCES
    # ============================================================================

    def adjust_hp(self, amount: int) -> int:
        """
        Adjusts the current hit points, clamped between 0 and max_hp.

        Args:
            amount (int):
                The amount to add, negative to remove.

        Returns:
            int:
                The actual change applied.

        """
        before = self.hp
        self.hp = max(0, min(self.max_hp, self.hp + amount))
        return self.hp - before

    def adjust_mp(self, amount: int) -> int:
        """
        Adjusts the current mana, clamped between 0 and max_mp.

        Args:
            amount (int):
                The amount to add, negative to remove.

        Returns:
            int:
                The actual change applied.

        """
        before = self.mp
        self.mp = max(0, min(self.max_mp, self.mp + amount))
        return self.mp - before

    def add_shield(self, amount: int) -> None:
        """Adds shield points. The cap is enforced on the next recompute."""
        self.shield = max(0, self.shield + amount)

    def absorb(self, amount: int) -> int:
        """
        Consumes shield points against an incoming hit.

        Args:
            amount (int):
                The incoming damage.

        Returns:
            int:
                The portion of the damage the shield absorbed.

        """
        absorbed = min(max(0, amount), self.shield)
        self.shield -= absorbed
        return absorbed
