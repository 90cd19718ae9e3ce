"""
Character management module for the battle engine.

Defines the Character class: combat stats, resources, buffs and skills,
and the single-target resolution of attacks, skills and end-of-turn buff
decay.
"""

from collections.abc import Sequence

from battle_engine.combat.damage import (
    BuffResult,
    DamageResult,
    HealResult,
    RollResult,
    apply_crit,
    base_damage,
)
from battle_engine.core.constants import BuffKind, CharacterType
from battle_engine.core.rng import RandomSource, make_rng
from battle_engine.core.rules import DEFAULT_RULES, BattleRules
from battle_engine.effects.buff import Buff
from battle_engine.effects.skill import (
    CASTABLE_SKILL_TYPES,
    BuffSkill,
    DamageSkill,
    HealSkill,
    Skill,
)
from catchery import log_debug

from .character_effects import CharacterEffects
from .character_stats import CharacterStats

SkillResult = DamageResult | HealResult | BuffResult


class Character:
    """
    Represents a combatant, including its stats, resources, buffs and skills.

    Characters are created once per battle and mutated only through the
    methods below. Derived stats are recomputed after every buff list
    mutation, before they can be read.

    Attributes:
        char_type (CharacterType):
            The side the character fights on.
        name (str):
            The name of the character.
        skills (tuple[Skill, ...]):
            The skills the character can cast, shared content records.
        rng (RandomSource):
            The source used for crit rolls.
        rules (BattleRules):
            The rule numbers used while resolving this character's actions.

    """

    # === Static properties ===

    char_type: CharacterType
    name: str
    skills: tuple[Skill, ...]

    # === Management Modules ===

    stats: CharacterStats
    effects: CharacterEffects

    def __init__(
        self,
        name: str,
        hp: int,
        mp: int,
        attack: int,
        defense: int,
        attack_multiplier: float = 1.0,
        crit_rate: float = 0.0,
        crit_damage: float | None = None,
        skills: Sequence[Skill] = (),
        char_type: CharacterType = CharacterType.ENEMY,
        rng: RandomSource | None = None,
        rules: BattleRules | None = None,
    ) -> None:
        if not name:
            raise ValueError("Character name must be a non-empty string.")
        self.char_type = char_type
        self.name = name
        self.skills = tuple(skills)
        self.rng = rng if rng is not None else make_rng()
        self.rules = rules if rules is not None else DEFAULT_RULES

        # Initialize modules.
        self.stats = CharacterStats(
            owner=self,
            max_hp=hp,
            max_mp=mp,
            attack=attack,
            defense=defense,
            attack_multiplier=attack_multiplier,
            crit_rate=crit_rate,
            crit_damage=(
                crit_damage
                if crit_damage is not None
                else self.rules.default_crit_damage
            ),
        )
        self.effects = CharacterEffects(owner=self)

        self.recompute_derived_stats()

    # ============================================================================
    # DELEGATED STAT PROPERTIES
    # ============================================================================

    @property
    def hp(self) -> int:
        return self.stats.hp

    @property
    def max_hp(self) -> int:
        return self.stats.max_hp

    @property
    def mp(self) -> int:
        return self.stats.mp

    @property
    def max_mp(self) -> int:
        return self.stats.max_mp

    @property
    def attack(self) -> int:
        return self.stats.attack

    @property
    def defense(self) -> int:
        return self.stats.defense

    @property
    def crit_rate(self) -> float:
        return self.stats.crit_rate

    @property
    def crit_damage(self) -> float:
        return self.stats.crit_damage

    @property
    def attack_multiplier(self) -> float:
        return self.stats.attack_multiplier

    @property
    def shield(self) -> int:
        return self.stats.shield

    @property
    def max_shield(self) -> int:
        return self.stats.max_shield

    @property
    def buffs(self) -> tuple[Buff, ...]:
        """Returns the active buffs, in application order."""
        return tuple(self.effects.active_buffs)

    def is_alive(self) -> bool:
        return self.stats.hp > 0

    def is_dead(self) -> bool:
        return self.stats.hp <= 0

    def adjust_hp(self, amount: int) -> int:
        """
        Adjusts the character's hit points by a specific amount, clamped
        between 0 and max hp.
        """
        return self.stats.adjust_hp(amount)

    def adjust_mp(self, amount: int) -> int:
        """
        Adjusts the character's mana by a specific amount, clamped between 0
        and max mp.
        """
        return self.stats.adjust_mp(amount)

    # ============================================================================
    # RESOLUTION
    # ============================================================================

    def apply_damage(self, amount: int) -> DamageResult:
        """
        Applies an incoming hit: the shield absorbs first, the remainder
        reduces hit points, floored at 0.

        Args:
            amount (int):
                The incoming damage, clamped to be non-negative.

        Returns:
            DamageResult:
                The absorbed portion and the total attempted damage.

        """
        amount = max(0, int(amount))
        absorbed = self.stats.absorb(amount)
        self.stats.adjust_hp(-(amount - absorbed))
        return DamageResult(
            total_attempted=amount,
            absorbed_by_shield=absorbed,
        )

    def roll_damage(self, amount: int) -> RollResult:
        """
        Rolls for a critical hit and applies the crit damage multiplier.

        This is the only place the engine draws from its random source.

        Args:
            amount (int):
                The pre-crit damage.

        Returns:
            RollResult:
                The final damage, floored and non-negative, and whether the
                roll was critical.

        """
        was_critical = self.rng.random() < self.crit_rate
        return RollResult(
            final_amount=apply_crit(amount, was_critical, self.crit_damage),
            was_critical=was_critical,
        )

    def _strike(self, offense: float, target: "Character") -> DamageResult:
        damage = base_damage(offense, target.defense, self.rules.minimum_damage)
        roll = self.roll_damage(damage)
        result = target.apply_damage(roll.final_amount)
        log_debug(
            f"{self.name} hits {target.name}: base={damage} "
            f"final={roll.final_amount} crit={roll.was_critical}",
            {"attacker": self.name, "target": target.name},
        )
        return result.model_copy(update={"was_critical": roll.was_critical})

    def perform_attack(self, target: "Character") -> DamageResult:
        """
        Performs a normal attack on a target.

        The pre-crit damage is `floor(attack * attack_multiplier - target
        defense)`, at least the rules minimum.

        Args:
            target (Character):
                The character being attacked.

        Returns:
            DamageResult:
                The hit as it landed on the target.

        """
        return self._strike(self.attack * self.attack_multiplier, target)

    def cast_skill(self, skill_index: int, target: "Character") -> SkillResult | None:
        """
        Casts one of the character's skills.

        Mana is deducted before the effect resolves. Heal skills heal the
        given target, buff skills always buff the caster.

        Args:
            skill_index (int):
                Index of the skill in `skills`.
            target (Character):
                The character the skill is aimed at.

        Returns:
            SkillResult | None:
                The effect-specific result, or None if the skill does not
                exist, is of no castable type, or the caster lacks the mana;
                nothing changes then.

        """
        skill = self.get_skill(skill_index)
        if skill is None:
            log_debug(
                f"{self.name} has no skill at index {skill_index}",
                {"character": self.name, "skill_index": skill_index},
            )
            return None
        if not isinstance(skill, CASTABLE_SKILL_TYPES):
            log_debug(
                f"{self.name} cannot cast {skill.name}",
                {"character": self.name, "skill_type": type(skill).__name__},
            )
            return None
        if not self.can_afford(skill):
            log_debug(
                f"{self.name} cannot afford {skill.name}",
                {"character": self.name, "mp": self.mp, "mp_cost": skill.mp_cost},
            )
            return None

        self.stats.adjust_mp(-skill.mp_cost)

        if isinstance(skill, DamageSkill):
            return self._strike(skill.power * skill.multiplier, target)
        if isinstance(skill, HealSkill):
            return HealResult(restored=target.adjust_hp(skill.amount))
        assert isinstance(skill, BuffSkill)
        self.grant_buff(
            Buff(kind=skill.buff_kind, magnitude=skill.magnitude, turns=skill.duration)
        )
        return BuffResult(kind=skill.buff_kind, magnitude=skill.magnitude)

    def get_skill(self, skill_index: int) -> Skill | None:
        """Returns the skill at the given index, or None if there is none."""
        if 0 <= skill_index < len(self.skills):
            return self.skills[skill_index]
        return None

    def can_afford(self, skill: Skill) -> bool:
        return self.mp >= skill.mp_cost

    # ============================================================================
    # BUFFS
    # ============================================================================

    def grant_buff(self, buff: Buff) -> None:
        """
        Adds a buff to the character.

        Shield buffs grant their points immediately, as a resource, before
        the cap is recomputed and the shield clamped into it.

        Args:
            buff (Buff):
                The buff to add.

        """
        self.effects.add_buff(buff)
        if buff.kind == BuffKind.SHIELD:
            self.stats.add_shield(int(buff.magnitude))
        self.recompute_derived_stats()

    def recompute_derived_stats(self) -> None:
        """
        Re-derives attack, defense, crit rate, crit damage and the shield cap
        from base stats and active buffs, and clamps the current shield.
        """
        self.stats.recompute(self.effects.totals())

    def end_turn(self) -> list[Buff]:
        """
        Decrements every buff, removes the expired ones and recomputes the
        derived stats.

        Returns:
            list[Buff]:
                The buffs that expired.

        """
        expired = self.effects.tick_buffs()
        self.recompute_derived_stats()
        return expired

    def __repr__(self) -> str:
        return (
            f"Character({self.name!r}, hp={self.hp}/{self.max_hp}, "
            f"mp={self.mp}/{self.max_mp}, shield={self.shield}/{self.max_shield})"
        )
