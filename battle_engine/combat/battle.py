"""
Battle module for the battle engine.

Defines the Battle turn state machine: it sequences the player action, the
enemy counter-attacks, buff decay and the end-of-battle check, and records
every event in a chronological battle log.
"""

from collections.abc import Sequence

from battle_engine.character.character_serialization import (
    CharacterSnapshot,
    snapshot_character,
)
from battle_engine.character.main import Character
from battle_engine.core.constants import (
    ActionKind,
    BattlePhase,
    EffectKind,
    RejectionReason,
)
from battle_engine.core.rng import RandomSource, make_rng
from battle_engine.core.rules import BattleRules
from battle_engine.effects.skill import CASTABLE_SKILL_TYPES, Skill
from catchery import log_debug, log_warning
from pydantic import BaseModel, Field

from .battle_log import BattleLog
from .damage import DamageResult, HealResult


class BattleRewards(BaseModel):
    """Rewards granted to the player on victory."""

    experience: int = Field(ge=0)
    coins: int = Field(ge=0)


class ActionResult(BaseModel):
    """Outcome of a call to `Battle.submit_player_action`."""

    accepted: bool = Field(
        description="Whether the action was resolved.",
    )
    rejection: RejectionReason | None = Field(
        default=None,
        description="Why the action was refused, None when accepted.",
    )
    entries: list[str] = Field(
        default_factory=list,
        description="The battle log entries appended by this call.",
    )


class BattleSnapshot(BaseModel):
    """A point-in-time copy of the state of a Battle."""

    phase: BattlePhase
    turn_number: int
    player: CharacterSnapshot
    enemies: list[CharacterSnapshot]
    selected_target: int
    selected_skill: int | None
    log: list[str]
    rewards: BattleRewards | None = None


class _Rejected(Exception):
    """Internal signal carrying the reason and message of a refused action."""

    def __init__(self, reason: RejectionReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


class Battle:
    """
    Manages the flow of one battle between a player and a fixed roster of
    enemies.

    A round is: one player action, then every living enemy attacks the
    player in roster order, then every character's buffs decay (player
    first, then enemies in roster order). The battle ends as soon as either
    side has no living members; a defeated player takes priority over a
    defeated roster.

    Invalid input never raises: it appends a rejection message to the log,
    leaves the state untouched and does not advance the turn.
    """

    def __init__(
        self,
        player: Character,
        enemies: Sequence[Character],
        rng: RandomSource | None = None,
        seed: int | None = None,
        rules: BattleRules | None = None,
    ) -> None:
        """
        Initialize the Battle with its participants.

        Args:
            player (Character):
                The character controlled by the caller.
            enemies (Sequence[Character]):
                The enemy roster, in acting order. Its size is fixed.
            rng (RandomSource | None):
                Source for every crit roll of the battle. Overrides `seed`.
            seed (int | None):
                Seed for a fresh shared random source.
            rules (BattleRules | None):
                Rule numbers, installed on every participant. Defaults to
                the rules of the player.

        Raises:
            ValueError:
                If the roster is empty, the player is also an enemy, or an
                enemy appears twice.

        """
        if not enemies:
            raise ValueError("A battle needs at least one enemy.")
        if any(enemy is player for enemy in enemies):
            raise ValueError("The player cannot also be one of the enemies.")
        if len({id(enemy) for enemy in enemies}) != len(enemies):
            raise ValueError("The same character cannot appear twice in the roster.")

        self.player: Character = player
        self.enemies: tuple[Character, ...] = tuple(enemies)
        # Without explicit rules the whole battle follows the player's.
        self.rules: BattleRules = rules if rules is not None else player.rules

        # Install shared rules and randomness on every participant.
        for character in self.participants:
            character.rules = self.rules
        if rng is None and seed is not None:
            rng = make_rng(seed)
        if rng is not None:
            for character in self.participants:
                character.rng = rng

        self.phase: BattlePhase = BattlePhase.PLAYER_TURN
        self.turn_number: int = 1
        self.selected_skill: int | None = None
        self.selected_target: int = 0
        self.rewards: BattleRewards | None = None

        self.log: BattleLog = BattleLog()
        self.log.add("Battle started!")

    # ============================================================================
    # ACCESSORS
    # ============================================================================

    @property
    def participants(self) -> list[Character]:
        """The player followed by the enemies in roster order."""
        return [self.player, *self.enemies]

    @property
    def is_player_turn(self) -> bool:
        return self.phase == BattlePhase.PLAYER_TURN

    def is_over(self) -> bool:
        return self.phase.is_terminal

    def get_alive_enemies(self) -> list[Character]:
        """Returns the enemies that are still alive, in roster order."""
        return [enemy for enemy in self.enemies if enemy.is_alive()]

    def get_selected_enemy(self) -> Character | None:
        """Returns the selected enemy, alive or not, or None if out of range."""
        if 0 <= self.selected_target < len(self.enemies):
            return self.enemies[self.selected_target]
        return None

    def get_selected_skill(self) -> Skill | None:
        if self.selected_skill is None:
            return None
        return self.player.get_skill(self.selected_skill)

    def player_snapshot(self) -> CharacterSnapshot:
        return snapshot_character(self.player)

    def enemy_snapshots(self) -> list[CharacterSnapshot]:
        return [snapshot_character(enemy) for enemy in self.enemies]

    def snapshot(self) -> BattleSnapshot:
        """
        Takes a snapshot of the whole battle.

        Returns:
            BattleSnapshot:
                Phase, participants, selections, log and rewards.

        """
        return BattleSnapshot(
            phase=self.phase,
            turn_number=self.turn_number,
            player=self.player_snapshot(),
            enemies=self.enemy_snapshots(),
            selected_target=self.selected_target,
            selected_skill=self.selected_skill,
            log=list(self.log.entries),
            rewards=self.rewards,
        )

    # ============================================================================
    # SELECTION
    # ============================================================================

    def select_target(self, index: int) -> bool:
        """
        Selects the enemy targeted by attacks and damage skills.

        Selecting a defeated enemy is allowed: validity is checked when an
        action is submitted. The selection persists across turns.

        Args:
            index (int):
                Index of the enemy in the roster.

        Returns:
            bool:
                False if it is not the player's turn and nothing changed.

        """
        if not self.is_player_turn:
            log_warning(
                "Target selection ignored outside the player's turn",
                {"phase": str(self.phase), "index": index},
            )
            return False
        self.selected_target = index
        return True

    def select_skill(self, index: int | None) -> bool:
        """
        Selects the skill cast by the next skill action, None to clear it.

        Args:
            index (int | None):
                Index of the skill in the player's skill list.

        Returns:
            bool:
                False if it is not the player's turn and nothing changed.

        """
        if not self.is_player_turn:
            log_warning(
                "Skill selection ignored outside the player's turn",
                {"phase": str(self.phase), "index": index},
            )
            return False
        self.selected_skill = index
        return True

    # ============================================================================
    # TURN SEQUENCING
    # ============================================================================

    def submit_player_action(
        self,
        kind: ActionKind | str,
        resolve_enemy_phase: bool = True,
    ) -> ActionResult:
        """
        Resolves a player action and, unless the battle ends, the enemy phase.

        Args:
            kind (ActionKind | str):
                ATTACK the selected enemy, or cast the selected SKILL.
            resolve_enemy_phase (bool):
                When False the battle stops in RESOLVING_ENEMY_TURN and the
                caller runs `run_enemy_phase` later, with identical outcome.

        Returns:
            ActionResult:
                Whether the action was accepted, the rejection reason if
                not, and the log entries appended by this call.

        """
        start = len(self.log)
        try:
            action = self._validate_phase(kind)
            if action == ActionKind.ATTACK:
                self._resolve_attack()
            else:
                self._resolve_skill()
        except _Rejected as rejection:
            log_warning(
                f"Rejected player action: {rejection.message}",
                {"kind": str(kind), "reason": str(rejection.reason)},
            )
            self.log.add(rejection.message)
            return ActionResult(
                accepted=False,
                rejection=rejection.reason,
                entries=self.log.since(start),
            )

        if not self.check_battle_end():
            self.phase = BattlePhase.RESOLVING_ENEMY_TURN
            if resolve_enemy_phase:
                self.run_enemy_phase()

        return ActionResult(accepted=True, entries=self.log.since(start))

    def run_enemy_phase(self) -> list[str]:
        """
        Lets every living enemy attack the player, decays all buffs and
        checks for the end of the battle.

        Returns:
            list[str]:
                The log entries appended, empty if no enemy phase was pending.

        """
        if self.phase != BattlePhase.RESOLVING_ENEMY_TURN:
            log_warning(
                "No enemy phase pending",
                {"phase": str(self.phase)},
            )
            return []

        start = len(self.log)
        for enemy in self.enemies:
            if enemy.is_alive():
                result = enemy.perform_attack(self.player)
                self.log.add(result.describe(enemy.name, "attacks", self.player.name))

        for character in self.participants:
            for buff in character.end_turn():
                self.log.add(f"{character.name}'s {buff.kind.label} buff has expired.")

        if not self.check_battle_end():
            self.phase = BattlePhase.PLAYER_TURN
            self.turn_number += 1
            log_debug(f"Turn {self.turn_number} begins")
        return self.log.since(start)

    def check_battle_end(self) -> bool:
        """
        Moves the battle to its terminal phase if either side is defeated.

        A defeated player takes priority over a defeated roster. Victory
        grants experience and coins per enemy in the original roster.

        Returns:
            bool:
                True if the battle is over.

        """
        if self.phase.is_terminal:
            return True
        if self.player.is_dead():
            self.phase = BattlePhase.LOST
            self.log.add("You lose!")
            return True
        if not self.get_alive_enemies():
            self.phase = BattlePhase.WON
            self.rewards = BattleRewards(
                experience=self.rules.experience_per_enemy * len(self.enemies),
                coins=self.rules.coins_per_enemy * len(self.enemies),
            )
            self.log.add(
                f"You win! Gained {self.rewards.experience} EXP "
                f"and {self.rewards.coins} coins."
            )
            return True
        return False

    # ============================================================================
    # PLAYER ACTION RESOLUTION
    # ============================================================================

    def _validate_phase(self, kind: ActionKind | str) -> ActionKind:
        if self.phase.is_terminal:
            raise _Rejected(
                RejectionReason.INVALID_ACTION, "The battle is already over!"
            )
        if self.phase != BattlePhase.PLAYER_TURN:
            raise _Rejected(
                RejectionReason.INVALID_ACTION,
                f"It is not {self.player.name}'s turn!",
            )
        try:
            return ActionKind(kind.lower() if isinstance(kind, str) else kind)
        except ValueError:
            raise _Rejected(
                RejectionReason.INVALID_ACTION,
                f"{self.player.name} cannot perform '{kind}'!",
            ) from None

    def _resolve_attack(self) -> None:
        player = self.player
        target = self.get_selected_enemy()
        if target is None:
            raise _Rejected(
                RejectionReason.INVALID_ACTION,
                f"{player.name} has no target selected!",
            )
        if target.is_dead():
            raise _Rejected(
                RejectionReason.INVALID_ACTION,
                f"{player.name} tries to attack but target is defeated!",
            )

        result = player.perform_attack(target)
        self.log.add(result.describe(player.name, "attacks", target.name))
        player.adjust_mp(self.rules.attack_mp_regen)

    def _resolve_skill(self) -> None:
        player = self.player
        if self.selected_skill is None:
            raise _Rejected(
                RejectionReason.INVALID_ACTION,
                f"{player.name} has no skill selected!",
            )
        skill = self.get_selected_skill()
        if skill is None:
            raise _Rejected(
                RejectionReason.INVALID_ACTION,
                f"{player.name} has no such skill!",
            )
        if not isinstance(skill, CASTABLE_SKILL_TYPES):
            raise _Rejected(
                RejectionReason.INVALID_ACTION,
                f"{player.name} cannot cast {skill.name}!",
            )
        if not player.can_afford(skill):
            raise _Rejected(
                RejectionReason.INSUFFICIENT_RESOURCE,
                f"{player.name} doesn't have enough MP!",
            )

        if skill.effect_kind.targets_self:
            target: Character | None = player
        else:
            target = self.get_selected_enemy()
        if target is None or (
            skill.effect_kind == EffectKind.DAMAGE and target.is_dead()
        ):
            raise _Rejected(
                RejectionReason.INVALID_ACTION,
                f"{player.name} has no valid target!",
            )

        result = player.cast_skill(self.selected_skill, target)
        if result is None:
            raise _Rejected(
                RejectionReason.INSUFFICIENT_RESOURCE,
                f"{player.name} doesn't have enough MP!",
            )

        if isinstance(result, DamageResult):
            message = result.describe(player.name, f"uses {skill.name} on", target.name)
        elif isinstance(result, HealResult):
            message = f"{player.name} uses {skill.name} and heals for {result.restored} HP!"
        else:
            message = (
                f"{player.name} uses {skill.name} and gains "
                f"{result.kind.label} of {result.magnitude:g}!"
            )
        self.log.add(message)
