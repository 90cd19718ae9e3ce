"""
Constants and enumerations for the battle engine.

Defines the enumerations for character sides, skill effects, buff kinds,
player actions, battle phases and action rejections used throughout the
engine.
"""

from enum import Enum


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").lower().capitalize()


class CharacterType(NiceEnum):
    """Defines which side of the battle a character fights on."""

    PLAYER = "PLAYER"
    ENEMY = "ENEMY"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this character type."""
        return {
            CharacterType.PLAYER: "👤",
            CharacterType.ENEMY: "👹",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this character type."""
        return {
            CharacterType.PLAYER: "bold blue",
            CharacterType.ENEMY: "bold red",
        }.get(self, "dim white")

    def colorize(self, message: str) -> str:
        """Applies character type color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class EffectKind(NiceEnum):
    """Defines what a skill does when it is cast."""

    DAMAGE = "damage"
    HEAL = "heal"
    BUFF = "buff"

    @property
    def color(self) -> str:
        """Returns the color string associated with this effect kind."""
        return {
            EffectKind.DAMAGE: "bold red",
            EffectKind.HEAL: "bold green",
            EffectKind.BUFF: "bold yellow",
        }.get(self, "dim white")

    def colorize(self, message: str) -> str:
        """Applies effect kind color formatting to a message."""
        return f"[{self.color}]{message}[/]"

    @property
    def targets_self(self) -> bool:
        """Heal and buff skills always land on the caster."""
        return self in (EffectKind.HEAL, EffectKind.BUFF)


class BuffKind(NiceEnum):
    """Defines the stat or resource a buff contributes to."""

    ATTACK_PERCENT = "atk_percent"
    DEFENSE_PERCENT = "def_percent"
    CRIT_RATE_PERCENT = "crit_rate_percent"
    CRIT_DAMAGE_PERCENT = "crit_damage_percent"
    SHIELD = "shield"

    @property
    def label(self) -> str:
        """Returns the short label used in battle log lines."""
        return {
            BuffKind.ATTACK_PERCENT: "ATK",
            BuffKind.DEFENSE_PERCENT: "DEF",
            BuffKind.CRIT_RATE_PERCENT: "Crit Rate",
            BuffKind.CRIT_DAMAGE_PERCENT: "Crit Damage",
            BuffKind.SHIELD: "Shield",
        }.get(self, "Unknown")

    @property
    def is_percent(self) -> bool:
        return self != BuffKind.SHIELD

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this buff kind."""
        return {
            BuffKind.ATTACK_PERCENT: "🗡️",
            BuffKind.DEFENSE_PERCENT: "🛡️",
            BuffKind.CRIT_RATE_PERCENT: "🎯",
            BuffKind.CRIT_DAMAGE_PERCENT: "💥",
            BuffKind.SHIELD: "🔰",
        }.get(self, "❔")


class ActionKind(NiceEnum):
    """Defines the actions a player can submit on their turn."""

    ATTACK = "attack"
    SKILL = "skill"


class BattlePhase(NiceEnum):
    """Defines the phases of the battle turn state machine."""

    PLAYER_TURN = "PLAYER_TURN"
    RESOLVING_ENEMY_TURN = "RESOLVING_ENEMY_TURN"
    WON = "WON"
    LOST = "LOST"

    @property
    def is_terminal(self) -> bool:
        """Won and lost battles accept no further actions."""
        return self in (BattlePhase.WON, BattlePhase.LOST)

    @property
    def color(self) -> str:
        """Returns the color string associated with this phase."""
        return {
            BattlePhase.PLAYER_TURN: "bold blue",
            BattlePhase.RESOLVING_ENEMY_TURN: "bold red",
            BattlePhase.WON: "bold green",
            BattlePhase.LOST: "bold magenta",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return f"[{self.color}]{self.display_name}[/]"


class RejectionReason(NiceEnum):
    """Defines why a submitted player action was refused."""

    INVALID_ACTION = "INVALID_ACTION"
    INSUFFICIENT_RESOURCE = "INSUFFICIENT_RESOURCE"
