"""
Battle engine package.

A turn-based RPG battle resolver: characters with hit points, mana,
attack/defense stats, crit and shield mechanics and a fixed skill list,
and a battle state machine that turns player actions and enemy retaliation
into damage, healing, shield absorption, buffs and a win/loss outcome.
"""

from .character import Character, CharacterSnapshot
from .combat.battle import ActionResult, Battle, BattleRewards, BattleSnapshot
from .core.constants import ActionKind, BattlePhase, BuffKind, RejectionReason
from .core.rules import BattleRules
from .effects import Buff, BuffSkill, DamageSkill, HealSkill, Skill

__version__ = "0.1.0"

__all__ = [
    "ActionKind",
    "ActionResult",
    "Battle",
    "BattlePhase",
    "BattleRewards",
    "BattleRules",
    "BattleSnapshot",
    "Buff",
    "BuffKind",
    "BuffSkill",
    "Character",
    "CharacterSnapshot",
    "DamageSkill",
    "HealSkill",
    "RejectionReason",
    "Skill",
]
