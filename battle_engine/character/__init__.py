"""
Character module for the battle engine.

This module contains the Character class and its management modules for
stats, resources and buffs, plus snapshot and construction helpers.
"""

from .character_effects import CharacterEffects
from .character_serialization import (
    CharacterSnapshot,
    character_from_dict,
    snapshot_character,
)
from .character_stats import CharacterStats
from .main import Character, SkillResult

__all__ = [
    "Character",
    "CharacterEffects",
    "CharacterSnapshot",
    "CharacterStats",
    "SkillResult",
    "character_from_dict",
    "snapshot_character",
]
