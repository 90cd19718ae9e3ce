"""
Core system module for the battle engine.

This module contains the fundamental components shared by the engine:
game constants, rule parameters, random sources, logging setup, console
utilities and content loading.
"""

from .constants import (
    ActionKind,
    BattlePhase,
    BuffKind,
    CharacterType,
    EffectKind,
    RejectionReason,
)
from .rng import FixedRoll, RandomSource, SequenceRoll, make_rng
from .rules import DEFAULT_RULES, BattleRules

__all__ = [
    # Import from constants.py
    "ActionKind",
    "BattlePhase",
    "BuffKind",
    "CharacterType",
    "EffectKind",
    "RejectionReason",
    # Import from rng.py
    "FixedRoll",
    "RandomSource",
    "SequenceRoll",
    "make_rng",
    # Import from rules.py
    "DEFAULT_RULES",
    "BattleRules",
]
