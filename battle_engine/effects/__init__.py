"""
Effects system module for the battle engine.

This module contains the skills characters cast and the timed buffs they
grant, which modify derived stats or grant shield points.
"""

# Import buffs
from .buff import Buff, sum_buffs

# Import skills
from .skill import AnySkill, BuffSkill, DamageSkill, HealSkill, Skill, deserialize_skill

__all__ = [
    # Buffs
    "Buff",
    "sum_buffs",
    # Skills
    "AnySkill",
    "BuffSkill",
    "DamageSkill",
    "HealSkill",
    "Skill",
    "deserialize_skill",
]
