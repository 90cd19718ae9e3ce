"""
Character serialization functions.

This module provides the read-only snapshot of a Character handed to
presentation and HTTP layers, and the construction of Characters from
dictionaries of persisted base stats.
"""

from collections.abc import Callable
from typing import Any

from battle_engine.core.constants import CharacterType
from battle_engine.effects.buff import Buff
from battle_engine.effects.skill import Skill
from pydantic import BaseModel, Field

from .main import Character


class CharacterSnapshot(BaseModel):
    """A point-in-time copy of the state of a Character."""

    name: str
    char_type: CharacterType
    hp: int
    max_hp: int
    mp: int
    max_mp: int
    attack: int
    defense: int
    crit_rate: float
    crit_damage: float
    shield: int
    max_shield: int
    buffs: list[Buff] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)

    @property
    def is_alive(self) -> bool:
        return self.hp > 0


def snapshot_character(character: Character) -> CharacterSnapshot:
    """
    Takes a snapshot of a character.

    Args:
        character (Character):
            The character to copy.

    Returns:
        CharacterSnapshot:
            A detached copy; mutating it does not affect the character.

    """
    return CharacterSnapshot(
        name=character.name,
        char_type=character.char_type,
        hp=character.hp,
        max_hp=character.max_hp,
        mp=character.mp,
        max_mp=character.max_mp,
        attack=character.attack,
        defense=character.defense,
        crit_rate=character.crit_rate,
        crit_damage=character.crit_damage,
        shield=character.shield,
        max_shield=character.max_shield,
        buffs=[buff.model_copy() for buff in character.buffs],
        skills=[skill.name for skill in character.skills],
    )


def character_from_dict(
    data: dict[str, Any],
    get_skill: Callable[[str], Skill | None],
) -> Character:
    """
    Creates a Character instance from a dictionary of data.

    Args:
        data (dict[str, Any]):
            The dictionary containing character data.
        get_skill (Callable[[str], Skill | None]):
            Lookup used to resolve the skill names listed in `data`.

    Returns:
        Character:
            The created Character instance.

    Raises:
        ValueError:
            If a listed skill cannot be found.

    """
    skills: list[Skill] = []
    for skill_name in data.get("skills", []):
        skill = get_skill(skill_name)
        if not skill:
            raise ValueError(
                f"Skill '{skill_name}' not found for character '{data.get('name')}'."
            )
        skills.append(skill)

    return Character(
        name=data["name"],
        char_type=CharacterType(data.get("char_type", "ENEMY")),
        hp=data["hp"],
        mp=data.get("mp", 0),
        attack=data["attack"],
        defense=data["defense"],
        attack_multiplier=data.get("attack_multiplier", 1.0),
        crit_rate=data.get("crit_rate", 0.0),
        crit_damage=data.get("crit_damage", None),
        skills=skills,
    )
