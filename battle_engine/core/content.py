"""
Content loading module for the battle engine.

Loads skills and character templates from JSON files and builds fresh
Characters from them. Templates carry the persisted base stats of a
character; a Character is built anew for every battle.
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from battle_engine.character.character_serialization import character_from_dict
from battle_engine.character.main import Character
from battle_engine.effects.skill import Skill, deserialize_skill
from catchery import log_debug, log_warning
from pydantic import BaseModel, Field

from .constants import CharacterType
from .utils import Singleton

DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class CharacterTemplate(BaseModel):
    """The persisted base stats and skill names of a character."""

    name: str = Field(min_length=1)
    char_type: CharacterType = CharacterType.ENEMY
    hp: int = Field(gt=0)
    mp: int = Field(default=0, ge=0)
    attack: int = Field(ge=0)
    defense: int = Field(ge=0)
    attack_multiplier: float = Field(default=1.0, ge=0)
    crit_rate: float = Field(default=0.0, ge=0, le=1)
    crit_damage: float | None = Field(default=None, ge=0)
    skills: list[str] = Field(default_factory=list)


class ContentRepository(metaclass=Singleton):
    """
    One-stop registry for skills and character templates, by name.
    """

    skills: dict[str, Skill]
    characters: dict[str, CharacterTemplate]

    def __init__(self, data_dir: Path | None = None) -> None:
        """
        Initialize the ContentRepository.

        Args:
            data_dir (Path | None):
                The directory containing data files to load. The first
                construction without a directory loads the bundled data.

        """
        if data_dir:
            self.reload(data_dir)
        elif not hasattr(self, "data_dir"):
            self.reload(DEFAULT_DATA_DIR)

    def reload(self, root: Path) -> None:
        """
        (Re)load all JSON assets from disk.

        Args:
            root (Path):
                The directory containing `skills.json` and `characters.json`.
        """
        self.data_dir = Path(root)
        self.skills = _load_json_file(
            self.data_dir / "skills.json",
            self._load_skills,
            "skills",
        )
        self.characters = _load_json_file(
            self.data_dir / "characters.json",
            self._load_characters,
            "characters",
        )

    def get_skill(self, name: str) -> Skill | None:
        """Get a skill by name, or None if not found."""
        skill = self.skills.get(name)
        if skill is None:
            log_warning(
                f"Skill '{name}' not found in ContentRepository.",
                {"skill_name": name, "available": list(self.skills)},
            )
        return skill

    def get_template(self, name: str) -> CharacterTemplate | None:
        """Get a character template by name, or None if not found."""
        template = self.characters.get(name)
        if template is None:
            log_warning(
                f"Character '{name}' not found in ContentRepository.",
                {"character_name": name, "available": list(self.characters)},
            )
        return template

    def build_character(self, name: str) -> Character:
        """
        Builds a fresh Character from a template.

        Args:
            name (str):
                The template name.

        Returns:
            Character:
                A new character at full hp and mp.

        Raises:
            ValueError:
                If the template or one of its skills does not exist.

        """
        template = self.get_template(name)
        if template is None:
            raise ValueError(f"Character template '{name}' not found.")
        return character_from_dict(template.model_dump(mode="json"), self.get_skill)

    def players(self) -> list[str]:
        """Returns the names of the player templates."""
        return [
            name
            for name, template in self.characters.items()
            if template.char_type == CharacterType.PLAYER
        ]

    def enemies(self) -> list[str]:
        """Returns the names of the enemy templates."""
        return [
            name
            for name, template in self.characters.items()
            if template.char_type == CharacterType.ENEMY
        ]

    @staticmethod
    def _load_skills(data: list[dict]) -> dict[str, Skill]:
        """
        Load skills from JSON data.

        Args:
            data (list[dict]): List of skill data dictionaries.

        Returns:
            dict[str, Skill]: Dictionary mapping skill names to Skill objects.

        Raises:
            ValueError: If a skill type is unknown or a name is duplicated.

        """
        skills: dict[str, Skill] = {}
        for skill_data in data:
            skill = deserialize_skill(skill_data)
            if skill is None:
                raise ValueError(f"Invalid skill data: {skill_data}")
            if skill.name in skills:
                raise ValueError(f"Duplicate skill name: {skill.name}")
            skills[skill.name] = skill
        return skills

    def _load_characters(self, data: list[dict]) -> dict[str, CharacterTemplate]:
        """
        Load character templates from JSON data.

        Args:
            data (list[dict]): List of character data dictionaries.

        Returns:
            dict[str, CharacterTemplate]: Dictionary mapping names to templates.

        Raises:
            ValueError: If a name is duplicated or a skill is unknown.

        """
        characters: dict[str, CharacterTemplate] = {}
        for character_data in data:
            template = CharacterTemplate(**character_data)
            if template.name in characters:
                raise ValueError(f"Duplicate character name: {template.name}")
            for skill_name in template.skills:
                if skill_name not in self.skills:
                    raise ValueError(
                        f"Character '{template.name}' references unknown skill "
                        f"'{skill_name}'."
                    )
            characters[template.name] = template
        return characters


def _load_json_file(
    filepath: Path,
    loader_func: Callable[[list[dict]], dict[str, Any]],
    description: str,
) -> dict[str, Any]:
    """Helper to load and validate JSON files"""
    log_debug(f"Loading {description} using {loader_func.__name__}...")
    if not filepath.is_file():
        log_warning(
            f"No {description} file found, using an empty collection",
            {"path": str(filepath)},
        )
        return {}
    try:
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"File {filepath} raised an error: {e}") from e
    if not isinstance(data, list):
        raise ValueError(f"Expected list in {filepath}, got {type(data).__name__}")
    return loader_func(data)
