"""
Skill module for the battle engine.

Skills are immutable content records shared between characters. Each skill
has a mana cost and exactly one effect: damage a target, heal the caster,
or grant the caster a buff.
"""

from abc import ABC, abstractmethod
from typing import Annotated, Any, Literal, Union

from battle_engine.core.constants import BuffKind, EffectKind
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Skill(BaseModel, ABC):
    """
    Base class for all skills a character can cast.

    Abstract: only its concrete subclasses below can be built.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        description="The name of the skill.",
    )
    description: str = Field(
        "",
        description="A brief description of the skill.",
    )
    mp_cost: int = Field(
        default=0,
        ge=0,
        description="Mana deducted from the caster when the skill is cast.",
    )

    @property
    @abstractmethod
    def effect_kind(self) -> EffectKind:
        """Returns what the skill does when it is cast."""

    @property
    def colored_name(self) -> str:
        """Returns the skill name with its effect color applied."""
        return self.effect_kind.colorize(self.name)

    def model_post_init(self, _: Any) -> None:
        if not self.name:
            raise ValueError("Skill name must be a non-empty string.")


class DamageSkill(Skill):
    """
    Deals `power * multiplier - target defense` damage (at least the rules
    minimum), subject to a crit roll and the target's shield.
    """

    skill_type: Literal["damage"] = "damage"

    power: float = Field(
        ge=0,
        description="Base power of the skill.",
    )
    multiplier: float = Field(
        default=1.0,
        ge=0,
        description="Multiplier applied to the power.",
    )

    @property
    def effect_kind(self) -> EffectKind:
        return EffectKind.DAMAGE


class HealSkill(Skill):
    """Restores hit points to the caster, capped at its max hp."""

    skill_type: Literal["heal"] = "heal"

    amount: int = Field(
        ge=0,
        description="Nominal hit points restored.",
    )

    @property
    def effect_kind(self) -> EffectKind:
        return EffectKind.HEAL


class BuffSkill(Skill):
    """Grants the caster a timed buff."""

    skill_type: Literal["buff"] = "buff"

    buff_kind: BuffKind = Field(
        description="The kind of buff granted.",
    )
    magnitude: float = Field(
        ge=0,
        description="Percentage for percent buffs, shield points for shields.",
    )
    duration: int = Field(
        ge=1,
        description="Number of end-of-turn ticks the buff survives.",
    )

    @property
    def effect_kind(self) -> EffectKind:
        return EffectKind.BUFF


CASTABLE_SKILL_TYPES = (DamageSkill, HealSkill, BuffSkill)

AnySkill = Annotated[
    Union[DamageSkill, HealSkill, BuffSkill],
    Field(discriminator="skill_type"),
]

_SKILL_ADAPTER: TypeAdapter[AnySkill] = TypeAdapter(AnySkill)


def deserialize_skill(data: dict[str, Any]) -> Skill | None:
    """
    Deserialize a skill from a dictionary.

    Args:
        data (dict[str, Any]):
            The dictionary containing skill data, with a `skill_type` key.

    Returns:
        Skill | None:
            The deserialized skill instance, or None if the skill type is
            unknown.

    Raises:
        ValidationError:
            If the skill type is known but the payload is invalid.

    """
    if data.get("skill_type") not in ("damage", "heal", "buff"):
        return None
    return _SKILL_ADAPTER.validate_python(data)
