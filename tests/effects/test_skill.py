"""
Tests for skill records and their deserialization.
"""

import pytest
from battle_engine.core.constants import BuffKind, EffectKind
from battle_engine.effects.skill import (
    BuffSkill,
    DamageSkill,
    HealSkill,
    Skill,
    deserialize_skill,
)
from pydantic import ValidationError


def test_deserialize_damage_skill():
    skill = deserialize_skill(
        {"name": "Fireball", "skill_type": "damage", "mp_cost": 10, "power": 40, "multiplier": 1.2}
    )
    assert isinstance(skill, DamageSkill)
    assert skill.effect_kind == EffectKind.DAMAGE
    assert skill.power == 40
    assert skill.multiplier == 1.2


def test_deserialize_heal_skill():
    skill = deserialize_skill({"name": "Mend", "skill_type": "heal", "amount": 30})
    assert isinstance(skill, HealSkill)
    assert skill.effect_kind == EffectKind.HEAL
    assert skill.mp_cost == 0


def test_deserialize_buff_skill():
    skill = deserialize_skill(
        {
            "name": "Barrier",
            "skill_type": "buff",
            "mp_cost": 12,
            "buff_kind": "shield",
            "magnitude": 30,
            "duration": 2,
        }
    )
    assert isinstance(skill, BuffSkill)
    assert skill.buff_kind == BuffKind.SHIELD
    assert skill.effect_kind.targets_self


def test_deserialize_unknown_type_returns_none():
    assert deserialize_skill({"name": "Dance", "skill_type": "dance"}) is None
    assert deserialize_skill({"name": "Nothing"}) is None


def test_deserialize_invalid_payload_raises():
    with pytest.raises(ValidationError):
        deserialize_skill({"name": "Broken", "skill_type": "buff", "buff_kind": "shield"})


def test_skill_cost_cannot_be_negative():
    with pytest.raises(ValidationError):
        HealSkill(name="Mend", amount=10, mp_cost=-1)


def test_buff_skill_duration_must_be_positive():
    with pytest.raises(ValidationError):
        BuffSkill(name="Flash", buff_kind=BuffKind.ATTACK_PERCENT, magnitude=5, duration=0)


def test_skills_are_immutable():
    skill = HealSkill(name="Mend", amount=10)
    with pytest.raises(ValidationError):
        skill.amount = 20


def test_skill_name_must_not_be_empty():
    with pytest.raises(ValueError):
        HealSkill(name="", amount=10)


def test_base_skill_cannot_be_built():
    with pytest.raises(TypeError):
        Skill(name="Plain")
