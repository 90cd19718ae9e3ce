"""
Tests for the battle turn state machine.
"""

import pytest
from battle_engine.character.main import Character
from battle_engine.combat.battle import Battle, BattleRewards
from battle_engine.core.constants import (
    ActionKind,
    BattlePhase,
    BuffKind,
    CharacterType,
    EffectKind,
    RejectionReason,
)
from battle_engine.core.rng import FixedRoll
from battle_engine.core.rules import DEFAULT_RULES, BattleRules
from battle_engine.effects.buff import Buff
from battle_engine.effects.skill import BuffSkill, DamageSkill, HealSkill, Skill


@pytest.fixture
def skills():
    return [
        DamageSkill(name="Fireball", mp_cost=10, power=40, multiplier=1.2),
        HealSkill(name="Shadow Strike", mp_cost=12, amount=30),
        BuffSkill(
            name="Flame Burst",
            mp_cost=10,
            buff_kind=BuffKind.DEFENSE_PERCENT,
            magnitude=10,
            duration=2,
        ),
        BuffSkill(
            name="Critical Boost",
            mp_cost=15,
            buff_kind=BuffKind.CRIT_RATE_PERCENT,
            magnitude=20,
            duration=2,
        ),
        BuffSkill(
            name="Protective Barrier",
            mp_cost=12,
            buff_kind=BuffKind.SHIELD,
            magnitude=30,
            duration=2,
        ),
    ]


@pytest.fixture
def make_hero(skills):
    def _make_hero():
        return Character(
            name="Hero A",
            char_type=CharacterType.PLAYER,
            hp=200,
            mp=50,
            attack=25,
            defense=15,
            attack_multiplier=0.8,
            crit_rate=0.2,
            crit_damage=1.5,
            skills=skills,
        )

    return _make_hero


@pytest.fixture
def make_enemies():
    def _make_enemies(goblin_hp=100, orc_hp=120):
        return [
            Character(name="Goblin", hp=goblin_hp, mp=0, attack=10, defense=5),
            Character(name="Orc", hp=orc_hp, mp=0, attack=15, defense=24),
        ]

    return _make_enemies


@pytest.fixture
def hero(make_hero):
    return make_hero()


@pytest.fixture
def enemies(make_enemies):
    return make_enemies()


@pytest.fixture
def battle(hero, enemies):
    """A battle in which nobody ever lands a critical hit."""
    return Battle(hero, enemies, rng=FixedRoll(0.99))


def use_skill(battle, index, **kwargs):
    battle.select_skill(index)
    return battle.submit_player_action(ActionKind.SKILL, **kwargs)


# ============================================================================
# SETUP
# ============================================================================


def test_initial_state(battle):
    assert battle.phase == BattlePhase.PLAYER_TURN
    assert battle.turn_number == 1
    assert battle.selected_target == 0
    assert battle.selected_skill is None
    assert battle.rewards is None
    assert battle.log.entries == ("Battle started!",)


def test_battle_needs_enemies(hero):
    with pytest.raises(ValueError):
        Battle(hero, [])


def test_player_cannot_be_an_enemy(hero):
    with pytest.raises(ValueError):
        Battle(hero, [hero])


def test_enemy_cannot_appear_twice(hero):
    goblin = Character(name="Goblin", hp=100, mp=0, attack=10, defense=5)
    with pytest.raises(ValueError):
        Battle(hero, [goblin, goblin])


def test_shared_rng_is_installed_on_participants(hero, enemies):
    rng = FixedRoll(0.5)
    Battle(hero, enemies, rng=rng)
    assert all(character.rng is rng for character in [hero, *enemies])


# ============================================================================
# ROUNDS
# ============================================================================


def test_attack_round(battle, hero, enemies):
    result = battle.submit_player_action(ActionKind.ATTACK)
    assert result.accepted
    assert result.rejection is None
    assert result.entries == [
        "Hero A attacks Goblin for 15 damage!",
        "Goblin attacks Hero A for 1 damage!",
        "Orc attacks Hero A for 1 damage!",
    ]
    assert enemies[0].hp == 85
    assert hero.hp == 198
    assert battle.phase == BattlePhase.PLAYER_TURN
    assert battle.turn_number == 2


def test_action_kind_accepts_strings(battle, enemies):
    assert battle.submit_player_action("ATTACK").accepted
    assert enemies[0].hp == 85


def test_critical_attack_is_logged(hero, enemies):
    battle = Battle(hero, enemies, rng=FixedRoll(0.0))
    result = battle.submit_player_action(ActionKind.ATTACK)
    assert result.entries[0] == "Hero A attacks Goblin for 22 damage! (Critical!)"
    assert enemies[0].hp == 78


def test_damage_skill_on_selected_enemy(battle, hero, enemies):
    battle.select_target(1)
    result = use_skill(battle, 0)
    assert result.entries[0] == "Hero A uses Fireball on Orc for 24 damage!"
    assert enemies[1].hp == 96
    assert hero.mp == 40


def test_attack_restores_mana(battle, hero):
    use_skill(battle, 0)
    assert hero.mp == 40
    battle.submit_player_action(ActionKind.ATTACK)
    assert hero.mp == 45


def test_attack_mana_restore_is_capped(battle, hero):
    battle.submit_player_action(ActionKind.ATTACK)
    assert hero.mp == 50


def test_heal_skill_targets_the_player(battle, hero):
    hero.adjust_hp(-50)
    result = use_skill(battle, 1)
    assert result.entries[0] == "Hero A uses Shadow Strike and heals for 30 HP!"
    assert hero.hp == 178


def test_buff_skill_and_expiry(battle, hero):
    result = use_skill(battle, 2)
    assert result.entries[0] == "Hero A uses Flame Burst and gains DEF of 10!"
    assert hero.defense == 16
    assert hero.buffs[0].turns == 1

    result = battle.submit_player_action(ActionKind.ATTACK)
    assert result.entries[-1] == "Hero A's DEF buff has expired."
    assert hero.defense == 15
    assert hero.buffs == ()


def test_shield_skill_absorbs_enemy_attacks(battle, hero):
    result = use_skill(battle, 4)
    assert result.entries == [
        "Hero A uses Protective Barrier and gains Shield of 30!",
        "Goblin attacks Hero A for 1 damage! (1 absorbed by shield!)",
        "Orc attacks Hero A for 1 damage! (1 absorbed by shield!)",
    ]
    assert hero.shield == 28
    assert hero.hp == 200


def test_dead_enemies_do_not_attack(battle, hero, enemies):
    enemies[0].adjust_hp(-100)
    battle.select_target(1)
    result = battle.submit_player_action(ActionKind.ATTACK)
    assert result.entries == [
        "Hero A attacks Orc for 1 damage!",
        "Orc attacks Hero A for 1 damage!",
    ]
    assert hero.hp == 199


def test_rules_are_installed_on_participants(hero, enemies):
    rules = BattleRules(attack_mp_regen=0, minimum_damage=0)
    battle = Battle(hero, enemies, rng=FixedRoll(0.99), rules=rules)
    hero.adjust_mp(-10)
    result = battle.submit_player_action(ActionKind.ATTACK)
    assert hero.mp == 40
    assert "Goblin attacks Hero A for 0 damage!" in result.entries
    assert hero.hp == 200


def test_battle_follows_player_rules_by_default(hero, enemies):
    hero.rules = BattleRules(attack_mp_regen=0, minimum_damage=0)
    battle = Battle(hero, enemies, rng=FixedRoll(0.99))
    assert battle.rules is hero.rules
    assert all(enemy.rules is hero.rules for enemy in enemies)
    hero.adjust_mp(-10)
    result = battle.submit_player_action(ActionKind.ATTACK)
    assert hero.mp == 40
    assert "Goblin attacks Hero A for 0 damage!" in result.entries


def test_default_rules(battle, enemies):
    assert battle.rules is DEFAULT_RULES
    assert enemies[1].rules is DEFAULT_RULES


# ============================================================================
# END OF BATTLE
# ============================================================================


def test_victory_grants_rewards(hero, make_enemies):
    enemies = make_enemies(goblin_hp=10)[:1]
    battle = Battle(hero, enemies, rng=FixedRoll(0.99))
    result = battle.submit_player_action(ActionKind.ATTACK)
    assert result.entries == [
        "Hero A attacks Goblin for 15 damage!",
        "You win! Gained 10 EXP and 5 coins.",
    ]
    assert battle.phase == BattlePhase.WON
    assert battle.is_over()
    assert battle.rewards == BattleRewards(experience=10, coins=5)
    assert battle.turn_number == 1


def test_rewards_count_the_whole_roster(hero, make_enemies):
    battle = Battle(hero, make_enemies(goblin_hp=1, orc_hp=1), rng=FixedRoll(0.99))
    battle.submit_player_action(ActionKind.ATTACK)
    assert battle.phase == BattlePhase.PLAYER_TURN
    battle.select_target(1)
    battle.submit_player_action(ActionKind.ATTACK)
    assert battle.phase == BattlePhase.WON
    assert battle.rewards == BattleRewards(experience=20, coins=10)


def test_actions_after_the_end_are_rejected(hero, make_enemies):
    battle = Battle(hero, make_enemies(goblin_hp=10)[:1], rng=FixedRoll(0.99))
    battle.submit_player_action(ActionKind.ATTACK)
    result = battle.submit_player_action(ActionKind.ATTACK)
    assert not result.accepted
    assert result.rejection == RejectionReason.INVALID_ACTION
    assert result.entries == ["The battle is already over!"]
    assert battle.phase == BattlePhase.WON


def test_defeat(battle, hero):
    hero.adjust_hp(-199)
    battle.submit_player_action(ActionKind.ATTACK)
    assert battle.phase == BattlePhase.LOST
    assert battle.log.entries[-1] == "You lose!"
    assert battle.rewards is None


def test_defeat_takes_priority_over_victory(battle, hero, enemies):
    hero.adjust_hp(-200)
    for enemy in enemies:
        enemy.adjust_hp(-200)
    assert battle.check_battle_end()
    assert battle.phase == BattlePhase.LOST
    assert battle.rewards is None


# ============================================================================
# REJECTIONS
# ============================================================================


def assert_rejected(battle, result, reason, message):
    assert not result.accepted
    assert result.rejection == reason
    assert result.entries == [message]
    assert battle.phase == BattlePhase.PLAYER_TURN
    assert battle.turn_number == 1


def test_unknown_action_is_rejected(battle):
    result = battle.submit_player_action("dance")
    assert_rejected(
        battle, result, RejectionReason.INVALID_ACTION, "Hero A cannot perform 'dance'!"
    )


def test_attacking_a_defeated_enemy_is_rejected(battle, hero, enemies):
    enemies[0].adjust_hp(-100)
    result = battle.submit_player_action(ActionKind.ATTACK)
    assert_rejected(
        battle,
        result,
        RejectionReason.INVALID_ACTION,
        "Hero A tries to attack but target is defeated!",
    )
    assert hero.hp == 200


def test_target_out_of_range_is_rejected(battle):
    battle.select_target(5)
    result = battle.submit_player_action(ActionKind.ATTACK)
    assert_rejected(
        battle, result, RejectionReason.INVALID_ACTION, "Hero A has no target selected!"
    )


def test_skill_without_selection_is_rejected(battle):
    result = battle.submit_player_action(ActionKind.SKILL)
    assert_rejected(
        battle, result, RejectionReason.INVALID_ACTION, "Hero A has no skill selected!"
    )


def test_unknown_skill_is_rejected(battle):
    result = use_skill(battle, 9)
    assert_rejected(
        battle, result, RejectionReason.INVALID_ACTION, "Hero A has no such skill!"
    )


class ChargeSkill(Skill):
    """A skill type the engine does not know how to resolve."""

    @property
    def effect_kind(self):
        return EffectKind.BUFF


def test_uncastable_skill_type_is_rejected(enemies):
    hero = Character(
        name="Hero A",
        char_type=CharacterType.PLAYER,
        hp=200,
        mp=50,
        attack=25,
        defense=15,
        skills=[ChargeSkill(name="Charge", mp_cost=5)],
    )
    battle = Battle(hero, enemies, rng=FixedRoll(0.99))
    result = use_skill(battle, 0)
    assert_rejected(
        battle, result, RejectionReason.INVALID_ACTION, "Hero A cannot cast Charge!"
    )
    assert hero.mp == 50
    assert hero.buffs == ()


def test_skill_without_enough_mana_is_rejected(battle, hero, enemies):
    hero.adjust_mp(-45)
    hero.grant_buff(Buff(kind=BuffKind.ATTACK_PERCENT, magnitude=10, turns=2))
    hero_buffs = [buff.model_dump() for buff in hero.buffs]
    enemy_buffs = [buff.model_dump() for buff in enemies[0].buffs]
    result = use_skill(battle, 0)
    assert_rejected(
        battle,
        result,
        RejectionReason.INSUFFICIENT_RESOURCE,
        "Hero A doesn't have enough MP!",
    )
    assert hero.mp == 5
    assert enemies[0].hp == 100
    assert hero.hp == 200
    assert [buff.model_dump() for buff in hero.buffs] == hero_buffs
    assert [buff.model_dump() for buff in enemies[0].buffs] == enemy_buffs


def test_damage_skill_on_defeated_enemy_is_rejected(battle, hero, enemies):
    enemies[0].adjust_hp(-100)
    result = use_skill(battle, 0)
    assert_rejected(
        battle, result, RejectionReason.INVALID_ACTION, "Hero A has no valid target!"
    )
    assert hero.mp == 50


def test_self_skills_ignore_the_selected_enemy(battle, enemies):
    enemies[0].adjust_hp(-100)
    assert use_skill(battle, 2).accepted


# ============================================================================
# PACING
# ============================================================================


def test_deferred_enemy_phase(battle, hero):
    result = battle.submit_player_action(ActionKind.ATTACK, resolve_enemy_phase=False)
    assert result.entries == ["Hero A attacks Goblin for 15 damage!"]
    assert battle.phase == BattlePhase.RESOLVING_ENEMY_TURN
    assert hero.hp == 200

    entries = battle.run_enemy_phase()
    assert entries == [
        "Goblin attacks Hero A for 1 damage!",
        "Orc attacks Hero A for 1 damage!",
    ]
    assert battle.phase == BattlePhase.PLAYER_TURN
    assert battle.turn_number == 2


def test_player_cannot_act_during_enemy_phase(battle):
    battle.submit_player_action(ActionKind.ATTACK, resolve_enemy_phase=False)
    result = battle.submit_player_action(ActionKind.ATTACK)
    assert not result.accepted
    assert result.entries == ["It is not Hero A's turn!"]
    assert battle.phase == BattlePhase.RESOLVING_ENEMY_TURN


def test_enemy_phase_without_pending_turn_is_a_noop(battle):
    assert battle.run_enemy_phase() == []
    assert len(battle.log) == 1


def test_selection_is_ignored_outside_player_turn(battle, mocker):
    mock_warning = mocker.patch("battle_engine.combat.battle.log_warning")
    battle.submit_player_action(ActionKind.ATTACK, resolve_enemy_phase=False)
    assert battle.select_target(1) is False
    assert battle.select_skill(0) is False
    assert battle.selected_target == 0
    assert battle.selected_skill is None
    assert mock_warning.call_count == 2
    assert len(battle.log) == 2


def play(battle, deferred):
    for round_number in range(4):
        if round_number % 2:
            battle.select_skill(0)
            kind = ActionKind.SKILL
        else:
            kind = ActionKind.ATTACK
        battle.submit_player_action(kind, resolve_enemy_phase=not deferred)
        if deferred:
            battle.run_enemy_phase()
    return battle.snapshot()


def test_deferred_and_immediate_pacing_agree(make_hero, make_enemies):
    immediate = play(Battle(make_hero(), make_enemies(), seed=11), deferred=False)
    deferred = play(Battle(make_hero(), make_enemies(), seed=11), deferred=True)
    assert immediate == deferred


def test_same_seed_replays_the_same_battle(make_hero, make_enemies):
    first = play(Battle(make_hero(), make_enemies(), seed=3), deferred=False)
    second = play(Battle(make_hero(), make_enemies(), seed=3), deferred=False)
    assert first.log == second.log
    assert first.player.hp == second.player.hp


# ============================================================================
# OBSERVATION
# ============================================================================


def test_log_subscription(battle, mocker):
    listener = mocker.Mock()
    battle.log.subscribe(listener)
    result = battle.submit_player_action(ActionKind.ATTACK)
    assert [call.args[0] for call in listener.call_args_list] == result.entries


def test_snapshot(battle):
    battle.submit_player_action(ActionKind.ATTACK)
    snapshot = battle.snapshot()
    assert snapshot.phase == BattlePhase.PLAYER_TURN
    assert snapshot.turn_number == 2
    assert snapshot.player.hp == 198
    assert [enemy.hp for enemy in snapshot.enemies] == [85, 120]
    assert len(snapshot.log) == 4
    data = snapshot.model_dump(mode="json")
    assert data["phase"] == "PLAYER_TURN"
    assert data["rewards"] is None
