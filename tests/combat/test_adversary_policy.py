"""
Tests for the adversary decision policy and capability table.
"""

import pytest

from skirmish.combat.adversary_policy import (
    ADVERSARY_PROFILES,
    DEFAULT_PROFILE,
    AdversaryPolicy,
    get_profile,
)
from skirmish.core.config import CombatSettings
from skirmish.core.constants import AdversaryAction, AdversaryType, Allegiance


@pytest.fixture
def policy(roller):
    return AdversaryPolicy(roller)


@pytest.fixture
def goblin(new_combatant):
    return new_combatant(
        "goblin",
        allegiance=Allegiance.ADVERSARY,
        hp=6,
        adversary_type=AdversaryType.WEAK_FAST,
    )


def test_low_hp_adversary_defends_on_low_draw(scripted, policy, new_combatant):
    actor = new_combatant("ogre", allegiance=Allegiance.ADVERSARY, hp=2, max_hp=10)
    scripted.push_floats(0.1)
    decision = policy.decide_action(actor, [actor, new_combatant("hero")])
    assert decision.action is AdversaryAction.DEFEND
    assert decision.target_id is None


def test_low_hp_adversary_attacks_on_high_draw(scripted, policy, new_combatant):
    actor = new_combatant("ogre", allegiance=Allegiance.ADVERSARY, hp=2, max_hp=10)
    scripted.push_floats(0.5)
    decision = policy.decide_action(actor, [actor, new_combatant("hero")])
    assert decision.action is AdversaryAction.ATTACK
    assert decision.target_id == "hero"


def test_healthy_adversary_does_not_draw(scripted, policy, goblin, new_combatant):
    # No float is queued: drawing one would raise.
    decision = policy.decide_action(goblin, [goblin, new_combatant("hero")])
    assert decision.action is AdversaryAction.ATTACK
    assert not scripted.floats


def test_picks_lowest_hp_ratio(policy, goblin, new_combatant):
    half = new_combatant("half", hp=5, max_hp=10)
    weak = new_combatant("weak", hp=6, max_hp=20)
    decision = policy.decide_action(goblin, [goblin, half, weak])
    assert decision.target_id == "weak"
    assert "Weak" in decision.reasoning


def test_ties_go_to_the_first_target(policy, goblin, new_combatant):
    first = new_combatant("first", hp=5, max_hp=10)
    second = new_combatant("second", hp=5, max_hp=10)
    decision = policy.decide_action(goblin, [second, goblin, first])
    assert decision.target_id == "second"


def test_ignores_defeated_and_allied_targets(policy, goblin, new_combatant):
    down = new_combatant("down", hp=1)
    down.defeated = True
    ally = new_combatant("ally", allegiance=Allegiance.ADVERSARY, hp=1)
    hero = new_combatant("hero", hp=10)
    decision = policy.decide_action(goblin, [down, ally, hero, goblin])
    assert decision.target_id == "hero"


def test_passes_without_targets(policy, goblin):
    decision = policy.decide_action(goblin, [goblin])
    assert decision.action is AdversaryAction.PASS
    assert decision.target_id is None
    assert "no valid targets" in decision.reasoning


def test_thresholds_come_from_settings(scripted, roller, new_combatant):
    policy = AdversaryPolicy(roller, CombatSettings(low_hp_ratio=0.6, defend_chance=1.0))
    actor = new_combatant("orc", allegiance=Allegiance.ADVERSARY, hp=5, max_hp=10)
    scripted.push_floats(0.99)
    decision = policy.decide_action(actor, [actor, new_combatant("hero")])
    assert decision.action is AdversaryAction.DEFEND


def test_every_adversary_type_has_a_profile():
    assert set(ADVERSARY_PROFILES) == set(AdversaryType)


def test_profile_lookup(policy, goblin, new_combatant):
    assert policy.get_attack_bonus(goblin) == 2
    assert str(policy.get_damage_roll(goblin)) == "1d6"
    untagged = new_combatant("bandit", allegiance=Allegiance.ADVERSARY)
    assert get_profile(untagged) == DEFAULT_PROFILE
    assert str(DEFAULT_PROFILE.damage) == "1d6+1"


def test_dragon_profile():
    profile = ADVERSARY_PROFILES[AdversaryType.DRAGON]
    assert profile.attack_bonus == 10
    assert str(profile.damage) == "3d10+6"
