"""
Tests for the d20 rules resolver.
"""

import pytest

from skirmish.core.constants import CheckKind, HealthStatus
from skirmish.core.dice import DiceRoller
from skirmish.core.rules import RulesResolver


def test_attack_tie_hits(scripted, resolver):
    """
    Test that a total equal to the armor class is a hit.
    """
    scripted.push(15)
    result = resolver.resolve_attack(0, 15)
    assert result.success
    assert result.kind is CheckKind.ATTACK
    assert result.roll.total == 15
    assert result.summary == "Attack hits!"
    assert result.notes == ["Rolled 15 + 0 = 15 vs AC 15"]


def test_attack_below_armor_class_misses(scripted, resolver):
    scripted.push(8)
    result = resolver.resolve_attack(6, 15)
    assert not result.success
    assert result.summary == "Attack misses."


def test_extra_modifiers_are_added(scripted, resolver):
    scripted.push(10)
    result = resolver.resolve_attack(2, 15, extra_modifiers=[2, 1])
    assert result.roll.total == 15
    assert result.roll.modifiers == [2, 2, 1]
    assert result.success


def test_natural_twenty_and_one_flags(scripted, resolver):
    scripted.push(20, 1)
    high = resolver.roll_d20([3])
    low = resolver.roll_d20([3])
    assert high.is_critical_hit and not high.is_critical_miss
    assert low.is_critical_miss and not low.is_critical_hit
    assert high.total == 23


def test_saving_throw_and_skill_check_use_dc(scripted, resolver):
    scripted.push(9, 9)
    save = resolver.resolve_saving_throw(3, 12)
    check = resolver.resolve_skill_check(2, 12)
    assert save.success and save.kind is CheckKind.SAVING_THROW
    assert not check.success and check.summary == "Check failed."
    assert check.notes == ["Rolled 9 + 2 = 11 vs DC 12"]


def test_critical_damage_rerolls_dice_without_bonus(scripted, resolver):
    """
    Test that 1d8+3 on a critical hit with dice 8 and 8 deals 19.
    """
    scripted.push(8, 8)
    assert resolver.resolve_damage(1, 8, 3, is_critical=True) == 19


def test_damage_is_never_negative(scripted, resolver):
    scripted.push(1)
    assert resolver.resolve_damage(1, 4, -5) == 0


def test_initiative_adds_modifier(scripted, resolver):
    scripted.push(12)
    assert resolver.resolve_initiative(-1) == 11


def test_confirm_critical_rolls_again(scripted, resolver):
    scripted.push(9, 2)
    assert resolver.confirm_critical(6, 15)
    assert not resolver.confirm_critical(6, 15)


def test_threatens_critical():
    assert RulesResolver.threatens_critical(20)
    assert not RulesResolver.threatens_critical(19)
    assert RulesResolver.threatens_critical(19, critical_range=19)


@pytest.mark.parametrize(
    "score, modifier",
    [(1, -5), (8, -1), (9, -1), (10, 0), (11, 0), (15, 2), (18, 4)],
)
def test_ability_modifier(score, modifier):
    assert RulesResolver.ability_modifier(score) == modifier


def test_apply_damage_at_zero_is_disabled():
    outcome = RulesResolver.apply_damage(0, 10, 0)
    assert outcome.new_hp == 0
    assert outcome.status is HealthStatus.DISABLED
    assert [change.name for change in outcome.status_changes] == ["Disabled"]


def test_apply_damage_to_minus_ten_is_dead():
    outcome = RulesResolver.apply_damage(-9, 10, 1)
    assert outcome.new_hp == -10
    assert outcome.status is HealthStatus.DEAD


def test_apply_damage_floors_at_death_threshold():
    outcome = RulesResolver.apply_damage(5, 10, 100)
    assert outcome.new_hp == -10
    assert outcome.status is HealthStatus.DEAD


@pytest.mark.parametrize(
    "current, damage, status",
    [
        (10, 0, HealthStatus.HEALTHY),
        (10, 5, HealthStatus.HEALTHY),
        (10, 6, HealthStatus.WOUNDED),
        (10, 12, HealthStatus.DYING),
    ],
)
def test_apply_damage_status(current, damage, status):
    assert RulesResolver.apply_damage(current, 10, damage).status is status


def test_apply_damage_is_monotonic():
    results = [RulesResolver.apply_damage(10, 10, d).new_hp for d in range(30)]
    assert results == sorted(results, reverse=True)


def test_apply_healing_caps_at_max():
    outcome = RulesResolver.apply_healing(5, 10, 20)
    assert outcome.new_hp == 10
    assert outcome.overheal == 15


def test_apply_healing_without_overheal():
    outcome = RulesResolver.apply_healing(2, 10, 3)
    assert outcome.new_hp == 5
    assert outcome.overheal == 0


def test_armor_class_breakdown():
    ac = RulesResolver.calculate_armor_class(2, armor_bonus=6, shield_bonus=2)
    assert (ac.total, ac.flat_footed, ac.touch) == (20, 18, 12)


def test_attack_bonus_and_spell_dc():
    assert RulesResolver.calculate_attack_bonus(3, 2, [1]) == 6
    assert RulesResolver.spell_save_dc(1, 3) == 14


def test_skill_modifier_class_bonus_needs_ranks():
    assert RulesResolver.calculate_skill_modifier(3, 2, True) == 8
    assert RulesResolver.calculate_skill_modifier(0, 2, True) == 2
    assert RulesResolver.calculate_skill_modifier(3, 2, False) == 5


def test_seeded_rollers_repeat():
    first = RulesResolver(DiceRoller(seed=42))
    second = RulesResolver(DiceRoller(seed=42))
    assert [first.roll_d20().d20 for _ in range(10)] == [
        second.roll_d20().d20 for _ in range(10)
    ]


def test_invalid_dice_raise(roller):
    with pytest.raises(ValueError):
        roller.roll_die(0)
    with pytest.raises(ValueError):
        roller.roll_many(-1, 6)
