"""
Tests for the turn scheduler and its combat lifecycle.
"""

import pytest

from skirmish.combat.scheduler import TurnScheduler
from skirmish.core.constants import Allegiance, CombatPhase
from skirmish.core.errors import IllegalTransitionError, InvalidReferenceError

PLAYER = Allegiance.PLAYER
ADVERSARY = Allegiance.ADVERSARY


@pytest.fixture
def scheduler():
    return TurnScheduler()


@pytest.fixture
def skirmish_roster(new_combatant):
    """Two players and two adversaries with distinct initiatives."""
    return [
        new_combatant("alice", initiative=18),
        new_combatant("goblin", initiative=12, allegiance=ADVERSARY),
        new_combatant("bob", initiative=9),
        new_combatant("orc", initiative=4, allegiance=ADVERSARY),
    ]


def test_start_sorts_by_initiative_and_keeps_ties_stable(scheduler, new_combatant):
    roster = [
        new_combatant("a", initiative=10),
        new_combatant("b", initiative=15),
        new_combatant("c", initiative=10),
        new_combatant("d", initiative=15, allegiance=ADVERSARY),
    ]
    scheduler.start_combat(roster)
    assert [c.id for c in scheduler.get_combatants()] == ["b", "d", "a", "c"]
    assert scheduler.round == 1
    assert scheduler.turn_index == 0
    assert scheduler.phase is CombatPhase.ACTIVE
    assert scheduler.get_current_combatant().id == "b"


def test_start_logs_initiative_order(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    log = scheduler.get_log()
    assert log[0] == "⚔️  COMBAT BEGINS!"
    assert log[1] == "Initiative order: Alice (18) → Goblin (12) → Bob (9) → Orc (4)"


def test_start_twice_is_illegal(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    with pytest.raises(IllegalTransitionError):
        scheduler.start_combat(skirmish_roster)


def test_start_rejects_empty_and_duplicate_rosters(scheduler, new_combatant):
    with pytest.raises(ValueError):
        scheduler.start_combat([])
    with pytest.raises(ValueError):
        scheduler.start_combat([new_combatant("x"), new_combatant("x")])
    assert scheduler.phase is CombatPhase.NOT_STARTED


def test_next_turn_before_start_is_illegal(scheduler):
    with pytest.raises(IllegalTransitionError):
        scheduler.next_turn()
    assert scheduler.get_current_combatant() is None


def test_round_increments_once_per_cycle(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    new_rounds = [scheduler.next_turn().new_round for _ in range(8)]
    assert new_rounds == [False, False, False, True, False, False, False, True]
    assert scheduler.round == 3
    assert scheduler.get_log().count("=== ROUND 2 ===") == 1


def test_next_turn_skips_defeated(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    scheduler.get_combatant("goblin").defeated = True
    advance = scheduler.next_turn()
    assert advance.current.id == "bob"
    assert not advance.new_round


def test_next_turn_skips_defeated_across_the_wrap(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    scheduler.get_combatant("alice").defeated = True
    scheduler.get_combatant("goblin").defeated = True
    for _ in range(2):
        scheduler.next_turn()
    # bob -> orc -> wrap past alice and goblin -> bob, in a single new round
    advance = scheduler.next_turn()
    assert advance.current.id == "bob"
    assert advance.new_round
    assert scheduler.round == 2


def test_next_turn_never_returns_defeated_while_someone_lives(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    for combatant_id in ("alice", "bob", "orc"):
        scheduler.get_combatant(combatant_id).defeated = True
    for _ in range(10):
        advance = scheduler.next_turn()
        assert advance.current is not None
        assert advance.current.id == "goblin"


def test_next_turn_with_nobody_alive_ends_in_a_draw(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    for combatant in scheduler.get_combatants():
        combatant.defeated = True
    advance = scheduler.next_turn()
    assert advance.current is None
    assert not scheduler.is_active
    assert scheduler.phase is CombatPhase.ENDED
    result = scheduler.check_combat_end()
    assert result.ended
    assert result.winners is None


def test_check_combat_end_before_start_is_not_over(scheduler):
    result = scheduler.check_combat_end()
    assert not result.ended
    assert result.winners is None
    assert scheduler.phase is CombatPhase.NOT_STARTED
    assert scheduler.get_log() == []


def test_roster_member_created_down_never_acts(scheduler, new_combatant):
    corpse = new_combatant("corpse", initiative=20, allegiance=ADVERSARY, hp=0, max_hp=8)
    hero = new_combatant("hero", initiative=15)
    goblin = new_combatant("goblin", initiative=10, allegiance=ADVERSARY)
    scheduler.start_combat([hero, corpse, goblin])
    assert scheduler.get_current_combatant().id == "hero"
    assert [c.id for c in scheduler.get_active_combatants()] == ["hero", "goblin"]
    assert scheduler.next_turn().current.id == "goblin"
    advance = scheduler.next_turn()
    assert advance.new_round
    assert advance.current.id == "hero"


def test_adversary_created_down_counts_as_defeated(scheduler, new_combatant):
    hero = new_combatant("hero", initiative=15)
    corpse = new_combatant("corpse", initiative=10, allegiance=ADVERSARY, hp=-3, max_hp=8)
    scheduler.start_combat([hero, corpse])
    result = scheduler.check_combat_end()
    assert result.ended
    assert result.winners is PLAYER


def test_check_combat_end_not_over(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    result = scheduler.check_combat_end()
    assert not result.ended
    assert scheduler.is_active


def test_players_win_when_adversaries_fall(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    scheduler.get_combatant("goblin").defeated = True
    scheduler.get_combatant("orc").defeated = True
    result = scheduler.check_combat_end()
    assert result.ended
    assert result.winners is PLAYER
    assert result.reason == "All adversaries defeated"
    assert not scheduler.is_active
    # A second check reports the same verdict without logging it again.
    assert scheduler.check_combat_end() == result
    assert scheduler.get_log().count("🎉 All adversaries defeated! VICTORY!") == 1


def test_adversaries_win_when_players_fall(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    scheduler.get_combatant("alice").defeated = True
    scheduler.get_combatant("bob").defeated = True
    result = scheduler.check_combat_end()
    assert result.winners is ADVERSARY
    assert result.reason == "All players defeated"


def test_mutual_wipe_is_a_draw(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    for combatant in scheduler.get_combatants():
        combatant.defeated = True
    result = scheduler.check_combat_end()
    assert result.ended
    assert result.winners is None
    assert result.reason == "Mutual destruction"


def test_end_combat_blocks_further_turns(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    scheduler.end_combat()
    assert scheduler.get_log()[-1] == "⚔️  COMBAT ENDED"
    assert scheduler.get_current_combatant() is None
    with pytest.raises(IllegalTransitionError):
        scheduler.next_turn()


def test_require_combatant_unknown_id(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    assert scheduler.get_combatant("dragon") is None
    with pytest.raises(InvalidReferenceError):
        scheduler.require_combatant("dragon")


def test_state_snapshot_is_deep(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    snapshot = scheduler.get_state()
    snapshot.combatants[0].hp.current = 0
    snapshot.log.append("tampered")
    assert scheduler.get_combatant("alice").hp.current == 10
    assert "tampered" not in scheduler.get_log()


def test_queries_filter(scheduler, skirmish_roster):
    scheduler.start_combat(skirmish_roster)
    scheduler.get_combatant("bob").defeated = True
    assert [c.id for c in scheduler.get_combatants(ADVERSARY)] == ["goblin", "orc"]
    assert [c.id for c in scheduler.get_active_combatants()] == [
        "alice",
        "goblin",
        "orc",
    ]
    summary = scheduler.get_summary()
    assert "Round: 1" in summary
    assert "Defeated: Bob" in summary
