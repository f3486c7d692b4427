"""
Shared fixtures for the combat resolver tests.
"""

from collections import deque

import pytest

from skirmish.core.constants import AdversaryType, Allegiance
from skirmish.core.dice import DiceRoller
from skirmish.core.models import Combatant, HitPoints
from skirmish.core.rules import RulesResolver


class ScriptedRandom:
    """Random source replaying queued draws, in order.

    Integers feed every die roll (d20 and damage dice alike), floats feed
    the adversary policy. Running out of draws raises IndexError, so a test
    also fails when the code rolls more than expected.
    """

    def __init__(self, ints=(), floats=()):
        self.ints = deque(ints)
        self.floats = deque(floats)

    def push(self, *values: int) -> None:
        self.ints.extend(values)

    def push_floats(self, *values: float) -> None:
        self.floats.extend(values)

    def randint(self, a: int, b: int) -> int:
        value = self.ints.popleft()
        assert a <= value <= b, f"scripted {value} outside [{a}, {b}]"
        return value

    def random(self) -> float:
        return self.floats.popleft()


def make_combatant(
    combatant_id: str,
    initiative: int = 10,
    allegiance: Allegiance = Allegiance.PLAYER,
    hp: int = 10,
    max_hp: int | None = None,
    armor_class: int = 12,
    adversary_type: AdversaryType | None = None,
) -> Combatant:
    return Combatant(
        id=combatant_id,
        name=combatant_id[0].upper() + combatant_id[1:],
        initiative=initiative,
        hp=HitPoints(current=hp, max=max_hp or hp),
        armor_class=armor_class,
        allegiance=allegiance,
        adversary_type=adversary_type,
    )


@pytest.fixture
def scripted():
    return ScriptedRandom()


@pytest.fixture
def roller(scripted):
    return DiceRoller(scripted)


@pytest.fixture
def resolver(roller):
    return RulesResolver(roller)


@pytest.fixture
def new_combatant():
    """Factory building combatants with sensible defaults."""
    return make_combatant
