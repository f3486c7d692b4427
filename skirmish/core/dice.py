"""
Dice module for the combat resolver.

Provides a dice roller built on top of an injectable random source, so that
every roll in the engine can be reproduced from a seed or forced in tests.
"""

from random import Random
from typing import Protocol

from catchery import log_error

from skirmish.core.logging import get_logger

logger = get_logger(__name__)


class RandomSource(Protocol):
    """Anything able to produce integers in a range and floats in [0, 1)."""

    def randint(self, a: int, b: int) -> int: ...

    def random(self) -> float: ...


class DiceRoller:
    """Rolls dice using an injected random source."""

    def __init__(self, source: RandomSource | None = None, seed: int | None = None):
        """
        Initialize the DiceRoller.

        Args:
            source (RandomSource | None):
                The random source to draw from. When omitted, a
                `random.Random` seeded with `seed` is used.
            seed (int | None):
                Seed for the default random source.

        """
        self._source: RandomSource = source if source is not None else Random(seed)

    @property
    def source(self) -> RandomSource:
        return self._source

    def roll_die(self, sides: int) -> int:
        """
        Rolls a single die.

        Args:
            sides (int): Number of sides on the die.

        Returns:
            int: A value between 1 and `sides`, inclusive.

        """
        if sides < 1:
            log_error(
                f"Number of sides must be positive, got {sides}",
                {"sides": sides},
            )
            raise ValueError(f"Invalid dice sides: {sides}")
        return self._source.randint(1, sides)

    def roll_many(self, count: int, sides: int) -> list[int]:
        """
        Rolls several dice of the same kind.

        Args:
            count (int): Number of dice.
            sides (int): Number of sides on each die.

        Returns:
            list[int]: The individual results.

        """
        if count < 0:
            log_error(
                f"Number of dice must not be negative, got {count}",
                {"count": count, "sides": sides},
            )
            raise ValueError(f"Invalid dice count: {count}")
        rolls = [self.roll_die(sides) for _ in range(count)]
        logger.debug("Rolled %dd%d -> %s", count, sides, rolls)
        return rolls

    def chance(self) -> float:
        """Returns a uniform draw in [0, 1)."""
        return self._source.random()
