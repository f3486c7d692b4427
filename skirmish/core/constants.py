"""
Constants and enumerations for the combat resolver.

Defines the closed sets used throughout the engine: allegiances, adversary
type tags, health statuses, check kinds, adversary actions and combat phases,
together with the numeric thresholds of the rules.
"""

from enum import Enum

# Hit points at (or below) which a combatant is dead.
DEATH_THRESHOLD = -10

# Natural roll that threatens a critical hit.
NATURAL_CRITICAL = 20

# Natural roll that always counts as a critical miss.
NATURAL_FUMBLE = 1

# Bonus granted to class skills that have at least one rank.
CLASS_SKILL_BONUS = 3


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").lower().capitalize()


class Allegiance(NiceEnum):
    """The side a combatant fights for."""

    PLAYER = "PLAYER"
    ADVERSARY = "ADVERSARY"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this allegiance."""
        return {
            Allegiance.PLAYER: "👤",
            Allegiance.ADVERSARY: "👹",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this allegiance."""
        return {
            Allegiance.PLAYER: "bold blue",
            Allegiance.ADVERSARY: "bold red",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return self.colorize(self.display_name)

    @property
    def opponent(self) -> "Allegiance":
        """Returns the opposing side."""
        if self is Allegiance.PLAYER:
            return Allegiance.ADVERSARY
        return Allegiance.PLAYER

    def colorize(self, message: str) -> str:
        """Applies allegiance color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class AdversaryType(NiceEnum):
    """Tag assigned to an adversary at creation, selecting its capabilities."""

    WEAK_FAST = "WEAK_FAST"
    STRONG_WARRIOR = "STRONG_WARRIOR"
    UNDEAD_LIGHT = "UNDEAD_LIGHT"
    UNDEAD_TOUGH = "UNDEAD_TOUGH"
    BRUTE = "BRUTE"
    DRAGON = "DRAGON"


class HealthStatus(NiceEnum):
    """Classification of a combatant's hit points."""

    HEALTHY = "HEALTHY"
    WOUNDED = "WOUNDED"
    DISABLED = "DISABLED"
    DYING = "DYING"
    DEAD = "DEAD"

    @classmethod
    def from_hp(cls, current_hp: int, max_hp: int) -> "HealthStatus":
        """
        Classifies a hit point total.

        Status priority: dead (<= -10), dying (< 0), disabled (== 0),
        wounded (< half of max), healthy.

        """
        if current_hp <= DEATH_THRESHOLD:
            return cls.DEAD
        if current_hp < 0:
            return cls.DYING
        if current_hp == 0:
            return cls.DISABLED
        if current_hp < max_hp / 2:
            return cls.WOUNDED
        return cls.HEALTHY

    @property
    def is_down(self) -> bool:
        """True for the statuses that take a combatant out of the fight."""
        return self in (HealthStatus.DISABLED, HealthStatus.DYING, HealthStatus.DEAD)

    @property
    def color(self) -> str:
        """Returns the color string associated with this status."""
        return {
            HealthStatus.HEALTHY: "bold green",
            HealthStatus.WOUNDED: "bold yellow",
            HealthStatus.DISABLED: "bold magenta",
            HealthStatus.DYING: "bold red",
            HealthStatus.DEAD: "dim white",
        }.get(self, "dim white")

    @property
    def colored_name(self) -> str:
        return f"[{self.color}]{self.display_name}[/]"


class CheckKind(NiceEnum):
    """The semantic label of a d20 check."""

    ATTACK = "ATTACK"
    SAVING_THROW = "SAVING_THROW"
    SKILL_CHECK = "SKILL_CHECK"


class AdversaryAction(NiceEnum):
    """Actions an adversary can decide to take on its turn."""

    ATTACK = "ATTACK"
    DEFEND = "DEFEND"
    PASS = "PASS"


class CombatPhase(NiceEnum):
    """Lifecycle of a combat encounter."""

    NOT_STARTED = "NOT_STARTED"
    ACTIVE = "ACTIVE"
    ENDED = "ENDED"
