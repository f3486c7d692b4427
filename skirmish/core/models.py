"""
Data model module for the combat resolver.

Defines the value types exchanged between the resolver, the scheduler, the
adversary policy and the attack orchestrator: rolls, resolutions, hit points,
combatants and the combat state itself.
"""

import re
import weakref
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from skirmish.core.constants import (
    NATURAL_CRITICAL,
    NATURAL_FUMBLE,
    AdversaryAction,
    AdversaryType,
    Allegiance,
    CheckKind,
    CombatPhase,
    HealthStatus,
)

# Matches dice notation such as '1d8+3', 'd6' or '2D8-1'.
DICE_PATTERN = re.compile(r"^\s*(\d*)\s*[dD]\s*(\d+)\s*(?:([+-])\s*(\d+))?\s*$")


# =============================================================================
# Rolls and resolutions
# =============================================================================


class RollResult(BaseModel):
    """The outcome of a single d20 roll, including its modifiers."""

    model_config = ConfigDict(frozen=True)

    d20: int = Field(
        ge=1,
        le=20,
        description="The natural value shown on the die",
    )
    modifiers: list[int] = Field(
        default_factory=list,
        description="Modifiers added to the natural roll",
    )
    total: int = Field(
        description="Natural roll plus the sum of all modifiers",
    )
    is_critical_hit: bool = Field(
        default=False,
        description="Whether the natural roll was a 20",
    )
    is_critical_miss: bool = Field(
        default=False,
        description="Whether the natural roll was a 1",
    )

    @classmethod
    def from_draw(cls, d20: int, modifiers: list[int]) -> "RollResult":
        """
        Builds a roll result from a natural draw and its modifiers.

        Args:
            d20 (int): The natural value of the die.
            modifiers (list[int]): The modifiers to apply.

        Returns:
            RollResult: The complete roll.

        """
        return cls(
            d20=d20,
            modifiers=list(modifiers),
            total=d20 + sum(modifiers),
            is_critical_hit=d20 == NATURAL_CRITICAL,
            is_critical_miss=d20 == NATURAL_FUMBLE,
        )

    def describe(self) -> str:
        """Returns a compact textual breakdown such as 'd20(15) +6 = 21'."""
        mods = " ".join(f"{mod:+d}" for mod in self.modifiers)
        if mods:
            return f"d20({self.d20}) {mods} = {self.total}"
        return f"d20({self.d20}) = {self.total}"


class ResolutionResult(BaseModel):
    """The outcome of an attack, saving throw or skill check."""

    model_config = ConfigDict(frozen=True)

    kind: CheckKind = Field(description="What kind of check was resolved")
    success: bool = Field(description="Whether the total met the target value")
    roll: RollResult = Field(description="The underlying d20 roll")
    target_value: int = Field(description="The AC or DC the roll was compared to")
    summary: str = Field(default="", description="One-line verdict")
    notes: list[str] = Field(default_factory=list, description="Resolution notes")


class DamageSpec(BaseModel):
    """A damage roll expressed as NdS+B."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(default=1, ge=1, description="Number of dice to roll")
    sides: int = Field(default=6, ge=1, description="Number of sides per die")
    bonus: int = Field(default=0, description="Flat bonus added once")

    @classmethod
    def parse(cls, expression: str) -> "DamageSpec":
        """
        Parses dice notation such as '1d8+3' or 'd6'.

        Args:
            expression (str): The dice expression.

        Returns:
            DamageSpec: The parsed specification.

        Raises:
            ValueError: If the expression is not valid dice notation.

        """
        match = DICE_PATTERN.match(expression or "")
        if not match:
            raise ValueError(f"Invalid dice expression: '{expression}'")
        count_str, sides_str, sign, bonus_str = match.groups()
        bonus = int(bonus_str) if bonus_str else 0
        if sign == "-":
            bonus = -bonus
        return cls(
            count=int(count_str) if count_str else 1,
            sides=int(sides_str),
            bonus=bonus,
        )

    def __str__(self) -> str:
        if self.bonus:
            return f"{self.count}d{self.sides}{self.bonus:+d}"
        return f"{self.count}d{self.sides}"


class StatusChange(BaseModel):
    """A condition transition produced by applying damage."""

    model_config = ConfigDict(frozen=True)

    target: str = Field(default="self", description="Who the change applies to")
    type: str = Field(default="condition", description="The kind of change")
    name: str = Field(description="The condition name")
    description: str = Field(description="What the condition means")


class DamageOutcome(BaseModel):
    """Result of applying damage to a hit point total."""

    model_config = ConfigDict(frozen=True)

    new_hp: int
    status: HealthStatus
    status_changes: list[StatusChange] = Field(default_factory=list)


class HealingOutcome(BaseModel):
    """Result of applying healing to a hit point total."""

    model_config = ConfigDict(frozen=True)

    new_hp: int
    overheal: int


class ArmorClass(BaseModel):
    """Armor class breakdown; only `total` is carried by a combatant."""

    model_config = ConfigDict(frozen=True)

    total: int
    flat_footed: int
    touch: int


# =============================================================================
# Combatants
# =============================================================================


class HitPoints(BaseModel):
    """Current and maximum hit points of a combatant."""

    current: int = Field(description="Current hit points")
    max: int = Field(description="Maximum hit points")

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if self.max <= 0:
            raise ValueError(f"max hit points must be positive, got {self.max}")

    @property
    def ratio(self) -> float:
        """Fraction of maximum hit points remaining."""
        return self.current / self.max


class Combatant(BaseModel):
    """A participant tracked by the combat engine."""

    id: str = Field(description="Unique identifier within an encounter")
    name: str = Field(description="Display name")
    initiative: int = Field(description="Initiative score, fixed for the encounter")
    hp: HitPoints = Field(description="Hit points")
    armor_class: int = Field(description="Armor class an attack must meet")
    allegiance: Allegiance = Field(description="The side the combatant fights for")
    defeated: bool = Field(default=False, description="Whether the combatant is down")
    status: HealthStatus = Field(
        default=HealthStatus.HEALTHY,
        description="Health classification of the combatant",
    )
    adversary_type: AdversaryType | None = Field(
        default=None,
        description="Capability tag, assigned only to adversaries",
    )

    _character_ref: Any = PrivateAttr(default=None)

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not self.id or not self.id.strip():
            raise ValueError("id must be a non-empty string")
        if not self.name or not self.name.strip():
            raise ValueError("name must be a non-empty string")
        # A combatant created at or below 0 HP enters the fight already down.
        if self.hp.current <= 0:
            self.status = HealthStatus.from_hp(self.hp.current, self.hp.max)
            self.hp.current = 0
            self.defeated = True

    @property
    def is_player(self) -> bool:
        return self.allegiance is Allegiance.PLAYER

    @property
    def character(self) -> Any | None:
        """The external character data, if attached and still alive."""
        if self._character_ref is None:
            return None
        return self._character_ref()

    def attach_character(self, character: Any) -> None:
        """
        Keeps a weak reference to the external character data.

        Args:
            character (Any): The character object; must support weak references.

        """
        self._character_ref = weakref.ref(character)

    @property
    def colored_name(self) -> str:
        return self.allegiance.colorize(self.name)


# =============================================================================
# Combat state and operation results
# =============================================================================


class CombatState(BaseModel):
    """The full state of one combat encounter."""

    round: int = Field(default=0, description="Current round, 1-based once started")
    turn_index: int = Field(default=0, description="Index of the acting combatant")
    combatants: list[Combatant] = Field(
        default_factory=list,
        description="Combatants in initiative order",
    )
    log: list[str] = Field(default_factory=list, description="Append-only combat log")
    active: bool = Field(default=False, description="Whether combat is running")
    phase: CombatPhase = Field(default=CombatPhase.NOT_STARTED)


class TurnAdvance(BaseModel):
    """Result of advancing to the next turn."""

    new_round: bool = False
    current: Combatant | None = None


class CombatEndResult(BaseModel):
    """Result of checking whether combat is over."""

    ended: bool
    winners: Allegiance | None = None
    reason: str | None = None


class AdversaryDecision(BaseModel):
    """What an adversary decided to do on its turn."""

    action: AdversaryAction
    target_id: str | None = None
    reasoning: str = ""


class AttackOutcome(BaseModel):
    """Structured result of one resolved attack."""

    actor_id: str
    target_id: str
    success: bool
    damage: int | None = None
    critical: bool = False
    target_defeated: bool = False
    resolution: ResolutionResult
    log_entries: list[str] = Field(default_factory=list)


class HitPointChange(BaseModel):
    """Structured result of flat damage or healing applied to a combatant."""

    target_id: str
    amount: int
    new_hp: int
    status: HealthStatus
    overheal: int = 0
    target_defeated: bool = False
    log_entries: list[str] = Field(default_factory=list)
