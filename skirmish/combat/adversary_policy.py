"""
Adversary policy module for the combat resolver.

Heuristic decision making for non-player combatants, plus the static
capability table (attack bonus and damage dice) keyed by adversary type.
"""

from pydantic import BaseModel, ConfigDict, Field

from skirmish.core.config import DEFAULT_SETTINGS, CombatSettings
from skirmish.core.constants import AdversaryAction, AdversaryType, Allegiance
from skirmish.core.dice import DiceRoller
from skirmish.core.logging import get_logger
from skirmish.core.models import AdversaryDecision, Combatant, DamageSpec

logger = get_logger(__name__)


class AdversaryProfile(BaseModel):
    """Offensive capabilities shared by every adversary of one type."""

    model_config = ConfigDict(frozen=True)

    attack_bonus: int = Field(description="Bonus added to attack rolls")
    damage: DamageSpec = Field(description="Damage dealt on a hit")


ADVERSARY_PROFILES: dict[AdversaryType, AdversaryProfile] = {
    AdversaryType.WEAK_FAST: AdversaryProfile(
        attack_bonus=2, damage=DamageSpec(count=1, sides=6, bonus=0)
    ),
    AdversaryType.STRONG_WARRIOR: AdversaryProfile(
        attack_bonus=4, damage=DamageSpec(count=1, sides=8, bonus=2)
    ),
    AdversaryType.UNDEAD_LIGHT: AdversaryProfile(
        attack_bonus=1, damage=DamageSpec(count=1, sides=6, bonus=0)
    ),
    AdversaryType.UNDEAD_TOUGH: AdversaryProfile(
        attack_bonus=1, damage=DamageSpec(count=1, sides=6, bonus=1)
    ),
    AdversaryType.BRUTE: AdversaryProfile(
        attack_bonus=6, damage=DamageSpec(count=2, sides=8, bonus=4)
    ),
    AdversaryType.DRAGON: AdversaryProfile(
        attack_bonus=10, damage=DamageSpec(count=3, sides=10, bonus=6)
    ),
}

# Used for combatants without a type tag.
DEFAULT_PROFILE = AdversaryProfile(
    attack_bonus=3, damage=DamageSpec(count=1, sides=6, bonus=1)
)


def _hp_ratio(combatant: Combatant) -> float:
    """
    Helper function to calculate HP ratio.

    Args:
        combatant (Combatant): The combatant whose HP ratio to calculate.

    Returns:
        float: Current HP over maximum HP.

    """
    return combatant.hp.current / combatant.hp.max


def get_profile(combatant: Combatant) -> AdversaryProfile:
    """
    Returns the capability profile for a combatant's adversary type.

    Args:
        combatant (Combatant): The adversary.

    Returns:
        AdversaryProfile: The matching profile, or the default profile when
        the combatant carries no type tag.

    """
    if combatant.adversary_type is None:
        return DEFAULT_PROFILE
    return ADVERSARY_PROFILES[combatant.adversary_type]


class AdversaryPolicy:
    """Decides what an adversary does on its turn."""

    def __init__(
        self,
        roller: DiceRoller | None = None,
        settings: CombatSettings = DEFAULT_SETTINGS,
    ):
        """
        Initialize the AdversaryPolicy.

        Args:
            roller (DiceRoller | None):
                Source of the random draw deciding defensive stances.
            settings (CombatSettings):
                Provides the low-HP threshold and the defend chance.

        """
        self.roller: DiceRoller = roller or DiceRoller()
        self.settings = settings

    def decide_action(
        self,
        actor: Combatant,
        combatants: list[Combatant],
    ) -> AdversaryDecision:
        """
        Chooses an action for an adversary.

        The weakest living player (lowest HP ratio, first one on ties) is
        the preferred target. An adversary below the low-HP threshold may
        instead take a defensive stance.

        Args:
            actor (Combatant): The adversary whose turn it is.
            combatants (list[Combatant]): Every combatant in the encounter.

        Returns:
            AdversaryDecision: ATTACK with a target, DEFEND or PASS.

        """
        targets = [
            c
            for c in combatants
            if c.allegiance is Allegiance.PLAYER and not c.defeated
        ]
        if not targets:
            return AdversaryDecision(
                action=AdversaryAction.PASS,
                reasoning=f"{actor.name} has no valid targets",
            )

        # min() keeps the first of several equal ratios.
        weakest = min(targets, key=_hp_ratio)

        if (
            _hp_ratio(actor) < self.settings.low_hp_ratio
            and self.roller.chance() < self.settings.defend_chance
        ):
            logger.debug("%s turns defensive at %d HP", actor.name, actor.hp.current)
            return AdversaryDecision(
                action=AdversaryAction.DEFEND,
                reasoning=f"{actor.name} is low on HP and takes a defensive stance",
            )

        return AdversaryDecision(
            action=AdversaryAction.ATTACK,
            target_id=weakest.id,
            reasoning=f"{actor.name} attacks {weakest.name} (weakest target)",
        )

    def get_attack_bonus(self, actor: Combatant) -> int:
        """Returns the attack bonus of an adversary."""
        return get_profile(actor).attack_bonus

    def get_damage_roll(self, actor: Combatant) -> DamageSpec:
        """Returns the damage dice of an adversary."""
        return get_profile(actor).damage
