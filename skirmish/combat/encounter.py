"""
Encounter driver module for the combat resolver.

Runs the turn loop of a started combat: asks a player controller or the
adversary policy what to do, resolves attacks through the orchestrator,
narrates them, checks for the end of combat and advances the turn.
"""

from collections.abc import Callable

from pydantic import BaseModel, Field

from skirmish.combat.adversary_policy import AdversaryPolicy
from skirmish.combat.narration import Narrator, safe_narrate
from skirmish.combat.orchestrator import AttackOrchestrator
from skirmish.combat.scheduler import TurnScheduler
from skirmish.core.constants import AdversaryAction, Allegiance
from skirmish.core.logging import get_logger
from skirmish.core.models import AttackOutcome, Combatant, DamageSpec

logger = get_logger(__name__)

# Used by player combatants without an attached character sheet.
UNARMED_ATTACK_BONUS = 0
UNARMED_DAMAGE = DamageSpec(count=1, sides=3, bonus=0)


class PlayerChoice(BaseModel):
    """What a player decided to do on their turn."""

    target_id: str | None = Field(
        default=None,
        description="Id of the combatant to attack; None passes the turn",
    )

    @classmethod
    def attack(cls, target_id: str) -> "PlayerChoice":
        return cls(target_id=target_id)

    @classmethod
    def pass_turn(cls) -> "PlayerChoice":
        return cls()

    @property
    def is_pass(self) -> bool:
        return self.target_id is None


# Receives the acting player and every combatant of the encounter.
PlayerController = Callable[[Combatant, list[Combatant]], PlayerChoice]


def weakest_target(actor: Combatant, combatants: list[Combatant]) -> PlayerChoice:
    """
    Controller that attacks the opponent with the fewest hit points left.

    Args:
        actor (Combatant): The acting player.
        combatants (list[Combatant]): Every combatant in the encounter.

    Returns:
        PlayerChoice: An attack on the weakest opponent, or a pass.

    """
    opponents = [
        c
        for c in combatants
        if c.allegiance is actor.allegiance.opponent and not c.defeated
    ]
    if not opponents:
        return PlayerChoice.pass_turn()
    return PlayerChoice.attack(min(opponents, key=lambda c: c.hp.current).id)


class EncounterReport(BaseModel):
    """Summary of a finished encounter."""

    winners: Allegiance | None = Field(description="Winning side; None on a draw")
    reason: str | None = Field(default=None, description="Why combat ended")
    rounds: int = Field(description="Round in which combat ended")
    log: list[str] = Field(default_factory=list, description="Full combat log")
    narration: list[str] = Field(default_factory=list, description="Attack narration")


class Encounter:
    """Drives a started combat until one side wins or the round limit hits."""

    def __init__(
        self,
        scheduler: TurnScheduler,
        orchestrator: AttackOrchestrator,
        policy: AdversaryPolicy,
        player_controller: PlayerController = weakest_target,
        narrator: Narrator | None = None,
        on_event: Callable[[str], None] | None = None,
    ):
        """
        Initialize the Encounter.

        Args:
            scheduler (TurnScheduler): Scheduler of an already started combat.
            orchestrator (AttackOrchestrator): Resolves the attacks.
            policy (AdversaryPolicy): Decides for adversaries.
            player_controller (PlayerController): Decides for players.
            narrator (Narrator | None): Optional narration source.
            on_event (Callable[[str], None] | None):
                Called with every new log entry and narration line, e.g. to
                print them as they happen.

        """
        self.scheduler = scheduler
        self.orchestrator = orchestrator
        self.policy = policy
        self.player_controller = player_controller
        self.narrator = narrator
        self.on_event = on_event
        self.narration: list[str] = []
        self._seen = 0

    def run(self, max_rounds: int | None = None) -> EncounterReport:
        """
        Plays turns until combat ends.

        Args:
            max_rounds (int | None):
                Round limit; combat is aborted once it is exceeded. Defaults
                to the orchestrator's settings.

        Returns:
            EncounterReport: The winner, the final round and the log.

        """
        limit = max_rounds
        if limit is None:
            limit = self.orchestrator.settings.max_rounds
        self.scheduler.require_active("run the encounter")

        result = self.scheduler.check_combat_end()
        while not result.ended:
            if self.scheduler.round > limit:
                logger.info("Round limit of %d reached, aborting", limit)
                self.scheduler.end_combat()
                self._flush()
                return self._report(None, f"Round limit of {limit} reached")

            actor = self.scheduler.get_current_combatant()
            if actor is not None and not actor.defeated:
                self.take_turn(actor)

            result = self.scheduler.check_combat_end()
            if not result.ended:
                self.scheduler.next_turn()
                result = self.scheduler.check_combat_end()
            self._flush()

        self._flush()
        return self._report(result.winners, result.reason)

    def take_turn(self, actor: Combatant) -> AttackOutcome | None:
        """
        Plays the turn of one combatant.

        Args:
            actor (Combatant): The combatant whose turn it is.

        Returns:
            AttackOutcome | None: The attack made, if any.

        """
        combatants = self.scheduler.get_combatants()
        if actor.is_player:
            choice = self.player_controller(actor, combatants)
            if choice.is_pass:
                self.scheduler.add_to_log(f"{actor.name} passes.")
                return None
            bonus, damage = self._player_weapon(actor)
            return self._attack(actor, choice.target_id, bonus, damage)

        decision = self.policy.decide_action(actor, combatants)
        logger.debug("%s decides %s: %s", actor.name, decision.action, decision.reasoning)
        if decision.action is AdversaryAction.ATTACK and decision.target_id:
            return self._attack(
                actor,
                decision.target_id,
                self.policy.get_attack_bonus(actor),
                self.policy.get_damage_roll(actor),
            )
        if decision.action is AdversaryAction.DEFEND:
            self.scheduler.add_to_log(f"🛡️  {actor.name} takes a defensive stance.")
        else:
            self.scheduler.add_to_log(f"{actor.name} has no valid targets.")
        return None

    # =========================================================================
    # Helpers
    # =========================================================================

    def _attack(
        self,
        actor: Combatant,
        target_id: str,
        bonus: int,
        damage: DamageSpec,
    ) -> AttackOutcome:
        outcome = self.orchestrator.process_attack(actor.id, target_id, bonus, damage)
        target = self.scheduler.require_combatant(target_id)
        self.narration.append(safe_narrate(self.narrator, actor, target, outcome))
        if self.on_event is not None:
            self._flush()
            self.on_event(self.narration[-1])
        return outcome

    @staticmethod
    def _player_weapon(actor: Combatant) -> tuple[int, DamageSpec]:
        character = actor.character
        if character is None:
            return UNARMED_ATTACK_BONUS, UNARMED_DAMAGE
        return character.attack_bonus, character.damage

    def _flush(self) -> None:
        log = self.scheduler.get_log()
        if self.on_event is not None:
            for entry in log[self._seen :]:
                self.on_event(entry)
        self._seen = len(log)

    def _report(self, winners: Allegiance | None, reason: str | None) -> EncounterReport:
        return EncounterReport(
            winners=winners,
            reason=reason,
            rounds=self.scheduler.round,
            log=self.scheduler.get_log(),
            narration=list(self.narration),
        )
