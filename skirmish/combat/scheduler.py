"""
Turn scheduler module for the combat resolver.

Owns the combat state of one encounter: orders combatants by initiative,
advances turns and rounds, and detects the end of combat.
"""

from catchery import log_error

from skirmish.core.constants import Allegiance, CombatPhase
from skirmish.core.errors import IllegalTransitionError, InvalidReferenceError
from skirmish.core.logging import get_logger
from skirmish.core.models import Combatant, CombatEndResult, CombatState, TurnAdvance

logger = get_logger(__name__)


class TurnScheduler:
    """Manages turn order and the lifecycle of a combat encounter.

    The scheduler moves through three phases: NOT_STARTED, ACTIVE and ENDED.
    Only `start_combat`, `next_turn`, `check_combat_end` and `end_combat`
    change the state here; hit points are changed exclusively by the attack
    orchestrator, which checks `require_active` and writes to `add_to_log`.
    """

    def __init__(self) -> None:
        """Initialize the TurnScheduler with an empty, not-started state."""
        self._state: CombatState = CombatState()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def phase(self) -> CombatPhase:
        return self._state.phase

    @property
    def is_active(self) -> bool:
        return self._state.active

    @property
    def round(self) -> int:
        return self._state.round

    @property
    def turn_index(self) -> int:
        return self._state.turn_index

    def start_combat(self, combatants: list[Combatant]) -> None:
        """
        Starts combat, sorting combatants by initiative (highest first).

        The sort is stable: combatants with equal initiative keep the order
        in which they were given.

        Args:
            combatants (list[Combatant]): The roster of the encounter.

        Raises:
            IllegalTransitionError: If combat was already started.
            ValueError: If the roster is empty or contains duplicate ids.

        """
        if self._state.phase is not CombatPhase.NOT_STARTED:
            raise IllegalTransitionError("start combat", self._state.phase)
        if not combatants:
            log_error("Cannot start combat without combatants", {})
            raise ValueError("Cannot start combat without combatants")
        ids = [combatant.id for combatant in combatants]
        duplicates = sorted({cid for cid in ids if ids.count(cid) > 1})
        if duplicates:
            log_error(
                f"Duplicate combatant ids: {duplicates}",
                {"duplicates": duplicates},
            )
            raise ValueError(f"Duplicate combatant ids: {duplicates}")

        ordered = sorted(combatants, key=lambda c: c.initiative, reverse=True)
        first = next((i for i, c in enumerate(ordered) if not c.defeated), 0)
        self._state = CombatState(
            round=1,
            turn_index=first,
            combatants=ordered,
            log=["⚔️  COMBAT BEGINS!"],
            active=True,
            phase=CombatPhase.ACTIVE,
        )
        self.add_to_log(
            "Initiative order: "
            + " → ".join(f"{c.name} ({c.initiative})" for c in ordered)
        )
        logger.info("Combat started with %d combatants", len(ordered))

    def end_combat(self) -> None:
        """Ends combat unconditionally (manual abort)."""
        was_active = self._state.active
        self._state.active = False
        self._state.phase = CombatPhase.ENDED
        if was_active:
            self.add_to_log("⚔️  COMBAT ENDED")
            logger.info("Combat ended manually in round %d", self._state.round)

    # =========================================================================
    # Turn order
    # =========================================================================

    def next_turn(self) -> TurnAdvance:
        """
        Advances to the next combatant that is not defeated.

        Wrapping past the last combatant starts a new round; the round is
        incremented at most once per call. At most N slots are scanned, so a
        roster where everyone is defeated yields `current=None` instead of
        looping, and combat ends as a draw.

        Returns:
            TurnAdvance: Whether a new round began, and who acts now.

        Raises:
            IllegalTransitionError: If combat is not active.

        """
        self.require_active("advance the turn")
        count = len(self._state.combatants)
        new_round = False
        for _ in range(count):
            self._state.turn_index = (self._state.turn_index + 1) % count
            if self._state.turn_index == 0 and not new_round:
                new_round = True
                self._state.round += 1
                self.add_to_log(f"=== ROUND {self._state.round} ===")
            current = self._state.combatants[self._state.turn_index]
            if not current.defeated:
                logger.debug(
                    "Round %d, turn %d: %s",
                    self._state.round,
                    self._state.turn_index,
                    current.name,
                )
                return TurnAdvance(new_round=new_round, current=current)
        logger.debug("No combatant left to act in round %d", self._state.round)
        self.check_combat_end()
        return TurnAdvance(new_round=new_round, current=None)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_current_combatant(self) -> Combatant | None:
        """Returns the combatant whose turn it is, or None if not active."""
        if not self._state.active or not self._state.combatants:
            return None
        return self._state.combatants[self._state.turn_index]

    def get_active_combatants(self) -> list[Combatant]:
        """Returns all combatants that are not defeated, in initiative order."""
        return [c for c in self._state.combatants if not c.defeated]

    def get_combatants(self, allegiance: Allegiance | None = None) -> list[Combatant]:
        """Returns all combatants, optionally filtered by allegiance."""
        if allegiance is None:
            return list(self._state.combatants)
        return [c for c in self._state.combatants if c.allegiance is allegiance]

    def get_combatant(self, combatant_id: str) -> Combatant | None:
        """Returns the combatant with the given id, or None."""
        for combatant in self._state.combatants:
            if combatant.id == combatant_id:
                return combatant
        return None

    def require_combatant(self, combatant_id: str) -> Combatant:
        """
        Returns the combatant with the given id.

        Raises:
            InvalidReferenceError: If no such combatant is in the encounter.

        """
        combatant = self.get_combatant(combatant_id)
        if combatant is None:
            log_error(
                f"Unknown combatant id: '{combatant_id}'",
                {
                    "combatant_id": combatant_id,
                    "known_ids": [c.id for c in self._state.combatants],
                },
            )
            raise InvalidReferenceError(combatant_id)
        return combatant

    def check_combat_end(self) -> CombatEndResult:
        """
        Checks whether one side has been wiped out.

        When both sides are down at once (or nobody is left to act), the
        result is a draw with no winner. Any ended outcome deactivates
        combat; calling this again afterwards returns the same verdict
        without logging it twice. Before combat starts there is nothing to
        decide, so the result is never ended.

        Returns:
            CombatEndResult: Whether combat ended, the winning side and why.

        """
        if self._state.phase is CombatPhase.NOT_STARTED:
            return CombatEndResult(ended=False)
        players_up = any(
            not c.defeated and c.allegiance is Allegiance.PLAYER
            for c in self._state.combatants
        )
        adversaries_up = any(
            not c.defeated and c.allegiance is Allegiance.ADVERSARY
            for c in self._state.combatants
        )
        if players_up and adversaries_up:
            return CombatEndResult(ended=False)

        if not players_up and not adversaries_up:
            result = CombatEndResult(
                ended=True,
                winners=None,
                reason="Mutual destruction",
            )
            message = "☠️  Mutual destruction! No side stands."
        elif not players_up:
            result = CombatEndResult(
                ended=True,
                winners=Allegiance.ADVERSARY,
                reason="All players defeated",
            )
            message = "💀 All players defeated! DEFEAT!"
        else:
            result = CombatEndResult(
                ended=True,
                winners=Allegiance.PLAYER,
                reason="All adversaries defeated",
            )
            message = "🎉 All adversaries defeated! VICTORY!"

        if self._state.active:
            self._state.active = False
            self._state.phase = CombatPhase.ENDED
            self.add_to_log(message)
            logger.info("Combat over in round %d: %s", self._state.round, result.reason)
        return result

    def get_state(self) -> CombatState:
        """Returns a deep snapshot of the combat state."""
        return self._state.model_copy(deep=True)

    def get_log(self) -> list[str]:
        """Returns a copy of the combat log."""
        return list(self._state.log)

    def get_summary(self) -> str:
        """Returns a plain-text status summary of the encounter."""
        active = self.get_active_combatants()
        defeated = [c for c in self._state.combatants if c.defeated]
        lines = [
            "📊 COMBAT STATUS",
            f"Round: {self._state.round}",
            f"Active Combatants: {len(active)}",
            f"Defeated: {len(defeated)}",
            "",
        ]
        lines.extend(
            f"{c.allegiance.emoji} {c.name}: {c.hp.current}/{c.hp.max} HP"
            for c in active
        )
        if defeated:
            lines.append("")
            lines.append("Defeated: " + ", ".join(c.name for c in defeated))
        return "\n".join(lines)

    # =========================================================================
    # Collaborator hooks
    # =========================================================================

    def add_to_log(self, entry: str) -> None:
        """Appends an entry to the combat log."""
        self._state.log.append(entry)

    def require_active(self, operation: str) -> None:
        if not self._state.active:
            log_error(
                f"Cannot {operation} while combat is {self._state.phase}",
                {"operation": operation, "phase": str(self._state.phase)},
            )
            raise IllegalTransitionError(operation, self._state.phase)
