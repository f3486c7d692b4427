"""
Attack orchestrator module for the combat resolver.

Combines the rules resolver and the turn scheduler into single operations
that resolve an attack (or flat damage/healing), update the target's hit
points and record the exchange in the combat log. This is the only place
where combat hit points change.
"""

from catchery import log_error

from skirmish.combat.scheduler import TurnScheduler
from skirmish.core.config import DEFAULT_SETTINGS, CombatSettings
from skirmish.core.errors import TargetDefeatedError
from skirmish.core.logging import get_logger
from skirmish.core.models import (
    AttackOutcome,
    Combatant,
    DamageSpec,
    HitPointChange,
)
from skirmish.core.rules import RulesResolver

logger = get_logger(__name__)


class AttackOrchestrator:
    """Resolves attacks and hit point changes against a running encounter.

    Hit points follow a single model: the resolver's `apply_damage` classifies
    the blow, the status is stored on the combatant, and the tracked hit
    points never drop below 0. A combatant is defeated exactly when its
    status is disabled, dying or dead.
    """

    def __init__(
        self,
        scheduler: TurnScheduler,
        resolver: RulesResolver,
        settings: CombatSettings = DEFAULT_SETTINGS,
    ):
        """
        Initialize the AttackOrchestrator.

        Args:
            scheduler (TurnScheduler): The scheduler owning the combat state.
            resolver (RulesResolver): The rules resolver used for every roll.
            settings (CombatSettings): Encounter settings.

        """
        self.scheduler = scheduler
        self.resolver = resolver
        self.settings = settings

    def process_attack(
        self,
        actor_id: str,
        target_id: str,
        attack_bonus: int,
        damage: DamageSpec,
    ) -> AttackOutcome:
        """
        Resolves one attack and applies its damage.

        Args:
            actor_id (str): Id of the attacking combatant.
            target_id (str): Id of the target.
            attack_bonus (int): The attacker's total attack bonus.
            damage (DamageSpec): The damage dice of the attack.

        Returns:
            AttackOutcome: Whether it hit, the damage dealt and the log entries.

        Raises:
            IllegalTransitionError: If combat is not active.
            InvalidReferenceError: If either id is unknown.
            TargetDefeatedError: If the target is already defeated.

        """
        self.scheduler.require_active("process an attack")
        actor = self.scheduler.require_combatant(actor_id)
        target = self._require_standing(target_id)

        resolution = self.resolver.resolve_attack(attack_bonus, target.armor_class)
        entries: list[str] = []

        if not resolution.success:
            entries.append(
                f"{actor.name} attacks {target.name}: MISS! "
                f"({resolution.roll.describe()} vs AC {target.armor_class})"
            )
            self._record(entries)
            return AttackOutcome(
                actor_id=actor.id,
                target_id=target.id,
                success=False,
                resolution=resolution,
                log_entries=entries,
            )

        critical = False
        threat = self.resolver.threatens_critical(resolution.roll.d20)
        if threat and self.settings.confirm_critical_hits:
            critical = self.resolver.confirm_critical(attack_bonus, target.armor_class)
            if critical:
                entries.append(f"🎯 Critical hit confirmed against {target.name}!")

        dealt = self.resolver.resolve_damage(
            damage.count,
            damage.sides,
            damage.bonus,
            is_critical=critical,
        )
        self._apply_damage(target, dealt)

        entries.append(
            f"{actor.name} attacks {target.name}: HIT for {dealt} damage! "
            f"({target.hp.current}/{target.hp.max} HP remaining)"
        )
        if target.defeated:
            entries.append(self._defeat_entry(target))
        self._record(entries)

        return AttackOutcome(
            actor_id=actor.id,
            target_id=target.id,
            success=True,
            damage=dealt,
            critical=critical,
            target_defeated=target.defeated,
            resolution=resolution,
            log_entries=entries,
        )

    def process_damage(self, target_id: str, amount: int, source: str) -> HitPointChange:
        """
        Applies a flat amount of damage, e.g. from a spell or a trap.

        Args:
            target_id (str): Id of the target.
            amount (int): Damage to apply; must not be negative.
            source (str): What caused the damage, for the log.

        Returns:
            HitPointChange: The new hit points and status of the target.

        """
        self.scheduler.require_active("apply damage")
        self._require_non_negative(amount, "damage")
        target = self._require_standing(target_id)

        self._apply_damage(target, amount)
        entries = [
            f"{target.name} takes {amount} damage from {source} "
            f"({target.hp.current}/{target.hp.max} HP)"
        ]
        if target.defeated:
            entries.append(self._defeat_entry(target))
        self._record(entries)

        return HitPointChange(
            target_id=target.id,
            amount=amount,
            new_hp=target.hp.current,
            status=target.status,
            target_defeated=target.defeated,
            log_entries=entries,
        )

    def process_healing(self, target_id: str, amount: int, source: str) -> HitPointChange:
        """
        Applies a flat amount of healing. Defeated combatants cannot be healed.

        Args:
            target_id (str): Id of the target.
            amount (int): Healing to apply; must not be negative.
            source (str): What caused the healing, for the log.

        Returns:
            HitPointChange: The new hit points, status and wasted overheal.

        """
        self.scheduler.require_active("apply healing")
        self._require_non_negative(amount, "healing")
        target = self._require_standing(target_id)

        before = target.hp.current
        healed = self.resolver.apply_healing(before, target.hp.max, amount)
        target.hp.current = healed.new_hp
        target.status = self.resolver.classify_hp(target.hp.current, target.hp.max)

        entries = [
            f"{target.name} healed {healed.new_hp - before} HP from {source} "
            f"({target.hp.current}/{target.hp.max} HP)"
        ]
        self._record(entries)

        return HitPointChange(
            target_id=target.id,
            amount=amount,
            new_hp=target.hp.current,
            status=target.status,
            overheal=healed.overheal,
            log_entries=entries,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    def _require_standing(self, target_id: str) -> Combatant:
        target = self.scheduler.require_combatant(target_id)
        if target.defeated:
            log_error(
                f"{target.name} is already defeated",
                {"target_id": target.id, "status": str(target.status)},
            )
            raise TargetDefeatedError(target.id, target.name)
        return target

    def _apply_damage(self, target: Combatant, amount: int) -> None:
        outcome = self.resolver.apply_damage(target.hp.current, target.hp.max, amount)
        target.hp.current = max(0, outcome.new_hp)
        target.status = outcome.status
        target.defeated = outcome.status.is_down
        logger.debug(
            "%s takes %d damage: %d/%d HP, %s",
            target.name,
            amount,
            target.hp.current,
            target.hp.max,
            outcome.status,
        )

    @staticmethod
    def _defeat_entry(target: Combatant) -> str:
        return f"💀 {target.name} has been defeated! ({target.status.display_name})"

    def _record(self, entries: list[str]) -> None:
        for entry in entries:
            self.scheduler.add_to_log(entry)

    @staticmethod
    def _require_non_negative(amount: int, what: str) -> None:
        if amount < 0:
            log_error(
                f"{what} amount must not be negative, got {amount}",
                {"amount": amount},
            )
            raise ValueError(f"Invalid {what} amount: {amount}")
