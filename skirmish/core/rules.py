"""
Rules module for the combat resolver.

Implements the d20 mechanics: attack, saving throw and skill check
resolution, damage and initiative rolls, ability and bonus arithmetic, and
the hit point classification used by the rest of the engine. Every method is
a pure function of its inputs plus the injected dice roller.
"""

from skirmish.core.constants import (
    CLASS_SKILL_BONUS,
    DEATH_THRESHOLD,
    NATURAL_CRITICAL,
    CheckKind,
    HealthStatus,
)
from skirmish.core.dice import DiceRoller
from skirmish.core.logging import get_logger
from skirmish.core.models import (
    ArmorClass,
    DamageOutcome,
    HealingOutcome,
    ResolutionResult,
    RollResult,
    StatusChange,
)

logger = get_logger(__name__)

_DEAD = StatusChange(name="Dead", description="Character is dead")
_DYING = StatusChange(
    name="Dying",
    description="Character is dying and must stabilize",
)
_DISABLED = StatusChange(
    name="Disabled",
    description="Character can take only a single move or standard action",
)
_STATUS_CHANGES: dict[HealthStatus, StatusChange] = {
    HealthStatus.DEAD: _DEAD,
    HealthStatus.DYING: _DYING,
    HealthStatus.DISABLED: _DISABLED,
}

_VERDICTS: dict[CheckKind, tuple[str, str, str]] = {
    # kind: (success, failure, label of the target value)
    CheckKind.ATTACK: ("Attack hits!", "Attack misses.", "AC"),
    CheckKind.SAVING_THROW: ("Save successful!", "Save failed.", "DC"),
    CheckKind.SKILL_CHECK: ("Check successful!", "Check failed.", "DC"),
}


class RulesResolver:
    """Resolves checks and rolls according to the d20 rules."""

    def __init__(self, roller: DiceRoller | None = None):
        """
        Initialize the RulesResolver.

        Args:
            roller (DiceRoller | None):
                The dice roller to use. Defaults to an unseeded roller.

        """
        self.roller: DiceRoller = roller or DiceRoller()

    # =========================================================================
    # Rolls
    # =========================================================================

    def roll_d20(self, modifiers: list[int] | None = None) -> RollResult:
        """
        Rolls a d20 and adds the modifiers.

        Args:
            modifiers (list[int] | None): Modifiers to add to the roll.

        Returns:
            RollResult: The roll, with critical flags set.

        """
        return RollResult.from_draw(self.roller.roll_die(20), modifiers or [])

    def roll_dice(self, count: int, sides: int, modifier: int = 0) -> int:
        """
        Rolls `count` dice with `sides` sides and adds `modifier`.

        Args:
            count (int): Number of dice.
            sides (int): Number of sides on each die.
            modifier (int): Flat modifier added once.

        Returns:
            int: The sum of the dice plus the modifier.

        """
        return sum(self.roller.roll_many(count, sides)) + modifier

    @staticmethod
    def ability_modifier(score: int) -> int:
        """
        Calculates the ability modifier for an ability score.

        Args:
            score (int): The ability score.

        Returns:
            int: floor((score - 10) / 2).

        """
        return (score - 10) // 2

    # =========================================================================
    # Checks
    # =========================================================================

    def _resolve_check(
        self,
        kind: CheckKind,
        bonus: int,
        target_value: int,
        extra_modifiers: list[int] | None,
    ) -> ResolutionResult:
        roll = self.roll_d20([bonus, *(extra_modifiers or [])])
        success = roll.total >= target_value
        on_success, on_failure, label = _VERDICTS[kind]
        notes = [
            f"Rolled {roll.d20} + {roll.total - roll.d20} = {roll.total} "
            f"vs {label} {target_value}"
        ]
        logger.debug("%s: %s vs %s %d", kind, roll.describe(), label, target_value)
        return ResolutionResult(
            kind=kind,
            success=success,
            roll=roll,
            target_value=target_value,
            summary=on_success if success else on_failure,
            notes=notes,
        )

    def resolve_attack(
        self,
        attack_bonus: int,
        target_ac: int,
        extra_modifiers: list[int] | None = None,
    ) -> ResolutionResult:
        """
        Resolves an attack roll against an armor class. Ties hit.

        Args:
            attack_bonus (int): The attacker's total attack bonus.
            target_ac (int): The target's armor class.
            extra_modifiers (list[int] | None): Situational modifiers.

        Returns:
            ResolutionResult: The resolution of the attack.

        """
        return self._resolve_check(
            CheckKind.ATTACK, attack_bonus, target_ac, extra_modifiers
        )

    def resolve_saving_throw(
        self,
        save_bonus: int,
        dc: int,
        extra_modifiers: list[int] | None = None,
    ) -> ResolutionResult:
        """Resolves a saving throw against a difficulty class."""
        return self._resolve_check(
            CheckKind.SAVING_THROW, save_bonus, dc, extra_modifiers
        )

    def resolve_skill_check(
        self,
        skill_bonus: int,
        dc: int,
        extra_modifiers: list[int] | None = None,
    ) -> ResolutionResult:
        """Resolves a skill check against a difficulty class."""
        return self._resolve_check(
            CheckKind.SKILL_CHECK, skill_bonus, dc, extra_modifiers
        )

    def resolve_damage(
        self,
        dice_count: int,
        dice_sides: int,
        bonus: int = 0,
        is_critical: bool = False,
    ) -> int:
        """
        Rolls damage. A critical hit rolls the dice a second time, without
        adding the flat bonus again.

        Args:
            dice_count (int): Number of damage dice.
            dice_sides (int): Number of sides on each damage die.
            bonus (int): Flat damage bonus.
            is_critical (bool): Whether the hit is a confirmed critical.

        Returns:
            int: The damage dealt, never below 0.

        """
        damage = self.roll_dice(dice_count, dice_sides, bonus)
        if is_critical:
            damage += self.roll_dice(dice_count, dice_sides)
        return max(0, damage)

    def resolve_initiative(self, initiative_modifier: int) -> int:
        """Rolls initiative: a d20 plus the initiative modifier."""
        return self.roll_d20([initiative_modifier]).total

    @staticmethod
    def threatens_critical(d20: int, critical_range: int = NATURAL_CRITICAL) -> bool:
        """Checks whether a natural roll falls in the critical threat range."""
        return d20 >= critical_range

    def confirm_critical(
        self,
        attack_bonus: int,
        target_ac: int,
        extra_modifiers: list[int] | None = None,
    ) -> bool:
        """
        Rolls a second attack to confirm a threatened critical hit.

        Returns:
            bool: True if the confirmation roll meets the armor class.

        """
        return self.resolve_attack(attack_bonus, target_ac, extra_modifiers).success

    # =========================================================================
    # Hit points
    # =========================================================================

    @staticmethod
    def apply_damage(current_hp: int, max_hp: int, damage: int) -> DamageOutcome:
        """
        Applies damage to a hit point total and classifies the result.

        Status priority: dead (<= -10), dying (< 0), disabled (== 0),
        wounded (< half of max), healthy.

        Args:
            current_hp (int): Hit points before the damage.
            max_hp (int): Maximum hit points.
            damage (int): Damage to subtract.

        Returns:
            DamageOutcome: The new hit points, status and condition changes.

        """
        new_hp = max(DEATH_THRESHOLD, current_hp - damage)
        status = HealthStatus.from_hp(new_hp, max_hp)
        status_changes = [_STATUS_CHANGES[status]] if status in _STATUS_CHANGES else []
        return DamageOutcome(new_hp=new_hp, status=status, status_changes=status_changes)

    @staticmethod
    def apply_healing(current_hp: int, max_hp: int, healing: int) -> HealingOutcome:
        """
        Applies healing, capped at the maximum.

        Returns:
            HealingOutcome: The new hit points and the wasted overheal.

        """
        return HealingOutcome(
            new_hp=min(max_hp, current_hp + healing),
            overheal=max(0, current_hp + healing - max_hp),
        )

    @staticmethod
    def classify_hp(current_hp: int, max_hp: int) -> HealthStatus:
        """Classifies a hit point total without applying any damage."""
        return RulesResolver.apply_damage(current_hp, max_hp, 0).status

    # =========================================================================
    # Character arithmetic
    # =========================================================================

    @staticmethod
    def calculate_attack_bonus(
        base_attack_bonus: int,
        ability_modifier: int,
        other_modifiers: list[int] | None = None,
    ) -> int:
        """Base attack bonus plus ability modifier plus any other modifiers."""
        return base_attack_bonus + ability_modifier + sum(other_modifiers or [])

    @staticmethod
    def calculate_armor_class(
        dex_modifier: int,
        base: int = 10,
        armor_bonus: int = 0,
        shield_bonus: int = 0,
        other_modifiers: list[int] | None = None,
    ) -> ArmorClass:
        """
        Computes total, flat-footed and touch armor class.

        Flat-footed drops the dexterity modifier; touch drops armor and shield.

        """
        other = sum(other_modifiers or [])
        return ArmorClass(
            total=base + dex_modifier + armor_bonus + shield_bonus + other,
            flat_footed=base + armor_bonus + shield_bonus + other,
            touch=base + dex_modifier + other,
        )

    @staticmethod
    def calculate_skill_modifier(
        ranks: int,
        ability_modifier: int,
        is_class_skill: bool,
        other_modifiers: list[int] | None = None,
    ) -> int:
        """Ranks plus ability modifier, plus 3 for a trained class skill."""
        class_bonus = CLASS_SKILL_BONUS if is_class_skill and ranks > 0 else 0
        return ranks + ability_modifier + class_bonus + sum(other_modifiers or [])

    @staticmethod
    def spell_save_dc(spell_level: int, caster_ability_modifier: int) -> int:
        """Saving throw DC of a spell: 10 + spell level + caster modifier."""
        return 10 + spell_level + caster_ability_modifier
