"""
Narration module for the combat resolver.

Narrators turn a resolved attack into a line of flavour text. Narration is
optional and must never interfere with the combat itself.
"""

from typing import Protocol

from catchery import log_warning

from skirmish.core.models import AttackOutcome, Combatant


class Narrator(Protocol):
    """Anything able to describe an attack in prose."""

    def narrate_attack(
        self,
        actor: Combatant,
        target: Combatant,
        outcome: AttackOutcome,
    ) -> str: ...


class FallbackNarrator:
    """Plain template narration, always available."""

    def narrate_attack(
        self,
        actor: Combatant,
        target: Combatant,
        outcome: AttackOutcome,
    ) -> str:
        if not outcome.success:
            return f"{actor.name}'s attack misses {target.name}."
        text = f"{actor.name}'s attack strikes {target.name}"
        if outcome.damage:
            text += f" for {outcome.damage} damage"
        if outcome.critical:
            text += ", a devastating critical blow"
        text += "!"
        if outcome.target_defeated:
            text += f" {target.name} falls."
        return text


_FALLBACK = FallbackNarrator()


def safe_narrate(
    narrator: Narrator | None,
    actor: Combatant,
    target: Combatant,
    outcome: AttackOutcome,
) -> str:
    """
    Asks a narrator for a description, falling back to template text.

    Args:
        narrator (Narrator | None): The narrator to ask, if any.
        actor (Combatant): The attacker.
        target (Combatant): The target.
        outcome (AttackOutcome): The resolved attack.

    Returns:
        str: The narration; never raises because of the narrator.

    """
    if narrator is None:
        return _FALLBACK.narrate_attack(actor, target, outcome)
    try:
        text = narrator.narrate_attack(actor, target, outcome)
    except Exception as e:
        log_warning(
            f"Narrator failed, using fallback text: {e}",
            {
                "narrator": type(narrator).__name__,
                "actor": actor.id,
                "target": target.id,
                "error": repr(e),
            },
        )
        return _FALLBACK.narrate_attack(actor, target, outcome)
    if not text or not text.strip():
        return _FALLBACK.narrate_attack(actor, target, outcome)
    return text
