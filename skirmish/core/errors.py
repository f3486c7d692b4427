"""
Exceptions raised by the combat engine.

Every error carries the context needed to report it; callers decide whether
to surface it to a user. None of them is retried automatically, since the
engine is deterministic given its inputs.
"""

from typing import Any


class CombatError(Exception):
    """Base class for all combat engine errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context: dict[str, Any] = context or {}


class InvalidReferenceError(CombatError):
    """An operation named a combatant id that is not part of the encounter."""

    def __init__(self, combatant_id: str):
        super().__init__(
            f"Unknown combatant id: '{combatant_id}'",
            {"combatant_id": combatant_id},
        )
        self.combatant_id = combatant_id


class IllegalTransitionError(CombatError):
    """A mutating operation was called in a phase that does not allow it."""

    def __init__(self, operation: str, phase: Any):
        super().__init__(
            f"Cannot {operation} while combat is {phase}",
            {"operation": operation, "phase": str(phase)},
        )
        self.operation = operation
        self.phase = phase


class TargetDefeatedError(CombatError):
    """An attack or effect was aimed at a combatant that is already down."""

    def __init__(self, combatant_id: str, name: str):
        super().__init__(
            f"{name} is already defeated",
            {"combatant_id": combatant_id, "name": name},
        )
        self.combatant_id = combatant_id
