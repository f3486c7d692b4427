"""
Core system module for the combat resolver.

This module contains the fundamental components of the engine: constants,
data models, dice rolling, rules resolution, configuration, logging and
errors.
"""

from .config import DEFAULT_SETTINGS, CombatSettings, load_settings
from .constants import (
    AdversaryAction,
    AdversaryType,
    Allegiance,
    CheckKind,
    CombatPhase,
    HealthStatus,
)
from .dice import DiceRoller, RandomSource
from .errors import (
    CombatError,
    IllegalTransitionError,
    InvalidReferenceError,
    TargetDefeatedError,
)
from .models import (
    AdversaryDecision,
    ArmorClass,
    AttackOutcome,
    Combatant,
    CombatEndResult,
    CombatState,
    DamageOutcome,
    DamageSpec,
    HealingOutcome,
    HitPointChange,
    HitPoints,
    ResolutionResult,
    RollResult,
    StatusChange,
    TurnAdvance,
)
from .rules import RulesResolver

__all__ = [
    # Import from config.py
    "DEFAULT_SETTINGS",
    "CombatSettings",
    "load_settings",
    # Import from constants.py
    "AdversaryAction",
    "AdversaryType",
    "Allegiance",
    "CheckKind",
    "CombatPhase",
    "HealthStatus",
    # Import from dice.py
    "DiceRoller",
    "RandomSource",
    # Import from errors.py
    "CombatError",
    "IllegalTransitionError",
    "InvalidReferenceError",
    "TargetDefeatedError",
    # Import from models.py
    "AdversaryDecision",
    "ArmorClass",
    "AttackOutcome",
    "Combatant",
    "CombatEndResult",
    "CombatState",
    "DamageOutcome",
    "DamageSpec",
    "HealingOutcome",
    "HitPointChange",
    "HitPoints",
    "ResolutionResult",
    "RollResult",
    "StatusChange",
    "TurnAdvance",
    # Import from rules.py
    "RulesResolver",
]
