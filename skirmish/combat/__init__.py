"""
Combat system module for the Skirmish combat resolver.

This module handles turn order, adversary decisions, attack resolution and the
encounter loop built on top of them.
"""

from .adversary_policy import AdversaryPolicy, AdversaryProfile, get_profile
from .encounter import Encounter, EncounterReport, PlayerChoice, weakest_target
from .factory import create_adversary, create_player
from .narration import FallbackNarrator, Narrator, safe_narrate
from .orchestrator import AttackOrchestrator
from .scheduler import TurnScheduler

__all__ = [
    # Import from adversary_policy.py
    "AdversaryPolicy",
    "AdversaryProfile",
    "get_profile",
    # Import from encounter.py
    "Encounter",
    "EncounterReport",
    "PlayerChoice",
    "weakest_target",
    # Import from factory.py
    "create_adversary",
    "create_player",
    # Import from narration.py
    "FallbackNarrator",
    "Narrator",
    "safe_narrate",
    # Import from orchestrator.py
    "AttackOrchestrator",
    # Import from scheduler.py
    "TurnScheduler",
]
