"""
Skirmish: a turn-based tabletop combat resolver.

This package contains the d20 rules resolver, the combat state machine, the
adversary policy and the attack orchestrator, plus a small interactive CLI.
"""

__version__ = "0.1.0"
