"""
Main entry point for the Skirmish combat resolver.

Sets up a party and a group of adversaries interactively, then plays the
encounter turn by turn: players choose their targets at the prompt, while
adversaries follow their policy.
"""

import argparse
import logging
from pathlib import Path

from skirmish.combat.adversary_policy import AdversaryPolicy
from skirmish.combat.encounter import Encounter
from skirmish.combat.factory import PlayerCharacter, create_adversary, create_player
from skirmish.combat.orchestrator import AttackOrchestrator
from skirmish.combat.scheduler import TurnScheduler
from skirmish.core.config import CombatSettings, load_settings
from skirmish.core.constants import Allegiance
from skirmish.core.dice import DiceRoller
from skirmish.core.logging import setup_logging
from skirmish.core.rules import RulesResolver
from skirmish.core.utils import cprint, crule
from skirmish.ui.cli_interface import PlayerInterface
from skirmish.ui.sheets import print_status, print_templates


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skirmish",
        description="Turn-based tabletop combat resolver",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the dice, to replay an encounter",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file with combat settings",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def run_encounter(settings: CombatSettings, interface: PlayerInterface) -> None:
    """
    Sets up and plays one encounter.

    Args:
        settings (CombatSettings): The settings of the encounter.
        interface (PlayerInterface): Where the user's choices come from.

    """
    roller = DiceRoller(seed=settings.seed)
    resolver = RulesResolver(roller)

    crule("Setup", style="bold green")
    print_templates()
    party = interface.choose_party()
    adversary_key, count = interface.choose_adversaries()

    # Combatants only hold weak references to their characters.
    characters: list[PlayerCharacter] = []
    combatants = []
    for i, template in enumerate(party, 1):
        combatant, character = create_player(template, f"player{i}", resolver)
        characters.append(character)
        combatants.append(combatant)
    combatants.extend(
        create_adversary(adversary_key, i, resolver) for i in range(1, count + 1)
    )

    scheduler = TurnScheduler()
    scheduler.start_combat(combatants)
    encounter = Encounter(
        scheduler,
        AttackOrchestrator(scheduler, resolver, settings),
        AdversaryPolicy(roller, settings),
        player_controller=interface.choose_target,
        on_event=cprint,
    )

    crule(":crossed_swords:  Combat Started", style="bold green")
    print_status(scheduler)
    report = encounter.run(settings.max_rounds)
    print_status(scheduler)

    if report.winners is None:
        crule(f":crossed_swords:  {report.reason}", style="bold yellow")
    else:
        style = "bold green" if report.winners is Allegiance.PLAYER else "bold red"
        crule(
            f":crossed_swords:  {report.winners.display_name} side wins "
            f"after {report.rounds} rounds",
            style=style,
        )
    cprint(scheduler.get_summary())


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(
        args.config,
        seed=args.seed,
        log_level="DEBUG" if args.debug else None,
    )
    setup_logging(getattr(logging, settings.log_level.upper(), logging.INFO))

    crule("Skirmish", style="bold green")
    try:
        run_encounter(settings, PlayerInterface())
    except (KeyboardInterrupt, EOFError):
        cprint("")
        crule(":crossed_swords:  Combat Interrupted", style="bold red")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
