"""
Module for printing the combat state and templates in a formatted way.
"""

from rich.table import Table

from skirmish.combat.adversary_policy import ADVERSARY_PROFILES
from skirmish.combat.factory import ADVERSARY_TEMPLATES, PLAYER_TEMPLATES
from skirmish.combat.scheduler import TurnScheduler
from skirmish.core.models import Combatant
from skirmish.core.utils import cprint, make_bar


def hp_bar(combatant: Combatant, length: int = 10) -> str:
    """
    Builds a coloured hit point bar followed by the numbers.

    Args:
        combatant (Combatant): The combatant to draw.
        length (int): Length of the bar. Defaults to 10.

    Returns:
        str: The bar with rich markup.

    """
    bar = make_bar(
        combatant.hp.current,
        combatant.hp.max,
        length=length,
        color=combatant.status.color,
    )
    return f"{bar} {combatant.hp.current:>3}/{combatant.hp.max:<3}"


def status_table(scheduler: TurnScheduler) -> Table:
    """
    Builds a table with every combatant in initiative order.

    The combatant whose turn it is gets marked with an arrow.

    """
    current = scheduler.get_current_combatant()
    table = Table(title=f"Round {scheduler.round}", pad_edge=False)
    table.add_column("", no_wrap=True)
    table.add_column("Init", justify="right", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("HP")
    table.add_column("AC", justify="right")
    table.add_column("Status")
    for combatant in scheduler.get_combatants():
        table.add_row(
            "➤" if current is not None and combatant.id == current.id else "",
            str(combatant.initiative),
            f"{combatant.allegiance.emoji} {combatant.colored_name}",
            hp_bar(combatant),
            str(combatant.armor_class),
            combatant.status.colored_name,
        )
    return table


def print_status(scheduler: TurnScheduler) -> None:
    """Prints the status table of an encounter."""
    cprint(status_table(scheduler))


def print_templates() -> None:
    """Prints the available player and adversary templates."""
    players = Table(title="Classes", pad_edge=False)
    players.add_column("Class", style="bold")
    players.add_column("Hero")
    players.add_column("HP", justify="right")
    players.add_column("AC", justify="right")
    players.add_column("Attack", justify="right")
    players.add_column("Damage")
    for template in PLAYER_TEMPLATES.values():
        players.add_row(
            template.class_name,
            template.default_name,
            str(template.hp),
            str(template.armor_class),
            f"{template.attack_bonus:+d}",
            str(template.damage),
        )
    cprint(players)

    adversaries = Table(title="Adversaries", pad_edge=False)
    adversaries.add_column("Name", style="bold red")
    adversaries.add_column("HP", justify="right")
    adversaries.add_column("AC", justify="right")
    adversaries.add_column("Attack", justify="right")
    adversaries.add_column("Damage")
    adversaries.add_column("Type", style="magenta")
    for template in ADVERSARY_TEMPLATES.values():
        profile = ADVERSARY_PROFILES[template.adversary_type]
        adversaries.add_row(
            template.name,
            str(template.hp),
            str(template.armor_class),
            f"{profile.attack_bonus:+d}",
            str(profile.damage),
            template.adversary_type.display_name,
        )
    cprint(adversaries)
