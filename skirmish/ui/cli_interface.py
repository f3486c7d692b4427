"""
User interface module for the combat resolver.

Provides console-based prompts for setting up an encounter and for choosing
what each player does on their turn.
"""

from typing import Any

from prompt_toolkit import ANSI, PromptSession
from rich.table import Table

from skirmish.combat.encounter import PlayerChoice
from skirmish.combat.factory import (
    ADVERSARY_TEMPLATES,
    PLAYER_TEMPLATES,
    AdversaryTemplate,
    PlayerTemplate,
)
from skirmish.core.models import Combatant
from skirmish.core.utils import ccapture

MAX_ADVERSARIES = 6


class PlayerInterface:
    """
    Command-line interface for player interactions with the combat resolver.

    Provides Rich table-based menus for party selection, adversary selection
    and target selection. Uses prompt_toolkit for interactive input with
    numeric shortcuts.
    """

    def __init__(self, prompt_session: PromptSession | None = None) -> None:
        """Initialize the PlayerInterface; one session keeps the history."""
        self.session = prompt_session or PromptSession(erase_when_done=True)

    def choose_party(self) -> list[PlayerTemplate]:
        """
        Lets the user pick the classes of the party, one at a time.

        Returns:
            list[PlayerTemplate]: The chosen classes, at least one.

        """
        templates = list(PLAYER_TEMPLATES.values())
        party: list[PlayerTemplate] = []
        while True:
            table = Table(title="Party", pad_edge=False)
            table.add_column("#", style="cyan")
            table.add_column("Class", style="bold")
            table.add_column("Hero")
            table.add_column("HP", justify="right")
            table.add_column("AC", justify="right")
            for i, template in enumerate(templates, 1):
                table.add_row(
                    str(i),
                    template.class_name,
                    template.default_name,
                    str(template.hp),
                    str(template.armor_class),
                )
            table.add_row()
            table.add_row("q", "Done" if party else "Done (needs one hero)", "", "", "")
            chosen = ", ".join(t.class_name for t in party) or "nobody"
            prompt = "\n" + ccapture(table) + f"\nParty: {chosen}\nClass > "
            answer = self.session.prompt(ANSI(prompt))
            if not answer:
                continue
            if answer.lower() == "q":
                if party:
                    return party
                continue
            index = self.get_digit_choice(answer) - 1
            if 0 <= index < len(templates):
                party.append(templates[index])

    def choose_adversaries(self) -> tuple[str, int]:
        """
        Lets the user pick the adversary kind and how many of them to fight.

        Returns:
            tuple[str, int]: The template key and the count.

        """
        keys = list(ADVERSARY_TEMPLATES)
        table = Table(title="Adversaries", pad_edge=False)
        table.add_column("#", style="cyan")
        table.add_column("Name", style="bold red")
        table.add_column("HP", justify="right")
        table.add_column("AC", justify="right")
        table.add_column("Description", style="italic")
        for i, key in enumerate(keys, 1):
            template: AdversaryTemplate = ADVERSARY_TEMPLATES[key]
            table.add_row(
                str(i),
                template.name,
                str(template.hp),
                str(template.armor_class),
                template.description,
            )
        prompt = "\n" + ccapture(table) + "\nAdversary > "
        while True:
            index = self.get_digit_choice(self.session.prompt(ANSI(prompt))) - 1
            if 0 <= index < len(keys):
                key = keys[index]
                break
        count_prompt = f"How many (1-{MAX_ADVERSARIES})? > "
        while True:
            count = self.get_digit_choice(self.session.prompt(count_prompt))
            if 1 <= count <= MAX_ADVERSARIES:
                return key, count

    def choose_target(self, actor: Combatant, combatants: list[Combatant]) -> PlayerChoice:
        """
        Lets the user choose whom the acting player attacks, or pass.

        Args:
            actor (Combatant): The acting player.
            combatants (list[Combatant]): Every combatant of the encounter.

        Returns:
            PlayerChoice: An attack on the chosen target, or a pass.

        """
        targets = [
            c
            for c in combatants
            if c.allegiance is actor.allegiance.opponent and not c.defeated
        ]
        if not targets:
            return PlayerChoice.pass_turn()
        table = Table(title=f"{actor.name}: choose a target", pad_edge=False)
        table.add_column("#", style="cyan", no_wrap=True)
        table.add_column("Name", style="bold")
        table.add_column("HP", justify="right")
        table.add_column("AC", justify="right")
        for i, target in enumerate(targets, 1):
            table.add_row(
                str(i),
                target.name,
                f"{target.hp.current:>3}/{target.hp.max:<3}",
                str(target.armor_class),
            )
        table.add_row()
        table.add_row("p", "Pass", "", "")
        prompt = "\n" + ccapture(table) + "\nTarget > "
        while True:
            answer = self.session.prompt(ANSI(prompt))
            if not answer:
                continue
            if answer.lower() == "p":
                return PlayerChoice.pass_turn()
            index = self.get_digit_choice(answer) - 1
            if 0 <= index < len(targets):
                return PlayerChoice.attack(targets[index].id)

    @staticmethod
    def get_digit_choice(answer: Any) -> int:
        """
        Convert a single digit string input to its integer value.

        Args:
            answer (Any): User input to parse.

        Returns:
            int: The integer value of the digit (0-9), or -1 if invalid input.

        """
        if isinstance(answer, str) and len(answer) == 1 and answer.isdigit():
            return int(answer)
        return -1
