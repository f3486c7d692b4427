"""
Combatant factory module for the combat resolver.

Ready-made adversary and player templates, and the functions that turn them
into combatants with freshly rolled initiative.
"""

from catchery import log_warning
from pydantic import BaseModel, ConfigDict, Field

from skirmish.core.constants import AdversaryType, Allegiance
from skirmish.core.models import Combatant, DamageSpec, HitPoints
from skirmish.core.rules import RulesResolver

# =============================================================================
# Adversaries
# =============================================================================


class AdversaryTemplate(BaseModel):
    """Base statistics of an adversary kind."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Display name, numbered when created")
    hp: int = Field(gt=0, description="Maximum hit points")
    armor_class: int = Field(description="Armor class")
    initiative_modifier: int = Field(description="Modifier added to initiative")
    adversary_type: AdversaryType = Field(description="Capability tag")
    description: str = Field(default="", description="Flavour text")


ADVERSARY_TEMPLATES: dict[str, AdversaryTemplate] = {
    "goblin": AdversaryTemplate(
        name="Goblin",
        hp=6,
        armor_class=15,
        initiative_modifier=1,
        adversary_type=AdversaryType.WEAK_FAST,
        description="Small, sneaky humanoid",
    ),
    "orc": AdversaryTemplate(
        name="Orc",
        hp=15,
        armor_class=13,
        initiative_modifier=0,
        adversary_type=AdversaryType.STRONG_WARRIOR,
        description="Brutal warrior",
    ),
    "skeleton": AdversaryTemplate(
        name="Skeleton",
        hp=12,
        armor_class=13,
        initiative_modifier=1,
        adversary_type=AdversaryType.UNDEAD_LIGHT,
        description="Undead warrior",
    ),
    "zombie": AdversaryTemplate(
        name="Zombie",
        hp=16,
        armor_class=11,
        initiative_modifier=-1,
        adversary_type=AdversaryType.UNDEAD_TOUGH,
        description="Slow but tough undead",
    ),
    "ogre": AdversaryTemplate(
        name="Ogre",
        hp=30,
        armor_class=16,
        initiative_modifier=-1,
        adversary_type=AdversaryType.BRUTE,
        description="Large, powerful brute",
    ),
    "young dragon": AdversaryTemplate(
        name="Young Dragon",
        hp=75,
        armor_class=20,
        initiative_modifier=2,
        adversary_type=AdversaryType.DRAGON,
        description="Winged terror, still growing into its scales",
    ),
}

DEFAULT_ADVERSARY = "goblin"


def create_adversary(key: str, index: int, resolver: RulesResolver) -> Combatant:
    """
    Creates a numbered adversary from a template.

    Args:
        key (str): Template key, case-insensitive (e.g. "orc").
        index (int): Number used in the id and the name ("enemy2", "Orc 2").
        resolver (RulesResolver): Rolls the initiative.

    Returns:
        Combatant: The adversary, with full hit points.

    """
    template = ADVERSARY_TEMPLATES.get(key.strip().lower())
    if template is None:
        log_warning(
            f"Unknown adversary '{key}', falling back to {DEFAULT_ADVERSARY}",
            {"key": key, "known": list(ADVERSARY_TEMPLATES)},
        )
        template = ADVERSARY_TEMPLATES[DEFAULT_ADVERSARY]
    return Combatant(
        id=f"enemy{index}",
        name=f"{template.name} {index}",
        initiative=resolver.resolve_initiative(template.initiative_modifier),
        hp=HitPoints(current=template.hp, max=template.hp),
        armor_class=template.armor_class,
        allegiance=Allegiance.ADVERSARY,
        adversary_type=template.adversary_type,
    )


# =============================================================================
# Players
# =============================================================================


class PlayerTemplate(BaseModel):
    """A pre-built character class with its default hero."""

    model_config = ConfigDict(frozen=True)

    class_name: str = Field(description="Name of the character class")
    default_name: str = Field(description="Name used when none is given")
    hp: int = Field(gt=0, description="Maximum hit points")
    armor_class: int = Field(description="Armor class")
    dexterity: int = Field(description="Dexterity score, drives initiative")
    attack_bonus: int = Field(description="Bonus of the main attack")
    damage: DamageSpec = Field(description="Damage of the main attack")
    description: str = Field(default="")

    @property
    def initiative_modifier(self) -> int:
        return RulesResolver.ability_modifier(self.dexterity)


PLAYER_TEMPLATES: dict[str, PlayerTemplate] = {
    "fighter": PlayerTemplate(
        class_name="Fighter",
        default_name="Thorin Ironshield",
        hp=28,
        armor_class=18,
        dexterity=14,
        attack_bonus=6,
        damage=DamageSpec.parse("1d8+3"),
        description="Master of martial combat",
    ),
    "wizard": PlayerTemplate(
        class_name="Wizard",
        default_name="Elara Moonwhisper",
        hp=13,
        armor_class=12,
        dexterity=14,
        attack_bonus=0,
        damage=DamageSpec.parse("1d4"),
        description="Scholar of the arcane, frail in melee",
    ),
    "rogue": PlayerTemplate(
        class_name="Rogue",
        default_name="Shade Nightblade",
        hp=16,
        armor_class=17,
        dexterity=18,
        attack_bonus=6,
        damage=DamageSpec.parse("1d6+4"),
        description="Quick and precise striker",
    ),
    "cleric": PlayerTemplate(
        class_name="Cleric",
        default_name="Brother Aldric",
        hp=22,
        armor_class=17,
        dexterity=10,
        attack_bonus=4,
        damage=DamageSpec.parse("1d8+2"),
        description="Armored servant of the divine",
    ),
}


class PlayerCharacter:
    """The character sheet side of a player combatant.

    Combatants only keep a weak reference to it, so the caller owns it.
    """

    def __init__(self, template: PlayerTemplate, name: str):
        self.template = template
        self.name = name

    @property
    def attack_bonus(self) -> int:
        return self.template.attack_bonus

    @property
    def damage(self) -> DamageSpec:
        return self.template.damage

    def __repr__(self) -> str:
        return f"PlayerCharacter({self.name!r}, {self.template.class_name})"


def create_player(
    template: PlayerTemplate,
    player_id: str,
    resolver: RulesResolver,
    name: str | None = None,
) -> tuple[Combatant, PlayerCharacter]:
    """
    Creates a player combatant from a class template.

    Args:
        template (PlayerTemplate): The class template.
        player_id (str): Unique id of the combatant.
        resolver (RulesResolver): Rolls the initiative.
        name (str | None): Custom name; defaults to the template's hero.

    Returns:
        tuple[Combatant, PlayerCharacter]:
            The combatant and the character it references. Keep the
            character alive for as long as the combatant needs it.

    """
    character = PlayerCharacter(template, name or template.default_name)
    combatant = Combatant(
        id=player_id,
        name=character.name,
        initiative=resolver.resolve_initiative(template.initiative_modifier),
        hp=HitPoints(current=template.hp, max=template.hp),
        armor_class=template.armor_class,
        allegiance=Allegiance.PLAYER,
    )
    combatant.attach_character(character)
    return combatant, character
