"""Narration templates for battle events.

Placeholders: ``{actor}``, ``{target}``, ``{skill}``, ``{damage}``,
``{cost}``, ``{amount}``.
"""

from __future__ import annotations

from dataclasses import dataclass

from skirmish.domain.enums import EventKind, SkillCategory


@dataclass(frozen=True, slots=True)
class TemplatePool:
    """Phrasings for one outcome family; one is picked at random."""

    hit: tuple[str, ...]
    critical: tuple[str, ...]
    miss: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class CustomTemplates:
    """Fixed phrasing for a signature skill."""

    hit: str
    critical: str
    miss: str


GENERIC_POOLS: dict[SkillCategory, TemplatePool] = {
    SkillCategory.PHYSICAL: TemplatePool(
        hit=(
            "A blade cuts through the air and leaves a deep wound on {target}",
            "A heavy blow lands on {target}'s chest with a dull thud",
            "{actor}'s weapon finds a weak point in {target}'s guard",
            "{actor} swings hard and leaves a gash across {target}",
            "The force of the blow drives {target} back a few steps",
            "{actor} presses the attack on {target} like a storm",
        ),
        critical=(
            "Critical strike! {actor}'s weapon bites deep into {target}",
            "Devastating blow! {target} cries out under {actor}'s assault",
            "Perfect timing! {actor} exploits an opening and strikes {target} hard",
            "Crushing hit! {actor} tears through {target}'s defenses",
        ),
        miss=(
            "{target} nimbly sidesteps {actor}'s attack",
            "{actor}'s weapon cuts only air as {target} slips away",
            "{actor}'s attack glances off {target}'s armor",
            "{target} blocks {actor}'s strike with a raised shield",
        ),
    ),
    SkillCategory.MAGICAL: TemplatePool(
        hit=(
            "Magical energy bursts across {target}",
            "{actor}'s spell strikes {target} and ripples outward",
            "Elemental force erupts around {target}",
            "{actor}'s incantation takes hold and engulfs {target}",
            "A flash of arcane light hits {target} squarely",
        ),
        critical=(
            "Spell critical! Raw elemental power detonates on {target}",
            "Arcane resonance! {actor}'s magic overwhelms {target}",
            "Elemental surge! {actor}'s spell sets off a chain reaction on {target}",
            "Overcharged! {actor}'s magic erupts across {target}",
        ),
        miss=(
            "{target}'s resistance shrugs off {actor}'s spell",
            "{actor}'s magic dissipates before reaching {target}",
            "{actor}'s incantation is deflected by {target}'s ward",
            "The spell goes wide and {target} is untouched",
        ),
    ),
}

CUSTOM_TEMPLATES: dict[str, CustomTemplates] = {
    "fireball": CustomTemplates(
        hit="{actor} hurls a blazing fireball that engulfs {target} in flame",
        critical="Fireball critical! The blast erupts on {target} in a pillar of fire",
        miss="{actor}'s fireball bursts beside {target}, leaving only a scorch mark",
    ),
    "lightning_bolt": CustomTemplates(
        hit="Lightning leaps from {actor}'s hand and arcs across {target}",
        critical="Lightning critical! Current surges through {target}, leaving them shaking",
        miss="{actor}'s bolt grounds out against {target}'s armor",
    ),
    "ice_shard": CustomTemplates(
        hit="Shards of ice fly from {actor} and shatter against {target}",
        critical="Frost critical! A great spike of ice pierces {target} and freezes the air",
        miss="{actor}'s ice shard melts before it can touch {target}",
    ),
}

# Skills that reuse another skill's signature phrasing.
TEMPLATE_ALIASES: dict[str, str] = {
    "fire_blast": "fireball",
    "flame_strike": "fireball",
    "thunder_strike": "lightning_bolt",
    "electric_shock": "lightning_bolt",
    "frost_bolt": "ice_shard",
}

FIXED_TEMPLATES: dict[EventKind, str] = {
    EventKind.SKILL_USED: "{actor} uses {skill}.",
    EventKind.MP_CONSUMED: "{actor} spends {cost} MP.",
    EventKind.INSUFFICIENT_MP: "{actor} lacks the MP to use {skill}.",
    EventKind.CRITICAL: "Critical hit on {target} for {damage}!",
    EventKind.EROSION_CHANGED: "{target}'s erosion falls by {amount}.",
    EventKind.STATE_UPDATED: "",
}
