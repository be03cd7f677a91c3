"""Record types for pokedex data and the CSV line tokenizer."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

NULL_FIELD = "null"

_SEPARATORS = re.compile(r"[,\n]")


def tokenize(line: str | None) -> list[str]:
    """Split one CSV record into fields; empty fields become ``"null"``."""
    if line is None:
        raise ValueError("buffer is empty")
    if line.endswith("\n"):
        line = line[:-1]
    return [word if word else NULL_FIELD for word in _SEPARATORS.split(line)]


@dataclass(frozen=True)
class Pokemon:
    pokemon_id: int
    identifier: str
    species_id: int
    height: int
    weight: int
    base_experience: int
    order: int
    is_default: bool


@dataclass(frozen=True)
class Experience:
    growth_rate_id: int
    level: int
    experience: int


@dataclass(frozen=True)
class Stat:
    stat_id: int
    damage_class_id: int | None
    identifier: str
    is_battle_only: bool
    game_index: int | None


@dataclass(frozen=True)
class TypeName:
    type_id: int
    name: str


@dataclass(frozen=True)
class Move:
    move_id: int
    identifier: str
    generation_id: int
    type_id: int
    power: int | None
    pp: int | None
    accuracy: int | None
    priority: int
    target_id: int
    damage_class_id: int
    effect_id: int
    effect_chance: int | None
    contest_type_id: int | None
    contest_effect_id: int | None
    super_contest_effect_id: int | None


@dataclass(frozen=True)
class PokemonType:
    pokemon_id: int
    type_id: int
    slot: int


@dataclass(frozen=True)
class PokemonMove:
    pokemon_id: int
    version_group_id: int
    move_id: int
    pokemon_move_method_id: int
    level: int
    order: int | None


@dataclass(frozen=True)
class PokemonStat:
    pokemon_id: int
    stat_id: int
    base_stat: int
    effort: int


@dataclass(frozen=True)
class PokemonSpecies:
    pokemon_id: int
    identifier: str
    generation: int
    evolves_from_species_id: int | None
    evolution_chain_id: int
    color_id: int
    shape_id: int | None
    habitat_id: int | None
    gender_rate: int
    capture_rate: int
    base_happiness: int
    is_baby: bool
    hatch_counter: int
    has_gender_differences: bool
    growth_rate_id: int
    forms_switchable: int
    is_legendary: bool
    is_mythical: bool
    conquest_order: int | None


@dataclass
class PartyMember:
    """A pokemon owned by a trainer, with its rolled stats and moves."""

    pid: int
    level: int
    species: PokemonSpecies
    gender: str
    base_experience: int
    experience: int = 0
    types: list[PokemonType] = field(default_factory=list)
    moves: list[Move] = field(default_factory=list)
    max_hp: int = 0
    stats: list[int] = field(default_factory=list)
    ivs: list[int] = field(default_factory=list)
    battle_stats: list[int] = field(default_factory=list)
    full_stats: list[int] = field(default_factory=list)
    is_shiny: bool = False
    defeated: bool = False
    participate: bool = False
    status: int = 0
    status_turns: int = 0


@dataclass
class Item:
    """A stack of items in a bag."""

    identifier: str
    count: int