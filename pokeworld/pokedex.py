"""Loading of the pokedex CSV tables and generation of random pokemon."""

from __future__ import annotations

import os
import random
import re
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeVar

from .records import (
    NULL_FIELD,
    Experience,
    Move,
    PartyMember,
    Pokemon,
    PokemonMove,
    PokemonSpecies,
    PokemonStat,
    PokemonType,
    Stat,
    TypeName,
    tokenize,
)

MAX_SPECIES_ID = 898
STRUGGLE_MOVE_ID = 165
ENGLISH_LANGUAGE_ID = 9
LEVEL_UP_METHOD_ID = 1
SHINY_ODDS = 8192
NUM_STATS = 6
MAX_MOVES = 4
MAX_LEVEL_UP_MOVES = 2

SYSTEM_DATA_DIR = Path("/share/cs327/pokedex/pokedex/data/csv")
HOME_DATA_SUBDIR = Path(".poke327/pokedex/pokedex/data/csv")
RELATIVE_DATA_DIR = Path("../pokedex/pokedex/data/csv")

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")

T = TypeVar("T")


class PokedexError(Exception):
    """Raised when pokedex data is missing or malformed."""


def _atoi(word: str) -> int:
    """Read a leading integer, giving 0 when there is none."""
    match = _INT_PREFIX.match(word)
    return int(match.group(1)) if match else 0


def _optional(word: str) -> int | None:
    return None if word == NULL_FIELD else _atoi(word)


def _flag(word: str) -> bool:
    return bool(_atoi(word))


def _rows(lines: Iterable[str]) -> Iterator[tuple[int, list[str]]]:
    """Yield (line number, fields) for each data row after the header."""
    it = iter(lines)
    try:
        next(it)
    except StopIteration:
        raise PokedexError("missing header line") from None
    for number, line in enumerate(it, start=2):
        line = line.rstrip("\r\n")
        if not line.strip():
            continue
        yield number, tokenize(line)


def _parse(lines: Iterable[str], build: Callable[[list[str]], T | None]) -> list[T]:
    records: list[T] = []
    for number, words in _rows(lines):
        try:
            record = build(words)
        except IndexError:
            raise PokedexError(f"line {number}: too few fields") from None
        if record is not None:
            records.append(record)
    return records


def parse_pokemon(lines: Iterable[str]) -> list[Pokemon]:
    """Parse the rows of pokemon.csv."""
    return _parse(
        lines,
        lambda w: Pokemon(
            pokemon_id=_atoi(w[0]),
            identifier=w[1],
            species_id=_atoi(w[2]),
            height=_atoi(w[3]),
            weight=_atoi(w[4]),
            base_experience=_atoi(w[5]),
            order=_atoi(w[6]),
            is_default=_flag(w[7]),
        ),
    )


def parse_moves(lines: Iterable[str]) -> list[Move]:
    """Parse the rows of moves.csv."""
    return _parse(
        lines,
        lambda w: Move(
            move_id=_atoi(w[0]),
            identifier=w[1],
            generation_id=_atoi(w[2]),
            type_id=_atoi(w[3]),
            power=_optional(w[4]),
            pp=_optional(w[5]),
            accuracy=_optional(w[6]),
            priority=_atoi(w[7]),
            target_id=_atoi(w[8]),
            damage_class_id=_atoi(w[9]),
            effect_id=_atoi(w[10]),
            effect_chance=_optional(w[11]),
            contest_type_id=_optional(w[12]),
            contest_effect_id=_optional(w[13]),
            super_contest_effect_id=_optional(w[14]),
        ),
    )


def parse_type_names(lines: Iterable[str]) -> list[TypeName]:
    """Parse the rows of type_names.csv, keeping English names only."""

    def build(w: list[str]) -> TypeName | None:
        if _atoi(w[1]) != ENGLISH_LANGUAGE_ID:
            return None
        return TypeName(type_id=_atoi(w[0]), name=w[2])

    return _parse(lines, build)


def parse_experience(lines: Iterable[str]) -> list[Experience]:
    """Parse the rows of experience.csv."""
    return _parse(
        lines,
        lambda w: Experience(
            growth_rate_id=_atoi(w[0]), level=_atoi(w[1]), experience=_atoi(w[2])
        ),
    )


def parse_stats(lines: Iterable[str]) -> list[Stat]:
    """Parse the rows of stats.csv."""
    return _parse(
        lines,
        lambda w: Stat(
            stat_id=_atoi(w[0]),
            damage_class_id=_optional(w[1]),
            identifier=w[2],
            is_battle_only=_flag(w[3]),
            game_index=_optional(w[4]),
        ),
    )


def parse_pokemon_species(lines: Iterable[str]) -> list[PokemonSpecies]:
    """Parse the rows of pokemon_species.csv."""
    return _parse(
        lines,
        lambda w: PokemonSpecies(
            pokemon_id=_atoi(w[0]),
            identifier=w[1],
            generation=_atoi(w[2]),
            evolves_from_species_id=_optional(w[3]),
            evolution_chain_id=_atoi(w[4]),
            color_id=_atoi(w[5]),
            shape_id=_optional(w[6]),
            habitat_id=_optional(w[7]),
            gender_rate=_atoi(w[8]),
            capture_rate=_atoi(w[9]),
            base_happiness=_atoi(w[10]),
            is_baby=_flag(w[11]),
            hatch_counter=_atoi(w[12]),
            has_gender_differences=_flag(w[13]),
            growth_rate_id=_atoi(w[14]),
            forms_switchable=_atoi(w[15]),
            is_legendary=_flag(w[16]),
            is_mythical=_flag(w[17]),
            conquest_order=_optional(w[19]),
        ),
    )


def parse_pokemon_types(lines: Iterable[str]) -> list[PokemonType]:
    """Parse the rows of pokemon_types.csv."""
    return _parse(
        lines,
        lambda w: PokemonType(
            pokemon_id=_atoi(w[0]), type_id=_atoi(w[1]), slot=_atoi(w[2])
        ),
    )


def parse_pokemon_moves(lines: Iterable[str]) -> list[PokemonMove]:
    """Parse the rows of pokemon_moves.csv."""
    return _parse(
        lines,
        lambda w: PokemonMove(
            pokemon_id=_atoi(w[0]),
            version_group_id=_atoi(w[1]),
            move_id=_atoi(w[2]),
            pokemon_move_method_id=_atoi(w[3]),
            level=_atoi(w[4]),
            order=_optional(w[5]),
        ),
    )


def parse_pokemon_stats(lines: Iterable[str]) -> list[PokemonStat]:
    """Parse the rows of pokemon_stats.csv."""
    return _parse(
        lines,
        lambda w: PokemonStat(
            pokemon_id=_atoi(w[0]),
            stat_id=_atoi(w[1]),
            base_stat=_atoi(w[2]),
            effort=_atoi(w[3]),
        ),
    )


def find_data_directory(home: str | os.PathLike[str] | None = None) -> Path:
    """Return the first of the known CSV data directories that exists."""
    home_dir = Path(home) if home is not None else Path.home()
    candidates = (SYSTEM_DATA_DIR, home_dir / HOME_DATA_SUBDIR, RELATIVE_DATA_DIR)
    for candidate in candidates:
        if candidate.is_dir():
            return candidate
    raise PokedexError(
        "no pokedex data directory found; looked in "
        + ", ".join(str(c) for c in candidates)
    )


_TABLES: tuple[tuple[str, str, Callable[[Iterable[str]], list]], ...] = (
    ("pokemon", "pokemon", parse_pokemon),
    ("moves", "moves", parse_moves),
    ("type_names", "type_names", parse_type_names),
    ("experience", "experience", parse_experience),
    ("stats", "stats", parse_stats),
    ("pokemon_species", "species", parse_pokemon_species),
    ("pokemon_types", "pokemon_types", parse_pokemon_types),
    ("pokemon_moves", "pokemon_moves", parse_pokemon_moves),
    ("pokemon_stats", "pokemon_stats", parse_pokemon_stats),
)


@dataclass
class Pokedex:
    """All pokedex tables, in file order."""

    pokemon: list[Pokemon] = field(default_factory=list)
    moves: list[Move] = field(default_factory=list)
    type_names: list[TypeName] = field(default_factory=list)
    experience: list[Experience] = field(default_factory=list)
    stats: list[Stat] = field(default_factory=list)
    species: list[PokemonSpecies] = field(default_factory=list)
    pokemon_types: list[PokemonType] = field(default_factory=list)
    pokemon_moves: list[PokemonMove] = field(default_factory=list)
    pokemon_stats: list[PokemonStat] = field(default_factory=list)

    @classmethod
    def from_directory(cls, directory: str | os.PathLike[str]) -> Pokedex:
        """Load every table from ``<directory>/<table>.csv``."""
        base = Path(directory)
        tables = {}
        for file_stem, attribute, parser in _TABLES:
            path = base / f"{file_stem}.csv"
            try:
                with path.open(encoding="utf-8", newline="") as handle:
                    tables[attribute] = parser(handle)
            except OSError as exc:
                raise PokedexError(f"cannot read {path}: {exc}") from exc
            except PokedexError as exc:
                raise PokedexError(f"{path}: {exc}") from exc
        return cls(**tables)

    def _move(self, move_id: int) -> Move:
        for move in self.moves:
            if move.move_id == move_id:
                return move
        raise PokedexError(f"unknown move {move_id}")

    def _experience_for(self, growth_rate_id: int, level: int) -> int:
        for row in self.experience:
            if row.growth_rate_id == growth_rate_id and row.level == level:
                return row.experience
        raise PokedexError(
            f"no experience entry for growth rate {growth_rate_id} level {level}"
        )

    def _level_up_moves(self, pid: int, level: int) -> list[Move]:
        chosen: list[Move] = []
        for entry in self.pokemon_moves:
            if (
                entry.pokemon_id == pid
                and entry.pokemon_move_method_id == LEVEL_UP_METHOD_ID
                and entry.level <= level
            ):
                move = self._move(entry.move_id)
                if not chosen or move.identifier != chosen[0].identifier:
                    chosen.append(move)
            if entry.pokemon_id > pid or len(chosen) >= MAX_LEVEL_UP_MOVES:
                break
        return chosen

    def generate_pokemon(
        self, rng: random.Random, min_level: int, max_level: int
    ) -> PartyMember:
        """Roll a random pokemon with a level drawn from [min_level, max_level)."""
        count = min(MAX_SPECIES_ID, len(self.pokemon), len(self.species))
        if count == 0:
            raise PokedexError("no pokemon loaded")
        pid = rng.randrange(count) + 1

        span = max_level - min_level
        level = min_level + (rng.randrange(abs(span)) if span else 0)
        is_shiny = rng.randrange(SHINY_ODDS) == 0

        species = self.species[pid - 1]
        rate = species.gender_rate
        if rate == -1:
            gender = "N"
        elif rate == 0:
            gender = "M"
        elif rate == 8:
            gender = "F"
        else:
            gender = "F" if rng.randrange(2) == 0 else "M"

        base_stats = [s.base_stat for s in self.pokemon_stats if s.pokemon_id == pid]
        if len(base_stats) < NUM_STATS:
            raise PokedexError(f"pokemon {pid} has too few stats")
        base_stats = base_stats[:NUM_STATS]

        ivs = [rng.randrange(16) for _ in range(NUM_STATS)]
        full_stats = [
            (base + iv) * 2 * level // 100 + 5 for base, iv in zip(base_stats, ivs)
        ]
        full_stats[0] = (base_stats[0] + ivs[0]) * 2 * level // 100 + level + 10

        moves = self._level_up_moves(pid, level) or [self._move(STRUGGLE_MOVE_ID)]

        return PartyMember(
            pid=pid,
            level=level,
            species=species,
            gender=gender,
            base_experience=self.pokemon[pid - 1].base_experience,
            experience=self._experience_for(species.growth_rate_id, level),
            types=[t for t in self.pokemon_types if t.pokemon_id == pid],
            moves=moves,
            max_hp=full_stats[0],
            stats=list(base_stats),
            ivs=ivs,
            battle_stats=list(base_stats) + [100, 100],
            full_stats=full_stats,
            is_shiny=is_shiny,
        )

    def moves_slots(self, member: PartyMember) -> Sequence[Move | None]:
        """The member's moves padded with None to the four move slots."""
        return list(member.moves) + [None] * (MAX_MOVES - len(member.moves))