"""The world grid of maps, the player's placement and the command entry point."""

from __future__ import annotations

import random
import re
import sys
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from .mapgen import (
    Map,
    build_paths,
    generate_terrain,
    place_boulders,
    place_center,
    place_pokemart,
    place_trees,
    smooth_height,
)
from .pokedex import Pokedex, PokedexError, find_data_directory
from .records import Item, PartyMember
from .terrain import (
    MAP_X,
    MAP_Y,
    MAX_LEVEL,
    MIN_LEVEL,
    PC_SYMBOL,
    WORLD_SIZE,
    Pair,
    Terrain,
)

CENTER_INDEX = WORLD_SIZE // 2
FAR_DISTANCE = 200
STARTING_WALLET = 3000
STARTING_PARTY_SIZE = 3

_UNSIGNED = re.compile(r"\s*([+-]?\d+)")


def building_probability(distance: int) -> int:
    """Percent chance of a mart or center on a map this far from the centre."""
    if distance > FAR_DISTANCE:
        return 5
    return int(50.0 - (45.0 * distance) / 200.0)


def level_range(distance: int) -> tuple[int, int]:
    """The (minimum, maximum) trainer pokemon level at this distance."""
    if distance > FAR_DISTANCE:
        return (distance - FAR_DISTANCE) // 2, MAX_LEVEL
    return MIN_LEVEL, distance // 2


@dataclass
class _Player:
    pos: Pair
    party: list[PartyMember] = field(default_factory=list)
    bag: list[Item] = field(default_factory=list)
    wallet: int = STARTING_WALLET
    symbol: str = PC_SYMBOL


class World:
    """A WORLD_SIZE x WORLD_SIZE grid of lazily generated maps."""

    def __init__(self, seed: int | None = None, pokedex: Pokedex | None = None):
        self.rng = random.Random(seed)
        self.pokedex = pokedex
        self.maps: dict[Pair, Map] = {}
        self.cur_idx: Pair = (CENTER_INDEX, CENTER_INDEX)
        self.min_level = MIN_LEVEL
        self.max_level = MIN_LEVEL
        self.pc: _Player | None = None
        self._current: Map | None = None
        self.new_map()

    def current_map(self) -> Map:
        """The map the player is on."""
        if self._current is None:
            raise RuntimeError("no map has been generated")
        return self._current

    def _gate(self, neighbour: Pair, side: str, at_edge: bool, limit: int) -> int | None:
        if at_edge:
            return None
        existing = self.maps.get(neighbour)
        if existing is not None:
            return getattr(existing, side)
        return 3 + self.rng.randrange(limit - 6)

    def new_map(self) -> Map:
        """Make the map at cur_idx current, generating it on first visit."""
        x, y = self.cur_idx
        existing = self.maps.get(self.cur_idx)
        if existing is not None:
            self._current = existing
            self._place_pc()
            return existing

        rng = self.rng
        map_ = Map()
        self.maps[self.cur_idx] = self._current = map_
        smooth_height(map_, rng)

        n = self._gate((x, y - 1), "s", y == 0, MAP_X)
        s = self._gate((x, y + 1), "n", y == WORLD_SIZE - 1, MAP_X)
        w = self._gate((x - 1, y), "e", x == 0, MAP_Y)
        e = self._gate((x + 1, y), "w", x == WORLD_SIZE - 1, MAP_Y)

        generate_terrain(map_, rng, n, s, e, w)
        place_boulders(map_, rng)
        place_trees(map_, rng)
        build_paths(map_)

        distance = abs(x - CENTER_INDEX) + abs(y - CENTER_INDEX)
        chance = building_probability(distance)
        if rng.randrange(100) < chance or not distance:
            place_pokemart(map_, rng)
        if rng.randrange(100) < chance or not distance:
            place_center(map_, rng)

        self.min_level, self.max_level = level_range(distance)
        map_.characters.clear()

        if self.cur_idx == (CENTER_INDEX, CENTER_INDEX) and self.pc is None:
            self._init_pc()
        else:
            self._place_pc()
        return map_

    def move_to(self, x: int, y: int) -> Map:
        """Travel to the map at world index (x, y) and return it."""
        if not (0 <= x < WORLD_SIZE and 0 <= y < WORLD_SIZE):
            raise ValueError(f"world index ({x}, {y}) is outside the world")
        if (x, y) == self.cur_idx:
            return self.current_map()
        if self._current is not None:
            self._current.characters = {
                pos: who for pos, who in self._current.characters.items() if who is not self.pc
            }
        self.cur_idx = (x, y)
        return self.new_map()

    def _generate_party(self, max_level: int) -> list[PartyMember]:
        if self.pokedex is None:
            return []
        return [
            self.pokedex.generate_pokemon(self.rng, 1, max_level)
            for _ in range(STARTING_PARTY_SIZE)
        ]

    def _init_pc(self) -> None:
        map_ = self.current_map()
        party = self._generate_party(self.max_level)
        while True:
            x = self.rng.randrange(MAP_X - 2) + 1
            y = self.rng.randrange(MAP_Y - 2) + 1
            if map_.terrain[y][x] == Terrain.PATH:
                break
        self.pc = _Player(
            pos=(x, y),
            party=party,
            bag=[Item("Potion", 5), Item("Revive", 5), Item("Pokeball", 10)],
        )
        map_.characters[self.pc.pos] = self.pc

    def _place_pc(self) -> None:
        if self.pc is None:
            raise RuntimeError("the player has not been created")
        x, y = self.pc.pos
        if x == 1:
            x = MAP_X - 2
        elif x == MAP_X - 2:
            x = 1
        elif y == 1:
            y = MAP_Y - 2
        elif y == MAP_Y - 2:
            y = 1
        self.pc.pos = (x, y)
        self.current_map().characters[self.pc.pos] = self.pc


def parse_seed(argv: Sequence[str]) -> int | None:
    """Read ``-s <seed>`` or ``--seed <seed>`` from the arguments."""
    seed: int | None = None
    args = iter(argv)
    for arg in args:
        if not arg.startswith("-"):
            raise ValueError(f"unexpected argument {arg!r}")
        long_arg = arg.startswith("--")
        switch = arg[1:] if long_arg else arg
        if switch[1:2] != "s":
            raise ValueError(f"unknown switch {arg!r}")
        if (not long_arg and switch != "-s") or (long_arg and switch != "-seed"):
            raise ValueError(f"unknown switch {arg!r}")
        value = next(args, None)
        if value is None:
            raise ValueError("missing seed value")
        match = _UNSIGNED.match(value)
        if not match:
            raise ValueError(f"seed {value!r} is not an integer")
        seed = int(match.group(1)) & 0xFFFFFFFF
    return seed


def _time_seed() -> int:
    now = time.time()
    sec = int(now)
    usec = int((now - sec) * 1_000_000)
    return (usec ^ (sec << 20)) & 0xFFFFFFFF


def main(argv: Sequence[str] | None = None) -> int:
    """Generate the starting map and print it."""
    args = list(sys.argv[1:] if argv is None else argv)
    prog = sys.argv[0] if sys.argv and sys.argv[0] else "pokeworld"
    try:
        seed = parse_seed(args)
    except ValueError:
        print(f"Usage: {prog}[-s]--seed <seed>]", file=sys.stderr)
        return 1
    if seed is None:
        seed = _time_seed()

    pokedex: Pokedex | None
    try:
        pokedex = Pokedex.from_directory(find_data_directory())
    except PokedexError as exc:
        print(f"warning: {exc}", file=sys.stderr)
        pokedex = None

    print(f"Using seed: {seed}")
    world = World(seed=seed, pokedex=pokedex)
    print(world.current_map().render())
    return 0