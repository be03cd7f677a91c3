"""Map geometry, terrain kinds, display symbols and shared random helpers."""

from __future__ import annotations

import random
from enum import Enum

MAP_X = 80
MAP_Y = 21
MIN_TREES = 10
MIN_BOULDERS = 10
TREE_PROB = 95
BOULDER_PROB = 95
WORLD_SIZE = 401

MIN_TRAINERS = 7
ADD_TRAINER_PROB = 60
MAX_PARTY = 6

MIN_LEVEL = 1
MAX_LEVEL = 100

ERROR_SYMBOL = "&"

PC_SYMBOL = "@"
HIKER_SYMBOL = "h"
RIVAL_SYMBOL = "r"
EXPLORER_SYMBOL = "e"
SENTRY_SYMBOL = "s"
PACER_SYMBOL = "p"
SWIMMER_SYMBOL = "m"
WANDERER_SYMBOL = "w"

# Positions and directions are (x, y) tuples.
Pair = tuple[int, int]

ALL_DIRS: tuple[Pair, ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)


class Terrain(Enum):
    """Kinds of map cell, in their canonical order."""

    BOULDER = 0
    TREE = 1
    PATH = 2
    MART = 3
    CENTER = 4
    GRASS = 5
    CLEARING = 6
    MOUNTAIN = 7
    FOREST = 8
    WATER = 9
    GATE = 10
    BAILEY = 11

    def symbol(self) -> str:
        """The character used to draw this terrain."""
        return _TERRAIN_SYMBOLS[self]


_TERRAIN_SYMBOLS = {
    Terrain.BOULDER: "0",
    Terrain.TREE: "4",
    Terrain.PATH: "#",
    Terrain.MART: "M",
    Terrain.CENTER: "C",
    Terrain.GRASS: ":",
    Terrain.CLEARING: ".",
    Terrain.MOUNTAIN: "%",
    Terrain.FOREST: "^",
    Terrain.WATER: "~",
    Terrain.GATE: "#",
    Terrain.BAILEY: "#",
}


def rand_range(rng: random.Random, low: int, high: int) -> int:
    """Return a random integer in the closed range [low, high]."""
    if high < low:
        raise ValueError(f"empty range [{low}, {high}]")
    return rng.randrange(low, high + 1)


def rand_dir(rng: random.Random) -> Pair:
    """Return one of the eight neighbouring directions at random."""
    return ALL_DIRS[rng.randrange(len(ALL_DIRS))]