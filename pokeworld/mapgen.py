"""Generation of a single map: heights, terrain, paths and buildings."""

from __future__ import annotations

import heapq
import itertools
import random
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from .terrain import (
    ALL_DIRS,
    BOULDER_PROB,
    ERROR_SYMBOL,
    MAP_X,
    MAP_Y,
    MIN_BOULDERS,
    MIN_TREES,
    TREE_PROB,
    Pair,
    Terrain,
)

GAUSSIAN = (
    (1, 4, 7, 4, 1),
    (4, 16, 26, 16, 4),
    (7, 26, 41, 26, 7),
    (4, 16, 26, 16, 4),
    (1, 4, 7, 4, 1),
)

MAX_BUILDING_ATTEMPTS = 100_000

_SPREAD = (((-1, 0), 80), ((0, -1), 20), ((0, 1), 20), ((1, 0), 80))
_PATH_STEPS = ((0, -1), (-1, 0), (1, 0), (0, 1))


def _grid(value: Any) -> list[list[Any]]:
    return [[value] * MAP_X for _ in range(MAP_Y)]


@dataclass
class Map:
    """One screen of the world: terrain, heights, gates and characters."""

    terrain: list[list[Terrain | None]] = field(default_factory=lambda: _grid(None))
    height: list[list[int]] = field(default_factory=lambda: _grid(0))
    characters: dict[Pair, Any] = field(default_factory=dict)
    n: int | None = None
    s: int | None = None
    e: int | None = None
    w: int | None = None
    num_trainers: int = 0

    def __getitem__(self, pos: Pair) -> Terrain | None:
        x, y = pos
        return self.terrain[y][x]

    def __setitem__(self, pos: Pair, kind: Terrain) -> None:
        x, y = pos
        self.terrain[y][x] = kind

    def render(self) -> str:
        """Draw the map as text, characters over terrain."""
        rows = []
        for y, row in enumerate(self.terrain):
            cells = []
            for x, kind in enumerate(row):
                occupant = self.characters.get((x, y))
                if occupant is not None:
                    cells.append(getattr(occupant, "symbol", ERROR_SYMBOL))
                elif kind is None:
                    cells.append(ERROR_SYMBOL)
                else:
                    cells.append(kind.symbol())
            rows.append("".join(cells))
        return "\n".join(rows)


def _in_bounds(x: int, y: int) -> bool:
    return 0 <= x < MAP_X and 0 <= y < MAP_Y


def _convolve(values: list[list[int]], x: int, y: int) -> int:
    weight = total = 0
    for p, row in enumerate(GAUSSIAN):
        for q, g in enumerate(row):
            yy, xx = y + p - 2, x + q - 2
            if _in_bounds(xx, yy):
                weight += g
                total += values[yy][xx] * g
    return total // weight


def smooth_height(map_: Map, rng: random.Random) -> None:
    """Fill the map's height field with diffused, gaussian-smoothed values."""
    seeds = _grid(0)
    queue: deque[Pair] = deque()
    for value in range(1, 255, 20):
        while True:
            x = rng.randrange(MAP_X)
            y = rng.randrange(MAP_Y)
            if not seeds[y][x]:
                break
        seeds[y][x] = value
        queue.append((x, y))

    while queue:
        x, y = queue.popleft()
        value = seeds[y][x]
        for dx, dy in ALL_DIRS:
            nx, ny = x + dx, y + dy
            if _in_bounds(nx, ny) and not seeds[ny][nx]:
                seeds[ny][nx] = value
                queue.append((nx, ny))

    map_.height = [[_convolve(seeds, x, y) for x in range(MAP_X)] for y in range(MAP_Y)]


def border_type(map_: Map, x: int, y: int, rng: random.Random) -> Terrain:
    """Choose tree or boulder for a border cell, biased by its neighbours."""
    rocks = trees = 0
    for q in range(max(y - 1, 0), min(y + 1, MAP_Y)):
        for p in range(max(x - 1, 0), min(x + 1, MAP_X)):
            if (p, q) == (x, y):
                continue
            kind = map_.terrain[q][p]
            if kind in (Terrain.MOUNTAIN, Terrain.BOULDER):
                rocks += 1
            elif kind in (Terrain.FOREST, Terrain.TREE):
                trees += 1

    if trees == rocks:
        return Terrain.BOULDER if rng.randrange(2) else Terrain.TREE
    if trees > rocks:
        return Terrain.TREE if rng.randrange(10) else Terrain.BOULDER
    return Terrain.BOULDER if rng.randrange(10) else Terrain.TREE


def _check_gate(name: str, value: int | None, limit: int) -> None:
    if value is not None and not 1 <= value <= limit - 2:
        raise ValueError(f"gate {name}={value} out of range")


def generate_terrain(
    map_: Map,
    rng: random.Random,
    n: int | None,
    s: int | None,
    e: int | None,
    w: int | None,
) -> None:
    """Lay out terrain regions, the tree/boulder border and the gates."""
    _check_gate("n", n, MAP_X)
    _check_gate("s", s, MAP_X)
    _check_gate("e", e, MAP_Y)
    _check_gate("w", w, MAP_Y)

    counts = (
        (Terrain.GRASS, rng.randrange(4) + 2),
        (Terrain.CLEARING, rng.randrange(4) + 2),
        (Terrain.MOUNTAIN, rng.randrange(2) + 1),
        (Terrain.FOREST, rng.randrange(2) + 1),
        (Terrain.WATER, rng.randrange(2) + 1),
    )

    grid: list[list[Terrain | None]] = _grid(None)
    queue: deque[Pair] = deque()
    for kind, count in counts:
        for _ in range(count):
            while True:
                x = rng.randrange(MAP_X)
                y = rng.randrange(MAP_Y)
                if grid[y][x] is None:
                    break
            grid[y][x] = kind
            queue.append((x, y))

    while queue:
        x, y = queue.popleft()
        kind = grid[y][x]
        requeued = False
        for (dx, dy), chance in _SPREAD:
            nx, ny = x + dx, y + dy
            if not _in_bounds(nx, ny) or grid[ny][nx] is not None:
                continue
            if rng.randrange(100) < chance:
                grid[ny][nx] = kind
                queue.append((nx, ny))
            elif not requeued:
                requeued = True
                queue.append((x, y))

    map_.terrain = grid
    for y in range(MAP_Y):
        for x in range(MAP_X):
            if y in (0, MAP_Y - 1) or x in (0, MAP_X - 1):
                grid[y][x] = border_type(map_, x, y, rng)

    map_.n, map_.s, map_.e, map_.w = n, s, e, w
    if n is not None:
        map_[n, 0] = Terrain.GATE
        map_[n, 1] = Terrain.BAILEY
    if s is not None:
        map_[s, MAP_Y - 1] = Terrain.GATE
        map_[s, MAP_Y - 2] = Terrain.BAILEY
    if w is not None:
        map_[0, w] = Terrain.GATE
        map_[1, w] = Terrain.BAILEY
    if e is not None:
        map_[MAP_X - 1, e] = Terrain.GATE
        map_[MAP_X - 2, e] = Terrain.BAILEY


def _scatter(
    map_: Map,
    rng: random.Random,
    minimum: int,
    probability: int,
    kind: Terrain,
    protected: frozenset[Terrain],
) -> None:
    placed = 0
    while placed < minimum or rng.randrange(100) < probability:
        y = rng.randrange(MAP_Y - 2) + 1
        x = rng.randrange(MAP_X - 2) + 1
        if map_.terrain[y][x] not in protected:
            map_.terrain[y][x] = kind
        placed += 1


def place_boulders(map_: Map, rng: random.Random) -> None:
    """Scatter boulders over the interior, sparing forest, paths and gates."""
    _scatter(
        map_,
        rng,
        MIN_BOULDERS,
        BOULDER_PROB,
        Terrain.BOULDER,
        frozenset({Terrain.FOREST, Terrain.PATH, Terrain.GATE, Terrain.BAILEY}),
    )


def place_trees(map_: Map, rng: random.Random) -> None:
    """Scatter trees over the interior, sparing mountains, water, paths and gates."""
    _scatter(
        map_,
        rng,
        MIN_TREES,
        TREE_PROB,
        Terrain.TREE,
        frozenset(
            {Terrain.MOUNTAIN, Terrain.PATH, Terrain.WATER, Terrain.GATE, Terrain.BAILEY}
        ),
    )


def _is_interior(pos: Any) -> bool:
    return (
        isinstance(pos, tuple)
        and len(pos) == 2
        and all(isinstance(v, int) for v in pos)
        and 1 <= pos[0] <= MAP_X - 2
        and 1 <= pos[1] <= MAP_Y - 2
    )


def _edge_penalty(x: int, y: int) -> int:
    return 2 if x == 1 or y == 1 or x == MAP_X - 2 or y == MAP_Y - 2 else 1


def dijkstra_path(map_: Map, start: Pair, end: Pair) -> None:
    """Carve the cheapest interior path between two cells, favouring low ground."""
    for point in (start, end):
        if not _is_interior(point):
            raise ValueError(f"path endpoint {point!r} is not an interior cell")

    cost: dict[Pair, int] = {start: 0}
    came_from: dict[Pair, Pair] = {}
    done: set[Pair] = set()
    order = itertools.count()
    heap = [(0, next(order), start)]

    while heap:
        current_cost, _, pos = heapq.heappop(heap)
        if pos in done:
            continue
        done.add(pos)
        if pos == end:
            break
        x, y = pos
        step = current_cost + map_.height[y][x]
        for dx, dy in _PATH_STEPS:
            neighbour = (x + dx, y + dy)
            if neighbour in done or not _is_interior(neighbour):
                continue
            new_cost = step * _edge_penalty(*neighbour)
            if new_cost < cost.get(neighbour, new_cost + 1):
                cost[neighbour] = new_cost
                came_from[neighbour] = pos
                heapq.heappush(heap, (new_cost, next(order), neighbour))
    else:
        raise ValueError(f"no path from {start} to {end}")

    pos = end
    while pos != start:
        if pos != end:
            x, y = pos
            map_.terrain[y][x] = Terrain.PATH
            map_.height[y][x] = 0
        pos = came_from[pos]


def build_paths(map_: Map) -> None:
    """Connect the map's baileys with paths."""
    n, s, e, w = map_.n, map_.s, map_.e, map_.w
    west = (1, w)
    east = (MAP_X - 2, e)
    north = (n, 1)
    south = (s, MAP_Y - 2)

    routes: list[tuple[Pair, Pair]] = []
    if e is not None and w is not None:
        routes.append((west, east))
    if n is not None and s is not None:
        routes.append((north, south))
    if e is None:
        routes.append((west, north if s is None else south))
    if w is None:
        routes.append((east, north if s is None else south))
    if n is None:
        routes.append((west if e is None else east, south))
    if s is None:
        routes.append((west if e is None else east, north))

    for start, end in routes:
        dijkstra_path(map_, start, end)


def _building_fits(map_: Map, x: int, y: int) -> bool:
    def at(px: int, py: int) -> Terrain | None:
        return map_.terrain[py][px]

    path = Terrain.PATH
    beside_path = (
        (at(x - 1, y) == path and at(x - 1, y + 1) == path)
        or (at(x + 2, y) == path and at(x + 2, y + 1) == path)
        or (at(x, y - 1) == path and at(x + 1, y - 1) == path)
        or (at(x, y + 2) == path and at(x + 1, y + 2) == path)
    )
    footprint = [at(x, y), at(x + 1, y), at(x, y + 1), at(x + 1, y + 1)]
    blocked = {Terrain.MART, Terrain.CENTER, Terrain.PATH}
    return beside_path and not any(cell in blocked for cell in footprint)


def find_building_location(map_: Map, rng: random.Random) -> Pair:
    """Find the top-left cell of a free 2x2 block lying alongside a path."""
    for _ in range(MAX_BUILDING_ATTEMPTS):
        x = rng.randrange(MAP_X - 3) + 1
        y = rng.randrange(MAP_Y - 3) + 1
        if _building_fits(map_, x, y):
            return x, y
    raise ValueError("no location beside a path for a building")


def _place_building(map_: Map, rng: random.Random, kind: Terrain) -> Pair:
    x, y = find_building_location(map_, rng)
    for dx, dy in ((0, 0), (1, 0), (0, 1), (1, 1)):
        map_.terrain[y + dy][x + dx] = kind
    return x, y


def place_pokemart(map_: Map, rng: random.Random) -> Pair:
    """Place a 2x2 pokemart beside a path; return its top-left cell."""
    return _place_building(map_, rng, Terrain.MART)


def place_center(map_: Map, rng: random.Random) -> Pair:
    """Place a 2x2 pokemon center beside a path; return its top-left cell."""
    return _place_building(map_, rng, Terrain.CENTER)