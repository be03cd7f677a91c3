# pokeworld

Procedurally generated overworld maps in the spirit of the classic
handheld monster-collecting games. Each map is 80 × 21 cells, and maps
sit on a 401 × 401 world grid. Terrain is grown from random seeds (tall
grass, clearings, mountains, forests and water), bordered by trees and
boulders, scattered with more boulders and trees, and crossed by
least-cost roads that link the gates shared with neighbouring maps.
Marts and centres grow rarer the further a map lies from the middle of
the world.

## Installation

```
pip install .
```

The package has no runtime dependencies beyond the standard library.

## Running

```
pokeworld
pokeworld --seed 1234
pokeworld -s 1234
```

The command prints `Using seed: <seed>`, generates the map at the centre
of the world, places the player (`@`) on a road, prints the map as text
and exits. Without a seed, one is taken from the clock; with the same
seed the same map is drawn. An unknown switch or a missing or
non-numeric seed prints a usage line to standard error and exits with
status 1.

## Creature data

Creatures are drawn from a Pokédex made of CSV tables: `pokemon`,
`moves`, `type_names`, `experience`, `stats`, `pokemon_species`,
`pokemon_types`, `pokemon_moves` and `pokemon_stats`, each with a
header line. `find_data_directory` looks for them in these places, in
order:

1. `/share/cs327/pokedex/pokedex/data/csv/`
2. `$HOME/.poke327/pokedex/pokedex/data/csv/`
3. `../pokedex/pokedex/data/csv/`

If no directory is found, the command prints a warning and carries on;
the player then starts with an empty party.

## Using it as a library

```python
import random

from pokeworld.pokedex import Pokedex, find_data_directory
from pokeworld.world import World

pokedex = Pokedex.from_directory(find_data_directory())
member = pokedex.generate_pokemon(random.Random(42), 1, 10)

world = World(seed=42, pokedex=pokedex)
print(world.current_map().render())
world.move_to(201, 200)   # the map east of the centre
```

- `pokeworld.terrain` holds the map dimensions and other constants, the
  `Terrain` enum (`Terrain.symbol()` gives a kind's map character), and
  the `rand_range` and `rand_dir` helpers.
- `pokeworld.records` holds the record dataclasses (`Pokemon`, `Move`,
  `Experience`, `Stat`, `TypeName`, `PokemonType`, `PokemonMove`,
  `PokemonStat`, `PokemonSpecies`, `PartyMember`, `Item`) and
  `tokenize`, which splits a CSV line and turns empty fields into
  `"null"`.
- `pokeworld.pokedex` holds one parser per table (`parse_pokemon`,
  `parse_moves`, `parse_type_names`, `parse_experience`, `parse_stats`,
  `parse_pokemon_species`, `parse_pokemon_types`, `parse_pokemon_moves`,
  `parse_pokemon_stats`), each taking an iterable of lines;
  `find_data_directory`; and `Pokedex`, which loads every table with
  `Pokedex.from_directory` and rolls a creature with
  `generate_pokemon(rng, min_level, max_level)`: a level in
  `[min_level, max_level)`, random IVs, computed stats, experience for
  its level, up to two level-up moves (Struggle if none) and its types.
  Missing or malformed data raises `PokedexError`.
- `pokeworld.mapgen` builds a single `Map`: `smooth_height`,
  `generate_terrain`, `border_type`, `place_boulders`, `place_trees`,
  `dijkstra_path`, `build_paths`, `find_building_location`,
  `place_pokemart` and `place_center`. `Map.render` draws the map as
  text, characters over terrain.
- `pokeworld.world` ties maps together in a `World`, generating each map
  the first time it is visited and keeping gates aligned with its
  neighbours. `World.move_to(x, y)` travels to another map index,
  `World.current_map()` returns the map in use, and
  `building_probability` and `level_range` give the distance-based
  building odds and creature level range. `parse_seed` reads the seed
  switches and `main` is the command above.

## What it does not do

There is no interactive screen and no game loop: nothing moves, and
the command only prints one map. No trainers or other characters are
placed on the maps besides the player, and there are no battles, shops
or healing. `World` works out a level range for each map, but nothing
uses it yet.

## Tests

```
pip install .[test]
pytest
```