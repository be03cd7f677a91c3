[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pokeworld"
version = "0.1.0"
description = "Procedurally generated overworld maps, with a Pokédex loaded from CSV tables"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "procedural-generation", "pokedex", "terrain", "map-generation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Role-Playing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pokeworld = "pokeworld.world:main"

[tool.hatch.build.targets.wheel]
packages = ["pokeworld"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
