"""Procedurally generated overworld maps and a Pokédex loaded from CSV tables."""

__version__ = "0.1.0"
__all__ = ["terrain", "records", "pokedex", "mapgen", "world"]