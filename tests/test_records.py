import dataclasses

import pytest

from pokeworld.records import (
    Experience,
    Item,
    PartyMember,
    Pokemon,
    PokemonSpecies,
    tokenize,
)


def _species():
    return PokemonSpecies(
        pokemon_id=1,
        identifier="bulbasaur",
        generation=1,
        evolves_from_species_id=None,
        evolution_chain_id=1,
        color_id=5,
        shape_id=8,
        habitat_id=3,
        gender_rate=1,
        capture_rate=45,
        base_happiness=50,
        is_baby=False,
        hatch_counter=20,
        has_gender_differences=False,
        growth_rate_id=4,
        forms_switchable=0,
        is_legendary=False,
        is_mythical=False,
        conquest_order=None,
    )


def test_tokenize_simple_record():
    assert tokenize("1,bulbasaur,1,7,69,64,1,1\n") == [
        "1", "bulbasaur", "1", "7", "69", "64", "1", "1",
    ]


def test_tokenize_empty_field_becomes_null():
    assert tokenize("5,,attack,0,2\n") == ["5", "null", "attack", "0", "2"]


def test_tokenize_trailing_empty_field():
    assert tokenize("1,2,\n") == ["1", "2", "null"]


def test_tokenize_newline_only():
    assert tokenize("\n") == ["null"]


def test_tokenize_without_newline():
    assert tokenize("4,9,fire") == ["4", "9", "fire"]


def test_tokenize_embedded_newline_separates():
    assert tokenize("a\nb\n") == ["a", "b"]


def test_tokenize_field_count_matches_commas():
    line = "1,,,,,\n"
    words = tokenize(line)
    assert len(words) == line.count(",") + 1
    assert words[1:] == ["null"] * 5


def test_tokenize_none_raises():
    with pytest.raises(ValueError):
        tokenize(None)


def test_records_are_frozen():
    p = Pokemon(1, "bulbasaur", 1, 7, 69, 64, 1, True)
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.level = 3  # type: ignore[attr-defined]
    with pytest.raises(dataclasses.FrozenInstanceError):
        Experience(1, 1, 0).experience = 5  # type: ignore[misc]


def test_records_compare_by_value():
    assert Experience(2, 10, 560) == Experience(2, 10, 560)
    assert Experience(2, 10, 560) != Experience(2, 11, 560)


def test_party_member_defaults_are_independent():
    species = _species()
    a = PartyMember(pid=1, level=5, species=species, gender="M", base_experience=64)
    b = PartyMember(pid=1, level=5, species=species, gender="F", base_experience=64)
    a.ivs.append(3)
    assert b.ivs == []
    assert a.ivs == [3]
    assert a.is_shiny is False
    assert a.status_turns == 0


def test_party_member_is_mutable():
    member = PartyMember(pid=1, level=5, species=_species(), gender="M", base_experience=64)
    member.defeated = True
    member.level += 1
    assert member.defeated is True
    assert member.level == 6


def test_item_count_can_change():
    item = Item("Potion", 5)
    item.count -= 1
    assert item == Item("Potion", 4)