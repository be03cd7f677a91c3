import random
from pathlib import Path

import pytest

from pokeworld.pokedex import (
    Pokedex,
    PokedexError,
    find_data_directory,
    parse_experience,
    parse_moves,
    parse_pokemon,
    parse_pokemon_moves,
    parse_pokemon_species,
    parse_pokemon_stats,
    parse_pokemon_types,
    parse_stats,
    parse_type_names,
)

SPECIES_HEADER = (
    "id,identifier,generation_id,evolves_from_species_id,evolution_chain_id,"
    "color_id,shape_id,habitat_id,gender_rate,capture_rate,base_happiness,"
    "is_baby,hatch_counter,has_gender_differences,growth_rate_id,"
    "forms_switchable,is_legendary,is_mythical,order,conquest_order\n"
)


def _species_row(gender_rate="8", conquest=""):
    return f"1,bulbasaur,1,,1,5,8,3,{gender_rate},45,50,0,20,0,1,0,0,0,1,{conquest}\n"


def _files(gender_rate="8", with_level_moves=True):
    moves = "id,identifier,generation_id,type_id,power,pp,accuracy,priority,target_id,damage_class_id,effect_id,effect_chance,contest_type_id,contest_effect_id,super_contest_effect_id\n"
    moves += "33,tackle,1,1,40,35,100,0,10,2,1,,5,1,5\n"
    moves += "45,growl,1,1,,40,100,0,11,1,19,,2,1,5\n"
    moves += "165,struggle,1,1,50,,,0,8,2,255,,1,1,5\n"
    pokemon_moves = "pokemon_id,version_group_id,move_id,pokemon_move_method_id,level,order\n"
    if with_level_moves:
        pokemon_moves += "1,1,33,1,1,\n1,1,33,1,1,\n1,1,45,1,1,\n"
    else:
        pokemon_moves += "1,1,33,4,0,\n"
    return {
        "pokemon": "id,identifier,species_id,height,weight,base_experience,order,is_default\n"
        "1,bulbasaur,1,7,69,64,1,1\n",
        "moves": moves,
        "type_names": "type_id,local_language_id,name\n1,1,Normal-ja\n1,9,Normal\n",
        "experience": "growth_rate_id,level,experience\n"
        + "".join(f"1,{lvl},{lvl * 10}\n" for lvl in range(1, 101)),
        "stats": "id,damage_class_id,identifier,is_battle_only,game_index\n1,,hp,0,1\n",
        "pokemon_species": SPECIES_HEADER + _species_row(gender_rate),
        "pokemon_types": "pokemon_id,type_id,slot\n1,12,1\n1,4,2\n",
        "pokemon_moves": pokemon_moves,
        "pokemon_stats": "pokemon_id,stat_id,base_stat,effort\n"
        + "".join(f"1,{sid},{40 + sid},0\n" for sid in range(1, 7)),
    }


def _write(directory: Path, files):
    directory.mkdir(parents=True, exist_ok=True)
    for name, text in files.items():
        (directory / f"{name}.csv").write_text(text)
    return directory


@pytest.fixture
def dex(tmp_path):
    return Pokedex.from_directory(_write(tmp_path / "csv", _files()))


def test_parse_pokemon_fields():
    rows = parse_pokemon(["header\n", "1,bulbasaur,1,7,69,64,1,1\n"])
    assert len(rows) == 1
    p = rows[0]
    assert (p.pokemon_id, p.identifier, p.height, p.weight) == (1, "bulbasaur", 7, 69)
    assert p.base_experience == 64
    assert p.is_default is True


def test_parse_moves_nulls_become_none():
    [move] = parse_moves(["h\n", "165,struggle,1,1,50,,,0,8,2,255,,1,1,5\n"])
    assert move.identifier == "struggle"
    assert move.power == 50
    assert move.pp is None
    assert move.accuracy is None
    assert move.effect_chance is None
    assert move.super_contest_effect_id == 5


def test_parse_type_names_keeps_english_only():
    names = parse_type_names(["h\n", "1,1,Normal-ja\n", "1,9,Normal\n", "2,9,Fighting\n"])
    assert [n.name for n in names] == ["Normal", "Fighting"]


def test_parse_experience_and_types():
    exp = parse_experience(["h\n", "1,2,20\n"])
    assert (exp[0].growth_rate_id, exp[0].level, exp[0].experience) == (1, 2, 20)
    types = parse_pokemon_types(["h\n", "1,12,1\n"])
    assert (types[0].pokemon_id, types[0].type_id, types[0].slot) == (1, 12, 1)


def test_parse_stats_optional_fields():
    [hp, attack] = parse_stats(["h\n", "1,,hp,0,1\n", "2,2,attack,0,2\n"])
    assert hp.damage_class_id is None
    assert hp.identifier == "hp"
    assert attack.damage_class_id == 2
    assert attack.game_index == 2


def test_parse_species_optional_and_conquest():
    [a] = parse_pokemon_species([SPECIES_HEADER, _species_row()])
    assert a.evolves_from_species_id is None
    assert a.conquest_order is None
    assert a.gender_rate == 8
    [b] = parse_pokemon_species([SPECIES_HEADER, _species_row(conquest="42")])
    assert b.conquest_order == 42


def test_parse_pokemon_moves_order():
    rows = parse_pokemon_moves(["h\n", "1,1,33,1,1,\n", "1,1,45,1,3,2\n"])
    assert rows[0].order is None
    assert rows[1].order == 2
    assert rows[1].level == 3


def test_parse_pokemon_stats_and_crlf():
    rows = parse_pokemon_stats(["h\r\n", "1,1,45,0\r\n", "\n"])
    assert len(rows) == 1
    assert rows[0].base_stat == 45


def test_missing_header_raises():
    with pytest.raises(PokedexError):
        parse_pokemon([])


def test_short_row_raises():
    with pytest.raises(PokedexError):
        parse_pokemon_stats(["h\n", "1,2\n"])


def test_find_data_directory_in_home(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / ".poke327" / "pokedex" / "pokedex" / "data" / "csv"
    target.mkdir(parents=True)
    assert find_data_directory(tmp_path) == target


def test_find_data_directory_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(PokedexError):
        find_data_directory(tmp_path / "nowhere")


def test_from_directory_loads_all_tables(dex):
    assert len(dex.pokemon) == 1
    assert len(dex.moves) == 3
    assert len(dex.type_names) == 1
    assert len(dex.experience) == 100
    assert len(dex.pokemon_stats) == 6
    assert len(dex.pokemon_types) == 2


def test_from_directory_missing_file(tmp_path):
    files = _files()
    del files["moves"]
    with pytest.raises(PokedexError):
        Pokedex.from_directory(_write(tmp_path / "csv", files))


def test_generate_pokemon_invariants(dex):
    member = dex.generate_pokemon(random.Random(5), 3, 10)
    assert member.pid == 1
    assert 3 <= member.level < 10
    assert member.gender == "F"
    assert member.experience == member.level * 10
    assert member.stats == [41, 42, 43, 44, 45, 46]
    assert member.battle_stats[:6] == member.stats
    assert member.battle_stats[6:] == [100, 100]
    assert all(0 <= iv < 16 for iv in member.ivs)
    assert member.max_hp == member.full_stats[0]
    assert member.max_hp > member.level
    assert [t.type_id for t in member.types] == [12, 4]
    assert [m.identifier for m in member.moves] == ["tackle", "growl"]


def test_generate_pokemon_is_deterministic(dex):
    a = dex.generate_pokemon(random.Random(9), 1, 50)
    b = dex.generate_pokemon(random.Random(9), 1, 50)
    assert a == b


def test_generate_pokemon_equal_bounds(dex):
    member = dex.generate_pokemon(random.Random(1), 7, 7)
    assert member.level == 7


def test_generate_pokemon_struggle_fallback(tmp_path):
    dex = Pokedex.from_directory(
        _write(tmp_path / "csv", _files(with_level_moves=False))
    )
    member = dex.generate_pokemon(random.Random(2), 1, 5)
    assert [m.identifier for m in member.moves] == ["struggle"]
    assert dex.moves_slots(member)[1:] == [None, None, None]


def test_generate_pokemon_random_gender(tmp_path):
    dex = Pokedex.from_directory(_write(tmp_path / "csv", _files(gender_rate="4")))
    genders = {dex.generate_pokemon(random.Random(s), 1, 5).gender for s in range(40)}
    assert genders == {"F", "M"}


def test_generate_pokemon_empty_dex():
    with pytest.raises(PokedexError):
        Pokedex().generate_pokemon(random.Random(0), 1, 5)