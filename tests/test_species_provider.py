import pytest

from poketools.errors import MissingData
from poketools.models.pokemon import PokemonSummary
from poketools.services.species_provider import (
    english_entry,
    filter_names,
    parse_pokemon,
    parse_type_relations,
)
from poketools.utils.names import format_pokemon_name, format_slug, to_pokeapi_slug


def test_parse_pokemon_orders_types_by_slot():
    sp = parse_pokemon({
        "id": 598,
        "name": "ferrothorn",
        "types": [{"slot": 2, "type": {"name": "Steel"}}, {"slot": 1, "type": {"name": "grass"}}],
        "stats": [{"base_stat": 74, "stat": {"name": "hp"}}, {"base_stat": 131, "stat": {"name": "defense"}}],
        "moves": [{
            "move": {"name": "leech-seed", "url": "u"},
            "version_group_details": [{
                "version_group": {"name": "black-white"},
                "move_learn_method": {"name": "level-up"},
                "level_learned_at": 1,
            }],
        }],
    })
    assert sp.types == ["grass", "steel"]
    assert sp.stats == {"HP": 74, "Def": 131}
    assert sp.moves[0].details[0].version_group == "black-white"
    assert sp.species_url is None
    assert sp.sprites == {"front_default": None, "front_shiny": None}


@pytest.mark.parametrize("payload", [
    {},
    {"id": 1},
    {"name": "bulbasaur"},
    {"id": 1, "name": "bulbasaur", "types": []},
])
def test_parse_pokemon_requires_id_name_types(payload):
    with pytest.raises(MissingData):
        parse_pokemon(payload)


def test_parse_type_relations_defaults_missing_lists():
    rel = parse_type_relations({"name": "normal", "damage_relations": {"no_damage_to": [{"name": "ghost"}]}})
    assert rel.double_damage_to == []
    assert rel.half_damage_to == []
    assert rel.no_damage_to == ["ghost"]
    with pytest.raises(MissingData):
        parse_type_relations({"damage_relations": {}})


def test_english_entry():
    entries = [
        {"language": {"name": "es"}, "name": "Bosque Verde"},
        {"language": {"name": "en"}, "name": "Viridian Forest"},
    ]
    assert english_entry(entries, "name") == "Viridian Forest"
    assert english_entry([], "name") == ""


def test_filter_names():
    names = ["pikachu", "pichu", "raichu", "bulbasaur"] + [f"pidgey-{i}" for i in range(20)]
    assert filter_names(names, "CHU") == ["pikachu", "pichu", "raichu"]
    assert filter_names(names, "p") == []
    assert filter_names(names, "  ") == []
    assert len(filter_names(names, "pi")) == 10


def test_summary_roundtrip_and_legacy_types():
    p = PokemonSummary(35, "clefairy", ["fairy"], {"HP": 70}, {"front_default": "x.png"})
    assert PokemonSummary.from_dict(p.to_dict()) == p
    legacy = PokemonSummary.from_dict({"id": 1, "name": "bulbasaur",
                                       "types": [{"type": {"name": "Grass"}}, {"type": {"name": "poison"}}]})
    assert legacy.types == ["grass", "poison"]
    assert legacy.sprite is None


def test_names():
    assert to_pokeapi_slug("Mr. Mime") == "mr-mime"
    assert to_pokeapi_slug("Farfetch'd") == "farfetchd"
    assert to_pokeapi_slug("Nidoran♀") == "nidoran-f"
    assert to_pokeapi_slug("Mimikyu") == "mimikyu-disguised"
    assert format_pokemon_name("mr-mime") == "Mr. Mime"
    assert format_pokemon_name("iron-valiant") == "Iron Valiant"
    assert format_slug("thunder-stone") == "Thunder Stone"
