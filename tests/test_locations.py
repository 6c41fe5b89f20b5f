from poketools.models.pokemon import LocationEncounter
from poketools.services.locations import (
    NullLocationSource,
    encounters_for_generation,
    format_encounter_method,
    format_level_range,
    parse_encounters,
)


def _enc(area, version, method="walk", conditions=(), chance=10, lo=3, hi=5):
    return LocationEncounter(area, version, method=method, conditions=list(conditions),
                             chance=chance, min_level=lo, max_level=hi)


def test_parse_encounters_flattens_versions():
    data = [{
        "location_area": {"name": "route-1-area", "url": "https://pokeapi.co/api/v2/location-area/295/"},
        "version_details": [
            {"version": {"name": "red"}, "max_chance": 35, "encounter_details": [
                {"method": {"name": "walk"}, "chance": 20, "min_level": 2, "max_level": 4,
                 "condition_values": [{"name": "time-night"}, {"name": "swarm"}]},
            ]},
            {"version": {"name": "blue"}, "max_chance": 35, "encounter_details": [
                {"chance": 15, "min_level": 3, "max_level": 5},
            ]},
        ],
    }, {"location_area": {}, "version_details": []}]
    out = parse_encounters(data)
    assert len(out) == 2
    assert out[0].conditions == ["swarm", "time-night"]
    assert out[0].max_chance == 35
    assert out[1].method == "walk"
    assert out[1].version == "blue"


def test_method_labels():
    assert format_encounter_method("surf", []) == "Surfing"
    assert format_encounter_method("old-rod", ["time-night"]) == "Old Rod (Night)"
    assert format_encounter_method("walk", [], "viridian-forest-area") == "Forest"
    assert format_encounter_method("walk", [], "route-1-area") == "Route"
    assert format_encounter_method("walk", [], "pallet-town") == "Walking"
    assert format_encounter_method("gift-egg", ["custom-thing"]) == "Gift Egg (Custom Thing)"


def test_level_range():
    assert format_level_range(3, 5) == "Lv.3-5"
    assert format_level_range(5, 5) == "Lv.5"
    assert format_level_range(0, 0) == ""
    assert format_level_range(3, 0) == "Lv.3+"
    assert format_level_range(0, 4) == "Lv.1-4"


def test_grouping_filters_orders_and_dedupes():
    encounters = [
        _enc("viridian-forest-area", "yellow"),
        _enc("viridian-forest-area", "red"),
        _enc("viridian-forest-area", "red", chance=5),
        _enc("viridian-forest-area", "red", method="surf"),
        _enc("route-2-area", "blue"),
        _enc("route-2-area", "sword"),
    ]
    grouped = encounters_for_generation(encounters, 1)
    assert list(grouped) == ["Red", "Blue", "Yellow"]
    red = grouped["Red"]
    assert len(red) == 1
    assert [e.method for e in red[0].encounters] == ["walk", "surf"]
    assert red[0].lines() == ["Forest 10% Lv.3-5", "Surfing 10% Lv.3-5"]
    assert grouped["Blue"][0].location_name == "route 2 area"


def test_no_encounters_in_generation():
    assert encounters_for_generation([_enc("route-2-area", "sword")], 1) == {}


def test_null_source_returns_nothing():
    assert NullLocationSource().lookup_supplementary_locations("mew", 1) == []
