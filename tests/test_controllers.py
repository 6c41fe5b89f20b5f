import pytest

from poketools.controllers.lookup_controller import LookupController
from poketools.controllers.team_builder_controller import TeamBuilderController
from poketools.errors import AuthFailure, PokeToolsError, TeamFullError
from poketools.models.pokemon import AbilityEntry, LocationEncounter, MoveDetail
from poketools.services.auth import AuthSession, LocalAuthBackend
from poketools.services.types import TypeChart
from poketools.utils.local_state import LocalStateStore


@pytest.fixture
def builder(fake_client, chart, tmp_path):
    return TeamBuilderController(fake_client, chart=chart, generation=8,
                                 state_store=LocalStateStore(str(tmp_path / "state.json")))


def test_chart_built_from_client_falls_back(fake_client):
    # el cliente falso no devuelve relaciones de tipo
    ctrl = TeamBuilderController(fake_client)
    assert ctrl.chart.source == "fallback"


def test_add_fills_first_empty_slot(builder):
    assert builder.add_pokemon("pikachu") == 0
    assert builder.add_pokemon("squirtle") == 1
    builder.remove_pokemon(0)
    assert builder.add_pokemon("charmander") == 0
    assert [p.name if p else None for p in builder.team.slots] == \
        ["charmander", "squirtle", None, None, None, None]


@pytest.mark.parametrize("slot", [-1, 6, 42])
def test_remove_rejects_slot_outside_team(builder, slot):
    for name in ("pikachu", "squirtle", "charmander", "bulbasaur", "gengar", "rattata"):
        builder.add_pokemon(name)
    with pytest.raises(IndexError):
        builder.remove_pokemon(slot)
    assert builder.team.is_full
    assert builder.state_store.load()[0].slots[5].name == "rattata"


def test_chart_is_built_on_first_use(fake_client, tmp_path):
    ctrl = TeamBuilderController(fake_client, state_store=LocalStateStore(str(tmp_path / "s.json")))
    ctrl.add_pokemon("pikachu")
    ctrl.remove_pokemon(0)
    ctrl.reset()
    assert fake_client.type_calls == []

    ctrl.add_pokemon("squirtle")
    ctrl.coverage()
    assert len(fake_client.type_calls) == 18
    ctrl.select_opponent("charizard")
    assert len(fake_client.type_calls) == 18

    LookupController(fake_client)
    assert len(fake_client.type_calls) == 18


def test_add_unknown_pokemon(builder):
    assert builder.add_pokemon("missingno") is None
    assert builder.team.is_empty


def test_full_team_raises(builder):
    for name in ("pikachu", "squirtle", "charmander", "bulbasaur", "gengar", "rattata"):
        builder.add_pokemon(name)
    with pytest.raises(TeamFullError, match="Your team is full"):
        builder.add_pokemon("slowpoke")


def test_generation_switch_readjusts_types(builder):
    builder.add_pokemon("clefairy")
    builder.add_pokemon("gengar")
    assert builder.team.slots[0].types == ["fairy"]

    builder.set_generation(5)
    assert builder.team.slots[0].types == ["normal"]
    assert len(builder.coverage()) == 17

    builder.set_generation(1)
    assert len(builder.coverage()) == 15

    builder.set_generation(8)
    assert builder.team.slots[0].types == ["fairy"]
    assert builder.team.slots[1].types == ["ghost", "poison"]


def test_invalid_generation_rejected(builder):
    with pytest.raises(ValueError):
        builder.set_generation(10)
    assert builder.generation == 8


def test_select_opponent_ranks_team(builder):
    builder.add_pokemon("rattata")
    builder.add_pokemon("squirtle")
    ranked = builder.select_opponent("charizard")
    assert [r.pokemon.name for r in ranked] == ["squirtle", "rattata"]
    assert builder.opponent.name == "charizard"


def test_select_opponent_unknown(builder):
    builder.add_pokemon("squirtle")
    assert builder.select_opponent("missingno") == []
    assert builder.opponent is None
    assert builder.recommendations() == []


def test_stale_opponent_response_is_discarded(builder, fake_client):
    builder.add_pokemon("squirtle")
    # mientras se carga slowpoke, el usuario elige charizard
    fake_client.hooks["slowpoke"] = lambda: builder.select_opponent("charizard")
    assert builder.select_opponent("slowpoke") is None
    assert builder.opponent.name == "charizard"


def test_reset(builder):
    builder.add_pokemon("pikachu")
    builder.set_generation(3)
    builder.select_opponent("charizard")
    builder.reset()
    assert builder.team.is_empty
    assert builder.generation == 8
    assert builder.opponent is None
    assert builder.state_store.load() is None


def test_local_state_survives_restart(builder, fake_client, chart):
    builder.add_pokemon("pikachu")
    builder.set_generation(4)

    again = TeamBuilderController(fake_client, chart=chart, state_store=builder.state_store)
    assert again.restore_local()
    assert again.generation == 4
    assert again.team.slots[0].name == "pikachu"


def test_restore_without_state(fake_client, chart, tmp_path):
    ctrl = TeamBuilderController(fake_client, chart=chart, state_store=LocalStateStore(str(tmp_path / "x.json")))
    assert ctrl.restore_local() is False
    assert TeamBuilderController(fake_client, chart=chart).restore_local() is False


def test_search(builder):
    assert builder.search("char") == ["charmander", "charizard"]
    assert builder.search("c") == []


def test_cloud_requires_sign_in(builder):
    builder.add_pokemon("pikachu")
    with pytest.raises(AuthFailure):
        builder.save_team()
    builder.auth = AuthSession(LocalAuthBackend())
    with pytest.raises(AuthFailure, match="User must be authenticated"):
        builder.saved_teams()


def test_cloud_save_load_delete(builder, session_factory):
    builder.auth = AuthSession(LocalAuthBackend())
    builder.session_factory = session_factory
    builder.auth.sign_up("ash@example.com", "pikachu")

    with pytest.raises(PokeToolsError):
        builder.save_team()

    builder.add_pokemon("pikachu")
    builder.add_pokemon("gengar")
    builder.set_generation(7)
    team_id = builder.save_team()

    builder.reset()
    assert builder.load_team(team_id)
    assert builder.generation == 7
    assert [p.name for p in builder.team.members()] == ["pikachu", "gengar"]
    assert builder.load_team("team_unknown") is False

    assert builder.delete_team(team_id)
    assert builder.saved_teams() == []


def test_delete_account_data(builder, session_factory):
    builder.auth = AuthSession(LocalAuthBackend())
    builder.session_factory = session_factory
    builder.auth.sign_up("ash@example.com", "pikachu")
    builder.add_pokemon("pikachu")
    builder.save_team()

    builder.delete_account_data()
    assert builder.auth.current_user() is None
    assert builder.state_store.load() is None


# ---------- lookup ----------

API = "https://pokeapi.co/api/v2"


@pytest.fixture
def lookup_client(fake_client, make_species, move_entry):
    pikachu = make_species(
        "pikachu", 25, ["electric"],
        stats={"HP": 35, "Atk": 55, "Def": 40, "SpA": 50, "SpD": 50, "Spe": 90},
        moves=[move_entry("thunder-shock", ("red-blue", "level-up", 1)),
               move_entry("thunderbolt", ("red-blue", "machine", 0))],
        species_url=f"{API}/pokemon-species/25/",
    )
    fake_client.species["pikachu"] = pikachu
    fake_client.moves = {
        f"{API}/move/thunder-shock/": MoveDetail("thunder-shock", "electric", 40, 100, 30, "special"),
        f"{API}/move/thunderbolt/": MoveDetail("thunderbolt", "electric", 90, 100, 15, "special"),
    }
    fake_client.species_data[f"{API}/pokemon-species/25/"] = {"evolution_chain": {"url": f"{API}/evolution-chain/10/"}}
    fake_client.chains[f"{API}/evolution-chain/10/"] = {"chain": {
        "species": {"name": "pichu", "url": f"{API}/pokemon-species/172/"},
        "evolution_details": [],
        "evolves_to": [{
            "species": {"name": "pikachu", "url": f"{API}/pokemon-species/25/"},
            "evolution_details": [{"min_happiness": 220, "trigger": {"name": "level-up"}}],
            "evolves_to": [],
        }],
    }}
    fake_client.encounters[25] = [
        LocationEncounter("viridian-forest-area", "red", f"{API}/location-area/321/", chance=5, min_level=3, max_level=5),
    ]
    fake_client.areas[f"{API}/location-area/321/"] = {
        "names": [{"language": {"name": "en"}, "name": "Viridian Forest"}],
    }
    return fake_client


def test_lookup_builds_every_section(lookup_client, chart):
    res = LookupController(lookup_client, chart=chart, generation=1).lookup("pikachu")
    assert res.types == ["electric"]
    assert {i.type for i in res.defensive["immune"]} == set()
    assert {i.type for i in res.defensive["weak"]} == {"ground"}
    assert {i.type for i in res.offensive["electric"]["super_effective"]} == {"water", "flying"}
    assert res.base_stat_total == 320
    assert res.stat_ranges["HP"] == (180, 274)
    assert [lm.move.name for lm in res.level_up_moves] == ["thunder-shock"]
    assert [lm.move.name for lm in res.machine_moves] == ["thunderbolt"]
    # pichu no existe en gen 1
    assert res.evolution is None
    assert list(res.locations) == ["Red"]
    assert res.locations["Red"][0].location_name == "Viridian Forest"


def test_lookup_evolution_in_later_generation(lookup_client, chart):
    res = LookupController(lookup_client, chart=chart, generation=2).lookup("pikachu")
    assert res.evolution.children[0].requirements == "High Friendship"
    assert res.evolution.children[0].is_current
    assert res.locations == {}


class _WikiSource:
    def lookup_supplementary_locations(self, species_name, generation):
        return [LocationEncounter("power-plant", "yellow")]


def test_lookup_uses_supplementary_locations(lookup_client, chart):
    lookup_client.encounters[25] = []
    ctrl = LookupController(lookup_client, chart=chart, generation=1, location_source=_WikiSource())
    res = ctrl.lookup("pikachu")
    assert list(res.locations) == ["Yellow"]
    assert res.locations["Yellow"][0].location_name == "power plant"


def test_lookup_unknown(fake_client, chart):
    assert LookupController(fake_client, chart=chart).lookup("missingno") is None


def test_stale_lookup_is_discarded(lookup_client, chart):
    ctrl = LookupController(lookup_client, chart=chart, generation=1)
    lookup_client.hooks["squirtle"] = lambda: ctrl.lookup("pikachu")
    assert ctrl.lookup("squirtle") is None
    assert ctrl.current.species.name == "pikachu"


def test_lookup_with_custom_chart(lookup_client):
    chart = TypeChart({"ground": {"electric": 0.5}})
    res = LookupController(lookup_client, chart=chart, generation=8).lookup("pikachu")
    assert {i.type for i in res.defensive["resistant"]} == {"ground"}


def test_lookup_abilities_with_hidden_flag(lookup_client, chart):
    lookup_client.species["pikachu"].abilities = [AbilityEntry("static"), AbilityEntry("lightning-rod", is_hidden=True)]
    lookup_client.abilities["static"] = "May paralyze on contact."
    res = LookupController(lookup_client, chart=chart, generation=8).lookup("pikachu")
    assert [(a.name, a.is_hidden, a.effect) for a in res.abilities] == [
        ("static", False, "May paralyze on contact."),
        ("lightning-rod", True, "No description available"),
    ]


def test_lookup_lists_regional_forms(lookup_client, chart, make_species):
    lookup_client.species_data[f"{API}/pokemon-species/25/"]["varieties"] = [
        {"is_default": True, "pokemon": {"name": "pikachu"}},
        {"is_default": False, "pokemon": {"name": "pikachu-gmax"}},
    ]
    res = LookupController(lookup_client, chart=chart, generation=8).lookup("pikachu")
    assert res.forms == []

    raichu_url = f"{API}/pokemon-species/26/"
    lookup_client.species["raichu"] = make_species("raichu", 26, ["electric"], species_url=raichu_url)
    lookup_client.species_data[raichu_url] = {
        "generation": {"url": f"{API}/generation/1/"},
        "evolution_chain": {"url": f"{API}/evolution-chain/10/"},
        "varieties": [
            {"is_default": True, "pokemon": {"name": "raichu"}},
            {"is_default": False, "pokemon": {"name": "raichu-alola"}},
        ],
    }
    res = LookupController(lookup_client, chart=chart, generation=8).lookup("raichu")
    assert [(f.label, f.is_current) for f in res.forms] == [("Kantonian", True), ("Alolan", False)]
    assert [n.species_name for n in res.evolution.walk()] == ["pichu", "pikachu"]
