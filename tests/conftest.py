import pytest
from sqlalchemy.orm import sessionmaker

from poketools.db.base import make_engine
from poketools.db.repository import init_db
from poketools.models.pokemon import AbilityEntry, MoveEntry, PokemonSummary, Species, VersionGroupDetail
from poketools.services.types import TypeChart


class FakeClient:
    """Sustituto de PokeApiClient con datos fijos; nunca toca la red."""

    def __init__(self, species=None):
        self.species = {s.name: s for s in species or []}
        self.names = list(self.species)
        self.moves = {}
        self.species_data = {}
        self.chains = {}
        self.encounters = {}
        self.areas = {}
        self.abilities = {}
        # nombre -> callable ejecutado antes de devolver el Pokémon
        self.hooks = {}
        self.pokemon_calls = []
        self.type_calls = []

    def list_pokemon(self, limit=1000):
        return list(self.names)

    def get_pokemon(self, name):
        self.pokemon_calls.append(name)
        hook = self.hooks.pop(name, None)
        if hook is not None:
            hook()
        return self.species.get(name)

    def get_type_relations(self, type_name):
        self.type_calls.append(type_name)
        return None

    def get_move(self, url):
        return self.moves.get(url)

    def get_species(self, url):
        return self.species_data.get(url)

    def get_evolution_chain(self, url):
        return self.chains.get(url)

    def get_encounters(self, pokemon_id, name=None):
        return list(self.encounters.get(pokemon_id, []))

    def get_location_area(self, url):
        return self.areas.get(url)

    def get_ability(self, name):
        return self.abilities.get(name)


def _species(name, id, types, stats=None, moves=None, species_url=None, abilities=None):
    return Species(
        id=id,
        name=name,
        types=list(types),
        stats=dict(stats or {"HP": 50, "Atk": 50, "Def": 50, "SpA": 50, "SpD": 50, "Spe": 50}),
        sprites={"front_default": f"https://img/{id}.png"},
        abilities=list(abilities or [AbilityEntry("overgrow")]),
        moves=list(moves or []),
        species_url=species_url,
    )


ROSTER = [
    ("bulbasaur", 1, ["grass", "poison"]),
    ("charmander", 4, ["fire"]),
    ("charizard", 6, ["fire", "flying"]),
    ("squirtle", 7, ["water"]),
    ("pikachu", 25, ["electric"]),
    ("clefairy", 35, ["fairy"]),
    ("sandshrew", 27, ["ground"]),
    ("rattata", 19, ["normal"]),
    ("slowpoke", 79, ["water", "psychic"]),
    ("gengar", 94, ["ghost", "poison"]),
]


@pytest.fixture
def chart():
    return TypeChart.fallback()


@pytest.fixture
def mon():
    def make(name, *types, id=1, stats=None):
        return PokemonSummary(id=id, name=name, types=list(types), stats=dict(stats or {}), sprites={})
    return make


@pytest.fixture
def make_species():
    return _species


@pytest.fixture
def fake_client():
    return FakeClient([_species(n, i, t) for n, i, t in ROSTER])


@pytest.fixture
def move_entry():
    def make(name, *details):
        return MoveEntry(
            name=name,
            url=f"https://pokeapi.co/api/v2/move/{name}/",
            details=[VersionGroupDetail(vg, method, level) for vg, method, level in details],
        )
    return make


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://")
    init_db(engine)
    factory = sessionmaker(bind=engine, autoflush=False, future=True)
    yield factory
    engine.dispose()


@pytest.fixture
def session(session_factory):
    s = session_factory()
    yield s
    s.close()
