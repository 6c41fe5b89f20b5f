from dataclasses import dataclass, field
from typing import Dict, List, Optional

STAT_KEYS = ["HP", "Atk", "Def", "SpA", "SpD", "Spe"]

# nombres de PokéAPI -> etiquetas cortas
API_STAT_NAMES = {
    "hp": "HP",
    "attack": "Atk",
    "defense": "Def",
    "special-attack": "SpA",
    "special-defense": "SpD",
    "speed": "Spe",
}


@dataclass
class VersionGroupDetail:
    version_group: str
    method: str
    level: int = 0


@dataclass
class MoveEntry:
    name: str
    url: str
    details: List[VersionGroupDetail] = field(default_factory=list)


@dataclass
class AbilityEntry:
    name: str
    is_hidden: bool = False
    effect: str = "No description available"


@dataclass
class Species:
    """Registro de /pokemon/<slug> ya validado en la frontera."""
    id: int
    name: str
    types: List[str]
    stats: Dict[str, int] = field(default_factory=dict)
    sprites: Dict[str, Optional[str]] = field(default_factory=dict)
    abilities: List[AbilityEntry] = field(default_factory=list)
    moves: List[MoveEntry] = field(default_factory=list)
    species_url: Optional[str] = None

    def to_summary(self, types: Optional[List[str]] = None) -> "PokemonSummary":
        return PokemonSummary(
            id=self.id,
            name=self.name,
            types=list(types if types is not None else self.types),
            stats=dict(self.stats),
            sprites=dict(self.sprites),
        )


@dataclass
class PokemonSummary:
    """Lo que ocupa un slot del equipo y lo que se guarda en un snapshot."""
    id: int
    name: str
    types: List[str]
    stats: Dict[str, int] = field(default_factory=dict)
    sprites: Dict[str, Optional[str]] = field(default_factory=dict)

    @property
    def sprite(self) -> Optional[str]:
        return self.sprites.get("front_default")

    def with_types(self, types: List[str]) -> "PokemonSummary":
        return PokemonSummary(id=self.id, name=self.name, types=list(types),
                              stats=dict(self.stats), sprites=dict(self.sprites))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "sprites": dict(self.sprites),
            "types": list(self.types),
            "stats": dict(self.stats),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PokemonSummary":
        # soporta ["water","fairy"] o el formato PokéAPI [{"type":{"name":"water"}}]
        types: List[str] = []
        for t in data.get("types") or []:
            if isinstance(t, dict):
                tname = (t.get("type") or {}).get("name") or t.get("name") or ""
            else:
                tname = str(t)
            tname = tname.strip().lower()
            if tname:
                types.append(tname)
        return cls(
            id=int(data.get("id") or 0),
            name=str(data.get("name") or ""),
            types=types,
            stats={str(k): int(v) for k, v in (data.get("stats") or {}).items()},
            sprites=dict(data.get("sprites") or {}),
        )


@dataclass
class TypeRelations:
    name: str
    double_damage_to: List[str] = field(default_factory=list)
    half_damage_to: List[str] = field(default_factory=list)
    no_damage_to: List[str] = field(default_factory=list)


@dataclass
class EvolutionNode:
    species_name: str
    details: List[dict] = field(default_factory=list)
    requirements: str = ""
    children: List["EvolutionNode"] = field(default_factory=list)
    is_current: bool = False

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class LocationEncounter:
    location_area: str
    version: str
    location_area_url: str = ""
    method: str = "walk"
    conditions: List[str] = field(default_factory=list)
    chance: int = 0
    min_level: int = 0
    max_level: int = 0
    max_chance: int = 0

    @property
    def location_name(self) -> str:
        return self.location_area.replace("-", " ")


@dataclass
class MoveDetail:
    name: str
    type: str = "normal"
    power: Optional[int] = None
    accuracy: Optional[int] = None
    pp: Optional[int] = None
    category: str = "status"
    effect: str = "No effect description available"


@dataclass
class PokemonForm:
    name: str
    label: str
    is_default: bool = False
    is_current: bool = False
