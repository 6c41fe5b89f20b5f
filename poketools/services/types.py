# poketools/services/types.py
from __future__ import annotations

import copy
import logging
from typing import Callable, Dict, Iterable, Optional

from ..errors import MissingData, NetworkFailure
from ..models.pokemon import TypeRelations

log = logging.getLogger(__name__)

# orden de visualización: los 15 originales, luego dark/steel (gen 2) y fairy (gen 6)
ALL_TYPES = [
    "normal", "fire", "water", "electric", "grass", "ice",
    "fighting", "poison", "ground", "flying", "psychic", "bug",
    "rock", "ghost", "dragon", "dark", "steel", "fairy",
]

VALID_MULTIPLIERS = (0.0, 0.5, 1.0, 2.0)

# Tabla canónica (gen 6+). Formato: FALLBACK_TYPE_CHART[atk][def] = mult
# Las parejas ausentes valen 1.
FALLBACK_TYPE_CHART: Dict[str, Dict[str, float]] = {
    "normal":   {"rock": 0.5, "ghost": 0.0, "steel": 0.5},
    "fire":     {"fire": 0.5, "water": 0.5, "grass": 2.0, "ice": 2.0, "bug": 2.0, "rock": 0.5, "dragon": 0.5, "steel": 2.0},
    "water":    {"fire": 2.0, "water": 0.5, "grass": 0.5, "ground": 2.0, "rock": 2.0, "dragon": 0.5},
    "electric": {"water": 2.0, "electric": 0.5, "grass": 0.5, "ground": 0.0, "flying": 2.0, "dragon": 0.5},
    "grass":    {"fire": 0.5, "water": 2.0, "grass": 0.5, "poison": 0.5, "ground": 2.0, "flying": 0.5, "bug": 0.5,
                 "rock": 2.0, "dragon": 0.5, "steel": 0.5},
    "ice":      {"fire": 0.5, "water": 0.5, "grass": 2.0, "ice": 0.5, "ground": 2.0, "flying": 2.0, "dragon": 2.0,
                 "steel": 0.5},
    "fighting": {"normal": 2.0, "ice": 2.0, "poison": 0.5, "flying": 0.5, "psychic": 0.5, "bug": 0.5, "rock": 2.0,
                 "ghost": 0.0, "dark": 2.0, "steel": 2.0, "fairy": 0.5},
    "poison":   {"grass": 2.0, "poison": 0.5, "ground": 0.5, "rock": 0.5, "ghost": 0.5, "steel": 0.0, "fairy": 2.0},
    "ground":   {"fire": 2.0, "electric": 2.0, "grass": 0.5, "poison": 2.0, "flying": 0.0, "bug": 0.5, "rock": 2.0,
                 "steel": 2.0},
    "flying":   {"electric": 0.5, "grass": 2.0, "fighting": 2.0, "bug": 2.0, "rock": 0.5, "steel": 0.5},
    "psychic":  {"fighting": 2.0, "poison": 2.0, "psychic": 0.5, "dark": 0.0, "steel": 0.5},
    "bug":      {"fire": 0.5, "grass": 2.0, "fighting": 0.5, "poison": 0.5, "flying": 0.5, "psychic": 2.0,
                 "ghost": 0.5, "dark": 2.0, "steel": 0.5, "fairy": 0.5},
    "rock":     {"fire": 2.0, "ice": 2.0, "fighting": 0.5, "ground": 0.5, "flying": 2.0, "bug": 2.0, "steel": 0.5},
    "ghost":    {"normal": 0.0, "psychic": 2.0, "ghost": 2.0, "dark": 0.5},
    "dragon":   {"dragon": 2.0, "steel": 0.5, "fairy": 0.0},
    "dark":     {"fighting": 0.5, "psychic": 2.0, "ghost": 2.0, "dark": 0.5, "fairy": 0.5},
    "steel":    {"fire": 0.5, "water": 0.5, "electric": 0.5, "ice": 2.0, "rock": 2.0, "steel": 0.5, "fairy": 2.0},
    "fairy":    {"fire": 0.5, "fighting": 2.0, "poison": 0.5, "dragon": 2.0, "dark": 2.0, "steel": 0.5},
}


def _norm(type_name: str) -> str:
    return (type_name or "").strip().lower()


class TypeChart:
    """(tipo atacante, tipo defensor) -> multiplicador. Solo lectura una vez construido."""

    def __init__(self, chart: Optional[Dict[str, Dict[str, float]]] = None, source: str = "custom"):
        self._chart: Dict[str, Dict[str, float]] = {}
        self.source = source
        for atk, row in (chart or {}).items():
            for dfn, mult in row.items():
                self._set(atk, dfn, mult)

    def _set(self, attack_type: str, defend_type: str, multiplier: float) -> None:
        m = float(multiplier)
        if m not in VALID_MULTIPLIERS:
            raise ValueError(f"Invalid multiplier {multiplier!r} for {attack_type}->{defend_type}")
        self._chart.setdefault(_norm(attack_type), {})[_norm(defend_type)] = m

    def effectiveness(self, attack_type: str, defend_type: str) -> float:
        value = self._chart.get(_norm(attack_type), {}).get(_norm(defend_type))
        if value is None:
            return 1.0
        return value

    def has_entries_for(self, attack_type: str) -> bool:
        return bool(self._chart.get(_norm(attack_type)))

    def attack_types(self) -> list[str]:
        return list(self._chart)

    def as_dict(self) -> Dict[str, Dict[str, float]]:
        return copy.deepcopy(self._chart)

    @classmethod
    def fallback(cls) -> "TypeChart":
        return cls(FALLBACK_TYPE_CHART, source="fallback")

    @classmethod
    def from_relations(cls, relations: Iterable[TypeRelations], source: str = "pokeapi") -> "TypeChart":
        chart = cls(source=source)
        for rel in relations:
            chart.add_relations(rel)
        return chart

    def add_relations(self, rel: TypeRelations) -> None:
        # mismo orden que la API: 2x, luego 0.5x, luego 0x
        for t in rel.double_damage_to:
            self._set(rel.name, t, 2.0)
        for t in rel.half_damage_to:
            self._set(rel.name, t, 0.5)
        for t in rel.no_damage_to:
            self._set(rel.name, t, 0.0)

    def __repr__(self) -> str:
        return f"TypeChart(source={self.source!r}, attack_types={len(self._chart)})"


def build_type_chart(
    fetch_relations: Callable[[str], Optional[TypeRelations]],
    types: Iterable[str],
) -> TypeChart:
    """
    Construye la tabla con un fetch por tipo. Un fallo en un tipo se registra y ese
    tipo queda sin entradas (todo 1x). Si la construcción entera falla, o no se pudo
    cargar ningún tipo, se usa FALLBACK_TYPE_CHART.
    """
    try:
        chart = TypeChart(source="pokeapi")
        loaded = 0
        for type_name in types:
            try:
                rel = fetch_relations(type_name)
            except (NetworkFailure, MissingData) as exc:
                log.warning("Error loading type data for %s: %s", type_name, exc)
                continue
            if rel is None:
                log.warning("No type data for %s; its matchups default to 1x", type_name)
                continue
            chart.add_relations(rel)
            loaded += 1
        if loaded == 0:
            log.error("No type data could be loaded; using fallback type chart")
            return TypeChart.fallback()
        return chart
    except Exception:
        log.exception("Error loading type chart; using fallback type chart")
        return TypeChart.fallback()
