# poketools/services/species_provider.py
"""Convierte las respuestas de PokéAPI en registros tipados. Los campos opcionales
ausentes toman valores por defecto aquí, no en la lógica de negocio."""
from __future__ import annotations

from typing import Iterable, List

from ..errors import MissingData
from ..models.pokemon import (
    API_STAT_NAMES,
    AbilityEntry,
    MoveEntry,
    Species,
    TypeRelations,
    VersionGroupDetail,
)

SEARCH_LIMIT = 10
MIN_QUERY_LENGTH = 2


def _names(nodes) -> List[str]:
    out = []
    for node in nodes or []:
        name = (node or {}).get("name")
        if name:
            out.append(name)
    return out


def parse_types(data: dict) -> List[str]:
    types = []
    # ordenados por slot; soporta {"type":{"name":"steel"}}
    for t in sorted(data.get("types") or [], key=lambda t: t.get("slot", 0)):
        tname = ((t.get("type") or {}).get("name") or "").strip().lower()
        if tname:
            types.append(tname)
    return types


def parse_stats(data: dict) -> dict:
    out = {}
    for stat_obj in data.get("stats") or []:
        api_name = (stat_obj.get("stat") or {}).get("name")
        key = API_STAT_NAMES.get(api_name)
        if key:
            out[key] = int(stat_obj.get("base_stat") or 0)
    return out


def parse_moves(data: dict) -> List[MoveEntry]:
    moves = []
    for m in data.get("moves") or []:
        node = m.get("move") or {}
        if not node.get("name"):
            continue
        details = [
            VersionGroupDetail(
                version_group=(d.get("version_group") or {}).get("name", ""),
                method=(d.get("move_learn_method") or {}).get("name", ""),
                level=int(d.get("level_learned_at") or 0),
            )
            for d in m.get("version_group_details") or []
        ]
        moves.append(MoveEntry(name=node["name"], url=node.get("url", ""), details=details))
    return moves


def parse_abilities(data: dict) -> List[AbilityEntry]:
    out = []
    for a in sorted(data.get("abilities") or [], key=lambda a: a.get("slot", 0)):
        name = (a.get("ability") or {}).get("name")
        if name:
            out.append(AbilityEntry(name=name, is_hidden=bool(a.get("is_hidden"))))
    return out


def parse_pokemon(data: dict) -> Species:
    if not data or not data.get("name") or data.get("id") is None:
        raise MissingData("Pokemon payload without 'id'/'name'")
    types = parse_types(data)
    if not types:
        raise MissingData(f"No 'types' in payload for {data['name']}")
    sprites = data.get("sprites") or {}
    return Species(
        id=int(data["id"]),
        name=data["name"],
        types=types,
        stats=parse_stats(data),
        sprites={
            "front_default": sprites.get("front_default"),
            "front_shiny": sprites.get("front_shiny"),
        },
        abilities=parse_abilities(data),
        moves=parse_moves(data),
        species_url=(data.get("species") or {}).get("url"),
    )


def parse_type_relations(data: dict) -> TypeRelations:
    if not data or not data.get("name"):
        raise MissingData("Type payload without 'name'")
    rel = data.get("damage_relations") or {}
    return TypeRelations(
        name=data["name"],
        double_damage_to=_names(rel.get("double_damage_to")),
        half_damage_to=_names(rel.get("half_damage_to")),
        no_damage_to=_names(rel.get("no_damage_to")),
    )


def english_entry(entries, *fields: str) -> str:
    for entry in entries or []:
        if ((entry.get("language") or {}).get("name")) != "en":
            continue
        for f in fields:
            if entry.get(f):
                return entry[f]
    return ""


def filter_names(names: Iterable[str], query: str, limit: int = SEARCH_LIMIT) -> List[str]:
    q = (query or "").strip().lower()
    if len(q) < MIN_QUERY_LENGTH:
        return []
    return [n for n in names if q in n.lower()][:limit]


def ability_effect(data: dict) -> str:
    """Texto en inglés de una habilidad: effect primero, flavor_text si no."""
    data = data or {}
    text = english_entry(data.get("effect_entries"), "effect")
    if not text:
        text = english_entry(data.get("flavor_text_entries"), "flavor_text")
    # los flavor_text traen saltos de línea de la consola
    return " ".join(text.split()) if text else ""
