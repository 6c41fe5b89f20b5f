# poketools/services/locations.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Protocol

from ..models.pokemon import LocationEncounter
from ..utils.names import capitalize_words
from .generation import format_game_name, game_order_for_generation, is_version_in_generation

log = logging.getLogger(__name__)

METHOD_LABELS = {
    "walk": "Walking",
    "surf": "Surfing",
    "old-rod": "Old Rod",
    "good-rod": "Good Rod",
    "super-rod": "Super Rod",
    "rock-smash": "Rock Smash",
    "headbutt": "Headbutt",
    "dark-grass": "Dark Grass",
    "grass-spots": "Grass Patches",
    "cave": "Cave",
    "bridge": "Bridge",
    "super-rod-spots": "Super Rod (Spots)",
    "surf-spots": "Surfing (Spots)",
    "yellow-flowers": "Yellow Flowers",
    "purple-flowers": "Purple Flowers",
    "red-flowers": "Red Flowers",
    "rough-terrain": "Rough Terrain",
}

CONDITION_LABELS = {
    "swarm": "Swarm",
    "time-morning": "Morning",
    "time-day": "Day",
    "time-night": "Night",
    "radar": "PokeRadar",
    "slot2-ruby": "Ruby inserted",
    "slot2-sapphire": "Sapphire inserted",
    "slot2-emerald": "Emerald inserted",
    "slot2-firered": "FireRed inserted",
    "slot2-leafgreen": "LeafGreen inserted",
    "radio-hoenn": "Hoenn Sound",
    "radio-sinnoh": "Sinnoh Sound",
    "season-spring": "Spring",
    "season-summer": "Summer",
    "season-autumn": "Autumn",
    "season-winter": "Winter",
}

# (palabra en el nombre del área, etiqueta) para encuentros caminando
_WALK_AREA_HINTS = [
    ("grass", "Tall Grass"),
    ("cave", "Cave"),
    ("forest", "Forest"),
    ("route", "Route"),
    ("area", "Wild Area"),
]


class SupplementaryLocationSource(Protocol):
    """Fuente opcional (p.ej. una wiki) cuando PokéAPI no tiene encuentros."""

    def lookup_supplementary_locations(self, species_name: str, generation: int) -> List[LocationEncounter]:
        ...


class NullLocationSource:
    def lookup_supplementary_locations(self, species_name: str, generation: int) -> List[LocationEncounter]:
        return []


def parse_encounters(data: list) -> List[LocationEncounter]:
    out: List[LocationEncounter] = []
    for loc in data or []:
        area = loc.get("location_area") or {}
        area_name = area.get("name")
        if not area_name:
            continue
        for vd in loc.get("version_details") or []:
            version = (vd.get("version") or {}).get("name", "")
            for enc in vd.get("encounter_details") or []:
                out.append(LocationEncounter(
                    location_area=area_name,
                    location_area_url=area.get("url", ""),
                    version=version,
                    method=(enc.get("method") or {}).get("name") or "walk",
                    conditions=sorted(cv.get("name", "") for cv in enc.get("condition_values") or []),
                    chance=int(enc.get("chance") or 0),
                    min_level=int(enc.get("min_level") or 0),
                    max_level=int(enc.get("max_level") or 0),
                    max_chance=int(vd.get("max_chance") or 0),
                ))
    return out


def format_encounter_method(method: str, conditions: List[str], area_name: str = "") -> str:
    text = METHOD_LABELS.get(method) or capitalize_words(method.replace("-", " "))
    if method == "walk" and area_name:
        lowered = area_name.lower()
        for hint, label in _WALK_AREA_HINTS:
            if hint in lowered:
                text = label
                break
    labels = [CONDITION_LABELS.get(c) or capitalize_words(c.replace("-", " ")) for c in conditions or []]
    labels = [c for c in labels if c]
    if labels:
        text += f" ({', '.join(labels)})"
    return text


def format_level_range(min_level: int, max_level: int) -> str:
    if not min_level and not max_level:
        return ""
    if min_level and max_level:
        return f"Lv.{min_level}" if min_level == max_level else f"Lv.{min_level}-{max_level}"
    if min_level:
        return f"Lv.{min_level}+"
    return f"Lv.1-{max_level}"


@dataclass
class LocationGroup:
    location_area: str
    location_name: str
    max_chance: int = 0
    encounters: List[LocationEncounter] = field(default_factory=list)

    def lines(self) -> List[str]:
        out = []
        for enc in self.encounters:
            parts = [format_encounter_method(enc.method, enc.conditions, self.location_area)]
            if enc.chance:
                parts.append(f"{enc.chance}%")
            lv = format_level_range(enc.min_level, enc.max_level)
            if lv:
                parts.append(lv)
            out.append(" ".join(parts))
        return out


def encounters_for_generation(encounters: List[LocationEncounter], generation: int) -> Dict[str, List[LocationGroup]]:
    """Agrupa por juego (en el orden canónico de la generación) y por área."""
    games: Dict[str, Dict[str, LocationGroup]] = {}
    seen = set()
    for enc in encounters:
        if not is_version_in_generation(enc.version, generation):
            continue
        game = format_game_name(enc.version)
        areas = games.setdefault(game, {})
        group = areas.get(enc.location_area)
        if group is None:
            group = LocationGroup(enc.location_area, enc.location_name, enc.max_chance)
            areas[enc.location_area] = group
        key = (game, enc.location_area, enc.method, tuple(enc.conditions))
        if key in seen:
            continue
        seen.add(key)
        group.encounters.append(enc)

    order = game_order_for_generation(generation)
    sorted_games = sorted(games, key=lambda g: order.index(g) if g in order else len(order))
    return {g: list(games[g].values()) for g in sorted_games}
