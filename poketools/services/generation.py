# poketools/services/generation.py
"""Tablas estáticas por generación (1-9): tipos válidos, cambios de tipado,
rangos de la pokédex nacional y juegos/version groups de cada generación."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from ..config import MAX_GENERATION, MIN_GENERATION
from .types import ALL_TYPES

TYPE_INTRODUCTION: Dict[str, int] = {
    "dark": 2,
    "steel": 2,
    "fairy": 6,
}


def _by_generation(before: List[str], after: List[str], switch_at: int = 6, first: Optional[List[str]] = None):
    table = {g: list(before if g < switch_at else after) for g in range(MIN_GENERATION, MAX_GENERATION + 1)}
    if first is not None:
        table[1] = list(first)
    return table


# Especies cuyo tipado cambió con la llegada del tipo hada
TYPING_CHANGES: Dict[str, Dict[int, List[str]]] = {
    "azumarill": _by_generation(["water"], ["water", "fairy"]),
    # Marill no existe en gen 1
    "marill": _by_generation(["water"], ["water", "fairy"], first=[]),
    "jigglypuff": _by_generation(["normal"], ["normal", "fairy"]),
    "wigglytuff": _by_generation(["normal"], ["normal", "fairy"]),
    "clefairy": _by_generation(["normal"], ["fairy"]),
    "clefable": _by_generation(["normal"], ["fairy"]),
}

GENERATION_RANGES: Dict[int, tuple[int, int]] = {
    1: (1, 151),
    2: (152, 251),
    3: (252, 386),
    4: (387, 493),
    5: (494, 649),
    6: (650, 721),
    7: (722, 809),
    8: (810, 905),
    9: (906, 1025),
}

VERSION_GROUPS: Dict[int, List[str]] = {
    1: ["red-blue", "yellow"],
    2: ["gold-silver", "crystal"],
    3: ["ruby-sapphire", "emerald", "firered-leafgreen"],
    4: ["diamond-pearl", "platinum", "heartgold-soulsilver"],
    5: ["black-white", "black-2-white-2"],
    6: ["x-y", "omega-ruby-alpha-sapphire"],
    7: ["sun-moon", "ultra-sun-ultra-moon"],
    8: ["sword-shield"],
    9: ["scarlet-violet"],
}

VERSIONS: Dict[int, List[str]] = {
    1: ["red", "blue", "yellow"],
    2: ["gold", "silver", "crystal"],
    3: ["ruby", "sapphire", "emerald", "firered", "leafgreen"],
    4: ["diamond", "pearl", "platinum", "heartgold", "soulsilver"],
    5: ["black", "white", "black-2", "white-2"],
    6: ["x", "y", "omega-ruby", "alpha-sapphire"],
    7: ["sun", "moon", "ultra-sun", "ultra-moon"],
    8: ["sword", "shield"],
    9: ["scarlet", "violet"],
}

GAME_NAMES: Dict[str, str] = {
    "red": "Red", "blue": "Blue", "yellow": "Yellow",
    "gold": "Gold", "silver": "Silver", "crystal": "Crystal",
    "ruby": "Ruby", "sapphire": "Sapphire", "emerald": "Emerald",
    "firered": "FireRed", "leafgreen": "LeafGreen",
    "diamond": "Diamond", "pearl": "Pearl", "platinum": "Platinum",
    "heartgold": "HeartGold", "soulsilver": "SoulSilver",
    "black": "Black", "white": "White", "black-2": "Black 2", "white-2": "White 2",
    "x": "X", "y": "Y", "omega-ruby": "Omega Ruby", "alpha-sapphire": "Alpha Sapphire",
    "sun": "Sun", "moon": "Moon", "ultra-sun": "Ultra Sun", "ultra-moon": "Ultra Moon",
    "sword": "Sword", "shield": "Shield",
    "scarlet": "Scarlet", "violet": "Violet",
}


def check_generation(generation: int) -> int:
    g = int(generation)
    if not MIN_GENERATION <= g <= MAX_GENERATION:
        raise ValueError(f"Generation must be between {MIN_GENERATION} and {MAX_GENERATION}, got {generation}")
    return g


def valid_types(generation: int) -> List[str]:
    g = check_generation(generation)
    return [t for t in ALL_TYPES if TYPE_INTRODUCTION.get(t, 1) <= g]


def is_type_valid(type_name: str, generation: int) -> bool:
    intro = TYPE_INTRODUCTION.get((type_name or "").lower())
    return not intro or generation >= intro


def types_for_species(species: str, generation: int, default_types: Iterable[str]) -> List[str]:
    """
    Tipado histórico: si hay override para (especie, gen) y no está vacío, lo
    reemplaza por completo. Si no, filtra los tipos que aún no existían.
    """
    g = check_generation(generation)
    override = TYPING_CHANGES.get((species or "").strip().lower(), {}).get(g)
    if override:
        return list(override)
    return [t for t in default_types if is_type_valid(t, g)]


def generation_for_dex_number(dex_number: int) -> Optional[int]:
    for gen, (start, end) in GENERATION_RANGES.items():
        if start <= dex_number <= end:
            return gen
    return None


def is_version_group_in_generation(version_group: str, generation: int) -> bool:
    return version_group in VERSION_GROUPS.get(generation, [])


def is_version_in_generation(version: str, generation: int) -> bool:
    return version in VERSIONS.get(generation, [])


def format_game_name(version: str) -> str:
    return GAME_NAMES.get(version) or (version[:1].upper() + version[1:])


def game_order_for_generation(generation: int) -> List[str]:
    return [format_game_name(v) for v in VERSIONS.get(generation, [])]


def to_roman(num: int) -> str:
    numerals = [(10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I")]
    out = ""
    for value, sym in numerals:
        while num >= value:
            out += sym
            num -= value
    return out


class GenerationPolicy:
    """Envoltorio con la generación actual; se inyecta en los controllers."""

    def __init__(self, generation: int):
        self.generation = check_generation(generation)

    def valid_types(self) -> List[str]:
        return valid_types(self.generation)

    def types_for_species(self, species: str, default_types: Iterable[str]) -> List[str]:
        return types_for_species(species, self.generation, default_types)

    def is_version_group_in_scope(self, version_group: str) -> bool:
        return is_version_group_in_generation(version_group, self.generation)

    def is_version_in_scope(self, version: str) -> bool:
        return is_version_in_generation(version, self.generation)

    def __repr__(self) -> str:
        return f"GenerationPolicy(generation={self.generation})"
