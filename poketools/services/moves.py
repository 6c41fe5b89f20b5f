# poketools/services/moves.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import MissingData
from ..models.pokemon import MoveDetail, Species
from .generation import is_version_group_in_generation
from .species_provider import english_entry
from .types import ALL_TYPES

log = logging.getLogger(__name__)

MAX_EFFECT_LENGTH = 120


@dataclass
class LearnedMove:
    move: MoveDetail
    method: str
    level: int = 0

    @property
    def short_effect(self) -> str:
        text = self.move.effect or "No effect description available"
        if len(text) > MAX_EFFECT_LENGTH:
            return text[:MAX_EFFECT_LENGTH] + "..."
        return text


def parse_move(data: dict) -> MoveDetail:
    if not data or not data.get("name"):
        raise MissingData("Move payload without 'name'")
    effect = (
        english_entry(data.get("effect_entries"), "short_effect", "effect")
        or english_entry(data.get("flavor_text_entries"), "flavor_text")
        or "No effect description available"
    )
    return MoveDetail(
        name=data["name"],
        type=(data.get("type") or {}).get("name") or "normal",
        power=data.get("power"),
        accuracy=data.get("accuracy"),
        pp=data.get("pp"),
        category=(data.get("damage_class") or {}).get("name") or "status",
        effect=effect,
    )


def sort_machine_moves(moves: List[LearnedMove]) -> List[LearnedMove]:
    """Status al final; luego por tipo (orden de ALL_TYPES), potencia y nombre."""
    def key(lm: LearnedMove):
        is_status = lm.move.category == "status"
        try:
            type_idx = ALL_TYPES.index(lm.move.type)
        except ValueError:
            type_idx = len(ALL_TYPES)
        power = 0 if is_status else (lm.move.power or 0)
        return (is_status, type_idx, power, lm.move.name)
    return sorted(moves, key=key)


def learnset_for_generation(
    pokemon: Species,
    generation: int,
    fetch_move: Callable[[str], Optional[MoveDetail]],
) -> Tuple[List[LearnedMove], List[LearnedMove]]:
    """(movimientos por nivel, MT/MO) aprendibles en los juegos de la generación."""
    level_up: Dict[str, LearnedMove] = {}
    machines: Dict[str, LearnedMove] = {}

    for entry in pokemon.moves:
        details = [d for d in entry.details if is_version_group_in_generation(d.version_group, generation)]
        if not details:
            continue
        move = fetch_move(entry.url)
        if move is None:
            log.warning("Skipping move %s (no data)", entry.name)
            continue
        for d in details:
            if d.method == "level-up":
                # nos quedamos con el nivel más bajo
                prev = level_up.get(move.name)
                if prev is None or prev.level > d.level:
                    level_up[move.name] = LearnedMove(move, d.method, d.level)
            elif d.method == "machine":
                machines.setdefault(move.name, LearnedMove(move, d.method, d.level))

    by_level = sorted(level_up.values(), key=lambda lm: lm.level)
    return by_level, sort_machine_moves(list(machines.values()))
