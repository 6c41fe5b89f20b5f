# poketools/services/evolution.py
"""
Cadenas evolutivas por generación.

PokéAPI devuelve todos los métodos de evolución históricos de una especie
(p.ej. Leafeon: Moss Rock en gen 4-7, Leaf Stone en gen 8+). Aquí se elige el
más adecuado para la generación seleccionada, se traduce a texto legible y se
ocultan las especies que todavía no existían en esa generación.
"""
from __future__ import annotations

import logging
import re
from typing import List, Optional

from ..models.pokemon import EvolutionNode
from ..utils.names import capitalize_first, format_item_name, format_location_name, format_move_name, format_pokemon_name
from .generation import generation_for_dex_number

log = logging.getLogger(__name__)

TRIGGER_PREFERENCES = {
    1: ["level-up", "trade", "use-item"],
    2: ["level-up", "trade", "use-item", "level-up-friendship"],
    3: ["level-up", "trade", "use-item", "level-up-friendship", "level-up-beauty"],
    4: ["level-up", "trade", "use-item", "level-up-friendship", "other"],
    5: ["level-up", "trade", "use-item", "level-up-friendship", "other"],
    6: ["level-up", "trade", "use-item", "level-up-friendship", "other"],
    7: ["level-up", "trade", "use-item", "level-up-friendship", "other"],
    # desde gen 8 se prefieren las piedras
    8: ["use-item", "level-up", "trade", "level-up-friendship", "other"],
    9: ["use-item", "level-up", "trade", "level-up-friendship", "other"],
}

# generación en la que cada lugar especial de evolución es el válido
LOCATION_GENERATIONS = {
    "mt-coronet": 4,
    "chargestone-cave": 5,
    "eterna-forest": 4,
    "pinwheel-forest": 5,
    "route-20": 6,
    "lush-jungle": 7,
    "route-217": 4,
    "twist-mountain": 5,
    "frost-cavern": 6,
    "mount-lanakila": 7,
}

# lugar -> (condición genérica, alternativas por generación)
LOCATION_CONDITIONS = {
    "mt-coronet": ("Special magnetic field", {8: "Use Thunder Stone", 9: "Use Thunder Stone"}),
    "chargestone-cave": ("Special magnetic field", {}),
    "eterna-forest": ("Near Moss Rock", {8: "Use Leaf Stone", 9: "Use Leaf Stone"}),
    "pinwheel-forest": ("Near Moss Rock", {}),
    "route-20": ("Near Moss Rock", {}),
    "lush-jungle": ("Near Moss Rock", {}),
    "route-217": ("Near Ice Rock", {8: "Use Ice Stone", 9: "Use Ice Stone"}),
    "twist-mountain": ("Near Ice Rock", {}),
    "frost-cavern": ("Near Ice Rock", {}),
    "mount-lanakila": ("Near Ice Rock", {}),
}

# evoluciones que PokéAPI documenta solo como trigger "other"
SPECIAL_OTHER_TRIGGERS = {
    "primeape": "Use Rage Fist 20 times, then level up",
    "gimmighoul": "Collect 999 Gimmighoul Coins, then level up",
}

_DEX_ID_RE = re.compile(r"/pokemon-species/(\d+)/?$")


def _name(node) -> Optional[str]:
    return (node or {}).get("name") if isinstance(node, dict) else None


def dex_number_from_url(url: str) -> Optional[int]:
    m = _DEX_ID_RE.search(url or "")
    return int(m.group(1)) if m else None


def select_details_for_generation(details_list: List[dict], generation: int) -> Optional[dict]:
    if not details_list:
        return None
    if len(details_list) == 1:
        return details_list[0]

    prefs = TRIGGER_PREFERENCES.get(generation, TRIGGER_PREFERENCES[9])
    best, best_score = details_list[0], -1
    for details in details_list:
        trigger = _name(details.get("trigger")) or "other"
        location = _name(details.get("location"))
        if location:
            loc_gen = LOCATION_GENERATIONS.get(location)
            if loc_gen == generation:
                score = 200
            elif loc_gen and loc_gen < generation:
                score = 50
            else:
                score = 80
        elif details.get("item") and generation >= 8:
            score = 100
        elif details.get("min_level") and not details.get("item"):
            score = 90
        else:
            score = (len(prefs) - prefs.index(trigger)) * 10 if trigger in prefs else 1

        if details.get("min_happiness") and generation >= 2:
            score += 5
        if details.get("time_of_day") and generation >= 2:
            score += 5
        if details.get("min_beauty") and generation >= 3:
            score += 5
        if details.get("min_affection") and generation >= 6:
            score += 5

        if score > best_score:
            best, best_score = details, score
    return best


def _adjust_location(location: str, requirements: List[str], generation: int) -> List[str]:
    mapping = LOCATION_CONDITIONS.get(location)
    if not mapping:
        return requirements
    condition, alternatives = mapping
    alt = alternatives.get(generation)
    replacement = alt if alt and alt.startswith("Use ") else condition
    return [replacement if req.startswith("At ") else req for req in requirements]


def filter_requirements_for_generation(requirements: List[str], details: dict, generation: int) -> List[str]:
    location = _name(details.get("location"))
    if location:
        return _adjust_location(location, requirements, generation)

    def available(req: str) -> bool:
        if "Affection" in req and generation < 6:
            return False
        if "Beauty" in req and generation < 3:
            return False
        if "Friendship" in req and generation < 2:
            return False
        if "During" in req and generation < 2:
            return False
        return True

    return [r for r in requirements if available(r)]


def evolution_requirements(details: Optional[dict], generation: int, pokemon_name: str = "") -> str:
    """Texto tipo 'Level 16' / 'Use Fire Stone, During Day'; '' si no hay datos."""
    if not details:
        return ""
    reqs: List[str] = []

    if details.get("min_level"):
        reqs.append(f"Level {details['min_level']}")
    if _name(details.get("item")):
        reqs.append(f"Use {format_item_name(details['item']['name'])}")
    happiness = details.get("min_happiness")
    if happiness:
        reqs.append("High Friendship" if happiness >= 220 else f"Friendship {happiness}+")
    if details.get("time_of_day"):
        reqs.append(f"During {capitalize_first(details['time_of_day'])}")
    if _name(details.get("location")):
        reqs.append(f"At {format_location_name(details['location']['name'])}")
    if _name(details.get("known_move")):
        reqs.append(f"Knows {format_move_name(details['known_move']['name'])}")
    if _name(details.get("known_move_type")):
        reqs.append(f"Knows {capitalize_first(details['known_move_type']['name'])}-type move")
    if _name(details.get("held_item")):
        reqs.append(f"Hold {format_item_name(details['held_item']['name'])}")
    if details.get("gender"):
        reqs.append(f"{'Female' if details['gender'] == 1 else 'Male'} only")
    if details.get("min_beauty"):
        reqs.append(f"Beauty {details['min_beauty']}+")
    if details.get("min_affection"):
        reqs.append(f"Affection {details['min_affection']}+")
    if _name(details.get("party_species")):
        reqs.append(f"With {format_pokemon_name(details['party_species']['name'])} in party")
    if _name(details.get("party_type")):
        reqs.append(f"With {capitalize_first(details['party_type']['name'])}-type in party")
    if _name(details.get("trade_species")):
        reqs.append(f"Trade for {format_pokemon_name(details['trade_species']['name'])}")

    trigger = _name(details.get("trigger"))
    if trigger == "other" and pokemon_name in SPECIAL_OTHER_TRIGGERS:
        reqs.append(SPECIAL_OTHER_TRIGGERS[pokemon_name])
    if trigger == "trade":
        if not details.get("held_item") and not details.get("trade_species"):
            reqs.append("Trade")
    elif trigger == "level-up":
        if not details.get("min_level") and not reqs:
            reqs.append("Level up")
    elif trigger == "shed":
        reqs.append("Level up with empty party slot & Pokéball")

    if details.get("needs_overworld_rain"):
        reqs.append("During rain")
    if details.get("turn_upside_down"):
        reqs.append("Turn console upside down")
    rps = details.get("relative_physical_stats")
    if rps is not None:
        reqs.append({1: "Attack > Defense", -1: "Defense > Attack"}.get(rps, "Attack = Defense"))

    return ", ".join(filter_requirements_for_generation(reqs, details, generation))


def _species_in_generation(species: dict, generation: int) -> bool:
    dex = dex_number_from_url(species.get("url", ""))
    if dex is None:
        return True
    intro = generation_for_dex_number(dex)
    return intro is None or intro <= generation


def build_evolution_tree(chain_payload: dict, generation: int, current_name: str = "") -> Optional[EvolutionNode]:
    """Árbol desde /evolution-chain/<id>. None si la especie base no existe en la generación."""
    root = (chain_payload or {}).get("chain")
    if not root:
        return None

    def build(link: dict, parent_name: str) -> Optional[EvolutionNode]:
        species = link.get("species") or {}
        name = species.get("name")
        if not name or not _species_in_generation(species, generation):
            return None
        details_list = link.get("evolution_details") or []
        chosen = select_details_for_generation(details_list, generation)
        node = EvolutionNode(
            species_name=name,
            details=details_list,
            requirements=evolution_requirements(chosen, generation, parent_name),
            is_current=(name == current_name),
        )
        for child in link.get("evolves_to") or []:
            sub = build(child, name)
            if sub is not None:
                node.children.append(sub)
        return node

    tree = build(root, "")
    if tree is None:
        log.debug("Evolution chain base not available in gen %d", generation)
    return tree
