# poketools/services/forms.py
"""Formas alternativas y regionales de una especie (campo `varieties`)."""
from __future__ import annotations

import re
from typing import List, Optional

from ..models.pokemon import PokemonForm
from ..utils.names import capitalize_first, format_pokemon_name

# sufijo -> adjetivo regional
REGIONAL_SUFFIXES = {
    "alola": "Alolan",
    "galar": "Galarian",
    "hisui": "Hisuian",
    "paldea": "Paldean",
}

# adjetivo de la forma base según la generación en que debutó la especie
REGIONAL_ADJECTIVES = {
    1: "Kantonian",
    2: "Johtonian",
    3: "Hoennian",
    4: "Sinnohan",
    5: "Unovan",
    6: "Kalosian",
    7: "Alolan",
    8: "Galarian",
    9: "Paldean",
}

EXACT_FORM_LABELS = {
    "eiscue-ice": "Ice Face",
    "eiscue-noice": "Noice Face",
    "meowstic": "Male",
    "wormadam-plant": "Plant Cloak",
    "wormadam-sandy": "Sandy Cloak",
    "wormadam-trash": "Trash Cloak",
    "rotom": "Normal",
    "castform": "Normal",
    "deoxys-normal": "Normal",
    "kyurem": "Normal",
    "zygarde": "50%",
    "zygarde-50": "50%",
    "zygarde-10": "10%",
    "oricorio-baile": "Baile Style",
    "oricorio-pom-pom": "Pom-Pom Style",
    "oricorio-pau": "Pa'u Style",
    "oricorio-sensu": "Sensu Style",
    "necrozma": "Normal",
    "necrozma-dusk": "Dusk Mane",
    "necrozma-dawn": "Dawn Wings",
    "calyrex": "Normal",
    "calyrex-ice": "Ice Rider",
    "calyrex-shadow": "Shadow Rider",
}

HIDDEN_FORM_MARKERS = ("-mega", "-totem", "-gmax")

_ROMAN = {"i": 1, "ii": 2, "iii": 3, "iv": 4, "v": 5, "vi": 6, "vii": 7, "viii": 8, "ix": 9}
_GEN_URL_RE = re.compile(r"/generation/(\d+)/?$")


def regional_suffix(name: str) -> Optional[str]:
    n = (name or "").lower()
    for key in REGIONAL_SUFFIXES:
        if f"-{key}" in n:
            return key
    return None


def generation_from_species(species_data: dict) -> Optional[int]:
    node = (species_data or {}).get("generation") or {}
    m = _GEN_URL_RE.search(node.get("url") or "")
    if m:
        return int(m.group(1))
    gen_name = node.get("name") or ""
    if gen_name.startswith("generation-"):
        return _ROMAN.get(gen_name[len("generation-"):])
    return None


def _has_regional_forms(species_data: dict) -> bool:
    return any(regional_suffix(name) for name in variety_names(species_data))


def variety_names(species_data: dict) -> List[str]:
    out = []
    for v in (species_data or {}).get("varieties") or []:
        name = (v.get("pokemon") or {}).get("name")
        if name:
            out.append(name.lower())
    return out


def format_form_name(name: str, species_data: Optional[dict] = None) -> str:
    """
    Etiqueta corta de una forma: 'raichu-alola' -> 'Alolan',
    'rotom-wash' -> 'Wash'. La forma base de una especie con variantes
    regionales recibe el adjetivo de su región de origen ('Kantonian').
    """
    n = (name or "").lower()
    if n in EXACT_FORM_LABELS:
        return EXACT_FORM_LABELS[n]
    if n.endswith("-male"):
        return "Male"
    if n.endswith("-female"):
        return "Female"

    if n.startswith("darmanitan-"):
        mode = "Zen" if "-zen" in n else "Standard"
        return f"Galarian {mode}" if "-galar" in n else mode

    region = regional_suffix(n)
    if region:
        return REGIONAL_SUFFIXES[region]
    if species_data and _has_regional_forms(species_data):
        adjective = REGIONAL_ADJECTIVES.get(generation_from_species(species_data))
        if adjective:
            return adjective

    if "-" in n:
        return " ".join(capitalize_first(p) for p in n.split("-")[1:])
    return format_pokemon_name(n)


def parse_varieties(species_data: dict, current_name: str = "") -> List[PokemonForm]:
    """
    Formas que merece la pena listar (sin megas, totems ni gigamax). Vacío si
    solo queda una.
    """
    current = (current_name or "").lower()
    forms = []
    for v in (species_data or {}).get("varieties") or []:
        name = ((v.get("pokemon") or {}).get("name") or "").lower()
        if not name or any(marker in name for marker in HIDDEN_FORM_MARKERS):
            continue
        forms.append(PokemonForm(
            name=name,
            label=format_form_name(name, species_data),
            is_default=bool(v.get("is_default")),
            is_current=name == current,
        ))
    return forms if len(forms) > 1 else []
