# poketools/utils/names.py
from __future__ import annotations

import re

# formas sin sufijo explícito en PokéAPI
NAME_ONLY_CASES = {
    "lycanroc": "lycanroc-midday",
    "basculegion": "basculegion-male",
    "oinkologne": "oinkologne-male",
    "indeedee": "indeedee-male",
    "maushold": "maushold-family-of-four",
    "tauros-paldea": "tauros-paldea-combat-breed",
    "mimikyu": "mimikyu-disguised",
    "toxtricity": "toxtricity-amped",
    "urshifu": "urshifu-single-strike",
}


def ascii_slug(s: str) -> str:
    s = (s or "").strip().lower()
    s = s.replace("♀", "-f").replace("♂", "-m")
    s = s.replace(".", "").replace("'", "").replace("’", "").replace(":", "").replace(" ", "-")
    s = (s.replace("é", "e").replace("á", "a").replace("í", "i").replace("ó", "o").replace("ú", "u"))
    s = re.sub(r"[^a-z0-9\-]", "", s)
    s = re.sub(r"-+", "-", s)
    return s.strip("-")


def to_pokeapi_slug(name: str) -> str:
    slug = ascii_slug(name)
    return NAME_ONLY_CASES.get(slug, slug)


def capitalize_first(s: str) -> str:
    return s[:1].upper() + s[1:] if s else s


def capitalize_words(s: str) -> str:
    return " ".join(capitalize_first(w) for w in (s or "").split(" "))


def format_slug(slug: str) -> str:
    """'thunder-stone' -> 'Thunder Stone'"""
    return capitalize_words((slug or "").replace("-", " "))


format_item_name = format_slug
format_location_name = format_slug
format_move_name = format_slug


def format_pokemon_name(name: str) -> str:
    n = (name or "").strip().lower()
    specials = {
        "mr-mime": "Mr. Mime",
        "mime-jr": "Mime Jr.",
        "farfetchd": "Farfetch'd",
        "nidoran-f": "Nidoran♀",
        "nidoran-m": "Nidoran♂",
        "type-null": "Type: Null",
        "ho-oh": "Ho-Oh",
        "porygon-z": "Porygon-Z",
    }
    if n in specials:
        return specials[n]
    return format_slug(n)
