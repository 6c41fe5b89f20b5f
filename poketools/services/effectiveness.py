# poketools/services/effectiveness.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from .generation import valid_types
from .types import TypeChart


@dataclass
class DefenseResult:
    multiplier: float = 1.0
    is_immune: bool = False
    resisting_type_count: int = 0

    @property
    def resists(self) -> bool:
        return not self.is_immune and self.multiplier < 1

    @property
    def is_weak(self) -> bool:
        return self.multiplier > 1


def dual_type_defense(chart: TypeChart, attack_type: str, defender_types: Iterable[str]) -> DefenseResult:
    """Multiplicador recibido por un defensor de 1 o 2 tipos. Una inmunidad anula todo."""
    res = DefenseResult()
    for dt in defender_types:
        if res.is_immune:
            break
        m = chart.effectiveness(attack_type, dt)
        if m == 0:
            res.is_immune = True
            res.multiplier = 0.0
            continue
        res.multiplier *= m
        if m < 1:
            res.resisting_type_count += 1
    return res


def is_super_effective(chart: TypeChart, attacker_type: str, target_type: str) -> bool:
    return chart.effectiveness(attacker_type, target_type) > 1


def multiplier_text(mult: float) -> str:
    if mult == 0:
        return "0×"
    if mult == 0.25:
        return "¼×"
    if mult == 0.5:
        return "½×"
    if mult == 1:
        return "1×"
    if mult == 4:
        return "4×"
    if mult == 2:
        return "2×"
    return f"{mult:g}×"


@dataclass
class ProfileItem:
    type: str
    multiplier: float

    @property
    def text(self) -> str:
        return multiplier_text(self.multiplier)


DEFENSE_GROUPS = ("weak", "normal", "resistant", "immune")
OFFENSE_GROUPS = ("super_effective", "normal", "not_very_effective", "no_effect")


def defensive_profile(chart: TypeChart, defender_types: List[str], generation: int) -> Dict[str, List[ProfileItem]]:
    """Agrupa los tipos atacantes de la generación por el daño que recibe el Pokémon."""
    groups: Dict[str, List[ProfileItem]] = {g: [] for g in DEFENSE_GROUPS}
    for attack_type in valid_types(generation):
        mult = 1.0
        for dt in defender_types:
            mult *= chart.effectiveness(attack_type, dt)
        item = ProfileItem(attack_type, mult)
        if mult == 0:
            groups["immune"].append(item)
        elif mult < 1:
            groups["resistant"].append(item)
        elif mult == 1:
            groups["normal"].append(item)
        else:
            groups["weak"].append(item)
    return groups


def offensive_profile(chart: TypeChart, attacker_types: List[str], generation: int) -> Dict[str, Dict[str, List[ProfileItem]]]:
    """Por cada tipo propio: contra qué tipos pega 2x / 1x / ½x / 0x."""
    out: Dict[str, Dict[str, List[ProfileItem]]] = {}
    for own in attacker_types:
        groups: Dict[str, List[ProfileItem]] = {g: [] for g in OFFENSE_GROUPS}
        for target in valid_types(generation):
            m = chart.effectiveness(own, target)
            item = ProfileItem(target, m)
            if m == 0:
                groups["no_effect"].append(item)
            elif m > 1:
                groups["super_effective"].append(item)
            elif m < 1:
                groups["not_very_effective"].append(item)
            else:
                groups["normal"].append(item)
        out[own] = groups
    return out
