# poketools/services/coverage.py
"""Cobertura del equipo: para cada tipo de la generación, qué miembros lo manejan
(ofensiva + defensivamente) y con qué nivel: none < weak < normal < strong."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..models.pokemon import PokemonSummary
from ..models.team import CoverageEntry, CoverageMember, Team
from .effectiveness import dual_type_defense, multiplier_text
from .generation import valid_types
from .types import TypeChart

log = logging.getLogger(__name__)

LEVELS = ("none", "weak", "normal", "strong")
LABELS = {"none": "None", "weak": "Weak", "normal": "Normal", "strong": "Strong"}

# recorte solo para mostrar; la lista subyacente no se recorta
MAX_DISPLAY_REASONS = 2


def classify_member(chart: TypeChart, pokemon: PokemonSummary, target_type: str) -> tuple[Optional[str], List[str]]:
    """Devuelve (nivel, razones) de un miembro frente a target_type; nivel None = irrelevante."""
    defense = dual_type_defense(chart, target_type, pokemon.types)

    super_effective: List[str] = []
    weak_offense: List[str] = []
    for own in pokemon.types:
        m = chart.effectiveness(own, target_type)
        if m > 1:
            super_effective.append(f"{own} attacks are super effective vs {target_type}")
        elif m == 0:
            weak_offense.append(f"{own} attacks have no effect on {target_type}")
        elif m < 1:
            weak_offense.append(f"{own} attacks are not very effective vs {target_type}")

    reasons: List[str] = []
    if defense.is_immune:
        reasons.append(f"Immune to {target_type}")
    reasons.extend(super_effective)
    if defense.resists:
        reasons.append(f"Resists {target_type} ({multiplier_text(defense.multiplier)})")
    if defense.is_weak:
        reasons.append(f"Weak to {target_type} ({multiplier_text(defense.multiplier)})")
    reasons.extend(weak_offense)

    if defense.is_immune or (super_effective and defense.multiplier < 1):
        level = "strong"
    elif super_effective or defense.multiplier < 1:
        level = "normal"
    elif reasons:
        level = "weak"
    else:
        level = None
    return level, reasons


def team_coverage(team: Team, generation: int, chart: TypeChart) -> Dict[str, CoverageEntry]:
    coverage: Dict[str, CoverageEntry] = {}
    members = team.members()
    for target in valid_types(generation):
        entry = CoverageEntry(type=target)
        for pokemon in members:
            level, reasons = classify_member(chart, pokemon, target)
            if level is None:
                continue
            rank, current = LEVELS.index(level), LEVELS.index(entry.effectiveness)
            if rank > current:
                # sube de nivel: se descartan los miembros del nivel anterior
                entry.effectiveness = level
                entry.label = LABELS[level]
                entry.members = [CoverageMember(pokemon, level, reasons)]
            elif rank == current:
                entry.members.append(CoverageMember(pokemon, level, reasons))
        coverage[target] = entry
    log.debug("Coverage computed for %d members over %d types (gen %d)", len(members), len(coverage), generation)
    return coverage


def display_reasons(member: CoverageMember, limit: int = MAX_DISPLAY_REASONS) -> List[str]:
    return member.reasons[:limit]
