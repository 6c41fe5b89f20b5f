# poketools/services/matchup.py
from __future__ import annotations

import logging
from typing import List

from ..models.pokemon import PokemonSummary
from ..models.team import MatchupScore, Team
from .types import TypeChart

log = logging.getLogger(__name__)

MAX_REASONS = 3

# puntuación ofensiva por (tipo propio, tipo rival)
SUPER_EFFECTIVE_SCORE = 3
NOT_VERY_EFFECTIVE_SCORE = -1
NO_EFFECT_SCORE = -2
# puntuación defensiva por tipo rival
IMMUNE_SCORE = 4
RESIST_SCORE = 2
WEAK_SCORE = -2


def _dedupe(items: List[str]) -> List[str]:
    seen = set()
    out = []
    for s in items:
        if s not in seen:
            seen.add(s)
            out.append(s)
    return out


def score_member(pokemon: PokemonSummary, slot: int, opponent: PokemonSummary, chart: TypeChart) -> MatchupScore:
    score = 0
    immunity, super_effective, resistance, weakness, other_offense = [], [], [], [], []

    for own in pokemon.types:
        for opp in opponent.types:
            m = chart.effectiveness(own, opp)
            if m > 1:
                score += SUPER_EFFECTIVE_SCORE
                super_effective.append(f"{own} is super effective vs {opp}")
            elif m == 0:
                score += NO_EFFECT_SCORE
                other_offense.append(f"{own} has no effect on {opp}")
            elif m < 1:
                score += NOT_VERY_EFFECTIVE_SCORE
                other_offense.append(f"{own} is not very effective vs {opp}")

    # defensa: OR por pareja de tipos, no producto
    for opp in opponent.types:
        mults = [chart.effectiveness(opp, own) for own in pokemon.types]
        immune = any(m == 0 for m in mults)
        resists = any(0 < m < 1 for m in mults)
        weak = any(m > 1 for m in mults)
        if immune:
            score += IMMUNE_SCORE
            immunity.append(f"Immune to opponent's {opp} attacks")
        elif resists and not weak:
            score += RESIST_SCORE
            resistance.append(f"Resists opponent's {opp} attacks")
        elif weak and not resists:
            score += WEAK_SCORE
            weakness.append(f"Weak to opponent's {opp} attacks")

    reasons = _dedupe(immunity + super_effective + resistance + weakness + other_offense)[:MAX_REASONS]
    return MatchupScore(pokemon=pokemon, slot=slot, score=score, reasons=reasons)


def recommend(team: Team, opponent: PokemonSummary, chart: TypeChart) -> List[MatchupScore]:
    """Puntúa cada miembro contra el rival; orden descendente y estable por slot."""
    scored = [
        score_member(p, slot, opponent, chart)
        for slot, p in enumerate(team.slots)
        if p is not None
    ]
    ranked = sorted(scored, key=lambda r: -r.score)
    log.debug("Matchup vs %s: %s", opponent.name, [(r.pokemon.name, r.score) for r in ranked])
    return ranked
