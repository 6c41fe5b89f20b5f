from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .. import config
from ..models.pokemon import AbilityEntry, EvolutionNode, PokemonForm, Species
from ..services.effectiveness import ProfileItem, defensive_profile, offensive_profile
from ..services.evolution import build_evolution_tree
from ..services.forms import parse_varieties
from ..services.generation import GenerationPolicy
from ..services.locations import (
    LocationGroup,
    NullLocationSource,
    SupplementaryLocationSource,
    encounters_for_generation,
)
from ..services.moves import LearnedMove, learnset_for_generation
from ..services.pokeapi_client import PokeApiClient
from ..services.species_provider import english_entry
from ..services.stats import base_stat_total, stat_ranges
from ..services.types import ALL_TYPES, TypeChart, build_type_chart

log = logging.getLogger(__name__)


@dataclass
class LookupResult:
    species: Species
    generation: int
    types: List[str]
    abilities: List[AbilityEntry] = field(default_factory=list)
    defensive: Dict[str, List[ProfileItem]] = field(default_factory=dict)
    offensive: Dict[str, Dict[str, List[ProfileItem]]] = field(default_factory=dict)
    base_stat_total: int = 0
    stat_ranges: Dict[str, Tuple[int, int]] = field(default_factory=dict)
    level_up_moves: List[LearnedMove] = field(default_factory=list)
    machine_moves: List[LearnedMove] = field(default_factory=list)
    evolution: Optional[EvolutionNode] = None
    locations: Dict[str, List[LocationGroup]] = field(default_factory=dict)
    forms: List[PokemonForm] = field(default_factory=list)


class LookupController:
    """Ficha de un solo Pokémon para la generación actual."""

    def __init__(
        self,
        client: PokeApiClient,
        chart: Optional[TypeChart] = None,
        generation: int = config.DEFAULT_GENERATION,
        location_source: Optional[SupplementaryLocationSource] = None,
    ):
        self.client = client
        self._chart = chart
        self.policy = GenerationPolicy(generation)
        self.location_source = location_source or NullLocationSource()
        self._token = 0
        self.current: Optional[LookupResult] = None

    @property
    def chart(self) -> TypeChart:
        # se construye la primera vez que hace falta
        if self._chart is None:
            self._chart = build_type_chart(self.client.get_type_relations, ALL_TYPES)
        return self._chart

    def set_generation(self, generation: int) -> None:
        self.policy = GenerationPolicy(generation)

    def _stale(self, token: int, name: str) -> bool:
        if token != self._token:
            log.debug("Discarding stale lookup of %s", name)
            return True
        return False

    def lookup(self, name: str) -> Optional[LookupResult]:
        """
        Carga todas las secciones de la ficha. Devuelve None si no hay datos del
        Pokémon o si otra consulta empezó antes de terminar esta.
        """
        self._token += 1
        token = self._token
        gen = self.policy.generation

        species = self.client.get_pokemon(name)
        if self._stale(token, name):
            return None
        if species is None:
            log.warning("No data for %s", name)
            return None

        types = self.policy.types_for_species(species.name, species.types)
        result = LookupResult(
            species=species,
            generation=gen,
            types=types,
            abilities=self._abilities(species),
            defensive=defensive_profile(self.chart, types, gen),
            offensive=offensive_profile(self.chart, types, gen),
            base_stat_total=base_stat_total(species.stats),
            stat_ranges=stat_ranges(species.stats),
        )

        result.level_up_moves, result.machine_moves = learnset_for_generation(species, gen, self.client.get_move)
        if self._stale(token, name):
            return None

        species_data = self.client.get_species(species.species_url) if species.species_url else None
        if self._stale(token, name):
            return None
        result.evolution = self._evolution(species_data, species.name, gen)
        result.forms = parse_varieties(species_data, species.name)
        if self._stale(token, name):
            return None

        result.locations = self._locations(species, gen)
        if self._stale(token, name):
            return None

        self.current = result
        return result

    def _abilities(self, species: Species) -> List[AbilityEntry]:
        out = []
        for ability in species.abilities:
            effect = self.client.get_ability(ability.name)
            out.append(AbilityEntry(ability.name, ability.is_hidden, effect or ability.effect))
        return out

    def _evolution(self, species_data: Optional[dict], name: str, generation: int) -> Optional[EvolutionNode]:
        chain_url = ((species_data or {}).get("evolution_chain") or {}).get("url")
        if not chain_url:
            return None
        chain = self.client.get_evolution_chain(chain_url)
        if chain is None:
            return None
        return build_evolution_tree(chain, generation, name)

    def _locations(self, species: Species, generation: int) -> Dict[str, List[LocationGroup]]:
        encounters = self.client.get_encounters(species.id, species.name)
        grouped = encounters_for_generation(encounters, generation)
        if not grouped:
            extra = self.location_source.lookup_supplementary_locations(species.name, generation)
            grouped = encounters_for_generation(extra, generation)
        for groups in grouped.values():
            for group in groups:
                url = next((e.location_area_url for e in group.encounters if e.location_area_url), "")
                if not url:
                    continue
                area = self.client.get_location_area(url)
                english = english_entry((area or {}).get("names"), "name")
                if english:
                    group.location_name = english
        return grouped
