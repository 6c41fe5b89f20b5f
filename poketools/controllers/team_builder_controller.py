from __future__ import annotations

import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .. import config
from ..db import repository
from ..db.base import session_scope
from ..errors import AuthFailure, PokeToolsError, StorageFailure, TeamFullError
from ..models.pokemon import PokemonSummary
from ..models.team import CoverageEntry, MatchupScore, Team
from ..services.auth import AuthSession
from ..services.coverage import team_coverage
from ..services.generation import GenerationPolicy, check_generation
from ..services.matchup import recommend
from ..services.pokeapi_client import PokeApiClient
from ..services.species_provider import filter_names
from ..services.types import ALL_TYPES, TypeChart, build_type_chart
from ..utils.local_state import LocalStateStore

log = logging.getLogger(__name__)


class TeamBuilderController:
    """
    Estado de la sesión del constructor de equipos: equipo de 6 slots, generación
    actual y rival seleccionado. Cobertura y recomendaciones se recalculan desde
    cero en cada llamada.
    """

    def __init__(
        self,
        client: PokeApiClient,
        chart: Optional[TypeChart] = None,
        generation: int = config.DEFAULT_GENERATION,
        state_store: Optional[LocalStateStore] = None,
        auth: Optional[AuthSession] = None,
        session_factory: Optional[sessionmaker] = None,
    ):
        self.client = client
        self._chart = chart
        self.policy = GenerationPolicy(generation)
        self.team = Team()
        self.opponent: Optional[PokemonSummary] = None
        self.state_store = state_store
        self.auth = auth
        self.session_factory = session_factory
        self._default_types: Dict[str, List[str]] = {}
        self._species_names: Optional[List[str]] = None
        self._opponent_token = 0

    @property
    def generation(self) -> int:
        return self.policy.generation

    @property
    def chart(self) -> TypeChart:
        # la tabla se construye una vez, al primer uso, y sirve para cualquier generación
        if self._chart is None:
            self._chart = build_type_chart(self.client.get_type_relations, ALL_TYPES)
        return self._chart

    # ---------- búsqueda / equipo ----------
    def search(self, query: str) -> List[str]:
        if self._species_names is None:
            names = self.client.list_pokemon()
            if not names:
                # no se cachea una lista vacía: se reintenta en la próxima búsqueda
                return []
            self._species_names = names
        return filter_names(self._species_names, query)

    def add_pokemon(self, name: str) -> Optional[int]:
        """Añade al primer slot libre. None si no hay datos del Pokémon."""
        if self.team.is_full:
            raise TeamFullError("Your team is full! Remove a Pokemon first.")
        species = self.client.get_pokemon(name)
        if species is None:
            log.warning("Cannot add %s: no data", name)
            return None
        self._default_types[species.name] = list(species.types)
        summary = species.to_summary(self.policy.types_for_species(species.name, species.types))
        slot = self.team.add(summary)
        log.info("Added %s to slot %d", species.name, slot)
        self.save_local()
        return slot

    def remove_pokemon(self, slot: int) -> Optional[PokemonSummary]:
        removed = self.team.remove(slot)
        if removed is not None:
            log.info("Removed %s from slot %d", removed.name, slot)
            self.save_local()
        return removed

    def _defaults_for(self, pokemon: PokemonSummary) -> List[str]:
        if pokemon.name in self._default_types:
            return self._default_types[pokemon.name]
        species = self.client.get_pokemon(pokemon.name)
        if species is None:
            # sin datos: se conservan los tipos guardados
            return list(pokemon.types)
        self._default_types[species.name] = list(species.types)
        return list(species.types)

    def _adjust_types(self) -> None:
        for i, p in enumerate(self.team.slots):
            if p is None:
                continue
            types = self.policy.types_for_species(p.name, self._defaults_for(p))
            self.team.put(i, p.with_types(types))
        if self.opponent is not None:
            self.opponent = self.opponent.with_types(
                self.policy.types_for_species(self.opponent.name, self._defaults_for(self.opponent))
            )

    def set_generation(self, generation: int) -> None:
        self.policy = GenerationPolicy(generation)
        self._adjust_types()
        log.info("Generation set to %d", self.generation)
        self.save_local()

    def reset(self) -> None:
        if self.state_store is not None:
            self.state_store.clear()
        self.team.clear()
        self.opponent = None
        self.policy = GenerationPolicy(config.DEFAULT_GENERATION)
        log.info("Team reset")

    # ---------- análisis ----------
    def coverage(self) -> Dict[str, CoverageEntry]:
        return team_coverage(self.team, self.generation, self.chart)

    def select_opponent(self, name: str) -> Optional[List[MatchupScore]]:
        """
        Carga el rival y devuelve el ranking del equipo. Si mientras tanto se
        seleccionó otro rival, el resultado se descarta y se devuelve None.
        """
        self._opponent_token += 1
        token = self._opponent_token
        species = self.client.get_pokemon(name)
        if token != self._opponent_token:
            log.debug("Discarding stale opponent response for %s", name)
            return None
        if species is None:
            log.warning("Cannot select opponent %s: no data", name)
            self.opponent = None
            return []
        self._default_types[species.name] = list(species.types)
        self.opponent = species.to_summary(self.policy.types_for_species(species.name, species.types))
        return self.recommendations()

    def recommendations(self) -> List[MatchupScore]:
        if self.opponent is None or self.team.is_empty:
            return []
        return recommend(self.team, self.opponent, self.chart)

    # ---------- persistencia local ----------
    def save_local(self) -> bool:
        if self.state_store is None:
            return False
        return self.state_store.save(self.team, self.generation)

    def restore_local(self) -> bool:
        if self.state_store is None:
            return False
        loaded = self.state_store.load()
        if loaded is None:
            return False
        team, generation = loaded
        self.team = team
        if generation is not None:
            try:
                self.policy = GenerationPolicy(generation)
            except (TypeError, ValueError) as exc:
                log.warning("Ignoring saved generation %r: %s", generation, exc)
        return True

    # ---------- equipos en la nube ----------
    def _store_call(self, fn, *args):
        try:
            with session_scope(self.session_factory) as s:
                return fn(s, *args)
        except SQLAlchemyError as exc:
            log.error("Team store error in %s: %s", fn.__name__, exc)
            raise StorageFailure(str(exc)) from exc

    def _require_user(self, action: str):
        if self.auth is None:
            raise AuthFailure(f"User must be authenticated to {action}")
        return self.auth.require_user(action)

    def save_team(self) -> str:
        user = self._require_user("save teams")
        if self.team.is_empty:
            raise PokeToolsError("Add at least one Pokemon to your team before saving.")
        team_id = self._store_call(repository.save_team, user, self.team, self.generation)
        log.info("Team saved: %s", team_id)
        return team_id

    def saved_teams(self) -> List[dict]:
        user = self._require_user("load teams")
        return self._store_call(repository.load_teams, user.uid)

    def load_team(self, team_id: str) -> bool:
        for snap in self.saved_teams():
            if snap["teamId"] != team_id:
                continue
            self.team = Team.from_list(snap["pokemon"])
            self.policy = GenerationPolicy(check_generation(snap["generation"] or config.DEFAULT_GENERATION))
            self.opponent = None
            self.save_local()
            log.info("Team loaded: %s", team_id)
            return True
        log.warning("Team %s not found", team_id)
        return False

    def delete_team(self, team_id: str) -> bool:
        user = self._require_user("delete teams")
        deleted = self._store_call(repository.delete_team, user.uid, team_id)
        return deleted > 0

    def delete_account_data(self) -> None:
        user = self._require_user("delete account data")
        self._store_call(repository.delete_all_user_data, user.uid)
        if self.state_store is not None:
            self.state_store.clear()
        self.auth.sign_out()
        log.info("All data deleted for user %s", user.uid)
