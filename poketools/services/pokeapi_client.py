# poketools/services/pokeapi_client.py
from __future__ import annotations

import logging
import os
from typing import List, Optional

import requests

from .. import config
from ..errors import MissingData, NetworkFailure
from ..models.pokemon import LocationEncounter, MoveDetail, Species, TypeRelations
from ..utils.cache import ResponseCache
from ..utils.names import to_pokeapi_slug
from .locations import parse_encounters
from .moves import parse_move
from .species_provider import ability_effect, parse_pokemon, parse_type_relations

log = logging.getLogger(__name__)


class PokeApiClient:
    """
    Acceso de solo lectura a PokéAPI. Todas las respuestas pasan por un
    ResponseCache inyectado (clave = URL). Ningún fallo de red sale de aquí:
    se registra y se devuelve None / lista vacía.
    """

    def __init__(
        self,
        base_url: str = config.POKEAPI_BASE_URL,
        timeout: float = config.HTTP_TIMEOUT,
        session: Optional[requests.Session] = None,
        cache: Optional[ResponseCache] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if cache is None:
            path = os.path.join(config.CACHE_DIR, "pokeapi_cache.json") if config.CACHE_DIR else None
            cache = ResponseCache(path)
        self.cache = cache

    # ---------- HTTP ----------
    def _url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def _get_json(self, url: str):
        try:
            r = self.session.get(url, timeout=self.timeout)
            r.raise_for_status()
            return r.json()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise NetworkFailure(url, status=status) from exc
        except requests.RequestException as exc:
            raise NetworkFailure(url, reason=str(exc)) from exc
        except ValueError as exc:
            raise NetworkFailure(url, reason=f"invalid JSON: {exc}") from exc

    def fetch(self, path: str, cache_failures: bool = False):
        """
        GET con cache. Devuelve el JSON o None si falló.
        Con cache_failures solo se recuerda el 404; timeouts, errores de
        conexión y 5xx se reintentan en la siguiente llamada.
        """
        url = self._url(path)
        if url in self.cache:
            return self.cache.get(url)
        try:
            data = self._get_json(url)
        except NetworkFailure as exc:
            if exc.is_not_found:
                # 404 es esperable (formas inexistentes)
                log.debug("Not found: %s", url)
                if cache_failures:
                    self.cache.set(url, None)
            else:
                log.warning("Fetch failed: %s", exc)
            return None
        self.cache.set(url, data)
        return data

    # ---------- Endpoints ----------
    def list_pokemon(self, limit: int = 1000) -> List[str]:
        data = self.fetch(f"pokemon?limit={limit}")
        if not data:
            return []
        return [r["name"] for r in data.get("results") or [] if r.get("name")]

    def get_pokemon(self, name_or_id) -> Optional[Species]:
        key = str(name_or_id) if isinstance(name_or_id, int) else to_pokeapi_slug(str(name_or_id))
        data = self.fetch(f"pokemon/{key}", cache_failures=True)
        if data is None:
            return None
        try:
            return parse_pokemon(data)
        except MissingData as exc:
            log.warning("Discarding pokemon %s: %s", key, exc)
            return None

    def get_type_relations(self, type_name: str) -> Optional[TypeRelations]:
        data = self.fetch(f"type/{type_name.lower()}")
        if data is None:
            return None
        return parse_type_relations(data)

    def get_species(self, species_url: str) -> Optional[dict]:
        return self.fetch(species_url)

    def get_evolution_chain(self, evolution_url: str) -> Optional[dict]:
        return self.fetch(evolution_url)

    def get_location_area(self, location_area_url: str) -> Optional[dict]:
        return self.fetch(location_area_url)

    def get_encounters(self, pokemon_id: int, name: Optional[str] = None) -> List[LocationEncounter]:
        data = self.fetch(f"pokemon/{pokemon_id}/encounters")
        # sin datos por id: probar por nombre
        if not data and name:
            data = self.fetch(f"pokemon/{to_pokeapi_slug(name)}/encounters")
        return parse_encounters(data or [])

    def get_move(self, move_url: str) -> Optional[MoveDetail]:
        data = self.fetch(move_url)
        if data is None:
            return None
        try:
            return parse_move(data)
        except MissingData as exc:
            log.warning("Discarding move %s: %s", move_url, exc)
            return None

    def get_ability(self, name: str) -> Optional[str]:
        """Descripción en inglés de la habilidad, o None si no hay datos."""
        data = self.fetch(f"ability/{to_pokeapi_slug(name)}")
        if data is None:
            return None
        return ability_effect(data) or None
