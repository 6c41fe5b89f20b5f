# poketools/utils/cache.py
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

log = logging.getLogger(__name__)

_MISSING = object()

FLUSH_EVERY = 50


class ResponseCache:
    """
    Cache clave -> respuesta JSON. En memoria; si se da json_path, también se
    persiste en disco para no golpear PokéAPI en cada arranque.
    Un valor None es válido (fallo ya conocido, no reintentar) pero solo vive
    en memoria: nunca se escribe al fichero.
    Las escrituras a disco se agrupan: cada `flush_every` cambios o al llamar
    a flush().
    """

    def __init__(self, json_path: Optional[str] = None, flush_every: int = FLUSH_EVERY):
        self.json_path = json_path
        self.flush_every = max(1, flush_every)
        self._data: Optional[Dict[str, Any]] = None
        self._pending = 0

    def _load(self) -> Dict[str, Any]:
        if self._data is not None:
            return self._data
        data: Dict[str, Any] = {}
        if self.json_path and os.path.exists(self.json_path):
            try:
                with open(self.json_path, "r", encoding="utf-8") as f:
                    data = json.load(f) or {}
            except (OSError, ValueError) as exc:
                log.warning("Ignoring unreadable cache %s: %s", self.json_path, exc)
                data = {}
        self._data = data
        return data

    def __contains__(self, key: str) -> bool:
        return key in self._load()

    def __len__(self) -> int:
        return len(self._load())

    @property
    def pending(self) -> int:
        return self._pending

    def get(self, key: str, default: Any = None) -> Any:
        value = self._load().get(key, _MISSING)
        return default if value is _MISSING else value

    def set(self, key: str, value: Any) -> None:
        self._load()[key] = value
        if value is None or not self.json_path:
            return
        self._pending += 1
        if self._pending >= self.flush_every:
            self.flush()

    def flush(self) -> bool:
        """Vuelca a disco las entradas no nulas. True si no queda nada pendiente."""
        if not self.json_path or not self._pending:
            return True
        payload = {k: v for k, v in self._load().items() if v is not None}
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self.json_path)), exist_ok=True)
            with open(self.json_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
        except (OSError, TypeError) as exc:
            log.warning("Could not write cache %s: %s", self.json_path, exc)
            return False
        log.debug("Cache flushed: %d entries -> %s", len(payload), self.json_path)
        self._pending = 0
        return True

    def clear(self) -> None:
        self._data = {}
        self._pending = 0
