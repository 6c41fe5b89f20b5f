# poketools/utils/local_state.py
from __future__ import annotations

import json
import logging
import os
from typing import Optional, Tuple

from ..errors import StorageFailure
from ..models.team import Team

log = logging.getLogger(__name__)


class LocalStateStore:
    """Snapshot clave-valor del equipo y la generación para continuar la sesión."""

    def __init__(self, path: str, key: str = "poketools-data", user_key: str = "poketools-user"):
        self.path = path
        self.key = key
        self.user_key = user_key

    def _read_all(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f) or {}
        except (OSError, ValueError) as exc:
            raise StorageFailure(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageFailure(f"Unexpected content in {self.path}")
        return data

    def _write_all(self, data: dict) -> None:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
        except (OSError, TypeError) as exc:
            raise StorageFailure(f"Cannot write {self.path}: {exc}") from exc

    def save(self, team: Team, generation: int) -> bool:
        try:
            data = self._read_all()
        except StorageFailure as exc:
            log.warning("Overwriting unreadable local state: %s", exc)
            data = {}
        data[self.key] = {"team": team.to_list(), "generation": generation}
        try:
            self._write_all(data)
        except StorageFailure as exc:
            log.error("Failed to save local state: %s", exc)
            return False
        return True

    def load(self) -> Optional[Tuple[Team, Optional[int]]]:
        """(equipo, generación) o None si no hay estado guardado o no se puede leer."""
        try:
            node = self._read_all().get(self.key)
            if not node:
                return None
            return Team.from_list(node.get("team") or []), node.get("generation")
        except (StorageFailure, AttributeError, TypeError, ValueError) as exc:
            log.error("Failed to load local state: %s", exc)
            return None

    def clear(self) -> None:
        try:
            data = self._read_all()
            if data.pop(self.key, None) is not None:
                self._write_all(data)
        except StorageFailure as exc:
            log.error("Failed to clear local state: %s", exc)

    # ---------- sesión ----------
    def remember_user(self, uid: str) -> bool:
        try:
            data = self._read_all()
        except StorageFailure as exc:
            log.warning("Overwriting unreadable local state: %s", exc)
            data = {}
        if data.get(self.user_key) == uid:
            return True
        data[self.user_key] = uid
        try:
            self._write_all(data)
        except StorageFailure as exc:
            log.error("Failed to remember session: %s", exc)
            return False
        return True

    def remembered_user(self) -> Optional[str]:
        try:
            uid = self._read_all().get(self.user_key)
        except StorageFailure as exc:
            log.error("Failed to read saved session: %s", exc)
            return None
        return uid if isinstance(uid, str) and uid else None

    def forget_user(self) -> None:
        try:
            data = self._read_all()
            if data.pop(self.user_key, None) is not None:
                self._write_all(data)
        except StorageFailure as exc:
            log.error("Failed to forget session: %s", exc)
