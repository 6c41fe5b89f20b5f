# poketools/errors.py
from __future__ import annotations


class PokeToolsError(Exception):
    """Raíz de todos los errores propios de poketools."""


class NetworkFailure(PokeToolsError):
    """Un fetch lanzó una excepción o devolvió un status no exitoso."""

    def __init__(self, url: str, status: int | None = None, reason: str = ""):
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"HTTP {status}" if status is not None else (reason or "request failed")
        super().__init__(f"{detail} for {url}")

    @property
    def is_not_found(self) -> bool:
        return self.status == 404


class MissingData(PokeToolsError):
    """Falta un campo obligatorio en la respuesta de la API."""


class AuthFailure(PokeToolsError):
    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code
        super().__init__(message)


class StorageFailure(PokeToolsError):
    """Lectura/escritura de persistencia local o del team store fallida."""


class TeamFullError(PokeToolsError):
    pass
