# poketools/services/auth.py
from __future__ import annotations

import hashlib
import hmac
import logging
import os
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from ..errors import AuthFailure

log = logging.getLogger(__name__)

# códigos del proveedor -> mensaje para el usuario
ERROR_MESSAGES = {
    "auth/unauthorized-domain": "This domain is not authorized. Please contact the site administrator.",
    "auth/popup-blocked": "Popup was blocked by your browser. Please allow popups for this site and try again.",
    "auth/popup-closed-by-user": "Sign-in popup was closed. Please try again.",
    "auth/network-request-failed": "Network error. Please check your internet connection and try again.",
    "auth/user-not-found": "No account found with this email address.",
    "auth/wrong-password": "Incorrect password. Please try again.",
    "auth/invalid-email": "Invalid email address.",
    "auth/user-disabled": "This account has been disabled.",
    "auth/email-already-in-use": "An account with this email already exists. Please sign in instead.",
    "auth/weak-password": "Password is too weak. Please use at least 6 characters.",
    "auth/operation-not-allowed": "This sign-in method is not enabled.",
}


@dataclass(frozen=True)
class AuthUser:
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None


class AuthProviderError(Exception):
    def __init__(self, code: str, message: str = ""):
        self.code = code
        super().__init__(message or code)


class AuthBackend(Protocol):
    def sign_in(self, provider: str, **credentials) -> AuthUser: ...

    def sign_up(self, email: str, password: str) -> AuthUser: ...

    def sign_out(self, user: AuthUser) -> None: ...

    def get_user(self, uid: str) -> Optional[AuthUser]: ...


MIN_PASSWORD_LENGTH = 6
PBKDF2_ITERATIONS = 200_000


def hash_password(password: str, salt: Optional[bytes] = None) -> Tuple[str, str]:
    """(salt, hash) en hex. Sal aleatoria por cuenta si no se da una."""
    salt = salt if salt is not None else os.urandom(16)
    digest = hashlib.pbkdf2_hmac("sha256", (password or "").encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return salt.hex(), digest.hex()


def verify_password(password: str, salt_hex: str, expected_hex: str) -> bool:
    try:
        salt = bytes.fromhex(salt_hex or "")
    except ValueError:
        return False
    _, digest = hash_password(password, salt)
    return hmac.compare_digest(digest, expected_hex or "")


def normalize_email(email: str) -> str:
    email = (email or "").strip().lower()
    if "@" not in email:
        raise AuthProviderError("auth/invalid-email")
    return email


def check_new_password(password: str) -> None:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise AuthProviderError("auth/weak-password")


class LocalAuthBackend:
    """Cuentas email/contraseña en memoria; para uso local y tests."""

    def __init__(self):
        # email -> (sal, hash, usuario)
        self._accounts: Dict[str, Tuple[str, str, AuthUser]] = {}

    def sign_up(self, email: str, password: str) -> AuthUser:
        email = normalize_email(email)
        if email in self._accounts:
            raise AuthProviderError("auth/email-already-in-use")
        check_new_password(password)
        user = AuthUser(uid=uuid.uuid4().hex, email=email, display_name=email.split("@")[0])
        salt, pw_hash = hash_password(password)
        self._accounts[email] = (salt, pw_hash, user)
        return user

    def sign_in(self, provider: str, **credentials) -> AuthUser:
        if provider != "password":
            raise AuthProviderError("auth/operation-not-allowed")
        email = normalize_email(credentials.get("email"))
        account = self._accounts.get(email)
        if account is None:
            raise AuthProviderError("auth/user-not-found")
        salt, pw_hash, user = account
        if not verify_password(credentials.get("password") or "", salt, pw_hash):
            raise AuthProviderError("auth/wrong-password")
        return user

    def sign_out(self, user: AuthUser) -> None:
        return None

    def get_user(self, uid: str) -> Optional[AuthUser]:
        return next((user for _, _, user in self._accounts.values() if user.uid == uid), None)


class AuthSession:
    """Sesión actual + suscriptores a los cambios de estado."""

    def __init__(self, backend: AuthBackend):
        self.backend = backend
        self._user: Optional[AuthUser] = None
        self._listeners: List[Callable[[Optional[AuthUser]], None]] = []

    def current_user(self) -> Optional[AuthUser]:
        return self._user

    def on_auth_state_change(self, callback: Callable[[Optional[AuthUser]], None]) -> Callable[[], None]:
        self._listeners.append(callback)
        callback(self._user)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    def _set_user(self, user: Optional[AuthUser]) -> None:
        self._user = user
        for cb in list(self._listeners):
            cb(user)

    @staticmethod
    def _failure(exc: AuthProviderError) -> AuthFailure:
        return AuthFailure(ERROR_MESSAGES.get(exc.code, str(exc)), code=exc.code)

    def sign_in(self, provider: str = "password", **credentials) -> AuthUser:
        try:
            user = self.backend.sign_in(provider, **credentials)
        except AuthProviderError as exc:
            log.error("Login failed (%s): %s", provider, exc.code)
            raise self._failure(exc) from exc
        log.info("User logged in: %s", user.uid)
        self._set_user(user)
        return user

    def sign_up(self, email: str, password: str) -> AuthUser:
        try:
            user = self.backend.sign_up(email, password)
        except AuthProviderError as exc:
            log.error("Signup failed: %s", exc.code)
            raise self._failure(exc) from exc
        self._set_user(user)
        return user

    def sign_out(self) -> None:
        if self._user is None:
            return
        try:
            self.backend.sign_out(self._user)
        except AuthProviderError as exc:
            log.error("Logout failed: %s", exc.code)
            raise self._failure(exc) from exc
        log.info("User logged out")
        self._set_user(None)

    def restore(self, uid: str) -> Optional[AuthUser]:
        """Recupera la sesión de una ejecución anterior si la cuenta sigue existiendo."""
        user = self.backend.get_user(uid) if uid else None
        if user is None:
            log.info("Saved session %s is no longer valid", uid)
            return None
        self._set_user(user)
        return user

    def require_user(self, action: str = "do this") -> AuthUser:
        if self._user is None:
            raise AuthFailure(f"User must be authenticated to {action}")
        return self._user
