from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..services.auth import (
    AuthProviderError,
    AuthUser,
    check_new_password,
    hash_password,
    normalize_email,
    verify_password,
)
from .base import session_scope
from .models import User

log = logging.getLogger(__name__)


def _to_auth_user(row: User) -> AuthUser:
    return AuthUser(uid=row.uid, email=row.email, display_name=row.display_name, photo_url=row.photo_url)


class DatabaseAuthBackend:
    """
    Cuentas email/contraseña en la tabla users, para que la sesión sobreviva
    entre ejecuciones de la CLI. Las contraseñas se guardan con PBKDF2 y sal
    por cuenta.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory

    def _by_email(self, session, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email)
        return session.scalars(stmt).first()

    def sign_up(self, email: str, password: str) -> AuthUser:
        email = normalize_email(email)
        try:
            with session_scope(self.session_factory) as s:
                if self._by_email(s, email) is not None:
                    raise AuthProviderError("auth/email-already-in-use")
                check_new_password(password)
                salt, pw_hash = hash_password(password)
                row = User(
                    uid=uuid.uuid4().hex,
                    email=email,
                    display_name=email.split("@")[0],
                    password_salt=salt,
                    password_hash=pw_hash,
                )
                s.add(row)
                s.flush()
                user = _to_auth_user(row)
        except SQLAlchemyError as exc:
            log.error("Account store error on signup: %s", exc)
            raise AuthProviderError("auth/network-request-failed", str(exc)) from exc
        log.info("Account created: %s", user.uid)
        return user

    def sign_in(self, provider: str, **credentials) -> AuthUser:
        if provider != "password":
            raise AuthProviderError("auth/operation-not-allowed")
        email = normalize_email(credentials.get("email"))
        try:
            with session_scope(self.session_factory) as s:
                row = self._by_email(s, email)
                if row is None:
                    raise AuthProviderError("auth/user-not-found")
                # filas creadas por save_team sin contraseña: no se puede entrar con una
                if not row.password_hash or not verify_password(
                    credentials.get("password") or "", row.password_salt, row.password_hash
                ):
                    raise AuthProviderError("auth/wrong-password")
                return _to_auth_user(row)
        except SQLAlchemyError as exc:
            log.error("Account store error on login: %s", exc)
            raise AuthProviderError("auth/network-request-failed", str(exc)) from exc

    def sign_out(self, user: AuthUser) -> None:
        return None

    def get_user(self, uid: str) -> Optional[AuthUser]:
        try:
            with session_scope(self.session_factory) as s:
                row = s.get(User, uid)
                return _to_auth_user(row) if row is not None else None
        except SQLAlchemyError as exc:
            log.error("Account store error reading %s: %s", uid, exc)
            return None
