from __future__ import annotations
from datetime import datetime, timezone
from sqlalchemy import Integer, String, ForeignKey, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"
    uid: Mapped[str] = mapped_column(String(128), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(256), nullable=True)
    display_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    photo_url: Mapped[str | None] = mapped_column(String(512), nullable=True)

    # solo para cuentas email/contraseña creadas desde la CLI
    password_salt: Mapped[str | None] = mapped_column(String(64), nullable=True)
    password_hash: Mapped[str | None] = mapped_column(String(128), nullable=True)

    teams: Mapped[list["TeamRecord"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", order_by="TeamRecord.id"
    )


class TeamRecord(Base):
    __tablename__ = "teams"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    team_id: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    user_uid: Mapped[str] = mapped_column(ForeignKey("users.uid"), index=True)
    generation: Mapped[int] = mapped_column(Integer, default=8)

    # lista de 6 elementos: resumen del Pokémon o null
    pokemon_json: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    user: Mapped[User] = relationship(back_populates="teams")
