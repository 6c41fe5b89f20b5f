from __future__ import annotations

import json
import random
import string
import time
from typing import List, Optional

from sqlalchemy import Engine, delete, select
from sqlalchemy.orm import Session

from ..errors import StorageFailure
from ..models.team import Team
from ..services.auth import AuthUser
from .base import Base, engine
from .models import TeamRecord, User

_ID_ALPHABET = string.ascii_lowercase + string.digits


def init_db(bind: Optional[Engine] = None):
    Base.metadata.create_all(bind=bind or engine)


def new_team_id(now_ms: Optional[int] = None) -> str:
    ms = int(time.time() * 1000) if now_ms is None else now_ms
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"team_{ms}_{suffix}"


def upsert_user(session: Session, user: AuthUser) -> User:
    row = session.get(User, user.uid)
    if row is None:
        row = User(uid=user.uid)
        session.add(row)
    row.email = user.email
    row.display_name = user.display_name
    row.photo_url = user.photo_url
    return row


def _snapshot(rec: TeamRecord) -> dict:
    return {
        "teamId": rec.team_id,
        "pokemon": json.loads(rec.pokemon_json),
        "generation": rec.generation,
        "createdAt": rec.created_at,
    }


def save_team(session: Session, user: AuthUser, team: Team, generation: int) -> str:
    upsert_user(session, user)
    rec = TeamRecord(
        team_id=new_team_id(),
        user_uid=user.uid,
        generation=int(generation),
        pokemon_json=json.dumps(team.to_list(), ensure_ascii=False),
    )
    session.add(rec)
    session.commit()
    return rec.team_id


def load_teams(session: Session, user_id: str) -> List[dict]:
    stmt = select(TeamRecord).where(TeamRecord.user_uid == user_id).order_by(TeamRecord.id.asc())
    return [_snapshot(rec) for rec in session.scalars(stmt).all()]


def delete_team(session: Session, user_id: str, team_id: str) -> int:
    if session.get(User, user_id) is None:
        raise StorageFailure("User document not found")
    res = session.execute(
        delete(TeamRecord).where(TeamRecord.user_uid == user_id, TeamRecord.team_id == team_id)
    )
    session.commit()
    return int(res.rowcount or 0)


def delete_all_user_data(session: Session, user_id: str) -> int:
    row = session.get(User, user_id)
    if row is None:
        return 0
    session.delete(row)
    session.commit()
    return 1


def get_user_data(session: Session, user_id: str) -> Optional[dict]:
    row = session.get(User, user_id)
    if row is None:
        return None
    return {
        "email": row.email,
        "displayName": row.display_name,
        "photoURL": row.photo_url,
        "teams": [_snapshot(rec) for rec in row.teams],
    }
