# app/repos/session_repo.py
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.data.models.user_session import UserSessionModel


class SessionRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_session(self, session: UserSessionModel) -> UserSessionModel:
        self.db.add(session)
        self.db.commit()
        return session

    def find_active(self, token_hash: str, now: datetime) -> UserSessionModel | None:
        return self.db.execute(
            select(UserSessionModel).where(
                UserSessionModel.token_hash == token_hash,
                UserSessionModel.revoked_at.is_(None),
                UserSessionModel.expires_at > now,
            )
        ).scalars().first()

    def revoke(self, token_hash: str, now: datetime) -> int:
        result = self.db.execute(
            update(UserSessionModel)
            .where(UserSessionModel.token_hash == token_hash, UserSessionModel.revoked_at.is_(None))
            .values(revoked_at=now)
        )
        self.db.commit()
        return result.rowcount
