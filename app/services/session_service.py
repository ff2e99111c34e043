# app/services/session_service.py
from datetime import datetime, timezone, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from app.data.models.user_session import UserSessionModel
from app.repos.session_repo import SessionRepo
from app.utils.security import generate_session_token, hash_token
from app.utils.settings import SESSION_TTL_HOURS


class SessionService:
    """
    Sesje logowania. Klient dostaje losowy token, baza trzyma jego hash
    z czasem wygaśnięcia i ewentualnym unieważnieniem (logout).
    """

    def __init__(self, db: Session, ttl_hours: int = SESSION_TTL_HOURS):
        self.repo = SessionRepo(db)
        self.ttl = timedelta(hours=ttl_hours)

    def create_session(self, user_id: int) -> str:
        token = generate_session_token()
        now = datetime.now(timezone.utc)
        self.repo.add_session(
            UserSessionModel(
                user_id=user_id,
                token_hash=hash_token(token),
                created_at=now,
                expires_at=now + self.ttl,
            )
        )
        return token

    def resolve_user_id(self, token: Optional[str]) -> Optional[int]:
        if not token:
            return None
        session = self.repo.find_active(hash_token(token), datetime.now(timezone.utc))
        return session.user_id if session else None

    def revoke(self, token: Optional[str]) -> bool:
        if not token:
            return False
        return self.repo.revoke(hash_token(token), datetime.now(timezone.utc)) > 0
