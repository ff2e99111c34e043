# app/api/deps.py
from fastapi import Cookie, Depends, HTTPException
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.services.user_service import UserService
from app.services.session_service import SessionService
from app.services.lock_service import LockService
from app.services.notification_service import NotificationService
from app.utils.settings import SESSION_COOKIE_NAME


def get_session_token(token: str | None = Cookie(None, alias=SESSION_COOKIE_NAME)) -> str | None:
    return token


def get_current_user_id(
    token: str | None = Depends(get_session_token),
    db: Session = Depends(get_db),
) -> int:
    """
    User id z aktywnej sesji wydanej przy logowaniu. Dalej idzie jawnie
    jako parametr, nigdy przez globalny stan.
    """
    user_id = SessionService(db).resolve_user_id(token)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user_id


def require_admin(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> int:
    if not UserService(db).is_admin(user_id):
        raise HTTPException(status_code=403, detail="Unauthorized")
    return user_id


def get_lock_service() -> LockService:
    return LockService()


def get_notification_service() -> NotificationService:
    return NotificationService()
