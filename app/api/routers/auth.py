from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.api.deps import get_current_user_id, get_session_token
from app.data.database import get_db
from app.domain.errors import DuplicateUserError, InvalidCredentialsError
from app.domain.schemas import LoginIn, RegisterIn
from app.services.session_service import SessionService
from app.services.user_service import UserService
from app.utils.settings import SESSION_COOKIE_NAME, SESSION_COOKIE_SECURE, SESSION_TTL_HOURS

router = APIRouter(prefix="/auth", tags=["auth"])


def _start_session(response: Response, db: Session, user_id: int) -> None:
    token = SessionService(db).create_session(user_id)
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=SESSION_TTL_HOURS * 3600,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
    )


@router.post("/register")
def register(payload: RegisterIn, response: Response, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        user = service.register(payload)
    except DuplicateUserError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    # od razu zalogowany
    _start_session(response, db, user.id)
    return {"success": True, "message": "Registration successful", "user": user}


@router.post("/login")
def login(payload: LoginIn, response: Response, db: Session = Depends(get_db)):
    try:
        user = UserService(db).authenticate(payload.username, payload.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=401, detail=str(e))

    _start_session(response, db, user.id)
    return {"success": True, "user": user}


@router.post("/logout")
def logout(response: Response, token: str | None = Depends(get_session_token), db: Session = Depends(get_db)):
    SessionService(db).revoke(token)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/user")
def current_user(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    return {"success": True, "user": UserService(db).get_user(user_id)}
