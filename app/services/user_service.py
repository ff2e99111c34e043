from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.user import UserModel
from app.domain.errors import DuplicateUserError, InvalidCredentialsError
from app.domain.schemas import RegisterIn, UserRead
from app.repos.user_repo import UserRepo
from app.utils.logging import get_logger
from app.utils.security import get_password_hash, verify_password

logger = get_logger(__name__)


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def register(self, payload: RegisterIn) -> UserRead:
        """Nowy klient. Rola zawsze customer, admina zakłada się w bazie."""
        if self.repo.find_by_login(payload.username, payload.email):
            raise DuplicateUserError("Username or email already taken")

        user = UserModel(
            username=payload.username,
            email=payload.email,
            password_hash=get_password_hash(payload.password),
            full_name=payload.full_name,
            role="customer",
        )
        try:
            created = self.repo.add_user(user)
        except IntegrityError:
            #rownolegla rejestracja tego samego loginu
            self.repo.rollback()
            raise DuplicateUserError("Username or email already taken")

        logger.info(f"Zarejestrowano usera {created.id}")
        return UserRead.model_validate(created)

    def authenticate(self, login: str, password: str) -> UserRead:
        user = self.repo.find_by_login(login, login)
        if not user or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Invalid credentials")
        return UserRead.model_validate(user)

    def get_user(self, user_id: int) -> UserRead:
        user = self.repo.get_user(user_id)
        if not user:
            raise ValueError("User not found")
        return UserRead.model_validate(user)

    def is_admin(self, user_id: int) -> bool:
        user = self.repo.get_user(user_id)
        return bool(user and user.role == "admin")
