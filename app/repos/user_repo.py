# app/repos/user_repo.py
from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from app.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def find_by_login(self, username: str, email: str) -> UserModel | None:
        #login albo email juz zajety
        return self.db.execute(
            select(UserModel).where(or_(UserModel.username == username, UserModel.email == email))
        ).scalars().first()

    def add_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def rollback(self):
        self.db.rollback()
