from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from hoaxify.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def add(self, user: User) -> User:
        self.db.add(user)
        self.db.flush()
        return user

    def get(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def get_active(self, user_id: int) -> User | None:
        return self.db.execute(
            select(User).where(User.id == user_id, User.inactive.is_(False))
        ).scalar_one_or_none()

    def find_by_email(self, email: str) -> User | None:
        return self.db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    def email_exists(self, email: str) -> bool:
        return self.find_by_email(email) is not None

    def find_by_activation_token(self, token: str) -> User | None:
        return self.db.execute(select(User).where(User.activation_token == token)).scalar_one_or_none()

    def find_by_password_reset_token(self, token: str) -> User | None:
        return self.db.execute(select(User).where(User.password_reset_token == token)).scalar_one_or_none()

    def page_active(self, page: int, size: int, exclude_id: int | None = None) -> tuple[list[User], int]:
        q = select(User).where(User.inactive.is_(False))
        if exclude_id is not None:
            q = q.where(User.id != exclude_id)

        total = self.db.execute(select(func.count()).select_from(q.subquery())).scalar_one()
        rows = self.db.execute(q.order_by(User.id).limit(size).offset(page * size)).scalars().all()
        return list(rows), total

    def delete(self, user_id: int) -> None:
        self.db.execute(delete(User).where(User.id == user_id))
