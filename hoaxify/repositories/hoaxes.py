from __future__ import annotations

from sqlalchemy import delete, desc, func, select
from sqlalchemy.orm import Session

from hoaxify.models.hoax import Hoax


class HoaxRepository:
    def __init__(self, db: Session):
        self.db = db

    def add(self, hoax: Hoax) -> Hoax:
        self.db.add(hoax)
        self.db.flush()
        return hoax

    def get(self, hoax_id: int) -> Hoax | None:
        return self.db.get(Hoax, hoax_id)

    def for_user(self, user_id: int) -> list[Hoax]:
        return list(self.db.execute(select(Hoax).where(Hoax.user_id == user_id)).unique().scalars().all())

    def page(self, page: int, size: int, user_id: int | None = None) -> tuple[list[Hoax], int]:
        q = select(Hoax)
        if user_id is not None:
            q = q.where(Hoax.user_id == user_id)

        total = self.db.execute(select(func.count()).select_from(q.subquery())).scalar_one()
        rows = (
            self.db.execute(q.order_by(desc(Hoax.id)).limit(size).offset(page * size))
            .unique()
            .scalars()
            .all()
        )
        return list(rows), total

    def delete(self, hoax_id: int) -> None:
        self.db.execute(delete(Hoax).where(Hoax.id == hoax_id))

    def delete_for_user(self, user_id: int) -> int:
        return self.db.execute(delete(Hoax).where(Hoax.user_id == user_id)).rowcount
