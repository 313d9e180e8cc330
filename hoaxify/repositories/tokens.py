from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from hoaxify.models.token import Token


class TokenRepository:
    def __init__(self, db: Session):
        self.db = db

    def add(self, token_hash: str, user_id: int) -> Token:
        row = Token(token=token_hash, user_id=user_id)
        self.db.add(row)
        self.db.flush()
        return row

    def find(self, token_hash: str) -> Token | None:
        return self.db.execute(select(Token).where(Token.token == token_hash)).scalar_one_or_none()

    def delete(self, token_hash: str) -> int:
        return self.db.execute(delete(Token).where(Token.token == token_hash)).rowcount

    def delete_for_user(self, user_id: int) -> int:
        return self.db.execute(delete(Token).where(Token.user_id == user_id)).rowcount

    def delete_issued_before(self, cutoff: datetime) -> int:
        return self.db.execute(delete(Token).where(Token.issued_at < cutoff)).rowcount
