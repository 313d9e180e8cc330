"""
Session tokens: login, bearer resolution, revocation and expiry.

The bearer value handed to the client is never stored; the tokens table keeps
its SHA-256 digest. A token older than the expiry window is dead whether or
not the sweep has reached it yet.
"""
from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.orm import Session as DbSession

from hoaxify.config import get_settings
from hoaxify.errors import AuthenticationError
from hoaxify.models.user import User
from hoaxify.repositories.tokens import TokenRepository
from hoaxify.repositories.users import UserRepository
from hoaxify.services.passwords import dummy_hash, verify_password
from hoaxify.services.tokens import as_utc, hash_token, new_token, utcnow

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(self, db: DbSession, expiry: timedelta | None = None):
        self.db = db
        self.users = UserRepository(db)
        self.tokens = TokenRepository(db)
        self.expiry = expiry or timedelta(days=get_settings().token_expiry_days)

    def login(self, email: str | None, password: str | None) -> tuple[User, str]:
        user = self.users.find_by_email(email) if email else None

        # a hash is verified for unknown emails too, so timing matches
        password_ok = verify_password(password or "", user.password_hash if user else dummy_hash())

        # same failure for unknown email, wrong password and inactive account
        if not user or not password or not password_ok or user.inactive:
            logger.info("login rejected")
            raise AuthenticationError("authentication_failure")

        token = self.create_token(user)
        self.db.commit()
        return user, token

    def create_token(self, user: User) -> str:
        raw = new_token()
        self.tokens.add(hash_token(raw), user.id)
        return raw

    def resolve(self, raw: str | None) -> User | None:
        if not raw:
            return None

        row = self.tokens.find(hash_token(raw))
        if row is None:
            return None

        if as_utc(row.issued_at) < utcnow() - self.expiry:
            # expired: delete now
            self.tokens.delete(row.token)
            self.db.commit()
            return None

        return self.users.get(row.user_id)

    def revoke(self, raw: str) -> None:
        self.tokens.delete(hash_token(raw))
        self.db.commit()

    def revoke_all(self, user_id: int) -> int:
        """Delete every token of a user. Caller commits."""
        return self.tokens.delete_for_user(user_id)

    def sweep_expired(self) -> int:
        removed = self.tokens.delete_issued_before(utcnow() - self.expiry)
        self.db.commit()
        return removed
