from fastapi import Depends, Request
from sqlalchemy.orm import Session as DbSession

from hoaxify.database import get_db
from hoaxify.models.user import User
from hoaxify.services.sessions import SessionManager

BEARER_PREFIX = "bearer "


def bearer_token(req: Request) -> str | None:
    header = req.headers.get("authorization")
    if not header or not header.lower().startswith(BEARER_PREFIX):
        return None
    return header[len(BEARER_PREFIX):].strip() or None


def get_authenticated_user(req: Request, db: DbSession = Depends(get_db)) -> User | None:
    """Resolve the bearer token; missing, unknown or expired tokens mean anonymous."""
    return SessionManager(db).resolve(bearer_token(req))
