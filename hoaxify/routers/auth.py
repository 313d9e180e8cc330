from typing import Optional

from fastapi import APIRouter, Body, Depends, Request
from sqlalchemy.orm import Session as DbSession

from hoaxify.database import get_db
from hoaxify.i18n import get_locale, translate
from hoaxify.schemas.user import LoginRequest
from hoaxify.services.authz import bearer_token
from hoaxify.services.sessions import SessionManager

router = APIRouter(tags=["auth"])


@router.post("/auth")
def login(payload: Optional[LoginRequest] = Body(default=None), db: DbSession = Depends(get_db)):
    payload = payload or LoginRequest()
    user, token = SessionManager(db).login(payload.email, payload.password)
    return {"id": user.id, "username": user.username, "image": user.image, "token": token}


@router.post("/logout")
def logout(req: Request, db: DbSession = Depends(get_db), locale: str = Depends(get_locale)):
    raw = bearer_token(req)
    if raw:
        SessionManager(db).revoke(raw)
    return {"message": translate("logout_success", locale)}
