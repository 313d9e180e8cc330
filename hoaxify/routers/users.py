from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session as DbSession

from hoaxify.database import get_db
from hoaxify.i18n import get_locale, translate
from hoaxify.models.user import User
from hoaxify.routers.pagination import pagination
from hoaxify.schemas.user import (
    PasswordResetRequest,
    PasswordUpdateRequest,
    UserCreateRequest,
    UserUpdateRequest,
    user_out,
)
from hoaxify.services.accounts import AccountService
from hoaxify.services.authz import get_authenticated_user
from hoaxify.services.file_store import get_attachment_store, get_profile_store
from hoaxify.services.mailer import Mailer, get_mailer

router = APIRouter(tags=["users"])


@router.post("/users")
async def register(
    payload: Optional[UserCreateRequest] = Body(default=None),
    db: DbSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    locale: str = Depends(get_locale),
):
    payload = payload or UserCreateRequest()
    await AccountService(db, mailer=mailer).register(payload.username, payload.email, payload.password)
    return {"message": translate("user_create_success", locale)}


@router.post("/users/token/{token}")
def activate(token: str, db: DbSession = Depends(get_db), locale: str = Depends(get_locale)):
    AccountService(db).activate(token)
    return {"message": translate("account_activation_success", locale)}


@router.get("/users")
def list_users(
    paging: tuple[int, int] = Depends(pagination),
    db: DbSession = Depends(get_db),
    authenticated_user: Optional[User] = Depends(get_authenticated_user),
):
    page, size = paging
    res = AccountService(db).list_users(page, size, authenticated_user)
    res["content"] = [user_out(u) for u in res["content"]]
    return res


@router.get("/users/{user_id}")
def get_user(user_id: int, db: DbSession = Depends(get_db)):
    return user_out(AccountService(db).get_user(user_id))


@router.put("/users/{user_id}")
def update_user(
    user_id: int,
    payload: Optional[UserUpdateRequest] = Body(default=None),
    db: DbSession = Depends(get_db),
    authenticated_user: Optional[User] = Depends(get_authenticated_user),
    profile_store=Depends(get_profile_store),
):
    payload = payload or UserUpdateRequest()
    user = AccountService(db, profile_store=profile_store).update_user(
        user_id, payload.username, payload.image, authenticated_user
    )
    return user_out(user)


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    db: DbSession = Depends(get_db),
    authenticated_user: Optional[User] = Depends(get_authenticated_user),
    profile_store=Depends(get_profile_store),
    attachment_store=Depends(get_attachment_store),
    locale: str = Depends(get_locale),
):
    AccountService(db, profile_store=profile_store, attachment_store=attachment_store).delete_user(
        user_id, authenticated_user
    )
    return {"message": translate("user_delete_success", locale)}


@router.post("/user/password")
async def password_reset_request(
    payload: Optional[PasswordResetRequest] = Body(default=None),
    db: DbSession = Depends(get_db),
    mailer: Mailer = Depends(get_mailer),
    locale: str = Depends(get_locale),
):
    payload = payload or PasswordResetRequest()
    await AccountService(db, mailer=mailer).request_password_reset(payload.email)
    return {"message": translate("password_reset_request_success", locale)}


@router.put("/user/password")
def password_update(
    payload: Optional[PasswordUpdateRequest] = Body(default=None),
    db: DbSession = Depends(get_db),
    locale: str = Depends(get_locale),
):
    payload = payload or PasswordUpdateRequest()
    AccountService(db).reset_password(payload.password_reset_token, payload.password)
    return {"message": translate("password_update_success", locale)}
