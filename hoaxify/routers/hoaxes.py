from typing import Optional

from fastapi import APIRouter, Body, Depends, File, UploadFile
from sqlalchemy.orm import Session as DbSession

from hoaxify.config import get_settings
from hoaxify.database import get_db
from hoaxify.i18n import get_locale, translate
from hoaxify.models.user import User
from hoaxify.routers.pagination import pagination
from hoaxify.schemas.hoax import HoaxCreateRequest, hoax_out
from hoaxify.services.attachments import AttachmentService
from hoaxify.services.authz import get_authenticated_user
from hoaxify.services.file_store import get_attachment_store
from hoaxify.services.hoaxes import HoaxService

router = APIRouter(tags=["hoaxes"])


@router.post("/hoaxes")
def submit_hoax(
    payload: Optional[HoaxCreateRequest] = Body(default=None),
    db: DbSession = Depends(get_db),
    authenticated_user: Optional[User] = Depends(get_authenticated_user),
    locale: str = Depends(get_locale),
):
    payload = payload or HoaxCreateRequest()
    HoaxService(db).create_hoax(payload.content, authenticated_user, payload.file_attachment)
    return {"message": translate("hoax_submit_success", locale)}


@router.get("/hoaxes")
def list_hoaxes(paging: tuple[int, int] = Depends(pagination), db: DbSession = Depends(get_db)):
    page, size = paging
    res = HoaxService(db).list_hoaxes(page, size)
    res["content"] = [hoax_out(h) for h in res["content"]]
    return res


@router.get("/users/{user_id}/hoaxes")
def list_user_hoaxes(
    user_id: int,
    paging: tuple[int, int] = Depends(pagination),
    db: DbSession = Depends(get_db),
):
    page, size = paging
    res = HoaxService(db).list_hoaxes(page, size, user_id=user_id)
    res["content"] = [hoax_out(h) for h in res["content"]]
    return res


@router.delete("/hoaxes/{hoax_id}")
def delete_hoax(
    hoax_id: int,
    db: DbSession = Depends(get_db),
    authenticated_user: Optional[User] = Depends(get_authenticated_user),
    attachment_store=Depends(get_attachment_store),
    locale: str = Depends(get_locale),
):
    HoaxService(db, attachment_store=attachment_store).delete_hoax(hoax_id, authenticated_user)
    return {"message": translate("hoax_delete_success", locale)}


@router.post("/hoaxes/attachments")
async def upload_attachment(
    file: UploadFile = File(...),
    db: DbSession = Depends(get_db),
    attachment_store=Depends(get_attachment_store),
):
    # limit + 1 bytes is enough to detect an oversized file
    data = await file.read(get_settings().max_attachment_bytes + 1)
    attachment = AttachmentService(db, attachment_store).save_attachment(data)
    return {"id": attachment.id}
