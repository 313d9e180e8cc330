from __future__ import annotations

import logging

from sqlalchemy.orm import Session as DbSession

from hoaxify.errors import AuthenticationError, ForbiddenError, NotFoundError, ValidationError
from hoaxify.models.hoax import Hoax
from hoaxify.models.user import User
from hoaxify.repositories.attachments import FileAttachmentRepository
from hoaxify.repositories.hoaxes import HoaxRepository
from hoaxify.repositories.users import UserRepository
from hoaxify.services.validation import validate_hoax_content

logger = logging.getLogger(__name__)


class HoaxService:
    def __init__(self, db: DbSession, attachment_store=None):
        self.db = db
        self.attachment_store = attachment_store
        self.hoaxes = HoaxRepository(db)
        self.attachments = FileAttachmentRepository(db)
        self.users = UserRepository(db)

    def create_hoax(
        self,
        content: str | None,
        authenticated_user: User | None,
        file_attachment_id: int | None = None,
    ) -> Hoax:
        if authenticated_user is None:
            raise AuthenticationError("unauthorized_hoax_submit")

        errors = validate_hoax_content(content)
        if errors:
            raise ValidationError(errors)

        hoax = self.hoaxes.add(Hoax(content=content, user_id=authenticated_user.id))

        # unknown or already claimed attachments are ignored
        if file_attachment_id is not None:
            if not self.attachments.associate(file_attachment_id, hoax.id):
                logger.debug("attachment %s not associated with hoax %s", file_attachment_id, hoax.id)

        self.db.commit()
        return hoax

    def list_hoaxes(self, page: int, size: int, user_id: int | None = None) -> dict:
        if user_id is not None and self.users.get_active(user_id) is None:
            raise NotFoundError("user_not_found")

        rows, total = self.hoaxes.page(page, size, user_id=user_id)
        return {"content": rows, "page": page, "size": size, "totalPages": -(-total // size)}

    def delete_hoax(self, hoax_id: int, authenticated_user: User | None) -> None:
        hoax = self.hoaxes.get(hoax_id)
        if authenticated_user is None or hoax is None or hoax.user_id != authenticated_user.id:
            raise ForbiddenError("unauthorized_hoax_delete")

        attachment = self.attachments.for_hoax(hoax_id)
        if attachment:
            try:
                self.attachment_store.delete(attachment.filename)
            except Exception:
                logger.exception("could not delete attachment file %s", attachment.filename)
            self.attachments.delete(attachment.id)

        self.hoaxes.delete(hoax_id)
        self.db.commit()
