"""
Account lifecycle: register -> activate -> update -> reset password -> delete.

Registration is the only operation that pairs a write with a side effect
atomically: the user row is flushed inside the open transaction, the
activation mail is sent, and the transaction is committed only if the mail
went out. A crash after the send but before the commit leaves a mail pointing
at a user that was never stored; that window is accepted.
"""
from __future__ import annotations

import base64
import binascii
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as DbSession

from hoaxify.config import get_settings
from hoaxify.errors import (
    EmailDeliveryError,
    ForbiddenError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)
from hoaxify.models.user import User
from hoaxify.repositories.attachments import FileAttachmentRepository
from hoaxify.repositories.hoaxes import HoaxRepository
from hoaxify.repositories.users import UserRepository
from hoaxify.services.file_store import sniff_image_type
from hoaxify.services.mailer import Mailer
from hoaxify.services.passwords import hash_password
from hoaxify.services.sessions import SessionManager
from hoaxify.services.tokens import random_string
from hoaxify.services.validation import (
    check_username,
    is_valid_email,
    validate_password,
    validate_registration,
)

logger = logging.getLogger(__name__)

PROFILE_IMAGE_TYPES = {"image/png", "image/jpeg"}


class AccountService:
    def __init__(self, db: DbSession, mailer: Mailer | None = None, profile_store=None, attachment_store=None):
        self.db = db
        self.mailer = mailer
        self.profile_store = profile_store
        self.attachment_store = attachment_store
        self.users = UserRepository(db)
        self.sessions = SessionManager(db)

    async def register(self, username: str | None, email: str | None, password: str | None) -> User:
        errors = validate_registration(username, email, password, email_taken=self.users.email_exists)
        if errors:
            raise ValidationError(errors)

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            inactive=True,
            activation_token=random_string(16),
        )
        try:
            self.users.add(user)
        except IntegrityError:
            # lost a race on the unique email index
            self.db.rollback()
            raise ValidationError({"email": "email_in_use"})

        try:
            await self.mailer.send_account_activation(email, user.activation_token)
        except Exception as e:
            self.db.rollback()
            logger.warning("activation mail to %s failed, registration rolled back: %s", email, e)
            raise EmailDeliveryError() from e

        self.db.commit()
        logger.info("user %s registered", user.id)
        return user

    def activate(self, token: str) -> User:
        user = self.users.find_by_activation_token(token)
        if not user:
            raise InvalidTokenError()

        # password_reset_token stays
        user.inactive = False
        user.activation_token = None
        self.db.commit()
        logger.info("user %s activated", user.id)
        return user

    def get_user(self, user_id: int) -> User:
        user = self.users.get_active(user_id)
        if not user:
            raise NotFoundError("user_not_found")
        return user

    def list_users(self, page: int, size: int, authenticated_user: User | None = None) -> dict:
        rows, total = self.users.page_active(
            page, size, exclude_id=authenticated_user.id if authenticated_user else None
        )
        return {"content": rows, "page": page, "size": size, "totalPages": -(-total // size)}

    def update_user(
        self,
        user_id: int,
        username: str | None,
        image: str | None,
        authenticated_user: User | None,
    ) -> User:
        if authenticated_user is None or authenticated_user.id != user_id:
            raise ForbiddenError("unauthorized_user_update")

        errors: dict[str, str] = {}
        username_error = check_username(username)
        if username_error:
            errors["username"] = username_error

        image_bytes = None
        if image:
            image_bytes, image_error = self._decode_profile_image(image)
            if image_error:
                errors["image"] = image_error

        if errors:
            raise ValidationError(errors)

        user = self.users.get(user_id)
        user.username = username
        if image_bytes is not None:
            if user.image:
                # old file first
                self._delete_file(self.profile_store, user.image)
            user.image = self.profile_store.save(image_bytes)

        self.db.commit()
        return user

    def _decode_profile_image(self, image: str) -> tuple[bytes | None, str | None]:
        if "," in image and image.startswith("data:"):
            image = image.split(",", 1)[1]
        try:
            data = base64.b64decode(image, validate=True)
        except (binascii.Error, ValueError):
            return None, "unsupported_image_file"

        if len(data) > get_settings().max_profile_image_bytes:
            return None, "profile_image_size"
        if sniff_image_type(data) not in PROFILE_IMAGE_TYPES:
            return None, "unsupported_image_file"
        return data, None

    def delete_user(self, user_id: int, authenticated_user: User | None) -> None:
        if authenticated_user is None or authenticated_user.id != user_id:
            raise ForbiddenError("unauthorized_user_delete")

        user = self.users.get(user_id)
        hoaxes = HoaxRepository(self.db)
        attachments = FileAttachmentRepository(self.db)

        for hoax in hoaxes.for_user(user_id):
            attachment = attachments.for_hoax(hoax.id)
            if attachment:
                self._delete_file(self.attachment_store, attachment.filename)
                attachments.delete(attachment.id)
        removed_hoaxes = hoaxes.delete_for_user(user_id)

        if user and user.image:
            self._delete_file(self.profile_store, user.image)

        removed_tokens = self.sessions.revoke_all(user_id)
        self.users.delete(user_id)
        self.db.commit()
        logger.info("user %s deleted with %d hoaxes and %d tokens", user_id, removed_hoaxes, removed_tokens)

    def _delete_file(self, store, filename: str) -> None:
        # failures are logged, the caller carries on
        try:
            store.delete(filename)
        except Exception:
            logger.exception("could not delete stored file %s", filename)

    async def request_password_reset(self, email: str | None) -> None:
        if not email or not is_valid_email(email):
            raise ValidationError({"email": "email_invalid"})

        user = self.users.find_by_email(email)
        if not user:
            raise NotFoundError("email_not_in_use")

        user.password_reset_token = random_string(16)
        self.db.commit()

        try:
            await self.mailer.send_password_reset(email, user.password_reset_token)
        except Exception as e:
            logger.warning("password reset mail to %s failed: %s", email, e)
            raise EmailDeliveryError() from e

    def reset_password(self, reset_token: str | None, password: str | None) -> None:
        user = self.users.find_by_password_reset_token(reset_token) if reset_token else None
        if not user:
            raise ForbiddenError("unauthorized_password_reset")

        errors = validate_password(password)
        if errors:
            raise ValidationError(errors)

        user.password_hash = hash_password(password)
        user.password_reset_token = None
        # reset also activates
        user.activation_token = None
        user.inactive = False
        self.sessions.revoke_all(user.id)
        self.db.commit()
        logger.info("password reset for user %s, sessions revoked", user.id)
