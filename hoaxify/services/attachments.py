from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy.orm import Session as DbSession

from hoaxify.config import get_settings
from hoaxify.errors import FileSizeError
from hoaxify.models.file_attachment import FileAttachment
from hoaxify.repositories.attachments import FileAttachmentRepository
from hoaxify.services.file_store import sniff_image_type
from hoaxify.services.tokens import utcnow

logger = logging.getLogger(__name__)


class AttachmentService:
    def __init__(self, db: DbSession, store):
        self.db = db
        self.store = store
        self.attachments = FileAttachmentRepository(db)

    def save_attachment(self, data: bytes) -> FileAttachment:
        if len(data) > get_settings().max_attachment_bytes:
            raise FileSizeError()

        filename = self.store.save(data)
        row = self.attachments.add(filename, sniff_image_type(data))
        self.db.commit()
        return row

    def remove_unused_attachments(self, retention: timedelta | None = None) -> int:
        """Delete orphans older than the retention window, file first then row."""
        retention = retention or timedelta(hours=get_settings().attachment_retention_hours)
        removed = 0
        for attachment in self.attachments.orphans_uploaded_before(utcnow() - retention):
            try:
                self.store.delete(attachment.filename)
            except Exception:
                # row kept, retried next sweep
                logger.exception("could not delete orphan attachment file %s", attachment.filename)
                continue
            self.attachments.delete(attachment.id)
            removed += 1

        self.db.commit()
        return removed
