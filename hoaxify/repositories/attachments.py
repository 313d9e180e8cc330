from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from hoaxify.models.file_attachment import FileAttachment


class FileAttachmentRepository:
    def __init__(self, db: Session):
        self.db = db

    def add(self, filename: str, file_type: str | None) -> FileAttachment:
        row = FileAttachment(filename=filename, file_type=file_type)
        self.db.add(row)
        self.db.flush()
        return row

    def get(self, attachment_id: int) -> FileAttachment | None:
        return self.db.get(FileAttachment, attachment_id)

    def associate(self, attachment_id: int, hoax_id: int) -> bool:
        """Bind an orphan to a hoax. Already bound attachments are left alone."""
        res = self.db.execute(
            update(FileAttachment)
            .where(FileAttachment.id == attachment_id, FileAttachment.hoax_id.is_(None))
            .values(hoax_id=hoax_id)
            .execution_options(synchronize_session=False)
        )
        return res.rowcount == 1

    def for_hoax(self, hoax_id: int) -> FileAttachment | None:
        return self.db.execute(
            select(FileAttachment).where(FileAttachment.hoax_id == hoax_id)
        ).scalar_one_or_none()

    def orphans_uploaded_before(self, cutoff: datetime) -> list[FileAttachment]:
        return list(
            self.db.execute(
                select(FileAttachment)
                .where(FileAttachment.hoax_id.is_(None))
                .where(FileAttachment.upload_date < cutoff)
            ).scalars().all()
        )

    def delete(self, attachment_id: int) -> None:
        self.db.execute(delete(FileAttachment).where(FileAttachment.id == attachment_id))
