from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hoaxify.database import Base
from hoaxify.services.tokens import utcnow


class FileAttachment(Base):
    __tablename__ = "file_attachments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)   # random, never the upload name
    file_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    upload_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    # null until a hoax claims it; first claim wins
    hoax_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("hoaxes.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )

    hoax: Mapped[Optional["Hoax"]] = relationship("Hoax", back_populates="file_attachment")
