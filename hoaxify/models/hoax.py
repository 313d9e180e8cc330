from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hoaxify.database import Base
from hoaxify.models.user import User
from hoaxify.services.tokens import utcnow


class Hoax(Base):
    __tablename__ = "hoaxes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(String(5000), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )

    user: Mapped[User] = relationship(lazy="joined")
    file_attachment: Mapped[Optional["FileAttachment"]] = relationship(
        "FileAttachment",
        back_populates="hoax",
        uselist=False,
        lazy="joined",
    )
