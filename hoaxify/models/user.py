from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from hoaxify.database import Base
from hoaxify.services.tokens import utcnow


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(32), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # inactive until the emailed activation token comes back
    inactive: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    activation_token: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    password_reset_token: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)

    image: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
