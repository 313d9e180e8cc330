"""
Out-of-band cleanup: expired session tokens and orphaned attachments.

Each sweep opens its own database session and goes through the same
repositories request handlers use. The loops run as asyncio tasks owned by
the application lifespan; the blocking database work is pushed to a thread.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable

from sqlalchemy.orm import sessionmaker

from hoaxify.database import SessionLocal
from hoaxify.services.attachments import AttachmentService
from hoaxify.services.file_store import get_attachment_store
from hoaxify.services.sessions import SessionManager

logger = logging.getLogger(__name__)


def sweep_expired_tokens(session_factory: sessionmaker = SessionLocal) -> int:
    db = session_factory()
    try:
        removed = SessionManager(db).sweep_expired()
    finally:
        db.close()
    logger.info("token sweep removed %d expired tokens", removed)
    return removed


def sweep_orphan_attachments(session_factory: sessionmaker = SessionLocal, store=None) -> int:
    db = session_factory()
    try:
        removed = AttachmentService(db, store or get_attachment_store()).remove_unused_attachments()
    finally:
        db.close()
    logger.info("attachment sweep removed %d orphan attachments", removed)
    return removed


def run_all(session_factory: sessionmaker = SessionLocal) -> dict:
    return {
        "tokens": sweep_expired_tokens(session_factory),
        "attachments": sweep_orphan_attachments(session_factory),
    }


async def run_periodically(name: str, interval_seconds: int, job: Callable[[], int]) -> None:
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await asyncio.to_thread(job)
        except Exception:
            # keep the loop alive; the next tick retries
            logger.exception("%s sweep failed", name)
