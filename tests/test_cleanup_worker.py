import asyncio
from datetime import timedelta

import pytest
from sqlalchemy import update

from conftest import BrokenStore
from hoaxify.models import FileAttachment, Hoax, Token
from hoaxify.services import cleanup_worker
from hoaxify.services.attachments import AttachmentService
from hoaxify.services.sessions import SessionManager
from hoaxify.services.tokens import utcnow


def age_tokens(session_factory, days):
    with session_factory() as s:
        s.execute(update(Token).values(issued_at=utcnow() - timedelta(days=days)))
        s.commit()


def age_attachments(session_factory, hours):
    with session_factory() as s:
        s.execute(update(FileAttachment).values(upload_date=utcnow() - timedelta(hours=hours)))
        s.commit()


class TestTokenSweep:
    def test_removes_expired_tokens(self, session_factory, add_user, rows):
        user = add_user()
        with session_factory() as s:
            SessionManager(s).create_token(user)
            s.commit()
        age_tokens(session_factory, 8)

        assert cleanup_worker.sweep_expired_tokens(session_factory) == 1
        assert rows(Token) == []

    def test_keeps_live_tokens(self, session_factory, add_user, rows):
        user = add_user()
        with session_factory() as s:
            SessionManager(s).create_token(user)
            s.commit()

        assert cleanup_worker.sweep_expired_tokens(session_factory) == 0
        assert len(rows(Token)) == 1

    def test_repeated_sweeps_are_harmless(self, session_factory, add_user):
        user = add_user()
        with session_factory() as s:
            SessionManager(s).create_token(user)
            s.commit()
        age_tokens(session_factory, 30)

        assert cleanup_worker.sweep_expired_tokens(session_factory) == 1
        assert cleanup_worker.sweep_expired_tokens(session_factory) == 0


class TestAttachmentSweep:
    def test_removes_old_orphans_and_files(self, session_factory, attachment_store, png_bytes, rows):
        with session_factory() as s:
            attachment = AttachmentService(s, attachment_store).save_attachment(png_bytes)
            filename = attachment.filename
        age_attachments(session_factory, 25)

        assert cleanup_worker.sweep_orphan_attachments(session_factory, attachment_store) == 1
        assert rows(FileAttachment) == []
        assert not attachment_store.exists(filename)

    def test_keeps_recent_orphans(self, session_factory, attachment_store, png_bytes, rows):
        with session_factory() as s:
            AttachmentService(s, attachment_store).save_attachment(png_bytes)

        assert cleanup_worker.sweep_orphan_attachments(session_factory, attachment_store) == 0
        assert len(rows(FileAttachment)) == 1

    def test_keeps_associated_attachments(self, session_factory, attachment_store, add_user, png_bytes, rows):
        user = add_user()
        with session_factory() as s:
            attachment = AttachmentService(s, attachment_store).save_attachment(png_bytes)
            hoax = Hoax(content="Hoax with attachment", user_id=user.id)
            s.add(hoax)
            s.flush()
            attachment.hoax_id = hoax.id
            s.commit()
        age_attachments(session_factory, 48)

        assert cleanup_worker.sweep_orphan_attachments(session_factory, attachment_store) == 0
        assert len(rows(FileAttachment)) == 1

    def test_keeps_row_when_file_delete_fails(self, session_factory, tmp_path, png_bytes, rows):
        broken = BrokenStore(str(tmp_path / "broken"))
        with session_factory() as s:
            AttachmentService(s, broken).save_attachment(png_bytes)
        age_attachments(session_factory, 25)

        assert cleanup_worker.sweep_orphan_attachments(session_factory, broken) == 0
        assert len(rows(FileAttachment)) == 1

    def test_orphan_whose_file_is_already_gone_is_removed(self, session_factory, attachment_store, png_bytes, rows):
        with session_factory() as s:
            attachment = AttachmentService(s, attachment_store).save_attachment(png_bytes)
            attachment_store.delete(attachment.filename)
        age_attachments(session_factory, 25)

        assert cleanup_worker.sweep_orphan_attachments(session_factory, attachment_store) == 1
        assert rows(FileAttachment) == []


class TestRunPeriodically:
    async def test_failing_job_does_not_stop_the_loop(self, caplog):
        calls = []

        def job():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("database is down")
            return 0

        task = asyncio.create_task(cleanup_worker.run_periodically("test", 0, job))
        for _ in range(50):
            await asyncio.sleep(0.01)
            if len(calls) >= 2:
                break
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(calls) >= 2
        assert "test sweep failed" in caplog.text
