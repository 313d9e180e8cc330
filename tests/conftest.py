"""
Test configuration and fixtures.

- in-memory SQLite shared through a StaticPool
- a recording mailer that can be told to fail
- local file stores rooted in a temporary folder
- a TestClient with the database, mailer and stores overridden

Environment is set before the application is imported so that settings,
password hashing cost and upload folders pick up the test values.
"""
import io
import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="hoaxify-test-")
os.environ["ENABLE_BACKGROUND_SWEEPS"] = "false"
os.environ["PASSWORD_HASH_TIME_COST"] = "1"
os.environ["PASSWORD_HASH_MEMORY_COST"] = "1024"
os.environ["RESEND_API_KEY"] = "re_test_key"
os.environ["API_PREFIX"] = "/api/v1.0"

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hoaxify.config import get_settings
from hoaxify.database import Base, get_db
from hoaxify.main import app
from hoaxify.models import User
from hoaxify.services.file_store import LocalFileStore, get_attachment_store, get_profile_store
from hoaxify.services.mailer import Mailer, MailError, get_mailer
from hoaxify.services.passwords import hash_password

API = "/api/v1.0"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


class RecordingMailer(Mailer):
    """Captures outgoing mail instead of calling Resend; ``fail`` simulates a rejected mailbox."""

    def __init__(self):
        super().__init__(get_settings())
        self.sent = []
        self.fail = False

    async def send_email(self, to, subject, html):
        if self.fail:
            raise MailError("Invalid mailbox")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return {"id": f"mail-{len(self.sent)}"}

    @property
    def last(self):
        return self.sent[-1] if self.sent else None


class BrokenStore(LocalFileStore):
    """File store whose deletes always fail."""

    def delete(self, filename):
        raise OSError(f"cannot delete {filename}")


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def db():
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def rows():
    """Fresh-session query helper so assertions never see stale identity-map objects."""

    def _rows(model, *where):
        with TestingSessionLocal() as s:
            q = select(model)
            for clause in where:
                q = q.where(clause)
            return list(s.execute(q).unique().scalars().all())

    return _rows


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def profile_store(tmp_path):
    return LocalFileStore(str(tmp_path / "profile"))


@pytest.fixture
def attachment_store(tmp_path):
    return LocalFileStore(str(tmp_path / "attachment"))


@pytest.fixture
def client(mailer, profile_store, attachment_store):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_profile_store] = lambda: profile_store
    app.dependency_overrides[get_attachment_store] = lambda: attachment_store
    yield TestClient(app)
    app.dependency_overrides.clear()


ACTIVE_USER = {"username": "user1", "email": "user1@mail.com", "password": "P4ssword", "inactive": False}
CREDENTIALS = {"email": "user1@mail.com", "password": "P4ssword"}


@pytest.fixture
def add_user():
    def _add_user(**overrides):
        data = {**ACTIVE_USER, **overrides}
        with TestingSessionLocal() as s:
            user = User(
                username=data["username"],
                email=data["email"],
                password_hash=hash_password(data["password"]),
                inactive=data["inactive"],
                activation_token=data.get("activation_token"),
                password_reset_token=data.get("password_reset_token"),
                image=data.get("image"),
            )
            s.add(user)
            s.commit()
            return user

    return _add_user


@pytest.fixture
def login(client):
    def _login(credentials=CREDENTIALS):
        response = client.post(f"{API}/auth", json=credentials)
        return response.json().get("token")

    return _login


@pytest.fixture
def auth_header(login):
    def _auth_header(credentials=CREDENTIALS):
        return {"Authorization": f"Bearer {login(credentials)}"}

    return _auth_header


def image_bytes(fmt="PNG", size=(8, 8)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def png_bytes():
    return image_bytes("PNG")


@pytest.fixture
def jpeg_bytes():
    return image_bytes("JPEG")


@pytest.fixture
def gif_bytes():
    return image_bytes("GIF")

