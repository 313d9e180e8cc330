import hashlib
import secrets
from datetime import datetime, timezone


def new_token(nbytes: int = 32) -> str:
    # urlsafe token ~ 43 chars for 32 bytes
    return secrets.token_urlsafe(nbytes)


def random_string(length: int = 16) -> str:
    return secrets.token_hex((length + 1) // 2)[:length]


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # sqlite hands back naive datetimes; everything is stored in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_millis(value: datetime) -> int:
    return int(as_utc(value).timestamp() * 1000)
