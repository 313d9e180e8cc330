from functools import lru_cache

from passlib.context import CryptContext

from hoaxify.config import get_settings


@lru_cache
def _context() -> CryptContext:
    settings = get_settings()
    return CryptContext(
        schemes=["argon2"],
        deprecated="auto",
        argon2__time_cost=settings.password_hash_time_cost,
        argon2__memory_cost=settings.password_hash_memory_cost,
    )


def hash_password(password: str) -> str:
    return _context().hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return _context().verify(password, password_hash)


@lru_cache
def dummy_hash() -> str:
    """Hash checked against when no user matches the email."""
    return hash_password("dummy-password-for-unknown-users")
