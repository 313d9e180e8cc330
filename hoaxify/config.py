import os
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()


def _int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


def _bool(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


class Settings:
    def __init__(self):
        self.database_url = os.getenv("DATABASE_URL", "sqlite:///./hoaxify.sqlite").strip()
        self.api_prefix = os.getenv("API_PREFIX", "/api/v1.0").rstrip("/")
        self.app_base_url = os.getenv("APP_BASE_URL", "http://localhost:3000").strip()
        self.cors_origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",") if o.strip()]
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        # mail (Resend HTTP API)
        self.resend_api_key = os.getenv("RESEND_API_KEY", "").strip()
        self.resend_api_url = os.getenv("RESEND_API_URL", "https://api.resend.com/emails").strip()
        self.mail_from = os.getenv("MAIL_FROM", "Hoaxify <no-reply@hoaxify.local>").strip()
        self.mail_timeout_seconds = _int("MAIL_TIMEOUT_SECONDS", 20)

        # file storage: "local" disk folders or "spaces" (S3 compatible)
        self.file_store_backend = os.getenv("FILE_STORE_BACKEND", "local").strip().lower()
        self.upload_dir = os.getenv("UPLOAD_DIR", "upload").strip()
        self.profile_dir = os.getenv("PROFILE_DIR", "profile").strip()
        self.attachment_dir = os.getenv("ATTACHMENT_DIR", "attachment").strip()
        self.spaces_bucket = os.getenv("DO_SPACES_BUCKET", "").strip()
        self.spaces_endpoint = os.getenv("DO_SPACES_ENDPOINT", "").strip()
        self.spaces_region = os.getenv("DO_SPACES_REGION", "fra1").strip()
        self.spaces_key = os.getenv("DO_SPACES_KEY", "").strip()
        self.spaces_secret = os.getenv("DO_SPACES_SECRET", "").strip()

        # argon2 cost factors
        self.password_hash_time_cost = _int("PASSWORD_HASH_TIME_COST", 3)
        self.password_hash_memory_cost = _int("PASSWORD_HASH_MEMORY_COST", 65536)

        self.token_expiry_days = _int("TOKEN_EXPIRY_DAYS", 7)
        self.token_sweep_interval_seconds = _int("TOKEN_SWEEP_INTERVAL_SECONDS", 60 * 60)
        self.attachment_retention_hours = _int("ATTACHMENT_RETENTION_HOURS", 24)
        self.attachment_sweep_interval_seconds = _int("ATTACHMENT_SWEEP_INTERVAL_SECONDS", 24 * 60 * 60)
        self.enable_background_sweeps = _bool("ENABLE_BACKGROUND_SWEEPS", True)

        self.max_profile_image_bytes = _int("MAX_PROFILE_IMAGE_BYTES", 2 * 1024 * 1024)
        self.max_attachment_bytes = _int("MAX_ATTACHMENT_BYTES", 5 * 1024 * 1024)


@lru_cache
def get_settings() -> Settings:
    return Settings()
