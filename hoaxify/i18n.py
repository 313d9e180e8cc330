import json
from functools import lru_cache
from pathlib import Path

from fastapi import Request

LOCALES_DIR = Path(__file__).parent / "locales"
DEFAULT_LOCALE = "en"
SUPPORTED_LOCALES = ("en", "tr")


@lru_cache
def _catalog(locale: str) -> dict[str, str]:
    with open(LOCALES_DIR / f"{locale}.json", encoding="utf-8") as f:
        return json.load(f)


def translate(key: str, locale: str = DEFAULT_LOCALE) -> str:
    if locale not in SUPPORTED_LOCALES:
        locale = DEFAULT_LOCALE
    return _catalog(locale).get(key) or _catalog(DEFAULT_LOCALE).get(key, key)


def resolve_locale(accept_language: str | None) -> str:
    """Pick the first supported primary tag, e.g. ``tr-TR,tr;q=0.9,en;q=0.8`` -> ``tr``."""
    if not accept_language:
        return DEFAULT_LOCALE
    for part in accept_language.split(","):
        tag = part.split(";")[0].strip().lower()
        primary = tag.split("-")[0]
        if primary in SUPPORTED_LOCALES:
            return primary
    return DEFAULT_LOCALE


def get_locale(request: Request) -> str:
    return resolve_locale(request.headers.get("accept-language"))
