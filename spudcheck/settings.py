# spudcheck/settings.py
# Centralized configuration for the service.

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional, Tuple


def _clean(value: Optional[str]) -> str:
    return (value or "").strip().strip('"').strip("'")


def _as_bool(value: Optional[str], default: bool) -> bool:
    value = _clean(value).lower()
    if not value:
        return default
    return value in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """
    All configuration is read from environment variables, once, at process start.
    Do NOT commit secrets; set them in your hosting provider (e.g., Netlify/Railway variables).

    The handler is given a Settings instance when it is built and never looks at
    os.environ again while serving a request.
    """

    # --- API keys / endpoints ---
    GOOGLE_API_KEY: Optional[str] = None
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com"

    # --- Models ---
    GEMINI_MODEL: str = "gemini-2.5-flash-preview-05-20"

    # --- Time budgets (seconds) ---
    PROVIDER_TIMEOUT: float = 60.0
    DISCONNECT_POLL_INTERVAL: float = 0.5
    CANCEL_ON_DISCONNECT: bool = True

    # --- Wire format ---
    # True restores plain-text error bodies for callers written against the old format.
    LEGACY_ERROR_BODIES: bool = False

    # --- Misc ---
    CORS_ORIGINS: Tuple[str, ...] = ("*",)
    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        api_key = _clean(env.get("GOOGLE_API_KEY")) or _clean(env.get("GEMINI_API_KEY"))
        origins = tuple(o.strip() for o in _clean(env.get("CORS_ORIGINS")).split(",") if o.strip())

        return cls(
            GOOGLE_API_KEY=api_key or None,
            GEMINI_BASE_URL=(_clean(env.get("GEMINI_BASE_URL")) or cls.GEMINI_BASE_URL).rstrip("/"),
            GEMINI_MODEL=_clean(env.get("GEMINI_MODEL")) or cls.GEMINI_MODEL,
            PROVIDER_TIMEOUT=float(_clean(env.get("PROVIDER_TIMEOUT")) or cls.PROVIDER_TIMEOUT),
            DISCONNECT_POLL_INTERVAL=float(
                _clean(env.get("DISCONNECT_POLL_INTERVAL")) or cls.DISCONNECT_POLL_INTERVAL
            ),
            CANCEL_ON_DISCONNECT=_as_bool(env.get("CANCEL_ON_DISCONNECT"), cls.CANCEL_ON_DISCONNECT),
            LEGACY_ERROR_BODIES=_as_bool(env.get("LEGACY_ERROR_BODIES"), cls.LEGACY_ERROR_BODIES),
            CORS_ORIGINS=origins or cls.CORS_ORIGINS,
            LOG_LEVEL=(_clean(env.get("LOG_LEVEL")) or cls.LOG_LEVEL).upper(),
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self.GOOGLE_API_KEY)

    @property
    def generate_content_url(self) -> str:
        # The key travels as the `key` query parameter, never in this string.
        return f"{self.GEMINI_BASE_URL}/v1beta/models/{self.GEMINI_MODEL}:generateContent"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Cached accessor for settings.
    Usage:
        from spudcheck.settings import get_settings
        st = get_settings()
    """
    return Settings.from_env()
