from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


DEFAULT_CONVERTKIT_API_BASE = "https://api.convertkit.com/v3"
ADMIN_SECRET_PLACEHOLDER = "your_admin_secret_key_here"


def _is_placeholder(value: str) -> bool:
    # .env.example ships values like "your_supabase_url_here"
    v = value.lower()
    return v.startswith("your_") and v.endswith("_here")


def _env(name: str) -> Optional[str]:
    raw = (os.getenv(name) or "").strip()
    if not raw or _is_placeholder(raw):
        return None
    return raw


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str) -> list[str]:
    raw = (os.getenv(name) or "").strip()
    return [x.strip() for x in raw.split(",") if x.strip()]


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str] = None
    admin_secret_key: Optional[str] = None
    convertkit_api_secret: Optional[str] = None
    convertkit_form_id: Optional[str] = None
    convertkit_sequence_id: Optional[str] = None
    convertkit_api_base: str = DEFAULT_CONVERTKIT_API_BASE
    convertkit_timeout_seconds: int = 5
    report_tz_offset_hours: int = 0
    cors_allow_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=_env("DATABASE_URL"),
            admin_secret_key=_env("ADMIN_SECRET_KEY"),
            convertkit_api_secret=_env("CONVERTKIT_API_SECRET"),
            convertkit_form_id=_env("CONVERTKIT_FORM_ID"),
            convertkit_sequence_id=_env("CONVERTKIT_SEQUENCE_ID"),
            convertkit_api_base=(_env("CONVERTKIT_API_BASE") or DEFAULT_CONVERTKIT_API_BASE).rstrip("/"),
            convertkit_timeout_seconds=_env_int("CONVERTKIT_TIMEOUT_SECONDS", 5),
            report_tz_offset_hours=_env_int("REPORT_TZ_OFFSET_HOURS", 0),
            cors_allow_origins=_env_list("CORS_ALLOW_ORIGINS") or ["http://localhost:3000"],
            log_level=(_env("LOG_LEVEL") or "INFO").upper(),
        )

    @property
    def database_configured(self) -> bool:
        return bool(self.database_url)

    @property
    def convertkit_configured(self) -> bool:
        return bool(self.convertkit_api_secret and self.convertkit_form_id)

    @property
    def admin_configured(self) -> bool:
        return bool(self.admin_secret_key) and self.admin_secret_key != ADMIN_SECRET_PLACEHOLDER
