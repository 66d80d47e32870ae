# invoicedesk/config.py

import logging
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DB_URL = "sqlite:///db.sqlite"  # file in project root
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self):
        self.app_name = "invoicedesk"
        self.api_version = "0.1.0"
        self.database_url = os.getenv("DATABASE_URL", DEFAULT_DB_URL).strip()
        self.store_backend = os.getenv("STORE_BACKEND", "sql").strip().lower()
        self.supabase_url: Optional[str] = os.getenv("SUPABASE_URL") or None
        self.supabase_anon_key: Optional[str] = os.getenv("SUPABASE_ANON_KEY") or None
        self.session_cookie = os.getenv("SESSION_COOKIE", "invoicedesk-session")
        self.require_login = _env_flag("REQUIRE_LOGIN")
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a singleton Settings instance."""
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=level or get_settings().log_level,
        format=LOG_FORMAT,
    )
