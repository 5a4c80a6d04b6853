"""
Configuration, constants, and logging.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

# --- LOAD ENV ---
load_dotenv()

# --- LOGGING ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger("email_writer")


def log_event(level: int, message: str, **data):
    """Lightweight structured logging helper."""
    try:
        serialized = " | ".join(f"{k}={v}" for k, v in data.items())
        logger.log(level, f"{message}{' | ' + serialized if serialized else ''}")
    except Exception:
        logger.log(level, message)


# --- PATHS ---
LOCALES_DIR = Path(__file__).parent / "locales"

# --- CONSTANTS ---
DEFAULT_API_URL = "http://localhost:3001/api/generate"
DEFAULT_API_TIMEOUT = 60.0  # seconds
DEFAULT_PORT = 5050

FALLBACK_LOCALE = "en-US"
# Left untouched unless the deploy step substitutes a real locale tag
APP_LOCALE_PLACEHOLDER = "{{APP_LOCALE}}"

MAX_THOUGHTS_LENGTH = 5000
MAX_CONTEXT_LENGTH = 10000


def _read_number(environ: Mapping[str, str], name: str, default, cast):
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw)
    except ValueError:
        log_event(logging.WARNING, "invalid_setting", name=name, value=raw, default=default)
        return default
    if value <= 0:
        log_event(logging.WARNING, "invalid_setting", name=name, value=raw, default=default)
        return default
    return value


def _read_flag(environ: Mapping[str, str], name: str) -> bool:
    return environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read once when the app is created."""
    api_url: str = DEFAULT_API_URL
    app_locale: str = APP_LOCALE_PLACEHOLDER
    api_timeout: float = DEFAULT_API_TIMEOUT
    locales_dir: Path = LOCALES_DIR
    port: int = DEFAULT_PORT
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        locales_dir = env.get("LOCALES_DIR", "").strip()
        return cls(
            api_url=env.get("API_URL", "").strip() or DEFAULT_API_URL,
            app_locale=env.get("APP_LOCALE", "").strip() or APP_LOCALE_PLACEHOLDER,
            api_timeout=_read_number(env, "API_TIMEOUT", DEFAULT_API_TIMEOUT, float),
            locales_dir=Path(locales_dir) if locales_dir else LOCALES_DIR,
            port=_read_number(env, "PORT", DEFAULT_PORT, int),
            debug=_read_flag(env, "DEBUG"),
        )
