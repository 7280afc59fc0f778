# bolucompras/config.py
"""Settings for the API server and the SDK.

Values come from environment variables; a ``.env`` file in the working
directory is loaded first so local setups don't need to export anything.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Optional, Tuple

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite:///./bolucompras.db"
DEFAULT_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    allowed_origins: Tuple[str, ...] = DEFAULT_ORIGINS
    page_size: int = 10
    log_level: str = "INFO"
    enable_reset: bool = False
    backend_url: str = "http://localhost:9002"
    port: int = 9002


def _coerce_origins(raw: str | Iterable[str]) -> Tuple[str, ...]:
    if isinstance(raw, str):
        items = [piece.strip() for piece in raw.split(",")]
    else:
        items = [piece.strip() for piece in raw]
    return tuple(filter(None, items)) or DEFAULT_ORIGINS


def _as_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings(env: Optional[Mapping[str, str]] = None, dotenv_path: Optional[Path] = None) -> Settings:
    """Build ``Settings`` from ``env`` (defaults to ``os.environ``)."""
    if env is None:
        load_dotenv(dotenv_path or Path.cwd() / ".env")
        env = os.environ
    env_map = dict(env)

    page_size = int(env_map.get("PAGE_SIZE", "10"))
    if page_size < 1:
        raise ValueError("PAGE_SIZE must be >= 1")

    return Settings(
        database_url=env_map.get("DATABASE_URL", DEFAULT_DATABASE_URL),
        allowed_origins=_coerce_origins(env_map.get("ALLOWED_ORIGINS", ",".join(DEFAULT_ORIGINS))),
        page_size=page_size,
        log_level=env_map.get("LOG_LEVEL", "INFO").upper(),
        enable_reset=_as_bool(env_map.get("ENABLE_RESET", "false")),
        backend_url=env_map.get("BACKEND_URL", "http://localhost:9002").rstrip("/"),
        port=int(env_map.get("PORT", "9002")),
    )
