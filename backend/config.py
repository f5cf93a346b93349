"""
Helios Intel - Runtime Configuration

Environment-driven settings and logging setup.

Environment variables (all optional, .env is honored):
    LOG_LEVEL            Root log level (default INFO)
    JSON_LOGGING         "true" for structured JSON log lines
    STORAGE_BACKEND      memory | file | redis (default memory)
    STORAGE_FILE         Path for the file backend
    STORAGE_MAX_BYTES    Quota for the memory/file backends
    REDIS_URL            Connection URL for the redis backend
    AI_DAILY_BUDGET_USD  Router spend cap (default 50.0)
    AI_FALLBACK_ENABLED  "false" disables the provider fallback chain
    AI_TIMEOUT_SECONDS   Per-request timeout (default 120)
    AI_DEFAULT_MODEL     Overrides the per-task model choice
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from pythonjsonlogger import jsonlogger

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class Settings:
    log_level: str = "INFO"
    json_logging: bool = False
    storage_backend: str = "memory"
    storage_file: Optional[str] = None
    storage_max_bytes: Optional[int] = None
    redis_url: Optional[str] = None
    ai_daily_budget_usd: float = 50.0
    ai_fallback_enabled: bool = True
    ai_timeout_seconds: float = 120.0
    ai_default_model: Optional[str] = None

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        """Load settings from the process environment after reading .env."""
        load_dotenv(env_file)
        max_bytes = os.getenv("STORAGE_MAX_BYTES")
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            json_logging=_env_flag("JSON_LOGGING"),
            storage_backend=os.getenv("STORAGE_BACKEND", "memory"),
            storage_file=os.getenv("STORAGE_FILE"),
            storage_max_bytes=int(max_bytes) if max_bytes else None,
            redis_url=os.getenv("REDIS_URL"),
            ai_daily_budget_usd=float(os.getenv("AI_DAILY_BUDGET_USD", "50.0")),
            ai_fallback_enabled=_env_flag("AI_FALLBACK_ENABLED", "true"),
            ai_timeout_seconds=float(os.getenv("AI_TIMEOUT_SECONDS", "120")),
            ai_default_model=os.getenv("AI_DEFAULT_MODEL") or None,
        )


def configure_logging(settings: Optional[Settings] = None):
    """Install a single root handler, plain text or JSON."""
    settings = settings or Settings.from_env()
    handler = logging.StreamHandler()
    if settings.json_logging:
        handler.setFormatter(jsonlogger.JsonFormatter(
            LOG_FORMAT,
            rename_fields={"asctime": "timestamp", "levelname": "level"}
        ))
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, settings.log_level, logging.INFO))
    if settings.json_logging:
        logger.info("JSON logging enabled")
    return handler
