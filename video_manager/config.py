from dataclasses import dataclass, field
from typing import List, Optional
import os


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    database_url: Optional[str] = None
    auth_username: Optional[str] = None
    auth_password: Optional[str] = None
    auto_migrate: bool = True
    title_fetch_timeout: float = 5.0
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    api_url: str = "http://localhost:8000"


def get_settings() -> Settings:
    """Read settings from the environment (evaluated on every call)."""
    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        database_url=os.getenv("DATABASE_URL") or None,
        auth_username=os.getenv("AUTH_USERNAME") or None,
        auth_password=os.getenv("AUTH_PASSWORD") or None,
        auto_migrate=_as_bool(os.getenv("AUTO_MIGRATE", "true")),
        title_fetch_timeout=float(os.getenv("TITLE_FETCH_TIMEOUT", "5.0")),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        api_url=os.getenv("VIDEO_MANAGER_API_URL", "http://localhost:8000"),
    )
