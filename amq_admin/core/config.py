# amq_admin/core/config.py
import json
from functools import lru_cache
from typing import Annotated, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central settings loaded from environment variables (and .env).

    Notes
    -----
    - Every field can be set as AMQ_ADMIN_<FIELD>, e.g.
        AMQ_ADMIN_JOLOKIA_URL=http://broker:8161/api/jolokia
    - `topics_order_field` selects the list-topics sort key; unset sorts by name.
    - `cors_allow_origins` accepts JSON array or comma-separated string.
    """
    model_config = SettingsConfigDict(
        env_prefix="AMQ_ADMIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------- Broker management endpoint (Jolokia) ----------
    jolokia_url: str = Field("http://localhost:8161/api/jolokia")
    broker_name: str = "localhost"
    username: Optional[str] = "admin"
    password: Optional[str] = "admin"

    # HTTP timeout per management request (seconds)
    request_timeout_sec: float = 20.0

    # Connect-time probe retry
    connect_max_tries: int = Field(default=3, ge=1)
    connect_backoff_sec: float = 1.0

    # ---------- Commands ----------
    topics_order_field: Optional[Literal["Enqueued", "Dequeued"]] = Field(
        default=None,
        description="Sort key for list-topics; name order when unset.",
    )
    max_workers: int = Field(
        default=8, ge=1, le=64,
        description="Thread pool size for per-topic fan-out.",
    )
    table_format: str = "psql"

    # ---------- Logging ----------
    log_level: str = "WARNING"

    # ---------- CORS (REST surface) ----------
    cors_allow_origins: Annotated[list[str] | None, NoDecode] = None

    @field_validator("topics_order_field", mode="before")
    def _blank_order_field(cls, v):
        """Treat an empty value as 'sort by name'."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("cors_allow_origins", mode="before")
    def _parse_cors_origins(cls, v):
        """Accept JSON array or comma-separated string."""
        if v is None:
            return None
        if isinstance(v, str):
            try:
                parsed = json.loads(v)  # JSON array
            except ValueError:
                return [s.strip() for s in v.split(",") if s.strip()]
            if isinstance(parsed, list):
                return [str(s).strip() for s in parsed if str(s).strip()]
            return [str(parsed)]
        return v


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()  # pragma: no cover
