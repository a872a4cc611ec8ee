from pathlib import Path
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict  # type: ignore[import-not-found]


DEFAULT_AIRPORTS_PATH = Path(__file__).resolve().parents[1] / "data" / "airports.json"


class Settings(BaseSettings):
    app_env: str = "local"
    app_name: str = "globehunters"
    port: int = 8000
    log_level: str = "INFO"

    # Redis / CORS
    redis_url: str = "redis://localhost:6379/0"
    cors_origins: list[str] | str = "*"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str] | str:
        if isinstance(v, str):
            if v == "*":
                return "*"
            if "," in v:
                return [origin.strip() for origin in v.split(",") if origin.strip()]
            return [v.strip()] if v.strip() else "*"
        if isinstance(v, list):
            return v
        return "*"

    # Airport directory
    airports_source: str = "static"  # static | vyspa
    airports_data_path: Path = DEFAULT_AIRPORTS_PATH
    airports_cache_ttl_seconds: int = 60 * 60 * 24  # 24 hours
    airports_enrich_names: bool = True

    @field_validator("airports_source", mode="before")
    @classmethod
    def parse_airports_source(cls, v: Any) -> str:
        value = str(v or "static").strip().lower()
        if value not in ("static", "vyspa"):
            raise ValueError("airports_source must be 'static' or 'vyspa'")
        return value

    # Vyspa flight API (airport feed)
    vyspa_api_url: str = "https://api.globehunters.com"
    vyspa_username: str | None = None
    vyspa_password: str | None = None
    vyspa_api_version: str = "1"
    vyspa_timeout_sec: float = 60.0

    # Search / pricing
    search_default_limit: int = 10
    search_max_limit: int = 100
    default_pricing_region: str = "uk"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


settings = Settings()
