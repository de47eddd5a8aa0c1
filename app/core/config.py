"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "Deal Discovery API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    database_url: str = getenv("DATABASE_URL", "sqlite:///./deal_discovery.db")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "60"))
    search_default_limit: int = int(getenv("SEARCH_DEFAULT_LIMIT", "20"))
    search_max_limit: int = int(getenv("SEARCH_MAX_LIMIT", "100"))
    deal_sweep_enabled: bool = getenv("DEAL_SWEEP_ENABLED", "1") == "1"
    deal_sweep_interval_seconds: float = float(getenv("DEAL_SWEEP_INTERVAL_SECONDS", "3600"))
    seed_facets: bool = getenv("SEED_FACETS", "1") == "1"


settings: Settings = Settings()
