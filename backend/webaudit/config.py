from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    PROJECT_NAME: str = "WebAudit"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"

    API_PREFIX: str = "/api"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    DATABASE_URL: str
    REDIS_URL: str = "redis://localhost:6379/0"

    # Cache Configuration
    # Backend: "redis" for a shared cache, "memory" for a single process
    CACHE_BACKEND: str = "redis"
    CACHE_TTL_SECONDS: int = 600
    CACHE_KEY_PREFIX: str = "audit:"

    # Rate Limiting Configuration
    # Backend: "memory" (per process) or "redis" (shared across workers)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_BACKEND: str = "memory"
    RATE_LIMIT_WINDOW_MS: int = 60_000
    RATE_LIMIT_MAX_REQUESTS: int = 10

    # Header set by the edge proxy with the real client address
    CLIENT_IP_HEADER: str = "cf-connecting-ip"

    # Outbound fetch
    FETCH_TIMEOUT_MS: int = 8000
    FETCH_USER_AGENT: str = "WebAuditBot/0.1 (+https://webaudit.dev/bot)"

    # Admin history listing; empty token disables the route
    ADMIN_TOKEN: str = ""
    ADMIN_HISTORY_LIMIT: int = 50

    CORS_ORIGINS: str = "*"

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @property
    def cors_origins_list(self) -> List[str]:
        if isinstance(self.CORS_ORIGINS, str):
            return [o.strip() for o in self.CORS_ORIGINS.split(",")]
        return self.CORS_ORIGINS

    @property
    def async_database_url(self) -> str:
        return self.DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://")


settings = Settings()
