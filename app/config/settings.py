from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Used for table access and the seed script

    # App
    app_name: str = "ai-tools-dashboard"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    locale: str = "en"  # en | bg
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"

    # Caching (seconds)
    category_cache_ttl: int = 300
    dashboard_cache_ttl: int = 60
    auth_cache_ttl: int = 60
    auth_cache_max_size: int = 500

    # Two-factor login
    two_factor_code_ttl_minutes: int = 10
    two_factor_max_attempts: Optional[int] = None  # None keeps retries unlimited

    # Activity log
    activity_log_limit: int = 100

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
