from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://tracegreen:tracegreen@db:5432/tracegreen"
    APP_ENV: str = "development"
    SECRET_KEY: str = "changeme-secret-key"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://tracegreen.app,https://admin.tracegreen.app"
    CORS_ORIGINS: str = "*"

    # Gamification
    POINTS_PER_ACTIVITY: int = 10
    POINTS_PER_LEVEL: int = 500
    DEFAULT_MONTHLY_GOAL: Decimal = Decimal("500")

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
