from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql+psycopg2://clearday:clearday@db:5432/clearday"
    APP_ENV: str = "development"
    SECRET_KEY: str = "changeme-secret-key"
    LOG_LEVEL: str = "INFO"

    # Access tokens are HS256 JWTs signed with SECRET_KEY.
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    JWT_AUDIENCE: str = "authenticated"

    SIGNUP_ENABLED: bool = True
    PASSWORD_MIN_LENGTH: int = 8

    RATE_LIMIT_ENABLED: bool = True

    # Days per ISO week with at least one completed task.
    WEEKLY_TASK_GOAL: int = 7
    DEFAULT_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 200

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://clearday.app,https://api.clearday.app"
    CORS_ORIGINS: str = "*"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
