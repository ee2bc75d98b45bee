from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator

load_dotenv()


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite://./portfolio.db"
    # Security
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRES_MIN: int = 1440
    # App
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Storage
    PHOTO_DIR: str = "./photos"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024  # 10 MiB

    # Observability
    SENTRY_DSN: str = ""
    METRICS_ENABLED: bool = False

    @field_validator("JWT_SECRET")
    @classmethod
    def require_secret(cls, v: str):
        if not v or not v.strip():
            raise ValueError("JWT_SECRET must be set to a non-empty value")
        return v

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return (self.APP_ENV or "").strip().lower() == "production"


settings = Settings()

TORTOISE_ORM = {
    "connections": {
        "default": settings.DATABASE_URL
    },
    "apps": {
        "models": {
            "models": [
                "portfolio.models.user",
                "portfolio.models.photo",
            ],
            "default_connection": "default",
        }
    },
    "use_tz": True,
    "timezone": "UTC",
}
