from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    DATABASE_URL: str = "sqlite:///./jobboard.db"

    # JWT Authentication
    # No default: the app refuses to start without a signing secret.
    SECRET_KEY: str = ""
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 2

    # Password hashing
    BCRYPT_ROUNDS: int = 10

    # Session cookie
    COOKIE_NAME: str = "token"
    COOKIE_SECURE: bool = False
    COOKIE_SAMESITE: str = "lax"

    # Application
    APP_NAME: str = "JobBoard"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    BACKEND_CORS_ORIGINS: str = (
        "http://localhost:3000,"
        "http://127.0.0.1:3000"
    )


settings = Settings()
