from pydantic import Field
from pydantic_settings import BaseSettings

# Небезопасный ключ по умолчанию: только для локальной разработки
INSECURE_SECRET_KEY = "dev-secret-users"


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./users.db"
    SECRET_KEY: str = INSECURE_SECRET_KEY
    JWT_ALGORITHM: str = "HS256"
    TOKEN_TTL_MINUTES: int = 60
    BCRYPT_ROUNDS: int = Field(10, ge=4)
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"
    EXPOSE_ERROR_DETAILS: bool = False
    CORS_ORIGINS: list[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def uses_insecure_secret(self) -> bool:
        return self.SECRET_KEY == INSECURE_SECRET_KEY


def ensure_secure_secret(settings: Settings, logger) -> None:
    """Предупреждает о ключе по умолчанию; в production отказывается стартовать."""
    if not settings.uses_insecure_secret:
        return
    if settings.ENVIRONMENT.lower() == "production":
        raise RuntimeError("SECRET_KEY must be set in production")
    logger.warning(
        "insecure_secret_key",
        environment=settings.ENVIRONMENT,
        hint="set SECRET_KEY before deploying",
    )


settings = Settings()
