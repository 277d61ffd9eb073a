from __future__ import annotations

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    POSTGRES_USER: str = "forumx"
    POSTGRES_PASSWORD: str = "forumx"
    POSTGRES_DB: str = "forumx"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300

    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"

    CORS_ORIGINS: list[str] = ["*"]

    WS_HEARTBEAT_SECONDS: int = 30

    MESSAGE_MAX_LENGTH: int = 2000
    MESSAGES_PAGE_SIZE: int = 50

    # Mesh topology: every pair of participants holds its own peer connection.
    AUDIO_ROOM_MAX_PARTICIPANTS: int = 50

    LOG_LEVEL: str = "info"

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
