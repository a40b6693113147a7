from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "SafeBox"
    API_STR: str = "/api"
    DATABASE_URL: str = "sqlite+aiosqlite:///./safebox.db"
    DATABASE_ECHO: bool = False
    UPLOAD_DIR: str = "./uploads"
    PUBLIC_BASE_URL: str = "http://localhost:5000"
    MAX_UPLOAD_SIZE_MB: int = 100
    ACTIVITY_LIMIT: int = 10
    RECENT_DAYS: int = 7
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def max_upload_size(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
