# app/core/config.py
from functools import lru_cache
from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_parse_none_str="null",
    )

    PROJECT_NAME: str = "Catalog Backend"
    VERSION: str = "0.1.0"
    # "/api" in the default deployment, "" to serve routes at the root
    API_PREFIX: str = "/api"

    DATABASE_URL: str = "sqlite:///./catalog.db"
    # comma separated list of allowed origins
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    # object store: "local" writes under UPLOAD_DIR, "s3" writes to S3_BUCKET
    STORAGE_BACKEND: str = "local"
    UPLOAD_DIR: str = "storage/app/public"
    ASSET_URL: str = "http://localhost:8000/storage"

    S3_BUCKET: Optional[str] = None
    S3_ENDPOINT: Optional[str] = None
    S3_ACCESS_KEY: Optional[str] = None
    S3_SECRET_KEY: Optional[str] = None
    S3_REGION: Optional[str] = None

    MAX_IMAGE_SIZE_KB: int = 2048
    MAX_CATALOG_SIZE_KB: int = 10240

    # None ("null" in the environment) keeps tokens valid until logout
    TOKEN_EXPIRE_MINUTES: Optional[int] = 60 * 24

    ADMIN_NAME: str = "Administrator"
    ADMIN_EMAIL: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    @property
    def cors_origins(self) -> List[str]:
        return [i.strip() for i in self.CORS_ORIGINS.split(",") if i.strip()]

    @field_validator("API_PREFIX")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
