import json
from typing import Annotated, List, Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    SECRET_KEY: SecretStr
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB: str = "scholaro"

    # Empty selects the in-memory cache backend
    REDIS_URL: str = ""
    CACHE_EXPIRE: int = 300
    CACHE_PREFIX: str = "scholaro-cache"

    CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]
    API_PREFIX: str = "/api"
    ALLOW_SEED_DATA: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            if v.startswith("["):
                return json.loads(v)
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
