from __future__ import annotations
import json
from datetime import time
from typing import List
from typing_extensions import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: str = "sqlite:///./availability.db"
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []
    LOG_LEVEL: str = "INFO"

    # Public date picker window
    DEFAULT_AVAILABILITY_DAYS: int = 28
    MAX_AVAILABILITY_DAYS: int = 90

    # Hours assumed when a pattern or override row leaves them blank
    DEFAULT_START_TIME: time = time(9, 0)
    DEFAULT_END_TIME: time = time(17, 0)

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str):
            if v.startswith("["):
                return json.loads(v)
            return [o.strip() for o in v.split(",") if o.strip()]
        return v


settings = Settings()
