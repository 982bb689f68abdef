from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    CONFIG_PATH: Optional[str] = None
    LOG_LEVEL: Optional[str] = None

    model_config = SettingsConfigDict(env_prefix="NODECLEAN_", env_file=".env", case_sensitive=True, extra="ignore")


@lru_cache()
def get_settings():
    return Settings()
