import logging
from typing import List, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MODERATION_", env_file=".env", extra="ignore")

    storage_backend: Literal["memory", "json"] = "memory"
    data_dir: str = "data"
    # Admins registered on startup so the moderator registry is never empty
    bootstrap_admin_ids: List[str] = ["admin"]
    log_level: str = "INFO"


settings = Settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
