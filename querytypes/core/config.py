from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="QUERYTYPES_", extra="ignore")

    app_name: str = "querytypes"
    log_level: str = "INFO"

    worker_backend: Literal["process", "celery"] = "process"
    pool_size: Optional[int] = None

    redis_url: str = "redis://localhost:6379/0"

settings = Settings()
