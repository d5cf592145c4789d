"""Runtime configuration for dirt-finder."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="DIRT_FINDER_", env_file=".env", extra="ignore")

    app_name: str = "dirt-finder"
    log_level: str = "WARNING"
    workers: int | None = Field(
        default=None,
        ge=1,
        description="Worker count; defaults to the number of available CPUs.",
    )
    backend: Literal["process", "thread"] = "process"
    batch_size: int = Field(default=64, ge=1, description="Matches buffered per worker before hand-off.")
    start_method: str | None = Field(default=None, description="multiprocessing start method override.")


settings = Settings()
