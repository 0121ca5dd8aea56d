from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Tool settings, read from ROUTE_ACTION_GEN_* environment variables or .env.
    CLI options override these per invocation.
    """

    model_config = SettingsConfigDict(
        env_prefix="ROUTE_ACTION_GEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    framework: str = Field(default="auto", description="Target name or 'auto' (detect per directory)")
    log_level: str = Field(default="INFO")
    generated_dir_name: str = Field(default="_generated", min_length=1)
    # When False, files whose content hash already matches are not rewritten.
    write_unchanged: bool = Field(default=False)

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"invalid log level: {v}")
        return level

    @field_validator("generated_dir_name")
    @classmethod
    def _plain_dir_name(cls, v: str) -> str:
        if "/" in v or "\\" in v or not v.isidentifier():
            raise ValueError("generated_dir_name must be a plain identifier")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
