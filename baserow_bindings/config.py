"""
Configuration settings for Baserow Bindings.

Uses Pydantic Settings to load the API token, the Baserow instance URL, the
databases to generate bindings for and the generator/logging knobs. Values
come from (highest priority first) keyword arguments, `BASEROW_*` environment
variables, a `.env` file and a `baserow_config.json` file in the working
directory:

    {
        "token": "...",
        "target_directory": "bindings",
        "databases": [{"name": "Shop", "id": 42}]
    }

Build one Settings at process start and pass it down; library code never
reads configuration on its own.
"""
from __future__ import annotations

import enum
from functools import lru_cache
from pathlib import Path
from typing import List, Tuple, Type

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from baserow_bindings.domain.models import DatabaseConfig

CLOUD_URL = "https://api.baserow.io/"


class FieldFetchPolicy(str, enum.Enum):
    """What the generator does when one table's field schema cannot be fetched."""

    SKIP = "skip"
    ABORT = "abort"


class Settings(BaseSettings):
    # Baserow access
    token: str = Field("", description="Database token sent as `Authorization: Token <token>`.")
    base_url: str = Field(CLOUD_URL, description="Baserow instance URL.")
    http_timeout_seconds: float = Field(30.0, gt=0)

    # Generation
    target_directory: Path = Field(Path("bindings"))
    databases: List[DatabaseConfig] = Field(default_factory=list)
    fetch_concurrency: int = Field(1, ge=1)
    on_field_fetch_failure: FieldFetchPolicy = FieldFetchPolicy.SKIP

    # Application
    log_level: str = Field("INFO")
    json_logs: bool = Field(False)

    model_config = SettingsConfigDict(
        env_prefix="BASEROW_",
        env_file=".env",
        env_file_encoding="utf-8",
        json_file="baserow_config.json",
        json_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def masked_token(self) -> str:
        if len(self.token) <= 4:
            return "*" * len(self.token)
        return f"{self.token[:4]}{'*' * (len(self.token) - 4)}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["CLOUD_URL", "FieldFetchPolicy", "Settings", "get_settings"]
