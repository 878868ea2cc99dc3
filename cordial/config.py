"""Configuration management with Pydantic Settings + optional YAML."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from cordial import __version__
from cordial.utils.platform import get_config_dir


class HTTPConfig(BaseModel):
    token: str = ""
    base_url: str = "https://discord.com/api"
    api_version: int = 10
    timeout: float = 30.0
    user_agent: str = f"DiscordBot (https://github.com/cordial-py/cordial, {__version__})"

    @property
    def api_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/v{self.api_version}"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CORDIAL_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    http: HTTPConfig = Field(default_factory=HTTPConfig)
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Env vars win over values passed in from YAML
        return env_settings, init_settings, dotenv_settings, file_secret_settings


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from env vars, optionally overlaying a YAML config."""
    yaml_data: dict[str, Any] = {}

    # Determine config file path
    if config_path is None:
        config_path = os.environ.get("CORDIAL_CONFIG")
    if config_path is None:
        default = get_config_dir() / "config.yaml"
        if default.exists():
            config_path = default

    # Load YAML if found
    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}

    # Build settings: YAML values as defaults, env vars override
    return Settings(**yaml_data)
