import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SAGE_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    config_path: str = "sage_config.json"
    data_dir: str = "./data"
    poll_interval_seconds: float = 10.0
    github_token: str | None = None
    log_json: bool = True


class ConfigError(Exception):
    """Raised when the config file cannot be read or validated."""


class GitHubConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    owner: str
    repo: str
    token: str | None = None


class SageConfig(BaseModel):
    """File-based configuration, ``sage_config.json`` by default. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    github: GitHubConfig
    data_dir: str | None = None
    dry_run: bool = False
    # Fallback webhook for issues that have none stored yet.
    webhook_url: str | None = None


def load_config(config_path: str | Path = "sage_config.json") -> SageConfig:
    """Load and validate a JSON or YAML config file, resolved against the working directory.

    Raises:
        ConfigError: If the file is missing, unparsable, or fails validation.
    """
    try:
        path = Path(config_path).resolve()
        text = path.read_text(encoding="utf-8")
        data: Any = yaml.safe_load(text) if path.suffix in (".yaml", ".yml") else json.loads(text)
        return SageConfig.model_validate(data)
    except Exception as exc:
        raise ConfigError(f"Failed to load configuration: {exc}") from exc


settings = Settings()
