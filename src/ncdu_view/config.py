# src/ncdu_view/config.py
"""
Configuration loader for ncdu-view.

Settings are read from an optional YAML file, then overridden by
environment variables (a ``.env`` file in the working directory is loaded
first if present).

Example config.yaml:
    export_path: /var/lib/ncdu/home.json
    refresh_interval_hours: 3
    host: 0.0.0.0
    port: 3000
    log_level: info
    log_directory: /var/log/ncdu-view
"""
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "NCDU_VIEW_CONFIG"

# Environment variable -> config field
ENV_OVERRIDES = {
    "NCDU_FILE_PATH": "export_path",
    "REFRESH_INTERVAL_HOURS": "refresh_interval_hours",
    "HOST": "host",
    "PORT": "port",
    "NCDU_VIEW_LOG_LEVEL": "log_level",
    "NCDU_VIEW_LOG_DIR": "log_directory",
    "NCDU_VIEW_LOG_JSON": "log_json",
}


class ViewerConfig(BaseModel):
    """Runtime settings for the export viewer service."""
    export_path: Path = Field(Path("ncdu-export.json"), description="ncdu JSON export to serve")
    refresh_interval_hours: float = Field(3.0, gt=0, description="Re-read the export when older than this")
    host: str = "127.0.0.1"
    port: int = Field(3000, ge=1, le=65535)
    log_level: str = "INFO"
    log_directory: Path = Path("logs")
    log_json: bool = False
    development: bool = False

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def refresh_interval_seconds(self) -> float:
        return self.refresh_interval_hours * 3600


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")
    return data


def _env_overrides() -> Dict[str, Any]:
    overrides = {}
    for env_name, field in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            overrides[field] = value
    if os.getenv("NCDU_VIEW_ENV", "").lower() == "development":
        overrides["development"] = True
    return overrides


def load_config(path: Optional[Union[str, Path]] = None, use_env: bool = True) -> ViewerConfig:
    """Build a ViewerConfig from a YAML file and the environment.

    ``path`` defaults to $NCDU_VIEW_CONFIG when set; without a file only
    defaults and environment variables apply.
    """
    if use_env:
        load_dotenv()
        if path is None:
            path = os.getenv(CONFIG_ENV_VAR) or None

    data: Dict[str, Any] = {}
    if path is not None:
        data.update(_read_yaml(Path(path)))
        logger.debug(f"Loaded config file {path}")
    if use_env:
        data.update(_env_overrides())

    try:
        return ViewerConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}", context={"source": str(path) if path else "env"}) from e
