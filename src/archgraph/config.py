"""
Configuration loading.

Settings come from ``.archgraph/config.yaml`` when present, then
environment variables override the store location:

    ARCHGRAPH_STORE     http | sqlite
    ARCHGRAPH_API_URL   base URL of the dashboard API
    ARCHGRAPH_DB_PATH   path of the local SQLite store
"""

import logging
import os
from enum import StrEnum
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .canvas.viewport import Viewport
from .core.exceptions import ConfigError
from .graph.layout import LayoutConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(".archgraph/config.yaml")
DEFAULT_DB_PATH = Path(".archgraph/archgraph.db")
DEFAULT_API_URL = "http://localhost:8080/api"


class StoreBackend(StrEnum):
    HTTP = "http"
    SQLITE = "sqlite"


class StoreSettings(BaseModel):
    backend: StoreBackend = StoreBackend.SQLITE
    api_url: str = DEFAULT_API_URL
    db_path: Path = DEFAULT_DB_PATH
    timeout: float = Field(default=30.0, gt=0)


class ViewportSettings(BaseModel):
    min_zoom: float = Field(default=0.1, gt=0)
    max_zoom: float = Field(default=2.0, gt=0)

    @model_validator(mode="after")
    def _check_range(self) -> "ViewportSettings":
        if self.min_zoom > self.max_zoom:
            raise ValueError("min_zoom must not exceed max_zoom")
        return self

    def initial_viewport(self) -> Viewport:
        """Identity viewport carrying the configured zoom limits."""
        return Viewport(min_zoom=self.min_zoom, max_zoom=self.max_zoom)


class ArchgraphConfig(BaseModel):
    store: StoreSettings = Field(default_factory=StoreSettings)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    viewport: ViewportSettings = Field(default_factory=ViewportSettings)

    model_config = ConfigDict(extra="ignore")


ENV_OVERRIDES = {
    "ARCHGRAPH_STORE": "backend",
    "ARCHGRAPH_API_URL": "api_url",
    "ARCHGRAPH_DB_PATH": "db_path",
}


def _apply_env(data: Dict[str, Any]) -> Dict[str, Any]:
    store = dict(data.get("store") or {})
    for env_name, key in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            store[key] = value
    return {**data, "store": store}


def load_config(path: Optional[Path] = None) -> ArchgraphConfig:
    """
    Load configuration from YAML plus environment overrides.

    A missing file yields defaults.

    Raises:
        ConfigError: If the file is unreadable or fails validation.
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    data: Dict[str, Any] = {}

    if config_path.exists():
        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(str(config_path), str(e)) from e
        if not isinstance(data, dict):
            raise ConfigError(str(config_path), "top level must be a mapping")
        if not isinstance(data.get("store") or {}, dict):
            raise ConfigError(str(config_path), "store must be a mapping")
    elif path is not None:
        logger.warning(f"Config file not found: {config_path}, using defaults")

    try:
        return ArchgraphConfig.model_validate(_apply_env(data))
    except ValidationError as e:
        raise ConfigError(str(config_path), str(e)) from e
