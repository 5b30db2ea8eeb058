"""
Configuration for techtree.

Resolution order (later wins):
    built-in defaults < .techtree/config.yaml < TECHTREE_* environment
    variables < explicit CLI options
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .core.errors import ConfigError
from .core.store import DEFAULT_SLOT

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(".techtree")
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# Environment variable -> config field
ENV_VARS: Dict[str, str] = {
    "TECHTREE_TREE": "tree_path",
    "TECHTREE_STATE": "state_path",
    "TECHTREE_BACKEND": "state_backend",
    "TECHTREE_SLOT": "state_slot",
    "TECHTREE_LOG_LEVEL": "log_level",
}

DEFAULT_STATE_PATHS = {
    "json": CONFIG_DIR / "state.json",
    "sqlite": CONFIG_DIR / "state.db",
}


class TechTreeConfig(BaseModel):
    """Effective settings for one CLI invocation."""
    tree_path: Optional[Path] = None
    state_backend: Literal["json", "sqlite", "memory"] = "json"
    state_path: Optional[Path] = None
    state_slot: str = Field(default=DEFAULT_SLOT, min_length=1)
    log_level: str = "WARNING"

    model_config = ConfigDict(extra="forbid")

    @property
    def resolved_state_path(self) -> Optional[Path]:
        if self.state_backend == "memory":
            return None
        return self.state_path or DEFAULT_STATE_PATHS[self.state_backend]


def read_config_file(path: Path = CONFIG_FILE) -> Dict[str, Any]:
    """Read the YAML config file; a missing file yields no settings."""
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must hold a mapping")
    logger.debug(f"Loaded config from {path}")
    return data


def load_config(
    overrides: Optional[Mapping[str, Any]] = None,
    config_path: Path = CONFIG_FILE,
    environ: Optional[Mapping[str, str]] = None,
) -> TechTreeConfig:
    """
    Merge every configuration source into a TechTreeConfig.

    Raises:
        ConfigError: if a source holds unknown keys or invalid values.
    """
    environ = os.environ if environ is None else environ

    settings: Dict[str, Any] = dict(read_config_file(config_path))
    for env_name, field_name in ENV_VARS.items():
        if environ.get(env_name):
            settings[field_name] = environ[env_name]
    for key, value in (overrides or {}).items():
        if value is not None:
            settings[key] = value

    try:
        return TechTreeConfig.model_validate(settings)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
