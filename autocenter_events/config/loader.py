import os
import re
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError

from autocenter_events.config.schema import EngineConfig
from autocenter_events.logging_config import get_logger

logger = get_logger(__name__)

CONFIG_ENV_VAR = "AUTOCENTER_CONFIG"
DEFAULT_CONFIG_PATH = Path("autocenter.yml")


class ConfigError(ValueError):
    """Configuration file exists but does not validate."""


def expand_env_vars(config: object) -> object:
    """Recursively replace ``${VAR}`` patterns with environment variable values.

    Unset variables are left as-is so validation reports them verbatim.
    """
    if isinstance(config, dict):
        return {k: expand_env_vars(v) for k, v in config.items()}  # type: ignore[misc]
    if isinstance(config, list):
        return [expand_env_vars(item) for item in config]
    if isinstance(config, str):

        def replace_env_var(match: re.Match[str]) -> str:
            return os.getenv(match.group(1), match.group(0))

        return re.sub(r"\$\{([^}]+)\}", replace_env_var, config)
    return config


def _warn_unknown_keys(model: BaseModel, path: str, config_path: Path) -> None:
    """Recursively warn about unknown keys in a model and its nested models."""
    if model.model_extra:
        logger.warning("unknown config keys", section=path, config_path=str(config_path), keys=list(model.model_extra))

    for field_name, field_value in model.__dict__.items():
        if isinstance(field_value, BaseModel):
            _warn_unknown_keys(field_value, f"{path}.{field_name}", config_path)


def resolve_config_path(path: Optional[Path] = None) -> Path:
    if path is not None:
        return Path(path).expanduser()
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH


def load_config(path: Optional[Path] = None) -> EngineConfig:
    """Load and validate engine configuration from a YAML file.

    Args:
        path: Explicit config path. Falls back to ``$AUTOCENTER_CONFIG`` and
            then ``./autocenter.yml``.

    Returns:
        The validated configuration. A missing or unreadable file yields defaults.

    Raises:
        ConfigError: The file was read but its contents are invalid.
    """
    load_dotenv()
    config_path = resolve_config_path(path)
    if not config_path.exists():
        return EngineConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("failed to read config file", config_path=str(config_path), error=str(e))
        return EngineConfig()

    try:
        model = EngineConfig.model_validate(expand_env_vars(raw))
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e
    _warn_unknown_keys(model, "root", config_path)
    return model
