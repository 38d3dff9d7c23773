"""Engine configuration: pydantic schema plus YAML loader."""

from autocenter_events.config.loader import ConfigError, load_config
from autocenter_events.config.schema import (
    AlignmentConfig,
    EngineConfig,
    FirebaseConfig,
    GatewayConfig,
    RegistryConfig,
    ServiceConfig,
)

__all__ = [
    "AlignmentConfig",
    "ConfigError",
    "EngineConfig",
    "FirebaseConfig",
    "GatewayConfig",
    "RegistryConfig",
    "ServiceConfig",
    "load_config",
]
