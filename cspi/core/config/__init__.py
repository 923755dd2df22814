"""Configuration management module."""

from cspi.core.config.settings import (
    CacheConfig,
    ConfigManager,
    CSPIConfig,
    LoggingConfig,
    SourceConfig,
    TransportConfig,
    WebConfig,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "ConfigManager",
    "CSPIConfig",
    "CacheConfig",
    "TransportConfig",
    "SourceConfig",
    "LoggingConfig",
    "WebConfig",
    "get_default_config",
    "load_config_from_env",
]
