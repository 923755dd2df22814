"""CSPI core: collectors, transport, scoring and the market engine."""

from cspi.core.config.settings import ConfigManager, CSPIConfig
from cspi.core.models import CollectionResult, CSPILevel, IndicatorName, MarketSnapshot
from cspi.core.services.engine import MarketEngine

__all__ = [
    "MarketEngine",
    "ConfigManager",
    "CSPIConfig",
    "CollectionResult",
    "CSPILevel",
    "IndicatorName",
    "MarketSnapshot",
]
