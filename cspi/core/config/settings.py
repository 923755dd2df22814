"""Configuration management for the CSPI engine."""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

DEFAULT_CONFIG_PATH = Path.home() / ".cspi" / "config.toml"


@dataclass
class CacheConfig:
    """Raw fetch cache configuration."""

    ttl_seconds: float = 60.0
    max_entries: int = 50


@dataclass
class TransportConfig:
    """Relay racing and HTTP client configuration."""

    default_timeout: float = 6.0
    relay_routes: list[str] = field(default_factory=lambda: ["allorigins"])
    min_payload_chars: int = 100
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    accept: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


@dataclass
class SourceConfig:
    """Upstream endpoints and per-source timeouts."""

    btc_price_url: str = (
        "https://api.coingecko.com/api/v3/simple/price?ids=bitcoin&vs_currencies=usd"
        "&include_24hr_change=true&include_market_cap=true&include_24hr_vol=true"
    )
    btc_price_backup_url: str = "https://api.coinbase.com/v2/exchange-rates?currency=BTC"
    fear_greed_url: str = "https://api.alternative.me/fng/"
    api_timeout: float = 10.0
    mvrv_service_url: str = "http://localhost:3001/api/mvrv"
    mvrv_service_timeout: float = 15.0
    mvrv_page_url: str = "https://en.macromicro.me/charts/30335/bitcoin-mvrv-zscore"
    mvrv_page_timeout: float = 10.0
    kimchi_page_url: str = "https://coinpaprika.com/exchanges/bithumb/"
    kimchi_page_timeout: float = 6.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str | None = None


@dataclass
class WebConfig:
    """HTTP surface configuration."""

    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class CSPIConfig:
    """Top level CSPI configuration."""

    cache: CacheConfig = field(default_factory=CacheConfig)
    transport: TransportConfig = field(default_factory=TransportConfig)
    sources: SourceConfig = field(default_factory=SourceConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    web: WebConfig = field(default_factory=WebConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "CSPIConfig":
        """Build a configuration from a (possibly partial) nested dict."""
        return cls(
            cache=CacheConfig(**config_dict.get("cache", {})),
            transport=TransportConfig(**config_dict.get("transport", {})),
            sources=SourceConfig(**config_dict.get("sources", {})),
            logging=LoggingConfig(**config_dict.get("logging", {})),
            web=WebConfig(**config_dict.get("web", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a nested dict."""
        return {
            "cache": asdict(self.cache),
            "transport": asdict(self.transport),
            "sources": asdict(self.sources),
            "logging": asdict(self.logging),
            "web": asdict(self.web),
        }


def _deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
    for k, v in u.items():
        if isinstance(v, dict):
            d[k] = _deep_update(d.get(k, {}), v)
        else:
            d[k] = v
    return d


class ConfigManager:
    """Loads configuration from a TOML file layered under ``CSPI_*`` environment variables."""

    def __init__(self, config_path: Path | None = None, *, use_env: bool = True):
        """Initialise the manager.

        Args:
            config_path: TOML file to read, defaults to ``~/.cspi/config.toml``
            use_env: whether ``CSPI_*`` environment variables override the file
        """
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self.use_env = use_env
        self.config = self._load_config()

    def _load_config(self) -> CSPIConfig:
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                config_dict = {}

        if self.use_env:
            _deep_update(config_dict, load_config_from_env())
        return CSPIConfig.from_dict(config_dict)

    def get_config(self) -> CSPIConfig:
        """Return the active configuration."""
        return self.config

    def update_config(self, **updates: Any) -> None:
        """Apply nested updates, e.g. ``update_config(cache={"ttl_seconds": 30})``."""
        config_dict = self.config.to_dict()
        _deep_update(config_dict, updates)
        self.config = CSPIConfig.from_dict(config_dict)


def get_default_config() -> CSPIConfig:
    """Return the built-in defaults."""
    return CSPIConfig()


def load_config_from_env() -> dict[str, Any]:
    """Read ``CSPI_*`` environment variables into a nested config dict."""
    config: dict[str, Any] = {}

    cache_config: dict[str, Any] = {}
    cspi_cache_ttl = os.getenv("CSPI_CACHE_TTL")
    if cspi_cache_ttl is not None:
        cache_config["ttl_seconds"] = float(cspi_cache_ttl)
    cspi_cache_max_entries = os.getenv("CSPI_CACHE_MAX_ENTRIES")
    if cspi_cache_max_entries is not None:
        cache_config["max_entries"] = int(cspi_cache_max_entries)
    if cache_config:
        config["cache"] = cache_config

    transport_config: dict[str, Any] = {}
    cspi_relay_timeout = os.getenv("CSPI_RELAY_TIMEOUT")
    if cspi_relay_timeout is not None:
        transport_config["default_timeout"] = float(cspi_relay_timeout)
    cspi_relay_routes = os.getenv("CSPI_RELAY_ROUTES")
    if cspi_relay_routes:
        transport_config["relay_routes"] = [r.strip() for r in cspi_relay_routes.split(",") if r.strip()]
    if transport_config:
        config["transport"] = transport_config

    source_config: dict[str, Any] = {}
    cspi_mvrv_service_url = os.getenv("CSPI_MVRV_SERVICE_URL")
    if cspi_mvrv_service_url:
        source_config["mvrv_service_url"] = cspi_mvrv_service_url
    cspi_mvrv_service_timeout = os.getenv("CSPI_MVRV_SERVICE_TIMEOUT")
    if cspi_mvrv_service_timeout is not None:
        source_config["mvrv_service_timeout"] = float(cspi_mvrv_service_timeout)
    if source_config:
        config["sources"] = source_config

    logging_config: dict[str, Any] = {}
    cspi_logging_level = os.getenv("CSPI_LOGGING_LEVEL")
    if cspi_logging_level is not None:
        logging_config["level"] = cspi_logging_level
    cspi_logging_file = os.getenv("CSPI_LOGGING_FILE")
    if cspi_logging_file:
        logging_config["file"] = cspi_logging_file
    if logging_config:
        config["logging"] = logging_config

    web_config: dict[str, Any] = {}
    if os.getenv("CSPI_HOST"):
        web_config["host"] = os.getenv("CSPI_HOST")
    cspi_port = os.getenv("CSPI_PORT")
    if cspi_port is not None:
        web_config["port"] = int(cspi_port)
    if web_config:
        config["web"] = web_config

    return config
