"""Indicator and risk-tier enums."""

from enum import Enum


class IndicatorName(str, Enum):
    """Indicators that feed the composite score."""

    MVRV = "mvrv"
    ALTCOIN_SEASON = "altcoin_season"
    KIMCHI_PREMIUM = "kimchi_premium"
    BTC_DOMINANCE = "btc_dominance"
    FEAR_GREED = "fear_greed"
    RSI = "rsi"


class CSPILevel(str, Enum):
    """Discrete risk tier derived from the composite score."""

    NO_DATA = "NO_DATA"
    PARTIAL = "PARTIAL"
    LOW = "LOW"
    MEDIUM_LOW = "MEDIUM-LOW"
    MEDIUM = "MEDIUM"
    MEDIUM_HIGH = "MEDIUM-HIGH"
    HIGH = "HIGH"
