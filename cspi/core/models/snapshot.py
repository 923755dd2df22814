"""Market snapshot model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from .indicators import CSPILevel, IndicatorName


class MarketSnapshot(BaseModel):
    """Latest raw and derived market values.

    Every numeric field is either an in-domain value or None. Assignments are
    validated, so an out-of-domain write fails loudly instead of leaking a
    sentinel to consumers.
    """

    model_config = ConfigDict(validate_assignment=True, use_enum_values=False)

    timestamp: datetime | None = None

    btc_price: float | None = Field(None, gt=0)
    btc_price_previous: float | None = Field(None, gt=0)
    btc_change_24h: float | None = None
    btc_market_cap: float | None = Field(None, ge=0)
    btc_volume: float | None = Field(None, ge=0)

    fear_greed_index: int | None = Field(None, ge=0, le=100)
    fear_greed_classification: str | None = None

    mvrv_z_score: float | None = Field(None, ge=-5, le=15)
    rsi_14d: float | None = Field(None, ge=0, le=100)
    altcoin_season_index: float | None = Field(None, ge=0, le=100)
    btc_dominance: float | None = Field(None, ge=0, le=100)
    kimchi_premium: float | None = Field(None, gt=-15, lt=15)

    # mvrv normalisation has no lower clamp, so the score may dip below zero
    cspi_score: float | None = None
    cspi_level: CSPILevel | None = None
    cspi_recommendation: str | None = None

    def indicator_values(self) -> dict[IndicatorName, float | None]:
        """Scoring inputs keyed by indicator."""
        return {
            IndicatorName.MVRV: self.mvrv_z_score,
            IndicatorName.FEAR_GREED: self.fear_greed_index,
            IndicatorName.ALTCOIN_SEASON: self.altcoin_season_index,
            IndicatorName.RSI: self.rsi_14d,
            IndicatorName.KIMCHI_PREMIUM: self.kimchi_premium,
            IndicatorName.BTC_DOMINANCE: self.btc_dominance,
        }

    @field_serializer("timestamp", when_used="json")
    def serialize_timestamp(self, value: datetime | None) -> str | None:
        return value.isoformat() if value else None
