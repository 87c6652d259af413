"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field

from skyvoice.models.common import MetricId, Timeframe


class ForecastProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.pirateweather.net"
    exclude: str = "hrrr"
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    max_retries: int = Field(default=3, ge=0)
    retry_base_delay: float = Field(default=2.0, ge=0.0)


class LlmProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4o-mini"
    max_tokens: int = Field(default=100, ge=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)


class GeocoderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://nominatim.openstreetmap.org"
    user_agent: str = "skyvoice/0.1.0"
    timeout_seconds: float = Field(default=15.0, gt=0.0)


class DeviceConfig(BaseModel):
    """Fixed coordinates standing in for a device GPS fix."""

    model_config = {"extra": "forbid"}

    services_enabled: bool = True
    permission_granted: bool = True
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)


class TimingConfig(BaseModel):
    model_config = {"extra": "forbid"}

    search_debounce_ms: int = Field(default=500, ge=0)
    summary_debounce_ms: int = Field(default=50, ge=0)
    personality_transition_ms: int = Field(default=2000, ge=0)
    location_timeout_seconds: float = Field(default=20.0, gt=0.0)
    location_max_age_seconds: float = Field(default=60.0, ge=0.0)


class SearchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    min_query_length: int = Field(default=3, ge=1)
    max_candidates: int = Field(default=5, ge=1, le=20)


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    default_timeframe: Timeframe = Timeframe.NOW
    default_metric: MetricId = MetricId.TEMPERATURE


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    forecast: ForecastProviderConfig = ForecastProviderConfig()
    llm: LlmProviderConfig = LlmProviderConfig()
    geocoder: GeocoderConfig = GeocoderConfig()
    device: DeviceConfig = DeviceConfig()
    timing: TimingConfig = TimingConfig()
    search: SearchConfig = SearchConfig()
    display: DisplayConfig = DisplayConfig()
