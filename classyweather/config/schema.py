"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field

from classyweather.ingest.forecast_client import FORECAST_URL
from classyweather.ingest.geocode_client import GEOCODING_URL
from classyweather.ingest.http import DEFAULT_USER_AGENT


class EndpointConfig(BaseModel):
    model_config = {"extra": "forbid"}

    geocoding_url: str = GEOCODING_URL
    forecast_url: str = FORECAST_URL
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    user_agent: str = DEFAULT_USER_AGENT


class SearchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    debounce_ms: int = Field(default=500, ge=0)


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    db_path: str = "data/classyweather.db"
    query_key: str = Field(default="location", min_length=1)


class WidgetConfig(BaseModel):
    model_config = {"extra": "forbid"}

    endpoints: EndpointConfig = EndpointConfig()
    search: SearchConfig = SearchConfig()
    storage: StorageConfig = StorageConfig()
