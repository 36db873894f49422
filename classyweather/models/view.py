"""View state published by the search orchestrator."""

from dataclasses import dataclass
from enum import StrEnum

from classyweather.models.forecast import ForecastSeries


class Phase(StrEnum):
    IDLE = "idle"
    RESOLVING = "resolving"
    FETCHING = "fetching"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ViewState:
    query: str = ""
    phase: Phase = Phase.IDLE
    is_loading: bool = False
    display_location: str = ""
    series: ForecastSeries = ()
    error: str = ""
