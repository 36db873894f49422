"""Daily forecast data models."""

from dataclasses import dataclass
from datetime import date
from typing import TypeAlias


@dataclass(frozen=True)
class DayForecast:
    date: date
    weather_code: int
    min_temp: float
    max_temp: float
    is_today: bool = False


ForecastSeries: TypeAlias = tuple[DayForecast, ...]
