"""Open-Meteo daily forecast client."""

import logging
from datetime import date

from classyweather.core.cancellation import CancelToken
from classyweather.ingest.errors import MalformedResponseError
from classyweather.ingest.http import DEFAULT_USER_AGENT, get_json
from classyweather.models.forecast import DayForecast, ForecastSeries
from classyweather.models.place import Place

logger = logging.getLogger(__name__)

FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
DAILY_FIELDS = ["weathercode", "temperature_2m_max", "temperature_2m_min"]


class ForecastClient:
    def __init__(
        self,
        base_url: str = FORECAST_URL,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.user_agent = user_agent

    async def fetch_daily(self, place: Place, cancel: CancelToken) -> ForecastSeries:
        """Fetch the daily forecast series for a resolved place."""
        params = {
            "latitude": place.latitude,
            "longitude": place.longitude,
            "timezone": place.timezone,
            "daily": ",".join(DAILY_FIELDS),
        }
        data = await get_json(
            self.base_url,
            params,
            cancel,
            timeout=self.timeout,
            user_agent=self.user_agent,
        )
        series = _extract_series(data)
        logger.debug("Fetched %d forecast days for %s", len(series), place.name)
        return series


def _extract_series(raw: dict) -> ForecastSeries:
    """Zip the parallel daily arrays into DayForecast records.

    All four arrays must have the same, non-zero length.
    """
    daily = raw.get("daily")
    if not isinstance(daily, dict):
        raise MalformedResponseError("Forecast response has no 'daily' object")

    try:
        dates = daily["time"]
        codes = daily["weathercode"]
        max_temps = daily["temperature_2m_max"]
        min_temps = daily["temperature_2m_min"]
    except KeyError as e:
        raise MalformedResponseError(f"Forecast response missing {e}") from e

    if not all(isinstance(a, list) for a in (dates, codes, max_temps, min_temps)):
        raise MalformedResponseError("Daily series must be arrays")

    lengths = {len(dates), len(codes), len(max_temps), len(min_temps)}
    if len(lengths) != 1:
        raise MalformedResponseError(
            f"Daily arrays have unequal lengths: time={len(dates)} "
            f"weathercode={len(codes)} max={len(max_temps)} min={len(min_temps)}"
        )
    if not dates:
        raise MalformedResponseError("Forecast response has no days")

    try:
        return tuple(
            DayForecast(
                date=date.fromisoformat(dates[i]),
                weather_code=int(codes[i]),
                min_temp=float(min_temps[i]),
                max_temp=float(max_temps[i]),
                is_today=i == 0,
            )
            for i in range(len(dates))
        )
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Unparseable forecast value: {e}") from e
