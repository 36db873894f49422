"""Open-Meteo geocoding client: free-text place name to coordinates."""

import logging

from classyweather.core.cancellation import CancelToken
from classyweather.ingest.errors import MalformedResponseError, NotFoundError
from classyweather.ingest.http import DEFAULT_USER_AGENT, get_json
from classyweather.models.place import Place

logger = logging.getLogger(__name__)

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"


class GeocodeClient:
    def __init__(
        self,
        base_url: str = GEOCODING_URL,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.user_agent = user_agent

    async def resolve(self, query: str, cancel: CancelToken) -> Place:
        """Resolve ``query`` to the provider's first matching place.

        Raises NotFoundError when there is no match and NetworkError on
        transport or status failures.
        """
        name = query.strip()
        if not name:
            raise ValueError("query must not be blank")

        data = await get_json(
            self.base_url,
            {"name": name},
            cancel,
            timeout=self.timeout,
            user_agent=self.user_agent,
        )
        results = data.get("results") or []
        if not results:
            raise NotFoundError(f"No place matches {name!r}")

        place = _parse_place(results[0])
        logger.debug("Resolved %r to %s (%s)", name, place.name, place.timezone)
        return place


def _parse_place(raw: dict) -> Place:
    try:
        return Place(
            latitude=float(raw["latitude"]),
            longitude=float(raw["longitude"]),
            timezone=str(raw["timezone"]),
            name=str(raw["name"]),
            country_code=str(raw.get("country_code") or ""),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedResponseError(f"Incomplete geocoding result: {e}") from e
