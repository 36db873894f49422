"""Search orchestrator: the fetch state machine behind the widget.

Each committed query opens a new request generation. A generation runs the
geocode call and then the forecast call under one CancelToken; committing
again fires that token. Every publish is checked against the live
generation number, so a slow answer for an old query can never overwrite the
view of a newer one regardless of arrival order.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Protocol

from classyweather.core import transitions
from classyweather.core.cancellation import CancelToken, RequestCancelled
from classyweather.ingest.errors import (
    MalformedResponseError,
    NetworkError,
    NotFoundError,
)
from classyweather.models.forecast import ForecastSeries
from classyweather.models.place import Place
from classyweather.models.view import ViewState

logger = logging.getLogger(__name__)

DEFAULT_QUERY_KEY = "location"

Listener = Callable[[ViewState], None]


class Geocoder(Protocol):
    async def resolve(self, query: str, cancel: CancelToken) -> Place: ...


class Forecaster(Protocol):
    async def fetch_daily(self, place: Place, cancel: CancelToken) -> ForecastSeries: ...


class StateStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class SearchOrchestrator:
    def __init__(
        self,
        geocoder: Geocoder,
        forecaster: Forecaster,
        store: StateStore,
        query_key: str = DEFAULT_QUERY_KEY,
    ):
        self.geocoder = geocoder
        self.forecaster = forecaster
        self.store = store
        self.query_key = query_key
        self._state = ViewState()
        self._generation = 0
        self._token: CancelToken | None = None
        self._task: asyncio.Task | None = None
        self._tasks: set[asyncio.Task] = set()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for published states. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def restore(self) -> str:
        """Read the remembered query. Missing or unreadable values yield ''."""
        try:
            query = self.store.get(self.query_key) or ""
        except Exception:
            logger.exception("Could not read remembered query")
            query = ""
        self._state = transitions.restored(self._state, query)
        return query

    def commit(self, query: str) -> asyncio.Task | None:
        """Accept ``query`` as the active search target.

        Supersedes any in-flight generation. Returns the task driving the new
        generation, or None for a blank query.
        """
        self._persist(query)
        self._generation += 1
        generation = self._generation
        if self._token is not None:
            self._token.cancel(f"superseded by generation {generation}")
            self._token = None

        if not query.strip():
            self._task = None
            logger.info("Blank query committed, view reset (generation %d)", generation)
            self._publish(generation, transitions.idle(query))
            return None

        token = CancelToken()
        self._token = token
        logger.info("Searching %r (generation %d)", query, generation)
        self._publish(generation, transitions.resolving(query))

        task = asyncio.get_running_loop().create_task(
            self._run(generation, query.strip(), token)
        )
        self._task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_settled(self) -> ViewState:
        """Wait until the live generation has no work left, then return the state."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self._state

    async def aclose(self) -> None:
        """Cancel every in-flight generation and wait for it to unwind."""
        if self._token is not None:
            self._token.cancel("closed")
            self._token = None
        pending = [t for t in self._tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.wait(pending)
        self._task = None

    async def _run(self, generation: int, query: str, token: CancelToken) -> None:
        try:
            place = await self.geocoder.resolve(query, token)
        except RequestCancelled:
            logger.debug("Geocode for %r cancelled (generation %d)", query, generation)
            return
        except NotFoundError:
            if self._settle_error(generation, transitions.NOT_FOUND_MESSAGE):
                logger.info("No place found for %r", query)
            return
        except NetworkError as e:
            self._network_failure(generation, e, "Geocode", query)
            return
        except Exception:
            logger.exception("Unexpected failure while geocoding %r", query)
            self._settle_error(generation, transitions.FETCH_FAILED_MESSAGE)
            return

        if not self._publish(generation, transitions.place_resolved(self._state, place)):
            return

        try:
            series = await self.forecaster.fetch_daily(place, token)
        except RequestCancelled:
            logger.debug("Forecast for %r cancelled (generation %d)", query, generation)
            return
        except NetworkError as e:
            self._network_failure(generation, e, "Forecast", query)
            return
        except Exception:
            logger.exception("Unexpected failure while fetching forecast for %r", query)
            self._settle_error(generation, transitions.FETCH_FAILED_MESSAGE)
            return

        if self._publish(generation, transitions.forecast_settled(self._state, series)):
            logger.info(
                "Forecast for %s settled with %d days (generation %d)",
                place.display_name, len(series), generation,
            )

    def _publish(self, generation: int, state: ViewState) -> bool:
        """Apply ``state`` only if ``generation`` is still the live one."""
        if generation != self._generation:
            logger.debug(
                "Discarding %s state from generation %d (live is %d)",
                state.phase, generation, self._generation,
            )
            return False
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener failed on %s state", state.phase)
        return True

    def _settle_error(self, generation: int, message: str) -> bool:
        return self._publish(generation, transitions.failed(self._state, message))

    def _network_failure(
        self, generation: int, error: NetworkError, stage: str, query: str
    ) -> None:
        if generation != self._generation:
            logger.debug(
                "%s failure for stale generation %d ignored: %s",
                stage, generation, error,
            )
            return
        if isinstance(error, MalformedResponseError):
            logger.error("%s response for %r was malformed: %s", stage, query, error)
        else:
            logger.warning("%s request for %r failed: %s", stage, query, error)
        self._settle_error(generation, transitions.FETCH_FAILED_MESSAGE)

    def _persist(self, query: str) -> None:
        try:
            self.store.set(self.query_key, query)
        except Exception:
            logger.exception("Could not remember query %r", query)
