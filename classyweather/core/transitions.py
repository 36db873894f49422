"""Pure state transitions for the search orchestrator.

Each function takes the current ViewState (where relevant) and returns the
next one; none of them perform I/O.
"""

from dataclasses import replace

from classyweather.models.forecast import ForecastSeries
from classyweather.models.place import Place
from classyweather.models.view import Phase, ViewState

NOT_FOUND_MESSAGE = "Location not found"
FETCH_FAILED_MESSAGE = "Failed to fetch weather"


def idle(query: str) -> ViewState:
    return ViewState(query=query, phase=Phase.IDLE)


def resolving(query: str) -> ViewState:
    return ViewState(query=query, phase=Phase.RESOLVING, is_loading=True)


def place_resolved(state: ViewState, place: Place) -> ViewState:
    return replace(
        state,
        phase=Phase.FETCHING,
        is_loading=True,
        display_location=place.display_name,
    )


def forecast_settled(state: ViewState, series: ForecastSeries) -> ViewState:
    return replace(
        state, phase=Phase.SUCCESS, is_loading=False, series=series, error=""
    )


def failed(state: ViewState, message: str) -> ViewState:
    """Settle with an error; a display location already resolved is kept."""
    return replace(
        state, phase=Phase.ERROR, is_loading=False, series=(), error=message
    )


def restored(state: ViewState, query: str) -> ViewState:
    return replace(state, query=query)
