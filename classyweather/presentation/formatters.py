"""Output formatters for weather views."""

import json
import math
from datetime import date

from classyweather.models.view import ViewState

ICON_NOT_FOUND = "NOT FOUND"

_ICON_GROUPS: list[tuple[tuple[int, ...], str]] = [
    ((0,), "☀️"),
    ((1,), "🌤"),
    ((2,), "⛅️"),
    ((3,), "☁️"),
    ((45, 48), "🌫"),
    ((51, 56, 61, 66, 80), "🌦"),
    ((53, 55, 63, 65, 57, 67, 81, 82), "🌧"),
    ((71, 73, 75, 77, 85, 86), "🌨"),
    ((95,), "🌩"),
    ((96, 99), "⛈"),
]

WEATHER_ICONS: dict[int, str] = {
    code: icon for codes, icon in _ICON_GROUPS for code in codes
}


def weather_icon(code: int) -> str:
    """Map a WMO weather code to an icon glyph."""
    return WEATHER_ICONS.get(code, ICON_NOT_FOUND)


def format_day(day: date, is_today: bool = False) -> str:
    """Short weekday label, e.g. 'Mon'. The first forecast day reads 'Today'."""
    if is_today:
        return "Today"
    return day.strftime("%a")


def format_temp_range(min_temp: float, max_temp: float) -> str:
    return f"{math.floor(min_temp)}°C - {math.floor(max_temp)}°C"


def format_view_text(state: ViewState) -> str:
    """Plain text rendering of the current view."""
    lines = ["Classy Weather"]
    if state.is_loading:
        lines.append("Loading...")
    if state.error:
        if state.display_location:
            lines.append(f"Weather in {state.display_location}")
        lines.append(f"Error: {state.error}")
    elif state.series:
        lines.append(f"Weather in {state.display_location}")
        for day in state.series:
            lines.append(
                f"  {weather_icon(day.weather_code)} "
                f"{format_day(day.date, day.is_today):<5} "
                f"{format_temp_range(day.min_temp, day.max_temp)}"
            )
    return "\n".join(lines)


def format_view_json(state: ViewState) -> str:
    """JSON rendering for programmatic consumption."""
    data = {
        "query": state.query,
        "phase": state.phase.value,
        "is_loading": state.is_loading,
        "display_location": state.display_location,
        "error": state.error,
        "series": [
            {
                "date": day.date.isoformat(),
                "weather_code": day.weather_code,
                "icon": weather_icon(day.weather_code),
                "min_temp": day.min_temp,
                "max_temp": day.max_temp,
                "is_today": day.is_today,
            }
            for day in state.series
        ],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)
