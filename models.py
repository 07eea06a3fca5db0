"""
Data models for the weather station: screens, user input, weather
records, renderer events and the read-only state snapshot.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Union

APP_TITLE = "Rusty Weather Station"


class Screen(str, Enum):
    # Values are the route names the navigation controls emit.
    CREDENTIALS = "api"
    LOCATION = "location"
    RESULT = "weather"


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"

    def toggled(self) -> Theme:
        return Theme.LIGHT if self is Theme.DARK else Theme.DARK


_NEXT_SCREEN = {
    Screen.CREDENTIALS: Screen.LOCATION,
    Screen.LOCATION: Screen.RESULT,
    Screen.RESULT: Screen.CREDENTIALS,
}


def next_screen(screen: Screen) -> Screen:
    """Target of the footer navigation button on `screen`."""
    return _NEXT_SCREEN[screen]


def next_label(screen: Screen) -> str:
    return "Start Page" if screen is Screen.RESULT else "Next Page"


@dataclass
class Credentials:
    api_key: str = ""


@dataclass
class Location:
    city: str = ""
    country: str = ""


@dataclass(frozen=True)
class WeatherRecord:
    description: str
    temperature: float
    humidity: float
    pressure: float
    wind_speed: float
    name: str


@dataclass(frozen=True)
class StateSnapshot:
    screen: Screen
    api_key: str
    city: str
    country: str
    display_text: str
    theme: Theme
    lookup_in_flight: bool = False

    def to_dict(self) -> dict:
        d = asdict(self)
        # Only whether a key is set, never the key itself
        d["api_key_set"] = bool(d.pop("api_key"))
        d["screen"] = self.screen.value
        d["theme"] = self.theme.value
        return d


# ── Renderer events ─────────────────────────────────────────────

@dataclass(frozen=True)
class CredentialsChanged:
    api_key: str


@dataclass(frozen=True)
class LocationChanged:
    city: str
    country: str


@dataclass(frozen=True)
class SubmitRequested:
    pass


@dataclass(frozen=True)
class NavigateRequested:
    target: Union[Screen, str]


@dataclass(frozen=True)
class ThemeToggleRequested:
    pass


Event = Union[
    CredentialsChanged,
    LocationChanged,
    SubmitRequested,
    NavigateRequested,
    ThemeToggleRequested,
]


def event_from_dict(data: dict) -> Event:
    """
    Build an event from its JSON form, e.g.
    {"type": "location_changed", "city": "London", "country": "uk"}.
    Raises ValueError for a non-object or an unknown type.
    """
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    kind = data.get("type", "")
    if kind == "credentials_changed":
        return CredentialsChanged(api_key=str(data.get("api_key", "")))
    if kind == "location_changed":
        return LocationChanged(
            city=str(data.get("city", "")),
            country=str(data.get("country", "")),
        )
    if kind == "submit_requested":
        return SubmitRequested()
    if kind == "navigate_requested":
        return NavigateRequested(target=str(data.get("target", "")))
    if kind == "theme_toggle_requested":
        return ThemeToggleRequested()
    raise ValueError(f"Unknown event type: {kind!r}")
