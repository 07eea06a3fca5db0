"""Shared fixtures: a canned OpenWeather body and an AppState with a fake fetcher."""

from __future__ import annotations

import copy
from typing import Any, Callable

import pytest

from abilities.weather import parse_weather
from models import WeatherRecord
from state import AppState

LONDON_BODY: dict[str, Any] = {
    "weather": [{"id": 800, "main": "Clear", "description": "clear sky"}],
    "main": {"temp": 21.3, "humidity": 55, "pressure": 1012},
    "wind": {"speed": 3.2, "deg": 250},
    "name": "london",
    "cod": 200,
}


@pytest.fixture
def london_body() -> dict[str, Any]:
    return copy.deepcopy(LONDON_BODY)


@pytest.fixture
def london_record() -> WeatherRecord:
    return WeatherRecord(
        description="clear sky",
        temperature=21.3,
        humidity=55.0,
        pressure=1012.0,
        wind_speed=3.2,
        name="london",
    )


class FakeFetcher:
    """Records calls; returns the London record or raises `error` when set."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[tuple[str, str, str]] = []

    def __call__(self, city: str, country: str, api_key: str) -> WeatherRecord:
        self.calls.append((city, country, api_key))
        if self.error is not None:
            raise self.error
        return parse_weather(copy.deepcopy(LONDON_BODY))


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def make_state() -> Callable[..., AppState]:
    def _make(fetcher: Callable[[str, str, str], WeatherRecord] | None = None) -> AppState:
        return AppState(fetcher=fetcher or FakeFetcher())
    return _make
