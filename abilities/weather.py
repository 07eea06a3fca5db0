"""
Weather ability — current conditions from the OpenWeather API.

The API key travels as the `appid` query parameter; city and country
are sent verbatim and the service decides whether they are valid.
"""

import logging
import math
from numbers import Real
from typing import Optional

import requests

from models import WeatherRecord

log = logging.getLogger(__name__)

WEATHER_URL = "http://api.openweathermap.org/data/2.5/weather"
TIMEOUT = 10


class FetchError(Exception):
    """A lookup that produced no WeatherRecord."""


class TransportError(FetchError):
    """The request failed or the service rejected it."""


class DecodeError(FetchError):
    """The response body does not have the expected shape."""


def _number(section: dict, key: str, where: str) -> float:
    value = section.get(key)
    # bool is a Real too
    if isinstance(value, bool) or not isinstance(value, Real):
        raise DecodeError(f"Unexpected response: {where}.{key} is not a number")
    try:
        number = float(value)
    except OverflowError as e:
        raise DecodeError(f"Unexpected response: {where}.{key} is out of range") from e
    if not math.isfinite(number):
        raise DecodeError(f"Unexpected response: {where}.{key} is out of range")
    return number


def _section(body: dict, key: str) -> dict:
    value = body.get(key)
    if not isinstance(value, dict):
        raise DecodeError(f"Unexpected response: missing '{key}'")
    return value


def parse_weather(body) -> WeatherRecord:
    """Decode an OpenWeather `/weather` response body."""
    if not isinstance(body, dict):
        raise DecodeError("Unexpected response: body is not a JSON object")

    conditions = body.get("weather")
    if not isinstance(conditions, list) or not conditions:
        raise DecodeError("Unexpected response: no weather conditions reported")
    first = conditions[0]
    description = first.get("description") if isinstance(first, dict) else None
    if not isinstance(description, str):
        raise DecodeError("Unexpected response: missing weather description")

    main = _section(body, "main")
    wind = _section(body, "wind")

    name = body.get("name")
    if not isinstance(name, str):
        raise DecodeError("Unexpected response: missing place name")

    return WeatherRecord(
        description=description,
        temperature=_number(main, "temp", "main"),
        humidity=_number(main, "humidity", "main"),
        pressure=_number(main, "pressure", "main"),
        wind_speed=_number(wind, "speed", "wind"),
        name=name,
    )


def _rejection_text(resp: requests.Response) -> str:
    try:
        message = resp.json().get("message", "")
    except (ValueError, AttributeError):
        message = ""
    text = f"Weather service returned HTTP {resp.status_code}"
    return f"{text}: {message}" if message else text


class WeatherClient:
    """Blocking client: one GET per `fetch` call, no retries."""

    def __init__(
        self,
        base_url: str = WEATHER_URL,
        timeout: float = TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, city: str, country: str, api_key: str) -> WeatherRecord:
        """
        Get current weather for `city`, `country`.

        Raises TransportError if the request fails or the service answers
        with an error status, DecodeError if the body cannot be decoded.
        """
        params = {"q": f"{city},{country}", "units": "metric", "appid": api_key}
        log.info(f"Fetching weather for {city!r}, {country!r}")
        try:
            resp = self.session.get(self.base_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Could not reach weather service: {e}") from e

        if not resp.ok:
            raise TransportError(_rejection_text(resp))

        try:
            body = resp.json()
        except ValueError as e:
            raise DecodeError("Unexpected response: body is not valid JSON") from e
        return parse_weather(body)

    def __call__(self, city: str, country: str, api_key: str) -> WeatherRecord:
        return self.fetch(city, country, api_key)
