"""
AppState — the screen state machine behind every front end.

Renderers (the Flask dashboard, the Telegram bot) never touch fields
directly. They raise events, AppState applies the matching transition,
and they redraw from `snapshot()`.

Screens:
  CREDENTIALS → LOCATION → RESULT → back to CREDENTIALS

  - Every transition is total: navigation is never refused, even to the
    result screen before anything was looked up
  - `submit_lookup` is the only transition that talks to the network
  - One lookup at a time; a second submit while one runs is dropped
"""

from __future__ import annotations
import logging
import threading
from typing import Callable, Optional, Union

from abilities.formatting import format_weather
from abilities.weather import FetchError
from models import (
    Credentials,
    CredentialsChanged,
    Event,
    Location,
    LocationChanged,
    NavigateRequested,
    Screen,
    StateSnapshot,
    SubmitRequested,
    Theme,
    ThemeToggleRequested,
    WeatherRecord,
)

log = logging.getLogger(__name__)

Fetcher = Callable[[str, str, str], WeatherRecord]
Formatter = Callable[[WeatherRecord], str]


class AppState:
    def __init__(self, fetcher: Fetcher, formatter: Formatter = format_weather):
        """
        `fetcher(city, country, api_key)` returns a WeatherRecord or raises
        FetchError. It is called synchronously from `submit_lookup`; front
        ends that must stay responsive run `submit_lookup` off their loop.
        """
        self._fetcher = fetcher
        self._formatter = formatter

        self.screen = Screen.CREDENTIALS
        self.credentials = Credentials()
        self.location = Location()
        self.display_text = ""
        self.theme = Theme.DARK

        self._lock = threading.Lock()
        self._lookup_lock = threading.Lock()

    # ── Input transitions ───────────────────────────────────────

    def set_credentials(self, api_key: str):
        with self._lock:
            self.credentials = Credentials(api_key=api_key)
        log.debug("API key updated")

    def set_location(self, city: str, country: str):
        """Replace both fields at once; readers never see half a pair."""
        with self._lock:
            self.location = Location(city=city, country=country)
        log.debug(f"Location set to {city!r}, {country!r}")

    # ── Navigation ──────────────────────────────────────────────

    def advance(self, target: Union[Screen, str]):
        """
        Switch to `target`. No prerequisites are checked.
        Unknown route names are ignored.
        """
        try:
            screen = Screen(target)
        except ValueError:
            log.warning(f"Ignoring navigation to unknown screen {target!r}")
            return
        with self._lock:
            self.screen = screen
        log.debug(f"Screen → {screen.name}")

    def toggle_theme(self):
        with self._lock:
            self.theme = self.theme.toggled()

    # ── Lookup ──────────────────────────────────────────────────

    def submit_lookup(self) -> bool:
        """
        Fetch and format weather for the current location, then show it.

        Any FetchError becomes the display text instead; either way the
        screen ends on RESULT. Returns False without doing anything if a
        lookup is already in flight.
        """
        if not self._lookup_lock.acquire(blocking=False):
            log.warning("Lookup already in flight, ignoring submit")
            return False
        try:
            with self._lock:
                city, country = self.location.city, self.location.country
                api_key = self.credentials.api_key

            try:
                record = self._fetcher(city, country, api_key)
                text = self._formatter(record)
                log.info(f"Lookup succeeded for {record.name!r}")
            except FetchError as e:
                text = str(e) or type(e).__name__
                log.warning(f"Lookup failed: {text}")

            with self._lock:
                self.display_text = text
                self.screen = Screen.RESULT
            return True
        finally:
            self._lookup_lock.release()

    @property
    def lookup_in_flight(self) -> bool:
        return self._lookup_lock.locked()

    # ── Renderer interface ──────────────────────────────────────

    def dispatch(self, event: Event) -> Optional[bool]:
        """Apply one renderer event. Returns submit_lookup's result for submits."""
        if isinstance(event, CredentialsChanged):
            self.set_credentials(event.api_key)
        elif isinstance(event, LocationChanged):
            self.set_location(event.city, event.country)
        elif isinstance(event, SubmitRequested):
            return self.submit_lookup()
        elif isinstance(event, NavigateRequested):
            self.advance(event.target)
        elif isinstance(event, ThemeToggleRequested):
            self.toggle_theme()
        else:
            raise TypeError(f"Not an AppState event: {event!r}")
        return None

    def snapshot(self) -> StateSnapshot:
        with self._lock:
            return StateSnapshot(
                screen=self.screen,
                api_key=self.credentials.api_key,
                city=self.location.city,
                country=self.location.country,
                display_text=self.display_text,
                theme=self.theme,
                lookup_in_flight=self.lookup_in_flight,
            )
