"""Tests for the Flask web UI, driven through Flask's test client."""

from __future__ import annotations

import pytest

from abilities.weather import TransportError
from dashboard import create_app
from models import Screen, Theme
from state import AppState
from tests.conftest import FakeFetcher


@pytest.fixture
def state() -> AppState:
    return AppState(fetcher=FakeFetcher())


@pytest.fixture
def client(state: AppState):
    app = create_app(state)
    app.config["TESTING"] = True
    return app.test_client()


class TestPages:
    def test_start_page(self, client) -> None:
        resp = client.get("/")
        assert resp.status_code == 200
        html = resp.get_data(as_text=True)
        assert "OpenWeather API Key" in html
        assert "Next Page" in html
        assert 'class="dark"' in html

    def test_location_page(self, client, state: AppState) -> None:
        state.advance(Screen.LOCATION)
        html = client.get("/").get_data(as_text=True)
        assert "Check weather by City name and Country code" in html
        assert "Check Weather!" in html

    def test_result_page(self, client, state: AppState) -> None:
        state.submit_lookup()
        html = client.get("/").get_data(as_text=True)
        assert "LONDON" in html
        assert "Start Page" in html


class TestFormActions:
    def test_key_then_next(self, client, state: AppState) -> None:
        resp = client.post("/action/navigate/location", data={"api_key": "abc"})
        assert resp.status_code == 302
        snap = state.snapshot()
        assert snap.api_key == "abc"
        assert snap.screen is Screen.LOCATION

    def test_credentials(self, client, state: AppState) -> None:
        client.post("/action/credentials", data={"api_key": "xyz"})
        assert state.snapshot().api_key == "xyz"

    def test_location(self, client, state: AppState) -> None:
        client.post("/action/location", data={"city": "Oslo", "country": "no"})
        snap = state.snapshot()
        assert (snap.city, snap.country) == ("Oslo", "no")

    def test_submit_with_location(self, client, state: AppState) -> None:
        state.set_credentials("abc")
        client.post("/action/submit", data={"city": "London", "country": "uk"})
        snap = state.snapshot()
        assert snap.screen is Screen.RESULT
        assert "LONDON" in snap.display_text
        assert state._fetcher.calls == [("London", "uk", "abc")]

    def test_submit_failure_shows_error(self) -> None:
        state = AppState(fetcher=FakeFetcher(error=TransportError("Weather service returned HTTP 404: city not found")))
        client = create_app(state).test_client()
        client.post("/action/submit", data={"city": "Nowhere", "country": "zz"})
        html = client.get("/").get_data(as_text=True)
        assert "city not found" in html

    def test_theme(self, client, state: AppState) -> None:
        client.post("/action/theme")
        assert state.snapshot().theme is Theme.LIGHT
        assert 'class="light"' in client.get("/").get_data(as_text=True)

    def test_unknown_route_keeps_screen(self, client, state: AppState) -> None:
        client.post("/action/navigate/settings")
        assert state.snapshot().screen is Screen.CREDENTIALS


class TestApi:
    def test_state(self, client) -> None:
        data = client.get("/api/state").get_json()
        assert data["screen"] == "api"
        assert data["theme"] == "dark"

    def test_events(self, client) -> None:
        client.post("/api/events", json={"type": "credentials_changed", "api_key": "k"})
        client.post("/api/events", json={"type": "location_changed", "city": "London", "country": "uk"})
        data = client.post("/api/events", json={"type": "submit_requested"}).get_json()
        assert data["screen"] == "weather"
        assert "LONDON" in data["display_text"]

    def test_unknown_event(self, client) -> None:
        resp = client.post("/api/events", json={"type": "reboot"})
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    @pytest.mark.parametrize("body", [[1], "submit_requested", 3])
    def test_event_must_be_object(self, client, state: AppState, body) -> None:
        resp = client.post("/api/events", json=body)
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Expected a JSON object"}
        assert state.snapshot().screen is Screen.CREDENTIALS

    def test_state_does_not_expose_key(self, client, state: AppState) -> None:
        state.set_credentials("very-secret")
        data = client.get("/api/state").get_json()
        assert data["api_key_set"] is True
        assert "api_key" not in data
        assert "very-secret" not in client.get("/api/state").get_data(as_text=True)
