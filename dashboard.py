"""
Web UI — Flask front end for the weather station.

Provides:
  - One page per screen (API key, location, result), themed light/dark
  - Form actions that raise AppState events and redirect back
  - REST API: read the state snapshot, post events as JSON

Runs in a background thread alongside the Telegram bot, or on its own
when no bot token is configured.
"""

from flask import Flask, render_template, request, jsonify, redirect, url_for

from config import DASHBOARD_SECRET
from models import (
    APP_TITLE,
    CredentialsChanged,
    LocationChanged,
    NavigateRequested,
    SubmitRequested,
    ThemeToggleRequested,
    event_from_dict,
    next_label,
    next_screen,
)
from state import AppState


def create_app(state: AppState) -> Flask:
    app = Flask(__name__)
    app.secret_key = DASHBOARD_SECRET

    # ── Pages ───────────────────────────────────────────────

    @app.route("/")
    def index():
        snap = state.snapshot()
        return render_template(
            f"{snap.screen.name.lower()}.html",
            title=APP_TITLE,
            state=snap,
            next_target=next_screen(snap.screen).value,
            next_label=next_label(snap.screen),
        )

    # ── API endpoints ───────────────────────────────────────

    @app.route("/api/state", methods=["GET"])
    def api_state():
        return jsonify(state.snapshot().to_dict())

    @app.route("/api/events", methods=["POST"])
    def api_event():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Expected a JSON object"}), 400
        try:
            event = event_from_dict(data)
        except ValueError as e:
            return jsonify({"error": str(e)}), 400
        state.dispatch(event)
        return jsonify(state.snapshot().to_dict())

    # ── Form actions (from the pages) ───────────────────────

    @app.route("/action/credentials", methods=["POST"])
    def action_credentials():
        state.dispatch(CredentialsChanged(request.form.get("api_key", "")))
        return redirect(url_for("index"))

    @app.route("/action/location", methods=["POST"])
    def action_location():
        state.dispatch(LocationChanged(
            city=request.form.get("city", ""),
            country=request.form.get("country", ""),
        ))
        return redirect(url_for("index"))

    @app.route("/action/submit", methods=["POST"])
    def action_submit():
        # The location form submits with "Check Weather!"
        if "city" in request.form or "country" in request.form:
            state.dispatch(LocationChanged(
                city=request.form.get("city", ""),
                country=request.form.get("country", ""),
            ))
        state.dispatch(SubmitRequested())
        return redirect(url_for("index"))

    @app.route("/action/navigate/<target>", methods=["POST"])
    def action_navigate(target):
        # "Next Page" posts whatever the current page's fields hold
        if "api_key" in request.form:
            state.dispatch(CredentialsChanged(request.form["api_key"]))
        if "city" in request.form or "country" in request.form:
            state.dispatch(LocationChanged(
                city=request.form.get("city", ""),
                country=request.form.get("country", ""),
            ))
        state.dispatch(NavigateRequested(target))
        return redirect(url_for("index"))

    @app.route("/action/theme", methods=["POST"])
    def action_theme():
        state.dispatch(ThemeToggleRequested())
        return redirect(url_for("index"))

    return app
