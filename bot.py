"""
Telegram Bot — chat front end for the weather station.

Maps commands and plain text onto AppState events and replies with the
current screen. Also serves the web UI, sharing the same AppState.

Usage:
  python bot.py          (web UI only when TELEGRAM_BOT_TOKEN is unset)
"""

import asyncio
import logging
import threading

from telegram import Update
from telegram.ext import (
    Application,
    ApplicationBuilder,
    CommandHandler,
    MessageHandler,
    filters,
    ContextTypes,
)

import config
from abilities.weather import WeatherClient
from models import (
    CredentialsChanged,
    LocationChanged,
    NavigateRequested,
    Screen,
    StateSnapshot,
    SubmitRequested,
    ThemeToggleRequested,
    next_screen,
)
from state import AppState

log = logging.getLogger("bot")

PROMPTS = {
    Screen.CREDENTIALS: "Send your OpenWeather API key (or /key <key>).",
    Screen.LOCATION: "Send a city name and country code, e.g. London, uk (or /location <city> <country>), then /weather.",
}

HELP_TEXT = (
    "Weather station. Commands:\n\n"
    "/key <api key>  — set the OpenWeather API key\n"
    "/location <city> <country>  — set the location\n"
    "/weather  — look up the current weather\n"
    "/next  — go to the next page\n"
    "/home  — back to the start page\n"
    "/theme  — toggle light/dark theme\n"
    "/status  — show what is entered\n"
    "/help  — show this message"
)


def owner_only(func):
    """Restrict to OWNER_CHAT_ID. Set to 0 in .env to allow everyone."""
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE):
        if config.OWNER_CHAT_ID and update.effective_chat.id != config.OWNER_CHAT_ID:
            await update.message.reply_text("Not authorized.")
            return
        return await func(update, context)
    return wrapper


def parse_location(text: str) -> tuple[str, str]:
    """'London, uk' or 'New York us' → (city, country). Country is the last word."""
    text = text.strip()
    if "," in text:
        city, _, country = text.rpartition(",")
        return city.strip(), country.strip()
    city, _, country = text.rpartition(" ")
    if not city:
        return country, ""
    return city.strip(), country.strip()


def command_argument(text: str) -> str:
    """Everything after the command word, with inner whitespace kept as typed."""
    parts = (text or "").strip().split(maxsplit=1)
    return parts[1].strip() if len(parts) > 1 else ""


def screen_text(snap: StateSnapshot) -> str:
    """What the bot shows for the current screen."""
    if snap.screen is Screen.RESULT:
        return snap.display_text or "Nothing looked up yet. Use /weather."
    return PROMPTS[snap.screen]


def status_text(snap: StateSnapshot) -> str:
    key = "set" if snap.api_key else "(none)"
    place = ", ".join(p for p in (snap.city, snap.country) if p) or "(none)"
    return (
        f"Page: {snap.screen.name.lower()}\n"
        f"API key: {key}\n"
        f"Location: {place}\n"
        f"Theme: {snap.theme.value}"
    )


class WeatherBot:
    """Telegram handlers bound to one AppState."""

    def __init__(self, state: AppState):
        self.state = state

    async def _reply_screen(self, update: Update):
        await update.message.reply_text(screen_text(self.state.snapshot()))

    async def cmd_start(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        await update.message.reply_text(HELP_TEXT)
        await self._reply_screen(update)

    async def _save_key(self, update: Update, api_key: str):
        self.state.dispatch(CredentialsChanged(api_key))
        await update.message.reply_text("API key saved. /next to enter a location.")

    async def _save_location(self, update: Update, text: str):
        city, country = parse_location(text)
        self.state.dispatch(LocationChanged(city, country))
        await update.message.reply_text(f"Location: {city}, {country}. /weather to check.")

    async def cmd_key(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        api_key = command_argument(update.message.text)
        if not api_key:
            await update.message.reply_text("Usage: /key <api key>")
            return
        await self._save_key(update, api_key)

    async def cmd_location(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        text = command_argument(update.message.text)
        if not text:
            await update.message.reply_text("Usage: /location <city> <country>")
            return
        await self._save_location(update, text)

    async def cmd_weather(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        # The lookup blocks on HTTP; keep the event loop free while it runs.
        ran = await asyncio.to_thread(self.state.dispatch, SubmitRequested())
        if not ran:
            await update.message.reply_text("A lookup is already running.")
            return
        await self._reply_screen(update)

    async def cmd_next(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        target = next_screen(self.state.snapshot().screen)
        self.state.dispatch(NavigateRequested(target))
        await self._reply_screen(update)

    async def cmd_home(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        self.state.dispatch(NavigateRequested(Screen.CREDENTIALS))
        await self._reply_screen(update)

    async def cmd_theme(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        self.state.dispatch(ThemeToggleRequested())
        await update.message.reply_text(f"Theme: {self.state.snapshot().theme.value}")

    async def cmd_status(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        await update.message.reply_text(status_text(self.state.snapshot()))

    async def handle_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Plain text fills in whatever the current page asks for."""
        text = update.message.text
        if not text:
            return
        screen = self.state.snapshot().screen
        if screen is Screen.CREDENTIALS:
            await self._save_key(update, text.strip())
        elif screen is Screen.LOCATION:
            await self._save_location(update, text)
        else:
            await update.message.reply_text("Use /home to start over or /weather to refresh.")


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE):
    log.error(f"Handler failed: {context.error}", exc_info=context.error)


def build_application(state: AppState, token: str) -> Application:
    bot = WeatherBot(state)
    app = ApplicationBuilder().token(token).build()

    guarded = {
        "start": bot.cmd_start,
        "help": bot.cmd_start,
        "key": bot.cmd_key,
        "location": bot.cmd_location,
        "weather": bot.cmd_weather,
        "next": bot.cmd_next,
        "home": bot.cmd_home,
        "theme": bot.cmd_theme,
        "status": bot.cmd_status,
    }
    for name, handler in guarded.items():
        app.add_handler(CommandHandler(name, owner_only(handler)))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, owner_only(bot.handle_message)))
    app.add_error_handler(on_error)
    return app


# ── Main ────────────────────────────────────────────────────────

def run_dashboard(state: AppState):
    """Run the Flask web UI (blocking)."""
    try:
        from dashboard import create_app
        app = create_app(state)
        # Suppress Flask request logs in the main console
        logging.getLogger("werkzeug").setLevel(logging.WARNING)
        log.info(f"Dashboard: http://{config.DASHBOARD_HOST}:{config.DASHBOARD_PORT}")
        app.run(host=config.DASHBOARD_HOST, port=config.DASHBOARD_PORT, use_reloader=False)
    except Exception as e:
        log.error(f"Dashboard failed to start: {e}")


def main():
    logging.basicConfig(
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
        level=config.LOG_LEVEL.upper(),
    )
    client = WeatherClient(base_url=config.WEATHER_API_URL, timeout=config.HTTP_TIMEOUT)
    state = AppState(fetcher=client.fetch)

    if not config.TELEGRAM_BOT_TOKEN:
        log.info("No TELEGRAM_BOT_TOKEN set, running the web UI only")
        run_dashboard(state)
        return

    dash_thread = threading.Thread(target=run_dashboard, args=(state,), daemon=True)
    dash_thread.start()

    app = build_application(state, config.TELEGRAM_BOT_TOKEN)
    log.info("Bot starting (Telegram polling)...")
    app.run_polling()


if __name__ == "__main__":
    main()
