"""
Configuration — loads from .env, provides defaults.

Only the host process (bot.py) and the renderers read these. The state
machine and the weather client take everything they need as arguments.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Telegram (leave empty to run the web UI only)
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
OWNER_CHAT_ID = int(os.getenv("OWNER_CHAT_ID", "0"))

# Dashboard
DASHBOARD_HOST = os.getenv("DASHBOARD_HOST", "127.0.0.1")
DASHBOARD_PORT = int(os.getenv("DASHBOARD_PORT", "8080"))
DASHBOARD_SECRET = os.getenv("DASHBOARD_SECRET", "change-me-in-production")

# Weather service
WEATHER_API_URL = os.getenv(
    "WEATHER_API_URL", "http://api.openweathermap.org/data/2.5/weather"
)
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "10"))  # seconds

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
