"""Turn a WeatherRecord into the text shown on the result screen."""

from models import WeatherRecord

# (upper bound, band); the first bound the temperature is below wins.
_BANDS = [
    (0.0, "freezing"),
    (10.0, "cold"),
    (20.0, "cool"),
    (30.0, "mild"),
]

BAND_GLYPHS = {
    "freezing": "❄️",
    "cold": "☁️",
    "cool": "⛅",
    "mild": "🌤️",
    "hot": "🔥",
}

_TEMPLATE = (
    "{glyph} Weather in {name}:\n"
    "\n"
    "🌦️ Cloud cover: {description}\n"
    "🌡️ Temperature: {temperature:.1f}°C,\n"
    "☔  Humidity: {humidity:.1f}%,\n"
    "📏 Pressure: {pressure:.1f} hPa,\n"
    "💨 Wind Speed: {wind_speed:.1f} m/s"
)


def temperature_band(temperature: float) -> str:
    """Band name for a temperature in °C. Lower bounds are inclusive."""
    for upper, band in _BANDS:
        if temperature < upper:
            return band
    return "hot"


def band_glyph(temperature: float) -> str:
    return BAND_GLYPHS[temperature_band(temperature)]


def format_weather(record: WeatherRecord) -> str:
    return _TEMPLATE.format(
        glyph=band_glyph(record.temperature),
        name=record.name.upper(),
        description=record.description,
        temperature=record.temperature,
        humidity=record.humidity,
        pressure=record.pressure,
        wind_speed=record.wind_speed,
    )
