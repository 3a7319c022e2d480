"""
Runtime script support.

The document ships `static/runtime.js`; this module loads and minifies it,
and holds the Python side of its pure pieces. The weather-code table, the
temperature placeholder and the minimum logo copy count reach the script
through the runtime config so both sides share them. `format_temperature`
and `logo_loop_plan` mirror `formatTemp` and `loopPlan` in runtime.js, which
need values measured on the TV; keep the two in step.
"""
import math
import re
from functools import lru_cache
from pathlib import Path

RUNTIME_JS_PATH = Path(__file__).resolve().parent.parent / "static" / "runtime.js"

ICON_CATEGORIES = ("clear", "cloudy", "fog", "rain", "snow", "thunder")

# Inclusive WMO code ranges.
WEATHER_CODE_RANGES: list[tuple[int, int, str]] = [
    (0, 0, "clear"),
    (1, 3, "cloudy"),
    (45, 48, "fog"),
    (51, 57, "rain"),
    (61, 67, "rain"),
    (71, 77, "snow"),
    (80, 82, "rain"),
    (85, 86, "snow"),
    (95, 99, "thunder"),
]

DEFAULT_LOCATION = {"lat": 60.1699, "lon": 24.9384}
TEMPERATURE_PLACEHOLDER = "–"
LOGO_MIN_REPEATS = 2

# Task name -> period in seconds. `update` comes from the hallway itself.
TASK_PERIODS_SEC = {
    "clock": 1,
    "weather": 60 * 60,
    "news": 10 * 60,
    "logos": 30,
}


def weather_icon(code: int | float | None) -> str:
    if code is None:
        return "cloudy"
    try:
        value = int(code)
    except (TypeError, ValueError):
        return "cloudy"
    for low, high, icon in WEATHER_CODE_RANGES:
        if low <= value <= high:
            return icon
    return "cloudy"


def format_temperature(value: float | None) -> str:
    if value is None or not isinstance(value, (int, float)) or not math.isfinite(value):
        return TEMPERATURE_PLACEHOLDER
    return str(int(math.floor(value + 0.5)))


def logo_loop_plan(content_width: float, viewport_width: float, speed_sec: float, animate: bool = True) -> dict:
    """
    How the logo strip moves.

    One copy of the set is `content_width` wide (gaps included). When it is
    wider than the viewport the strip is repeated until it covers the
    viewport plus one extra copy, and translated by exactly one copy width
    per loop so the jump back is invisible.
    """
    if not animate or content_width <= 0 or content_width <= viewport_width:
        return {"animate": False, "repeats": 1, "distance": 0.0, "duration": 0.0}
    repeats = int(math.ceil(viewport_width / content_width)) + 1
    return {
        "animate": True,
        "repeats": max(LOGO_MIN_REPEATS, repeats),
        "distance": float(content_width),
        "duration": float(speed_sec),
    }


def task_periods(check_interval_minutes: int) -> dict[str, int]:
    periods = dict(TASK_PERIODS_SEC)
    periods["update"] = int(check_interval_minutes) * 60
    return periods


def minify_js(source: str) -> str:
    # Line based: drops comment-only lines, indentation and blank lines.
    # Newlines are kept so automatic semicolon insertion is unaffected.
    lines = []
    for line in source.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("//"):
            continue
        lines.append(stripped)
    return "\n".join(lines)


@lru_cache(maxsize=1)
def runtime_script() -> str:
    return minify_js(RUNTIME_JS_PATH.read_text(encoding="utf-8"))


def script_safe(text: str) -> str:
    """Keep embedded text from closing its <script> element early."""
    return re.sub(r"</(script)", r"<\\/\1", text, flags=re.IGNORECASE)
