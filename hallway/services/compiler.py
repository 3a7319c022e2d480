"""
Hallway -> static HTML document.

The output is a single self-contained page: inline CSS driven by scale
variables, the server-rendered listing, the runtime script and the full
Hallway value embedded as JSON. Apart from the build identifier the output
is a pure function of the Hallway.
"""
import json
import re
import time
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

from hallway.schemas.hallway import Floor, Hallway
from hallway.services.layout import assign_columns, plan_columns, split_even
from hallway.services.runtime import (
    DEFAULT_LOCATION,
    ICON_CATEGORIES,
    LOGO_MIN_REPEATS,
    TEMPERATURE_PLACEHOLDER,
    WEATHER_CODE_RANGES,
    runtime_script,
    script_safe,
    task_periods,
)
from hallway.services.sanitize import is_javascript_url, sanitize_info_html

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
DATA_ELEMENT_ID = "__HALLWAY_DATA__"
RUNTIME_ELEMENT_ID = "__HALLWAY_RUNTIME__"
RSS_PROXY_PATH = "/api/rss"

CANVAS = {
    "landscape": {"width": 1920, "height": 1080},
    "portrait": {"width": 1080, "height": 1920},
}

# Unscaled pixel sizes; the scale variables are applied in CSS.
BASE_SIZES = {
    "landscape": {
        "padding": 48, "gap": 32, "floor_gap": 20,
        "title": 64, "subtitle": 30,
        "floor_label": 22, "apartment": 30, "tenant": 34,
        "weather": 22, "news": 26, "info": 26, "logos": 120,
    },
    "portrait": {
        "padding": 40, "gap": 28, "floor_gap": 18,
        "title": 60, "subtitle": 28,
        "floor_label": 22, "apartment": 30, "tenant": 34,
        "weather": 22, "news": 26, "info": 26, "logos": 140,
    },
}

SCALE_MIN, SCALE_MAX = 0.5, 2.0
LOGO_SPEED_MIN, LOGO_SPEED_MAX = 5, 120
LOGO_GAP_MIN, LOGO_GAP_MAX = 0, 400
CHECK_INTERVAL_MIN, CHECK_INTERVAL_MAX = 1, 100
NEWS_LIMIT_MIN, NEWS_LIMIT_MAX = 1, 50
NEWS_TITLE_PX_MIN, NEWS_TITLE_PX_MAX = 10, 120
SCREEN_COLUMNS_MIN, SCREEN_COLUMNS_MAX = 1, 3

_COLOR = re.compile(
    r"^(#[0-9a-fA-F]{3,8}|[a-zA-Z]{3,20}|rgba?\(\s*[\d.%\s,]+\)|hsla?\(\s*[\d.%\s,deg]+\))$"
)

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "j2"], default_for_string=True),
    keep_trailing_newline=True,
)


def clamp_number(value: Any, low: float, high: float, default: float) -> float:
    """Clamp to [low, high]; anything non-numeric falls back to `default` first."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = float(default)
    if number != number:  # NaN
        number = float(default)
    return min(high, max(low, number))


def clamp_int(value: Any, low: int, high: int, default: int) -> int:
    return int(round(clamp_number(value, low, high, default)))


def _css_number(value: float) -> str:
    return f"{value:g}"


def effective_scales(hallway: Hallway) -> dict[str, float]:
    def region(value: float | None) -> float:
        return clamp_number(1.0 if value is None else value, SCALE_MIN, SCALE_MAX, 1.0)

    return {
        "overall": clamp_number(hallway.scale, SCALE_MIN, SCALE_MAX, 1.0),
        "header": region(hallway.header_scale),
        "main": region(hallway.main_scale),
        "weather": region(hallway.weather_scale),
        "news": region(hallway.news_scale),
        "info": region(hallway.info_scale),
        "logos": region(hallway.logos_scale),
    }


def default_apartment_number(level: int, position: int) -> str:
    return str(level * 100 + position + 1)


def _floor_view(floor: Floor) -> dict[str, Any]:
    apartments = []
    for position, apartment in enumerate(floor.apartments):
        number = apartment.number.strip() or default_apartment_number(floor.level, position)
        names = [tenant.surname.strip() for tenant in apartment.tenants if tenant.surname.strip()]
        apartments.append({"number": number, "tenants": names})
    return {"level": floor.level, "label": floor.display_label(), "apartments": apartments}


def column_layout(hallway: Hallway) -> tuple[str, list[list[dict[str, Any]]]]:
    """
    Floors grouped into display columns.

    With one screen column the planner tables decide the split; with two or
    three the floors are shared out evenly, highest level first.
    """
    screen_columns = clamp_int(hallway.screen_columns, SCREEN_COLUMNS_MIN, SCREEN_COLUMNS_MAX, 1)
    ascending = sorted(hallway.floors, key=lambda floor: floor.level)
    if screen_columns > 1:
        descending = list(reversed(ascending))
        groups = split_even(descending, screen_columns)
        mode = f"screen-columns-{screen_columns}"
    else:
        groups = assign_columns(ascending, plan_columns(len(ascending), hallway.orientation))
        mode = "planned-columns"
    columns = [[_floor_view(floor) for floor in group] for group in groups if group]
    return mode, columns


def visible_logos(hallway: Hallway) -> list[dict[str, str]]:
    # The limit counts entries in insertion order, unusable ones included.
    logos = list(hallway.logos)
    if hallway.logos_limit is not None:
        logos = logos[:clamp_int(hallway.logos_limit, 0, len(logos), len(logos))]
    return [
        {"url": logo.url.strip(), "name": logo.name}
        for logo in logos
        if logo.url.strip() and not is_javascript_url(logo.url)
    ]


def weather_label(hallway: Hallway) -> str:
    # Explicit coordinates win over the city, so the city name would be misleading.
    if hallway.weather_lat is not None and hallway.weather_lon is not None:
        return ""
    return hallway.weather_city.strip() or "Helsinki"


def news_limit(hallway: Hallway) -> int | None:
    if hallway.news_limit is None:
        return None
    return clamp_int(hallway.news_limit, NEWS_LIMIT_MIN, NEWS_LIMIT_MAX, NEWS_LIMIT_MAX)


def embed_json(value: Any) -> Markup:
    """JSON for a <script type="application/json"> element."""
    text = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return Markup(text.replace("<", "\\u003c"))


def new_build_id() -> str:
    return str(int(time.time() * 1000))


def runtime_config(hallway: Hallway, build_id: str) -> dict[str, Any]:
    check_minutes = clamp_int(hallway.check_interval_minutes, CHECK_INTERVAL_MIN, CHECK_INTERVAL_MAX, 5)
    return {
        "buildId": build_id,
        "orientation": hallway.orientation,
        "canvas": CANVAS[hallway.orientation],
        "periods": task_periods(check_minutes),
        "clock": {
            "enabled": hallway.weather_clock_enabled,
            "mode": hallway.clock_mode,
            "date": hallway.clock_date.strip(),
            "time": hallway.clock_time.strip(),
        },
        "weather": {
            "enabled": hallway.weather_clock_enabled,
            "city": hallway.weather_city.strip(),
            "lat": hallway.weather_lat,
            "lon": hallway.weather_lon,
            "fallback": DEFAULT_LOCATION,
            "placeholder": TEMPERATURE_PLACEHOLDER,
            "codes": [list(entry) for entry in WEATHER_CODE_RANGES],
        },
        "news": {
            "enabled": hallway.news_enabled,
            "url": hallway.news_rss_url.strip(),
            "proxy": RSS_PROXY_PATH,
            "limit": news_limit(hallway),
        },
        "logos": {
            "enabled": hallway.logos_enabled,
            "animate": hallway.logos_animate,
            "speed": clamp_number(hallway.logos_speed, LOGO_SPEED_MIN, LOGO_SPEED_MAX, 30),
            "gap": clamp_number(hallway.logos_gap, LOGO_GAP_MIN, LOGO_GAP_MAX, 48),
            "minRepeats": LOGO_MIN_REPEATS,
        },
    }


def render_document(hallway: Hallway, build_id: str | None = None) -> str:
    build_id = build_id or new_build_id()
    orientation = hallway.orientation
    mode, columns = column_layout(hallway)
    scales = effective_scales(hallway)
    logos = visible_logos(hallway) if hallway.logos_enabled else []
    bg = hallway.logos_bg_color.strip()
    info_classes = " ".join(
        name
        for name, enabled in (("pin-bottom", hallway.info_pin_bottom), ("align-right", hallway.info_align_right))
        if enabled
    )
    heading = hallway.name.strip() or hallway.building.strip() or "Hallway"

    template = _env.get_template("document.html.j2")
    return template.render(
        title=heading,
        heading=heading,
        building=hallway.building.strip() if hallway.name.strip() else "",
        build_id=build_id,
        orientation=orientation,
        canvas=CANVAS[orientation],
        px=BASE_SIZES[orientation],
        scales={key: _css_number(value) for key, value in scales.items()},
        layout_mode=mode,
        columns=columns,
        icons=ICON_CATEGORIES,
        weather_enabled=hallway.weather_clock_enabled,
        weather_label=weather_label(hallway),
        temperature_placeholder=TEMPERATURE_PLACEHOLDER,
        news_enabled=hallway.news_enabled,
        news_title=hallway.news_title.strip(),
        news_title_px=clamp_int(hallway.news_title_px, NEWS_TITLE_PX_MIN, NEWS_TITLE_PX_MAX, 28),
        info_enabled=hallway.info_enabled,
        info_html=Markup(sanitize_info_html(hallway.info_html)),
        info_classes=info_classes,
        logos_enabled=hallway.logos_enabled,
        logos=logos,
        logos_gap=_css_number(clamp_number(hallway.logos_gap, LOGO_GAP_MIN, LOGO_GAP_MAX, 48)),
        logos_bg=bg if _COLOR.match(bg) else "#ffffff",
        runtime_json=embed_json(runtime_config(hallway, build_id)),
        data_json=embed_json(hallway.to_json_dict()),
        runtime_js=Markup(script_safe(runtime_script())),
    )


def compile_document(hallway: Hallway, build_id: str | None = None) -> bytes:
    return render_document(hallway, build_id).encode("utf-8")
