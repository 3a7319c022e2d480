import pytest

from hallway.schemas.hallway import Hallway
from hallway.services.compiler import runtime_config
from hallway.services.feeds import extract_feed_items
from hallway.services.runtime import (
    LOGO_MIN_REPEATS,
    TEMPERATURE_PLACEHOLDER,
    format_temperature,
    logo_loop_plan,
    minify_js,
    runtime_script,
    script_safe,
    task_periods,
    weather_icon,
)


@pytest.mark.parametrize(
    "code, icon",
    [
        (0, "clear"),
        (1, "cloudy"),
        (3, "cloudy"),
        (45, "fog"),
        (48, "fog"),
        (51, "rain"),
        (57, "rain"),
        (65, "rain"),
        (81, "rain"),
        (71, "snow"),
        (86, "snow"),
        (95, "thunder"),
        (99, "thunder"),
        (None, "cloudy"),
        (12, "cloudy"),
        ("x", "cloudy"),
    ],
)
def test_weather_icon(code, icon):
    assert weather_icon(code) == icon


def test_format_temperature():
    assert format_temperature(-2.5) == "-2"
    assert format_temperature(3.49) == "3"
    assert format_temperature(3.5) == "4"
    assert format_temperature(None) == "–"
    assert format_temperature(float("nan")) == "–"


def test_logo_loop_plan_repeats_to_cover_viewport():
    plan = logo_loop_plan(300, 1920, 30)
    assert plan == {"animate": True, "repeats": 8, "distance": 300.0, "duration": 30.0}
    assert plan["repeats"] * 300 >= 1920 + 300


def test_logo_loop_plan_needs_at_least_two_copies():
    assert logo_loop_plan(2000, 1920, 20)["repeats"] == 2


def test_logo_loop_plan_static_when_content_fits():
    assert logo_loop_plan(500, 1920, 30)["animate"] is False
    assert logo_loop_plan(5000, 1920, 30, animate=False)["animate"] is False
    assert logo_loop_plan(0, 1920, 30)["repeats"] == 1


def test_shared_values_travel_through_runtime_config():
    config = runtime_config(Hallway(), "1")
    assert config["weather"]["placeholder"] == TEMPERATURE_PLACEHOLDER == format_temperature(None)
    assert config["logos"]["minRepeats"] == LOGO_MIN_REPEATS
    assert logo_loop_plan(5000, 1920, 30)["repeats"] == LOGO_MIN_REPEATS
    script = runtime_script()
    assert "cfg.weather.placeholder" in script
    assert "logos.minRepeats" in script


def test_task_periods():
    periods = task_periods(7)
    assert periods["update"] == 420
    assert periods["clock"] == 1
    assert periods["weather"] == 3600


def test_minify_drops_comments_and_indentation():
    source = "function a() {\n  // note\n  return 1;\n\n}\n"
    assert minify_js(source) == "function a() {\nreturn 1;\n}"


def test_runtime_script_is_loaded():
    script = runtime_script()
    assert "hallwayRuntime" in script
    assert "__HALLWAY_RUNTIME__" in script
    assert not any(line.startswith("//") for line in script.splitlines())
    assert "</script" not in script.lower()


def test_script_safe():
    assert script_safe("a</script>b</SCRIPT>") == "a<\\/script>b<\\/SCRIPT>"


RSS = b"""<?xml version="1.0"?>
<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">
<channel><title>Feed</title>
<item><title>First  story</title><category>Kotimaa</category></item>
<item><title>Second</title><category term="ignored"/><dc:subject>Talous</dc:subject></item>
<item><title></title></item>
<item><title>Third</title></item>
</channel></rss>"""

ATOM = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
<title>Atom</title>
<entry><title>Alpha</title><category term="Urheilu"/></entry>
<entry><title>Beta</title></entry>
</feed>"""


def test_rss_items_and_categories():
    assert extract_feed_items(RSS) == [
        {"title": "First story", "category": "Kotimaa"},
        {"title": "Second", "category": "ignored"},
        {"title": "Third", "category": ""},
    ]


def test_category_falls_back_to_subject():
    feed = b"<rss><channel><item><title>T</title><dc:subject xmlns:dc='http://purl.org/dc/elements/1.1/'>S</dc:subject></item></channel></rss>"
    assert extract_feed_items(feed) == [{"title": "T", "category": "S"}]


def test_atom_entries():
    assert extract_feed_items(ATOM) == [
        {"title": "Alpha", "category": "Urheilu"},
        {"title": "Beta", "category": ""},
    ]


def test_limit():
    assert [item["title"] for item in extract_feed_items(RSS, limit=2)] == ["First story", "Second"]


def test_malformed_feed_is_empty():
    assert extract_feed_items(b"<rss><channel><item>") == []
    assert extract_feed_items(b"") == []
    assert extract_feed_items("not xml at all") == []
