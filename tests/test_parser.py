from conftest import make_floor

from hallway.schemas.hallway import Hallway, Logo, hallway_from_dict
from hallway.services.compiler import compile_document
from hallway.services.document_parser import parse_document


def _full_hallway() -> Hallway:
    return Hallway(
        name="Rappu C",
        building="Kotikatu 5",
        serial="abc-12 3",
        orientation="portrait",
        floors=[make_floor(1, ["Korhonen", "Virtanen"], []), make_floor(2, ["Mäkinen"])],
        scale=1.2,
        news_scale=0.8,
        screen_columns=2,
        check_interval_minutes=15,
        weather_city="Oulu",
        clock_mode="manual",
        clock_date="2026-01-31",
        clock_time="12:30",
        news_enabled=True,
        news_rss_url="https://example.org/feed.xml",
        news_limit=5,
        logos=[Logo(url="/files/logos/a.png", name="A")],
        logos_enabled=True,
        logos_speed=45,
        info_enabled=True,
        info_html="<p>Huoltoyhtiö 010 123</p>",
    )


def test_round_trip_preserves_hallway():
    original = _full_hallway()
    recovered = parse_document(compile_document(original, "1"))
    assert recovered == original.to_json_dict()
    rebuilt = hallway_from_dict(recovered)
    assert parse_document(compile_document(rebuilt, "2")) == original.to_json_dict()


def test_round_trip_two_floor_scenario(two_floor_hallway):
    first = compile_document(two_floor_hallway, "100")
    second = compile_document(hallway_from_dict(parse_document(first)), "200")
    assert parse_document(first) == parse_document(second)


def test_round_trip_empty_floors():
    hallway = Hallway(serial="EMPTY")
    assert hallway_from_dict(parse_document(compile_document(hallway, "1"))) == hallway


def test_serial_is_canonical_in_data():
    assert parse_document(compile_document(_full_hallway(), "1"))["serial"] == "ABC-123"


def test_missing_data_element_returns_none():
    assert parse_document("<!DOCTYPE html><html><body>hello</body></html>") is None
    assert parse_document(b"") is None
    assert parse_document(None) is None


def test_invalid_json_returns_none():
    broken = '<script id="__HALLWAY_DATA__" type="application/json">{not json</script>'
    assert parse_document(broken) is None
    empty = '<script id="__HALLWAY_DATA__" type="application/json"></script>'
    assert parse_document(empty) is None


def test_non_object_json_returns_none():
    document = '<script id="__HALLWAY_DATA__" type="application/json">[1, 2, 3]</script>'
    assert parse_document(document) is None


def test_partial_blob_is_returned_as_is_and_defaults_fill_in():
    document = '<script id="__HALLWAY_DATA__" type="application/json">{"serial": "q1", "orientation": "diagonal"}</script>'
    data = parse_document(document.encode("utf-8"))
    assert data == {"serial": "q1", "orientation": "diagonal"}
    hallway = hallway_from_dict(data)
    assert hallway.serial == "Q1"
    assert hallway.orientation == "landscape"
    assert hallway.floors == []
    assert hallway.scale == 1.0
    assert hallway.check_interval_minutes == 5


def test_bad_numbers_in_blob_fall_back_to_defaults():
    data = {
        "serial": "old1",
        "scale": None,
        "newsScale": "huge",
        "logosSpeed": "fast",
        "screenColumns": "",
        "checkIntervalMinutes": "15",
        "newsLimit": 7.6,
        "floors": [{"level": None, "apartments": [{"tenants": [{"surname": "KORHONEN"}]}]}],
    }
    hallway = hallway_from_dict(data)
    assert hallway.scale == 1.0
    assert hallway.news_scale is None
    assert hallway.logos_speed == 30
    assert hallway.screen_columns == 1
    assert hallway.check_interval_minutes == 15
    assert hallway.news_limit == 8
    assert hallway.floors[0].level == 1
    assert hallway.floors[0].apartments[0].tenants[0].surname == "KORHONEN"
