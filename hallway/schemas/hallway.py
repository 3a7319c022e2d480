import math
import re
import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

ORIENTATIONS = ("landscape", "portrait")
CLOCK_MODES = ("auto", "manual")
_SERIAL_STRIP = re.compile(r"[^A-Z0-9._-]")

FLOAT_FIELDS = (
    "scale", "header_scale", "main_scale", "weather_scale", "news_scale",
    "info_scale", "logos_scale", "weather_lat", "weather_lon", "logos_speed", "logos_gap",
)
INT_FIELDS = ("screen_columns", "check_interval_minutes", "news_limit", "logos_limit", "news_title_px")


def _new_id() -> str:
    return uuid.uuid4().hex


def coerce_number(value: Any) -> float | None:
    """Finite number from a JSON-ish value, or None when there is none."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _number_or_default(model: type[BaseModel], value: Any, info: ValidationInfo, integral: bool) -> Any:
    number = coerce_number(value)
    if number is None:
        return model.model_fields[info.field_name].get_default(call_default_factory=True)
    return int(round(number)) if integral else number


def canonical_serial(value: Any) -> str:
    raw = str(value or "").strip().upper()
    return _SERIAL_STRIP.sub("", raw)


def canonical_orientation(value: Any) -> str:
    orientation = str(value or "").strip().lower()
    return orientation if orientation in ORIENTATIONS else "landscape"


class _Camel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Tenant(_Camel):
    id: str = Field(default_factory=_new_id)
    surname: str = ""

    @field_validator("surname", mode="before")
    @classmethod
    def _text(cls, value: Any) -> str:
        return "" if value is None else str(value)


class Apartment(_Camel):
    id: str = Field(default_factory=_new_id)
    number: str = ""
    tenants: list[Tenant] = Field(default_factory=list)

    @field_validator("number", mode="before")
    @classmethod
    def _number_text(cls, value: Any) -> str:
        return "" if value is None else str(value)


class Floor(_Camel):
    id: str = Field(default_factory=_new_id)
    label: str = ""
    level: int = 1
    apartments: list[Apartment] = Field(default_factory=list)

    @field_validator("label", mode="before")
    @classmethod
    def _label_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("level", mode="before")
    @classmethod
    def _level(cls, value: Any, info: ValidationInfo) -> int:
        return _number_or_default(cls, value, info, integral=True)

    def display_label(self) -> str:
        label = self.label.strip()
        return label or f"Floor {self.level}"


class Logo(_Camel):
    id: str = Field(default_factory=_new_id)
    url: str = ""
    name: str = ""


class Hallway(_Camel):
    """
    Root aggregate for one physical screen.

    Field values are stored as entered; range clamping happens where the
    compiler uses them so the embedded JSON keeps the operator's input.
    """

    id: str = Field(default_factory=_new_id)
    name: str = ""
    building: str = ""
    serial: str = ""
    orientation: str = "landscape"
    floors: list[Floor] = Field(default_factory=list)

    scale: float = 1.0
    header_scale: float | None = None
    main_scale: float | None = None
    weather_scale: float | None = None
    news_scale: float | None = None
    info_scale: float | None = None
    logos_scale: float | None = None

    screen_columns: int = 1
    check_interval_minutes: int = 5

    weather_clock_enabled: bool = True
    weather_city: str = "Helsinki"
    weather_lat: float | None = None
    weather_lon: float | None = None
    clock_mode: str = "auto"
    clock_date: str = ""
    clock_time: str = ""

    news_enabled: bool = False
    news_rss_url: str = ""
    news_limit: int | None = None
    news_title: str = "Uutiset"
    news_title_px: int = 28

    logos: list[Logo] = Field(default_factory=list)
    logos_enabled: bool = False
    logos_animate: bool = True
    logos_limit: int | None = None
    logos_bg_color: str = "#ffffff"
    logos_speed: float = 30
    logos_gap: float = 48

    info_enabled: bool = False
    info_html: str = ""
    info_pin_bottom: bool = False
    info_align_right: bool = False

    @field_validator(
        "name", "building", "weather_city", "clock_date", "clock_time",
        "news_rss_url", "news_title", "logos_bg_color", "info_html",
        mode="before",
    )
    @classmethod
    def _plain_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    # Blobs come back from stored documents; a bad number must not lose the rest.
    @field_validator(*FLOAT_FIELDS, mode="before")
    @classmethod
    def _float(cls, value: Any, info: ValidationInfo) -> float | None:
        return _number_or_default(cls, value, info, integral=False)

    @field_validator(*INT_FIELDS, mode="before")
    @classmethod
    def _int(cls, value: Any, info: ValidationInfo) -> int | None:
        return _number_or_default(cls, value, info, integral=True)

    @field_validator("serial", mode="before")
    @classmethod
    def _serial(cls, value: Any) -> str:
        return canonical_serial(value)

    @field_validator("orientation", mode="before")
    @classmethod
    def _orientation(cls, value: Any) -> str:
        return canonical_orientation(value)

    @field_validator("clock_mode", mode="before")
    @classmethod
    def _clock_mode(cls, value: Any) -> str:
        mode = str(value or "").strip().lower()
        return mode if mode in CLOCK_MODES else "auto"

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def hallway_from_dict(data: dict[str, Any] | None) -> Hallway:
    """Build a Hallway from a decoded blob, defaulting whatever is missing."""
    return Hallway.model_validate(data or {})
