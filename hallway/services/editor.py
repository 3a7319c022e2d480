"""
Pure edits over a Hallway.

Each function returns a new Hallway and leaves its argument untouched, so an
editor can keep history or diff states without caring how they were made.
"""
from typing import Any

from hallway.schemas.hallway import (
    Apartment,
    Floor,
    Hallway,
    Logo,
    Tenant,
    canonical_orientation,
    canonical_serial,
)
from hallway.services.compiler import default_apartment_number

MAX_TENANTS = 2
SCALE_FIELDS = {
    "overall": "scale",
    "header": "header_scale",
    "main": "main_scale",
    "weather": "weather_scale",
    "news": "news_scale",
    "info": "info_scale",
    "logos": "logos_scale",
}


def new_hallway(orientation: str = "landscape", **fields: Any) -> Hallway:
    return Hallway(orientation=canonical_orientation(orientation), **fields)


def _copy(hallway: Hallway) -> Hallway:
    return hallway.model_copy(deep=True)


def _floor(hallway: Hallway, floor_id: str) -> Floor:
    for floor in hallway.floors:
        if floor.id == floor_id:
            return floor
    raise KeyError(f"Floor {floor_id} not found")


def _apartment(floor: Floor, apartment_id: str) -> Apartment:
    for apartment in floor.apartments:
        if apartment.id == apartment_id:
            return apartment
    raise KeyError(f"Apartment {apartment_id} not found")


def update_settings(hallway: Hallway, **fields: Any) -> Hallway:
    """Set plain fields by their Python names; values go through model validation."""
    unknown = set(fields) - set(Hallway.model_fields)
    if unknown:
        raise KeyError(f"Unknown hallway fields: {', '.join(sorted(unknown))}")
    data = hallway.model_dump()
    data.update(fields)
    return Hallway.model_validate(data)


def set_serial(hallway: Hallway, serial: str) -> Hallway:
    updated = _copy(hallway)
    updated.serial = canonical_serial(serial)
    return updated


def set_orientation(hallway: Hallway, orientation: str) -> Hallway:
    updated = _copy(hallway)
    updated.orientation = canonical_orientation(orientation)
    return updated


def set_scale(hallway: Hallway, region: str, value: float | None) -> Hallway:
    if region not in SCALE_FIELDS:
        raise KeyError(f"Unknown scale region {region}")
    if region == "overall" and value is None:
        value = 1.0
    updated = _copy(hallway)
    setattr(updated, SCALE_FIELDS[region], value)
    return updated


def add_floor(hallway: Hallway, level: int | None = None, label: str = "") -> Hallway:
    updated = _copy(hallway)
    if level is None:
        level = max((floor.level for floor in updated.floors), default=0) + 1
    updated.floors.append(Floor(level=level, label=label))
    return updated


def remove_floor(hallway: Hallway, floor_id: str) -> Hallway:
    updated = _copy(hallway)
    updated.floors = [floor for floor in updated.floors if floor.id != floor_id]
    return updated


def set_floor_label(hallway: Hallway, floor_id: str, label: str) -> Hallway:
    updated = _copy(hallway)
    _floor(updated, floor_id).label = label or ""
    return updated


def set_floor_level(hallway: Hallway, floor_id: str, level: int) -> Hallway:
    updated = _copy(hallway)
    _floor(updated, floor_id).level = int(level)
    return updated


def add_apartment(hallway: Hallway, floor_id: str, number: str | None = None) -> Hallway:
    updated = _copy(hallway)
    floor = _floor(updated, floor_id)
    if number is None:
        number = default_apartment_number(floor.level, len(floor.apartments))
    floor.apartments.append(Apartment(number=number, tenants=[Tenant()]))
    return updated


def remove_apartment(hallway: Hallway, floor_id: str, apartment_id: str) -> Hallway:
    updated = _copy(hallway)
    floor = _floor(updated, floor_id)
    floor.apartments = [apartment for apartment in floor.apartments if apartment.id != apartment_id]
    return updated


def set_apartment_number(hallway: Hallway, floor_id: str, apartment_id: str, number: str) -> Hallway:
    updated = _copy(hallway)
    _apartment(_floor(updated, floor_id), apartment_id).number = number or ""
    return updated


def add_tenant(hallway: Hallway, floor_id: str, apartment_id: str, surname: str = "") -> Hallway:
    updated = _copy(hallway)
    apartment = _apartment(_floor(updated, floor_id), apartment_id)
    if len(apartment.tenants) >= MAX_TENANTS:
        raise ValueError(f"An apartment holds at most {MAX_TENANTS} tenants.")
    apartment.tenants.append(Tenant(surname=surname))
    return updated


def set_tenant_surname(hallway: Hallway, floor_id: str, apartment_id: str, tenant_id: str, surname: str) -> Hallway:
    updated = _copy(hallway)
    apartment = _apartment(_floor(updated, floor_id), apartment_id)
    for tenant in apartment.tenants:
        if tenant.id == tenant_id:
            tenant.surname = surname or ""
            return updated
    raise KeyError(f"Tenant {tenant_id} not found")


def remove_tenant(hallway: Hallway, floor_id: str, apartment_id: str, tenant_id: str) -> Hallway:
    updated = _copy(hallway)
    apartment = _apartment(_floor(updated, floor_id), apartment_id)
    remaining = [tenant for tenant in apartment.tenants if tenant.id != tenant_id]
    # The last tenant slot stays; it is blanked instead.
    apartment.tenants = remaining or [Tenant()]
    return updated


def add_logo(hallway: Hallway, url: str, name: str = "") -> Hallway:
    updated = _copy(hallway)
    updated.logos.append(Logo(url=url, name=name))
    return updated


def remove_logo(hallway: Hallway, logo_id: str) -> Hallway:
    updated = _copy(hallway)
    updated.logos = [logo for logo in updated.logos if logo.id != logo_id]
    return updated


def move_logo(hallway: Hallway, logo_id: str, offset: int) -> Hallway:
    updated = _copy(hallway)
    ids = [logo.id for logo in updated.logos]
    if logo_id not in ids:
        raise KeyError(f"Logo {logo_id} not found")
    index = ids.index(logo_id)
    target = min(len(ids) - 1, max(0, index + offset))
    logo = updated.logos.pop(index)
    updated.logos.insert(target, logo)
    return updated
