import os
import sys
import tempfile
from pathlib import Path


def _add_repo_root_to_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_add_repo_root_to_path()
# hallway.main prepares its storage directory on import; keep it out of the repo.
os.environ.setdefault("HALLWAY_STORAGE_DIR", tempfile.mkdtemp(prefix="hallway-test-"))

import pytest
from fastapi.testclient import TestClient

from hallway.api.deps import get_storage
from hallway.config import Settings, get_settings
from hallway.schemas.hallway import Apartment, Floor, Hallway, Tenant
from hallway.services.storage import FileStorage


@pytest.fixture
def settings(tmp_path):
    return Settings(storage_dir=str(tmp_path / "data"), document_dir="ruutu", admin_url="/admin")


@pytest.fixture
def storage(settings):
    store = FileStorage(settings)
    store.ensure_storage()
    return store


@pytest.fixture
def client(settings, storage):
    from hallway.main import app

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_floor(level: int, *surnames_per_apartment: list[str]) -> Floor:
    apartments = [
        Apartment(tenants=[Tenant(surname=name) for name in names])
        for names in surnames_per_apartment
    ]
    return Floor(level=level, apartments=apartments)


@pytest.fixture
def two_floor_hallway() -> Hallway:
    return Hallway(
        name="Rappu B",
        serial="XYZ1",
        orientation="landscape",
        floors=[make_floor(1, ["KORHONEN"]), make_floor(2, ["KORHONEN"])],
    )
