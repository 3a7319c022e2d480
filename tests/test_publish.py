import base64

import pytest

from hallway.schemas.hallway import Hallway
from hallway.services.document_parser import parse_document
from hallway.services.publish import (
    MissingSerialError,
    decode_data_url,
    document_filename,
    document_key,
    load_hallway,
    publish_hallway,
    save_html,
    save_logo,
)
from hallway.services.storage import Storage, StorageError, normalize_key

PNG = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR4nGNgYAAAAAMAASsJTYQAAAAASUVORK5CYII="
)
PNG_DATA_URL = "data:image/png;base64," + base64.b64encode(PNG).decode("ascii")


class FailingStorage(Storage):
    def __init__(self) -> None:
        self.calls = 0

    def save(self, key, content, content_type, add_random_suffix=False):
        self.calls += 1
        raise StorageError("disk full")

    def fetch_by_key(self, key):
        return None

    def list_by_prefix(self, prefix):
        return []


def test_document_filename_from_serial():
    assert document_filename(Hallway(serial="ABC123")) == "ABC123.html"


def test_document_filename_without_serial_is_deterministic():
    hallway = Hallway(id="abc", orientation="portrait")
    assert document_filename(hallway) == "hallway-abc-portrait.html"
    assert document_filename(hallway) == document_filename(hallway.model_copy())


def test_document_key():
    assert document_key("X.html", "ruutu") == "ruutu/X.html"
    assert document_key("X.html", "/ruutu/") == "ruutu/X.html"
    assert document_key("X.html", "") == "X.html"


def test_publish_and_load(storage, two_floor_hallway):
    result = publish_hallway(storage, two_floor_hallway, "ruutu", build_id="5")
    assert result.saved is True
    assert result.key == "ruutu/XYZ1.html"
    assert result.url == "/files/ruutu/XYZ1.html"
    assert result.html is None
    assert load_hallway(storage, "xyz1", "ruutu") == two_floor_hallway.to_json_dict()


def test_publish_requires_serial(storage):
    failing = FailingStorage()
    with pytest.raises(MissingSerialError):
        publish_hallway(failing, Hallway(), "ruutu")
    assert failing.calls == 0


def test_publish_failure_keeps_compiled_document(two_floor_hallway):
    result = publish_hallway(FailingStorage(), two_floor_hallway, "ruutu", build_id="9")
    assert result.saved is False
    assert result.error == "disk full"
    assert result.filename == "XYZ1.html"
    assert parse_document(result.html) == two_floor_hallway.to_json_dict()


def test_load_missing_document(storage):
    assert load_hallway(storage, "NOPE", "ruutu") is None


def test_save_html_validation(storage):
    with pytest.raises(ValueError):
        save_html(storage, "", "a.html", "ruutu")
    with pytest.raises(ValueError):
        save_html(storage, "<p>x</p>", " ", "ruutu")
    saved = save_html(storage, "<p>x</p>", "a.html", "other")
    assert storage.fetch_by_key(saved.key) == b"<p>x</p>"


def test_storage_rejects_traversal(storage):
    with pytest.raises(ValueError):
        storage.save("../escape.html", b"x", "text/html")
    with pytest.raises(ValueError):
        normalize_key("   ")
    assert normalize_key("\\ruutu\\A.html") == "ruutu/A.html"


def test_storage_list_by_prefix(storage):
    storage.save("ruutu/A.html", b"a", "text/html")
    storage.save("ruutu/B.html", b"bb", "text/html")
    storage.save("logos/x.png", PNG, "image/png")
    entries = storage.list_by_prefix("ruutu/")
    assert [entry.key for entry in entries] == ["ruutu/A.html", "ruutu/B.html"]
    assert entries[1].size == 2


def test_storage_public_base_url(settings):
    from hallway.services.storage import FileStorage

    store = FileStorage(settings.model_copy(update={"public_base_url": "https://tv.example"}))
    saved = store.save("ruutu/A.html", b"a", "text/html")
    assert saved.url == "https://tv.example/files/ruutu/A.html"


def test_random_suffix(storage):
    saved = storage.save("logos/a.png", PNG, "image/png", add_random_suffix=True)
    assert saved.key.startswith("logos/a-")
    assert saved.key.endswith(".png")
    assert len(saved.key) == len("logos/a-") + 12 + len(".png")


def test_decode_data_url():
    content_type, content = decode_data_url(PNG_DATA_URL)
    assert content_type == "image/png"
    assert content == PNG
    with pytest.raises(ValueError):
        decode_data_url("https://example.org/a.png")


def test_save_logo(storage):
    saved, name = save_logo(storage, PNG_DATA_URL, "My Logo!.png", "ab1", max_bytes=1024)
    assert name == "My Logo!"
    assert saved.key.startswith("logos/ab1/MyLogo-")
    assert storage.fetch_by_key(saved.key) == PNG


def test_save_logo_rejects_bad_uploads(storage):
    with pytest.raises(ValueError):
        save_logo(storage, "data:text/plain;base64,aGVsbG8=", "a.txt", "", max_bytes=1024)
    with pytest.raises(ValueError):
        save_logo(storage, PNG_DATA_URL, "a.png", "", max_bytes=10)
