import base64
import binascii
import logging
import re
import time

from pydantic import BaseModel

from hallway.schemas.hallway import Hallway, canonical_serial
from hallway.services.compiler import compile_document
from hallway.services.document_parser import parse_document
from hallway.services.storage import SavedObject, Storage, StorageError, StoredEntry

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
LOGO_DIR = "logos"
_DATA_URL = re.compile(r"^data:([^;,]+);base64,(.+)$", re.DOTALL)
_UNSAFE_NAME = re.compile(r"[^a-zA-Z0-9._-]")


class MissingSerialError(ValueError):
    pass


class PublishResult(BaseModel):
    saved: bool
    filename: str
    key: str
    url: str | None = None
    error: str | None = None
    html: str | None = None


def document_filename(hallway: Hallway) -> str:
    if hallway.serial:
        return f"{hallway.serial}.html"
    return f"hallway-{hallway.id}-{hallway.orientation}.html"


def document_key(filename: str, directory: str) -> str:
    directory = (directory or "").strip().strip("/")
    return f"{directory}/{filename}" if directory else filename


def save_html(storage: Storage, html: str | bytes, filename: str, directory: str) -> SavedObject:
    if not html:
        raise ValueError("Missing html")
    if not filename or not filename.strip():
        raise ValueError("Filename required")
    content = html.encode("utf-8") if isinstance(html, str) else html
    return storage.save(document_key(filename.strip(), directory), content, HTML_CONTENT_TYPE)


def fetch_html(storage: Storage, key: str) -> bytes | None:
    return storage.fetch_by_key(key)


def list_documents(storage: Storage, prefix: str) -> list[StoredEntry]:
    return storage.list_by_prefix(prefix)


def publish_hallway(storage: Storage, hallway: Hallway, directory: str, build_id: str | None = None) -> PublishResult:
    """
    Compile and persist one hallway under its serial.

    A missing serial stops before compiling. A storage failure is returned
    as an unsaved result that still carries the compiled document.
    """
    if not hallway.serial:
        raise MissingSerialError("Serial number is required before saving.")
    filename = document_filename(hallway)
    key = document_key(filename, directory)
    document = compile_document(hallway, build_id)
    try:
        saved = storage.save(key, document, HTML_CONTENT_TYPE)
    except StorageError as exc:
        logger.warning("saving %s failed: %s", key, exc)
        return PublishResult(
            saved=False,
            filename=filename,
            key=key,
            error=str(exc),
            html=document.decode("utf-8"),
        )
    return PublishResult(saved=True, filename=filename, key=saved.key, url=saved.url)


def load_hallway(storage: Storage, serial: str, directory: str) -> dict | None:
    serial = canonical_serial(serial)
    if not serial:
        raise MissingSerialError("Serial number is required.")
    document = storage.fetch_by_key(document_key(f"{serial}.html", directory))
    return parse_document(document)


def decode_data_url(data_url: str) -> tuple[str, bytes]:
    match = _DATA_URL.match((data_url or "").strip())
    if not match:
        raise ValueError("Invalid dataUrl")
    content_type = match.group(1).strip().lower()
    try:
        content = base64.b64decode(match.group(2), validate=False)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Invalid dataUrl") from exc
    return content_type, content


def save_logo(storage: Storage, data_url: str, filename: str, serial: str, max_bytes: int) -> tuple[SavedObject, str]:
    content_type, content = decode_data_url(data_url)
    if not content_type.startswith("image/"):
        raise ValueError("Logo must be an image.")
    if not content:
        raise ValueError("Empty logo upload.")
    if len(content) > max_bytes:
        raise ValueError(f"Logo exceeds the {max_bytes // 1024} KB limit.")
    raw_name = (filename or "").strip()
    safe_name = _UNSAFE_NAME.sub("", raw_name) or f"logo-{int(time.time() * 1000)}"
    safe_serial = _UNSAFE_NAME.sub("", (serial or "").strip())
    key = f"{LOGO_DIR}/{safe_serial}/{safe_name}" if safe_serial else f"{LOGO_DIR}/{safe_name}"
    saved = storage.save(key, content, content_type, add_random_suffix=True)
    display_name = re.sub(r"\.[^.]+$", "", raw_name)
    return saved, display_name
