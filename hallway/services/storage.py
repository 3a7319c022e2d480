import logging
import os
import secrets
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath

from pydantic import BaseModel

from hallway.config import Settings

logger = logging.getLogger(__name__)

FILES_ROUTE = "/files"


class StorageError(Exception):
    """The backend could not complete a read or write."""


class SavedObject(BaseModel):
    url: str
    key: str


class StoredEntry(BaseModel):
    key: str
    url: str
    size: int
    uploaded_at: datetime


def normalize_key(key: str) -> str:
    raw = (key or "").strip().replace("\\", "/").strip("/")
    if not raw:
        raise ValueError("Storage key is empty.")
    parts = PurePosixPath(raw).parts
    if any(part in {"..", "."} for part in parts):
        raise ValueError("Storage key must not contain relative path segments.")
    return "/".join(parts)


def with_random_suffix(key: str) -> str:
    base, ext = os.path.splitext(key)
    return f"{base}-{secrets.token_hex(6)}{ext}"


class Storage:
    """Key -> bytes store that can hand out public URLs."""

    def save(self, key: str, content: bytes, content_type: str, add_random_suffix: bool = False) -> SavedObject:
        raise NotImplementedError

    def fetch_by_key(self, key: str) -> bytes | None:
        raise NotImplementedError

    def list_by_prefix(self, prefix: str) -> list[StoredEntry]:
        raise NotImplementedError


class FileStorage(Storage):
    def __init__(self, settings: Settings) -> None:
        self.root = Path(settings.storage_dir).resolve()
        self.public_base_url = settings.public_base_url

    def ensure_storage(self) -> None:
        os.makedirs(self.root, exist_ok=True)

    def url_for(self, key: str) -> str:
        return f"{self.public_base_url}{FILES_ROUTE}/{key}"

    def path_for(self, key: str) -> Path:
        return self.root.joinpath(*normalize_key(key).split("/"))

    def save(self, key: str, content: bytes, content_type: str, add_random_suffix: bool = False) -> SavedObject:
        key = normalize_key(key)
        if add_random_suffix:
            key = with_random_suffix(key)
        path = self.path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_name(f".{path.name}.tmp")
            tmp.write_bytes(content)
            os.replace(tmp, path)
        except OSError as exc:
            raise StorageError(f"Could not write {key}: {exc}") from exc
        logger.info("stored %s (%d bytes, %s)", key, len(content), content_type)
        return SavedObject(url=self.url_for(key), key=key)

    def fetch_by_key(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except IsADirectoryError:
            return None
        except OSError as exc:
            raise StorageError(f"Could not read {key}: {exc}") from exc

    def list_by_prefix(self, prefix: str) -> list[StoredEntry]:
        prefix = (prefix or "").strip().replace("\\", "/").lstrip("/")
        if not self.root.exists():
            return []
        entries: list[StoredEntry] = []
        for path in sorted(self.root.rglob("*")):
            if not path.is_file() or path.name.startswith("."):
                continue
            key = path.relative_to(self.root).as_posix()
            if not key.startswith(prefix):
                continue
            stat = path.stat()
            entries.append(
                StoredEntry(
                    key=key,
                    url=self.url_for(key),
                    size=stat.st_size,
                    uploaded_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
                )
            )
        return entries
