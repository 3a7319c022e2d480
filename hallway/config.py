import os
from functools import lru_cache

from pydantic import BaseModel


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    storage_dir: str = "./data"
    public_base_url: str = ""
    document_dir: str = "ruutu"
    admin_url: str = "/"
    server_port: int = 8000
    max_logo_bytes: int = 5 * 1024 * 1024
    rss_timeout_sec: float = 10.0
    quiet_access_log: bool = True


def load_settings() -> Settings:
    """
    Resolve every HALLWAY_* variable once.

    The result is handed to the storage backend and routers explicitly;
    nothing else in the package reads the environment.
    """
    return Settings(
        storage_dir=os.getenv("HALLWAY_STORAGE_DIR", "./data").strip() or "./data",
        public_base_url=(os.getenv("HALLWAY_PUBLIC_BASE_URL", "") or "").strip().rstrip("/"),
        document_dir=(os.getenv("HALLWAY_DOCUMENT_DIR", "ruutu") or "").strip().strip("/") or "ruutu",
        admin_url=(os.getenv("HALLWAY_ADMIN_URL", "/") or "").strip() or "/",
        server_port=int(os.getenv("HALLWAY_SERVER_PORT", "8000")),
        max_logo_bytes=int(os.getenv("HALLWAY_MAX_LOGO_BYTES", str(5 * 1024 * 1024))),
        rss_timeout_sec=float(os.getenv("HALLWAY_RSS_TIMEOUT_SEC", "10")),
        quiet_access_log=_env_flag("HALLWAY_QUIET_ACCESS_LOG", "1"),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
