import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from hallway.api import hallways, logo, rss, ruutu
from hallway.config import get_settings
from hallway.services.storage import FILES_ROUTE, FileStorage

settings = get_settings()
FileStorage(settings).ensure_storage()

if settings.quiet_access_log:
    # Keep warning/error lines, suppress normal access noise (200/201 etc).
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

app = FastAPI(title="hallway-directory")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)


@app.get("/")
def root():
    return {
        "ok": True,
        "service": "hallway-directory",
        "time_utc": datetime.now(timezone.utc).isoformat(),
        "docs": "/docs",
    }


@app.get("/healthz")
def healthz():
    return {"ok": True, "server_port": settings.server_port, "document_dir": settings.document_dir}


app.include_router(hallways.router)
app.include_router(ruutu.router)
app.include_router(rss.router)
app.include_router(logo.router)

app.mount(FILES_ROUTE, StaticFiles(directory=settings.storage_dir, check_dir=False), name="files")
