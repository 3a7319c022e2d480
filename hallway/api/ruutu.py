import os
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse, Response

from hallway.api.deps import get_storage
from hallway.config import Settings, get_settings
from hallway.schemas.hallway import canonical_serial
from hallway.schemas.publish import HtmlSaveIn, SavedOut, StoredEntryOut
from hallway.services.publish import HTML_CONTENT_TYPE, fetch_html, list_documents, save_html
from hallway.services.storage import Storage, StorageError

router = APIRouter(tags=["documents"])

TV_AGENT_MARKERS = ("web0s", "webos", "netcast", "smarttv", "smart-tv", "tizen", "hbbtv", "bravia", "; aft", "crkey")


def is_tv_agent(user_agent: str | None) -> bool:
    agent = (user_agent or "").lower()
    return any(marker in agent for marker in TV_AGENT_MARKERS)


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


def _save(storage: Storage, payload: HtmlSaveIn, filename: str | None, default_dir: str) -> SavedOut:
    try:
        saved = save_html(storage, payload.html, filename or "", payload.dir or default_dir)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return SavedOut(url=saved.url, key=saved.key)


@router.post("/api/ruutu", response_model=SavedOut)
def save_document(
    payload: HtmlSaveIn,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    return _save(storage, payload, payload.filename, settings.document_dir)


@router.post("/api/ruutu/{serial}", response_model=SavedOut)
def save_document_for_serial(
    serial: str,
    payload: HtmlSaveIn,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    serial = canonical_serial(serial)
    if not serial:
        raise HTTPException(status_code=400, detail="Missing serial")
    return _save(storage, payload, payload.filename or f"{serial}.html", settings.document_dir)


@router.get("/api/ruutu", response_model=list[StoredEntryOut])
def list_saved_documents(
    prefix: str | None = None,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    return list_documents(storage, prefix if prefix is not None else f"{settings.document_dir}/")


def _serve(request: Request, key: str | None, storage: Storage, settings: Settings):
    key = (key or "").strip()
    if not key:
        raise HTTPException(status_code=400, detail="Missing key")
    try:
        content = fetch_html(storage, key)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    if content is None:
        raise HTTPException(status_code=404, detail="Document not found")

    params = request.query_params
    wants_document = (
        _flag(params.get("raw"))
        or _flag(params.get("tv"))
        or is_tv_agent(request.headers.get("user-agent"))
    )
    if wants_document:
        return Response(content=content, media_type=HTML_CONTENT_TYPE, headers={"Cache-Control": "no-store"})

    serial = canonical_serial(os.path.splitext(os.path.basename(key))[0])
    separator = "&" if "?" in settings.admin_url else "?"
    return RedirectResponse(f"{settings.admin_url}{separator}{urlencode({'serial': serial})}", status_code=307)


@router.get("/api/serve")
def serve_document(
    request: Request,
    key: str | None = None,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    return _serve(request, key, storage, settings)


@router.get("/ruutu/{filename:path}")
def serve_document_by_path(
    filename: str,
    request: Request,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    return _serve(request, f"{settings.document_dir}/{filename}", storage, settings)
