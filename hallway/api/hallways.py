import logging

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from hallway.api.deps import get_storage
from hallway.config import Settings, get_settings
from hallway.schemas.hallway import Hallway, canonical_orientation, hallway_from_dict
from hallway.schemas.publish import HallwaySaveOut, LayoutOut
from hallway.services.compiler import compile_document
from hallway.services.layout import plan_columns
from hallway.services.publish import MissingSerialError, load_hallway, publish_hallway
from hallway.services.storage import Storage, StorageError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["hallways"])

NO_STORE = {"Cache-Control": "no-store"}


@router.post("/hallways/compile")
def compile_hallway(hallway: Hallway = Body(...)):
    return Response(
        content=compile_document(hallway),
        media_type="text/html; charset=utf-8",
        headers=NO_STORE,
    )


@router.post("/hallways/save", response_model=HallwaySaveOut)
def save_hallway(
    hallway: Hallway = Body(...),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    try:
        result = publish_hallway(storage, hallway, settings.document_dir)
    except MissingSerialError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    payload = HallwaySaveOut(ok=result.saved, **result.model_dump())
    if not result.saved:
        # Compiled but not persisted: the operator still gets the document.
        return JSONResponse(status_code=502, content=payload.model_dump())
    return payload


@router.get("/hallways/{serial}")
def resume_hallway(
    serial: str,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    try:
        data = load_hallway(storage, serial, settings.document_dir)
    except MissingSerialError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    if data is not None:
        try:
            return {"found": True, "hallway": hallway_from_dict(data).to_json_dict()}
        except ValidationError:
            logger.warning("stored document for %s has an unreadable hallway blob", serial)
    fresh = Hallway(serial=serial)
    return {"found": False, "hallway": fresh.to_json_dict()}


@router.get("/layout", response_model=LayoutOut)
def layout_plan(count: int, orientation: str = "landscape"):
    if count < 0:
        raise HTTPException(status_code=400, detail="count must be >= 0")
    orientation = canonical_orientation(orientation)
    return LayoutOut(count=count, orientation=orientation, columns=plan_columns(count, orientation))
