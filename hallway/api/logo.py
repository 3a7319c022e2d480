from fastapi import APIRouter, Depends, HTTPException

from hallway.api.deps import get_storage
from hallway.config import Settings, get_settings
from hallway.schemas.publish import LogoUploadIn, LogoUploadOut
from hallway.services.publish import save_logo
from hallway.services.storage import Storage, StorageError

router = APIRouter(prefix="/api", tags=["logos"])


@router.post("/logo", response_model=LogoUploadOut)
def upload_logo(
    payload: LogoUploadIn,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    try:
        saved, name = save_logo(
            storage,
            payload.data_url,
            payload.filename,
            payload.serial,
            settings.max_logo_bytes,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StorageError as exc:
        raise HTTPException(status_code=500, detail=f"Logo save failed: {exc}") from exc
    return LogoUploadOut(url=saved.url, name=name)
