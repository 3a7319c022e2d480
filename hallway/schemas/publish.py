from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


class HtmlSaveIn(BaseModel):
    html: str = ""
    filename: str | None = None
    dir: str | None = None


class SavedOut(BaseModel):
    ok: bool = True
    url: str
    key: str


class HallwaySaveOut(BaseModel):
    ok: bool
    saved: bool
    filename: str
    key: str
    url: str | None = None
    error: str | None = None
    html: str | None = None


class LogoUploadIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    data_url: str = Field("", alias="dataUrl")
    filename: str = ""
    serial: str = ""


class LogoUploadOut(BaseModel):
    ok: bool = True
    url: str
    name: str


class StoredEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    url: str
    size: int
    uploaded_at: datetime


class LayoutOut(BaseModel):
    count: int
    orientation: str
    columns: list[int]
