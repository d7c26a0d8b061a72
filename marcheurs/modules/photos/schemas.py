from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime


class PhotoResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str
    hike_id: Optional[str] = None
    user_id: Optional[str] = None
    storage_path: str
    caption: Optional[str] = None
    public_url: Optional[str] = None
    created_at: Optional[datetime] = None


class ModerationPhotoResponse(PhotoResponse):
    author_name: str
    hike_title: Optional[str] = None


class UploadFailure(BaseModel):
    filename: str
    error: str


class UploadReport(BaseModel):
    uploaded: List[PhotoResponse]
    failed: List[UploadFailure]
    skipped: List[str]
