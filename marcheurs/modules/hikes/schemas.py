from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Literal
from datetime import date as Date, datetime


HikeStatus = Literal["draft", "published", "planned"]
Difficulty = Literal["Facile", "Moyen", "Difficile"]


class HikeCreate(BaseModel):
    title: str
    date: Optional[Date] = None
    location: Optional[str] = None
    description: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    duration: Optional[str] = None
    distance: Optional[float] = None
    elevation: Optional[float] = None
    meeting_point: Optional[str] = "Parking village"
    start_time: Optional[str] = "08:00"
    map_embed_code: Optional[str] = None
    cover_image_url: Optional[str] = None
    status: HikeStatus = "draft"


class HikeUpdate(BaseModel):
    title: Optional[str] = None
    date: Optional[Date] = None
    location: Optional[str] = None
    description: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    duration: Optional[str] = None
    distance: Optional[float] = None
    elevation: Optional[float] = None
    meeting_point: Optional[str] = None
    start_time: Optional[str] = None
    map_embed_code: Optional[str] = None
    cover_image_url: Optional[str] = None
    status: Optional[HikeStatus] = None


class HikeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str
    title: str
    date: Optional[Date] = None
    location: Optional[str] = None
    description: Optional[str] = None
    difficulty: Optional[str] = None
    duration: Optional[str] = None
    distance: Optional[float] = None
    elevation: Optional[float] = None
    meeting_point: Optional[str] = None
    start_time: Optional[str] = None
    map_embed_code: Optional[str] = None
    gpx_file: Optional[str] = None
    cover_image_url: Optional[str] = None
    participants_count: Optional[int] = None
    status: str = "draft"
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None


class HikeSections(BaseModel):
    upcoming: List[HikeResponse]
    archived: List[HikeResponse]


class TrackUploadResponse(BaseModel):
    hike_id: str
    gpx_file: str
    message: str
