from fastapi import APIRouter, Depends, Query, UploadFile, File
from marcheurs.core.access import Viewer
from marcheurs.core.dependencies import require_member, require_capability
from marcheurs.database.supabase_client import get_service_supabase
from marcheurs.modules.hikes.routes import get_hike_service
from marcheurs.modules.hikes.service import HikeService
from marcheurs.modules.photos.schemas import PhotoResponse, ModerationPhotoResponse, UploadReport
from marcheurs.modules.photos.service import PhotoService
from supabase import Client
from typing import List, Optional

router = APIRouter(tags=["photos"])


def get_photo_service(supabase: Client = Depends(get_service_supabase)) -> PhotoService:
    return PhotoService(supabase)


@router.post("/hikes/{hike_id}/photos", response_model=UploadReport, status_code=201)
async def upload_photos(
    hike_id: str,
    files: List[UploadFile] = File(...),
    viewer: Viewer = Depends(require_member),
    hikes: HikeService = Depends(get_hike_service),
    service: PhotoService = Depends(get_photo_service)
):
    """
    Add photos to a hike. Only images are kept and at most MAX_UPLOAD_BATCH
    per request; each file is uploaded independently and the report lists
    what went through, what failed and what was skipped.
    """
    hikes.get_hike(hike_id, privileged=viewer.is_privileged)
    return await service.upload_batch(hike_id, files, viewer.user.id)


@router.get("/photos", response_model=List[PhotoResponse])
async def list_photos(
    hike_id: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    viewer: Viewer = Depends(require_member),
    service: PhotoService = Depends(get_photo_service)
):
    """Gallery, optionally for one hike and paged"""
    return service.list_photos(hike_id=hike_id, limit=limit, offset=offset)


@router.get("/admin/photos", response_model=List[ModerationPhotoResponse])
async def list_photos_for_moderation(
    viewer: Viewer = Depends(require_capability("photos:moderate")),
    service: PhotoService = Depends(get_photo_service)
):
    """Every photo with author and hike, for moderation"""
    return service.list_for_moderation()


@router.delete("/photos/{photo_id}", status_code=204)
async def delete_photo(
    photo_id: str,
    viewer: Viewer = Depends(require_capability("photos:moderate")),
    service: PhotoService = Depends(get_photo_service)
):
    """Delete photo (file first, then row)"""
    service.delete_photo(photo_id)
    return None
