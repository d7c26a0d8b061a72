from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from marcheurs.core.access import Viewer
from marcheurs.core.dates import club_today
from marcheurs.core.dependencies import require_member, require_capability
from marcheurs.database.supabase_client import get_service_supabase
from marcheurs.modules.hikes.schemas import (
    HikeCreate, HikeUpdate, HikeResponse, HikeSections, TrackUploadResponse
)
from marcheurs.modules.hikes.service import HikeService
from supabase import Client
from typing import List, Optional

router = APIRouter(tags=["hikes"])


def get_hike_service(supabase: Client = Depends(get_service_supabase)) -> HikeService:
    return HikeService(supabase)


@router.get("/hikes", response_model=HikeSections)
async def list_hikes(
    viewer: Viewer = Depends(require_member),
    service: HikeService = Depends(get_hike_service)
):
    """Upcoming and archived hikes; drafts only for admins and editors."""
    return service.list_sections(club_today(), privileged=viewer.is_privileged)


@router.get("/admin/hikes", response_model=List[HikeResponse])
async def list_hikes_for_admin(
    search: Optional[str] = None,
    status: Optional[str] = None,
    viewer: Viewer = Depends(require_capability("hikes:manage")),
    service: HikeService = Depends(get_hike_service)
):
    """Every hike, drafts included, filtered by title and status"""
    return service.list_for_admin(search=search, status=status)


@router.post("/hikes", response_model=HikeResponse, status_code=201)
async def create_hike(
    hike_data: HikeCreate,
    viewer: Viewer = Depends(require_capability("hikes:manage")),
    service: HikeService = Depends(get_hike_service)
):
    """Create a hike (draft unless a status is given)"""
    return service.create_hike(hike_data, viewer.user.id)


@router.get("/hikes/{hike_id}", response_model=HikeResponse)
async def get_hike(
    hike_id: str,
    viewer: Viewer = Depends(require_member),
    service: HikeService = Depends(get_hike_service)
):
    """Hike detail"""
    return service.get_hike(hike_id, privileged=viewer.is_privileged)


@router.put("/hikes/{hike_id}", response_model=HikeResponse)
async def update_hike(
    hike_id: str,
    hike_data: HikeUpdate,
    viewer: Viewer = Depends(require_capability("hikes:manage")),
    service: HikeService = Depends(get_hike_service)
):
    """Update hike"""
    return service.update_hike(hike_id, hike_data)


@router.delete("/hikes/{hike_id}", status_code=204)
async def delete_hike(
    hike_id: str,
    viewer: Viewer = Depends(require_capability("hikes:manage")),
    service: HikeService = Depends(get_hike_service)
):
    """Delete hike"""
    service.delete_hike(hike_id)
    return None


@router.post("/hikes/{hike_id}/track", response_model=TrackUploadResponse)
async def upload_track(
    hike_id: str,
    file: UploadFile = File(...),
    viewer: Viewer = Depends(require_capability("hikes:manage")),
    service: HikeService = Depends(get_hike_service)
):
    """Upload the GPX trace of a hike"""
    if not file.filename or not file.filename.lower().endswith(".gpx"):
        raise HTTPException(status_code=400, detail="Seuls les fichiers GPX sont acceptés")
    return await service.upload_track(hike_id, file)
