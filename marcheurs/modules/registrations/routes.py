from fastapi import APIRouter, Depends
from marcheurs.core.access import Viewer
from marcheurs.core.dependencies import require_member
from marcheurs.database.supabase_client import get_service_supabase
from marcheurs.modules.hikes.routes import get_hike_service
from marcheurs.modules.hikes.service import HikeService
from marcheurs.modules.registrations.schemas import RegistrationStatus
from marcheurs.modules.registrations.service import RegistrationService
from supabase import Client

router = APIRouter(prefix="/hikes/{hike_id}/registration", tags=["registrations"])


def get_registration_service(supabase: Client = Depends(get_service_supabase)) -> RegistrationService:
    return RegistrationService(supabase)


@router.get("", response_model=RegistrationStatus)
async def get_registration(
    hike_id: str,
    viewer: Viewer = Depends(require_member),
    hikes: HikeService = Depends(get_hike_service),
    service: RegistrationService = Depends(get_registration_service)
):
    """Whether the caller attends, and how many members do"""
    hikes.get_hike(hike_id, privileged=viewer.is_privileged)
    return service.get_status(hike_id, viewer.user.id)


@router.post("", response_model=RegistrationStatus)
async def toggle_registration(
    hike_id: str,
    viewer: Viewer = Depends(require_member),
    hikes: HikeService = Depends(get_hike_service),
    service: RegistrationService = Depends(get_registration_service)
):
    """Toggle the caller's attendance"""
    hikes.get_hike(hike_id, privileged=viewer.is_privileged)
    return service.toggle(hike_id, viewer.user.id)
