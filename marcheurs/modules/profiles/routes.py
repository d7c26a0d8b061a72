from fastapi import APIRouter, Depends
from marcheurs.core.access import Viewer
from marcheurs.core.dependencies import get_authenticated_viewer, require_capability
from marcheurs.database.supabase_client import get_service_supabase
from marcheurs.modules.profiles.schemas import (
    Profile, ProfileCompletion, ApprovalUpdate, RoleUpdate, DashboardStats
)
from marcheurs.modules.profiles.service import ProfileService
from supabase import Client
from typing import List, Literal, Optional

router = APIRouter(tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_service_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/profiles/me", response_model=Profile)
async def get_my_profile(
    viewer: Viewer = Depends(get_authenticated_viewer),
    service: ProfileService = Depends(get_profile_service)
):
    """Current user's profile row"""
    return service.get_profile(viewer.user.id)


@router.put("/profiles/me/completion", response_model=Profile)
async def complete_my_profile(
    body: ProfileCompletion,
    viewer: Viewer = Depends(get_authenticated_viewer),
    service: ProfileService = Depends(get_profile_service)
):
    """Finish registration; the profile then waits for an admin's approval."""
    return service.complete_profile(viewer.user.id, body)


@router.get("/admin/users", response_model=List[Profile])
async def list_users(
    filter: Literal["all", "pending", "staff"] = "all",
    search: Optional[str] = None,
    viewer: Viewer = Depends(require_capability("users:manage")),
    service: ProfileService = Depends(get_profile_service)
):
    """Back-office member list"""
    return service.list_profiles(filter=filter, search=search)


@router.patch("/admin/users/{user_id}/approval", response_model=Profile)
async def set_user_approval(
    user_id: str,
    body: ApprovalUpdate,
    viewer: Viewer = Depends(require_capability("users:manage")),
    service: ProfileService = Depends(get_profile_service)
):
    """Approve or revoke a member"""
    return service.set_approval(user_id, body.approved)


@router.patch("/admin/users/{user_id}/role", response_model=Profile)
async def set_user_role(
    user_id: str,
    body: RoleUpdate,
    viewer: Viewer = Depends(require_capability("users:manage")),
    service: ProfileService = Depends(get_profile_service)
):
    """Change a member's role"""
    return service.set_role(user_id, body.role)


@router.get("/admin/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    viewer: Viewer = Depends(require_capability("hikes:manage")),
    service: ProfileService = Depends(get_profile_service)
):
    """Counters and latest sign-ups for the back-office dashboard"""
    return service.get_dashboard_stats()
