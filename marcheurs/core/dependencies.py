"""
Core dependencies for route protection.

Each request builds one immutable Viewer (session user + profile row) and every
guard below derives its answer from resolve_access(viewer).
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from marcheurs.config import settings
from marcheurs.core.access import AccessView, Viewer, resolve_access
from marcheurs.database.supabase_client import get_supabase, get_service_supabase
from marcheurs.modules.auth.service import AuthService
from marcheurs.modules.profiles.schemas import Profile
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

_VIEW_DETAILS = {
    AccessView.NEEDS_COMPLETION: "Profil incomplet",
    AccessView.PENDING_APPROVAL: "Compte en attente de validation",
    AccessView.PROFILE_ERROR: "Impossible de charger votre profil",
}


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def load_profile(user_id: str, supabase: Client) -> Optional[Profile]:
    """Fetch the profile row for a user; None when missing or unreadable."""
    try:
        result = supabase.table("profiles")\
            .select("*")\
            .eq("id", user_id)\
            .limit(1)\
            .execute()
        if not result.data:
            logger.warning(f"No profile row for user {user_id}")
            return None
        return Profile(**result.data[0])
    except Exception as e:
        logger.error(f"Error fetching profile for {user_id}: {e}")
        return None


def get_viewer(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(optional_security),
    auth_service: AuthService = Depends(get_auth_service),
    supabase: Client = Depends(get_service_supabase),
) -> Viewer:
    """Viewer for the request; anonymous when no bearer token is sent."""
    if credentials is None:
        return Viewer()
    user = auth_service.get_current_user(credentials.credentials)
    return Viewer(user=user, profile=load_profile(user.id, supabase))


def get_authenticated_viewer(viewer: Viewer = Depends(get_viewer)) -> Viewer:
    """Any signed-in user, whatever the state of their profile."""
    if not viewer.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return viewer


def require_member(viewer: Viewer = Depends(get_authenticated_viewer)) -> Viewer:
    """Completed, approved profile (or admin)."""
    decision = resolve_access(viewer)
    if not decision.is_member:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"view": decision.view.value, "message": _VIEW_DETAILS.get(decision.view, "Accès refusé")},
        )
    return viewer


def require_capability(capability: str):
    """Factory function to create a back-office capability check dependency"""
    def check_capability(viewer: Viewer = Depends(require_member)) -> Viewer:
        if not viewer.can(capability):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {capability}"
            )
        return viewer
    return check_capability


def verify_webhook_secret(request: Request) -> None:
    """Webhook callers must present the shared secret when one is configured."""
    secret = settings.webhook_secret
    if not secret:
        return None
    header = request.headers.get("Authorization", "")
    if header != f"Bearer {secret}":
        logger.warning("Rejected webhook call with missing or wrong secret")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid webhook secret")
    return None
