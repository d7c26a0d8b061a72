from fastapi import APIRouter, Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials
from marcheurs.config import settings
from marcheurs.config.roles_config import get_role_capabilities
from marcheurs.core.access import Viewer, resolve_access
from marcheurs.core.dependencies import get_auth_service, get_viewer, security
from marcheurs.core.limiter import limiter
from marcheurs.modules.auth.schemas import MagicLinkRequest, MagicLinkResponse, MeResponse
from marcheurs.modules.auth.service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


@router.post("/magic-link", response_model=MagicLinkResponse)
@limiter.limit(settings.magic_link_rate_limit)
async def request_magic_link(
    request: Request,
    body: MagicLinkRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Email a passwordless sign-in link"""
    return service.send_magic_link(body)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_me(viewer: Viewer = Depends(get_viewer)):
    """Which of the five views the caller gets, with their session and profile."""
    decision = resolve_access(viewer)
    return MeResponse(
        view=decision.view.value,
        user=viewer.user,
        profile=viewer.profile,
        capabilities=get_role_capabilities(viewer.role) if decision.is_member else [],
    )
