"""
Session/profile gate.

Every surface of the site (API responses, route protection) decides what a caller
may see from one immutable ``Viewer`` value and the single ``resolve_access``
function below. Nothing else inspects ``approved``/``is_profile_completed``
directly, so the checks cannot drift between endpoints.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from marcheurs.config.roles_config import ROLE_ADMIN, PRIVILEGED_ROLES, role_has_capability
from marcheurs.modules.auth.schemas import SessionUser
from marcheurs.modules.profiles.schemas import Profile


class AccessView(str, Enum):
    ANONYMOUS = "anonymous"
    NEEDS_COMPLETION = "needs_completion"
    PENDING_APPROVAL = "pending_approval"
    PROFILE_ERROR = "profile_error"
    MEMBER = "member"


@dataclass(frozen=True)
class Viewer:
    """Snapshot of who is calling. Replace it, never mutate it."""
    user: Optional[SessionUser] = None
    profile: Optional[Profile] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def role(self) -> Optional[str]:
        return self.profile.role if self.profile else None

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES

    def can(self, capability: str) -> bool:
        return self.role is not None and role_has_capability(self.role, capability)

    def with_profile(self, profile: Optional[Profile]) -> "Viewer":
        return Viewer(user=self.user, profile=profile)


@dataclass(frozen=True)
class AccessDecision:
    view: AccessView
    viewer: Viewer

    @property
    def is_member(self) -> bool:
        return self.view is AccessView.MEMBER


def resolve_access(viewer: Viewer) -> AccessDecision:
    """Select exactly one view for the viewer.

    Admins skip the completion and approval checks so that a mis-set flag can
    never lock the last administrator out.
    """
    if not viewer.is_authenticated:
        return AccessDecision(AccessView.ANONYMOUS, viewer)

    profile = viewer.profile
    if profile is None:
        return AccessDecision(AccessView.PROFILE_ERROR, viewer)

    is_admin = profile.role == ROLE_ADMIN
    if not profile.is_profile_completed and not is_admin:
        return AccessDecision(AccessView.NEEDS_COMPLETION, viewer)
    if not profile.approved and not is_admin:
        return AccessDecision(AccessView.PENDING_APPROVAL, viewer)

    return AccessDecision(AccessView.MEMBER, viewer)
