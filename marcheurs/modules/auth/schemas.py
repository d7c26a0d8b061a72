from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional, Dict, Any

from marcheurs.modules.profiles.schemas import Profile


class MagicLinkRequest(BaseModel):
    email: EmailStr
    redirect_to: Optional[str] = None


class MagicLinkResponse(BaseModel):
    email: str
    message: str


class SessionUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = {}
    app_metadata: Dict[str, Any] = {}


class MeResponse(BaseModel):
    view: str
    user: Optional[SessionUser] = None
    profile: Optional[Profile] = None
    capabilities: list = []
