from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Literal
from datetime import datetime


Role = Literal["admin", "editor", "walker"]


class Profile(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True, extra="ignore")

    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address: Optional[str] = None
    address_complement: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    phone_mobile: Optional[str] = None
    phone_fixed: Optional[str] = None
    is_profile_completed: bool = False
    role: str = "walker"
    approved: bool = False
    created_at: Optional[datetime] = None


class ProfileCompletion(BaseModel):
    first_name: str
    last_name: str
    address: str
    address_complement: Optional[str] = None
    postal_code: str
    city: str
    phone_mobile: str
    phone_fixed: Optional[str] = None


class ApprovalUpdate(BaseModel):
    approved: bool


class RoleUpdate(BaseModel):
    role: Role


class DashboardStats(BaseModel):
    members: int
    pending_members: int
    hikes: int
    photos: int
    recent_profiles: List[Profile]
