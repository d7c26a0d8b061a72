from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional


class HookUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: EmailStr


class EmailData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    token: Optional[str] = None
    token_hash: Optional[str] = None
    redirect_to: Optional[str] = None
    email_action_type: Optional[str] = None


class AuthEmailHook(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user: HookUser
    email_data: EmailData
