from pydantic import BaseModel


class RegistrationStatus(BaseModel):
    hike_id: str
    registered: bool
    participants: int
