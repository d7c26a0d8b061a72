from supabase import Client
from marcheurs.modules.registrations.schemas import RegistrationStatus
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class RegistrationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_status(self, hike_id: str, user_id: str) -> RegistrationStatus:
        try:
            mine = self.supabase.table("registrations")\
                .select("id")\
                .eq("hike_id", hike_id)\
                .eq("user_id", user_id)\
                .execute()
            total = self.supabase.table("registrations")\
                .select("id", count="exact")\
                .eq("hike_id", hike_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        return RegistrationStatus(
            hike_id=hike_id,
            registered=bool(mine.data),
            participants=total.count or 0,
        )

    def toggle(self, hike_id: str, user_id: str) -> RegistrationStatus:
        """Register the member if they were not, unregister them otherwise."""
        current = self.get_status(hike_id, user_id)
        try:
            if current.registered:
                self.supabase.table("registrations")\
                    .delete()\
                    .eq("hike_id", hike_id)\
                    .eq("user_id", user_id)\
                    .execute()
            else:
                self.supabase.table("registrations").insert({
                    "hike_id": hike_id,
                    "user_id": user_id,
                }).execute()
        except Exception as e:
            logger.error(f"Error toggling registration of {user_id} for hike {hike_id}: {e}")
            raise HTTPException(status_code=500, detail="Erreur lors de l'inscription")
        return self.get_status(hike_id, user_id)
