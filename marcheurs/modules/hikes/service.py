from supabase import Client
from marcheurs.config import settings
from marcheurs.database.storage import BucketStorage, random_object_key
from marcheurs.modules.hikes.schemas import (
    HikeCreate, HikeUpdate, HikeResponse, HikeSections, TrackUploadResponse
)
from marcheurs.modules.hikes.sectioning import DRAFT_STATUS, section_hikes
from typing import List, Optional
from datetime import date
from fastapi import HTTPException, UploadFile
import logging

logger = logging.getLogger(__name__)


class HikeService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.tracks = BucketStorage(supabase, settings.tracks_bucket)

    def _fetch_all(self) -> List[HikeResponse]:
        try:
            result = self.supabase.table("hikes")\
                .select("*")\
                .order("date", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching hikes: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        return [HikeResponse(**row) for row in result.data or []]

    def list_sections(self, today: date, privileged: bool = False) -> HikeSections:
        """Member calendar: visible hikes split into upcoming and archived."""
        return section_hikes(self._fetch_all(), today, privileged)

    def list_for_admin(self, search: Optional[str] = None, status: Optional[str] = None) -> List[HikeResponse]:
        hikes = self._fetch_all()
        if status and status != "all":
            hikes = [h for h in hikes if h.status == status]
        if search:
            needle = search.lower()
            hikes = [h for h in hikes if needle in h.title.lower()]
        return hikes

    def get_hike(self, hike_id: str, privileged: bool = False) -> HikeResponse:
        try:
            result = self.supabase.table("hikes")\
                .select("*")\
                .eq("id", hike_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Randonnée introuvable")
        hike = HikeResponse(**result.data[0])
        if hike.status == DRAFT_STATUS and not privileged:
            raise HTTPException(status_code=404, detail="Randonnée introuvable")
        return hike

    def create_hike(self, hike_data: HikeCreate, user_id: str) -> HikeResponse:
        """Create a new hike"""
        insert_data = hike_data.model_dump(mode="json")
        insert_data["created_by"] = user_id
        try:
            result = self.supabase.table("hikes").insert(insert_data).execute()
        except Exception as e:
            logger.error(f"Error saving hike: {e}")
            raise HTTPException(status_code=500, detail="Erreur lors de l'enregistrement")
        if not result.data:
            raise HTTPException(status_code=500, detail="Erreur lors de l'enregistrement")
        logger.info(f"Hike created: {result.data[0].get('id')} ({hike_data.title})")
        return HikeResponse(**result.data[0])

    def update_hike(self, hike_id: str, hike_data: HikeUpdate) -> HikeResponse:
        update_data = hike_data.model_dump(mode="json", exclude_unset=True)
        if not update_data:
            return self.get_hike(hike_id, privileged=True)
        try:
            result = self.supabase.table("hikes")\
                .update(update_data)\
                .eq("id", hike_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error saving hike {hike_id}: {e}")
            raise HTTPException(status_code=500, detail="Erreur lors de l'enregistrement")
        if not result.data:
            raise HTTPException(status_code=404, detail="Randonnée introuvable")
        return HikeResponse(**result.data[0])

    def delete_hike(self, hike_id: str) -> bool:
        try:
            result = self.supabase.table("hikes").delete().eq("id", hike_id).execute()
        except Exception as e:
            logger.error(f"Error deleting hike {hike_id}: {e}")
            raise HTTPException(status_code=500, detail="Erreur lors de la suppression")
        if not result.data:
            raise HTTPException(status_code=404, detail="Randonnée introuvable")
        return True

    async def upload_track(self, hike_id: str, file: UploadFile) -> TrackUploadResponse:
        """Store a GPX trace in the tracks bucket and link its public URL to the hike."""
        self.get_hike(hike_id, privileged=True)
        key = random_object_key(hike_id, file.filename or "trace.gpx")
        content = await file.read()
        try:
            self.tracks.upload_file(content, key, content_type="application/gpx+xml")
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Erreur lors de l'upload de la trace: {e}")

        url = self.tracks.public_url(key)
        try:
            self.supabase.table("hikes").update({"gpx_file": url}).eq("id", hike_id).execute()
        except Exception as e:
            logger.error(f"Track uploaded to {key} but hike {hike_id} not updated: {e}")
            self.tracks.delete_file(key)
            raise HTTPException(status_code=500, detail="Erreur lors de l'enregistrement")
        return TrackUploadResponse(hike_id=hike_id, gpx_file=url, message="Trace GPX enregistrée")
