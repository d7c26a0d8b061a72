from supabase import Client
from marcheurs.config import settings
from marcheurs.database.storage import BucketStorage, random_object_key
from marcheurs.modules.photos.schemas import (
    PhotoResponse, ModerationPhotoResponse, UploadFailure, UploadReport
)
from marcheurs.modules.profiles.service import format_display_name
from typing import Any, Dict, List, Optional
from fastapi import HTTPException, UploadFile
import logging

logger = logging.getLogger(__name__)


class PhotoService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.storage = BucketStorage(supabase, settings.photos_bucket)
        self.max_batch = settings.max_upload_batch

    def _to_response(self, row: Dict[str, Any]) -> PhotoResponse:
        return PhotoResponse(**row, public_url=self.storage.public_url(row["storage_path"]))

    async def upload_batch(self, hike_id: str, files: List[UploadFile], user_id: str) -> UploadReport:
        """Upload images one after the other; a failed file does not stop the others."""
        images = [f for f in files if (f.content_type or "").startswith("image/")]
        skipped = [f.filename or "" for f in files if f not in images]
        if len(images) > self.max_batch:
            skipped.extend(f.filename or "" for f in images[self.max_batch:])
            images = images[:self.max_batch]

        uploaded, failed = [], []
        for file in images:
            try:
                content = await file.read()
                uploaded.append(self.add_photo(hike_id, user_id, file.filename or "photo", content, file.content_type))
            except Exception as e:
                logger.error(f"Error uploading file {file.filename} for hike {hike_id}: {e}")
                failed.append(UploadFailure(filename=file.filename or "", error=str(e)))

        logger.info(f"Photo batch for hike {hike_id}: {len(uploaded)} uploaded, {len(failed)} failed, {len(skipped)} skipped")
        return UploadReport(uploaded=uploaded, failed=failed, skipped=skipped)

    def add_photo(self, hike_id: str, user_id: Optional[str], filename: str, content: bytes,
                  content_type: Optional[str] = None) -> PhotoResponse:
        """Upload the object, then insert the row that points to it.

        If the row cannot be written the object is removed again so no orphan
        stays in the bucket.
        """
        key = random_object_key(hike_id, filename)
        self.storage.upload_file(content, key, content_type)
        try:
            result = self.supabase.table("photos").insert({
                "hike_id": hike_id,
                "user_id": user_id,
                "storage_path": key,
                "caption": filename,
            }).execute()
            if not result.data:
                raise RuntimeError("photo row was not created")
        except Exception:
            if not self.storage.delete_file(key):
                logger.error(f"Orphaned storage object left behind: {key}")
            raise
        return self._to_response(result.data[0])

    def list_photos(self, hike_id: Optional[str] = None, limit: Optional[int] = None,
                    offset: int = 0) -> List[PhotoResponse]:
        """Gallery: newest first, all photos when no limit is given."""
        try:
            query = self.supabase.table("photos")\
                .select("*")\
                .order("created_at", desc=True)
            if hike_id:
                query = query.eq("hike_id", hike_id)
            if limit is not None:
                query = query.range(offset, offset + limit - 1)
            result = query.execute()
        except Exception as e:
            logger.error(f"Error fetching photos: {e}")
            raise HTTPException(status_code=500, detail=str(e))
        return [self._to_response(row) for row in result.data or []]

    def list_for_moderation(self) -> List[ModerationPhotoResponse]:
        """All photos with their author's name and their hike's title."""
        photos = self.list_photos()
        authors = self._rows_by_id("profiles", {p.user_id for p in photos if p.user_id},
                                   "id, first_name, last_name, display_name, email")
        hikes = self._rows_by_id("hikes", {p.hike_id for p in photos if p.hike_id}, "id, title")
        return [
            ModerationPhotoResponse(
                **photo.model_dump(),
                author_name=format_display_name(authors.get(photo.user_id), "Utilisateur inconnu"),
                hike_title=(hikes.get(photo.hike_id) or {}).get("title"),
            )
            for photo in photos
        ]

    def _rows_by_id(self, table: str, ids: set, columns: str) -> Dict[str, Dict[str, Any]]:
        if not ids:
            return {}
        try:
            result = self.supabase.table(table).select(columns).in_("id", sorted(ids)).execute()
        except Exception as e:
            logger.warning(f"Could not load {table} for moderation list: {e}")
            return {}
        return {row["id"]: row for row in result.data or []}

    def delete_photo(self, photo_id: str) -> bool:
        """Remove the storage object, then the row; a storage failure keeps the row."""
        try:
            result = self.supabase.table("photos")\
                .select("*")\
                .eq("id", photo_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Photo introuvable")
        photo = result.data[0]

        if not self.storage.delete_file(photo["storage_path"]):
            raise HTTPException(status_code=500, detail="Erreur lors de la suppression du fichier image.")

        try:
            self.supabase.table("photos").delete().eq("id", photo_id).execute()
        except Exception as e:
            logger.error(f"Storage object {photo['storage_path']} removed but row {photo_id} kept: {e}")
            raise HTTPException(status_code=500, detail="Erreur lors de la suppression en base de données.")
        return True
