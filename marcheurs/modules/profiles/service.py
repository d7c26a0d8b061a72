import re
import logging
from supabase import Client
from marcheurs.modules.profiles.schemas import (
    Profile, ProfileCompletion, DashboardStats
)
from marcheurs.config.roles_config import PRIVILEGED_ROLES
from typing import Any, Dict, List, Mapping, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

_PHONE_SEPARATORS = re.compile(r"[\s.-]")


def format_display_name(row: Optional[Mapping[str, Any]], fallback: Optional[str] = None) -> Optional[str]:
    """'First Last' when either is set, else display_name, else email."""
    if not row:
        return fallback
    full_name = " ".join(part for part in (row.get("first_name"), row.get("last_name")) if part)
    return full_name or row.get("display_name") or row.get("email") or fallback


def validate_completion(data: ProfileCompletion) -> List[str]:
    """Return every problem with the completion form (empty list when valid)."""
    errors = []
    if not re.fullmatch(r"\d{5}", data.postal_code or ""):
        errors.append("Le code postal doit contenir exactement 5 chiffres.")
    if re.search(r"\d", data.city or ""):
        errors.append("La ville ne doit pas contenir de chiffres.")
    mobile = _PHONE_SEPARATORS.sub("", data.phone_mobile or "")
    if not re.fullmatch(r"\d{10}", mobile):
        errors.append("Le numéro de portable doit contenir 10 chiffres.")
    if data.phone_fixed:
        fixed = _PHONE_SEPARATORS.sub("", data.phone_fixed)
        if not re.fullmatch(r"\d{10}", fixed):
            errors.append("Le numéro fixe doit contenir 10 chiffres.")
    return errors


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, user_id: str) -> Profile:
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Profil introuvable")
        return Profile(**result.data[0])

    def complete_profile(self, user_id: str, data: ProfileCompletion) -> Profile:
        """Self-service completion; flips is_profile_completed which notifies the admins."""
        errors = validate_completion(data)
        if errors:
            raise HTTPException(status_code=400, detail=errors)

        update_data = data.model_dump()
        update_data["is_profile_completed"] = True
        return self._update(user_id, update_data, "Erreur lors de la mise à jour du profil.")

    def list_profiles(self, filter: str = "all", search: Optional[str] = None) -> List[Profile]:
        """All profiles for the back-office, newest first, filtered like the admin screen."""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        profiles = [Profile(**row) for row in result.data or []]
        if filter == "pending":
            profiles = [p for p in profiles if not p.approved]
        elif filter == "staff":
            profiles = [p for p in profiles if p.role in PRIVILEGED_ROLES]
        if search:
            needle = search.lower()
            profiles = [p for p in profiles if needle in _searchable(p)]
        return profiles

    def set_approval(self, user_id: str, approved: bool) -> Profile:
        logger.info(f"Setting approved={approved} for profile {user_id}")
        return self._update(user_id, {"approved": approved}, "Erreur lors de la validation du compte.")

    def set_role(self, user_id: str, role: str) -> Profile:
        logger.info(f"Setting role={role} for profile {user_id}")
        return self._update(user_id, {"role": role}, "Erreur lors du changement de rôle.")

    def get_dashboard_stats(self) -> DashboardStats:
        try:
            members = self._count("profiles")
            pending = self._count("profiles", approved=False)
            hikes = self._count("hikes")
            photos = self._count("photos")
            recent = self.supabase.table("profiles")\
                .select("*")\
                .order("created_at", desc=True)\
                .limit(5)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching admin stats: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        return DashboardStats(
            members=members,
            pending_members=pending,
            hikes=hikes,
            photos=photos,
            recent_profiles=[Profile(**row) for row in recent.data or []],
        )

    def _count(self, table: str, **filters: Any) -> int:
        query = self.supabase.table(table).select("id", count="exact")
        for column, value in filters.items():
            query = query.eq(column, value)
        return query.execute().count or 0

    def _update(self, user_id: str, update_data: Dict[str, Any], error_detail: str) -> Profile:
        try:
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating profile {user_id}: {e}")
            raise HTTPException(status_code=500, detail=error_detail)
        if not result.data:
            raise HTTPException(status_code=404, detail="Profil introuvable")
        return Profile(**result.data[0])


def _searchable(profile: Profile) -> str:
    parts = (profile.first_name, profile.last_name, profile.display_name, profile.email)
    return " ".join(p for p in parts if p).lower()
