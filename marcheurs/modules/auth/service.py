import hashlib
import logging
import time
from supabase import Client
from marcheurs.modules.auth.schemas import MagicLinkRequest, MagicLinkResponse, SessionUser
from marcheurs.config.settings import settings
from fastapi import HTTPException
from typing import Dict

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (a page load fires several requests with the same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def send_magic_link(self, request: MagicLinkRequest) -> MagicLinkResponse:
        """Ask Supabase Auth to email a sign-in link; the account is created on first use."""
        try:
            self.supabase.auth.sign_in_with_otp({
                "email": request.email,
                "options": {
                    "email_redirect_to": request.redirect_to or settings.public_site_url,
                }
            })
        except Exception as e:
            logger.error(f"Magic link request failed for {request.email}: {e}")
            raise HTTPException(status_code=502, detail="Impossible d'envoyer le lien de connexion.")

        return MagicLinkResponse(
            email=request.email,
            message="Un lien de connexion vous a été envoyé par email."
        )

    def get_current_user(self, token: str) -> SessionUser:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            auth_user = user_response.user
            user = SessionUser(
                id=auth_user.id,
                email=auth_user.email,
                user_metadata=auth_user.user_metadata or {},
                app_metadata=auth_user.app_metadata or {},
            )
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user, now + _AUTH_CACHE_TTL_SEC)
            return user
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            # Supabase Auth tokens are stateless JWTs, so logout is mainly client-side
            self.supabase.auth.sign_out()
            return True
        except Exception:
            return False


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()
