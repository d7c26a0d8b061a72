from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for webhook lookups and admin operations

    # Transactional email (Brevo)
    brevo_api_key: Optional[str] = None
    brevo_api_url: str = "https://api.brevo.com/v3/smtp/email"
    sender_name: str = "Les Joyeux Marcheurs"
    sender_email: Optional[str] = None  # falls back to admin_email
    admin_email: Optional[str] = None

    # Site
    site_url: str = "http://localhost:5173"
    club_timezone: str = "Europe/Paris"

    # Storage
    photos_bucket: str = "photos"
    tracks_bucket: str = "tracks"
    max_upload_batch: int = 10

    # Database webhooks (POST /api/v1/webhooks/notify)
    webhook_secret: Optional[str] = None

    # App
    app_name: str = "marcheurs-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    magic_link_rate_limit: str = "5/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def public_site_url(self) -> str:
        return self.site_url.strip().rstrip("/")

    @property
    def effective_sender_email(self) -> Optional[str]:
        sender = (self.sender_email or "").strip()
        return sender or (self.admin_email or "").strip() or None

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
