from marcheurs.config import settings
from marcheurs.core.email_renderer import render_auth_email
from marcheurs.core.mailer import BrevoMailer, EmailDeliveryError
from marcheurs.modules.auth_email.schemas import AuthEmailHook
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlencode
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

DEFAULT_ACTION = "magiclink"
MAX_CODE_LENGTH = 8


@dataclass(frozen=True)
class AuthCopy:
    subject: str
    title: str
    message: str
    button_text: str


_MAGIC_LINK = AuthCopy(
    subject="Votre lien de connexion ✨",
    title="Connexion rapide",
    message="Vous avez demandé à vous connecter sans mot de passe. "
            "Cliquez sur le bouton pour accéder directement à l'espace membre.",
    button_text="Me Connecter",
)

AUTH_COPY: Dict[str, AuthCopy] = {
    "magiclink": _MAGIC_LINK,
    "magic_link": _MAGIC_LINK,
    "signup": AuthCopy(
        subject="Confirmez votre inscription 🥾",
        title="Bienvenue chez les Joyeux Marcheurs !",
        message="Merci de vous être inscrit. Pour valider votre compte et rejoindre l'aventure, "
                "veuillez confirmer votre adresse email en cliquant ci-dessous.",
        button_text="Confirmer mon inscription",
    ),
    "recovery": AuthCopy(
        subject="Réinitialisation de mot de passe 🔒",
        title="Mot de passe oublié ?",
        message="Une demande de réinitialisation de mot de passe a été effectuée pour votre compte. "
                "Si c'est bien vous, cliquez ci-dessous pour créer un nouveau mot de passe.",
        button_text="Réinitialiser le mot de passe",
    ),
    "email_change": AuthCopy(
        subject="Confirmation de changement d'email 📧",
        title="Changement d'adresse email",
        message="Vous avez demandé à changer votre adresse email. "
                "Veuillez confirmer ce changement en cliquant ci-dessous.",
        button_text="Confirmer le changement",
    ),
    "invite": AuthCopy(
        subject="Invitation à rejoindre les Joyeux Marcheurs 👋",
        title="Vous êtes invité !",
        message="Un administrateur vous a invité à rejoindre l'espace membre des Joyeux Marcheurs. "
                "Créez votre compte en cliquant ci-dessous.",
        button_text="Accepter l'invitation",
    ),
}


def copy_for(action: Optional[str]) -> AuthCopy:
    """Wording for an auth action; unknown actions get the magic link wording."""
    return AUTH_COPY.get(action or DEFAULT_ACTION, _MAGIC_LINK)


def build_confirmation_url(hook: AuthEmailHook) -> str:
    data = hook.email_data
    params = urlencode({
        "token": data.token_hash or "",
        "type": data.email_action_type or DEFAULT_ACTION,
        "redirect_to": data.redirect_to or settings.public_site_url,
    })
    return f"{(settings.supabase_url or '').rstrip('/')}/auth/v1/verify?{params}"


def verification_code(token: Optional[str]) -> Optional[str]:
    """Short tokens are one-time codes the user can type; long ones are not shown."""
    if token and len(token) <= MAX_CODE_LENGTH:
        return token
    return None


class AuthEmailService:
    def __init__(self, mailer: Optional[BrevoMailer]):
        self.mailer = mailer

    def send(self, hook: AuthEmailHook) -> Dict[str, Any]:
        if self.mailer is None:
            raise HTTPException(status_code=500, detail="Server Configuration Error")

        copy = copy_for(hook.email_data.email_action_type)
        html = render_auth_email(
            copy.title,
            copy.message,
            copy.button_text,
            build_confirmation_url(hook),
            code=verification_code(hook.email_data.token),
        )
        try:
            response = self.mailer.send([hook.user.email], copy.subject, html)
        except EmailDeliveryError as e:
            raise HTTPException(status_code=400, detail={"error": str(e), "provider": e.body})
        logger.info(f"Auth email ({hook.email_data.email_action_type or DEFAULT_ACTION}) sent to {hook.user.email}")
        return response
