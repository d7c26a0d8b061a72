"""Subject and HTML body for each notification template."""

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from markupsafe import Markup

from marcheurs.config import settings
from marcheurs.core.email_renderer import render_notice
from marcheurs.modules.notifications.decisions import Decision
from marcheurs.modules.profiles.service import format_display_name

DEFAULT_CREATOR = "L'équipe"
DEFAULT_AUTHOR = "Un membre"
DEFAULT_HIKE_TITLE = "une randonnée"


@dataclass(frozen=True)
class Lookups:
    """Names resolved from other rows; placeholders when a lookup found nothing."""
    creator_name: str = DEFAULT_CREATOR
    author_name: str = DEFAULT_AUTHOR
    hike_title: str = DEFAULT_HIKE_TITLE


def _site(path: str = "") -> str:
    return f"{settings.public_site_url}{path}"


def _profile_completed(decision: Decision, lookups: Lookups) -> Tuple[str, str]:
    record = decision.row
    name = format_display_name(record)
    html = render_notice(
        "Nouvelle Adhésion à Valider",
        Markup("Le profil de <strong>{}</strong> a complété son profil.<br>Il attend votre validation.").format(name),
        details=[
            ("Email", record.get("email")),
            ("Nom", f"{record.get('last_name') or '-'} {record.get('first_name') or '-'}"),
            ("Ville", record.get("city") or "-"),
            ("Mobile", record.get("phone_mobile") or "-"),
        ],
        button_text="Gérer les Utilisateurs",
        button_url=_site("/admin/users"),
    )
    return f"✅ Profil complété : {name}", html


def _account_approved(decision: Decision, lookups: Lookups) -> Tuple[str, str]:
    name = format_display_name(decision.row)
    html = render_notice(
        f"Félicitations {name} !",
        Markup(
            "Votre compte a été validé par un administrateur.<br>"
            "Vous pouvez dès maintenant accéder à l'espace membre et vous inscrire aux prochaines randonnées."
        ),
        button_text="Accéder au site",
    )
    return "🎉 Compte validé : Bienvenue chez les Joyeux Marcheurs !", html


def _hike_deleted(decision: Decision, lookups: Lookups) -> Tuple[str, str]:
    old = decision.row
    title = old.get("title") or "Titre inconnu"
    html = render_notice(
        "Randonnée Supprimée",
        Markup('La randonnée "<strong>{}</strong>" a été <strong>définitivement supprimée</strong> de la base de données.').format(title),
        details=[
            ("Titre", title),
            ("Date", old.get("date") or "-"),
            ("Statut", f"{old.get('status')} (Avant suppression)"),
        ],
    )
    return f"🗑️ Rando SUPPRIMÉE : {title}", html


def _hike_details(decision: Decision, is_new: bool = False):
    record = decision.row
    return [
        ("Titre", record.get("title")),
        ("Statut", f"{record.get('status')}{' (NOUVEAU)' if is_new else ''}"),
        ("Date", record.get("date") or "Non définie"),
        ("Lieu", record.get("location") or "-"),
        ("Action", decision.event_type),
    ]


def _hike_published(decision: Decision, lookups: Lookups) -> Tuple[str, str]:
    title = decision.row.get("title")
    html = render_notice(
        "Nouvelle Rando à venir !",
        Markup(
            'Une nouvelle randonnée "<strong>{}</strong>" a été publiée par <strong>{}</strong>.<br>'
            "Connectez-vous pour voir les détails et vous inscrire."
        ).format(title, lookups.creator_name),
        details=_hike_details(decision, is_new=True),
    )
    return f"🥾 Nouvelle Rando : {title}", html


def _hike_unpublished(decision: Decision, lookups: Lookups) -> Tuple[str, str]:
    title = decision.row.get("title")
    html = render_notice(
        "Rando Remise en Brouillon",
        Markup(
            'La randonnée "<strong>{}</strong>" a été retirée de la publication (remise en brouillon) par <strong>{}</strong>.'
        ).format(title, lookups.creator_name),
        details=_hike_details(decision),
    )
    return f"⚠️ Rando Dépubliée : {title}", html


def _hike_updated(decision: Decision, lookups: Lookups) -> Tuple[str, str]:
    title = decision.row.get("title")
    html = render_notice(
        "Randonnée Mise à Jour",
        Markup('La randonnée "<strong>{}</strong>" (déjà publiée) a été modifiée par <strong>{}</strong>.').format(
            title, lookups.creator_name
        ),
        details=_hike_details(decision),
    )
    return f"✏️ Mise à jour Rando (Publiée) : {title}", html


def _hike_draft_updated(decision: Decision, lookups: Lookups) -> Tuple[str, str]:
    title = decision.row.get("title")
    html = render_notice(
        "Randonnée Modifiée (Brouillon)",
        Markup('<strong>{}</strong> a modifié le brouillon : "<strong>{}</strong>".').format(lookups.creator_name, title),
        details=_hike_details(decision),
    )
    return f"📝 Mise à jour Rando (Brouillon) : {title}", html


def _photo_added(decision: Decision, lookups: Lookups) -> Tuple[str, str]:
    html = render_notice(
        "Nouvelle Photo",
        Markup('<strong>{}</strong> a ajouté une photo à la randonnée "<strong>{}</strong>".').format(
            lookups.author_name, lookups.hike_title
        ),
        details=[("Auteur", lookups.author_name), ("Rando", lookups.hike_title)],
        button_text="Modérer dans l'admin",
        button_url=_site("/admin/photos"),
    )
    return "📸 Nouvelle Photo ajoutée", html


def _photo_deleted(decision: Decision, lookups: Lookups) -> Tuple[str, str]:
    html = render_notice(
        "Photo Supprimée",
        Markup('Une photo de <strong>{}</strong> sur la randonnée "<strong>{}</strong>" a été supprimée.').format(
            lookups.author_name, lookups.hike_title
        ),
        details=[("Auteur", lookups.author_name), ("Rando", lookups.hike_title)],
    )
    return "🗑️ Photo supprimée", html


TEMPLATES: Dict[str, Callable[[Decision, Lookups], Tuple[str, str]]] = {
    "profile_completed": _profile_completed,
    "account_approved": _account_approved,
    "hike_deleted": _hike_deleted,
    "hike_published": _hike_published,
    "hike_unpublished": _hike_unpublished,
    "hike_updated": _hike_updated,
    "hike_draft_updated": _hike_draft_updated,
    "photo_added": _photo_added,
    "photo_deleted": _photo_deleted,
}


def build_email(decision: Decision, lookups: Lookups) -> Tuple[str, str]:
    """(subject, html) for a decision."""
    return TEMPLATES[decision.template](decision, lookups)
