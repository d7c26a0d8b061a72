"""Club-branded HTML emails rendered from marcheurs/templates/emails."""

import time
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Sequence, Tuple

from jinja2 import Environment, FileSystemLoader, select_autoescape

from marcheurs.config import settings

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates" / "emails"

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(value: int) -> str:
    digits = ""
    while value:
        value, rem = divmod(value, 36)
        digits = _BASE36[rem] + digits
    return digits or "0"


def _base_context(title: str) -> dict:
    return {
        "title": title,
        "club_name": settings.sender_name,
        "site_url": settings.public_site_url,
        "year": datetime.now().year,
        "message_id": _base36(int(time.time() * 1000)),
    }


def render_notice(title: str, message: Any, details: Sequence[Tuple[str, Any]] = (),
                  button_text: str = "Voir sur le site", button_url: Optional[str] = None) -> str:
    """Notice email: a message, an optional label/value box and one button.

    ``message`` may be a markupsafe.Markup carrying <strong> emphasis; plain
    strings are escaped.
    """
    context = _base_context(title)
    context.update(
        message=message,
        details=list(details),
        button_text=button_text,
        button_url=button_url or settings.public_site_url,
    )
    return _env.get_template("notice.html").render(**context)


def render_auth_email(title: str, message: str, button_text: str, confirmation_url: str,
                      code: Optional[str] = None) -> str:
    context = _base_context(title)
    context.update(
        message=message,
        button_text=button_text,
        confirmation_url=confirmation_url,
        code=code,
    )
    return _env.get_template("auth.html").render(**context)
