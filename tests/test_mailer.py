import json

import httpx
import pytest

from marcheurs.core import mailer as mailer_module
from marcheurs.core.mailer import BrevoMailer, EmailDeliveryError

REAL_CLIENT = httpx.Client


def use_transport(monkeypatch, handler):
    monkeypatch.setattr(
        mailer_module.httpx, "Client",
        lambda **kwargs: REAL_CLIENT(transport=httpx.MockTransport(handler), **kwargs),
    )


def test_brevo_payload(monkeypatch):
    seen = {}

    def handler(request):
        seen["headers"] = request.headers
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"messageId": "<abc@brevo>"})

    use_transport(monkeypatch, handler)
    mailer = BrevoMailer(api_key="key", sender_email="club@example.org", sender_name="Les Joyeux Marcheurs")

    answer = mailer.send(["club@example.org"], "Sujet", "<p>hi</p>", bcc=["a@example.org", "b@example.org"])

    assert answer == {"messageId": "<abc@brevo>"}
    assert seen["headers"]["api-key"] == "key"
    assert seen["body"] == {
        "sender": {"name": "Les Joyeux Marcheurs", "email": "club@example.org"},
        "to": [{"email": "club@example.org"}],
        "bcc": [{"email": "a@example.org"}, {"email": "b@example.org"}],
        "subject": "Sujet",
        "htmlContent": "<p>hi</p>",
    }


def test_brevo_error_keeps_provider_body(monkeypatch):
    use_transport(monkeypatch, lambda request: httpx.Response(401, json={"code": "unauthorized"}))
    mailer = BrevoMailer(api_key="bad", sender_email="club@example.org")

    with pytest.raises(EmailDeliveryError) as exc:
        mailer.send(["x@example.org"], "Sujet", "<p>hi</p>")

    assert exc.value.status_code == 401
    assert exc.value.body == {"code": "unauthorized"}


def test_mailer_requires_key():
    with pytest.raises(ValueError):
        BrevoMailer(api_key="", sender_email="club@example.org")
