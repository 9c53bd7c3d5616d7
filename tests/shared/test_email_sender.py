# backend/tests/shared/test_email_sender.py
# -*- coding: utf-8 -*-
"""
Selección de email sender y envío vía MailerSend (transporte simulado).
"""

import json
from decimal import Decimal

import httpx
import pytest
from pydantic import SecretStr

from app.shared.config import get_settings
from app.shared.integrations.email_sender import EmailSender, StubEmailSender
from app.shared.integrations.email_templates import render_email
from app.shared.integrations.mailersend_email_sender import MAILERSEND_API_URL, MailerSendEmailSender


@pytest.fixture
def api_settings():
    return get_settings().model_copy(
        update={
            "email_mode": "api",
            "mailersend_api_key": SecretStr("ms-key"),
            "mailersend_from_email": "no-reply@coursehub.dev",
            "frontend_url": "https://app.coursehub.test/",
        }
    )


@pytest.fixture
def mailersend_requests(monkeypatch):
    requests = []
    status = {"code": 202}

    def _handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status["code"], headers={"X-Message-Id": "msg_1"}, text="")

    real_client = httpx.AsyncClient

    def _client(**kwargs):
        return real_client(transport=httpx.MockTransport(_handler), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", _client)
    return requests, status


def test_console_mode_uses_stub():
    settings = get_settings().model_copy(update={"email_mode": "console"})
    assert isinstance(EmailSender.from_settings(settings), StubEmailSender)


def test_api_mode_requires_credentials():
    settings = get_settings().model_copy(update={"email_mode": "api", "mailersend_api_key": None})
    with pytest.raises(ValueError):
        EmailSender.from_settings(settings)


@pytest.mark.asyncio
async def test_payment_confirmation_via_mailersend(api_settings, mailersend_requests):
    requests, _ = mailersend_requests
    sender = EmailSender.from_settings(api_settings)
    assert isinstance(sender, MailerSendEmailSender)

    await sender.send_payment_confirmation_email(
        "ana@example.com",
        course_id=7,
        course_title="Python para análisis de datos",
        amount=Decimal("99.99"),
        currency="usd",
        payment_id=15,
    )

    request = requests[0]
    assert str(request.url) == MAILERSEND_API_URL
    assert request.headers["Authorization"] == "Bearer ms-key"
    body = json.loads(request.content)
    assert body["to"] == [{"email": "ana@example.com"}]
    assert body["subject"] == "Pago confirmado: Python para análisis de datos"
    assert "99.99 USD" in body["text"]
    assert "https://app.coursehub.test/courses/7" in body["text"]


@pytest.mark.asyncio
async def test_mailersend_error_raises(api_settings, mailersend_requests):
    _, status = mailersend_requests
    status["code"] = 422
    sender = MailerSendEmailSender.from_settings(api_settings)

    with pytest.raises(RuntimeError):
        await sender.send_refund_email(
            "ana@example.com",
            course_title="Curso",
            refund_amount=Decimal("10"),
            currency="USD",
            payment_id=1,
            full_refund=False,
        )


def test_refund_fallback_template_mentions_access():
    html, text = render_email(
        "refund_notification_email",
        {
            "course_title": "Curso",
            "refund_amount": "99.99",
            "currency": "USD",
            "payment_id": 3,
            "access_note": "El acceso al curso ha sido suspendido.",
            "support_email": "soporte@coursehub.dev",
        },
    )

    assert "99.99 USD" in text
    assert "suspendido" in text
    assert html.startswith("<pre>")
