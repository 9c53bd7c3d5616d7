# -*- coding: utf-8 -*-
"""
backend/app/shared/integrations/mailersend_email_sender.py

Envío de correos de pagos usando MailerSend API.

Autor: CourseHub
Creado: 2026-09-06
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, TYPE_CHECKING

import httpx

from app.shared.integrations.email_templates import render_email

if TYPE_CHECKING:
    from app.shared.config.settings_base import BaseAppSettings

logger = logging.getLogger(__name__)

MAILERSEND_API_URL = "https://api.mailersend.com/v1/email"


def _normalize_base_url(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    u = url.strip()
    return u.rstrip("/") if u else None


class MailerSendEmailSender:
    """Envío de correos usando MailerSend API."""

    def __init__(
        self,
        api_key: str,
        from_email: str,
        from_name: str = "CourseHub",
        timeout: int = 30,
        frontend_url: Optional[str] = None,
        support_email: str = "",
    ):
        if not api_key:
            raise ValueError("MAILERSEND_API_KEY es requerido")
        if not from_email:
            raise ValueError("MAILERSEND_FROM_EMAIL es requerido")

        self.api_key = api_key
        self.from_email = from_email
        self.from_name = from_name
        self.timeout = timeout
        self.frontend_url = _normalize_base_url(frontend_url)
        self.support_email = support_email

    @classmethod
    def from_settings(cls, settings: BaseAppSettings) -> "MailerSendEmailSender":
        """
        Crea instancia desde settings.

        Raises:
            ValueError: si faltan credenciales requeridas
        """
        api_key = ""
        if settings.mailersend_api_key:
            api_key = settings.mailersend_api_key.get_secret_value().strip()

        from_email = (settings.mailersend_from_email or "").strip()
        from_name = (settings.mailersend_from_name or "CourseHub").strip()

        if not api_key:
            raise ValueError("[MailerSend] MAILERSEND_API_KEY es requerido.")
        if not from_email:
            raise ValueError("[MailerSend] MAILERSEND_FROM_EMAIL es requerido.")

        logger.info(
            "[MailerSend] config: from=%s (%s) timeout=%ss",
            from_email,
            from_name,
            settings.email_timeout_sec,
        )
        return cls(
            api_key=api_key,
            from_email=from_email,
            from_name=from_name,
            timeout=settings.email_timeout_sec or 30,
            frontend_url=settings.frontend_url,
            support_email=settings.support_email,
        )

    async def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> str:
        """Envía email via MailerSend API. Retorna message_id."""
        payload = {
            "from": {"email": self.from_email, "name": self.from_name},
            "to": [{"email": to_email}],
            "subject": subject,
            "html": html_body,
            "text": text_body,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        logger.info("[MailerSend] sending: to=%s subject=%s", to_email, subject)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(MAILERSEND_API_URL, json=payload, headers=headers)
            except httpx.TimeoutException as e:
                logger.error("[MailerSend] timeout: to=%s error=%s", to_email, str(e))
                raise RuntimeError(f"MailerSend timeout: {e}") from e
            except httpx.RequestError as e:
                logger.error("[MailerSend] request error: to=%s error=%s", to_email, str(e))
                raise RuntimeError(f"MailerSend request error: {e}") from e

        # MailerSend responde 202 Accepted
        if response.status_code == 202:
            message_id = response.headers.get("X-Message-Id", "accepted")
            logger.info("[MailerSend] sent ok: to=%s message_id=%s", to_email, message_id)
            return message_id

        error_body = response.text
        logger.error(
            "[MailerSend] send failed: to=%s status=%d body=%s",
            to_email,
            response.status_code,
            error_body[:500],
        )
        raise RuntimeError(f"MailerSend API error: {response.status_code} - {error_body[:200]}")

    async def send_payment_confirmation_email(
        self,
        to_email: str,
        *,
        course_id: int,
        course_title: str,
        amount: Decimal,
        currency: str,
        payment_id: int,
    ) -> None:
        html, text = render_email(
            "payment_confirmation_email",
            {
                "course_title": course_title,
                "amount": f"{Decimal(amount):.2f}",
                "currency": currency.upper(),
                "payment_id": payment_id,
                "course_link": f"{self.frontend_url or ''}/courses/{course_id}",
            },
        )
        await self._send_email(to_email, f"Pago confirmado: {course_title}", html, text)

    async def send_refund_email(
        self,
        to_email: str,
        *,
        course_title: str,
        refund_amount: Decimal,
        currency: str,
        payment_id: int,
        full_refund: bool,
    ) -> None:
        access_note = (
            "El acceso al curso ha sido suspendido."
            if full_refund
            else "Su acceso al curso se mantiene."
        )
        html, text = render_email(
            "refund_notification_email",
            {
                "course_title": course_title,
                "refund_amount": f"{Decimal(refund_amount):.2f}",
                "currency": currency.upper(),
                "payment_id": payment_id,
                "access_note": access_note,
                "support_email": self.support_email,
            },
        )
        await self._send_email(to_email, f"Reembolso procesado: {course_title}", html, text)


__all__ = ["MailerSendEmailSender", "MAILERSEND_API_URL"]

# Fin del archivo backend/app/shared/integrations/mailersend_email_sender.py
