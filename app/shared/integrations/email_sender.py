# -*- coding: utf-8 -*-
"""
backend/app/shared/integrations/email_sender.py

Factory de envío de correos de pagos.
Modos:
- console: stub que solo loguea (desarrollo/tests)
- api: envío via MailerSend

Autor: CourseHub
Actualizado: 2026-09-06
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from app.shared.config.settings_base import BaseAppSettings

logger = logging.getLogger(__name__)


class IPaymentEmailSender(Protocol):
    """Protocolo para implementaciones de email sender de pagos."""
    async def send_payment_confirmation_email(
        self, to_email: str, *, course_id: int, course_title: str, amount: Decimal, currency: str, payment_id: int
    ) -> None: ...
    async def send_refund_email(
        self, to_email: str, *, course_title: str, refund_amount: Decimal, currency: str, payment_id: int, full_refund: bool
    ) -> None: ...


class StubEmailSender:
    """No envía correos; solo hace logging (modo console)."""

    async def send_payment_confirmation_email(
        self, to_email: str, *, course_id: int, course_title: str, amount: Decimal, currency: str, payment_id: int
    ) -> None:
        logger.info(
            "[CONSOLE EMAIL] Confirmación de pago → %s | payment=%s course=%s amount=%s %s",
            to_email, payment_id, course_id, amount, currency,
        )

    async def send_refund_email(
        self, to_email: str, *, course_title: str, refund_amount: Decimal, currency: str, payment_id: int, full_refund: bool
    ) -> None:
        logger.info(
            "[CONSOLE EMAIL] Reembolso → %s | payment=%s amount=%s %s full=%s",
            to_email, payment_id, refund_amount, currency, full_refund,
        )


class EmailSender:
    """
    Selección de email sender según settings.

    - Desarrollo: EMAIL_MODE=console
    - MailerSend: EMAIL_MODE=api + MAILERSEND_API_KEY + MAILERSEND_FROM_EMAIL
    """

    @staticmethod
    def from_settings(settings: BaseAppSettings) -> IPaymentEmailSender:
        mode = (settings.email_mode or "console").strip().lower()
        logger.info("[EmailSender] mode=%r", mode)

        if mode == "api":
            from app.shared.integrations.mailersend_email_sender import MailerSendEmailSender
            logger.info("[EmailSender] Usando MailerSendEmailSender")
            return MailerSendEmailSender.from_settings(settings)

        if mode in ("console", "stub", "local", ""):
            return StubEmailSender()

        if settings.is_prod:
            raise ValueError(
                f"EMAIL_MODE '{mode}' no reconocido. Configure EMAIL_MODE=console|api"
            )

        logger.warning("[EmailSender] EMAIL_MODE=%r no reconocido, usando console (solo dev)", mode)
        return StubEmailSender()


def get_email_sender() -> IPaymentEmailSender:
    from app.shared.config.config_loader import get_settings
    return EmailSender.from_settings(get_settings())


__all__ = [
    "IPaymentEmailSender",
    "StubEmailSender",
    "EmailSender",
    "get_email_sender",
]

# Fin del archivo backend/app/shared/integrations/email_sender.py
