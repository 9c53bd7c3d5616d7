# -*- coding: utf-8 -*-
"""
backend/app/modules/payments/services/reconciliation_service.py

Motor de conciliación pago → inscripción.

Aplica las transiciones de la máquina de estados del pago y sus efectos
sobre la inscripción, siempre dentro de una única transacción:

    created → pending → {succeeded | failed | canceled}
    succeeded → refunded

Cada transición es un compare-and-set sobre el estado actual del pago;
un INVALID_TRANSITION (evento repetido o fuera de orden) se reporta
como no-op exitoso. Las notificaciones se despachan tras el commit.

Autor: CourseHub
Fecha: 2026-09-08
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config.settings_payments import PaymentsSettings, get_payments_settings
from app.modules.courses.models import Course
from app.modules.enrollments.enums import EnrollmentStatus, EnrollmentPaymentStatus
from app.modules.enrollments.repositories import EnrollmentRepository
from app.modules.payments.enums import PaymentStatus, NON_TERMINAL_STATUSES
from app.modules.payments.errors import (
    GatewayUnavailableError,
    InvalidTransitionError,
    NotCancelableError,
    PaymentNotFoundError,
)
from app.modules.payments.facades.webhooks.constants import (
    EVENT_PAYMENT_INTENT_FAILED,
    KIND_COMPLETED,
    KIND_DISPUTE,
    KIND_EXPIRED,
    KIND_FAILED,
    KIND_IGNORED,
    KIND_REFUND,
    KIND_SUCCEEDED,
    PAID_SESSION_STATUSES,
)
from app.modules.payments.facades.webhooks.normalize import NormalizedWebhook
from app.modules.payments.models import Payment
from app.modules.payments.providers.stripe_gateway import RefundResult, from_minor_units
from app.modules.payments.repositories import PaymentRepository
from app.modules.payments.services.notification_service import Notification, PaymentNotifier
from app.modules.payments.services.payment_event_service import PaymentEventService

if TYPE_CHECKING:
    from app.modules.payments.providers.stripe_gateway import StripeGateway

logger = logging.getLogger(__name__)

OUTCOME_OK = "ok"
OUTCOME_NOOP = "noop"
OUTCOME_IGNORED = "ignored"
OUTCOME_DUPLICATE = "already_processed"

SUSPEND_REASON_DISPUTE = "payment_dispute"
SUSPEND_REASON_REFUND = "payment_refunded"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReconciliationService:
    """Único escritor de transiciones de Payment y de inscripciones de pago."""

    def __init__(
        self,
        *,
        payment_repo: Optional[PaymentRepository] = None,
        enrollment_repo: Optional[EnrollmentRepository] = None,
        event_service: Optional[PaymentEventService] = None,
        notifier: Optional[PaymentNotifier] = None,
        settings: Optional[PaymentsSettings] = None,
    ) -> None:
        self.settings = settings or get_payments_settings()
        self.payment_repo = payment_repo or PaymentRepository()
        self.enrollment_repo = enrollment_repo or EnrollmentRepository()
        self.event_service = event_service or PaymentEventService()
        self.notifier = notifier or PaymentNotifier(settings=self.settings)

        self._handlers = {
            KIND_COMPLETED: self._on_checkout_completed,
            KIND_SUCCEEDED: self._on_payment_succeeded,
            KIND_FAILED: self._on_payment_failed,
            KIND_EXPIRED: self._on_session_expired,
            KIND_REFUND: self._on_refund,
            KIND_DISPUTE: self._on_dispute,
        }

    # =================================================================
    # Webhooks
    # =================================================================
    async def handle_event(self, session: AsyncSession, event: NormalizedWebhook) -> Dict[str, Any]:
        """
        Procesa un evento verificado y normalizado.

        Returns:
            dict con status ∈ {ok, noop, ignored, already_processed}.
            Errores inesperados se propagan (el procesador reintentará).
        """
        base = {"event_id": event.event_id, "event_type": event.event_type}

        handler = self._handlers.get(event.kind)
        if event.kind == KIND_IGNORED or handler is None:
            logger.info("Webhook %s (%s) ignored: unhandled type", event.event_id, event.event_type)
            return {**base, "status": OUTCOME_IGNORED, "reason": "unhandled_event_type"}

        try:
            claimed = await self.event_service.claim(session, event)
            if claimed is None:
                await session.commit()
                logger.info("Webhook %s (%s) already processed", event.event_id, event.event_type)
                return {**base, "status": OUTCOME_DUPLICATE}

            notifications: List[Optional[Notification]] = []
            try:
                outcome = await handler(session, event, notifications)
            except InvalidTransitionError as e:
                notifications = []
                logger.info(
                    "Webhook %s (%s) no-op: payment=%s current=%s target=%s",
                    event.event_id,
                    event.event_type,
                    e.payment_id,
                    e.current_status,
                    e.target_status,
                )
                outcome = {
                    "status": OUTCOME_NOOP,
                    "payment_id": e.payment_id,
                    "payment_status": str(e.current_status) if e.current_status else None,
                }

            await self.event_service.complete(
                session,
                claimed,
                outcome=outcome["status"],
                payment_id=outcome.get("payment_id"),
            )
            await session.commit()
        except Exception:
            await session.rollback()
            logger.exception("Webhook %s (%s) processing failed", event.event_id, event.event_type)
            raise

        self.notifier.dispatch(notifications)
        return {**base, **outcome}

    # -----------------------------------------------------------------
    # Resolución del pago
    # -----------------------------------------------------------------
    async def _payment_for_session(self, session: AsyncSession, event: NormalizedWebhook) -> Optional[Payment]:
        if not event.provider_session_id:
            return None
        return await self.payment_repo.find_by_session_id(session, event.provider_session_id)

    async def _payment_for_intent(self, session: AsyncSession, event: NormalizedWebhook) -> Optional[Payment]:
        payment = None
        if event.provider_payment_id:
            payment = await self.payment_repo.find_by_payment_intent_id(session, event.provider_payment_id)
        # El PaymentIntent se conoce localmente solo tras completar la sesión;
        # la clave idempotente de la metadata identifica el intento exacto
        if payment is None and event.metadata_idempotency_key:
            payment = await self.payment_repo.find_by_idempotency_key(session, event.metadata_idempotency_key)
            if payment is not None and event.metadata_user_id and payment.user_id != event.metadata_user_id:
                logger.warning(
                    "Webhook %s: metadata user=%s does not own payment %s",
                    event.event_id,
                    event.metadata_user_id,
                    payment.id,
                )
                return None
        return payment

    @staticmethod
    def _not_found(event: NormalizedWebhook) -> Dict[str, Any]:
        logger.warning(
            "Webhook %s (%s): no local payment (session=%s intent=%s)",
            event.event_id,
            event.event_type,
            event.provider_session_id,
            event.provider_payment_id,
        )
        return {"status": OUTCOME_IGNORED, "reason": "payment_not_found"}

    # -----------------------------------------------------------------
    # Handlers
    # -----------------------------------------------------------------
    async def _on_checkout_completed(
        self,
        session: AsyncSession,
        event: NormalizedWebhook,
        notifications: List[Optional[Notification]],
    ) -> Dict[str, Any]:
        payment = await self._payment_for_session(session, event)
        if payment is None:
            return self._not_found(event)

        if event.session_payment_status in PAID_SESSION_STATUSES:
            return await self._mark_succeeded(session, payment, event, notifications)

        # Método asíncrono (transferencia, OXXO...): esperar async_payment_*
        fields: Dict[str, Any] = {}
        if event.provider_payment_id:
            fields["external_payment_intent_id"] = event.provider_payment_id
        payment = await self.payment_repo.transition(
            session,
            payment.id,
            [PaymentStatus.CREATED],
            PaymentStatus.PENDING,
            fields,
        )
        logger.info("Payment %s pending (session payment_status=%s)", payment.id, event.session_payment_status)
        return {"status": OUTCOME_OK, "payment_id": payment.id, "payment_status": str(payment.status)}

    async def _on_payment_succeeded(
        self,
        session: AsyncSession,
        event: NormalizedWebhook,
        notifications: List[Optional[Notification]],
    ) -> Dict[str, Any]:
        payment = await self._payment_for_session(session, event)
        if payment is None:
            return self._not_found(event)
        return await self._mark_succeeded(session, payment, event, notifications)

    async def _mark_succeeded(
        self,
        session: AsyncSession,
        payment: Payment,
        event: NormalizedWebhook,
        notifications: List[Optional[Notification]],
    ) -> Dict[str, Any]:
        metadata = dict(payment.payment_metadata or {})
        if event.customer_email:
            metadata["customer_email"] = event.customer_email
        if event.amount_cents is not None and event.amount_cents != payment.amount_cents:
            logger.warning(
                "Payment %s amount mismatch: expected=%s reported=%s",
                payment.id,
                payment.amount_cents,
                event.amount_cents,
            )
            metadata["reported_amount_cents"] = event.amount_cents

        fields: Dict[str, Any] = {"paid_at": _utcnow(), "payment_metadata": metadata}
        if event.provider_payment_id:
            fields["external_payment_intent_id"] = event.provider_payment_id

        payment = await self.payment_repo.transition(
            session,
            payment.id,
            NON_TERMINAL_STATUSES,
            PaymentStatus.SUCCEEDED,
            fields,
        )
        enrollment, _ = await self.enrollment_repo.upsert_from_payment(
            session,
            user_id=payment.user_id,
            course_id=payment.course_id,
            payment_id=payment.id,
            enrollment_status=EnrollmentStatus.ACTIVE,
            payment_status=EnrollmentPaymentStatus.PAID,
        )
        logger.info(
            "Payment %s succeeded; enrollment %s active (user=%s course=%s)",
            payment.id,
            enrollment.id,
            payment.user_id,
            payment.course_id,
        )

        course = await session.get(Course, payment.course_id)
        notifications.append(
            self.notifier.payment_confirmed(
                to_email=metadata.get("customer_email"),
                payment_id=payment.id,
                course_id=payment.course_id,
                course_title=course.title if course else f"#{payment.course_id}",
                amount=payment.amount,
                currency=payment.currency,
            )
        )
        return {
            "status": OUTCOME_OK,
            "payment_id": payment.id,
            "payment_status": str(payment.status),
            "enrollment_status": str(enrollment.status),
        }

    async def _on_payment_failed(
        self,
        session: AsyncSession,
        event: NormalizedWebhook,
        notifications: List[Optional[Notification]],
    ) -> Dict[str, Any]:
        if event.event_type == EVENT_PAYMENT_INTENT_FAILED:
            payment = await self._payment_for_intent(session, event)
        else:
            payment = await self._payment_for_session(session, event)
        if payment is None:
            return self._not_found(event)

        fields: Dict[str, Any] = {
            "failed_at": _utcnow(),
            "failure_code": event.failure_code,
            "failure_message": event.failure_reason,
        }
        if event.provider_payment_id:
            fields["external_payment_intent_id"] = event.provider_payment_id

        payment = await self.payment_repo.transition(
            session,
            payment.id,
            NON_TERMINAL_STATUSES,
            PaymentStatus.FAILED,
            fields,
        )
        # Un fallo tardío de este intento no revoca acceso obtenido por otro
        enrollment, changed = await self.enrollment_repo.upsert_from_payment(
            session,
            user_id=payment.user_id,
            course_id=payment.course_id,
            payment_id=payment.id,
            enrollment_status=EnrollmentStatus.SUSPENDED,
            payment_status=EnrollmentPaymentStatus.FAILED,
            preserve_active=True,
        )
        logger.info(
            "Payment %s failed (code=%s); enrollment %s %s",
            payment.id,
            event.failure_code,
            enrollment.id,
            "suspended" if changed else "kept active",
        )
        return {
            "status": OUTCOME_OK,
            "payment_id": payment.id,
            "payment_status": str(payment.status),
            "enrollment_status": str(enrollment.status),
        }

    async def _on_session_expired(
        self,
        session: AsyncSession,
        event: NormalizedWebhook,
        notifications: List[Optional[Notification]],
    ) -> Dict[str, Any]:
        payment = await self._payment_for_session(session, event)
        if payment is None:
            return self._not_found(event)

        payment = await self._cancel(
            session,
            payment,
            from_statuses=NON_TERMINAL_STATUSES,
            canceled_by="processor_expired",
        )
        return {"status": OUTCOME_OK, "payment_id": payment.id, "payment_status": str(payment.status)}

    async def _on_refund(
        self,
        session: AsyncSession,
        event: NormalizedWebhook,
        notifications: List[Optional[Notification]],
    ) -> Dict[str, Any]:
        if event.refund_status != "succeeded":
            logger.info("Webhook %s: refund status=%s, nothing to apply", event.event_id, event.refund_status)
            return {"status": OUTCOME_IGNORED, "reason": "refund_not_succeeded"}

        found = await self._payment_for_intent(session, event)
        if found is None:
            return self._not_found(event)
        payment = await self.payment_repo.get_for_update(session, found.id)

        already = Decimal(payment.refund_amount or 0)
        reported = from_minor_units(event.refund_amount_cents) or Decimal("0")

        if event.refund_is_cumulative:
            amount = reported - already
        elif self._refund_recorded(payment, event.provider_refund_id):
            amount = Decimal("0")
        else:
            amount = reported

        if amount <= 0:
            logger.info("Payment %s: refund %s already recorded", payment.id, event.provider_refund_id)
            return {"status": OUTCOME_NOOP, "payment_id": payment.id, "payment_status": str(payment.status)}

        payment, full = await self._apply_refund_amount(
            session,
            payment,
            refund_id=event.provider_refund_id,
            amount=amount,
            reason=None,
            source="webhook",
            notifications=notifications,
        )
        return {
            "status": OUTCOME_OK,
            "payment_id": payment.id,
            "payment_status": str(payment.status),
            "full_refund": full,
        }

    async def _on_dispute(
        self,
        session: AsyncSession,
        event: NormalizedWebhook,
        notifications: List[Optional[Notification]],
    ) -> Dict[str, Any]:
        payment = await self._payment_for_intent(session, event)
        if payment is None:
            return self._not_found(event)

        enrollment = await self.enrollment_repo.suspend_for_payment(
            session,
            payment.id,
            reason=SUSPEND_REASON_DISPUTE,
        )
        logger.warning(
            "Dispute opened for payment %s (reason=%s); enrollment %s suspended",
            payment.id,
            event.dispute_reason,
            enrollment.id if enrollment else None,
        )
        return {
            "status": OUTCOME_OK,
            "payment_id": payment.id,
            "payment_status": str(payment.status),
            "enrollment_status": str(enrollment.status) if enrollment else None,
        }

    # =================================================================
    # Reembolsos
    # =================================================================
    @staticmethod
    def _refund_recorded(payment: Payment, refund_id: Optional[str]) -> bool:
        if not refund_id:
            return False
        refunds = (payment.payment_metadata or {}).get("refunds", [])
        return any(r.get("refund_id") == refund_id for r in refunds)

    async def _apply_refund_amount(
        self,
        session: AsyncSession,
        payment: Payment,
        *,
        refund_id: Optional[str],
        amount: Decimal,
        reason: Optional[str],
        source: str,
        notifications: List[Optional[Notification]],
    ) -> Tuple[Payment, bool]:
        """
        Acumula un reembolso sobre un pago succeeded.

        Parcial: sigue succeeded. Al alcanzar el monto total: refunded y
        la inscripción se suspende con payment_status=refunded.
        """
        new_total = min(Decimal(payment.refund_amount or 0) + amount, Decimal(payment.amount))
        full = new_total >= Decimal(payment.amount)

        metadata = dict(payment.payment_metadata or {})
        refunds = list(metadata.get("refunds", []))
        refunds.append(
            {
                "refund_id": refund_id,
                "amount": str(amount),
                "reason": reason,
                "source": source,
                "at": _utcnow().isoformat(),
            }
        )
        metadata["refunds"] = refunds

        fields: Dict[str, Any] = {"refund_amount": new_total, "payment_metadata": metadata}
        if full:
            fields["refunded_at"] = _utcnow()
            payment = await self.payment_repo.transition(
                session,
                payment.id,
                [PaymentStatus.SUCCEEDED],
                PaymentStatus.REFUNDED,
                fields,
            )
            await self.enrollment_repo.suspend_for_payment(
                session,
                payment.id,
                reason=SUSPEND_REASON_REFUND,
                payment_status=EnrollmentPaymentStatus.REFUNDED,
            )
        else:
            payment = await self.payment_repo.transition(
                session,
                payment.id,
                [PaymentStatus.SUCCEEDED],
                PaymentStatus.SUCCEEDED,
                fields,
            )

        logger.info(
            "Payment %s refund %s amount=%s total=%s full=%s source=%s",
            payment.id,
            refund_id,
            amount,
            new_total,
            full,
            source,
        )

        course = await session.get(Course, payment.course_id)
        notifications.append(
            self.notifier.refund_processed(
                to_email=metadata.get("customer_email"),
                payment_id=payment.id,
                course_title=course.title if course else f"#{payment.course_id}",
                refund_amount=amount,
                currency=payment.currency,
                full_refund=full,
            )
        )
        return payment, full

    async def apply_refund(
        self,
        session: AsyncSession,
        payment_id: int,
        refund: RefundResult,
        *,
        reason: Optional[str] = None,
    ) -> Tuple[Payment, bool]:
        """
        Registra un reembolso ya ejecutado en el procesador (ruta admin).

        Si el webhook del mismo refund ya lo registró, no se vuelve a
        acumular y se devuelve el estado actual del pago.

        Raises:
            PaymentNotFoundError, InvalidTransitionError
        """
        notifications: List[Optional[Notification]] = []
        try:
            payment = await self.payment_repo.get_for_update(session, payment_id)
            if payment is None:
                raise PaymentNotFoundError(payment_id=payment_id)
            if self._refund_recorded(payment, refund.refund_id):
                await session.commit()
                logger.info("Payment %s: refund %s already recorded", payment.id, refund.refund_id)
                return payment, payment.status == PaymentStatus.REFUNDED
            payment, full = await self._apply_refund_amount(
                session,
                payment,
                refund_id=refund.refund_id,
                amount=refund.amount,
                reason=reason,
                source="admin",
                notifications=notifications,
            )
            await session.commit()
        except Exception:
            await session.rollback()
            raise

        self.notifier.dispatch(notifications)
        return payment, full

    # =================================================================
    # Cancelación y expiración
    # =================================================================
    async def _cancel(
        self,
        session: AsyncSession,
        payment: Payment,
        *,
        from_statuses,
        canceled_by: str,
    ) -> Payment:
        metadata = dict(payment.payment_metadata or {})
        metadata["canceled_by"] = canceled_by
        payment = await self.payment_repo.transition(
            session,
            payment.id,
            from_statuses,
            PaymentStatus.CANCELED,
            {"canceled_at": _utcnow(), "payment_metadata": metadata},
        )
        logger.info("Payment %s canceled by %s", payment.id, canceled_by)
        return payment

    async def cancel_pending(self, session: AsyncSession, payment: Payment, *, canceled_by: str = "user") -> Payment:
        """
        Cancelación cooperativa: solo created → canceled.

        Raises:
            InvalidTransitionError: si el pago ya salió de created.
        """
        try:
            payment = await self._cancel(
                session,
                payment,
                from_statuses=[PaymentStatus.CREATED],
                canceled_by=canceled_by,
            )
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        return payment

    async def expire_stale_payments(
        self,
        session: AsyncSession,
        *,
        gateway: Optional["StripeGateway"] = None,
        older_than_minutes: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> int:
        """
        Cancela pagos 'created' abandonados. Devuelve cuántos se cancelaron.

        Si se recibe gateway, primero expira la Checkout Session en el
        procesador (fuera de cualquier transacción); si el procesador la
        rechaza (p. ej. ya fue pagada) el pago local no se toca y el
        webhook correspondiente lo conciliará.
        """
        minutes = older_than_minutes or self.settings.payment_session_timeout_minutes
        cutoff = (now or _utcnow()) - timedelta(minutes=minutes)

        stale = await self.payment_repo.list_stale_created(session, cutoff)
        candidates = [(p.id, p.external_session_id) for p in stale]
        await session.commit()

        expired = 0
        for payment_id, session_id in candidates:
            if gateway is not None and session_id:
                try:
                    await gateway.expire_session(session_id)
                except (GatewayUnavailableError, NotCancelableError):
                    logger.warning("Could not expire session %s for payment %s; skipping", session_id, payment_id)
                    continue

            payment = await self.payment_repo.get(session, payment_id)
            if payment is None:
                continue
            try:
                await self._cancel(
                    session,
                    payment,
                    from_statuses=[PaymentStatus.CREATED],
                    canceled_by="expired",
                )
                await session.commit()
                expired += 1
            except InvalidTransitionError:
                # Un webhook lo movió entre la lectura y el UPDATE
                await session.rollback()
                logger.debug("Payment %s left 'created' before expiry", payment_id)

        if expired:
            logger.info("Expired %d stale payments older than %s", expired, cutoff.isoformat())
        return expired


__all__ = [
    "ReconciliationService",
    "OUTCOME_OK",
    "OUTCOME_NOOP",
    "OUTCOME_IGNORED",
    "OUTCOME_DUPLICATE",
    "SUSPEND_REASON_DISPUTE",
    "SUSPEND_REASON_REFUND",
]

# Fin del archivo backend/app/modules/payments/services/reconciliation_service.py
