# -*- coding: utf-8 -*-
"""
backend/app/shared/integrations/email_templates.py

Carga y renderizado de correos transaccionales de pagos.
Convención: templates opcionales en templates/emails/ con nombres
*_email.(html|txt); si no existen se usa el texto de fallback.

Autor: CourseHub
Fecha: 2026-09-06
"""

import logging
from pathlib import Path
from typing import Optional, Tuple, Dict, Any

logger = logging.getLogger(__name__)

EMAILS_DIR = Path(__file__).resolve().parent.parent / "templates" / "emails"


def load_template(template_name: str) -> Optional[str]:
    path = EMAILS_DIR / template_name
    if not path.exists():
        logger.debug("[EmailTemplates] not found: %s", template_name)
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("[EmailTemplates] error reading %s: %s", template_name, e)
        return None


def render_template(raw: str, context: Dict[str, Any]) -> str:
    """Reemplaza placeholders {{ variable }} y {{variable}}."""
    result = raw
    for key, value in context.items():
        result = result.replace(f"{{{{ {key} }}}}", str(value))
        result = result.replace(f"{{{{{key}}}}}", str(value))
    return result


FALLBACK_PAYMENT_CONFIRMATION_TEXT = """Hola,

Su pago de {amount} {currency} por el curso "{course_title}" fue confirmado.
Ya puede acceder al contenido en:
{course_link}

Referencia de pago: {payment_id}

Atentamente,
El equipo de CourseHub
"""

FALLBACK_REFUND_NOTIFICATION_TEXT = """Hola,

Procesamos un reembolso de {refund_amount} {currency} para el curso "{course_title}".
{access_note}

Referencia de pago: {payment_id}
Si tiene dudas escriba a {support_email}.

Atentamente,
El equipo de CourseHub
"""

_FALLBACKS = {
    "payment_confirmation_email": FALLBACK_PAYMENT_CONFIRMATION_TEXT,
    "refund_notification_email": FALLBACK_REFUND_NOTIFICATION_TEXT,
}


def render_email(template_base: str, context: Dict[str, Any]) -> Tuple[str, str]:
    """
    Renderiza (html, text) para el correo indicado.

    Usa templates/emails/<template_base>.html|txt si existen; en su
    defecto, el texto de fallback envuelto en <pre>.
    """
    html_raw = load_template(f"{template_base}.html")
    txt_raw = load_template(f"{template_base}.txt")

    if txt_raw is not None:
        text = render_template(txt_raw, context)
    else:
        fallback = _FALLBACKS.get(template_base, "")
        try:
            text = fallback.format(**context)
        except KeyError:
            text = fallback

    html = render_template(html_raw, context) if html_raw is not None else f"<pre>{text}</pre>"
    return html, text


__all__ = [
    "load_template",
    "render_template",
    "render_email",
]

# Fin del archivo backend/app/shared/integrations/email_templates.py
