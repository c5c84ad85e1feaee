"""Extrator de payloads de encaminhamento de email.

A automação envia as chaves com espaço no nome:
    {"from email": ..., "from name": ..., "to email": ..., "to name": ...,
     "subject": ..., "date": ...}

Extrator estrito: payload sem email de contato ou sem data válida
levanta InvalidPayloadError (resposta 500).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.domain.events import EventSource, InboundEvent
from app.domain.formatting import normalize_email, parse_datetime
from app.domain.models import Direction
from utils.errors import InvalidPayloadError

if TYPE_CHECKING:
    from config.settings import WebhookSettings

DEFAULT_SUBJECT = "No subject"


def extract_email_event(payload: Any, settings: WebhookSettings) -> InboundEvent:
    """Extrai o evento de email; direção definida pelo email do dono.

    `from email` igual ao OWNER_EMAIL -> Outbound, contato em `to email`.
    Caso contrário -> Inbound, contato em `from email`.

    Raises:
        InvalidPayloadError: Payload não-objeto, sem email de contato ou sem data.
    """
    if not isinstance(payload, dict):
        raise InvalidPayloadError("payload de email deve ser um objeto")

    if settings.is_owner(payload.get("from email")):
        direction = Direction.OUTBOUND
        contact_email = normalize_email(payload.get("to email"))
        contact_name = payload.get("to name")
    else:
        direction = Direction.INBOUND
        contact_email = normalize_email(payload.get("from email"))
        contact_name = payload.get("from name")

    if not contact_email:
        raise InvalidPayloadError("email de contato ausente")

    raw_date = payload.get("date")
    if not raw_date:
        raise InvalidPayloadError("campo date ausente")
    # Valida já no parse para falhar antes de abrir transação
    parse_datetime(raw_date)

    return InboundEvent(
        source=EventSource.EMAIL,
        identifier=contact_email,
        identifier_kind="email",
        display_name=contact_name or None,
        timestamp=raw_date,
        direction=direction,
        text=payload.get("subject") or DEFAULT_SUBJECT,
        message_id=payload.get("message_id") or payload.get("message id") or None,
    )
