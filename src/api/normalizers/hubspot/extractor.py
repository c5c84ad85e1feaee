"""Extrator de eventos de email do HubSpot.

Estrutura de um evento:
    {"objectId": 123, "objectType": "EMAIL", "eventId": ..., "occurredAt": ...,
     "properties": {"hs_email_direction": "INBOUND", "subject": ..., "from": ...,
                    "to": ..., "from_name": ...}}

O HubSpot entrega lotes (lista de eventos); um objeto único também é aceito.
Eventos que não são de email ou sem email de contato são descartados;
um occurredAt inválido levanta InvalidPayloadError.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from app.domain.events import EventSource, InboundEvent
from app.domain.formatting import normalize_email, parse_datetime
from app.domain.models import Direction

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "No subject"


def extract_hubspot_event(event: Any) -> InboundEvent | None:
    """Extrai um evento; None quando deve ser ignorado."""
    if not isinstance(event, dict):
        return None
    if not event.get("objectId") or event.get("objectType") != "EMAIL":
        logger.info("hubspot_event_skipped", extra={"reason": "not_email_object"})
        return None

    properties = event.get("properties")
    if not isinstance(properties, dict):
        properties = {}

    to_email = normalize_email(properties.get("to"))
    from_email = normalize_email(properties.get("from"))
    # Prioriza o destinatário; remetente só se não houver destinatário
    contact_email = to_email or from_email
    if not contact_email:
        logger.info("hubspot_event_skipped", extra={"reason": "missing_contact_email"})
        return None

    direction = (
        Direction.INBOUND
        if properties.get("hs_email_direction") == "INBOUND"
        else Direction.OUTBOUND
    )
    event_id = event.get("eventId") or event.get("objectId")
    occurred_at = event.get("occurredAt")
    # Timestamp inválido derruba o lote inteiro antes de qualquer escrita
    if occurred_at:
        parse_datetime(occurred_at)

    return InboundEvent(
        source=EventSource.HUBSPOT,
        identifier=contact_email,
        identifier_kind="email",
        display_name=properties.get("from_name") or None,
        timestamp=occurred_at or datetime.now(UTC),
        direction=direction,
        text=properties.get("subject") or DEFAULT_SUBJECT,
        message_id=str(event_id),
    )


def extract_hubspot_events(payload: Any) -> list[InboundEvent]:
    """Extrai todos os eventos de email de um objeto ou lote."""
    raw_events = payload if isinstance(payload, list) else [payload]
    events: list[InboundEvent] = []
    for raw in raw_events:
        event = extract_hubspot_event(raw)
        if event is not None:
            events.append(event)
    return events
