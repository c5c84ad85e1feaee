"""Extrator de payloads do relay de WhatsApp (TimelinesAI).

Estrutura esperada:
    {
        "chat": {"phone": "+1 555...", "full_name": "...", "is_group": false},
        "message": {"timestamp": "...", "direction": "sent|received",
                    "text": "...", "message_uid": "..."}
    }

Grupos e chats sem telefone não geram eventos (lista vazia, não é erro).
Telefones curtos demais são filtrados no endpoint, que responde sucesso
sem gravar nada.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from app.domain.events import EventSource, InboundEvent
from app.domain.models import Direction

logger = logging.getLogger(__name__)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _direction(raw: Any) -> Direction:
    return Direction.OUTBOUND if raw == "sent" else Direction.INBOUND


def extract_whatsapp_events(payload: dict[str, Any]) -> list[InboundEvent]:
    """Extrai eventos de mensagem 1:1 do payload.

    Returns:
        Lista com zero ou um InboundEvent.
    """
    chat = _as_dict(payload.get("chat"))
    phone = chat.get("phone")

    if chat.get("is_group") or not phone:
        logger.info(
            "whatsapp_event_skipped",
            extra={"reason": "group_chat" if chat.get("is_group") else "missing_phone"},
        )
        return []

    message = payload.get("message")
    if not isinstance(message, dict):
        logger.info("whatsapp_event_skipped", extra={"reason": "missing_message"})
        return []

    message_uid = message.get("message_uid")
    return [
        InboundEvent(
            source=EventSource.WHATSAPP,
            identifier=str(phone),
            identifier_kind="phone",
            display_name=chat.get("full_name") or None,
            timestamp=message.get("timestamp") or datetime.now(UTC),
            direction=_direction(message.get("direction")),
            text=str(message.get("text") or ""),
            message_id=str(message_uid) if message_uid else None,
        )
    ]
