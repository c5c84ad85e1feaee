"""Endpoint de webhook do WhatsApp (TimelinesAI).

Endpoints:
- POST /webhook/whatsapp: mensagem enviada/recebida em chat individual

Fluxo:
1. Parse do JSON e extração dos eventos (grupos e chats sem telefone são ignorados)
   Telefone com menos de 10 dígitos: 200 {"success": true}, sem gravação
2. Dedupe da entrega (message_uid ou hash do corpo)
3. Contato -> interação -> last_interaction, numa única transação
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.connectors.webhook import parse_webhook_body
from api.normalizers.whatsapp import extract_whatsapp_events
from api.routes.dependencies import DeduplicatorDep, RecordInteractionsDep
from api.routes.webhook_runtime import (
    delivery_message_id,
    handle_webhook,
    process_delivery,
    skip_response,
    success_response,
)
from app.domain.events import EventSource
from app.domain.formatting import is_valid_phone_number
from app.services.delivery_dedupe import compute_delivery_key

logger = logging.getLogger(__name__)

router = APIRouter()

NO_MESSAGES_MESSAGE = "No individual chat messages to process"


@router.post("", response_model=None)
async def receive_whatsapp_webhook(
    request: Request,
    use_case: RecordInteractionsDep,
    deduplicator: DeduplicatorDep,
) -> JSONResponse:
    """Registra mensagens de chats individuais como interações WhatsApp."""

    async def _handle(raw_body: bytes) -> JSONResponse:
        payload = parse_webhook_body(raw_body)
        events = extract_whatsapp_events(payload)
        if not events:
            return skip_response(NO_MESSAGES_MESSAGE)

        events = [event for event in events if is_valid_phone_number(event.identifier)]
        if not events:
            logger.info("whatsapp_event_skipped", extra={"reason": "invalid_phone"})
            return success_response()

        async def _record() -> JSONResponse:
            result = await use_case.execute(events)
            logger.info(
                "whatsapp_interactions_recorded",
                extra={"recorded": result.recorded, "contact_failures": result.contact_failures},
            )
            return success_response()

        key = compute_delivery_key(
            EventSource.WHATSAPP, delivery_message_id(events), raw_body=raw_body
        )
        return await process_delivery(deduplicator, key, _record)

    return await handle_webhook(request, source=EventSource.WHATSAPP, handler=_handle)
