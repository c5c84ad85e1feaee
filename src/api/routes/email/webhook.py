"""Endpoint de webhook de emails encaminhados.

Endpoints:
- POST /webhook/email: um email por entrega (from/to/subject/date)

Email enviado pelo dono da caixa é Outbound e o contato vem de `to email`.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.connectors.webhook import parse_webhook_body
from api.normalizers.email import extract_email_event
from api.routes.dependencies import (
    DeduplicatorDep,
    RecordInteractionsDep,
    WebhookSettingsDep,
)
from api.routes.webhook_runtime import handle_webhook, process_delivery, success_response
from app.domain.events import EventSource
from app.services.delivery_dedupe import compute_delivery_key

logger = logging.getLogger(__name__)

router = APIRouter()

SUCCESS_MESSAGE = "Email interaction logged successfully"


@router.post("", response_model=None)
async def receive_email_webhook(
    request: Request,
    use_case: RecordInteractionsDep,
    deduplicator: DeduplicatorDep,
    settings: WebhookSettingsDep,
) -> JSONResponse:
    """Registra um email encaminhado como interação."""

    async def _handle(raw_body: bytes) -> JSONResponse:
        payload = parse_webhook_body(raw_body)
        event = extract_email_event(payload, settings)

        async def _record() -> JSONResponse:
            await use_case.execute([event])
            logger.info(
                "email_interaction_recorded",
                extra={"direction": str(event.direction)},
            )
            return success_response(message=SUCCESS_MESSAGE)

        key = compute_delivery_key(EventSource.EMAIL, event.message_id, raw_body=raw_body)
        return await process_delivery(deduplicator, key, _record)

    return await handle_webhook(request, source=EventSource.EMAIL, handler=_handle)
