"""Endpoint de webhook do HubSpot (engagement.created de EMAIL).

Endpoints:
- POST /webhook/hubspot: evento único ou lote (lista) de eventos
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.connectors.webhook import parse_webhook_body
from api.normalizers.hubspot import extract_hubspot_events
from api.routes.dependencies import DeduplicatorDep, RecordInteractionsDep
from api.routes.webhook_runtime import (
    delivery_message_id,
    handle_webhook,
    process_delivery,
    skip_response,
    success_response,
)
from app.domain.events import EventSource
from app.services.delivery_dedupe import compute_delivery_key

logger = logging.getLogger(__name__)

router = APIRouter()

NO_EMAIL_DATA_MESSAGE = "No email data to process"


@router.post("", response_model=None)
async def receive_hubspot_webhook(
    request: Request,
    use_case: RecordInteractionsDep,
    deduplicator: DeduplicatorDep,
) -> JSONResponse:
    """Registra engagements de email do HubSpot como interações."""

    async def _handle(raw_body: bytes) -> JSONResponse:
        payload = parse_webhook_body(raw_body, allow_list=True)
        events = extract_hubspot_events(payload)
        if not events:
            return skip_response(NO_EMAIL_DATA_MESSAGE)

        async def _record() -> JSONResponse:
            result = await use_case.execute(events)
            logger.info(
                "hubspot_interactions_recorded",
                extra={"recorded": result.recorded, "contact_failures": result.contact_failures},
            )
            return success_response()

        key = compute_delivery_key(
            EventSource.HUBSPOT, delivery_message_id(events), raw_body=raw_body
        )
        return await process_delivery(deduplicator, key, _record)

    return await handle_webhook(request, source=EventSource.HUBSPOT, handler=_handle)
