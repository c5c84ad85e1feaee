"""Endpoint de webhook de calendário.

Endpoints:
- POST /webhook/calendar: reunião com lista de participantes

Cada participante (menos os excluídos) vira contato; a reunião e os
vínculos reunião-contato são gravados na mesma transação.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.connectors.webhook import parse_webhook_body
from api.normalizers.calendar import extract_calendar_event
from api.routes.dependencies import DeduplicatorDep, RecordMeetingDep, WebhookSettingsDep
from api.routes.webhook_runtime import handle_webhook, process_delivery, success_response
from app.domain.events import EventSource
from app.services.delivery_dedupe import compute_delivery_key

logger = logging.getLogger(__name__)

router = APIRouter()

SUCCESS_MESSAGE = "Calendar event processed successfully"


@router.post("", response_model=None)
async def receive_calendar_webhook(
    request: Request,
    use_case: RecordMeetingDep,
    deduplicator: DeduplicatorDep,
    settings: WebhookSettingsDep,
) -> JSONResponse:
    """Registra uma reunião e vincula os participantes."""

    async def _handle(raw_body: bytes) -> JSONResponse:
        payload = parse_webhook_body(raw_body)
        event = extract_calendar_event(payload, settings.calendar_excluded_emails)

        async def _record() -> JSONResponse:
            result = await use_case.execute(event)
            return success_response(
                message=SUCCESS_MESSAGE,
                meeting_id=result.meeting_id,
                contacts_processed=result.contacts_processed,
            )

        key = compute_delivery_key(EventSource.CALENDAR, event.event_id, raw_body=raw_body)
        return await process_delivery(deduplicator, key, _record)

    return await handle_webhook(request, source=EventSource.CALENDAR, handler=_handle)
