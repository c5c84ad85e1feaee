"""Extrator de eventos de calendário.

Estrutura esperada:
    {"attendee_emails": "a@x.com, b@y.com" | ["a@x.com", ...],
     "event_date": "2024-03-01T10:00:00-03:00", "summary": ..., "description": ...,
     "event_id": ...}
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.domain.events import CalendarEvent
from app.domain.formatting import format_calendar_date
from utils.errors import InvalidPayloadError

if TYPE_CHECKING:
    from collections.abc import Iterable

DEFAULT_SUMMARY = "Untitled Meeting"


def parse_attendee_emails(raw: Any, excluded: Iterable[str] = ()) -> tuple[str, ...]:
    """Normaliza a lista de participantes.

    Aceita string separada por vírgula ou lista. Remove vazios e os
    endereços excluídos (comparação sem diferenciar maiúsculas).
    """
    if not raw:
        return ()
    items = raw.split(",") if isinstance(raw, str) else raw
    if not isinstance(items, list | tuple):
        raise InvalidPayloadError("attendee_emails deve ser string ou lista")

    excluded_lower = {e.lower() for e in excluded}
    emails: list[str] = []
    for item in items:
        email = str(item).strip() if item is not None else ""
        if email and email.lower() not in excluded_lower:
            emails.append(email)
    return tuple(emails)


def extract_calendar_event(payload: Any, excluded_emails: Iterable[str] = ()) -> CalendarEvent:
    """Extrai a reunião do payload.

    Raises:
        InvalidPayloadError: Payload não-objeto ou sem event_date válido.
    """
    if not isinstance(payload, dict):
        raise InvalidPayloadError("payload de calendário deve ser um objeto")

    event_date = payload.get("event_date")
    if not event_date:
        raise InvalidPayloadError("campo event_date ausente")
    format_calendar_date(event_date)

    event_id = payload.get("event_id")
    return CalendarEvent(
        attendee_emails=parse_attendee_emails(payload.get("attendee_emails"), excluded_emails),
        event_date=event_date,
        summary=payload.get("summary") or DEFAULT_SUMMARY,
        description=payload.get("description") or "",
        event_id=str(event_id) if event_id else None,
    )
