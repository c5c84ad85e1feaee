"""Eventos normalizados produzidos pelos extractors de cada fonte."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal

from app.domain.models import Direction, InteractionType

IdentifierKind = Literal["phone", "email"]


class EventSource(StrEnum):
    WHATSAPP = "whatsapp"
    EMAIL = "email"
    HUBSPOT = "hubspot"
    CALENDAR = "calendar"


INTERACTION_TYPE_BY_SOURCE: dict[EventSource, InteractionType] = {
    EventSource.WHATSAPP: InteractionType.WHATSAPP,
    EventSource.EMAIL: InteractionType.EMAIL,
    EventSource.HUBSPOT: InteractionType.EMAIL,
    EventSource.CALENDAR: InteractionType.GOOGLE_MEET,
}


@dataclass(frozen=True, slots=True)
class InboundEvent:
    """Evento 1:1 com um contato externo (mensagem ou email).

    `timestamp` mantém o valor bruto da fonte; a conversão para data
    acontece no pipeline (format_timestamp).
    """

    source: EventSource
    identifier: str
    identifier_kind: IdentifierKind
    timestamp: Any
    direction: Direction
    text: str = ""
    display_name: str | None = None
    message_id: str | None = None

    @property
    def interaction_type(self) -> InteractionType:
        return INTERACTION_TYPE_BY_SOURCE[self.source]


@dataclass(frozen=True, slots=True)
class CalendarEvent:
    """Reunião com a lista de participantes já filtrada."""

    attendee_emails: tuple[str, ...]
    event_date: Any
    summary: str = "Untitled Meeting"
    description: str = ""
    event_id: str | None = None
