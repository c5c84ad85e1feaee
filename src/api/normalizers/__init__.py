"""Normalizers por fonte — conversão de payloads externos para eventos internos.

Estrutura:
- whatsapp/: relay TimelinesAI (mensagens 1:1)
- email/: automação de encaminhamento de email
- hubspot/: eventos de engagement de email do HubSpot
- calendar/: reuniões com lista de participantes

Cada fonte tem seu próprio extractor e política de descarte.
"""

from .calendar import extract_calendar_event
from .email import extract_email_event
from .hubspot import extract_hubspot_events
from .whatsapp import extract_whatsapp_events

__all__ = [
    "extract_calendar_event",
    "extract_email_event",
    "extract_hubspot_events",
    "extract_whatsapp_events",
]
