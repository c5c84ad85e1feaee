"""Normalizer de calendário — reunião e participantes."""

from .extractor import extract_calendar_event, parse_attendee_emails

__all__ = ["extract_calendar_event", "parse_attendee_emails"]
