"""Normalizer WhatsApp (TimelinesAI) — mensagens 1:1 viram InboundEvent."""

from .extractor import extract_whatsapp_events

__all__ = ["extract_whatsapp_events"]
