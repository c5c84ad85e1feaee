"""Normalizer HubSpot — eventos de engagement de email."""

from .extractor import extract_hubspot_event, extract_hubspot_events

__all__ = ["extract_hubspot_event", "extract_hubspot_events"]
