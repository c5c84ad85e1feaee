"""Normalizer de emails encaminhados — direção pelo email do dono."""

from .extractor import extract_email_event

__all__ = ["extract_email_event"]
