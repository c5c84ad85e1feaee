"""Parse inicial do corpo de webhook (sem PII nos erros)."""

from __future__ import annotations

import json
from typing import Any


class WebhookRequestError(ValueError):
    """Erro base para falhas de webhook."""


class InvalidJsonError(WebhookRequestError):
    """JSON inválido no payload do webhook."""


def parse_webhook_body(raw_body: bytes, *, allow_list: bool = False) -> Any:
    """Parseia o JSON do webhook.

    Args:
        raw_body: Corpo bruto do request
        allow_list: Aceita lote (lista de objetos) além de objeto único

    Raises:
        InvalidJsonError: Se o JSON estiver inválido ou não for objeto/lista

    Returns:
        dict (ou list quando allow_list)
    """
    try:
        payload = json.loads(raw_body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJsonError(f"invalid_json: {exc}") from exc

    if isinstance(payload, dict):
        return payload
    if allow_list and isinstance(payload, list):
        return payload
    raise InvalidJsonError("payload_not_object")
