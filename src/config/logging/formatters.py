"""Formatter JSON (python-json-logger) com os campos obrigatórios do serviço."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pythonjsonlogger.json import JsonFormatter

REQUIRED_LOG_FIELDS = frozenset(
    {
        "asctime",
        "levelname",
        "name",
        "message",
        "correlation_id",
        "service",
    }
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def _json_default(value: Any) -> Any:
    # datas de interação e enums de direção/tipo aparecem em `extra`
    if isinstance(value, datetime | date):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, frozenset | set | tuple):
        return list(value)
    return str(value)


def create_json_formatter() -> JsonFormatter:
    """Formatter com campos renomeados (`level`, `logger`).

    Exemplo de output:
        {"asctime": "2024-01-15 10:30:00,123", "level": "INFO",
         "logger": "app.use_cases.record_interactions",
         "message": "whatsapp_interactions_recorded", "correlation_id": "abc-123",
         "service": "crm_relay", "recorded": 1}
    """
    return JsonFormatter(
        " ".join(f"%({field})s" for field in sorted(REQUIRED_LOG_FIELDS)),
        rename_fields=FIELD_RENAME_MAP,
        json_default=_json_default,
    )
